"""
Error kinds as seen by the host orchestrator.

Unlike the low-level API errors (see :mod:`vknode._cogs.clients.errors`),
which are relayed to the host as is, these errors carry a meaning that the host
can react to: e.g. a missing pod is re-created, an unsupported capability is
reported to the user instead of being retried.
"""
from typing import Optional


class ProviderError(Exception):
    """ A base class for all the semantic errors of the provider. """


class ConfigurationError(ProviderError):
    """
    Raised when the provider cannot be configured or cannot connect.

    Fatal at startup: the provider cannot serve anything without both clients.
    However, it is only raised, and it is the caller's decision what to do next.
    """


class NotFoundError(ProviderError):
    """ Raised when a pod does not exist in the remote cluster. """

    def __init__(self, message: str, *, namespace: Optional[str], name: Optional[str]) -> None:
        super().__init__(message)
        self.namespace = namespace
        self.name = name


class NotImplementedByProviderError(ProviderError, NotImplementedError):
    """ Raised for the capabilities which the provider intentionally does not support. """
