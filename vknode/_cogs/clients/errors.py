"""
K8s API errors of either cluster.

The underlying client library (now, ``aiohttp``) can be replaced in the future,
so its exceptions are not leaked to the provider's callers. Instead, there is
our own hierarchy of exceptions for K8s API errors, with the client library's
original errors chained as their causes (for better stack traces).

Low-level errors, such as the network connectivity issues, SSL/HTTPS issues,
timeouts, etc, are escalated from the client library as is, since they are
related not to the domain of K8s API, but rather to networking and encryption.

Some selected HTTP statuses are made into their own classes, so that they
could be intercepted where the provider gives them a meaning: e.g. 404 becomes
a "not found" for the host orchestrator, or an "absent" in the translation.
All other statuses are raised as the base class and are relayed to the host
orchestrator as is.

Unlike the client library's errors, these errors carry the information
provided by K8s API in its ``Status`` response bodies (code, reason, message),
not only guessed from the HTTP statuses alone.
"""
import collections.abc
import json
from typing import Collection, Optional

import aiohttp
from typing_extensions import Literal, TypedDict


class RawStatusCause(TypedDict):
    field: str
    reason: str
    message: str


class RawStatusDetails(TypedDict):
    name: str
    uid: str
    retryAfterSeconds: int
    kind: str
    group: str
    causes: Collection[RawStatusCause]


# https://kubernetes.io/docs/reference/kubernetes-api/common-definitions/status/
class RawStatus(TypedDict):
    apiVersion: str
    kind: Literal["Status"]
    code: int
    status: Literal["Success", "Failure"]
    reason: str
    message: str
    details: RawStatusDetails


class APIError(Exception):

    def __init__(
            self,
            payload: Optional[RawStatus],
            *,
            status: int,
    ) -> None:
        message = payload.get('message') if payload else None
        super().__init__(message or f"HTTP {status}")
        self._status = status
        self._payload = payload

    @property
    def status(self) -> int:
        return self._status

    @property
    def code(self) -> Optional[int]:
        return self._payload.get('code') if self._payload else None

    @property
    def reason(self) -> Optional[str]:
        """ A machine-readable reason, e.g. ``"AlreadyExists"``, ``"Conflict"``. """
        return self._payload.get('reason') if self._payload else None

    @property
    def message(self) -> Optional[str]:
        return self._payload.get('message') if self._payload else None

    @property
    def details(self) -> Optional[RawStatusDetails]:
        return self._payload.get('details') if self._payload else None


class APIUnauthorizedError(APIError):
    pass


class APIForbiddenError(APIError):
    pass


class APINotFoundError(APIError):
    pass


class APIConflictError(APIError):
    """
    Either an object already exists (on creation), or its version is outdated.

    Distinguishable by :attr:`reason`: ``"AlreadyExists"`` vs. ``"Conflict"``.
    """

    @property
    def already_exists(self) -> bool:
        return self.reason == 'AlreadyExists'


async def check_response(
        response: aiohttp.ClientResponse,
) -> None:
    """
    Check for specialised K8s errors, and raise with extended information.
    """
    if response.status >= 400:

        # Read the response's body before it is closed by raise_for_status().
        payload: Optional[RawStatus]
        try:
            payload = await response.json()
        except (json.JSONDecodeError, aiohttp.ContentTypeError, aiohttp.ClientConnectionError):
            payload = None

        # Only K8s statuses are kept: arbitrary bodies can contain sensitive information.
        if not isinstance(payload, collections.abc.Mapping) or payload.get('kind') != 'Status':
            payload = None

        cls = (
            APIUnauthorizedError if response.status == 401 else
            APIForbiddenError if response.status == 403 else
            APINotFoundError if response.status == 404 else
            APIConflictError if response.status == 409 else
            APIError
        )

        # Raise our own error while keeping the original error in scope.
        # This call also closes the response's body, so it cannot be read afterwards.
        try:
            response.raise_for_status()
        except aiohttp.ClientResponseError as e:
            raise cls(payload, status=response.status) from e