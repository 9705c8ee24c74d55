"""
All configuration flags, options, settings to fine-tune the provider.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Unlike the provider's config file (see :mod:`files`), which tells *where*
the clusters are, the settings tell *how* to talk to them and *what* to report
to the host orchestrator. All settings have reasonable defaults, and can be
changed programmatically before the provider is created.
"""
import dataclasses
from typing import Optional


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the whole request to the API: from connecting to reading.
    If ``None``, the requests last as long as the host orchestrator waits.

    The host's own cancellation (of the calling task) aborts the requests
    regardless of this timeout.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for connecting to the API (both TCP & SSL handshakes).
    If ``None``, it is limited only by the whole request's timeout.
    """


@dataclasses.dataclass
class NodeSettings:
    """
    Static values reported for the virtual node.

    These are not measurements: the remote cluster's actual load
    and capacity are never taken into account.
    """

    cpu: str = '100'
    """ The node's CPU capacity, as a Kubernetes quantity. """

    memory: str = '50Gi'
    """ The node's memory capacity, as a Kubernetes quantity. """

    pods: str = '100'
    """ The maximum number of pods the host may schedule on the node. """

    condition_reason: str = 'RemoteClusterReady'
    """ The reason reported in all the node's conditions. """

    condition_message: str = 'ok'
    """ The message reported in all the node's conditions. """


@dataclasses.dataclass
class ProviderSettings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    node: NodeSettings = dataclasses.field(default_factory=NodeSettings)
