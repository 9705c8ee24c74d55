"""
Static node-level status of the virtual node.

Nothing here reflects the actual state of the remote cluster: the capacity
is a static ceiling, and the conditions are always healthy. The timestamps
are fresh on every call, since the host polls the conditions regularly
and treats stale heartbeats as a dead node.
"""
import datetime
from typing import List, Optional, Tuple

from vknode._cogs.configs import configuration
from vknode._cogs.structs import bodies

# Condition types, as known to Kubernetes, and their healthy statuses.
NODE_CONDITIONS: List[Tuple[str, bodies.ConditionStatus]] = [
    ('Ready', 'True'),
    ('OutOfDisk', 'False'),
    ('MemoryPressure', 'False'),
    ('DiskPressure', 'False'),
    ('NetworkUnavailable', 'False'),
    ('KubeletConfigOk', 'True'),
]


def now() -> str:
    # Kubernetes' metav1.Time is serialized with the seconds' precision.
    return datetime.datetime.now(datetime.timezone.utc).strftime('%Y-%m-%dT%H:%M:%SZ')


def capacity(settings: configuration.ProviderSettings) -> bodies.ResourceList:
    return {
        'cpu': settings.node.cpu,
        'memory': settings.node.memory,
        'pods': settings.node.pods,
    }


def node_conditions(
        settings: configuration.ProviderSettings,
        *,
        timestamp: Optional[str] = None,
) -> List[bodies.RawNodeCondition]:
    timestamp = timestamp if timestamp is not None else now()
    return [
        {
            'type': type_,
            'status': status,
            'lastHeartbeatTime': timestamp,
            'lastTransitionTime': timestamp,
            'reason': settings.node.condition_reason,
            'message': settings.node.condition_message,
        }
        for type_, status in NODE_CONDITIONS
    ]


def node_addresses(internal_ip: str) -> List[bodies.RawNodeAddress]:
    return [{'type': 'InternalIP', 'address': internal_ip}]


def node_daemon_endpoints(daemon_port: int) -> bodies.RawNodeDaemonEndpoints:
    return {'kubeletEndpoint': {'Port': daemon_port}}


def node_status(
        settings: configuration.ProviderSettings,
        *,
        internal_ip: str,
        daemon_port: int,
        operating_system: str,
) -> bodies.RawNodeStatus:
    """
    Assemble the whole status of the node object, as the host would store it.
    """
    return {
        'capacity': capacity(settings),
        'allocatable': capacity(settings),
        'conditions': node_conditions(settings),
        'addresses': node_addresses(internal_ip),
        'daemonEndpoints': node_daemon_endpoints(daemon_port),
        'nodeInfo': {'operatingSystem': operating_system},
    }
