"""
All the structures coming from/to the Kubernetes API.

The pods, statuses and node-level reports are plain dicts, exactly as they are
JSON-decoded from (or JSON-encoded to) the Kubernetes API of either cluster.
There are no wrapper classes: the host orchestrator and both clusters speak
the same language, so the adapter only narrows and relays the dicts.

For strict type-checking, they are detailed to the per-field level
(``TypedDict`` instead of just ``Mapping[Any, Any]``) -- as used by the adapter.
All other fields are allowed at runtime, but are not declared here.
"""
from typing import Any, List, Mapping

from typing_extensions import Literal, TypedDict

Labels = Mapping[str, str]
Annotations = Mapping[str, str]

ConditionStatus = Literal['True', 'False', 'Unknown']
PodPhase = Literal['Pending', 'Running', 'Succeeded', 'Failed', 'Unknown']


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Labels
    annotations: Annotations
    resourceVersion: str
    creationTimestamp: str
    deletionTimestamp: str


class RawContainer(TypedDict, total=False):
    name: str
    image: str
    command: List[str]
    args: List[str]
    resources: Mapping[str, Any]
    ports: List[Mapping[str, Any]]
    env: List[Mapping[str, Any]]
    workingDir: str


class RawPodSpec(TypedDict, total=False):
    containers: List[RawContainer]
    volumes: List[Mapping[str, Any]]
    restartPolicy: Literal['Always', 'OnFailure', 'Never']
    nodeName: str


class RawPodStatus(TypedDict, total=False):
    phase: PodPhase
    reason: str
    message: str
    podIP: str
    startTime: str
    conditions: List[Mapping[str, Any]]
    containerStatuses: List[Mapping[str, Any]]


class RawPod(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: RawPodSpec
    status: RawPodStatus


# https://kubernetes.io/docs/reference/kubernetes-api/common-definitions/delete-options/
class RawDeleteOptions(TypedDict, total=False):
    gracePeriodSeconds: int
    propagationPolicy: Literal['Orphan', 'Background', 'Foreground']
    dryRun: List[str]
    preconditions: Mapping[str, str]


class RawSecret(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    type: str
    data: Mapping[str, str]
    stringData: Mapping[str, str]


#
# Node-level reports. They are never stored in either cluster by the adapter,
# but are returned to the host orchestrator, which puts them into its Node object.
#

ResourceList = Mapping[str, str]  # e.g. {'cpu': '100', 'memory': '50Gi'}


class RawNodeCondition(TypedDict, total=True):
    type: str
    status: ConditionStatus
    lastHeartbeatTime: str
    lastTransitionTime: str
    reason: str
    message: str


class RawNodeAddress(TypedDict, total=True):
    type: Literal['Hostname', 'ExternalIP', 'InternalIP', 'ExternalDNS', 'InternalDNS']
    address: str


class RawDaemonEndpoint(TypedDict, total=True):
    Port: int


class RawNodeDaemonEndpoints(TypedDict, total=True):
    kubeletEndpoint: RawDaemonEndpoint


class RawNodeSystemInfo(TypedDict, total=False):
    operatingSystem: str
    architecture: str
    kubeletVersion: str


class RawNodeStatus(TypedDict, total=False):
    capacity: ResourceList
    allocatable: ResourceList
    conditions: List[RawNodeCondition]
    addresses: List[RawNodeAddress]
    daemonEndpoints: RawNodeDaemonEndpoints
    nodeInfo: RawNodeSystemInfo
