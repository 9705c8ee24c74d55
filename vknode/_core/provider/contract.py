"""
The node-virtualization contract: what the host orchestrator calls.

The host orchestrator (its virtual-node agent) treats the provider as a node:
it relays the lifecycle of the pods scheduled onto that node, and polls
the node's status to report it in the node object.

The pod lifecycle methods are coroutines: they talk to the remote cluster.
The node status methods are plain functions: they are static and local.
"""
from typing import BinaryIO, List, Optional, Sequence

from typing_extensions import Protocol

from vknode._cogs.structs import bodies


class ContainerLogOpts(Protocol):
    tail: Optional[int]
    since_seconds: Optional[int]
    timestamps: bool
    follow: bool


class AttachIO(Protocol):
    stdin: Optional[BinaryIO]
    stdout: Optional[BinaryIO]
    stderr: Optional[BinaryIO]
    tty: bool


class Provider(Protocol):

    async def create_pod(self, pod: bodies.RawPod) -> None: ...

    async def update_pod(self, pod: bodies.RawPod) -> None: ...

    async def delete_pod(
            self,
            namespace: str,
            name: str,
            *,
            options: Optional[bodies.RawDeleteOptions] = None,
    ) -> None: ...

    async def get_pod(self, namespace: str, name: str) -> bodies.RawPod: ...

    async def get_pod_status(self, namespace: str, name: str) -> bodies.RawPodStatus: ...

    async def get_pods(self) -> List[bodies.RawPod]: ...

    async def get_container_logs(
            self,
            namespace: str,
            pod_name: str,
            container_name: str,
            opts: Optional[ContainerLogOpts] = None,
    ) -> BinaryIO: ...

    async def run_in_container(
            self,
            namespace: str,
            pod_name: str,
            container_name: str,
            cmd: Sequence[str],
            attach: Optional[AttachIO] = None,
    ) -> None: ...

    def capacity(self) -> bodies.ResourceList: ...

    def node_conditions(self) -> List[bodies.RawNodeCondition]: ...

    def node_addresses(self) -> List[bodies.RawNodeAddress]: ...

    def node_daemon_endpoints(self) -> bodies.RawNodeDaemonEndpoints: ...

    def operating_system(self) -> str: ...

    def node_status(self) -> bodies.RawNodeStatus: ...

    async def close(self) -> None: ...