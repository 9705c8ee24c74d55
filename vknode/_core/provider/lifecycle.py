"""
The provider of the virtual node, backed by a remote cluster.

The host orchestrator schedules the pods onto the virtual node as if it were
a real node. The provider relays every pod's lifecycle call to the remote
cluster's API, and reports the static node status back to the host.

There is no state in the provider except for its immutable configuration
and the two API contexts (cluster client handles). Every call is independent
and is keyed by the pod's namespace & name; the remote cluster is the only
source of truth. Concurrent calls for the same pod are not serialized:
they race at the remote API's own consistency layer (resource versions).

There are no retries: if a call fails, the error is returned to the host,
whose own reconciliation loop re-invokes the failed operations later.
"""
import io
import logging
from types import TracebackType
from typing import BinaryIO, List, Optional, Sequence, Type

from vknode._cogs.clients import auth, errors, pods
from vknode._cogs.configs import configuration
from vknode._cogs.structs import bodies, errdefs
from vknode._core.engines import loggers
from vknode._core.provider import contract, nodestatus, translation

logger = logging.getLogger(__name__)

LOGS_PLACEHOLDER = b"Container logs are not supported by the remote cluster provider.\n"


class PodProvider:
    """
    The node-virtualization contract implemented on top of a remote cluster.

    Both API contexts are injected at construction and are owned
    by the provider afterwards: they are closed when the provider is closed.
    """

    def __init__(
            self,
            *,
            local: auth.APIContext,
            remote: auth.APIContext,
            node_name: str,
            operating_system: str,
            internal_ip: str,
            daemon_port: int,
            settings: Optional[configuration.ProviderSettings] = None,
    ) -> None:
        super().__init__()
        self.local = local
        self.remote = remote
        self.node_name = node_name
        self.settings = settings if settings is not None else configuration.ProviderSettings()
        self._operating_system = operating_system
        self._internal_ip = internal_ip
        self._daemon_port = daemon_port

    def __repr__(self) -> str:
        return (f'<{self.__class__.__name__} node={self.node_name!r} '
                f'local={self.local.server!r} remote={self.remote.server!r}>')

    async def __aenter__(self) -> "PodProvider":
        return self

    async def __aexit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc_val: Optional[BaseException],
            exc_tb: Optional[TracebackType],
    ) -> None:
        await self.close()

    async def close(self) -> None:
        await self.local.close()
        await self.remote.close()

    #
    # Pod lifecycle: relayed to the remote cluster.
    #

    async def create_pod(self, pod: bodies.RawPod) -> None:
        """
        Create the pod in the remote cluster, unless it already exists there.

        Repeated calls for the same pod do not produce new remote pods:
        the existing one is detected by the translation, and left as is.
        """
        logger = loggers.ObjectLogger(body=pod)
        logger.debug("Received a request to create the pod.")
        remote_pod = await translation.translate_to_remote_pod(
            pod,
            context=self.remote,
            settings=self.settings,
            logger=logger,
        )

        if translation.is_persisted(remote_pod):
            if not translation.is_owned(remote_pod):
                logger.warning("The remote pod exists but is not owned by the provider.")
            logger.info("The remote pod already exists; nothing to create.")
            return

        try:
            await pods.create_pod(
                context=self.remote,
                settings=self.settings,
                body=remote_pod,
                logger=logger,
            )
        except errors.APIConflictError as e:
            # Created concurrently after the existence check (e.g. by a parallel call).
            if not e.already_exists:
                raise
            logger.info("The remote pod was created concurrently; nothing to create.")
        else:
            logger.info("The remote pod is created.")

    async def update_pod(self, pod: bodies.RawPod) -> None:
        """
        Replace the remote pod with its translation (no diffing, no patching).

        If the remote pod is absent, the update fails with the API's 404 error.
        """
        logger = loggers.ObjectLogger(body=pod)
        logger.debug("Received a request to update the pod.")
        remote_pod = await translation.translate_to_remote_pod(
            pod,
            context=self.remote,
            settings=self.settings,
            logger=logger,
        )
        await pods.replace_pod(
            context=self.remote,
            settings=self.settings,
            body=remote_pod,
            logger=logger,
        )
        logger.info("The remote pod is updated.")

    async def delete_pod(
            self,
            namespace: str,
            name: str,
            *,
            options: Optional[bodies.RawDeleteOptions] = None,
    ) -> None:
        logger = loggers.ObjectLogger(namespace=namespace, name=name)
        logger.debug("Received a request to delete the pod.")
        await pods.delete_pod(
            context=self.remote,
            settings=self.settings,
            namespace=namespace,
            name=name,
            options=options,
            logger=logger,
        )
        logger.info("The remote pod is deleted.")

    async def get_pod(self, namespace: str, name: str) -> bodies.RawPod:
        """
        Get the remote pod, or fail with :class:`NotFoundError` if it is absent.
        """
        logger = loggers.ObjectLogger(namespace=namespace, name=name)
        logger.debug("Received a request to get the pod.")
        try:
            return await pods.read_pod(
                context=self.remote,
                settings=self.settings,
                namespace=namespace,
                name=name,
                logger=logger,
            )
        except errors.APINotFoundError as e:
            raise errdefs.NotFoundError(f"Pod {namespace}/{name} is not found.",
                                        namespace=namespace, name=name) from e

    async def get_pod_status(self, namespace: str, name: str) -> bodies.RawPodStatus:
        """
        Get the remote pod's status, or the "Unknown" phase if the pod is absent.

        Unlike :meth:`get_pod`, the absence is not an error here: the host asks
        for the status of the pods which it believes to exist on the node.
        """
        logger = loggers.ObjectLogger(namespace=namespace, name=name)
        logger.debug("Received a request to get the pod's status.")
        try:
            pod = await pods.read_pod(
                context=self.remote,
                settings=self.settings,
                namespace=namespace,
                name=name,
                logger=logger,
            )
        except errors.APINotFoundError:
            logger.debug("The remote pod is absent; reporting its status as unknown.")
            return {'phase': 'Unknown'}
        else:
            return pod.get('status') or {}

    async def get_pods(self) -> List[bodies.RawPod]:
        """
        List all the remote pods created by the provider, in all namespaces.

        The foreign pods of the remote cluster are never exposed to the host.
        """
        logger.debug("Received a request to list the pods.")
        items = await pods.list_pods(
            context=self.remote,
            settings=self.settings,
            namespace=None,
            label_selector=translation.REMOTE_POD_SELECTOR,
            logger=logger,
        )
        result = [item for item in items if translation.is_owned(item)]
        logger.debug(f"Responding with {len(result)} pods.")
        return result

    async def get_container_logs(
            self,
            namespace: str,
            pod_name: str,
            container_name: str,
            opts: Optional[contract.ContainerLogOpts] = None,
    ) -> BinaryIO:
        return io.BytesIO(LOGS_PLACEHOLDER)

    async def run_in_container(
            self,
            namespace: str,
            pod_name: str,
            container_name: str,
            cmd: Sequence[str],
            attach: Optional[contract.AttachIO] = None,
    ) -> None:
        raise errdefs.NotImplementedByProviderError(
            "Running in containers is not implemented by the remote cluster provider.")

    #
    # Node status: static and local, no remote calls.
    #

    def capacity(self) -> bodies.ResourceList:
        return nodestatus.capacity(self.settings)

    def node_conditions(self) -> List[bodies.RawNodeCondition]:
        return nodestatus.node_conditions(self.settings)

    def node_addresses(self) -> List[bodies.RawNodeAddress]:
        return nodestatus.node_addresses(self._internal_ip)

    def node_daemon_endpoints(self) -> bodies.RawNodeDaemonEndpoints:
        return nodestatus.node_daemon_endpoints(self._daemon_port)

    def operating_system(self) -> str:
        return self._operating_system

    def node_status(self) -> bodies.RawNodeStatus:
        return nodestatus.node_status(
            self.settings,
            internal_ip=self._internal_ip,
            daemon_port=self._daemon_port,
            operating_system=self._operating_system,
        )
