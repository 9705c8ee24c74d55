"""
Startup of the provider: from the config file to the ready-to-use provider.

The cluster client handles (API contexts) are created here exactly once,
before any of the provider's methods can be called, and are then injected
into the provider. Any failure is raised as :class:`ConfigurationError`;
it is the caller's decision whether to retry, degrade, or abort.
"""
import dataclasses
import logging
from typing import Optional

from vknode._cogs.clients import auth
from vknode._cogs.configs import configuration, files
from vknode._cogs.structs import credentials, errdefs
from vknode._core.intents import piggybacking
from vknode._core.provider import lifecycle

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class InitConfig:
    """ Everything the host's virtual-node agent knows about the node at startup. """
    config_path: str
    node_name: str
    operating_system: str = 'Linux'
    internal_ip: str = '127.0.0.1'
    daemon_port: int = 10250
    config_type: piggybacking.ConfigType = piggybacking.ConfigType.OUT_OF_CLUSTER
    settings: Optional[configuration.ProviderSettings] = None


def make_context(
        config_type: piggybacking.ConfigType,
        kubeconfig: Optional[str],
        *,
        role: str,
) -> auth.APIContext:
    info = piggybacking.login(config_type, kubeconfig)
    try:
        context = auth.APIContext(info)
    except (credentials.LoginError, OSError, ValueError) as e:
        raise errdefs.ConfigurationError(f"Cannot create the {role} cluster's client: {e}") from e
    logger.debug(f"The {role} cluster's client is created for {context.server!r}.")
    return context


async def create_provider(cfg: InitConfig) -> lifecycle.PodProvider:
    """
    Create the provider with both clients logged in, or fail trying.

    It must be called from inside of the event loop where the provider will
    be used: the clients' sessions are bound to that loop.
    """
    logger.info(f"Creating the provider for the node {cfg.node_name!r}.")
    config = files.load_config(cfg.config_path)

    remote = make_context(cfg.config_type, config.remote_kubeconfig, role='remote')
    try:
        local = make_context(cfg.config_type, config.local_kubeconfig, role='local')
    except errdefs.ConfigurationError:
        await remote.close()
        raise

    provider = lifecycle.PodProvider(
        local=local,
        remote=remote,
        node_name=cfg.node_name,
        operating_system=cfg.operating_system,
        internal_ip=cfg.internal_ip,
        daemon_port=cfg.daemon_port,
        settings=cfg.settings,
    )
    logger.info(f"Created the provider: {provider!r}")
    return provider
