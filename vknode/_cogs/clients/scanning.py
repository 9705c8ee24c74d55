from typing import Mapping

from vknode._cogs.clients import api, auth
from vknode._cogs.configs import configuration
from vknode._cogs.helpers import typedefs


async def read_version(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        logger: typedefs.Logger,
) -> Mapping[str, str]:
    """
    Read the cluster's version info -- as a cheap check of the connectivity & credentials.
    """
    rsp: Mapping[str, str] = await api.get('/version', context=context, settings=settings, logger=logger)
    return rsp
