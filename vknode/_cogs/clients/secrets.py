"""
Plain CRUD wrappers for secrets, usable against either cluster.

There is no adapter-specific logic here: the calls go to the API as they are.
"""
from typing import Optional

from vknode._cogs.clients import api, auth
from vknode._cogs.configs import configuration
from vknode._cogs.helpers import typedefs
from vknode._cogs.structs import bodies, references


async def read_secret(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        namespace: str,
        name: str,
        logger: typedefs.Logger,
) -> bodies.RawSecret:
    secret: bodies.RawSecret = await api.get(
        url=references.SECRETS.get_url(namespace=namespace, name=name),
        context=context,
        settings=settings,
        logger=logger,
    )
    return secret


async def create_secret(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        namespace: str,
        body: bodies.RawSecret,
        logger: typedefs.Logger,
) -> bodies.RawSecret:
    secret: bodies.RawSecret = await api.post(
        url=references.SECRETS.get_url(namespace=namespace),
        payload=body,
        context=context,
        settings=settings,
        logger=logger,
    )
    return secret


async def replace_secret(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        namespace: str,
        body: bodies.RawSecret,
        logger: typedefs.Logger,
) -> bodies.RawSecret:
    name = body.get('metadata', {}).get('name')
    if not name:
        raise ValueError("The secret's name must be specified for replacement.")
    secret: bodies.RawSecret = await api.put(
        url=references.SECRETS.get_url(namespace=namespace, name=name),
        payload=body,
        context=context,
        settings=settings,
        logger=logger,
    )
    return secret


async def delete_secret(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        namespace: str,
        name: str,
        options: Optional[bodies.RawDeleteOptions] = None,
        logger: typedefs.Logger,
) -> None:
    payload = dict(options, kind='DeleteOptions', apiVersion='v1') if options else None
    await api.delete(
        url=references.SECRETS.get_url(namespace=namespace, name=name),
        payload=payload,
        context=context,
        settings=settings,
        logger=logger,
    )
