"""
Pod-specific API calls, used against the remote cluster.

These are thin adapters: no translation, no interpretation of the errors.
Every function talks to the cluster given by its explicit ``context``.
"""
from typing import List, Optional

from vknode._cogs.clients import api, auth
from vknode._cogs.configs import configuration
from vknode._cogs.helpers import typedefs
from vknode._cogs.structs import bodies, references


async def read_pod(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        namespace: str,
        name: str,
        logger: typedefs.Logger,
) -> bodies.RawPod:
    """
    Read a single pod. Raises :class:`APINotFoundError` if it is absent.
    """
    pod: bodies.RawPod = await api.get(
        url=references.PODS.get_url(namespace=namespace, name=name),
        context=context,
        settings=settings,
        logger=logger,
    )
    return pod


async def list_pods(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        namespace: references.Namespace = None,
        label_selector: Optional[str] = None,
        logger: typedefs.Logger,
) -> List[bodies.RawPod]:
    """
    List the pods, either in one namespace or cluster-wide (if ``None``).

    Every item is a separate dict as decoded from the response, so the items
    can be modified independently of each other. The items are amended with
    ``kind`` & ``apiVersion``, which K8s puts only into the list itself.
    """
    params = {'labelSelector': label_selector} if label_selector else None
    rsp = await api.get(
        url=references.PODS.get_url(namespace=namespace, params=params),
        context=context,
        settings=settings,
        logger=logger,
    )

    items: List[bodies.RawPod] = []
    for item in rsp.get('items') or []:
        if 'kind' in rsp:
            item.setdefault('kind', rsp['kind'][:-4] if rsp['kind'][-4:] == 'List' else rsp['kind'])
        if 'apiVersion' in rsp:
            item.setdefault('apiVersion', rsp['apiVersion'])
        items.append(item)
    return items


async def create_pod(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        body: bodies.RawPod,
        logger: typedefs.Logger,
) -> bodies.RawPod:
    """
    Create a pod in the namespace as specified in its body.
    """
    namespace = body.get('metadata', {}).get('namespace')
    if not namespace:
        raise ValueError("The pod's namespace must be specified for creation.")
    created_body: bodies.RawPod = await api.post(
        url=references.PODS.get_url(namespace=namespace),
        payload=body,
        context=context,
        settings=settings,
        logger=logger,
    )
    return created_body


async def replace_pod(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        body: bodies.RawPod,
        logger: typedefs.Logger,
) -> bodies.RawPod:
    """
    Replace a pod as a whole with the body (i.e. HTTP PUT, not a PATCH).

    The body's ``metadata.resourceVersion``, if present, is used by the API
    for optimistic concurrency: a stale version fails with HTTP 409.
    """
    namespace = body.get('metadata', {}).get('namespace')
    name = body.get('metadata', {}).get('name')
    if not namespace or not name:
        raise ValueError("The pod's namespace & name must be specified for replacement.")
    replaced_body: bodies.RawPod = await api.put(
        url=references.PODS.get_url(namespace=namespace, name=name),
        payload=body,
        context=context,
        settings=settings,
        logger=logger,
    )
    return replaced_body


async def delete_pod(
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        namespace: str,
        name: str,
        options: Optional[bodies.RawDeleteOptions] = None,
        logger: typedefs.Logger,
) -> None:
    """
    Delete a pod, passing the delete options to the API as they are.
    """
    payload = dict(options, kind='DeleteOptions', apiVersion='v1') if options else None
    await api.delete(
        url=references.PODS.get_url(namespace=namespace, name=name),
        payload=payload,
        context=context,
        settings=settings,
        logger=logger,
    )
