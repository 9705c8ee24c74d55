"""
Translation of the host's pods into the remote cluster's pods, and back.

The translation is a whitelist: only the explicitly enumerated container fields
are copied, everything else is dropped (lifecycle hooks, probes, security
contexts, volume mounts, etc). The host's volumes are never relayed, since
they refer to the host's storage, which does not exist in the remote cluster.

The existence check makes the translation idempotent, but only coarsely:
an existing remote pod is returned as is, with no diffing or reconciliation
of the fields changed on the host since the remote pod was created.
"""
import copy
from typing import List, Tuple

from vknode._cogs.clients import auth, errors, pods
from vknode._cogs.configs import configuration
from vknode._cogs.helpers import typedefs
from vknode._cogs.structs import bodies

# The ownership marker: the pods with it were created by the adapter and are exposed to the host.
REMOTE_POD_ANNOTATION_NAME = 'virtual-kube-type'
REMOTE_POD_ANNOTATION_VALUE = 'poc'

# A label selector to find the owned pods. Annotations cannot be selected server-side,
# so the same marker is also put as a label.
REMOTE_POD_SELECTOR = f'{REMOTE_POD_ANNOTATION_NAME}={REMOTE_POD_ANNOTATION_VALUE}'

CONTAINER_FIELDS: Tuple[str, ...] = (
    'name',
    'image',
    'command',
    'args',
    'resources',
    'ports',
    'env',
    'workingDir',
)


def is_owned(pod: bodies.RawPod) -> bool:
    annotations = pod.get('metadata', {}).get('annotations') or {}
    return annotations.get(REMOTE_POD_ANNOTATION_NAME) == REMOTE_POD_ANNOTATION_VALUE


def is_persisted(pod: bodies.RawPod) -> bool:
    """ Check if the pod was read from the API, not built locally (only the API assigns these). """
    meta = pod.get('metadata', {})
    return bool(meta.get('uid') or meta.get('resourceVersion'))


def build_remote_container(container: bodies.RawContainer) -> bodies.RawContainer:
    # Deep-copied: the remote pod must not share the mutable lists/dicts with the host's pod.
    remote_container: bodies.RawContainer = {}
    for field in CONTAINER_FIELDS:
        if field in container:
            remote_container[field] = copy.deepcopy(container[field])  # type: ignore
    return remote_container


def build_remote_pod(pod: bodies.RawPod) -> bodies.RawPod:
    """
    Build a fresh remote pod from the host's pod, with no API calls.
    """
    meta = pod.get('metadata', {})
    spec = pod.get('spec', {})
    containers: List[bodies.RawContainer] = [
        build_remote_container(container)
        for container in spec.get('containers') or []
    ]

    remote_spec: bodies.RawPodSpec = {
        'volumes': [],
        'containers': containers,
    }
    if 'restartPolicy' in spec:
        remote_spec['restartPolicy'] = spec['restartPolicy']

    return {
        'apiVersion': 'v1',
        'kind': 'Pod',
        'metadata': {
            'namespace': meta['namespace'],
            'name': meta['name'],
            'annotations': {REMOTE_POD_ANNOTATION_NAME: REMOTE_POD_ANNOTATION_VALUE},
            'labels': {REMOTE_POD_ANNOTATION_NAME: REMOTE_POD_ANNOTATION_VALUE},
        },
        'spec': remote_spec,
    }


async def translate_to_remote_pod(
        pod: bodies.RawPod,
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        logger: typedefs.Logger,
) -> bodies.RawPod:
    """
    Get the remote pod for the host's pod: either the existing one, or a new one.

    Only the absence of the remote pod leads to building a new one. All other
    errors of the existence check (e.g. 403, 500, connectivity) are escalated.
    """
    meta = pod.get('metadata', {})
    try:
        existing_pod = await pods.read_pod(
            context=context,
            settings=settings,
            namespace=meta['namespace'],
            name=meta['name'],
            logger=logger,
        )
    except errors.APINotFoundError:
        logger.debug("The remote pod is absent; building a new one.")
        return build_remote_pod(pod)
    else:
        logger.debug("The remote pod exists; using it as is.")
        return existing_pod


async def update_to_local_pod(
        pod: bodies.RawPod,
        *,
        context: auth.APIContext,
        settings: configuration.ProviderSettings,
        logger: typedefs.Logger,
) -> bodies.RawPod:
    """
    Merge the remote pod's spec & status into a copy of the host's pod.

    Fails with :class:`APINotFoundError` if the remote pod does not exist.
    """
    meta = pod.get('metadata', {})
    remote_pod = await pods.read_pod(
        context=context,
        settings=settings,
        namespace=meta['namespace'],
        name=meta['name'],
        logger=logger,
    )
    local_pod = copy.copy(pod)  # shallow: only the top-level keys are replaced.
    local_pod['spec'] = remote_pod.get('spec', {})
    local_pod['status'] = remote_pod.get('status', {})
    return local_pod
