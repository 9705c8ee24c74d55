"""
The provider's config file: where the local & remote clusters' kubeconfigs are.

The file is a YAML mapping with two keys (both optional)::

    LocalKubeConfig: /etc/vknode/local.kubeconfig
    RemoteKubeConfig: /etc/vknode/remote.kubeconfig

An absent or empty key means "use the ``KUBE_CONFIG_PATH`` env var instead"
(resolved later, at login time; see :func:`piggybacking.login`).
"""
import dataclasses
import os
from typing import Any, Mapping, Optional

import yaml

from vknode._cogs.structs import errdefs

LOCAL_KUBECONFIG_KEY = 'LocalKubeConfig'
REMOTE_KUBECONFIG_KEY = 'RemoteKubeConfig'


@dataclasses.dataclass(frozen=True)
class ProviderConfig:
    local_kubeconfig: Optional[str] = None
    remote_kubeconfig: Optional[str] = None


def load_config(path: str) -> ProviderConfig:
    """
    Read and parse the provider's config file.

    Any failure to read or to interpret the file is a configuration error.
    """
    try:
        with open(os.path.expanduser(path), 'rt', encoding='utf-8') as f:
            data = yaml.safe_load(f.read())
    except (OSError, UnicodeDecodeError) as e:
        raise errdefs.ConfigurationError(f"Cannot read the config file {path!r}: {e}") from e
    except yaml.YAMLError as e:
        raise errdefs.ConfigurationError(f"Cannot parse the config file {path!r}: {e}") from e
    return parse_config(data or {}, source=path)


def parse_config(data: Any, *, source: str = '<data>') -> ProviderConfig:
    if not isinstance(data, Mapping):
        raise errdefs.ConfigurationError(f"The config in {source!r} must be a mapping, "
                                         f"got {type(data).__name__}.")
    return ProviderConfig(
        local_kubeconfig=_get_path(data, LOCAL_KUBECONFIG_KEY, source=source),
        remote_kubeconfig=_get_path(data, REMOTE_KUBECONFIG_KEY, source=source),
    )


def _get_path(data: Mapping[str, Any], key: str, *, source: str) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise errdefs.ConfigurationError(f"The {key!r} in {source!r} must be a string path.")
    return value or None
