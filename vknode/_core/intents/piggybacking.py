"""
Rudimentary authentication from the well-known credential sources.

The provider is not a client library, and avoids bringing too much logic
for proper authentication, especially all the complex auth-providers.
Instead, it reads the raw credentials as they are stored in kubeconfig files
or mounted into the pods as service accounts, and uses them as is.

Two login modes are supported (as for the clusters' config types):

* ``out`` (out-of-cluster): a kubeconfig file, either explicitly given,
  or taken from the ``KUBE_CONFIG_PATH`` environment variable.
* ``in`` (in-cluster): the service account of the pod where we run.

.. seealso::
    :mod:`credentials` and :class:`APIContext`.
"""
import enum
import os
from typing import Any, Dict, Mapping, Optional

import yaml

from vknode._cogs.structs import credentials, errdefs

KUBE_CONFIG_PATH_ENV = 'KUBE_CONFIG_PATH'

# Keep as constants to make them patchable in tests.
SERVICE_ACCOUNT_DIR = '/var/run/secrets/kubernetes.io/serviceaccount'
SERVICE_ACCOUNT_SERVER = 'https://kubernetes.default.svc'


class ConfigType(str, enum.Enum):
    IN_CLUSTER = 'in'
    OUT_OF_CLUSTER = 'out'


def login(
        config_type: ConfigType = ConfigType.OUT_OF_CLUSTER,
        path: Optional[str] = None,
) -> credentials.ConnectionInfo:
    """
    Resolve the credentials of one cluster, or fail with a configuration error.

    Unlike the low-level login functions, this one never returns ``None``:
    there must be some credentials for every configured cluster.
    """
    if config_type == ConfigType.IN_CLUSTER:
        try:
            info = login_with_service_account()
        except (OSError, UnicodeDecodeError) as e:
            raise errdefs.ConfigurationError(f"Cannot read the in-cluster service account: {e}") from e
        if info is None:
            raise errdefs.ConfigurationError("Cannot get the in-cluster config: "
                                             "no service account is mounted.")
        return info

    path = path or os.environ.get(KUBE_CONFIG_PATH_ENV)
    if not path:
        raise errdefs.ConfigurationError(f"Missing {KUBE_CONFIG_PATH_ENV!r} environment variable "
                                         f"for the out-of-cluster config.")
    try:
        return login_with_kubeconfig(path)
    except (OSError, UnicodeDecodeError, yaml.YAMLError, credentials.LoginError) as e:
        raise errdefs.ConfigurationError(f"Cannot get the out-of-cluster config "
                                         f"from {path!r}: {e}") from e


def login_with_service_account() -> Optional[credentials.ConnectionInfo]:
    """
    A minimalistic login handler that can get raw data from a service account.

    Returns ``None`` if the service account is not mounted, i.e. we are
    not running in a cluster (or the pod has no service account at all).
    """
    token_path = os.path.join(SERVICE_ACCOUNT_DIR, 'token')
    namespace_path = os.path.join(SERVICE_ACCOUNT_DIR, 'namespace')
    ca_path = os.path.join(SERVICE_ACCOUNT_DIR, 'ca.crt')

    if not os.path.exists(token_path):
        return None

    with open(token_path, encoding='utf-8') as f:
        token = f.read().strip()

    namespace: Optional[str] = None
    if os.path.exists(namespace_path):
        with open(namespace_path, encoding='utf-8') as f:
            namespace = f.read().strip()

    return credentials.ConnectionInfo(
        server=SERVICE_ACCOUNT_SERVER,
        ca_path=ca_path if os.path.exists(ca_path) else None,
        token=token or None,
        default_namespace=namespace or None,
    )


def login_with_kubeconfig(path: str) -> credentials.ConnectionInfo:
    """
    A minimalistic login handler that can get raw data from a kubeconfig file.

    Authentication capabilities are limited to keep the code short & simple.
    No parsing or sophisticated multi-step token retrieval is performed.

    The path can contain several files separated by ``os.pathsep`` (as with
    ``$KUBECONFIG``); in that case, the first seen value of every item wins.
    """
    paths = [p.strip() for p in path.split(os.pathsep)]
    paths = [os.path.expanduser(p) for p in paths if p]

    # As prescribed: if a file is absent or non-deserialisable, then fail. The first value wins.
    current_context: Optional[str] = None
    contexts: Dict[Any, Any] = {}
    clusters: Dict[Any, Any] = {}
    users: Dict[Any, Any] = {}
    for one_path in paths:

        with open(one_path, 'rt', encoding='utf-8') as f:
            config = yaml.safe_load(f.read()) or {}
        if not isinstance(config, Mapping):
            raise credentials.LoginError(f'Kubeconfig {one_path!r} must be a mapping, '
                                         f'got {type(config).__name__}.')

        if current_context is None:
            current_context = config.get('current-context')
        _collect(contexts, config, 'contexts', 'context', source=one_path)
        _collect(clusters, config, 'clusters', 'cluster', source=one_path)
        _collect(users, config, 'users', 'user', source=one_path)

    # Once fully parsed, use the current context only.
    if current_context is None:
        raise credentials.LoginError('Current context is not set in kubeconfigs.')
    elif current_context not in contexts:
        raise credentials.LoginError(f'Context {current_context!r} is missing in kubeconfigs.')

    context = contexts[current_context]
    if context.get('cluster') not in clusters:
        raise credentials.LoginError(f'Cluster {context.get("cluster")!r} is missing in kubeconfigs.')
    if context.get('user') not in users:
        raise credentials.LoginError(f'User {context.get("user")!r} is missing in kubeconfigs.')

    cluster = clusters[context['cluster']]
    user = users[context['user']]

    # Tokens of the auth-providers are used as they are, without refreshing.
    provider_token = (user.get('auth-provider') or {}).get('config', {}).get('access-token')

    # Map the retrieved fields into the credentials object.
    return credentials.ConnectionInfo(
        server=cluster.get('server'),
        ca_path=cluster.get('certificate-authority'),
        ca_data=cluster.get('certificate-authority-data'),
        insecure=cluster.get('insecure-skip-tls-verify'),
        certificate_path=user.get('client-certificate'),
        certificate_data=user.get('client-certificate-data'),
        private_key_path=user.get('client-key'),
        private_key_data=user.get('client-key-data'),
        username=user.get('username'),
        password=user.get('password'),
        token=user.get('token') or provider_token,
        default_namespace=context.get('namespace'),
    )


def _collect(
        target: Dict[Any, Any],
        config: Mapping[str, Any],
        key: str,
        field: str,
        *,
        source: str,
) -> None:
    """ Merge the named items of one kubeconfig section; the first seen name wins. """
    items = config.get(key) or []
    if not isinstance(items, list):
        raise credentials.LoginError(f'The {key!r} in {source!r} must be a list.')
    for item in items:
        if not isinstance(item, Mapping) or 'name' not in item:
            raise credentials.LoginError(f'An item of {key!r} in {source!r} has no name.')
        value = item.get(field) or {}
        if not isinstance(value, Mapping):
            raise credentials.LoginError(f'The {field!r} of {item["name"]!r} in {source!r} '
                                         f'must be a mapping.')
        if item['name'] not in target:
            target[item['name']] = value
