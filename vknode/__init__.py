"""
The main vknode module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the package's top-level interface,
# as it is seen by the host's agent. So, we export the individual functions.

from vknode._cogs.clients.auth import (
    APIContext,
)
from vknode._cogs.clients.errors import (
    APIError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
)
from vknode._cogs.clients.secrets import (
    read_secret,
    create_secret,
    replace_secret,
    delete_secret,
)
from vknode._cogs.configs.configuration import (
    NetworkingSettings,
    NodeSettings,
    ProviderSettings,
)
from vknode._cogs.configs.files import (
    ProviderConfig,
    load_config,
    parse_config,
)
from vknode._cogs.helpers.typedefs import (
    Logger,
)
from vknode._cogs.helpers.versions import (
    version as __version__,
)
from vknode._cogs.structs.credentials import (
    ConnectionInfo,
    LoginError,
)
from vknode._cogs.structs.errdefs import (
    ProviderError,
    ConfigurationError,
    NotFoundError,
    NotImplementedByProviderError,
)
from vknode._core.engines.loggers import (
    configure,
    LogFormat,
    ObjectLogger,
)
from vknode._core.intents.piggybacking import (
    ConfigType,
    login,
    login_with_kubeconfig,
    login_with_service_account,
)
from vknode._core.provider.bootstrap import (
    InitConfig,
    create_provider,
)
from vknode._core.provider.contract import (
    Provider,
    ContainerLogOpts,
    AttachIO,
)
from vknode._core.provider.lifecycle import (
    PodProvider,
)
from vknode._core.provider.registry import (
    register,
    init_provider,
)
from vknode._core.provider.translation import (
    REMOTE_POD_ANNOTATION_NAME,
    REMOTE_POD_ANNOTATION_VALUE,
    build_remote_pod,
    translate_to_remote_pod,
    update_to_local_pod,
)

__all__ = [
    'Provider', 'ContainerLogOpts', 'AttachIO',
    'PodProvider',
    'InitConfig', 'create_provider',
    'register', 'init_provider',
    'configure', 'LogFormat', 'ObjectLogger', 'Logger',
    'ConfigType', 'login', 'login_with_kubeconfig', 'login_with_service_account',
    'ProviderSettings', 'NetworkingSettings', 'NodeSettings',
    'ProviderConfig', 'load_config', 'parse_config',
    'ConnectionInfo', 'LoginError',
    'APIContext',
    'read_secret', 'create_secret', 'replace_secret', 'delete_secret',
    'APIError',
    'APIUnauthorizedError',
    'APIForbiddenError',
    'APINotFoundError',
    'APIConflictError',
    'ProviderError',
    'ConfigurationError',
    'NotFoundError',
    'NotImplementedByProviderError',
    'REMOTE_POD_ANNOTATION_NAME', 'REMOTE_POD_ANNOTATION_VALUE',
    'build_remote_pod', 'translate_to_remote_pod', 'update_to_local_pod',
    '__version__',
]
