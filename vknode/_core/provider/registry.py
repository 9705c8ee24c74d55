"""
A registry of the providers by name, as selected by the host's agent.

Only one provider is built in (``poc``), but others can be registered
by the same name-to-factory convention.
"""
from typing import Awaitable, Callable, Dict, Iterable

from vknode._cogs.structs import errdefs
from vknode._core.provider import bootstrap, contract

ProviderFactory = Callable[[bootstrap.InitConfig], Awaitable[contract.Provider]]

_factories: Dict[str, ProviderFactory] = {}


def register(name: str, factory: ProviderFactory) -> None:
    if name in _factories:
        raise ValueError(f"The provider {name!r} is already registered.")
    _factories[name] = factory


def get_names() -> Iterable[str]:
    return sorted(_factories)


async def init_provider(name: str, cfg: bootstrap.InitConfig) -> contract.Provider:
    try:
        factory = _factories[name]
    except KeyError:
        raise errdefs.ConfigurationError(f"Unknown provider {name!r}; "
                                         f"known are: {', '.join(get_names())}.") from None
    return await factory(cfg)


register('poc', bootstrap.create_provider)
