import asyncio
import functools
import json
import logging
from typing import Any, Awaitable, Callable, List, Optional, TypeVar

import aiohttp
import click
import yaml

from vknode._cogs.clients import errors, scanning
from vknode._cogs.helpers import versions
from vknode._cogs.structs import bodies, errdefs
from vknode._core.engines import loggers
from vknode._core.intents import piggybacking
from vknode._core.provider import bootstrap, contract, lifecycle, registry

_T = TypeVar('_T')

logger = logging.getLogger(__name__)


class LogFormatParamType(click.Choice):

    def __init__(self) -> None:
        super().__init__(choices=[v.name.lower() for v in loggers.LogFormat])

    def convert(self, value: Any, param: Any, ctx: Any) -> loggers.LogFormat:
        name: str = super().convert(value, param, ctx)
        return loggers.LogFormat[name.upper()]


def logging_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to configure logging in all commands the same way."""
    @click.option('-v', '--verbose', is_flag=True)
    @click.option('-d', '--debug', is_flag=True)
    @click.option('-q', '--quiet', is_flag=True)
    @click.option('--log-format', type=LogFormatParamType(), default='full')
    @click.option('--log-refkey', type=str)
    @click.option('--log-prefix/--no-log-prefix', default=None)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(verbose: bool, quiet: bool, debug: bool,
                log_format: loggers.LogFormat = loggers.LogFormat.FULL,
                log_prefix: Optional[bool] = False,
                log_refkey: Optional[str] = None,
                *args: Any, **kwargs: Any) -> Any:
        loggers.configure(debug=debug, verbose=verbose, quiet=quiet,
                          log_format=log_format, log_refkey=log_refkey, log_prefix=log_prefix)
        return fn(*args, **kwargs)

    return wrapper


def provider_options(fn: Callable[..., Any]) -> Callable[..., Any]:
    """ A decorator to describe the virtual node the same way in all commands."""
    @click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False), required=True)
    @click.option('--provider', 'provider_name', type=str, default='poc', show_default=True)
    @click.option('--node-name', type=str, default='virtual-kubelet', show_default=True)
    @click.option('--os', 'operating_system', type=str, default='Linux', show_default=True)
    @click.option('--internal-ip', type=str, default='127.0.0.1', envvar='VKUBELET_POD_IP')
    @click.option('--daemon-port', type=int, default=10250, envvar='KUBELET_PORT')
    @click.option('--in-cluster', is_flag=True, default=False)
    @functools.wraps(fn)  # to preserve other opts/args
    def wrapper(config_path: str,
                provider_name: str,
                node_name: str,
                operating_system: str,
                internal_ip: str,
                daemon_port: int,
                in_cluster: bool,
                *args: Any, **kwargs: Any) -> Any:
        cfg = bootstrap.InitConfig(
            config_path=config_path,
            node_name=node_name,
            operating_system=operating_system,
            internal_ip=internal_ip,
            daemon_port=daemon_port,
            config_type=(piggybacking.ConfigType.IN_CLUSTER if in_cluster else
                         piggybacking.ConfigType.OUT_OF_CLUSTER),
        )
        return fn(provider_name, cfg, *args, **kwargs)

    return wrapper


def run_with_provider(
        name: str,
        cfg: bootstrap.InitConfig,
        fn: Callable[[contract.Provider], Awaitable[_T]],
) -> _T:
    """ Create the provider, use it in a fresh event loop, close it, report the errors. """

    async def _run() -> _T:
        provider = await registry.init_provider(name, cfg)
        try:
            return await fn(provider)
        finally:
            await provider.close()

    try:
        return asyncio.run(_run())
    except errdefs.ConfigurationError as e:
        raise click.UsageError(str(e)) from e
    except errdefs.NotFoundError as e:
        raise click.ClickException(str(e)) from e
    except errdefs.ProviderError as e:
        raise click.ClickException(f"The provider failed: {e}") from e
    except errors.APIError as e:
        raise click.ClickException(f"The API call failed: {e}") from e
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise click.ClickException(f"The cluster is unreachable: {e!r}") from e


def load_pods(path: str) -> List[bodies.RawPod]:
    with open(path, encoding='utf-8') as f:
        documents = [doc for doc in yaml.safe_load_all(f) if doc]
    for doc in documents:
        if not isinstance(doc, dict) or doc.get('kind', 'Pod') != 'Pod':
            raise click.BadParameter(f"Only pods can be relayed, got: {doc!r}", param_hint='-f')
        meta = doc.get('metadata') or {}
        if not isinstance(meta, dict) or not meta.get('namespace') or not meta.get('name'):
            raise click.BadParameter("Every pod must have a namespace and a name.", param_hint='-f')
    return documents


@click.version_option(version=versions.version or 'unknown', prog_name='vknode')
@click.group(name='vknode', context_settings=dict(
    auto_envvar_prefix='VKNODE',
))
def main() -> None:
    pass


@main.command()
@logging_options
@provider_options
def check(provider_name: str, cfg: bootstrap.InitConfig) -> None:
    """ Verify that both clusters are reachable with the configured credentials. """

    async def _check(provider: contract.Provider) -> None:
        if not isinstance(provider, lifecycle.PodProvider):
            raise click.UsageError(f"The provider {provider_name!r} cannot be checked.")
        for role, context in [('local', provider.local), ('remote', provider.remote)]:
            info = await scanning.read_version(context=context, settings=provider.settings,
                                               logger=logger)
            click.echo(f"{role}: {context.server} (Kubernetes {info.get('gitVersion', '?')})")

    run_with_provider(provider_name, cfg, _check)


@main.command()
@logging_options
@provider_options
def pods(provider_name: str, cfg: bootstrap.InitConfig) -> None:
    """ List the pods relayed to the remote cluster. """

    async def _pods(provider: contract.Provider) -> List[bodies.RawPod]:
        return await provider.get_pods()

    items = run_with_provider(provider_name, cfg, _pods)
    click.echo(f"{'NAMESPACE':<20} {'NAME':<40} PHASE")
    for item in items:
        meta = item.get('metadata', {})
        phase = item.get('status', {}).get('phase', 'Unknown')
        click.echo(f"{meta.get('namespace', ''):<20} {meta.get('name', ''):<40} {phase}")


@main.command()
@logging_options
@provider_options
@click.argument('namespace')
@click.argument('name')
@click.option('--status-only', is_flag=True)
def get(provider_name: str, cfg: bootstrap.InitConfig,
        namespace: str, name: str, status_only: bool) -> None:
    """ Show a remote pod (or only its status) as YAML. """

    async def _get(provider: contract.Provider) -> Any:
        if status_only:
            return await provider.get_pod_status(namespace, name)
        return await provider.get_pod(namespace, name)

    result = run_with_provider(provider_name, cfg, _get)
    click.echo(yaml.safe_dump(result, sort_keys=False), nl=False)


@main.command()
@logging_options
@provider_options
def status(provider_name: str, cfg: bootstrap.InitConfig) -> None:
    """ Show the virtual node's status as the host would see it. """

    async def _status(provider: contract.Provider) -> bodies.RawNodeStatus:
        return provider.node_status()

    result = run_with_provider(provider_name, cfg, _status)
    click.echo(json.dumps(result, indent=2))


@main.command()
@logging_options
@provider_options
@click.option('-f', '--filename', 'path', type=click.Path(exists=True, dir_okay=False),
              required=True)
@click.option('--update', is_flag=True, help="Replace the existing remote pods.")
def create(provider_name: str, cfg: bootstrap.InitConfig, path: str, update: bool) -> None:
    """ Relay the pods from a YAML file to the remote cluster. """
    documents = load_pods(path)

    async def _create(provider: contract.Provider) -> None:
        for pod in documents:
            if update:
                await provider.update_pod(pod)
            else:
                await provider.create_pod(pod)
            meta = pod['metadata']
            click.echo(f"{meta['namespace']}/{meta['name']}: {'updated' if update else 'created'}")

    run_with_provider(provider_name, cfg, _create)


@main.command()
@logging_options
@provider_options
@click.argument('namespace')
@click.argument('name')
@click.option('--grace-period', type=int, default=None)
def delete(provider_name: str, cfg: bootstrap.InitConfig,
           namespace: str, name: str, grace_period: Optional[int]) -> None:
    """ Delete a remote pod. """
    options: Optional[bodies.RawDeleteOptions] = None
    if grace_period is not None:
        options = {'gracePeriodSeconds': grace_period}

    async def _delete(provider: contract.Provider) -> None:
        await provider.delete_pod(namespace, name, options=options)

    run_with_provider(provider_name, cfg, _delete)
    click.echo(f"{namespace}/{name}: deleted")
