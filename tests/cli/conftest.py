import functools

import click.testing
import pytest

from vknode._core.provider.lifecycle import PodProvider
from vknode.cli import main


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture(autouse=True)
def configure_mock(mocker):
    """ Keep the root logger intact: the CLI configures it on every invocation. """
    return mocker.patch('vknode._core.engines.loggers.configure')


@pytest.fixture()
def provider_mock(mocker):
    provider = mocker.Mock(spec=PodProvider)
    provider.local = mocker.Mock(server='https://local-host')
    provider.remote = mocker.Mock(server='https://remote-host')
    provider.settings = mocker.Mock()
    provider.capacity.return_value = {'cpu': '100', 'memory': '50Gi', 'pods': '100'}
    provider.node_conditions.return_value = [{'type': 'Ready', 'status': 'True'}]
    provider.node_addresses.return_value = [{'type': 'InternalIP', 'address': '10.0.0.1'}]
    provider.node_daemon_endpoints.return_value = {'kubeletEndpoint': {'Port': 10250}}
    provider.operating_system.return_value = 'Linux'
    provider.node_status.return_value = {
        'capacity': provider.capacity.return_value,
        'allocatable': provider.capacity.return_value,
        'conditions': provider.node_conditions.return_value,
        'addresses': provider.node_addresses.return_value,
        'daemonEndpoints': provider.node_daemon_endpoints.return_value,
        'nodeInfo': {'operatingSystem': 'Linux'},
    }
    return provider


@pytest.fixture()
def init_mock(mocker, provider_mock):
    return mocker.patch('vknode._core.provider.registry.init_provider',
                        return_value=provider_mock)


@pytest.fixture()
def config_path(tmpdir):
    path = tmpdir.join('config.yaml')
    path.write('RemoteKubeConfig: /path\n')
    return str(path)
