import os

import pytest

from vknode._cogs.structs.credentials import ConnectionInfo
from vknode._cogs.structs.errdefs import ConfigurationError
from vknode._core.intents.piggybacking import ConfigType
from vknode._core.provider import bootstrap
from vknode._core.provider.bootstrap import InitConfig, create_provider
from vknode._core.provider.lifecycle import PodProvider

KUBECONFIG = '''
    kind: Config
    current-context: ctx
    contexts:
      - name: ctx
        context: {{cluster: clstr, user: usr, namespace: {namespace}}}
    clusters:
      - name: clstr
        cluster: {{server: "{server}"}}
    users:
      - name: usr
        user: {{token: tkn}}
'''


@pytest.fixture(autouse=True)
def no_kubeconfig_envvar(mocker):
    mocker.patch.dict(os.environ, clear=True)


@pytest.fixture()
def kubeconfigs(tmpdir):
    local = tmpdir.join('local.kubeconfig')
    local.write(KUBECONFIG.format(server='https://local-host', namespace='host-ns'))
    remote = tmpdir.join('remote.kubeconfig')
    remote.write(KUBECONFIG.format(server='https://remote-host', namespace='remote-ns'))
    return str(local), str(remote)


@pytest.fixture()
def config_path(tmpdir, kubeconfigs):
    local, remote = kubeconfigs
    path = tmpdir.join('config.yaml')
    path.write(f'LocalKubeConfig: {local}\nRemoteKubeConfig: {remote}\n')
    return str(path)


def test_init_config_defaults():
    cfg = InitConfig(config_path='/path', node_name='vk')
    assert cfg.operating_system == 'Linux'
    assert cfg.internal_ip == '127.0.0.1'
    assert cfg.daemon_port == 10250
    assert cfg.config_type == ConfigType.OUT_OF_CLUSTER
    assert cfg.settings is None


async def test_provider_is_created_with_both_clusters(config_path):
    cfg = InitConfig(config_path=config_path, node_name='vk', operating_system='Windows',
                     internal_ip='10.1.1.1', daemon_port=12345)

    provider = await create_provider(cfg)
    async with provider:
        assert isinstance(provider, PodProvider)
        assert provider.node_name == 'vk'
        assert provider.local.server == 'https://local-host'
        assert provider.remote.server == 'https://remote-host'
        assert provider.local.default_namespace == 'host-ns'
        assert provider.remote.default_namespace == 'remote-ns'
        assert provider.operating_system() == 'Windows'
        assert provider.node_addresses() == [{'type': 'InternalIP', 'address': '10.1.1.1'}]
        assert provider.node_daemon_endpoints() == {'kubeletEndpoint': {'Port': 12345}}

    assert provider.local.session.closed
    assert provider.remote.session.closed


async def test_empty_config_values_fall_back_to_the_envvar(tmpdir, kubeconfigs, mocker):
    _, remote = kubeconfigs
    path = tmpdir.join('config.yaml')
    path.write('LocalKubeConfig: ""\n')
    mocker.patch.dict(os.environ, KUBE_CONFIG_PATH=remote)

    provider = await create_provider(InitConfig(config_path=str(path), node_name='vk'))
    async with provider:
        assert provider.local.server == 'https://remote-host'
        assert provider.remote.server == 'https://remote-host'


async def test_absent_config_file_fails(tmpdir):
    cfg = InitConfig(config_path=str(tmpdir.join('absent.yaml')), node_name='vk')
    with pytest.raises(ConfigurationError, match=r"Cannot read the config file"):
        await create_provider(cfg)


async def test_absent_kubeconfig_path_fails(tmpdir):
    path = tmpdir.join('config.yaml')
    path.write('{}')
    cfg = InitConfig(config_path=str(path), node_name='vk')
    with pytest.raises(ConfigurationError, match=r"KUBE_CONFIG_PATH"):
        await create_provider(cfg)


async def test_kubeconfig_without_a_server_fails(tmpdir):
    kubeconfig = tmpdir.join('kubeconfig')
    kubeconfig.write(KUBECONFIG.format(server='', namespace='ns'))
    path = tmpdir.join('config.yaml')
    path.write(f'LocalKubeConfig: {kubeconfig}\nRemoteKubeConfig: {kubeconfig}\n')
    cfg = InitConfig(config_path=str(path), node_name='vk')
    with pytest.raises(ConfigurationError, match=r"Cannot create the remote cluster's client"):
        await create_provider(cfg)


@pytest.mark.parametrize('content', [
    b'[a, b]',
    b'current-context: ctx\ncontexts: [{context: {cluster: clstr}}]',
    b'current-context: \xff\xfe',
], ids=['list-root', 'nameless-context', 'undecodable'])
async def test_malformed_kubeconfig_fails(tmpdir, content):
    kubeconfig = tmpdir.join('kubeconfig')
    kubeconfig.write_binary(content)
    path = tmpdir.join('config.yaml')
    path.write(f'LocalKubeConfig: {kubeconfig}\nRemoteKubeConfig: {kubeconfig}\n')
    cfg = InitConfig(config_path=str(path), node_name='vk')
    with pytest.raises(ConfigurationError, match=r"Cannot get the out-of-cluster config"):
        await create_provider(cfg)


async def test_undecodable_config_file_fails(tmpdir):
    path = tmpdir.join('config.yaml')
    path.write_binary(b'LocalKubeConfig: \xff\xfe')
    cfg = InitConfig(config_path=str(path), node_name='vk')
    with pytest.raises(ConfigurationError, match=r"Cannot read the config file"):
        await create_provider(cfg)


async def test_remote_context_is_closed_if_the_local_one_fails(config_path, mocker):
    remote = mocker.Mock(close=mocker.AsyncMock())
    mocker.patch.object(bootstrap, 'make_context',
                        side_effect=[remote, ConfigurationError("boo!")])

    with pytest.raises(ConfigurationError, match=r"boo!"):
        await create_provider(InitConfig(config_path=config_path, node_name='vk'))

    assert remote.close.await_count == 1


async def test_in_cluster_login_ignores_the_kubeconfigs(config_path, mocker):
    info = ConnectionInfo(server='https://kubernetes.default.svc', token='tkn')
    sa_mock = mocker.patch('vknode._core.intents.piggybacking.login_with_service_account',
                           return_value=info)
    cfg = InitConfig(config_path=config_path, node_name='vk',
                     config_type=ConfigType.IN_CLUSTER)

    provider = await create_provider(cfg)
    async with provider:
        assert provider.local.server == 'https://kubernetes.default.svc'
        assert provider.remote.server == 'https://kubernetes.default.svc'
    assert sa_mock.call_count == 2
