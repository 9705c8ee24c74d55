import datetime

import aiohttp
import pytest

from vknode._cogs.configs.configuration import NodeSettings, ProviderSettings
from vknode._core.provider.contract import Provider
from vknode._core.provider.nodestatus import NODE_CONDITIONS, node_conditions, now

TIMESTAMP_FORMAT = '%Y-%m-%dT%H:%M:%SZ'


def test_capacity_is_static(provider):
    assert provider.capacity() == {'cpu': '100', 'memory': '50Gi', 'pods': '100'}


def test_capacity_follows_the_settings(provider):
    provider.settings.node = NodeSettings(cpu='8', memory='16Gi', pods='10')
    assert provider.capacity() == {'cpu': '8', 'memory': '16Gi', 'pods': '10'}


def test_capacity_makes_no_remote_calls(provider, mocker):
    request_mock = mocker.patch.object(aiohttp.ClientSession, 'request')
    provider.capacity()
    provider.node_conditions()
    provider.node_status()
    assert not request_mock.called


def test_all_conditions_are_healthy(provider):
    conditions = provider.node_conditions()
    statuses = {c['type']: c['status'] for c in conditions}
    assert statuses == {
        'Ready': 'True',
        'OutOfDisk': 'False',
        'MemoryPressure': 'False',
        'DiskPressure': 'False',
        'NetworkUnavailable': 'False',
        'KubeletConfigOk': 'True',
    }


def test_conditions_are_in_a_stable_order(provider):
    conditions = provider.node_conditions()
    assert [c['type'] for c in conditions] == [type_ for type_, _ in NODE_CONDITIONS]


def test_conditions_have_reasons_and_messages(provider):
    for condition in provider.node_conditions():
        assert condition['reason'] == 'RemoteClusterReady'
        assert condition['message'] == 'ok'


def test_conditions_have_fresh_timestamps(provider):
    before = datetime.datetime.now(datetime.timezone.utc).replace(microsecond=0)
    conditions = provider.node_conditions()
    after = datetime.datetime.now(datetime.timezone.utc)
    for condition in conditions:
        heartbeat = datetime.datetime.strptime(condition['lastHeartbeatTime'], TIMESTAMP_FORMAT)
        heartbeat = heartbeat.replace(tzinfo=datetime.timezone.utc)
        assert before <= heartbeat <= after
        assert condition['lastTransitionTime'] == condition['lastHeartbeatTime']


def _parsed_times(conditions, field):
    return [datetime.datetime.strptime(c[field], TIMESTAMP_FORMAT) for c in conditions]


@pytest.mark.parametrize('field', ['lastHeartbeatTime', 'lastTransitionTime'])
def test_timestamps_never_go_backwards_across_calls(provider, field):
    polls = [provider.node_conditions() for _ in range(5)]
    latest = [max(_parsed_times(conditions, field)) for conditions in polls]
    earliest = [min(_parsed_times(conditions, field)) for conditions in polls]
    for prev_latest, next_earliest in zip(latest, earliest[1:]):
        assert prev_latest <= next_earliest


def test_timestamps_are_regenerated_on_every_call(provider, mocker):
    mocker.patch('vknode._core.provider.nodestatus.now', side_effect=[
        '2020-01-01T00:00:00Z',
        '2020-01-01T00:00:01Z',
        '2020-01-01T00:01:00Z',
    ])
    polls = [provider.node_conditions() for _ in range(3)]
    heartbeats = [
        {c['lastHeartbeatTime'] for c in conditions} | {c['lastTransitionTime'] for c in conditions}
        for conditions in polls
    ]
    assert heartbeats == [
        {'2020-01-01T00:00:00Z'},
        {'2020-01-01T00:00:01Z'},
        {'2020-01-01T00:01:00Z'},
    ]


def test_conditions_with_an_explicit_timestamp():
    conditions = node_conditions(ProviderSettings(), timestamp='2020-01-01T00:00:00Z')
    assert {c['lastHeartbeatTime'] for c in conditions} == {'2020-01-01T00:00:00Z'}


def test_timestamps_are_in_utc_with_seconds_precision():
    value = now()
    parsed = datetime.datetime.strptime(value, TIMESTAMP_FORMAT)
    assert value.endswith('Z')
    assert parsed.microsecond == 0


def test_node_addresses(provider):
    assert provider.node_addresses() == [{'type': 'InternalIP', 'address': '10.0.0.1'}]


def test_node_daemon_endpoints(provider):
    assert provider.node_daemon_endpoints() == {'kubeletEndpoint': {'Port': 10250}}


def test_operating_system(provider):
    assert provider.operating_system() == 'Linux'


def test_node_status_assembly(provider):
    status = provider.node_status()
    assert status['capacity'] == provider.capacity()
    assert status['allocatable'] == provider.capacity()
    assert [c['type'] for c in status['conditions']] == [t for t, _ in NODE_CONDITIONS]
    assert status['addresses'] == provider.node_addresses()
    assert status['daemonEndpoints'] == provider.node_daemon_endpoints()
    assert status['nodeInfo'] == {'operatingSystem': 'Linux'}


@pytest.mark.parametrize('attr', [
    'create_pod', 'update_pod', 'delete_pod', 'get_pod', 'get_pods', 'get_pod_status',
    'get_container_logs', 'run_in_container',
    'capacity', 'node_conditions', 'node_addresses', 'node_daemon_endpoints',
    'operating_system', 'node_status', 'close',
])
def test_the_whole_contract_is_implemented(provider, attr):
    assert hasattr(Provider, attr)
    assert callable(getattr(provider, attr))
