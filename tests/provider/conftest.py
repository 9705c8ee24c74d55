import pytest


@pytest.fixture()
def pod():
    """ A host's pod as the virtual-node agent passes it to the provider. """
    return {
        'apiVersion': 'v1',
        'kind': 'Pod',
        'metadata': {
            'namespace': 'ns',
            'name': 'name1',
            'uid': 'host-uid',
            'resourceVersion': '123',
            'labels': {'app': 'demo'},
            'annotations': {'host': 'annotation'},
        },
        'spec': {
            'nodeName': 'vk-node',
            'restartPolicy': 'Never',
            'serviceAccountName': 'default',
            'volumes': [{'name': 'data', 'emptyDir': {}}],
            'containers': [
                {
                    'name': 'main',
                    'image': 'nginx:1.25',
                    'command': ['nginx'],
                    'args': ['-g', 'daemon off;'],
                    'resources': {'limits': {'cpu': '1'}},
                    'ports': [{'containerPort': 80}],
                    'env': [{'name': 'A', 'value': 'b'}],
                    'workingDir': '/srv',
                    'volumeMounts': [{'name': 'data', 'mountPath': '/data'}],
                    'livenessProbe': {'httpGet': {'path': '/', 'port': 80}},
                    'securityContext': {'privileged': True},
                },
            ],
        },
        'status': {'phase': 'Pending'},
    }


@pytest.fixture()
def remote_pod_path():
    return '/api/v1/namespaces/ns/pods/name1'


@pytest.fixture()
def remote_pods_path():
    return '/api/v1/namespaces/ns/pods'
