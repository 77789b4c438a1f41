import aiohttp.web
import pytest


@pytest.fixture()
def api_group_list():
    return {
        'kind': 'APIGroupList',
        'apiVersion': 'v1',
        'groups': [
            {'name': 'apps',
             'versions': [{'groupVersion': 'apps/v1', 'version': 'v1'}],
             'preferredVersion': {'groupVersion': 'apps/v1', 'version': 'v1'}},
            {'name': 'batch',
             'versions': [{'groupVersion': 'batch/v1', 'version': 'v1'},
                          {'groupVersion': 'batch/v1beta1', 'version': 'v1beta1'}],
             'preferredVersion': {'groupVersion': 'batch/v1', 'version': 'v1'}},
            {'name': 'kopf.dev',
             'versions': [{'groupVersion': 'kopf.dev/v1', 'version': 'v1'}],
             'preferredVersion': {'groupVersion': 'kopf.dev/v1', 'version': 'v1'}},
        ],
    }


@pytest.fixture()
def apis_mock(resp_mocker, aresponses, hostname, api_group_list):
    mock = resp_mocker(return_value=aiohttp.web.json_response(api_group_list))
    aresponses.add(hostname, '/apis', 'get', mock)
    return mock


@pytest.fixture()
def core_v1_mock(resp_mocker, aresponses, hostname):
    mock = resp_mocker(return_value=aiohttp.web.json_response({
        'kind': 'APIResourceList',
        'groupVersion': 'v1',
        'resources': [
            {'name': 'namespaces', 'namespaced': False, 'kind': 'Namespace', 'verbs': ['get']},
            {'name': 'configmaps', 'namespaced': True, 'kind': 'ConfigMap', 'verbs': ['get']},
            {'name': 'pods', 'namespaced': True, 'kind': 'Pod', 'verbs': ['get']},
            {'name': 'pods/status', 'namespaced': True, 'kind': 'Pod', 'verbs': ['get']},
        ],
    }))
    aresponses.add(hostname, '/api/v1', 'get', mock)
    return mock
