import aiohttp.web
import pytest


@pytest.fixture()
def apps_v1_resources():
    return {
        'kind': 'APIResourceList',
        'groupVersion': 'apps/v1',
        'resources': [
            {'name': 'deployments', 'singularName': 'deployment', 'namespaced': True,
             'kind': 'Deployment', 'verbs': ['create', 'delete', 'get', 'list', 'patch', 'update']},
            {'name': 'deployments/status', 'singularName': '', 'namespaced': True,
             'kind': 'Deployment', 'verbs': ['get', 'patch', 'update']},
            {'name': 'controllerrevisions', 'singularName': 'controllerrevision', 'namespaced': True,
             'kind': 'ControllerRevision', 'verbs': ['get', 'list']},
        ],
    }


@pytest.fixture()
def apps_v1_mock(resp_mocker, aresponses, hostname, apps_v1_resources):
    mock = resp_mocker(return_value=aiohttp.web.json_response(apps_v1_resources))
    aresponses.add(hostname, '/apis/apps/v1', 'get', mock)
    return mock
