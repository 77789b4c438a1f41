import logging

import aiohttp.web
import pytest

from kubeaccess._cogs.clients.errors import APINotFoundError, UnknownResourceError
from kubeaccess._cogs.configs.configuration import ClientSettings
from kubeaccess._core.clients import Client, client as make_client


@pytest.mark.parametrize('explicit_ns, default_ns, own_ns, expected_ns', [
    ('ns-a', 'ns-b', 'ns-c', 'ns-a'),
    (None, 'ns-b', 'ns-c', 'ns-b'),
    (None, None, 'ns-c', 'ns-c'),
])
async def test_namespace_precedence(
        transport, core_v1_mock, explicit_ns, default_ns, own_ns, expected_ns):
    client = Client(transport, namespace=default_ns)
    body = {'apiVersion': 'v1', 'kind': 'ConfigMap', 'metadata': {'name': 'x', 'namespace': own_ns}}
    resource_client = await client.client_for_resource(body, namespace=explicit_ns)
    assert resource_client.namespace == expected_ns
    assert resource_client.kind == 'ConfigMap'


async def test_cluster_kinds_have_no_namespaces(transport, core_v1_mock):
    client = Client(transport, namespace='default')
    body = {'apiVersion': 'v1', 'kind': 'Namespace', 'metadata': {'name': 'x'}}
    resource_client = await client.client_for_resource(body, namespace='ns-a')
    assert resource_client.namespace is None


async def test_unknown_kinds(client, core_v1_mock):
    body = {'apiVersion': 'v1', 'kind': 'Nonexistent', 'metadata': {'name': 'x'}}
    with pytest.raises(UnknownResourceError) as err:
        await client.client_for_resource(body)
    assert err.value.group_version == 'v1'
    assert err.value.kind == 'Nonexistent'


async def test_unserved_versions_fail_on_first_use(resp_mocker, aresponses, hostname, client):
    mock = resp_mocker(return_value=aresponses.Response(status=404))
    aresponses.add(hostname, '/apis/unserved.dev/v1', 'get', mock)

    api_client = client.api('unserved.dev/v1')  # no errors here
    body = {'apiVersion': 'unserved.dev/v1', 'kind': 'Thing', 'metadata': {'name': 'x'}}
    with pytest.raises(APINotFoundError):
        await client.get_resource(body)
    assert not api_client.has_api_resources


async def test_bodies_without_api_versions(client):
    with pytest.raises(ValueError, match=r"no apiVersion"):
        await client.client_for_resource({'kind': 'Pod', 'metadata': {'name': 'x'}})


async def test_create_then_get_round_trip(resp_mocker, aresponses, hostname, transport, core_v1_mock):
    stored = {}

    def create(*args, **kwargs):
        stored.update(post_mock.call_args_list[-1][0][0].data)
        return aiohttp.web.json_response(stored)

    def fetch(*args, **kwargs):
        return aiohttp.web.json_response(stored)

    post_mock = resp_mocker(side_effect=create)
    get_mock = resp_mocker(side_effect=fetch)
    aresponses.add(hostname, '/api/v1/namespaces/default/configmaps', 'post', post_mock)
    aresponses.add(hostname, '/api/v1/namespaces/default/configmaps/cm1', 'get', get_mock)

    client = Client(transport, namespace='default')
    body = {'apiVersion': 'v1', 'kind': 'ConfigMap',
            'metadata': {'name': 'cm1'}, 'data': {'key': 'value'}}
    created = await client.create_resource(body)
    fetched = await client.get_resource(body)

    assert created['metadata']['namespace'] == 'default'
    assert fetched == created
    assert fetched['data'] == {'key': 'value'}
    assert 'namespace' not in body['metadata']  # not modified in place
    assert core_v1_mock.call_count == 1  # discovered once, used twice


async def test_update_and_delete(resp_mocker, aresponses, hostname, client, core_v1_mock):
    put_mock = resp_mocker(return_value=aiohttp.web.json_response({'verb': 'put'}))
    delete_mock = resp_mocker(return_value=aiohttp.web.json_response({'verb': 'delete'}))
    aresponses.add(hostname, '/api/v1/namespaces/ns1/pods/pod1', 'put', put_mock)
    aresponses.add(hostname, '/api/v1/namespaces/ns1/pods/pod1', 'delete', delete_mock)

    body = {'apiVersion': 'v1', 'kind': 'Pod', 'metadata': {'name': 'pod1', 'namespace': 'ns1'}}
    assert await client.update_resource(body) == {'verb': 'put'}
    assert await client.delete_resource(body) == {'verb': 'delete'}


async def test_manual_clients_do_not_close_transports(transport, mocker):
    close = mocker.patch.object(transport, 'close')
    async with Client(transport):
        pass
    assert not close.called


async def test_factory_clients_close_their_transports(hostname, mocker):
    settings = ClientSettings()
    client = make_client(f'http://{hostname}', namespace='ns1', settings=settings)
    close = mocker.patch.object(client.transport, 'close')
    async with client:
        assert client.namespace == 'ns1'
        assert client.transport.server == f'http://{hostname}'
        assert client.transport.settings is settings
    assert close.called


async def test_adapter_loggers_keep_object_references(
        resp_mocker, aresponses, hostname, transport, core_v1_mock, caplog):
    get_mock = resp_mocker(return_value=aiohttp.web.json_response({}))
    aresponses.add(hostname, '/api/v1/namespaces/ns1/pods/pod1', 'get', get_mock)

    logger = logging.LoggerAdapter(logging.getLogger('kubeaccess.tests.app'), {'app': 'x'})
    client = Client(transport, logger=logger)
    body = {'apiVersion': 'v1', 'kind': 'Pod', 'metadata': {'name': 'pod1', 'namespace': 'ns1'}}
    await client.get_resource(body)

    records = [record for record in caplog.records if record.message.startswith('Getting Pod')]
    assert len(records) == 1
    assert records[0].app == 'x'
    assert records[0].k8s_ref == {'apiVersion': 'v1', 'kind': 'Pod', 'namespace': 'ns1', 'name': 'pod1'}
