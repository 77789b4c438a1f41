import pytest

from kubeaccess._cogs.structs.discovery import APIResource


@pytest.fixture()
def namespaced_resource():
    return APIResource(name='kopfexamples', kind='KopfExample', namespaced=True,
                       verbs=frozenset({'get', 'list', 'create', 'update', 'delete', 'patch'}))


@pytest.fixture()
def cluster_resource():
    return APIResource(name='namespaces', kind='Namespace', namespaced=False,
                       verbs=frozenset({'get', 'list', 'create', 'update', 'delete', 'patch'}))
