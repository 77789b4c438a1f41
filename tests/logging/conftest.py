import logging.handlers

import pytest

from kubeaccess._core.loggers import ObjectLogger


@pytest.fixture()
def ns_body():
    return {
        'kind': 'KopfExample',
        'apiVersion': 'kopf.dev/v1',
        'metadata': {'uid': 'uid1', 'name': 'name1', 'namespace': 'ns1'},
    }


@pytest.fixture()
def cluster_body():
    return {
        'kind': 'Namespace',
        'apiVersion': 'v1',
        'metadata': {'uid': 'uid1', 'name': 'name1'},
    }


@pytest.fixture()
def make_record():
    def make_record_fn(body):
        handler = logging.handlers.BufferingHandler(capacity=100)
        logger = ObjectLogger(body=body, parent=logging.getLogger('kubeaccess.tests.records'))
        logger.logger.addHandler(handler)
        try:
            logger.info("hello")
        finally:
            logger.logger.removeHandler(handler)
        return handler.buffer[0]
    return make_record_fn


@pytest.fixture()
def ns_record(make_record, ns_body):
    return make_record(ns_body)


@pytest.fixture()
def cluster_record(make_record, cluster_body):
    return make_record(cluster_body)
