import json

import pytest

from kubewire.kinds.base import ClusterlessResourceError, Resource


class Namespace(Resource):
    kind = 'Namespace'


class Pod(Resource):
    kind = 'Pod'
    namespaceable = True


def test_core_group_paths_of_a_cluster_wide_kind():
    ns = Namespace(attributes={'metadata': {'name': 'ns1'}})
    assert ns.namespace is None
    assert ns.all_resources_path() == '/api/v1/namespaces'
    assert ns.resource_path() == '/api/v1/namespaces/ns1'
    assert ns.all_resources_watch_path() == '/api/v1/watch/namespaces'
    assert ns.resource_watch_path() == '/api/v1/watch/namespaces/ns1'


def test_core_group_paths_of_a_namespaced_kind():
    pod = Pod().set_name('pod1').set_namespace('ns1')
    assert pod.all_resources_path() == '/api/v1/namespaces/ns1/pods'
    assert pod.resource_path() == '/api/v1/namespaces/ns1/pods/pod1'
    assert pod.all_resources_watch_path() == '/api/v1/watch/pods'
    assert pod.resource_watch_path() == '/api/v1/watch/namespaces/ns1/pods/pod1'


def test_cluster_wide_kinds_cannot_be_namespaced():
    with pytest.raises(TypeError):
        Namespace().set_namespace('ns1')


def test_kindless_resources_have_no_paths():
    with pytest.raises(TypeError):
        Resource().all_resources_path()


def test_serialization():
    pod = Pod(attributes={'metadata': {'name': 'pod1'}, 'spec': {'x': 1}})
    assert pod.to_dict() == {
        'kind': 'Pod',
        'apiVersion': 'v1',
        'metadata': {'name': 'pod1', 'namespace': 'default'},
        'spec': {'x': 1},
    }
    assert json.loads(pod.to_json()) == pod.to_dict()


def test_to_dict_is_a_copy():
    pod = Pod()
    pod.to_dict()['metadata']['name'] = 'pod1'
    assert pod.name is None


def test_malformed_documents_become_empty_resources():
    pod = Pod(attributes=None)
    assert pod.to_dict() == {'kind': 'Pod', 'apiVersion': 'v1', 'metadata': {'namespace': 'default'}}


def test_syncing_and_modifications():
    pod = Pod()
    assert not pod.is_synced
    assert pod.synced() is pod
    assert pod.is_synced
    assert not pod.is_modified

    pod.set_attribute('spec.x', 1)
    assert pod.is_synced
    assert pod.is_modified

    pod.remove_attribute('spec.x')
    assert pod.get_attribute('spec') is None
    assert not pod.is_modified


def test_resource_version():
    pod = Pod(attributes={'metadata': {'resourceVersion': '123'}})
    assert pod.resource_version == '123'


@pytest.mark.parametrize('method', ['get', 'all', 'create', 'replace', 'delete'])
async def test_operations_require_a_cluster(method):
    pod = Pod().set_name('pod1')
    with pytest.raises(ClusterlessResourceError):
        await getattr(pod, method)()


@pytest.mark.parametrize('method', ['watch', 'watch_all'])
async def test_watching_requires_a_cluster(method):
    pod = Pod().set_name('pod1')
    with pytest.raises(ClusterlessResourceError):
        await getattr(pod, method)(lambda type, obj: None)


@pytest.mark.parametrize('metadata', [None, 'garbage', ['a', 'list']])
def test_malformed_metadata_is_replaced_for_namespaced_kinds(metadata):
    pod = Pod(attributes={'metadata': metadata})
    assert pod.to_dict()['metadata'] == {'namespace': 'default'}
    assert pod.namespace == 'default'
    assert pod.name is None


@pytest.mark.parametrize('metadata', [None, 'garbage', ['a', 'list']])
def test_malformed_metadata_is_tolerated_for_cluster_wide_kinds(metadata):
    ns = Namespace(attributes={'metadata': metadata})
    assert ns.name is None
    assert ns.set_name('ns1').name == 'ns1'
