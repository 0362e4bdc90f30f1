import pytest

from kubewire.clients.errors import APINotFoundError
from kubewire.kinds.jobs import Job
from kubewire.structs.lists import ResourceList

JOBS = '/apis/batch/v1/namespaces/ns1/jobs'


@pytest.fixture()
def job(cluster):
    return Job(cluster, {'metadata': {'name': 'j1', 'namespace': 'ns1'}})


async def test_creating(fake_api, job):
    fake_api.add('post', JOBS, json={'metadata': {'name': 'j1', 'namespace': 'ns1', 'uid': 'u1'}},
                 status=201)

    created = await job.create()

    assert isinstance(created, Job)
    assert created is not job
    assert created.is_synced
    assert not job.is_synced
    assert created.get_attribute('metadata.uid') == 'u1'
    assert created.cluster is job.cluster
    assert fake_api.requests[0].method == 'POST'
    assert fake_api.requests[0].query == {'pretty': '1'}
    assert fake_api.requests[0].data == job.to_dict()


async def test_getting(fake_api, job):
    fake_api.add('get', f'{JOBS}/j1', json={'metadata': {'name': 'j1'}, 'status': {'active': 1}})

    fetched = await job.get()

    assert isinstance(fetched, Job)
    assert fetched.is_synced
    assert fetched.get_active_pods_count() == 1
    assert fake_api.requests[0].body == b''


async def test_getting_with_a_query(fake_api, job):
    fake_api.add('get', f'{JOBS}/j1', json={})
    await job.get(query={'exact': 'true'})
    assert fake_api.requests[0].query == {'exact': 'true'}


async def test_getting_all(fake_api, job):
    fake_api.add('get', JOBS, json={
        'kind': 'JobList',
        'apiVersion': 'batch/v1',
        'metadata': {'resourceVersion': '100'},
        'items': [{'metadata': {'name': 'j1'}}, {'metadata': {'name': 'j2'}}],
    })

    jobs = await job.all()

    assert isinstance(jobs, ResourceList)
    assert [j.name for j in jobs] == ['j1', 'j2']
    assert all(j.is_synced for j in jobs)
    assert all(j.to_dict()['kind'] == 'Job' for j in jobs)
    assert jobs.resource_version == '100'


async def test_replacing(fake_api, job):
    job.set_ttl(10)
    fake_api.add('put', f'{JOBS}/j1', json=job.to_dict())

    replaced = await job.replace()

    assert replaced.is_synced
    assert replaced.get_spec('ttlSecondsAfterFinished') == 10
    assert fake_api.requests[0].method == 'PUT'
    assert fake_api.requests[0].data['spec'] == {'ttlSecondsAfterFinished': 10}


async def test_deleting(fake_api, job):
    fake_api.add('delete', f'{JOBS}/j1', json={'kind': 'Status', 'status': 'Success'})

    await job.delete()

    assert fake_api.requests[0].method == 'DELETE'


async def test_deleting_an_absent_job(fake_api, job):
    fake_api.add('delete', f'{JOBS}/j1', json={'message': 'not found'}, status=404)

    with pytest.raises(APINotFoundError) as err:
        await job.delete()

    assert err.value.message == 'not found'


async def test_watching_one_job(fake_api, job):
    fake_api.add_stream('/apis/batch/v1/watch/namespaces/ns1/jobs/j1', [
        {'type': 'ADDED', 'object': {'metadata': {'name': 'j1'}}},
        {'type': 'MODIFIED', 'object': {'metadata': {'name': 'j1'}, 'status': {'succeeded': 1}}},
    ])

    seen = []

    def callback(type, obj):
        seen.append((type, obj))
        return obj if obj.get_succeeded_pods_count() else None

    result = await job.watch(callback)

    assert [t for t, _ in seen] == ['ADDED', 'MODIFIED']
    assert isinstance(result, Job)
    assert result.get_succeeded_pods_count() == 1
    assert not result.is_synced


async def test_watching_all_jobs_till_the_end(fake_api, job):
    fake_api.add_stream('/apis/batch/v1/watch/jobs', [
        {'type': 'ADDED', 'object': {'metadata': {'name': 'j1'}}},
        {'type': 'ADDED', 'object': {'metadata': {'name': 'j2'}}},
    ])

    names = []

    async def callback(type, obj):
        names.append(obj.name)

    result = await job.watch_all(callback)

    assert result is False
    assert names == ['j1', 'j2']
