import datetime

import pytest

from kubewire.kinds.jobs import Job


def test_defaults_of_a_local_job():
    job = Job()
    assert job.to_dict() == {
        'kind': 'Job',
        'apiVersion': 'batch/v1',
        'metadata': {'namespace': 'default'},
    }
    assert job.namespace == 'default'
    assert job.name is None
    assert not job.is_synced


def test_explicit_attributes_are_kept():
    job = Job(attributes={'apiVersion': 'batch/v2', 'metadata': {'name': 'j1', 'namespace': 'ns1'}})
    assert job.api_version == 'batch/v2'
    assert job.name == 'j1'
    assert job.namespace == 'ns1'


def test_attributes_are_copied():
    attributes = {'metadata': {'name': 'j1'}}
    job = Job(attributes=attributes)
    job.set_label('a', 'b')
    assert attributes == {'metadata': {'name': 'j1'}}


def test_ttl():
    job = Job().set_ttl()
    assert job.get_spec('ttlSecondsAfterFinished') == 100
    job.set_ttl(5)
    assert job.get_spec('ttlSecondsAfterFinished') == 5


def test_pods_selector():
    job = Job().set_name('j1')
    assert job.pods_selector() == {'job-name': 'j1'}


def test_pod_counters_of_a_new_job():
    job = Job()
    assert job.get_active_pods_count() == 0
    assert job.get_failed_pods_count() == 0
    assert job.get_succeeded_pods_count() == 0
    assert job.has_completed()


def test_pod_counters_of_a_running_job():
    job = Job(attributes={'status': {'active': 2, 'failed': 1, 'succeeded': 3}})
    assert job.get_active_pods_count() == 2
    assert job.get_failed_pods_count() == 1
    assert job.get_succeeded_pods_count() == 3
    assert not job.has_completed()


def test_times_and_duration_of_a_finished_job():
    job = Job(attributes={'status': {
        'startTime': '2020-12-31T23:59:00Z',
        'completionTime': '2021-01-01T00:01:30Z',
    }})
    assert job.get_start_time() == datetime.datetime(2020, 12, 31, 23, 59, 0, tzinfo=datetime.timezone.utc)
    assert job.get_completion_time() == datetime.datetime(2021, 1, 1, 0, 1, 30, tzinfo=datetime.timezone.utc)
    assert job.get_duration_in_seconds() == 150


@pytest.mark.parametrize('status', [
    {},
    {'startTime': '2020-12-31T23:59:00Z'},
    {'completionTime': '2021-01-01T00:01:30Z'},
])
def test_duration_of_an_unfinished_job(status):
    job = Job(attributes={'status': status})
    assert job.get_duration_in_seconds() == 0


def test_times_of_a_new_job():
    job = Job()
    assert job.get_start_time() is None
    assert job.get_completion_time() is None


def test_paths():
    job = Job(attributes={'metadata': {'name': 'j1', 'namespace': 'ns1'}})
    assert job.all_resources_path() == '/apis/batch/v1/namespaces/ns1/jobs'
    assert job.resource_path() == '/apis/batch/v1/namespaces/ns1/jobs/j1'
    assert job.all_resources_watch_path() == '/apis/batch/v1/watch/jobs'
    assert job.resource_watch_path() == '/apis/batch/v1/watch/namespaces/ns1/jobs/j1'


def test_labels_and_annotations():
    job = Job()
    job.set_labels({'a': 'b'})
    job.set_label('c', 'd')
    job.set_annotation('example.com/note', 'hello')
    assert job.get_labels() == {'a': 'b', 'c': 'd'}
    assert job.get_label('c') == 'd'
    assert job.get_label('x', 'y') == 'y'
    assert job.get_annotations() == {'example.com/note': 'hello'}
    assert job.get_annotation('example.com/note') == 'hello'
