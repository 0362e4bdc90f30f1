import datetime
from typing import Dict, Optional

import iso8601

from kubewire.kinds import base, traits


class Job(base.Resource, traits.HasLabels, traits.HasAnnotations, traits.HasSpec, traits.HasStatus):
    kind = 'Job'
    default_version = 'batch/v1'
    plural = 'jobs'
    namespaceable = True

    def set_ttl(self, ttl: int = 100) -> "Job":
        """ Set for how long the finished job remains available, in seconds. """
        return self.set_spec('ttlSecondsAfterFinished', ttl)

    def pods_selector(self) -> Dict[str, str]:
        """ The labels of the pods owned by this job. """
        return {'job-name': self.name or ''}

    def get_active_pods_count(self) -> int:
        return self.get_status('active', 0)

    def get_failed_pods_count(self) -> int:
        return self.get_status('failed', 0)

    def get_succeeded_pods_count(self) -> int:
        return self.get_status('succeeded', 0)

    def get_start_time(self) -> Optional[datetime.datetime]:
        time = self.get_status('startTime')
        return iso8601.parse_date(time) if time else None

    def get_completion_time(self) -> Optional[datetime.datetime]:
        time = self.get_status('completionTime')
        return iso8601.parse_date(time) if time else None

    def get_duration_in_seconds(self) -> int:
        """ The total run time, or zero if the job is not finished (or not started). """
        start_time = self.get_start_time()
        completion_time = self.get_completion_time()
        if start_time is None or completion_time is None:
            return 0
        return int((completion_time - start_time).total_seconds())

    def has_completed(self) -> bool:
        # Mind that a not yet started job has no active pods either.
        return self.get_active_pods_count() == 0
