"""
Job Service - job postings and their status lifecycle.

    draft -> published -> closed | paused
    paused -> published | closed

Counters (view_count, application_count, filled_positions) only ever grow.
"""

import logging
from typing import List, Optional

from mindmatch.core.errors import InvalidTransitionError, ValidationError
from mindmatch.db.stores import RecordStore
from mindmatch.schemas.schemas import JobCreate, JobPosting, JobStatus

logger = logging.getLogger(__name__)

JOB_TRANSITIONS = {
    JobStatus.draft.value: {JobStatus.published.value},
    JobStatus.published.value: {JobStatus.closed.value, JobStatus.paused.value},
    JobStatus.paused.value: {JobStatus.published.value, JobStatus.closed.value},
    JobStatus.closed.value: set(),
}

COUNTERS = ("view_count", "application_count", "filled_positions")


class JobService:

    def __init__(self, jobs: RecordStore):
        self.jobs = jobs

    def create_job(self, company_id: str, data: JobCreate) -> JobPosting:
        if data.salary_max and data.salary_max < data.salary_min:
            raise ValidationError("salary_max must not be below salary_min")
        row = self.jobs.insert({
            "company_id": company_id,
            **data.model_dump(),
            "status": JobStatus.draft,
            "filled_positions": 0,
            "view_count": 0,
            "application_count": 0,
        })
        return JobPosting.model_validate(row)

    def get_job(self, job_id: str) -> JobPosting:
        return JobPosting.model_validate(self.jobs.get(job_id))

    def list_jobs(self, status: Optional[JobStatus] = JobStatus.published, company_id: Optional[str] = None) -> List[JobPosting]:
        filters = {}
        if status is not None:
            filters["status"] = status
        if company_id is not None:
            filters["company_id"] = company_id
        rows = self.jobs.find(order_by="created_at", descending=True, **filters)
        return [JobPosting.model_validate(row) for row in rows]

    def change_status(self, job_id: str, status: JobStatus) -> JobPosting:
        job = self.get_job(job_id)
        target = JobStatus(status).value
        if target not in JOB_TRANSITIONS[job.status]:
            raise InvalidTransitionError(f"Cannot move job from {job.status} to {target}")
        logger.info("Job %s: %s -> %s", job_id, job.status, target)
        return JobPosting.model_validate(self.jobs.update(job_id, {"status": target}))

    def increment(self, job_id: str, counter: str, amount: int = 1) -> JobPosting:
        if counter not in COUNTERS or amount < 0:
            raise ValidationError(f"Invalid counter change: {counter} {amount:+d}")
        job = self.get_job(job_id)
        row = self.jobs.update(job_id, {counter: getattr(job, counter) + amount})
        return JobPosting.model_validate(row)

    def record_view(self, job_id: str) -> JobPosting:
        return self.increment(job_id, "view_count")
