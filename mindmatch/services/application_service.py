"""
Application Service - student applications to published jobs.

Status machine:
    applied -> screening -> shortlisted -> interviewed -> selected | rejected
    withdrawn from any non-terminal state
selected, rejected and withdrawn are terminal.

At most one application per (job, student): the record store enforces it.
"""

import logging
from typing import List, Optional

from mindmatch.core.errors import AlreadyExistsError, ForbiddenError, InvalidTransitionError
from mindmatch.db.stores import RecordStore
from mindmatch.schemas.schemas import (
    Application,
    ApplicationCreate,
    ApplicationStatus,
    JobStatus,
    StudentProfile,
)
from mindmatch.services.ai_advisors import JobMatchAdvisor
from mindmatch.services.job_service import JobService

logger = logging.getLogger(__name__)

S = ApplicationStatus

APPLICATION_TRANSITIONS = {
    S.applied.value: {S.screening.value, S.withdrawn.value},
    S.screening.value: {S.shortlisted.value, S.withdrawn.value},
    S.shortlisted.value: {S.interviewed.value, S.withdrawn.value},
    S.interviewed.value: {S.selected.value, S.rejected.value, S.withdrawn.value},
    S.selected.value: set(),
    S.rejected.value: set(),
    S.withdrawn.value: set(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in APPLICATION_TRANSITIONS.items() if not targets
)


def can_transition(current: str, target: str) -> bool:
    return target in APPLICATION_TRANSITIONS.get(current, set())


class ApplicationService:

    def __init__(self, applications: RecordStore, jobs: JobService, advisor: JobMatchAdvisor):
        self.applications = applications
        self.jobs = jobs
        self.advisor = advisor

    def apply(self, job_id: str, student: StudentProfile, data: ApplicationCreate) -> Application:
        job = self.jobs.get_job(job_id)
        if job.status != JobStatus.published.value:
            raise InvalidTransitionError("Applications are only accepted for published jobs")
        # Checked up front to skip the match call; the store still enforces uniqueness
        if self.applications.find_one(job_id=job_id, student_id=student.id):
            raise AlreadyExistsError("You have already applied to this job")

        match = self.advisor.analyze_match(
            student.model_dump(exclude={"created_at", "updated_at"}),
            job.model_dump(exclude={"view_count", "application_count", "created_at", "updated_at"}),
        )
        row = self.applications.insert({
            "job_id": job_id,
            "student_id": student.id,
            "status": S.applied,
            "ai_match_score": match.score,
            **data.model_dump(),
        })
        self.jobs.increment(job_id, "application_count")
        logger.info("Student %s applied to job %s (match %d)", student.id, job_id, match.score)
        return Application.model_validate(row)

    def get_application(self, application_id: str) -> Application:
        return Application.model_validate(self.applications.get(application_id))

    def list_for_student(self, student_id: str) -> List[Application]:
        rows = self.applications.find(student_id=student_id, order_by="applied_at", descending=True)
        return [Application.model_validate(row) for row in rows]

    def list_for_job(self, job_id: str) -> List[Application]:
        rows = self.applications.find(job_id=job_id, order_by="ai_match_score", descending=True)
        return [Application.model_validate(row) for row in rows]

    def change_status(
        self,
        application_id: str,
        status: ApplicationStatus,
        rejection_reason: Optional[str] = None,
        feedback: Optional[str] = None,
    ) -> Application:
        application = self.get_application(application_id)
        target = ApplicationStatus(status).value
        if not can_transition(application.status, target):
            raise InvalidTransitionError(
                f"Cannot move application from {application.status} to {target}"
            )

        changes = {"status": target}
        if rejection_reason is not None:
            changes["rejection_reason"] = rejection_reason
        if feedback is not None:
            changes["feedback"] = feedback
        row = self.applications.update(application_id, changes)

        if target == S.selected.value:
            self.jobs.increment(application.job_id, "filled_positions")
        logger.info("Application %s: %s -> %s", application_id, application.status, target)
        return Application.model_validate(row)

    def withdraw(self, application_id: str, student_id: str) -> Application:
        application = self.get_application(application_id)
        if application.student_id != student_id:
            raise ForbiddenError("Not your application")
        return self.change_status(application_id, S.withdrawn)
