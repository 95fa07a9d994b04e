"""
Application Routes

GET /applications/me - My applications (student)
PUT /applications/{application_id}/status - Move through the pipeline (owning company; not withdraw)
POST /applications/{application_id}/withdraw - Withdraw (student)
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException

from mindmatch.core.auth import get_current_company, get_current_student
from mindmatch.schemas.schemas import (
    Application, ApplicationStatus, ApplicationStatusUpdate, CompanyProfile, StudentProfile,
)
from mindmatch.services.container import ServiceContainer, get_container

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get("/me", response_model=List[Application])
async def my_applications(
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    return container.applications.list_for_student(student.id)


@router.put("/{application_id}/status", response_model=Application)
async def update_application_status(
    application_id: str,
    data: ApplicationStatusUpdate,
    company: CompanyProfile = Depends(get_current_company),
    container: ServiceContainer = Depends(get_container),
):
    if data.status == ApplicationStatus.withdrawn:
        raise HTTPException(status_code=403, detail="Only the student can withdraw an application")
    application = container.applications.get_application(application_id)
    job = container.jobs.get_job(application.job_id)
    if job.company_id != company.id:
        raise HTTPException(status_code=403, detail="Not your job posting")
    return container.applications.change_status(
        application_id, data.status,
        rejection_reason=data.rejection_reason, feedback=data.feedback,
    )


@router.post("/{application_id}/withdraw", response_model=Application)
async def withdraw_application(
    application_id: str,
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    return container.applications.withdraw(application_id, student.id)
