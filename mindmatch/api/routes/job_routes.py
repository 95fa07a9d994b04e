"""
Job Routes

POST /jobs - Create job posting as draft (company only)
GET /jobs - List published jobs (or own jobs with mine=true)
GET /jobs/{job_id} - Get job details (counts a view)
PUT /jobs/{job_id}/status - Publish / pause / close (owning company)
POST /jobs/{job_id}/apply - Apply to job (student only)
GET /jobs/{job_id}/applications - Applications for a job (owning company)
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query

from mindmatch.core.auth import get_current_company, get_current_student, get_current_user
from mindmatch.schemas.schemas import (
    Application, ApplicationCreate, CompanyProfile, JobCreate, JobPosting,
    JobStatusUpdate, Profile, StudentProfile,
)
from mindmatch.services.container import ServiceContainer, get_container

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def _owned_job(job_id: str, company: CompanyProfile, container: ServiceContainer) -> JobPosting:
    job = container.jobs.get_job(job_id)
    if job.company_id != company.id:
        raise HTTPException(status_code=403, detail="Not your job posting")
    return job


@router.post("", response_model=JobPosting, status_code=201)
async def create_job(
    job: JobCreate,
    company: CompanyProfile = Depends(get_current_company),
    container: ServiceContainer = Depends(get_container),
):
    """Create a new job posting. It starts as a draft until published."""
    return container.jobs.create_job(company.id, job)


@router.get("", response_model=List[JobPosting])
async def list_jobs(
    mine: bool = Query(False, description="Companies: list own postings in every status"),
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    if mine:
        result = container.profiles.get_company_profile(user.id)
        if result.error:
            raise HTTPException(status_code=403, detail="Companies only")
        return container.jobs.list_jobs(status=None, company_id=result.data.id)
    return container.jobs.list_jobs()


@router.get("/{job_id}", response_model=JobPosting)
async def get_job(
    job_id: str,
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    return container.jobs.record_view(job_id)


@router.put("/{job_id}/status", response_model=JobPosting)
async def change_job_status(
    job_id: str,
    data: JobStatusUpdate,
    company: CompanyProfile = Depends(get_current_company),
    container: ServiceContainer = Depends(get_container),
):
    _owned_job(job_id, company, container)
    return container.jobs.change_status(job_id, data.status)


@router.post("/{job_id}/apply", response_model=Application, status_code=201)
async def apply_to_job(
    job_id: str,
    data: ApplicationCreate,
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    """Apply to a published job. The AI match score is computed on the way in."""
    return container.applications.apply(job_id, student, data)


@router.get("/{job_id}/applications", response_model=List[Application])
async def list_job_applications(
    job_id: str,
    company: CompanyProfile = Depends(get_current_company),
    container: ServiceContainer = Depends(get_container),
):
    _owned_job(job_id, company, container)
    return container.applications.list_for_job(job_id)
