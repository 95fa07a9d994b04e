"""
Profile Routes

GET /profiles/{user_id} - Get a base profile
POST /profiles/student - Create student profile (if not created at sign-up)
GET /profiles/student - Get own student profile
PUT /profiles/student - Update own student profile
POST /profiles/company - Create company profile (if not created at sign-up)
GET /profiles/company - Get own company profile
PUT /profiles/company - Update own company profile
PUT /profiles/company/{company_profile_id}/verification - Verify/reject (admin)
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from mindmatch.core.auth import (
    get_current_admin, get_current_company, get_current_student, get_current_user,
)
from mindmatch.core.errors import Result
from mindmatch.schemas.schemas import (
    CompanyProfile, CompanyProfileUpdate, Profile, StudentProfile,
    StudentProfileUpdate, UserRole, VerificationUpdate,
)
from mindmatch.services.container import ServiceContainer, get_container

router = APIRouter(prefix="/profiles", tags=["Profiles"])


def _unwrap(result: Result):
    if result.error:
        raise HTTPException(status_code=result.error.status_code, detail=result.error.message)
    return result.data


@router.post("/student", response_model=StudentProfile, status_code=201)
async def create_student_profile(
    college_name: str = Query(..., min_length=1),
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    """Create student profile. User must be registered as student."""
    if user.role != UserRole.student.value:
        raise HTTPException(status_code=403, detail="Only student accounts can create student profiles")
    return _unwrap(container.profiles.create_student_profile(user.id, college_name))


@router.get("/student", response_model=StudentProfile)
async def get_student_profile(student: StudentProfile = Depends(get_current_student)):
    return student


@router.put("/student", response_model=StudentProfile)
async def update_student_profile(
    data: StudentProfileUpdate,
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    """Update student profile. Only provided fields are updated."""
    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    return _unwrap(container.profiles.update_student_profile(student.user_id, fields))


@router.post("/company", response_model=CompanyProfile, status_code=201)
async def create_company_profile(
    company_name: str = Query(..., min_length=1),
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    """Create company profile. User must be registered as company."""
    if user.role != UserRole.company.value:
        raise HTTPException(status_code=403, detail="Only company accounts can create company profiles")
    return _unwrap(container.profiles.create_company_profile(user.id, company_name))


@router.get("/company", response_model=CompanyProfile)
async def get_company_profile(company: CompanyProfile = Depends(get_current_company)):
    return company


@router.put("/company", response_model=CompanyProfile)
async def update_company_profile(
    data: CompanyProfileUpdate,
    company: CompanyProfile = Depends(get_current_company),
    container: ServiceContainer = Depends(get_container),
):
    """Update company profile. Verification status is admin-only."""
    fields = data.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    return _unwrap(container.profiles.update_company_profile(company.user_id, fields))


@router.put("/company/{company_profile_id}/verification", response_model=CompanyProfile)
async def set_company_verification(
    company_profile_id: str,
    data: VerificationUpdate,
    admin: Profile = Depends(get_current_admin),
    container: ServiceContainer = Depends(get_container),
):
    return _unwrap(container.profiles.set_verification_status(company_profile_id, data.status))


@router.get("/{user_id}", response_model=Profile)
async def get_profile(
    user_id: str,
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    return _unwrap(container.profiles.get(user_id))
