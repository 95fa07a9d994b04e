"""
Authentication dependencies for protected routes.

Provides:
- get_current_user: bearer JWT -> Profile
- get_current_student / get_current_company / get_current_admin: role guards
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mindmatch.schemas.schemas import CompanyProfile, Profile, StudentProfile, UserRole
from mindmatch.services.container import ServiceContainer, get_container

# Bearer token extractor
bearer_scheme = HTTPBearer()


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    container: ServiceContainer = Depends(get_container),
) -> Profile:
    """
    FastAPI dependency - Get current authenticated user's profile.

    Usage:
        @router.get("/protected")
        async def route(user: Profile = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user = container.auth.user_from_token(credentials.credentials)
    if user is None:
        raise credentials_exception

    result = container.profiles.get(user.id)
    if result.error:
        raise HTTPException(status_code=404, detail="Profile not found")
    return result.data


async def get_current_student(
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
) -> StudentProfile:
    """Dependency - Require student role and return the student profile."""
    if user.role != UserRole.student.value:
        raise HTTPException(status_code=403, detail="Students only")

    result = container.profiles.get_student_profile(user.id)
    if result.error:
        raise HTTPException(status_code=404, detail="Student profile not found. Create profile first.")
    return result.data


async def get_current_company(
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
) -> CompanyProfile:
    """Dependency - Require company role and return the company profile."""
    if user.role != UserRole.company.value:
        raise HTTPException(status_code=403, detail="Companies only")

    result = container.profiles.get_company_profile(user.id)
    if result.error:
        raise HTTPException(status_code=404, detail="Company profile not found. Create profile first.")
    return result.data


async def get_current_admin(user: Profile = Depends(get_current_user)) -> Profile:
    """Dependency - Require admin role."""
    if user.role != UserRole.admin.value:
        raise HTTPException(status_code=403, detail="Admins only")
    return user
