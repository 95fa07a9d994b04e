"""
Authentication Routes

POST /auth/register - Register new user (creates profile + role profile)
POST /auth/login - Login and get JWT token
POST /auth/logout - Revoke the presented token
POST /auth/refresh - Swap the presented token for a fresh one
GET /auth/me - Get current user's profile
PATCH /auth/me - Update current user's profile
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from mindmatch.core.auth import bearer_scheme, get_current_user
from mindmatch.core.errors import Result
from mindmatch.schemas.schemas import (
    AuthResponse, LoginRequest, MessageResponse, Profile, ProfileUpdate,
    RegisterRequest, SignUpData, TokenResponse,
)
from mindmatch.services.container import ServiceContainer, get_container

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _raise_for(result: Result) -> None:
    if result.error:
        raise HTTPException(status_code=result.error.status_code, detail=result.error.message)


def _token(auth: AuthResponse) -> TokenResponse:
    return TokenResponse(
        access_token=auth.session.access_token,
        expires_at=auth.session.expires_at,
        user_id=auth.user.id,
        role=auth.user.role,
    )


@router.post("/register", response_model=TokenResponse, status_code=201)
async def register(request: RegisterRequest, container: ServiceContainer = Depends(get_container)):
    """
    Register a new user account.

    Students may pass college_name and companies company_name to get their
    role profile created straight away.
    """
    result = container.auth.request_scope().sign_up(
        request.email,
        request.password,
        SignUpData(**request.model_dump(exclude={"email", "password"})),
    )
    _raise_for(result)
    return _token(result.data)


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, container: ServiceContainer = Depends(get_container)):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    result = container.auth.request_scope().sign_in(request.email, request.password)
    _raise_for(result)
    return _token(result.data)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    """Revoke the caller's token. Other sessions of the same user stay valid."""
    container.auth.revoke_token(credentials.credentials)
    return MessageResponse(message="Signed out")


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    """Issue a new token for the caller and revoke the one presented."""
    result = container.auth.refresh_token(credentials.credentials)
    _raise_for(result)
    session = result.data
    return TokenResponse(
        access_token=session.access_token,
        expires_at=session.expires_at,
        user_id=session.user.id,
        role=session.user.role,
    )


@router.get("/me", response_model=Profile)
async def get_me(user: Profile = Depends(get_current_user)):
    """Get current authenticated user's profile."""
    return user


@router.patch("/me", response_model=Profile)
async def update_me(
    updates: ProfileUpdate,
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    """Update own profile. Only provided fields are updated."""
    fields = updates.model_dump(exclude_unset=True)
    if not fields:
        raise HTTPException(status_code=400, detail="No fields to update")
    result = container.auth.request_scope().update_profile(user.id, fields)
    _raise_for(result)
    return result.data
