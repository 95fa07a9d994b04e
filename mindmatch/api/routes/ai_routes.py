"""
AI Routes

POST /ai/resume - Generate a resume from the caller's student profile
POST /ai/career-suggestions - Five career paths for skills + interests
POST /ai/summarize-resume - Two or three sentence resume summary
POST /ai/job-match - Score own student profile against a job

Every endpoint answers even when the AI provider is down: the advisors
return fixed fallbacks instead of failing.
"""

from fastapi import APIRouter, Depends

from mindmatch.core.auth import get_current_student, get_current_user
from mindmatch.schemas.schemas import (
    CareerSuggestionRequest, JobMatchRequest, MatchAnalysis, Profile,
    ResumeTextRequest, StudentProfile, SuggestionsResponse, TextResponse,
)
from mindmatch.services.container import ServiceContainer, get_container

router = APIRouter(prefix="/ai", tags=["AI Assistance"])


@router.post("/resume", response_model=TextResponse)
async def generate_resume(
    user: Profile = Depends(get_current_user),
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    student_data = {"full_name": user.full_name, "email": user.email, **student.model_dump()}
    return TextResponse(content=container.career.generate_resume(student_data))


@router.post("/career-suggestions", response_model=SuggestionsResponse)
async def career_suggestions(
    request: CareerSuggestionRequest,
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    return SuggestionsResponse(
        suggestions=container.career.get_career_suggestions(request.skills, request.interests)
    )


@router.post("/summarize-resume", response_model=TextResponse)
async def summarize_resume(
    request: ResumeTextRequest,
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    return TextResponse(content=container.career.summarize_resume(request.resume_text))


@router.post("/job-match", response_model=MatchAnalysis)
async def job_match(
    request: JobMatchRequest,
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    """Preview the match score a student would get when applying."""
    job = container.jobs.get_job(request.job_id)
    return container.match_advisor.analyze_match(student.model_dump(), job.model_dump())
