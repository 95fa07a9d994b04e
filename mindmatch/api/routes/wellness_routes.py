"""
Wellness Routes

POST /wellness/mood-logs - Log a mood sample (student)
GET /wellness/mood-logs - Own mood history, oldest first (student)
GET /wellness/summary - Resilience score + latest recommendations (student)
GET /wellness/recommendations - Recommendations for a given sample
POST /wellness/analyze-mood - Sentiment of a free-text note
GET /wellness/alerts - Open alerts (admin)
POST /wellness/alerts/scan/{student_id} - Re-run alert detection (admin)
PUT /wellness/alerts/{alert_id}/resolve - Resolve an alert (admin)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from mindmatch.core.auth import get_current_admin, get_current_student, get_current_user
from mindmatch.schemas.schemas import (
    AlertResolve, MoodLog, MoodLogCreate, MoodTextRequest, Profile,
    RecommendationResponse, SentimentResult, StudentProfile, WellnessAlert,
    WellnessSummary,
)
from mindmatch.services.container import ServiceContainer, get_container
from mindmatch.services.wellness_scorer import generate_wellness_recommendations

router = APIRouter(prefix="/wellness", tags=["Wellness"])


@router.post("/mood-logs", response_model=MoodLog, status_code=201)
async def log_mood(
    data: MoodLogCreate,
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    """Record a mood sample. Alert detection runs right after."""
    return container.wellness.log_mood(student.id, data)


@router.get("/mood-logs", response_model=List[MoodLog])
async def list_mood_logs(
    limit: Optional[int] = Query(None, ge=1, le=365),
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    return container.wellness.list_mood_logs(student.id, limit=limit)


@router.get("/summary", response_model=WellnessSummary)
async def wellness_summary(
    student: StudentProfile = Depends(get_current_student),
    container: ServiceContainer = Depends(get_container),
):
    return container.wellness.get_summary(student.id)


@router.get("/recommendations", response_model=RecommendationResponse)
async def recommendations(
    mood: int = Query(..., ge=1, le=10),
    stress: int = Query(..., ge=1, le=10),
    energy: int = Query(..., ge=1, le=10),
    user: Profile = Depends(get_current_user),
):
    return RecommendationResponse(
        recommendations=generate_wellness_recommendations(mood, stress, energy)
    )


@router.post("/analyze-mood", response_model=SentimentResult)
async def analyze_mood(
    request: MoodTextRequest,
    user: Profile = Depends(get_current_user),
    container: ServiceContainer = Depends(get_container),
):
    """Classify a mood note. Falls back to neutral/0.5 when unavailable."""
    return container.mood_analysis.analyze_mood(request.text)


@router.get("/alerts", response_model=List[WellnessAlert])
async def list_alerts(
    student_id: Optional[str] = None,
    include_resolved: bool = False,
    admin: Profile = Depends(get_current_admin),
    container: ServiceContainer = Depends(get_container),
):
    return container.wellness.list_alerts(student_id=student_id, include_resolved=include_resolved)


@router.post("/alerts/scan/{student_id}", response_model=List[WellnessAlert])
async def scan_alerts(
    student_id: str,
    admin: Profile = Depends(get_current_admin),
    container: ServiceContainer = Depends(get_container),
):
    container.profiles.get_student_profile_by_id(student_id).unwrap()
    return container.wellness.scan_alerts(student_id)


@router.put("/alerts/{alert_id}/resolve", response_model=WellnessAlert)
async def resolve_alert(
    alert_id: str,
    data: AlertResolve,
    admin: Profile = Depends(get_current_admin),
    container: ServiceContainer = Depends(get_container),
):
    return container.wellness.resolve_alert(alert_id, admin.id, data.resolution_notes)
