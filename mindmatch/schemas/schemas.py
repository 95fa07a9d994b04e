"""
Pydantic Schemas - Data records, request/response validation

Record models (Profile, StudentProfile, ...) validate rows coming out of the
record stores; *Create / *Update models validate what the API accepts.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from typing import Optional, List, Dict, Any
from datetime import date, datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    company = "company"
    admin = "admin"


class ExperienceLevel(str, Enum):
    entry = "entry"
    mid = "mid"
    senior = "senior"


class CompanySize(str, Enum):
    startup = "startup"
    small = "small"
    medium = "medium"
    large = "large"
    enterprise = "enterprise"


class VerificationStatus(str, Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"


class JobType(str, Enum):
    full_time = "full-time"
    part_time = "part-time"
    internship = "internship"
    contract = "contract"


class JobStatus(str, Enum):
    draft = "draft"
    published = "published"
    closed = "closed"
    paused = "paused"


class WorkMode(str, Enum):
    office = "office"
    remote = "remote"
    hybrid = "hybrid"


class ApplicationStatus(str, Enum):
    applied = "applied"
    screening = "screening"
    shortlisted = "shortlisted"
    interviewed = "interviewed"
    selected = "selected"
    rejected = "rejected"
    withdrawn = "withdrawn"


class AlertType(str, Enum):
    low_mood = "low_mood"
    high_stress = "high_stress"
    declining_trend = "declining_trend"
    no_activity = "no_activity"


class AlertSeverity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"
    critical = "critical"


class AuthEvent(str, Enum):
    signed_in = "SIGNED_IN"
    signed_out = "SIGNED_OUT"
    token_refreshed = "TOKEN_REFRESHED"
    user_updated = "USER_UPDATED"


# ============================================================
# RECORDS
# ============================================================

class Record(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # NULL columns fall back to the field default
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class Profile(Record):
    id: str
    email: str
    full_name: str
    role: UserRole
    phone: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class StudentProfile(Record):
    id: str
    user_id: str
    college_name: str
    student_id: Optional[str] = None
    degree: str = ""
    specialization: Optional[str] = ""
    graduation_year: int
    cgpa: float = 0
    skills: List[str] = []
    certifications: List[str] = []
    languages: List[str] = []
    resume_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    experience_level: ExperienceLevel = ExperienceLevel.entry
    preferred_locations: List[str] = []
    expected_salary_min: int = 0
    expected_salary_max: int = 0
    job_preferences: Dict[str, Any] = {}
    created_at: datetime
    updated_at: datetime


class CompanyProfile(Record):
    id: str
    user_id: str
    company_name: str
    company_description: Optional[str] = ""
    website_url: Optional[str] = None
    industry: str = ""
    company_size: CompanySize = CompanySize.startup
    headquarters_location: Optional[str] = ""
    founded_year: Optional[int] = None
    logo_url: Optional[str] = None
    verification_status: VerificationStatus = VerificationStatus.pending
    created_at: datetime
    updated_at: datetime


class JobPosting(Record):
    id: str
    company_id: str
    title: str
    description: str
    requirements: List[str] = []
    skills_required: List[str] = []
    experience_level: ExperienceLevel = ExperienceLevel.entry
    job_type: JobType = JobType.full_time
    location: str
    is_remote: bool = False
    salary_min: int = 0
    salary_max: int = 0
    currency: str = "INR"
    application_deadline: Optional[date] = None
    status: JobStatus = JobStatus.draft
    benefits: List[str] = []
    work_mode: WorkMode = WorkMode.office
    total_positions: int = 1
    filled_positions: int = 0
    view_count: int = 0
    application_count: int = 0
    created_at: datetime
    updated_at: datetime


class Application(Record):
    id: str
    job_id: str
    student_id: str
    status: ApplicationStatus = ApplicationStatus.applied
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    application_source: str = "platform"
    ai_match_score: int = Field(0, ge=0, le=100)
    rejection_reason: Optional[str] = None
    feedback: Optional[str] = None
    applied_at: datetime
    updated_at: datetime


class MoodLog(Record):
    id: str
    student_id: str
    mood_score: int = Field(..., ge=1, le=10)
    stress_level: int = Field(..., ge=1, le=10)
    energy_level: int = Field(..., ge=1, le=10)
    confidence_level: int = Field(5, ge=1, le=10)
    notes: Optional[str] = None
    factors: List[str] = []
    logged_at: datetime


class WellnessAlert(Record):
    id: str
    student_id: str
    alert_type: AlertType
    severity: AlertSeverity = AlertSeverity.medium
    message: str
    triggered_at: datetime
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    resolution_notes: Optional[str] = None
    is_resolved: bool = False


# ============================================================
# AUTH SCHEMAS
# ============================================================

class User(BaseModel):
    id: str
    email: str
    user_metadata: Dict[str, Any] = {}
    created_at: datetime
    updated_at: datetime

    @property
    def role(self) -> Optional[str]:
        return self.user_metadata.get("role")


class Session(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user: User


class AuthResponse(BaseModel):
    user: User
    session: Session


class SignUpData(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=200)
    role: UserRole
    college_name: Optional[str] = None
    company_name: Optional[str] = None


class RegisterRequest(SignUpData):
    email: EmailStr
    password: str = Field(..., min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_at: datetime
    user_id: str
    role: Optional[str] = None


class ProfileUpdate(BaseModel):
    full_name: Optional[str] = Field(None, min_length=1, max_length=200)
    phone: Optional[str] = None
    avatar_url: Optional[str] = None


# ============================================================
# STUDENT / COMPANY SCHEMAS
# ============================================================

class StudentProfileUpdate(BaseModel):
    college_name: Optional[str] = None
    student_id: Optional[str] = None
    degree: Optional[str] = None
    specialization: Optional[str] = None
    graduation_year: Optional[int] = Field(None, ge=1950, le=2100)
    cgpa: Optional[float] = Field(None, ge=0, le=10)
    skills: Optional[List[str]] = None
    certifications: Optional[List[str]] = None
    languages: Optional[List[str]] = None
    resume_url: Optional[str] = None
    portfolio_url: Optional[str] = None
    linkedin_url: Optional[str] = None
    github_url: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    preferred_locations: Optional[List[str]] = None
    expected_salary_min: Optional[int] = Field(None, ge=0)
    expected_salary_max: Optional[int] = Field(None, ge=0)
    job_preferences: Optional[Dict[str, Any]] = None


class CompanyProfileUpdate(BaseModel):
    company_name: Optional[str] = Field(None, min_length=1, max_length=200)
    company_description: Optional[str] = None
    website_url: Optional[str] = None
    industry: Optional[str] = None
    company_size: Optional[CompanySize] = None
    headquarters_location: Optional[str] = None
    founded_year: Optional[int] = Field(None, ge=1800, le=2100)
    logo_url: Optional[str] = None


class VerificationUpdate(BaseModel):
    status: VerificationStatus


# ============================================================
# JOB / APPLICATION SCHEMAS
# ============================================================

class JobCreate(BaseModel):
    title: str = Field(..., min_length=3, max_length=200)
    description: str = Field(..., min_length=1)
    requirements: List[str] = []
    skills_required: List[str] = []
    experience_level: ExperienceLevel = ExperienceLevel.entry
    job_type: JobType = JobType.full_time
    location: str
    is_remote: bool = False
    salary_min: int = Field(0, ge=0)
    salary_max: int = Field(0, ge=0)
    currency: str = "INR"
    application_deadline: Optional[date] = None
    benefits: List[str] = []
    work_mode: WorkMode = WorkMode.office
    total_positions: int = Field(1, ge=1)


class JobStatusUpdate(BaseModel):
    status: JobStatus


class ApplicationCreate(BaseModel):
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None
    application_source: str = "platform"


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    rejection_reason: Optional[str] = None
    feedback: Optional[str] = None


# ============================================================
# WELLNESS SCHEMAS
# ============================================================

class MoodLogCreate(BaseModel):
    mood_score: int = Field(..., ge=1, le=10)
    stress_level: int = Field(..., ge=1, le=10)
    energy_level: int = Field(..., ge=1, le=10)
    confidence_level: int = Field(5, ge=1, le=10)
    notes: Optional[str] = None
    factors: List[str] = []


class WellnessSummary(BaseModel):
    student_id: str
    resilience_score: int
    log_count: int
    latest: Optional[MoodLog] = None
    recommendations: List[str] = []


class RecommendationResponse(BaseModel):
    recommendations: List[str]


class AlertResolve(BaseModel):
    resolution_notes: Optional[str] = None


class MoodTextRequest(BaseModel):
    text: str


# ============================================================
# AI SCHEMAS
# ============================================================

class MatchAnalysis(BaseModel):
    score: int = Field(..., ge=0, le=100)
    reasons: List[str]


class SentimentResult(BaseModel):
    sentiment: str
    confidence: float


class JobMatchRequest(BaseModel):
    job_id: str


class CareerSuggestionRequest(BaseModel):
    skills: List[str] = []
    interests: List[str] = []


class ResumeTextRequest(BaseModel):
    resume_text: str = Field(..., min_length=1)


class TextResponse(BaseModel):
    content: str


class SuggestionsResponse(BaseModel):
    suggestions: List[str]


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class MessageResponse(BaseModel):
    message: str
    success: bool = True


class ErrorResponse(BaseModel):
    detail: str
    success: bool = False
