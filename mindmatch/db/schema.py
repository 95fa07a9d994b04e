"""
Table definitions for the relational store.

Each TableSpec tells the record stores which columns exist, which hold JSON
(lists / maps), which column groups are unique, and which timestamps to
stamp. The DDL below is plain SQL that runs on Postgres (Supabase) and on
SQLite, which the test-suite uses for the SQL backend.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine


@dataclass(frozen=True)
class TableSpec:
    name: str
    columns: Tuple[str, ...]
    json_columns: FrozenSet[str] = frozenset()
    unique: Tuple[Tuple[str, ...], ...] = ()
    created_field: Optional[str] = "created_at"
    updated_field: Optional[str] = "updated_at"
    immutable: FrozenSet[str] = frozenset({"id"})
    append_only: bool = False


USERS = TableSpec(
    name="users",
    columns=("id", "email", "password_hash", "user_metadata", "created_at", "updated_at"),
    json_columns=frozenset({"user_metadata"}),
    unique=(("email",),),
    immutable=frozenset({"id", "created_at"}),
)

PROFILES = TableSpec(
    name="profiles",
    columns=("id", "email", "full_name", "role", "phone", "avatar_url", "created_at", "updated_at"),
    unique=(("email",),),
    immutable=frozenset({"id", "role", "created_at"}),
)

STUDENT_PROFILES = TableSpec(
    name="student_profiles",
    columns=(
        "id", "user_id", "college_name", "student_id", "degree", "specialization",
        "graduation_year", "cgpa", "skills", "certifications", "languages",
        "resume_url", "portfolio_url", "linkedin_url", "github_url", "experience_level",
        "preferred_locations", "expected_salary_min", "expected_salary_max",
        "job_preferences", "created_at", "updated_at",
    ),
    json_columns=frozenset({
        "skills", "certifications", "languages", "preferred_locations", "job_preferences",
    }),
    unique=(("user_id",),),
    immutable=frozenset({"id", "user_id", "created_at"}),
)

COMPANY_PROFILES = TableSpec(
    name="company_profiles",
    columns=(
        "id", "user_id", "company_name", "company_description", "website_url", "industry",
        "company_size", "headquarters_location", "founded_year", "logo_url",
        "verification_status", "created_at", "updated_at",
    ),
    unique=(("user_id",),),
    immutable=frozenset({"id", "user_id", "created_at"}),
)

JOB_POSTINGS = TableSpec(
    name="job_postings",
    columns=(
        "id", "company_id", "title", "description", "requirements", "skills_required",
        "experience_level", "job_type", "location", "is_remote", "salary_min", "salary_max",
        "currency", "application_deadline", "status", "benefits", "work_mode",
        "total_positions", "filled_positions", "view_count", "application_count",
        "created_at", "updated_at",
    ),
    json_columns=frozenset({"requirements", "skills_required", "benefits"}),
    immutable=frozenset({"id", "company_id", "created_at"}),
)

APPLICATIONS = TableSpec(
    name="applications",
    columns=(
        "id", "job_id", "student_id", "status", "cover_letter", "resume_url",
        "application_source", "ai_match_score", "rejection_reason", "feedback",
        "applied_at", "updated_at",
    ),
    unique=(("job_id", "student_id"),),
    created_field="applied_at",
    immutable=frozenset({"id", "job_id", "student_id", "applied_at"}),
)

MOOD_LOGS = TableSpec(
    name="mood_logs",
    columns=(
        "id", "student_id", "mood_score", "stress_level", "energy_level",
        "confidence_level", "notes", "factors", "logged_at",
    ),
    json_columns=frozenset({"factors"}),
    created_field="logged_at",
    updated_field=None,
    append_only=True,
)

WELLNESS_ALERTS = TableSpec(
    name="wellness_alerts",
    columns=(
        "id", "student_id", "alert_type", "severity", "message", "triggered_at",
        "resolved_at", "resolved_by", "resolution_notes", "is_resolved",
    ),
    created_field="triggered_at",
    updated_field=None,
    immutable=frozenset({"id", "student_id", "alert_type", "triggered_at"}),
)

TABLES = {
    spec.name: spec
    for spec in (
        USERS, PROFILES, STUDENT_PROFILES, COMPANY_PROFILES,
        JOB_POSTINGS, APPLICATIONS, MOOD_LOGS, WELLNESS_ALERTS,
    )
}


# Timestamps are written by the application as ISO-8601 strings, and list/map
# columns as JSON, so the same statements work on Postgres and SQLite.
DDL = [
    """
    CREATE TABLE IF NOT EXISTS users (
        id VARCHAR(36) PRIMARY KEY,
        email TEXT UNIQUE NOT NULL,
        password_hash TEXT NOT NULL,
        user_metadata JSONB,
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS profiles (
        id VARCHAR(36) PRIMARY KEY REFERENCES users(id),
        email TEXT UNIQUE NOT NULL,
        full_name TEXT NOT NULL,
        role TEXT NOT NULL CHECK (role IN ('student', 'company', 'admin')),
        phone TEXT,
        avatar_url TEXT,
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS student_profiles (
        id VARCHAR(36) PRIMARY KEY,
        user_id VARCHAR(36) UNIQUE REFERENCES profiles(id) ON DELETE CASCADE,
        college_name TEXT NOT NULL,
        student_id TEXT,
        degree TEXT NOT NULL DEFAULT '',
        specialization TEXT DEFAULT '',
        graduation_year INTEGER NOT NULL,
        cgpa DECIMAL(4,2) DEFAULT 0,
        skills JSONB,
        certifications JSONB,
        languages JSONB,
        resume_url TEXT,
        portfolio_url TEXT,
        linkedin_url TEXT,
        github_url TEXT,
        experience_level TEXT DEFAULT 'entry' CHECK (experience_level IN ('entry', 'mid', 'senior')),
        preferred_locations JSONB,
        expected_salary_min INTEGER DEFAULT 0,
        expected_salary_max INTEGER DEFAULT 0,
        job_preferences JSONB,
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS company_profiles (
        id VARCHAR(36) PRIMARY KEY,
        user_id VARCHAR(36) UNIQUE REFERENCES profiles(id) ON DELETE CASCADE,
        company_name TEXT NOT NULL,
        company_description TEXT DEFAULT '',
        website_url TEXT,
        industry TEXT NOT NULL DEFAULT '',
        company_size TEXT DEFAULT 'startup' CHECK (company_size IN ('startup', 'small', 'medium', 'large', 'enterprise')),
        headquarters_location TEXT DEFAULT '',
        founded_year INTEGER,
        logo_url TEXT,
        verification_status TEXT DEFAULT 'pending' CHECK (verification_status IN ('pending', 'verified', 'rejected')),
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS job_postings (
        id VARCHAR(36) PRIMARY KEY,
        company_id VARCHAR(36) REFERENCES company_profiles(id) ON DELETE CASCADE,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        requirements JSONB,
        skills_required JSONB,
        experience_level TEXT DEFAULT 'entry' CHECK (experience_level IN ('entry', 'mid', 'senior')),
        job_type TEXT DEFAULT 'full-time' CHECK (job_type IN ('full-time', 'part-time', 'internship', 'contract')),
        location TEXT NOT NULL,
        is_remote BOOLEAN DEFAULT FALSE,
        salary_min INTEGER DEFAULT 0,
        salary_max INTEGER DEFAULT 0,
        currency TEXT DEFAULT 'INR',
        application_deadline TEXT,
        status TEXT DEFAULT 'draft' CHECK (status IN ('draft', 'published', 'closed', 'paused')),
        benefits JSONB,
        work_mode TEXT DEFAULT 'office' CHECK (work_mode IN ('office', 'remote', 'hybrid')),
        total_positions INTEGER DEFAULT 1,
        filled_positions INTEGER DEFAULT 0,
        view_count INTEGER DEFAULT 0,
        application_count INTEGER DEFAULT 0,
        created_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS applications (
        id VARCHAR(36) PRIMARY KEY,
        job_id VARCHAR(36) REFERENCES job_postings(id) ON DELETE CASCADE,
        student_id VARCHAR(36) REFERENCES student_profiles(id) ON DELETE CASCADE,
        status TEXT DEFAULT 'applied' CHECK (status IN ('applied', 'screening', 'shortlisted', 'interviewed', 'selected', 'rejected', 'withdrawn')),
        cover_letter TEXT,
        resume_url TEXT,
        application_source TEXT DEFAULT 'platform',
        ai_match_score INTEGER DEFAULT 0 CHECK (ai_match_score >= 0 AND ai_match_score <= 100),
        rejection_reason TEXT,
        feedback TEXT,
        applied_at TIMESTAMPTZ NOT NULL,
        updated_at TIMESTAMPTZ NOT NULL,
        UNIQUE (job_id, student_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS mood_logs (
        id VARCHAR(36) PRIMARY KEY,
        student_id VARCHAR(36) REFERENCES student_profiles(id) ON DELETE CASCADE,
        mood_score INTEGER NOT NULL CHECK (mood_score >= 1 AND mood_score <= 10),
        stress_level INTEGER NOT NULL CHECK (stress_level >= 1 AND stress_level <= 10),
        energy_level INTEGER NOT NULL CHECK (energy_level >= 1 AND energy_level <= 10),
        confidence_level INTEGER DEFAULT 5 CHECK (confidence_level >= 1 AND confidence_level <= 10),
        notes TEXT,
        factors JSONB,
        logged_at TIMESTAMPTZ NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS wellness_alerts (
        id VARCHAR(36) PRIMARY KEY,
        student_id VARCHAR(36) REFERENCES student_profiles(id) ON DELETE CASCADE,
        alert_type TEXT NOT NULL CHECK (alert_type IN ('low_mood', 'high_stress', 'declining_trend', 'no_activity')),
        severity TEXT DEFAULT 'medium' CHECK (severity IN ('low', 'medium', 'high', 'critical')),
        message TEXT NOT NULL,
        triggered_at TIMESTAMPTZ NOT NULL,
        resolved_at TIMESTAMPTZ,
        resolved_by VARCHAR(36) REFERENCES profiles(id),
        resolution_notes TEXT,
        is_resolved BOOLEAN DEFAULT FALSE
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_job_postings_status ON job_postings(status)",
    "CREATE INDEX IF NOT EXISTS idx_applications_student_id ON applications(student_id)",
    "CREATE INDEX IF NOT EXISTS idx_mood_logs_student_id ON mood_logs(student_id)",
    "CREATE INDEX IF NOT EXISTS idx_wellness_alerts_student_id ON wellness_alerts(student_id)",
]


def create_schema(engine: Engine) -> None:
    """Create all tables (idempotent). Call once at startup in live mode."""
    with engine.begin() as conn:
        for statement in DDL:
            conn.execute(text(statement))
