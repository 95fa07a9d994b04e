"""
Profile Store - create / read / update profiles keyed by user id.

Works over any RecordStore backend (in-memory or SQL); the backend is chosen
once at startup by the service container, never here.

Every method returns a Result: callers check `result.error` before using
`result.data`. Backend failures are logged and returned, not raised.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Type, TypeVar, get_args

from pydantic import BaseModel
from pydantic import ValidationError as SchemaError

from mindmatch.core.errors import (
    InvalidTransitionError,
    MindMatchError,
    NotFoundError,
    Result,
    ValidationError,
)
from mindmatch.db.stores import RecordStore
from mindmatch.schemas.schemas import (
    CompanyProfile,
    Profile,
    StudentProfile,
    VerificationStatus,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# Admin-driven verification lifecycle for company profiles
VERIFICATION_TRANSITIONS = {
    VerificationStatus.pending.value: {
        VerificationStatus.verified.value,
        VerificationStatus.rejected.value,
    },
    VerificationStatus.verified.value: set(),
    VerificationStatus.rejected.value: set(),
}


def _describe(error: SchemaError) -> str:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "record"
    return f"Invalid {field}: {first['msg']}"


def _nullable(model: Type[BaseModel], name: str) -> bool:
    field = model.model_fields.get(name)
    return field is None or type(None) in get_args(field.annotation)


def checked_update(store: RecordStore, record_id: str, updates: Dict[str, Any], model: Type[M]) -> dict:
    """Validate the merged record first so a bad update never reaches the store."""
    for name, value in updates.items():
        if value is None and not _nullable(model, name):
            raise ValidationError(f"{name} cannot be null")
    current = store.get(record_id)
    merged = dict(current)
    merged.update({k: v for k, v in updates.items() if k not in store.spec.immutable})
    try:
        model.model_validate(merged)
    except SchemaError as e:
        raise ValidationError(_describe(e)) from e
    return store.update(record_id, updates)


def default_student_profile(user_id: str, college_name: str) -> Dict[str, Any]:
    """Fields a freshly signed-up student starts with."""
    return {
        "user_id": user_id,
        "college_name": college_name,
        "degree": "",
        "specialization": "",
        "graduation_year": datetime.now(timezone.utc).year,
        "cgpa": 0,
        "skills": [],
        "certifications": [],
        "languages": [],
        "experience_level": "entry",
        "preferred_locations": [],
        "expected_salary_min": 0,
        "expected_salary_max": 0,
        "job_preferences": {},
    }


def default_company_profile(user_id: str, company_name: str) -> Dict[str, Any]:
    """Fields a freshly signed-up company starts with."""
    return {
        "user_id": user_id,
        "company_name": company_name,
        "company_description": "",
        "industry": "",
        "company_size": "startup",
        "headquarters_location": "",
        "verification_status": VerificationStatus.pending.value,
    }


class ProfileStore:
    """Profiles plus their role-specific extensions."""

    def __init__(
        self,
        profiles: RecordStore,
        student_profiles: RecordStore,
        company_profiles: RecordStore,
    ):
        self.profiles = profiles
        self.student_profiles = student_profiles
        self.company_profiles = company_profiles

    def _run(self, action: str, model: Type[M], fn: Callable[[], Optional[dict]]) -> Result[M]:
        try:
            row = fn()
            return Result.success(model.model_validate(row))
        except SchemaError as e:
            error = ValidationError(_describe(e))
            logger.error("Error %s: %s", action, error.message)
            return Result.failure(error)
        except MindMatchError as e:
            logger.error("Error %s: %s", action, e.message)
            return Result.failure(e)

    # ---------------- base profiles ----------------

    def create(self, profile: Dict[str, Any]) -> Result[Profile]:
        """Create a profile; an id is generated when none is supplied."""
        return self._run("creating profile", Profile, lambda: self.profiles.insert(profile))

    def get(self, user_id: str) -> Result[Profile]:
        return self._run("fetching profile", Profile, lambda: self.profiles.get(user_id))

    def update(self, user_id: str, updates: Dict[str, Any]) -> Result[Profile]:
        """Merge updates into the profile. id, role and created_at never change."""
        return self._run(
            "updating profile", Profile, lambda: checked_update(self.profiles, user_id, updates, Profile)
        )

    # ---------------- student profiles ----------------

    def create_student_profile(self, user_id: str, college_name: str, **fields: Any) -> Result[StudentProfile]:
        data = default_student_profile(user_id, college_name)
        data.update(fields)
        return self._run(
            "creating student profile", StudentProfile,
            lambda: self.student_profiles.insert(data),
        )

    def _student_row(self, user_id: str) -> dict:
        row = self.student_profiles.find_one(user_id=user_id)
        if row is None:
            raise NotFoundError("Student profile not found")
        return row

    def get_student_profile(self, user_id: str) -> Result[StudentProfile]:
        return self._run(
            "fetching student profile", StudentProfile, lambda: self._student_row(user_id)
        )

    def get_student_profile_by_id(self, student_profile_id: str) -> Result[StudentProfile]:
        return self._run(
            "fetching student profile", StudentProfile,
            lambda: self.student_profiles.get(student_profile_id),
        )

    def update_student_profile(self, user_id: str, updates: Dict[str, Any]) -> Result[StudentProfile]:
        return self._run(
            "updating student profile", StudentProfile,
            lambda: checked_update(
                self.student_profiles, self._student_row(user_id)["id"], updates, StudentProfile
            ),
        )

    # ---------------- company profiles ----------------

    def create_company_profile(self, user_id: str, company_name: str, **fields: Any) -> Result[CompanyProfile]:
        data = default_company_profile(user_id, company_name)
        data.update(fields)
        return self._run(
            "creating company profile", CompanyProfile,
            lambda: self.company_profiles.insert(data),
        )

    def _company_row(self, user_id: str) -> dict:
        row = self.company_profiles.find_one(user_id=user_id)
        if row is None:
            raise NotFoundError("Company profile not found")
        return row

    def get_company_profile(self, user_id: str) -> Result[CompanyProfile]:
        return self._run(
            "fetching company profile", CompanyProfile, lambda: self._company_row(user_id)
        )

    def update_company_profile(self, user_id: str, updates: Dict[str, Any]) -> Result[CompanyProfile]:
        # verification_status moves only through set_verification_status
        updates = {k: v for k, v in updates.items() if k != "verification_status"}
        return self._run(
            "updating company profile", CompanyProfile,
            lambda: checked_update(
                self.company_profiles, self._company_row(user_id)["id"], updates, CompanyProfile
            ),
        )

    def set_verification_status(self, company_profile_id: str, status: VerificationStatus) -> Result[CompanyProfile]:
        """Admin action: pending -> verified | rejected."""
        target = VerificationStatus(status).value

        def _apply() -> dict:
            row = self.company_profiles.get(company_profile_id)
            current = row["verification_status"] or VerificationStatus.pending.value
            if target not in VERIFICATION_TRANSITIONS.get(current, set()):
                raise InvalidTransitionError(
                    f"Cannot change verification status from {current} to {target}"
                )
            return self.company_profiles.update(company_profile_id, {"verification_status": target})

        return self._run("changing verification status", CompanyProfile, _apply)
