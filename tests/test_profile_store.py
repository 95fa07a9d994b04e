import pytest

from mindmatch.core.errors import (
    AlreadyExistsError, InvalidTransitionError, NotFoundError, ValidationError,
)
from mindmatch.schemas.schemas import Profile, VerificationStatus


@pytest.fixture()
def profiles(container):
    return container.profiles


def new_profile(**fields):
    return {"id": "user-1", "email": "ana@campus.edu", "full_name": "Ana Rao", "role": "student", **fields}


def test_create_then_get_returns_the_same_profile(profiles):
    created = profiles.create(new_profile())
    assert created.error is None
    assert isinstance(created.data, Profile)

    fetched = profiles.get("user-1")
    assert fetched.error is None
    assert fetched.data == created.data


def test_get_unknown_profile_is_not_found(profiles):
    result = profiles.get("nobody")
    assert result.data is None
    assert isinstance(result.error, NotFoundError)


def test_duplicate_email_is_reported_as_error(profiles):
    profiles.create(new_profile())
    result = profiles.create(new_profile(id="user-2"))
    assert isinstance(result.error, AlreadyExistsError)


def test_update_changes_only_given_fields(profiles):
    profiles.create(new_profile(phone="111"))
    result = profiles.update("user-1", {"full_name": "Ana R.", "role": "admin"})
    assert result.error is None
    assert result.data.full_name == "Ana R."
    assert result.data.phone == "111"
    assert result.data.role == "student"


def test_update_unknown_profile_leaves_store_unchanged(profiles):
    profiles.create(new_profile())
    before = profiles.get("user-1").data

    result = profiles.update("nobody", {"full_name": "Ghost"})

    assert isinstance(result.error, NotFoundError)
    assert profiles.get("user-1").data == before
    assert profiles.get("nobody").error is not None


def test_student_profile_lifecycle(profiles):
    created = profiles.create_student_profile("user-1", "IIT Madras", degree="B.Tech")
    assert created.error is None
    assert created.data.college_name == "IIT Madras"
    assert created.data.degree == "B.Tech"
    assert created.data.skills == []

    updated = profiles.update_student_profile("user-1", {"skills": ["python"], "cgpa": 8.5})
    assert updated.data.skills == ["python"]
    assert profiles.get_student_profile("user-1").data.cgpa == 8.5
    assert profiles.get_student_profile_by_id(created.data.id).data.user_id == "user-1"

    duplicate = profiles.create_student_profile("user-1", "Other College")
    assert isinstance(duplicate.error, AlreadyExistsError)


def test_missing_student_profile(profiles):
    assert isinstance(profiles.get_student_profile("user-1").error, NotFoundError)
    assert isinstance(profiles.update_student_profile("user-1", {"degree": "x"}).error, NotFoundError)


def test_company_update_cannot_self_verify(profiles):
    created = profiles.create_company_profile("user-9", "Acme")
    assert created.data.verification_status == "pending"

    updated = profiles.update_company_profile(
        "user-9", {"industry": "Software", "verification_status": "verified"}
    )
    assert updated.data.industry == "Software"
    assert updated.data.verification_status == "pending"


def test_verification_status_transitions(profiles):
    company = profiles.create_company_profile("user-9", "Acme").data

    verified = profiles.set_verification_status(company.id, VerificationStatus.verified)
    assert verified.data.verification_status == "verified"

    again = profiles.set_verification_status(company.id, VerificationStatus.rejected)
    assert isinstance(again.error, InvalidTransitionError)
    assert profiles.get_company_profile("user-9").data.verification_status == "verified"


@pytest.mark.parametrize("field", ["full_name", "email"])
def test_null_required_profile_field_is_rejected(profiles, field):
    profiles.create(new_profile())
    before = profiles.get("user-1").data

    result = profiles.update("user-1", {field: None})

    assert result.data is None
    assert isinstance(result.error, ValidationError)
    assert profiles.get("user-1").data == before


def test_null_optional_profile_field_is_cleared(profiles):
    profiles.create(new_profile(phone="111"))
    result = profiles.update("user-1", {"phone": None})
    assert result.error is None
    assert result.data.phone is None


def test_null_college_name_leaves_student_profile_readable(profiles):
    profiles.create_student_profile("user-1", "IIT Madras")

    result = profiles.update_student_profile("user-1", {"college_name": None, "degree": "B.Tech"})

    assert isinstance(result.error, ValidationError)
    stored = profiles.get_student_profile("user-1")
    assert stored.error is None
    assert stored.data.college_name == "IIT Madras"
    assert stored.data.degree == ""


def test_invalid_student_value_is_rejected_before_writing(profiles):
    profiles.create_student_profile("user-1", "IIT Madras")

    result = profiles.update_student_profile("user-1", {"graduation_year": "soon"})

    assert isinstance(result.error, ValidationError)
    assert "graduation_year" in result.error.message
    assert profiles.get_student_profile("user-1").data.graduation_year > 2000


def test_null_company_name_is_rejected(profiles):
    profiles.create_company_profile("user-9", "Acme")
    result = profiles.update_company_profile("user-9", {"company_name": None})
    assert isinstance(result.error, ValidationError)
    assert profiles.get_company_profile("user-9").data.company_name == "Acme"
