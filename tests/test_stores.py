import pytest

from mindmatch.core.errors import (
    AlreadyExistsError, ImmutableRecordError, NotFoundError, ValidationError,
)
from mindmatch.db.schema import TABLES
from mindmatch.db.stores import InMemoryRecordStore, SqlRecordStore, build_record_stores
from mindmatch.schemas.schemas import UserRole


@pytest.fixture(params=["memory", "sqlite"])
def stores(request):
    if request.param == "memory":
        return build_record_stores(TABLES)
    return build_record_stores(TABLES, request.getfixturevalue("sqlite_engine"))


def make_profile(stores, email="ana@campus.edu", **fields):
    record = {"email": email, "full_name": "Ana Rao", "role": "student", **fields}
    return stores["profiles"].insert(record)


def test_build_record_stores_picks_backend(sqlite_engine):
    assert isinstance(build_record_stores(TABLES)["profiles"], InMemoryRecordStore)
    assert isinstance(build_record_stores(TABLES, sqlite_engine)["profiles"], SqlRecordStore)


def test_insert_assigns_id_and_timestamps(stores):
    row = make_profile(stores)
    assert len(row["id"]) == 36
    assert row["created_at"] is not None
    assert row["updated_at"] is not None
    assert stores["profiles"].get(row["id"]) == row


def test_insert_keeps_supplied_id(stores):
    row = make_profile(stores, id="user-1")
    assert row["id"] == "user-1"


def test_enum_values_are_stored_as_strings(stores):
    row = make_profile(stores, role=UserRole.company)
    assert row["role"] == "company"


def test_get_missing_raises_not_found(stores):
    with pytest.raises(NotFoundError):
        stores["profiles"].get("missing")


def test_unique_email(stores):
    make_profile(stores)
    with pytest.raises(AlreadyExistsError):
        make_profile(stores)


def test_unique_application_per_job_and_student(stores):
    apps = stores["applications"]
    apps.insert({"job_id": "j1", "student_id": "s1", "status": "applied", "ai_match_score": 70})
    apps.insert({"job_id": "j1", "student_id": "s2", "status": "applied", "ai_match_score": 40})
    with pytest.raises(AlreadyExistsError):
        apps.insert({"job_id": "j1", "student_id": "s1", "status": "applied", "ai_match_score": 10})
    assert len(apps.find(job_id="j1")) == 2


def test_update_merges_and_protects_immutable_columns(stores):
    row = make_profile(stores)
    updated = stores["profiles"].update(
        row["id"], {"full_name": "Ana R.", "role": "admin", "id": "other"}
    )
    assert updated["id"] == row["id"]
    assert updated["full_name"] == "Ana R."
    assert updated["role"] == "student"
    assert updated["email"] == row["email"]
    assert updated["created_at"] == row["created_at"]


def test_update_missing_raises_not_found(stores):
    with pytest.raises(NotFoundError):
        stores["profiles"].update("missing", {"full_name": "X"})
    assert stores["profiles"].find() == []


def test_unknown_columns_are_rejected(stores):
    with pytest.raises(ValidationError):
        make_profile(stores, nickname="ana")
    row = make_profile(stores)
    with pytest.raises(ValidationError):
        stores["profiles"].update(row["id"], {"password": "x"})
    with pytest.raises(ValidationError):
        stores["profiles"].find(order_by="nickname")


def test_mood_logs_are_append_only(stores):
    row = stores["mood_logs"].insert({
        "student_id": "s1", "mood_score": 5, "stress_level": 5, "energy_level": 5,
        "confidence_level": 5, "factors": ["exams"],
    })
    assert row["factors"] == ["exams"]
    with pytest.raises(ImmutableRecordError):
        stores["mood_logs"].update(row["id"], {"mood_score": 9})


def test_find_filters_orders_and_limits(stores):
    apps = stores["applications"]
    for student, score in (("s1", 30), ("s2", 90), ("s3", 60)):
        apps.insert({"job_id": "j1", "student_id": student, "status": "applied", "ai_match_score": score})
    apps.insert({"job_id": "j2", "student_id": "s1", "status": "applied", "ai_match_score": 99})

    rows = apps.find(job_id="j1", order_by="ai_match_score", descending=True)
    assert [r["student_id"] for r in rows] == ["s2", "s3", "s1"]
    assert len(apps.find(job_id="j1", limit=2)) == 2
    assert apps.find_one(job_id="j2")["ai_match_score"] == 99
    assert apps.find_one(job_id="j3") is None


def test_json_columns_round_trip(stores):
    row = stores["student_profiles"].insert({
        "user_id": "u1", "college_name": "IIT", "graduation_year": 2026,
        "skills": ["python", "sql"], "job_preferences": {"remote": True},
    })
    fetched = stores["student_profiles"].get(row["id"])
    assert fetched["skills"] == ["python", "sql"]
    assert fetched["job_preferences"] == {"remote": True}


def test_memory_store_returns_copies():
    store = InMemoryRecordStore(TABLES["student_profiles"])
    row = store.insert({"user_id": "u1", "college_name": "IIT", "graduation_year": 2026, "skills": ["a"]})
    row["skills"].append("b")
    assert store.get(row["id"])["skills"] == ["a"]
    assert len(store) == 1
