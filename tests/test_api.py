import httpx
import pytest
from fastapi.testclient import TestClient

from mindmatch.core.config import Settings
from mindmatch.main import app
from mindmatch.services.container import get_container
from mindmatch.services.sentiment_client import MoodAnalysisService

PASSWORD = "secret123"


@pytest.fixture()
def api(memory_container):
    app.dependency_overrides[get_container] = lambda: memory_container
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def register(api, email, role, **extra):
    res = api.post("/api/auth/register", json={
        "email": email, "password": PASSWORD, "full_name": email.split("@")[0].title(),
        "role": role, **extra,
    })
    assert res.status_code == 201, res.text
    return {"Authorization": f"Bearer {res.json()['access_token']}"}


@pytest.fixture()
def student_headers(api):
    return register(api, "ana@campus.edu", "student", college_name="IIT Madras")


@pytest.fixture()
def company_headers(api):
    return register(api, "hr@acme.io", "company", company_name="Acme")


@pytest.fixture()
def admin_headers(api):
    return register(api, "dean@campus.edu", "admin")


@pytest.fixture()
def job_id(api, company_headers):
    res = api.post("/api/jobs", headers=company_headers, json={
        "title": "Backend Intern", "description": "Build APIs", "location": "Remote",
        "skills_required": ["python"], "job_type": "internship", "work_mode": "remote",
    })
    assert res.status_code == 201, res.text
    job = res.json()
    res = api.put(f"/api/jobs/{job['id']}/status", headers=company_headers, json={"status": "published"})
    assert res.json()["status"] == "published"
    return job["id"]


# ---------------- health / auth ----------------

def test_health(api):
    res = api.get("/health")
    assert res.status_code == 200
    assert res.json()["mode"] == "mock"
    assert res.json()["database"] == "in-memory"
    assert res.json()["api_keys"] == {"openai": False, "huggingface": False}


def test_register_login_me(api, student_headers):
    me = api.get("/api/auth/me", headers=student_headers)
    assert me.status_code == 200
    assert me.json()["email"] == "ana@campus.edu"
    assert me.json()["role"] == "student"

    login = api.post("/api/auth/login", json={"email": "ana@campus.edu", "password": PASSWORD})
    assert login.status_code == 200
    assert login.json()["role"] == "student"
    assert login.json()["token_type"] == "bearer"


def test_duplicate_registration(api, student_headers):
    res = api.post("/api/auth/register", json={
        "email": "ana@campus.edu", "password": PASSWORD, "full_name": "Ana", "role": "student",
    })
    assert res.status_code == 409
    assert res.json()["detail"] == "User already registered"


def test_bad_login(api, student_headers):
    res = api.post("/api/auth/login", json={"email": "ana@campus.edu", "password": "nope-nope"})
    assert res.status_code == 401


def test_register_validates_input(api):
    res = api.post("/api/auth/register", json={
        "email": "not-an-email", "password": "short", "full_name": "X", "role": "student",
    })
    assert res.status_code == 422


def test_token_required(api):
    assert api.get("/api/auth/me").status_code in (401, 403)
    bad = api.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert bad.status_code == 401


def test_update_me(api, student_headers):
    res = api.patch("/api/auth/me", headers=student_headers, json={"full_name": "Ana Rao"})
    assert res.status_code == 200
    assert res.json()["full_name"] == "Ana Rao"
    assert api.patch("/api/auth/me", headers=student_headers, json={}).status_code == 400


def test_null_full_name_is_rejected_and_account_stays_usable(api, student_headers):
    res = api.patch("/api/auth/me", headers=student_headers, json={"full_name": None})
    assert res.status_code == 422
    me = api.get("/api/auth/me", headers=student_headers)
    assert me.status_code == 200
    assert me.json()["full_name"] == "Ana"


def test_null_college_name_is_rejected(api, student_headers):
    res = api.put("/api/profiles/student", headers=student_headers, json={"college_name": None})
    assert res.status_code == 422
    profile = api.get("/api/profiles/student", headers=student_headers)
    assert profile.status_code == 200
    assert profile.json()["college_name"] == "IIT Madras"


def test_refresh_and_logout(api, student_headers):
    refreshed = api.post("/api/auth/refresh", headers=student_headers)
    assert refreshed.status_code == 200
    new_headers = {"Authorization": f"Bearer {refreshed.json()['access_token']}"}
    assert api.get("/api/auth/me", headers=new_headers).status_code == 200
    assert api.get("/api/auth/me", headers=student_headers).status_code == 401

    assert api.post("/api/auth/logout", headers=new_headers).json()["success"] is True
    assert api.get("/api/auth/me", headers=new_headers).status_code == 401
    assert api.post("/api/auth/refresh", headers=new_headers).status_code == 401


def test_logout_only_revokes_the_callers_token(api, memory_container, student_headers, company_headers):
    events = []
    memory_container.auth.on_auth_state_change(lambda event, session: events.append(event))

    assert api.post("/api/auth/logout", headers=student_headers).status_code == 200

    assert api.get("/api/auth/me", headers=student_headers).status_code == 401
    assert api.get("/api/auth/me", headers=company_headers).status_code == 200
    login = api.post("/api/auth/login", json={"email": "ana@campus.edu", "password": PASSWORD})
    fresh = {"Authorization": f"Bearer {login.json()['access_token']}"}
    assert api.get("/api/auth/me", headers=fresh).status_code == 200

    assert events == []
    assert memory_container.auth.get_current_user() is None


# ---------------- profiles ----------------

def test_student_profile(api, student_headers):
    res = api.get("/api/profiles/student", headers=student_headers)
    assert res.status_code == 200
    assert res.json()["college_name"] == "IIT Madras"

    res = api.put("/api/profiles/student", headers=student_headers,
                  json={"skills": ["python", "fastapi"], "cgpa": 8.7})
    assert res.status_code == 200
    assert res.json()["skills"] == ["python", "fastapi"]


def test_student_profile_created_later(api):
    headers = register(api, "raj@campus.edu", "student")
    assert api.get("/api/profiles/student", headers=headers).status_code == 404

    res = api.post("/api/profiles/student", headers=headers, params={"college_name": "NIT"})
    assert res.status_code == 201
    assert api.post("/api/profiles/student", headers=headers, params={"college_name": "NIT"}).status_code == 409


def test_role_guards(api, student_headers, company_headers):
    assert api.get("/api/profiles/company", headers=student_headers).status_code == 403
    assert api.get("/api/profiles/student", headers=company_headers).status_code == 403
    assert api.post("/api/jobs", headers=student_headers, json={}).status_code in (403, 422)


def test_company_verification_by_admin(api, company_headers, admin_headers):
    company = api.get("/api/profiles/company", headers=company_headers).json()
    assert company["verification_status"] == "pending"

    url = f"/api/profiles/company/{company['id']}/verification"
    assert api.put(url, headers=company_headers, json={"status": "verified"}).status_code == 403

    res = api.put(url, headers=admin_headers, json={"status": "verified"})
    assert res.status_code == 200
    assert res.json()["verification_status"] == "verified"
    assert api.put(url, headers=admin_headers, json={"status": "rejected"}).status_code == 409


# ---------------- jobs / applications ----------------

def test_job_listing_and_views(api, student_headers, company_headers, job_id):
    listed = api.get("/api/jobs", headers=student_headers).json()
    assert [job["id"] for job in listed] == [job_id]

    api.get(f"/api/jobs/{job_id}", headers=student_headers)
    res = api.get(f"/api/jobs/{job_id}", headers=student_headers)
    assert res.json()["view_count"] == 2

    mine = api.get("/api/jobs", headers=company_headers, params={"mine": True})
    assert len(mine.json()) == 1
    assert api.get("/api/jobs/missing", headers=student_headers).status_code == 404


def test_only_owner_changes_job_status(api, job_id):
    rival = register(api, "hr@rival.io", "company", company_name="Rival")
    res = api.put(f"/api/jobs/{job_id}/status", headers=rival, json={"status": "closed"})
    assert res.status_code == 403


def test_application_flow(api, student_headers, company_headers, job_id):
    res = api.post(f"/api/jobs/{job_id}/apply", headers=student_headers, json={"cover_letter": "Hi"})
    assert res.status_code == 201, res.text
    application = res.json()
    assert application["ai_match_score"] == 80

    again = api.post(f"/api/jobs/{job_id}/apply", headers=student_headers, json={})
    assert again.status_code == 409

    ranked = api.get(f"/api/jobs/{job_id}/applications", headers=company_headers).json()
    assert [a["id"] for a in ranked] == [application["id"]]

    url = f"/api/applications/{application['id']}/status"
    skipped = api.put(url, headers=company_headers, json={"status": "selected"})
    assert skipped.status_code == 409

    res = api.put(url, headers=company_headers, json={"status": "screening"})
    assert res.json()["status"] == "screening"

    withdrawn_by_company = api.put(url, headers=company_headers, json={"status": "withdrawn"})
    assert withdrawn_by_company.status_code == 403

    mine = api.get("/api/applications/me", headers=student_headers).json()
    assert mine[0]["status"] == "screening"

    res = api.post(f"/api/applications/{application['id']}/withdraw", headers=student_headers)
    assert res.json()["status"] == "withdrawn"


# ---------------- wellness ----------------

def test_mood_logging_and_summary(api, student_headers):
    res = api.post("/api/wellness/mood-logs", headers=student_headers,
                   json={"mood_score": 8, "stress_level": 3, "energy_level": 7})
    assert res.status_code == 201

    assert api.post("/api/wellness/mood-logs", headers=student_headers,
                    json={"mood_score": 11, "stress_level": 3, "energy_level": 7}).status_code == 422

    logs = api.get("/api/wellness/mood-logs", headers=student_headers).json()
    assert len(logs) == 1

    summary = api.get("/api/wellness/summary", headers=student_headers).json()
    assert summary["resilience_score"] == 74
    assert summary["recommendations"] == [
        "Keep up the great work on your wellness!",
        "Continue your current healthy habits",
    ]


def test_recommendations_endpoint(api, student_headers):
    res = api.get("/api/wellness/recommendations", headers=student_headers,
                  params={"mood": 3, "stress": 5, "energy": 5})
    assert res.json()["recommendations"][0] == "Consider talking to a counselor or trusted friend"


def test_analyze_mood_without_key_is_neutral(api, student_headers):
    res = api.post("/api/wellness/analyze-mood", headers=student_headers, json={"text": "Feeling great"})
    assert res.json() == {"sentiment": "neutral", "confidence": 0.5}


def test_analyze_mood_with_mixed_score_types(api, memory_container, student_headers):
    payload = [[{"label": "positive", "score": "oops"}, {"label": "negative", "score": 0.7}]]
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=payload))
    memory_container.mood_analysis = MoodAnalysisService(
        Settings(huggingface_api_key="hf-test"), http_client=httpx.Client(transport=transport)
    )
    res = api.post("/api/wellness/analyze-mood", headers=student_headers, json={"text": "long day"})
    assert res.status_code == 200
    assert res.json() == {"sentiment": "negative", "confidence": 0.7}


def test_alerts_are_admin_only(api, student_headers, admin_headers):
    api.post("/api/wellness/mood-logs", headers=student_headers,
             json={"mood_score": 2, "stress_level": 9, "energy_level": 3})

    assert api.get("/api/wellness/alerts", headers=student_headers).status_code == 403

    alerts = api.get("/api/wellness/alerts", headers=admin_headers).json()
    assert {a["alert_type"] for a in alerts} == {"low_mood", "high_stress"}

    low_mood = next(a for a in alerts if a["alert_type"] == "low_mood")
    url = f"/api/wellness/alerts/{low_mood['id']}/resolve"
    res = api.put(url, headers=admin_headers, json={"resolution_notes": "Counselor booked"})
    assert res.json()["is_resolved"] is True
    assert api.put(url, headers=admin_headers, json={}).status_code == 409

    open_alerts = api.get("/api/wellness/alerts", headers=admin_headers).json()
    assert [a["alert_type"] for a in open_alerts] == ["high_stress"]


def test_admin_scan(api, student_headers, admin_headers):
    student = api.get("/api/profiles/student", headers=student_headers).json()
    res = api.post(f"/api/wellness/alerts/scan/{student['id']}", headers=admin_headers)
    assert [a["alert_type"] for a in res.json()] == ["no_activity"]
    assert api.post("/api/wellness/alerts/scan/missing", headers=admin_headers).status_code == 404


# ---------------- AI ----------------

def test_job_match_preview(api, student_headers, job_id):
    res = api.post("/api/ai/job-match", headers=student_headers, json={"job_id": job_id})
    assert res.json() == {"score": 80, "reasons": ["Python matches", "Location fits"]}


def test_career_endpoints(api, student_headers, fake_chat):
    fake_chat.replies = ["1. Data Engineer\n2. Backend Developer"]
    res = api.post("/api/ai/career-suggestions", headers=student_headers,
                   json={"skills": ["python"], "interests": ["data"]})
    assert res.json()["suggestions"] == ["Data Engineer", "Backend Developer"]

    res = api.post("/api/ai/resume", headers=student_headers)
    assert res.json()["content"] == "1. Data Engineer\n2. Backend Developer"

    res = api.post("/api/ai/summarize-resume", headers=student_headers, json={"resume_text": "Ana. Python."})
    assert res.status_code == 200
