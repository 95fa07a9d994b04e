import json
from types import SimpleNamespace

import pytest
from openai import OpenAIError

from mindmatch.core.config import Settings
from mindmatch.core.errors import MalformedResponseError, TransportError
from mindmatch.schemas.schemas import MatchAnalysis
from mindmatch.services.ai_advisors import (
    FALLBACK_CAREERS,
    RESUME_UNAVAILABLE,
    SUMMARY_UNAVAILABLE,
    CareerAssistant,
    JobMatchAdvisor,
)
from mindmatch.services.openai_client import TextGenerationClient

from conftest import make_text_client

STUDENT = {"skills": ["python", "sql"], "experience_level": "entry"}
JOB = {"title": "Data Analyst", "skills_required": ["sql"], "location": "Chennai"}


def analyze(reply):
    client, _ = make_text_client(reply)
    return JobMatchAdvisor(client).analyze_match(STUDENT, JOB)


# ---------------- TextGenerationClient ----------------

def test_complete_sends_role_tagged_messages():
    client, fake = make_text_client("hello")
    assert client.complete("be brief", "hi", max_tokens=20, temperature=0.1) == "hello"

    call = fake.calls[0]
    assert call["model"] == "gpt-4"
    assert call["messages"] == [
        {"role": "system", "content": "be brief"},
        {"role": "user", "content": "hi"},
    ]
    assert call["max_tokens"] == 20
    assert call["temperature"] == 0.1


def test_complete_without_key_never_calls_out():
    client, fake = make_text_client("hello", api_key="")
    with pytest.raises(TransportError):
        client.complete("system", "user")
    assert fake.calls == []


def test_complete_wraps_sdk_errors():
    client, _ = make_text_client(OpenAIError("connection reset"))
    with pytest.raises(TransportError, match="connection reset"):
        client.complete("system", "user")


def test_complete_without_choices():
    client, _ = make_text_client(SimpleNamespace(choices=[]))
    with pytest.raises(MalformedResponseError):
        client.complete("system", "user")


@pytest.mark.parametrize("text", [
    '{"score": 1}',
    '```json\n{"score": 1}\n```',
    '```\n{"score": 1}\n```',
])
def test_extract_json_strips_fences(text):
    assert TextGenerationClient.extract_json(text) == {"score": 1}


def test_extract_json_rejects_prose():
    with pytest.raises(MalformedResponseError):
        TextGenerationClient.extract_json("Looks like a great fit!")


def test_client_is_built_lazily_from_settings():
    client = TextGenerationClient(Settings(openai_api_key="sk-live", openai_base_url="http://llm.local/v1"))
    assert client.is_configured
    assert str(client.client.base_url).startswith("http://llm.local/v1")


# ---------------- JobMatchAdvisor ----------------

def test_valid_analysis():
    result = analyze(json.dumps({"score": 85, "reasons": ["SQL overlap", "Entry level role"]}))
    assert result == MatchAnalysis(score=85, reasons=["SQL overlap", "Entry level role"])


def test_fenced_analysis():
    result = analyze('```json\n{"score": 64, "reasons": ["Some overlap"]}\n```')
    assert result.score == 64


def test_non_json_reply_gives_fixed_fallback():
    result = analyze("The candidate seems promising overall.")
    assert result == MatchAnalysis(score=50, reasons=["Unable to analyze match at this time"])


def test_non_object_json_gives_fixed_fallback():
    result = analyze("[80, 90]")
    assert result == MatchAnalysis(score=50, reasons=["Unable to analyze match at this time"])


@pytest.mark.parametrize("score, expected", [
    (150, 100),
    (-20, 0),
    (0, 0),
    (72.6, 73),
    ("88", 88),
    ("high", 50),
    (None, 50),
])
def test_score_is_clamped(score, expected):
    assert analyze(json.dumps({"score": score, "reasons": ["x"]})).score == expected


def test_missing_score_defaults():
    assert analyze(json.dumps({"reasons": ["x"]})).score == 50


def test_reasons_must_be_a_list():
    assert analyze(json.dumps({"score": 70, "reasons": "good"})).reasons == ["General skill alignment"]
    assert analyze(json.dumps({"score": 70, "reasons": []})).reasons == ["General skill alignment"]


def test_reasons_are_capped_and_stringified():
    reasons = analyze(json.dumps({"score": 70, "reasons": [1, 2, 3, 4, 5, 6, 7]})).reasons
    assert reasons == ["1", "2", "3", "4", "5"]


def test_missing_key_gives_unavailable_fallback():
    client, fake = make_text_client("unused", api_key="")
    result = JobMatchAdvisor(client).analyze_match(STUDENT, JOB)
    assert result == MatchAnalysis(score=50, reasons=["Job matching service temporarily unavailable"])
    assert fake.calls == []


def test_transport_failure_gives_unavailable_fallback():
    result = analyze(OpenAIError("timeout"))
    assert result.reasons == ["Job matching service temporarily unavailable"]
    assert result.score == 50


def test_prompt_carries_student_and_job():
    client, fake = make_text_client(json.dumps({"score": 70, "reasons": ["x"]}))
    JobMatchAdvisor(client).analyze_match(STUDENT, JOB)
    user_message = fake.calls[0]["messages"][1]["content"]
    assert '"Data Analyst"' in user_message
    assert '"python"' in user_message
    assert fake.calls[0]["temperature"] == 0.3


# ---------------- CareerAssistant ----------------

def test_career_suggestions_strip_numbering():
    client, _ = make_text_client("1. Data Scientist\n2. ML Engineer\n\n3.  Analytics Consultant\n")
    suggestions = CareerAssistant(client).get_career_suggestions(["python"], ["data"])
    assert suggestions == ["Data Scientist", "ML Engineer", "Analytics Consultant"]


def test_career_suggestions_capped_at_five():
    client, _ = make_text_client("\n".join(f"{i}. Role {i}" for i in range(1, 9)))
    assert len(CareerAssistant(client).get_career_suggestions([], [])) == 5


def test_career_suggestions_fallback():
    client, _ = make_text_client("unused", api_key="")
    assert CareerAssistant(client).get_career_suggestions(["python"], []) == FALLBACK_CAREERS


def test_resume_and_summary():
    client, fake = make_text_client("RESUME TEXT", "SUMMARY TEXT")
    assistant = CareerAssistant(client)
    assert assistant.generate_resume({"full_name": "Ana"}) == "RESUME TEXT"
    assert assistant.summarize_resume("Ana. Python.") == "SUMMARY TEXT"
    assert fake.calls[0]["max_tokens"] == 1500
    assert fake.calls[1]["messages"][1]["content"] == "Ana. Python."


def test_resume_and_summary_fallbacks():
    client, _ = make_text_client(OpenAIError("down"))
    assistant = CareerAssistant(client)
    assert assistant.generate_resume({"full_name": "Ana"}) == RESUME_UNAVAILABLE
    assert assistant.summarize_resume("text") == SUMMARY_UNAVAILABLE
