"""
AI Advisors - advisory features built on the text-generation client.

JobMatchAdvisor scores a student profile against a job posting. The other
helpers generate a resume, career suggestions and resume summaries.

Every method here returns a usable value: transport failures, missing API
keys and malformed output all degrade to fixed fallbacks and are logged.
"""

import json
import logging
import re
from typing import Any, Dict, List

from mindmatch.core.config import Settings
from mindmatch.core.errors import MalformedResponseError, MindMatchError
from mindmatch.schemas.schemas import MatchAnalysis
from mindmatch.services.openai_client import TextGenerationClient

logger = logging.getLogger(__name__)

DEFAULT_MATCH_SCORE = 50
MAX_MATCH_REASONS = 5
MALFORMED_MATCH_REASON = "Unable to analyze match at this time"
UNAVAILABLE_MATCH_REASON = "Job matching service temporarily unavailable"
DEFAULT_MATCH_REASON = "General skill alignment"

FALLBACK_CAREERS = [
    "Software Developer",
    "Data Analyst",
    "Product Manager",
    "UX Designer",
    "Business Analyst",
]
RESUME_UNAVAILABLE = "Resume generation service is temporarily unavailable. Please try again later."
SUMMARY_UNAVAILABLE = "Resume summary service is temporarily unavailable."

_NUMBERING = re.compile(r"^\d+\.\s*")


def _to_json(data: Any) -> str:
    return json.dumps(data, default=str)


def _clamp_score(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_MATCH_SCORE
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_MATCH_SCORE
    return max(0, min(100, score))


class JobMatchAdvisor:

    SYSTEM_PROMPT = (
        'Analyze how well a student profile matches a job posting. Return a JSON object '
        'with "score" (0-100) and "reasons" (array of strings explaining the match).'
    )

    def __init__(self, client: TextGenerationClient):
        self.client = client

    def analyze_match(self, student_profile: Dict[str, Any], job_posting: Dict[str, Any]) -> MatchAnalysis:
        if not self.client.is_configured:
            return MatchAnalysis(score=DEFAULT_MATCH_SCORE, reasons=[UNAVAILABLE_MATCH_REASON])

        try:
            content = self.client.complete(
                self.SYSTEM_PROMPT,
                f"Student: {_to_json(student_profile)}. Job: {_to_json(job_posting)}",
                max_tokens=300,
                temperature=0.3,
            )
            result = self.client.extract_json(content)
            if not isinstance(result, dict):
                raise MalformedResponseError("Match analysis is not a JSON object")
        except MalformedResponseError as e:
            logger.error("Job match analysis returned malformed output: %s", e.message)
            return MatchAnalysis(score=DEFAULT_MATCH_SCORE, reasons=[MALFORMED_MATCH_REASON])
        except MindMatchError as e:
            logger.error("Job match analysis error: %s", e.message)
            return MatchAnalysis(score=DEFAULT_MATCH_SCORE, reasons=[UNAVAILABLE_MATCH_REASON])

        reasons = result.get("reasons")
        if isinstance(reasons, list) and reasons:
            reasons = [str(r) for r in reasons[:MAX_MATCH_REASONS]]
        else:
            reasons = [DEFAULT_MATCH_REASON]

        score = result.get("score")
        return MatchAnalysis(
            score=DEFAULT_MATCH_SCORE if score is None else _clamp_score(score),
            reasons=reasons,
        )


class CareerAssistant:

    def __init__(self, client: TextGenerationClient):
        self.client = client

    def generate_resume(self, student_data: Dict[str, Any]) -> str:
        try:
            return self.client.complete(
                "You are a professional resume writer. Create a well-formatted resume based on "
                "the student data provided. Format it in a clean, professional manner with proper sections.",
                f"Create a professional resume for: {json.dumps(student_data, indent=2, default=str)}",
                max_tokens=1500,
                temperature=0.7,
            )
        except MindMatchError as e:
            logger.error("Resume generation error: %s", e.message)
            return RESUME_UNAVAILABLE

    def get_career_suggestions(self, skills: List[str], interests: List[str]) -> List[str]:
        try:
            content = self.client.complete(
                "You are a career counselor. Provide exactly 5 career suggestions based on skills "
                "and interests. Return each suggestion on a new line.",
                f"Skills: {', '.join(skills)}. Interests: {', '.join(interests)}. "
                "Suggest 5 specific career paths.",
                max_tokens=500,
                temperature=0.8,
            )
        except MindMatchError as e:
            logger.error("Career suggestions error: %s", e.message)
            return list(FALLBACK_CAREERS)

        suggestions = [
            _NUMBERING.sub("", line.strip()).strip()
            for line in content.split("\n")
            if line.strip()
        ]
        suggestions = [s for s in suggestions if s][:5]
        return suggestions or list(FALLBACK_CAREERS)

    def summarize_resume(self, resume_text: str) -> str:
        try:
            return self.client.complete(
                "Summarize this resume in 2-3 sentences highlighting key skills and experience. "
                "Be concise and professional.",
                resume_text,
                max_tokens=200,
                temperature=0.5,
            )
        except MindMatchError as e:
            logger.error("Resume summary error: %s", e.message)
            return SUMMARY_UNAVAILABLE


def validate_api_keys(settings: Settings) -> Dict[str, bool]:
    """Which external AI credentials are configured."""
    return {
        "openai": bool(settings.openai_api_key),
        "huggingface": bool(settings.huggingface_api_key),
    }
