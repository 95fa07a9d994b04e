"""
Mood Analysis Service - sentiment of free-text mood notes.

Calls the HuggingFace inference API with a bearer key. The response is a
list of {label, score} pairs (nested one level); the highest score wins.
Any failure returns the neutral fallback.
"""
import logging
import math
from typing import Any, Optional, Tuple

import httpx

from mindmatch.core.config import Settings, get_settings
from mindmatch.schemas.schemas import SentimentResult

logger = logging.getLogger(__name__)

LABEL_PREFIX = "label_"


def neutral() -> SentimentResult:
    return SentimentResult(sentiment="neutral", confidence=0.5)


def _score(candidate: dict) -> Optional[float]:
    try:
        return float(candidate.get("score"))
    except (TypeError, ValueError):
        return None


def _best_label(data: Any) -> Optional[Tuple[str, float]]:
    """(label, score) with the highest numeric score; entries without one are skipped."""
    if not isinstance(data, list) or not data:
        return None
    candidates = data[0] if isinstance(data[0], list) else data
    scored = [(c, _score(c)) for c in candidates if isinstance(c, dict)]
    scored = [(c, s) for c, s in scored if s is not None and math.isfinite(s)]
    if not scored:
        return None
    best, score = max(scored, key=lambda pair: pair[1])
    return str(best.get("label") or "neutral"), score


class MoodAnalysisService:

    def __init__(self, settings: Optional[Settings] = None, http_client: Optional[httpx.Client] = None):
        settings = settings or get_settings()
        self.api_key = settings.huggingface_api_key
        self.model_url = settings.huggingface_model_url
        self.timeout = settings.http_timeout_seconds
        self._http_client = http_client

    def _post(self, payload: dict) -> Any:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self._http_client is not None:
            response = self._http_client.post(self.model_url, headers=headers, json=payload)
        else:
            with httpx.Client(timeout=self.timeout) as client:
                response = client.post(self.model_url, headers=headers, json=payload)
        response.raise_for_status()
        return response.json()

    def analyze_mood(self, text: str) -> SentimentResult:
        if not self.api_key:
            logger.warning("HuggingFace API key not configured")
            return neutral()

        if not text or not text.strip():
            return neutral()

        try:
            data = self._post({"inputs": text.strip()})
        except httpx.HTTPError as e:
            logger.error("Mood analysis HTTP error: %s", e)
            return neutral()
        except ValueError as e:
            logger.error("Mood analysis returned invalid JSON: %s", e)
            return neutral()

        best = _best_label(data)
        if best is None:
            logger.warning("Mood analysis returned no usable label")
            return neutral()

        label, score = best
        label = label.lower()
        if label.startswith(LABEL_PREFIX):
            label = label[len(LABEL_PREFIX):]
        return SentimentResult(sentiment=label, confidence=round(score, 2))
