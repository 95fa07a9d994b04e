"""
Text Generation Client

Wraps the OpenAI SDK (any OpenAI-compatible endpoint via base_url).

- Request: model, role-tagged messages, max_tokens, temperature
- Response: the first choice's message content
- No API key configured => TransportError before any network call

AI output is ADVISORY. Callers (advisors) convert every failure here into a
safe fallback value.
"""
import json
import logging
from typing import Any, Optional

from openai import OpenAI, OpenAIError

from mindmatch.core.config import Settings, get_settings
from mindmatch.core.errors import MalformedResponseError, TransportError

logger = logging.getLogger(__name__)


class TextGenerationClient:
    """
    Thin wrapper around the chat-completions API.
    """

    def __init__(self, settings: Optional[Settings] = None, client: Optional[Any] = None):
        settings = settings or get_settings()
        self.api_key = settings.openai_api_key
        self.model = settings.openai_model
        self._client = client
        self._base_url = settings.openai_base_url
        self._timeout = settings.http_timeout_seconds

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self):
        if self._client is None:
            self._client = OpenAI(
                api_key=self.api_key,
                base_url=self._base_url,
                timeout=self._timeout,
            )
        return self._client

    def complete(
        self,
        system_prompt: str,
        user_content: str,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        """
        Call the API and return raw text of the first choice.
        Raises TransportError / MalformedResponseError.
        """
        if not self.is_configured:
            raise TransportError("OpenAI API key not configured")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_content}
                ],
                max_tokens=max_tokens,
                temperature=temperature
            )
        except OpenAIError as e:
            raise TransportError(f"OpenAI API error: {e}") from e

        if not getattr(response, "choices", None):
            raise MalformedResponseError("OpenAI response contained no choices")
        content = response.choices[0].message.content
        if content is None:
            raise MalformedResponseError("OpenAI response choice had no content")
        return content

    @staticmethod
    def extract_json(text: str) -> Any:
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        # Remove markdown code blocks if present
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        try:
            return json.loads(text.strip())
        except json.JSONDecodeError as e:
            raise MalformedResponseError(f"Response is not valid JSON: {e}") from e

    def test_connection(self) -> bool:
        """Test if the API is reachable"""
        try:
            response = self.complete(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10,
                temperature=0
            )
            return "OK" in response.upper()
        except (TransportError, MalformedResponseError) as e:
            logger.error("OpenAI connection failed: %s", e.message)
            return False
