import json
import os
from types import SimpleNamespace

# Mock backend, no external keys, cheap hashing. Must run before mindmatch is imported.
os.environ["DATABASE_URL"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["HUGGINGFACE_API_KEY"] = ""
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from mindmatch.core.config import Settings
from mindmatch.db.schema import create_schema
from mindmatch.services.container import build_container
from mindmatch.services.openai_client import TextGenerationClient

MATCH_REPLY = json.dumps({"score": 80, "reasons": ["Python matches", "Location fits"]})


class FakeChatClient:
    """Stands in for openai.OpenAI: records calls and replays canned replies.

    A reply may be a string (message content), an Exception (raised), or a
    ready-made response object. The last reply repeats once the queue is empty.
    """

    def __init__(self, *replies):
        self.replies = list(replies) or [MATCH_REPLY]
        self.calls = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, str):
            return chat_response(reply)
        return reply


def chat_response(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def make_text_client(*replies, api_key="sk-test"):
    fake = FakeChatClient(*replies)
    client = TextGenerationClient(Settings(openai_api_key=api_key), client=fake)
    return client, fake


@pytest.fixture()
def settings():
    return Settings()


@pytest.fixture()
def sqlite_engine():
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture()
def fake_chat():
    return FakeChatClient(MATCH_REPLY)


@pytest.fixture(params=["memory", "sqlite"])
def container(request, settings, fake_chat):
    """A fully wired container on either backend."""
    engine = request.getfixturevalue("sqlite_engine") if request.param == "sqlite" else None
    text_client = TextGenerationClient(Settings(openai_api_key="sk-test"), client=fake_chat)
    return build_container(settings=settings, engine=engine, text_client=text_client)


@pytest.fixture()
def memory_container(settings, fake_chat):
    text_client = TextGenerationClient(Settings(openai_api_key="sk-test"), client=fake_chat)
    return build_container(settings=settings, text_client=text_client)

