from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from sleeptrack import create_app
from sleeptrack.core import llm


class FakeCompletions:
    """Replays canned replies; an Exception instance is raised instead."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=reply))])


class FakeOpenAI:
    def __init__(self, *replies):
        self.chat = SimpleNamespace(completions=FakeCompletions(replies or ("ok",)))

    @property
    def calls(self):
        return self.chat.completions.calls


@pytest.fixture(autouse=True)
def no_credentials(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)


@pytest.fixture
def fake_advisor(monkeypatch):
    def install(*replies):
        client = FakeOpenAI(*replies)
        monkeypatch.setattr(llm, "_get_openai_client", lambda settings: client)
        return client

    return install


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def guest(client):
    return client.post("/api/auth/guest").json()
