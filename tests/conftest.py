import os

import pytest
from fastapi.testclient import TestClient

from debatecoach.config import Settings
from debatecoach.errors import UpstreamError
from debatecoach.main import create_app


class StubLLM:
    """Records calls and returns canned replies instead of calling OpenAI."""

    def __init__(self, reply="stub reply", transcript="hello world"):
        self.reply = reply
        self.transcript = transcript
        self.fail_with = None
        self.calls = []
        self.transcribed = []

    def complete(self, system, messages, temperature=0.7):
        if self.fail_with:
            raise self.fail_with
        self.calls.append({"system": system, "messages": list(messages), "temperature": temperature})
        return self.reply

    def transcribe(self, path, language="en"):
        self.transcribed.append({"path": path, "language": language, "exists": os.path.exists(path)})
        if self.fail_with:
            raise self.fail_with
        return self.transcript


@pytest.fixture
def llm():
    return StubLLM()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        openai_api_key="test-key",
        tmp_dir=str(tmp_path / "tmp"),
        public_dir=str(tmp_path / "public"),
    )


@pytest.fixture
def client(settings, llm):
    app = create_app(settings, llm=llm)
    return TestClient(app)


@pytest.fixture
def upstream_error():
    return UpstreamError("rate limited", details="429 Too Many Requests", status_code=429)
