import os
import sys
import tempfile
from pathlib import Path

import pytest

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config.registry import INTERVIEWER_KEY, bind_model
from config.settings import settings
from llm_gateway import LlmGatewayError
from storage.migrate import migrate


class ScriptedInterviewer:
    """Interviewer stand-in that replays canned replies and records every call."""

    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def __call__(self, messages):
        self.calls.append([dict(m) for m in messages])
        if not self.replies:
            return "Tell me more about that. SCORE|5/10"
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield
    finally:
        td.cleanup()


@pytest.fixture
def interviewer():
    def _bind(*replies):
        model = ScriptedInterviewer(replies)
        bind_model(INTERVIEWER_KEY, model)
        return model

    return _bind


@pytest.fixture
def llm_down():
    return LlmGatewayError("LLM returned status 503")


@pytest.fixture
def fresh_registry(monkeypatch):
    import api.routes as routes
    from services.sessions import SessionRegistry

    registry = SessionRegistry()
    monkeypatch.setattr(routes, "registry", registry)
    return registry


@pytest.fixture
def scripted():
    def _make(*replies):
        return ScriptedInterviewer(replies)

    return _make


class FakeClock:
    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()
