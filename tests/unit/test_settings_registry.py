import pytest

from config.registry import INTERVIEWER_KEY, bind_model, get_model, is_bound
from config.routes import interviewer_route
from config.settings import Settings


def test_settings_defaults():
    settings = Settings(_env_file=None)
    assert settings.DB_PATH.endswith(".db")
    assert settings.PASS_THRESHOLD == 6.0
    assert settings.ADAPTIVE_WINDOW_SIZE == 3
    assert settings.DEFAULT_ROLE_LEVEL == "mid"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("LLM_MODEL", "llama-3")
    monkeypatch.setenv("ADAPTIVE_START_LEVEL", "2")
    settings = Settings(_env_file=None)
    assert settings.LLM_MODEL == "llama-3"
    assert settings.ADAPTIVE_START_LEVEL == 2


def test_interviewer_route_follows_settings():
    route = interviewer_route(Settings(_env_file=None, LLM_MODEL="m-1", LLM_MAX_RETRIES=3))
    assert route.name == "interviewer"
    assert route.model == "m-1"
    assert route.max_retries == 3


def test_registry_bind_and_retrieve():
    marker = object()
    bind_model(INTERVIEWER_KEY, lambda *_: marker)
    assert is_bound(INTERVIEWER_KEY)
    assert get_model(INTERVIEWER_KEY)() is marker


def test_registry_missing_key():
    with pytest.raises(KeyError):
        get_model("models.unknown")
