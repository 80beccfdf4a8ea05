# tests/test_config.py

import pytest

from aptitude_ai.config import load_settings

ENV_KEYS = [
    "QUESTION_PROVIDER", "OPENAI_API_KEY", "OPENAI_MODEL", "GOOGLE_API_KEY", "GEMINI_MODEL",
    "GENERATION_TEMPERATURE", "ASSESSMENT_MAX_LENGTH", "ASSESSMENT_INITIAL_MIX",
    "API_MIN_INTERVAL", "API_MAX_RETRIES", "API_MAX_WAIT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        # setenv first so teardown also removes values load_dotenv writes
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_defaults_without_credentials():
    settings = load_settings(env_path=None)
    assert settings.provider == "openai"
    assert settings.openai_api_key is None
    assert settings.openai_model == "gpt-4o-mini"

    cfg = settings.assessment_config()
    assert cfg.max_length == 15
    assert cfg.initial_batch_size == 10


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("QUESTION_PROVIDER", "Gemini")
    monkeypatch.setenv("ASSESSMENT_MAX_LENGTH", "20")
    monkeypatch.setenv("ASSESSMENT_INITIAL_MIX", "2,2,2")
    monkeypatch.setenv("API_MAX_RETRIES", "7")

    settings = load_settings(env_path=None)

    assert settings.provider == "gemini"
    assert settings.max_retries == 7
    cfg = settings.assessment_config()
    assert cfg.max_length == 20
    assert cfg.initial_mix.expand() == ["easy", "easy", "medium", "medium", "hard", "hard"]


def test_dotenv_file_is_loaded(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("OPENAI_MODEL=gpt-from-dotenv\n", encoding="utf-8")
    assert load_settings(env_path=str(env_file)).openai_model == "gpt-from-dotenv"


@pytest.mark.parametrize(
    "key,value",
    [("QUESTION_PROVIDER", "claude"), ("ASSESSMENT_MAX_LENGTH", "many"), ("GENERATION_TEMPERATURE", "hot")],
)
def test_invalid_values_rejected(monkeypatch, key, value):
    monkeypatch.setenv(key, value)
    with pytest.raises(ValueError):
        load_settings(env_path=None)
