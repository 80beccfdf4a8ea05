# aptitude_ai/config.py

import os
import logging
from dataclasses import dataclass
from typing import Optional
from dotenv import load_dotenv

from aptitude_core.difficulty_policy import AssessmentConfig, DifficultyMix, DEFAULT_MAX_LENGTH

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
ENV_PATH = os.path.join(BASE_DIR, ".env")

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(message)s"

PROVIDERS = ("openai", "gemini")


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class Settings:
    provider: str = "openai"
    openai_api_key: Optional[str] = None
    openai_model: str = "gpt-4o-mini"
    google_api_key: Optional[str] = None
    gemini_model: str = "gemini-2.5-flash"
    temperature: float = 0.7

    max_length: int = DEFAULT_MAX_LENGTH
    initial_mix: str = "3,4,3"

    # ApiThrottler knobs
    min_interval: float = 2.0
    max_retries: int = 5
    max_wait: float = 25.0

    def assessment_config(self) -> AssessmentConfig:
        return AssessmentConfig(
            max_length=self.max_length,
            initial_mix=DifficultyMix.parse(self.initial_mix),
        )


def load_settings(env_path: Optional[str] = ENV_PATH) -> Settings:
    """
    .env at the repository root first, then the process environment
    (existing variables win, same as load_dotenv's default).
    API keys are only checked when a generator is built.
    """
    if env_path:
        load_dotenv(dotenv_path=env_path)

    provider = (os.getenv("QUESTION_PROVIDER") or "openai").strip().lower()
    if provider not in PROVIDERS:
        raise ValueError(f"QUESTION_PROVIDER must be one of {PROVIDERS}, got {provider!r}")

    return Settings(
        provider=provider,
        openai_api_key=os.getenv("OPENAI_API_KEY"),
        openai_model=os.getenv("OPENAI_MODEL", "gpt-4o-mini"),
        google_api_key=os.getenv("GOOGLE_API_KEY"),
        gemini_model=os.getenv("GEMINI_MODEL", "gemini-2.5-flash"),
        temperature=_get_float("GENERATION_TEMPERATURE", 0.7),
        max_length=_get_int("ASSESSMENT_MAX_LENGTH", DEFAULT_MAX_LENGTH),
        initial_mix=os.getenv("ASSESSMENT_INITIAL_MIX", "3,4,3"),
        min_interval=_get_float("API_MIN_INTERVAL", 2.0),
        max_retries=_get_int("API_MAX_RETRIES", 5),
        max_wait=_get_float("API_MAX_WAIT", 25.0),
    )


def setup_logging(log_file: Optional[str] = None, level: int = logging.INFO) -> None:
    handlers = [logging.StreamHandler()]
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers)
