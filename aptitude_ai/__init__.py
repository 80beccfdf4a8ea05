# aptitude_ai/__init__.py

"""
Question generation backends for the adaptive assessment engine.

Common exports:
    Settings, load_settings, setup_logging
    ApiThrottler, ThrottlerError
    subject_topic, skills_topic, make_prompt
    parse_questions
    QuestionGenerator, OpenAIQuestionGenerator, GeminiQuestionGenerator, build_generator
"""

from .config import Settings, load_settings, setup_logging
from .api_throttler import ApiThrottler, ThrottlerError
from .prompts import subject_topic, skills_topic, make_prompt
from .question_parser import parse_questions
from .question_generator import (
    QuestionGenerator,
    OpenAIQuestionGenerator,
    GeminiQuestionGenerator,
    build_generator,
)


__all__ = [
    "Settings",
    "load_settings",
    "setup_logging",
    "ApiThrottler",
    "ThrottlerError",
    "subject_topic",
    "skills_topic",
    "make_prompt",
    "parse_questions",
    "QuestionGenerator",
    "OpenAIQuestionGenerator",
    "GeminiQuestionGenerator",
    "build_generator",
]
