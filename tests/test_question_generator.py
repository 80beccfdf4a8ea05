# tests/test_question_generator.py

import json
from types import SimpleNamespace

import pytest

from aptitude_core import AssessmentSession, GenerationError
from aptitude_ai.api_throttler import ApiThrottler, ThrottlerError
from aptitude_ai.config import Settings
from aptitude_ai.question_generator import (
    GeminiQuestionGenerator,
    OpenAIQuestionGenerator,
    build_generator,
)


def _payload(n):
    return json.dumps([
        {
            "question": f"Q{i}?",
            "options": ["a", "b", "c", "d"],
            "correctAnswer": i % 4,
        }
        for i in range(n)
    ])


class FakeOpenAIClient:
    def __init__(self, replies):
        self.replies = list(replies)
        self.requests = []
        self.chat = SimpleNamespace(completions=SimpleNamespace(create=self._create))

    def _create(self, **kwargs):
        self.requests.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        message = SimpleNamespace(content=reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeGeminiClient:
    def __init__(self, reply):
        self.reply = reply
        self.requests = []
        self.models = SimpleNamespace(generate_content=self._generate)

    def _generate(self, **kwargs):
        self.requests.append(kwargs)
        return SimpleNamespace(text=self.reply)


@pytest.fixture
def throttler():
    return ApiThrottler(min_interval=0.0, max_retries=2, max_wait=0.0, sleep=lambda s: None)


def test_openai_generator_builds_questions(throttler):
    client = FakeOpenAIClient([_payload(3)])
    gen = OpenAIQuestionGenerator(client=client, model="gpt-test", throttler=throttler, temperature=0.2)

    questions = gen.generate_questions("Algebra", ["easy", "medium", "hard"])

    assert [q.difficulty for q in questions] == ["easy", "medium", "hard"]
    assert [q.correct_option_index for q in questions] == [0, 1, 2]
    request = client.requests[0]
    assert request["model"] == "gpt-test"
    assert request["temperature"] == 0.2
    assert request["messages"][0]["role"] == "system"
    assert "Topic: Algebra" in request["messages"][1]["content"]


def test_openai_bad_output_raises_generation_error(throttler):
    client = FakeOpenAIClient(["I cannot help with that."])
    gen = OpenAIQuestionGenerator(client=client, throttler=throttler)
    with pytest.raises(GenerationError):
        gen.generate_questions("Algebra", ["medium"])


def test_transport_failure_raises_generation_error(throttler):
    client = FakeOpenAIClient([ConnectionResetError("reset")])
    gen = OpenAIQuestionGenerator(client=client, throttler=throttler)
    with pytest.raises(GenerationError) as exc:
        gen.generate_questions("Algebra", ["medium"])
    assert isinstance(exc.value.__cause__, ThrottlerError)
    assert isinstance(exc.value.cause, ConnectionResetError)


def test_empty_mix_makes_no_request(throttler):
    client = FakeOpenAIClient([])
    gen = OpenAIQuestionGenerator(client=client, throttler=throttler)
    assert gen.generate_questions("Algebra", []) == []
    assert client.requests == []


def test_gemini_generator(throttler):
    client = FakeGeminiClient("```json\n" + _payload(1) + "\n```")
    gen = GeminiQuestionGenerator(client=client, model="gemini-test", throttler=throttler)

    questions = gen.generate_questions("Physics", ["hard"])

    assert questions[0].difficulty == "hard"
    assert client.requests[0]["model"] == "gemini-test"
    assert "Topic: Physics" in client.requests[0]["contents"]


def test_missing_api_keys_rejected():
    with pytest.raises(ValueError):
        OpenAIQuestionGenerator(api_key=None)
    with pytest.raises(ValueError):
        GeminiQuestionGenerator(api_key="")


def test_build_generator_picks_provider():
    gen = build_generator(Settings(provider="openai", openai_api_key="sk-test", openai_model="gpt-x", min_interval=0.5))
    assert isinstance(gen, OpenAIQuestionGenerator)
    assert gen.model == "gpt-x"
    assert gen.throttler.min_interval == 0.5

    gen = build_generator(Settings(provider="gemini", google_api_key="g-test"))
    assert isinstance(gen, GeminiQuestionGenerator)


def test_session_runs_on_openai_backend(throttler):
    client = FakeOpenAIClient([_payload(10), _payload(1)])
    gen = OpenAIQuestionGenerator(client=client, throttler=throttler)
    session = AssessmentSession(gen)

    session.start("Algebra")
    for _ in range(10):
        session.advance()

    assert len(session.questions) == 11
    assert session.questions[-1].difficulty == "medium"
    assert "1. medium" in client.requests[1]["messages"][1]["content"]
