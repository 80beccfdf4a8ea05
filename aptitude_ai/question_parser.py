# aptitude_ai/question_parser.py

import re
import json
from typing import Any, Dict, List, Sequence

from aptitude_core.schema import Question, OPTION_COUNT, normalize_difficulty
from aptitude_core.errors import GenerationError

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)
_ARRAY_RE = re.compile(r"\[[\s\S]*\]")

TEXT_KEYS = ("question", "text", "stem")
OPTION_KEYS = ("options", "choices")
ANSWER_KEYS = ("correctAnswer", "correct_option_index", "answer_index")


def extract_json_array(raw_text: str) -> List[Any]:
    """Outermost [...] of a model reply, code fences and chatter removed."""
    if not raw_text or not raw_text.strip():
        raise GenerationError("Empty response from generator")

    text = _FENCE_RE.sub("", raw_text).strip()
    first_obj, first_arr = text.find("{"), text.find("[")
    if first_obj != -1 and (first_arr == -1 or first_obj < first_arr):
        # A bare object (typical for a 1-question request)
        last_obj = text.rfind("}")
        if last_obj < first_obj:
            raise GenerationError("Invalid response format: unterminated JSON object")
        text = "[" + text[first_obj:last_obj + 1] + "]"
    else:
        match = _ARRAY_RE.search(text)
        if not match:
            raise GenerationError("Invalid response format: no JSON array found")
        text = match.group(0)

    try:
        data = json.loads(text)
    except json.JSONDecodeError:
        # Typographic quotes used as JSON delimiters
        fixed = text.replace("“", "\"").replace("”", "\"")
        try:
            data = json.loads(fixed)
        except json.JSONDecodeError as e:
            raise GenerationError(f"JSON parse error: {e}", cause=e) from e

    if not isinstance(data, list):
        raise GenerationError("Invalid response format: expected a JSON array")
    return data


def _first(entry: Dict[str, Any], keys: Sequence[str]) -> Any:
    for k in keys:
        if k in entry:
            return entry[k]
    return None


def to_question(entry: Any, difficulty: str) -> Question:
    """
    Validate one raw entry. The requested slot difficulty wins over whatever
    the model echoed back.
    """
    if not isinstance(entry, dict):
        raise GenerationError(f"Question entry is not an object: {entry!r}")

    text = _first(entry, TEXT_KEYS)
    if not isinstance(text, str) or not text.strip():
        raise GenerationError("Question text missing or empty")

    options = _first(entry, OPTION_KEYS)
    if not isinstance(options, list) or len(options) != OPTION_COUNT:
        raise GenerationError(f"Expected {OPTION_COUNT} options, got {options!r}")
    if not all(isinstance(o, str) and o.strip() for o in options):
        raise GenerationError("Every option must be a non-empty string")

    answer = _first(entry, ANSWER_KEYS)
    if isinstance(answer, bool) or not isinstance(answer, int):
        if isinstance(answer, str) and answer.strip().isdigit():
            answer = int(answer.strip())
        else:
            raise GenerationError(f"Correct option index must be an integer, got {answer!r}")
    if not 0 <= answer < OPTION_COUNT:
        raise GenerationError(f"Correct option index {answer} out of range 0..{OPTION_COUNT - 1}")

    return Question(
        text=text.strip(),
        options=tuple(o.strip() for o in options),
        correct_option_index=answer,
        difficulty=normalize_difficulty(difficulty),
    )


def parse_questions(raw_text: str, difficulty_mix: Sequence[str]) -> List[Question]:
    """All-or-nothing: exactly len(difficulty_mix) valid questions, or GenerationError."""
    data = extract_json_array(raw_text)
    expected = len(difficulty_mix)
    if len(data) != expected:
        raise GenerationError(
            f"Expected {expected} questions, got {len(data)}",
            expected=expected,
            received=len(data),
        )
    return [to_question(entry, diff) for entry, diff in zip(data, difficulty_mix)]
