import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import ValidationError

from quizgen.schemas import ANSWER_LETTERS, Question

logger = logging.getLogger(__name__)

CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$", re.IGNORECASE)
LETTER_RE = re.compile(r"^\s*([A-Da-d])\s*[.)]?\s*$")
ANSWER_KEYS = ("answer", "correctAnswer", "correctIndex", "correct")


@dataclass(frozen=True)
class ParsedQuiz:
    questions: list[Question]
    title: Optional[str] = None


@dataclass(frozen=True)
class ParseError:
    message: str


ParseResult = Union[ParsedQuiz, ParseError]


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    match = CODE_FENCE_RE.match(text)
    return match.group(1) if match else text


def normalize_answer(value: Any) -> Optional[str]:
    """Map a letter A-D or an index 0-3 onto the canonical letter"""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return ANSWER_LETTERS[value] if 0 <= value < len(ANSWER_LETTERS) else None
    if isinstance(value, str):
        match = LETTER_RE.match(value)
        if match:
            return match.group(1).upper()
        if value.strip().isdigit():
            return normalize_answer(int(value.strip()))
    return None


def _to_question(item: Any, position: int) -> Question:
    if not isinstance(item, dict):
        raise ValueError(f"question {position} is not an object")

    raw_answer = next((item[key] for key in ANSWER_KEYS if key in item), None)
    answer = normalize_answer(raw_answer)
    if answer is None:
        raise ValueError(f"question {position} has no valid answer: {raw_answer!r}")

    return Question.model_validate(
        {
            "question": item.get("question"),
            "options": item.get("options"),
            "answer": answer,
            "explanation": item.get("explanation") or None,
        }
    )


def parse_completion(raw: str, expected_count: Optional[int] = None) -> ParseResult:
    """Parse and validate completion text as a quiz.

    Accepts a JSON array of questions or an object with a "questions" array.
    Nothing is repaired beyond answer normalization: a single invalid question
    rejects the whole response. Extra questions beyond expected_count are
    dropped, too few is an error.
    """
    if not raw or not raw.strip():
        return ParseError("empty completion")

    try:
        data = json.loads(_strip_code_fence(raw))
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse JSON response: {str(e)}")
        return ParseError(f"not JSON: {str(e)}")

    title = None
    if isinstance(data, dict):
        title = data.get("title") if isinstance(data.get("title"), str) else None
        data = data.get("questions")
    if not isinstance(data, list) or not data:
        return ParseError("no questions array in completion")

    try:
        questions = [_to_question(item, i + 1) for i, item in enumerate(data)]
    except (ValidationError, ValueError) as e:
        logger.error(f"Quiz validation failed: {e}")
        return ParseError(str(e))

    if expected_count is not None:
        if len(questions) < expected_count:
            return ParseError(f"expected {expected_count} questions, got {len(questions)}")
        questions = questions[:expected_count]

    return ParsedQuiz(questions=questions, title=title.strip() if title and title.strip() else None)
