"""
Typed answer sets.

An answer set maps question id -> a variant chosen by the question's declared type:
RatingAnswer for rating questions, TextAnswer for short/long text questions.
Raw payloads are validated against the catalog at the boundary (build_answer_set);
rows coming back from the store are converted with answers_from_rows.
"""
from typing import Annotated, Any, Dict, Iterable, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from perf_review.core.exceptions import AnswerValidationError


class RatingAnswer(BaseModel):
    kind: Literal["rating"] = "rating"
    # 0 / None: slider not moved yet
    score: Optional[int] = Field(default=None, ge=0, le=5)
    comment: Optional[str] = None

    @property
    def is_rated(self) -> bool:
        return self.score is not None and self.score > 0


class TextAnswer(BaseModel):
    kind: Literal["text"] = "text"
    text: str = ""

    @property
    def is_filled(self) -> bool:
        return bool(self.text.strip())


Answer = Annotated[Union[RatingAnswer, TextAnswer], Field(discriminator="kind")]
AnswerSet = Dict[int, Union[RatingAnswer, TextAnswer]]

_answer_adapter = TypeAdapter(Answer)


def _expected_kind(question) -> str:
    return "text" if question.type.is_text else "rating"


def build_answer_set(catalog, raw: Mapping[Any, Any]) -> AnswerSet:
    """
    Validate an incoming {question_id: answer} payload against the catalog.

    Each value may be a RatingAnswer/TextAnswer or a dict; a dict without "kind"
    takes the kind dictated by the question type.
    """
    answers: AnswerSet = {}
    unknown: List[Any] = []
    mismatched: List[int] = []
    invalid: List[Any] = []

    for key, value in raw.items():
        try:
            question_id = int(key)
        except (TypeError, ValueError):
            unknown.append(key)
            continue
        question = catalog.get(question_id)
        if question is None:
            unknown.append(question_id)
            continue

        expected = _expected_kind(question)
        if isinstance(value, (RatingAnswer, TextAnswer)):
            answer = value
        elif not isinstance(value, Mapping):
            invalid.append(question_id)
            continue
        else:
            payload = dict(value)
            payload.setdefault("kind", expected)
            try:
                answer = _answer_adapter.validate_python(payload)
            except ValidationError:
                invalid.append(question_id)
                continue
        if answer.kind != expected:
            mismatched.append(question_id)
            continue
        answers[question_id] = answer

    if unknown:
        raise AnswerValidationError("Answers reference questions that are not in the catalog", unknown)
    if mismatched:
        raise AnswerValidationError("Answer kind does not match the question type", mismatched)
    if invalid:
        raise AnswerValidationError("Answers failed validation (ratings must be between 0 and 5)", invalid)
    return answers


def answer_to_row(session_id: int, question_id: int, answer) -> Dict[str, Any]:
    if answer.kind == "rating":
        return {
            "session_id": session_id,
            "question_id": question_id,
            "score": answer.score,
            "response_text": answer.comment,
        }
    return {
        "session_id": session_id,
        "question_id": question_id,
        "score": None,
        "response_text": answer.text,
    }


def answers_to_rows(session_id: int, answers: AnswerSet) -> List[Dict[str, Any]]:
    return [answer_to_row(session_id, qid, answer) for qid, answer in answers.items()]


def answers_from_rows(catalog, rows: Iterable[Any]) -> AnswerSet:
    """Rebuild an answer set from stored rows; rows for deleted questions are skipped."""
    answers: AnswerSet = {}
    for row in rows:
        question = catalog.get(row.question_id)
        if question is None:
            continue
        if question.type.is_text:
            answers[row.question_id] = TextAnswer(text=row.response_text or "")
        else:
            score = row.score if row.score is not None and 0 <= row.score <= 5 else None
            answers[row.question_id] = RatingAnswer(score=score, comment=row.response_text)
    return answers
