"""
Completion / validation engine.

A pure function of (catalog, answer set, role). For employees it is the hard gate
of submit_self_review; for managers it only feeds the progress indicator.
"""
import enum
from typing import List

from pydantic import BaseModel, computed_field

from perf_review.models.review_question import QuestionType
from perf_review.schemas.answers import AnswerSet


class ReviewRole(str, enum.Enum):
    EMPLOYEE = "employee"
    MANAGER = "manager"


class CompletionResult(BaseModel):
    required_count: int
    answered_count: int
    percent: float
    missing_question_ids: List[int]

    @computed_field
    @property
    def is_complete(self) -> bool:
        return not self.missing_question_ids


def is_answered(question, answer) -> bool:
    if answer is None:
        return False
    if question.type == QuestionType.RATING:
        return answer.kind == "rating" and answer.is_rated
    if question.type.is_text:
        return answer.kind == "text" and answer.is_filled
    return False


def required_questions(catalog, role: ReviewRole = ReviewRole.EMPLOYEE) -> list:
    required = catalog.required()
    if role == ReviewRole.MANAGER:
        # Managers score; the written reflections belong to the employee
        return [q for q in required if q.type == QuestionType.RATING]
    return required


def evaluate_completion(catalog, answers: AnswerSet, role: ReviewRole = ReviewRole.EMPLOYEE) -> CompletionResult:
    required = required_questions(catalog, role)
    missing = [q.id for q in required if not is_answered(q, answers.get(q.id))]
    answered = len(required) - len(missing)
    percent = 100.0 if not required else answered / len(required) * 100
    return CompletionResult(
        required_count=len(required),
        answered_count=answered,
        percent=percent,
        missing_question_ids=missing,
    )
