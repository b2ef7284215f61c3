from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Dict, List, Optional, Union
from perf_review.models.review_question import ReviewSection
from perf_review.models.review_session import SessionStatus
from perf_review.schemas.answers import Answer
from perf_review.schemas.question import QuestionResponse
from perf_review.services.completion import CompletionResult

# Raw answer payload: {question_id: {"score": 4, "comment": "..."} | {"text": "..."}}
RawAnswers = Dict[int, Dict[str, Union[int, str, None]]]


# --- Sessions ---
class SessionCreate(BaseModel):
    employee_id: Optional[int] = None  # defaults to the caller when an employee starts their own review
    manager_id: Optional[int] = None
    cycle: Optional[str] = None


class SessionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    cycle: str
    employee_id: int
    manager_id: int
    status: SessionStatus
    employee_submitted_at: Optional[datetime] = None
    manager_submitted_at: Optional[datetime] = None
    final_score: Optional[float] = None
    overall_comment: Optional[str] = None
    created_at: Optional[datetime] = None


class SessionSummary(BaseModel):
    """Session row with participant names, as listed on team and audit dashboards."""
    id: int
    cycle: str
    status: SessionStatus
    employee_id: int
    employee_name: str
    manager_id: int
    manager_name: str
    final_score: Optional[float] = None
    employee_submitted_at: Optional[datetime] = None
    manager_submitted_at: Optional[datetime] = None


# --- Submissions ---
class SelfReviewSubmission(BaseModel):
    answers: RawAnswers = Field(default_factory=dict)


class ManagerReviewSubmission(BaseModel):
    answers: RawAnswers = Field(default_factory=dict)
    overall_comment: Optional[str] = None


class AnswerSetResponse(BaseModel):
    session_id: int
    answers: Dict[int, Answer]


# --- Live previews ---
class SelfReviewProgress(BaseModel):
    completion: CompletionResult
    section_scores: Dict[ReviewSection, Optional[float]]


class ComparisonItem(BaseModel):
    question: QuestionResponse
    employee_answer: Optional[Answer] = None
    manager_answer: Optional[Answer] = None


class ComparisonSection(BaseModel):
    section: ReviewSection
    items: List[ComparisonItem]


class ReviewComparison(BaseModel):
    session: SessionResponse
    sections: List[ComparisonSection]
    employee_section_scores: Dict[ReviewSection, Optional[float]]
    manager_completion: CompletionResult
    final_score_preview: Optional[float] = None
    overall_comment: Optional[str] = None


# --- Admin ---
class ReviewSummaryStats(BaseModel):
    total_employees: int
    submitted: int
    manager_completed: int
    average_final_score: Optional[float] = None
