from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from typing import Optional
from perf_review.models.review_question import ReviewSection, QuestionType


class QuestionCreate(BaseModel):
    section: ReviewSection
    question_text: str = Field(min_length=1)
    type: QuestionType = QuestionType.RATING
    is_required: bool = True
    points: int = Field(default=0, ge=0)
    sort_order: int = 0


class QuestionUpdate(BaseModel):
    section: Optional[ReviewSection] = None
    question_text: Optional[str] = Field(default=None, min_length=1)
    type: Optional[QuestionType] = None
    is_required: Optional[bool] = None
    points: Optional[int] = Field(default=None, ge=0)
    sort_order: Optional[int] = None


class QuestionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    section: ReviewSection
    question_text: str
    type: QuestionType
    is_required: bool
    points: int
    sort_order: int
    created_at: Optional[datetime] = None
