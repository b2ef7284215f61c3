from sqlalchemy import Column, Integer, String, Text, Boolean, Enum, DateTime
from sqlalchemy.sql import func
import enum
from perf_review.database import Base


class ReviewSection(str, enum.Enum):
    # Declaration order is the display order of the form
    CORE_COMPETENCIES = "Core Competencies"
    GOALS_AND_DELIVERABLES = "Goals & Deliverables"
    GROWTH_AND_DEVELOPMENT = "Growth & Development"

    @property
    def position(self) -> int:
        return list(ReviewSection).index(self)


class QuestionType(str, enum.Enum):
    RATING = "rating"  # 1-5 scale
    SHORT_TEXT = "short_text"
    LONG_TEXT = "long_text"

    @property
    def is_text(self) -> bool:
        return self in (QuestionType.SHORT_TEXT, QuestionType.LONG_TEXT)


class ReviewQuestion(Base):
    __tablename__ = "review_questions"

    id = Column(Integer, primary_key=True, index=True)
    section = Column(Enum(ReviewSection), nullable=False, index=True)
    question_text = Column(Text, nullable=False)
    type = Column(Enum(QuestionType), nullable=False, default=QuestionType.RATING)
    is_required = Column(Boolean, nullable=False, default=True)
    points = Column(Integer, nullable=False, default=0)  # scoring weight
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<ReviewQuestion {self.id} [{self.section.value}] {self.type.value}>"
