from sqlalchemy import Column, Integer, String, Float, Text, Enum, ForeignKey, DateTime
from sqlalchemy.sql import func
import enum
from perf_review.database import Base


class SessionStatus(str, enum.Enum):
    PENDING_SELF_REVIEW = "pending_self_review"
    PENDING_MANAGER_REVIEW = "pending_manager_review"
    COMPLETED = "completed"


class ReviewSession(Base):
    """
    One employee's review for a cycle.
    Mutated only through the two submit transitions; never hard-deleted.
    """
    __tablename__ = "review_sessions"

    id = Column(Integer, primary_key=True, index=True)
    cycle = Column(String, nullable=False, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    status = Column(Enum(SessionStatus), nullable=False, default=SessionStatus.PENDING_SELF_REVIEW)

    employee_submitted_at = Column(DateTime(timezone=True), nullable=True)
    manager_submitted_at = Column(DateTime(timezone=True), nullable=True)

    # Persisted at completion, never recomputed on read
    final_score = Column(Float, nullable=True)
    # Manager's free-text summary; not part of any answer set and never scored
    overall_comment = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    @property
    def is_completed(self) -> bool:
        return self.status == SessionStatus.COMPLETED
