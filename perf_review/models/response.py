"""
Answer rows for the two roles.
Employee and manager answers live in disjoint tables keyed by (session_id, question_id).
question_id carries no foreign key: deleting a catalog question orphans its history.
"""
from sqlalchemy import Column, Integer, Text, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from perf_review.database import Base


class Response(Base):
    __tablename__ = "responses"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("review_sessions.id"), nullable=False, index=True)
    question_id = Column(Integer, nullable=False, index=True)
    score = Column(Integer, nullable=True)
    response_text = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("session_id", "question_id", name="uq_response_session_question"),
    )


class ManagerResponse(Base):
    __tablename__ = "manager_responses"

    id = Column(Integer, primary_key=True, index=True)
    session_id = Column(Integer, ForeignKey("review_sessions.id"), nullable=False, index=True)
    question_id = Column(Integer, nullable=False, index=True)
    score = Column(Integer, nullable=True)
    response_text = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("session_id", "question_id", name="uq_manager_response_session_question"),
    )
