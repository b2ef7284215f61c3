# Models package
# Importing modules here ensures they are registered with SQLAlchemy Base
from . import user, review_question, review_session, response

# Explicit class exports for cleaner imports
from .user import User, UserRole
from .review_question import ReviewQuestion, ReviewSection, QuestionType
from .review_session import ReviewSession, SessionStatus
from .response import Response, ManagerResponse

__all__ = [
    "User",
    "UserRole",
    "ReviewQuestion",
    "ReviewSection",
    "QuestionType",
    "ReviewSession",
    "SessionStatus",
    "Response",
    "ManagerResponse",
]
