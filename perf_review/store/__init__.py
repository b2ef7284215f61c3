from sqlalchemy.ext.asyncio import async_sessionmaker

from perf_review.models import User, ReviewQuestion, ReviewSession, Response, ManagerResponse
from perf_review.store.record_store import RecordStore, SqlAlchemyRecordStore

# Natural key of both answer sets
ANSWER_CONFLICT_KEYS = ("session_id", "question_id")


class ReviewStores:
    """The record stores the review core reads and writes, one per entity."""

    def __init__(
        self,
        users: RecordStore,
        questions: RecordStore,
        sessions: RecordStore,
        responses: RecordStore,
        manager_responses: RecordStore,
    ):
        self.users = users
        self.questions = questions
        self.sessions = sessions
        self.responses = responses
        self.manager_responses = manager_responses

    @classmethod
    def from_session_factory(cls, session_factory: async_sessionmaker) -> "ReviewStores":
        return cls(
            users=SqlAlchemyRecordStore(User, session_factory),
            questions=SqlAlchemyRecordStore(ReviewQuestion, session_factory),
            sessions=SqlAlchemyRecordStore(ReviewSession, session_factory),
            responses=SqlAlchemyRecordStore(Response, session_factory),
            manager_responses=SqlAlchemyRecordStore(ManagerResponse, session_factory),
        )


__all__ = ["ANSWER_CONFLICT_KEYS", "RecordStore", "ReviewStores", "SqlAlchemyRecordStore"]
