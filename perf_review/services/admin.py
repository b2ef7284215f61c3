"""
Administration: user directory and review audit.
"""
from typing import List, Optional

from perf_review.core.exceptions import DuplicateUserError, InvalidParticipantError
from perf_review.models.review_session import SessionStatus
from perf_review.models.user import UserRole
from perf_review.schemas.review import ReviewSummaryStats, SessionSummary
from perf_review.schemas.user import UserCreate
from perf_review.services.base import BaseService
from perf_review.services.review_session import ReviewSessionService
from perf_review.services.scoring import FINAL_SCORE_PLACES, round_half_up
from perf_review.services.submission_guard import SubmissionGuard


class AdminService(BaseService):
    def __init__(self, stores, guard: Optional[SubmissionGuard] = None):
        super().__init__(stores)
        self.sessions = ReviewSessionService(stores, guard)

    async def create_user(self, data: UserCreate):
        """
        Create a user. An employee created with a manager gets a review session
        for the current cycle straight away; if that fails the user is removed again
        and the error propagates.
        """
        if data.manager_id is not None and data.role != UserRole.EMPLOYEE:
            raise InvalidParticipantError("manager_id may only be set for employees")

        existing = await self.stores.users.list(filters={"email": data.email}, limit=1)
        if existing:
            raise DuplicateUserError(data.email)

        if data.manager_id is not None:
            manager = await self.stores.users.find(data.manager_id)
            if manager is None or not manager.is_manager:
                raise InvalidParticipantError(f"User {data.manager_id} is not a manager", data.manager_id)

        user = await self.stores.users.create(data.model_dump())
        self._logger.info(f"Created {user.role.value} user {user.id}")

        if user.is_employee and user.manager_id is not None:
            try:
                await self.sessions.create_session(user.id, user.manager_id)
            except Exception:
                # A managed employee never exists without a session
                self.log_warning(f"Session for new user {user.id} could not be opened; removing the user")
                await self.stores.users.delete(user.id)
                raise
        return user

    async def list_users(self, role: Optional[UserRole] = None):
        filters = {"role": role} if role else None
        return await self.stores.users.list(filters=filters, order_by=["name", "id"])

    async def list_sessions(self, status: Optional[SessionStatus] = None, search: Optional[str] = None) -> List[SessionSummary]:
        filters = {"status": status} if status else None
        sessions = await self.stores.sessions.list(filters=filters, order_by=["-created_at", "-id"])
        summaries = await self.sessions.summarize(sessions)
        if search:
            needle = search.lower()
            summaries = [s for s in summaries if needle in s.employee_name.lower()]
        return summaries

    async def summary(self) -> ReviewSummaryStats:
        employees = await self.stores.users.list(filters={"role": UserRole.EMPLOYEE})
        sessions = await self.stores.sessions.list()
        submitted = [
            s for s in sessions
            if s.status in (SessionStatus.PENDING_MANAGER_REVIEW, SessionStatus.COMPLETED)
        ]
        completed = [s for s in sessions if s.is_completed]

        average = None
        if completed:
            total = sum(s.final_score or 0 for s in completed)
            average = round_half_up(total / len(completed), FINAL_SCORE_PLACES)

        return ReviewSummaryStats(
            total_employees=len(employees),
            submitted=len(submitted),
            manager_completed=len(completed),
            average_final_score=average,
        )
