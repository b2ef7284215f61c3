"""
Review session lifecycle.

Creation and the two submit transitions. Every transition writes its answer batch
first and flips the session status only once those writes have succeeded, so a
StoreIOError mid-submit leaves the session where it was and the submit can be retried.
"""
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from perf_review.core.config import settings
from perf_review.core.exceptions import (
    AccessDeniedError,
    DuplicateSessionError,
    IncompleteFormError,
    InvalidParticipantError,
    NotFoundError,
)
from perf_review.models.review_session import SessionStatus
from perf_review.schemas.answers import AnswerSet, answers_from_rows, answers_to_rows, build_answer_set
from perf_review.schemas.review import SelfReviewProgress, SessionSummary
from perf_review.services.base import BaseService
from perf_review.services.catalog import Catalog, CatalogService
from perf_review.services.completion import ReviewRole, evaluate_completion
from perf_review.services.lifecycle import INITIAL_STATUS, ensure_transition
from perf_review.services.scoring import final_score, section_scores
from perf_review.services.submission_guard import SubmissionGuard
from perf_review.store import ANSWER_CONFLICT_KEYS, ReviewStores


class ReviewSessionService(BaseService):
    def __init__(self, stores: ReviewStores, guard: Optional[SubmissionGuard] = None):
        super().__init__(stores)
        self.guard = guard or SubmissionGuard()
        self.catalog_service = CatalogService(stores)

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------
    async def get_session(self, session_id: int):
        session = await self.stores.sessions.find(session_id)
        if session is None:
            raise NotFoundError("Review session", session_id)
        return session

    async def _get_user(self, user_id: int):
        user = await self.stores.users.find(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return user

    async def get_employee_session(self, employee_id: int, cycle: Optional[str] = None):
        """Most recent session of the employee for the cycle, or None if they have not started."""
        sessions = await self.stores.sessions.list(
            filters={"employee_id": employee_id, "cycle": cycle or settings.review_cycle},
            order_by=["-created_at", "-id"],
            limit=1,
        )
        return sessions[0] if sessions else None

    async def list_team_sessions(self, manager_id: int) -> List[SessionSummary]:
        sessions = await self.stores.sessions.list(filters={"manager_id": manager_id}, order_by=["-created_at", "-id"])
        return await self.summarize(sessions)

    async def summarize(self, sessions) -> List[SessionSummary]:
        """Attach participant names; a missing user renders as 'Unknown'."""
        user_ids = {s.employee_id for s in sessions} | {s.manager_id for s in sessions}
        users = await self.stores.users.list(filters={"id": sorted(user_ids)}) if user_ids else []
        names = {u.id: u.name for u in users}
        return [
            SessionSummary(
                id=s.id,
                cycle=s.cycle,
                status=s.status,
                employee_id=s.employee_id,
                employee_name=names.get(s.employee_id, "Unknown"),
                manager_id=s.manager_id,
                manager_name=names.get(s.manager_id, "Unknown"),
                final_score=s.final_score,
                employee_submitted_at=s.employee_submitted_at,
                manager_submitted_at=s.manager_submitted_at,
            )
            for s in sessions
        ]

    async def get_answers(self, session_id: int, role: ReviewRole, catalog: Optional[Catalog] = None) -> AnswerSet:
        catalog = catalog or await self.catalog_service.load_catalog()
        store = self.stores.responses if role == ReviewRole.EMPLOYEE else self.stores.manager_responses
        rows = await store.list(filters={"session_id": session_id})
        return answers_from_rows(catalog, rows)

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------
    async def create_session(self, employee_id: int, manager_id: Optional[int] = None, cycle: Optional[str] = None):
        """
        Open a review for an employee in pending_self_review.

        Uniqueness per (employee, cycle) is an application-level check-then-create;
        the store has no constraint backing it.
        """
        cycle = cycle or settings.review_cycle
        async with self.guard.hold(("create", employee_id)):
            employee = await self._get_user(employee_id)
            if not employee.is_employee:
                raise InvalidParticipantError(f"User {employee_id} is not an employee", employee_id)

            # The reviewer is always the manager the employee references
            if manager_id is not None and manager_id != employee.manager_id:
                raise InvalidParticipantError(
                    f"User {manager_id} is not the assigned manager of employee {employee_id}", manager_id
                )
            manager_id = employee.manager_id
            if manager_id is None:
                raise InvalidParticipantError(f"Employee {employee_id} has no assigned manager", employee_id)
            manager = await self._get_user(manager_id)
            if not manager.is_manager:
                raise InvalidParticipantError(f"User {manager_id} is not a manager", manager_id)

            existing = await self.stores.sessions.list(
                filters={"employee_id": employee_id, "cycle": cycle},
                limit=1,
            )
            if existing:
                self.log_warning(f"Duplicate review session for employee {employee_id} in cycle {cycle}")
                raise DuplicateSessionError(employee_id, cycle, existing[0].id)

            session = await self.stores.sessions.create({
                "cycle": cycle,
                "employee_id": employee_id,
                "manager_id": manager_id,
                "status": INITIAL_STATUS,
                "employee_submitted_at": None,
                "manager_submitted_at": None,
                "final_score": None,
            })
        self._logger.info(f"Review session {session.id} opened for employee {employee_id} (cycle {cycle})")
        return session

    async def preview_self_review(self, session_id: int, raw_answers: Mapping[Any, Any]) -> SelfReviewProgress:
        """Progress and live section scores of an unsaved employee draft. Pure read."""
        await self.get_session(session_id)
        catalog = await self.catalog_service.load_catalog()
        answers = build_answer_set(catalog, raw_answers)
        return SelfReviewProgress(
            completion=evaluate_completion(catalog, answers, ReviewRole.EMPLOYEE),
            section_scores=section_scores(catalog, answers),
        )

    async def submit_self_review(self, session_id: int, raw_answers: Mapping[Any, Any], actor_id: Optional[int] = None):
        async with self.guard.hold(("submit", session_id)):
            session = await self.get_session(session_id)
            if actor_id is not None and actor_id != session.employee_id:
                raise AccessDeniedError("Only the reviewed employee can submit the self-review")
            target = ensure_transition(session, SessionStatus.PENDING_MANAGER_REVIEW)

            catalog = await self.catalog_service.load_catalog()
            answers = build_answer_set(catalog, raw_answers)
            completion = evaluate_completion(catalog, answers, ReviewRole.EMPLOYEE)
            if not completion.is_complete:
                self.log_warning(
                    f"Self-review for session {session_id} blocked: {len(completion.missing_question_ids)} required unanswered",
                    missing_question_ids=completion.missing_question_ids,
                )
                raise IncompleteFormError(session_id, completion.missing_question_ids)

            await self.stores.responses.upsert_many(answers_to_rows(session_id, answers), ANSWER_CONFLICT_KEYS)
            updated = await self.stores.sessions.update(session_id, {
                "status": target,
                "employee_submitted_at": datetime.now(timezone.utc),
            })
        self._logger.info(f"Review session {session_id} -> {target.value} ({len(answers)} answers)")
        return updated

    async def submit_manager_review(
        self,
        session_id: int,
        raw_answers: Mapping[Any, Any],
        overall_comment: Optional[str] = None,
        actor_id: Optional[int] = None,
    ):
        """
        Complete the review. Manager completeness is not enforced here, only the status.
        The final score covers stored manager answers overlaid with this batch.
        """
        async with self.guard.hold(("submit", session_id)):
            session = await self.get_session(session_id)
            if actor_id is not None and actor_id != session.manager_id:
                raise AccessDeniedError("Only the assigned manager can submit this review")
            target = ensure_transition(session, SessionStatus.COMPLETED)

            catalog = await self.catalog_service.load_catalog()
            answers = build_answer_set(catalog, raw_answers)
            stored = await self.get_answers(session_id, ReviewRole.MANAGER, catalog)
            merged = {**stored, **answers}
            score = final_score(catalog, merged)

            await self.stores.manager_responses.upsert_many(answers_to_rows(session_id, answers), ANSWER_CONFLICT_KEYS)
            changes = {
                "status": target,
                "manager_submitted_at": datetime.now(timezone.utc),
                "final_score": score,
            }
            if overall_comment is not None:
                changes["overall_comment"] = overall_comment
            updated = await self.stores.sessions.update(session_id, changes)
        self._logger.info(f"Review session {session_id} -> {target.value} (final score {score})")
        return updated
