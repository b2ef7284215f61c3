"""
Review session state machine.

pending_self_review -> pending_manager_review -> completed
No transition skips a state and none is reversible; completed is terminal.
"""
from typing import Optional

from perf_review.core.exceptions import InvalidStateError
from perf_review.models.review_session import SessionStatus

INITIAL_STATUS = SessionStatus.PENDING_SELF_REVIEW

TRANSITIONS = {
    SessionStatus.PENDING_SELF_REVIEW: SessionStatus.PENDING_MANAGER_REVIEW,
    SessionStatus.PENDING_MANAGER_REVIEW: SessionStatus.COMPLETED,
}


def next_status(current: SessionStatus) -> Optional[SessionStatus]:
    return TRANSITIONS.get(SessionStatus(current))


def can_transition(current: SessionStatus, target: SessionStatus) -> bool:
    return next_status(current) == SessionStatus(target)


def ensure_transition(session, target: SessionStatus) -> SessionStatus:
    """Raise InvalidStateError unless `session` may move to `target` right now."""
    current = SessionStatus(session.status)
    if not can_transition(current, target):
        raise InvalidStateError(session.id, current.value, SessionStatus(target).value)
    return SessionStatus(target)

