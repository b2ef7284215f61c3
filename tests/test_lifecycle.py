import pytest
from perf_review.core.exceptions import InvalidStateError
from perf_review.models.review_session import ReviewSession, SessionStatus
from perf_review.services.lifecycle import INITIAL_STATUS, can_transition, ensure_transition, next_status


def test_forward_chain():
    assert INITIAL_STATUS == SessionStatus.PENDING_SELF_REVIEW
    assert next_status(SessionStatus.PENDING_SELF_REVIEW) == SessionStatus.PENDING_MANAGER_REVIEW
    assert next_status(SessionStatus.PENDING_MANAGER_REVIEW) == SessionStatus.COMPLETED
    assert next_status(SessionStatus.COMPLETED) is None


@pytest.mark.parametrize("current,target", [
    (SessionStatus.PENDING_SELF_REVIEW, SessionStatus.COMPLETED),
    (SessionStatus.PENDING_SELF_REVIEW, SessionStatus.PENDING_SELF_REVIEW),
    (SessionStatus.PENDING_MANAGER_REVIEW, SessionStatus.PENDING_SELF_REVIEW),
    (SessionStatus.COMPLETED, SessionStatus.PENDING_MANAGER_REVIEW),
    (SessionStatus.COMPLETED, SessionStatus.COMPLETED),
])
def test_illegal_transitions_rejected(current, target):
    session = ReviewSession(id=7, status=current)
    assert not can_transition(current, target)
    with pytest.raises(InvalidStateError) as exc:
        ensure_transition(session, target)
    assert exc.value.details["session_id"] == 7
    assert session.status == current


def test_legal_transition_returns_target():
    session = ReviewSession(id=1, status=SessionStatus.PENDING_MANAGER_REVIEW)
    assert ensure_transition(session, SessionStatus.COMPLETED) == SessionStatus.COMPLETED
