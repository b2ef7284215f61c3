from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from perf_review.dependencies import get_admin_service, get_reconciliation_service, get_review_service
from perf_review.models.user import User, UserRole
from perf_review.routers.auth_deps import ensure_session_access, get_current_user, require_manager, require_role
from perf_review.schemas.review import (
    AnswerSetResponse,
    ManagerReviewSubmission,
    ReviewComparison,
    SelfReviewProgress,
    SelfReviewSubmission,
    SessionCreate,
    SessionResponse,
    SessionSummary,
)
from perf_review.schemas.user import TeamMemberCreate, UserCreate, UserResponse
from perf_review.services.admin import AdminService
from perf_review.services.completion import ReviewRole
from perf_review.services.reconciliation import ReconciliationService
from perf_review.services.review_session import ReviewSessionService

router = APIRouter(prefix="/reviews", tags=["reviews"])


# --- Sessions ---

@router.post("/sessions", response_model=SessionResponse, status_code=status.HTTP_201_CREATED)
async def start_review(
    payload: SessionCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewSessionService = Depends(get_review_service),
):
    """
    Open a review. Employees start their own; managers start one for an employee
    they review; admins may open any.
    """
    employee_id = payload.employee_id
    manager_id = payload.manager_id

    if current_user.is_employee:
        if employee_id not in (None, current_user.id):
            raise HTTPException(status_code=403, detail="Employees can only start their own review")
        # The reviewer is always the assigned manager
        employee_id, manager_id = current_user.id, None
    elif current_user.is_manager:
        if manager_id not in (None, current_user.id):
            raise HTTPException(status_code=403, detail="Managers can only open reviews they conduct")
        manager_id = current_user.id

    if employee_id is None:
        raise HTTPException(status_code=422, detail="employee_id is required")

    return await service.create_session(employee_id, manager_id, payload.cycle)


@router.get("/me", response_model=Optional[SessionResponse])
async def my_review(
    cycle: Optional[str] = None,
    current_user: User = Depends(require_role([UserRole.EMPLOYEE])),
    service: ReviewSessionService = Depends(get_review_service),
):
    """The caller's session for the cycle, or null when the review has not been started."""
    return await service.get_employee_session(current_user.id, cycle)


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_review(
    session_id: int,
    current_user: User = Depends(get_current_user),
    service: ReviewSessionService = Depends(get_review_service),
):
    session = await service.get_session(session_id)
    ensure_session_access(session, current_user)
    return session


@router.get("/sessions/{session_id}/answers", response_model=AnswerSetResponse)
async def get_review_answers(
    session_id: int,
    role: ReviewRole = Query(ReviewRole.EMPLOYEE),
    current_user: User = Depends(get_current_user),
    service: ReviewSessionService = Depends(get_review_service),
):
    session = await service.get_session(session_id)
    ensure_session_access(session, current_user)
    if role == ReviewRole.MANAGER and current_user.role == UserRole.EMPLOYEE:
        raise HTTPException(status_code=403, detail="Manager answers are not visible to employees")
    answers = await service.get_answers(session_id, role)
    return AnswerSetResponse(session_id=session_id, answers=answers)


# --- Employee ---

@router.post("/sessions/{session_id}/progress", response_model=SelfReviewProgress)
async def self_review_progress(
    session_id: int,
    draft: SelfReviewSubmission,
    current_user: User = Depends(get_current_user),
    service: ReviewSessionService = Depends(get_review_service),
):
    """Completion and live section scores of an unsaved self-review draft."""
    session = await service.get_session(session_id)
    ensure_session_access(session, current_user)
    return await service.preview_self_review(session_id, draft.answers)


@router.post("/sessions/{session_id}/self-review", response_model=SessionResponse)
async def submit_self_review(
    session_id: int,
    submission: SelfReviewSubmission,
    current_user: User = Depends(require_role([UserRole.EMPLOYEE])),
    service: ReviewSessionService = Depends(get_review_service),
):
    return await service.submit_self_review(session_id, submission.answers, actor_id=current_user.id)


# --- Manager ---

@router.get("/team", response_model=List[SessionSummary])
async def team_reviews(
    current_user: User = Depends(require_role([UserRole.MANAGER])),
    service: ReviewSessionService = Depends(get_review_service),
):
    return await service.list_team_sessions(current_user.id)


@router.post("/team", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def add_team_member(
    payload: TeamMemberCreate,
    current_user: User = Depends(require_role([UserRole.MANAGER])),
    service: AdminService = Depends(get_admin_service),
):
    """Create an employee reporting to the caller; their review opens straight away."""
    return await service.create_user(UserCreate(
        name=payload.name,
        email=payload.email,
        job_title=payload.job_title,
        role=UserRole.EMPLOYEE,
        manager_id=current_user.id,
    ))


@router.get("/sessions/{session_id}/comparison", response_model=ReviewComparison)
async def review_comparison(
    session_id: int,
    current_user: User = Depends(require_manager()),
    service: ReviewSessionService = Depends(get_review_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service),
):
    session = await service.get_session(session_id)
    ensure_session_access(session, current_user)
    return await reconciliation.build(session_id)


@router.post("/sessions/{session_id}/comparison/preview", response_model=ReviewComparison)
async def review_comparison_preview(
    session_id: int,
    draft: ManagerReviewSubmission,
    current_user: User = Depends(require_manager()),
    service: ReviewSessionService = Depends(get_review_service),
    reconciliation: ReconciliationService = Depends(get_reconciliation_service),
):
    """Comparison with the manager's unsaved edits applied; nothing is written."""
    session = await service.get_session(session_id)
    ensure_session_access(session, current_user)
    return await reconciliation.build(session_id, draft.answers, draft.overall_comment)


@router.post("/sessions/{session_id}/manager-review", response_model=SessionResponse)
async def submit_manager_review(
    session_id: int,
    submission: ManagerReviewSubmission,
    current_user: User = Depends(require_role([UserRole.MANAGER])),
    service: ReviewSessionService = Depends(get_review_service),
):
    return await service.submit_manager_review(
        session_id,
        submission.answers,
        overall_comment=submission.overall_comment,
        actor_id=current_user.id,
    )
