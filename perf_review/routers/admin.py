from typing import List, Optional
from fastapi import APIRouter, Depends, Response, status

from perf_review.dependencies import get_admin_service, get_catalog_service
from perf_review.models.review_session import SessionStatus
from perf_review.models.user import UserRole
from perf_review.routers.auth_deps import require_admin
from perf_review.schemas.question import QuestionCreate, QuestionResponse, QuestionUpdate
from perf_review.schemas.review import ReviewSummaryStats, SessionSummary
from perf_review.schemas.user import UserCreate, UserResponse
from perf_review.services.admin import AdminService
from perf_review.services.catalog import CatalogService

router = APIRouter(
    prefix="/admin",
    tags=["admin"],
    dependencies=[Depends(require_admin())],
)


# --- Question catalog ---

@router.get("/questions", response_model=List[QuestionResponse])
async def list_questions(service: CatalogService = Depends(get_catalog_service)):
    return await service.list_questions()


@router.post("/questions", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(payload: QuestionCreate, service: CatalogService = Depends(get_catalog_service)):
    return await service.create_question(payload.model_dump())


@router.patch("/questions/{question_id}", response_model=QuestionResponse)
async def update_question(
    question_id: int,
    payload: QuestionUpdate,
    service: CatalogService = Depends(get_catalog_service),
):
    return await service.update_question(question_id, payload.model_dump(exclude_unset=True))


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(question_id: int, service: CatalogService = Depends(get_catalog_service)):
    await service.delete_question(question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Users ---

@router.get("/users", response_model=List[UserResponse])
async def list_users(role: Optional[UserRole] = None, service: AdminService = Depends(get_admin_service)):
    return await service.list_users(role)


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(payload: UserCreate, service: AdminService = Depends(get_admin_service)):
    return await service.create_user(payload)


# --- Audit ---

@router.get("/sessions", response_model=List[SessionSummary])
async def list_sessions(
    status: Optional[SessionStatus] = None,
    search: Optional[str] = None,
    service: AdminService = Depends(get_admin_service),
):
    return await service.list_sessions(status=status, search=search)


@router.get("/summary", response_model=ReviewSummaryStats)
async def review_summary(service: AdminService = Depends(get_admin_service)):
    return await service.summary()
