"""
Service providers for FastAPI endpoints.

Services are built per request on top of the request's record stores. The
submission guard is shared through app.state so in-flight checks span requests.
"""
from fastapi import Depends, Request

from perf_review.database import get_stores
from perf_review.services.admin import AdminService
from perf_review.services.catalog import CatalogService
from perf_review.services.reconciliation import ReconciliationService
from perf_review.services.review_session import ReviewSessionService
from perf_review.services.submission_guard import SubmissionGuard
from perf_review.store import ReviewStores


def get_submission_guard(request: Request) -> SubmissionGuard:
    return request.app.state.submission_guard


def get_review_service(
    stores: ReviewStores = Depends(get_stores),
    guard: SubmissionGuard = Depends(get_submission_guard),
) -> ReviewSessionService:
    return ReviewSessionService(stores, guard)


def get_reconciliation_service(stores: ReviewStores = Depends(get_stores)) -> ReconciliationService:
    return ReconciliationService(stores)


def get_catalog_service(stores: ReviewStores = Depends(get_stores)) -> CatalogService:
    return CatalogService(stores)


def get_admin_service(
    stores: ReviewStores = Depends(get_stores),
    guard: SubmissionGuard = Depends(get_submission_guard),
) -> AdminService:
    return AdminService(stores, guard)
