from fastapi import APIRouter
from perf_review.routers import admin, reviews

# Centralized API router hub
# Routers are aggregated here, and main.py only imports this single hub.
api_router = APIRouter()

api_router.include_router(reviews.router, tags=["Reviews"])
api_router.include_router(admin.router, tags=["Administration"])
