import asyncio
import os
import tempfile

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

# Set env before importing app components
_DB_DIR = tempfile.mkdtemp(prefix="perf-review-tests-")
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_DB_DIR}/api.db"
os.environ["SEED_DEFAULT_CATALOG"] = "false"
os.environ["REVIEW_CYCLE"] = "2026"

from perf_review.database import Base, engine, SessionLocal
from perf_review.main import app
from perf_review.models.review_question import QuestionType, ReviewSection
from perf_review.models.user import UserRole
from perf_review.store import ReviewStores
from fastapi.testclient import TestClient

# (section, text, type, required) in sort order
CATALOG = [
    (ReviewSection.CORE_COMPETENCIES, "Communication", QuestionType.RATING, True),
    (ReviewSection.CORE_COMPETENCIES, "Collaboration", QuestionType.RATING, True),
    (ReviewSection.CORE_COMPETENCIES, "Initiative", QuestionType.RATING, False),
    (ReviewSection.GOALS_AND_DELIVERABLES, "Key contributions", QuestionType.LONG_TEXT, True),
    (ReviewSection.GOALS_AND_DELIVERABLES, "Missed goals", QuestionType.LONG_TEXT, False),
    (ReviewSection.GROWTH_AND_DEVELOPMENT, "Growth this period", QuestionType.RATING, True),
    (ReviewSection.GROWTH_AND_DEVELOPMENT, "Next skill", QuestionType.SHORT_TEXT, False),
]


async def seed_directory(stores: ReviewStores):
    """Create one admin, one manager, two employees and the test catalog."""
    admin = await stores.users.create({"name": "Ada Admin", "email": "admin@acme.io", "role": UserRole.ADMIN})
    manager = await stores.users.create({"name": "Max Manager", "email": "manager@acme.io", "role": UserRole.MANAGER})
    employee = await stores.users.create({
        "name": "Eve Employee", "email": "eve@acme.io", "role": UserRole.EMPLOYEE, "manager_id": manager.id
    })
    other = await stores.users.create({
        "name": "Olly Other", "email": "olly@acme.io", "role": UserRole.EMPLOYEE, "manager_id": manager.id
    })
    questions = []
    for order, (section, text, qtype, required) in enumerate(CATALOG, start=1):
        questions.append(await stores.questions.create({
            "section": section,
            "question_text": text,
            "type": qtype,
            "is_required": required,
            "sort_order": order,
        }))
    return {
        "admin": admin,
        "manager": manager,
        "employee": employee,
        "other": other,
        "questions": questions,
    }


def full_self_review(questions, score=4):
    """Answers for every required question: ratings at `score`, required text filled, optional text blank."""
    answers = {}
    for q in questions:
        if q.type == QuestionType.RATING:
            if q.is_required:
                answers[q.id] = {"score": score}
        else:
            answers[q.id] = {"text": "Shipped the billing revamp" if q.is_required else ""}
    return answers


# --- Async (service / store) fixtures: private in-memory database per test ---

@pytest_asyncio.fixture
async def stores():
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=test_engine, expire_on_commit=False, class_=AsyncSession)
    yield ReviewStores.from_session_factory(factory)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def directory(stores):
    return await seed_directory(stores)


# --- API fixtures: the application's own engine, reset per test ---

async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture(scope="function")
def client():
    """TestClient over a freshly reset database."""
    asyncio.run(_reset_schema())
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def api_directory(client):
    """Seed users and catalog through the stores the application itself uses."""
    return asyncio.run(seed_directory(ReviewStores.from_session_factory(SessionLocal)))


@pytest.fixture
def as_user():
    def _headers(user):
        return {"X-User-ID": str(user.id)}
    return _headers
