import pytest

from perf_review.core.exceptions import DuplicateUserError, InvalidParticipantError, NotFoundError, StoreIOError
from perf_review.models.review_question import QuestionType, ReviewSection
from perf_review.models.review_session import SessionStatus
from perf_review.models.user import UserRole
from perf_review.schemas.user import UserCreate
from perf_review.services.admin import AdminService
from perf_review.services.catalog import CatalogService
from perf_review.services.review_session import ReviewSessionService
from tests.conftest import full_self_review


@pytest.mark.asyncio
async def test_creating_managed_employee_opens_a_session(stores, directory):
    service = AdminService(stores)
    user = await service.create_user(UserCreate(
        name="Nia New", email="nia@acme.io", role=UserRole.EMPLOYEE, manager_id=directory["manager"].id
    ))
    sessions = await stores.sessions.list(filters={"employee_id": user.id})
    assert len(sessions) == 1
    assert sessions[0].status == SessionStatus.PENDING_SELF_REVIEW
    assert sessions[0].manager_id == directory["manager"].id


@pytest.mark.asyncio
async def test_unmanaged_employee_gets_no_session(stores, directory):
    user = await AdminService(stores).create_user(UserCreate(name="Solo", email="solo@acme.io"))
    assert await stores.sessions.list(filters={"employee_id": user.id}) == []


@pytest.mark.asyncio
async def test_manager_reference_must_be_a_manager(stores, directory):
    with pytest.raises(InvalidParticipantError):
        await AdminService(stores).create_user(UserCreate(
            name="Bad Ref", email="bad@acme.io", manager_id=directory["other"].id
        ))


def test_only_employees_may_carry_manager_id():
    with pytest.raises(ValueError):
        UserCreate(name="Mgr", email="m2@acme.io", role=UserRole.MANAGER, manager_id=1)


@pytest.mark.asyncio
async def test_duplicate_email_rejected(stores, directory):
    with pytest.raises(DuplicateUserError):
        await AdminService(stores).create_user(UserCreate(name="Eve Again", email="eve@acme.io"))


@pytest.mark.asyncio
async def test_session_audit_filters_and_summary(stores, directory):
    sessions = ReviewSessionService(stores)
    questions = directory["questions"]
    eve = await sessions.create_session(directory["employee"].id)
    await sessions.create_session(directory["other"].id)
    await sessions.submit_self_review(eve.id, full_self_review(questions))
    await sessions.submit_manager_review(
        eve.id, {q.id: {"score": 3} for q in questions if q.type == QuestionType.RATING}
    )

    service = AdminService(stores)
    assert len(await service.list_sessions()) == 2
    completed = await service.list_sessions(status=SessionStatus.COMPLETED)
    assert [s.employee_name for s in completed] == ["Eve Employee"]
    assert [s.employee_name for s in await service.list_sessions(search="OLLY")] == ["Olly Other"]

    stats = await service.summary()
    assert stats.total_employees == 2
    assert stats.submitted == 1
    assert stats.manager_completed == 1
    assert stats.average_final_score == 3.0


@pytest.mark.asyncio
async def test_summary_without_completed_reviews(stores, directory):
    stats = await AdminService(stores).summary()
    assert stats.average_final_score is None
    assert stats.manager_completed == 0


@pytest.mark.asyncio
async def test_catalog_admin_operations(stores, directory):
    service = CatalogService(stores)
    created = await service.create_question({
        "section": ReviewSection.GROWTH_AND_DEVELOPMENT,
        "question_text": "Mentoring others",
        "type": QuestionType.RATING,
        "is_required": False,
        "points": 2,
        "sort_order": 0,
    })
    catalog = await service.load_catalog()
    growth = catalog.by_section(ReviewSection.GROWTH_AND_DEVELOPMENT)
    assert growth[0].id == created.id

    updated = await service.update_question(created.id, {"is_required": True})
    assert updated.is_required

    await service.delete_question(created.id)
    with pytest.raises(NotFoundError):
        await service.delete_question(created.id)
    with pytest.raises(NotFoundError):
        await service.update_question(created.id, {"points": 1})


@pytest.mark.asyncio
async def test_user_is_removed_when_session_cannot_be_opened(stores, directory, monkeypatch):
    service = AdminService(stores)
    payload = UserCreate(name="Rita Retry", email="rita@acme.io", manager_id=directory["manager"].id)

    async def unavailable(record):
        raise StoreIOError("create", "review_sessions")

    monkeypatch.setattr(stores.sessions, "create", unavailable)
    with pytest.raises(StoreIOError):
        await service.create_user(payload)
    assert await stores.users.list(filters={"email": "rita@acme.io"}) == []

    monkeypatch.undo()
    user = await service.create_user(payload)
    assert len(await stores.sessions.list(filters={"employee_id": user.id})) == 1
