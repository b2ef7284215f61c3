"""
Seed a demo directory (admin, manager, two employees) and the default questionnaire.

    python -m scripts.seed_demo
"""
import asyncio

from perf_review.core.init_system import init_system_data
from perf_review.core.exceptions import DuplicateUserError
from perf_review.database import init_db, get_stores
from perf_review.models.user import UserRole
from perf_review.schemas.user import UserCreate
from perf_review.services.admin import AdminService


async def create_user(service: AdminService, **fields):
    try:
        user = await service.create_user(UserCreate(**fields))
    except DuplicateUserError:
        print(f"User {fields['email']} already exists. Skipping.")
        existing = await service.stores.users.list(filters={"email": fields["email"]}, limit=1)
        return existing[0]
    print(f"Created {user.role.value} -> {user.email}")
    return user


async def main():
    await init_db()
    stores = get_stores()
    await init_system_data(stores)

    service = AdminService(stores)
    await create_user(service, name="Avery Admin", email="admin@example.com", role=UserRole.ADMIN)
    manager = await create_user(
        service, name="Morgan Manager", email="manager@example.com", role=UserRole.MANAGER, job_title="Engineering Manager"
    )
    for name, email in [("Emery Employee", "employee@example.com"), ("Jordan Lee", "jordan@example.com")]:
        await create_user(
            service, name=name, email=email, role=UserRole.EMPLOYEE, job_title="Software Engineer", manager_id=manager.id
        )


if __name__ == "__main__":
    asyncio.run(main())
