from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool
from perf_review.core.config import settings

# Support both PostgreSQL and SQLite via centralized settings
DATABASE_URL = settings.database_url

if DATABASE_URL.startswith("postgresql"):
    engine = create_async_engine(DATABASE_URL, echo=settings.sql_echo, pool_pre_ping=True)
else:
    # aiosqlite connections are bound to the event loop that opened them
    engine = create_async_engine(DATABASE_URL, echo=settings.sql_echo, poolclass=NullPool)

SessionLocal = async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)

Base = declarative_base()


def get_stores():
    """
    Store Provider: hands each request the record stores bound to the shared session factory.
    Every store call runs in its own short transaction.
    """
    from perf_review.store import ReviewStores
    return ReviewStores.from_session_factory(SessionLocal)


async def init_db(bind=None):
    """
    Registers all domain models and initializes the database schema.
    This should be called during the application startup lifespan.
    """
    # Import all models to ensure they are registered with Base.metadata before create_all
    from perf_review.models import user, review_question, review_session, response  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
