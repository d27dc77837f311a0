"""FastAPI dependencies for database access."""

from collections.abc import AsyncIterator

from sqlalchemy.ext.asyncio import AsyncSession

from gridquery.db.session import get_sessionmaker


async def get_db() -> AsyncIterator[AsyncSession]:
    """Yield one session per request."""

    async with get_sessionmaker()() as session:
        yield session
