"""FastAPI dependencies for database sessions and shared state."""
from typing import AsyncGenerator

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from creditdesk.database import AsyncSessionLocal
from creditdesk.state import AppState


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    Database session dependency.

    Yields:
        AsyncSession: Database session for the request lifecycle
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def get_app_state(request: Request) -> AppState:
    """The application's list cache, created at startup."""
    return request.app.state.cache
