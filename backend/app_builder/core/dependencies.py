"""FastAPI dependency chain: DB session, state store, builder sessions, collaborators."""

from collections.abc import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app_builder.core.config import settings
from app_builder.db.session import async_session_factory
from app_builder.services.ai_content import AIContentService
from app_builder.services.editor import DesignEditor
from app_builder.services.publish_backends import build_publish_backend
from app_builder.services.published_apps import (
    PublishedAppRepository,
    SqlPublishedAppRepository,
)
from app_builder.services.publisher import PublishBackend, PublishOrchestrator
from app_builder.services.registry import SessionRegistry
from app_builder.services.state_store import StateStore, build_state_store

_state_store: StateStore | None = None
_registry: SessionRegistry | None = None
_ai_service: AIContentService | None = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Yield an async DB session. Commits on success, rolls back on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_state_store() -> StateStore:
    global _state_store  # noqa: PLW0603
    if _state_store is None:
        _state_store = build_state_store()
    return _state_store


def get_session_registry() -> SessionRegistry:
    """Process-wide registry; one open session per builder user."""
    global _registry  # noqa: PLW0603
    if _registry is None:
        _registry = SessionRegistry(
            get_state_store(),
            debounce=settings.SAVE_DEBOUNCE_SECONDS,
            idle_seconds=settings.SESSION_IDLE_SECONDS,
            max_sessions=settings.MAX_OPEN_SESSIONS,
        )
    return _registry


async def close_session_registry() -> None:
    """Flush pending saves and release the state store (app shutdown)."""
    global _registry, _state_store  # noqa: PLW0603
    if _registry is not None:
        await _registry.flush_all()
        _registry = None
    if _state_store is not None:
        await _state_store.close()
        _state_store = None


async def get_editor(
    user_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> DesignEditor:
    """Open (or reuse) the builder session named by the ``user_id`` path parameter."""
    return await registry.open(user_id)


def get_publisher(
    user_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
) -> PublishOrchestrator:
    return registry.publisher(user_id)


async def get_published_app_repository(
    db: AsyncSession = Depends(get_db),
) -> PublishedAppRepository:
    return SqlPublishedAppRepository(db)


async def get_publish_backend(
    repository: PublishedAppRepository = Depends(get_published_app_repository),
) -> PublishBackend:
    return build_publish_backend(repository)


def get_ai_service() -> AIContentService:
    global _ai_service  # noqa: PLW0603
    if _ai_service is None:
        _ai_service = AIContentService()
    return _ai_service
