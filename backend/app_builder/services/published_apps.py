"""Storage of published app snapshots, keyed by the owner's contact id."""

import logging
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app_builder.core.exceptions import AppNotFoundError
from app_builder.models.published_app import PublishedApp
from app_builder.schemas.design_config import DesignConfig

logger = logging.getLogger(__name__)


class PublishedAppRepository(Protocol):
    async def get(self, contact_id: str) -> PublishedApp | None: ...

    async def upsert(
        self,
        contact_id: str,
        app_name: str,
        config: dict,
        custom_domain: str | None = None,
        status: str = "active",
    ) -> PublishedApp: ...

    async def set_live_url(self, contact_id: str, url: str) -> None: ...


class SqlPublishedAppRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, contact_id: str) -> PublishedApp | None:
        result = await self.db.execute(
            select(PublishedApp).where(PublishedApp.contact_id == contact_id)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        contact_id: str,
        app_name: str,
        config: dict,
        custom_domain: str | None = None,
        status: str = "active",
    ) -> PublishedApp:
        app = await self.get(contact_id)
        if app is None:
            app = PublishedApp(
                contact_id=contact_id,
                app_name=app_name,
                config=config,
                custom_domain=custom_domain,
                status=status,
            )
            self.db.add(app)
        else:
            app.app_name = app_name
            app.config = config
            app.custom_domain = custom_domain
            app.status = status
            app.live_url = None
        await self.db.flush()
        return app

    async def set_live_url(self, contact_id: str, url: str) -> None:
        app = await self.get(contact_id)
        if app is not None:
            app.live_url = url
            await self.db.flush()


class InMemoryPublishedAppRepository:
    def __init__(self):
        self.apps: dict[str, PublishedApp] = {}

    async def get(self, contact_id: str) -> PublishedApp | None:
        return self.apps.get(contact_id)

    async def upsert(
        self,
        contact_id: str,
        app_name: str,
        config: dict,
        custom_domain: str | None = None,
        status: str = "active",
    ) -> PublishedApp:
        app = PublishedApp(
            contact_id=contact_id,
            app_name=app_name,
            config=config,
            custom_domain=custom_domain,
            status=status,
        )
        self.apps[contact_id] = app
        return app

    async def set_live_url(self, contact_id: str, url: str) -> None:
        app = self.apps.get(contact_id)
        if app is not None:
            app.live_url = url


async def find_published_app(
    repository: PublishedAppRepository, contact_id: str
) -> PublishedApp | None:
    """Look up a published app; an unreachable backend reads as absent."""
    try:
        return await repository.get(contact_id)
    except (SQLAlchemyError, OSError):
        logger.exception("Could not look up published app %s", contact_id)
        return None


async def load_published_config(
    repository: PublishedAppRepository, contact_id: str
) -> tuple[PublishedApp, DesignConfig]:
    """Fetch and parse a published app; any failure reads as not found."""
    app = await find_published_app(repository, contact_id)
    if app is None:
        raise AppNotFoundError(contact_id)
    try:
        return app, DesignConfig.model_validate(app.config)
    except ValidationError as exc:
        logger.error("Published app %s has an unreadable config: %s", contact_id, exc)
        raise AppNotFoundError(contact_id) from exc
