from datetime import datetime

from sqlalchemy import DateTime, String, Text, func
from sqlalchemy.dialects.postgresql import JSON
from sqlalchemy.orm import Mapped, mapped_column

from app_builder.db.base import Base


class PublishedApp(Base):
    __tablename__ = "published_apps"

    # External contact/location id (or guest id) of the owner; one app per owner.
    contact_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    app_name: Mapped[str] = mapped_column(String(63), nullable=False, index=True)
    config: Mapped[dict] = mapped_column(JSON, nullable=False)
    custom_domain: Mapped[str | None] = mapped_column(String(253), nullable=True)
    live_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(32), nullable=False, server_default="active")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=func.now()
    )
