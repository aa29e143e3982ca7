"""Create published_apps table

Revision ID: 001
Revises:
Create Date: 2026-10-17

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "published_apps",
        sa.Column("contact_id", sa.String(255), primary_key=True),
        sa.Column("app_name", sa.String(63), nullable=False),
        sa.Column("config", sa.JSON(), nullable=False),
        sa.Column("custom_domain", sa.String(253), nullable=True),
        sa.Column("live_url", sa.Text(), nullable=True),
        sa.Column(
            "status",
            sa.String(32),
            nullable=False,
            server_default=sa.text("'active'"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_published_apps_app_name", "published_apps", ["app_name"])
    # A custom domain can serve only one app
    op.create_index(
        "uq_published_apps_custom_domain",
        "published_apps",
        ["custom_domain"],
        unique=True,
        postgresql_where=sa.text("custom_domain IS NOT NULL"),
    )


def downgrade() -> None:
    op.drop_index("uq_published_apps_custom_domain", table_name="published_apps")
    op.drop_index("ix_published_apps_app_name", table_name="published_apps")
    op.drop_table("published_apps")
