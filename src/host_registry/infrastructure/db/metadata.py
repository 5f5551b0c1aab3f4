"""SQLAlchemy metadata definitions for host registry tables."""

from __future__ import annotations

import sqlalchemy as sa

metadata = sa.MetaData()

hosts = sa.Table(
    "hosts",
    metadata,
    sa.Column("id", sa.Uuid(), primary_key=True, nullable=False),
    sa.Column("organization_name", sa.Text(), nullable=False),
    sa.Column("org_email", sa.Text(), nullable=False),
    sa.Column("mobile_number", sa.Text(), nullable=False),
    sa.Column("password_hash", sa.Text(), nullable=False),
    sa.Column("org_location", sa.Text(), nullable=False),
    sa.Column("wallet_address", sa.Text(), nullable=False),
    sa.Column(
        "created_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    ),
    sa.Column(
        "updated_at",
        sa.DateTime(timezone=True),
        nullable=False,
        server_default=sa.text("CURRENT_TIMESTAMP"),
    ),
    sa.UniqueConstraint("org_email", name="uq_hosts_org_email"),
    sa.UniqueConstraint("wallet_address", name="uq_hosts_wallet_address"),
)
