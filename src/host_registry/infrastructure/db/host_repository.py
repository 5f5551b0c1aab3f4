"""SQLAlchemy adapter for host account persistence."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import cast
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy.engine import RowMapping
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from host_registry.application.ports.host_repository_port import (
    DuplicateHostFieldError,
    HostCreateRow,
    HostRecord,
    HostRepositoryPort,
)
from host_registry.infrastructure.db.metadata import hosts

logger = logging.getLogger(__name__)

_UNIQUE_FIELD_MARKERS = {
    "org_email": ("hosts.org_email", "uq_hosts_org_email"),
    "wallet_address": ("hosts.wallet_address", "uq_hosts_wallet_address"),
}
_UPDATABLE_COLUMNS = frozenset(
    {
        "organization_name",
        "org_email",
        "mobile_number",
        "password_hash",
        "org_location",
        "wallet_address",
    }
)
_HOST_COLUMNS = (
    hosts.c.id,
    hosts.c.organization_name,
    hosts.c.org_email,
    hosts.c.mobile_number,
    hosts.c.password_hash,
    hosts.c.org_location,
    hosts.c.wallet_address,
    hosts.c.created_at,
    hosts.c.updated_at,
)


def _duplicate_field(error: IntegrityError) -> str | None:
    message = str(error.orig).lower()
    for field, markers in _UNIQUE_FIELD_MARKERS.items():
        if any(marker in message for marker in markers):
            return field
    return None


def _to_host_record(row: RowMapping) -> HostRecord:
    raw_host_id = row["id"]
    host_id = raw_host_id if isinstance(raw_host_id, UUID) else UUID(str(raw_host_id))
    return HostRecord(
        host_id=host_id,
        organization_name=cast(str, row["organization_name"]),
        org_email=cast(str, row["org_email"]),
        mobile_number=cast(str, row["mobile_number"]),
        password_hash=cast(str, row["password_hash"]),
        org_location=cast(str, row["org_location"]),
        wallet_address=cast(str, row["wallet_address"]),
        created_at=cast(datetime, row["created_at"]),
        updated_at=cast(datetime, row["updated_at"]),
    )


class SqlAlchemyHostRepository(HostRepositoryPort):
    """Host repository backed by SQLAlchemy async sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def create_host(self, payload: HostCreateRow) -> HostRecord:
        """Insert one host row and return the persisted record."""

        statement = (
            sa.insert(hosts)
            .values(
                id=payload.host_id,
                organization_name=payload.organization_name,
                org_email=payload.org_email,
                mobile_number=payload.mobile_number,
                password_hash=payload.password_hash,
                org_location=payload.org_location,
                wallet_address=payload.wallet_address,
            )
            .returning(*_HOST_COLUMNS)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().one()
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                field = _duplicate_field(error)
                if field is not None:
                    logger.info("host_create_duplicate field=%s", field)
                    raise DuplicateHostFieldError(field=field) from error
                raise

        logger.info("host_created host_id=%s", payload.host_id)
        return _to_host_record(row)

    async def update_host(self, *, host_id: UUID, values: dict[str, str]) -> HostRecord | None:
        """Apply column values to one host and refresh updated_at."""

        unknown = set(values) - _UPDATABLE_COLUMNS
        if unknown:
            raise ValueError(f"unsupported host columns: {sorted(unknown)}")

        statement = (
            sa.update(hosts)
            .where(hosts.c.id == host_id)
            .values(**values, updated_at=sa.func.current_timestamp())
            .returning(*_HOST_COLUMNS)
        )

        async with self._session_factory() as session:
            try:
                result = await session.execute(statement)
                row = result.mappings().first()
                await session.commit()
            except IntegrityError as error:
                await session.rollback()
                field = _duplicate_field(error)
                if field is not None:
                    logger.info("host_update_duplicate host_id=%s field=%s", host_id, field)
                    raise DuplicateHostFieldError(field=field) from error
                raise

        if row is None:
            return None
        logger.info("host_updated host_id=%s columns=%s", host_id, ",".join(sorted(values)))
        return _to_host_record(row)

    async def get_by_id(self, *, host_id: UUID) -> HostRecord | None:
        """Return host by id."""

        statement = sa.select(*_HOST_COLUMNS).where(hosts.c.id == host_id).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_host_record(row)

    async def get_by_email(self, *, email: str) -> HostRecord | None:
        """Return host by normalized organization email."""

        statement = sa.select(*_HOST_COLUMNS).where(hosts.c.org_email == email).limit(1)

        async with self._session_factory() as session:
            result = await session.execute(statement)

        row = result.mappings().first()
        if row is None:
            return None
        return _to_host_record(row)
