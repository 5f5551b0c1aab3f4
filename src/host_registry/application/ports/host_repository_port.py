"""Port for host account persistence operations."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol
from uuid import UUID


class DuplicateHostFieldError(ValueError):
    """Raised when a write collides with a unique host field of another account."""

    def __init__(self, *, field: str) -> None:
        super().__init__(f"{field} is already in use")
        self.field = field


@dataclass(frozen=True)
class HostCreateInput:
    """Caller-supplied fields for creating one host account."""

    organization_name: str
    org_email: str
    mobile_number: str
    password: str
    org_location: str
    wallet_address: str


@dataclass(frozen=True)
class HostUpdateInput:
    """Caller-supplied fields for updating one host account; None leaves a field untouched."""

    organization_name: str | None = None
    org_email: str | None = None
    mobile_number: str | None = None
    password: str | None = None
    org_location: str | None = None
    wallet_address: str | None = None


@dataclass(frozen=True)
class HostCreateRow:
    """Validated host row ready for insert, with the password already hashed."""

    host_id: UUID
    organization_name: str
    org_email: str
    mobile_number: str
    password_hash: str
    org_location: str
    wallet_address: str


@dataclass(frozen=True)
class HostRecord:
    """Host persistence model."""

    host_id: UUID
    organization_name: str
    org_email: str
    mobile_number: str
    password_hash: str
    org_location: str
    wallet_address: str
    created_at: datetime
    updated_at: datetime


class HostRepositoryPort(Protocol):
    """Host repository contract."""

    async def create_host(self, payload: HostCreateRow) -> HostRecord:
        """Insert one host row, raising DuplicateHostFieldError on unique collisions."""

    async def update_host(self, *, host_id: UUID, values: dict[str, str]) -> HostRecord | None:
        """Apply column values to one host and refresh updated_at, or return None when missing."""

    async def get_by_id(self, *, host_id: UUID) -> HostRecord | None:
        """Return host by id or None."""

    async def get_by_email(self, *, email: str) -> HostRecord | None:
        """Return host by normalized organization email or None."""
