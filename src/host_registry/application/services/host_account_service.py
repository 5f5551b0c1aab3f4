"""Application service for host account records and their credentials."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import asdict
from uuid import UUID, uuid4

from host_registry.application.ports.host_repository_port import (
    HostCreateInput,
    HostCreateRow,
    HostRecord,
    HostRepositoryPort,
    HostUpdateInput,
)
from host_registry.application.ports.password_hasher_port import PasswordHasherPort
from host_registry.domain.host.validation import (
    PASSWORD_MAX_BYTES,
    normalize_host_email,
    normalize_host_fields,
)

logger = logging.getLogger(__name__)

_DECOY_PASSWORD = "host-registry-decoy-password"


class HostNotFoundError(LookupError):
    """Raised when a target host cannot be found for one update."""

    def __init__(self, *, host_id: UUID) -> None:
        super().__init__(f"host not found: {host_id}")
        self.host_id = host_id


class HostAuthenticationError(PermissionError):
    """Raised when credentials do not match any host account."""

    def __init__(self) -> None:
        super().__init__("invalid email or password")


class HostAccountService:
    """Validate, hash and persist host accounts, and verify their credentials.

    Every write runs the same ordered pipeline: field validation, then the
    password transform (only when the password changes), then the repository
    write. Uniqueness of ``org_email`` and ``wallet_address`` is left to the
    repository's constraints.
    """

    def __init__(
        self,
        *,
        hosts: HostRepositoryPort,
        password_hasher: PasswordHasherPort,
    ) -> None:
        self._hosts = hosts
        self._password_hasher = password_hasher

    async def create_host(self, *, payload: HostCreateInput) -> HostRecord:
        """Create one host account and return the persisted record."""

        fields = normalize_host_fields(asdict(payload), partial=False)
        password_hash = await self._hash_password(fields.pop("password"))

        host = await self._hosts.create_host(
            HostCreateRow(host_id=uuid4(), password_hash=password_hash, **fields)
        )
        logger.info("host_account_created host_id=%s", host.host_id)
        return host

    async def update_host(self, *, host_id: UUID, payload: HostUpdateInput) -> HostRecord:
        """Apply supplied fields to one host account and return the persisted record."""

        fields = normalize_host_fields(asdict(payload), partial=True)
        current = await self._hosts.get_by_id(host_id=host_id)
        if current is None:
            raise HostNotFoundError(host_id=host_id)

        password = fields.pop("password", None)
        if password is not None and not await self.compare_password(
            host=current,
            candidate_password=password,
        ):
            fields["password_hash"] = await self._hash_password(password)

        if not fields:
            return current

        updated = await self._hosts.update_host(host_id=host_id, values=fields)
        if updated is None:
            raise HostNotFoundError(host_id=host_id)
        logger.info(
            "host_account_updated host_id=%s password_changed=%s",
            host_id,
            "password_hash" in fields,
        )
        return updated

    async def verify_credentials(self, *, email: str, password: str) -> HostRecord:
        """Return the host owning the credentials or raise HostAuthenticationError."""

        host = await self._hosts.get_by_email(email=normalize_host_email(email))
        if host is None:
            # Pay the same bcrypt cost as a real comparison.
            await self._hash_password(_DECOY_PASSWORD)
            logger.info("host_login_failed reason=unknown_email")
            raise HostAuthenticationError()

        if not await self.compare_password(host=host, candidate_password=password):
            logger.info("host_login_failed host_id=%s reason=password_mismatch", host.host_id)
            raise HostAuthenticationError()

        logger.info("host_login_succeeded host_id=%s", host.host_id)
        return host

    async def compare_password(self, *, host: HostRecord, candidate_password: str) -> bool:
        """Return whether a plaintext candidate matches the host's stored hash."""

        if len(candidate_password.encode("utf-8")) > PASSWORD_MAX_BYTES:
            # No stored password can be this long; still pay one bcrypt cost.
            await self._hash_password(_DECOY_PASSWORD)
            return False

        return await asyncio.to_thread(
            self._password_hasher.verify_password,
            password=candidate_password,
            password_hash=host.password_hash,
        )

    async def _hash_password(self, password: str) -> str:
        return await asyncio.to_thread(self._password_hasher.hash_password, password)
