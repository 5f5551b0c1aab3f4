from __future__ import annotations

from pathlib import Path

import pytest

from apps.host_admin.main import build_host_account_service, upgrade_schema
from host_registry.application.ports.host_repository_port import (
    DuplicateHostFieldError,
    HostCreateInput,
    HostUpdateInput,
)
from host_registry.application.services.host_account_service import (
    HostAccountService,
    HostAuthenticationError,
)
from host_registry.config.settings import Settings
from host_registry.domain.host.validation import HostValidationError

WALLET = "0x" + "a" * 40


def _build_service(tmp_path: Path, filename: str) -> HostAccountService:
    db_path = tmp_path / filename
    upgrade_schema(f"sqlite+pysqlite:///{db_path}")
    settings = Settings(
        _env_file=None,
        DATABASE_URL=f"sqlite+aiosqlite:///{db_path}",
        BCRYPT_SALT_ROUNDS=4,
    )
    return build_host_account_service(settings)


def _acme(**overrides: str) -> HostCreateInput:
    fields = {
        "organization_name": "Acme",
        "org_email": "a@acme.com",
        "mobile_number": "1234567890",
        "password": "secret1",
        "org_location": "NY",
        "wallet_address": WALLET,
    }
    fields.update(overrides)
    return HostCreateInput(**fields)


@pytest.mark.asyncio
async def test_create_then_verify_credentials(tmp_path: Path) -> None:
    service = _build_service(tmp_path, "flow_verify.db")

    host = await service.create_host(payload=_acme())

    assert host.password_hash != "secret1"
    assert host.password_hash.startswith("$2b$04$")
    assert await service.verify_credentials(email="a@acme.com", password="secret1") == host
    with pytest.raises(HostAuthenticationError):
        await service.verify_credentials(email="a@acme.com", password="wrong")
    with pytest.raises(HostAuthenticationError):
        await service.verify_credentials(email="missing@acme.com", password="secret1")


@pytest.mark.asyncio
async def test_same_password_hashes_differently_for_two_hosts(tmp_path: Path) -> None:
    service = _build_service(tmp_path, "flow_salts.db")

    first = await service.create_host(payload=_acme())
    second = await service.create_host(
        payload=_acme(org_email="b@acme.com", wallet_address="0x" + "b" * 40)
    )

    assert first.password_hash != second.password_hash
    assert await service.compare_password(host=first, candidate_password="secret1")
    assert await service.compare_password(host=second, candidate_password="secret1")


@pytest.mark.asyncio
async def test_update_without_password_keeps_hash_and_password_change_rehashes(
    tmp_path: Path,
) -> None:
    service = _build_service(tmp_path, "flow_update.db")
    host = await service.create_host(payload=_acme())

    renamed = await service.update_host(
        host_id=host.host_id,
        payload=HostUpdateInput(organization_name="Acme Holdings"),
    )
    assert renamed.organization_name == "Acme Holdings"
    assert renamed.password_hash == host.password_hash
    assert renamed.created_at == host.created_at
    assert renamed.updated_at >= renamed.created_at

    unchanged = await service.update_host(
        host_id=host.host_id,
        payload=HostUpdateInput(password="secret1"),
    )
    assert unchanged.password_hash == host.password_hash

    rotated = await service.update_host(
        host_id=host.host_id,
        payload=HostUpdateInput(password="brand-new-secret"),
    )
    assert rotated.password_hash != host.password_hash
    assert await service.verify_credentials(email="a@acme.com", password="brand-new-secret")
    with pytest.raises(HostAuthenticationError):
        await service.verify_credentials(email="a@acme.com", password="secret1")


@pytest.mark.asyncio
async def test_email_uniqueness_is_case_insensitive(tmp_path: Path) -> None:
    service = _build_service(tmp_path, "flow_unique_email.db")
    await service.create_host(payload=_acme())

    with pytest.raises(DuplicateHostFieldError) as exc_info:
        await service.create_host(
            payload=_acme(org_email=" A@ACME.com ", wallet_address="0x" + "c" * 40)
        )

    assert exc_info.value.field == "org_email"


@pytest.mark.asyncio
async def test_wallet_uniqueness_is_enforced(tmp_path: Path) -> None:
    service = _build_service(tmp_path, "flow_unique_wallet.db")
    await service.create_host(payload=_acme())

    with pytest.raises(DuplicateHostFieldError) as exc_info:
        await service.create_host(payload=_acme(org_email="other@acme.com"))

    assert exc_info.value.field == "wallet_address"


@pytest.mark.asyncio
async def test_password_boundary_and_wallet_format(tmp_path: Path) -> None:
    service = _build_service(tmp_path, "flow_boundaries.db")

    with pytest.raises(HostValidationError) as short_password:
        await service.create_host(payload=_acme(password="12345"))
    with pytest.raises(HostValidationError) as short_wallet:
        await service.create_host(payload=_acme(wallet_address="0x123"))
    host = await service.create_host(payload=_acme(password="123456"))

    assert set(short_password.value.errors) == {"password"}
    assert set(short_wallet.value.errors) == {"wallet_address"}
    assert host.wallet_address == WALLET
