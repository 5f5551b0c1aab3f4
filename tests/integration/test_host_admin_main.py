from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa

from apps.host_admin import main as host_admin_main
from host_registry.config.settings import Settings
from host_registry.infrastructure.db.host_repository import SqlAlchemyHostRepository
from host_registry.infrastructure.security.password_hasher import BcryptPasswordHasher


def test_build_host_account_service_wires_configured_cost_factor() -> None:
    settings = Settings(
        _env_file=None,
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        BCRYPT_SALT_ROUNDS=7,
    )

    service = host_admin_main.build_host_account_service(settings)

    assert isinstance(service._hosts, SqlAlchemyHostRepository)
    assert isinstance(service._password_hasher, BcryptPasswordHasher)
    assert service._password_hasher.rounds == 7


def test_main_upgrades_schema_from_settings(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    db_path = tmp_path / "main_migrate.db"
    settings = Settings(_env_file=None, DATABASE_URL=f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setattr(host_admin_main, "load_settings", lambda: settings)

    host_admin_main.main()

    inspector = sa.inspect(sa.create_engine(f"sqlite+pysqlite:///{db_path}"))
    assert "hosts" in inspector.get_table_names()


def test_alembic_config_keeps_explicit_url() -> None:
    config = host_admin_main.build_alembic_config("sqlite+pysqlite:///./explicit.db")

    assert config.get_main_option("sqlalchemy.url") == "sqlite+pysqlite:///./explicit.db"
    assert config.attributes["configure_logger"] is False


def test_upgrade_schema_accepts_application_async_url(tmp_path: Path) -> None:
    db_path = tmp_path / "async_migrate.db"

    host_admin_main.upgrade_schema(f"sqlite+aiosqlite:///{db_path}")

    inspector = sa.inspect(sa.create_engine(f"sqlite+pysqlite:///{db_path}"))
    assert "hosts" in inspector.get_table_names()
