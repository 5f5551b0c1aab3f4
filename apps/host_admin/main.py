"""host-admin entrypoint: service wiring and schema migration."""

from __future__ import annotations

import logging
from pathlib import Path

from alembic.config import Config

from alembic import command
from host_registry.application.services.host_account_service import HostAccountService
from host_registry.config.settings import Settings, load_settings
from host_registry.infrastructure.db.host_repository import SqlAlchemyHostRepository
from host_registry.infrastructure.db.session import create_session_factory
from host_registry.infrastructure.logging import configure_logging
from host_registry.infrastructure.security.password_hasher import BcryptPasswordHasher

ALEMBIC_INI_PATH = Path(__file__).resolve().parents[2] / "alembic.ini"
logger = logging.getLogger(__name__)


def build_host_account_service(settings: Settings) -> HostAccountService:
    """Build host account service with SQLAlchemy-backed dependencies."""

    session_factory = create_session_factory(settings.database_url)
    return HostAccountService(
        hosts=SqlAlchemyHostRepository(session_factory),
        password_hasher=BcryptPasswordHasher(rounds=settings.bcrypt_salt_rounds),
    )


def build_alembic_config(database_url: str) -> Config:
    """Build Alembic config targeting the provided database URL."""

    alembic_config = Config(str(ALEMBIC_INI_PATH))
    alembic_config.set_main_option("sqlalchemy.url", database_url)
    alembic_config.attributes["configure_logger"] = False
    return alembic_config


def upgrade_schema(database_url: str, *, revision: str = "head") -> None:
    """Upgrade the host registry schema to the requested revision."""

    logger.info("schema_upgrade_started revision=%s", revision)
    command.upgrade(build_alembic_config(database_url), revision)
    logger.info("schema_upgrade_complete revision=%s", revision)


def main() -> None:
    """Load settings, configure logging and upgrade the schema to head."""

    settings = load_settings()
    configure_logging(level=settings.log_level)
    upgrade_schema(settings.database_url)


if __name__ == "__main__":
    main()
