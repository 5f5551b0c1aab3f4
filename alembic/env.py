"""Alembic environment for the host registry schema."""

from __future__ import annotations

import asyncio
import os
from logging.config import fileConfig
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context
from host_registry.infrastructure.db.metadata import metadata

_PLACEHOLDER_URL = "sqlite:///./host_registry.db"
_ASYNC_DRIVERS = ("+aiosqlite", "+asyncpg")

config = context.config

# DATABASE_URL (environment or local .env) only replaces the alembic.ini placeholder.
load_dotenv(Path(__file__).resolve().parents[1] / ".env")
if config.get_main_option("sqlalchemy.url") == _PLACEHOLDER_URL and os.getenv("DATABASE_URL"):
    config.set_main_option("sqlalchemy.url", os.environ["DATABASE_URL"])

if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _migrate(connection: Connection) -> None:
    context.configure(connection=connection, target_metadata=metadata)
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_async(engine_options: dict[str, str]) -> None:
    engine = async_engine_from_config(engine_options, prefix="sqlalchemy.", poolclass=pool.NullPool)
    async with engine.connect() as connection:
        await connection.run_sync(_migrate)
    await engine.dispose()


def run_migrations() -> None:
    """Upgrade through a sync engine, or an async one for the application's async URLs."""

    engine_options = config.get_section(config.config_ini_section, {})
    url = engine_options.get("sqlalchemy.url", _PLACEHOLDER_URL)
    if any(driver in url for driver in _ASYNC_DRIVERS):
        asyncio.run(_migrate_async(engine_options))
        return

    engine = engine_from_config(engine_options, prefix="sqlalchemy.", poolclass=pool.NullPool)
    with engine.connect() as connection:
        _migrate(connection)


run_migrations()
