import asyncio
import os
import sys
from pathlib import Path

from logging.config import fileConfig
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import async_engine_from_config

from alembic import context

repo_root = Path(__file__).resolve().parents[3]
sys.path.insert(0, str(repo_root / "shared"))
sys.path.insert(0, str(repo_root / "services" / "learning"))

from shared.database.postgres import Base  # noqa: E402

import app.models  # noqa: E402, F401  registers every table on Base.metadata

LEARNING_TABLES = frozenset({
    "users",
    "courses",
    "lessons",
    "quizzes",
    "quiz_attempts",
    "user_progress",
    "user_enrollments",
})


def include_object(obj, name, type_, reflected, compare_to):
    return type_ != "table" or name in LEARNING_TABLES


config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _database_url() -> str:
    """LEARNING_DATABASE_URL wins over the ini file."""
    url = os.environ.get("LEARNING_DATABASE_URL") or config.get_main_option("sqlalchemy.url")
    if not url:
        raise RuntimeError("Set LEARNING_DATABASE_URL or sqlalchemy.url in alembic.ini")
    return url


url = _database_url()
config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))

target_metadata = Base.metadata


def _run(**configure_kwargs) -> None:
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        compare_type=True,
        **configure_kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


def _run_on_connection(connection: Connection) -> None:
    _run(connection=connection)


async def _run_online() -> None:
    engine = async_engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        async with engine.connect() as connection:
            await connection.run_sync(_run_on_connection)
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _run(url=url, literal_binds=True, dialect_opts={"paramstyle": "named"})
else:
    asyncio.run(_run_online())
