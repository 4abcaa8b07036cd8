"""Alembic environment for the users/pages schema.

Online runs go through the same Database class the app uses, so pool
choice and the SQLite foreign-key pragma match what the server sees.

The URL is taken from the Alembic config when a caller set one
(``config.set_main_option("sqlalchemy.url", ...)``), otherwise from
PAGEVAULT_DATABASE_URL via Settings.
"""

import asyncio
from logging.config import fileConfig

from alembic import context

from pagevault.config import get_settings
from pagevault.db.engine import Database
from pagevault.db.models import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or get_settings().database_url


def _configure(**kwargs) -> None:
    context.configure(target_metadata=Base.metadata, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


def run_offline(url: str) -> None:
    """Emit SQL to stdout instead of connecting."""
    _configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=url.startswith("sqlite"),
    )


async def run_online(url: str) -> None:
    database = Database(url)
    try:
        async with database.engine.connect() as conn:
            await conn.run_sync(
                lambda sync_conn: _configure(
                    connection=sync_conn,
                    render_as_batch=sync_conn.dialect.name == "sqlite",
                )
            )
            await conn.commit()
    finally:
        await database.dispose()


if context.is_offline_mode():
    run_offline(_database_url())
else:
    asyncio.run(run_online(_database_url()))
