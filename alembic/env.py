"""Alembic environment — migrations for the orders schema over the async engine.

The database URL comes from order_service.config (DATABASE_URL, already
normalised to postgresql+asyncpg://); alembic.ini only supplies logging.
"""

import asyncio
from logging.config import fileConfig

from sqlalchemy import pool
from sqlalchemy.ext.asyncio import create_async_engine

from alembic import context

from order_service.config import get_settings
from order_service.db.base import Base
import order_service.models  # noqa: F401  registers orders + order_items

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
database_url = get_settings().database_url


def _configure(**kwargs) -> None:
    context.configure(
        target_metadata=target_metadata, compare_type=True, **kwargs,
    )
    with context.begin_transaction():
        context.run_migrations()


async def _migrate_online() -> None:
    engine = create_async_engine(database_url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(
                lambda sync_conn: _configure(connection=sync_conn),
            )
    finally:
        await engine.dispose()


if context.is_offline_mode():
    _configure(
        url=database_url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
else:
    asyncio.run(_migrate_online())
