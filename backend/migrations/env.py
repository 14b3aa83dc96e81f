from __future__ import annotations
import asyncio
from logging.config import fileConfig
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine
from alembic import context
from ideathon.config import settings
from ideathon.db import Base
import ideathon.models.competition  # register tables on Base.metadata
import ideathon.models.idea
import ideathon.models.registration
import ideathon.models.notification

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata
OWNED_TABLES = frozenset(target_metadata.tables)

def database_url() -> str:
    # `alembic -x db_url=... upgrade head` targets another database (CI, staging)
    return context.get_x_argument(as_dictionary=True).get("db_url") or settings.database_url

def include_object(obj, name, type_, reflected, compare_to):
    # The database is shared with the auth service; autogenerate must not
    # propose dropping tables this service does not own.
    if type_ == "table" and reflected and compare_to is None:
        return name in OWNED_TABLES
    return True

def _configure(**kw):
    context.configure(
        target_metadata=target_metadata,
        include_object=include_object,
        compare_type=True,
        **kw,
    )

def run_migrations_offline():
    _configure(url=database_url(), literal_binds=True)
    with context.begin_transaction():
        context.run_migrations()

def do_run_migrations(connection: Connection):
    _configure(connection=connection)
    with context.begin_transaction():
        context.run_migrations()

async def run_migrations_online():
    connectable = create_async_engine(database_url(), poolclass=pool.NullPool)
    try:
        async with connectable.connect() as connection:
            await connection.run_sync(do_run_migrations)
    finally:
        await connectable.dispose()

if context.is_offline_mode():
    run_migrations_offline()
else:
    asyncio.run(run_migrations_online())
