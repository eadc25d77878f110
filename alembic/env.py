"""
Alembic environment configuration.
Migrations run on a SYNC engine (psycopg) while the application itself uses
async SQLAlchemy.
"""

from logging.config import fileConfig

from sqlalchemy import create_engine, pool
from sqlalchemy.engine import Connection

from alembic import context

from app.core.config import get_settings
from app.core.database import Base
import app.models  # noqa: F401  registers every table on Base.metadata

# Alembic Config object
config = context.config

# Interpret the config file for Python logging
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Model's MetaData object for 'autogenerate' support
target_metadata = Base.metadata


def sync_url(url: str) -> str:
    """Alembic needs a sync driver: map asyncpg or bare postgresql URLs to psycopg."""
    if "+asyncpg" in url:
        return url.replace("+asyncpg", "+psycopg")
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


# URL kept in attributes to avoid ConfigParser interpolation of '%' in passwords
database_url = sync_url(
    config.attributes.get("sqlalchemy.url") or get_settings().DATABASE_URL_SYNC
)


def run_migrations_offline() -> None:
    """
    Run migrations in 'offline' mode.

    Emits the SQL to the script output instead of executing it.
    """
    context.configure(
        url=database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection) -> None:
    """Run migrations with the given connection."""
    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode with a SYNC engine."""
    connectable = create_engine(
        database_url,
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        do_run_migrations(connection)


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
