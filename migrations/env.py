from logging.config import fileConfig
import os

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# Try to load .env for DATABASE_URL/SQLALCHEMY_DATABASE_URI
try:
    from dotenv import load_dotenv, find_dotenv
    load_dotenv(find_dotenv())
except ImportError:
    pass

# SQLAlchemy metadata de los pedidos (autogenerate compara contra esto)
from inicializar_db import Base
from configuracion import _normalizar_url_pg

target_metadata = Base.metadata

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# Interpret the config file for Python logging.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)


def _resolve_database_url() -> str | None:
    # Prefer explicit env vars
    url = os.getenv("SQLALCHEMY_DATABASE_URI") or os.getenv("DATABASE_URL")
    if url:
        return _normalizar_url_pg(url)
    # Fallback to alembic.ini value if present
    ini_url = config.get_main_option("sqlalchemy.url")
    return _normalizar_url_pg(ini_url) if ini_url else None


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    Configures the context with just a URL, so no DBAPI is needed;
    context.execute() emits the SQL to the script output.
    """
    url = _resolve_database_url()
    if not url:
        raise RuntimeError(
            "No database URL configured. Set SQLALCHEMY_DATABASE_URI or DATABASE_URL in environment/.env, or alembic.ini sqlalchemy.url."
        )
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        render_as_batch=url.startswith("sqlite"),
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode against a live connection."""
    url = _resolve_database_url()
    if not url:
        raise RuntimeError(
            "No database URL configured. Set SQLALCHEMY_DATABASE_URI or DATABASE_URL in environment/.env, or alembic.ini sqlalchemy.url."
        )
    section = config.get_section(config.config_ini_section, {})
    section["sqlalchemy.url"] = url

    connectable = engine_from_config(
        section,
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
