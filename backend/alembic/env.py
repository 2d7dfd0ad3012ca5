import os
import sys

from alembic import context
from sqlalchemy import create_engine, pool

# Run from backend/ so the careerpage package resolves without an install.
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from careerpage.core.config import settings
from careerpage.core.database import Base
from careerpage.models.company import Company  # noqa: F401 - registers tables for autogenerate
from careerpage.models.content_section import ContentSection  # noqa: F401
from careerpage.models.job import Job  # noqa: F401
from careerpage.models.user import User  # noqa: F401

config = context.config

if config.config_file_name:
    from logging.config import fileConfig
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def database_url() -> str:
    """`alembic -x url=...` wins over DATABASE_URL, e.g. to migrate a scratch database."""
    return context.get_x_argument(as_dictionary=True).get("url") or settings.DATABASE_URL


def _configure(**kwargs) -> None:
    url = database_url()
    context.configure(
        target_metadata=target_metadata,
        compare_type=True,
        # SQLite can only ALTER TABLE through copy-and-move batches.
        render_as_batch=url.startswith("sqlite"),
        **kwargs,
    )


def run_migrations_offline() -> None:
    _configure(url=database_url(), literal_binds=True, dialect_opts={"paramstyle": "named"})
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = create_engine(database_url(), poolclass=pool.NullPool)
    with connectable.connect() as connection:
        _configure(connection=connection)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
