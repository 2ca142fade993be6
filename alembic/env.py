from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from packdash.settings import settings

if context.config.config_file_name is not None:
    fileConfig(context.config.config_file_name, disable_existing_loggers=False)

# Migrations are hand-written; there is no model metadata to autogenerate from.
engine = create_engine(settings.db_url, poolclass=pool.NullPool)

with engine.connect() as connection:
    # SQLite needs batch mode for ALTER TABLE.
    context.configure(connection=connection, render_as_batch=True)
    with context.begin_transaction():
        context.run_migrations()
