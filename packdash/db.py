import logging
from pathlib import Path

from alembic.config import Config
from sqlalchemy import Connection, create_engine
from sqlalchemy.engine import Engine

from alembic import command
from packdash.settings import settings

logger = logging.getLogger(__name__)

ALEMBIC_INI = Path(__file__).resolve().parent.parent / "alembic.ini"

_engine: Engine | None = None
_connection: Connection | None = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(settings.db_url, pool_pre_ping=True)
        logger.info("Database engine created")
    return _engine


def get_connection() -> Connection:
    """Process-wide connection for the CLI; web requests open their own."""
    global _connection
    if _connection is None:
        _connection = get_engine().connect()
    return _connection


def _get_alembic_config() -> Config:
    return Config(str(ALEMBIC_INI))


def initialize_db() -> None:
    """Bring the user_roles schema up to the latest migration."""
    logger.info("Running Alembic migrations")
    command.upgrade(_get_alembic_config(), "head")
