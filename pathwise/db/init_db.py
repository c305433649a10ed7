"""
Database bootstrap run from the application lifespan hook.
"""
import logging
from sqlalchemy import text

from pathwise.core import config
from pathwise.db.session import engine
from pathwise.db.base import Base
import pathwise.db.models  # noqa: F401  (registers every model on Base.metadata)

logger = logging.getLogger(__name__)


def check_database_connection() -> None:
    """Open one pooled connection and run a trivial query. Raises on failure."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))


def init_db() -> None:
    """
    Make sure the database is reachable and the schema exists.

    With RUN_MIGRATIONS=1 the schema is brought to the Alembic head revision,
    otherwise tables are created straight from the models.
    """
    check_database_connection()
    logger.info("Database connection established")

    if config.RUN_MIGRATIONS:
        from pathwise.db.migrate import run_migrations
        run_migrations()
    else:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")
