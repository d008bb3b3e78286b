"""Module with database utilities."""

import time
from sqlalchemy import Engine, create_engine, event
from sqlalchemy.exc import OperationalError

from auto_parts.models import Base
from auto_parts.logger import Logger

logger = Logger.get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    # SQLite ignores ON DELETE CASCADE unless foreign keys are switched on per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


def get_engine(db_url: str, **kwargs) -> Engine:
    """Create an engine for db_url, enabling foreign key enforcement on SQLite."""
    engine = create_engine(db_url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def wait_for_database(engine: Engine, max_retries: int, delay: int) -> bool:
    """Wait for the database to be available."""
    for i in range(max_retries):
        try:
            with engine.connect():
                logger.info(f"Successfully connected to {engine.dialect.name}")
                return True
        except OperationalError:
            logger.info(
                f"Waiting for database to be available... ({i+1}/{max_retries})"
            )
            time.sleep(delay)
    logger.error("Database did not become available")
    return False


def setup_database(engine: Engine) -> None:
    """Create database tables, indexes and the customer orders view."""
    Base.metadata.create_all(engine)
    logger.info("Database tables created successfully")


def drop_database(engine: Engine) -> None:
    """Drop the customer orders view and every table, dependents first."""
    Base.metadata.drop_all(engine)
    logger.info("Database tables dropped")


def reset_database(engine: Engine) -> None:
    """Drop and recreate the whole schema."""
    drop_database(engine)
    setup_database(engine)
