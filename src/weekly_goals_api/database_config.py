"""Database connection configuration"""

import logging

from sqlalchemy import event
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)


def setup_connection_listeners(engine: Engine) -> None:
    """Setup SQLAlchemy connection event listeners"""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        """Enforce foreign keys so ON DELETE CASCADE / SET NULL behave as in PostgreSQL"""
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()
        logger.debug("SQLite pragmas configured")
