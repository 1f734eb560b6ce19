import logging
from collections.abc import Generator

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from weekly_goals_api.config import settings
from weekly_goals_api.database_config import setup_connection_listeners

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False) -> Engine:
    """Create an engine for the given URL with connection listeners attached"""
    if database_url.startswith("sqlite://"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, echo=echo, **kwargs)
    else:
        engine = create_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,  # Enable connection health checks
            pool_recycle=3600,  # Recycle connections after 1 hour
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            connect_args={"connect_timeout": 10, "application_name": "WeeklyGoals-API"},
        )

    setup_connection_listeners(engine)
    return engine


class Database:
    """Database connection manager"""

    def __init__(self, database_url: str | None = None):
        self._database_url = database_url
        self._engine: Engine | None = None

    def get_engine(self) -> Engine:
        """Get SQLModel engine for database operations"""
        if self._engine is None:
            self._engine = build_engine(
                self._database_url or settings.database_url, echo=settings.debug
            )
            logger.info("✅ SQLModel engine initialized")
        return self._engine

    def create_tables(self) -> None:
        """Create all tables that do not exist yet"""
        SQLModel.metadata.create_all(self.get_engine())
        logger.info("✅ Database tables ensured")

    def get_session(self) -> Generator[Session, None, None]:
        """Get database session"""
        with Session(self.get_engine()) as session:
            yield session

    def health_check(self) -> bool:
        """Check database connection health"""
        try:
            with Session(self.get_engine()) as session:
                session.exec(text("SELECT 1"))  # type: ignore[call-overload]
            return True
        except Exception as e:
            logger.error(f"❌ Database health check failed: {e}")
            return False


# Global database instance
db = Database()


# Dependency for FastAPI
def get_session() -> Generator[Session, None, None]:
    """FastAPI dependency to get database session"""
    yield from db.get_session()
