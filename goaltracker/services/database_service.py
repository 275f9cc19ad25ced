"""
Database service for the goal tracker.

Owns the SQLAlchemy engine and session factory. One instance is built by
``create_app`` and kept on ``app.state``; the FastAPI ``get_db`` dependency
hands out one session per request from it.
"""
from typing import Any, Dict, Generator, Optional
from datetime import datetime
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
from goaltracker.config import Settings, get_settings
from goaltracker.database.models import Base
from goaltracker.utils.logger import get_logger

logger = get_logger(__name__)


class DatabaseService:
    """Storage client with an explicit open/close lifecycle."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._engine: Optional[Engine] = None
        self._session_factory = None
        self._initialized = False

    def initialize(self):
        """Initialize database engine and session factory."""
        if self._initialized:
            return

        self._engine = self._create_engine()
        self._session_factory = sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self._engine
        )
        self._initialized = True
        logger.info("✅ Database service initialized successfully")

    def _create_engine(self) -> Engine:
        database_url = self.settings.DATABASE_URL

        if database_url.startswith("sqlite"):
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=self.settings.DATABASE_ECHO
            )
        return create_engine(
            database_url,
            echo=self.settings.DATABASE_ECHO,
            pool_pre_ping=True,
            pool_size=self.settings.DATABASE_POOL_SIZE,
            max_overflow=self.settings.DATABASE_MAX_OVERFLOW,
            pool_timeout=self.settings.DATABASE_POOL_TIMEOUT,
            pool_recycle=self.settings.DATABASE_POOL_RECYCLE
        )

    @property
    def engine(self) -> Engine:
        if not self._initialized:
            self.initialize()
        return self._engine

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def get_session(self) -> Session:
        """Get a new database session."""
        if not self._initialized:
            self.initialize()
        return self._session_factory()

    def create_tables(self):
        """Create all database tables."""
        Base.metadata.create_all(bind=self.engine)
        logger.info("✅ Database tables created successfully")

    def health_check(self) -> Dict[str, Any]:
        """Check database connectivity."""
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
            return {
                "status": "healthy",
                "timestamp": datetime.utcnow().isoformat()
            }
        except Exception as e:
            logger.error(f"❌ Database health check failed: {e}")
            return {
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.utcnow().isoformat()
            }

    def close(self):
        """Dispose of pooled connections."""
        if self._engine is not None:
            self._engine.dispose()
            logger.info("✅ Database connections closed")
        self._engine = None
        self._session_factory = None
        self._initialized = False


def init_database(database_service: DatabaseService):
    """Initialize the database and fail loudly when storage is unreachable."""
    database_service.initialize()
    health = database_service.health_check()
    if health["status"] != "healthy":
        logger.error("❌ Database connection failed")
        raise RuntimeError(f"Database connection failed: {health.get('error')}")
    database_service.create_tables()
    logger.info("✅ Database initialization completed successfully")


# FastAPI dependency
def get_db(request: Request) -> Generator[Session, None, None]:
    """Yield a session bound to the application's database service."""
    db = request.app.state.database_service.get_session()
    try:
        yield db
    finally:
        db.close()
