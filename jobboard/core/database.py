import logging
import time

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker
from jobboard.core.config import settings

logger = logging.getLogger(__name__)


def _engine_options(database_url: str) -> dict:
    """Connection options for the configured backend."""
    if database_url.startswith("sqlite"):
        # SQLite connections are shared with FastAPI's threadpool
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # Verify connections before using them
        "pool_size": 10,  # Connection pool size
        "max_overflow": 20  # Allow up to 20 connections beyond pool_size
    }


# Create SQLAlchemy engine
engine = create_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

# Create SessionLocal class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create Base class for models
Base = declarative_base()


def get_db():
    """
    Dependency function to get database session.
    Used in FastAPI endpoints with Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def wait_for_database(bind: Engine, max_attempts: int = 5, delay: float = 5.0) -> None:
    """
    Block until the database accepts connections.

    Runs ``SELECT 1`` up to ``max_attempts`` times, sleeping a fixed
    ``delay`` between failed attempts.

    Args:
        bind: Engine to probe
        max_attempts: Number of connection attempts before giving up
        delay: Seconds to wait between attempts

    Raises:
        OperationalError: If the last attempt still fails
    """
    for attempt in range(1, max_attempts + 1):
        try:
            with bind.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info(f"Connected to database on attempt {attempt}/{max_attempts}")
            return
        except OperationalError as e:
            logger.warning(f"Database connection attempt {attempt}/{max_attempts} failed: {e}")
            if attempt == max_attempts:
                logger.error("Database unavailable, giving up")
                raise
            time.sleep(delay)


def init_db():
    """
    Initialize database.

    Waits for the database to come up, registers the models and, unless
    AUTO_CREATE_TABLES is disabled, creates any missing tables. Deployments
    that manage the schema with Alembic should disable AUTO_CREATE_TABLES and
    run "alembic upgrade head" instead.
    """
    from jobboard.models import job  # noqa: F401  Import models to register them

    wait_for_database(
        engine,
        max_attempts=settings.DB_CONNECT_MAX_ATTEMPTS,
        delay=settings.DB_CONNECT_RETRY_DELAY,
    )
    if settings.AUTO_CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
