from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool
from app.config import settings
from app.utils.logger import get_logger

logger = get_logger(__name__)

# Database connection pooling configuration (server databases only)
POOL_SIZE = 5          # Base connections per worker
MAX_OVERFLOW = 10      # Additional connections when needed
POOL_TIMEOUT = 30      # Seconds to wait for connection
POOL_RECYCLE = 1800    # Recycle connections every 30 minutes
POOL_PRE_PING = True   # Validate connections before use

# Global variables for lazy initialization
_engine = None
_session_local = None

Base = declarative_base()


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(url: str) -> Engine:
    """Create an engine for ``url`` with settings suited to its backend."""
    if _is_sqlite(url):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False, "timeout": 15},
            echo=settings.DEBUG,
        )

        # SQLite only enforces the favorites -> friendships foreign key when asked to
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        logger.info("Database engine configured for SQLite")
        return engine

    engine = create_engine(
        url,
        poolclass=QueuePool,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_timeout=POOL_TIMEOUT,
        pool_recycle=POOL_RECYCLE,
        pool_pre_ping=POOL_PRE_PING,
        echo=settings.DEBUG,  # Log SQL queries in debug mode
    )
    logger.info(f"Database pool configured: size={POOL_SIZE}, max_overflow={MAX_OVERFLOW}, timeout={POOL_TIMEOUT}s")
    return engine


def get_engine() -> Engine:
    """Get database engine with lazy initialization for Gunicorn worker compatibility."""
    global _engine
    if _engine is None:
        _engine = build_engine(settings.DATABASE_URL)
    return _engine


def get_session_local():
    """Get SessionLocal with lazy initialization for Gunicorn worker compatibility."""
    global _session_local
    if _session_local is None:
        _session_local = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _session_local


def get_db():
    """
    Database dependency for FastAPI.
    Provides one session per request with automatic cleanup.
    """
    SessionLocal = get_session_local()
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database session error: {e}")
        try:
            db.rollback()
        except Exception as rollback_error:
            logger.error(f"Error during rollback: {rollback_error}")
        raise
    finally:
        db.close()


def get_pool_status():
    """
    Get current database connection pool status.
    Reported by the health endpoint.
    """
    try:
        pool = get_engine().pool
        status = {"pool_type": type(pool).__name__}
        if isinstance(pool, QueuePool):
            status.update({
                "pool_size": pool.size(),
                "checked_in": pool.checkedin(),
                "checked_out": pool.checkedout(),
                "overflow": pool.overflow(),
            })
        return status
    except Exception as e:
        return {
            "error": f"Could not get pool status: {str(e)}",
            "pool_type": "unknown"
        }

