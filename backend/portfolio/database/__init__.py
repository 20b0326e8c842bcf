"""
Database engine, session factory, and metadata shared across the application.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
import logging
import random
import time
from typing import Any, Callable, Generator, TypeVar
from urllib.parse import urlparse

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import DeclarativeMeta, Session, declarative_base, sessionmaker
from sqlalchemy.pool import QueuePool, StaticPool

from portfolio.core.config import settings

logger = logging.getLogger(__name__)

# Engine tuning for the Supabase pooled endpoint (Supavisor on 6543):
# - pool_pre_ping + pool_recycle drop stale pooled connections after pooler restarts.
# - keepalives keep idle sockets registered with the load balancer.
# - statement_timeout caps runaway queries.
_DEFAULT_CONNECT_ARGS: dict[str, Any] = {
    "sslmode": "require",
    "keepalives": 1,
    "keepalives_idle": 15,
    "keepalives_interval": 5,
    "keepalives_count": 3,
    "options": "-c statement_timeout=15000",
    "connect_timeout": 5,
    "application_name": "portfolio_api",
}

_DEFAULT_POOL_KWARGS: dict[str, Any] = {
    "pool_size": 3,
    "max_overflow": 5,
    "pool_timeout": 5,
    # Supavisor transaction mode drops idle connections at ~60s
    "pool_recycle": 30,
    "pool_pre_ping": True,
    "pool_use_lifo": True,
    "future": True,
}


def _should_require_ssl(url: str) -> bool:
    hostname = (urlparse(url).hostname or "").lower()
    return "supabase" in hostname


def _build_engine_kwargs(db_url: str) -> dict[str, Any]:
    """Pool and connect arguments for the configured database."""

    if db_url.startswith("sqlite"):
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
            "future": True,
        }

    kwargs = dict(_DEFAULT_POOL_KWARGS)
    connect_args = dict(_DEFAULT_CONNECT_ARGS)
    if not _should_require_ssl(db_url):
        connect_args.pop("sslmode", None)
    kwargs["poolclass"] = QueuePool
    kwargs["connect_args"] = connect_args
    return kwargs


db_url = settings.get_database_url()
engine: Engine = create_engine(db_url, **_build_engine_kwargs(db_url))


# Log pool events for monitoring
@event.listens_for(engine, "connect")
def receive_connect(dbapi_connection: Any, connection_record: Any) -> None:
    connection_record.info["connect_time"] = datetime.now()
    logger.debug("Database connection established")


@event.listens_for(engine, "checkout")
def receive_checkout(dbapi_connection: Any, connection_record: Any, connection_proxy: Any) -> None:
    logger.debug("Connection checked out from pool")


@event.listens_for(engine, "checkin")
def receive_checkin(dbapi_connection: Any, connection_record: Any) -> None:
    logger.debug("Connection returned to pool")


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)

Base: DeclarativeMeta = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session with proper cleanup."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_session() -> Generator[Session, None, None]:
    """Context manager for short-lived DB operations outside a request."""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def get_db_pool_status() -> dict[str, int]:
    """Get current database pool statistics."""
    pool = engine.pool
    if not isinstance(pool, QueuePool):
        return {"size": 1, "checked_in": 0, "checked_out": 0, "total": 1, "overflow": 0}
    return {
        "size": pool.size(),
        "checked_in": pool.checkedin(),
        "checked_out": pool.checkedout(),
        "total": pool.size() + pool.overflow(),
        "overflow": pool.overflow(),
    }


T = TypeVar("T")
# Only target the transient disconnect errors the pooler emits when it restarts.
_RETRYABLE_ERROR_SNIPPETS = (
    "server closed the connection",
    "ssl connection has been closed unexpectedly",
)


def _is_retryable_db_error(exc: OperationalError) -> bool:
    message = str(exc).lower()
    return any(snippet in message for snippet in _RETRYABLE_ERROR_SNIPPETS)


def _retry_delay(attempt: int) -> float:
    base = 0.1 * (2 ** (attempt - 1))
    return base + random.uniform(0, 0.05 * attempt)


def with_db_retry(op_name: str, func: Callable[[], T], *, max_attempts: int = 3) -> T:
    """
    Execute a DB operation with retries for transient pooler disconnects.
    """

    attempt = 1
    while True:
        try:
            return func()
        except OperationalError as exc:
            if attempt >= max_attempts or not _is_retryable_db_error(exc):
                raise

            delay = _retry_delay(attempt)
            logger.warning(
                "Transient DB failure detected, retrying",
                extra={
                    "event": "db_retry",
                    "op": op_name,
                    "attempt": attempt,
                    "delay": delay,
                    "error": str(exc),
                },
            )
            time.sleep(delay)
            attempt += 1


__all__ = [
    "Base",
    "SessionLocal",
    "engine",
    "get_db",
    "get_db_session",
    "get_db_pool_status",
    "with_db_retry",
]
