# backend/portfolio/services/base.py
"""
Base Service Pattern for the portfolio backend

Provides common functionality for all service classes including:
- Transaction management
- Logging
- Performance monitoring
"""

import asyncio
from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Iterator, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import ServiceException
from ..core.metrics import SERVICE_OPERATION_SECONDS

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

SLOW_OPERATION_SECONDS = 1.0


class BaseService:
    """
    Base class for all service layer components.

    Provides common patterns for:
    - Database session management
    - Logging
    - Transaction handling
    - Performance monitoring
    """

    def __init__(self, db: Session):
        """
        Initialize base service.

        Args:
            db: Database session
        """
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Context manager for database transactions.

        Usage:
            with self.transaction():
                self.db.add(entity)
                # commit is handled automatically
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Transaction committed successfully")
        except SQLAlchemyError as e:
            self.logger.error(f"Transaction failed: {str(e)}")
            self.db.rollback()
            raise ServiceException(f"Database operation failed: {str(e)}")
        except Exception as e:
            self.logger.error(f"Unexpected error in transaction: {str(e)}")
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Decorator to measure operation performance.

        Usage:
            @BaseService.measure_operation("create_project")
            def create_project(self, data):
                ...
        """

        def decorator(func: F) -> F:
            func._operation_name = operation_name  # type: ignore[attr-defined]

            if asyncio.iscoroutinefunction(func):

                @wraps(func)
                async def async_wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                    start_time = time.time()
                    success = False
                    try:
                        result = await func(self, *args, **kwargs)
                        success = True
                        return result
                    finally:
                        self._finish_measurement(operation_name, time.time() - start_time, success)

                return cast(F, async_wrapper)

            @wraps(func)
            def wrapper(self: "BaseService", *args: Any, **kwargs: Any) -> Any:
                start_time = time.time()
                success = False
                try:
                    result = func(self, *args, **kwargs)
                    success = True
                    return result
                finally:
                    self._finish_measurement(operation_name, time.time() - start_time, success)

            return cast(F, wrapper)

        return decorator

    def _finish_measurement(self, operation: str, elapsed: float, success: bool) -> None:
        if elapsed > SLOW_OPERATION_SECONDS:
            self.logger.warning(f"Slow operation detected: {operation} took {elapsed:.2f}s")

        SERVICE_OPERATION_SECONDS.labels(
            service=self.__class__.__name__,
            operation=operation,
            status="success" if success else "error",
        ).observe(elapsed)
