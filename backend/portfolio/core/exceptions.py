# backend/portfolio/core/exceptions.py
"""
Domain-specific exceptions for the portfolio backend.

Services raise these; routes convert them to HTTP responses through
``to_http_exception`` (or the global handler registered in ``portfolio.errors``).
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when request data fails business validation."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class ServiceException(DomainException):
    """Raised when a service operation fails."""

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "message": self.message or "An error occurred processing your request",
                "code": self.code,
                "details": self.details if self.details else {},
            },
        )


class ExternalServiceException(ServiceException):
    """Raised when Clerk, Supabase Storage or a package registry call fails."""

    status_code = status.HTTP_502_BAD_GATEWAY

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


# Specific business exceptions


class MissingFieldsException(ValidationException):
    """Raised when required project fields are absent or blank."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__(
            message=f"Missing required fields: {', '.join(missing)}",
            code="MISSING_FIELDS",
            details={"missing": missing},
        )


class DependencyLockedException(BusinessRuleException):
    """Raised when an update targets a locked dependency."""

    def __init__(self, name: str, locked_version: Optional[str]) -> None:
        super().__init__(
            message=f"Dependency {name} is locked"
            + (f" at {locked_version}" if locked_version else ""),
            code="DEPENDENCY_LOCKED",
            details={"name": name, "locked_version": locked_version},
        )


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    Used when data access operations fail, such as connection issues, query
    failures, or constraint violations.
    """
