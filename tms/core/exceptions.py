"""
Repository exceptions.

Every failure that leaves the persistence core is one of these. Low-level
SQLAlchemy errors are translated at the repository boundary and chained
as the cause, so callers never have to catch driver exceptions.
"""

from typing import Any, Optional

from tms.core.constants import ErrorKind


class RepositoryError(Exception):
    """Base exception for all persistence core errors."""

    kind: ErrorKind = ErrorKind.REPOSITORY

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(kind={self.kind.value!r}, message={self.message!r})>"


class ValidationError(RepositoryError):
    """Raised when the caller passes a null or otherwise invalid argument."""

    kind = ErrorKind.VALIDATION


class NotFoundError(RepositoryError):
    """Raised when an id-based operation finds no matching row."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str, entity: str, entity_id: Any):
        super().__init__(message=message, details={"entity": entity, "id": entity_id})
        self.entity = entity
        self.entity_id = entity_id


class QueryError(RepositoryError):
    """Raised when a query names unknown fields/relations or the read fails."""

    kind = ErrorKind.QUERY


class TransactionError(RepositoryError):
    """Raised after a failed transactional write has been rolled back."""

    kind = ErrorKind.TRANSACTION

    def __init__(self, message: str, operation: str, entity: str, cause: Optional[BaseException] = None):
        super().__init__(
            message=message,
            details={"operation": operation, "entity": entity},
            cause=cause,
        )
        self.operation = operation
        self.entity = entity


class SeedError(RepositoryError):
    """Raised when a seed source cannot be located or parsed."""

    kind = ErrorKind.SEED

    def __init__(self, message: str, source: str, cause: Optional[BaseException] = None):
        super().__init__(message=message, details={"source": source}, cause=cause)
        self.source = source


__all__ = [
    "RepositoryError",
    "ValidationError",
    "NotFoundError",
    "QueryError",
    "TransactionError",
    "SeedError",
]
