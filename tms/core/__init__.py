"""Core constants, exceptions and logging setup."""

from tms.core.constants import AggregateFunction, ErrorKind, RepositoryMessage
from tms.core.exceptions import (
    RepositoryError,
    ValidationError,
    NotFoundError,
    QueryError,
    TransactionError,
    SeedError,
)
from tms.core.logging_config import configure_logging

__all__ = [
    "AggregateFunction",
    "ErrorKind",
    "RepositoryMessage",
    "RepositoryError",
    "ValidationError",
    "NotFoundError",
    "QueryError",
    "TransactionError",
    "SeedError",
    "configure_logging",
]
