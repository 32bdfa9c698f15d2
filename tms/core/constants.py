"""
Application-wide constants.

Centralize magic strings and message templates here.
"""

from enum import Enum


# ========================================
# Error Kinds
# ========================================

class ErrorKind(str, Enum):
    """
    Categories of repository failures.

    Every RepositoryError carries one of these so callers can branch on
    the kind without importing each exception class.

    Usage:
        if exc.kind == ErrorKind.NOT_FOUND:
            return None
    """

    VALIDATION = "validation"
    """Null or invalid argument supplied by the caller. Not retried."""

    NOT_FOUND = "not_found"
    """No row matches an id-based operation."""

    QUERY = "query"
    """Unknown order/criteria/join/aggregation name, or a rejected read."""

    TRANSACTION = "transaction"
    """A transactional write failed and was rolled back. Retryable."""

    SEED = "seed"
    """Seed source missing or unparsable."""

    REPOSITORY = "repository"
    """Failure outside the kinds above, e.g. submitting to a shut-down worker pool."""


# ========================================
# Repository Messages
# ========================================

class RepositoryMessage(str, Enum):
    """
    Message templates for repository errors.

    Members are plain strings, so they format directly:

        RepositoryMessage.NULL_ENTITY.format(operation="create", entity="Client")
    """

    NULL_ENTITY = "Cannot {operation} null entity of type {entity}"
    WRONG_ENTITY_TYPE = "Cannot {operation} object of type {actual}; expected {entity}"
    NULL_ARGUMENT = "{argument} is required for {owner}"
    ALREADY_PERSISTED = "Cannot create {entity} with ID {id}: it is already stored; use update"
    NULL_ID = "Cannot retrieve entity with null ID for type {entity}"
    NULL_MAPPER = "A mapper function is required to map entities of type {entity}"
    ENTITY_NOT_FOUND = "Entity of type {entity} with ID {id} not found"
    TRANSACTION_FAILED = "Failed to {operation} entity of type {entity}"
    QUERY_FAILED = "Failed to {operation} entities of type {entity}"
    INVALID_PAGE = "Page must be >= 0, got {page}"
    INVALID_SIZE = "Page size must be >= 1, got {size}"
    UNKNOWN_FIELD = "Unknown field '{field}' on {entity}"
    UNKNOWN_RELATION = "Unknown relation '{relation}' on {entity}"
    NOT_MAPPED = "{model} is not a mapped entity"
    UNKNOWN_AGGREGATE = "Unsupported aggregate function '{function}'"
    RELATION_TARGET_MISMATCH = "Relation '{relation}' on {entity} does not reference {target}"
    POOL_UNAVAILABLE = "Worker pool rejected {operation} on {entity}: {reason}"
    SEED_SOURCE_NOT_FOUND = "Seed source '{source}' was not found on disk or in package resources"
    SEED_SOURCE_UNREADABLE = "Seed source '{source}' could not be parsed: {reason}"


# ========================================
# Aggregation
# ========================================

class AggregateFunction(str, Enum):
    """Aggregates accepted by find_with_aggregation."""

    SUM = "sum"
    AVG = "avg"
    MIN = "min"
    MAX = "max"
    COUNT = "count"


# ========================================
# Query Defaults
# ========================================

COUNT_ORDER_KEY = "count"
"""Pseudo-field accepted by count_related to order by the computed count."""

# ========================================
# Seeding
# ========================================

SEED_RESOURCE_PACKAGE = "tms.seeding"
SEED_RESOURCE_DIR = "data"
