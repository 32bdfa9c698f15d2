"""
Tests for repository exceptions.
"""

from tms.core.constants import ErrorKind, RepositoryMessage
from tms.core.exceptions import (
    NotFoundError,
    QueryError,
    RepositoryError,
    SeedError,
    TransactionError,
    ValidationError,
)


class TestExceptions:
    """Test custom exceptions."""

    def test_every_error_is_a_repository_error(self):
        for cls in (ValidationError, NotFoundError, QueryError, TransactionError, SeedError):
            assert issubclass(cls, RepositoryError)

    def test_kinds(self):
        assert RepositoryError("x").kind == ErrorKind.REPOSITORY
        assert ValidationError("x").kind == ErrorKind.VALIDATION
        assert NotFoundError("x", "Client", 1).kind == ErrorKind.NOT_FOUND
        assert QueryError("x").kind == ErrorKind.QUERY
        assert TransactionError("x", "create", "Client").kind == ErrorKind.TRANSACTION
        assert SeedError("x", "clients.json").kind == ErrorKind.SEED

    def test_not_found_details(self):
        exc = NotFoundError("Entity of type Client with ID 5 not found", "Client", 5)

        assert "Client" in str(exc)
        assert exc.entity_id == 5
        assert exc.details == {"entity": "Client", "id": 5}

    def test_cause_is_chained(self):
        cause = RuntimeError("disk full")
        exc = TransactionError("Failed to create entity of type Client", "create", "Client", cause)

        assert exc.__cause__ is cause
        assert exc.cause is cause
        assert exc.details == {"operation": "create", "entity": "Client"}

    def test_details_default_to_empty(self):
        assert QueryError("bad").details == {}

    def test_repr(self):
        assert repr(ValidationError("bad id")) == "<ValidationError(kind='validation', message='bad id')>"

    def test_message_templates_format(self):
        message = RepositoryMessage.NULL_ENTITY.format(operation="create", entity="Client")

        assert message == "Cannot create null entity of type Client"
