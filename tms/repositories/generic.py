"""
Generic Repository
==================

One repository class serves every mapped entity:

    provider = SessionProvider.from_url("sqlite:///./data/tms.db")
    drivers = GenericRepository(provider, Driver)

    driver = drivers.create(Driver(first_name="Ana", family_name="Petrova", transport_company_id=1))
    page = drivers.get_all(0, 10, "family_name", True, "qualifications")
    same = drivers.find_by_criteria({"transport_company.id": 1}, None, True, "qualifications")

Writes run in exactly one transaction each: committed on success, rolled
back on any failure. Reads open a short-lived session and never commit.
Entities come back detached; only their columns and the relations named
in ``fetch_relations`` are safe to touch afterwards.

Failures surface as RepositoryError subclasses:
- ValidationError: null entity/id/mapper, wrong entity type, bad page
- NotFoundError: id-based operation found no row
- QueryError: unknown field/relation/aggregate, or the read failed
- TransactionError: the write failed and was rolled back
"""

from concurrent.futures import Executor
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, TypeVar

import structlog
from sqlalchemy import inspect
from sqlalchemy.exc import NoInspectionAvailable, SQLAlchemyError
from sqlalchemy.orm import Session

from tms.config import settings
from tms.core.constants import RepositoryMessage
from tms.core.exceptions import (
    NotFoundError,
    QueryError,
    RepositoryError,
    TransactionError,
    ValidationError,
)
from tms.database.session import SessionProvider
from tms.repositories import queries
from tms.repositories.asynchronous import AsyncRepositoryMixin
from tms.repositories.descriptor import EntityDescriptor
from tms.repositories.queries import AggregationSpec, JoinSpec, Pagination

logger = structlog.get_logger(__name__)

T = TypeVar("T")
TKey = TypeVar("TKey")
R = TypeVar("R")


class GenericRepository(AsyncRepositoryMixin, Generic[T, TKey]):
    """
    CRUD, paging and query operations for one entity type.

    Args:
        provider: Session source; one provider may back many repositories
        model: Mapped entity class
        executor: Worker pool for the ``*_async`` twins. When omitted the
            repository creates its own on first use and shuts it down in
            ``close()``.

    Raises:
        ValidationError: provider or model is None
    """

    def __init__(self, provider: SessionProvider, model: type, executor: Optional[Executor] = None):
        require_argument(provider, "provider", "GenericRepository")
        require_argument(model, "model", "GenericRepository")
        self.provider = provider
        self.model = model
        self.descriptor = EntityDescriptor.for_model(model)
        self._column_keys = list(self.descriptor.columns)
        self._init_worker_pool(executor)

    def __repr__(self) -> str:
        return f"<GenericRepository(entity={self.descriptor.name!r})>"

    # ========================================
    # Write Operations
    # ========================================

    def create(self, entity: T) -> T:
        """
        Insert a new entity and return it with its generated id.

        Related entities attached to it are inserted in the same transaction.

        Raises:
            ValidationError: entity is None, of another type, or already stored
        """
        self._check_entity(entity, "create")
        if inspect(entity).has_identity:
            entity_id = self.descriptor.identity(entity)
            raise ValidationError(
                RepositoryMessage.ALREADY_PERSISTED.format(entity=self.descriptor.name, id=entity_id),
                details={"entity": self.descriptor.name, "id": entity_id, "operation": "create"},
            )

        def work(session: Session) -> T:
            session.add(entity)
            session.flush()
            session.refresh(entity, attribute_names=self._column_keys)
            return entity

        created = self._execute_in_transaction("create", work)
        logger.info("repository.created", entity=self.descriptor.name, id=self.descriptor.identity(created))
        return created

    def update(self, entity: T) -> T:
        """
        Replace the stored row with the entity's current state.

        Raises:
            NotFoundError: the entity has no id or no row has that id
        """
        self._check_entity(entity, "update")
        updated = self._execute_in_transaction("update", lambda session: self._merge(session, entity))
        logger.info("repository.updated", entity=self.descriptor.name, id=self.descriptor.identity(updated))
        return updated

    def delete(self, entity: T) -> None:
        """
        Remove the entity's row (and cascade to owned children).

        Raises:
            NotFoundError: the entity has no id or no row has that id
        """
        self._check_entity(entity, "delete")
        entity_id = self.descriptor.identity(entity)

        def work(session: Session) -> None:
            stored = session.get(self.model, entity_id) if entity_id is not None else None
            if stored is None:
                raise self._not_found(entity_id)
            session.delete(stored)

        self._execute_in_transaction("delete", work)
        logger.info("repository.deleted", entity=self.descriptor.name, id=entity_id)

    def update_and_map(
        self,
        entity: T,
        mapper: Callable[[T], R],
        initializer: Optional[Callable[[T], Any]] = None,
    ) -> R:
        """
        Update, then map the stored entity while its session is still open.

        ``initializer`` runs first and may touch lazy relations the mapper
        needs. The mapped value is returned; the transaction commits only
        if both callables succeed.
        """
        self._check_entity(entity, "update")
        self._check_mapper(mapper)

        def work(session: Session) -> R:
            merged = self._merge(session, entity)
            if initializer is not None:
                initializer(merged)
            return mapper(merged)

        return self._execute_in_transaction("update", work)

    # ========================================
    # Read Operations
    # ========================================

    def get_by_id(self, entity_id: TKey, *fetch_relations: str) -> T:
        """
        Fetch one entity, eagerly loading the named relations.

        Raises:
            ValidationError: entity_id is None
            NotFoundError: no row has that id
        """
        self._check_id(entity_id)
        stmt = queries.by_id_select(self.descriptor, entity_id, fetch_relations)
        return self._execute_read("get_by_id", lambda session: self._first_or_raise(session, stmt, entity_id))

    def get_all(
        self,
        page: int,
        size: int,
        order_by: Optional[str] = None,
        ascending: bool = True,
        *fetch_relations: str,
    ) -> List[T]:
        """One page of entities; empty past the last page."""
        pagination = Pagination(page, size, order_by, ascending)
        stmt = queries.paginated_select(self.descriptor, pagination, fetch_relations)
        return self._execute_read("get_all", lambda session: list(session.scalars(stmt).all()))

    def find_by_criteria(
        self,
        conditions: Optional[Mapping[str, Any]],
        order_by: Optional[str] = None,
        ascending: bool = True,
        *fetch_relations: str,
    ) -> List[T]:
        """Every entity whose fields equal the given values (all must match)."""
        stmt = queries.criteria_select(self.descriptor, conditions, order_by, ascending, fetch_relations)
        return self._execute_read("find_by_criteria", lambda session: list(session.scalars(stmt).all()))

    def find_with_aggregation(
        self,
        join_relation: Optional[str],
        aggregation_field: str,
        group_by_field: str,
        ascending: bool = True,
        function: str = "sum",
    ) -> List[T]:
        """
        Every entity, ordered by an aggregate over one of its relations.

        Entities without related rows sort first ascending, last descending.
        """
        spec = AggregationSpec(join_relation, aggregation_field, group_by_field, ascending, function)
        stmt = queries.aggregation_select(self.descriptor, spec)
        return self._execute_read("find_with_aggregation", lambda session: list(session.scalars(stmt).all()))

    def find_with_join(
        self,
        join_field: str,
        join_condition_field: str,
        join_condition_value: Any,
        order_by: Optional[str] = None,
        ascending: bool = True,
        eager_fetch: bool = False,
        *fetch_relations: str,
    ) -> List[T]:
        """
        Entities with at least one related row matching the condition.

        With ``eager_fetch`` the joined relation is loaded in full (not only
        the matching rows).
        """
        spec = JoinSpec(join_field, join_condition_field, join_condition_value, eager_fetch)
        stmt = queries.join_select(self.descriptor, spec, order_by, ascending, fetch_relations)
        return self._execute_read("find_with_join", lambda session: list(session.scalars(stmt).all()))

    def get_by_id_and_map(
        self,
        entity_id: TKey,
        mapper: Callable[[T], R],
        initializer: Optional[Callable[[T], Any]] = None,
    ) -> R:
        """Fetch one entity and map it inside the session."""
        self._check_id(entity_id)
        self._check_mapper(mapper)
        stmt = queries.by_id_select(self.descriptor, entity_id)

        def work(session: Session) -> R:
            entity = self._first_or_raise(session, stmt, entity_id)
            if initializer is not None:
                initializer(entity)
            return mapper(entity)

        return self._execute_read("get_by_id", work)

    def get_all_and_map(
        self,
        page: int,
        size: int,
        order_by: Optional[str],
        ascending: bool,
        mapper: Callable[[T], R],
        initializer: Optional[Callable[[T], Any]] = None,
    ) -> List[R]:
        """One page of entities, each mapped inside the session."""
        self._check_mapper(mapper)
        pagination = Pagination(page, size, order_by, ascending)
        stmt = queries.paginated_select(self.descriptor, pagination)

        def work(session: Session) -> List[R]:
            mapped = []
            for entity in session.scalars(stmt).all():
                if initializer is not None:
                    initializer(entity)
                mapped.append(mapper(entity))
            return mapped

        return self._execute_read("get_all", work)

    def find_related_entities(
        self,
        related_model: type,
        relation_field: str,
        entity_id: TKey,
        page: int,
        size: int,
        order_by: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Any]:
        """
        Page of ``related_model`` rows whose ``relation_field`` points at
        the entity ``entity_id`` of this repository's type.

            qualifications.find_related_entities(Driver, "qualifications", 3, 0, 10)
        """
        self._check_id(entity_id)
        pagination = Pagination(page, size, order_by, ascending)
        related = self._describe_related(related_model)
        stmt = queries.related_select(related, relation_field, self.descriptor, entity_id, pagination)
        return self._execute_read("find_related_entities", lambda session: list(session.scalars(stmt).all()))

    def count_related(
        self,
        join_relation: str,
        page: int = 0,
        size: Optional[int] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
    ) -> Dict[Any, int]:
        """
        Map of entity id -> number of rows in ``join_relation``.

        Entities without related rows map to 0. ``order_by`` may be "count"
        to rank by the count itself. Dict order follows the query order.
        """
        pagination = Pagination(page, settings.default_page_size if size is None else size, order_by, ascending)
        stmt = queries.related_count_select(self.descriptor, join_relation, pagination)
        return self._execute_read(
            "count_related",
            lambda session: {row[0]: row[1] for row in session.execute(stmt).all()},
        )

    def exists(self) -> bool:
        """True when at least one row is stored."""
        stmt = queries.existence_select(self.descriptor)
        return self._execute_read("exists", lambda session: session.execute(stmt).first() is not None)

    def count(self) -> int:
        """Total stored rows."""
        stmt = queries.count_select(self.descriptor)
        return self._execute_read("count", lambda session: session.execute(stmt).scalar_one())

    # ========================================
    # Units of Work
    # ========================================

    def _execute_in_transaction(self, operation: str, work: Callable[[Session], R]) -> R:
        """
        Run ``work`` in one transaction.

        RepositoryErrors raised by ``work`` pass through unchanged after the
        rollback; anything else is wrapped in TransactionError.
        """
        try:
            with self.provider.transaction() as session:
                return work(session)
        except RepositoryError:
            raise
        except Exception as exc:
            logger.error(
                "repository.transaction_failed",
                entity=self.descriptor.name,
                operation=operation,
                error=str(exc),
                exc_info=True,
            )
            raise TransactionError(
                RepositoryMessage.TRANSACTION_FAILED.format(operation=operation, entity=self.descriptor.name),
                operation=operation,
                entity=self.descriptor.name,
                cause=exc,
            ) from exc

    def _execute_read(self, operation: str, work: Callable[[Session], R]) -> R:
        try:
            with self.provider.session() as session:
                return work(session)
        except SQLAlchemyError as exc:
            logger.error(
                "repository.query_failed",
                entity=self.descriptor.name,
                operation=operation,
                error=str(exc),
            )
            raise QueryError(
                RepositoryMessage.QUERY_FAILED.format(operation=operation, entity=self.descriptor.name),
                details={"entity": self.descriptor.name, "operation": operation},
                cause=exc,
            ) from exc

    def _merge(self, session: Session, entity: T) -> T:
        entity_id = self.descriptor.identity(entity)
        if entity_id is None or session.get(self.model, entity_id) is None:
            raise self._not_found(entity_id)
        merged = session.merge(entity)
        session.flush()
        session.refresh(merged, attribute_names=self._column_keys)
        return merged

    def _first_or_raise(self, session: Session, stmt, entity_id: Any) -> T:
        entity = session.scalars(stmt).first()
        if entity is None:
            raise self._not_found(entity_id)
        return entity

    # ========================================
    # Argument Checks
    # ========================================

    def _check_entity(self, entity: Any, operation: str) -> None:
        if entity is None:
            raise ValidationError(
                RepositoryMessage.NULL_ENTITY.format(operation=operation, entity=self.descriptor.name),
                details={"entity": self.descriptor.name, "operation": operation},
            )
        if not isinstance(entity, self.model):
            raise ValidationError(
                RepositoryMessage.WRONG_ENTITY_TYPE.format(
                    operation=operation, actual=type(entity).__name__, entity=self.descriptor.name
                ),
                details={"entity": self.descriptor.name, "operation": operation},
            )

    def _check_id(self, entity_id: Any) -> None:
        if entity_id is None:
            raise ValidationError(
                RepositoryMessage.NULL_ID.format(entity=self.descriptor.name),
                details={"entity": self.descriptor.name},
            )

    def _check_mapper(self, mapper: Any) -> None:
        if mapper is None:
            raise ValidationError(
                RepositoryMessage.NULL_MAPPER.format(entity=self.descriptor.name),
                details={"entity": self.descriptor.name},
            )

    def _not_found(self, entity_id: Any) -> NotFoundError:
        return NotFoundError(
            RepositoryMessage.ENTITY_NOT_FOUND.format(entity=self.descriptor.name, id=entity_id),
            entity=self.descriptor.name,
            entity_id=entity_id,
        )

    @staticmethod
    def _describe_related(model: Any) -> EntityDescriptor:
        try:
            return EntityDescriptor.for_model(model)
        except (NoInspectionAvailable, ValueError) as exc:
            name = getattr(model, "__name__", repr(model))
            raise QueryError(
                RepositoryMessage.NOT_MAPPED.format(model=name),
                details={"model": name},
                cause=exc,
            ) from exc


def require_argument(value: Any, argument: str, owner: str) -> None:
    """Raise ValidationError when a required constructor argument is None."""
    if value is None:
        raise ValidationError(
            RepositoryMessage.NULL_ARGUMENT.format(argument=argument, owner=owner),
            details={"argument": argument, "owner": owner},
        )
