"""
Query Construction
==================

Builds the fixed set of query shapes the repository supports, for any
mapped entity:

- paginated list with eager relation loading
- criteria filter (conjunctive equality)
- join filter (condition on a related row)
- aggregation sort (order roots by an aggregate over a relation)
- related-entity lookup and per-root related counts
- existence probe and row count

Every builder takes an EntityDescriptor and returns an un-executed
``Select``. Unknown names raise QueryError while building, so nothing is
sent to the store for a malformed query.
"""

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

from sqlalchemy import Select, case, func, select

from tms.core.constants import COUNT_ORDER_KEY, AggregateFunction, RepositoryMessage
from tms.core.exceptions import QueryError, ValidationError
from tms.repositories.descriptor import EntityDescriptor


_AGGREGATES = {
    AggregateFunction.SUM: func.sum,
    AggregateFunction.AVG: func.avg,
    AggregateFunction.MIN: func.min,
    AggregateFunction.MAX: func.max,
    AggregateFunction.COUNT: func.count,
}


# ========================================
# Specs
# ========================================

@dataclass(frozen=True)
class Pagination:
    """
    Zero-based page request.

    Attributes:
        page: Page index, >= 0 (offset = page * size)
        size: Rows per page, >= 1
        order_by: Field to sort on (primary key when omitted)
        ascending: Sort direction
    """

    page: int
    size: int
    order_by: Optional[str] = None
    ascending: bool = True

    def __post_init__(self):
        if not isinstance(self.page, int) or self.page < 0:
            raise ValidationError(RepositoryMessage.INVALID_PAGE.format(page=self.page))
        if not isinstance(self.size, int) or self.size < 1:
            raise ValidationError(RepositoryMessage.INVALID_SIZE.format(size=self.size))

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class JoinSpec:
    """Filter roots whose relation has an element matching one condition."""

    join_field: str
    condition_field: str
    condition_value: Any
    eager_fetch: bool = False


@dataclass(frozen=True)
class AggregationSpec:
    """
    Order roots by an aggregate computed over a related collection.

    Attributes:
        join_relation: Relation on the root to aggregate over. When empty,
            roots are ordered by group_by_field alone.
        aggregation_field: Column on the related entity
        group_by_field: Root column used as the secondary sort key
        ascending: Sort direction for both keys
        function: One of AggregateFunction values
    """

    join_relation: Optional[str]
    aggregation_field: str
    group_by_field: str
    ascending: bool = True
    function: str = AggregateFunction.SUM.value


# ========================================
# Builders
# ========================================

def paginated_select(
    descriptor: EntityDescriptor,
    pagination: Pagination,
    fetch_relations: Sequence[str] = (),
) -> Select:
    """One page of roots, ordered, with the requested relations eagerly loaded."""
    return (
        select(descriptor.model)
        .options(*descriptor.eager_loads(fetch_relations))
        .order_by(*descriptor.order_by(pagination.order_by, pagination.ascending))
        .offset(pagination.offset)
        .limit(pagination.size)
    )


def by_id_select(
    descriptor: EntityDescriptor,
    entity_id: Any,
    fetch_relations: Sequence[str] = (),
) -> Select:
    """Single root by primary key."""
    return (
        select(descriptor.model)
        .options(*descriptor.eager_loads(fetch_relations))
        .where(descriptor.primary_key == entity_id)
    )


def criteria_select(
    descriptor: EntityDescriptor,
    conditions: Optional[Mapping[str, Any]],
    order_by: Optional[str] = None,
    ascending: bool = True,
    fetch_relations: Sequence[str] = (),
) -> Select:
    """
    Roots matching every field == value pair. No LIMIT is applied.

    Keys may be dotted relation paths ("transport_company.id"). Empty or
    None conditions match every row.
    """
    stmt = select(descriptor.model).options(*descriptor.eager_loads(fetch_relations))
    for path, value in (conditions or {}).items():
        if not isinstance(path, str) or not path:
            raise QueryError(
                RepositoryMessage.UNKNOWN_FIELD.format(field=path, entity=descriptor.name),
                details={"entity": descriptor.name, "field": path},
            )
        stmt = stmt.where(descriptor.criterion(path, value))
    return stmt.order_by(*descriptor.order_by(order_by, ascending))


def join_select(
    descriptor: EntityDescriptor,
    spec: JoinSpec,
    order_by: Optional[str] = None,
    ascending: bool = True,
    fetch_relations: Sequence[str] = (),
) -> Select:
    """
    Roots whose relation ``spec.join_field`` has at least one element with
    ``condition_field == condition_value``.

    The condition is an EXISTS subquery, so each root appears once however
    many related rows match.
    """
    relation = descriptor.relationship(spec.join_field)
    condition = descriptor.related(spec.join_field).criterion(spec.condition_field, spec.condition_value)
    criterion = relation.any(condition) if descriptor.is_collection(spec.join_field) else relation.has(condition)

    eager = list(fetch_relations)
    if spec.eager_fetch:
        eager.insert(0, spec.join_field)

    return (
        select(descriptor.model)
        .options(*descriptor.eager_loads(eager))
        .where(criterion)
        .order_by(*descriptor.order_by(order_by, ascending))
    )


def aggregation_select(descriptor: EntityDescriptor, spec: AggregationSpec) -> Select:
    """
    All roots ordered by an aggregate over a related collection.

    The aggregate is computed per root in a LEFT OUTER JOIN subquery, so
    roots without related rows are kept; their aggregate is NULL and they
    sort lowest (first ascending, last descending) regardless of how the
    backend orders NULLs. group_by_field breaks ties in the same direction.
    """
    group_column = descriptor.column(spec.group_by_field)
    direction = "asc" if spec.ascending else "desc"

    if not spec.join_relation or not spec.join_relation.strip():
        return select(descriptor.model).order_by(getattr(group_column, direction)())

    try:
        aggregate_fn = _AGGREGATES[AggregateFunction(spec.function.lower())]
    except (AttributeError, ValueError):
        raise QueryError(
            RepositoryMessage.UNKNOWN_AGGREGATE.format(function=spec.function),
            details={"function": spec.function},
        ) from None

    relation = descriptor.relationship(spec.join_relation)
    aggregated_column = descriptor.related(spec.join_relation).column(spec.aggregation_field)
    pk = descriptor.primary_key

    totals = (
        select(pk.label("root_id"), aggregate_fn(aggregated_column).label("aggregate"))
        .select_from(descriptor.model)
        .outerjoin(relation)
        .group_by(pk)
        .subquery("aggregates")
    )
    aggregate = totals.c.aggregate
    present = case((aggregate.is_(None), 0), else_=1)

    return (
        select(descriptor.model)
        .join(totals, pk == totals.c.root_id)
        .order_by(
            getattr(present, direction)(),
            getattr(aggregate, direction)(),
            getattr(group_column, direction)(),
        )
    )


def related_select(
    related: EntityDescriptor,
    relation_field: str,
    root: EntityDescriptor,
    root_id: Any,
    pagination: Pagination,
) -> Select:
    """
    Page of ``related`` entities whose ``relation_field`` references the
    root entity ``root_id`` (e.g. drivers holding one qualification).
    """
    relation = related.relationship(relation_field)
    target = related.related(relation_field)
    if target.model is not root.model:
        raise QueryError(
            RepositoryMessage.RELATION_TARGET_MISMATCH.format(
                relation=relation_field, entity=related.name, target=root.name
            ),
            details={"entity": related.name, "relation": relation_field, "target": root.name},
        )

    condition = root.primary_key == root_id
    criterion = relation.any(condition) if related.is_collection(relation_field) else relation.has(condition)
    return (
        select(related.model)
        .where(criterion)
        .order_by(*related.order_by(pagination.order_by, pagination.ascending))
        .offset(pagination.offset)
        .limit(pagination.size)
    )


def related_count_select(
    descriptor: EntityDescriptor,
    join_relation: str,
    pagination: Pagination,
) -> Select:
    """
    (root id, related row count) pairs, roots without related rows
    counted as 0. ``pagination.order_by`` may be "count" or a root column.
    """
    relation = descriptor.relationship(join_relation)
    related_pk = descriptor.related(join_relation).primary_key
    pk = descriptor.primary_key
    related_count = func.count(related_pk).label("related_count")
    direction = "asc" if pagination.ascending else "desc"

    if pagination.order_by == COUNT_ORDER_KEY:
        ordering = (getattr(related_count, direction)(), getattr(pk, direction)())
    else:
        ordering = descriptor.order_by(pagination.order_by, pagination.ascending)

    return (
        select(pk, related_count)
        .select_from(descriptor.model)
        .outerjoin(relation)
        .group_by(pk)
        .order_by(*ordering)
        .offset(pagination.offset)
        .limit(pagination.size)
    )


def existence_select(descriptor: EntityDescriptor) -> Select:
    """Bounded probe: at most one primary key value."""
    return select(descriptor.primary_key).limit(1)


def count_select(descriptor: EntityDescriptor) -> Select:
    """Total number of rows."""
    return select(func.count()).select_from(descriptor.model)
