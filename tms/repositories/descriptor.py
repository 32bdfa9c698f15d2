"""
Entity descriptors.

A descriptor is built once per model from SQLAlchemy's mapper and maps
caller-supplied field and relation names onto mapped attributes. Every
name that reaches a query passes through here, so an unknown name fails
as a QueryError before any SQL is emitted.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Sequence, Tuple

from sqlalchemy import inspect
from sqlalchemy.orm import InstrumentedAttribute, RelationshipProperty, selectinload
from sqlalchemy.sql.elements import ColumnElement

from tms.core.constants import RepositoryMessage
from tms.core.exceptions import QueryError


@dataclass(frozen=True)
class EntityDescriptor:
    """
    Name-to-attribute mapping for one mapped class.

    Attributes:
        model: The mapped class
        name: Class name, used in messages
        table_name: Backing table
        primary_key: Mapped attribute of the single-column primary key
        columns: Column attribute name -> mapped attribute
        relationships: Relationship name -> relationship property
    """

    model: type
    name: str
    table_name: str
    primary_key: InstrumentedAttribute
    columns: Dict[str, InstrumentedAttribute] = field(repr=False)
    relationships: Dict[str, RelationshipProperty] = field(repr=False)

    @classmethod
    def for_model(cls, model: type) -> "EntityDescriptor":
        """Build (or fetch the cached) descriptor for a mapped class."""
        return _describe(model)

    # ========================================
    # Name Resolution
    # ========================================

    def column(self, name: str) -> InstrumentedAttribute:
        """Mapped column attribute for a field name."""
        try:
            return self.columns[name]
        except (KeyError, TypeError):
            raise QueryError(
                RepositoryMessage.UNKNOWN_FIELD.format(field=name, entity=self.name),
                details={"entity": self.name, "field": name},
            ) from None

    def relationship(self, name: str) -> InstrumentedAttribute:
        """Mapped relationship attribute for a relation name."""
        self._relationship_property(name)
        return getattr(self.model, name)

    def is_collection(self, name: str) -> bool:
        """True when the relation holds many rows (one-to-many, many-to-many)."""
        return bool(self._relationship_property(name).uselist)

    def related(self, name: str) -> "EntityDescriptor":
        """Descriptor of the class a relation points at."""
        return _describe(self._relationship_property(name).mapper.class_)

    def _relationship_property(self, name: str) -> RelationshipProperty:
        try:
            return self.relationships[name]
        except (KeyError, TypeError):
            raise QueryError(
                RepositoryMessage.UNKNOWN_RELATION.format(relation=name, entity=self.name),
                details={"entity": self.name, "relation": name},
            ) from None

    # ========================================
    # Expression Builders
    # ========================================

    def criterion(self, path: str, value: Any) -> ColumnElement:
        """
        Equality criterion for a field or dotted relation path.

        "name" compares a column; "transport_company.id" walks the relation
        with EXISTS (has() for scalar relations, any() for collections), so
        the root rows are never duplicated. A None value means IS NULL.
        """
        head, _, rest = path.partition(".")
        if not rest:
            column = self.column(head)
            return column.is_(None) if value is None else column == value

        relation = self.relationship(head)
        inner = self.related(head).criterion(rest, value)
        return relation.any(inner) if self.is_collection(head) else relation.has(inner)

    def eager_loads(self, paths: Sequence[str]) -> List[Any]:
        """
        Loader options that eagerly fetch the named relations.

        Select-in loading is used for every relation so LIMIT/OFFSET still
        apply to root rows. Dotted paths ("drivers.qualifications") chain.
        Blank entries are ignored.
        """
        options = []
        for path in paths:
            if path is None or not str(path).strip():
                continue
            descriptor = self
            option = None
            for part in str(path).strip().split("."):
                attribute = descriptor.relationship(part)
                option = selectinload(attribute) if option is None else option.selectinload(attribute)
                descriptor = descriptor.related(part)
            options.append(option)
        return options

    def order_by(self, field_name: str, ascending: bool = True) -> Tuple[ColumnElement, ...]:
        """
        Ordering clauses for a field, with the primary key as tie-breaker.

        With no field the primary key alone is used, so pagination over
        equal keys stays deterministic.
        """
        pk = self.primary_key
        if not field_name:
            return (pk.asc() if ascending else pk.desc(),)
        column = self.column(field_name)
        if column is pk:
            return (pk.asc() if ascending else pk.desc(),)
        return (
            column.asc() if ascending else column.desc(),
            pk.asc() if ascending else pk.desc(),
        )

    # ========================================
    # Instance Helpers
    # ========================================

    def identity(self, entity: Any) -> Any:
        """Primary key value of an instance (None when not yet assigned)."""
        return getattr(entity, self.primary_key.key)


@lru_cache(maxsize=None)
def _describe(model: type) -> EntityDescriptor:
    mapper = inspect(model)
    primary_keys = mapper.primary_key
    if len(primary_keys) != 1:
        raise ValueError(f"{model.__name__} must have exactly one primary key column")

    columns = {attr.key: getattr(model, attr.key) for attr in mapper.column_attrs}
    pk_attr = mapper.get_property_by_column(primary_keys[0])

    return EntityDescriptor(
        model=model,
        name=model.__name__,
        table_name=mapper.local_table.name,
        primary_key=getattr(model, pk_attr.key),
        columns=columns,
        relationships={rel.key: rel for rel in mapper.relationships},
    )
