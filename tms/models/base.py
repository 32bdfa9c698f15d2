"""
Base Model
==========

Provides common functionality for all database models.
"""

from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class AuditMixin:
    """
    Mixin that adds created_on and modified_on audit timestamps.

    Both are set on the Python side so they are populated as soon as the
    row is flushed, without a round trip for server defaults.
    """

    created_on: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        nullable=False
    )
    modified_on: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True),
        onupdate=utcnow,
        nullable=True
    )


class SerializationMixin:
    """Mixin that adds to_dict() serialization method."""

    def to_dict(self, exclude: Optional[set] = None) -> Dict[str, Any]:
        """Convert model instance columns to a JSON-friendly dictionary."""
        exclude = exclude or set()
        result = {}
        for column in self.__table__.columns:
            if column.key in exclude:
                continue
            value = getattr(self, column.key)
            if isinstance(value, (datetime, date)):
                result[column.key] = value.isoformat()
            elif isinstance(value, Decimal):
                result[column.key] = str(value)
            else:
                result[column.key] = value
        return result


class BaseModel(AuditMixin, SerializationMixin):
    """Base model combining audit and serialization mixins."""
    pass
