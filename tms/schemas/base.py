"""
Validation schema base.

Each entity has a pydantic schema describing which raw field values are
acceptable. The seeder (and anything else that accepts untrusted records)
validates through these before building ORM objects.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as SchemaValidationError


class EntitySchema(BaseModel):
    """
    Base for per-entity validation schemas.

    created_on may be supplied by seed data; when absent the model default
    (insertion time) applies.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        use_enum_values=True,
    )

    created_on: Optional[datetime] = None


def format_violations(exc: SchemaValidationError) -> List[str]:
    """Flatten a pydantic error into "field: message" strings."""
    violations = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "__root__"
        violations.append(f"{location}: {error['msg']}")
    return violations


def validate_record(
    schema: Type[EntitySchema],
    record: Any,
) -> Tuple[Optional[Dict[str, Any]], List[str]]:
    """
    Validate one raw record.

    Returns:
        (data, violations): data holds the coerced field values when the
        record is valid, otherwise None; violations is empty when valid.
    """
    if not isinstance(record, dict):
        return None, [f"__root__: expected an object, got {type(record).__name__}"]
    try:
        validated = schema.model_validate(record)
    except SchemaValidationError as exc:
        return None, format_violations(exc)
    return validated.model_dump(exclude_unset=True, exclude_none=True), []


def collect_violations(schema: Type[EntitySchema], record: Any) -> List[str]:
    """Return the (possibly empty) list of violations for a raw record."""
    _, violations = validate_record(schema, record)
    return violations
