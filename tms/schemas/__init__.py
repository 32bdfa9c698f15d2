"""Per-entity validation schemas (pydantic)."""

from tms.schemas.base import EntitySchema, collect_violations, format_violations, validate_record
from tms.schemas.entities import (
    ClientSchema,
    DriverSchema,
    QualificationSchema,
    TransportCompanySchema,
    TransportServiceSchema,
    VehicleSchema,
    SCHEMAS,
    schema_for,
)

__all__ = [
    "EntitySchema",
    "collect_violations",
    "format_violations",
    "validate_record",
    "ClientSchema",
    "DriverSchema",
    "QualificationSchema",
    "TransportCompanySchema",
    "TransportServiceSchema",
    "VehicleSchema",
    "SCHEMAS",
    "schema_for",
]
