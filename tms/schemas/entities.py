"""
Validation schemas for the transport entities.

Field names match the ORM models' attribute names so a validated record
can be passed straight to the model constructor.
"""

from datetime import date
from decimal import Decimal
from typing import Dict, Optional, Type

from pydantic import Field, model_validator

from tms.models import Client, Driver, Qualification, TransportCompany, TransportService, Vehicle
from tms.models.vehicle import VehicleType
from tms.schemas.base import EntitySchema


EMAIL_PATTERN = r"^[\w.+-]+@[\w-]+(\.[\w-]+)+$"
TELEPHONE_PATTERN = r"^\+?[0-9 ]{6,14}$"


class TransportCompanySchema(EntitySchema):
    name: str = Field(min_length=1, max_length=50)
    address: Optional[str] = Field(default=None, max_length=125)


class ClientSchema(EntitySchema):
    name: str = Field(min_length=1, max_length=50)
    telephone: str = Field(pattern=TELEPHONE_PATTERN)
    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)


class QualificationSchema(EntitySchema):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=255)


class DriverSchema(EntitySchema):
    first_name: str = Field(min_length=1, max_length=50)
    family_name: str = Field(min_length=1, max_length=50)
    salary: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    transport_company_id: int = Field(gt=0)


class VehicleSchema(EntitySchema):
    registration_plate: str = Field(min_length=1, max_length=20)
    vehicle_type: VehicleType = VehicleType.TRUCK
    colour: Optional[str] = Field(default=None, max_length=30)
    transport_company_id: int = Field(gt=0)


class TransportServiceSchema(EntitySchema):
    """Validation for transport services, including the date range check."""

    transport_company_id: int = Field(gt=0)
    client_id: Optional[int] = Field(default=None, gt=0)
    driver_id: Optional[int] = Field(default=None, gt=0)
    vehicle_id: Optional[int] = Field(default=None, gt=0)
    starting_location: str = Field(min_length=1, max_length=125)
    ending_location: str = Field(min_length=1, max_length=125)
    starting_date: date
    ending_date: Optional[date] = None
    price: Decimal = Field(ge=0, decimal_places=2)
    is_delivered: bool = False
    is_paid: bool = False
    description: Optional[str] = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def check_dates(self) -> "TransportServiceSchema":
        if self.ending_date is not None and self.ending_date < self.starting_date:
            raise ValueError("ending_date cannot be before starting_date")
        return self


SCHEMAS: Dict[type, Type[EntitySchema]] = {
    TransportCompany: TransportCompanySchema,
    Client: ClientSchema,
    Qualification: QualificationSchema,
    Driver: DriverSchema,
    Vehicle: VehicleSchema,
    TransportService: TransportServiceSchema,
}


def schema_for(model: type) -> Type[EntitySchema]:
    """Look up the validation schema registered for a model class."""
    try:
        return SCHEMAS[model]
    except KeyError:
        raise LookupError(f"No validation schema registered for {model.__name__}") from None
