"""
Database models package.

Contains all SQLAlchemy ORM models. Importing this package registers
every mapper, so relationship names resolve.
"""

from tms.models.base import Base, BaseModel
from tms.models.company import TransportCompany
from tms.models.client import Client
from tms.models.employee import Driver, Qualification, driver_qualifications
from tms.models.vehicle import Vehicle, VehicleType
from tms.models.transport_service import TransportService

__all__ = [
    "Base",
    "BaseModel",
    "TransportCompany",
    "Client",
    "Driver",
    "Qualification",
    "driver_qualifications",
    "Vehicle",
    "VehicleType",
    "TransportService",
]
