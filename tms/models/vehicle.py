"""Vehicle model: trucks, buses and vans owned by a company."""

from enum import Enum
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tms.models.base import Base, BaseModel

if TYPE_CHECKING:
    from tms.models.company import TransportCompany
    from tms.models.transport_service import TransportService


class VehicleType(str, Enum):
    """Kinds of vehicle a company can operate."""

    TRUCK = "truck"
    BUS = "bus"
    VAN = "van"


class Vehicle(BaseModel, Base):
    """
    A vehicle registered to a transport company.

    Attributes:
        id: Auto-incrementing primary key
        registration_plate: Unique plate number
        vehicle_type: One of VehicleType values
        colour: Paint colour (optional)
        transport_company_id: Owner (required)
    """

    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    registration_plate: Mapped[str] = mapped_column(
        String(20),
        unique=True,
        nullable=False
    )

    vehicle_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=VehicleType.TRUCK.value
    )

    colour: Mapped[Optional[str]] = mapped_column(
        String(30),
        nullable=True
    )

    transport_company_id: Mapped[int] = mapped_column(
        ForeignKey("transport_companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    transport_company: Mapped["TransportCompany"] = relationship(
        back_populates="vehicles"
    )

    transport_services: Mapped[List["TransportService"]] = relationship(
        back_populates="vehicle"
    )

    def __repr__(self) -> str:
        return (
            f"<Vehicle(id={self.id}, plate='{self.registration_plate}', "
            f"type='{self.vehicle_type}')>"
        )
