"""
Transport service model.

A transport service is one sold job: a company carries cargo or
passengers from a starting to an ending location for a client, at a
price. Company revenue is the sum of its services' prices.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, TYPE_CHECKING

from sqlalchemy import Boolean, Date, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tms.models.base import Base, BaseModel

if TYPE_CHECKING:
    from tms.models.client import Client
    from tms.models.company import TransportCompany
    from tms.models.employee import Driver
    from tms.models.vehicle import Vehicle


ADDRESS_LENGTH = 125


class TransportService(BaseModel, Base):
    """
    A single transport job.

    Attributes:
        id: Auto-incrementing primary key
        transport_company_id: Company performing the service (required)
        client_id: Paying client (optional)
        driver_id: Assigned driver (optional)
        vehicle_id: Assigned vehicle (optional)
        starting_location / ending_location: Route endpoints
        starting_date / ending_date: Service period (ending optional)
        price: Agreed price, non-negative
        is_delivered: Whether the job is complete
        is_paid: Whether the client has paid
        description: Free-text notes (cargo description, passenger count...)
    """

    __tablename__ = "transport_services"

    # ========================================
    # Primary Key
    # ========================================

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    # ========================================
    # Ownership & Assignment
    # ========================================

    transport_company_id: Mapped[int] = mapped_column(
        ForeignKey("transport_companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    client_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("clients.id"),
        nullable=True,
        index=True
    )

    driver_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("drivers.id"),
        nullable=True
    )

    vehicle_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("vehicles.id"),
        nullable=True
    )

    # ========================================
    # Route & Schedule
    # ========================================

    starting_location: Mapped[str] = mapped_column(
        String(ADDRESS_LENGTH),
        nullable=False
    )

    ending_location: Mapped[str] = mapped_column(
        String(ADDRESS_LENGTH),
        nullable=False
    )

    starting_date: Mapped[date] = mapped_column(
        Date,
        nullable=False
    )

    ending_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True
    )

    # ========================================
    # Billing
    # ========================================

    price: Mapped[Decimal] = mapped_column(
        Numeric(18, 2),
        nullable=False,
        default=Decimal("0")
    )

    is_delivered: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False
    )

    is_paid: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=False
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True
    )

    # ========================================
    # Relationships
    # ========================================

    transport_company: Mapped["TransportCompany"] = relationship(
        back_populates="transport_services"
    )

    client: Mapped[Optional["Client"]] = relationship(
        back_populates="transport_services"
    )

    driver: Mapped[Optional["Driver"]] = relationship(
        back_populates="transport_services"
    )

    vehicle: Mapped[Optional["Vehicle"]] = relationship(
        back_populates="transport_services"
    )

    def __repr__(self) -> str:
        return (
            f"<TransportService(id={self.id}, company={self.transport_company_id}, "
            f"price={self.price})>"
        )
