"""
Transport company model.

The root aggregate of the system: drivers, vehicles and transport
services all belong to exactly one company.
"""

from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tms.models.base import Base, BaseModel

if TYPE_CHECKING:
    from tms.models.employee import Driver
    from tms.models.transport_service import TransportService
    from tms.models.vehicle import Vehicle


NAME_LENGTH = 50
ADDRESS_LENGTH = 125


class TransportCompany(BaseModel, Base):
    """
    A company operating vehicles and drivers.

    Attributes:
        id: Auto-incrementing primary key
        name: Company name
        address: Registered address (optional)
        drivers: Drivers employed by the company (lazy)
        vehicles: Vehicles owned by the company (lazy)
        transport_services: Services the company has sold (lazy)
        created_on: When the row was inserted (from BaseModel)
        modified_on: When the row was last updated (from BaseModel)

    Example:
        company = TransportCompany(name="Fast Transport", address="123 Main St")
        company_repo.create(company)
    """

    __tablename__ = "transport_companies"

    # ========================================
    # Primary Key
    # ========================================

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    # ========================================
    # Company Data
    # ========================================

    name: Mapped[str] = mapped_column(
        String(NAME_LENGTH),
        nullable=False,
        index=True
    )

    address: Mapped[Optional[str]] = mapped_column(
        String(ADDRESS_LENGTH),
        nullable=True
    )

    # ========================================
    # Relationships
    # ========================================

    drivers: Mapped[List["Driver"]] = relationship(
        back_populates="transport_company",
        cascade="all, delete-orphan"
    )

    vehicles: Mapped[List["Vehicle"]] = relationship(
        back_populates="transport_company",
        cascade="all, delete-orphan"
    )

    transport_services: Mapped[List["TransportService"]] = relationship(
        back_populates="transport_company",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        return f"<TransportCompany(id={self.id}, name='{self.name}')>"

    def __str__(self) -> str:
        return self.name
