"""
Employee models: drivers and their qualifications.

A driver belongs to one company and may hold any number of
qualifications (e.g. "Heavy Duty License"); the link lives in the
driver_qualifications association table.
"""

from decimal import Decimal
from typing import List, Optional, TYPE_CHECKING

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tms.models.base import Base, BaseModel

if TYPE_CHECKING:
    from tms.models.company import TransportCompany
    from tms.models.transport_service import TransportService


NAME_LENGTH = 50
DECIMAL_PRECISION = 18
DECIMAL_SCALE = 2


# ========================================
# Association Table
# ========================================

driver_qualifications = Table(
    "driver_qualifications",
    Base.metadata,
    Column("driver_id", ForeignKey("drivers.id", ondelete="CASCADE"), primary_key=True),
    Column("qualification_id", ForeignKey("qualifications.id", ondelete="CASCADE"), primary_key=True),
)


class Qualification(BaseModel, Base):
    """
    A licence or certification a driver can hold.

    Attributes:
        id: Auto-incrementing primary key
        name: Unique qualification name
        description: What the qualification allows
        drivers: Drivers holding this qualification (lazy)
    """

    __tablename__ = "qualifications"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    name: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False
    )

    description: Mapped[str] = mapped_column(
        String(255),
        nullable=False
    )

    drivers: Mapped[List["Driver"]] = relationship(
        secondary=driver_qualifications,
        back_populates="qualifications"
    )

    def __repr__(self) -> str:
        return f"<Qualification(id={self.id}, name='{self.name}')>"


class Driver(BaseModel, Base):
    """
    A driver employed by a transport company.

    Attributes:
        id: Auto-incrementing primary key
        first_name: Given name
        family_name: Family name
        salary: Monthly salary (optional, non-negative)
        transport_company_id: Employer (required)
        transport_company: Employer (lazy)
        qualifications: Qualifications held (lazy, many-to-many)
        transport_services: Services driven (lazy)

    Example:
        driver = Driver(first_name="John", family_name="Doe",
                        transport_company_id=company.id)
        driver.qualifications.append(heavy_duty)
    """

    __tablename__ = "drivers"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    first_name: Mapped[str] = mapped_column(
        String(NAME_LENGTH),
        nullable=False
    )

    family_name: Mapped[str] = mapped_column(
        String(NAME_LENGTH),
        nullable=False,
        index=True
    )

    salary: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(DECIMAL_PRECISION, DECIMAL_SCALE),
        nullable=True
    )

    transport_company_id: Mapped[int] = mapped_column(
        ForeignKey("transport_companies.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    transport_company: Mapped["TransportCompany"] = relationship(
        back_populates="drivers"
    )

    qualifications: Mapped[List[Qualification]] = relationship(
        secondary=driver_qualifications,
        back_populates="drivers"
    )

    transport_services: Mapped[List["TransportService"]] = relationship(
        back_populates="driver"
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.family_name}"

    def __repr__(self) -> str:
        return f"<Driver(id={self.id}, name='{self.full_name}')>"
