"""Client model: the customer a transport service is sold to."""

from typing import List, TYPE_CHECKING

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tms.models.base import Base, BaseModel

if TYPE_CHECKING:
    from tms.models.transport_service import TransportService


TELEPHONE_LENGTH = 14


class Client(BaseModel, Base):
    """
    Customer of one or more transport services.

    Attributes:
        id: Auto-incrementing primary key
        name: Client name
        telephone: Contact number
        email: Unique contact e-mail
        transport_services: Services bought by this client (lazy)
    """

    __tablename__ = "clients"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True
    )

    name: Mapped[str] = mapped_column(
        String(50),
        nullable=False
    )

    telephone: Mapped[str] = mapped_column(
        String(TELEPHONE_LENGTH),
        nullable=False
    )

    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )

    transport_services: Mapped[List["TransportService"]] = relationship(
        back_populates="client"
    )

    def __repr__(self) -> str:
        return f"<Client(id={self.id}, name='{self.name}', email='{self.email}')>"
