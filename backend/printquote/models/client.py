"""Customer contact records."""
from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, OwnerMixin


class Client(IdMixin, OwnerMixin, Base):
    __tablename__ = "clients"

    name: Mapped[str] = mapped_column(String)
    tax_id: Mapped[str] = mapped_column(String, default="")
    phone: Mapped[str] = mapped_column(String, default="")
    email: Mapped[str] = mapped_column(String, default="")
    postal_code: Mapped[str] = mapped_column(String, default="")
    street: Mapped[str] = mapped_column(String, default="")
    number: Mapped[str] = mapped_column(String, default="")
    complement: Mapped[str] = mapped_column(String, default="")
    neighborhood: Mapped[str] = mapped_column(String, default="")
    city: Mapped[str] = mapped_column(String, default="")
    state: Mapped[str] = mapped_column(String, default="")

    __table_args__ = (
        Index("ix_clients_owner_tax_id", "owner_id", "tax_id"),
    )
