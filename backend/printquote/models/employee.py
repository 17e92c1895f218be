"""Seller records and their optional login."""
from sqlalchemy import Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, OwnerMixin


class Employee(IdMixin, OwnerMixin, Base):
    """A seller earning commission on confirmed quotes."""

    __tablename__ = "employees"

    name: Mapped[str] = mapped_column(String, index=True)
    commission_rate_percent: Mapped[float] = mapped_column(Float, default=0.0)
    phone: Mapped[str] = mapped_column(String, default="")
    tax_id: Mapped[str] = mapped_column(String, default="")
    email: Mapped[str] = mapped_column(String, default="")
    postal_code: Mapped[str] = mapped_column(String, default="")
    street: Mapped[str] = mapped_column(String, default="")
    number: Mapped[str] = mapped_column(String, default="")
    complement: Mapped[str] = mapped_column(String, default="")
    neighborhood: Mapped[str] = mapped_column(String, default="")
    city: Mapped[str] = mapped_column(String, default="")
    state: Mapped[str] = mapped_column(String, default="")
    # reverse lookup user -> employee goes through this index
    linked_user_id: Mapped[str | None] = mapped_column(String(36), nullable=True, unique=True)

    __table_args__ = (
        Index("ix_emp_owner_name", "owner_id", "name"),
    )
