"""Stored quotes."""
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, OwnerMixin

QUOTE_STATUSES = ("pending", "confirmed", "denied")


class Calculation(IdMixin, OwnerMixin, Base):
    """A priced quote together with the inputs needed to reopen it."""

    __tablename__ = "calculations"

    date: Mapped[datetime] = mapped_column(DateTime)
    client_name: Mapped[str] = mapped_column(String, default="")
    project_name: Mapped[str] = mapped_column(String, default="")
    total_cost: Mapped[float] = mapped_column(Float, default=0.0)
    suggested_price: Mapped[float] = mapped_column(Float, default=0.0)
    status: Mapped[str] = mapped_column(String, default="pending")
    # not a foreign key: the name stays frozen when the employee is deleted
    employee_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    employee_name: Mapped[str | None] = mapped_column(String, nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict)

    __table_args__ = (
        Index("ix_calc_owner_date", "owner_id", "date"),
    )
