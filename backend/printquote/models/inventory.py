"""Filament catalogue and the concrete rolls in stock."""
from sqlalchemy import Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IdMixin, OwnerMixin


class Material(IdMixin, OwnerMixin, Base):
    """Catalogue entry, e.g. "PETG" at a reference price per kilogram."""

    __tablename__ = "materials"

    name: Mapped[str] = mapped_column(String)
    cost_per_kg: Mapped[float] = mapped_column(Float, default=0.0)


class StockItem(IdMixin, OwnerMixin, Base):
    """A roll of a material from one brand in one colour."""

    __tablename__ = "stock_items"

    material_id: Mapped[str] = mapped_column(String(36))
    brand: Mapped[str] = mapped_column(String, default="")
    color: Mapped[str] = mapped_column(String, default="")
    unit_cost: Mapped[float] = mapped_column(Float, default=0.0)
    # may go negative after a save, only reported as depleted
    remaining_grams: Mapped[float] = mapped_column(Float, default=0.0)

    __table_args__ = (
        Index("ix_stock_owner_material", "owner_id", "material_id"),
    )
