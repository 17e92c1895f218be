"""Per-owner pricing parameters."""
from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, OwnerMixin

DEFAULT_PROFIT_MARGIN_PERCENT = 100.0
DEFAULT_LABOR_COST_PER_HOUR = 5.0
DEFAULT_ENERGY_COST_PER_KWH = 0.9
DEFAULT_PRINTER_PURCHASE_PRICE = 1200.0
DEFAULT_PRINTER_LIFESPAN_HOURS = 6000.0
DEFAULT_PRINTER_POWER_WATTS = 150.0


class ShopSettings(OwnerMixin, Base):
    """Exactly one row per owner; the primary key is the owner id."""

    __tablename__ = "settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    logo_url: Mapped[str | None] = mapped_column(String, nullable=True)
    profit_margin_percent: Mapped[float] = mapped_column(Float, default=DEFAULT_PROFIT_MARGIN_PERCENT)
    labor_cost_per_hour: Mapped[float] = mapped_column(Float, default=DEFAULT_LABOR_COST_PER_HOUR)
    energy_cost_per_kwh: Mapped[float] = mapped_column(Float, default=DEFAULT_ENERGY_COST_PER_KWH)
    printer_purchase_price: Mapped[float] = mapped_column(Float, default=DEFAULT_PRINTER_PURCHASE_PRICE)
    printer_lifespan_hours: Mapped[float] = mapped_column(Float, default=DEFAULT_PRINTER_LIFESPAN_HOURS)
    printer_power_watts: Mapped[float] = mapped_column(Float, default=DEFAULT_PRINTER_POWER_WATTS)
    selected_printer_id: Mapped[str | None] = mapped_column(String, nullable=True)
    admin_contact_phone: Mapped[str | None] = mapped_column(String, nullable=True)
