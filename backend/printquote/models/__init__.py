"""SQLAlchemy models exposed by the backend."""
from .base import Base
from .calculation import QUOTE_STATUSES, Calculation
from .client import Client
from .employee import Employee
from .inventory import Material, StockItem
from .shop_settings import ShopSettings
from .user import AuthSession, User

# every table keyed by owner_id, in cascade-delete order
OWNED_MODELS = (Client, Material, StockItem, Employee, Calculation, ShopSettings)

__all__ = [
    "AuthSession",
    "Base",
    "Calculation",
    "Client",
    "Employee",
    "Material",
    "OWNED_MODELS",
    "QUOTE_STATUSES",
    "ShopSettings",
    "StockItem",
    "User",
]
