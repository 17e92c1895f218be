"""Pydantic schemas used across the backend API.

Wire names are camelCase (``ownerId``, ``taxId``); Python attributes stay
snake_case. Unknown request fields are ignored, which is how client-supplied
``id``/``ownerId`` values get stripped before persistence.
"""
from datetime import datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

QuoteStatus = Literal["pending", "confirmed", "denied"]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


class OkResponse(ApiModel):
    ok: bool = True


# --------------------------------------------------------------------------
# Auth & users
# --------------------------------------------------------------------------


class LoginRequest(ApiModel):
    """Credentials supplied during login."""

    username: str
    password: str


class SessionUser(ApiModel):
    """The identity attached to the current session."""

    id: str
    username: str
    is_admin: bool = False
    is_master_admin: bool = False


class LoginResponse(SessionUser):
    must_change_password: bool = False


class UsernameRequest(ApiModel):
    username: str | None = None


class CheckAdminResponse(ApiModel):
    is_admin: bool


class PasswordHintResponse(ApiModel):
    hint: str | None = None


class AdminContactResponse(ApiModel):
    whatsapp: str | None = None


class ResetPasswordRequest(ApiModel):
    username: str | None = None
    national_id: str | None = None
    birthdate: str | None = None


class TempPasswordResponse(ApiModel):
    temp_password: str


class ForceChangePasswordRequest(ApiModel):
    new_password: str | None = None


class SetupStatus(ApiModel):
    needs_setup: bool


class UserCreate(ApiModel):
    """Payload for master-admin user creation and first-run setup."""

    username: str = ""
    password: str = ""
    password_hint: str | None = None
    national_id: str | None = None
    birthdate: str | None = None


class UserRead(ApiModel):
    """Public representation of a user."""

    id: str
    username: str
    is_admin: bool = False
    must_change_password: bool = False


class PasswordChange(ApiModel):
    current_password: str | None = None
    new_password: str | None = None
    password_hint: str | None = None


# --------------------------------------------------------------------------
# Clients
# --------------------------------------------------------------------------


class ClientBase(ApiModel):
    tax_id: str = ""
    phone: str = ""
    email: str | None = ""
    postal_code: str = ""
    street: str = ""
    number: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""


class ClientCreate(ClientBase):
    name: str = Field(min_length=1)


class ClientUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    tax_id: str | None = None
    phone: str | None = None
    email: str | None = None
    postal_code: str | None = None
    street: str | None = None
    number: str | None = None
    complement: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None


class ClientRead(ClientBase):
    id: str
    owner_id: str
    name: str


# --------------------------------------------------------------------------
# Materials & stock
# --------------------------------------------------------------------------


class MaterialCreate(ApiModel):
    name: str = Field(min_length=1)
    cost_per_kg: float = Field(default=0.0, ge=0)


class MaterialUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    cost_per_kg: float | None = Field(default=None, ge=0)


class MaterialRead(MaterialCreate):
    id: str
    owner_id: str


class StockItemCreate(ApiModel):
    material_id: str
    brand: str = ""
    color: str = ""
    unit_cost: float = Field(default=0.0, ge=0)
    remaining_grams: float = 0.0


class StockItemUpdate(ApiModel):
    material_id: str | None = None
    brand: str | None = None
    color: str | None = None
    unit_cost: float | None = Field(default=None, ge=0)
    remaining_grams: float | None = None


class StockItemRead(StockItemCreate):
    id: str
    owner_id: str


class StockAlert(ApiModel):
    """Raised after a save when a roll runs low or out."""

    stock_item_id: str
    material_name: str
    brand: str
    color: str
    remaining_grams: float
    kind: Literal["low", "depleted"]


# --------------------------------------------------------------------------
# Employees
# --------------------------------------------------------------------------


class EmployeeBase(ApiModel):
    """Shared properties for employee operations."""

    commission_rate_percent: float = Field(default=0.0, ge=0)
    phone: str = ""
    tax_id: str = ""
    email: str | None = ""
    postal_code: str = ""
    street: str = ""
    number: str = ""
    complement: str = ""
    neighborhood: str = ""
    city: str = ""
    state: str = ""


class EmployeeCreate(EmployeeBase):
    name: str = Field(min_length=1)


class EmployeeUpdate(ApiModel):
    name: str | None = Field(default=None, min_length=1)
    commission_rate_percent: float | None = Field(default=None, ge=0)
    phone: str | None = None
    tax_id: str | None = None
    email: str | None = None
    postal_code: str | None = None
    street: str | None = None
    number: str | None = None
    complement: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None


class EmployeeRead(EmployeeBase):
    """Employee representation returned by the API."""

    id: str
    owner_id: str
    name: str
    linked_user_id: str | None = None


class EmployeeCreated(EmployeeRead):
    """Returned once on creation; the credentials are never retrievable again."""

    generated_username: str
    generated_password: str


# --------------------------------------------------------------------------
# Quotes
# --------------------------------------------------------------------------


class LineItemIn(ApiModel):
    description: str = ""
    stock_item_id: str | None = None
    grams: float = Field(default=0.0, ge=0)
    hours: float = Field(default=0.0, ge=0)
    minutes: float = Field(default=0.0, ge=0)
    qty: int = Field(default=1, ge=1)


class CalculationCreate(ApiModel):
    client_name: str = ""
    project_name: str = Field(min_length=1)
    status: QuoteStatus = "pending"
    employee_id: str | None = None
    items: list[LineItemIn] = Field(default_factory=list)
    profit_margin_percent: float | None = None
    details: dict[str, Any] = Field(default_factory=dict)


class CalculationUpdate(ApiModel):
    client_name: str | None = None
    project_name: str | None = Field(default=None, min_length=1)
    status: QuoteStatus | None = None
    employee_id: str | None = None
    items: list[LineItemIn] | None = None
    profit_margin_percent: float | None = None
    details: dict[str, Any] | None = None


class StatusUpdate(ApiModel):
    status: QuoteStatus


class CalculationRead(ApiModel):
    id: str
    owner_id: str
    date: datetime
    client_name: str
    project_name: str
    total_cost: float
    suggested_price: float
    status: QuoteStatus
    employee_id: str | None = None
    employee_name: str | None = None
    details: dict[str, Any] | None = None


class CalculationSaved(CalculationRead):
    stock_alerts: list[StockAlert] = Field(default_factory=list)


class StockConsumption(ApiModel):
    stock_alerts: list[StockAlert] = Field(default_factory=list)


class PreviewRequest(ApiModel):
    items: list[LineItemIn] = Field(default_factory=list)
    profit_margin_percent: float | None = None


class LineResultRead(ApiModel):
    description: str
    stock_item_id: str | None = None
    qty: int
    hours_total: float
    material_unit_cost: float
    energy_unit_cost: float
    depreciation_unit_cost: float
    labor_unit_cost: float
    unit_cost: float
    unit_price: float
    line_total: float


class QuoteBreakdownRead(ApiModel):
    lines: list[LineResultRead]
    profit_margin_percent: float
    energy_per_hour: float
    depreciation_per_hour: float
    material_cost: float
    energy_cost: float
    depreciation_cost: float
    labor_cost: float
    total_cost: float
    suggested_price: float
    profit: float
    qty_total: int
    unit_average_price: float


# --------------------------------------------------------------------------
# Settings
# --------------------------------------------------------------------------


class SettingsUpdate(ApiModel):
    logo_url: str | None = None
    profit_margin_percent: float | None = None
    labor_cost_per_hour: float | None = None
    energy_cost_per_kwh: float | None = None
    printer_purchase_price: float | None = None
    printer_lifespan_hours: float | None = None
    printer_power_watts: float | None = None
    selected_printer_id: str | None = None
    admin_contact_phone: str | None = None


class SettingsRead(ApiModel):
    id: str
    owner_id: str
    logo_url: str | None = None
    profit_margin_percent: float
    labor_cost_per_hour: float
    energy_cost_per_kwh: float
    printer_purchase_price: float
    printer_lifespan_hours: float
    printer_power_watts: float
    selected_printer_id: str | None = None
    admin_contact_phone: str | None = None


# --------------------------------------------------------------------------
# Commissions
# --------------------------------------------------------------------------


class CommissionGroupRead(ApiModel):
    employee_id: str | None = None
    seller_name: str
    quote_count: int
    gross_revenue: float
    rate: float
    commission: float
    quote_ids: list[str] = Field(default_factory=list)


class CommissionReportRead(ApiModel):
    year: int
    month: int
    groups: list[CommissionGroupRead]
    quote_count: int
    gross_revenue: float
    commission: float


# --------------------------------------------------------------------------
# Backup
# --------------------------------------------------------------------------


class MaterialImport(MaterialCreate):
    # the old id is only used to re-point imported stock items
    id: str | None = None


class CalculationImport(ApiModel):
    date: datetime | None = None
    client_name: str = ""
    project_name: str = ""
    total_cost: float = 0.0
    suggested_price: float = 0.0
    status: QuoteStatus = "pending"
    employee_id: str | None = None
    employee_name: str | None = None
    details: dict[str, Any] | None = None


class BackupImport(ApiModel):
    clients: list[ClientCreate] | None = None
    materials: list[MaterialImport] | None = Field(
        default=None, validation_alias=AliasChoices("materials", "inventory")
    )
    stock_items: list[StockItemCreate] | None = Field(
        default=None, validation_alias=AliasChoices("stockItems", "stock_items")
    )
    calculations: list[CalculationImport] | None = Field(
        default=None, validation_alias=AliasChoices("calculations", "history")
    )
    settings: SettingsUpdate | None = None


class BackupExport(ApiModel):
    clients: list[ClientRead]
    materials: list[MaterialRead]
    stock_items: list[StockItemRead]
    calculations: list[CalculationRead]
    settings: SettingsRead


# --------------------------------------------------------------------------
# Lookups
# --------------------------------------------------------------------------


class PostalAddress(ApiModel):
    logradouro: str = ""
    bairro: str = ""
    localidade: str = ""
    uf: str = ""
    cep: str = ""


class PrinterPresetRead(ApiModel):
    id: str
    name: str
    market_price: float
    power_watts: float
