"""initial schema: users, sessions and owner-scoped tables"""
from alembic import op
import sqlalchemy as sa

revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _address_columns() -> list[sa.Column]:
    return [
        sa.Column("postal_code", sa.String(), nullable=False, server_default=""),
        sa.Column("street", sa.String(), nullable=False, server_default=""),
        sa.Column("number", sa.String(), nullable=False, server_default=""),
        sa.Column("complement", sa.String(), nullable=False, server_default=""),
        sa.Column("neighborhood", sa.String(), nullable=False, server_default=""),
        sa.Column("city", sa.String(), nullable=False, server_default=""),
        sa.Column("state", sa.String(), nullable=False, server_default=""),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("password_hash", sa.String(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("must_change_password", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("national_id", sa.String(), nullable=True),
        sa.Column("birthdate", sa.String(), nullable=True),
        sa.Column("password_hint", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "auth_sessions",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_master_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("expires_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_auth_sessions"),
    )
    op.create_index("ix_auth_sessions_user", "auth_sessions", ["user_id"])

    op.create_table(
        "clients",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("tax_id", sa.String(), nullable=False, server_default=""),
        sa.Column("phone", sa.String(), nullable=False, server_default=""),
        sa.Column("email", sa.String(), nullable=False, server_default=""),
        *_address_columns(),
        sa.PrimaryKeyConstraint("id", name="pk_clients"),
    )
    op.create_index("ix_clients_owner_id", "clients", ["owner_id"])
    op.create_index("ix_clients_owner_tax_id", "clients", ["owner_id", "tax_id"])

    op.create_table(
        "materials",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("cost_per_kg", sa.Float(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id", name="pk_materials"),
    )
    op.create_index("ix_materials_owner_id", "materials", ["owner_id"])

    op.create_table(
        "stock_items",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("material_id", sa.String(36), nullable=False),
        sa.Column("brand", sa.String(), nullable=False, server_default=""),
        sa.Column("color", sa.String(), nullable=False, server_default=""),
        sa.Column("unit_cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("remaining_grams", sa.Float(), nullable=False, server_default="0"),
        sa.PrimaryKeyConstraint("id", name="pk_stock_items"),
    )
    op.create_index("ix_stock_items_owner_id", "stock_items", ["owner_id"])
    op.create_index("ix_stock_owner_material", "stock_items", ["owner_id", "material_id"])

    op.create_table(
        "employees",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("commission_rate_percent", sa.Float(), nullable=False, server_default="0"),
        sa.Column("phone", sa.String(), nullable=False, server_default=""),
        sa.Column("tax_id", sa.String(), nullable=False, server_default=""),
        sa.Column("email", sa.String(), nullable=False, server_default=""),
        *_address_columns(),
        sa.Column("linked_user_id", sa.String(36), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_employees"),
        sa.UniqueConstraint("linked_user_id", name="uq_employees_linked_user_id"),
    )
    op.create_index("ix_employees_owner_id", "employees", ["owner_id"])
    op.create_index("ix_employees_name", "employees", ["name"])
    op.create_index("ix_emp_owner_name", "employees", ["owner_id", "name"])

    op.create_table(
        "calculations",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("client_name", sa.String(), nullable=False, server_default=""),
        sa.Column("project_name", sa.String(), nullable=False, server_default=""),
        sa.Column("total_cost", sa.Float(), nullable=False, server_default="0"),
        sa.Column("suggested_price", sa.Float(), nullable=False, server_default="0"),
        sa.Column("status", sa.String(), nullable=False, server_default="pending"),
        sa.Column("employee_id", sa.String(36), nullable=True),
        sa.Column("employee_name", sa.String(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_calculations"),
    )
    op.create_index("ix_calculations_owner_id", "calculations", ["owner_id"])
    op.create_index("ix_calc_owner_date", "calculations", ["owner_id", "date"])

    op.create_table(
        "settings",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("owner_id", sa.String(36), nullable=False),
        sa.Column("logo_url", sa.String(), nullable=True),
        sa.Column("profit_margin_percent", sa.Float(), nullable=False, server_default="100"),
        sa.Column("labor_cost_per_hour", sa.Float(), nullable=False, server_default="5"),
        sa.Column("energy_cost_per_kwh", sa.Float(), nullable=False, server_default="0.9"),
        sa.Column("printer_purchase_price", sa.Float(), nullable=False, server_default="1200"),
        sa.Column("printer_lifespan_hours", sa.Float(), nullable=False, server_default="6000"),
        sa.Column("printer_power_watts", sa.Float(), nullable=False, server_default="150"),
        sa.Column("selected_printer_id", sa.String(), nullable=True),
        sa.Column("admin_contact_phone", sa.String(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_settings"),
    )
    op.create_index("ix_settings_owner_id", "settings", ["owner_id"])


def downgrade() -> None:
    op.drop_index("ix_settings_owner_id", table_name="settings")
    op.drop_table("settings")
    op.drop_index("ix_calc_owner_date", table_name="calculations")
    op.drop_index("ix_calculations_owner_id", table_name="calculations")
    op.drop_table("calculations")
    op.drop_index("ix_emp_owner_name", table_name="employees")
    op.drop_index("ix_employees_name", table_name="employees")
    op.drop_index("ix_employees_owner_id", table_name="employees")
    op.drop_table("employees")
    op.drop_index("ix_stock_owner_material", table_name="stock_items")
    op.drop_index("ix_stock_items_owner_id", table_name="stock_items")
    op.drop_table("stock_items")
    op.drop_index("ix_materials_owner_id", table_name="materials")
    op.drop_table("materials")
    op.drop_index("ix_clients_owner_tax_id", table_name="clients")
    op.drop_index("ix_clients_owner_id", table_name="clients")
    op.drop_table("clients")
    op.drop_index("ix_auth_sessions_user", table_name="auth_sessions")
    op.drop_table("auth_sessions")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
