# market_db/schema.py
"""
Table definitions for the marketplace schema

These mirror the migrations owned by the service. The data-access layer only
reads and writes them; it never creates or alters tables at runtime.
"""
from sqlalchemy import (
    Boolean, Column, Date, DateTime, ForeignKey, Integer, JSON, MetaData, Numeric,
    String, Table, Text, func
)

metadata = MetaData()

users = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(50), nullable=False, unique=True),
    Column("email", String(100), nullable=False, unique=True),
    Column("password_hash", String(255), nullable=False),
    Column("company_name", String(255)),
    Column("business_type", String(50)),
    Column("contact_number", String(50)),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
)

assets = Table(
    "assets",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False),
    Column("price", Numeric(12, 2), nullable=False),
    Column("stock", Integer, nullable=False, server_default="0"),
    Column("image_url", String(512), nullable=False, server_default=""),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
)

equipment_categories = Table(
    "equipment_categories",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, unique=True),
    Column("description", Text),
    Column("parent_category_id", Integer, ForeignKey("equipment_categories.id")),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
)

equipment = Table(
    "equipment",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("category_id", Integer, ForeignKey("equipment_categories.id"), nullable=False),
    Column("name", String(255), nullable=False),
    Column("description", Text),
    Column("manufacturer", String(255), nullable=False),
    Column("model_number", String(100), nullable=False, unique=True),
    Column("year_manufactured", Integer),
    Column("condition", String(50), nullable=False),
    Column("price", Numeric(12, 2), nullable=False),
    Column("stock_level", Integer, nullable=False, server_default="0"),
    Column("specifications", JSON),
    Column("weight_kg", Numeric(10, 2)),
    Column("dimensions_cm", String(100)),
    Column("power_requirements", String(100)),
    Column("certification_info", Text),
    Column("warranty_info", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
)

orders = Table(
    "orders",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False),
    Column("status", String(50), nullable=False, server_default="pending"),
    Column("total_amount", Numeric(14, 2), nullable=False),
    Column("shipping_address", Text, nullable=False),
    Column("shipping_method", String(100), nullable=False),
    Column("tracking_number", String(100)),
    Column("estimated_delivery_date", Date),
    Column("special_instructions", Text),
    Column("created_at", DateTime, nullable=False, server_default=func.now()),
    Column("updated_at", DateTime, nullable=False, server_default=func.now()),
)

order_items = Table(
    "order_items",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("order_id", Integer, ForeignKey("orders.id"), nullable=False),
    Column("equipment_id", Integer, ForeignKey("equipment.id"), nullable=False),
    Column("quantity", Integer, nullable=False),
    Column("price_at_time", Numeric(12, 2), nullable=False),
    Column("warranty_selected", Boolean),
    Column("special_requirements", Text),
)

# Children before parents
DELETE_ORDER = (order_items, orders, equipment, equipment_categories, assets, users)
