# market_db/models.py
"""
Row and input models exchanged with the HTTP layer
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class RowModel(BaseModel):
    """Base for models built from database rows"""
    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_row(cls, row) -> "RowModel":
        return cls.model_validate(dict(row._mapping))


# ============= Users =============

class NewUser(BaseModel):
    username: str
    email: str
    password_hash: str
    company_name: Optional[str] = None
    business_type: Optional[str] = None
    contact_number: Optional[str] = None


class User(RowModel):
    id: int
    username: str
    email: str
    password_hash: str
    company_name: Optional[str] = None
    business_type: Optional[str] = None
    contact_number: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============= Assets =============

class NewAsset(BaseModel):
    name: str
    price: Decimal
    stock: int = 0
    image_url: str = ""


class Asset(RowModel):
    id: int
    name: str
    price: Decimal
    stock: int
    image_url: str
    created_at: datetime
    updated_at: datetime


# ============= Equipment =============

class NewEquipmentCategory(BaseModel):
    name: str
    description: Optional[str] = None
    parent_category_id: Optional[int] = None


class EquipmentCategory(RowModel):
    id: int
    name: str
    description: Optional[str] = None
    parent_category_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class NewEquipment(BaseModel):
    category_id: int
    name: str
    manufacturer: str
    model_number: str
    condition: str
    price: Decimal
    stock_level: int = 0
    description: Optional[str] = None
    year_manufactured: Optional[int] = None
    specifications: Optional[Dict[str, Any]] = None
    weight_kg: Optional[Decimal] = None
    dimensions_cm: Optional[str] = None
    power_requirements: Optional[str] = None
    certification_info: Optional[str] = None
    warranty_info: Optional[str] = None


class Equipment(RowModel):
    id: int
    category_id: int
    name: str
    manufacturer: str
    model_number: str
    condition: str
    price: Decimal
    stock_level: int
    description: Optional[str] = None
    year_manufactured: Optional[int] = None
    specifications: Optional[Dict[str, Any]] = None
    weight_kg: Optional[Decimal] = None
    dimensions_cm: Optional[str] = None
    power_requirements: Optional[str] = None
    certification_info: Optional[str] = None
    warranty_info: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============= Orders =============

class NewOrder(BaseModel):
    user_id: int
    shipping_address: str
    shipping_method: str
    status: str = "pending"
    tracking_number: Optional[str] = None
    estimated_delivery_date: Optional[date] = None
    special_instructions: Optional[str] = None


class Order(RowModel):
    id: int
    user_id: int
    status: str
    total_amount: Decimal
    shipping_address: str
    shipping_method: str
    tracking_number: Optional[str] = None
    estimated_delivery_date: Optional[date] = None
    special_instructions: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class NewOrderItem(BaseModel):
    equipment_id: int
    quantity: int
    warranty_selected: Optional[bool] = None
    special_requirements: Optional[str] = None


class OrderItem(RowModel):
    id: int
    order_id: int
    equipment_id: int
    quantity: int
    price_at_time: Decimal
    warranty_selected: Optional[bool] = None
    special_requirements: Optional[str] = None
