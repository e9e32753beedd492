"""
Helper functions for tests
"""
from decimal import Decimal
from types import SimpleNamespace
from typing import Optional

from market_db import NewEquipment, NewOrder, NewUser


def make_new_user(username: str, email: Optional[str] = None) -> NewUser:
    return NewUser(
        username=username,
        email=email or f"{username}@example.com",
        password_hash="pbkdf2$not-a-real-hash",
        company_name=f"{username.title()} Industrial",
        business_type="manufacturer",
    )


def make_new_equipment(
    category_id: int,
    model_number: str,
    price: Decimal = Decimal("100.00"),
    stock_level: int = 1,
) -> NewEquipment:
    return NewEquipment(
        category_id=category_id,
        name=f"Unit {model_number}",
        manufacturer="Acme Heavy",
        model_number=model_number,
        condition="new",
        price=price,
        stock_level=stock_level,
        specifications={"voltage": 400, "phases": 3},
    )


def make_new_order(user_id: int) -> NewOrder:
    return NewOrder(
        user_id=user_id,
        shipping_address="12 Dock Road, Rotterdam",
        shipping_method="freight",
    )


class FakeDriverError(Exception):
    """Stand-in for a DBAPI exception carrying PostgreSQL diagnostics"""

    def __init__(self, message: str, pgcode: Optional[str] = None,
                 detail: Optional[str] = None, constraint: Optional[str] = None):
        super().__init__(message)
        self.pgcode = pgcode
        self.diag = SimpleNamespace(message_detail=detail, constraint_name=constraint)
