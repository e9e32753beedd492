"""
Tests for order placement
"""
from decimal import Decimal

import pytest

from market_db import NewOrderItem, Rollback
from market_db.exceptions import DatabaseError, NotFoundError, ValidationError

from helpers import make_new_order


class TestPlaceOrder:
    """Test the order placement transaction"""

    def test_places_order_and_reserves_stock(self, orders, equipment_repo, alice, forklift, hoist):
        # Arrange
        items = [
            NewOrderItem(equipment_id=forklift.id, quantity=2, warranty_selected=True),
            NewOrderItem(equipment_id=hoist.id, quantity=4),
        ]

        # Act
        order = orders.place_order(make_new_order(alice.id), items)

        # Assert
        assert order.status == "pending"
        assert order.total_amount == Decimal("12500.00") * 2 + Decimal("899.50") * 4

        lines = orders.get_order_items(order.id)
        assert [(line.equipment_id, line.quantity) for line in lines] == [(forklift.id, 2), (hoist.id, 4)]
        assert lines[0].price_at_time == Decimal("12500.00")
        assert lines[0].warranty_selected is True

        assert equipment_repo.get_equipment(forklift.id).stock_level == 1
        assert equipment_repo.get_equipment(hoist.id).stock_level == 6

    def test_short_line_rolls_back_whole_order(self, orders, equipment_repo, alice, forklift, hoist):
        # Arrange - first line fits, second does not
        items = [
            NewOrderItem(equipment_id=hoist.id, quantity=5),
            NewOrderItem(equipment_id=forklift.id, quantity=4),
        ]

        # Act
        with pytest.raises(ValidationError) as exc_info:
            orders.place_order(make_new_order(alice.id), items)

        # Assert
        assert "Insufficient stock" in exc_info.value.message
        assert orders.get_orders_for_user(alice.id) == []
        assert orders.items.count() == 0
        assert equipment_repo.get_equipment(hoist.id).stock_level == 10
        assert equipment_repo.get_equipment(forklift.id).stock_level == 3

    def test_unknown_equipment(self, orders, alice, hoist):
        items = [NewOrderItem(equipment_id=hoist.id, quantity=1), NewOrderItem(equipment_id=999999, quantity=1)]

        with pytest.raises(NotFoundError):
            orders.place_order(make_new_order(alice.id), items)

        assert orders.count() == 0

    def test_unknown_user(self, orders, hoist):
        with pytest.raises(DatabaseError):
            orders.place_order(make_new_order(999999), [NewOrderItem(equipment_id=hoist.id, quantity=1)])

        assert orders.count() == 0

    def test_empty_order(self, orders, alice):
        with pytest.raises(ValidationError) as exc_info:
            orders.place_order(make_new_order(alice.id), [])

        assert exc_info.value.field == "items"

    def test_inside_caller_transaction(self, db, orders, alice, hoist):
        # Arrange - place an order inside a transaction the caller then aborts
        new_order = make_new_order(alice.id)
        items = [NewOrderItem(equipment_id=hoist.id, quantity=1)]

        def work(conn):
            order = orders._place_on(conn, new_order, items)
            raise Rollback("preview only", value=order.total_amount)

        # Act
        total = db.run_in_transaction(work)

        # Assert
        assert total == Decimal("899.50")
        assert orders.count() == 0


class TestOrderQueries:
    """Test order lookups and maintenance"""

    @pytest.fixture
    def placed(self, orders, alice, hoist):
        return orders.place_order(make_new_order(alice.id), [NewOrderItem(equipment_id=hoist.id, quantity=2)])

    def test_get_order(self, orders, placed):
        assert orders.get_order(placed.id) == placed

    def test_orders_for_user(self, orders, alice, placed):
        assert [o.id for o in orders.get_orders_for_user(alice.id)] == [placed.id]
        assert orders.get_orders_for_user(999999) == []

    def test_update_status(self, orders, placed):
        shipped = orders.update_order_status(placed.id, "shipped")

        assert shipped.status == "shipped"
        assert shipped.total_amount == placed.total_amount

    def test_update_missing_order(self, orders):
        with pytest.raises(NotFoundError):
            orders.update_order_status(999999, "shipped")

    def test_delete_order(self, orders, placed):
        orders.delete_order(placed.id)

        assert orders.get_order_items(placed.id) == []
        with pytest.raises(NotFoundError):
            orders.get_order(placed.id)
        with pytest.raises(NotFoundError):
            orders.delete_order(placed.id)
