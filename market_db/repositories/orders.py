# market_db/repositories/orders.py
"""
Order placement and order lookups

An order and its items are written together: the order row, one item row per
line and the equipment stock decrements either all commit or none do.
"""
import logging
from decimal import Decimal
from typing import List, Optional, Sequence

from sqlalchemy import delete, select
from sqlalchemy.engine import Connection

from ..connection import Pool
from ..decorators import ensure_found, repository_operation
from ..exceptions import ValidationError
from ..models import NewOrder, NewOrderItem, Order, OrderItem
from ..performance_monitor import MetricType
from ..schema import order_items, orders
from .base_repository import BaseRepository
from .equipment import EquipmentRepository

logger = logging.getLogger(__name__)


class OrderItemRepository(BaseRepository[OrderItem]):
    resource_name = "Order item"

    def __init__(self, pool: Pool):
        super().__init__(pool, order_items, OrderItem)


class OrderRepository(BaseRepository[Order]):
    """Orders table access"""

    resource_name = "Order"

    def __init__(self, pool: Pool):
        super().__init__(pool, orders, Order)
        self.items = OrderItemRepository(pool)
        self.equipment = EquipmentRepository(pool)

    def _place_on(self, conn: Connection, new_order: NewOrder, items: Sequence[NewOrderItem]) -> Order:
        order = self._insert(conn, {**new_order.model_dump(), "total_amount": Decimal("0")})

        total = Decimal("0")
        for item in items:
            # locks the equipment row until the order commits
            equipment = self.equipment._decrement_stock_on(
                conn, item.equipment_id, item.quantity, "stock_level"
            )
            self.items._insert(conn, {
                **item.model_dump(),
                "order_id": order.id,
                "price_at_time": equipment.price,
            })
            total += equipment.price * item.quantity

        return self._update_by_id(conn, order.id, {"total_amount": total})

    @repository_operation(metric_type=MetricType.BUSINESS)
    def place_order(self, new_order: NewOrder, items: Sequence[NewOrderItem]) -> Order:
        """
        Create an order with its items and reserve the ordered stock.

        Args:
            new_order: Order header fields
            items: At least one line; each decrements its equipment's stock

        Returns:
            The committed order with ``total_amount`` filled in

        Raises:
            ValidationError: no items, or a line exceeds available stock
            NotFoundError: a line references unknown equipment
        """
        if not items:
            raise ValidationError("An order needs at least one item", field="items")

        order = self.pool.run_in_transaction(lambda conn: self._place_on(conn, new_order, items))
        logger.info(f"Placed order id={order.id} with {len(items)} item(s), total {order.total_amount}")
        return order

    @repository_operation()
    def get_order(self, order_id: int) -> Order:
        return self._get(order_id)

    @repository_operation()
    def get_orders_for_user(self, user_id: int, limit: Optional[int] = None, offset: int = 0) -> List[Order]:
        return self._get_all(orders.c.user_id == user_id, limit=limit, offset=offset)

    @repository_operation()
    def get_order_items(self, order_id: int) -> List[OrderItem]:
        stmt = select(order_items).where(order_items.c.order_id == order_id).order_by(order_items.c.id)
        with self.pool.get_connection() as conn:
            return [OrderItem.from_row(row) for row in conn.execute(stmt)]

    @repository_operation()
    def update_order_status(self, order_id: int, status: str) -> Order:
        return self._update(order_id, {"status": status})

    @repository_operation()
    def delete_order(self, order_id: int) -> None:
        """Delete an order and its items"""
        def work(conn: Connection) -> None:
            conn.execute(delete(order_items).where(order_items.c.order_id == order_id))
            result = conn.execute(delete(orders).where(orders.c.id == order_id))
            ensure_found(result.rowcount or None, self.resource_name, order_id)

        self.pool.run_in_transaction(work)
