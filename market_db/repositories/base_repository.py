# market_db/repositories/base_repository.py
"""
Generic single-table repository

Subclasses bind a table and a row model and add their own operations. Every
public operation acquires its own connection from the pool and releases it on
return; nothing here holds a connection between calls.
"""
import logging
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from sqlalchemy import Table, delete, func, insert, select, update
from sqlalchemy.engine import Connection

from ..connection import Pool
from ..constants import DEFAULT_PAGE_SIZE, MAX_QUERY_LIMIT
from ..decorators import ensure_found, repository_operation
from ..exceptions import ValidationError
from ..models import RowModel

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=RowModel)


class BaseRepository(Generic[ModelType]):
    """
    CRUD operations over one table, returning ``model`` instances
    """

    resource_name = "Record"

    def __init__(self, pool: Pool, table: Table, model: Type[ModelType]):
        self.pool = pool
        self.table = table
        self.model = model

    # ============= Helpers shared with subclasses =============

    def _to_model(self, row) -> ModelType:
        return self.model.from_row(row)

    def _touch(self, values: Dict[str, Any]) -> Dict[str, Any]:
        """Add an updated_at refresh when the table tracks it"""
        if "updated_at" in self.table.c and "updated_at" not in values:
            return {**values, "updated_at": func.now()}
        return values

    def _insert(self, conn: Connection, values: Dict[str, Any]) -> ModelType:
        row = conn.execute(insert(self.table).values(**values).returning(self.table)).one()
        return self._to_model(row)

    def _select_by_id(self, conn: Connection, record_id: Any, for_update: bool = False):
        stmt = select(self.table).where(self.table.c.id == record_id)
        if for_update:
            stmt = stmt.with_for_update()
        return conn.execute(stmt).one_or_none()

    def _update_by_id(self, conn: Connection, record_id: Any, values: Dict[str, Any]) -> Optional[ModelType]:
        stmt = (
            update(self.table)
            .where(self.table.c.id == record_id)
            .values(**self._touch(values))
            .returning(self.table)
        )
        row = conn.execute(stmt).one_or_none()
        return self._to_model(row) if row is not None else None

    def _decrement_stock(self, item_id: int, quantity: int, stock_column: str) -> ModelType:
        """
        Read, validate and decrement a stock column inside one transaction.

        The row is locked for the read so that concurrent purchases see each
        other's decrements. Raises NotFoundError or ValidationError after the
        transaction has been rolled back.
        """
        def work(conn: Connection) -> ModelType:
            return self._decrement_stock_on(conn, item_id, quantity, stock_column)

        return self.pool.run_in_transaction(work)

    def _decrement_stock_on(
        self, conn: Connection, item_id: int, quantity: int, stock_column: str
    ) -> ModelType:
        if quantity <= 0:
            raise ValidationError("Quantity must be positive", field="quantity")

        row = ensure_found(self._select_by_id(conn, item_id, for_update=True), self.resource_name, item_id)
        available = row._mapping[stock_column]
        if quantity > available:
            raise ValidationError(
                f"Insufficient stock for {self.resource_name} {item_id}: "
                f"requested {quantity}, available {available}",
                field="quantity",
            )

        column = self.table.c[stock_column]
        stmt = (
            update(self.table)
            .where(self.table.c.id == item_id, column >= quantity)
            .values(**self._touch({stock_column: column - quantity}))
            .returning(self.table)
        )
        updated = conn.execute(stmt).one()
        logger.debug(
            f"Decremented {self.table.name}.{stock_column} for id={item_id} "
            f"from {available} to {updated._mapping[stock_column]}"
        )
        return self._to_model(updated)

    def _create(self, values: Dict[str, Any]) -> ModelType:
        return self.pool.run_in_transaction(lambda conn: self._insert(conn, values))

    def _get(self, record_id: Any) -> ModelType:
        with self.pool.get_connection() as conn:
            row = ensure_found(self._select_by_id(conn, record_id), self.resource_name, record_id)
            return self._to_model(row)

    def _get_one_where(self, *criteria) -> ModelType:
        with self.pool.get_connection() as conn:
            row = conn.execute(select(self.table).where(*criteria)).one_or_none()
            return self._to_model(ensure_found(row, self.resource_name))

    def _get_all(self, *criteria, limit: Optional[int] = None, offset: int = 0) -> List[ModelType]:
        limit = DEFAULT_PAGE_SIZE if limit is None else limit
        if not 0 < limit <= MAX_QUERY_LIMIT:
            raise ValidationError(f"Limit must be between 1 and {MAX_QUERY_LIMIT}", field="limit")
        if offset < 0:
            raise ValidationError("Offset cannot be negative", field="offset")

        stmt = select(self.table).order_by(self.table.c.id).limit(limit).offset(offset)
        if criteria:
            stmt = stmt.where(*criteria)
        with self.pool.get_connection() as conn:
            return [self._to_model(row) for row in conn.execute(stmt)]

    def _update(self, record_id: Any, values: Dict[str, Any]) -> ModelType:
        if not values:
            raise ValidationError("No fields to update")

        def work(conn: Connection) -> ModelType:
            return ensure_found(self._update_by_id(conn, record_id, values), self.resource_name, record_id)

        return self.pool.run_in_transaction(work)

    def _delete(self, record_id: Any) -> None:
        def work(conn: Connection) -> None:
            result = conn.execute(delete(self.table).where(self.table.c.id == record_id))
            if result.rowcount == 0:
                ensure_found(None, self.resource_name, record_id)

        self.pool.run_in_transaction(work)

    # ============= Generic operations =============

    @repository_operation("create")
    def create(self, values: Dict[str, Any]) -> ModelType:
        """Insert one row and return it with its generated columns"""
        return self._create(values)

    @repository_operation("get_by_id")
    def get_by_id(self, record_id: Any) -> ModelType:
        """Fetch one row by primary key, NotFoundError when absent"""
        return self._get(record_id)

    @repository_operation("get_all")
    def get_all(self, limit: Optional[int] = None, offset: int = 0) -> List[ModelType]:
        return self._get_all(limit=limit, offset=offset)

    @repository_operation("update")
    def update(self, record_id: Any, values: Dict[str, Any]) -> ModelType:
        """Update columns of one row, NotFoundError when absent"""
        return self._update(record_id, values)

    @repository_operation("delete")
    def delete(self, record_id: Any) -> None:
        """Delete one row, NotFoundError when absent"""
        self._delete(record_id)

    @repository_operation("count")
    def count(self) -> int:
        with self.pool.get_connection() as conn:
            return conn.execute(select(func.count()).select_from(self.table)).scalar_one()
