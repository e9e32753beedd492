# market_db/repositories/maintenance.py
"""
Bulk maintenance operations
"""
import logging

from sqlalchemy import delete
from sqlalchemy.engine import Connection

from ..connection import Pool
from ..schema import DELETE_ORDER

logger = logging.getLogger(__name__)


def cleanup_database(pool: Pool) -> None:
    """Delete every row from every table, children before parents, in one transaction"""
    def work(conn: Connection) -> None:
        for table in DELETE_ORDER:
            conn.execute(delete(table))

    pool.run_in_transaction(work)
    logger.debug(f"Cleaned tables: {', '.join(t.name for t in DELETE_ORDER)}")
