"""
Tests for the transactional executor
"""
import pytest
from sqlalchemy import func, insert, select

from market_db import Rollback, TransactionManager, run_in_transaction
from market_db.exceptions import ValidationError
from market_db.schema import assets


def add_asset(conn, name: str, stock: int = 1):
    return conn.execute(
        insert(assets).values(name=name, price=10, stock=stock).returning(assets.c.id)
    ).scalar_one()


def asset_count(pool) -> int:
    with pool.get_connection() as conn:
        return conn.execute(select(func.count()).select_from(assets)).scalar_one()


class TestRunInTransaction:
    """Test commit, rollback and savepoint behaviour"""

    def test_commits_and_returns_result(self, db):
        # Act
        asset_id = db.run_in_transaction(lambda conn: add_asset(conn, "Crate"))

        # Assert
        assert isinstance(asset_id, int)
        assert asset_count(db) == 1

    def test_rollback_signal_returns_value(self, db):
        # Arrange
        def work(conn):
            add_asset(conn, "Discarded")
            raise Rollback("dry run", value="nothing written")

        # Act
        result = db.run_in_transaction(work)

        # Assert
        assert result == "nothing written"
        assert asset_count(db) == 0

    def test_rollback_signal_without_value(self, db):
        def work(conn):
            add_asset(conn, "Discarded")
            raise Rollback()

        assert db.run_in_transaction(work) is None
        assert asset_count(db) == 0

    def test_service_error_propagates_unchanged(self, db):
        error = ValidationError("Insufficient stock", field="quantity")

        def work(conn):
            add_asset(conn, "Discarded")
            raise error

        with pytest.raises(ValidationError) as exc_info:
            db.run_in_transaction(work)

        assert exc_info.value is error
        assert asset_count(db) == 0

    def test_unexpected_error_rolls_back(self, db):
        def work(conn):
            add_asset(conn, "Discarded")
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError):
            db.run_in_transaction(work)

        assert asset_count(db) == 0

    def test_nested_call_uses_savepoint(self, db):
        # Arrange - inner work aborts, outer work keeps its row
        def inner(conn):
            add_asset(conn, "Inner")
            raise Rollback("inner only", value="inner aborted")

        def outer(conn):
            add_asset(conn, "Outer")
            return run_in_transaction(conn, inner)

        # Act
        result = db.run_in_transaction(outer)

        # Assert
        assert result == "inner aborted"
        with db.get_connection() as conn:
            names = conn.execute(select(assets.c.name)).scalars().all()
        assert names == ["Outer"]

    def test_nested_error_reaching_outer_discards_everything(self, db):
        def inner(conn):
            add_asset(conn, "Inner")
            raise RuntimeError("inner failure")

        def outer(conn):
            add_asset(conn, "Outer")
            run_in_transaction(conn, inner)

        with pytest.raises(RuntimeError):
            db.run_in_transaction(outer)

        assert asset_count(db) == 0

    def test_isolation_level(self, db):
        asset_id = db.run_in_transaction(lambda conn: add_asset(conn, "Isolated"), isolation_level="serializable")

        assert asset_id is not None
        assert asset_count(db) == 1

    def test_invalid_isolation_level(self, db):
        with pytest.raises(ValueError) as exc_info:
            db.run_in_transaction(lambda conn: None, isolation_level="CHAOS")

        assert "Invalid isolation level" in str(exc_info.value)


class TestTransactionManager:
    """Test the context manager form"""

    def test_commits_on_exit(self, db):
        with TransactionManager(db).begin() as conn:
            add_asset(conn, "First")
            add_asset(conn, "Second")

        assert asset_count(db) == 2

    def test_rollback_signal_is_swallowed(self, db):
        with db.transaction() as conn:
            add_asset(conn, "Discarded")
            raise Rollback("changed my mind")

        assert asset_count(db) == 0

    def test_error_rolls_back_and_propagates(self, db):
        with pytest.raises(KeyError):
            with db.transaction() as conn:
                add_asset(conn, "Discarded")
                raise KeyError("missing")

        assert asset_count(db) == 0
