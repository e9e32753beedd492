"""
Test configuration and fixtures for market_db tests

Runs against DATABASE_URL_TEST when it is set, otherwise against a SQLite
file in a pytest temp directory.
"""
import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from market_db import (
    AssetRepository, EquipmentRepository, NewAsset, NewEquipmentCategory, OrderRepository,
    UserRepository, cleanup_database, establish_pool, init_logger, load_environment, metadata
)
from market_db.constants import TEST_DATABASE_URL_ENV

from helpers import make_new_equipment, make_new_user

load_environment(".env.test")

LOG_DIR = Path(__file__).parent / "logs"


@pytest.fixture(scope="session", autouse=True)
def test_logger():
    """Write package logs for the whole run to tests/logs"""
    return init_logger(log_dir=LOG_DIR, testing=True)


@pytest.fixture(scope="session")
def database_url(tmp_path_factory) -> str:
    url = os.environ.get(TEST_DATABASE_URL_ENV)
    if url:
        return url
    return f"sqlite:///{tmp_path_factory.mktemp('db') / 'market_test.db'}"


@pytest.fixture(scope="session")
def pool(database_url):
    """Shared pool with the schema created"""
    pool = establish_pool(database_url, pool_size=10, max_overflow=5, pool_timeout=30)
    metadata.create_all(pool.engine)

    yield pool

    # Cleanup
    metadata.drop_all(pool.engine)
    pool.dispose()


@pytest.fixture
def db(pool):
    """Pool with every table emptied and fresh statistics"""
    cleanup_database(pool)
    pool.stats.reset()
    return pool


# Repository fixtures
@pytest.fixture
def users(db) -> UserRepository:
    return UserRepository(db)


@pytest.fixture
def assets(db) -> AssetRepository:
    return AssetRepository(db)


@pytest.fixture
def equipment_repo(db) -> EquipmentRepository:
    return EquipmentRepository(db)


@pytest.fixture
def orders(db) -> OrderRepository:
    return OrderRepository(db)


# Test data fixtures
@pytest.fixture
def alice(users):
    return users.create_user(make_new_user("alice"))


@pytest.fixture
def stocked_asset(assets):
    return assets.create_asset(NewAsset(name="Pallet jack", price=Decimal("349.90"), stock=100))


@pytest.fixture
def category(equipment_repo):
    return equipment_repo.create_category(
        NewEquipmentCategory(name="Lifting", description="Cranes, hoists and jacks")
    )


@pytest.fixture
def forklift(equipment_repo, category):
    return equipment_repo.create_equipment(
        make_new_equipment(category.id, "FL-100", price=Decimal("12500.00"), stock_level=3)
    )


@pytest.fixture
def hoist(equipment_repo, category):
    return equipment_repo.create_equipment(
        make_new_equipment(category.id, "HS-20", price=Decimal("899.50"), stock_level=10)
    )
