# market_db/repositories/__init__.py
"""
Repositories for the marketplace tables
"""
from .base_repository import BaseRepository
from .users import UserRepository
from .assets import AssetRepository
from .equipment import EquipmentCategoryRepository, EquipmentRepository
from .orders import OrderItemRepository, OrderRepository
from .maintenance import cleanup_database

__all__ = [
    "BaseRepository",
    "UserRepository",
    "AssetRepository",
    "EquipmentCategoryRepository",
    "EquipmentRepository",
    "OrderItemRepository",
    "OrderRepository",
    "cleanup_database",
]
