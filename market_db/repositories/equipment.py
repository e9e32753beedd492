# market_db/repositories/equipment.py
"""
Equipment and equipment category operations
"""
from typing import Any, Dict, List, Optional

from ..connection import Pool
from ..decorators import repository_operation
from ..models import Equipment, EquipmentCategory, NewEquipment, NewEquipmentCategory
from ..performance_monitor import MetricType
from ..schema import equipment, equipment_categories
from .base_repository import BaseRepository


class EquipmentCategoryRepository(BaseRepository[EquipmentCategory]):
    resource_name = "Equipment category"

    def __init__(self, pool: Pool):
        super().__init__(pool, equipment_categories, EquipmentCategory)


class EquipmentRepository(BaseRepository[Equipment]):
    """Equipment table access; categories go through ``self.categories``"""

    resource_name = "Equipment"

    def __init__(self, pool: Pool):
        super().__init__(pool, equipment, Equipment)
        self.categories = EquipmentCategoryRepository(pool)

    def create_category(self, new_category: NewEquipmentCategory) -> EquipmentCategory:
        return self.categories.create(new_category.model_dump())

    def get_category(self, category_id: int) -> EquipmentCategory:
        return self.categories.get_by_id(category_id)

    @repository_operation()
    def create_equipment(self, new_equipment: NewEquipment) -> Equipment:
        return self._create(new_equipment.model_dump())

    @repository_operation()
    def get_equipment(self, equipment_id: int) -> Equipment:
        return self._get(equipment_id)

    @repository_operation()
    def get_all_equipment(
        self,
        category_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> List[Equipment]:
        criteria = [equipment.c.category_id == category_id] if category_id is not None else []
        return self._get_all(*criteria, limit=limit, offset=offset)

    @repository_operation()
    def update_equipment(self, equipment_id: int, values: Dict[str, Any]) -> Equipment:
        return self._update(equipment_id, values)

    @repository_operation()
    def delete_equipment(self, equipment_id: int) -> None:
        self._delete(equipment_id)

    @repository_operation(metric_type=MetricType.BUSINESS)
    def adjust_stock_level(self, equipment_id: int, quantity: int) -> Equipment:
        """Guarded stock decrement, same contract as the asset purchase"""
        return self._decrement_stock(equipment_id, quantity, "stock_level")
