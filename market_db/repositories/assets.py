# market_db/repositories/assets.py
"""
Asset data operations, including the buy-asset stock transaction
"""
import logging
from typing import Any, Dict, List, Optional

from ..connection import Pool
from ..decorators import repository_operation
from ..models import Asset, NewAsset
from ..performance_monitor import MetricType
from ..schema import assets
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AssetRepository(BaseRepository[Asset]):
    """Assets table access"""

    resource_name = "Asset"

    def __init__(self, pool: Pool):
        super().__init__(pool, assets, Asset)

    @repository_operation()
    def create_asset(self, new_asset: NewAsset) -> Asset:
        return self._create(new_asset.model_dump())

    @repository_operation()
    def get_asset(self, asset_id: int) -> Asset:
        return self._get(asset_id)

    @repository_operation()
    def get_all_assets(self, limit: Optional[int] = None, offset: int = 0) -> List[Asset]:
        return self._get_all(limit=limit, offset=offset)

    @repository_operation()
    def update_asset(self, asset_id: int, values: Dict[str, Any]) -> Asset:
        return self._update(asset_id, values)

    @repository_operation()
    def delete_asset(self, asset_id: int) -> None:
        self._delete(asset_id)

    @repository_operation(metric_type=MetricType.BUSINESS)
    def adjust_stock_on_purchase(self, item_id: int, quantity: int) -> Asset:
        """
        Decrement an asset's stock for a purchase.

        The read, the stock check and the write share one transaction. When
        ``quantity`` exceeds the available stock nothing is written and a
        ValidationError is raised.

        Returns:
            The asset row as committed
        """
        asset = self._decrement_stock(item_id, quantity, "stock")
        logger.info(f"Purchased {quantity} of asset {item_id}, {asset.stock} left")
        return asset
