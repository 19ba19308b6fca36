from functools import lru_cache

from .settings import settings

@lru_cache(maxsize=None)
def _repository_for(csv_path: str, cache_table: bool):
    # Un repositorio (y un lock) por archivo en todo el proceso
    from app.modules.inventory.repository import InventoryRepository
    return InventoryRepository(csv_path, cache_table=cache_table)

# Storage dependency
def get_inventory_repository():
    """Inventory repository dependency for FastAPI"""
    return _repository_for(settings.inventory_csv_path, settings.cache_table)
