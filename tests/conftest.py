# tests/conftest.py
from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from app.config.storage import get_inventory_repository
from app.main import app
from app.modules.inventory.repository import InventoryRepository

DEFAULT_CSV = (
    "Bin No.,WIDGET,GADGET\n"
    "A1,10,3\n"
    "A2,0,\n"
    "B1,7,12\n"
)


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str], Path]:
    """Escribe el CSV de prueba y retorna su ruta"""

    def _write(content: str) -> Path:
        path = tmp_path / "inventory_data.csv"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def csv_path(write_csv) -> Path:
    return write_csv(DEFAULT_CSV)


@pytest.fixture
def repository(csv_path: Path) -> InventoryRepository:
    return InventoryRepository(str(csv_path))


@pytest.fixture
def client(repository: InventoryRepository):
    app.dependency_overrides[get_inventory_repository] = lambda: repository
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
