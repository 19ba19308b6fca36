# app/modules/inventory/__init__.py
"""
Módulo Inventory - Inventario por bin y descuentos con QR

Funcionalidades:

- Listar SKUs del inventario
- Buscar bins con stock mayor a un valor
- Generar QR para retirar una cantidad de un bin/SKU
- Procesar el escaneo del QR y descontar del inventario
- Consultar el inventario completo

Arquitectura:
- router.py: Endpoints FastAPI
- service.py: Lógica de negocio
- repository.py: Acceso al CSV (lock + escritura atómica)
- codec.py: URL de escaneo <-> descuento, render de QR
- schemas.py: Modelos Pydantic y dataclasses del dominio
"""

from .router import router as inventory_router
from .service import InventoryService
from .repository import InventoryRepository
from .codec import MutationCodec, QrCodeRenderer

__all__ = [
    "inventory_router",
    "InventoryService",
    "InventoryRepository",
    "MutationCodec",
    "QrCodeRenderer"
]
