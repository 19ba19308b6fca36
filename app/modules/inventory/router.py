# app/modules/inventory/router.py
from fastapi import APIRouter, Depends, Body, Request
from typing import Any, Dict, List

from app.config.settings import settings
from app.config.storage import get_inventory_repository
from .codec import MutationCodec, QrCodeRenderer
from .repository import InventoryRepository
from .service import InventoryService
from .schemas import (
    SearchBinsRequest, GenerateQrRequest, GenerateQrResponse, ProcessScanResponse
)

router = APIRouter(tags=["Inventory - Bins"])


def _build_service(repository: InventoryRepository) -> InventoryService:
    codec = MutationCodec(QrCodeRenderer(box_size=settings.qr_box_size, border=settings.qr_border))
    return InventoryService(repository, codec=codec, strict_sku_search=settings.strict_sku_search)


def _scan_base_url(request: Request) -> str:
    if settings.scan_base_url:
        return settings.scan_base_url
    return f"{request.base_url}{settings.scan_page}"

# ==================== CONSULTAS ====================

@router.post("/search-bins", response_model=List[Dict[str, str]])
async def search_bins(
    search: SearchBinsRequest,
    repository: InventoryRepository = Depends(get_inventory_repository)
):
    """
    Bins con cantidad del SKU mayor al valor indicado

    Celdas vacías o no numéricas cuentan como 0.
    """
    service = _build_service(repository)
    return await service.search_bins(search.sku, search.value)

@router.get("/skus", response_model=List[str])
async def list_skus(
    repository: InventoryRepository = Depends(get_inventory_repository)
):
    """Columnas SKU del inventario (vacío si no hay bins)"""
    service = _build_service(repository)
    return await service.list_skus()

@router.get("/inventory", response_model=List[Dict[str, str]])
async def get_inventory(
    repository: InventoryRepository = Depends(get_inventory_repository)
):
    """Estado actual del inventario completo"""
    service = _build_service(repository)
    return await service.list_inventory()

# ==================== QR / ESCANEO ====================

@router.post("/generate-qr", response_model=GenerateQrResponse)
async def generate_qr(
    qr_request: GenerateQrRequest,
    request: Request,
    repository: InventoryRepository = Depends(get_inventory_repository)
):
    """
    Generar el QR de un descuento

    El QR contiene la URL de la página de escaneo con binNo, sku y value.
    """
    service = _build_service(repository)
    artifact = await service.request_mutation(
        bin_id=qr_request.bin_no,
        sku=qr_request.sku,
        amount=qr_request.value,
        base_url=_scan_base_url(request)
    )
    return GenerateQrResponse(qr_code=artifact.data_url, scan_url=artifact.url)

@router.post("/process-scan", response_model=ProcessScanResponse)
async def process_scan(
    payload: Dict[str, Any] = Body(...),
    repository: InventoryRepository = Depends(get_inventory_repository)
):
    """
    Aplicar un escaneo: restar value del SKU en el bin

    - 404 si el bin (o el SKU) no existe
    - Si value supera el stock, la cantidad queda en 0
    """
    service = _build_service(repository)
    result = await service.apply_mutation(payload)
    return ProcessScanResponse.from_result(result)

@router.get("/process-scan", response_model=ProcessScanResponse)
async def process_scan_query(
    request: Request,
    repository: InventoryRepository = Depends(get_inventory_repository)
):
    """Aplicar un escaneo a partir de los query params de la URL escaneada"""
    service = _build_service(repository)
    result = await service.apply_mutation(request.query_params)
    return ProcessScanResponse.from_result(result)
