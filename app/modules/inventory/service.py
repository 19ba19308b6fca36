# app/modules/inventory/service.py
import logging
from typing import Any, Dict, List, Mapping, Optional

from starlette.concurrency import run_in_threadpool

from app.core.exceptions import InvalidRequestError, SkuNotFoundError, InventoryError
from .codec import MutationCodec
from .repository import InventoryRepository
from .schemas import MutationRequest, MutationResult, ScannableArtifact

logger = logging.getLogger(__name__)


class InventoryService:
    """
    Servicio de inventario por bin: consultas y descuentos vía QR

    Flujo de un descuento:
        request_mutation -> QR -> (escaneo) -> apply_mutation -> CSV actualizado
    Cualquier fallo es terminal; no hay reintentos.
    """

    def __init__(
        self,
        repository: InventoryRepository,
        codec: Optional[MutationCodec] = None,
        strict_sku_search: bool = False
    ):
        self.repository = repository
        self.codec = codec or MutationCodec()
        self.strict_sku_search = strict_sku_search

    # ==================== CONSULTAS ====================

    async def list_skus(self) -> List[str]:
        table = await run_in_threadpool(self.repository.load)
        return self.repository.columns(table)

    async def search_bins(self, sku: str, threshold: int) -> List[Dict[str, str]]:
        """Bins con más de `threshold` unidades del SKU"""
        table = await run_in_threadpool(self.repository.load)

        if self.strict_sku_search and sku not in table.columns[1:]:
            raise SkuNotFoundError(f"SKU not found: {sku}")

        return self.repository.search(table, sku, threshold)

    async def list_inventory(self) -> List[Dict[str, str]]:
        return await run_in_threadpool(self.repository.read_all)

    # ==================== DESCUENTOS ====================

    async def request_mutation(
        self,
        bin_id: str,
        sku: str,
        amount: int,
        base_url: str
    ) -> ScannableArtifact:
        """
        Generar el QR de un descuento.

        Bin y SKU no se verifican aquí: la existencia se valida al aplicar.
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise InvalidRequestError(f"Value must be a positive integer: {amount!r}")
        if not bin_id or not bin_id.strip():
            raise InvalidRequestError("binNo is required")
        if not sku or not sku.strip():
            raise InvalidRequestError("sku is required")

        req = MutationRequest(bin_id=bin_id, sku=sku, amount=amount)
        artifact = self.codec.encode(req, base_url)
        logger.info(f"🔳 QR generado: bin={bin_id} sku={sku} value={amount}")
        return artifact

    async def apply_mutation(self, params: Mapping[str, Any]) -> MutationResult:
        """Decodificar el escaneo y descontar del inventario"""
        try:
            req = self.codec.decode(params)
            previous, updated = await run_in_threadpool(
                self.repository.decrement, req.bin_id, req.sku, req.amount
            )
        except InventoryError as e:
            logger.warning(f"⚠️ Escaneo rechazado ({e.__class__.__name__}): {e.message}")
            raise

        logger.info(
            f"✅ Escaneo aplicado: bin={req.bin_id} sku={req.sku} "
            f"{previous} -> {updated} (restado {req.amount})"
        )
        return MutationResult(
            bin_id=req.bin_id,
            sku=req.sku,
            previous_value=previous,
            new_value=updated,
            subtracted=req.amount
        )
