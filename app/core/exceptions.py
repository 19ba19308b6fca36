# app/core/exceptions.py
"""
Errores del inventario y su traducción a respuestas HTTP.

Todas las respuestas de error tienen la forma {"error": "<mensaje>"}.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class InventoryError(Exception):
    """Error base del inventario"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Error de inventario"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ==================== ALMACENAMIENTO ====================

class StorageError(InventoryError):
    default_message = "Inventory storage error"

class StorageUnreadableError(StorageError):
    default_message = "Inventory file is missing or unreadable"

class StorageMalformedError(StorageError):
    default_message = "Inventory file is malformed"

class StorageUnwritableError(StorageError):
    default_message = "Inventory file could not be written"


# ==================== NO ENCONTRADO ====================

class NotFoundError(InventoryError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"

class BinNotFoundError(NotFoundError):
    default_message = "Bin not found"

class SkuNotFoundError(NotFoundError):
    default_message = "SKU not found"


# ==================== VALIDACIÓN ====================

class ValidationError(InventoryError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"

class InvalidRequestError(ValidationError):
    pass


# ==================== CODIFICACIÓN QR ====================

class EncodeError(InventoryError):
    default_message = "Could not generate scan code"

class QrRenderError(EncodeError):
    default_message = "QR code rendering failed"

class DecodeError(InventoryError):
    default_message = "Could not read scan request"

class MissingFieldError(DecodeError):

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing field: {field}")

class InvalidAmountError(DecodeError):

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid value: {value!r} is not a positive integer")


# ==================== HANDLERS ====================

def register_exception_handlers(app: FastAPI):
    """Registrar los handlers que convierten excepciones en {"error": ...}"""

    @app.exception_handler(InventoryError)
    async def inventory_error_handler(request: Request, exc: InventoryError):
        if exc.status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
                "reason": err.get("msg", "invalid")
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request body", "details": details}
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"❌ Error no controlado en {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": str(exc) or exc.__class__.__name__}
        )
