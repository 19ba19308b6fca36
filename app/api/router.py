# app/api/router.py
from fastapi import APIRouter

from app.config.settings import settings
from app.modules.inventory import inventory_router

# Router principal de la API
api_router = APIRouter(prefix=settings.api_prefix)

# ==================== MÓDULOS ====================

api_router.include_router(inventory_router)

# ==================== ENDPOINTS RAÍZ ====================

@api_router.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": settings.version,
        "storage": "csv",
        "modules": {
            "inventory": {
                "status": "active",
                "endpoints": [
                    "GET /skus",
                    "POST /search-bins",
                    "GET /inventory",
                    "POST /generate-qr",
                    "POST /process-scan"
                ]
            }
        }
    }
