from pydantic import Field
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # App Info
    app_name: str = "BinScan Inventory API"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"

    # Inventory storage
    inventory_csv_path: str = Field(
        default="inventory_data.csv",
        description="Archivo CSV con el inventario por bin (fila) y SKU (columna)"
    )
    cache_table: bool = Field(
        default=True,
        description="Mantener la tabla en memoria mientras el archivo no cambie"
    )
    strict_sku_search: bool = Field(
        default=False,
        description="Rechazar búsquedas sobre SKUs que no existen en la tabla"
    )

    # API
    api_prefix: str = "/api"
    allowed_origins: List[str] = ["*"]

    # QR / Scan
    scan_base_url: Optional[str] = Field(
        default=None,
        description="URL pública de la página de escaneo (por defecto se deriva del request)"
    )
    scan_page: str = "scan.html"
    qr_box_size: int = 10
    qr_border: int = 4

    # Server
    host: str = "0.0.0.0"
    port: int = 3000

    class Config:
        env_file = ".env"
        case_sensitive = False

settings = Settings()
