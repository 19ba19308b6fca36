# app/modules/inventory/schemas.py
from dataclasses import dataclass, field
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Dict, Optional

# ==================== TABLA ====================

@dataclass
class InventoryTable:
    """
    Tabla de inventario cargada desde el CSV.

    columns[0] es la columna identidad (p.ej. "Bin No."); el resto son SKUs.
    Cada fila tiene exactamente las mismas columnas que la tabla.
    """
    columns: List[str]
    rows: List[Dict[str, str]] = field(default_factory=list)

    @property
    def identity_column(self) -> str:
        return self.columns[0]

    def find_row(self, bin_id: str) -> Optional[Dict[str, str]]:
        for row in self.rows:
            if row[self.identity_column] == bin_id:
                return row
        return None

# ==================== MUTACIONES ====================

@dataclass(frozen=True)
class MutationRequest:
    """Descuento pendiente: restar `amount` del SKU en el bin"""
    bin_id: str
    sku: str
    amount: int

@dataclass(frozen=True)
class ScannableArtifact:
    """URL de escaneo (el token) y su código QR como data-URL"""
    url: str
    data_url: str

@dataclass(frozen=True)
class MutationResult:
    bin_id: str
    sku: str
    previous_value: int
    new_value: int
    subtracted: int

# ==================== REQUEST / RESPONSE ====================

class SearchBinsRequest(BaseModel):
    """Buscar bins con cantidad mayor al valor indicado"""
    sku: str = Field(..., description="SKU (columna) a consultar")
    value: int = Field(..., description="Umbral: se devuelven bins con cantidad > value")

class GenerateQrRequest(BaseModel):
    """Generar el QR de un descuento"""
    model_config = ConfigDict(populate_by_name=True)

    bin_no: str = Field(..., alias="binNo", description="Bin del que se retira")
    sku: str = Field(..., description="SKU a retirar")
    value: int = Field(..., description="Cantidad a retirar (> 0)")

    @field_validator("bin_no", "sku", mode="before")
    @classmethod
    def numbers_as_text(cls, v):
        # Bins numéricos (p.ej. 101) llegan como número en el JSON
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

class GenerateQrResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    qr_code: str = Field(..., alias="qrCode", description="Imagen PNG como data-URL")
    scan_url: str = Field(..., alias="scanUrl", description="URL codificada en el QR")

class ProcessScanResponse(BaseModel):
    """Resultado de aplicar un escaneo"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    bin_no: str = Field(..., alias="binNo")
    sku: str
    previous_value: int = Field(..., alias="previousValue")
    new_value: int = Field(..., alias="newValue")
    subtracted: int

    @classmethod
    def from_result(cls, result: MutationResult) -> "ProcessScanResponse":
        return cls(
            bin_no=result.bin_id,
            sku=result.sku,
            previous_value=result.previous_value,
            new_value=result.new_value,
            subtracted=result.subtracted
        )
