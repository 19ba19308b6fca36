# app/modules/inventory/codec.py
"""
Codificación de descuentos en códigos QR escaneables

El token es la propia URL de escaneo:
    {base_url}?binNo=<bin>&sku=<sku>&value=<cantidad>

No hay firma ni expiración: quien tenga el código puede aplicarlo.
"""
import base64
import io
import re
from typing import Any, Mapping, Optional
from urllib.parse import urlencode, quote, urlsplit, parse_qs

import qrcode

from app.core.exceptions import QrRenderError, MissingFieldError, InvalidAmountError
from .schemas import MutationRequest, ScannableArtifact

BIN_PARAM = "binNo"
SKU_PARAM = "sku"
VALUE_PARAM = "value"

_DIGITS = re.compile(r"\d+")


class QrCodeRenderer:
    """Renderiza texto como PNG (data-URL base64) usando qrcode + Pillow"""

    def __init__(self, box_size: int = 10, border: int = 4):
        self.box_size = box_size
        self.border = border

    def render(self, text: str) -> str:
        qr = qrcode.QRCode(box_size=self.box_size, border=self.border)
        qr.add_data(text)
        qr.make(fit=True)

        buffer = io.BytesIO()
        qr.make_image().save(buffer)
        encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
        return f"data:image/png;base64,{encoded}"


class MutationCodec:
    """Transforma MutationRequest <-> URL de escaneo. Sin estado."""

    def __init__(self, renderer: Optional[QrCodeRenderer] = None):
        self.renderer = renderer or QrCodeRenderer()

    # ==================== ENCODE ====================

    def build_scan_url(self, req: MutationRequest, base_url: str) -> str:
        query = urlencode(
            {BIN_PARAM: req.bin_id, SKU_PARAM: req.sku, VALUE_PARAM: req.amount},
            quote_via=quote,
            safe=""
        )
        separator = "&" if "?" in base_url else "?"
        return f"{base_url}{separator}{query}"

    def encode(self, req: MutationRequest, base_url: str) -> ScannableArtifact:
        url = self.build_scan_url(req, base_url)
        try:
            data_url = self.renderer.render(url)
        except Exception as e:
            raise QrRenderError(f"QR code rendering failed: {e}") from e
        return ScannableArtifact(url=url, data_url=data_url)

    # ==================== DECODE ====================

    def decode(self, params: Mapping[str, Any]) -> MutationRequest:
        """
        Reconstruir el descuento desde los parámetros del escaneo.

        Acepta tanto el body JSON (value numérico) como query params (todo texto).
        """
        bin_id = self._required(params, BIN_PARAM)
        sku = self._required(params, SKU_PARAM)
        raw_value = params.get(VALUE_PARAM)
        if raw_value is None or (isinstance(raw_value, str) and not raw_value.strip()):
            raise MissingFieldError(VALUE_PARAM)

        return MutationRequest(bin_id=bin_id, sku=sku, amount=self._parse_amount(raw_value))

    def decode_url(self, url: str) -> MutationRequest:
        query = parse_qs(urlsplit(url).query, keep_blank_values=True)
        return self.decode({key: values[0] for key, values in query.items()})

    @staticmethod
    def _required(params: Mapping[str, Any], name: str) -> str:
        value = params.get(name)
        if value is None:
            raise MissingFieldError(name)
        value = str(value)
        if not value.strip():
            raise MissingFieldError(name)
        return value

    @staticmethod
    def _parse_amount(value: Any) -> int:
        # bool es subclase de int: True no es una cantidad
        if isinstance(value, bool):
            raise InvalidAmountError(value)

        if isinstance(value, int):
            amount = value
        elif isinstance(value, float) and value.is_integer():
            amount = int(value)
        elif isinstance(value, str) and _DIGITS.fullmatch(value.strip()):
            amount = int(value.strip())
        else:
            raise InvalidAmountError(value)

        if amount <= 0:
            raise InvalidAmountError(value)
        return amount
