# tests/test_mutation_codec.py
import base64

import pytest

from app.core.exceptions import (
    EncodeError, QrRenderError, MissingFieldError, InvalidAmountError
)
from app.modules.inventory.codec import MutationCodec, QrCodeRenderer
from app.modules.inventory.schemas import MutationRequest

BASE_URL = "http://192.168.1.20:3000/scan.html"


class FakeRenderer:
    def render(self, text):
        return f"data:text/plain,{text}"


class BrokenRenderer:
    def render(self, text):
        raise ValueError("data too big")


@pytest.fixture
def codec():
    return MutationCodec(FakeRenderer())


# ==================== ENCODE ====================

def test_scan_url_format(codec):
    url = codec.build_scan_url(MutationRequest("A1", "WIDGET", 3), BASE_URL)
    assert url == f"{BASE_URL}?binNo=A1&sku=WIDGET&value=3"


def test_scan_url_percent_encodes_bin_and_sku(codec):
    url = codec.build_scan_url(MutationRequest("A 1/2", "SKU&X+1", 3), BASE_URL)
    assert url == f"{BASE_URL}?binNo=A%201%2F2&sku=SKU%26X%2B1&value=3"


def test_scan_url_appends_to_existing_query(codec):
    url = codec.build_scan_url(MutationRequest("A1", "W", 1), "http://host/scan?src=qr")
    assert url == "http://host/scan?src=qr&binNo=A1&sku=W&value=1"


def test_encode_returns_url_and_rendered_image(codec):
    artifact = codec.encode(MutationRequest("A1", "WIDGET", 3), BASE_URL)
    assert artifact.url == f"{BASE_URL}?binNo=A1&sku=WIDGET&value=3"
    assert artifact.data_url == f"data:text/plain,{artifact.url}"


def test_encode_render_failure():
    codec = MutationCodec(BrokenRenderer())
    with pytest.raises(QrRenderError) as exc:
        codec.encode(MutationRequest("A1", "WIDGET", 3), BASE_URL)
    assert isinstance(exc.value, EncodeError)
    assert "data too big" in exc.value.message


def test_qr_renderer_produces_png_data_url():
    data_url = QrCodeRenderer(box_size=2, border=1).render(f"{BASE_URL}?binNo=A1&sku=W&value=1")
    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    assert base64.b64decode(data_url[len(prefix):]).startswith(b"\x89PNG")


@pytest.mark.parametrize("req", [
    MutationRequest("A1", "WIDGET", 1),
    MutationRequest("Rack 4 / Shelf B", "SKU-ñ&100", 250),
    MutationRequest(" A1 ", "W=1?", 7),
])
def test_decode_reverses_encode(codec, req):
    assert codec.decode_url(codec.encode(req, BASE_URL).url) == req


# ==================== DECODE ====================

def test_decode_json_body(codec):
    assert codec.decode({"binNo": "A1", "sku": "WIDGET", "value": 15}) == MutationRequest("A1", "WIDGET", 15)


def test_decode_text_amount(codec):
    assert codec.decode({"binNo": "A1", "sku": "WIDGET", "value": " 15 "}).amount == 15


def test_decode_integral_float_amount(codec):
    assert codec.decode({"binNo": "A1", "sku": "WIDGET", "value": 15.0}).amount == 15


def test_decode_numeric_bin_becomes_text(codec):
    assert codec.decode({"binNo": 101, "sku": "WIDGET", "value": 1}).bin_id == "101"


@pytest.mark.parametrize("missing", ["binNo", "sku", "value"])
def test_decode_missing_field(codec, missing):
    params = {"binNo": "A1", "sku": "WIDGET", "value": "2"}
    del params[missing]
    with pytest.raises(MissingFieldError) as exc:
        codec.decode(params)
    assert exc.value.field == missing


@pytest.mark.parametrize("missing", ["binNo", "sku", "value"])
def test_decode_blank_field_is_missing(codec, missing):
    params = {"binNo": "A1", "sku": "WIDGET", "value": "2", missing: "  "}
    with pytest.raises(MissingFieldError):
        codec.decode(params)


@pytest.mark.parametrize("value", ["0", "-1", "abc", "1.5", "1e3", 0, -2, 1.5, True, [1]])
def test_decode_invalid_amount(codec, value):
    with pytest.raises(InvalidAmountError):
        codec.decode({"binNo": "A1", "sku": "WIDGET", "value": value})
