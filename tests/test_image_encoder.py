import base64
import io

import pytest
from PIL import Image

from expense_tracker.components.image_encoder import build_receipt_url, encode_receipt, resolve_media_type
from expense_tracker.models import RawReceipt


def _png_bytes(size=(40, 20)):
    buf = io.BytesIO()
    Image.new("RGB", size, color=(200, 10, 10)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.mark.parametrize("declared, expected", [
    ("image/png", "image/png"),
    ("image/gif", "image/gif"),
    ("image/webp", "image/webp"),
    ("image/jpeg", "image/jpeg"),
    ("image/heic", "image/jpeg"),
    ("application/pdf", "image/jpeg"),
    ("IMAGE/PNG", "image/jpeg"),
    ("", "image/jpeg"),
    (None, "image/jpeg"),
])
def test_resolve_media_type(declared, expected):
    assert resolve_media_type(declared) == expected


def test_encode_receipt_png():
    content = _png_bytes()
    payload = encode_receipt(RawReceipt(file_name="r.png", content=content, content_type="image/png"))

    assert payload.media_type == "image/png"
    assert base64.b64decode(payload.data) == content
    assert payload.data_url.startswith("data:image/png;base64,")


def test_encode_receipt_unsupported_type_is_tagged_jpeg():
    """HEIC is not rejected: it is sent tagged as JPEG."""
    payload = encode_receipt(RawReceipt(file_name="r.heic", content=b"heic-bytes", content_type="image/heic"))

    assert payload.media_type == "image/jpeg"
    assert payload.decode() == b"heic-bytes"


def test_build_receipt_url_downscales_preview():
    raw = RawReceipt(file_name="big.png", content=_png_bytes((400, 200)), content_type="image/png")

    url = build_receipt_url(raw, max_size=100)

    assert url.startswith("data:image/jpeg;base64,")
    preview = Image.open(io.BytesIO(base64.b64decode(url.split(",", 1)[1])))
    assert preview.size == (100, 50)


def test_build_receipt_url_keeps_undecodable_bytes():
    raw = RawReceipt(file_name="r.heic", content=b"not-an-image", content_type="image/heic")

    url = build_receipt_url(raw, max_size=100)

    assert url == "data:image/jpeg;base64," + base64.b64encode(b"not-an-image").decode("ascii")
