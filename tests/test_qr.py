import base64
import logging
from io import BytesIO

import pytest
from PIL import Image

from utils.qr import QRRenderError, render_qr_data_uri, safe_render_qr

PNG_SIGNATURE = b'\x89PNG\r\n\x1a\n'


def _png_bytes(data_uri):
    prefix = 'data:image/png;base64,'
    assert data_uri.startswith(prefix)
    return base64.b64decode(data_uri[len(prefix):])


def test_render_returns_png_data_uri_of_requested_width():
    raw = _png_bytes(render_qr_data_uri('https://cafe.example/tracking/1001', width_px=120))
    assert raw.startswith(PNG_SIGNATURE)
    with Image.open(BytesIO(raw)) as img:
        assert img.size == (120, 120)


def test_render_is_deterministic():
    payload = 'ARBDTFVOWSBDQUZFAg8zMTEyMzQ1Njc4OTAwMDM='
    assert render_qr_data_uri(payload) == render_qr_data_uri(payload)


def test_payload_too_long_for_qr_capacity():
    with pytest.raises(QRRenderError):
        render_qr_data_uri('x' * 5000, error_correction='H')


def test_unknown_error_correction_level():
    with pytest.raises(QRRenderError):
        render_qr_data_uri('hello', error_correction='Z')


def test_empty_payload():
    with pytest.raises(QRRenderError):
        render_qr_data_uri('')


def test_safe_render_degrades_to_none(caplog):
    with caplog.at_level(logging.WARNING, logger='utils.qr'):
        assert safe_render_qr('x' * 5000, error_correction='H') is None
    assert 'QR generation failed' in caplog.text


def test_safe_render_survives_renderer_crash(caplog):
    def broken(payload, **options):
        raise KeyError('boom')

    with caplog.at_level(logging.ERROR, logger='utils.qr'):
        assert safe_render_qr('hello', renderer=broken) is None
    assert 'crashed' in caplog.text
