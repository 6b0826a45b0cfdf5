"""
توليد صور QR كـ data URI (PNG base64)
QR rendering for print documents: ZATCA TLV payloads and order-tracking links.
"""
import base64
import logging
from io import BytesIO
from typing import Optional

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    'L': qrcode.constants.ERROR_CORRECT_L,
    'M': qrcode.constants.ERROR_CORRECT_M,
    'Q': qrcode.constants.ERROR_CORRECT_Q,
    'H': qrcode.constants.ERROR_CORRECT_H,
}


class QRRenderError(RuntimeError):
    """فشل توليد رمز QR (سعة غير كافية، مستوى تصحيح غير معروف، أو محتوى فارغ)."""


def render_qr_data_uri(payload: str, width_px: int = 180, margin_modules: int = 1,
                       error_correction: str = 'M') -> str:
    """إنشاء صورة QR (PNG) وإرجاعها كـ data:image/png;base64,...

    The output depends only on the arguments, so the same payload always
    yields the same bytes.
    """
    if not payload:
        raise QRRenderError("QR payload is empty")
    level = ERROR_CORRECTION_LEVELS.get((error_correction or '').upper())
    if level is None:
        raise QRRenderError(f"unknown error correction level {error_correction!r}")

    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=level,
            box_size=4,
            border=margin_modules,
        )
        qr.add_data(payload)
        qr.make(fit=True)
    except DataOverflowError as e:
        raise QRRenderError(f"payload of {len(payload)} chars exceeds QR capacity at level {error_correction}") from e
    except ValueError as e:
        raise QRRenderError(str(e)) from e

    img = qr.make_image(fill_color="black", back_color="white").get_image()
    img = img.convert('1').resize((width_px, width_px), Image.Resampling.NEAREST)

    buff = BytesIO()
    img.save(buff, format='PNG')
    return 'data:image/png;base64,' + base64.b64encode(buff.getvalue()).decode('ascii')


def safe_render_qr(payload: str, renderer=render_qr_data_uri, **options) -> Optional[str]:
    """Render a QR code or return None; a failed QR never aborts a document."""
    try:
        return renderer(payload, **options)
    except QRRenderError as e:
        logger.warning("QR generation failed for payload of %d chars: %s", len(payload or ''), e)
    except Exception:
        logger.exception("QR renderer crashed for payload of %d chars", len(payload or ''))
    return None
