"""
RU: Генерация QR-кода для JSON-описания товара.
EN: QR rendering of the product payload (delegated to the qrcode package).
"""

from __future__ import annotations

import logging
from typing import Final

import qrcode
import qrcode.image.pil
from PIL import Image
from qrcode.constants import ERROR_CORRECT_H

from skulabel.barcodegen.rasterizer import image_to_data_url

logger = logging.getLogger(__name__)

__all__ = [
    "QRRenderError",
    "render_qr",
    "qr_data_url",
]

MAX_QR_WIDTH: Final[int] = 4000


class QRRenderError(Exception):
    """QR code generation error."""


def render_qr(payload: str, width: int = 128, margin: int = 1) -> Image.Image:
    """
    Render a QR code with error correction level H.

    Args:
        payload: Text to encode (JSON product payload).
        width: Side of the resulting square image in pixels.
        margin: Quiet zone in QR modules.

    Returns:
        RGB image of size (width, width).

    Raises:
        QRRenderError: empty payload, bad size, or qrcode failure.
    """
    if not isinstance(payload, str) or not payload:
        raise QRRenderError("QR payload must be a non-empty string")
    if width <= 0 or width > MAX_QR_WIDTH:
        raise QRRenderError(f"QR width must be in 1..{MAX_QR_WIDTH}, got {width}")
    if margin < 0:
        raise QRRenderError(f"QR margin must be >= 0, got {margin}")

    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=ERROR_CORRECT_H,
            box_size=10,
            border=margin,
        )
        qr.add_data(payload)
        qr.make(fit=True)
        qr_img = qr.make_image(
            fill_color="black",
            back_color="white",
            image_factory=qrcode.image.pil.PilImage,
        )
    except Exception as e:
        logger.error("Error generating QR code: %r", e)
        raise QRRenderError("Failed to generate QR code") from e

    if hasattr(qr_img, "get_image"):
        qr_img = qr_img.get_image()
    if not isinstance(qr_img, Image.Image):
        logger.error("QR code did not produce a PIL.Image")
        raise QRRenderError("QR code rendering did not produce a valid image")

    img = qr_img.convert("RGB").resize((width, width), resample=Image.Resampling.BOX)
    logger.debug("QR rendered: %d chars -> %dpx", len(payload), width)
    return img


def qr_data_url(payload: str, width: int = 128, margin: int = 1) -> str:
    """PNG data URL of render_qr(payload, width, margin)."""
    return image_to_data_url(render_qr(payload, width=width, margin=margin))
