"""
RU: Рендеринг стандартных 1D-штрихкодов через python-barcode (EAN, UPC, Code39, Code128 ...).
EN: Standard 1D symbologies rendered through python-barcode.

Used for labels that need a retail symbology (EAN-13 of a supplier GTIN,
GS1-128 ...) next to the in-house SKU, and by the ``skulabel render`` command.
The in-house SKU bars come from skulabel.barcodegen.code128, not from here.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Set, TypedDict

import barcode as pybarcode
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter
from PIL import Image

from skulabel.barcodegen.rasterizer import image_to_png_bytes
from skulabel.model.enums import BarcodeType

logger = logging.getLogger(__name__)

__all__ = [
    "BarcodeGenerator",
    "BarcodeGenError",
    "BarcodeRenderOptions",
]

MAX_LINEAR_DATA_LENGTH = 80


class BarcodeRenderOptions(TypedDict, total=False):
    """Writer options passed to python-barcode's ImageWriter."""

    module_width: float
    module_height: float
    font_size: int
    dpi: int
    text_distance: float
    quiet_zone: float
    write_text: bool


class BarcodeGenError(Exception):
    """Barcode generation/validation error."""


class BarcodeGenerator:
    """
    python-barcode wrapper for standard symbologies.

    Args:
        barcode_type: Symbology.
        data: Payload string.
    """

    _pybarcode_support: Dict[BarcodeType, str] = {
        BarcodeType.EAN8: "ean8",
        BarcodeType.EAN13: "ean13",
        BarcodeType.EAN14: "ean14",
        BarcodeType.UPCA: "upc",
        BarcodeType.CODE39: "code39",
        BarcodeType.CODE128: "code128",
        BarcodeType.ITF: "itf",
        BarcodeType.CODABAR: "codabar",
        BarcodeType.GS1128: "gs1_128",
    }

    def __init__(self, barcode_type: BarcodeType, data: str) -> None:
        if not isinstance(barcode_type, BarcodeType):
            raise TypeError(
                f"barcode_type must be BarcodeType enum, got {type(barcode_type)!r}"
            )
        self.barcode_type = barcode_type
        self.data = data

    def validate(self) -> None:
        """
        Check the payload against the symbology's character/length rules.

        Raises:
            BarcodeGenError: invalid payload.
        """
        if not isinstance(self.data, str) or not self.data.strip():
            raise BarcodeGenError("Barcode data must be non-empty string")

        digit_lengths = {
            BarcodeType.EAN8: (7, 8),
            BarcodeType.EAN13: (12, 13),
            BarcodeType.EAN14: (13, 14),
            BarcodeType.UPCA: (11, 12),
        }
        if self.barcode_type in digit_lengths:
            if not self.data.isdigit():
                raise BarcodeGenError(
                    f"{self.barcode_type.name} barcode requires digits only."
                )
            lengths = digit_lengths[self.barcode_type]
            if len(self.data) not in lengths:
                raise BarcodeGenError(
                    f"{self.barcode_type.name} must be {lengths[0]} or {lengths[1]} digits."
                )

        elif self.barcode_type == BarcodeType.CODE39:
            valid_chars = set("ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-.$/+% ")
            if not all(c in valid_chars for c in self.data):
                raise BarcodeGenError("CODE39 supports only A-Z, 0-9, and -.$/+% chars")

        elif self.barcode_type in (BarcodeType.CODE128, BarcodeType.GS1128):
            if len(self.data) > MAX_LINEAR_DATA_LENGTH:
                raise BarcodeGenError(
                    f"{self.barcode_type.name} data too long (max {MAX_LINEAR_DATA_LENGTH})"
                )

        elif self.barcode_type == BarcodeType.ITF and (
            not self.data.isdigit() or len(self.data) % 2 != 0
        ):
            raise BarcodeGenError("ITF must be even number of digits.")

        elif self.barcode_type == BarcodeType.CODABAR:
            valid_chars = set("0123456789-$:/.+ABCD")
            if not all(c in valid_chars for c in self.data.upper()):
                raise BarcodeGenError(
                    "Codabar supports only 0-9, -$:/.+, and start/stop chars A-D"
                )

    def render_image(
        self,
        options: Optional[BarcodeRenderOptions] = None,
    ) -> Image.Image:
        """
        Render the barcode with python-barcode's ImageWriter.

        Args:
            options: Writer options (module_width, dpi ...).

        Returns:
            PIL Image.

        Raises:
            BarcodeGenError: validation or rendering failure.
        """
        self.validate()
        barcode_name = self._pybarcode_support[self.barcode_type]
        logger.debug(
            "Rendering image for barcode [%s] data=%s", self.barcode_type, self.data
        )
        writer_options: Dict[str, Any] = {
            "module_width": 0.2,
            "font_size": 10,
            "dpi": 144,
            "text_distance": 4,
            "quiet_zone": 2,
            "write_text": True,
            **(options or {}),
        }
        try:
            bclass = pybarcode.get_barcode_class(barcode_name)
            img = bclass(self.data, writer=ImageWriter()).render(
                writer_options=writer_options
            )
        except (BarcodeError, ValueError) as e:
            logger.error("python-barcode rejected %r: %s", self.data, e)
            raise BarcodeGenError(
                f"Barcode image generation failed: {self.barcode_type.name}: {e}"
            ) from e
        if not isinstance(img, Image.Image):
            raise BarcodeGenError("Barcode output is not an Image.Image object")
        return img

    def render_bytes(self, options: Optional[BarcodeRenderOptions] = None) -> bytes:
        return image_to_png_bytes(self.render_image(options=options))

    @classmethod
    def supported_types(cls) -> Set[BarcodeType]:
        return set(cls._pybarcode_support.keys())

    @classmethod
    def barcode_name_map(cls) -> Dict[BarcodeType, str]:
        return dict(cls._pybarcode_support)
