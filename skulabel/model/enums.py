"""
model/enums.py

(Кратко RU: Перечисления форматов штрихкодов и шаблонов печати этикеток.)

EN: Domain enums for SKU labels: symbology formats placed on a label,
print templates, and the standard 1D symbologies rendered through
python-barcode.

- BarcodeFormat: what the label carries (Code 128 bars, QR, plain cipher text).
- PrintTemplate: built-in label layouts.
- BarcodeType: python-barcode symbologies for standalone rendering.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final, Literal, Union

_logger: Final[logging.Logger] = logging.getLogger(__name__)

# === GRID CONSTANTS ===
DEFAULT_GRID_COLUMNS: Final[int] = 3
THERMAL_GRID_COLUMNS: Final[int] = 1


class BarcodeFormat(str, Enum):
    QR = "QR"
    CODE128 = "CODE128"
    CIPHER = "CIPHER"

    @property
    def is_linear(self) -> bool:
        return self is BarcodeFormat.CODE128

    def localized_name(self, lang: Literal["ru", "en"] = "ru") -> str:
        names_ru = {
            BarcodeFormat.QR: "QR код",
            BarcodeFormat.CODE128: "Code 128",
            BarcodeFormat.CIPHER: "Шифр (текст)",
        }
        names_en = {
            BarcodeFormat.QR: "QR code",
            BarcodeFormat.CODE128: "Code 128",
            BarcodeFormat.CIPHER: "Cipher (text)",
        }
        return names_ru[self] if lang == "ru" else names_en[self]


class PrintTemplate(str, Enum):
    STANDARD = "standard"
    COMPACT = "compact"
    MODERN = "modern"
    MINIMAL = "minimal"
    DETAILED = "detailed"
    THERMAL = "thermal"

    @property
    def grid_columns(self) -> int:
        """Labels per row on the printed page."""
        return THERMAL_GRID_COLUMNS if self is PrintTemplate.THERMAL else DEFAULT_GRID_COLUMNS


class BarcodeType(str, Enum):
    EAN8 = "ean8"
    EAN13 = "ean13"
    EAN14 = "ean14"
    UPCA = "upca"
    CODE39 = "code39"
    CODE128 = "code128"
    ITF = "itf"
    CODABAR = "codabar"
    GS1128 = "gs1128"

    def localized_name(self, lang: Literal["ru", "en"] = "ru") -> str:
        names = {
            BarcodeType.EAN8: "EAN-8",
            BarcodeType.EAN13: "EAN-13",
            BarcodeType.EAN14: "EAN-14",
            BarcodeType.UPCA: "UPC-A",
            BarcodeType.CODE39: "Code 39",
            BarcodeType.CODE128: "Code 128",
            BarcodeType.ITF: "Interleaved 2 of 5",
            BarcodeType.CODABAR: "Codabar",
            BarcodeType.GS1128: "GS1-128",
        }
        if lang == "ru" and self is BarcodeType.EAN14:
            return "EAN-14 (товар/короб)"
        return names.get(self, self.value)


def parse_format(value: Union[str, BarcodeFormat]) -> BarcodeFormat:
    """Coerce a user-supplied format name (case-insensitive) to BarcodeFormat."""
    if isinstance(value, BarcodeFormat):
        return value
    try:
        return BarcodeFormat(str(value).strip().upper())
    except ValueError:
        _logger.error("Unknown barcode format: %r", value)
        raise ValueError(
            f"Unknown barcode format {value!r}; expected one of "
            f"{', '.join(f.value for f in BarcodeFormat)}"
        ) from None


def parse_template(value: Union[str, PrintTemplate]) -> Union[PrintTemplate, str]:
    """
    Coerce a template name to PrintTemplate.

    Unknown names are returned unchanged so that custom templates registered
    in label.composer can be addressed by name.
    """
    if isinstance(value, PrintTemplate):
        return value
    name = str(value).strip().lower()
    try:
        return PrintTemplate(name)
    except ValueError:
        return name
