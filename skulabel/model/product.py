# RU: Доменные записи товара: JSON-описание для QR, набор штрихкодов и опции этикетки.
# EN: Product domain records: QR JSON payload, generated barcode set, label options.

import json
import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, ClassVar, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

UNKNOWN_SKU = "UNKNOWN"


@dataclass(frozen=True)
class ProductPayload:
    """
    Serializable product record carried in the QR code.

    JSON keys follow the label scanner's format: ``sku, category,
    manufacturer, mrp, additionalData``. ``mrp`` is kept as a string with two
    decimals so the payload round-trips without float noise.

    Example:
        >>> p = ProductPayload(sku="PE/PJ02-2399-AGZKO", mrp="2399.00")
        >>> ProductPayload.from_json(p.to_json()) == p
        True
    """

    _JSON_KEYS: ClassVar[Dict[str, str]] = {
        "sku": "sku",
        "category": "category",
        "manufacturer": "manufacturer",
        "mrp": "mrp",
        "additional_data": "additionalData",
    }

    sku: str
    category: str = ""
    manufacturer: str = ""
    mrp: str = ""
    additional_data: str = ""

    @staticmethod
    def format_price(value: float) -> str:
        return f"{value:.2f}"

    def to_dict(self) -> Dict[str, Any]:
        return {self._JSON_KEYS[k]: v for k, v in asdict(self).items()}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "ProductPayload":
        kwargs: Dict[str, Any] = {}
        for attr, key in cls._JSON_KEYS.items():
            if key in d and d[key] is not None:
                kwargs[attr] = str(d[key])
        kwargs.setdefault("sku", UNKNOWN_SKU)
        return cls(**kwargs)

    @classmethod
    def from_json(cls, text: str) -> "ProductPayload":
        """
        Parse a QR payload.

        Raises:
            ValueError: text is not a JSON object.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError(
                f"QR payload must be a JSON object, got {type(data).__name__}"
            )
        return cls.from_dict(data)


@dataclass(frozen=True)
class BarcodeData:
    """All symbol payloads generated for one product."""

    sku: str
    qr_code: str
    code128: str
    cipher: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sku": self.sku,
            "qrCode": self.qr_code,
            "code128": self.code128,
            "cipher": self.cipher,
        }


@dataclass
class LabelOptions:
    """Visual options of a single printed label. Sizes are CSS pixels."""

    show_price: bool = True
    show_sku: bool = True
    show_category: bool = False
    show_manufacturer: bool = False
    show_logo: bool = False
    company_name: str = ""
    logo_url: str = ""
    font_size: int = 12
    label_width: int = 200
    label_height: int = 100
    background_color: str = "#FFFFFF"
    text_color: str = "#000000"
    border_color: str = "#CCCCCC"

    def validate(self) -> None:
        if self.font_size <= 4:
            raise ValueError(f"Invalid font_size: {self.font_size}")
        if self.label_width <= 0 or self.label_height <= 0:
            raise ValueError(
                f"Invalid label size: {self.label_width}x{self.label_height}"
            )

    @classmethod
    def from_config(
        cls, config: Mapping[str, Any], **overrides: Any
    ) -> "LabelOptions":
        """
        Build options from a load_config() dict; other keys are ignored.

        Explicit keyword overrides win over config values.
        """
        names = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {k: v for k, v in config.items() if k in names}
        kwargs.update(overrides)
        opts = cls(**kwargs)
        opts.validate()
        logger.debug("Label options from config: %s", opts)
        return opts


def parse_payload(text: Optional[str]) -> Optional[ProductPayload]:
    """Tolerant variant of ProductPayload.from_json: logs and returns None on bad input."""
    if not text:
        return None
    try:
        return ProductPayload.from_json(text)
    except ValueError as e:
        logger.error("Error parsing QR code data: %s", e)
        return None
