"""
RU: Генерация SKU и полного набора штрихкодов для товара.
EN: SKU generation and assembly of the product's barcode set.

SKU format::

    {CATEGORY[:2].upper()}/{MANUFACTURER_CODE}-{PRICE_CODE:04d}-{5 random A-Z}

    e.g. PE/PJ02-2399-AGZKO

Uniqueness is probabilistic (26**5 suffixes per prefix); collisions are not
detected here.
"""

from __future__ import annotations

import logging
import random
import string
from typing import Final, Optional

from skulabel.barcodegen.code128 import Code128Error, encode
from skulabel.model.product import BarcodeData, ProductPayload
from skulabel.sku.lookup import ManufacturerLookup

logger = logging.getLogger(__name__)

__all__ = [
    "SkuGenerationError",
    "ManufacturerNotFoundError",
    "build_sku",
    "random_code",
    "generate_barcodes",
]

RANDOM_CODE_LENGTH: Final[int] = 5
PRICE_CODE_WIDTH: Final[int] = 4
CATEGORY_PREFIX_LENGTH: Final[int] = 2


class SkuGenerationError(Exception):
    """SKU or barcode set could not be generated."""


class ManufacturerNotFoundError(SkuGenerationError):
    """No code is registered for the manufacturer."""

    def __init__(self, manufacturer: str) -> None:
        self.manufacturer = manufacturer
        super().__init__(f"Manufacturer code not found for {manufacturer}")


def random_code(
    length: int = RANDOM_CODE_LENGTH, rng: Optional[random.Random] = None
) -> str:
    """Random uppercase letters; not for security-sensitive use."""
    chooser = rng or random
    return "".join(chooser.choice(string.ascii_uppercase) for _ in range(length))


def build_sku(
    category: str,
    manufacturer_code: str,
    price_code: int,
    random_suffix: Optional[str] = None,
    rng: Optional[random.Random] = None,
) -> str:
    """
    Compose a SKU string.

    Args:
        category: Category name; its first two characters are used.
        manufacturer_code: Short manufacturer code (from a ManufacturerLookup).
        price_code: Positive integer, zero-padded to 4 digits.
        random_suffix: Fixed suffix instead of a random one.
        rng: Random source for the suffix.

    Returns:
        SKU such as ``PE/PJ02-2399-AGZKO``.

    Raises:
        SkuGenerationError: missing parts or non-positive price code.
    """
    if not category or not manufacturer_code:
        raise SkuGenerationError("Category and manufacturer code are required")
    if price_code <= 0:
        raise SkuGenerationError("Price code must be greater than 0")
    suffix = random_suffix if random_suffix is not None else random_code(rng=rng)
    prefix = category[:CATEGORY_PREFIX_LENGTH].upper()
    return f"{prefix}/{manufacturer_code}-{price_code:0{PRICE_CODE_WIDTH}d}-{suffix}"


def generate_barcodes(
    category: str,
    manufacturer: str,
    price_code: int,
    retail_price: float,
    lookup: ManufacturerLookup,
    design_code: Optional[int] = None,
    additional_data: str = "",
    rng: Optional[random.Random] = None,
) -> BarcodeData:
    """
    Generate the SKU, QR payload and Code 128 bits for a product.

    Args:
        category: Product category name.
        manufacturer: Manufacturer name, resolved to a code through ``lookup``.
        price_code: Internal price code (> 0).
        retail_price: MRP (> 0), stored with two decimals in the QR payload.
        lookup: Manufacturer code source.
        design_code: Accepted for callers that track designs; not part of the SKU.
        additional_data: Free text carried in the QR payload.
        rng: Random source for the SKU suffix.

    Returns:
        BarcodeData with ``cipher`` equal to the SKU.

    Raises:
        SkuGenerationError: invalid input or encoding failure.
        ManufacturerNotFoundError: manufacturer has no code.
    """
    if not category or not manufacturer:
        raise SkuGenerationError(
            "Category and manufacturer are required for barcode generation"
        )
    if price_code <= 0 or retail_price <= 0:
        raise SkuGenerationError("Price code and retail price must be greater than 0")

    manufacturer_code = lookup.code_for(manufacturer)
    if not manufacturer_code:
        logger.error("Manufacturer code not found for %r", manufacturer)
        raise ManufacturerNotFoundError(manufacturer)

    sku = build_sku(category, manufacturer_code, price_code, rng=rng)
    payload = ProductPayload(
        sku=sku,
        category=category,
        manufacturer=manufacturer,
        mrp=ProductPayload.format_price(retail_price),
        additional_data=additional_data,
    )
    try:
        code128 = encode(sku)
    except Code128Error as e:
        logger.error("Failed to generate barcode for %r: %s", sku, e)
        raise SkuGenerationError("Failed to generate product barcode") from e

    logger.info(
        "Generated SKU %s (category=%r, manufacturer=%r, design=%r)",
        sku,
        category,
        manufacturer,
        design_code,
    )
    return BarcodeData(sku=sku, qr_code=payload.to_json(), code128=code128, cipher=sku)
