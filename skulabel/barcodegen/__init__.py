"""
barcodegen

Кодирование и растеризация символов для этикеток товаров.

Public API:
    - encode / verify / decode_symbols: Code 128 (набор B) в битовую строку модулей
    - Code128Error, InvalidInputError, UnsupportedCharacterError: ошибки кодировщика
    - render_bits / render_code128: растеризация в PIL Image
    - render_qr / qr_data_url: QR-код JSON-описания товара
    - BarcodeGenerator: стандартные 1D-штрихкоды через python-barcode

Примеры:
    >>> from skulabel.barcodegen import encode, render_bits
    >>> img = render_bits(encode("PE/PJ02-2399-AGZKO"), module_width=2, height=60)

Зависимости:
    Pillow, qrcode, python-barcode
"""

from skulabel.barcodegen.barcode_generator import (
    BarcodeGenerator,
    BarcodeGenError,
    BarcodeRenderOptions,
)
from skulabel.barcodegen.code128 import (
    Code128Error,
    InvalidInputError,
    UnsupportedCharacterError,
    decode_symbols,
    encode,
    encoded_length,
    verify,
)
from skulabel.barcodegen.qr import QRRenderError, qr_data_url, render_qr
from skulabel.barcodegen.rasterizer import (
    RasterizeError,
    image_to_data_url,
    image_to_png_bytes,
    render_bits,
    render_code128,
)

__all__ = [
    "encode",
    "encoded_length",
    "decode_symbols",
    "verify",
    "Code128Error",
    "InvalidInputError",
    "UnsupportedCharacterError",
    "render_bits",
    "render_code128",
    "image_to_png_bytes",
    "image_to_data_url",
    "RasterizeError",
    "render_qr",
    "qr_data_url",
    "QRRenderError",
    "BarcodeGenerator",
    "BarcodeGenError",
    "BarcodeRenderOptions",
]
