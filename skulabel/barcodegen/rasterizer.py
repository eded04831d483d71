"""
RU: Растеризация битовой строки Code 128 в изображение Pillow (PNG / data URL).
EN: Rasterizer turning a Code 128 module bit-string into a Pillow image.

Provides:
- render_bits: bars only, one filled rectangle per "1" module
- render_code128: encode + render + human-readable SKU text (price code in bold)
- image_to_png_bytes / image_to_data_url for embedding in label documents
"""

from __future__ import annotations

import base64
import logging
from io import BytesIO
from typing import Final, Optional, Union

from PIL import Image, ImageDraw, ImageFont
from PIL.ImageFont import FreeTypeFont
from PIL.ImageFont import ImageFont as PILImageFont

from skulabel.barcodegen.code128 import encode

logger = logging.getLogger(__name__)

__all__ = [
    "RasterizeError",
    "render_bits",
    "render_code128",
    "image_to_png_bytes",
    "image_to_data_url",
]

# Максимальные размеры для предотвращения исчерпания памяти
MAX_IMAGE_WIDTH: Final[int] = 10000
MAX_IMAGE_HEIGHT: Final[int] = 10000

BAR_COLOR: Final[tuple[int, int, int]] = (0, 0, 0)
BACKGROUND_COLOR: Final[tuple[int, int, int]] = (255, 255, 255)

DEFAULT_TEXT_FONT: Final[str] = "DejaVuSansMono.ttf"
DEFAULT_BOLD_FONT: Final[str] = "DejaVuSansMono-Bold.ttf"

AnyFont = Union[FreeTypeFont, PILImageFont]


class RasterizeError(Exception):
    """Barcode rasterization error."""


def _check_dimensions(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise RasterizeError(f"Image size must be positive, got {width}x{height}")
    if width > MAX_IMAGE_WIDTH:
        raise RasterizeError(f"Width {width} exceeds maximum {MAX_IMAGE_WIDTH}px")
    if height > MAX_IMAGE_HEIGHT:
        raise RasterizeError(f"Height {height} exceeds maximum {MAX_IMAGE_HEIGHT}px")


def render_bits(bits: str, module_width: int = 2, height: int = 80) -> Image.Image:
    """
    Draw a module bit-string as vertical bars.

    Args:
        bits: String over {"0", "1"} (output of code128.encode).
        module_width: Width of one module in pixels.
        height: Bar height in pixels.

    Returns:
        RGB image of size (len(bits) * module_width, height).

    Raises:
        RasterizeError: empty/non-binary input or invalid dimensions.
    """
    if not bits or set(bits) - {"0", "1"}:
        raise RasterizeError("Bit pattern must be a non-empty string of '0' and '1'")
    if module_width <= 0:
        raise RasterizeError(f"Module width must be positive, got {module_width}")
    width = len(bits) * module_width
    _check_dimensions(width, height)

    img = Image.new("RGB", (width, height), BACKGROUND_COLOR)
    draw = ImageDraw.Draw(img)
    # Consecutive "1" modules are drawn as one bar.
    run_start: Optional[int] = None
    for i, bit in enumerate(bits + "0"):
        if bit == "1" and run_start is None:
            run_start = i
        elif bit == "0" and run_start is not None:
            draw.rectangle(
                (run_start * module_width, 0, i * module_width - 1, height - 1),
                fill=BAR_COLOR,
            )
            run_start = None
    return img


def _load_font(font_path: Optional[str], size: int) -> AnyFont:
    font: AnyFont = ImageFont.load_default()
    if font_path:
        try:
            font = ImageFont.truetype(font_path, size)
        except OSError as e:
            logger.warning("Failed to load font (%r): %r", font_path, e)
    return font


def _draw_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    canvas_width: int,
    y: int,
    font: AnyFont,
    bold_font: AnyFont,
) -> None:
    parts = text.split("-")
    if len(parts) == 1:
        text_width = draw.textlength(text, font=font)
        draw.text(((canvas_width - text_width) / 2, y), text, font=font, fill=BAR_COLOR)
        return

    # SKU segments: the price code (second segment) is drawn bold.
    full_width = draw.textlength(text, font=font)
    x = (canvas_width - full_width) / 2
    for i, part in enumerate(parts):
        if i > 0:
            draw.text((x, y), "-", font=font, fill=BAR_COLOR)
            x += draw.textlength("-", font=font)
        part_font = bold_font if i == 1 else font
        draw.text((x, y), part, font=part_font, fill=BAR_COLOR)
        x += draw.textlength(part, font=part_font)


def render_code128(
    data: str,
    module_width: int = 2,
    height: int = 80,
    show_text: bool = True,
    font_size: int = 12,
    text_margin: int = 5,
    font_path: Optional[str] = DEFAULT_TEXT_FONT,
    bold_font_path: Optional[str] = DEFAULT_BOLD_FONT,
) -> Image.Image:
    """
    Encode data as Code 128 and render it, optionally with the text below.

    Args:
        data: String to encode (usually a SKU).
        module_width: Width of one module in pixels.
        height: Bar height in pixels.
        show_text: Draw the human-readable text under the bars.
        font_size: Text size.
        text_margin: Gap between bars and text.
        font_path: Regular font file; default bitmap font when it cannot be loaded.
        bold_font_path: Font for the price segment of hyphenated SKUs.

    Returns:
        RGB image.

    Raises:
        skulabel.barcodegen.code128.Code128Error: data cannot be encoded.
        RasterizeError: invalid dimensions.
    """
    bits = encode(data)
    bars = render_bits(bits, module_width=module_width, height=height)
    if not show_text:
        return bars

    total_height = height + font_size + text_margin
    _check_dimensions(bars.width, total_height)
    img = Image.new("RGB", (bars.width, total_height), BACKGROUND_COLOR)
    img.paste(bars, (0, 0))
    font = _load_font(font_path, font_size)
    bold_font = _load_font(bold_font_path, font_size) if bold_font_path else font
    _draw_text(ImageDraw.Draw(img), data, img.width, height + text_margin, font, bold_font)
    logger.debug("Code 128 image rendered: %dx%d for %r", img.width, img.height, data)
    return img


def image_to_png_bytes(img: Image.Image) -> bytes:
    buf = BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf.read()


def image_to_data_url(img: Image.Image) -> str:
    """PNG data URL suitable for <img src> / CSS url()."""
    b64 = base64.b64encode(image_to_png_bytes(img)).decode("ascii")
    return f"data:image/png;base64,{b64}"
