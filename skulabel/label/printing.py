"""
RU: Формирование печатного HTML-документа с сеткой этикеток и запуск печати.
EN: Print orchestrator: printable HTML document with a grid of labels.

The document prints itself (``window.print()`` on load) once opened in a
browser. Symbols are rasterized in a thread pool and embedded as PNG data
URLs; a symbol that fails to render leaves an empty slot on its label and is
logged, the rest of the batch still prints.
"""

from __future__ import annotations

import html
import logging
import tempfile
import webbrowser
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from skulabel.barcodegen.code128 import Code128Error, encode
from skulabel.barcodegen.qr import QRRenderError, qr_data_url
from skulabel.barcodegen.rasterizer import RasterizeError, image_to_data_url, render_code128
from skulabel.label.composer import compose_label
from skulabel.model.enums import BarcodeFormat, PrintTemplate, parse_format, parse_template
from skulabel.model.product import (
    UNKNOWN_SKU,
    BarcodeData,
    LabelOptions,
    ProductPayload,
    parse_payload,
)

logger = logging.getLogger(__name__)

__all__ = [
    "LabelPrintError",
    "render_symbol",
    "build_print_document",
    "print_barcode_labels",
    "print_qr_codes",
    "quick_print_barcodes",
]

QR_MARGIN = 1


class LabelPrintError(Exception):
    """Printable document could not be produced."""


def render_symbol(
    data: BarcodeData, fmt: BarcodeFormat, options: LabelOptions
) -> str:
    """
    Rasterize the label's symbol to a data URL.

    Returns an empty string (and logs) when the symbol cannot be rendered.
    """
    if fmt is BarcodeFormat.CIPHER:
        return ""
    try:
        if fmt is BarcodeFormat.QR:
            return qr_data_url(
                data.qr_code,
                width=int(options.label_width * 0.6),
                margin=QR_MARGIN,
            )
        img = render_code128(
            data.sku,
            module_width=max(1, options.label_width // 100),
            height=int(options.label_height * 0.3),
            show_text=False,
        )
        return image_to_data_url(img)
    except (Code128Error, RasterizeError, QRRenderError) as e:
        logger.error("Error generating %s symbol for %r: %s", fmt.value, data.sku, e)
        return ""


def build_print_document(
    barcodes: Sequence[BarcodeData],
    fmt: Union[BarcodeFormat, str] = BarcodeFormat.CODE128,
    template: Union[PrintTemplate, str] = PrintTemplate.STANDARD,
    title: str = "Print Labels",
    options: Optional[LabelOptions] = None,
    max_workers: Optional[int] = None,
) -> str:
    """
    Build the full printable HTML document.

    Args:
        barcodes: Products to print, one label each, in order.
        fmt: Symbol on each label.
        template: Built-in or registered template.
        title: Document title.
        options: Label options shared by all labels.
        max_workers: Thread pool size for rasterization.

    Returns:
        HTML document text.
    """
    fmt = parse_format(fmt)
    resolved = parse_template(template)
    opts = options or LabelOptions()
    opts.validate()
    columns = resolved.grid_columns if isinstance(resolved, PrintTemplate) else 3

    def label(item: BarcodeData) -> str:
        return compose_label(
            item, fmt, opts, resolved, image_src=render_symbol(item, fmt, opts)
        )

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        labels = list(pool.map(label, barcodes))
    body = "\n".join(labels)

    logger.info(
        "Print document built: %d labels, format=%s, template=%s",
        len(labels),
        fmt.value,
        getattr(resolved, "value", resolved),
    )
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8" />
    <title>{html.escape(title)}</title>
    <style>
      @page {{ size: A4; margin: 10mm; }}
      @media print {{
        body {{ margin: 0; }}
        .label-grid {{ page-break-inside: auto; }}
      }}
      body {{
        font-family: Arial, sans-serif;
        margin: 0;
        padding: 10px;
      }}
      .label-grid {{
        display: grid;
        grid-template-columns: repeat({columns}, 1fr);
        gap: 10px;
        justify-items: center;
      }}
    </style>
  </head>
  <body>
    <div class="label-grid">
{body}
    </div>
    <script>
      window.onload = () => {{
        setTimeout(() => {{
          window.focus();
          window.print();
        }}, 500);
      }};
    </script>
  </body>
</html>
"""


def _write_document(document: str, output_path: Optional[Union[str, Path]]) -> Path:
    try:
        if output_path is None:
            with tempfile.NamedTemporaryFile(
                "w", suffix=".html", prefix="labels-", delete=False, encoding="utf-8"
            ) as f:
                f.write(document)
                return Path(f.name)
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")
        return path
    except OSError as e:
        logger.error("Error writing print document: %s", e)
        raise LabelPrintError(f"Failed to write print document: {e}") from e


def print_barcode_labels(
    barcodes: Sequence[BarcodeData],
    fmt: Union[BarcodeFormat, str] = BarcodeFormat.CODE128,
    template: Union[PrintTemplate, str] = PrintTemplate.STANDARD,
    title: str = "Print Labels",
    options: Optional[LabelOptions] = None,
    output_path: Optional[Union[str, Path]] = None,
    open_browser: bool = False,
) -> Path:
    """
    Write the printable document and optionally open it (which triggers printing).

    Returns:
        Path of the written HTML file.

    Raises:
        LabelPrintError: nothing to print or the file cannot be written.
    """
    if not barcodes:
        raise LabelPrintError("No labels to print")
    document = build_print_document(barcodes, fmt, template, title, options)
    path = _write_document(document, output_path)
    logger.info("Print document written to %s", path)
    if open_browser and not webbrowser.open(path.resolve().as_uri()):
        logger.warning("No browser available to open %s", path)
    return path


def print_qr_codes(
    qr_codes: Iterable[str],
    title: str = "Print QR Codes",
    template: Union[PrintTemplate, str] = PrintTemplate.STANDARD,
    fmt: Union[BarcodeFormat, str] = BarcodeFormat.QR,
    options: Optional[LabelOptions] = None,
    output_path: Optional[Union[str, Path]] = None,
    open_browser: bool = False,
) -> Path:
    """Print labels from raw QR payloads; unparsable payloads print as UNKNOWN."""
    barcodes: List[BarcodeData] = []
    for code in qr_codes:
        payload = parse_payload(code)
        sku = (payload.sku if payload else "") or UNKNOWN_SKU
        barcodes.append(BarcodeData(sku=sku, qr_code=code, code128="", cipher=sku))
    return print_barcode_labels(
        barcodes, fmt, template, title, options, output_path, open_browser
    )


def quick_print_barcodes(
    skus: Iterable[str],
    fmt: Union[BarcodeFormat, str] = BarcodeFormat.CODE128,
    template: Union[PrintTemplate, str] = PrintTemplate.STANDARD,
    options: Optional[LabelOptions] = None,
    output_path: Optional[Union[str, Path]] = None,
    open_browser: bool = False,
) -> Path:
    """
    Print labels for bare SKUs (price 0.00).

    Raises:
        skulabel.barcodegen.code128.Code128Error: a SKU cannot be encoded.
    """
    barcodes = [
        BarcodeData(
            sku=sku,
            qr_code=ProductPayload(sku=sku, mrp="0.00").to_json(),
            code128=encode(sku),
            cipher=sku,
        )
        for sku in skus
    ]
    return print_barcode_labels(
        barcodes,
        fmt,
        template,
        "Quick Print Labels",
        options,
        output_path,
        open_browser,
    )
