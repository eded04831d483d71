"""Command line entry point: ``skulabel encode|sku|print|render``."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from skulabel import get_logger, load_config
from skulabel.barcodegen.barcode_generator import BarcodeGenerator, BarcodeGenError
from skulabel.barcodegen.code128 import Code128Error, encode
from skulabel.barcodegen.rasterizer import (
    RasterizeError,
    image_to_png_bytes,
    render_code128,
)
from skulabel.label.composer import TemplateError
from skulabel.label.printing import LabelPrintError, quick_print_barcodes
from skulabel.model.enums import BarcodeType
from skulabel.model.product import LabelOptions
from skulabel.sku.generator import SkuGenerationError, generate_barcodes
from skulabel.sku.lookup import ManufacturerLookupError, lookup_from_config

logger = get_logger(__name__)

DOMAIN_ERRORS = (
    Code128Error,
    RasterizeError,
    BarcodeGenError,
    SkuGenerationError,
    ManufacturerLookupError,
    LabelPrintError,
    TemplateError,
    ValueError,
)


def _cmd_encode(args: argparse.Namespace) -> int:
    print(encode(args.data, strict=not args.lenient))
    return 0


def _cmd_sku(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    data = generate_barcodes(
        category=args.category,
        manufacturer=args.manufacturer,
        price_code=args.price_code,
        retail_price=args.retail_price,
        lookup=lookup_from_config(config),
        additional_data=args.data,
    )
    print(json.dumps(data.to_dict(), ensure_ascii=False, indent=2))
    return 0


def _cmd_print(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    options = LabelOptions.from_config(config)
    output = args.output
    if output is None and config.get("output_dir"):
        output = Path(config["output_dir"]) / "labels.html"
    path = quick_print_barcodes(
        args.skus,
        fmt=args.format or config["default_format"],
        template=args.template or config["default_template"],
        options=options,
        output_path=output,
        open_browser=args.open,
    )
    print(path)
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    if args.type == "sku":
        img = render_code128(
            args.data,
            module_width=args.module_width,
            height=args.height,
            show_text=not args.no_text,
        )
        png = image_to_png_bytes(img)
    else:
        png = BarcodeGenerator(BarcodeType(args.type), args.data).render_bytes()
    try:
        args.output.write_bytes(png)
    except OSError as e:
        logger.error("Error writing %s: %s", args.output, e)
        raise RasterizeError(f"Failed to write image: {e}") from e
    print(args.output)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="skulabel",
        description="SKU generation, Code 128 / QR encoding and printable labels.",
        epilog="Examples:\n"
        "  skulabel encode PE/PJ02-2399-AGZKO\n"
        "  skulabel sku Pendant 'Acme Jewels' 2399 4999 --config shop.json\n"
        "  skulabel print PE/PJ02-2399-AGZKO RI/PJ02-1299-QWERT --template thermal\n"
        "  skulabel render PE/PJ02-2399-AGZKO -o sku.png",
        formatter_class=argparse.RawTextHelpFormatter,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_encode = sub.add_parser("encode", help="Print the Code 128 module bit-string.")
    p_encode.add_argument("data", help="Text to encode.")
    p_encode.add_argument(
        "--lenient",
        action="store_true",
        help="Pass unknown characters through as raw code values.",
    )
    p_encode.set_defaults(func=_cmd_encode)

    p_sku = sub.add_parser("sku", help="Generate a SKU and its barcode set as JSON.")
    p_sku.add_argument("category")
    p_sku.add_argument("manufacturer")
    p_sku.add_argument("price_code", type=int)
    p_sku.add_argument("retail_price", type=float)
    p_sku.add_argument("--data", default="", help="Additional data for the QR payload.")
    p_sku.add_argument("--config", type=Path, default=None)
    p_sku.set_defaults(func=_cmd_sku)

    p_print = sub.add_parser("print", help="Write a printable label document.")
    p_print.add_argument("skus", nargs="+")
    p_print.add_argument("--format", choices=["CODE128", "QR", "CIPHER"], default=None)
    p_print.add_argument("--template", default=None)
    p_print.add_argument("-o", "--output", type=Path, default=None)
    p_print.add_argument("--open", action="store_true", help="Open in browser to print.")
    p_print.add_argument("--config", type=Path, default=None)
    p_print.set_defaults(func=_cmd_print)

    p_render = sub.add_parser("render", help="Render a barcode image to PNG.")
    p_render.add_argument("data")
    p_render.add_argument(
        "--type",
        default="sku",
        choices=["sku"] + [t.value for t in BarcodeType],
        help="'sku' for the label encoder, otherwise a python-barcode symbology.",
    )
    p_render.add_argument("-o", "--output", type=Path, required=True)
    p_render.add_argument("--module-width", type=int, default=2)
    p_render.add_argument("--height", type=int, default=80)
    p_render.add_argument("--no-text", action="store_true")
    p_render.set_defaults(func=_cmd_render)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return int(args.func(args))
    except DOMAIN_ERRORS as e:
        logger.error("%s failed: %s", args.command, e)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
