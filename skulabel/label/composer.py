"""RU: Сборка HTML-фрагмента этикетки (шаблоны, логотип, цена, SKU, категория).
EN: Label composer: one HTML fragment per product label.

Built-in templates: standard, compact, modern, minimal, detailed, thermal.
Custom templates are CSS property maps registered at runtime with
register_template(); they replace the built-in template style for that name.
All text coming from product data is HTML-escaped."""

import html
import logging
import threading
from typing import Dict, List, Mapping, Optional, Union

from skulabel.model.enums import BarcodeFormat, PrintTemplate, parse_template
from skulabel.model.product import BarcodeData, LabelOptions, parse_payload

logger = logging.getLogger(__name__)

CURRENCY_SYMBOL = "₹"

_custom_templates: Dict[str, Dict[str, str]] = {}
_registry_lock = threading.Lock()


class TemplateError(Exception):
    pass


def register_template(name: str, style: Mapping[str, str]) -> None:
    """
    Register (or replace) a custom template.

    Args:
        name: Template name, case-insensitive. Built-in names cannot be reused.
        style: CSS properties applied to the label container.
    """
    key = name.strip().lower()
    if not key:
        raise TemplateError("Template name must be non-empty")
    if key in {t.value for t in PrintTemplate}:
        raise TemplateError(f"Template {key!r} is built in and cannot be replaced")
    for prop, value in style.items():
        if not isinstance(prop, str) or not isinstance(value, str):
            raise TemplateError(f"Invalid style entry {prop!r}: {value!r}")
        if any(c in value for c in ";<>\""):
            raise TemplateError(f"Unsafe CSS value for {prop!r}: {value!r}")
    with _registry_lock:
        _custom_templates[key] = dict(style)
    logger.info("Custom template %s registered (%d properties)", key, len(style))


def unregister_template(name: str) -> bool:
    with _registry_lock:
        removed = _custom_templates.pop(name.strip().lower(), None)
    return removed is not None


def registered_templates() -> List[str]:
    with _registry_lock:
        return sorted(_custom_templates)


def template_style(
    template: Union[PrintTemplate, str], options: LabelOptions
) -> Dict[str, str]:
    """CSS properties a template adds on top of the base label style."""
    resolved = parse_template(template)
    if not isinstance(resolved, PrintTemplate):
        with _registry_lock:
            custom = _custom_templates.get(resolved)
        if custom is not None:
            return dict(custom)
        logger.warning("Unknown template %r, using standard", template)
        resolved = PrintTemplate.STANDARD

    w, h = options.label_width, options.label_height
    if resolved is PrintTemplate.THERMAL:
        return {
            "border": "none",
            "padding": "5px",
            "width": f"{w}px",
            "height": "auto",
            "min-height": f"{h}px",
        }
    if resolved is PrintTemplate.MODERN:
        return {
            "border-radius": "5px",
            "box-shadow": "0 1px 3px rgba(0,0,0,0.1)",
            "background": "linear-gradient(to bottom, #FFFFFF, #F8F8F8)",
            "padding": "12px",
        }
    if resolved is PrintTemplate.MINIMAL:
        return {
            "border": "none",
            "padding": "5px",
            "background-color": "transparent",
        }
    if resolved is PrintTemplate.DETAILED:
        return {
            "border-radius": "0",
            "border": f"2px solid {options.border_color}",
            "padding": "15px",
            "background-color": options.background_color,
        }
    if resolved is PrintTemplate.COMPACT:
        return {
            "padding": "5px",
            "height": f"{_px(h * 0.8)}px",
            "width": f"{_px(w * 0.8)}px",
        }
    return {
        "border": f"1px solid {options.border_color}",
        "padding": "10px",
    }


def _px(value: float) -> str:
    return f"{value:g}"


def _css(style: Mapping[str, str]) -> str:
    return "; ".join(f"{k}: {v}" for k, v in style.items()) + ";"


def format_mrp(mrp: str) -> str:
    """``"2399.00"`` -> ``"2,399"``; ``"12.5"`` -> ``"12.5"``. Non-numeric text is returned as is."""
    try:
        value = float(mrp)
    except ValueError:
        return mrp
    return f"{value:,.3f}".rstrip("0").rstrip(".")


def compose_label(
    data: BarcodeData,
    fmt: BarcodeFormat = BarcodeFormat.CODE128,
    options: Optional[LabelOptions] = None,
    template: Union[PrintTemplate, str] = PrintTemplate.STANDARD,
    image_src: str = "",
) -> str:
    """
    Build the HTML fragment of one label.

    Args:
        data: Barcode set of the product.
        fmt: Symbol placed on the label.
        options: Visual options; defaults when None.
        template: Built-in or registered template name.
        image_src: Rendered symbol (data URL) for CODE128/QR; empty leaves the slot blank.

    Returns:
        HTML ``<div>`` fragment.
    """
    opts = options or LabelOptions()
    payload = parse_payload(data.qr_code)
    mrp = payload.mrp if payload else ""
    category = payload.category if payload else ""
    manufacturer = payload.manufacturer if payload else ""

    base = {
        "width": f"{opts.label_width}px",
        "height": f"{opts.label_height}px",
        "background-color": opts.background_color,
        "color": opts.text_color,
        "font-family": "Arial, sans-serif",
        "display": "flex",
        "flex-direction": "column",
        "align-items": "center",
        "justify-content": "center",
        "box-sizing": "border-box",
        "margin": "0",
        "page-break-inside": "avoid",
    }
    base.update(template_style(template, opts))
    esc = html.escape
    parts = [f'<div class="label" style="{esc(_css(base))}">']

    if opts.show_logo and opts.logo_url:
        parts.append(
            '<div style="margin-bottom: 5px; text-align: center;">'
            f'<img src="{esc(opts.logo_url)}" style="max-height: 20px; max-width: 80px;" '
            f'alt="{esc(opts.company_name)}" /></div>'
        )
    elif opts.company_name:
        parts.append(
            f'<div style="font-size: {opts.font_size - 2}px; margin-bottom: 5px; '
            f'text-align: center;">{esc(opts.company_name)}</div>'
        )

    if fmt is BarcodeFormat.QR:
        parts.append(
            '<div style="text-align: center;">'
            f'<img src="{esc(image_src)}" style="width: 80px; height: 80px;" alt="QR Code" />'
            "</div>"
        )
    elif fmt is BarcodeFormat.CIPHER:
        parts.append(
            f'<div style="font-family: monospace; font-weight: bold; '
            f'font-size: {opts.font_size + 4}px; letter-spacing: 1px;">'
            f"{esc(data.cipher)}</div>"
        )
    else:
        parts.append(
            '<div style="text-align: center; width: 100%;">'
            '<div style="width: 100%; height: 50px; '
            f"background-image: url('{esc(image_src)}'); background-repeat: no-repeat; "
            'background-position: center; background-size: contain;"></div></div>'
        )

    if opts.show_price and mrp:
        parts.append(
            f'<div style="font-weight: bold; font-size: {opts.font_size + 2}px; '
            f'margin-top: 5px;">MRP: {CURRENCY_SYMBOL}{esc(format_mrp(mrp))}</div>'
        )

    if opts.show_sku and data.sku:
        parts.append(
            f'<div style="font-family: monospace; font-size: {opts.font_size}px; '
            f'margin-top: 2px;">{esc(data.sku)}</div>'
        )

    details = []
    if opts.show_category and category:
        details.append(esc(category))
    if opts.show_manufacturer and manufacturer:
        details.append(esc(manufacturer))
    if details:
        parts.append(
            f'<div style="font-size: {opts.font_size - 4}px; margin-top: 2px;">'
            f'{" - ".join(details)}</div>'
        )

    parts.append("</div>")
    return "".join(parts)
