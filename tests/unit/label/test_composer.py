import logging
from typing import Iterator

import pytest

from skulabel.label.composer import (
    CURRENCY_SYMBOL,
    TemplateError,
    compose_label,
    format_mrp,
    register_template,
    registered_templates,
    template_style,
    unregister_template,
)
from skulabel.model.enums import BarcodeFormat, PrintTemplate
from skulabel.model.product import BarcodeData, LabelOptions, ProductPayload


@pytest.fixture
def barcode_data() -> BarcodeData:
    sku = "PE/PJ02-2399-AGZKO"
    payload = ProductPayload(
        sku=sku, category="Pendant", manufacturer="PJ Jewels", mrp="2399.00"
    )
    return BarcodeData(sku=sku, qr_code=payload.to_json(), code128="", cipher=sku)


@pytest.fixture
def clean_registry() -> Iterator[None]:
    yield
    for name in registered_templates():
        unregister_template(name)


class TestFormatMrp:
    @pytest.mark.parametrize(
        "mrp,expected",
        [
            ("2399.00", "2,399"),
            ("12.5", "12.5"),
            ("100.00", "100"),
            ("1234567.25", "1,234,567.25"),
            ("0.00", "0"),
            ("n/a", "n/a"),
        ],
    )
    def test_format(self, mrp: str, expected: str) -> None:
        assert format_mrp(mrp) == expected


class TestTemplateStyle:
    def test_standard(self) -> None:
        style = template_style(PrintTemplate.STANDARD, LabelOptions())
        assert style == {"border": "1px solid #CCCCCC", "padding": "10px"}

    def test_thermal(self) -> None:
        style = template_style("thermal", LabelOptions(label_width=300, label_height=150))
        assert style["border"] == "none"
        assert style["width"] == "300px"
        assert style["height"] == "auto"
        assert style["min-height"] == "150px"

    def test_compact_scales_size(self) -> None:
        style = template_style(PrintTemplate.COMPACT, LabelOptions(label_width=250))
        assert style["width"] == "200px"
        assert style["height"] == "80px"

    def test_detailed_uses_border_color(self) -> None:
        style = template_style(
            PrintTemplate.DETAILED, LabelOptions(border_color="#123456")
        )
        assert style["border"] == "2px solid #123456"

    def test_unknown_falls_back_to_standard(self, caplog: pytest.LogCaptureFixture) -> None:
        # "skulabel" logger does not propagate to root.
        logger = logging.getLogger("skulabel.label.composer")
        logger.addHandler(caplog.handler)
        try:
            style = template_style("no-such-template", LabelOptions())
        finally:
            logger.removeHandler(caplog.handler)
        assert style["border"] == "1px solid #CCCCCC"
        assert "Unknown template" in caplog.text


class TestRegistry:
    def test_register_and_use(self, clean_registry: None) -> None:
        register_template("Shelf", {"border": "3px dashed red", "padding": "2px"})
        assert "shelf" in registered_templates()
        style = template_style("SHELF", LabelOptions())
        assert style == {"border": "3px dashed red", "padding": "2px"}

    def test_unregister(self, clean_registry: None) -> None:
        register_template("tmp", {"padding": "1px"})
        assert unregister_template("tmp") is True
        assert unregister_template("tmp") is False

    @pytest.mark.parametrize("name", ["standard", "Thermal", "  ", ""])
    def test_rejects_reserved_or_empty_names(self, name: str) -> None:
        with pytest.raises(TemplateError):
            register_template(name, {"padding": "1px"})

    @pytest.mark.parametrize(
        "value", ["red; background: url(x)", "<script>", 'a"b']
    )
    def test_rejects_unsafe_values(self, value: str) -> None:
        with pytest.raises(TemplateError, match="Unsafe"):
            register_template("bad", {"color": value})
        assert "bad" not in registered_templates()


class TestComposeLabel:
    def test_code128_label(self, barcode_data: BarcodeData) -> None:
        out = compose_label(barcode_data, image_src="data:image/png;base64,AAA")
        assert out.startswith('<div class="label"')
        assert out.endswith("</div>")
        assert "background-image: url(&#x27;data:image/png;base64,AAA&#x27;)" in out
        assert f"MRP: {CURRENCY_SYMBOL}2,399" in out
        assert "PE/PJ02-2399-AGZKO" in out
        assert "1px solid #CCCCCC" in out

    def test_qr_label(self, barcode_data: BarcodeData) -> None:
        out = compose_label(barcode_data, BarcodeFormat.QR, image_src="data:x")
        assert '<img src="data:x"' in out
        assert 'alt="QR Code"' in out

    def test_cipher_label_shows_text(self, barcode_data: BarcodeData) -> None:
        out = compose_label(barcode_data, BarcodeFormat.CIPHER)
        assert out.count("PE/PJ02-2399-AGZKO") == 2
        assert "font-weight: bold" in out
        assert "<img" not in out
        assert "background-image" not in out

    def test_hidden_fields(self, barcode_data: BarcodeData) -> None:
        opts = LabelOptions(show_price=False, show_sku=False)
        out = compose_label(barcode_data, options=opts)
        assert "MRP" not in out
        assert "PE/PJ02-2399-AGZKO" not in out

    def test_category_and_manufacturer(self, barcode_data: BarcodeData) -> None:
        opts = LabelOptions(show_category=True, show_manufacturer=True)
        assert "Pendant - PJ Jewels" in compose_label(barcode_data, options=opts)

    def test_company_name_and_logo(self, barcode_data: BarcodeData) -> None:
        out = compose_label(barcode_data, options=LabelOptions(company_name="ACME"))
        assert ">ACME</div>" in out
        opts = LabelOptions(
            company_name="ACME", show_logo=True, logo_url="https://x.test/l.png"
        )
        out = compose_label(barcode_data, options=opts)
        assert '<img src="https://x.test/l.png"' in out
        assert 'alt="ACME"' in out

    def test_text_is_escaped(self) -> None:
        payload = ProductPayload(
            sku="<b>", category="<script>alert(1)</script>", mrp="5"
        )
        data = BarcodeData(sku="<b>", qr_code=payload.to_json(), code128="", cipher="<b>")
        out = compose_label(
            data,
            BarcodeFormat.CIPHER,
            LabelOptions(show_category=True, company_name="A&B"),
        )
        assert "<script>" not in out
        assert "&lt;script&gt;" in out
        assert "&lt;b&gt;" in out
        assert "A&amp;B" in out

    def test_unparsable_payload_omits_price(self) -> None:
        data = BarcodeData(sku="X1", qr_code="not json", code128="", cipher="X1")
        out = compose_label(data, BarcodeFormat.CIPHER)
        assert "MRP" not in out
        assert "X1" in out

    def test_thermal_template(self, barcode_data: BarcodeData) -> None:
        out = compose_label(barcode_data, template=PrintTemplate.THERMAL)
        assert "min-height: 100px" in out
        assert "border: none" in out
