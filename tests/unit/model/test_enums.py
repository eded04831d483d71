import pytest

from skulabel.model.enums import (
    DEFAULT_GRID_COLUMNS,
    THERMAL_GRID_COLUMNS,
    BarcodeFormat,
    BarcodeType,
    PrintTemplate,
    parse_format,
    parse_template,
)


def test_barcodeformat_values_and_linear() -> None:
    assert [f.value for f in BarcodeFormat] == ["QR", "CODE128", "CIPHER"]
    assert BarcodeFormat.CODE128.is_linear
    assert not BarcodeFormat.QR.is_linear
    assert not BarcodeFormat.CIPHER.is_linear


def test_barcodeformat_localization() -> None:
    for fmt in BarcodeFormat:
        assert fmt.localized_name("ru")
        assert fmt.localized_name("en")
    assert BarcodeFormat.QR.localized_name("en") == "QR code"
    assert BarcodeFormat.CIPHER.localized_name("ru").startswith("Шифр")


def test_printtemplate_grid_columns() -> None:
    assert PrintTemplate.THERMAL.grid_columns == THERMAL_GRID_COLUMNS == 1
    for tpl in PrintTemplate:
        if tpl is not PrintTemplate.THERMAL:
            assert tpl.grid_columns == DEFAULT_GRID_COLUMNS == 3


def test_printtemplate_members() -> None:
    assert {t.value for t in PrintTemplate} == {
        "standard",
        "compact",
        "modern",
        "minimal",
        "detailed",
        "thermal",
    }


def test_barcodetype_localized_names() -> None:
    for bt in BarcodeType:
        assert bt.localized_name("en")
    assert BarcodeType.EAN13.localized_name("en") == "EAN-13"
    assert "товар" in BarcodeType.EAN14.localized_name("ru")
    assert BarcodeType.EAN14.localized_name("en") == "EAN-14"


@pytest.mark.parametrize(
    "value,expected",
    [
        ("qr", BarcodeFormat.QR),
        ("QR", BarcodeFormat.QR),
        (" code128 ", BarcodeFormat.CODE128),
        ("Cipher", BarcodeFormat.CIPHER),
        (BarcodeFormat.CODE128, BarcodeFormat.CODE128),
    ],
)
def test_parse_format(value: str, expected: BarcodeFormat) -> None:
    assert parse_format(value) is expected


@pytest.mark.parametrize("value", ["", "ean13", "code-128"])
def test_parse_format_unknown(value: str) -> None:
    with pytest.raises(ValueError, match="Unknown barcode format"):
        parse_format(value)


def test_parse_template() -> None:
    assert parse_template("Thermal") is PrintTemplate.THERMAL
    assert parse_template(PrintTemplate.COMPACT) is PrintTemplate.COMPACT
    assert parse_template(" Shelf-Tag ") == "shelf-tag"
