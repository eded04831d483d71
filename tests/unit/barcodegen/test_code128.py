from concurrent.futures import ThreadPoolExecutor
from typing import List

import pytest

from skulabel.barcodegen.code128 import (
    SPECIAL_CHARACTERS,
    START_B,
    STOP,
    SYMBOL_PATTERNS,
    Code128Error,
    InvalidInputError,
    UnsupportedCharacterError,
    code_value,
    compute_checksum,
    decode_symbols,
    encode,
    encoded_length,
    symbol_table,
    verify,
)

P = SYMBOL_PATTERNS
QZ = "0" * 10


class TestSymbolTable:
    def test_has_107_entries(self) -> None:
        assert len(SYMBOL_PATTERNS) == 107

    def test_patterns_are_11_binary_modules(self) -> None:
        for pattern in SYMBOL_PATTERNS:
            assert len(pattern) == 11
            assert set(pattern) <= {"0", "1"}
            assert pattern[0] == "1"

    def test_patterns_are_unique(self) -> None:
        assert len(set(SYMBOL_PATTERNS)) == len(SYMBOL_PATTERNS)

    def test_start_and_stop_patterns(self) -> None:
        assert P[START_B] == "11010010000"
        assert P[STOP] == "11000111010"

    def test_special_characters_are_read_only(self) -> None:
        with pytest.raises(TypeError):
            SPECIAL_CHARACTERS["+"] = 11  # type: ignore[index]

    def test_symbol_table_copy(self) -> None:
        table = symbol_table()
        table[0] = "x"
        assert SYMBOL_PATTERNS[0] != "x"
        assert len(symbol_table()) == 107


class TestCodeValue:
    @pytest.mark.parametrize(
        "char,expected",
        [
            ("A", 10),
            ("Z", 35),
            ("a", 36),
            ("z", 61),
            ("0", 0),
            ("9", 9),
            (" ", 0),
            ("-", 45),
            (".", 46),
            ("/", 47),
        ],
    )
    def test_mapping(self, char: str, expected: int) -> None:
        assert code_value(char) == expected

    def test_supported_alphabet_stays_in_data_range(self) -> None:
        alphabet = (
            "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789 -./"
        )
        assert all(0 <= code_value(c) <= 102 for c in alphabet)

    @pytest.mark.parametrize("char", ["!", "#", "é", "~", "\x00", "Ж"])
    def test_strict_rejects_unknown(self, char: str) -> None:
        with pytest.raises(UnsupportedCharacterError) as exc:
            code_value(char, position=3)
        assert exc.value.char == char
        assert exc.value.position == 3
        assert exc.value.value is None

    @pytest.mark.parametrize("char", ["AB", "", "12", None])
    def test_rejects_non_single_character(self, char: object) -> None:
        for strict in (True, False):
            with pytest.raises(UnsupportedCharacterError) as exc:
                code_value(char, strict=strict)  # type: ignore[arg-type]
            assert exc.value.char == char

    def test_lenient_raw_ordinal(self) -> None:
        assert code_value("!", strict=False) == 33
        assert code_value("#", strict=False) == 35

    @pytest.mark.parametrize("char", ["~", "é", "Ж"])
    def test_lenient_out_of_table_still_fails(self, char: str) -> None:
        with pytest.raises(UnsupportedCharacterError) as exc:
            code_value(char, strict=False)
        assert exc.value.value == ord(char)
        assert "outside 0..106" in str(exc.value)


class TestEncode:
    def test_single_char_scenario(self) -> None:
        expected = QZ + P[104] + P[10] + P[11] + P[106] + "11" + QZ
        assert encode("A") == expected

    def test_two_chars_checksum_33(self) -> None:
        bits = encode("AB")
        assert bits == QZ + P[104] + P[10] + P[11] + P[33] + P[106] + "11" + QZ

    def test_digits_use_values_directly(self) -> None:
        bits = encode("123")
        # 104 + 1*1 + 2*2 + 3*3 = 118 -> 15
        assert bits == QZ + P[104] + P[1] + P[2] + P[3] + P[15] + P[106] + "11" + QZ

    def test_space_maps_to_zero(self) -> None:
        values = decode_symbols(encode("A B"))
        assert values == [104, 10, 0, 11, 44, 106]

    @pytest.mark.parametrize(
        "data", ["A", "AB", "123", "PE/PJ02-2399-AGZKO", "a.b c-d/e", "x" * 40]
    )
    def test_length_law(self, data: str) -> None:
        bits = encode(data)
        assert len(bits) == 10 + 11 + 11 * len(data) + 11 + 11 + 2 + 10
        assert len(bits) == encoded_length(data)

    @pytest.mark.parametrize("data", ["A", "Zz9", "PE/PJ02-2399-AGZKO"])
    def test_quiet_zones_exactly_ten(self, data: str) -> None:
        bits = encode(data)
        assert bits[:10] == QZ and bits[10] == "1"
        assert bits[-10:] == QZ and bits[-11] == "1"

    def test_output_is_binary(self) -> None:
        assert set(encode("PE/PJ02-2399-AGZKO")) <= {"0", "1"}

    def test_deterministic(self) -> None:
        assert encode("PE/PJ02-2399-AGZKO") == encode("PE/PJ02-2399-AGZKO")

    def test_concurrent_calls_agree(self) -> None:
        inputs: List[str] = [f"SKU-{i:04d}" for i in range(50)]
        expected = [encode(s) for s in inputs]
        with ThreadPoolExecutor(max_workers=8) as pool:
            assert list(pool.map(encode, inputs)) == expected

    @pytest.mark.parametrize("data", ["", None, 123, b"AB"])
    def test_invalid_input(self, data: object) -> None:
        with pytest.raises(InvalidInputError, match="required"):
            encode(data)  # type: ignore[arg-type]

    def test_invalid_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            encode("")

    def test_unsupported_character_reports_position(self) -> None:
        with pytest.raises(UnsupportedCharacterError) as exc:
            encode("AB!C")
        assert exc.value.char == "!"
        assert exc.value.position == 3
        assert isinstance(exc.value, Code128Error)

    def test_lenient_encoding(self) -> None:
        values = decode_symbols(encode("A!", strict=False))
        assert values[1:3] == [10, 33]
        assert verify(encode("A!", strict=False))

    def test_lenient_rejects_high_ordinals(self) -> None:
        with pytest.raises(UnsupportedCharacterError):
            encode("Aé", strict=False)


class TestChecksum:
    def test_compute_checksum(self) -> None:
        assert compute_checksum([10]) == 11
        assert compute_checksum([10, 11]) == 33
        assert compute_checksum([]) == 104 % 103

    @pytest.mark.parametrize(
        "data", ["A", "AB", "123", "PE/PJ02-2399-AGZKO", "hello world", "z" * 30]
    )
    def test_embedded_checksum_matches(self, data: str) -> None:
        values = decode_symbols(encode(data))
        assert values[0] == START_B
        assert values[-1] == STOP
        assert values[1:-2] == [code_value(c) for c in data]
        assert values[-2] == compute_checksum(values[1:-2])


class TestDecodeAndVerify:
    def test_decode_two_chars(self) -> None:
        assert decode_symbols(encode("AB")) == [104, 10, 11, 33, 106]

    def test_verify_valid(self) -> None:
        assert verify(encode("PE/PJ02-2399-AGZKO"))

    def test_verify_detects_substituted_symbol(self) -> None:
        bits = encode("AB")
        tampered = bits[:21] + P[12] + bits[32:]
        assert decode_symbols(tampered)[1] == 12
        assert not verify(tampered)

    @pytest.mark.parametrize(
        "bits",
        ["", "0101", "2" * 66, QZ + "1" * 46 + QZ, "0" * 66],
    )
    def test_verify_malformed(self, bits: str) -> None:
        assert verify(bits) is False

    def test_decode_bad_length(self) -> None:
        with pytest.raises(Code128Error, match="length"):
            decode_symbols(encode("A") + "0")

    def test_decode_unknown_pattern(self) -> None:
        bits = encode("A")
        broken = bits[:21] + "11111111111" + bits[32:]
        with pytest.raises(Code128Error, match="Unknown symbol pattern"):
            decode_symbols(broken)

    def test_decode_missing_quiet_zone(self) -> None:
        bits = "1" + encode("A")[1:]
        with pytest.raises(Code128Error, match="quiet zone"):
            decode_symbols(bits)
