"""
RU: Кодировщик Code 128 (набор B, фиксированная таблица) в битовую строку модулей.
EN: Code 128 encoder producing the module bit-stream for a short string.

The encoder always starts in Set B and maps every character through one fixed
table; subset switching (FNC codes, Set C digit pairs) is not performed.

Output layout::

    quiet zone (10 x "0")
    start pattern (code 104)
    one 11-module pattern per input character
    checksum pattern ((104 + sum(value_i * i)) mod 103)
    stop pattern (code 106) + "11" termination bar
    quiet zone (10 x "0")

Example:
    >>> bits = encode("A")
    >>> bits[:10], bits[-10:]
    ('0000000000', '0000000000')
    >>> len(bits) == encoded_length("A")
    True
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, Final, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

__all__ = [
    "Code128Error",
    "InvalidInputError",
    "UnsupportedCharacterError",
    "SYMBOL_PATTERNS",
    "SPECIAL_CHARACTERS",
    "START_B",
    "STOP",
    "QUIET_ZONE",
    "code_value",
    "compute_checksum",
    "encode",
    "encoded_length",
    "decode_symbols",
    "verify",
    "symbol_table",
]

PATTERN_WIDTH: Final[int] = 11
QUIET_ZONE_WIDTH: Final[int] = 10
QUIET_ZONE: Final[str] = "0" * QUIET_ZONE_WIDTH
TERMINATION_BAR: Final[str] = "11"
CHECKSUM_MODULUS: Final[int] = 103

START_A: Final[int] = 103
START_B: Final[int] = 104
START_C: Final[int] = 105
STOP: Final[int] = 106

# Index = code value. 103..105 are Start A/B/C, 106 is Stop.
SYMBOL_PATTERNS: Final[Tuple[str, ...]] = (
    "11011001100", "11001101100", "11001100110", "10010011000", "10010001100",
    "10001001100", "10011001000", "10011000100", "10001100100", "11001001000",
    "11001000100", "11000100100", "10110011100", "10011011100", "10011001110",
    "10111001100", "10011101100", "10011100110", "11001110010", "11001011100",
    "11001001110", "11011100100", "11001110100", "11101101110", "11101001100",
    "11100101100", "11100100110", "11101100100", "11100110100", "11100110010",
    "11011011000", "11011000110", "11000110110", "10100011000", "10001011000",
    "10001000110", "10110001000", "10001101000", "10001100010", "11010001000",
    "11000101000", "11000100010", "10110111000", "10110001110", "10001101110",
    "10111011000", "10111000110", "10001110110", "11101110110", "11010001110",
    "11000101110", "11011101000", "11011100010", "11011101110", "11101011000",
    "11101000110", "11100010110", "11101101000", "11101100010", "11100011010",
    "11101111010", "11001000010", "11110001010", "10100110000", "10100001100",
    "10010110000", "10010000110", "10000101100", "10000100110", "10110010000",
    "10110000100", "10011010000", "10011000010", "10000110100", "10000110010",
    "11000010010", "11001010000", "11110111010", "11000010100", "10001111010",
    "10100111100", "10010111100", "10010011110", "10111100100", "10011110100",
    "10011110010", "11110100100", "11110010100", "11110010010", "11011011110",
    "11011110110", "11110110110", "10101111000", "10100011110", "10001011110",
    "10111101000", "10111100010", "11110101000", "11110100010", "10111011110",
    "10111101110", "11101011110", "11110101110", "11010000100", "11010010000",
    "11010011100", "11000111010",
)  # fmt: skip

MAX_CODE_VALUE: Final[int] = len(SYMBOL_PATTERNS) - 1

SPECIAL_CHARACTERS: Final[Mapping[str, int]] = MappingProxyType(
    {
        "/": 47,
        "-": 45,
        " ": 0,
        ".": 46,
    }
)

_PATTERN_TO_VALUE: Final[Mapping[str, int]] = MappingProxyType(
    {pattern: value for value, pattern in enumerate(SYMBOL_PATTERNS)}
)

# Fixed framing around the data and checksum symbols, in modules.
_FRAME_WIDTH: Final[int] = (
    2 * QUIET_ZONE_WIDTH + 3 * PATTERN_WIDTH + len(TERMINATION_BAR)
)


class Code128Error(Exception):
    """Code 128 encoding/decoding error."""


class InvalidInputError(Code128Error, ValueError):
    """Data is missing, empty or not a string."""


class UnsupportedCharacterError(Code128Error, ValueError):
    """A character has no code value inside the symbol table."""

    def __init__(self, char: str, position: int, value: Optional[int] = None) -> None:
        self.char = char
        self.position = position
        self.value = value
        if value is None:
            msg = f"Unsupported character {char!r} at position {position}"
        else:
            msg = (
                f"Character {char!r} at position {position} maps to code value "
                f"{value}, outside 0..{MAX_CODE_VALUE}"
            )
        super().__init__(msg)


def code_value(char: str, strict: bool = True, position: int = 1) -> int:
    """
    Map one character to its code value.

    Args:
        char: Single character; anything else raises UnsupportedCharacterError.
        strict: Reject characters outside the supported alphabet. When False,
            unknown characters fall back to their raw ordinal, which must
            still land inside the symbol table.
        position: 1-based position of the character, used in error messages.

    Returns:
        Code value: digits 0-9, A-Z 10-35, a-z 36-61, or the special table.

    Raises:
        UnsupportedCharacterError: character cannot be encoded.
    """
    if not isinstance(char, str) or len(char) != 1:
        raise UnsupportedCharacterError(char, position)
    if "A" <= char <= "Z":
        return ord(char) - ord("A") + 10
    if "a" <= char <= "z":
        return ord(char) - ord("a") + 36
    if "0" <= char <= "9":
        return ord(char) - ord("0")
    special = SPECIAL_CHARACTERS.get(char)
    if special is not None:
        return special
    if strict:
        raise UnsupportedCharacterError(char, position)
    raw = ord(char)
    if raw > MAX_CODE_VALUE:
        raise UnsupportedCharacterError(char, position, raw)
    logger.warning(
        "Character %r at position %d passed through as raw code value %d",
        char,
        position,
        raw,
    )
    return raw


def compute_checksum(values: Sequence[int], start: int = START_B) -> int:
    """Weighted mod-103 checksum: (start + sum(value_i * i)) % 103, i from 1."""
    total = start
    for position, value in enumerate(values, start=1):
        total += value * position
    return total % CHECKSUM_MODULUS


def encoded_length(data: str) -> int:
    """Number of modules encode(data) produces."""
    return _FRAME_WIDTH + PATTERN_WIDTH * len(data)


def encode(data: str, *, strict: bool = True) -> str:
    """
    Encode a string into a Code 128 module bit-string.

    Args:
        data: Non-empty string to encode.
        strict: See code_value().

    Returns:
        String over {"0", "1"} of length encoded_length(data).

    Raises:
        InvalidInputError: data is empty or not a string.
        UnsupportedCharacterError: data contains a character that cannot be encoded.

    Example:
        >>> encode("AB")[21:32] == SYMBOL_PATTERNS[10]
        True
    """
    if not isinstance(data, str) or not data:
        raise InvalidInputError("Data is required for barcode generation")

    parts: List[str] = [QUIET_ZONE, SYMBOL_PATTERNS[START_B]]
    checksum = START_B
    for position, char in enumerate(data, start=1):
        value = code_value(char, strict=strict, position=position)
        parts.append(SYMBOL_PATTERNS[value])
        checksum += value * position

    parts.append(SYMBOL_PATTERNS[checksum % CHECKSUM_MODULUS])
    parts.append(SYMBOL_PATTERNS[STOP] + TERMINATION_BAR)
    parts.append(QUIET_ZONE)
    bits = "".join(parts)
    logger.debug("Encoded %d chars into %d modules", len(data), len(bits))
    return bits


def decode_symbols(bits: str) -> List[int]:
    """
    Split an encoded bit-string back into its code values.

    Returns:
        [start, data..., checksum, stop] code values.

    Raises:
        Code128Error: the stream is not framed the way encode() frames it.
    """
    if not isinstance(bits, str) or set(bits) - {"0", "1"}:
        raise Code128Error("Encoded symbol must be a string of '0' and '1'")
    body_len = len(bits) - _FRAME_WIDTH
    if body_len < 0 or body_len % PATTERN_WIDTH:
        raise Code128Error(f"Invalid encoded length: {len(bits)}")
    if not bits.startswith(QUIET_ZONE) or not bits.endswith(
        TERMINATION_BAR + QUIET_ZONE
    ):
        raise Code128Error("Missing quiet zone or termination bar")

    core = bits[QUIET_ZONE_WIDTH : -(QUIET_ZONE_WIDTH + len(TERMINATION_BAR))]
    values: List[int] = []
    for offset in range(0, len(core), PATTERN_WIDTH):
        chunk = core[offset : offset + PATTERN_WIDTH]
        value = _PATTERN_TO_VALUE.get(chunk)
        if value is None:
            raise Code128Error(f"Unknown symbol pattern {chunk} at module {offset}")
        values.append(value)
    return values


def verify(bits: str) -> bool:
    """Check start/stop framing and the embedded checksum of an encoded symbol."""
    try:
        values = decode_symbols(bits)
    except Code128Error as e:
        logger.debug("Symbol verification failed: %s", e)
        return False
    if values[0] != START_B or values[-1] != STOP:
        return False
    return compute_checksum(values[1:-2]) == values[-2]


def symbol_table() -> Dict[int, str]:
    """Copy of the symbol table as {code value: pattern}."""
    return dict(enumerate(SYMBOL_PATTERNS))
