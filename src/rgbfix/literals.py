"""Numeric literal parsing for byte-sized header options."""
import enum
import re
from dataclasses import dataclass

# Signed or unsigned byte: "-1" and "255" both mean 0xFF
BYTE_MIN = -128
BYTE_MAX = 0xFF

_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")
_BIN_DIGITS = re.compile(r"[01]+")
_DEC_DIGITS = re.compile(r"[+-]?[0-9]+")


class LiteralError(enum.Enum):
    MALFORMED = "malformed"
    OUT_OF_RANGE = "out of range"


@dataclass(frozen=True)
class ParsedLiteral:
    text: str
    value: int | None = None
    error: LiteralError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def describe(self) -> str:
        if self.ok:
            return f"0x{self.value:02X}"
        if self.error is LiteralError.OUT_OF_RANGE:
            return f"'{self.text}' is out of byte range ({BYTE_MIN} to 0x{BYTE_MAX:02X})"
        return f"'{self.text}' is not a valid number"


def _split_radix(text: str) -> tuple[str, int, re.Pattern]:
    upper = text.upper()
    if upper.startswith("0X"):
        return text[2:], 16, _HEX_DIGITS
    if upper.startswith("$"):
        return text[1:], 16, _HEX_DIGITS
    if upper.startswith("0B"):
        return text[2:], 2, _BIN_DIGITS
    return text, 10, _DEC_DIGITS


def parse_literal(text: str) -> ParsedLiteral:
    """Parse "0xFF", "$FF", "0b11111111" or "255" style text into a byte.

    The returned value is always unsigned (0..255); negative decimal input
    is folded with two's complement. Failures are reported on the result
    instead of raised so callers can decide which field to blame.
    """
    trimmed = text.strip()
    digits, radix, pattern = _split_radix(trimmed)
    if not pattern.fullmatch(digits):
        return ParsedLiteral(trimmed, error=LiteralError.MALFORMED)
    # 0b11111111 is the longest in-range spelling
    if len(digits.lstrip("+-").lstrip("0")) > 8:
        return ParsedLiteral(trimmed, error=LiteralError.OUT_OF_RANGE)
    number = int(digits, radix)
    if not BYTE_MIN <= number <= BYTE_MAX:
        return ParsedLiteral(trimmed, error=LiteralError.OUT_OF_RANGE)
    return ParsedLiteral(trimmed, value=number & 0xFF)

