"""Cartridge controller (MBC) names and their 0x147 codes."""
import enum
import re
from dataclasses import dataclass
from types import MappingProxyType

from .literals import LiteralError, ParsedLiteral, parse_literal

ROM_ONLY = 0x00

CARTRIDGE_TYPES = MappingProxyType({
    0x00: "ROM ONLY",
    0x01: "MBC1",
    0x02: "MBC1+RAM",
    0x03: "MBC1+RAM+BATTERY",
    0x05: "MBC2",
    0x06: "MBC2+BATTERY",
    0x08: "ROM+RAM",
    0x09: "ROM+RAM+BATTERY",
    0x0B: "MMM01",
    0x0C: "MMM01+RAM",
    0x0D: "MMM01+RAM+BATTERY",
    0x0F: "MBC3+TIMER+BATTERY",
    0x10: "MBC3+TIMER+RAM+BATTERY",
    0x11: "MBC3",
    0x12: "MBC3+RAM",
    0x13: "MBC3+RAM+BATTERY",
    0x19: "MBC5",
    0x1A: "MBC5+RAM",
    0x1B: "MBC5+RAM+BATTERY",
    0x1C: "MBC5+RUMBLE",
    0x1D: "MBC5+RUMBLE+RAM",
    0x1E: "MBC5+RUMBLE+RAM+BATTERY",
    0x20: "MBC6",
    0x22: "MBC7+SENSOR+RUMBLE+RAM+BATTERY",
    0xBC: "TPP1",
    0xFC: "POCKET CAMERA",
    0xFD: "BANDAI TAMA5",
    0xFE: "HUC3",
    0xFF: "HUC1+RAM+BATTERY",
})

# Lookup keys are uppercase with whitespace removed, see normalize_name()
CARTRIDGE_TYPE_CODES = MappingProxyType({
    "ROM_ONLY": 0x00,
    "ROMONLY": 0x00,
    "MBC1": 0x01,
    "MBC1+RAM": 0x02,
    "MBC1+RAM+BATTERY": 0x03,
    "MBC2": 0x05,
    "MBC2+BATTERY": 0x06,
    "ROM+RAM": 0x08,
    "ROM+RAM+BATTERY": 0x09,
    "MMM01": 0x0B,
    "MMM01+RAM": 0x0C,
    "MMM01+RAM+BATTERY": 0x0D,
    "MBC3+TIMER+BATTERY": 0x0F,
    "MBC3+TIMER+RAM+BATTERY": 0x10,
    "MBC3": 0x11,
    "MBC3+RAM": 0x12,
    "MBC3+RAM+BATTERY": 0x13,
    "MBC5": 0x19,
    "MBC5+RAM": 0x1A,
    "MBC5+RAM+BATTERY": 0x1B,
    "MBC5+RUMBLE": 0x1C,
    "MBC5+RUMBLE+RAM": 0x1D,
    "MBC5+RUMBLE+RAM+BATTERY": 0x1E,
    "MBC6": 0x20,
    "MBC7+SENSOR+RUMBLE+RAM+BATTERY": 0x22,
    "POCKET_CAMERA": 0xFC,
    "POCKETCAMERA": 0xFC,
    "BANDAI_TAMA5": 0xFD,
    "BANDAITAMA5": 0xFD,
    "HUC3": 0xFE,
    "HUC1+RAM+BATTERY": 0xFF,
})

TPP1_PREFIX = "TPP"
TPP1_CARTRIDGE_TYPE = 0xBC
TPP1_RAM_SIZE_MAGIC = 0xC1
TPP1_DESTINATION_MAGIC = 0x65
TPP1_VERSION = (1, 0)

# TPP1 feature byte at 0x153. RAM is implied by a non-zero RAM size.
TPP1_FEATURES = MappingProxyType({
    "RAM": 0x00,
    "BATTERY": 0x08,
    "TIMER": 0x04,
    "MULTIRUMBLE": 0x03,
    "RUMBLE": 0x01,
})

_WHITESPACE = re.compile(r"\s+")


class Provenance(enum.Enum):
    LITERAL = "literal"
    NAMED = "named"
    DEFAULT = "default"


@dataclass(frozen=True)
class CapabilityCode:
    value: int
    provenance: Provenance
    spec: str
    bit_flags: bool = False
    literal: ParsedLiteral | None = None

    @property
    def warning(self) -> str | None:
        if self.provenance is Provenance.DEFAULT:
            return f"Unknown MBC type '{self.spec}', defaulting to ROM ONLY (0x{ROM_ONLY:02X})"
        return None

    @property
    def error(self) -> LiteralError | None:
        return self.literal.error if self.literal is not None else None


def normalize_name(spec: str) -> str:
    return _WHITESPACE.sub("", spec).upper()


def tpp1_features(name: str) -> int:
    """Fold the "+FEATURE" suffixes of a TPP1 name into the feature byte.

    Unrecognized suffixes contribute nothing.
    """
    mask = 0
    for part in name.split("+")[1:]:
        mask |= TPP1_FEATURES.get(part, 0)
    return mask


def resolve_cartridge_type(spec: str) -> CapabilityCode:
    """Turn an MBC option ("MBC5+RAM", "0x1B", "TPP1+TIMER") into a code.

    Names are matched case- and whitespace-insensitively. A numeric
    literal that fails the range check is returned with its literal error
    set so the caller can reject it.
    """
    name = normalize_name(spec)
    if name.startswith(TPP1_PREFIX):
        return CapabilityCode(tpp1_features(name), Provenance.NAMED, name, bit_flags=True)

    literal = parse_literal(name)
    if literal.error is not LiteralError.MALFORMED:
        return CapabilityCode(literal.value or 0, Provenance.LITERAL, name, literal=literal)

    code = CARTRIDGE_TYPE_CODES.get(name)
    if code is None:
        return CapabilityCode(ROM_ONLY, Provenance.DEFAULT, name)
    return CapabilityCode(code, Provenance.NAMED, name)


def cartridge_type_name(code: int) -> str:
    return CARTRIDGE_TYPES.get(code, f"Unknown(0x{code:02X})")
