"""Applies a set of header fixes to a ROM image in a fixed order.

Order matters: the title length depends on the game ID and CGB options,
the SGB flag depends on the old licensee byte already in the image, and
checksums must see the final padded content. The steps are:

    1. CGB flag            8. cartridge type (and TPP1 block)
    2. logo (fix spec l)   9. ROM version
    3. game ID            10. SGB flag
    4. destination        11. title
    5. new licensee       12. padding
    6. old licensee       13. fix letters l, h, g
    7. RAM size
"""
import enum
import logging
from dataclasses import dataclass, field, fields

from . import header
from .cartridge_types import (
    TPP1_CARTRIDGE_TYPE,
    TPP1_DESTINATION_MAGIC,
    TPP1_RAM_SIZE_MAGIC,
    TPP1_VERSION,
    resolve_cartridge_type,
)
from .checksums import FIXES, fix_logo
from .literals import parse_literal
from .padding import pad_rom

_logger = logging.getLogger(__name__)

VALIDATE_FIX_SPEC = "lhg"


@dataclass(frozen=True)
class FixDirectives:
    """Everything one invocation asks to change. Numeric options stay as text."""
    color_only: bool = False
    color_compatible: bool = False
    fix_spec: str | None = None
    game_id: str | None = None
    non_japanese: bool = False
    new_licensee: str | None = None
    old_licensee: str | None = None
    mbc_type: str | None = None
    rom_version: str | None = None
    pad_value: str | None = None
    ram_size: str | None = None
    sgb_compatible: bool = False
    title: str | None = None
    validate: bool = False

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    @property
    def fix_letters(self) -> str:
        """Checksum/logo letters to run at the end, in l, h, g order."""
        requested = VALIDATE_FIX_SPEC if self.validate else (self.fix_spec or "")
        return "".join(letter for letter in FIXES if letter in requested)

    @property
    def title_max_length(self) -> int:
        if self.game_id is not None:
            return header.TITLE_MAX_WITH_GAME_ID
        if self.color_only or self.color_compatible:
            return header.TITLE_MAX_WITH_CGB
        return header.TITLE_MAX


class PatchError(enum.Enum):
    TOO_SMALL = "ROM too small to contain a valid header"
    BAD_LITERAL = "invalid numeric value"


@dataclass
class PatchResult:
    image: bytearray
    error: PatchError | None = None
    field_name: str | None = None
    detail: str | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    def message(self) -> str | None:
        if self.error is None:
            return None
        if self.field_name is None:
            return self.error.value
        return f"{self.error.value} ({self.field_name}: {self.detail})"


class _PatchAbort(Exception):
    def __init__(self, error: PatchError, field_name: str, detail: str):
        super().__init__(detail)
        self.error = error
        self.field_name = field_name
        self.detail = detail


def _byte(field_name: str, text: str) -> int:
    literal = parse_literal(text)
    if not literal.ok:
        raise _PatchAbort(PatchError.BAD_LITERAL, field_name, literal.describe())
    return literal.value


def _set_cartridge_type(rom: bytearray, d: FixDirectives, warnings: list[str]) -> None:
    code = resolve_cartridge_type(d.mbc_type)
    if code.error is not None:
        raise _PatchAbort(PatchError.BAD_LITERAL, "mbc_type", code.literal.describe())
    if code.warning:
        _logger.info(code.warning)
        warnings.append(code.warning)

    if not code.bit_flags:
        rom[header.CARTRIDGE_TYPE.offset] = code.value
        return

    if len(rom) < header.TPP1_FEATURES.end:
        raise _PatchAbort(PatchError.TOO_SMALL, "mbc_type", f"TPP1 needs at least 0x{header.TPP1_FEATURES.end:X} bytes")

    # TPP1 identification and version
    rom[header.CARTRIDGE_TYPE.offset] = TPP1_CARTRIDGE_TYPE
    rom[header.RAM_SIZE.offset] = TPP1_RAM_SIZE_MAGIC
    rom[header.DESTINATION.offset] = TPP1_DESTINATION_MAGIC
    rom[header.TPP1_VERSION.slice()] = bytes(TPP1_VERSION)
    if d.ram_size is not None:
        rom[header.TPP1_RAM_SIZE.offset] = _byte("ram_size", d.ram_size)
    rom[header.TPP1_FEATURES.offset] = code.value
    _logger.debug(f"TPP1 features: 0x{code.value:02X}")


def _apply(rom: bytearray, d: FixDirectives, warnings: list[str]) -> bytearray:
    if d.color_only:
        rom[header.CGB_FLAG.offset] = header.CGB_ONLY
    elif d.color_compatible:
        rom[header.CGB_FLAG.offset] = header.CGB_COMPATIBLE

    if d.fix_spec:
        unknown = sorted(set(d.fix_spec) - set(FIXES))
        if unknown:
            message = f"Ignoring unknown fix-spec characters: {''.join(unknown)}"
            _logger.info(message)
            warnings.append(message)
        if "l" in d.fix_spec:
            fix_logo(rom)

    if d.game_id is not None:
        header.write_ascii(rom, header.GAME_ID, d.game_id.upper())

    if d.non_japanese:
        rom[header.DESTINATION.offset] = header.NON_JAPANESE

    if d.new_licensee is not None:
        header.write_ascii(rom, header.NEW_LICENSEE, d.new_licensee)

    if d.old_licensee is not None:
        rom[header.OLD_LICENSEE.offset] = _byte("old_licensee", d.old_licensee)

    if d.ram_size is not None:
        rom[header.RAM_SIZE.offset] = _byte("ram_size", d.ram_size)

    if d.mbc_type is not None:
        _set_cartridge_type(rom, d, warnings)

    if d.rom_version is not None:
        rom[header.ROM_VERSION.offset] = _byte("rom_version", d.rom_version)

    # The SGB ignores this flag unless the old licensee is 0x33
    if d.sgb_compatible and rom[header.OLD_LICENSEE.offset] == header.SGB_LICENSEE_SENTINEL:
        rom[header.SGB_FLAG.offset] = header.SGB_SUPPORTED

    if d.title is not None:
        written = header.write_ascii(rom, header.TITLE, d.title, length=d.title_max_length, pad=b"")
        _logger.info(f'Set title to "{written.decode("ascii")}" (max {d.title_max_length} chars)')

    if d.pad_value is not None:
        rom = pad_rom(rom, _byte("pad_value", d.pad_value))

    for letter in d.fix_letters:
        FIXES[letter](rom)
    return rom


def patch(image: bytes, directives: FixDirectives) -> PatchResult:
    """Apply directives to a copy of image.

    Never raises for bad input. On a bad literal the result keeps the
    writes made before the failing step; the image is not rolled back.
    """
    result = PatchResult(bytearray(image))
    if len(result.image) < header.MIN_ROM_SIZE:
        result.error = PatchError.TOO_SMALL
        return result
    try:
        result.image = _apply(result.image, directives, result.warnings)
    except _PatchAbort as e:
        result.error = e.error
        result.field_name = e.field_name
        result.detail = e.detail
    return result
