"""Game Boy cartridge header layout (0x0100-0x014F plus the TPP1 block)."""
from dataclasses import dataclass
from types import MappingProxyType

MIN_ROM_SIZE = 0x150


@dataclass(frozen=True)
class FieldSpec:
    name: str
    offset: int
    length: int
    encoding: str  # ascii, byte, flags, word_be, raw

    @property
    def end(self) -> int:
        return self.offset + self.length

    def slice(self) -> slice:
        return slice(self.offset, self.end)


_FIELDS = [
    FieldSpec("logo", 0x104, 48, "raw"),
    FieldSpec("title", 0x134, 16, "ascii"),
    FieldSpec("game_id", 0x13F, 4, "ascii"),
    FieldSpec("cgb_flag", 0x143, 1, "byte"),
    FieldSpec("new_licensee", 0x144, 2, "ascii"),
    FieldSpec("sgb_flag", 0x146, 1, "byte"),
    FieldSpec("cartridge_type", 0x147, 1, "byte"),
    FieldSpec("rom_size", 0x148, 1, "byte"),
    FieldSpec("ram_size", 0x149, 1, "byte"),
    FieldSpec("destination", 0x14A, 1, "byte"),
    FieldSpec("old_licensee", 0x14B, 1, "byte"),
    FieldSpec("rom_version", 0x14C, 1, "byte"),
    FieldSpec("header_checksum", 0x14D, 1, "byte"),
    FieldSpec("global_checksum", 0x14E, 2, "word_be"),
    FieldSpec("tpp1_version", 0x150, 2, "raw"),
    FieldSpec("tpp1_ram_size", 0x152, 1, "byte"),
    FieldSpec("tpp1_features", 0x153, 1, "flags"),
]

HEADER_FIELDS = MappingProxyType({f.name: f for f in _FIELDS})

LOGO = HEADER_FIELDS["logo"]
TITLE = HEADER_FIELDS["title"]
GAME_ID = HEADER_FIELDS["game_id"]
CGB_FLAG = HEADER_FIELDS["cgb_flag"]
NEW_LICENSEE = HEADER_FIELDS["new_licensee"]
SGB_FLAG = HEADER_FIELDS["sgb_flag"]
CARTRIDGE_TYPE = HEADER_FIELDS["cartridge_type"]
ROM_SIZE = HEADER_FIELDS["rom_size"]
RAM_SIZE = HEADER_FIELDS["ram_size"]
DESTINATION = HEADER_FIELDS["destination"]
OLD_LICENSEE = HEADER_FIELDS["old_licensee"]
ROM_VERSION = HEADER_FIELDS["rom_version"]
HEADER_CHECKSUM = HEADER_FIELDS["header_checksum"]
GLOBAL_CHECKSUM = HEADER_FIELDS["global_checksum"]
TPP1_VERSION = HEADER_FIELDS["tpp1_version"]
TPP1_RAM_SIZE = HEADER_FIELDS["tpp1_ram_size"]
TPP1_FEATURES = HEADER_FIELDS["tpp1_features"]

# Span covered by the header checksum: title through ROM version
HEADER_CHECKSUM_RANGE = range(TITLE.offset, ROM_VERSION.end)

# Boot ROM compares this against the cartridge before running it
NINTENDO_LOGO = bytes([
    0xCE, 0xED, 0x66, 0x66, 0xCC, 0x0D, 0x00, 0x0B, 0x03, 0x73, 0x00, 0x83, 0x00, 0x0C, 0x00, 0x0D,
    0x00, 0x08, 0x11, 0x1F, 0x88, 0x89, 0x00, 0x0E, 0xDC, 0xCC, 0x6E, 0xE6, 0xDD, 0xDD, 0xD9, 0x99,
    0xBB, 0xBB, 0x67, 0x63, 0x6E, 0x0E, 0xEC, 0xCC, 0xDD, 0xDC, 0x99, 0x9F, 0xBB, 0xB9, 0x33, 0x3E,
])

CGB_ONLY = 0xC0
CGB_COMPATIBLE = 0x80
SGB_SUPPORTED = 0x03
NON_JAPANESE = 0x01
# SGB functions are only enabled when the old licensee says "see new licensee"
SGB_LICENSEE_SENTINEL = 0x33

# Title length when the title shares its area with the game ID or the CGB flag
TITLE_MAX = 16
TITLE_MAX_WITH_CGB = 15
TITLE_MAX_WITH_GAME_ID = 11


def write_ascii(image: bytearray, field: FieldSpec, text: str, length: int | None = None, pad: bytes = b" ") -> bytes:
    """Write text into an ASCII field, truncated or padded to the field length.

    With pad=b"" the text is only truncated, so shorter strings leave the
    tail of the field as it was.
    """
    length = field.length if length is None else length
    encoded = text[:length].encode("ascii", errors="replace")
    if pad:
        encoded = encoded.ljust(length, pad)
    image[field.offset:field.offset + len(encoded)] = encoded
    return encoded


def read_field(data: bytes, field: FieldSpec):
    """Decode a field according to its encoding (str, int or bytes)."""
    raw = bytes(data[field.slice()])
    if field.encoding == "ascii":
        return raw.decode("ascii", errors="replace")
    if field.encoding in ("byte", "flags", "word_be"):
        return int.from_bytes(raw, "big")
    return raw
