import zlib
from pathlib import Path

from . import header
from .cartridge_types import TPP1_CARTRIDGE_TYPE, cartridge_type_name
from .checksums import global_checksum, header_checksum
from .padding import VALID_ROM_SIZES

ROM_SIZE_TABLE = {code: size for code, size in enumerate(VALID_ROM_SIZES)}

RAM_SIZE_TABLE = {
    0x00: 0,
    0x01: 2 * 1024,  # unused, listed in some docs
    0x02: 8 * 1024,
    0x03: 32 * 1024,  # 4 banks
    0x04: 128 * 1024,  # 16 banks
    0x05: 64 * 1024,  # 8 banks
}


def read_rom_bytes(path: str | Path) -> bytes:
    return Path(path).read_bytes()


def write_rom_bytes(path: str | Path, data: bytes) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    Path(path).write_bytes(data)


def crc32(data: bytes) -> int:
    return zlib.crc32(data) & 0xFFFFFFFF


def _cgb_support(flag: int) -> str:
    if (flag & header.CGB_ONLY) == header.CGB_ONLY:
        return "CGB-only"
    if flag & header.CGB_COMPATIBLE:
        return "CGB-supported"
    return "DMG-only/unspecified"


def parse_header(data: bytes) -> dict:
    if len(data) < header.MIN_ROM_SIZE:
        raise ValueError("ROM too small to contain a valid header")
    fields = {name: header.read_field(data, f) for name, f in header.HEADER_FIELDS.items() if f.end <= len(data)}
    # Strip trailing nulls and non-printables
    title = "".join(c for c in fields["title"] if " " <= c <= "~").strip()
    cgb_flag = fields["cgb_flag"]
    cart_type = fields["cartridge_type"]
    rom_size_code = fields["rom_size"]
    ram_size_code = fields["ram_size"]

    hdr = {
        "title": title or "(unknown)",
        "logo_ok": fields["logo"] == header.NINTENDO_LOGO,
        "game_id": fields["game_id"],
        "cgb_flag": cgb_flag,
        "cgb_support": _cgb_support(cgb_flag),
        "new_licensee": fields["new_licensee"],
        "sgb_flag": fields["sgb_flag"],
        "cartridge_type": cart_type,
        "cartridge_type_name": cartridge_type_name(cart_type),
        "rom_size_code": rom_size_code,
        "rom_size_expected": ROM_SIZE_TABLE.get(rom_size_code),
        "ram_size_code": ram_size_code,
        "ram_size_expected": RAM_SIZE_TABLE.get(ram_size_code),
        "destination_code": fields["destination"],
        "old_licensee": fields["old_licensee"],
        "version": fields["rom_version"],
        "header_checksum": fields["header_checksum"],
        "header_checksum_calc": header_checksum(data),
        "global_checksum": fields["global_checksum"],
        "global_checksum_calc": global_checksum(data),
    }
    if cart_type == TPP1_CARTRIDGE_TYPE and "tpp1_features" in fields:
        hdr["tpp1_features"] = fields["tpp1_features"]
    return hdr


def inspect_rom(path: str | Path) -> dict:
    data = read_rom_bytes(path)
    size = len(data)
    info = {"size": size, "crc32": crc32(data)}
    if size not in VALID_ROM_SIZES:
        info["warning"] = "Unexpected ROM size. Pad it with --pad-value."
    try:
        hdr = parse_header(data)
    except ValueError as e:
        info["header_error"] = str(e)
        return info
    info["header"] = hdr
    problems = []
    if not hdr["logo_ok"]:
        problems.append("Nintendo logo mismatch")
    if hdr["header_checksum"] != hdr["header_checksum_calc"]:
        problems.append("Header checksum mismatch")
    if hdr["global_checksum"] != hdr["global_checksum_calc"]:
        problems.append("Global checksum mismatch")
    if problems:
        info["header_warning"] = ", ".join(problems)
    return info
