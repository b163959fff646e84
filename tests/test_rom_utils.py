import pytest

from rgbfix.header import GAME_ID, GLOBAL_CHECKSUM, HEADER_FIELDS, LOGO, ROM_VERSION, read_field
from rgbfix.patcher import FixDirectives, patch
from rgbfix.rom_utils import parse_header


def test_read_field_follows_encoding():
    rom = bytearray(0x8000)
    rom[0x13F:0x143] = b"ABCD"
    rom[0x14C] = 0x07
    rom[0x14E:0x150] = b"\x12\x34"
    assert read_field(rom, GAME_ID) == "ABCD"
    assert read_field(rom, ROM_VERSION) == 0x07
    assert read_field(rom, GLOBAL_CHECKSUM) == 0x1234
    assert read_field(rom, LOGO) == bytes(48)


def test_every_field_has_a_known_encoding():
    assert {f.encoding for f in HEADER_FIELDS.values()} <= {"ascii", "byte", "flags", "word_be", "raw"}


def test_parse_header_of_patched_rom():
    directives = FixDirectives(
        title="ZELDA\x00", game_id="AZLE", new_licensee="01", old_licensee="0x33",
        mbc_type="MBC5+RAM+BATTERY", ram_size="3", color_compatible=True, validate=True,
    )
    result = patch(bytes(0x8000), directives)
    hdr = parse_header(result.image)
    assert hdr["title"] == "ZELDA"
    assert hdr["game_id"] == "AZLE"
    assert hdr["new_licensee"] == "01"
    assert hdr["old_licensee"] == 0x33
    assert hdr["cgb_support"] == "CGB-supported"
    assert hdr["cartridge_type_name"] == "MBC5+RAM+BATTERY"
    assert hdr["ram_size_expected"] == 32 * 1024
    assert hdr["rom_size_expected"] == 32 * 1024
    assert hdr["logo_ok"]
    assert hdr["header_checksum"] == hdr["header_checksum_calc"]
    assert hdr["global_checksum"] == hdr["global_checksum_calc"]
    assert "tpp1_features" not in hdr


def test_parse_header_tpp1():
    result = patch(bytes(0x8000), FixDirectives(mbc_type="TPP1+TIMER"))
    hdr = parse_header(result.image)
    assert hdr["cartridge_type_name"] == "TPP1"
    assert hdr["tpp1_features"] == 0x04


def test_parse_header_too_small():
    with pytest.raises(ValueError):
        parse_header(bytes(0x14F))
