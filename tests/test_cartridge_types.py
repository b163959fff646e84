import pytest

from rgbfix.cartridge_types import (
    CARTRIDGE_TYPE_CODES,
    CARTRIDGE_TYPES,
    Provenance,
    cartridge_type_name,
    resolve_cartridge_type,
    tpp1_features,
)
from rgbfix.literals import LiteralError


@pytest.mark.parametrize("name,code", sorted(CARTRIDGE_TYPE_CODES.items()))
def test_every_name_resolves_to_its_code(name, code):
    resolved = resolve_cartridge_type(name)
    assert resolved.value == code
    assert resolved.provenance is Provenance.NAMED
    assert resolved.warning is None
    assert not resolved.bit_flags


def test_documented_codes():
    assert resolve_cartridge_type("MBC1").value == 0x01
    assert resolve_cartridge_type("MBC3+TIMER+RAM+BATTERY").value == 0x10
    assert resolve_cartridge_type("MBC5+RUMBLE+RAM+BATTERY").value == 0x1E
    assert resolve_cartridge_type("MBC7+SENSOR+RUMBLE+RAM+BATTERY").value == 0x22
    assert resolve_cartridge_type("HUC1+RAM+BATTERY").value == 0xFF


def test_case_and_whitespace_insensitive():
    expected = resolve_cartridge_type("MBC5+RAM+BATTERY")
    for spelling in ["mbc5+ram+battery", " MBC5 + RAM + BATTERY ", "Mbc5\t+Ram\n+Battery"]:
        resolved = resolve_cartridge_type(spelling)
        assert resolved.value == expected.value == 0x1B
        assert resolved.provenance is Provenance.NAMED
    assert resolve_cartridge_type("ROM ONLY").value == 0x00
    assert resolve_cartridge_type("pocket camera").value == 0xFC


def test_numeric_literal_is_used_directly():
    for text in ["0x1B", "$1B", "27", "0b11011"]:
        resolved = resolve_cartridge_type(text)
        assert resolved.value == 0x1B
        assert resolved.provenance is Provenance.LITERAL
        assert resolved.error is None


def test_out_of_range_literal_reports_error():
    resolved = resolve_cartridge_type("0x1FF")
    assert resolved.error is LiteralError.OUT_OF_RANGE


def test_unknown_name_defaults_with_one_warning():
    resolved = resolve_cartridge_type("MBC9+LASER")
    assert resolved.value == 0x00
    assert resolved.provenance is Provenance.DEFAULT
    assert resolved.warning == "Unknown MBC type 'MBC9+LASER', defaulting to ROM ONLY (0x00)"


def test_tpp1_features():
    assert tpp1_features("TPP1") == 0x00
    assert tpp1_features("TPP1+BATTERY") == 0x08
    assert tpp1_features("TPP1+TIMER+BATTERY") == 0x0C
    assert tpp1_features("TPP1+MULTIRUMBLE") == 0x03
    assert tpp1_features("TPP1+RUMBLE+MULTIRUMBLE") == 0x03
    assert tpp1_features("TPP1+RAM+RUMBLE") == 0x01
    assert tpp1_features("TPP1+WHATEVER") == 0x00


def test_tpp1_variant():
    resolved = resolve_cartridge_type("tpp1_1.0 + battery + timer + multi rumble")
    assert resolved.bit_flags
    assert resolved.value == 0x0F
    assert resolved.warning is None


def test_cartridge_type_name():
    assert cartridge_type_name(0x1B) == "MBC5+RAM+BATTERY"
    assert cartridge_type_name(0x42) == "Unknown(0x42)"
    # every named code has a display name
    assert set(CARTRIDGE_TYPE_CODES.values()) <= set(CARTRIDGE_TYPES)
