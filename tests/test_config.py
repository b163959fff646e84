import pytest

from rgbfix.config import ConfigError, build_directives, directives_from_mapping, load_profile
from rgbfix.patcher import FixDirectives


def test_load_profile(tmp_path):
    path = tmp_path / "fix.yaml"
    path.write_text(
        "title: POKEMON RED\n"
        "mbc-type: MBC3 + RAM + BATTERY\n"
        "ram_size: 3\n"
        "pad-value: 0xFF\n"
        "old-licensee: '0x33'\n"
        "validate: true\n",
        encoding="utf-8",
    )
    profile = load_profile(path)
    assert profile == {
        "title": "POKEMON RED",
        "mbc_type": "MBC3 + RAM + BATTERY",
        "ram_size": "3",
        "pad_value": "255",
        "old_licensee": "0x33",
        "validate": True,
    }


def test_empty_profile(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")
    assert load_profile(path) == {}


@pytest.mark.parametrize("text", ["- title\n- other\n", "bogus: 1\n", "validate: yes please\n", "title: [1, 2]\n", "a: [\n"])
def test_bad_profiles(tmp_path, text):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError):
        load_profile(path)


@pytest.mark.parametrize("text", ["new-licensee: 01\n", "game-id: 0042\n", "title: 1999\n", "fix-spec: 1\n"])
def test_unquoted_numbers_in_text_fields_are_rejected(tmp_path, text):
    path = tmp_path / "fix.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="quote it"):
        load_profile(path)


def test_quoted_text_fields_are_kept_verbatim(tmp_path):
    path = tmp_path / "fix.yaml"
    path.write_text("new-licensee: '01'\ngame-id: \"0042\"\n", encoding="utf-8")
    assert load_profile(path) == {"new_licensee": "01", "game_id": "0042"}


def test_unreadable_profile(tmp_path):
    with pytest.raises(ConfigError, match="Cannot read"):
        load_profile(tmp_path)
    path = tmp_path / "latin1.yaml"
    path.write_bytes(b"title: caf\xe9\n")
    with pytest.raises(ConfigError, match="Cannot read"):
        load_profile(path)


def test_null_values_are_kept_unset():
    assert directives_from_mapping({"title": None}) == {"title": None}


def test_overrides_win():
    profile = {"title": "FROM FILE", "game_id": "FILE", "color_only": True}
    directives = build_directives(profile, title="FROM CLI", game_id=None, color_only=False, validate=True)
    assert directives == FixDirectives(title="FROM CLI", game_id="FILE", color_only=True, validate=True)


def test_no_profile():
    assert build_directives(None, title="X") == FixDirectives(title="X")
