"""YAML fix profiles.

A profile is a mapping of FixDirectives fields, for example:

    title: POKEMON RED
    mbc-type: MBC3 + RAM + BATTERY
    ram-size: 3
    pad-value: 0xFF
    validate: true

Command-line options override the profile.
"""
import dataclasses
from pathlib import Path
from typing import Any

import yaml

from .patcher import FixDirectives

_BOOL_FIELDS = {f.name for f in dataclasses.fields(FixDirectives) if f.type in (bool, "bool")}
# Fields parsed as byte literals; YAML ints are fine here
NUMERIC_FIELDS = {"old_licensee", "ram_size", "rom_version", "pad_value", "mbc_type"}


class ConfigError(ValueError):
    pass


def _normalize_key(key: Any) -> str:
    return str(key).strip().replace("-", "_")


def _coerce(name: str, value: Any) -> Any:
    if name in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise ConfigError(f"'{name}' must be true or false, got {value!r}")
        return value
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # YAML reads 0xFF and 255 as ints; the patcher parses text
    if name in NUMERIC_FIELDS and isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if name in NUMERIC_FIELDS:
        raise ConfigError(f"'{name}' must be a string or number, got {value!r}")
    raise ConfigError(f"'{name}' must be text; quote it in the profile (got {value!r})")


def directives_from_mapping(data: dict[str, Any]) -> dict[str, Any]:
    known = set(FixDirectives.field_names())
    values = {}
    for key, value in data.items():
        name = _normalize_key(key)
        if name not in known:
            raise ConfigError(f"Unknown option '{key}' in fix profile")
        values[name] = _coerce(name, value)
    return values


def load_profile(path: str | Path) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: fix profile must be a mapping of options")
    return directives_from_mapping(data)


def build_directives(profile: dict[str, Any] | None = None, **overrides: Any) -> FixDirectives:
    """Merge profile values with overrides; None/False overrides don't clear the profile."""
    values = dict(profile or {})
    for name, value in overrides.items():
        if value is None or value is False:
            continue
        values[name] = value
    return FixDirectives(**values)
