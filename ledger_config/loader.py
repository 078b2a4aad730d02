"""
Configuration Loader (``ledger_config.loader``).

Responsibility
--------------
Reads a YAML settings file and parses it into the frozen dataclasses of
``ledger_config.schema``.  The single public entry point for runtime
configuration is ``ledger_config.get_active_settings()``; callers should
not use the loader directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or wrongly typed values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from ledger_config.schema import DatabaseSettings, LedgerSettings, MoneySettings


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping, got {type(data).__name__}")
    return data


def _parse_section(cls: type, data: Any, section: str) -> Any:
    if data is None:
        return cls()
    if not isinstance(data, dict):
        raise ValueError(f"Section {section!r} must be a mapping")

    known = {f.name: f for f in fields(cls)}
    unknown = sorted(set(data) - set(known))
    if unknown:
        raise ValueError(f"Unknown key(s) in {section!r}: {', '.join(unknown)}")

    defaults = cls()
    for key, value in data.items():
        expected = type(getattr(defaults, key))
        # bool is an int subclass; keep the two apart
        if type(value) is not expected:
            raise ValueError(
                f"{section}.{key} must be {expected.__name__}, got {type(value).__name__}"
            )
    return cls(**data)


def parse_settings(data: dict[str, Any]) -> LedgerSettings:
    """
    Parse a LedgerSettings from a dict.

    Missing sections and keys take their dataclass defaults.
    """
    unknown = sorted(set(data) - {"money", "database"})
    if unknown:
        raise ValueError(f"Unknown top-level key(s): {', '.join(unknown)}")
    return LedgerSettings(
        money=_parse_section(MoneySettings, data.get("money"), "money"),
        database=_parse_section(DatabaseSettings, data.get("database"), "database"),
        checksum=compute_checksum(data),
    )


def load_settings(path: Path) -> LedgerSettings:
    return parse_settings(load_yaml_file(path))


def compute_checksum(data: dict[str, Any]) -> str:
    """SHA-256 of the canonical JSON form; identical data, identical checksum."""
    canonical = json.dumps(data, sort_keys=True, default=str)
    return hashlib.sha256(canonical.encode()).hexdigest()
