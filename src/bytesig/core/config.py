"""Scan defaults loaded from a YAML config file."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from bytesig.core.io import DEFAULT_PAGE_SIZE


class ConfigError(ValueError):
    """Config file could not be loaded. `errors` lists every problem found."""

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


@dataclass(frozen=True)
class ScanConfig:
    chunk_size: int = DEFAULT_PAGE_SIZE
    use_mmap: bool = True
    unknown_marker: str = "?"
    log_level: str = "WARNING"


def get_user_config_path() -> Path:
    """Platform-appropriate default config location."""
    if os.name == "nt":  # Windows
        base = os.environ.get("APPDATA", os.path.expanduser("~"))
        return Path(base) / "bytesig" / "config.yaml"
    return Path.home() / ".config" / "bytesig" / "config.yaml"


def parse_config(text: str) -> ScanConfig:
    """Validate YAML text and build a ScanConfig. Unknown keys are ignored."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError([f"YAML parse error: {e}"]) from None
    if data is None:
        return ScanConfig()
    if not isinstance(data, dict):
        raise ConfigError(["Top-level YAML must be a mapping."])

    errors: list[str] = []
    values: dict[str, Any] = {}

    if "chunk_size" in data:
        v = data["chunk_size"]
        if isinstance(v, bool) or not isinstance(v, int) or v <= 0:
            errors.append(f"chunk_size must be a positive integer, got {v!r}")
        else:
            values["chunk_size"] = v

    if "use_mmap" in data:
        v = data["use_mmap"]
        if not isinstance(v, bool):
            errors.append(f"use_mmap must be true or false, got {v!r}")
        else:
            values["use_mmap"] = v

    if "unknown_marker" in data:
        v = data["unknown_marker"]
        if not isinstance(v, str) or len(v) != 1 or ord(v) > 0xFF:
            errors.append(f"unknown_marker must be a single character, got {v!r}")
        else:
            values["unknown_marker"] = v

    if "log_level" in data:
        v = data["log_level"]
        if not isinstance(v, str) or not isinstance(logging.getLevelName(v.upper()), int):
            errors.append(f"log_level must be a logging level name, got {v!r}")
        else:
            values["log_level"] = v.upper()

    if errors:
        raise ConfigError(errors)
    return ScanConfig(**values)


def load_config(path: str | os.PathLike[str] | None = None) -> ScanConfig:
    """Load config from `path`, or from the user config file if present.

    An explicit path must exist; a missing default file means defaults.
    """
    if path is None:
        default = get_user_config_path()
        if not default.is_file():
            return ScanConfig()
        target = default
    else:
        target = Path(path)
        if not target.is_file():
            raise ConfigError([f"Config file not found: {target}"])
    return parse_config(target.read_text(encoding="utf-8"))
