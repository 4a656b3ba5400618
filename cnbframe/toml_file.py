"""Reading and writing TOML files."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any

import tomli_w


class TomlFileError(Exception):
    """Reading or writing a TOML file failed."""


def write_toml_file(value: dict[str, Any], path: str | Path) -> None:
    """Serialize ``value`` as TOML and write it to ``path``."""
    try:
        contents = tomli_w.dumps(value)
    except (TypeError, ValueError) as error:
        raise TomlFileError(
            f"TOML serialization error while writing TOML file: {error}"
        ) from error
    try:
        Path(path).write_text(contents, encoding="utf-8")
    except OSError as error:
        raise TomlFileError(
            f"IO error while reading/writing TOML file: {error}"
        ) from error


def read_toml_file(path: str | Path) -> dict[str, Any]:
    """Read and parse the TOML file at ``path``."""
    try:
        contents = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise TomlFileError(
            f"IO error while reading/writing TOML file: {error}"
        ) from error
    try:
        return tomllib.loads(contents)
    except tomllib.TOMLDecodeError as error:
        raise TomlFileError(
            f"TOML deserialization error while reading TOML file: {error}"
        ) from error