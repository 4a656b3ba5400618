"""Generic implementations of framework types."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeAlias

from cnbframe.env import Env
from cnbframe.platform import Platform, read_platform_env

GenericMetadata: TypeAlias = dict[str, Any] | None
"""Untyped TOML metadata: a table, or ``None`` when absent."""


class GenericPlatform(Platform):
    """A platform that only provides access to environment variables."""

    def __init__(self, env: Env) -> None:
        self._env = env

    @property
    def env(self) -> Env:
        return self._env

    @classmethod
    def from_path(cls, platform_dir: str | Path) -> GenericPlatform:
        """Read the platform's environment from ``<platform_dir>/env``."""
        return cls(read_platform_env(platform_dir))

    def __repr__(self) -> str:
        return f"GenericPlatform({self._env!r})"