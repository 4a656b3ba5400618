"""The platform a buildpack runs on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Self

from cnbframe.env import Env


class Platform(ABC):
    """A buildpack platform; every platform provides environment variables."""

    @property
    @abstractmethod
    def env(self) -> Env:
        """The environment variables the platform provides."""

    @classmethod
    @abstractmethod
    def from_path(cls, platform_dir: str | Path) -> Self:
        """Create the platform from the given platform directory."""


def read_platform_env(platform_dir: str | Path) -> Env:
    """Read the variables in ``<platform_dir>/env`` into an ``Env``.

    Each regular file is one variable, named after the file. Directories,
    including symlinks to directories, are skipped. A missing ``env``
    directory yields an empty ``Env``.
    """
    env_dir = Path(platform_dir) / "env"
    env = Env()
    try:
        entries = list(env_dir.iterdir())
    except FileNotFoundError:
        return env

    for entry in entries:
        if entry.is_file():
            env.insert(entry.name, entry.read_text(encoding="utf-8"))
    return env