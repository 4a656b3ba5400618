"""Environment variable modifications as described by a layer env directory."""

from __future__ import annotations

import functools
import shutil
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from cnbframe.env import Env


@functools.total_ordering
class ModificationBehavior(Enum):
    """How a layer modifies an environment variable.

    The value is the file extension used on disk.
    """

    APPEND = "append"
    DEFAULT = "default"
    DELIMITER = "delim"
    OVERRIDE = "override"
    PREPEND = "prepend"

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ModificationBehavior):
            return NotImplemented
        return _ORDER[self] < _ORDER[other]


_ORDER = {
    ModificationBehavior.APPEND: 0,
    ModificationBehavior.DEFAULT: 1,
    ModificationBehavior.DELIMITER: 2,
    ModificationBehavior.OVERRIDE: 3,
    ModificationBehavior.PREPEND: 4,
}


class Scope(Enum):
    """The scope an environment modification applies to."""

    ALL = "all"
    BUILD = "build"
    LAUNCH = "launch"


@dataclass(frozen=True)
class ProcessScope:
    """Scope limited to a single launch process type."""

    name: str


def _split_file_name(name: str) -> tuple[str, str | None]:
    """Split a file name into stem and extension at the last dot."""
    index = name.rfind(".")
    if index <= 0:
        return name, None
    return name[:index], name[index + 1 :]


def _entry_sort_key(item: tuple[tuple[ModificationBehavior, str], str]):
    (behavior, name), _ = item
    return _ORDER[behavior], name


@dataclass
class LayerEnvDelta:
    """A set of modifications keyed by behavior and variable name."""

    entries: dict[tuple[ModificationBehavior, str], str] = field(default_factory=dict)

    def insert(
        self, behavior: ModificationBehavior, name: str, value: str
    ) -> LayerEnvDelta:
        """Add or replace the entry for ``behavior`` and ``name``."""
        self.entries[(behavior, str(name))] = str(value)
        return self

    def _sorted_entries(self):
        return sorted(self.entries.items(), key=_entry_sort_key)

    def apply(self, env: Env) -> Env:
        """Return a new ``Env`` with these modifications applied to ``env``."""
        result = Env(env.items())

        for (behavior, name), value in self._sorted_entries():
            previous = result.get(name) or ""
            match behavior:
                case ModificationBehavior.OVERRIDE:
                    result.insert(name, value)
                case ModificationBehavior.DEFAULT:
                    if name not in result:
                        result.insert(name, value)
                case ModificationBehavior.APPEND:
                    if previous:
                        previous += self.delimiter_for(name)
                    result.insert(name, previous + value)
                case ModificationBehavior.PREPEND:
                    new_value = value
                    if previous:
                        new_value += self.delimiter_for(name) + previous
                    result.insert(name, new_value)
                case ModificationBehavior.DELIMITER:
                    pass

        return result

    def delimiter_for(self, name: str) -> str:
        """Return the delimiter configured for ``name``, or an empty string."""
        return self.entries.get((ModificationBehavior.DELIMITER, name), "")

    @classmethod
    def read_from_env_dir(cls, path: str | Path) -> LayerEnvDelta:
        """Read a delta from an ``env`` directory.

        File contents are taken verbatim; files with unknown extensions are ignored.
        """
        delta = cls()
        for entry in Path(path).iterdir():
            contents = entry.read_bytes().decode("utf-8", "surrogateescape")
            stem, extension = _split_file_name(entry.name)
            if extension is None:
                behavior = ModificationBehavior.OVERRIDE
            else:
                try:
                    behavior = ModificationBehavior(extension)
                except ValueError:
                    continue
            delta.insert(behavior, stem, contents)
        return delta

    def write_to_env_dir(self, path: str | Path) -> None:
        """Write this delta to ``path``, replacing whatever was there.

        No directory is created when the delta is empty.
        """
        target = Path(path)
        if target.exists():
            shutil.rmtree(target)

        if not self.entries:
            return

        target.mkdir(parents=True, exist_ok=True)
        for (behavior, name), value in self._sorted_entries():
            file_path = target / f"{name}.{behavior.value}"
            file_path.write_bytes(value.encode("utf-8", "surrogateescape"))