"""A plain collection of environment variables."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping


class Env:
    """A mapping of environment variable names to values.

    Later insertions of the same name replace earlier ones.
    """

    def __init__(
        self,
        variables: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ) -> None:
        self._vars: dict[str, str] = dict(variables or {})

    @classmethod
    def from_current(cls) -> Env:
        """Snapshot the environment of the current process."""
        return cls(os.environ)

    def insert(self, key: str, value: str) -> Env:
        """Set ``key`` to ``value``, replacing any previous value."""
        self._vars[str(key)] = str(value)
        return self

    def get(self, key: str) -> str | None:
        """Return the value for ``key``, or ``None`` if it is not set."""
        return self._vars.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over ``(name, value)`` pairs."""
        return iter(self._vars.items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Env):
            return NotImplemented
        return self._vars == other._vars

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Env({self._vars!r})"