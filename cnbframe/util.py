"""Small helpers shared across the package."""

from __future__ import annotations

from collections.abc import Callable
from typing import TypeVar

T = TypeVar("T")


def default_on_not_found(action: Callable[[], T], default: T) -> T:
    """Run ``action`` and return ``default`` if it raises ``FileNotFoundError``.

    Any other error propagates.
    """
    try:
        return action()
    except FileNotFoundError:
        return default