"""Output of exec.d programs."""

from __future__ import annotations

import os
from collections.abc import Mapping

import tomli_w

_EXEC_D_OUTPUT_FD = 3


def write_exec_d_program_output(output: Mapping[str, str]) -> None:
    """Write an exec.d program's variables as TOML to file descriptor 3.

    The descriptor is closed afterwards.
    """
    serialized = tomli_w.dumps(dict(output))
    with os.fdopen(_EXEC_D_OUTPUT_FD, "w", encoding="utf-8") as stream:
        stream.write(serialized)