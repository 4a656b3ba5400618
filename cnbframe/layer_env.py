"""Layer environment variables held in memory and read from or written to disk."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from cnbframe.delta import LayerEnvDelta, ModificationBehavior, ProcessScope, Scope
from cnbframe.env import Env

PATH_LIST_SEPARATOR = os.pathsep

# (variable name, scope, sub-directory of the layer) for the standard layer paths.
_LAYER_PATH_SPECS = (
    ("PATH", Scope.BUILD, "bin"),
    ("LIBRARY_PATH", Scope.BUILD, "lib"),
    ("LD_LIBRARY_PATH", Scope.BUILD, "lib"),
    ("CPATH", Scope.BUILD, "include"),
    ("PKG_CONFIG_PATH", Scope.BUILD, "pkgconfig"),
    ("PATH", Scope.LAUNCH, "bin"),
    ("LD_LIBRARY_PATH", Scope.LAUNCH, "lib"),
)


@dataclass
class LayerEnv:
    """Environment variable modifications of a buildpack layer.

    This is a delta, not a fixed set of variables: apply it to an ``Env``
    for a given scope to obtain the modified environment.
    """

    _all: LayerEnvDelta = field(default_factory=LayerEnvDelta, init=False)
    _build: LayerEnvDelta = field(default_factory=LayerEnvDelta, init=False)
    _launch: LayerEnvDelta = field(default_factory=LayerEnvDelta, init=False)
    _process: dict[str, LayerEnvDelta] = field(default_factory=dict, init=False)
    # Implicit entries for the standard layer directories; only filled when
    # read from disk.
    _layer_paths_build: LayerEnvDelta = field(default_factory=LayerEnvDelta, init=False)
    _layer_paths_launch: LayerEnvDelta = field(
        default_factory=LayerEnvDelta, init=False
    )

    def _deltas_for(self, scope: Scope | ProcessScope) -> list[LayerEnvDelta]:
        if isinstance(scope, ProcessScope):
            deltas = [self._all]
            process_delta = self._process.get(scope.name)
            if process_delta is not None:
                deltas.append(process_delta)
            return deltas
        match scope:
            case Scope.ALL:
                return [self._all]
            case Scope.BUILD:
                return [self._all, self._build, self._layer_paths_build]
            case Scope.LAUNCH:
                return [self._all, self._launch, self._layer_paths_launch]
        raise ValueError(f"unknown scope: {scope!r}")

    def apply(self, scope: Scope | ProcessScope, env: Env) -> Env:
        """Return a new ``Env`` with this layer's modifications for ``scope`` applied."""
        result = Env(env.items())
        for delta in self._deltas_for(scope):
            result = delta.apply(result)
        return result

    def apply_to_empty(self, scope: Scope | ProcessScope) -> Env:
        """Apply this layer's modifications for ``scope`` to an empty ``Env``."""
        return self.apply(scope, Env())

    def insert(
        self,
        scope: Scope | ProcessScope,
        behavior: ModificationBehavior,
        name: str,
        value: str,
    ) -> None:
        """Add an entry, replacing one with the same scope, behavior and name."""
        if isinstance(scope, ProcessScope):
            target = self._process.setdefault(scope.name, LayerEnvDelta())
        else:
            match scope:
                case Scope.ALL:
                    target = self._all
                case Scope.BUILD:
                    target = self._build
                case Scope.LAUNCH:
                    target = self._launch
                case _:
                    raise ValueError(f"unknown scope: {scope!r}")
        target.insert(behavior, name, value)

    def chainable_insert(
        self,
        scope: Scope | ProcessScope,
        behavior: ModificationBehavior,
        name: str,
        value: str,
    ) -> LayerEnv:
        """Like :meth:`insert`, but return ``self`` so calls can be chained."""
        self.insert(scope, behavior, name, value)
        return self

    @classmethod
    def read_from_layer_dir(cls, layer_dir: str | Path) -> LayerEnv:
        """Build a ``LayerEnv`` from a layer directory.

        Standard sub-directories such as ``bin`` add implicit entries when present.
        """
        layer_dir = Path(layer_dir)
        layer_env = cls()

        for name, scope, sub_dir in _LAYER_PATH_SPECS:
            path = layer_dir / sub_dir
            if not path.is_dir():
                continue
            target = (
                layer_env._layer_paths_build
                if scope is Scope.BUILD
                else layer_env._layer_paths_launch
            )
            target.insert(ModificationBehavior.PREPEND, name, str(path))
            target.insert(ModificationBehavior.DELIMITER, name, PATH_LIST_SEPARATOR)

        env_dir = layer_dir / "env"
        if env_dir.is_dir():
            layer_env._all = LayerEnvDelta.read_from_env_dir(env_dir)

        env_build_dir = layer_dir / "env.build"
        if env_build_dir.is_dir():
            layer_env._build = LayerEnvDelta.read_from_env_dir(env_build_dir)

        env_launch_dir = layer_dir / "env.launch"
        if env_launch_dir.is_dir():
            layer_env._launch = LayerEnvDelta.read_from_env_dir(env_launch_dir)

        return layer_env

    def write_to_layer_dir(self, layer_dir: str | Path) -> None:
        """Write this ``LayerEnv`` into ``layer_dir``.

        Existing env directories of the layer are replaced.
        """
        layer_dir = Path(layer_dir)
        self._all.write_to_env_dir(layer_dir / "env")
        self._build.write_to_env_dir(layer_dir / "env.build")

        launch_dir = layer_dir / "env.launch"
        self._launch.write_to_env_dir(launch_dir)

        for process_name, delta in self._process.items():
            delta.write_to_env_dir(launch_dir / process_name)