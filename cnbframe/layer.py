"""Types for implementing buildpack layers."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Generic, TypeVar

from cnbframe.layer_env import LayerEnv

M = TypeVar("M")

_TYPE_FIELDS = ("launch", "build", "cache")


@dataclass(frozen=True)
class LayerTypes:
    """Whether a layer is available at launch, during build, and cached."""

    launch: bool = False
    build: bool = False
    cache: bool = False


@dataclass
class LayerContentMetadata(Generic[M]):
    """The contents of a layer's ``<layer>.toml`` file."""

    types: LayerTypes | None = None
    metadata: M = None  # type: ignore[assignment]

    @classmethod
    def from_toml(
        cls,
        data: dict[str, Any],
        parse_metadata: Callable[[Any], M] | None = None,
    ) -> LayerContentMetadata[M]:
        """Build from a parsed TOML table.

        ``parse_metadata`` turns the raw ``[metadata]`` table (or ``None``)
        into the layer's metadata. Raises ``ValueError`` when the data does
        not fit.
        """
        types = None
        raw_types = data.get("types")
        if raw_types is not None:
            if not isinstance(raw_types, dict):
                raise ValueError("layer types must be a table")
            values = {}
            for name in _TYPE_FIELDS:
                value = raw_types.get(name, False)
                if not isinstance(value, bool):
                    raise ValueError(f"layer type {name!r} must be a boolean")
                values[name] = value
            types = LayerTypes(**values)

        raw_metadata = data.get("metadata")
        if parse_metadata is None:
            metadata = raw_metadata
        else:
            try:
                metadata = parse_metadata(raw_metadata)
            except (KeyError, TypeError, ValueError) as error:
                raise ValueError(f"invalid layer metadata: {error}") from error

        return cls(types=types, metadata=metadata)

    def to_toml(
        self, dump_metadata: Callable[[M], Any] | None = None
    ) -> dict[str, Any]:
        """Return a TOML-serializable table; absent parts are left out."""
        table: dict[str, Any] = {}
        if self.types is not None:
            table["types"] = {
                name: getattr(self.types, name) for name in _TYPE_FIELDS
            }
        raw_metadata = (
            self.metadata if dump_metadata is None else dump_metadata(self.metadata)
        )
        if raw_metadata is not None:
            table["metadata"] = raw_metadata
        return table


class ExistingLayerStrategy(Enum):
    """What to do with a layer that already exists."""

    KEEP = "keep"
    RECREATE = "recreate"
    UPDATE = "update"


@dataclass(frozen=True)
class RecreateLayer:
    """Metadata migration outcome: recreate the layer entirely."""


@dataclass(frozen=True)
class ReplaceMetadata(Generic[M]):
    """Metadata migration outcome: replace the layer's metadata."""

    metadata: M


@dataclass
class LayerData(Generic[M]):
    """Information about an existing layer."""

    name: str
    path: Path
    env: LayerEnv
    content_metadata: LayerContentMetadata[M]


@dataclass
class LayerResult(Generic[M]):
    """What creating or updating a layer produced."""

    metadata: M
    env: LayerEnv | None = None
    exec_d_programs: dict[str, Path] = field(default_factory=dict)


class LayerResultBuilder(Generic[M]):
    """Builds ``LayerResult`` values step by step."""

    def __init__(self, metadata: M) -> None:
        self._metadata = metadata
        self._env: LayerEnv | None = None
        self._exec_d_programs: dict[str, Path] = {}

    def env(self, layer_env: LayerEnv) -> LayerResultBuilder[M]:
        """Set the layer's environment."""
        self._env = layer_env
        return self

    def exec_d_program(self, name: str, path: str | Path) -> LayerResultBuilder[M]:
        """Add an exec.d program, copied into the layer under ``name``."""
        self._exec_d_programs[str(name)] = Path(path)
        return self

    def build(self) -> LayerResult[M]:
        """Return the finished ``LayerResult``."""
        return LayerResult(
            metadata=self._metadata,
            env=self._env,
            exec_d_programs=dict(self._exec_d_programs),
        )


class Layer(ABC, Generic[M]):
    """A buildpack layer: how it is created, updated or kept.

    Subclasses whose metadata is not a plain TOML table override
    :meth:`parse_metadata` and :meth:`dump_metadata`.
    """

    @abstractmethod
    def types(self) -> LayerTypes:
        """Return the layer's types. Must be free of side effects."""

    @abstractmethod
    def create(self, context: Any, layer_path: Path) -> LayerResult[M]:
        """Create the layer from scratch in the empty directory ``layer_path``."""

    def existing_layer_strategy(
        self, context: Any, layer_data: LayerData[M]
    ) -> ExistingLayerStrategy:
        """Decide what to do with an existing layer; recreates by default."""
        return ExistingLayerStrategy.RECREATE

    def update(self, context: Any, layer_data: LayerData[M]) -> LayerResult[M]:
        """Update an existing layer; by default keeps metadata and env as they are."""
        return (
            LayerResultBuilder(copy.deepcopy(layer_data.content_metadata.metadata))
            .env(copy.deepcopy(layer_data.env))
            .build()
        )

    def migrate_incompatible_metadata(
        self, context: Any, metadata: dict[str, Any] | None
    ) -> RecreateLayer | ReplaceMetadata[M]:
        """Handle metadata that could not be parsed; recreates by default."""
        return RecreateLayer()

    def parse_metadata(self, raw: Any) -> M:
        """Turn the raw ``[metadata]`` table into this layer's metadata."""
        return raw

    def dump_metadata(self, metadata: M) -> Any:
        """Turn this layer's metadata into a TOML-serializable value."""
        return metadata