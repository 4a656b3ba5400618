"""Reading, writing and deleting layers on disk."""

from __future__ import annotations

import shutil
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

from cnbframe.layer import LayerContentMetadata, LayerData
from cnbframe.layer_env import LayerEnv
from cnbframe.toml_file import TomlFileError, write_toml_file
from cnbframe.util import default_on_not_found


class HandleLayerError(Exception):
    """Handling a layer failed for a reason outside the buildpack's control."""


class UnexpectedMissingLayerError(HandleLayerError):
    """A layer was expected to be present, but it was missing."""

    def __init__(self) -> None:
        super().__init__("Expected layer to be present, but it was missing")


class ReadLayerError(HandleLayerError):
    """A layer could not be read from disk."""


class LayerContentMetadataParseError(ReadLayerError):
    """The layer content metadata could not be parsed."""

    def __init__(self, cause: Exception) -> None:
        self.cause = cause
        super().__init__(f"Layer content metadata could not be parsed! {cause}")


class WriteLayerError(HandleLayerError):
    """A layer could not be written to disk."""


class MissingExecDFileError(WriteLayerError):
    """An exec.d program to copy into a layer does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Cannot find exec.d file for copying: {path}")


def _layer_paths(layers_dir: str | Path, layer_name: str) -> tuple[Path, Path]:
    layers_dir = Path(layers_dir)
    return layers_dir / layer_name, layers_dir / f"{layer_name}.toml"


def delete_layer(layers_dir: str | Path, layer_name: str) -> None:
    """Remove a layer's directory and metadata file; missing parts are fine."""
    layer_dir, layer_toml = _layer_paths(layers_dir, layer_name)
    try:
        default_on_not_found(lambda: shutil.rmtree(layer_dir), None)
        default_on_not_found(layer_toml.unlink, None)
    except OSError as error:
        raise HandleLayerError(
            f"Unexpected IoError while handling layer: {error}"
        ) from error


def write_layer(
    layers_dir: str | Path,
    layer_name: str,
    layer_env: LayerEnv,
    content_metadata: LayerContentMetadata[Any],
    exec_d_programs: Mapping[str, str | Path] | None,
) -> None:
    """Write a layer's environment, content metadata and exec.d programs.

    ``content_metadata.metadata`` must already be TOML-serializable.
    ``exec_d_programs`` of ``None`` keeps the existing exec.d directory;
    a mapping replaces it with copies of the given files.
    """
    layer_dir, layer_toml = _layer_paths(layers_dir, layer_name)

    try:
        layer_dir.mkdir(parents=True, exist_ok=True)
        layer_env.write_to_layer_dir(layer_dir)
    except OSError as error:
        raise WriteLayerError(
            f"Unexpected IoError while writing layer metadata: {error}"
        ) from error

    try:
        write_toml_file(content_metadata.to_toml(), layer_toml)
    except TomlFileError as error:
        raise WriteLayerError(
            f"Error while writing layer content metadata TOML: {error}"
        ) from error

    if exec_d_programs is None:
        return

    exec_d_dir = layer_dir / "exec.d"
    try:
        if exec_d_dir.is_dir():
            shutil.rmtree(exec_d_dir)

        if exec_d_programs:
            exec_d_dir.mkdir(parents=True, exist_ok=True)
            for name, source in exec_d_programs.items():
                source = Path(source)
                if not source.exists():
                    raise MissingExecDFileError(source)
                shutil.copy(source, exec_d_dir / name)
    except OSError as error:
        raise WriteLayerError(
            f"Unexpected IoError while writing layer metadata: {error}"
        ) from error


def read_layer(
    layers_dir: str | Path,
    layer_name: str,
    parse_metadata: Callable[[Any], Any] | None = None,
) -> LayerData[Any] | None:
    """Read a layer from disk, or return ``None`` if it does not exist.

    A metadata file without a layer directory is removed and the layer is
    treated as absent. A layer directory without a metadata file gets an
    empty one.
    """
    layer_dir, layer_toml = _layer_paths(layers_dir, layer_name)

    try:
        if not layer_dir.exists():
            if layer_toml.exists():
                layer_toml.unlink()
            return None

        if not layer_toml.exists():
            layer_toml.write_text("", encoding="utf-8")

        contents = layer_toml.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as error:
        raise ReadLayerError(
            f"Unexpected IoError while reading layer: {error}"
        ) from error

    try:
        content_metadata = LayerContentMetadata.from_toml(
            tomllib.loads(contents), parse_metadata
        )
    except (tomllib.TOMLDecodeError, ValueError) as error:
        raise LayerContentMetadataParseError(error) from error

    try:
        layer_env = LayerEnv.read_from_layer_dir(layer_dir)
    except OSError as error:
        raise ReadLayerError(
            f"Unexpected IoError while reading layer: {error}"
        ) from error

    return LayerData(
        name=layer_name,
        path=layer_dir,
        env=layer_env,
        content_metadata=content_metadata,
    )