# cnbframe

`cnbframe` provides building blocks for writing Cloud Native Buildpacks in
Python. It covers the parts of the buildpack interface that deal with
environments and layers:

- a plain collection of environment variables (`Env`),
- layer environment modifications (`env/`, `env.build/`, `env.launch/`),
  read from and written to disk, including the implicit `bin`, `lib`,
  `include` and `pkgconfig` entries,
- reading the platform environment (`<platform>/env/*`),
- the types a layer implementation works with, and reading, writing and
  deleting layers and their `<layer>.toml` content metadata,
- reading and writing TOML files,
- writing the output of exec.d programs.

## Environments

`cnbframe.env.Env` maps variable names to values. `insert` sets a value (and
returns the `Env`, so calls can be chained), `get` returns a value or `None`,
and `in`, `len()`, iteration over names and `items()` work as for a mapping.
`Env.from_current()` takes a snapshot of the process environment.

`cnbframe.layer_env.LayerEnv` is not a set of variables but a *delta*: it
describes how a layer changes an environment, and it is applied to an `Env`
for a scope, giving a new `Env`.

```python
from cnbframe.delta import ModificationBehavior, Scope
from cnbframe.env import Env
from cnbframe.layer_env import LayerEnv

layer_env = LayerEnv()
layer_env.insert(Scope.ALL, ModificationBehavior.APPEND, "VAR", "bar")
layer_env.insert(Scope.ALL, ModificationBehavior.DEFAULT, "VAR2", "default")

env = Env()
env.insert("VAR", "foo")
env.insert("VAR2", "previous-value")

modified = layer_env.apply(Scope.BUILD, env)
assert modified.get("VAR") == "foobar"
assert modified.get("VAR2") == "previous-value"
```

Scopes are `Scope.ALL`, `Scope.BUILD`, `Scope.LAUNCH` and
`ProcessScope(name)` for a single process type (all in `cnbframe.delta`).
Applying for `BUILD` or `LAUNCH` applies the `ALL` entries first, then the
scope's own. `apply_to_empty(scope)` applies to an empty `Env`, and
`chainable_insert` is `insert` returning the `LayerEnv`.

For each scope the modifications are applied in a fixed order: append,
default, delimiter, override, prepend (`ModificationBehavior` sorts in that
order), and by name within each. A delimiter set for a variable is placed
between the old and the new value when appending or prepending.

`LayerEnv.read_from_layer_dir(path)` reads a layer directory. If `bin`,
`lib`, `include` or `pkgconfig` exist, the matching path variables (`PATH`,
`LIBRARY_PATH`, `LD_LIBRARY_PATH`, `CPATH`, `PKG_CONFIG_PATH` for build;
`PATH` and `LD_LIBRARY_PATH` for launch) are prepended with the directory,
using `os.pathsep` as the delimiter. Files in `env`, `env.build` and
`env.launch` are read verbatim; the file extension (`.append`, `.default`,
`.delim`, `.override`, `.prepend`, or none for override) gives the behavior,
and files with other extensions are ignored.

`LayerEnv.write_to_layer_dir(path)` replaces those directories with the
in-memory entries, writing process-specific entries under
`env.launch/<process>`. Empty directories are not created.

The per-directory logic is available on its own as
`cnbframe.delta.LayerEnvDelta` (`insert`, `apply`, `delimiter_for`,
`read_from_env_dir`, `write_to_env_dir`).

## Platforms

`cnbframe.platform.Platform` is the abstract base for a platform: it has an
`env` property and a `from_path(platform_dir)` class method.
`read_platform_env(platform_dir)` reads each regular file in
`<platform_dir>/env` as one variable named after the file; directories and
symlinks to directories are skipped, and a missing `env` directory gives an
empty `Env`.

`cnbframe.generic.GenericPlatform` is a platform that only provides those
variables. `GenericMetadata` is the type alias for untyped TOML metadata (a
table or `None`).

## Layers

`cnbframe.layer` holds the types a layer is written with:

- `LayerTypes(launch, build, cache)`,
- `LayerContentMetadata(types, metadata)`, with `from_toml(data,
  parse_metadata)` and `to_toml(dump_metadata)` to convert from and to a TOML
  table; `from_toml` raises `ValueError` when the data does not fit,
- `ExistingLayerStrategy` (`KEEP`, `RECREATE`, `UPDATE`),
- `RecreateLayer` and `ReplaceMetadata(metadata)` as outcomes of a metadata
  migration,
- `LayerData(name, path, env, content_metadata)` and
  `LayerResult(metadata, env, exec_d_programs)`,
- `LayerResultBuilder(metadata)`, with `env(layer_env)`,
  `exec_d_program(name, path)` and `build()`.

A layer subclasses `Layer` and implements `types()` and
`create(context, layer_path)`. The defaults of the other methods are:
`existing_layer_strategy` returns `RECREATE`, `update` returns copies of the
existing metadata and environment, `migrate_incompatible_metadata` returns
`RecreateLayer()`, and `parse_metadata` / `dump_metadata` pass the raw TOML
value through. Layers whose metadata is not a plain table override those two.

`cnbframe.layer_io` works with layers in a layers directory:

```python
from pathlib import Path

from cnbframe.delta import ModificationBehavior, Scope
from cnbframe.layer import LayerContentMetadata, LayerTypes
from cnbframe.layer_env import LayerEnv
from cnbframe.layer_io import delete_layer, read_layer, write_layer

layers_dir = Path("layers")

write_layer(
    layers_dir,
    "deps",
    LayerEnv().chainable_insert(
        Scope.ALL, ModificationBehavior.OVERRIDE, "FOO", "bar"
    ),
    LayerContentMetadata(
        types=LayerTypes(launch=True, cache=True), metadata={"version": "1.0"}
    ),
    {},
)

layer_data = read_layer(layers_dir, "deps")
assert layer_data.content_metadata.metadata == {"version": "1.0"}

delete_layer(layers_dir, "deps")
assert read_layer(layers_dir, "deps") is None
```

- `write_layer` creates the layer directory, writes its environment and the
  `<layer>.toml` file (the metadata must already be TOML-serializable). With
  a mapping of exec.d programs it replaces the `exec.d` directory with copies
  of those files and raises `MissingExecDFileError` for a file that does not
  exist; with `None` it leaves `exec.d` as it is.
- `read_layer` returns `None` for a missing layer. A `<layer>.toml` without a
  layer directory is removed and the layer counts as missing; a layer
  directory without `<layer>.toml` gets an empty one. Unparsable content
  metadata raises `LayerContentMetadataParseError`.
- `delete_layer` removes the directory and the metadata file; missing parts
  are not an error.

All errors derive from `HandleLayerError`; the others are
`UnexpectedMissingLayerError`, `ReadLayerError` and `WriteLayerError`.

## TOML files and helpers

`cnbframe.toml_file.read_toml_file(path)` and `write_toml_file(value, path)`
read and write TOML tables and raise `TomlFileError` on I/O, parse or
serialization failures. `cnbframe.util.default_on_not_found(action, default)`
runs `action` and returns `default` if it raises `FileNotFoundError`.

## exec.d programs

A program added with `LayerResultBuilder.exec_d_program` is copied into the
layer's `exec.d` directory by `write_layer`. Such a program reports its
variables with `cnbframe.exec_d.write_exec_d_program_output(output)`, which
writes the mapping as TOML to file descriptor 3 and closes it.

## What this package does not do

The package provides the pieces above but not the parts that drive a build:

- nothing takes a `Layer` through its life cycle (reading the existing
  layer, choosing keep, update or recreate, migrating metadata, calling
  `create` or `update`); the `context` argument of `Layer` methods is not
  supplied by the package,
- there is no build context, no buildpack base class and no detect or build
  phase,
- there is no executable entry point, no argument parsing for the phases,
  no check of the buildpack API and no mapping of failures to exit codes,
- `launch.toml`, `store.toml` and build plans are not written.

## Requirements

Python 3.11 or later on a POSIX system. TOML is read with the standard
library and written with `tomli-w`.