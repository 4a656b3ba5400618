import os

from cnbframe.delta import ModificationBehavior, ProcessScope, Scope
from cnbframe.env import Env
from cnbframe.layer_env import LayerEnv


def sorted_env(env):
    return sorted(env.items())


def test_empty_layer_env_does_not_modify():
    env = Env()
    env.insert("A", "1")
    assert LayerEnv().apply(Scope.BUILD, env) == env


def test_apply_append_and_default():
    layer_env = LayerEnv()
    layer_env.insert(Scope.ALL, ModificationBehavior.APPEND, "VAR", "bar")
    layer_env.insert(Scope.ALL, ModificationBehavior.DEFAULT, "VAR2", "default")

    env = Env()
    env.insert("VAR", "foo")
    env.insert("VAR2", "previous-value")

    modified = layer_env.apply(Scope.BUILD, env)
    assert modified.get("VAR") == "foobar"
    assert modified.get("VAR2") == "previous-value"
    assert env.get("VAR") == "foo"


def test_insert_overrides_same_entry():
    layer_env = LayerEnv()
    layer_env.insert(Scope.ALL, ModificationBehavior.DEFAULT, "VAR", "hello")
    layer_env.insert(Scope.ALL, ModificationBehavior.APPEND, "VAR2", "foo")
    layer_env.insert(Scope.ALL, ModificationBehavior.APPEND, "VAR2", "bar")

    env = layer_env.apply_to_empty(Scope.BUILD)
    assert env.get("VAR") == "hello"
    assert env.get("VAR2") == "bar"


def test_chainable_insert():
    layer_env = (
        LayerEnv()
        .chainable_insert(Scope.ALL, ModificationBehavior.DEFAULT, "VAR", "hello")
        .chainable_insert(Scope.ALL, ModificationBehavior.APPEND, "VAR2", "bar")
    )
    env = layer_env.apply_to_empty(Scope.BUILD)
    assert env.get("VAR") == "hello"
    assert env.get("VAR2") == "bar"


def test_layer_env_insert():
    layer_env = LayerEnv()
    layer_env.insert(
        Scope.BUILD, ModificationBehavior.APPEND, "MAVEN_OPTS", "-Dskip.tests=true"
    )
    layer_env.insert(
        Scope.ALL, ModificationBehavior.OVERRIDE, "JAVA_TOOL_OPTIONS", "-Xmx1G"
    )
    layer_env.insert(
        Scope.BUILD, ModificationBehavior.OVERRIDE, "JAVA_TOOL_OPTIONS", "-Xmx2G"
    )
    layer_env.insert(
        Scope.LAUNCH, ModificationBehavior.APPEND, "JAVA_TOOL_OPTIONS", "-XX:+UseSerialGC"
    )

    result = layer_env.apply_to_empty(Scope.BUILD)
    assert sorted_env(result) == [
        ("JAVA_TOOL_OPTIONS", "-Xmx2G"),
        ("MAVEN_OPTS", "-Dskip.tests=true"),
    ]


def test_process_scope_applies_all_and_process_specific():
    layer_env = LayerEnv()
    layer_env.insert(Scope.ALL, ModificationBehavior.OVERRIDE, "A", "all")
    layer_env.insert(ProcessScope("web"), ModificationBehavior.OVERRIDE, "B", "web")
    layer_env.insert(Scope.LAUNCH, ModificationBehavior.OVERRIDE, "C", "launch")

    assert sorted_env(layer_env.apply_to_empty(ProcessScope("web"))) == [
        ("A", "all"),
        ("B", "web"),
    ]
    assert sorted_env(layer_env.apply_to_empty(ProcessScope("worker"))) == [
        ("A", "all")
    ]


def test_add_root_dir_should_append_posix_directories(tmp_path):
    (tmp_path / "bin").mkdir()
    (tmp_path / "lib").mkdir()

    original = Env()
    original.insert("PATH", "some")
    original.insert("LD_LIBRARY_PATH", "some-ld")
    original.insert("LIBRARY_PATH", "some-library")

    layer_env = LayerEnv.read_from_layer_dir(tmp_path)
    modified = layer_env.apply(Scope.BUILD, original)

    lib = str(tmp_path / "lib")
    bin_ = str(tmp_path / "bin")
    assert sorted_env(modified) == [
        ("LD_LIBRARY_PATH", f"{lib}{os.pathsep}some-ld"),
        ("LIBRARY_PATH", f"{lib}{os.pathsep}some-library"),
        ("PATH", f"{bin_}{os.pathsep}some"),
    ]


def _make_standard_dirs(layer_dir):
    for name in ("bin", "lib", "include", "pkgconfig"):
        (layer_dir / name).mkdir()


def test_read_from_layer_dir_layer_paths_launch(tmp_path):
    _make_standard_dirs(tmp_path)
    env = LayerEnv.read_from_layer_dir(tmp_path).apply_to_empty(Scope.LAUNCH)

    assert env.get("PATH") == str(tmp_path / "bin")
    assert env.get("LD_LIBRARY_PATH") == str(tmp_path / "lib")
    assert env.get("LIBRARY_PATH") is None
    assert env.get("CPATH") is None
    assert env.get("PKG_CONFIG_PATH") is None


def test_read_from_layer_dir_layer_paths_build(tmp_path):
    _make_standard_dirs(tmp_path)
    env = LayerEnv.read_from_layer_dir(tmp_path).apply_to_empty(Scope.BUILD)

    assert env.get("PATH") == str(tmp_path / "bin")
    assert env.get("LD_LIBRARY_PATH") == str(tmp_path / "lib")
    assert env.get("LIBRARY_PATH") == str(tmp_path / "lib")
    assert env.get("CPATH") == str(tmp_path / "include")
    assert env.get("PKG_CONFIG_PATH") == str(tmp_path / "pkgconfig")


def test_read_from_layer_dir_with_env_dir(tmp_path):
    (tmp_path / "bin").mkdir()
    env_dir = tmp_path / "env"
    env_dir.mkdir()
    (env_dir / "ZERO_WING.default").write_text("ALL_YOUR_BASE_ARE_BELONG_TO_US")

    env = LayerEnv.read_from_layer_dir(tmp_path).apply_to_empty(Scope.LAUNCH)
    assert env.get("PATH") == str(tmp_path / "bin")
    assert env.get("ZERO_WING") == "ALL_YOUR_BASE_ARE_BELONG_TO_US"


def test_read_scoped_env_dirs(tmp_path):
    (tmp_path / "env.build").mkdir()
    (tmp_path / "env.build" / "B.override").write_text("build")
    (tmp_path / "env.launch").mkdir()
    (tmp_path / "env.launch" / "L.override").write_text("launch")

    layer_env = LayerEnv.read_from_layer_dir(tmp_path)
    assert sorted_env(layer_env.apply_to_empty(Scope.BUILD)) == [("B", "build")]
    assert sorted_env(layer_env.apply_to_empty(Scope.LAUNCH)) == [("L", "launch")]
    assert sorted_env(layer_env.apply_to_empty(Scope.ALL)) == []


def test_write_to_layer_dir(tmp_path):
    layer_env = LayerEnv()
    layer_env.insert(Scope.BUILD, ModificationBehavior.DEFAULT, "FOO", "bar")
    layer_env.insert(Scope.ALL, ModificationBehavior.APPEND, "PATH", "some-path")

    layer_env.write_to_layer_dir(tmp_path)

    assert (tmp_path / "env.build" / "FOO.default").read_text() == "bar"
    assert (tmp_path / "env" / "PATH.append").read_text() == "some-path"
    assert not (tmp_path / "env.launch").exists()


def test_write_process_scope(tmp_path):
    layer_env = LayerEnv().chainable_insert(
        ProcessScope("web"), ModificationBehavior.OVERRIDE, "PORT", "5000"
    )
    layer_env.write_to_layer_dir(tmp_path)
    assert (tmp_path / "env.launch" / "web" / "PORT.override").read_text() == "5000"


def test_write_replaces_existing_env_files(tmp_path):
    LayerEnv().chainable_insert(
        Scope.ALL, ModificationBehavior.DEFAULT, "OLD", "x"
    ).write_to_layer_dir(tmp_path)
    LayerEnv().chainable_insert(
        Scope.ALL, ModificationBehavior.DEFAULT, "NEW", "y"
    ).write_to_layer_dir(tmp_path)

    assert not (tmp_path / "env" / "OLD.default").exists()
    assert (tmp_path / "env" / "NEW.default").read_text() == "y"


def test_write_read_round_trip(tmp_path):
    layer_env = (
        LayerEnv()
        .chainable_insert(Scope.ALL, ModificationBehavior.APPEND, "RANDOM", "4")
        .chainable_insert(Scope.BUILD, ModificationBehavior.PREPEND, "P", "v")
        .chainable_insert(Scope.LAUNCH, ModificationBehavior.DELIMITER, "P", ";")
    )
    layer_env.write_to_layer_dir(tmp_path)
    assert LayerEnv.read_from_layer_dir(tmp_path) == layer_env


def test_equality_independent_of_insert_order():
    first = (
        LayerEnv()
        .chainable_insert(Scope.ALL, ModificationBehavior.DEFAULT, "a", "1")
        .chainable_insert(Scope.ALL, ModificationBehavior.OVERRIDE, "b", "2")
    )
    second = (
        LayerEnv()
        .chainable_insert(Scope.ALL, ModificationBehavior.OVERRIDE, "b", "2")
        .chainable_insert(Scope.ALL, ModificationBehavior.DEFAULT, "a", "1")
    )
    assert first == second
    assert first != LayerEnv()