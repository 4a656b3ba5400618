[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cnbframe"
version = "0.1.0"
description = "Building blocks for Cloud Native Buildpacks: environments, layer environments, layer metadata and layers on disk"
requires-python = ">=3.11"
dependencies = [
    "tomli-w",
]
keywords = [
    "buildpacks",
    "cloud-native-buildpacks",
    "cnb",
    "containers",
    "layers",
    "environment",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Build Tools",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["cnbframe"]

[tool.pytest.ini_options]
addopts = "-ra"
