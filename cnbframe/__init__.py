"""Building blocks for Cloud Native Buildpacks: environments, layer environments and layers."""

__version__ = "0.1.0"