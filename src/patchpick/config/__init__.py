"""Configuration loading, schema, and defaults."""

from patchpick.config.loader import CONFIG_FILENAME, ConfigError, load_config
from patchpick.config.schema import CollisionPolicy, PatchPickConfig

__all__ = [
    "CONFIG_FILENAME",
    "CollisionPolicy",
    "ConfigError",
    "PatchPickConfig",
    "load_config",
]
