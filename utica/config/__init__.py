"""Configuration module for Utica.

This module provides YAML configuration parsing and validation for utica.yaml.
"""

from utica.core.exceptions import ConfigError
from utica.config.parser import (
    CONFIG_FILENAME,
    XcodebuildConfig,
    GitConfig,
    GitHubConfig,
    PathsConfig,
    UticaConfig,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "XcodebuildConfig",
    "GitConfig",
    "GitHubConfig",
    "PathsConfig",
    "UticaConfig",
    "ConfigError",
    "load_config",
    "parse_config",
]
