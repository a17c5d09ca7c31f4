"""
Core functionality for Utica.

This package contains the foundational modules that other components depend on.
"""

from .exceptions import (
    UticaError,
    ConfigError,
    InvalidIdentifier,
    ParseError,
    ProcessFailure,
    ProjectError,
    NoSharedSchemes,
    SchemeListTimeout,
    DiscoveryAccessError,
)

__all__ = [
    "UticaError",
    "ConfigError",
    "InvalidIdentifier",
    "ParseError",
    "ProcessFailure",
    "ProjectError",
    "NoSharedSchemes",
    "SchemeListTimeout",
    "DiscoveryAccessError",
]
