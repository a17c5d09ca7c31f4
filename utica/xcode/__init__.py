"""
Xcode support for Utica.

This module provides project discovery, scheme listing and SDK classification
for Xcode workspaces and project files.
"""

from utica.xcode.sdk import SDK, MachOType, split_sdks
from utica.xcode.submodules import Submodule, read_submodules
from utica.xcode.project import (
    ProjectKind,
    ProjectLocation,
    DiscoveredProjects,
    locate_projects,
)
from utica.xcode.schemes import list_schemes, parse_schemes

__all__ = [
    "SDK",
    "MachOType",
    "split_sdks",
    "Submodule",
    "read_submodules",
    "ProjectKind",
    "ProjectLocation",
    "DiscoveredProjects",
    "locate_projects",
    "list_schemes",
    "parse_schemes",
]
