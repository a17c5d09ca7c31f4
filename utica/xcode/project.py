"""
Project discovery.

This module locates Xcode workspaces and project files inside a source tree.

Discovery walks the symlink-resolved root directory and:
- skips hidden entries and symbolic links
- treats package directories (.xcodeproj, .app, .framework ...) as opaque leaves
- prunes the checkouts folder and every submodule declared in .gitmodules
- classifies .xcworkspace as a workspace and .xcodeproj as a project file

Usage:
    from utica.xcode.project import locate_projects

    for location in locate_projects(Path("/path/to/repo")):
        print(location.kind.value, location.path)
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from utica.config.parser import UticaConfig
from utica.core.exceptions import DiscoveryAccessError, ParseError, ProcessFailure
from utica.xcode.submodules import read_submodules

logger = logging.getLogger(__name__)

WORKSPACE_EXTENSION = ".xcworkspace"
PROJECT_EXTENSION = ".xcodeproj"

# Directories presented by Finder as a single file; never descended into
PACKAGE_EXTENSIONS = frozenset(
    {
        WORKSPACE_EXTENSION,
        PROJECT_EXTENSION,
        ".app",
        ".appex",
        ".bundle",
        ".docc",
        ".framework",
        ".kext",
        ".playground",
        ".plugin",
        ".xcarchive",
        ".xcassets",
        ".xcdatamodeld",
        ".xcframework",
        ".xctest",
    }
)


class ProjectKind(Enum):
    """Kind of buildable unit found on disk."""

    WORKSPACE = "workspace"
    PROJECT_FILE = "project"

    @property
    def build_flag(self) -> str:
        """xcodebuild argument that selects this kind of location."""
        return "-workspace" if self is ProjectKind.WORKSPACE else "-project"


@dataclass(frozen=True)
class ProjectLocation:
    """
    A discovered workspace or project file.

    Attributes:
        kind: Workspace or project file
        path: Absolute, symlink-resolved path to the bundle
    """

    kind: ProjectKind
    path: Path

    @classmethod
    def workspace(cls, path: Path) -> "ProjectLocation":
        return cls(ProjectKind.WORKSPACE, Path(path))

    @classmethod
    def project_file(cls, path: Path) -> "ProjectLocation":
        return cls(ProjectKind.PROJECT_FILE, Path(path))

    @property
    def level(self) -> int:
        """Number of path components; shallower locations sort first."""
        return len(self.path.parts)

    def sort_key(self) -> Tuple[int, int, str]:
        """
        Total order used for discovery results.

        Shallower paths first, then workspaces before project files, then
        the path string.
        """
        rank = 0 if self.kind is ProjectKind.WORKSPACE else 1
        return (self.level, rank, str(self.path))

    def __str__(self) -> str:
        return self.path.name


def classify(path: Path) -> Optional[ProjectLocation]:
    """
    Classify a filesystem entry by its declared content type.

    Returns:
        ProjectLocation for workspaces and project files, None otherwise
    """
    suffix = path.suffix.lower()
    if suffix == WORKSPACE_EXTENSION:
        return ProjectLocation.workspace(path)
    if suffix == PROJECT_EXTENSION:
        return ProjectLocation.project_file(path)
    return None


class DiscoveredProjects:
    """
    Restartable, lazy sequence of projects found under a root directory.

    Nothing is scanned until the sequence is iterated, and every iteration
    performs a fresh scan.
    """

    def __init__(self, root: Path, config: Optional[UticaConfig] = None):
        self.root = Path(root)
        self.config = config or UticaConfig()

    def __iter__(self) -> Iterator[ProjectLocation]:
        locations = sorted(self._scan(), key=ProjectLocation.sort_key)
        return iter(locations)

    def __repr__(self) -> str:
        return f"DiscoveredProjects({str(self.root)!r})"

    def excluded_directories(self, resolved_root: Path) -> List[Path]:
        """
        Directories whose subtrees are never reported.

        Args:
            resolved_root: Symlink-resolved scan root

        Returns:
            Checkouts folder plus every submodule path. When the submodule
            manifest cannot be read, only the checkouts folder.
        """
        relative = [self.config.paths.checkouts]

        try:
            submodules = read_submodules(self.root, self.config)
        except (ProcessFailure, ParseError) as e:
            logger.warning(f"Ignoring submodules of {self.root}: {e}")
            submodules = []

        relative.extend(submodule.path for submodule in submodules)

        excluded: List[Path] = []
        for rel in relative:
            lexical = resolved_root / rel
            excluded.append(lexical)
            resolved = lexical.resolve()
            if resolved != lexical:
                excluded.append(resolved)
        return excluded

    def _scan(self) -> List[ProjectLocation]:
        resolved_root = self._resolve_root()
        excluded = self.excluded_directories(resolved_root)
        found: List[ProjectLocation] = []

        def on_error(error: OSError):
            logger.debug(f"Skipping unreadable entry during project scan: {error}")

        for dirpath, dirnames, filenames in os.walk(
            resolved_root, topdown=True, onerror=on_error, followlinks=False
        ):
            current = Path(dirpath)
            descend = []

            for name in sorted(dirnames):
                if name.startswith("."):
                    continue

                path = current / name
                if path.is_symlink():
                    logger.debug(f"Skipping symbolic link {path}")
                    continue

                if _is_excluded(path, excluded):
                    logger.debug(f"Pruning excluded directory {path}")
                    continue

                location = classify(path)
                if location is not None:
                    found.append(location)

                is_package = path.suffix.lower() in PACKAGE_EXTENSIONS
                if not is_package:
                    descend.append(name)

            # os.walk only descends into what is left in dirnames
            dirnames[:] = descend

            for name in filenames:
                if name.startswith("."):
                    continue

                path = current / name
                if path.is_symlink() or _is_excluded(path, excluded):
                    continue

                location = classify(path)
                if location is not None:
                    found.append(location)

        logger.debug(f"Discovered {len(found)} project(s) under {resolved_root}")
        return found

    def _resolve_root(self) -> Path:
        try:
            resolved = self.root.resolve(strict=True)
        except (OSError, RuntimeError) as e:
            raise DiscoveryAccessError(self.root, str(e)) from e

        if not resolved.is_dir():
            raise DiscoveryAccessError(self.root, "not a directory")

        try:
            with os.scandir(resolved):
                pass
        except OSError as e:
            raise DiscoveryAccessError(self.root, str(e)) from e

        return resolved


def _is_excluded(path: Path, excluded: List[Path]) -> bool:
    return any(path.is_relative_to(directory) for directory in excluded)


def locate_projects(
    root: Path, config: Optional[UticaConfig] = None
) -> DiscoveredProjects:
    """
    Locate workspaces and project files within a directory.

    Args:
        root: Directory to scan
        config: Utica configuration (defaults if None)

    Returns:
        Lazy, restartable sequence of ProjectLocation in preferential order

    Raises:
        DiscoveryAccessError: On iteration, if the root cannot be read

    Example:
        >>> projects = list(locate_projects(Path("MyRepo")))
        >>> projects[0].kind
        <ProjectKind.WORKSPACE: 'workspace'>
    """
    return DiscoveredProjects(root, config)
