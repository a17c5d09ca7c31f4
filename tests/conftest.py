"""
Pytest configuration and shared fixtures for Utica tests.
"""

import pytest
from pathlib import Path
from unittest.mock import Mock

from utica.config.parser import UticaConfig


# ============================================================================
# Shared Test Fixtures
# ============================================================================


@pytest.fixture
def config() -> UticaConfig:
    """Default configuration with a short scheme listing timeout."""
    config = UticaConfig()
    config.xcodebuild.list_timeout = 1.0
    return config


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    """
    Create a repository layout with projects at several depths.

    Layout:
        repo/App.xcworkspace
        repo/App.xcodeproj
        repo/Frameworks/Core/Core.xcodeproj
        repo/Carthage/Checkouts/Dep/Dep.xcodeproj     (excluded)
        repo/.hidden/Hidden.xcodeproj                 (hidden)
        repo/README.md
    """
    repo = tmp_path / "repo"
    repo.mkdir()

    (repo / "App.xcworkspace").mkdir()
    (repo / "App.xcworkspace" / "contents.xcworkspacedata").write_text("<Workspace/>")
    (repo / "App.xcodeproj").mkdir()
    (repo / "App.xcodeproj" / "project.pbxproj").write_text("// !$*UTF8*$!")
    # Xcode nests a workspace inside every project bundle
    (repo / "App.xcodeproj" / "project.xcworkspace").mkdir()

    (repo / "Frameworks" / "Core" / "Core.xcodeproj").mkdir(parents=True)
    (repo / "Carthage" / "Checkouts" / "Dep" / "Dep.xcodeproj").mkdir(parents=True)
    (repo / ".hidden" / "Hidden.xcodeproj").mkdir(parents=True)
    (repo / "README.md").write_text("# Repo\n")

    return repo


@pytest.fixture
def completed():
    """Factory for fake subprocess.CompletedProcess results."""

    def make(returncode: int = 0, stdout=b"", stderr=b"") -> Mock:
        return Mock(returncode=returncode, stdout=stdout, stderr=stderr)

    return make
