"""
Tests for utica.xcode.project.
"""

import os
import pytest
from pathlib import Path
from unittest.mock import patch

from utica.core.exceptions import DiscoveryAccessError, ParseError
from utica.xcode.project import (
    DiscoveredProjects,
    ProjectKind,
    ProjectLocation,
    classify,
    locate_projects,
)
from utica.xcode.submodules import Submodule


class TestProjectLocation:
    """Tests for ProjectLocation."""

    def test_constructors(self):
        """Test workspace and project file constructors."""
        workspace = ProjectLocation.workspace(Path("/A/App.xcworkspace"))
        project = ProjectLocation.project_file(Path("/A/App.xcodeproj"))

        assert workspace.kind is ProjectKind.WORKSPACE
        assert project.kind is ProjectKind.PROJECT_FILE
        assert str(project) == "App.xcodeproj"

    def test_build_flag(self):
        """Test xcodebuild flag per kind."""
        assert ProjectKind.WORKSPACE.build_flag == "-workspace"
        assert ProjectKind.PROJECT_FILE.build_flag == "-project"

    def test_is_immutable(self):
        """Test that locations cannot be mutated."""
        location = ProjectLocation.workspace(Path("/A/App.xcworkspace"))

        with pytest.raises(AttributeError):
            location.path = Path("/B")

    def test_sort_order(self):
        """Test shallower first, then workspaces, then path."""
        deep_workspace = ProjectLocation.workspace(Path("/A/B/Deep.xcworkspace"))
        project_b = ProjectLocation.project_file(Path("/A/B.xcodeproj"))
        project_a = ProjectLocation.project_file(Path("/A/A.xcodeproj"))
        workspace = ProjectLocation.workspace(Path("/A/Z.xcworkspace"))

        ordered = sorted(
            [deep_workspace, project_b, project_a, workspace],
            key=ProjectLocation.sort_key,
        )

        assert ordered == [workspace, project_a, project_b, deep_workspace]


class TestClassify:
    """Tests for classify."""

    def test_workspace(self):
        assert classify(Path("/x/App.xcworkspace")).kind is ProjectKind.WORKSPACE

    def test_project(self):
        assert classify(Path("/x/App.xcodeproj")).kind is ProjectKind.PROJECT_FILE

    def test_other(self):
        """Test that other entries are ignored."""
        assert classify(Path("/x/Package.swift")) is None
        assert classify(Path("/x/App.app")) is None


class TestLocateProjects:
    """Tests for locate_projects."""

    def test_finds_projects_in_order(self, source_tree):
        """Test discovery results and their order."""
        found = list(locate_projects(source_tree))
        root = source_tree.resolve()

        assert found == [
            ProjectLocation.workspace(root / "App.xcworkspace"),
            ProjectLocation.project_file(root / "App.xcodeproj"),
            ProjectLocation.project_file(
                root / "Frameworks" / "Core" / "Core.xcodeproj"
            ),
        ]

    def test_skips_checkouts_folder(self, source_tree):
        """Test that nothing inside Carthage/Checkouts is returned."""
        checkouts = source_tree.resolve() / "Carthage" / "Checkouts"

        for location in locate_projects(source_tree):
            assert not location.path.is_relative_to(checkouts)

    def test_skips_hidden_entries(self, source_tree):
        """Test that hidden directories are not scanned."""
        names = [location.path.name for location in locate_projects(source_tree)]

        assert "Hidden.xcodeproj" not in names

    def test_does_not_descend_into_packages(self, source_tree):
        """Test that the workspace nested in a project bundle is not reported."""
        names = [location.path.name for location in locate_projects(source_tree)]

        assert "project.xcworkspace" not in names

    def test_skips_submodules(self, source_tree):
        """Test that submodule subtrees are pruned."""
        submodule = Submodule(name="Frameworks/Core", path="Frameworks/Core")

        with patch("utica.xcode.project.read_submodules", return_value=[submodule]):
            found = list(locate_projects(source_tree))

        assert all("Frameworks" not in location.path.parts for location in found)
        assert len(found) == 2

    def test_excluded_node_itself(self, source_tree):
        """Test that an excluded path that is itself a project is dropped."""
        submodule = Submodule(name="App", path="App.xcodeproj")

        with patch("utica.xcode.project.read_submodules", return_value=[submodule]):
            names = [location.path.name for location in locate_projects(source_tree)]

        assert "App.xcodeproj" not in names
        assert "App.xcworkspace" in names

    def test_unreadable_manifest_keeps_checkouts_exclusion(self, source_tree, config):
        """Test that a failing git still yields projects outside Checkouts."""
        (source_tree / ".gitmodules").write_text(
            '[submodule "Core"]\n\tpath = Frameworks/Core\n'
        )
        config.git.executable = str(source_tree / "missing-git")

        found = list(locate_projects(source_tree, config))
        names = [location.path.name for location in found]

        assert names == ["App.xcworkspace", "App.xcodeproj", "Core.xcodeproj"]

    def test_malformed_manifest_output(self, source_tree):
        """Test that unparseable submodule output does not abort discovery."""
        with patch(
            "utica.xcode.project.read_submodules",
            side_effect=ParseError("unexpected git config output"),
        ):
            found = list(locate_projects(source_tree))

        assert len(found) == 3

    def test_symlinked_bundle_is_skipped(self, source_tree):
        """Test that a link into the checkouts folder is not reported."""
        target = source_tree / "Carthage" / "Checkouts" / "Dep" / "Dep.xcodeproj"
        try:
            (source_tree / "Link.xcodeproj").symlink_to(
                target, target_is_directory=True
            )
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        found = list(locate_projects(source_tree))
        checkouts = source_tree.resolve() / "Carthage" / "Checkouts"

        assert "Link.xcodeproj" not in [location.path.name for location in found]
        assert not any(
            location.path.resolve().is_relative_to(checkouts) for location in found
        )

    def test_custom_checkouts_folder(self, source_tree, config):
        """Test that the checkouts folder comes from configuration."""
        config.paths.checkouts = "Frameworks"

        found = list(locate_projects(source_tree, config))
        names = [location.path.name for location in found]

        assert "Core.xcodeproj" not in names
        assert "Dep.xcodeproj" in names

    def test_resolves_symlinked_root(self, source_tree, tmp_path):
        """Test that paths are reported under the resolved root."""
        link = tmp_path / "link"
        try:
            link.symlink_to(source_tree, target_is_directory=True)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks not supported")

        found = list(locate_projects(link))

        assert found
        assert all(
            location.path.is_relative_to(source_tree.resolve()) for location in found
        )

    def test_restartable(self, source_tree):
        """Test that each iteration performs a fresh scan."""
        projects = locate_projects(source_tree)
        first = list(projects)

        (source_tree / "Later.xcworkspace").mkdir()
        second = list(projects)

        assert len(second) == len(first) + 1

    def test_lazy(self, tmp_path):
        """Test that nothing is scanned before iteration."""
        projects = locate_projects(tmp_path / "missing")

        assert isinstance(projects, DiscoveredProjects)
        with pytest.raises(DiscoveryAccessError):
            list(projects)

    def test_root_is_file(self, tmp_path):
        """Test that a file root is inaccessible."""
        root = tmp_path / "file.txt"
        root.write_text("")

        with pytest.raises(DiscoveryAccessError):
            list(locate_projects(root))

    def test_empty_tree(self, tmp_path):
        """Test scanning a tree without projects."""
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "main.swift").write_text("print(1)\n")

        assert list(locate_projects(tmp_path)) == []

    @pytest.mark.skipif(
        os.name == "nt" or (hasattr(os, "geteuid") and os.geteuid() == 0),
        reason="permission bits are not enforced",
    )
    def test_unreadable_subdirectory_is_skipped(self, source_tree):
        """Test that per-entry errors do not abort discovery."""
        locked = source_tree / "Locked"
        (locked / "Secret.xcodeproj").mkdir(parents=True)
        locked.chmod(0)

        try:
            names = [location.path.name for location in locate_projects(source_tree)]
        finally:
            locked.chmod(0o755)

        assert "App.xcworkspace" in names
        assert "Secret.xcodeproj" not in names
