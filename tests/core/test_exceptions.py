"""
Tests for the Utica exception hierarchy.
"""

from pathlib import Path

import pytest

from utica.core.exceptions import (
    ConfigError,
    DiscoveryAccessError,
    InvalidIdentifier,
    NoSharedSchemes,
    ParseError,
    ProcessFailure,
    ProjectError,
    SchemeListTimeout,
    UticaError,
)
from utica.xcode.project import ProjectLocation


@pytest.fixture
def location():
    return ProjectLocation.project_file(Path("/repo/App.xcodeproj"))


class TestHierarchy:
    @pytest.mark.parametrize(
        "error",
        [
            ConfigError("bad"),
            InvalidIdentifier("x"),
            ParseError("bad"),
            ProcessFailure(["tool"]),
            DiscoveryAccessError(Path("/missing")),
        ],
    )
    def test_all_errors_share_base(self, error):
        assert isinstance(error, UticaError)

    def test_project_errors(self, location):
        assert isinstance(NoSharedSchemes(location), ProjectError)
        assert isinstance(SchemeListTimeout(location), ProjectError)


class TestMessages:
    def test_invalid_identifier_keeps_input(self):
        error = InvalidIdentifier("git://host/o/n")

        assert error.identifier == "git://host/o/n"
        assert '"git://host/o/n"' in str(error)

    def test_process_failure(self):
        error = ProcessFailure(["xcodebuild", "-list"], exit_code=65, stderr="boom\n")

        assert error.command == ["xcodebuild", "-list"]
        assert "xcodebuild -list" in str(error)
        assert "exit code 65" in str(error)
        assert str(error).endswith("boom")

    def test_process_failure_reason(self):
        error = ProcessFailure(["git"], reason="No such file")

        assert error.exit_code is None
        assert "No such file" in str(error)

    def test_project_errors_name_project_and_phase(self, location):
        no_schemes = NoSharedSchemes(location)
        timeout = SchemeListTimeout(location, attempts=3)

        assert "App.xcodeproj" in str(no_schemes)
        assert no_schemes.phase == "no-schemes"
        assert "3 attempt" in str(timeout)
        assert timeout.phase == "timeout"
        assert ProjectError(location, "x").phase == "generic"

    def test_discovery_access_error(self):
        error = DiscoveryAccessError(Path("/missing"), "No such directory")

        assert error.root == Path("/missing")
        assert "/missing" in str(error)
        assert "No such directory" in str(error)
