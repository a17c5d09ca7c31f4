"""
Centralized exception hierarchy for Utica.

Every failure surfaced by project discovery, scheme listing and repository
identity parsing is one of the kinds defined here. Raw process exit codes
never leave the package; they are wrapped in ProcessFailure.
"""

from pathlib import Path
from typing import List, Optional, Sequence


# ============================================================================
# Base Exceptions
# ============================================================================


class UticaError(Exception):
    """Base exception for all Utica errors."""

    pass


class ConfigError(UticaError):
    """Configuration parsing or validation error."""

    pass


# ============================================================================
# Parsing Exceptions
# ============================================================================


class InvalidIdentifier(UticaError):
    """Raised when a dependency identifier is neither owner/name nor an http(s) URL."""

    def __init__(self, identifier: str):
        self.identifier = identifier
        super().__init__(f'invalid GitHub repository identifier "{identifier}"')


class ParseError(UticaError):
    """Raised when a tool reports text in an unexpected format."""

    def __init__(self, description: str):
        self.description = description
        super().__init__(f"Parse error: {description}")


# ============================================================================
# Process Exceptions
# ============================================================================


class ProcessFailure(UticaError):
    """Raised when an external tool cannot be spawned or exits unsuccessfully."""

    def __init__(
        self,
        command: Sequence[str],
        exit_code: Optional[int] = None,
        stderr: str = "",
        reason: str = "",
    ):
        self.command: List[str] = [str(part) for part in command]
        self.exit_code = exit_code
        self.stderr = stderr
        self.reason = reason

        msg = f"Command failed: {' '.join(self.command)}"
        if exit_code is not None:
            msg += f" (exit code {exit_code})"
        if reason:
            msg += f": {reason}"
        if stderr.strip():
            msg += f"\n{stderr.strip()}"
        super().__init__(msg)


# ============================================================================
# Project Exceptions
# ============================================================================


class ProjectError(UticaError):
    """Base exception for failures tied to a discovered project."""

    #: Failure phase reported to callers deciding between skip and abort
    phase = "generic"

    def __init__(self, location, message: str):
        self.location = location
        super().__init__(message)


class NoSharedSchemes(ProjectError):
    """Raised when xcodebuild reports that a project shares no schemes."""

    phase = "no-schemes"

    def __init__(self, location):
        super().__init__(location, f"Project {location} has no shared schemes")


class SchemeListTimeout(ProjectError):
    """Raised when xcodebuild -list keeps timing out for a project."""

    phase = "timeout"

    def __init__(self, location, attempts: int = 1):
        self.attempts = attempts
        super().__init__(
            location,
            f"Failed to discover shared schemes in project {location} "
            f"after {attempts} attempt(s): xcodebuild timed out",
        )


class DiscoveryAccessError(UticaError):
    """Raised when the root of a project scan cannot be read."""

    def __init__(self, root: Path, reason: str = ""):
        self.root = root
        self.reason = reason
        msg = f"Cannot scan directory for projects: {root}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)
