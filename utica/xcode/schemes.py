"""
Scheme listing for discovered projects.

Runs ``xcodebuild -list`` against a workspace or project file and extracts
the shared scheme names from its output.

xcodebuild can hang indefinitely on projects that don't share any schemes,
so every invocation is bounded by a timeout and retried a fixed number of
times before giving up.
"""

import logging
import subprocess
from typing import Iterable, Iterator, List, Optional

from utica.config.parser import UticaConfig
from utica.core.exceptions import (
    NoSharedSchemes,
    ParseError,
    ProcessFailure,
    SchemeListTimeout,
)
from utica.xcode.project import ProjectLocation

logger = logging.getLogger(__name__)

SCHEMES_HEADER_SUFFIX = "Schemes:"

# '    This project contains no schemes.'
NO_SCHEMES_SUFFIX = "contains no schemes."
# 'There are no schemes in workspace "Carthage".'
NO_SCHEMES_PREFIX = "There are no schemes"


def list_command(location: ProjectLocation, config: UticaConfig) -> List[str]:
    """
    Build the xcodebuild command that lists a location's schemes.

    Example:
        >>> list_command(ProjectLocation.project_file(Path("/A/B.xcodeproj")), config)
        ['xcodebuild', '-list', '-project', '/A/B.xcodeproj']
    """
    return [
        config.xcodebuild.executable,
        "-list",
        location.kind.build_flag,
        str(location.path),
    ]


def run_list(location: ProjectLocation, config: Optional[UticaConfig] = None) -> str:
    """
    Run xcodebuild -list for a location, retrying only on timeout.

    Args:
        location: Workspace or project file to inspect
        config: Utica configuration (defaults if None)

    Returns:
        Decoded standard output

    Raises:
        SchemeListTimeout: If every attempt timed out
        ProcessFailure: If xcodebuild cannot be spawned or exits non-zero
    """
    config = config or UticaConfig()
    cmd = list_command(location, config)
    attempts = config.xcodebuild.list_retries + 1
    timeout = config.xcodebuild.list_timeout

    for attempt in range(1, attempts + 1):
        logger.info(
            f"Listing schemes in {location.path} (attempt {attempt}/{attempts})"
        )
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=timeout,
                check=False,
            )
        except subprocess.TimeoutExpired:
            logger.warning(
                f"xcodebuild -list timed out after {timeout}s for {location.path}"
            )
            continue
        except OSError as e:
            raise ProcessFailure(cmd, reason=str(e)) from e

        if result.returncode != 0:
            raise ProcessFailure(
                cmd,
                exit_code=result.returncode,
                stderr=_decode(result.stderr or b"", cmd, errors="replace"),
            )

        return _decode(result.stdout or b"", cmd)

    raise SchemeListTimeout(location, attempts)


def parse_schemes(location: ProjectLocation, lines: Iterable[str]) -> Iterator[str]:
    """
    Extract shared scheme names from xcodebuild -list output.

    The names follow the first line ending in "Schemes:" and an optional
    blank separator line, and run until the next empty line. Every line is
    checked for the no-schemes marker before any name is yielded.

    Raises:
        NoSharedSchemes: If any line reports that there are no schemes
    """
    lines = list(lines)
    if any(_reports_no_schemes(line) for line in lines):
        raise NoSharedSchemes(location)

    in_header = True
    skip_separator = False

    for line in lines:
        if in_header:
            if line.endswith(SCHEMES_HEADER_SUFFIX):
                in_header = False
                skip_separator = True
            continue

        if skip_separator:
            skip_separator = False
            if not line.strip():
                continue

        if not line:
            return

        scheme = line.strip()
        if scheme:
            yield scheme


def _reports_no_schemes(line: str) -> bool:
    return line.endswith(NO_SCHEMES_SUFFIX) or line.startswith(NO_SCHEMES_PREFIX)


def list_schemes(
    location: ProjectLocation, config: Optional[UticaConfig] = None
) -> Iterator[str]:
    """
    Lazily list the shared schemes of a workspace or project file.

    Nothing runs until the first item is requested. Consuming the iterator
    triggers exactly one xcodebuild invocation, plus retries on timeout.

    Args:
        location: Workspace or project file to inspect
        config: Utica configuration (defaults if None)

    Yields:
        Trimmed scheme names in the order xcodebuild reports them

    Raises:
        NoSharedSchemes: If the project shares no schemes
        SchemeListTimeout: If xcodebuild kept timing out
        ProcessFailure: If xcodebuild failed for any other reason
    """
    output = run_list(location, config)
    yield from parse_schemes(location, output.splitlines())


def _decode(data: bytes, cmd: List[str], errors: str = "strict") -> str:
    try:
        return data.decode("utf-8", errors=errors)
    except UnicodeDecodeError as e:
        raise ParseError(f"xcodebuild output is not valid UTF-8 ({' '.join(cmd)}): {e}")
