"""
Submodule manifest reader.

Reads the submodule paths declared in a repository's ``.gitmodules`` file so
that project discovery can skip them.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from utica.config.parser import UticaConfig
from utica.core.exceptions import ParseError, ProcessFailure

logger = logging.getLogger(__name__)

GITMODULES_FILENAME = ".gitmodules"


@dataclass(frozen=True)
class Submodule:
    """A submodule entry from .gitmodules."""

    name: str
    path: str


def read_submodules(
    repository: Path, config: Optional[UticaConfig] = None
) -> List[Submodule]:
    """
    List the submodules declared in the working copy of a repository.

    Args:
        repository: Root directory of the repository
        config: Utica configuration (defaults if None)

    Returns:
        Submodules in manifest order. Empty if there is no .gitmodules file
        or it declares no paths.

    Raises:
        ProcessFailure: If git cannot be run or rejects the manifest
        ParseError: If git prints an entry that is not a submodule path
    """
    config = config or UticaConfig()
    manifest = repository / GITMODULES_FILENAME

    if not manifest.is_file():
        return []

    cmd = [
        config.git.executable,
        "config",
        "-z",
        "--file",
        GITMODULES_FILENAME,
        "--get-regexp",
        r"submodule\..*\.path",
    ]

    try:
        result = subprocess.run(
            cmd,
            cwd=repository,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as e:
        raise ProcessFailure(cmd, reason=str(e)) from e

    # git config exits with 1 when no key matches
    if result.returncode == 1 and not result.stdout:
        return []

    if result.returncode != 0:
        raise ProcessFailure(cmd, exit_code=result.returncode, stderr=result.stderr)

    submodules = _parse_entries(result.stdout)
    logger.debug(f"Found {len(submodules)} submodule(s) in {manifest}")
    return submodules


def _parse_entries(output: str) -> List[Submodule]:
    """Parse NUL-separated ``key\\nvalue`` records from git config -z."""
    submodules = []

    for record in output.split("\0"):
        if not record:
            continue

        key, sep, path = record.partition("\n")
        if not sep or not key.startswith("submodule.") or not key.endswith(".path"):
            raise ParseError(f'unexpected .gitmodules entry "{record}"')

        name = key[len("submodule.") : -len(".path")]
        submodules.append(Submodule(name=name, path=path))

    return submodules
