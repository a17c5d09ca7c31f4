"""YAML configuration parser for Utica.

This module provides parsing and validation for utica.yaml configuration files.
A missing file is not an error: every setting has a default, and callers pass
the resulting UticaConfig explicitly to the components that need it.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml

from utica.core.exceptions import ConfigError

CONFIG_FILENAME = "utica.yaml"


def _package_version() -> str:
    try:
        from importlib.metadata import version

        return version("utica")
    except Exception:
        return "0.1.0"


@dataclass
class XcodebuildConfig:
    """Settings for invoking xcodebuild."""

    executable: str = "xcodebuild"
    list_timeout: float = 60.0  # seconds per `-list` attempt
    list_retries: int = 2  # extra attempts after a timeout


@dataclass
class GitConfig:
    """Settings for invoking git."""

    executable: str = "git"


@dataclass
class GitHubConfig:
    """Settings for talking to GitHub and GitHub Enterprise."""

    token_env_var: str = "GITHUB_ACCESS_TOKEN"
    client_id: str = "org.utica.UticaKit"
    client_version: str = field(default_factory=_package_version)

    @property
    def user_agent(self) -> str:
        return f"{self.client_id}/{self.client_version}"


@dataclass
class PathsConfig:
    """Well-known folders relative to a project root."""

    checkouts: str = "Carthage/Checkouts"
    binaries: str = "Carthage/Build"


@dataclass
class UticaConfig:
    """Complete Utica configuration."""

    version: int = 1
    xcodebuild: XcodebuildConfig = field(default_factory=XcodebuildConfig)
    git: GitConfig = field(default_factory=GitConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    paths: PathsConfig = field(default_factory=PathsConfig)


def load_config(project_root: Optional[Path] = None) -> UticaConfig:
    """
    Load configuration for a project.

    Args:
        project_root: Directory that may contain utica.yaml. If None or the
            file does not exist, defaults are returned.

    Returns:
        Parsed configuration or defaults

    Raises:
        ConfigError: If utica.yaml exists but is invalid
    """
    if project_root is None:
        return UticaConfig()

    config_path = Path(project_root) / CONFIG_FILENAME
    if not config_path.exists():
        return UticaConfig()

    return parse_config(config_path)


def parse_config(config_path: Path) -> UticaConfig:
    """
    Parse utica.yaml configuration file.

    Args:
        config_path: Path to utica.yaml

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}")

    if data is None:
        raise ConfigError("Configuration file is empty")

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    return _parse_and_validate(data)


def _parse_and_validate(data: dict) -> UticaConfig:
    """Parse and validate configuration data."""
    if "version" not in data:
        raise ConfigError("Missing required field: version")

    if data["version"] != 1:
        raise ConfigError(f"Unsupported version: {data['version']} (expected 1)")

    return UticaConfig(
        version=data["version"],
        xcodebuild=_parse_xcodebuild(_section(data, "xcodebuild")),
        git=_parse_git(_section(data, "git")),
        github=_parse_github(_section(data, "github")),
        paths=_parse_paths(_section(data, "paths")),
    )


def _section(data: dict, name: str) -> dict:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")
    return section


def _parse_xcodebuild(data: dict) -> XcodebuildConfig:
    """Parse xcodebuild configuration."""
    defaults = XcodebuildConfig()

    timeout = data.get("list_timeout", defaults.list_timeout)
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ConfigError(f"xcodebuild.list_timeout must be a number, got {timeout!r}")
    if timeout <= 0:
        raise ConfigError(f"xcodebuild.list_timeout must be positive, got {timeout}")

    retries = data.get("list_retries", defaults.list_retries)
    if isinstance(retries, bool) or not isinstance(retries, int) or retries < 0:
        raise ConfigError(
            f"xcodebuild.list_retries must be a non-negative integer, got {retries!r}"
        )

    return XcodebuildConfig(
        executable=str(data.get("executable", defaults.executable)),
        list_timeout=float(timeout),
        list_retries=retries,
    )


def _parse_git(data: dict) -> GitConfig:
    """Parse git configuration."""
    return GitConfig(executable=str(data.get("executable", GitConfig.executable)))


def _parse_github(data: dict) -> GitHubConfig:
    """Parse GitHub configuration."""
    token_env_var = data.get("token_env_var", GitHubConfig.token_env_var)
    if not token_env_var or not isinstance(token_env_var, str):
        raise ConfigError("github.token_env_var must be a non-empty string")

    github = GitHubConfig(
        token_env_var=token_env_var,
        client_id=str(data.get("client_id", GitHubConfig.client_id)),
    )
    if "client_version" in data:
        github.client_version = str(data["client_version"])
    return github


def _parse_paths(data: dict) -> PathsConfig:
    """Parse well-known folder configuration."""
    paths = PathsConfig(
        checkouts=str(data.get("checkouts", PathsConfig.checkouts)),
        binaries=str(data.get("binaries", PathsConfig.binaries)),
    )

    for name in ("checkouts", "binaries"):
        value = getattr(paths, name)
        if not value or Path(value).is_absolute():
            raise ConfigError(f"paths.{name} must be a relative path, got {value!r}")

    return paths
