"""
Repository identity parsing.

Turns a dependency identifier into the server hosting it and the
repository's owner and name. Two forms are accepted:

- ``owner/name`` for repositories on github.com
- ``http(s)://host[/mount]/owner/name`` for github.com or a GitHub
  Enterprise instance mounted at ``http(s)://host[/mount]``
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Tuple
from urllib.parse import urlsplit

from utica.core.exceptions import InvalidIdentifier

PUBLIC_HOST = "github.com"
PUBLIC_URL = f"https://{PUBLIC_HOST}"
PUBLIC_API_URL = f"https://api.{PUBLIC_HOST}"

_PUBLIC_HOST_ALIASES = frozenset({PUBLIC_HOST, f"www.{PUBLIC_HOST}"})

# Matches an identifier of the form "owner/name"
_NWO_PATTERN = re.compile(r"([\-.\w]+)/([\-.\w]+)")

_ALLOWED_SCHEMES = ("http", "https")


class ServerKind(Enum):
    """Where a repository is hosted."""

    PUBLIC = "public"
    ENTERPRISE = "enterprise"


@dataclass(frozen=True)
class ServerIdentity:
    """
    Hosting origin of a repository.

    Attributes:
        kind: github.com or a GitHub Enterprise instance
        base_url: Root URL of the server, without a trailing slash
    """

    kind: ServerKind
    base_url: str

    @classmethod
    def public(cls) -> "ServerIdentity":
        return cls(ServerKind.PUBLIC, PUBLIC_URL)

    @classmethod
    def enterprise(cls, base_url: str) -> "ServerIdentity":
        return cls(ServerKind.ENTERPRISE, base_url.rstrip("/"))

    @property
    def is_public(self) -> bool:
        return self.kind is ServerKind.PUBLIC

    @property
    def scheme(self) -> str:
        return urlsplit(self.base_url).scheme

    @property
    def host(self) -> str:
        """Host name (and port, if any) of the server."""
        netloc = urlsplit(self.base_url).netloc
        return netloc.rpartition("@")[2]

    @property
    def hostname(self) -> str:
        """Host name of the server without port, lowercased."""
        return urlsplit(self.base_url).hostname or ""

    @property
    def api_url(self) -> str:
        """Root of the REST API for this server."""
        if self.is_public:
            return PUBLIC_API_URL
        return f"{self.base_url}/api/v3"

    def __str__(self) -> str:
        return self.base_url


@dataclass(frozen=True)
class RepositoryRef:
    """
    Owner and name of a hosted repository.

    The name never carries a trailing ".git".
    """

    owner: str
    name: str

    def __post_init__(self):
        for field_name in ("owner", "name"):
            value = getattr(self, field_name)
            if not value:
                raise ValueError(f"Repository {field_name} cannot be empty")
            if "/" in value:
                raise ValueError(f"Repository {field_name} cannot contain '/': {value}")

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


def strip_git_suffix(name: str) -> str:
    """Remove a trailing ".git" from a repository name."""
    if name.endswith(".git"):
        return name[: -len(".git")]
    return name


def parse_repository_identifier(
    identifier: str,
) -> Tuple[ServerIdentity, RepositoryRef]:
    """
    Parse repository information out of a dependency identifier.

    Args:
        identifier: "owner/name" or an http(s) URL ending in /owner/name

    Returns:
        Tuple of (server, repository)

    Raises:
        InvalidIdentifier: If the identifier matches neither form. The
            original string is available as ``error.identifier``.

    Example:
        >>> server, repo = parse_repository_identifier("https://ghe.local/sub/o/n")
        >>> str(server), str(repo)
        ('https://ghe.local/sub', 'o/n')
    """
    match = _NWO_PATTERN.fullmatch(identifier)
    if match:
        return ServerIdentity.public(), _repository(identifier, *match.groups())

    try:
        url = urlsplit(identifier)
    except ValueError:
        raise InvalidIdentifier(identifier) from None

    # git:// and ssh:// origins make no sense for a GitHub API client
    if url.scheme not in _ALLOWED_SCHEMES or not url.hostname:
        raise InvalidIdentifier(identifier)

    components = [component for component in url.path.split("/") if component]
    if len(components) < 2:
        raise InvalidIdentifier(identifier)

    owner, name = components[-2], components[-1]
    repository = _repository(identifier, owner, name)

    if url.hostname.lower() in _PUBLIC_HOST_ALIASES:
        return ServerIdentity.public(), repository

    netloc = url.netloc.rpartition("@")[2]
    base_url = f"{url.scheme}://{netloc}"
    if components[:-2]:
        base_url += "/" + "/".join(components[:-2])

    return ServerIdentity.enterprise(base_url), repository


def _repository(identifier: str, owner: str, name: str) -> RepositoryRef:
    try:
        return RepositoryRef(owner=owner, name=strip_git_suffix(name))
    except ValueError:
        raise InvalidIdentifier(identifier) from None
