"""
GitHub API client setup.

Builds a ``requests.Session`` configured for a server: the User-Agent comes
from the configuration that is passed in, and authentication comes from the
credential resolver. No requests are sent here.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from utica.config.parser import UticaConfig
from utica.github.credentials import Credential, CredentialKind, CredentialResolver
from utica.github.repository import ServerIdentity

logger = logging.getLogger(__name__)

GITHUB_MEDIA_TYPE = "application/vnd.github+json"


@dataclass
class Release:
    """A published release of a repository."""

    tag: str
    name: Optional[str] = None

    @property
    def name_with_fallback(self) -> str:
        """The release name, or its tag when the name is empty or missing."""
        if self.name:
            return self.name
        return self.tag

    @classmethod
    def from_api(cls, data: dict) -> "Release":
        """Create a release from a GitHub API release object."""
        return cls(tag=data["tag_name"], name=data.get("name"))


def apply_credential(session: requests.Session, credential: Credential) -> None:
    """Attach a credential to a session."""
    if credential.kind is CredentialKind.TOKEN:
        session.headers["Authorization"] = f"token {credential.token}"
    elif credential.kind is CredentialKind.USERNAME_PASSWORD:
        session.auth = (credential.username, credential.password)


def create_api_session(
    server: ServerIdentity,
    config: Optional[UticaConfig] = None,
    resolver: Optional[CredentialResolver] = None,
    authenticated: bool = True,
) -> requests.Session:
    """
    Create an HTTP session for a server's API.

    Args:
        server: Server the session talks to
        config: Utica configuration providing the client identifier (defaults if None)
        resolver: Credential resolver (built from config if None)
        authenticated: Whether to resolve and attach credentials

    Returns:
        Configured session. Use ``server.api_url`` as the request base.
    """
    config = config or UticaConfig()

    session = requests.Session()
    session.headers["User-Agent"] = config.github.user_agent
    session.headers["Accept"] = GITHUB_MEDIA_TYPE

    if not authenticated:
        return session

    resolver = resolver or CredentialResolver(config)
    credential = resolver.resolve(server)
    apply_credential(session, credential)

    logger.debug(f"Created {credential.kind.value} API session for {server.api_url}")
    return session
