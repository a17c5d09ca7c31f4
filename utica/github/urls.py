"""
URL builders for hosted repositories.

Usage:
    from utica.github.urls import https_url, ssh_url, new_issue_url

    server, repo = parse_repository_identifier("owner/name")
    credential = CredentialResolver().resolve(server)
    print(redact_url_credentials(https_url(server, repo, credential)))
"""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from utica.github.credentials import Credential, CredentialKind
from utica.github.repository import RepositoryRef, ServerIdentity


def https_url(
    server: ServerIdentity,
    repository: RepositoryRef,
    credential: Optional[Credential] = None,
) -> str:
    """
    URL for cloning a repository over HTTPS.

    A token credential is embedded as ``token@host``. Username/password
    credentials are left to git's own HTTPS authentication.

    Example:
        >>> https_url(ServerIdentity.public(), RepositoryRef("o", "n"))
        'https://github.com/o/n.git'
    """
    auth = ""
    if credential is not None and credential.kind is CredentialKind.TOKEN:
        auth = f"{credential.token}@"

    return (
        f"{server.scheme}://{auth}{server.host}/"
        f"{repository.owner}/{repository.name}.git"
    )


def ssh_url(server: ServerIdentity, repository: RepositoryRef) -> str:
    """URL for cloning a repository over SSH. Never carries credentials."""
    return f"ssh://git@{server.host}/{repository.owner}/{repository.name}.git"


def new_issue_url(server: ServerIdentity, repository: RepositoryRef) -> str:
    """URL for filing a new issue against a repository."""
    return f"{server}/{repository.owner}/{repository.name}/issues/new"


def redact_url_credentials(url: str) -> str:
    """
    Redact user info from a URL before logging it.

    Example:
        https://TOKEN@github.com/o/n.git → https://***@github.com/o/n.git
    """
    try:
        parsed = urlsplit(url)
        if "@" in parsed.netloc:
            host = parsed.netloc.rsplit("@", 1)[1]
            return urlunsplit(parsed._replace(netloc=f"***@{host}"))
        return url
    except ValueError:
        return re.sub(r"://[^/@]+@", "://***@", url)
