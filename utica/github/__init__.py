"""
GitHub support for Utica.

This module parses repository identifiers, resolves credentials for github.com
and GitHub Enterprise servers, and builds clone, issue and API endpoints.
"""

from utica.github.repository import (
    ServerKind,
    ServerIdentity,
    RepositoryRef,
    parse_repository_identifier,
    strip_git_suffix,
)
from utica.github.credentials import (
    CredentialKind,
    Credential,
    CredentialResolver,
    token_from_environment,
    credentials_from_git,
)
from utica.github.urls import (
    https_url,
    ssh_url,
    new_issue_url,
    redact_url_credentials,
)
from utica.github.client import Release, create_api_session

__all__ = [
    "ServerKind",
    "ServerIdentity",
    "RepositoryRef",
    "parse_repository_identifier",
    "strip_git_suffix",
    "CredentialKind",
    "Credential",
    "CredentialResolver",
    "token_from_environment",
    "credentials_from_git",
    "https_url",
    "ssh_url",
    "new_issue_url",
    "redact_url_credentials",
    "Release",
    "create_api_session",
]
