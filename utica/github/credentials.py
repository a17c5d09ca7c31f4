"""
Credential resolution for GitHub servers.

Credentials are looked up from an ordered list of sources; the first source
that produces a credential wins:

1. Access tokens from the environment (GITHUB_ACCESS_TOKEN by default)
2. Username and password stored in git's credential helper
3. Anonymous access

The token variable holds comma-separated records, each either a bare token
(used for github.com) or ``host=token``::

    GITHUB_ACCESS_TOKEN="github.com=XXXX,enterprise.local=YYYY"

When a host appears more than once, the last record wins.
"""

import logging
import os
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Mapping, Optional, Sequence

from utica.config.parser import UticaConfig
from utica.github.repository import PUBLIC_HOST, ServerIdentity

logger = logging.getLogger(__name__)


class CredentialKind(Enum):
    """Kind of authentication available for a server."""

    TOKEN = "token"
    USERNAME_PASSWORD = "username_password"
    NONE = "none"


@dataclass(frozen=True)
class Credential:
    """
    Authentication for a server.

    Secrets are excluded from repr so credentials can be logged safely.
    """

    kind: CredentialKind
    token: Optional[str] = field(default=None, repr=False)
    username: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)

    @classmethod
    def from_token(cls, token: str) -> "Credential":
        return cls(CredentialKind.TOKEN, token=token)

    @classmethod
    def from_username_password(cls, username: str, password: str) -> "Credential":
        return cls(
            CredentialKind.USERNAME_PASSWORD, username=username, password=password
        )

    @classmethod
    def anonymous(cls) -> "Credential":
        return cls(CredentialKind.NONE)

    @property
    def is_anonymous(self) -> bool:
        return self.kind is CredentialKind.NONE


CredentialSource = Callable[[ServerIdentity], Optional[Credential]]


def parse_token_records(value: str) -> Dict[str, str]:
    """
    Parse the comma-separated records of the access token variable.

    Args:
        value: Raw variable value

    Returns:
        Mapping of host to token. A bare token is stored under github.com;
        later records overwrite earlier ones for the same host.

    Example:
        >>> parse_token_records("a=1,b=2,b=3")
        {'a': '1', 'b': '3'}
    """
    records: Dict[str, str] = {}

    for record in value.split(","):
        if not record:
            continue

        host, _, token = record.partition("=")
        parts = [part for part in (host, token) if part]

        if len(parts) == 1:
            # A lone value is a token for github.com
            records[PUBLIC_HOST] = parts[0]
        elif len(parts) == 2:
            records[host] = token

    return records


def parse_key_value_lines(output: str) -> Dict[str, str]:
    """
    Parse ``key=value`` lines as printed by ``git credential fill``.

    Lines are split on the first "="; any further "=" stays in the value.
    Lines without a value are ignored.
    """
    values: Dict[str, str] = {}

    for line in output.splitlines():
        key, sep, value = line.partition("=")
        if key and sep and value:
            values[key] = value

    return values


def token_from_environment(
    server: ServerIdentity,
    environ: Mapping[str, str],
    variable: str = "GITHUB_ACCESS_TOKEN",
) -> Optional[Credential]:
    """
    Look up an access token for a server in the environment.

    Args:
        server: Server to authenticate against
        environ: Environment mapping to read
        variable: Name of the token variable

    Returns:
        Token credential, or None if no record matches the server's host
        name. Records are keyed by host name alone, without a port.
    """
    value = environ.get(variable)
    if value is None:
        return None

    token = parse_token_records(value).get(server.hostname)
    if token is None:
        logger.debug(f"{variable} has no token for {server.hostname}")
        return None

    return Credential.from_token(token)


def credentials_from_git(
    server: ServerIdentity, git_executable: str = "git"
) -> Optional[Credential]:
    """
    Ask git's credential helper for a username and password.

    Any failure of the helper is treated as "no credential".

    Args:
        server: Server to authenticate against
        git_executable: git binary to run

    Returns:
        Username/password credential, or None
    """
    cmd = [git_executable, "credential", "fill"]
    env = os.environ.copy()
    # Never block on an interactive prompt
    env["GIT_TERMINAL_PROMPT"] = "0"

    try:
        result = subprocess.run(
            cmd,
            input=f"url={server}\n".encode("utf-8"),
            capture_output=True,
            env=env,
            check=False,
        )
    except OSError as e:
        logger.debug(f"Could not run git credential helper: {e}")
        return None

    if result.returncode != 0:
        logger.debug(
            f"git credential fill exited with {result.returncode} for {server}"
        )
        return None

    try:
        output = result.stdout.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.debug(f"Could not decode git credential output: {e}")
        return None

    values = parse_key_value_lines(output)
    username = values.get("username")
    password = values.get("password")
    if username is None or password is None:
        return None

    return Credential.from_username_password(username, password)


class CredentialResolver:
    """
    Resolve credentials for a server from an ordered list of sources.

    Example:
        resolver = CredentialResolver(config)
        credential = resolver.resolve(ServerIdentity.public())
        if credential.is_anonymous:
            print("Continuing without authentication")
    """

    def __init__(
        self,
        config: Optional[UticaConfig] = None,
        environ: Optional[Mapping[str, str]] = None,
        sources: Optional[Sequence[CredentialSource]] = None,
    ):
        """
        Initialize resolver.

        Args:
            config: Utica configuration (defaults if None)
            environ: Environment to read tokens from (os.environ if None)
            sources: Credential sources to try in order. Defaults to the
                environment token map followed by git's credential helper.
        """
        self.config = config or UticaConfig()
        self.environ = os.environ if environ is None else environ

        if sources is None:
            sources = [self.token_source, self.git_source]
        self.sources: List[CredentialSource] = list(sources)

    def token_source(self, server: ServerIdentity) -> Optional[Credential]:
        return token_from_environment(
            server, self.environ, self.config.github.token_env_var
        )

    def git_source(self, server: ServerIdentity) -> Optional[Credential]:
        return credentials_from_git(server, self.config.git.executable)

    def resolve(self, server: ServerIdentity) -> Credential:
        """
        Resolve a credential for a server.

        Returns:
            The first credential produced by a source, or an anonymous one
        """
        for source in self.sources:
            credential = source(server)
            if credential is not None:
                logger.debug(f"Using {credential.kind.value} credential for {server}")
                return credential

        logger.debug(f"No credential found for {server}, continuing anonymously")
        return Credential.anonymous()
