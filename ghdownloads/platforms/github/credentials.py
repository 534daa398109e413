"""Authentication selection for GitHub clients."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ...security import SecretProvider, lookup_server
from ...utils.logging import get_logger
from .api import DEFAULT_PAGE_SIZE, DEFAULT_TIMEOUT, HOST_API, GitHubClient
from .errors import ConfigurationError

LOGGER = get_logger(__name__)


class AuthMode(str, Enum):
    BASIC = "basic"
    OAUTH2 = "oauth2"


@dataclass(slots=True, frozen=True)
class GitHubCredentials:
    """The single authentication mode chosen for a run."""

    mode: AuthMode
    secret: str
    username: str | None = None
    source: str = "explicit"

    def apply(self, client: GitHubClient) -> GitHubClient:
        if self.mode is AuthMode.BASIC:
            client.set_credentials(self.username or "", self.secret)
        else:
            client.set_oauth2_token(self.secret)
        return client

    def __repr__(self) -> str:
        return (
            f"GitHubCredentials(mode={self.mode.value!r}, username={self.username!r}, "
            f"source={self.source!r})"
        )


def _basic(username: str | None, password: str | None, *, source: str) -> GitHubCredentials | None:
    if not username or not password:
        return None
    LOGGER.debug(
        "Using basic authentication with username: %s",
        username,
        extra={"event": "auth.selected", "mode": AuthMode.BASIC.value, "source": source},
    )
    return GitHubCredentials(AuthMode.BASIC, password, username=username, source=source)


def _token(token: str | None, *, source: str) -> GitHubCredentials | None:
    if not token:
        return None
    LOGGER.debug(
        "Using OAuth2 access token authentication",
        extra={"event": "auth.selected", "mode": AuthMode.OAUTH2.value, "source": source},
    )
    return GitHubCredentials(AuthMode.OAUTH2, token, source=source)


def _server(server: str | None, secrets: SecretProvider | None) -> GitHubCredentials | None:
    if not server:
        return None
    if secrets is None:
        LOGGER.debug(
            "No secret store available to resolve server '%s'",
            server,
            extra={"event": "auth.server_missing", "server": server},
        )
        return None

    stored = lookup_server(secrets, server)
    source = f"server:{server}"
    resolved = _basic(stored.username, stored.password, source=source)
    if resolved is None and not stored.username:
        # A server password without a username is treated as an OAuth2 token.
        resolved = _token(stored.password, source=source)
    if resolved is None:
        LOGGER.debug(
            "Server '%s' is missing username/password credentials",
            server,
            extra={"event": "auth.server_missing", "server": server},
        )
    return resolved


def resolve_credentials(
    *,
    username: str | None = None,
    password: str | None = None,
    oauth2_token: str | None = None,
    server: str | None = None,
    secrets: SecretProvider | None = None,
) -> GitHubCredentials:
    """Pick username/password, then token, then the named server's credentials."""
    resolved = (
        _basic(username, password, source="explicit")
        or _token(oauth2_token, source="explicit")
        or _server(server, secrets)
    )
    if resolved is None:
        raise ConfigurationError("No authentication credentials configured")
    return resolved


def create_client(
    host: str | None,
    credentials: GitHubCredentials,
    *,
    timeout: float = DEFAULT_TIMEOUT,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> GitHubClient:
    """Build a fresh client for ``host`` authenticated with ``credentials``."""
    if host and host != HOST_API:
        LOGGER.debug("Using custom host: %s", host, extra={"event": "client.host", "host": host})
    client = GitHubClient(host, timeout=timeout, page_size=page_size)
    return credentials.apply(client)


__all__ = ["AuthMode", "GitHubCredentials", "create_client", "resolve_credentials"]
