"""Secret providers used to resolve named server credentials."""

from __future__ import annotations

import os
import re
from abc import ABC, abstractmethod
from configparser import ConfigParser
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Mapping

DEFAULT_ENV_PREFIX = "GHDOWNLOADS_"


class SecretNotFoundError(KeyError):
    """Raised when a secret cannot be resolved."""


@dataclass(slots=True, frozen=True)
class ServerCredentials:
    """Username/password pair stored under a server id.

    Either value may be empty; a password without a username is an OAuth2 token.
    """

    server_id: str
    username: str = ""
    password: str = ""

    def __repr__(self) -> str:
        masked = "***" if self.password else ""
        return f"ServerCredentials(server_id={self.server_id!r}, username={self.username!r}, password={masked!r})"


class SecretProvider(ABC):
    """Abstract secret lookup contract.

    Keys take the form ``<server>.<field>``, e.g. ``github.password``.
    """

    @abstractmethod
    def get_secret(self, key: str) -> str:
        """Return the secret associated with ``key``."""


class EnvSecretProvider(SecretProvider):
    """Reads ``github.password`` from ``GHDOWNLOADS_GITHUB_PASSWORD``."""

    def __init__(self, prefix: str = DEFAULT_ENV_PREFIX, env: Mapping[str, str] | None = None) -> None:
        self._env = env if env is not None else os.environ
        self._prefix = prefix

    def variable_for(self, key: str) -> str:
        normalized = re.sub(r"[^0-9A-Za-z]+", "_", key).strip("_").upper()
        return f"{self._prefix}{normalized}"

    def get_secret(self, key: str) -> str:
        variable = self.variable_for(key)
        try:
            return self._env[variable]
        except KeyError as exc:
            raise SecretNotFoundError(key) from exc


class FileSecretProvider(SecretProvider):
    """Loads secrets from an INI file with one section per server."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._parser = ConfigParser(interpolation=None)
        if path.exists():
            self._parser.read(path, encoding="utf-8")

    def get_secret(self, key: str) -> str:
        section, _, option = key.rpartition(".")
        if not section or not option:
            raise SecretNotFoundError(key)
        if self._parser.has_option(section, option):
            value = self._parser.get(section, option)
            if value:
                return value
        raise SecretNotFoundError(key)


class MappingSecretProvider(SecretProvider):
    """Wraps a simple dictionary for testing."""

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self._mapping = mapping

    def get_secret(self, key: str) -> str:
        try:
            return self._mapping[key]
        except KeyError as exc:
            raise SecretNotFoundError(key) from exc


class ChainedSecretProvider(SecretProvider):
    """Tries multiple providers until one returns a secret."""

    def __init__(self, providers: Iterable[SecretProvider]) -> None:
        self._providers = tuple(providers)

    def get_secret(self, key: str) -> str:
        for provider in self._providers:
            try:
                return provider.get_secret(key)
            except SecretNotFoundError:
                continue
        raise SecretNotFoundError(key)


def lookup_server(provider: SecretProvider, server_id: str) -> ServerCredentials:
    """Collect the username and password stored for ``server_id``."""
    values: dict[str, str] = {}
    for field in ("username", "password"):
        try:
            values[field] = provider.get_secret(f"{server_id}.{field}")
        except SecretNotFoundError:
            values[field] = ""
    return ServerCredentials(server_id=server_id, **values)


def build_secret_provider(
    *,
    secrets_file: Path | None = None,
    env_prefix: str = DEFAULT_ENV_PREFIX,
    env: Mapping[str, str] | None = None,
) -> SecretProvider:
    """Environment first, then the optional secrets file."""
    providers: list[SecretProvider] = [EnvSecretProvider(env_prefix, env=env)]
    if secrets_file is not None:
        providers.append(FileSecretProvider(secrets_file))
    return ChainedSecretProvider(providers)


__all__ = [
    "ChainedSecretProvider",
    "DEFAULT_ENV_PREFIX",
    "EnvSecretProvider",
    "FileSecretProvider",
    "MappingSecretProvider",
    "SecretNotFoundError",
    "SecretProvider",
    "ServerCredentials",
    "build_secret_provider",
    "lookup_server",
]
