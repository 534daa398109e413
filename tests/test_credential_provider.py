"""Tests for secret providers and server credential lookup."""

from __future__ import annotations

from pathlib import Path

import pytest

from ghdownloads.security import (
    ChainedSecretProvider,
    EnvSecretProvider,
    FileSecretProvider,
    MappingSecretProvider,
    SecretNotFoundError,
    build_secret_provider,
    lookup_server,
)


def test_env_provider_normalises_key() -> None:
    provider = EnvSecretProvider(env={"GHDOWNLOADS_MY_SERVER_PASSWORD": "pw"})

    assert provider.variable_for("my-server.password") == "GHDOWNLOADS_MY_SERVER_PASSWORD"
    assert provider.get_secret("my-server.password") == "pw"
    with pytest.raises(SecretNotFoundError):
        provider.get_secret("my-server.username")


def test_file_provider_reads_sections(tmp_path: Path) -> None:
    path = tmp_path / "secrets.ini"
    path.write_text("[github]\nusername = bot\npassword = p%w\n\n[empty]\npassword =\n", encoding="utf-8")
    provider = FileSecretProvider(path)

    assert provider.get_secret("github.username") == "bot"
    assert provider.get_secret("github.password") == "p%w"
    with pytest.raises(SecretNotFoundError):
        provider.get_secret("empty.password")
    with pytest.raises(SecretNotFoundError):
        provider.get_secret("nodots")


def test_missing_file_provides_nothing(tmp_path: Path) -> None:
    provider = FileSecretProvider(tmp_path / "absent.ini")
    with pytest.raises(SecretNotFoundError):
        provider.get_secret("github.password")


def test_chain_tries_providers_in_order() -> None:
    chain = ChainedSecretProvider(
        [
            MappingSecretProvider({"github.password": "first"}),
            MappingSecretProvider({"github.password": "second", "github.username": "bot"}),
        ]
    )

    assert chain.get_secret("github.password") == "first"
    assert chain.get_secret("github.username") == "bot"
    with pytest.raises(SecretNotFoundError):
        chain.get_secret("other.password")


def test_lookup_server_fills_missing_values_with_empty_strings() -> None:
    credentials = lookup_server(MappingSecretProvider({"github.password": "tok"}), "github")

    assert credentials.username == ""
    assert credentials.password == "tok"
    assert "tok" not in repr(credentials)


def test_build_secret_provider_prefers_environment(tmp_path: Path) -> None:
    path = tmp_path / "secrets.ini"
    path.write_text("[github]\nusername = file-user\npassword = file-pw\n", encoding="utf-8")

    provider = build_secret_provider(
        secrets_file=path, env={"GHDOWNLOADS_GITHUB_PASSWORD": "env-pw"}
    )

    assert provider.get_secret("github.password") == "env-pw"
    assert provider.get_secret("github.username") == "file-user"
