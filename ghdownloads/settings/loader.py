"""Helpers for loading configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

try:  # pragma: no cover - Python 3.11+ includes tomllib
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older versions
    import tomli as tomllib  # type: ignore[no-redef]

DEFAULT_CONFIG_NAME = "ghdownloads.toml"
CONFIG_ENV_VAR = "GHDOWNLOADS_CONFIG"
DEFAULT_HOST = "api.github.com"
DEFAULT_ENV_PREFIX = "GHDOWNLOADS_"


@dataclass(slots=True)
class GitHubSettings:
    host: str = DEFAULT_HOST
    timeout: float = 30.0
    page_size: int = 100


@dataclass(slots=True)
class UploadSettings:
    """Defaults for the upload task parameters."""

    owner: str | None = None
    repository: str | None = None
    description: str | None = None
    suffix: str | None = None
    server: str | None = None
    overwrite: bool = False
    dry_run: bool = False


@dataclass(slots=True)
class SecretsSettings:
    file: Path | None = None
    env_prefix: str = DEFAULT_ENV_PREFIX


@dataclass(slots=True)
class PublisherEntrySettings:
    owner: str
    repository: str
    source_file: str
    description: str | None = None


@dataclass(slots=True)
class PublisherSettings:
    username: str | None = None
    password: str | None = None
    entries: list[PublisherEntrySettings] = field(default_factory=list)


@dataclass(slots=True)
class AppConfig:
    github: GitHubSettings = field(default_factory=GitHubSettings)
    upload: UploadSettings = field(default_factory=UploadSettings)
    secrets: SecretsSettings = field(default_factory=SecretsSettings)
    publisher: PublisherSettings = field(default_factory=PublisherSettings)
    source: Path | None = None


def _config_path(explicit: str | os.PathLike[str] | None = None) -> tuple[Path, bool]:
    """Return the candidate path and whether it was requested explicitly."""
    if explicit:
        return Path(explicit), True
    env_value = os.environ.get(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value), True
    return Path.cwd() / DEFAULT_CONFIG_NAME, False


def _load_toml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("rb") as fp:
        return tomllib.load(fp)


def _optional_str(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_bool(value: Any, *, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _to_path(value: Any, *, relative_to: Path) -> Path | None:
    text = _optional_str(value)
    if text is None:
        return None
    candidate = Path(text).expanduser()
    return candidate if candidate.is_absolute() else relative_to / candidate


def _build_entries(items: Any) -> list[PublisherEntrySettings]:
    entries: list[PublisherEntrySettings] = []
    for item in items or []:
        if not isinstance(item, dict):
            continue
        entries.append(
            PublisherEntrySettings(
                owner=str(item.get("owner", "")),
                repository=str(item.get("repository", "")),
                source_file=str(item.get("source_file", "")),
                description=_optional_str(item.get("description")),
            )
        )
    return entries


def load_config(config_path: str | os.PathLike[str] | None = None) -> AppConfig:
    """Load settings; a missing default file yields the built-in defaults."""
    path, explicit = _config_path(config_path)
    if not explicit and not path.exists():
        return AppConfig()
    data = _load_toml(path)
    base_dir = path.resolve().parent

    github_section = data.get("github", {})
    upload_section = data.get("upload", {})
    secrets_section = data.get("secrets", {})
    publisher_section = data.get("publisher", {})

    github = GitHubSettings(
        host=_optional_str(github_section.get("host")) or DEFAULT_HOST,
        timeout=float(github_section.get("timeout", 30)),
        page_size=int(github_section.get("page_size", 100)),
    )
    upload = UploadSettings(
        owner=_optional_str(upload_section.get("owner")),
        repository=_optional_str(upload_section.get("repository")),
        description=_optional_str(upload_section.get("description")),
        suffix=_optional_str(upload_section.get("suffix")),
        server=_optional_str(upload_section.get("server")),
        overwrite=_as_bool(upload_section.get("overwrite")),
        dry_run=_as_bool(upload_section.get("dry_run")),
    )
    secrets = SecretsSettings(
        file=_to_path(secrets_section.get("file"), relative_to=base_dir),
        env_prefix=str(secrets_section.get("env_prefix", DEFAULT_ENV_PREFIX)),
    )
    publisher = PublisherSettings(
        username=_optional_str(publisher_section.get("username")),
        password=_optional_str(publisher_section.get("password")),
        entries=_build_entries(publisher_section.get("entries")),
    )

    return AppConfig(
        github=github,
        upload=upload,
        secrets=secrets,
        publisher=publisher,
        source=path,
    )
