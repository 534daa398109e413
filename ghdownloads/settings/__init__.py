"""Settings package exports."""

from .loader import (
    CONFIG_ENV_VAR,
    AppConfig,
    GitHubSettings,
    PublisherEntrySettings,
    PublisherSettings,
    SecretsSettings,
    UploadSettings,
    load_config,
)

__all__ = [
    "AppConfig",
    "CONFIG_ENV_VAR",
    "GitHubSettings",
    "PublisherEntrySettings",
    "PublisherSettings",
    "SecretsSettings",
    "UploadSettings",
    "load_config",
]
