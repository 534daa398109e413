"""GitHub downloads adapters."""

from __future__ import annotations

from .api import GitHubApiError, GitHubClient
from .credentials import AuthMode, GitHubCredentials, create_client, resolve_credentials
from .downloads import list_existing_downloads
from .errors import ConfigurationError, DeleteError, DownloadsError, ListingError, UploadError
from .models import DownloadResource, LocalArtifact, RemoteDownload
from .repository import RepositoryId, extract_repository_from_scm_url, get_repository

__all__ = [
    "AuthMode",
    "ConfigurationError",
    "DeleteError",
    "DownloadResource",
    "DownloadsError",
    "GitHubApiError",
    "GitHubClient",
    "GitHubCredentials",
    "ListingError",
    "LocalArtifact",
    "RemoteDownload",
    "RepositoryId",
    "UploadError",
    "create_client",
    "extract_repository_from_scm_url",
    "get_repository",
    "list_existing_downloads",
    "resolve_credentials",
]
