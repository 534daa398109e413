"""Base contracts shared by the upload front-ends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Protocol, Sequence

from .github.models import DownloadResource, LocalArtifact, RemoteDownload
from .github.repository import RepositoryId


class DownloadsClient(Protocol):
    """Remote operations the upload driver relies on."""

    def list_downloads(self, repository: RepositoryId) -> Sequence[RemoteDownload]:
        """Return the downloads currently published on ``repository``."""

    def delete_download(self, repository: RepositoryId, download_id: int) -> None:
        """Remove the download ``download_id``."""

    def create_download(self, repository: RepositoryId, artifact: LocalArtifact) -> DownloadResource | None:
        """Publish ``artifact`` as a new download."""


@dataclass(slots=True)
class UploadRequest:
    """Resolved configuration for one upload run."""

    owner: str | None
    repository: str | None
    files: Sequence[Path]
    username: str | None = None
    password: str | None = None
    oauth2_token: str | None = None
    server: str | None = None
    host: str | None = None
    description: str | None = None
    suffix: str | None = None
    overwrite: bool = False
    dry_run: bool = False


class BuildResult(str, Enum):
    """Outcome reported back to the build host."""

    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"

    @property
    def failed(self) -> bool:
        return self is BuildResult.FAILURE


@dataclass(slots=True)
class PublishResult:
    """Result of a publish step; failures are values, not exceptions."""

    result: BuildResult
    messages: list[str] = field(default_factory=list)
    uploaded: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.result.failed


class ArtifactPublisher(ABC):
    """Something a build host can configure and run."""

    display_name: str = ""

    @abstractmethod
    def publish(self, request: UploadRequest) -> PublishResult:
        """Upload the files named by ``request``."""
