"""Upload task: named parameters plus a file selection in, downloads out."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from ..platforms.base import (
    ArtifactPublisher,
    BuildResult,
    DownloadsClient,
    PublishResult,
    UploadRequest,
)
from ..platforms.github.credentials import GitHubCredentials, create_client, resolve_credentials
from ..platforms.github.downloads import list_existing_downloads
from ..platforms.github.repository import get_repository
from ..security import SecretProvider
from ..services.upload_service import DownloadUploadService, UploadReport
from ..settings import GitHubSettings
from ..utils.files import FileSet
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)

ClientFactory = Callable[[str | None, GitHubCredentials], DownloadsClient]


@dataclass(slots=True)
class FileSelection:
    """Which files to upload.

    File sets win when any are given; otherwise the single ``file``, otherwise
    the explicit ``files`` list.
    """

    file: Path | None = None
    files: Sequence[Path] = ()
    filesets: list[FileSet] = field(default_factory=list)

    def add_fileset(self, fileset: FileSet) -> None:
        self.filesets.append(fileset)

    def resolve(self) -> list[Path]:
        if not self.filesets and self.file is not None:
            return [self.file]
        if not self.filesets and self.files:
            return list(self.files)
        resolved: list[Path] = []
        for fileset in self.filesets:
            resolved.extend(fileset.iter_files())
        return resolved


class DownloadUploadTask(ArtifactPublisher):
    """Resolves repository and credentials, then runs the upload driver."""

    display_name = "Upload files to GitHub downloads"

    def __init__(
        self,
        *,
        secrets: SecretProvider | None = None,
        github: GitHubSettings | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._secrets = secrets
        self._github = github or GitHubSettings()
        self._client_factory = client_factory or self._default_client

    def _default_client(self, host: str | None, credentials: GitHubCredentials) -> DownloadsClient:
        return create_client(
            host or self._github.host,
            credentials,
            timeout=self._github.timeout,
            page_size=self._github.page_size,
        )

    def execute(self, request: UploadRequest) -> UploadReport:
        """Run one upload; every failure raised here aborts the run."""
        repository = get_repository(request.owner, request.repository)
        credentials = resolve_credentials(
            username=request.username,
            password=request.password,
            oauth2_token=request.oauth2_token,
            server=request.server,
            secrets=self._secrets,
        )
        client = self._client_factory(request.host, credentials)

        existing: dict[str, int] = {}
        if request.overwrite:
            existing = list_existing_downloads(client, repository)
            LOGGER.debug(
                "Got existing downloads: %s",
                ", ".join(sorted(existing)) or "<none>",
                extra={"event": "downloads.existing", "repository": repository.generate_id()},
            )

        files = list(request.files)
        if request.dry_run:
            LOGGER.info(
                "Dry run mode, downloads will not be deleted or uploaded",
                extra={"event": "task.dry_run"},
            )

        count = len(files)
        noun = "download" if count == 1 else "downloads"
        LOGGER.info(
            "Adding %d %s to repository %s",
            count,
            noun,
            repository.generate_id(),
            extra={"event": "task.start", "repository": repository.generate_id(), "count": count},
        )

        service = DownloadUploadService(client)
        return service.run(
            files,
            repository,
            overwrite=request.overwrite,
            dry_run=request.dry_run,
            suffix=request.suffix,
            description=request.description,
            existing=existing,
        )

    def publish(self, request: UploadRequest) -> PublishResult:
        report = self.execute(request)
        return PublishResult(result=BuildResult.SUCCESS, uploaded=report.uploaded_names)


__all__ = ["ClientFactory", "DownloadUploadTask", "FileSelection"]
