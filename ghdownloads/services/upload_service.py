"""Reconcile local artifacts with existing downloads and upload them."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from ..platforms.base import DownloadsClient
from ..platforms.github.api import GitHubApiError
from ..platforms.github.downloads import list_existing_downloads
from ..platforms.github.errors import DeleteError, UploadError, describe_cause
from ..platforms.github.models import LocalArtifact, RemoteDownload
from ..platforms.github.repository import RepositoryId
from ..utils.files import content_type_for, file_size
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


def target_name(file_name: str, suffix: str | None) -> str:
    """Insert ``suffix`` before the last extension of ``file_name``.

    >>> target_name("app.tar.gz", "-v2")
    'app.tar-v2.gz'
    >>> target_name("README", "-final")
    'README-final'
    """
    if not suffix:
        return file_name
    stem, dot, extension = file_name.rpartition(".")
    if not dot:
        return file_name + suffix
    return f"{stem}{suffix}.{extension}"


def describe_size(size: int) -> str:
    return "1 byte" if size == 1 else f"{size} bytes"


@dataclass(slots=True)
class UploadReport:
    """What a run deleted and uploaded, in processing order."""

    repository: RepositoryId
    dry_run: bool
    deleted: list[RemoteDownload] = field(default_factory=list)
    uploaded: list[LocalArtifact] = field(default_factory=list)

    @property
    def uploaded_names(self) -> list[str]:
        return [artifact.name for artifact in self.uploaded]


class DownloadUploadService:
    """Deletes stale downloads and uploads local files, one file at a time."""

    def __init__(self, client: DownloadsClient) -> None:
        self._client = client

    def run(
        self,
        files: Iterable[Path],
        repository: RepositoryId,
        *,
        overwrite: bool = False,
        dry_run: bool = False,
        suffix: str | None = None,
        description: str | None = None,
        existing: dict[str, int] | None = None,
    ) -> UploadReport:
        """Process ``files`` in order.

        ``existing`` is consumed as matches are found, so a name is deleted at
        most once per run. When ``overwrite`` is off no listing happens and
        nothing is deleted. Dry runs still list and log, but never delete or
        create. Files already processed are not rolled back when a later one
        fails.
        """
        if not overwrite:
            existing = {}
        elif existing is None:
            existing = list_existing_downloads(self._client, repository)

        report = UploadReport(repository=repository, dry_run=dry_run)
        for path in files:
            name = target_name(path.name, suffix)

            existing_id = existing.pop(name, None)
            if existing_id is not None:
                self._delete(repository, RemoteDownload(name=name, id=existing_id), dry_run, report)

            try:
                size = file_size(path)
            except OSError as exc:
                raise UploadError(
                    f"Resource {name} upload failed: {describe_cause(exc)}", name=name
                ) from exc
            artifact = LocalArtifact(
                source_file=path,
                name=name,
                size=size,
                description=description or None,
                content_type=content_type_for(path),
            )
            LOGGER.info(
                "Adding download: %s (%s)",
                name,
                describe_size(artifact.size),
                extra={"event": "download.add", "download": name, "size": artifact.size},
            )
            if not dry_run:
                try:
                    self._client.create_download(repository, artifact)
                except (GitHubApiError, OSError) as exc:
                    raise UploadError(
                        f"Resource {name} upload failed: {describe_cause(exc)}", name=name
                    ) from exc
            report.uploaded.append(artifact)
        return report

    def _delete(
        self,
        repository: RepositoryId,
        download: RemoteDownload,
        dry_run: bool,
        report: UploadReport,
    ) -> None:
        LOGGER.info(
            "Deleting existing download: %s (id=%s)",
            download.name,
            download.id,
            extra={"event": "download.delete", "download": download.name, "download_id": download.id},
        )
        if not dry_run:
            try:
                self._client.delete_download(repository, download.id)
            except (GitHubApiError, OSError) as exc:
                raise DeleteError(
                    f"Deleting existing download {download.name} failed: {describe_cause(exc)}",
                    name=download.name,
                ) from exc
        report.deleted.append(download)


__all__ = ["DownloadUploadService", "UploadReport", "describe_size", "target_name"]
