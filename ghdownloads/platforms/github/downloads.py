"""Index of the downloads already published on a repository."""

from __future__ import annotations

from typing import Protocol, Sequence

from ...utils.logging import get_logger
from .api import GitHubApiError
from .errors import ListingError, describe_cause
from .models import RemoteDownload
from .repository import RepositoryId

LOGGER = get_logger(__name__)


class DownloadLister(Protocol):
    def list_downloads(self, repository: RepositoryId) -> Sequence[RemoteDownload]:
        """Return the downloads currently published on ``repository``."""


def list_existing_downloads(client: DownloadLister, repository: RepositoryId) -> dict[str, int]:
    """Map download names to their ids, skipping entries without a name."""
    try:
        downloads = client.list_downloads(repository)
    except (GitHubApiError, OSError) as exc:
        raise ListingError(
            f"Listing downloads for {repository.generate_id()} failed: {describe_cause(exc)}",
            repository=repository.generate_id(),
        ) from exc

    existing: dict[str, int] = {}
    for download in downloads:
        if download.name:
            existing[download.name] = download.id

    size = len(existing)
    message = "Listed 1 existing download" if size == 1 else f"Listed {size} existing downloads"
    LOGGER.debug(
        message,
        extra={"event": "downloads.listed", "repository": repository.generate_id(), "count": size},
    )
    return existing


__all__ = ["DownloadLister", "list_existing_downloads"]
