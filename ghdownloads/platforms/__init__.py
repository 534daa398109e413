"""Platform integration package."""

from __future__ import annotations

from .base import ArtifactPublisher, BuildResult, DownloadsClient, PublishResult, UploadRequest

__all__ = [
    "ArtifactPublisher",
    "BuildResult",
    "DownloadsClient",
    "PublishResult",
    "UploadRequest",
]
