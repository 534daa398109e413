"""Upload orchestration services."""

from __future__ import annotations

from .upload_service import DownloadUploadService, UploadReport, describe_size, target_name

__all__ = ["DownloadUploadService", "UploadReport", "describe_size", "target_name"]
