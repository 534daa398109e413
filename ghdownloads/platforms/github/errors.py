"""Failure kinds raised while reconciling and uploading downloads."""

from __future__ import annotations


class DownloadsError(RuntimeError):
    """Base class for failures that abort an upload run."""


class ConfigurationError(DownloadsError):
    """Raised when owner/name or credentials are missing or unusable."""


class ListingError(DownloadsError):
    """Raised when the existing downloads of a repository cannot be listed."""

    def __init__(self, message: str, *, repository: str) -> None:
        super().__init__(message)
        self.repository = repository


class DeleteError(DownloadsError):
    """Raised when an existing download cannot be deleted."""

    def __init__(self, message: str, *, name: str) -> None:
        super().__init__(message)
        self.name = name


class UploadError(DownloadsError):
    """Raised when a local artifact cannot be uploaded."""

    def __init__(self, message: str, *, name: str) -> None:
        super().__init__(message)
        self.name = name


def describe_cause(exc: BaseException | None) -> str:
    """Return the message of ``exc``, falling back to its representation."""
    if exc is None:
        return ""
    message = str(exc)
    return message if message else repr(exc)


__all__ = [
    "ConfigurationError",
    "DeleteError",
    "DownloadsError",
    "ListingError",
    "UploadError",
    "describe_cause",
]
