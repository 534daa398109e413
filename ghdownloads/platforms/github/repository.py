"""Repository identifiers and helpers for locating them."""

from __future__ import annotations

from dataclasses import dataclass

from ...utils.logging import get_logger
from .errors import ConfigurationError

LOGGER = get_logger(__name__)

HOST_DEFAULT = "github.com"
SUFFIX_GIT = ".git"


@dataclass(slots=True, frozen=True)
class RepositoryId:
    """Owner and name of a GitHub repository."""

    owner: str
    name: str

    def __post_init__(self) -> None:
        if not self.owner or not self.name:
            raise ValueError("Repository owner and name must both be non-empty")

    @classmethod
    def create(cls, owner: str | None, name: str | None) -> "RepositoryId | None":
        """Return an identifier, or ``None`` when either part is empty."""
        if not owner or not name:
            return None
        return cls(owner=owner, name=name)

    @classmethod
    def from_id(cls, value: str | None) -> "RepositoryId | None":
        """Parse ``owner/name``; empty segments are skipped and extra ones ignored."""
        if not value:
            return None
        segments = [segment for segment in value.split("/") if segment]
        if len(segments) < 2:
            return None
        return cls.create(segments[0], segments[1])

    def generate_id(self) -> str:
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.generate_id()


def get_repository(owner: str | None, name: str | None) -> RepositoryId:
    """Resolve the configured repository or fail with a configuration error."""
    repository = RepositoryId.create(owner, name)
    if repository is None:
        raise ConfigurationError(
            "No GitHub repository (owner and name) configured; set both owner and repository"
        )
    LOGGER.debug(
        "Using GitHub repository %s",
        repository.generate_id(),
        extra={"event": "repository.resolved", "repository": repository.generate_id()},
    )
    return repository


def extract_repository_from_scm_url(url: str | None) -> RepositoryId | None:
    """Best-effort extraction of a repository from a ``github.com`` SCM URL.

    Only URLs that contain ``github.com`` and end with ``.git`` are
    recognised, e.g. ``scm:git:git@github.com:owner/name.git`` or
    ``https://github.com/owner/name.git``. Everything else yields ``None``.
    """
    if not url:
        return None
    index = url.find(HOST_DEFAULT)
    if index == -1 or index + 1 >= len(url):
        return None
    if not url.endswith(SUFFIX_GIT):
        return None
    start = index + len(HOST_DEFAULT) + 1
    end = len(url) - len(SUFFIX_GIT)
    if start >= end:
        return None
    return RepositoryId.from_id(url[start:end])


__all__ = [
    "HOST_DEFAULT",
    "RepositoryId",
    "SUFFIX_GIT",
    "extract_repository_from_scm_url",
    "get_repository",
]
