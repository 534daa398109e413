"""Shared test doubles."""

from __future__ import annotations

from typing import Any, Callable, Iterable

import pytest

from ghdownloads.platforms.github import GitHubApiError, LocalArtifact, RemoteDownload, RepositoryId


class StubDownloadsClient:
    """Records every remote call instead of talking to GitHub."""

    def __init__(
        self,
        downloads: Iterable[RemoteDownload] = (),
        *,
        fail_list: bool = False,
        fail_delete: Iterable[int] = (),
        fail_create: Iterable[str] = (),
    ) -> None:
        self.downloads = list(downloads)
        self.fail_list = fail_list
        self.fail_delete = set(fail_delete)
        self.fail_create = set(fail_create)
        self.calls: list[tuple[str, object]] = []
        self.created: list[LocalArtifact] = []

    def list_downloads(self, repository: RepositoryId) -> list[RemoteDownload]:
        self.calls.append(("list", repository.generate_id()))
        if self.fail_list:
            raise GitHubApiError("Server Error (500)", details={"status": 500})
        return list(self.downloads)

    def delete_download(self, repository: RepositoryId, download_id: int) -> None:
        self.calls.append(("delete", download_id))
        if download_id in self.fail_delete:
            raise GitHubApiError("Not Found (404)", details={"status": 404})

    def create_download(self, repository: RepositoryId, artifact: LocalArtifact) -> None:
        self.calls.append(("create", artifact.name))
        if artifact.name in self.fail_create:
            raise GitHubApiError("Validation Failed (422)", details={"status": 422})
        self.created.append(artifact)

    def count(self, kind: str) -> int:
        return sum(1 for call, _ in self.calls if call == kind)


@pytest.fixture
def make_client() -> Callable[..., StubDownloadsClient]:
    return StubDownloadsClient


@pytest.fixture
def repository() -> RepositoryId:
    return RepositoryId(owner="octo", name="widgets")


class ListingResponse:
    status_code = 200
    reason = "OK"
    text = ""

    def __init__(self, payload: Any) -> None:
        self._payload = payload
        self.links: dict[str, dict[str, str]] = {}

    def json(self) -> Any:
        return self._payload


class ListingSession:
    """Session double that answers every request with the same JSON listing."""

    def __init__(self, payload: Any) -> None:
        self.headers: dict[str, str] = {}
        self.auth = None
        self.payload = payload

    def request(self, method: str, url: str, **kwargs: Any) -> ListingResponse:
        return ListingResponse(self.payload)


@pytest.fixture
def listing_session() -> Callable[[Any], ListingSession]:
    return ListingSession
