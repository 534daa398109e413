"""Minimal GitHub REST client for the repository downloads API."""

from __future__ import annotations

import json
import logging
from typing import Any, Iterator, Mapping
from urllib.parse import urlparse

import requests

from .errors import ConfigurationError
from .models import DownloadResource, LocalArtifact, RemoteDownload
from .repository import HOST_DEFAULT, RepositoryId

_LOGGER = logging.getLogger(__name__)

HOST_API = "api.github.com"
SEGMENT_V3_API = "/api/v3"
DEFAULT_TIMEOUT = 30.0
DEFAULT_PAGE_SIZE = 100
USER_AGENT = "ghdownloads/1.0"


class GitHubApiError(RuntimeError):
    """Raised when GitHub API calls fail."""

    def __init__(self, message: str, *, details: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = dict(details or {})

    @property
    def status(self) -> int | None:
        status = self.details.get("status")
        return status if isinstance(status, int) else None

    def __str__(self) -> str:
        base = super().__str__()
        if not self.details:
            return base
        try:
            detail_repr = json.dumps(self.details, ensure_ascii=False, default=str)
        except TypeError:
            detail_repr = str(self.details)
        return f"{base} | details: {detail_repr}"


class GitHubClient:
    """Authenticated access to ``/repos/{owner}/{name}/downloads``."""

    def __init__(
        self,
        host: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
        session: requests.Session | None = None,
    ) -> None:
        self._base_url = self._base_url_for(host or HOST_API)
        self._timeout = timeout
        self._page_size = page_size
        self._session = session if session is not None else requests.Session()
        self._session.headers.update(
            {"Accept": "application/vnd.github+json", "User-Agent": USER_AGENT}
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    @staticmethod
    def _base_url_for(host: str) -> str:
        if "://" in host:
            parsed = urlparse(host)
            if not parsed.scheme or not parsed.hostname:
                raise ConfigurationError(f"Could not parse host URL {host}")
            try:
                port = parsed.port
            except ValueError as exc:
                raise ConfigurationError(f"Could not parse host URL {host}") from exc
            scheme, hostname = parsed.scheme, parsed.hostname
        else:
            scheme, hostname, port = "https", host, None

        if hostname == HOST_DEFAULT:
            hostname = HOST_API
        netloc = f"{hostname}:{port}" if port else hostname
        prefix = "" if hostname == HOST_API else SEGMENT_V3_API
        return f"{scheme}://{netloc}{prefix}"

    def set_credentials(self, username: str, password: str) -> None:
        """Use basic authentication for subsequent requests."""
        self._session.headers.pop("Authorization", None)
        self._session.auth = (username, password)

    def set_oauth2_token(self, token: str) -> None:
        """Use an OAuth2 access token for subsequent requests."""
        self._session.auth = None
        self._session.headers["Authorization"] = f"token {token}"

    def list_downloads(self, repository: RepositoryId) -> list[RemoteDownload]:
        """Return every download of ``repository``, following pagination."""
        url: str | None = self._downloads_url(repository)
        params: dict[str, Any] | None = {"per_page": self._page_size}
        downloads: list[RemoteDownload] = []
        while url:
            response = self._request("GET", url, params=params)
            for item in self._json_list(response):
                try:
                    downloads.append(RemoteDownload.from_payload(item))
                except ValueError as exc:
                    raise GitHubApiError(
                        "Unexpected download payload",
                        details={"url": url, "payload": dict(item), "reason": str(exc)},
                    ) from exc
            url = response.links.get("next", {}).get("url")
            params = None
        return downloads

    def delete_download(self, repository: RepositoryId, download_id: int) -> None:
        url = f"{self._downloads_url(repository)}/{download_id}"
        self._request("DELETE", url)

    def create_download(self, repository: RepositoryId, artifact: LocalArtifact) -> DownloadResource:
        """Register ``artifact`` with GitHub and push its content to the upload store."""
        resource = self.create_resource(repository, artifact)
        self.upload_resource(resource, artifact)
        return resource

    def create_resource(self, repository: RepositoryId, artifact: LocalArtifact) -> DownloadResource:
        response = self._request("POST", self._downloads_url(repository), json=artifact.as_payload())
        data = self._json_object(response)
        resource = DownloadResource.from_payload(data)
        if not resource.s3_url:
            raise GitHubApiError("Download registered without an upload URL", details=data)
        return resource

    def upload_resource(self, resource: DownloadResource, artifact: LocalArtifact) -> None:
        fields = {
            "key": resource.path,
            "acl": resource.acl,
            "success_action_status": "201",
            "Filename": resource.name or artifact.name,
            "AWSAccessKeyId": resource.access_key_id,
            "Policy": resource.policy,
            "Signature": resource.signature,
            "Content-Type": resource.mime_type or artifact.content_type,
        }
        with artifact.source_file.open("rb") as stream:
            files = {"file": (artifact.name, stream, resource.mime_type or artifact.content_type)}
            try:
                # The upload store rejects GitHub credentials, so bypass the session.
                response = requests.post(
                    resource.s3_url, data=fields, files=files, timeout=self._timeout
                )
            except requests.RequestException as exc:
                raise GitHubApiError(
                    "Upload request failed",
                    details={"url": resource.s3_url, "reason": str(exc)},
                ) from exc
        if response.status_code != 201:
            raise GitHubApiError(
                "Unexpected response from upload store",
                details={
                    "status": response.status_code,
                    "reason": response.reason,
                    "response": response.text[:200],
                },
            )

    def _downloads_url(self, repository: RepositoryId) -> str:
        return f"{self._base_url}/repos/{repository.owner}/{repository.name}/downloads"

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        _LOGGER.debug("%s %s", method, url, extra={"event": "github.request", "method": method})
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            raise GitHubApiError(
                "Request to GitHub failed",
                details={"method": method, "url": url, "reason": str(exc)},
            ) from exc

        if not 200 <= response.status_code < 300:
            raise GitHubApiError(
                self._error_message(response),
                details={
                    "method": method,
                    "url": url,
                    "status": response.status_code,
                    "reason": response.reason,
                },
            )
        return response

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            data = None
        if isinstance(data, dict) and data.get("message"):
            return f"{data['message']} ({response.status_code})"
        return f"GitHub responded with {response.status_code}"

    @staticmethod
    def _json_list(response: requests.Response) -> Iterator[Mapping[str, Any]]:
        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubApiError(
                "Failed to parse GitHub response", details={"response": response.text[:200]}
            ) from exc
        if not isinstance(data, list):
            raise GitHubApiError("Expected a list of downloads", details={"response": data})
        for item in data:
            if isinstance(item, Mapping):
                yield item

    @staticmethod
    def _json_object(response: requests.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise GitHubApiError(
                "Failed to parse GitHub response", details={"response": response.text[:200]}
            ) from exc
        if not isinstance(data, dict):
            raise GitHubApiError("Expected a JSON object", details={"response": data})
        return data


__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_TIMEOUT",
    "GitHubApiError",
    "GitHubClient",
    "HOST_API",
    "HOST_DEFAULT",
]
