"""Data models exchanged with the GitHub downloads API."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping


@dataclass(slots=True, frozen=True)
class RemoteDownload:
    """A download currently published on a repository."""

    name: str
    id: int

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RemoteDownload":
        """Build from a listing entry; raises ``ValueError`` when the id is missing or not numeric."""
        raw_id = payload.get("id")
        if raw_id is None or isinstance(raw_id, bool):
            raise ValueError(f"Download entry has no usable id: {raw_id!r}")
        try:
            download_id = int(raw_id)
        except TypeError as exc:
            raise ValueError(f"Download entry has no usable id: {raw_id!r}") from exc
        return cls(name=str(payload.get("name") or ""), id=download_id)


@dataclass(slots=True)
class LocalArtifact:
    """A local file about to be published under ``name``."""

    source_file: Path
    name: str
    size: int
    description: str | None = None
    content_type: str = "application/octet-stream"

    def as_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "size": self.size,
            "content_type": self.content_type,
        }
        if self.description:
            payload["description"] = self.description
        return payload


@dataclass(slots=True)
class DownloadResource:
    """Upload policy returned by GitHub after a download has been registered."""

    id: int
    name: str
    s3_url: str
    path: str
    acl: str
    access_key_id: str
    policy: str
    signature: str
    mime_type: str
    html_url: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DownloadResource":
        return cls(
            id=int(payload.get("id") or 0),
            name=str(payload.get("name", "")),
            s3_url=str(payload.get("s3_url", "")),
            path=str(payload.get("path", "")),
            acl=str(payload.get("acl", "")),
            access_key_id=str(payload.get("accesskeyid", "")),
            policy=str(payload.get("policy", "")),
            signature=str(payload.get("signature", "")),
            mime_type=str(payload.get("mime_type", "")),
            html_url=payload.get("html_url"),
        )


__all__ = ["DownloadResource", "LocalArtifact", "RemoteDownload"]
