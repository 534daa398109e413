"""CI publisher that uploads workspace files after a build."""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Sequence, TextIO

from ..platforms.base import ArtifactPublisher, BuildResult, PublishResult, UploadRequest
from ..platforms.github.api import GitHubApiError
from ..platforms.github.errors import DownloadsError
from ..settings import PublisherSettings
from ..utils.files import list_workspace, replace_macro
from ..utils.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class PublisherEntry:
    """Where one workspace pattern gets uploaded to."""

    owner: str
    repository: str
    source_file: str
    description: str | None = None

    @property
    def downloads_url(self) -> str:
        return f"https://github.com/{self.owner}/{self.repository}/downloads"


@dataclass(slots=True)
class BuildContext:
    """The parts of a finished build the publisher needs."""

    workspace: Path
    env: Mapping[str, str] = field(default_factory=dict)
    result: BuildResult | None = None
    console: TextIO = field(default_factory=lambda: sys.stdout)

    def println(self, message: str) -> None:
        print(message, file=self.console)


class DownloadsPublisher:
    """Uploads each entry's matching files with overwrite enabled.

    Problems are reported through the returned :class:`PublishResult`; this
    class never raises for a failed upload.
    """

    display_name = "Github publisher to downloads section"

    def __init__(
        self,
        username: str | None,
        password: str | None,
        entries: Sequence[PublisherEntry],
        *,
        task: ArtifactPublisher,
    ) -> None:
        self._username = username
        self._password = password
        self._entries = list(entries)
        self._task = task

    @classmethod
    def from_settings(cls, settings: PublisherSettings, *, task: ArtifactPublisher) -> "DownloadsPublisher":
        entries = [
            PublisherEntry(
                owner=item.owner,
                repository=item.repository,
                source_file=item.source_file,
                description=item.description,
            )
            for item in settings.entries
        ]
        return cls(settings.username, settings.password, entries, task=task)

    @property
    def entries(self) -> list[PublisherEntry]:
        return list(self._entries)

    def perform(self, build: BuildContext) -> PublishResult:
        if build.result is BuildResult.FAILURE:
            # Nothing is posted for a broken build.
            return PublishResult(result=BuildResult.FAILURE, messages=["Build failed, skipping upload"])

        outcome = PublishResult(result=BuildResult.SUCCESS)
        for entry in self._entries:
            if not entry.source_file.strip():
                return self._fail(build, outcome, "Configuration error: no file is specified for upload")

            build.println(f"Uploading {entry.source_file} to {entry.downloads_url}")
            expanded = replace_macro(entry.source_file, build.env)
            files = list_workspace(build.workspace, expanded)
            if not files:
                return self._fail(build, outcome, f"No such file exists: {expanded}")

            request = UploadRequest(
                owner=entry.owner,
                repository=entry.repository,
                files=files,
                username=self._username,
                password=self._password,
                description=entry.description,
                overwrite=True,
                dry_run=False,
            )
            try:
                result = self._task.publish(request)
            except (DownloadsError, GitHubApiError, OSError) as exc:
                LOGGER.error(
                    "Failed to upload files",
                    exc_info=True,
                    extra={"event": "publisher.failed", "repository": f"{entry.owner}/{entry.repository}"},
                )
                return self._fail(build, outcome, f"Failed to upload files: {exc}")

            outcome.uploaded.extend(result.uploaded)
            if result.result.failed:
                outcome.messages.extend(result.messages)
                outcome.result = BuildResult.FAILURE
                return outcome
        return outcome

    def _fail(self, build: BuildContext, outcome: PublishResult, message: str) -> PublishResult:
        build.println(message)
        outcome.messages.append(message)
        outcome.result = BuildResult.FAILURE
        return outcome


__all__ = ["BuildContext", "DownloadsPublisher", "PublisherEntry"]
