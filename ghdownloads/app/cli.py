"""Unified command-line interface for uploading GitHub downloads."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Callable, Sequence

from ..platforms.base import BuildResult, UploadRequest
from ..platforms.github.api import GitHubApiError
from ..platforms.github.credentials import create_client, resolve_credentials
from ..platforms.github.downloads import list_existing_downloads
from ..platforms.github.errors import DownloadsError
from ..platforms.github.repository import extract_repository_from_scm_url, get_repository
from ..security import build_secret_provider
from ..settings import AppConfig, load_config
from ..utils.files import FileSet
from ..utils.logging import configure_logging, get_logger
from .publisher import BuildContext, DownloadsPublisher
from .task import DownloadUploadTask, FileSelection

LOGGER = get_logger(__name__)


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        structured=not args.log_plain,
    )

    handler: Callable[[argparse.Namespace], int] | None = getattr(args, "handler", None)
    if handler is None:
        parser.print_help(sys.stderr)
        return 1
    try:
        return handler(args)
    except (DownloadsError, GitHubApiError) as exc:
        LOGGER.error(
            str(exc),
            extra={"event": "cli.error", "command": args.command, "error_type": type(exc).__name__},
        )
        return 1
    except FileNotFoundError as exc:
        LOGGER.error(str(exc), extra={"event": "cli.error", "command": args.command})
        return 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ghdownloads", description="Upload build artifacts to GitHub repository downloads"
    )
    parser.add_argument("--config", help="Path to configuration file", default=None)
    parser.add_argument(
        "--log-plain",
        action="store_true",
        help="Use plain-text logs instead of JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    _add_upload_command(subparsers)
    _add_publish_command(subparsers)
    _add_list_command(subparsers)
    _add_repo_command(subparsers)

    return parser


def _add_repository_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--owner", help="Owner of the repository to upload to")
    parser.add_argument("--repository", help="Name of the repository to upload to")
    parser.add_argument("--username", help="User name for basic authentication")
    parser.add_argument("--password", help="Password for basic authentication")
    parser.add_argument("--oauth2-token", dest="oauth2_token", help="OAuth2 access token")
    parser.add_argument("--server", help="Id of stored server credentials to use")
    parser.add_argument("--host", help="Host for API calls (default: api.github.com)")


def _add_upload_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    upload_parser = subparsers.add_parser("upload", help="Upload files as repository downloads")
    _add_repository_arguments(upload_parser)
    upload_parser.add_argument("files", nargs="*", type=Path, help="Files to upload")
    upload_parser.add_argument("--description", help="Description of each download")
    upload_parser.add_argument("--suffix", help="Suffix inserted before each file extension")
    upload_parser.add_argument(
        "--overwrite",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Delete existing downloads with the same name first",
    )
    upload_parser.add_argument(
        "--dry-run",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Show what would be deleted and uploaded without changing anything",
    )
    upload_parser.add_argument(
        "--include",
        action="append",
        metavar="PATTERN",
        help="Glob of files to upload, relative to --base-dir (repeatable)",
    )
    upload_parser.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="Glob of files to leave out of --include matches (repeatable)",
    )
    upload_parser.add_argument(
        "--base-dir",
        type=Path,
        default=Path("."),
        help="Directory --include/--exclude patterns are relative to",
    )
    upload_parser.set_defaults(handler=_handle_upload)


def _add_publish_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    publish_parser = subparsers.add_parser(
        "publish", help="Upload the configured publisher entries from a build workspace"
    )
    publish_parser.add_argument("--workspace", type=Path, default=Path("."), help="Build workspace")
    publish_parser.add_argument(
        "--env",
        action="append",
        metavar="KEY=VALUE",
        default=[],
        help="Extra build variable for $VAR expansion (repeatable)",
    )
    publish_parser.add_argument(
        "--build-failed",
        action="store_true",
        help="Treat the build as failed; nothing is uploaded",
    )
    publish_parser.set_defaults(handler=_handle_publish)


def _add_list_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    list_parser = subparsers.add_parser("list", help="List the downloads of a repository")
    _add_repository_arguments(list_parser)
    list_parser.set_defaults(handler=_handle_list)


def _add_repo_command(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    repo_parser = subparsers.add_parser(
        "repo-from-url", help="Print owner/name extracted from a github.com SCM URL"
    )
    repo_parser.add_argument("url", help="SCM URL, e.g. git@github.com:owner/name.git")
    repo_parser.set_defaults(handler=_handle_repo_from_url)


def _build_task(config: AppConfig) -> DownloadUploadTask:
    secrets = build_secret_provider(
        secrets_file=config.secrets.file,
        env_prefix=config.secrets.env_prefix,
    )
    return DownloadUploadTask(secrets=secrets, github=config.github)


def _file_selection(args: argparse.Namespace) -> FileSelection:
    selection = FileSelection(files=list(args.files))
    if args.include:
        selection.add_fileset(
            FileSet(args.base_dir, includes=list(args.include), excludes=list(args.exclude or []))
        )
    return selection


def _pick(value: Any, fallback: Any) -> Any:
    return fallback if value is None else value


def _handle_upload(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    defaults = config.upload
    request = UploadRequest(
        owner=_pick(args.owner, defaults.owner),
        repository=_pick(args.repository, defaults.repository),
        files=_file_selection(args).resolve(),
        username=args.username,
        password=args.password,
        oauth2_token=args.oauth2_token,
        server=_pick(args.server, defaults.server),
        host=_pick(args.host, config.github.host),
        description=_pick(args.description, defaults.description),
        suffix=_pick(args.suffix, defaults.suffix),
        overwrite=bool(_pick(args.overwrite, defaults.overwrite)),
        dry_run=bool(_pick(args.dry_run, defaults.dry_run)),
    )

    LOGGER.info(
        "Upload started",
        extra={"event": "cli.command", "command": "upload", "files": len(request.files)},
    )
    report = _build_task(config).execute(request)
    LOGGER.info(
        "Upload finished",
        extra={
            "event": "cli.command",
            "command": "upload",
            "uploaded": report.uploaded_names,
            "deleted": [download.name for download in report.deleted],
            "dry_run": report.dry_run,
        },
    )
    return 0


def _handle_publish(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    env = dict(os.environ)
    for item in args.env:
        key, sep, value = item.partition("=")
        if not sep or not key:
            LOGGER.error(
                "Invalid --env value, expected KEY=VALUE",
                extra={"event": "cli.error", "command": "publish", "value": item},
            )
            return 2
        env[key] = value

    publisher = DownloadsPublisher.from_settings(config.publisher, task=_build_task(config))
    if not publisher.entries:
        LOGGER.warning(
            "No publisher entries configured",
            extra={"event": "cli.command", "command": "publish"},
        )

    build = BuildContext(
        workspace=args.workspace,
        env=env,
        result=BuildResult.FAILURE if args.build_failed else None,
    )
    outcome = publisher.perform(build)
    LOGGER.info(
        "Publish finished",
        extra={
            "event": "cli.command",
            "command": "publish",
            "result": outcome.result.value,
            "uploaded": outcome.uploaded,
        },
    )
    return 0 if outcome.ok else 1


def _handle_list(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    defaults = config.upload
    repository = get_repository(
        _pick(args.owner, defaults.owner), _pick(args.repository, defaults.repository)
    )
    secrets = build_secret_provider(
        secrets_file=config.secrets.file,
        env_prefix=config.secrets.env_prefix,
    )
    credentials = resolve_credentials(
        username=args.username,
        password=args.password,
        oauth2_token=args.oauth2_token,
        server=_pick(args.server, defaults.server),
        secrets=secrets,
    )
    client = create_client(
        _pick(args.host, config.github.host),
        credentials,
        timeout=config.github.timeout,
        page_size=config.github.page_size,
    )
    existing = list_existing_downloads(client, repository)
    for name in sorted(existing):
        print(f"{existing[name]}\t{name}")
    return 0


def _handle_repo_from_url(args: argparse.Namespace) -> int:
    repository = extract_repository_from_scm_url(args.url)
    if repository is None:
        LOGGER.error(
            "Not a recognised github.com SCM URL",
            extra={"event": "cli.error", "command": "repo-from-url", "url": args.url},
        )
        return 1
    print(repository.generate_id())
    return 0


__all__ = ["main"]
