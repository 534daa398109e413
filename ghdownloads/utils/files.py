"""Filesystem helpers for selecting the files to upload."""

from __future__ import annotations

import mimetypes
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping, Sequence

_MACRO = re.compile(r"\$([A-Za-z0-9_]+|\{[A-Za-z0-9_.]+\})")


def file_size(path: Path) -> int:
    return path.stat().st_size


def content_type_for(path: Path) -> str:
    return mimetypes.guess_type(path.name)[0] or "application/octet-stream"


def replace_macro(text: str, variables: Mapping[str, str]) -> str:
    """Expand ``$NAME`` and ``${NAME}``; unknown variables are left untouched."""

    def _substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key.startswith("{"):
            key = key[1:-1]
        value = variables.get(key)
        return match.group(0) if value is None else value

    return _MACRO.sub(_substitute, text)


def split_patterns(patterns: str | Iterable[str] | None) -> list[str]:
    """Split comma-separated patterns; a trailing ``/`` means everything below."""
    if patterns is None:
        return []
    raw = patterns.split(",") if isinstance(patterns, str) else list(patterns)
    result: list[str] = []
    for item in raw:
        pattern = item.strip().replace("\\", "/")
        if not pattern:
            continue
        if pattern.endswith("/"):
            pattern += "**"
        result.append(pattern)
    return result


def _glob(root: Path, pattern: str) -> list[Path]:
    candidate = Path(pattern)
    if candidate.is_absolute():
        root = Path(candidate.anchor)
        pattern = candidate.relative_to(root).as_posix()
    if pattern.endswith("**"):
        pattern += "/*"
    return sorted(path for path in root.glob(pattern) if path.is_file())


@dataclass(slots=True)
class FileSet:
    """Files under ``base_dir`` matching ``includes`` and not ``excludes``."""

    base_dir: Path
    includes: Sequence[str] = field(default_factory=lambda: ["**"])
    excludes: Sequence[str] = field(default_factory=list)

    def iter_files(self) -> list[Path]:
        includes = split_patterns(self.includes) or ["**"]
        excluded: set[Path] = set()
        for pattern in split_patterns(self.excludes):
            excluded.update(_glob(self.base_dir, pattern))

        seen: set[Path] = set()
        files: list[Path] = []
        for pattern in includes:
            for path in _glob(self.base_dir, pattern):
                if path in excluded or path in seen:
                    continue
                seen.add(path)
                files.append(path)
        return files


def list_workspace(workspace: Path, patterns: str) -> list[Path]:
    """Resolve comma-separated glob patterns relative to ``workspace``."""
    return FileSet(workspace, includes=split_patterns(patterns)).iter_files()


__all__ = [
    "FileSet",
    "content_type_for",
    "file_size",
    "list_workspace",
    "replace_macro",
    "split_patterns",
]
