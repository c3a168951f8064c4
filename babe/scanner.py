from __future__ import annotations

import datetime as dt
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

IGNORE_PATTERNS: dict[str, re.Pattern[str]] = {
    "dot_files": re.compile(r"(?:^|/)\.\w"),
    "non_markdown_files": re.compile(r"^(?!.*\.md$)"),
    "markdown_files": re.compile(r"\.md$"),
    "non_template_files": re.compile(r"^(?!.*\.hbs$)"),
    "template_files": re.compile(r"\.hbs$"),
    "template_dirs": re.compile(r"(?:^|/)_(?:layouts|partials)/"),
    "config_files": re.compile(r"(?:^|/)(?:local\.)?babe\.(?:json|toml|ya?ml)$"),
    "public_files": re.compile(r"^/public/"),
}

DEFAULT_IGNORE_PATTERNS: list[re.Pattern[str]] = [IGNORE_PATTERNS["dot_files"]]


@dataclass(frozen=True)
class ScannedFile:
    path: Path
    relative_path: str
    modified_at: dt.datetime


def ignore_path(path: str, patterns: Iterable[re.Pattern[str]]) -> bool:
    return any(pattern.search(path) for pattern in patterns)


def scan(root: Path, ignore_patterns: Iterable[re.Pattern[str]] | None = None) -> list[ScannedFile]:
    """Recursively list files under ``root``.

    Each pattern is searched against the POSIX form of a file's full path;
    a match skips the file. Directories are always descended into. Files
    under ``root/public/`` are always skipped so the generator never picks up
    its own output; that check uses the root-relative path, so a ``public``
    directory elsewhere in the tree or above ``root`` is not affected.
    """
    patterns = list(DEFAULT_IGNORE_PATTERNS if ignore_patterns is None else ignore_patterns)
    root = Path(root)
    public_pattern = IGNORE_PATTERNS["public_files"]

    def walk(directory: Path) -> list[ScannedFile]:
        files: list[ScannedFile] = []
        with os.scandir(directory) as entries:
            ordered = sorted(entries, key=lambda entry: entry.name)
        for entry in ordered:
            file_path = directory / entry.name
            if entry.is_dir():
                files.extend(walk(file_path))
                continue
            relative_path = "/" + file_path.relative_to(root).as_posix()
            if not entry.is_file() or public_pattern.search(relative_path):
                continue
            if ignore_path(file_path.as_posix(), patterns):
                continue
            stat = entry.stat()
            files.append(
                ScannedFile(
                    path=file_path,
                    relative_path=relative_path,
                    modified_at=dt.datetime.fromtimestamp(stat.st_mtime),
                )
            )
        return files

    return walk(root)
