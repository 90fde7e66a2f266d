"""Locate GraphQL-bearing source files and group them by page folder."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from .config import DEFAULT_EXTENSIONS, DEFAULT_MARKERS
from .logging import get_logger
from .models import FileGroup

logger = get_logger("scanner")


class FileScanner:
    """Walks a source tree and keeps files whose text contains a GraphQL marker."""

    def __init__(
        self,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        markers: Sequence[str] = DEFAULT_MARKERS,
    ) -> None:
        if not markers:
            raise ValueError("At least one marker is required")
        self.extensions = frozenset(ext.lower() for ext in extensions)
        self.markers = tuple(markers)

    def find_tagged_files(self, root: str | os.PathLike[str]) -> List[str]:
        """Return paths of matching files under ``root`` in traversal order.

        Paths are ``root`` joined with each file's relative location, so a
        relative root produces relative paths.
        """
        root_str = os.fspath(root)
        root_path = Path(root_str).expanduser()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root_str}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root_str}")

        matches: List[str] = []
        for path in self._iter_candidates(root_str):
            if self.contains_marker(path):
                matches.append(path)
        logger.debug("Matched %d files under %s", len(matches), root_str)
        return matches

    def contains_marker(self, path: str) -> bool:
        with open(path, encoding="utf-8", errors="replace") as handle:
            content = handle.read()
        return any(marker in content for marker in self.markers)

    def _iter_candidates(self, root: str) -> Iterator[str]:
        def _raise(exc: OSError) -> None:
            raise exc

        for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise):
            for filename in filenames:
                if os.path.splitext(filename)[1].lower() in self.extensions:
                    yield os.path.join(dirpath, filename)


def group_files_by_pages_root(
    files: Iterable[str], pages_root: str | os.PathLike[str]
) -> FileGroup:
    """Group files by the first path segment relative to ``pages_root``.

    Files outside the root are kept; their key is whatever the first relative
    segment computes to (usually ``..``).
    """
    grouped: FileGroup = {}
    root = os.fspath(pages_root)
    for file in files:
        key = group_key(file, root)
        grouped.setdefault(key, []).append(file)
    return grouped


def group_key(file: str, pages_root: str) -> str:
    relative = os.path.relpath(file, pages_root)
    return relative.split(os.sep)[0]


__all__ = ["FileScanner", "group_files_by_pages_root", "group_key"]
