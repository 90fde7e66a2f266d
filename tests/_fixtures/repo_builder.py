"""Helper utilities for constructing temporary frontend trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import List, Mapping

from gqlscan.scanner import FileScanner


class RepoBuilder:
    """Utility for writing files into a throwaway source tree and rescanning it."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "app"
        self.root.mkdir()
        self._scanner = FileScanner()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the tree."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def scan(self) -> List[str]:
        """Return the files under the root that carry a GraphQL marker."""
        return self._scanner.find_tagged_files(self.root)

    def path(self, relative: str = "") -> Path:
        """Return the tree root, or a path inside it."""
        return self.root / relative if relative else self.root


__all__ = ["RepoBuilder"]
