"""Builds analysis prompts from Jinja templates."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..logging import get_logger
from ..models import Page
from .constants import (
    FILE_HEADER,
    GROUP_OPERATIONS_TEMPLATE,
    PAGE_INVENTORY_TEMPLATE,
    PAGE_OPERATIONS_TEMPLATE,
)

logger = get_logger("prompting")

_DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


class PromptBuilder:
    """Renders the fixed instruction templates sent to the remote model.

    Templates are looked up in ``templates_dir`` first, then in the named
    ``pack`` under the packaged templates directory, then in the packaged
    defaults. Overriding a single file is enough to change one prompt.
    """

    def __init__(self, templates_dir: Path | None = None, *, pack: str | None = None) -> None:
        self.templates_dir = templates_dir
        self.pack = pack
        self._env = self._create_env(templates_dir, pack)

    def build_group_prompt(self, page_name: str, files: Sequence[str], contents: str) -> str:
        """Prompt asking for the operations used by one pre-grouped set of files."""
        return self._render(
            GROUP_OPERATIONS_TEMPLATE,
            page_name=page_name,
            files=list(files),
            contents=contents,
        )

    def build_inventory_prompt(self, source_text: str) -> str:
        """Prompt asking for every page/route defined in a source blob."""
        return self._render(PAGE_INVENTORY_TEMPLATE, source_text=source_text)

    def build_page_prompt(self, page: Page, source_text: str) -> str:
        """Prompt asking for the operations of one discovered page."""
        return self._render(PAGE_OPERATIONS_TEMPLATE, page=page, source_text=source_text)

    def _render(self, template_name: str, **context: object) -> str:
        template = self._env.get_template(template_name)
        prompt = template.render(**context).strip() + "\n"
        logger.debug("Rendered %s (%d characters)", template_name, len(prompt))
        return prompt

    @staticmethod
    def _create_env(templates_dir: Path | None, pack: str | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        if pack:
            directories.append(str(_DEFAULT_TEMPLATES_DIR / pack))
        directories.append(str(_DEFAULT_TEMPLATES_DIR))
        # keep lookup order, drop duplicates
        ordered = list(dict.fromkeys(directories))
        return Environment(
            loader=FileSystemLoader(ordered),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
        )


def read_files_content(files: Iterable[str]) -> str:
    """Concatenate ``FILE: <path>`` blocks for each readable file.

    Unreadable files are logged and left out.
    """
    blocks: List[str] = []
    for file in files:
        try:
            content = Path(file).read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.error("Error reading file %s: %s", file, exc)
            continue
        blocks.append(f"{FILE_HEADER.format(path=file)}\n{content}")
    return "\n\n".join(blocks)


__all__ = ["PromptBuilder", "read_files_content"]
