"""Template names used by the prompt builder."""

from __future__ import annotations

GROUP_OPERATIONS_TEMPLATE = "group_operations.j2"
PAGE_INVENTORY_TEMPLATE = "page_inventory.j2"
PAGE_OPERATIONS_TEMPLATE = "page_operations.j2"

PROMPT_TEMPLATES: tuple[str, ...] = (
    GROUP_OPERATIONS_TEMPLATE,
    PAGE_INVENTORY_TEMPLATE,
    PAGE_OPERATIONS_TEMPLATE,
)

FILE_HEADER = "FILE: {path}"


__all__ = [
    "FILE_HEADER",
    "GROUP_OPERATIONS_TEMPLATE",
    "PAGE_INVENTORY_TEMPLATE",
    "PAGE_OPERATIONS_TEMPLATE",
    "PROMPT_TEMPLATES",
]
