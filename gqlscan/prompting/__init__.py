"""Prompt construction for GraphQL operation analysis."""

from .builder import PromptBuilder, read_files_content

__all__ = ["PromptBuilder", "read_files_content"]
