"""Scan frontend sources for GraphQL operations and summarize them per page."""

__version__ = "0.1.0"

__all__ = ["__version__"]
