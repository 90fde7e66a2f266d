"""Post-processing of model replies."""

from .json_extract import ReplyParseError, extract_json

__all__ = ["ReplyParseError", "extract_json"]
