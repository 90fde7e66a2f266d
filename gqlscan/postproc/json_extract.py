"""Pull the first JSON value out of free-form model replies."""

from __future__ import annotations

import json
from typing import Any

_OPENERS = {"{": "}", "[": "]"}


class ReplyParseError(ValueError):
    """Raised when a model reply does not contain a decodable JSON value."""


def extract_json(text: str) -> Any:
    """Return the first top-level JSON object or array found in ``text``.

    Code fences, leading prose and trailing commentary are ignored. A candidate
    that balances but fails to decode is skipped along with everything nested
    inside it. An opener that never closes ends the search.
    """
    if not text or not text.strip():
        raise ReplyParseError("Reply was empty")

    last_error: json.JSONDecodeError | None = None
    index = 0
    while index < len(text):
        if text[index] not in _OPENERS:
            index += 1
            continue
        end = _match_brackets(text, index)
        if end is None:
            raise ReplyParseError(f"Reply contained an unterminated JSON value: {_preview(text[index:])}")
        try:
            return json.loads(text[index:end])
        except json.JSONDecodeError as exc:
            last_error = exc
        index = end

    if last_error is not None:
        raise ReplyParseError(f"Reply contained malformed JSON: {last_error}") from last_error
    raise ReplyParseError(f"Reply did not contain a JSON value: {_preview(text)}")


def _match_brackets(text: str, start: int) -> int | None:
    stack = [_OPENERS[text[start]]]
    in_string = False
    escaped = False
    for position in range(start + 1, len(text)):
        char = text[position]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            in_string = True
        elif char in _OPENERS:
            stack.append(_OPENERS[char])
        elif char in ("}", "]"):
            if char != stack[-1]:
                return None
            stack.pop()
            if not stack:
                return position + 1
    return None


def _preview(text: str, limit: int = 80) -> str:
    flattened = " ".join(text.split())
    if len(flattened) <= limit:
        return repr(flattened)
    return repr(flattened[:limit] + "...")


__all__ = ["ReplyParseError", "extract_json"]
