"""HTTP adapter for OpenAI-compatible chat-completion endpoints (OpenRouter by default)."""

from __future__ import annotations

import json
from dataclasses import dataclass
from http.client import HTTPException
from typing import Callable, Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..config import (
    DEFAULT_BASE_URL,
    DEFAULT_MODEL,
    DEFAULT_REFERER,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_TEMPERATURE,
    DEFAULT_TITLE,
    LLMConfig,
)
from ..logging import get_logger

logger = get_logger("llm")


class LLMError(RuntimeError):
    """Raised when a chat-completion call fails or returns an unusable envelope."""

    def __init__(self, message: str, *, status: int | None = None, reason: str | None = None) -> None:
        super().__init__(message)
        self.status = status
        self.reason = reason


@dataclass
class LLMRequest:
    """Represents one single-turn chat-completion request."""

    prompt: str
    model: str
    temperature: Optional[float]
    base_url: str
    api_key: Optional[str]
    referer: Optional[str]
    title: Optional[str]
    request_timeout: Optional[float]


class LLMRunner:
    """Sends prompts to a remote chat-completion service and returns the reply text."""

    def __init__(
        self,
        model: str | None = None,
        *,
        api_key: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        temperature: Optional[float] = DEFAULT_TEMPERATURE,
        referer: str | None = DEFAULT_REFERER,
        title: str | None = DEFAULT_TITLE,
        request_timeout: Optional[float] = DEFAULT_REQUEST_TIMEOUT,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> None:
        self.model = model or DEFAULT_MODEL
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self.referer = referer
        self.title = title
        self.request_timeout = request_timeout
        self._runner = runner or self._http_runner

    @classmethod
    def from_config(
        cls,
        config: LLMConfig,
        *,
        model: str | None = None,
        runner: Callable[[LLMRequest], str] | None = None,
    ) -> "LLMRunner":
        return cls(
            model or config.model,
            api_key=config.api_key,
            base_url=config.base_url,
            temperature=config.temperature,
            referer=config.referer,
            title=config.title,
            request_timeout=config.request_timeout,
            runner=runner,
        )

    def run(self, prompt: str) -> str:
        """Send the prompt as a single user turn and return the first choice's text."""
        request = LLMRequest(
            prompt=prompt,
            model=self.model,
            temperature=self.temperature,
            base_url=self.base_url,
            api_key=self.api_key,
            referer=self.referer,
            title=self.title,
            request_timeout=self.request_timeout,
        )
        logger.debug("Sending %d-character prompt to %s", len(prompt), self.model)
        return self._runner(request)

    @staticmethod
    def _http_runner(request: LLMRequest) -> str:
        endpoint = f"{request.base_url}/chat/completions"
        payload: dict[str, object] = {
            "model": request.model,
            "messages": [{"role": "user", "content": request.prompt}],
        }
        if request.temperature is not None:
            payload["temperature"] = request.temperature

        data = json.dumps(payload).encode("utf-8")
        headers = {"Content-Type": "application/json"}
        if request.api_key:
            headers["Authorization"] = f"Bearer {request.api_key}"
        if request.referer:
            headers["HTTP-Referer"] = request.referer
        if request.title:
            headers["X-Title"] = request.title

        http_request = Request(endpoint, data=data, headers=headers, method="POST")
        timeout = request.request_timeout or DEFAULT_REQUEST_TIMEOUT

        try:
            with urlopen(http_request, timeout=timeout) as response:  # type: ignore[arg-type]
                raw = response.read()
        except HTTPError as exc:
            body = exc.read().decode("utf-8", errors="ignore") if hasattr(exc, "read") else ""
            logger.debug("Error response body: %s", body.strip() or "(empty)")
            raise LLMError(
                f"API call failed: {exc.code} {exc.reason}",
                status=exc.code,
                reason=str(exc.reason),
            ) from exc
        except URLError as exc:
            raise LLMError(f"API call failed: {exc.reason}", reason=str(exc.reason)) from exc
        except (OSError, HTTPException) as exc:
            # Read timeouts and dropped connections surface outside urlopen.
            detail = str(exc) or type(exc).__name__
            raise LLMError(f"API call failed: {detail}", reason=detail) from exc

        try:
            response_payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise LLMError("API returned a body that is not valid JSON") from exc

        return LLMRunner._extract_content(response_payload)

    @staticmethod
    def _extract_content(payload: object) -> str:
        if not isinstance(payload, dict):
            raise LLMError("API response was not a JSON object")
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            raise LLMError("API response contained no choices")
        first = choices[0]
        message = first.get("message") if isinstance(first, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise LLMError("API response choice had no message content")
        return content


__all__ = ["LLMError", "LLMRequest", "LLMRunner"]
