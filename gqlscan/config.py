"""Configuration loading for gqlscan (.gqlscan.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

CONFIG_FILENAME = ".gqlscan.yml"

DEFAULT_MODEL = "google/gemini-2.0-flash-thinking-exp:free"
DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_REFERER = "http://localhost:3000"
DEFAULT_TITLE = "CodeAnalyzer"
DEFAULT_TEMPERATURE = 0.0
DEFAULT_REQUEST_TIMEOUT = 120.0
DEFAULT_INTERVAL = 10.0

DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".jsx", ".ts", ".tsx")
DEFAULT_MARKERS: tuple[str, ...] = ("gql`", "graphql`")

ENV_API_KEY_KEYS = ("GQLSCAN_API_KEY", "OPENROUTER_API_KEY")
ENV_MODEL_KEYS = ("GQLSCAN_MODEL",)
ENV_BASE_URL_KEYS = ("GQLSCAN_BASE_URL",)


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Remote model settings."""

    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    referer: str = DEFAULT_REFERER
    title: str = DEFAULT_TITLE


@dataclass
class ScanConfig:
    """Which files count as GraphQL-bearing sources."""

    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_EXTENSIONS))
    markers: List[str] = field(default_factory=lambda: list(DEFAULT_MARKERS))
    pages_root: Optional[Path] = None


@dataclass
class PacingConfig:
    """Delay inserted between consecutive remote calls."""

    interval: float = DEFAULT_INTERVAL
    jitter: float = 0.0


@dataclass
class PromptConfig:
    """Template overrides for the prompt builder."""

    templates_dir: Optional[Path] = None
    pack: Optional[str] = None


@dataclass
class GqlScanConfig:
    """Represents the settings defined in .gqlscan.yml merged with the environment."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    scan: ScanConfig = field(default_factory=ScanConfig)
    pacing: PacingConfig = field(default_factory=PacingConfig)
    prompts: PromptConfig = field(default_factory=PromptConfig)
    output_dir: Optional[Path] = None


def load_config(
    config_path: Path, *, environ: Mapping[str, str] | None = None
) -> GqlScanConfig:
    """Load configuration from disk, filling gaps from the environment and defaults.

    ``config_path`` may point at a directory (the file is looked up inside it) or
    at the config file itself. A missing file yields the defaults.
    """
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig(
        model=_as_str(llm_data.get("model"))
        or _first_env_value(env, ENV_MODEL_KEYS)
        or DEFAULT_MODEL,
        temperature=_as_float(llm_data.get("temperature"), DEFAULT_TEMPERATURE),
        base_url=_as_str(llm_data.get("base_url"))
        or _first_env_value(env, ENV_BASE_URL_KEYS)
        or DEFAULT_BASE_URL,
        api_key=_as_str(llm_data.get("api_key")) or _first_env_value(env, ENV_API_KEY_KEYS),
        request_timeout=_as_float(llm_data.get("request_timeout"), DEFAULT_REQUEST_TIMEOUT),
        referer=_as_str(llm_data.get("referer")) or DEFAULT_REFERER,
        title=_as_str(llm_data.get("title")) or DEFAULT_TITLE,
    )

    scan_data = _as_dict(data.get("scan"))
    scan = ScanConfig()
    extensions = _as_str_list(scan_data.get("extensions"))
    if extensions:
        scan.extensions = [_normalise_extension(ext) for ext in extensions]
    markers = _as_str_list(scan_data.get("markers"))
    if markers:
        scan.markers = markers
    pages_root = _as_str(scan_data.get("pages_root"))
    if pages_root:
        scan.pages_root = root / pages_root

    pacing_data = _as_dict(data.get("pacing"))
    pacing = PacingConfig(
        interval=_as_float(pacing_data.get("interval"), DEFAULT_INTERVAL),
        jitter=_as_float(pacing_data.get("jitter"), 0.0),
    )
    if pacing.interval < 0 or pacing.jitter < 0:
        raise ConfigError("pacing.interval and pacing.jitter must not be negative")

    prompt_data = _as_dict(data.get("prompts"))
    templates_dir = _as_str(prompt_data.get("templates_dir"))
    prompts = PromptConfig(
        templates_dir=root / templates_dir if templates_dir else None,
        pack=_as_str(prompt_data.get("pack")),
    )

    output_dir = _as_str(data.get("output_dir"))

    return GqlScanConfig(
        root=root,
        llm=llm,
        scan=scan,
        pacing=pacing,
        prompts=prompts,
        output_dir=root / output_dir if output_dir else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix in {".yml", ".yaml"}:
        return config_path.resolve()
    return (config_path.parent / CONFIG_FILENAME).resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _first_env_value(env: Mapping[str, str], keys: Sequence[str]) -> Optional[str]:
    for key in keys:
        value = env.get(key)
        if value:
            return value
    return None


def _normalise_extension(value: str) -> str:
    value = value.strip().lower()
    return value if value.startswith(".") else f".{value}"


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError as exc:
            raise ConfigError(f"Expected a number, got {value!r}") from exc
    return default


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "GqlScanConfig",
    "LLMConfig",
    "PacingConfig",
    "PromptConfig",
    "ScanConfig",
    "load_config",
]
