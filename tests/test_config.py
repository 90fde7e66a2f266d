"""Tests for gqlscan.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from gqlscan.config import (
    DEFAULT_BASE_URL,
    DEFAULT_EXTENSIONS,
    DEFAULT_MARKERS,
    DEFAULT_MODEL,
    ConfigError,
    GqlScanConfig,
    load_config,
)


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path, environ={})

    assert isinstance(config, GqlScanConfig)
    assert config.root == tmp_path.resolve()
    assert config.llm.model == DEFAULT_MODEL
    assert config.llm.base_url == DEFAULT_BASE_URL
    assert config.llm.temperature == 0.0
    assert config.llm.api_key is None
    assert config.llm.referer == "http://localhost:3000"
    assert config.llm.title == "CodeAnalyzer"
    assert config.scan.extensions == list(DEFAULT_EXTENSIONS)
    assert config.scan.markers == list(DEFAULT_MARKERS)
    assert config.scan.pages_root is None
    assert config.pacing.interval == pytest.approx(10.0)
    assert config.pacing.jitter == 0.0
    assert config.prompts.templates_dir is None
    assert config.output_dir is None


def test_load_config_reads_api_key_from_environment(tmp_path: Path) -> None:
    config = load_config(
        tmp_path,
        environ={"OPENROUTER_API_KEY": "router-key", "GQLSCAN_MODEL": "openai/gpt-4o-mini"},
    )

    assert config.llm.api_key == "router-key"
    assert config.llm.model == "openai/gpt-4o-mini"


def test_project_specific_key_wins_over_openrouter_key(tmp_path: Path) -> None:
    config = load_config(
        tmp_path,
        environ={"OPENROUTER_API_KEY": "router-key", "GQLSCAN_API_KEY": "scan-key"},
    )

    assert config.llm.api_key == "scan-key"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".gqlscan.yml"
    config_file.write_text(
        """
llm:
  model: "anthropic/claude-3-opus"
  temperature: 0.2
  base_url: "https://llm.internal/v1"
  api_key: "file-key"
  request_timeout: 30
  title: "PageAudit"
scan:
  extensions: [js, ".TSX"]
  markers:
    - "gql`"
  pages_root: "src/pages"
pacing:
  interval: 20
  jitter: 5
prompts:
  templates_dir: "prompts"
  pack: "terse"
output_dir: "reports"
""",
        encoding="utf-8",
    )

    config = load_config(config_file, environ={"OPENROUTER_API_KEY": "env-key"})

    assert config.llm.model == "anthropic/claude-3-opus"
    assert config.llm.temperature == pytest.approx(0.2)
    assert config.llm.base_url == "https://llm.internal/v1"
    assert config.llm.api_key == "file-key"
    assert config.llm.request_timeout == pytest.approx(30.0)
    assert config.llm.title == "PageAudit"
    assert config.scan.extensions == [".js", ".tsx"]
    assert config.scan.markers == ["gql`"]
    assert config.scan.pages_root == tmp_path.resolve() / "src" / "pages"
    assert config.pacing.interval == pytest.approx(20.0)
    assert config.pacing.jitter == pytest.approx(5.0)
    assert config.prompts.templates_dir == tmp_path.resolve() / "prompts"
    assert config.prompts.pack == "terse"
    assert config.output_dir == tmp_path.resolve() / "reports"


def test_load_config_next_to_input_file(tmp_path: Path) -> None:
    (tmp_path / ".gqlscan.yml").write_text("llm:\n  model: local/model\n", encoding="utf-8")
    source = tmp_path / "bundle.txt"
    source.write_text("", encoding="utf-8")

    config = load_config(source, environ={})

    assert config.llm.model == "local/model"


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    (tmp_path / ".gqlscan.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".gqlscan.yml").write_text("llm: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})


def test_load_config_rejects_negative_interval(tmp_path: Path) -> None:
    (tmp_path / ".gqlscan.yml").write_text("pacing:\n  interval: -1\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path, environ={})
