"""Pipeline orchestration for the grouped-files and page-inventory flows."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, List

from .analysis import OperationAnalyzer
from .config import GqlScanConfig
from .llm.runner import LLMRunner
from .logging import get_logger
from .models import AnalysisResult, FileGroup, RunOutcome
from .pacing import PacingPolicy
from .prompting.builder import PromptBuilder
from .scanner import FileScanner, group_files_by_pages_root


@dataclass
class ScanOutcome:
    """Files matched by a scan and, when a pages root is known, their grouping."""

    files: List[str]
    groups: FileGroup


def output_filename(now: datetime) -> str:
    stamp = now.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    stamp = stamp.replace("+00:00", "Z")
    return f"analysis-{stamp.replace(':', '-').replace('.', '-')}.json"


class Orchestrator:
    """Runs the scan, group, paced analysis and write steps in sequence."""

    def __init__(
        self,
        analyzer: OperationAnalyzer | None = None,
        *,
        scanner: FileScanner | None = None,
        pacing: PacingPolicy | None = None,
        output_dir: Path | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.analyzer = analyzer
        self.scanner = scanner or FileScanner()
        self.pacing = pacing or PacingPolicy()
        self.output_dir = output_dir
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self.logger = get_logger("orchestrator")

    @classmethod
    def from_config(
        cls,
        config: GqlScanConfig,
        *,
        model: str | None = None,
        output_dir: str | Path | None = None,
        interval: float | None = None,
    ) -> "Orchestrator":
        """Wire the scanner, runner, prompt builder and pacing policy from configuration."""
        runner = LLMRunner.from_config(config.llm, model=model)
        builder = PromptBuilder(config.prompts.templates_dir, pack=config.prompts.pack)
        return cls(
            OperationAnalyzer(runner, builder),
            scanner=FileScanner(config.scan.extensions, config.scan.markers),
            pacing=PacingPolicy.from_config(config.pacing, interval=interval),
            output_dir=Path(output_dir) if output_dir else config.output_dir,
        )

    @classmethod
    def for_scanning(cls, config: GqlScanConfig) -> "Orchestrator":
        """Orchestrator that only scans and groups; analysis runs are rejected."""
        return cls(scanner=FileScanner(config.scan.extensions, config.scan.markers))

    def scan(self, path: str, pages_root: str | None = None) -> ScanOutcome:
        """Find GraphQL-bearing files under ``path`` and group them by ``pages_root``."""
        self.logger.info("Scanning for files with GraphQL tags in %s", path)
        files = self.scanner.find_tagged_files(path)
        self.logger.info("Found %d files containing GraphQL tags", len(files))
        for file in files:
            self.logger.info("   • %s", file)

        root = pages_root if pages_root is not None else path
        groups = group_files_by_pages_root(files, root)
        self.logger.info("Files grouped by pages folder (%d groups)", len(groups))
        for name, members in groups.items():
            self.logger.debug("%s:", name)
            for member in members:
                self.logger.debug("   • %s", os.path.relpath(member, root))
        return ScanOutcome(files=files, groups=groups)

    def run_groups(self, path: str, pages_root: str | None = None) -> RunOutcome:
        """Analyze each page group under ``path`` and write the aggregated results."""
        analyzer = self._require_analyzer()
        self.logger.info("Using model: %s", analyzer.model)
        groups = self.scan(path, pages_root).groups
        results = self.analyze_groups(groups)
        return RunOutcome(output_path=self.write_results(results), results=results)

    def analyze_groups(self, groups: FileGroup) -> List[AnalysisResult]:
        analyzer = self._require_analyzer()
        results: List[AnalysisResult] = []
        self.logger.info("Analyzing GraphQL operations for each page group...")
        for name in self.pacing.paced(groups, label=lambda key: f"page group {key}"):
            self.logger.info("Analyzing page group: %s", name)
            results.append(analyzer.analyze_group(name, groups[name]))
        return results

    def run_pages(self, text_file: str) -> RunOutcome:
        """Discover pages in a single source blob, then analyze each page in turn."""
        analyzer = self._require_analyzer()
        source_path = Path(text_file)
        source_text = source_path.read_text(encoding="utf-8")
        self.logger.info("Loaded file: %s", source_path.name)
        self.logger.info("Using model: %s", analyzer.model)

        pages = analyzer.discover_pages(source_text)
        results: List[AnalysisResult] = []
        for page in pages:
            # The inventory request counts as the previous call.
            self.pacing.wait(f"page {page.label}")
            self.logger.info("Analyzing page: %s", page.label)
            results.append(analyzer.analyze_page(page, source_text))
        return RunOutcome(output_path=self.write_results(results), results=results)

    def write_results(self, results: Iterable[AnalysisResult]) -> Path:
        """Write all results as pretty-printed JSON to a timestamped file."""
        directory = self.output_dir or Path.cwd()
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / output_filename(self._clock())
        payload = [result.to_dict() for result in results]
        target.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        errors = sum(1 for item in payload if "error" in item)
        if errors:
            self.logger.warning("%d of %d items failed analysis", errors, len(payload))
        self.logger.info("Analysis complete! Results saved to %s", target)
        return target

    def _require_analyzer(self) -> OperationAnalyzer:
        if self.analyzer is None:
            raise RuntimeError("This orchestrator was built for scanning only; no analyzer configured")
        return self.analyzer


__all__ = ["Orchestrator", "ScanOutcome", "output_filename"]
