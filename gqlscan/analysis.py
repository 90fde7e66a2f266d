"""Remote analysis client: prompt, call the model, decode the reply."""

from __future__ import annotations

from typing import Any, List, Protocol, Sequence

from .llm.runner import LLMError
from .logging import get_logger
from .models import AnalysisResult, OperationSummary, Page, PayloadError
from .postproc.json_extract import ReplyParseError, extract_json
from .prompting.builder import PromptBuilder, read_files_content

# Failures confined to a single page or group; anything else aborts the run.
ITEM_ERRORS = (LLMError, ReplyParseError, PayloadError)


class Runner(Protocol):
    model: str

    def run(self, prompt: str) -> str:
        ...


class OperationAnalyzer:
    """Asks the remote model which GraphQL operations a page or file group uses.

    One instance serves both pipelines: grouped files (``analyze_group``) and
    page discovery over a single text blob (``discover_pages`` followed by
    ``analyze_page``). The model is fixed by the runner and the wording by the
    prompt builder.
    """

    def __init__(self, runner: Runner, prompt_builder: PromptBuilder | None = None) -> None:
        self.runner = runner
        self.prompt_builder = prompt_builder or PromptBuilder()
        self.logger = get_logger("analysis")

    @property
    def model(self) -> str:
        return self.runner.model

    def complete_json(self, prompt: str) -> Any:
        """Run ``prompt`` and decode the first JSON value in the reply."""
        reply = self.runner.run(prompt)
        self.logger.debug("Reply (%d characters): %.200s", len(reply), reply)
        return extract_json(reply)

    def analyze_group(self, page_name: str, files: Sequence[str]) -> AnalysisResult:
        contents = read_files_content(files)
        prompt = self.prompt_builder.build_group_prompt(page_name, files, contents)
        try:
            summary = OperationSummary.from_payload(self.complete_json(prompt))
        except ITEM_ERRORS as exc:
            self.logger.error("Error analyzing GraphQL for page %s: %s", page_name, exc)
            return AnalysisResult(page=page_name, error=str(exc))
        self._log_summary(page_name, summary)
        return AnalysisResult(page=page_name, analysis=summary)

    def discover_pages(self, source_text: str) -> List[Page]:
        """Return the page inventory the model reports for ``source_text``.

        Failures propagate: without an inventory there is nothing to analyze.
        """
        payload = self.complete_json(self.prompt_builder.build_inventory_prompt(source_text))
        if isinstance(payload, dict):
            payload = payload.get("pages")
        if not isinstance(payload, list):
            raise PayloadError("Page inventory reply did not contain a 'pages' list")
        pages = [Page.from_payload(entry) for entry in payload]
        self.logger.info("Discovered %d pages", len(pages))
        for page in pages:
            self.logger.info("   • %s (%s)", page.path, page.component or "unknown component")
        return pages

    def analyze_page(self, page: Page, source_text: str) -> AnalysisResult:
        prompt = self.prompt_builder.build_page_prompt(page, source_text)
        try:
            summary = OperationSummary.from_payload(self.complete_json(prompt))
        except ITEM_ERRORS as exc:
            self.logger.error("Error analyzing GraphQL for page %s: %s", page.label, exc)
            return AnalysisResult(
                page=page.label,
                error=str(exc),
                component=page.component,
                description=page.description,
            )
        self._log_summary(page.label, summary)
        return AnalysisResult(
            page=page.label,
            analysis=summary,
            component=page.component,
            description=page.description,
        )

    def _log_summary(self, page_name: str, summary: OperationSummary) -> None:
        self.logger.info("GraphQL analysis for %s", page_name)
        if summary.queries:
            self.logger.info("Queries:")
            for query in summary.queries:
                self.logger.info("   • %s", query.name)
        if summary.mutations:
            self.logger.info("Mutations:")
            for mutation in summary.mutations:
                self.logger.info("   • %s", mutation.name)


__all__ = ["ITEM_ERRORS", "OperationAnalyzer"]
