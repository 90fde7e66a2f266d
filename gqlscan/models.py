"""Core data models shared across gqlscan components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

# Group key -> files in encounter order.
FileGroup = Dict[str, List[str]]


class PayloadError(ValueError):
    """Raised when a decoded model reply does not have the expected shape."""


@dataclass(frozen=True)
class Page:
    """A page or route reported by the page inventory prompt."""

    path: str
    component: str = ""
    description: str = ""

    @property
    def label(self) -> str:
        return self.path or self.component or "unknown"

    @classmethod
    def from_payload(cls, payload: object) -> "Page":
        if not isinstance(payload, dict):
            raise PayloadError(f"Expected a page object, got {type(payload).__name__}")
        return cls(
            path=_as_text(payload.get("path")),
            component=_as_text(payload.get("component")),
            description=_as_text(payload.get("description")),
        )


@dataclass(frozen=True)
class Operation:
    """A named GraphQL query or mutation attributed to a page."""

    name: str


@dataclass
class OperationSummary:
    """Queries and mutations reported for a page, in reply order."""

    queries: List[Operation] = field(default_factory=list)
    mutations: List[Operation] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: object) -> "OperationSummary":
        if not isinstance(payload, dict):
            raise PayloadError(
                f"Expected an object with queries and mutations, got {type(payload).__name__}"
            )
        if "queries" not in payload and "mutations" not in payload:
            raise PayloadError("Reply had neither a 'queries' nor a 'mutations' list")
        return cls(
            queries=_operations(payload, "queries"),
            mutations=_operations(payload, "mutations"),
        )

    def to_dict(self) -> Dict[str, List[Dict[str, str]]]:
        return {
            "queries": [{"name": op.name} for op in self.queries],
            "mutations": [{"name": op.name} for op in self.mutations],
        }


@dataclass
class AnalysisResult:
    """Outcome for one page or group: an operation summary or an error message."""

    page: str
    analysis: Optional[OperationSummary] = None
    error: Optional[str] = None
    component: Optional[str] = None
    description: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.analysis is not None

    @property
    def query_count(self) -> int:
        return len(self.analysis.queries) if self.analysis else 0

    @property
    def mutation_count(self) -> int:
        return len(self.analysis.mutations) if self.analysis else 0

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"page": self.page}
        if self.component is not None:
            data["component"] = self.component
        if self.description is not None:
            data["description"] = self.description
        if not self.ok:
            data["error"] = self.error or "No analysis produced"
            return data
        data["analysis"] = self.analysis.to_dict()  # type: ignore[union-attr]
        data["queryCount"] = self.query_count
        data["mutationCount"] = self.mutation_count
        return data


@dataclass
class RunOutcome:
    """Result of a full analysis run."""

    output_path: Path
    results: List[AnalysisResult]

    @property
    def error_count(self) -> int:
        return sum(1 for result in self.results if not result.ok)


def _as_text(value: object) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _operations(payload: Dict[str, Any], key: str) -> List[Operation]:
    raw = payload.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise PayloadError(f"'{key}' must be a list, got {type(raw).__name__}")
    operations: List[Operation] = []
    for entry in raw:
        if isinstance(entry, dict):
            operations.append(Operation(name=_as_text(entry.get("name"))))
        elif isinstance(entry, str):
            operations.append(Operation(name=entry))
        else:
            raise PayloadError(f"Unsupported entry in '{key}': {entry!r}")
    return operations


__all__ = [
    "AnalysisResult",
    "FileGroup",
    "Operation",
    "OperationSummary",
    "Page",
    "PayloadError",
    "RunOutcome",
]
