"""Core data models shared across sitegen components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class Severity(str, Enum):
    """Diagnostic severity; only ``ERROR`` blocks a build."""

    SUGGESTION = "suggestion"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class AnalysisResult:
    """Diagnostic emitted by a file analyzer."""

    severity: Severity
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def location(self) -> str:
        if self.line is None:
            return ""
        if self.column is None:
            return f"[{self.line}]"
        return f"[{self.line}:{self.column}]"


@dataclass(frozen=True)
class AnalyzedFile:
    """Snapshot of a single source file after analysis."""

    path: str
    compact_path: str
    extension: str
    dependencies: Tuple[str, ...]
    hash: str
    analysis_results: Tuple[AnalysisResult, ...] = ()

    @property
    def has_errors(self) -> bool:
        return any(result.severity is Severity.ERROR for result in self.analysis_results)


@dataclass(frozen=True)
class FileBuildContext:
    """Arguments handed to a file builder."""

    path: str
    relative_path: str
    extension: str
    content: str


class BuildStatus(str, Enum):
    PENDING = "pending"
    BUILDING = "building"
    BUILT = "built"
    FAILED = "failed"


@dataclass
class BuildEntry:
    """Build-session state for one analyzed file."""

    file: AnalyzedFile
    built_hash: Optional[str] = None
    status: BuildStatus = BuildStatus.PENDING

    @property
    def path(self) -> str:
        return self.file.path


__all__ = [
    "AnalysisResult",
    "AnalyzedFile",
    "BuildEntry",
    "BuildStatus",
    "FileBuildContext",
    "Severity",
]
