"""Base classes for build plugins."""

from abc import ABC, abstractmethod
from typing import List

from ..models import AnalysisResult, AnalyzedFile, FileBuildContext


class DependencyIntrospector(ABC):
    """Contract for plugins that discover which files a file depends on."""

    @abstractmethod
    def get_dependencies(self, path: str, relative_path: str, content: str) -> List[str]:
        """Return absolute dependency paths; an empty list when nothing matches."""


class FileAnalyzer(ABC):
    """Contract for plugins that emit diagnostics for a file."""

    @abstractmethod
    def get_analysis_results(
        self, path: str, relative_path: str, content: str
    ) -> List[AnalysisResult]:
        """Return diagnostics for the file content."""


class FileBuilder(ABC):
    """Contract for plugins that turn a source file into build output."""

    @abstractmethod
    def build(self, context: FileBuildContext) -> None:
        """Write output for the file described by ``context``."""


class BuildExtension(ABC):
    """Hooks notified around a build pass for one output type."""

    def on_build_started(self) -> None:
        """Called once per pass, after the error gate and before any file builds."""

    @abstractmethod
    def on_file_built(self, file: AnalyzedFile) -> None:
        """Called after every builder of ``file`` succeeded."""
