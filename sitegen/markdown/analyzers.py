"""Markdown-specific file analyzers."""

from __future__ import annotations

import re
from typing import List, Sequence

from ..filesystem import FileSystem
from ..matching import iter_matches, match_all_functions
from ..models import AnalysisResult, Severity
from ..plugins.base import FileAnalyzer
from .functions import FunctionExecutor

LINK_PATTERN = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_TITLE_PATTERN = re.compile(r"\s+(\"[^\"]*\"|'[^']*')$")
_FENCE_PATTERN = re.compile(r"^(```|~~~).*?(?:^\1[ \t]*$|\Z)", re.MULTILINE | re.DOTALL)


class UnknownFunctionsAnalyzer(FileAnalyzer):
    """Flags directives that no function executor handles."""

    def __init__(self, executors: Sequence[FunctionExecutor]) -> None:
        self._known = {executor.function_name for executor in executors}

    def get_analysis_results(
        self, path: str, relative_path: str, content: str
    ) -> List[AnalysisResult]:
        return [
            AnalysisResult(
                Severity.ERROR,
                f'"{function.name}" is not a supported function.',
                function.line,
                function.column,
            )
            for function in match_all_functions(content)
            if function.name not in self._known
        ]


class LinksAnalyzer(FileAnalyzer):
    """Warns about relative links whose target file is missing."""

    def __init__(self, file_system: FileSystem) -> None:
        self.file_system = file_system

    def get_analysis_results(
        self, path: str, relative_path: str, content: str
    ) -> List[AnalysisResult]:
        results: List[AnalysisResult] = []
        directory = self.file_system.get_directory(path)
        fences = [fence.span() for fence in _FENCE_PATTERN.finditer(content)]
        for match, line, column in iter_matches(content, LINK_PATTERN):
            if any(start <= match.start() < end for start, end in fences):
                continue
            target = _TITLE_PATTERN.sub("", match.group(2).strip())
            if not target:
                results.append(
                    AnalysisResult(Severity.WARNING, "Empty link target.", line, column)
                )
                continue
            if _SCHEME_PATTERN.match(target) or target.startswith("#"):
                continue
            cleaned = target.split("#", 1)[0].split("?", 1)[0]
            if not cleaned:
                continue
            candidate = self.file_system.clear_path(directory, cleaned)
            if not self.file_system.check_if_exists(candidate):
                results.append(
                    AnalysisResult(Severity.WARNING, "Linked file does not exist.", line, column)
                )
        return results


__all__ = ["LINK_PATTERN", "LinksAnalyzer", "UnknownFunctionsAnalyzer"]
