"""Embedding directives (``@import``, ``@code``, ``@breakpage``) for markdown files."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from ..filesystem import FileSystem
from ..matching import match_all_functions
from ..models import AnalysisResult, Severity
from ..plugins.base import DependencyIntrospector, FileAnalyzer


@dataclass(frozen=True)
class FunctionExecutionContext:
    """Arguments of one directive occurrence."""

    parameters: Tuple[str, ...]
    file_path: str
    relative_path: str


class FunctionExecutor(ABC):
    """Expands a named directive into markdown text."""

    function_name: str = ""

    @abstractmethod
    def execute(self, context: FunctionExecutionContext) -> str:
        """Return the replacement text for the directive."""


class ImportFunctionExecutor(FunctionExecutor):
    """Inlines the content of another file."""

    function_name = "import"

    def __init__(self, file_system: FileSystem) -> None:
        self.file_system = file_system

    def execute(self, context: FunctionExecutionContext) -> str:
        path = self.file_system.clear_path(
            self.file_system.get_directory(context.file_path), context.parameters[0]
        )
        return self.file_system.read_file(path)


class CodeFunctionExecutor(FunctionExecutor):
    """Wraps the content of another file in a fenced code block."""

    function_name = "code"

    def __init__(self, file_system: FileSystem) -> None:
        self.file_system = file_system

    def execute(self, context: FunctionExecutionContext) -> str:
        path = self.file_system.clear_path(
            self.file_system.get_directory(context.file_path), context.parameters[0]
        )
        language = context.parameters[1]
        content = self.file_system.read_file(path).rstrip("\n")
        return f"```{language}\n{content}\n```"


class ImageFunctionExecutor(FunctionExecutor):
    """Embeds an image published next to the page that references it."""

    function_name = "image"

    def execute(self, context: FunctionExecutionContext) -> str:
        return f'<img src="{context.parameters[0]}"></img>'


class BreakPageFunctionExecutor(FunctionExecutor):
    function_name = "breakpage"

    def execute(self, context: FunctionExecutionContext) -> str:
        return '<div style="page-break-after: always"></div>'


class ParameterDependencyIntrospector(DependencyIntrospector):
    """Treats one parameter of a directive as a path relative to the file."""

    def __init__(self, function_name: str, parameter_index: int, file_system: FileSystem) -> None:
        self.function_name = function_name
        self.parameter_index = parameter_index
        self.file_system = file_system

    def get_dependencies(self, path: str, relative_path: str, content: str) -> List[str]:
        dependencies: List[str] = []
        directory = self.file_system.get_directory(path)
        for function in match_all_functions(content):
            if function.name != self.function_name:
                continue
            parameter = function.parameter(self.parameter_index)
            if not parameter:
                continue
            dependency = self.file_system.clear_path(directory, parameter)
            if dependency not in dependencies:
                dependencies.append(dependency)
        return dependencies


class RequiredParametersAnalyzer(FileAnalyzer):
    """Reports directives missing one of their required parameters.

    ``requirements`` lists ``(index, message)`` pairs; only the first missing
    parameter of each occurrence is reported.
    """

    def __init__(self, function_name: str, requirements: Sequence[Tuple[int, str]]) -> None:
        self.function_name = function_name
        self.requirements = list(requirements)

    def get_analysis_results(
        self, path: str, relative_path: str, content: str
    ) -> List[AnalysisResult]:
        results: List[AnalysisResult] = []
        for function in match_all_functions(content):
            if function.name != self.function_name:
                continue
            for index, message in self.requirements:
                if not function.parameter(index):
                    results.append(
                        AnalysisResult(Severity.ERROR, message, function.line, function.column)
                    )
                    break
        return results


__all__ = [
    "BreakPageFunctionExecutor",
    "CodeFunctionExecutor",
    "FunctionExecutionContext",
    "FunctionExecutor",
    "ImageFunctionExecutor",
    "ImportFunctionExecutor",
    "ParameterDependencyIntrospector",
    "RequiredParametersAnalyzer",
]
