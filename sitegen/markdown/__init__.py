"""Markdown plugin set: directives, analyzers and the HTML builder."""

from __future__ import annotations

from typing import List

from ..filesystem import FileSystem
from ..plugins import PluginRegistry, PluginServices
from .analyzers import LinksAnalyzer, UnknownFunctionsAnalyzer
from .builder import MarkdownFileBuilder
from .functions import (
    BreakPageFunctionExecutor,
    CodeFunctionExecutor,
    FunctionExecutionContext,
    FunctionExecutor,
    ImageFunctionExecutor,
    ImportFunctionExecutor,
    ParameterDependencyIntrospector,
    RequiredParametersAnalyzer,
)

FILE_EXTENSIONS = ["md"]
OUTPUT_TYPE = "html"


def default_function_executors(file_system: FileSystem) -> List[FunctionExecutor]:
    return [
        ImportFunctionExecutor(file_system),
        CodeFunctionExecutor(file_system),
        ImageFunctionExecutor(),
        BreakPageFunctionExecutor(),
    ]


def register(registry: PluginRegistry, services: PluginServices) -> None:
    file_system = services.file_system
    executors = default_function_executors(file_system)

    for function_name in ("import", "code"):
        registry.register_dependency_introspector(
            FILE_EXTENSIONS,
            lambda name=function_name: ParameterDependencyIntrospector(name, 0, file_system),
        )

    registry.register_file_analyzer(
        FILE_EXTENSIONS,
        lambda: RequiredParametersAnalyzer(
            "import",
            [(0, "Import function requires first parameter specifying file path.")],
        ),
    )
    registry.register_file_analyzer(
        FILE_EXTENSIONS,
        lambda: RequiredParametersAnalyzer(
            "code",
            [
                (0, "Code function requires first parameter specifying file path."),
                (1, "Code function requires second parameter specifying code block language."),
            ],
        ),
    )
    registry.register_file_analyzer(
        FILE_EXTENSIONS,
        lambda: RequiredParametersAnalyzer(
            "image",
            [(0, "Image function requires first parameter specifying file path.")],
        ),
    )
    registry.register_file_analyzer(FILE_EXTENSIONS, lambda: UnknownFunctionsAnalyzer(executors))
    registry.register_file_analyzer(FILE_EXTENSIONS, lambda: LinksAnalyzer(file_system))

    registry.register_file_builder(
        FILE_EXTENSIONS,
        OUTPUT_TYPE,
        lambda: MarkdownFileBuilder(file_system, services.config.output_dir, executors),
    )


__all__ = [
    "FunctionExecutionContext",
    "FunctionExecutor",
    "LinksAnalyzer",
    "MarkdownFileBuilder",
    "UnknownFunctionsAnalyzer",
    "default_function_executors",
    "register",
]
