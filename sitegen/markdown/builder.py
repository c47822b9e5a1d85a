"""Renders markdown sources to HTML fragments."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, List, Sequence

import markdown

from ..filesystem import FileSystem
from ..logging import get_logger
from ..matching import match_all_functions
from ..models import FileBuildContext
from ..plugins.base import FileBuilder
from .functions import FunctionExecutionContext, FunctionExecutor

_MARKDOWN_LINK_PATTERN = re.compile(
    r"\[([^\]]+)\]\(([^)\s#?]+)\.md((?:[#?][^)\s]*)?)(\s+\"[^\"]*\")?\)"
)
_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")
_EXTENSIONS = ["fenced_code", "tables"]


def output_path_for(file_system: FileSystem, output_directory: Path | str, relative_path: str) -> str:
    """Return where the HTML for ``relative_path`` is written."""
    stem, _ = _split_extension(relative_path)
    return file_system.clear_path(str(output_directory), f"{stem}.html")


def rewrite_markdown_links(content: str) -> str:
    """Point relative ``.md`` links at the generated ``.html`` pages."""

    def _replace(match: re.Match[str]) -> str:
        target = match.group(2)
        if _SCHEME_PATTERN.match(target):
            return match.group(0)
        return f"[{match.group(1)}]({target}.html{match.group(3)}{match.group(4) or ''})"

    return _MARKDOWN_LINK_PATTERN.sub(_replace, content)


class MarkdownFileBuilder(FileBuilder):
    """Expands directives, then renders the page with Python-Markdown."""

    def __init__(
        self,
        file_system: FileSystem,
        output_directory: Path | str,
        executors: Sequence[FunctionExecutor],
    ) -> None:
        self.file_system = file_system
        self.output_directory = output_directory
        self._executors: Dict[str, FunctionExecutor] = {
            executor.function_name: executor for executor in executors
        }
        self.logger = get_logger("markdown")

    def expand_functions(self, context: FileBuildContext) -> str:
        chunks: List[str] = []
        last_index = 0
        for function in match_all_functions(context.content):
            chunks.append(context.content[last_index : function.start])
            last_index = function.end
            executor = self._executors.get(function.name)
            if executor is None:
                continue
            chunks.append(
                executor.execute(
                    FunctionExecutionContext(
                        parameters=function.parameters,
                        file_path=context.path,
                        relative_path=context.relative_path,
                    )
                )
            )
        chunks.append(context.content[last_index:])
        return "".join(chunks)

    def build(self, context: FileBuildContext) -> None:
        expanded = rewrite_markdown_links(self.expand_functions(context))
        html = markdown.markdown(expanded, extensions=_EXTENSIONS)
        target = output_path_for(self.file_system, self.output_directory, context.relative_path)
        self.file_system.create_or_overwrite_file(target, html)
        self.logger.debug("Rendered %s to %s", context.relative_path, target)


def _split_extension(path: str) -> tuple[str, str]:
    head, dot, tail = path.rpartition(".")
    if not dot or "/" in tail:
        return path, ""
    return head, tail


__all__ = ["MarkdownFileBuilder", "output_path_for", "rewrite_markdown_links"]
