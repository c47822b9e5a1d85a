"""Tests for the markdown embedding directives."""

from __future__ import annotations

from pathlib import Path

from sitegen.filesystem import FileSystem
from sitegen.markdown.functions import (
    BreakPageFunctionExecutor,
    CodeFunctionExecutor,
    FunctionExecutionContext,
    ImageFunctionExecutor,
    ImportFunctionExecutor,
    ParameterDependencyIntrospector,
    RequiredParametersAnalyzer,
)
from sitegen.models import Severity


def _page(tmp_path: Path, fs: FileSystem) -> str:
    return fs.clear_path(str(tmp_path), "guide", "page.md")


def test_import_inlines_file_relative_to_page(tmp_path: Path) -> None:
    fs = FileSystem()
    (tmp_path / "guide" / "parts").mkdir(parents=True)
    (tmp_path / "guide" / "parts" / "intro.md").write_text("Shared intro\n", encoding="utf-8")
    context = FunctionExecutionContext(
        parameters=("parts/intro.md",), file_path=_page(tmp_path, fs), relative_path="guide/page.md"
    )

    assert ImportFunctionExecutor(fs).execute(context) == "Shared intro\n"


def test_code_wraps_file_in_fenced_block(tmp_path: Path) -> None:
    fs = FileSystem()
    (tmp_path / "snippets").mkdir()
    (tmp_path / "snippets" / "app.py").write_text("x = 1\n\n", encoding="utf-8")
    context = FunctionExecutionContext(
        parameters=("../snippets/app.py", "python"),
        file_path=_page(tmp_path, fs),
        relative_path="guide/page.md",
    )

    assert CodeFunctionExecutor(fs).execute(context) == "```python\nx = 1\n```"


def test_breakpage_emits_page_break() -> None:
    context = FunctionExecutionContext(parameters=("",), file_path="/p.md", relative_path="p.md")

    assert "page-break-after" in BreakPageFunctionExecutor().execute(context)


def test_image_embeds_relative_source() -> None:
    context = FunctionExecutionContext(
        parameters=("img/logo.png",), file_path="/docs/guide/page.md", relative_path="guide/page.md"
    )

    assert ImageFunctionExecutor().execute(context) == '<img src="img/logo.png"></img>'


def test_parameter_introspector_resolves_and_deduplicates(tmp_path: Path) -> None:
    fs = FileSystem()
    page = _page(tmp_path, fs)
    content = "@import(a.md)\n@import(./a.md)\n@import()\n@code(b.py, python)\n@import(../c.md)\n"

    dependencies = ParameterDependencyIntrospector("import", 0, fs).get_dependencies(
        page, "guide/page.md", content
    )

    assert dependencies == [
        fs.clear_path(str(tmp_path), "guide", "a.md"),
        fs.clear_path(str(tmp_path), "c.md"),
    ]


def test_required_parameters_reports_first_missing_parameter() -> None:
    analyzer = RequiredParametersAnalyzer(
        "code",
        [(0, "path required"), (1, "language required")],
    )
    content = "intro\n  @code(x.py)\n@code()\n@code(y.py, js)\n@import()\n"

    results = analyzer.get_analysis_results("/docs/p.md", "p.md", content)

    assert [(r.severity, r.message, r.line, r.column) for r in results] == [
        (Severity.ERROR, "language required", 2, 3),
        (Severity.ERROR, "path required", 3, 1),
    ]
