"""Regex helpers that report 1-based line and column positions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator, List, Tuple

FUNCTION_PATTERN = re.compile(r"@(\w+)\((.*)\)")


@dataclass(frozen=True)
class FunctionMatch:
    """A ``@name(arg, ...)`` directive found in markdown content."""

    name: str
    parameters: Tuple[str, ...]
    start: int
    end: int
    line: int
    column: int

    def parameter(self, index: int) -> str:
        """Return the parameter at ``index`` or an empty string."""
        if index < len(self.parameters):
            return self.parameters[index]
        return ""


def position(content: str, index: int) -> Tuple[int, int]:
    """Return the 1-based ``(line, column)`` of ``index`` in ``content``."""
    fragment = content[:index]
    line = fragment.count("\n") + 1
    column = len(fragment) - fragment.rfind("\n")
    return line, column


def iter_matches(content: str, pattern: re.Pattern[str]) -> Iterator[Tuple[re.Match[str], int, int]]:
    for match in pattern.finditer(content):
        line, column = position(content, match.start())
        yield match, line, column


def match_all_functions(content: str) -> List[FunctionMatch]:
    functions: List[FunctionMatch] = []
    for match, line, column in iter_matches(content, FUNCTION_PATTERN):
        raw_parameters = match.group(2)
        parameters = tuple(part.strip() for part in raw_parameters.split(","))
        functions.append(
            FunctionMatch(
                name=match.group(1),
                parameters=parameters,
                start=match.start(),
                end=match.end(),
                line=line,
                column=column,
            )
        )
    return functions


__all__ = ["FUNCTION_PATTERN", "FunctionMatch", "iter_matches", "match_all_functions", "position"]
