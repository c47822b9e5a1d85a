"""Exception types raised by the sitegen build engine."""

from __future__ import annotations

from typing import Sequence


class SiteGenError(RuntimeError):
    """Base class for sitegen failures that are not content diagnostics."""


class PluginError(SiteGenError):
    """Raised when an introspector or analyzer plugin fails.

    Plugin failures point at a programming or configuration bug rather than at
    user content, so they are surfaced instead of being turned into
    diagnostics.
    """

    def __init__(self, plugin: object, path: str, cause: BaseException) -> None:
        name = plugin.__class__.__name__
        super().__init__(f"Plugin {name} failed on {path}: {cause}")
        self.plugin = plugin
        self.path = path
        self.cause = cause


class DependencyCycleError(SiteGenError):
    """Raised when the dependency graph contains a cycle."""

    def __init__(self, cycle: Sequence[str]) -> None:
        super().__init__("Dependency cycle detected: " + " -> ".join(cycle))
        self.cycle = list(cycle)


class BuildCancelledError(SiteGenError):
    """Raised when a cancellation token is observed between file builds."""

    def __init__(self) -> None:
        super().__init__("Build cancelled.")


__all__ = [
    "BuildCancelledError",
    "DependencyCycleError",
    "PluginError",
    "SiteGenError",
]
