"""Plugin registry and discovery utilities."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from typing import Callable, Dict, Generic, Iterable, List, Sequence, Set, Type, TypeVar

from ..config import SiteConfig
from ..filesystem import FileSystem
from .base import BuildExtension, DependencyIntrospector, FileAnalyzer, FileBuilder

_ENTRY_POINT_GROUP = "sitegen.plugins"

T = TypeVar("T")


@dataclass
class PluginServices:
    """Capabilities handed to plugin sets when they register."""

    file_system: FileSystem
    config: SiteConfig


PluginSet = Callable[["PluginRegistry", PluginServices], None]


class _Registration(Generic[T]):
    """Lazily resolved singleton plugin bound to a set of keys."""

    def __init__(self, keys: Iterable[str], factory: Callable[[], T], expected: Type[T]) -> None:
        self.keys = frozenset(keys)
        self._factory = factory
        self._expected = expected
        self._instance: T | None = None

    def resolve(self) -> T:
        if self._instance is None:
            instance = self._factory()
            if not isinstance(instance, self._expected):
                raise TypeError(
                    f"Plugin factory {self._factory!r} did not return a {self._expected.__name__}"
                )
            self._instance = instance
        return self._instance


def normalise_extension(extension: str) -> str:
    return extension.strip().lstrip(".").lower()


class PluginRegistry:
    """Holds introspectors, analyzers, builders and build extensions by extension."""

    def __init__(self) -> None:
        self._introspectors: List[_Registration[DependencyIntrospector]] = []
        self._analyzers: List[_Registration[FileAnalyzer]] = []
        self._builders: List[tuple[str, _Registration[FileBuilder]]] = []
        self._extensions: List[tuple[str, _Registration[BuildExtension]]] = []

    def register_dependency_introspector(
        self, file_extensions: Sequence[str], factory: Callable[[], DependencyIntrospector]
    ) -> None:
        self._introspectors.append(
            _Registration(_keys(file_extensions), factory, DependencyIntrospector)
        )

    def register_file_analyzer(
        self, file_extensions: Sequence[str], factory: Callable[[], FileAnalyzer]
    ) -> None:
        self._analyzers.append(_Registration(_keys(file_extensions), factory, FileAnalyzer))

    def register_file_builder(
        self,
        file_extensions: Sequence[str],
        output_type: str,
        factory: Callable[[], FileBuilder],
    ) -> None:
        self._builders.append(
            (output_type, _Registration(_keys(file_extensions), factory, FileBuilder))
        )

    def register_build_extension(
        self, output_type: str, factory: Callable[[], BuildExtension]
    ) -> None:
        self._extensions.append((output_type, _Registration((), factory, BuildExtension)))

    def dependency_introspectors_for(self, extension: str) -> List[DependencyIntrospector]:
        key = normalise_extension(extension)
        return [entry.resolve() for entry in self._introspectors if key in entry.keys]

    def file_analyzers_for(self, extension: str) -> List[FileAnalyzer]:
        key = normalise_extension(extension)
        return [entry.resolve() for entry in self._analyzers if key in entry.keys]

    def file_builders_for(self, extension: str, output_type: str) -> List[FileBuilder]:
        key = normalise_extension(extension)
        return [
            entry.resolve()
            for registered_type, entry in self._builders
            if registered_type == output_type and key in entry.keys
        ]

    def build_extensions_for(self, output_type: str) -> List[BuildExtension]:
        return [
            entry.resolve()
            for registered_type, entry in self._extensions
            if registered_type == output_type
        ]


def _keys(file_extensions: Sequence[str]) -> Set[str]:
    if isinstance(file_extensions, str):
        raise TypeError("file_extensions must be a sequence of extensions, not a string")
    return {normalise_extension(extension) for extension in file_extensions}


def discover_plugins(
    registry: PluginRegistry,
    services: PluginServices,
    enabled: Sequence[str] | None = None,
) -> List[str]:
    """Register builtin and entry-point plugin sets; return the names applied."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    applied: List[str] = []
    seen: Set[str] = set()

    def _add(name: str, plugin_set: PluginSet) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        if not callable(plugin_set):
            raise TypeError(f"Plugin set '{name}' is not callable")
        plugin_set(registry, services)
        applied.append(key)
        seen.add(key)
        if enabled_set is not None:
            enabled_set.discard(key)

    for name, plugin_set in _builtin_plugin_sets().items():
        _add(name, plugin_set)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:
            raise RuntimeError(f"Failed to load plugin entry point '{name}': {exc}") from exc
        _add(name, loaded)

    if enabled_set:
        missing = ", ".join(sorted(enabled_set))
        raise ValueError(f"Unknown plugins requested: {missing}")

    return applied


def _builtin_plugin_sets() -> Dict[str, PluginSet]:
    from .. import markdown, publish

    return {
        "markdown": markdown.register,
        "publish": publish.register,
    }


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "BuildExtension",
    "DependencyIntrospector",
    "FileAnalyzer",
    "FileBuilder",
    "PluginRegistry",
    "PluginServices",
    "discover_plugins",
    "normalise_extension",
]
