"""Analysis context: the content-addressed snapshot of the source tree."""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional

from .errors import PluginError
from .filesystem import FileSystem, hash_content
from .logging import get_logger
from .models import AnalysisResult, AnalyzedFile, Severity
from .plugins import PluginRegistry


class AnalysisContext:
    """Runs introspectors and analyzers over the source tree and keeps the results.

    The snapshot maps absolute paths to immutable :class:`AnalyzedFile` values.
    Entries are only ever replaced as a whole, so readers never observe a
    partially analyzed file.
    """

    def __init__(
        self,
        file_system: FileSystem,
        source_directory: str,
        registry: PluginRegistry,
        logger: logging.Logger | None = None,
    ) -> None:
        self.file_system = file_system
        self.source_directory = file_system.clear_path(source_directory)
        self.registry = registry
        self.logger = logger or get_logger("analysis")
        self._files: Dict[str, AnalyzedFile] = {}
        self._fully_analyzed = False
        self._lock = threading.Lock()

    @property
    def is_fully_analyzed(self) -> bool:
        return self._fully_analyzed

    def analyze_completely(self) -> None:
        """Analyze every file under the source directory and replace the snapshot."""
        paths = self.file_system.get_files_recursively(self.source_directory)
        self.logger.debug("Analyzing %d files under %s", len(paths), self.source_directory)

        files: Dict[str, AnalyzedFile] = {}
        for path in paths:
            analyzed = self._process_file(path)
            files[analyzed.path] = analyzed

        with self._lock:
            self._files = files
            self._fully_analyzed = True

    def analyze(self, path: str) -> None:
        """Re-analyze a single file, falling back to a full analysis when needed."""
        if not self._fully_analyzed:
            self.analyze_completely()
            return

        file_path = self.file_system.clear_path(path)
        if not self.file_system.check_if_exists(file_path):
            with self._lock:
                removed = self._files.pop(file_path, None)
            if removed is not None:
                self.logger.debug("Removed %s from the analysis snapshot", removed.compact_path)
            return

        analyzed = self._process_file(file_path)
        with self._lock:
            self._files[analyzed.path] = analyzed

    def get_all_files(self) -> List[AnalyzedFile]:
        with self._lock:
            return list(self._files.values())

    def get_file(self, path: str) -> Optional[AnalyzedFile]:
        with self._lock:
            return self._files.get(self.file_system.clear_path(path))

    def scan_hashes(self) -> Dict[str, str]:
        """Hash every source file on disk without running plugins or logging."""
        return {
            path: hash_content(self.file_system.read_bytes(path))
            for path in self.file_system.get_files_recursively(self.source_directory)
        }

    def _process_file(self, path: str) -> AnalyzedFile:
        file_path = self.file_system.clear_path(path)
        relative_path = self.file_system.relative_path(file_path, self.source_directory)
        extension = self.file_system.get_extension(file_path)
        raw = self.file_system.read_bytes(file_path)
        content = raw.decode("utf-8", errors="replace")

        dependencies: List[str] = []
        for introspector in self.registry.dependency_introspectors_for(extension):
            try:
                found = introspector.get_dependencies(file_path, relative_path, content)
            except Exception as exc:
                raise PluginError(introspector, relative_path, exc) from exc
            dependencies.extend(self.file_system.clear_path(item) for item in found)

        results: List[AnalysisResult] = []
        for analyzer in self.registry.file_analyzers_for(extension):
            try:
                results.extend(analyzer.get_analysis_results(file_path, relative_path, content))
            except Exception as exc:
                raise PluginError(analyzer, relative_path, exc) from exc

        for dependency in dependencies:
            if not self.file_system.check_if_exists(dependency):
                results.append(
                    AnalysisResult(Severity.ERROR, f'Dependency "{dependency}" does not exist.')
                )

        analyzed = AnalyzedFile(
            path=file_path,
            compact_path=relative_path,
            extension=extension,
            dependencies=tuple(dependencies),
            hash=hash_content(raw),
            analysis_results=tuple(results),
        )
        self._log_results(analyzed)
        return analyzed

    def _log_results(self, file: AnalyzedFile) -> None:
        for result in file.analysis_results:
            message = f"{file.compact_path}{result.location()} {result.message}"
            if result.severity is Severity.ERROR:
                self.logger.error(message)
            else:
                self.logger.warning(message)


__all__ = ["AnalysisContext"]
