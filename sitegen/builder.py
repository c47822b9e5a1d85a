"""Dependency-ordered build passes over the analysis snapshot."""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from .analysis import AnalysisContext
from .cancellation import CancellationToken
from .errors import BuildCancelledError, DependencyCycleError
from .filesystem import FileSystem
from .logging import get_logger, log_exception
from .models import AnalyzedFile, BuildEntry, BuildStatus, FileBuildContext
from .plugins import BuildExtension, PluginRegistry


class Builder:
    """Builds every analyzed file after its dependencies, one pass at a time.

    Build state lives only for the duration of a pass; nothing is persisted
    between passes or processes.
    """

    def __init__(
        self,
        context: AnalysisContext,
        registry: PluginRegistry,
        file_system: FileSystem,
        logger: logging.Logger | None = None,
    ) -> None:
        self.context = context
        self.registry = registry
        self.file_system = file_system
        self.logger = logger or get_logger("builder")
        self._entries: Dict[str, BuildEntry] = {}
        self._lock = threading.Lock()

    @property
    def entries(self) -> Dict[str, BuildEntry]:
        """Copy of the build state from the most recent pass."""
        with self._lock:
            return {path: replace(entry) for path, entry in self._entries.items()}

    def build_all(self, output_type: str) -> bool:
        return self._run_pass(output_type, None)

    def build_continuously(
        self,
        output_type: str,
        cancellation_token: CancellationToken,
        poll_interval: float = 1.0,
    ) -> bool:
        """Build, then rebuild whenever the source tree changes, until cancelled."""
        succeeded = self._run_pass(output_type, cancellation_token)
        fingerprint = self._fingerprint()

        while not cancellation_token.wait(poll_interval):
            if self.context.scan_hashes() == fingerprint:
                continue
            self.logger.info("Source changes detected; rebuilding")
            succeeded = self._run_pass(output_type, cancellation_token)
            fingerprint = self._fingerprint()

        return succeeded

    def _fingerprint(self) -> Dict[str, str]:
        return {file.path: file.hash for file in self.context.get_all_files()}

    def _run_pass(self, output_type: str, token: Optional[CancellationToken]) -> bool:
        self.context.analyze_completely()
        files = self.context.get_all_files()

        failing = [file for file in files if file.has_errors]
        if failing:
            for file in failing:
                self.logger.error("%s contains errors", file.compact_path)
            self.logger.error(
                "Build aborted: %d file(s) contain errors; nothing was built", len(failing)
            )
            with self._lock:
                self._entries = {}
            return False

        with self._lock:
            self._entries = {file.path: BuildEntry(file=file) for file in files}

        extensions = self.registry.build_extensions_for(output_type)
        try:
            for extension in extensions:
                extension.on_build_started()
        except Exception as exc:
            log_exception(self.logger, "Build extension failed to start", exc)
            return False

        self.logger.info("Building %d files for output type '%s'", len(files), output_type)
        try:
            for file in files:
                if token is not None:
                    token.throw_if_cancelled()
                entry = self._entries[file.path]
                if entry.status is BuildStatus.PENDING:
                    self._build(entry, output_type, extensions, token, [])
        except DependencyCycleError as exc:
            self.logger.error("%s", exc)
            return False
        except BuildCancelledError:
            self.logger.warning("Build cancelled before all files were built")
            return False

        statuses = [entry.status for entry in self.entries.values()]
        failed = statuses.count(BuildStatus.FAILED)
        if failed:
            self.logger.error("Build finished with %d failed file(s)", failed)
            return False
        self.logger.info("Build finished: %d file(s) built", len(statuses))
        return True

    def _build(
        self,
        entry: BuildEntry,
        output_type: str,
        extensions: Sequence[BuildExtension],
        token: Optional[CancellationToken],
        stack: List[str],
    ) -> bool:
        file = entry.file
        with self._lock:
            if entry.status is BuildStatus.BUILT and entry.built_hash == file.hash:
                return True
            if entry.status is BuildStatus.FAILED:
                return False
            if entry.status is BuildStatus.BUILDING:
                raise DependencyCycleError(_cycle(stack, file.compact_path))
            entry.status = BuildStatus.BUILDING

        stack.append(file.compact_path)
        try:
            for dependency in file.dependencies:
                dependency_entry = self._entries.get(dependency)
                if dependency_entry is None:
                    continue
                if not self._build(dependency_entry, output_type, extensions, token, stack):
                    self.logger.error(
                        "Skipping %s: dependency %s failed to build",
                        file.compact_path,
                        dependency_entry.file.compact_path,
                    )
                    self._finish(entry, BuildStatus.FAILED)
                    return False

            if token is not None:
                token.throw_if_cancelled()

            if not self._run_builders(file, output_type, extensions):
                self._finish(entry, BuildStatus.FAILED)
                return False

            self._finish(entry, BuildStatus.BUILT)
            return True
        finally:
            stack.pop()

    def _run_builders(
        self, file: AnalyzedFile, output_type: str, extensions: Sequence[BuildExtension]
    ) -> bool:
        builders = self.registry.file_builders_for(file.extension, output_type)
        try:
            if builders:
                self.logger.debug("Building %s", file.compact_path)
                context = FileBuildContext(
                    path=file.path,
                    relative_path=file.compact_path,
                    extension=file.extension,
                    content=self.file_system.read_file(file.path),
                )
                for builder in builders:
                    builder.build(context)
            for extension in extensions:
                extension.on_file_built(file)
        except Exception as exc:
            log_exception(self.logger, f"Failed to build {file.compact_path}", exc)
            return False
        return True

    def _finish(self, entry: BuildEntry, status: BuildStatus) -> None:
        with self._lock:
            entry.status = status
            if status is BuildStatus.BUILT:
                entry.built_hash = entry.file.hash


def _cycle(stack: Sequence[str], repeated: str) -> Tuple[str, ...]:
    start = stack.index(repeated) if repeated in stack else 0
    return tuple(stack[start:]) + (repeated,)


__all__ = ["Builder"]
