"""Composition root wiring configuration, plugins, analysis and builds."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from .analysis import AnalysisContext
from .builder import Builder
from .cancellation import CancellationToken
from .config import SiteConfig, load_config
from .filesystem import FileSystem
from .logging import get_logger
from .models import AnalyzedFile
from .plugins import PluginRegistry, PluginServices, discover_plugins


class Site:
    """A documentation site rooted at a directory holding ``.sitegen.yml``."""

    def __init__(
        self,
        root: str | Path,
        config: SiteConfig | None = None,
        registry: PluginRegistry | None = None,
        file_system: FileSystem | None = None,
    ) -> None:
        root_path = Path(root).expanduser().resolve()
        if not root_path.is_dir():
            raise FileNotFoundError(f"Site root not found: {root}")

        self.root = root_path
        self.config = config or load_config(root_path)
        self.file_system = file_system or FileSystem(self.config.exclude_paths)
        self.logger = get_logger("site")

        if registry is None:
            registry = PluginRegistry()
            applied = discover_plugins(
                registry,
                PluginServices(file_system=self.file_system, config=self.config),
                self.config.plugins.enabled or None,
            )
            self.logger.debug("Registered plugin sets: %s", ", ".join(applied))
        self.registry = registry

        self.context = AnalysisContext(
            self.file_system, str(self.config.source_dir), self.registry
        )
        self.builder = Builder(self.context, self.registry, self.file_system)

    def analyze(self) -> List[AnalyzedFile]:
        self.context.analyze_completely()
        return self.context.get_all_files()

    def build(self, output_type: Optional[str] = None) -> bool:
        output_type = output_type or self.config.output_type
        self.logger.info("Building %s into %s", self.config.source_dir, self.config.output_dir)
        return self.builder.build_all(output_type)

    def watch(
        self, cancellation_token: CancellationToken, output_type: Optional[str] = None
    ) -> bool:
        output_type = output_type or self.config.output_type
        self.logger.info("Watching %s for changes", self.config.source_dir)
        return self.builder.build_continuously(
            output_type, cancellation_token, poll_interval=self.config.watch.poll_interval
        )


__all__ = ["Site"]
