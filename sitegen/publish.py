"""Publishing extension: wraps built HTML fragments into site pages."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader

from .filesystem import FileSystem
from .logging import get_logger
from .markdown.builder import output_path_for
from .models import AnalyzedFile
from .plugins import BuildExtension, PluginRegistry, PluginServices

OUTPUT_TYPE = "html"
PAGE_TEMPLATE = "page.html.j2"
IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "svg"})

STYLES_CSS = """body {
    box-sizing: border-box;
    margin: 0 auto;
    max-width: 980px;
    padding: 1em;
    font-family: -apple-system, "Segoe UI", Helvetica, Arial, sans-serif;
    line-height: 1.5;
}

pre {
    background: #f6f8fa;
    overflow: auto;
    padding: 1em;
}

table {
    border-collapse: collapse;
}

td, th {
    border: 1px solid #d0d7de;
    padding: 6px 13px;
}
"""


def page_header(site_name: str, compact_path: str) -> str:
    """Return the ``Site > Section > Page`` breadcrumb for a source file."""
    fragments: List[str] = []
    for part in compact_path.split("/"):
        name = part.strip()
        if "." in name:
            name = name[: name.rfind(".")]
        if len(name) <= 1 or name == "index":
            continue
        fragments.append(" ".join(word[:1].upper() + word[1:] for word in name.split("-")))
    return " > ".join([site_name, *fragments])


def create_environment(templates_dir: Optional[Path] = None) -> Environment:
    directories = []
    if templates_dir:
        directories.append(str(templates_dir))
    directories.append(str(Path(__file__).with_name("templates")))
    return Environment(
        loader=FileSystemLoader(directories),
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )


class PublishExtension(BuildExtension):
    """Copies rendered markdown pages into the publish directory as full documents."""

    def __init__(
        self,
        file_system: FileSystem,
        site_name: str,
        source_directory: Path | str,
        build_directory: Path | str,
        publish_directory: Path | str,
        templates_dir: Optional[Path] = None,
    ) -> None:
        self.file_system = file_system
        self.site_name = site_name
        self.source_directory = file_system.clear_path(str(source_directory))
        self.build_directory = str(build_directory)
        self.publish_directory = str(publish_directory)
        self._env = create_environment(templates_dir)
        self.logger = get_logger("publish")

    def on_build_started(self) -> None:
        self.file_system.create_directory(self.publish_directory)
        styles_path = self.file_system.clear_path(self.publish_directory, "styles.css")
        if not self.file_system.check_if_exists(styles_path):
            self.file_system.create_or_overwrite_file(styles_path, STYLES_CSS)
        self._copy_images()

    def on_file_built(self, file: AnalyzedFile) -> None:
        if file.extension != "md":
            return

        source_path = output_path_for(self.file_system, self.build_directory, file.compact_path)
        target_path = output_path_for(self.file_system, self.publish_directory, file.compact_path)
        content = self.file_system.read_file(source_path)

        depth = file.compact_path.count("/")
        template = self._env.get_template(PAGE_TEMPLATE)
        page = template.render(
            title=self.site_name,
            header=page_header(self.site_name, file.compact_path),
            show_header="<h1" not in content,
            content=content,
            root="../" * depth,
        )
        self.file_system.create_or_overwrite_file(target_path, page)
        self.logger.debug("Published %s", target_path)

    def _copy_images(self) -> None:
        for source_path in self.file_system.get_files_recursively(self.source_directory):
            if self.file_system.get_extension(source_path) not in IMAGE_EXTENSIONS:
                continue
            relative = self.file_system.relative_path(source_path, self.source_directory)
            target_path = self.file_system.clear_path(self.publish_directory, relative)
            self.file_system.copy(source_path, target_path)


def register(registry: PluginRegistry, services: PluginServices) -> None:
    config = services.config
    registry.register_build_extension(
        OUTPUT_TYPE,
        lambda: PublishExtension(
            services.file_system,
            config.site_name,
            config.source_dir,
            config.output_dir,
            config.publish_dir,
            config.templates_dir,
        ),
    )


__all__ = ["PublishExtension", "page_header", "register"]
