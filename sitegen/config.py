"""Configuration loading for sitegen (.sitegen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".sitegen.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class PluginConfig:
    """Plugin set enablement."""

    enabled: List[str] = field(default_factory=list)


@dataclass
class WatchConfig:
    """Settings for continuous builds."""

    poll_interval: float = 1.0


@dataclass
class ServiceConfig:
    """Build service bind address."""

    host: str = "127.0.0.1"
    port: int = 8000


@dataclass
class SiteConfig:
    """Represents the high-level settings defined in .sitegen.yml."""

    root: Path
    name: Optional[str] = None
    source_dir: Path | None = None
    output_dir: Path | None = None
    publish_dir: Path | None = None
    output_type: str = "html"
    exclude_paths: List[str] = field(default_factory=list)
    plugins: PluginConfig = field(default_factory=PluginConfig)
    templates_dir: Optional[Path] = None
    watch: WatchConfig = field(default_factory=WatchConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)

    def __post_init__(self) -> None:
        if self.source_dir is None:
            self.source_dir = self.root / "docs"
        if self.output_dir is None:
            self.output_dir = self.root / ".sitegen" / "build"
        if self.publish_dir is None:
            self.publish_dir = self.root / ".sitegen" / "site"

    @property
    def site_name(self) -> str:
        return self.name or self.root.name or "Documentation"


def load_config(config_path: Path) -> SiteConfig:
    """Load configuration from disk."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SiteConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    plugins_data = _as_dict(data.get("plugins"))
    plugins = PluginConfig()
    if plugins_data:
        plugins.enabled = _as_str_list(plugins_data.get("enabled"))

    watch = WatchConfig()
    watch_data = _as_dict(data.get("watch"))
    poll_interval = _as_float(watch_data.get("poll_interval"))
    if poll_interval is not None and poll_interval > 0:
        watch.poll_interval = poll_interval

    service = ServiceConfig()
    service_data = _as_dict(data.get("service"))
    host = _as_str(service_data.get("host"))
    port = _as_int(service_data.get("port"))
    if host:
        service.host = host
    if port is not None:
        service.port = port

    templates_dir_str = _as_str(data.get("templates_dir"))

    return SiteConfig(
        root=root,
        name=_as_str(data.get("name")),
        source_dir=_as_path(root, data.get("source_dir")),
        output_dir=_as_path(root, data.get("output_dir")),
        publish_dir=_as_path(root, data.get("publish_dir")),
        output_type=_as_str(data.get("output_type")) or "html",
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        plugins=plugins,
        templates_dir=root / templates_dir_str if templates_dir_str else None,
        watch=watch,
        service=service,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(root: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    return (root / text).resolve()


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "PluginConfig",
    "ServiceConfig",
    "SiteConfig",
    "WatchConfig",
    "load_config",
]
