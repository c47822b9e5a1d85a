"""Tests for sitegen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from sitegen.config import ConfigError, SiteConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, SiteConfig)
    root = tmp_path.resolve()
    assert config.root == root
    assert config.source_dir == root / "docs"
    assert config.output_dir == root / ".sitegen" / "build"
    assert config.publish_dir == root / ".sitegen" / "site"
    assert config.output_type == "html"
    assert config.exclude_paths == []
    assert config.plugins.enabled == []
    assert config.templates_dir is None
    assert config.watch.poll_interval == 1.0
    assert config.service.host == "127.0.0.1"
    assert config.service.port == 8000
    assert config.site_name == root.name


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    (tmp_path / ".sitegen.yml").write_text(
        """
name: Handbook
source_dir: content
output_dir: out/build
publish_dir: out/site
output_type: html
exclude_paths:
  - "drafts/"
  - "*.tmp"
plugins:
  enabled: [markdown]
templates_dir: theme
watch:
  poll_interval: 0.5
service:
  host: 0.0.0.0
  port: 9001
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    root = tmp_path.resolve()
    assert config.site_name == "Handbook"
    assert config.source_dir == root / "content"
    assert config.output_dir == root / "out" / "build"
    assert config.publish_dir == root / "out" / "site"
    assert config.exclude_paths == ["drafts/", "*.tmp"]
    assert config.plugins.enabled == ["markdown"]
    assert config.templates_dir == root / "theme"
    assert config.watch.poll_interval == 0.5
    assert config.service.host == "0.0.0.0"
    assert config.service.port == 9001


def test_load_config_accepts_config_file_path(tmp_path: Path) -> None:
    config_file = tmp_path / ".sitegen.yml"
    config_file.write_text("name: Direct\n", encoding="utf-8")

    assert load_config(config_file).site_name == "Direct"


def test_load_config_ignores_non_positive_poll_interval(tmp_path: Path) -> None:
    (tmp_path / ".sitegen.yml").write_text("watch:\n  poll_interval: 0\n", encoding="utf-8")

    assert load_config(tmp_path).watch.poll_interval == 1.0


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".sitegen.yml").write_text("name: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".sitegen.yml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)
