"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

import sitegen.cli as cli
import sitegen.plugins as plugins
import sitegen.service as service
from sitegen.cli import _build_parser, main
from sitegen.site import Site


@pytest.fixture(autouse=True)
def _quiet_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(cli, "configure_logging", lambda **_: None)
    monkeypatch.setattr(plugins, "_iter_entry_points", lambda: [])


def _write_docs(root: Path, files: dict[str, str]) -> None:
    for relative, content in files.items():
        path = root / "docs" / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "build"])
    assert args.verbose is True
    assert args.command == "build"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "site", "--verbose"])
    assert args.verbose is True
    assert args.command == "analyze"
    assert args.path == "site"


def test_cli_accepts_output_type_for_build_and_watch() -> None:
    parser = _build_parser()
    assert parser.parse_args(["build", "--output-type", "pdf"]).output_type == "pdf"
    assert parser.parse_args(["watch"]).output_type is None


def test_cli_accepts_serve_overrides() -> None:
    args = _build_parser().parse_args(["serve", "--host", "0.0.0.0", "--port", "9000"])
    assert args.host == "0.0.0.0"
    assert args.port == 9000


def test_build_command_writes_site(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    _write_docs(tmp_path, {"index.md": "# Home\n"})

    main(["build", str(tmp_path)])

    assert (tmp_path / ".sitegen" / "build" / "index.html").exists()
    assert "Site built at" in capsys.readouterr().out


def test_build_command_exits_non_zero_on_errors(tmp_path: Path) -> None:
    _write_docs(tmp_path, {"index.md": "@unknown()\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["build", str(tmp_path)])

    assert excinfo.value.code == 1


def test_analyze_command_prints_summary(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _write_docs(tmp_path, {"index.md": "[Gone](gone.md)\n", "other.md": "# Other\n"})

    main(["analyze", str(tmp_path)])

    assert "Analyzed 2 files: 0 errors, 1 warnings, 0 suggestions" in capsys.readouterr().out


def test_analyze_command_exits_non_zero_on_errors(tmp_path: Path) -> None:
    _write_docs(tmp_path, {"index.md": "@import()\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(tmp_path)])

    assert excinfo.value.code == 1


def test_missing_site_root_exits_non_zero(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["build", str(tmp_path / "missing")])

    assert excinfo.value.code == 1


def test_missing_source_directory_exits_non_zero(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(tmp_path)])

    assert excinfo.value.code == 1


def test_serve_command_hands_its_site_to_the_service(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (tmp_path / ".sitegen.yml").write_text("service:\n  port: 9100\n", encoding="utf-8")
    calls: list[tuple[Site, str, int]] = []
    monkeypatch.setattr(
        service, "run_service", lambda site, host, port: calls.append((site, host, port))
    )
    constructed: list[Site] = []
    original_init = Site.__init__

    def _tracking_init(self, *args, **kwargs):
        original_init(self, *args, **kwargs)
        constructed.append(self)

    monkeypatch.setattr(Site, "__init__", _tracking_init)

    main(["serve", str(tmp_path), "--host", "0.0.0.0"])

    assert len(constructed) == 1
    assert calls == [(constructed[0], "0.0.0.0", 9100)]
