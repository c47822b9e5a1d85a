"""Tests for the FastAPI build service."""

from __future__ import annotations

from pathlib import Path

import pytest

try:
    from fastapi.testclient import TestClient
except ModuleNotFoundError:  # pragma: no cover - optional dependency
    pytest.skip("fastapi not installed", allow_module_level=True)

import sitegen.plugins as plugins
from sitegen.service import create_app
from sitegen.site import Site


@pytest.fixture
def site_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setattr(plugins, "_iter_entry_points", lambda: [])
    docs = tmp_path / "docs"
    docs.mkdir()
    (docs / "index.md").write_text("# Home\n\nSee [guide](guide.md).\n", encoding="utf-8")
    (docs / "guide.md").write_text("# Guide\n", encoding="utf-8")
    return tmp_path


@pytest.fixture
def client(site_root: Path) -> TestClient:
    site = Site(site_root)
    return TestClient(create_app(lambda: site))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_files_endpoint_lists_snapshot(client: TestClient) -> None:
    response = client.get("/files")

    assert response.status_code == 200
    files = {item["compact_path"]: item for item in response.json()["files"]}
    assert set(files) == {"guide.md", "index.md"}
    assert files["index.md"]["extension"] == "md"
    assert files["index.md"]["analysis_results"] == []
    assert len(files["index.md"]["hash"]) == 64


def test_build_endpoint_runs_pass(client: TestClient, site_root: Path) -> None:
    response = client.post("/build", json={})

    assert response.status_code == 200
    assert response.json() == {"success": True, "output_type": "html"}
    assert (site_root / ".sitegen" / "site" / "guide.html").exists()


def test_build_endpoint_reports_failure(client: TestClient, site_root: Path) -> None:
    (site_root / "docs" / "broken.md").write_text("@unknown()\n", encoding="utf-8")

    response = client.post("/build", json={"output_type": "html"})

    assert response.status_code == 200
    assert response.json()["success"] is False


def test_missing_source_directory_returns_404(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(plugins, "_iter_entry_points", lambda: [])
    site = Site(tmp_path)
    client = TestClient(create_app(lambda: site))

    response = client.get("/files")

    assert response.status_code == 404
    assert "Source directory not found" in response.json()["detail"]
