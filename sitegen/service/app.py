"""FastAPI application exposing analysis and build passes over HTTP."""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .. import __version__
from ..config import ConfigError
from ..errors import SiteGenError
from ..site import Site


class DiagnosticModel(BaseModel):
    severity: str
    message: str
    line: Optional[int] = None
    column: Optional[int] = None


class FileModel(BaseModel):
    path: str
    compact_path: str
    extension: str
    hash: str
    dependencies: List[str]
    analysis_results: List[DiagnosticModel]


class FilesResponse(BaseModel):
    files: List[FileModel]


class BuildRequest(BaseModel):
    output_type: Optional[str] = None


class BuildResponse(BaseModel):
    success: bool
    output_type: str


class HealthResponse(BaseModel):
    status: str


def create_app(site_factory: Callable[[], Site]) -> FastAPI:
    """Create the FastAPI application for a single site."""

    app = FastAPI(title="sitegen build service", version=__version__)
    # One pass at a time; build state is not shared between concurrent passes.
    build_lock = threading.Lock()

    async def get_site() -> Site:
        return site_factory()

    async def _run_blocking(func: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/files", response_model=FilesResponse)
    async def list_files(site: Site = Depends(get_site)) -> FilesResponse:
        def _analyze() -> FilesResponse:
            with build_lock:
                files = site.analyze()
            return FilesResponse(
                files=[
                    FileModel(
                        path=file.path,
                        compact_path=file.compact_path,
                        extension=file.extension,
                        hash=file.hash,
                        dependencies=list(file.dependencies),
                        analysis_results=[
                            DiagnosticModel(
                                severity=result.severity.value,
                                message=result.message,
                                line=result.line,
                                column=result.column,
                            )
                            for result in file.analysis_results
                        ],
                    )
                    for file in files
                ]
            )

        return await _run_blocking(_analyze)

    @app.post("/build", response_model=BuildResponse)
    async def build(payload: BuildRequest, site: Site = Depends(get_site)) -> BuildResponse:
        output_type = payload.output_type or site.config.output_type

        def _build() -> bool:
            with build_lock:
                return site.build(output_type)

        success = await _run_blocking(_build)
        return BuildResponse(success=success, output_type=output_type)

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(SiteGenError)
    async def sitegen_error_handler(_: Any, exc: SiteGenError) -> JSONResponse:
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    site: Site, host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(lambda: site)
    uvicorn.run(app, host=host, port=port)
