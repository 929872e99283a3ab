"""FastAPI application entrypoint for archmap service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..budgets import DEFAULT_PROFILE
from ..config import ConfigError
from ..pipeline import MapOptions, MapPipeline, PipelineResult


class MapRequest(BaseModel):
    path: str
    out: Optional[str] = None
    config_path: Optional[str] = None
    focus: Optional[str] = None
    focus_file: Optional[str] = None
    depth: Optional[int] = Field(default=None, ge=0)
    budget: str = DEFAULT_PROFILE
    full_signals: bool = False
    show_orphans: bool = False
    write: bool = False


class MapResponse(BaseModel):
    content: str
    warnings: List[str]
    file_count: int
    output_path: Optional[str] = None


class HealthResponse(BaseModel):
    status: str


def _default_pipeline() -> MapPipeline:
    return MapPipeline()


def create_app(
    pipeline_factory: Callable[[], MapPipeline] = _default_pipeline,
) -> FastAPI:
    """Create the FastAPI application exposing architecture-map generation."""

    app = FastAPI(title="archmap service", version="0.1.0")

    async def get_pipeline() -> MapPipeline:
        # One pipeline per request; runs never share state.
        return pipeline_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/map", response_model=MapResponse)
    async def build_map(
        payload: MapRequest,
        pipeline: MapPipeline = Depends(get_pipeline),
    ) -> MapResponse:
        options = MapOptions(
            out=payload.out,
            config_path=payload.config_path,
            focus=payload.focus,
            focus_file=payload.focus_file,
            depth=payload.depth,
            budget_profile=payload.budget,
            full_signals=payload.full_signals,
            show_orphans=payload.show_orphans,
        )

        def _run() -> PipelineResult:
            result = pipeline.run(payload.path, options)
            if payload.write:
                pipeline.write(result)
            return result

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return MapResponse(
            content=result.content,
            warnings=result.warnings,
            file_count=result.file_count,
            output_path=str(result.output_path) if payload.write else None,
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    app = create_app()
    uvicorn.run(app, host=host, port=port)


__all__ = ["MapRequest", "MapResponse", "create_app", "run_service"]
