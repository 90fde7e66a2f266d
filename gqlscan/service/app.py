"""FastAPI application entrypoint for gqlscan service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import load_config
from ..llm.runner import LLMError
from ..orchestrator import Orchestrator


class ScanRequest(BaseModel):
    path: str
    pages_root: Optional[str] = None


class ScanResponse(BaseModel):
    files: List[str]
    groups: Dict[str, List[str]]


class AnalyzeRequest(BaseModel):
    path: str
    pages_root: Optional[str] = None
    model: Optional[str] = None


class AnalyzeResponse(BaseModel):
    output_path: str
    error_count: int
    results: List[Dict[str, Any]]


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator(path: str, model: Optional[str] = None) -> Orchestrator:
    load_dotenv()
    config = load_config(Path(path))
    if not config.llm.api_key:
        raise LLMError("No API key configured for the remote model")
    return Orchestrator.from_config(config, model=model)


def create_app(
    orchestrator_factory: Callable[..., Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing scan and analysis runs."""

    app = FastAPI(title="gqlscan service", version="0.1.0")

    async def _in_executor(func: Callable[[], Any]) -> Any:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, func)

    def get_factory() -> Callable[..., Orchestrator]:
        return orchestrator_factory

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/scan", response_model=ScanResponse)
    async def scan(payload: ScanRequest) -> ScanResponse:
        def _run_scan():
            config = load_config(Path(payload.path))
            pages_root = payload.pages_root or (
                str(config.scan.pages_root) if config.scan.pages_root else None
            )
            return Orchestrator.for_scanning(config).scan(payload.path, pages_root)

        outcome = await _in_executor(_run_scan)
        return ScanResponse(files=outcome.files, groups=outcome.groups)

    @app.post("/analyze", response_model=AnalyzeResponse)
    async def analyze(
        payload: AnalyzeRequest,
        factory: Callable[..., Orchestrator] = Depends(get_factory),
    ) -> AnalyzeResponse:
        def _run_groups():
            orchestrator = factory(payload.path, payload.model)
            return orchestrator.run_groups(payload.path, payload.pages_root)

        outcome = await _in_executor(_run_groups)
        return AnalyzeResponse(
            output_path=str(outcome.output_path),
            error_count=outcome.error_count,
            results=[result.to_dict() for result in outcome.results],
        )

    @app.exception_handler(FileNotFoundError)
    async def file_not_found_handler(_: Any, exc: FileNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(NotADirectoryError)
    async def not_a_directory_handler(_: Any, exc: NotADirectoryError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
