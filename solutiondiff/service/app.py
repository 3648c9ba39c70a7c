"""FastAPI application entrypoint for solutiondiff service mode."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import SolutionDiffConfig
from ..errors import (
    ArchiveNotFoundError,
    ArchiveReadError,
    CorruptArchiveError,
    DescriptorMissingError,
    MutationError,
)
from ..models import ComparisonResult, SolutionInfo, UpdateRequest
from ..orchestrator import Orchestrator


class CompareRequest(BaseModel):
    package_a: str
    package_b: str
    include_lines: bool = True
    include_report: bool = False


class ComponentDiffModel(BaseModel):
    name: str
    type: str
    status: str


class DiffLineModel(BaseModel):
    line_number: int
    kind: str
    content: str


class CompareResponse(BaseModel):
    label_a: str
    label_b: str
    version_a: str
    version_b: str
    publisher_a: str
    publisher_b: str
    unique_name_a: str
    unique_name_b: str
    component_diffs: List[ComponentDiffModel]
    diff_lines: Optional[List[DiffLineModel]] = None
    summary: str
    report: Optional[str] = None


class InfoRequest(BaseModel):
    package: str


class InfoResponse(BaseModel):
    archive_path: str
    entry_name: str
    version: str
    unique_name: str
    publisher_unique_name: str
    has_generated_by: bool


class UpdateSolutionRequest(BaseModel):
    package: str
    new_version: Optional[str] = None
    remove_generated_by: bool = False


class HealthResponse(BaseModel):
    status: str


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] | None = None,
    *,
    config: SolutionDiffConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing solutiondiff operations."""

    def _default_factory() -> Orchestrator:
        return Orchestrator(config)

    factory = orchestrator_factory or _default_factory
    app = FastAPI(title="Solution Diff Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        # Fresh instance per request; nothing is shared between comparisons.
        return factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/compare", response_model=CompareResponse, response_model_exclude_none=True)
    async def compare(
        payload: CompareRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> CompareResponse:
        def _run_compare() -> ComparisonResult:
            return orchestrator.compare(payload.package_a, payload.package_b)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run_compare)
        data: Dict[str, Any] = result.to_dict(include_lines=payload.include_lines)
        if payload.include_report:
            data["report"] = orchestrator.render_report(result)
        return CompareResponse(**data)

    @app.post("/info", response_model=InfoResponse)
    async def info(
        payload: InfoRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> InfoResponse:
        loop = asyncio.get_running_loop()
        solution = await loop.run_in_executor(None, orchestrator.read_solution, payload.package)
        if solution is None:
            raise DescriptorMissingError(payload.package, entry_name=orchestrator.entry_name)
        return InfoResponse(**solution.to_dict())

    @app.post("/update", response_model=InfoResponse)
    async def update(
        payload: UpdateSolutionRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> InfoResponse:
        request = UpdateRequest(
            archive_path=Path(payload.package),
            new_version=payload.new_version,
            remove_generated_by=payload.remove_generated_by,
        )

        def _run_update() -> SolutionInfo:
            return orchestrator.update_solution(request)

        loop = asyncio.get_running_loop()
        solution = await loop.run_in_executor(None, _run_update)
        return InfoResponse(**solution.to_dict())

    @app.exception_handler(ArchiveNotFoundError)
    async def archive_not_found_handler(_: Any, exc: ArchiveNotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content=_error_body(exc))

    @app.exception_handler(DescriptorMissingError)
    async def descriptor_missing_handler(_: Any, exc: DescriptorMissingError) -> JSONResponse:
        return JSONResponse(status_code=404, content=_error_body(exc))

    @app.exception_handler(CorruptArchiveError)
    async def corrupt_archive_handler(_: Any, exc: CorruptArchiveError) -> JSONResponse:
        return JSONResponse(status_code=400, content=_error_body(exc))

    @app.exception_handler(ArchiveReadError)
    async def archive_read_handler(_: Any, exc: ArchiveReadError) -> JSONResponse:
        return JSONResponse(status_code=500, content=_error_body(exc))

    @app.exception_handler(MutationError)
    async def mutation_error_handler(_: Any, exc: MutationError) -> JSONResponse:
        return JSONResponse(status_code=500, content=_error_body(exc))

    return app


def _error_body(exc: Exception) -> Dict[str, Any]:
    return {"detail": str(exc), "side": getattr(exc, "side", None)}


def run_service(
    host: str = "127.0.0.1",
    port: int = 8000,
    *,
    config: SolutionDiffConfig | None = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app(config=config)
    uvicorn.run(app, host=host, port=port)
