"""FastAPI application entrypoint for fluentgen service mode."""

from __future__ import annotations

import asyncio
from typing import Any, Callable, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..config import ConfigError, FluentGenConfig
from ..errors import FluentGenError, SourceSyntaxError
from ..generator import FluentGenerator
from ..models import FileResult


class GenerateRequest(BaseModel):
    source: str
    filename: str = "input.go"
    package: Optional[str] = None
    suffix: Optional[str] = None
    receiver: Optional[str] = None
    unsupported_types: Optional[str] = None


class FragmentModel(BaseModel):
    struct_type: str
    method_name: str
    text: str


class GenerateResponse(BaseModel):
    output: str
    fragments: List[FragmentModel]
    diagnostics: List[str]


class HealthResponse(BaseModel):
    status: str


def _default_config() -> FluentGenConfig:
    return FluentGenConfig()


def create_app(
    config_factory: Callable[[], FluentGenConfig] = _default_config,
) -> FastAPI:
    """Create the FastAPI application exposing fluentgen generation."""

    app = FastAPI(title="fluentgen", version="1.0.0")

    async def get_config() -> FluentGenConfig:
        # Fresh config per request; generation keeps no state between calls.
        return config_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        config: FluentGenConfig = Depends(get_config),
    ) -> GenerateResponse:
        effective = config.with_overrides(
            suffix=payload.suffix,
            receiver=payload.receiver,
            unsupported_types=payload.unsupported_types,
            strategy="syntax",
        )

        generator = FluentGenerator(effective)

        def _run() -> FileResult:
            return generator.generate_source(payload.source, payload.filename)

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, _run)
        return GenerateResponse(
            output=generator.render_file(result, payload.package),
            fragments=[
                FragmentModel(
                    struct_type=fragment.struct_type,
                    method_name=fragment.method_name,
                    text=fragment.text,
                )
                for fragment in result.fragments
            ],
            diagnostics=[str(diagnostic) for diagnostic in result.diagnostics],
        )

    @app.exception_handler(SourceSyntaxError)
    async def syntax_error_handler(
        _: Any, exc: SourceSyntaxError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "line": exc.line, "column": exc.column},
        )

    @app.exception_handler(ConfigError)
    async def config_error_handler(
        _: Any, exc: ConfigError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(FluentGenError)
    async def generation_error_handler(
        _: Any, exc: FluentGenError
    ) -> JSONResponse:  # pragma: no cover - simple mapping
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(
    host: str = "127.0.0.1", port: int = 8000
) -> None:  # pragma: no cover - integration path
    import uvicorn

    app = create_app()
    uvicorn.run(app, host=host, port=port)
