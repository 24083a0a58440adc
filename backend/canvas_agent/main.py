"""FastAPI app factory."""

from __future__ import annotations

import asyncio
import contextlib
import functools
import logging
import time
from typing import Callable

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from canvas_agent.config import Settings, settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.canvas_agent_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    engine_factory: Callable | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> FastAPI:
    app_settings = app_settings or settings

    # Import tool modules so @tool_spec registrations fire
    import canvas_agent.engine.tools  # noqa: F401
    from canvas_agent.admission.controller import AdmissionController
    from canvas_agent.agent.service import CommandService
    from canvas_agent.api.router import api_router
    from canvas_agent.engine.registry import get_registry
    from canvas_agent.llm.client import create_reasoning_engine

    admission = AdmissionController.from_settings(app_settings, clock=clock)

    @contextlib.asynccontextmanager
    async def lifespan(app: FastAPI):
        sweeper = asyncio.create_task(admission.run_sweeper(app_settings.sweep_interval_s))
        try:
            yield
        finally:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper

    app = FastAPI(
        title="Canvas Agent",
        description="Natural-language canvas commands → ordered, idempotent operation batches",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.command_service = CommandService(
        admission=admission,
        registry=get_registry(),
        engine_factory=engine_factory or functools.partial(create_reasoning_engine, app_settings=app_settings),
        settings=app_settings,
        clock=clock,
    )

    _add_exception_handlers(app, app_settings)
    app.include_router(api_router)

    return app


def _add_exception_handlers(app: FastAPI, app_settings: Settings) -> None:
    from canvas_agent.errors import (
        AdmissionDenied,
        InvalidRequest,
        MissingIdentity,
        ReasoningEngineFailure,
        ReasoningEngineUnavailable,
        UnexpectedFailure,
    )

    @app.exception_handler(AdmissionDenied)
    async def _admission_denied(request: Request, exc: AdmissionDenied) -> JSONResponse:
        logger.warning("Rate limit exceeded for user %s", exc.identity)
        return JSONResponse(
            status_code=429,
            content={
                "error": "Too Many Requests",
                "message": (
                    f"Rate limit exceeded: {app_settings.rate_limit_requests} requests "
                    f"per {app_settings.rate_limit_window_s:g} seconds"
                ),
                "remaining": exc.remaining,
            },
            headers={"Retry-After": str(max(1, round(exc.retry_after)))},
        )

    @app.exception_handler(InvalidRequest)
    async def _invalid_request(request: Request, exc: InvalidRequest) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "Bad Request", "message": str(exc)})

    @app.exception_handler(MissingIdentity)
    async def _missing_identity(request: Request, exc: MissingIdentity) -> JSONResponse:
        return JSONResponse(status_code=401, content={"error": "Unauthorized", "message": str(exc)})

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError) -> JSONResponse:
        fields = [".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()]
        return JSONResponse(
            status_code=400,
            content={"error": "Bad Request", "message": f"Missing or invalid field(s): {', '.join(fields)}"},
        )

    @app.exception_handler(ReasoningEngineFailure)
    async def _engine_failure(request: Request, exc: ReasoningEngineFailure) -> JSONResponse:
        logger.error("AI command execution failed: %s", exc)
        return JSONResponse(status_code=502, content={"error": "AI Command Failed", "message": str(exc)})

    @app.exception_handler(ReasoningEngineUnavailable)
    async def _engine_unavailable(request: Request, exc: ReasoningEngineUnavailable) -> JSONResponse:
        logger.error("Reasoning engine unavailable: %s", exc)
        return JSONResponse(status_code=503, content={"error": "Service Unavailable", "message": str(exc)})

    @app.exception_handler(UnexpectedFailure)
    async def _unexpected(request: Request, exc: UnexpectedFailure) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "message": "An unexpected error occurred"},
        )


app = create_app()
