"""FastAPI backend for the Marketflow workflow builder."""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette.middleware.base import BaseHTTPMiddleware

from marketflow import __version__
from marketflow import api_state as state
from marketflow.api_errors import (
    APIException,
    ErrorDetail,
    ErrorResponse,
    RateLimitErrorResponse,
    api_exception_handler,
    marketflow_exception_handler,
)
from marketflow.config import configure_logging, get_settings
from marketflow.errors import MarketflowError
from marketflow.state import get_database

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the database, create managers, and seed examples."""
    state._app_state["ready"] = False
    state._app_state["active_requests"] = 0
    state._app_state["start_time"] = datetime.now()

    settings = get_settings()
    configure_logging(
        level=settings.log_level,
        format=settings.log_format,
        sanitize_logs=settings.sanitize_logs,
    )

    from marketflow.workflows import WorkflowManager

    backend = get_database()
    state.workflow_manager = WorkflowManager(backend=backend)
    if settings.seed_example_workflows:
        state.workflow_manager.seed_examples()

    state._app_state["ready"] = True
    logger.info("Application startup complete - ready to serve requests")

    yield

    state._app_state["ready"] = False
    state.workflow_manager = None
    state.marketing_runner = None
    logger.info("Shutdown complete")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(title="Marketflow", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every API request with timing and a request ID."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())[:8]
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        await state.increment_active_requests()

        start_time = time.perf_counter()
        logger.info(
            f"[{request_id}] {method} {path} - client={client_ip}",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "client_ip": client_ip,
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start_time) * 1000
            logger.error(
                f"[{request_id}] {method} {path} - 500 ERROR in {duration_ms:.1f}ms - {e}",
                extra={
                    "request_id": request_id,
                    "method": method,
                    "path": path,
                    "client_ip": client_ip,
                    "status_code": 500,
                    "duration_ms": round(duration_ms, 2),
                },
            )
            raise
        finally:
            await state.decrement_active_requests()

        duration_ms = (time.perf_counter() - start_time) * 1000
        status_code = response.status_code
        log_level = logging.WARNING if status_code >= 400 else logging.INFO
        logger.log(
            log_level,
            f"[{request_id}] {method} {path} - {status_code} in {duration_ms:.1f}ms",
            extra={
                "request_id": request_id,
                "method": method,
                "path": path,
                "client_ip": client_ip,
                "status_code": status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )

        response.headers["X-Request-ID"] = request_id
        return response


app.add_middleware(RequestLoggingMiddleware)

app.state.limiter = state.limiter


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handle rate limit exceeded errors with structured response."""
    request_id = request.headers.get("X-Request-ID")
    response = RateLimitErrorResponse(
        error={
            "error_code": "RATE_LIMITED",
            "message": "Rate limit exceeded",
            "details": {"limit": str(exc.detail)},
            "request_id": request_id,
        },
        retry_after=60,
    )
    return JSONResponse(
        status_code=429,
        content=response.model_dump(),
        headers={"Retry-After": "60"},
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed ids and bodies are client errors (400), like invalid graphs."""
    errors = [
        {"field": ".".join(str(p) for p in err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    content = ErrorResponse(
        error=ErrorDetail(
            error_code="VALIDATION",
            message="Request validation failed",
            details={"errors": errors},
            request_id=request.headers.get("X-Request-ID"),
        )
    )
    return JSONResponse(status_code=400, content=content.model_dump())


app.add_exception_handler(MarketflowError, marketflow_exception_handler)
app.add_exception_handler(APIException, api_exception_handler)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------

from marketflow.api_routes import health, marketing, palette, workflows  # noqa: E402

v1_router = APIRouter(prefix="/v1", tags=["v1"])
v1_router.include_router(workflows.router)
v1_router.include_router(palette.router)
v1_router.include_router(marketing.router)

app.include_router(v1_router)
app.include_router(health.router)

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
