from __future__ import annotations

import logging
import os
import time

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from app.routers import health, search

app = FastAPI(title="Robotics Project Federation API", version="1.0.0")
logger = logging.getLogger("federation.api")
if not logger.handlers:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    logger.addHandler(handler)
logger.propagate = False
logger.setLevel(logging.INFO)

# Service modules log under "app.*"; give them the same handler.
_service_logger = logging.getLogger("app")
if not _service_logger.handlers:
    _service_logger.addHandler(logger.handlers[0])
    _service_logger.setLevel(logging.INFO)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name, "1" if default else "").strip().lower()
    return raw in {"1", "true", "yes", "on"}


def _slow_request_ms_threshold() -> float:
    raw = os.getenv("API_SLOW_REQUEST_MS", "1500").strip()
    try:
        return max(25.0, float(raw))
    except ValueError:
        return 1500.0


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    if route is not None:
        return str(getattr(route, "path", "") or request.url.path)
    return request.url.path


def _client_identity(request: Request) -> str:
    xff = request.headers.get("x-forwarded-for")
    if xff:
        return xff.split(",", 1)[0].strip()
    remote = request.client.host if request.client and request.client.host else ""
    if remote:
        return remote
    return "unknown"


def _correlation_id(request: Request) -> str:
    for key in ("x-request-id", "x-vercel-id", "x-amzn-trace-id", "cf-ray"):
        value = request.headers.get(key)
        if value:
            return value
    return "none"


def _apply_runtime_headers(response: Response, request: Request, elapsed_ms: float) -> None:
    response.headers["x-federation-runtime-ms"] = f"{max(0.1, elapsed_ms):.4f}"
    correlation_id = _correlation_id(request)
    if correlation_id != "none":
        response.headers["x-federation-request-id"] = correlation_id
    response.headers["access-control-expose-headers"] = "x-federation-runtime-ms, x-federation-request-id"


# Configure CORS
allowed_origins_str = os.getenv("ALLOWED_ORIGINS", "*")
allowed_origins = [origin.strip() for origin in allowed_origins_str.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials="*" not in allowed_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""
    return RedirectResponse(url="/docs")


app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(health.router, prefix="/api", tags=["health"])


@app.middleware("http")
async def log_request_runtime(request: Request, call_next):
    start = time.perf_counter()
    status_code: int | None = None
    exc_name: str | None = None
    response = None
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    except Exception as exc:
        status_code = 500
        exc_name = exc.__class__.__name__
        raise
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        if response is not None:
            _apply_runtime_headers(response, request, elapsed_ms)
        status_code = status_code or 500
        if elapsed_ms >= _slow_request_ms_threshold() or _env_flag("API_LOG_ALL_REQUESTS") or status_code >= 500:
            log = logger.warning if status_code >= 500 or elapsed_ms >= _slow_request_ms_threshold() else logger.info
            log(
                "api_request method=%s route=%s status=%s elapsed_ms=%.2f query=%s correlation=%s client=%s exception=%s",
                request.method,
                _route_label(request),
                status_code,
                elapsed_ms,
                str(request.query_params)[:300],
                _correlation_id(request),
                _client_identity(request),
                exc_name or "none",
            )
