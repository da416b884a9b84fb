import time
from contextlib import asynccontextmanager
from urllib.parse import urlsplit

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .api import decoders_router, insights_router
from .context import get_context
from .logging_config import log


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared application context and optionally probe decoders up front."""
    ctx = get_context()
    if config.WARM_DECODERS:
        started = time.perf_counter()
        ctx.availability.warm()
        log.info("Decoder availability warmed in %.1fms", (time.perf_counter() - started) * 1000.0)
    yield


app = FastAPI(title=f"camsight {config.VERSION}", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(getattr(config, "CORS_ORIGINS", ["*"])),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def http_log_middleware(request: Request, call_next):
    """Log HTTP request latency with selective verbosity."""
    started = time.perf_counter()
    method = str(request.method or "")
    target = urlsplit(str(request.url or "")).path
    try:
        response = await call_next(request)
    except Exception:
        log.exception("HTTP %s %s -> 500", method, target)
        raise

    dt_ms = (time.perf_counter() - started) * 1000.0
    status = int(getattr(response, "status_code", 0) or 0)
    if bool(getattr(config, "VERBOSE_HTTP_LOG", True)) or dt_ms >= 1000.0:
        log.info("HTTP %s %s -> %s in %.1fms", method, target, status, dt_ms)
    return response


app.include_router(decoders_router)
app.include_router(insights_router)


def run() -> None:
    """Start the diagnostics server."""
    log_level = "debug" if config.DEBUG else "info"
    access_log = config.DEBUG
    if not config.LOG_ENABLED:
        log_level = "critical"
        access_log = False

    log.info("Starting camsight %s on %s:%s", config.VERSION, config.HOST, config.PORT)
    uvicorn.run(app, host=config.HOST, port=int(config.PORT), log_level=log_level, access_log=access_log)
