# athlete_intake/main.py
import time
from pathlib import Path
from uuid import uuid4

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded

from athlete_intake.core.logging_config import logger, setup_logging
from athlete_intake.core.rate_limit import limiter
from athlete_intake.core.settings import settings
from athlete_intake.observability.metrics import router as metrics_router
from athlete_intake.routers import pages, submit, uploads

STATIC_DIR = Path(__file__).resolve().parent / "static"


# ----------------------------------------------------
# App init
# ----------------------------------------------------
setup_logging()

app = FastAPI(title=settings.app_name, version="0.1.0")
logger.info("startup", service="athlete-intake", env=settings.app_env)


# ----------------------------------------------------
# Health
# ----------------------------------------------------
@app.get("/health", include_in_schema=True)
def health() -> dict:
    return {"status": "ok"}


# ----------------------------------------------------
# Logging middleware
# ----------------------------------------------------
@app.middleware("http")
async def logging_middleware(request: Request, call_next):
    start = time.time()
    request_id = request.headers.get("X-Request-ID") or uuid4().hex

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)
    bound_logger = logger.bind(
        ip=request.client.host if request.client else "unknown",
        endpoint=str(request.url.path),
        method=request.method,
    )

    bound_logger.info("request_started")
    response = await call_next(request)
    latency_ms = round((time.time() - start) * 1000, 2)

    bound_logger.bind(status_code=response.status_code, latency_ms=latency_ms).info(
        "request_finished"
    )
    response.headers["X-Request-ID"] = request_id
    return response


# ----------------------------------------------------
# Middleware
# ----------------------------------------------------
app.state.limiter = limiter

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ----------------------------------------------------
# Error handlers
# ----------------------------------------------------
@app.exception_handler(RateLimitExceeded)
def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content={"ok": False, "error": "rate_limited", "details": str(exc)})


@app.exception_handler(RequestValidationError)
def validation_handler(request: Request, exc: RequestValidationError):
    details = [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    if any(d["type"] == "json_invalid" for d in details):
        message = "Invalid JSON payload."
    elif details:
        first = details[0]
        message = f"{'.'.join(first['loc'][1:]) or 'body'}: {first['msg']}"
    else:
        message = "Invalid request."
    logger.info("request_rejected", endpoint=str(request.url.path), error=message)
    return JSONResponse(status_code=400, content={"ok": False, "error": message, "details": details})


# ----------------------------------------------------
# Routers
# ----------------------------------------------------
app.include_router(pages.router)
app.include_router(uploads.router)
app.include_router(submit.router)
if settings.METRICS_ENABLED:
    app.include_router(metrics_router)  # /metrics

app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
