# app/main.py
import sys
import asyncio

# Compatible event loop on Windows (safe on other OSes too)
if sys.platform.startswith("win"):
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

from contextlib import asynccontextmanager
import json
import time
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from app.core.config import settings
from app.core import metrics
from app.core.errors import DomainError
from app.core.logger import logger, setup_logging
from app.api.v1.router import api_router
from app.db.session import engine
from app.db.models import Base


def _normalize_origins(value) -> list[str]:
    """Accepts a list, a JSON string or CSV and returns a list of origins."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        return [str(o).strip() for o in value if str(o).strip()]
    if isinstance(value, str):
        # JSON first
        try:
            as_json = json.loads(value)
            if isinstance(as_json, (list, tuple)):
                return [str(o).strip() for o in as_json if str(o).strip()]
        except ValueError:
            pass
        # fallback: CSV
        return [o.strip() for o in value.split(",") if o.strip()]
    return [str(value).strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    In development the tables are created on startup; other environments
    are expected to manage the schema themselves.
    """
    setup_logging()
    env = (settings.ENVIRONMENT or "").lower().strip()
    if env == "dev":
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Schema ensured (dev)")
    yield
    await engine.dispose()


# --- App ---
app = FastAPI(title="Mentorship Backend", lifespan=lifespan)

# --- CORS (before the routers) ---
origins = _normalize_origins(getattr(settings, "CORS_ORIGINS", None))

if not origins:
    origins = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_and_measure(request: Request, call_next):
    """Access log line and HTTP metrics for every request."""
    start = time.perf_counter()
    response = await call_next(request)
    duration = time.perf_counter() - start

    # labelled by route template, e.g. /api/v1/learnings/{learning_id}
    route = request.scope.get("route")
    endpoint = getattr(route, "path", None) or "not_found"
    metrics.record_http_request(request.method, endpoint, response.status_code, duration)

    client = request.client.host if request.client else "-"
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code} "
        f"in {duration * 1000:.1f} ms from {client}"
    )
    return response


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail, "code": exc.code},
    )


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


@app.get("/metrics", include_in_schema=False)
async def prometheus_metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


# --- API v1 (after CORS) ---
app.include_router(api_router, prefix=settings.API_V1_PREFIX)
