"""
FastAPI app entrypoint.

Availability matching (requests -> overlaps -> plans) and shared plan state
(RSVPs, potluck claims). Clients poll GET /plans/{slug} to reconcile.
"""
import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Load .env from backend/ before any app code
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from tribe.api.routes import plans, requests
from tribe.config import settings
from tribe.core.constants import SYNC_INTERVAL_SECONDS
from tribe.core.errors import TribeError, tribe_error_to_http

logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Tribe", version="0.1.0")

# CORS: dev origins + optional CORS_ORIGINS env (comma-separated) for the deployed frontend
_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
_cors_origins.extend(settings.cors_origin_list)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(TribeError)
async def tribe_error_handler(request: Request, exc: TribeError) -> JSONResponse:
    """Domain errors surface verbatim as user-visible messages."""
    http_exc = tribe_error_to_http(exc)
    if http_exc.status_code >= 500:
        logger.warning("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=http_exc.status_code, content={"detail": http_exc.detail})


app.include_router(requests.router, tags=["requests"])
app.include_router(plans.router, tags=["plans"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Tribe API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict:
    return {"status": "ok", "sync_interval_seconds": SYNC_INTERVAL_SECONDS}
