# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
FastAPI application factory.

Responsibilities
----------------
* Instantiate the FastAPI app.
* Register CORS middleware and the error-envelope handlers.
* Mount the feature routers (auth, admin, billing, content, intake).
* Expose a /health endpoint for container liveness checks.

Production note
---------------
CORS origins come from CORS_ORIGINS in etc/app.conf.  Credentials are
allowed because the SPA authenticates with http-only cookies, so the list
must name exact origins, never "*".
"""

import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from starlette.middleware.base import BaseHTTPMiddleware

from admin.router import router as admin_router
from auth.router import router as auth_router
from billing.router import router as billing_router
from content.router import router as content_router
from core.config import settings
from core.errors import register_exception_handlers
from core.logger import logger
from core.security import get_client_ip
from intake.router import router as intake_router

app = FastAPI(title="Akibeks Back-Office API", version="1.0.0")

# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ---------------------------------------------------------------------------
# Request-logging middleware
# ---------------------------------------------------------------------------
# Logs every inbound request: method, path, client IP, status, latency.
# Request bodies (login payload, password fields) are NOT echoed – only the
# URL and metadata are recorded.


class _RequestLogMiddleware(BaseHTTPMiddleware):
    """Log method, path, client IP, response status and latency (ms)."""

    async def dispatch(self, request: Request, call_next) -> Response:
        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.info(
            "%s %s | client=%s status=%d latency=%.1fms",
            request.method,
            request.url.path,
            get_client_ip(request),
            response.status_code,
            elapsed_ms,
        )
        return response


app.add_middleware(_RequestLogMiddleware)

# ---------------------------------------------------------------------------
# Error envelope + routers
# ---------------------------------------------------------------------------
register_exception_handlers(app)

app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(billing_router)
app.include_router(content_router)
app.include_router(intake_router)

# ---------------------------------------------------------------------------
# Health check
# ---------------------------------------------------------------------------


@app.on_event("startup")
async def _on_startup():
    logger.info("Akibeks back-office service starting up")


@app.on_event("shutdown")
async def _on_shutdown():
    logger.info("Akibeks back-office service shutting down")


@app.get("/health")
def health():
    return {"status": "ok"}
