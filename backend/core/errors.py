# ---------------------------------------------------------------------------
# Author  : Kyle <kyle@hacking-linux.com>
# Version : 20261019v1
# ---------------------------------------------------------------------------
"""
Error envelope.

Every failure leaves the API as

    {"success": false, "message": "...", "errors": [...]?, <flags>?}

``ApiError`` is an HTTPException that can carry extra top-level flags such
as ``requiresEmailVerification`` or ``accountLocked``.  The handlers below
are registered on the app by main.py.
"""

from typing import Any, Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logger import logger


class ApiError(HTTPException):
    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[list] = None,
        **flags: Any,
    ):
        super().__init__(status_code=status_code, detail=message)
        self.errors = errors
        self.flags = flags


def _field_errors(exc: RequestValidationError) -> list[dict]:
    """Flatten pydantic errors into ``[{"field": ..., "message": ...}]``."""
    out = []
    for err in exc.errors():
        # loc is ("body", "email") – drop the transport prefix
        loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path")]
        message = err.get("msg", "Invalid value")
        # "Value error, Password must ..." → "Password must ..."
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        out.append({"field": ".".join(loc), "message": message})
    return out


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    body = {"success": False, "message": str(exc.detail)}
    if isinstance(exc, ApiError):
        if exc.errors:
            body["errors"] = exc.errors
        body.update(exc.flags)
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Validation failed",
            "errors": _field_errors(exc),
        },
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled_error)
