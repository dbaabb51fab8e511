from datetime import datetime, timezone
from http import HTTPStatus
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _reason(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


def error_envelope(request: Request, status_code: int, message, **extra) -> dict:
    path = request.url.path
    if request.url.query:
        path = f"{path}?{request.url.query}"
    body = {
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "path": path,
        "method": request.method,
        "message": message,
        "error": _reason(status_code),
    }
    body.update(extra)
    return body


def store_error_message(exc: SQLAlchemyError) -> str:
    """The store's own message, without SQLAlchemy's statement decoration."""
    orig = getattr(exc, "orig", None)
    if orig is not None:
        return str(orig).strip()
    return str(exc)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(request, exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({"field": ".".join(loc), "constraints": {err.get("type", "invalid"): err.get("msg")}})
    return JSONResponse(
        status_code=400,
        content=error_envelope(request, 400, "Validation failed", errors=errors),
    )


async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    message = store_error_message(exc)
    logger.warning("Store error on %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(status_code=400, content=error_envelope(request, 400, message))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
