"""Translate campus and Protean errors into HTTP responses.

Every error body has the shape ``{"code": ..., "message": ...}``.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError, ValidationError

from campus.errors import CampusError

logger = structlog.get_logger(__name__)

STATUS_BY_CODE = {
    "unauthenticated": 401,
    "permission-denied": 403,
    "not-found": 404,
    "already-exists": 409,
    "invalid-argument": 400,
    "internal": 500,
}


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"code": code, "message": message})


async def campus_error_handler(request: Request, exc: CampusError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    if status_code >= 500:
        logger.error("Request failed", path=request.url.path, code=exc.code, error=exc.message)
    return error_response(status_code, exc.code, exc.message)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    messages = getattr(exc, "messages", None) or {}
    message = "; ".join(f"{field}: {', '.join(str(m) for m in errors)}" for field, errors in messages.items())
    return error_response(400, "invalid-argument", message or str(exc))


async def object_not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return error_response(404, "not-found", str(exc) or "Not found")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CampusError, campus_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(ObjectNotFoundError, object_not_found_handler)
