# foody/errors.py
"""HTTP error taxonomy.

Every error leaves the API as ``{"message": ...}`` (see ``register_error_handlers``),
the shape the web client reads from ``response.data.message``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ApiError(HTTPException):
    status_code = 500
    default_message = "Server error"

    def __init__(self, message: Optional[str] = None, **extra: Any) -> None:
        super().__init__(status_code=self.status_code, detail=message or self.default_message)
        self.extra: Dict[str, Any] = extra


class Unauthorized(ApiError):
    status_code = 401
    default_message = "Invalid token"


class InvalidOrder(ApiError):
    # one message for every failed order check
    status_code = 400
    default_message = "Missing required fields"


class NotFound(ApiError):
    status_code = 404
    default_message = "Not found"


class Conflict(ApiError):
    status_code = 400
    default_message = "User already exists"


class InvalidCredentials(ApiError):
    status_code = 400
    default_message = "Invalid username or password"


class UpstreamUnavailable(ApiError):
    status_code = 500
    default_message = "Server error"


def _body(message: Any, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message}
    if extra:
        body.update(extra)
    return body


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        extra = getattr(exc, "extra", None)
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonable_encoder(_body(exc.detail, extra)),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [{"loc": e.get("loc"), "msg": e.get("msg")} for e in exc.errors()]
        return JSONResponse(
            status_code=400,
            content=jsonable_encoder(_body("Invalid request body", {"errors": errors})),
        )
