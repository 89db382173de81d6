# FILE: medstore/api/exception_handlers.py
from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from medstore.schemas.common import ApiError, FieldError

logger = logging.getLogger(__name__)


def err(
    msg: str,
    status_code: int = 400,
    *,
    error: Optional[str] = None,
    errors: Optional[List[FieldError]] = None,
) -> JSONResponse:
    payload = ApiError(message=msg, error=error, errors=errors)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(payload, exclude_none=True),
    )


def _field_errors(exc: RequestValidationError) -> List[FieldError]:
    out: List[FieldError] = []
    for e in exc.errors():
        # drop the "body"/"query" prefix FastAPI puts on every location
        loc = [str(p) for p in e.get("loc", ())[1:]]
        out.append(FieldError(field=".".join(loc) or "body", message=e.get("msg", "Invalid value")))
    return out


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # exc.detail can be str/dict/list
        msg = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return err(msg=msg, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return err(msg="Validation error", status_code=400, errors=_field_errors(exc))

    @app.exception_handler(SQLAlchemyError)
    async def db_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return err(msg="Server error", status_code=500, error=str(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return err(msg="Server error", status_code=500, error=str(exc))
