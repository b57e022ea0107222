"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from complaintdesk.app import ComplaintNotFoundError, DuplicateDepartmentError, ensure_started
from complaintdesk.domain.batch_upsert import BatchTransactionError

from .routes import router

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Awaitable, Callable

    from starlette.responses import Response

log = getLogger(__name__)


@asynccontextmanager
async def _lifespan(_app: FastAPI) -> AsyncIterator[None]:
    ensure_started()
    yield


async def _log_request(
    request: Request, call_next: Callable[[Request], Awaitable[Response]]
) -> Response:
    log.info("%s %s", request.method, request.url.path)
    return await call_next(request)


async def _http_error(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return JSONResponse(status_code=exc.status_code, content={"error": "Not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


async def _validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={"error": "Invalid request body", "details": jsonable_encoder(exc.errors())},
    )


async def _complaint_not_found(_request: Request, exc: ComplaintNotFoundError) -> JSONResponse:
    log.info("%s", exc)
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"error": "Complaint not found"}
    )


async def _duplicate_department(_request: Request, exc: DuplicateDepartmentError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"error": str(exc)})


async def _batch_rolled_back(_request: Request, exc: BatchTransactionError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": str(exc), "details": exc.details},
    )


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    log.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal Server Error"},
    )


def create_app(*, start_persistence: bool = True) -> FastAPI:
    """Build the HTTP application.

    ``start_persistence`` runs ``ensure_started`` on startup; tests that wire
    their own units of work switch it off.
    """

    app = FastAPI(
        title="complaintdesk",
        lifespan=_lifespan if start_persistence else None,
    )
    app.middleware("http")(_log_request)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(ComplaintNotFoundError, _complaint_not_found)
    app.add_exception_handler(DuplicateDepartmentError, _duplicate_department)
    app.add_exception_handler(BatchTransactionError, _batch_rolled_back)
    app.add_exception_handler(Exception, _unhandled_error)
    app.include_router(router)
    return app
