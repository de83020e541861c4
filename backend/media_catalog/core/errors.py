"""
Central mapping from domain failures to HTTP responses.

Route handlers never build error responses themselves; exceptions raised
by the services propagate here.

  MissingFieldsError / bad body  → 400 + per-field messages
  NotFoundError                  → 404, empty body
  StorageError / UploadError     → 500, generic envelope
  anything else                  → 500, generic envelope
"""
import logging

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from media_catalog.services.blob_store import UploadError
from media_catalog.services.media_service import NotFoundError
from media_catalog.services.record_store import StorageError
from media_catalog.services.validation import MissingFieldsError

logger = logging.getLogger(__name__)


def _error(code: str, message: str, **extra: object) -> dict:
    """Standard error envelope."""
    return {"error": {"code": code, "message": message, **extra}}


def _internal_error() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error("INTERNAL_ERROR", "Something went wrong"),
    )


async def missing_fields_handler(request: Request, exc: MissingFieldsError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error("VALIDATION_FAILED", str(exc), fields=exc.details),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body") or "body",
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error("VALIDATION_FAILED", "Request body is invalid", fields=fields),
    )


async def not_found_handler(request: Request, exc: NotFoundError) -> Response:
    logger.info("%s %s: %s", request.method, request.url.path, exc)
    return Response(status_code=status.HTTP_404_NOT_FOUND)


async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("Storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _internal_error()


async def upload_error_handler(request: Request, exc: UploadError) -> JSONResponse:
    logger.error("Upload failure on %s %s", request.method, request.url.path, exc_info=exc)
    return _internal_error()


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return _internal_error()


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MissingFieldsError, missing_fields_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(StorageError, storage_error_handler)
    app.add_exception_handler(UploadError, upload_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
