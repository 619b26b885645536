# app/logging/exception_handlers.py

import json
import logging
import traceback
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import InvalidQueryParameterError, SnapshotIntegrityError
from app.logging.middleware import write_log

logger = logging.getLogger(__name__)


def safe_json_dumps(obj):
    return json.dumps(obj, indent=2, default=str)


async def invalid_query_parameter_handler(request: Request, exc: InvalidQueryParameterError):
    """Rejected report parameters are client errors"""
    logger.info("Rejected report parameters on %s: %s", request.url.path, exc)
    request.state.log_body = safe_json_dumps({"error": str(exc), "type": type(exc).__name__})
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def snapshot_integrity_handler(request: Request, exc: SnapshotIntegrityError):
    """A malformed snapshot aborts the whole report"""
    logger.error("Snapshot integrity violation on %s: %s", request.url.path, exc)
    request.state.log_body = safe_json_dumps({"error": str(exc), "type": type(exc).__name__})
    return JSONResponse(
        status_code=500,
        content={"detail": "Report aborted: webstore data is inconsistent", "error": str(exc)},
    )


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    # Convert errors to a safe format for JSON response
    def convert_error(error):
        if isinstance(error, dict):
            return {k: convert_error(v) for k, v in error.items()}
        elif isinstance(error, list):
            return [convert_error(item) for item in error]
        else:
            return str(error)

    safe_errors = convert_error(exc.errors())
    request.state.log_body = safe_json_dumps(safe_errors)
    return JSONResponse(status_code=422, content={"detail": safe_errors})


async def general_exception_handler(request: Request, exc: Exception):
    """Handle all unhandled exceptions and log them to database"""
    error_traceback = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    logger.error("Unhandled error on %s %s\n%s", request.method, request.url.path, error_traceback)
    # Unhandled errors bypass LoggingMiddleware, so this is the only row for the request
    write_log(
        request,
        500,
        safe_json_dumps({"error": str(exc), "type": type(exc).__name__, "traceback": error_traceback}),
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
