import getpass
import logging
import platform
import socket
import time
from datetime import datetime
from typing import Callable, Optional

from fastapi import Request, Response
from sqlalchemy.exc import SQLAlchemyError
from starlette.background import BackgroundTask
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from app.core.config import APPLICATION_ID
from app.core.database import SessionLocal
from app.logging.models import Log

logger = logging.getLogger(__name__)

# Request paths that are never written to the log table
EXCLUDED_PATHS = ("/api/docs", "/api/redoc", "/api/openapi.json")


def current_username() -> str:
    try:
        return getpass.getuser() or "unknown_user"
    except (KeyError, OSError):
        return "unknown_user"


def current_hostname() -> str:
    return socket.gethostname() or platform.node() or "unknown_host"


def write_log(
    request: Request,
    status_code: int,
    response_body: Optional[str] = None,
    processing_time: Optional[float] = None,
) -> None:
    """Persist one request log row. Failures are reported but never raised."""
    try:
        with SessionLocal() as session:
            session.add(
                Log(
                    timestamp=datetime.now(),
                    method=request.method,
                    path=str(request.url.path),
                    query_string=str(request.url.query) or None,
                    status_code=status_code,
                    client_ip=request.client.host if request.client else None,
                    response_body=response_body,
                    processing_time=processing_time,
                    user_agent=request.headers.get("user-agent"),
                    username=current_username(),
                    hostname=current_hostname(),
                    application_id=APPLICATION_ID,
                )
            )
            session.commit()
    except SQLAlchemyError:
        logger.exception("Failed to write request log for %s %s", request.method, request.url.path)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Times every API request and records it in the log database."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)
        logger.info(
            "Logging middleware initialized with username: %s on host: %s, App ID: %s",
            current_username(), current_hostname(), APPLICATION_ID,
        )

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if any(request.url.path.startswith(path) for path in EXCLUDED_PATHS):
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        logger.debug("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, duration_ms)

        # Bodies of successful report responses can be large; only errors keep a note
        body_note = None
        if response.status_code >= 400:
            body_note = getattr(request.state, "log_body", None) or f"[status {response.status_code}]"

        log_task = BackgroundTask(write_log, request, response.status_code, body_note, duration_ms)
        if response.background is None:
            response.background = log_task
        else:
            existing = response.background

            async def run_both():
                await existing()
                await log_task()

            response.background = BackgroundTask(run_both)
        return response
