"""FastAPI application entry point for the WebStore reporting application."""

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.core.database import init_db
from app.core.exceptions import InvalidQueryParameterError, SnapshotIntegrityError
from app.core.router import register_routes
from app.logging.exception_handlers import (
    general_exception_handler,
    invalid_query_parameter_handler,
    request_validation_exception_handler,
    snapshot_integrity_handler,
)
from app.logging.middleware import LoggingMiddleware


def create_app(initialize: bool = True) -> FastAPI:

    app = FastAPI(
        title="WebStore Reporting",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )
    if initialize:
        init_db()

    # Add request logger middleware
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(InvalidQueryParameterError, invalid_query_parameter_handler)
    app.add_exception_handler(SnapshotIntegrityError, snapshot_integrity_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)

    return app
