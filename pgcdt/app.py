"""FastAPI application exposing the persons/contacts demo routes."""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from pgcdt.core.config import get_settings
from pgcdt.core.errors import CodecError, CompositeDecodeError, PhoneNumberDecodingError
from pgcdt.core.logging_config import configure_logging
from pgcdt.routers import contacts as contacts_router
from pgcdt.routers import persons as persons_router

logger = logging.getLogger(__name__)


async def _codec_error_handler(request: Request, exc: CodecError) -> JSONResponse:
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": str(exc)}, status_code=422)


async def _stored_value_error_handler(request: Request, exc: CodecError) -> JSONResponse:
    logger.error("Undecodable stored value on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": "Stored data could not be decoded"}, status_code=500)


async def _integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Constraint violation on %s %s: %s", request.method, request.url.path, exc.orig)
    return JSONResponse({"detail": "Row conflicts with existing data"}, status_code=409)


async def _store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse({"detail": "Database unavailable"}, status_code=503)


def create_app() -> FastAPI:
    """Factory compatible with uvicorn (``uvicorn pgcdt.app:create_app --factory``)."""
    settings = get_settings()
    configure_logging(settings.log_level)

    application = FastAPI(title="pgcdt demo API")
    application.state.settings = settings
    application.add_exception_handler(CodecError, _codec_error_handler)
    application.add_exception_handler(PhoneNumberDecodingError, _stored_value_error_handler)
    application.add_exception_handler(CompositeDecodeError, _stored_value_error_handler)
    application.add_exception_handler(IntegrityError, _integrity_error_handler)
    application.add_exception_handler(SQLAlchemyError, _store_error_handler)

    application.include_router(persons_router.router)
    application.include_router(contacts_router.router)
    return application


app = create_app()
