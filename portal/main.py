from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from portal.config import AppConfig, load_config
from portal.http.problem import (
    handle_http_exception,
    handle_journey_not_found,
    handle_request_validation_error,
    handle_section_not_found,
    handle_unexpected_error,
)
from portal.http.request_id import RequestIdMiddleware
from portal.logging_setup import configure_logging
from portal.logic.journey_store import JOURNEYS, JourneyNotFoundError, load_journeys_from_file
from portal.logic.navigation import SectionNotFoundError
from portal.routes import api_router

logger = logging.getLogger(__name__)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    config = config or load_config()
    # Configure global logging before app instantiation so all modules emit
    configure_logging(config.logging.level)

    app = FastAPI(title="Modification Questionnaire Portal")
    app.state.config = config

    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(JourneyNotFoundError, handle_journey_not_found)
    app.add_exception_handler(SectionNotFoundError, handle_section_not_found)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestIdMiddleware)

    if config.journeys.path:
        load_journeys_from_file(config.journeys.path)
    else:
        logger.info("journeys_path_unset registered=%s", len(JOURNEYS))

    @app.get("/health", include_in_schema=False)
    def health() -> dict:
        return {"status": "ok", "journeys": len(JOURNEYS)}

    app.include_router(api_router)
    return app
