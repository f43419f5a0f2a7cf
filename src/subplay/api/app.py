# src/subplay/api/app.py
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from subplay import __version__
from subplay.api.middlewares.error_handler import install_error_handlers
from subplay.api.middlewares.request_context import RequestContextMiddleware
from subplay.api.routes import api_router
from subplay.config import load_config
from subplay.utils.logger import configure_logging, get_logger, parse_level

logger = get_logger("subplay")


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    cfg = load_config()
    configure_logging(
        logger_name="subplay",
        console_level=parse_level(cfg.log_level),
        file_level=logging.DEBUG,
        log_path=(cfg.log_path or None),
    )
    logger.info("API_STARTUP")
    yield
    logger.info("API_SHUTDOWN")


def create_app() -> FastAPI:
    app = FastAPI(
        title="Subplay API",
        version=__version__,
        lifespan=_lifespan,
    )

    # Request context first (request_id)
    app.add_middleware(RequestContextMiddleware, header_name="X-Request-Id")

    # Error handlers (stable error JSON, includes request_id)
    install_error_handlers(app)

    app.include_router(api_router)
    return app


app = create_app()
