"""
HTTP status service application setup.
"""
import logging
from typing import Optional

from aiohttp import web

from web.middlewares import LOGGER_KEY, json_body_middleware, not_found_middleware
from web.status import create_status_routes

DEFAULT_LOGGER_NAME = "mc-body.web"


def create_app(logger: Optional[logging.Logger] = None) -> web.Application:
    """
    Build the aiohttp application.

    Args:
        logger: Sink for request diagnostics. Defaults to the "mc-body.web" logger.

    Returns:
        web.Application: App with the status route and the 404 handler.
    """
    app = web.Application(middlewares=[not_found_middleware, json_body_middleware])
    app[LOGGER_KEY] = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    create_status_routes(app.router)

    return app
