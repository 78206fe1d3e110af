"""
Request middlewares: lenient JSON body parsing and the uniform 404 response.
"""
import logging
from typing import Any

from aiohttp import web

# Diagnostic sink shared by the middlewares.
LOGGER_KEY = web.AppKey("logger", logging.Logger)
JSON_BODY_KEY = web.RequestKey("json_body", Any)

BODY_METHODS = ("POST", "PUT", "PATCH")


def error_body(code: str, message: str) -> dict:
    return {"success": False, "error": {"code": code, "message": message}}


def not_found_response(request: web.Request) -> web.Response:
    # raw_path keeps percent-encoding and excludes the query string
    path = request.rel_url.raw_path
    return web.json_response(
        error_body("NOT_FOUND", f"Route {request.method} {path} not found"),
        status=404,
    )


@web.middleware
async def not_found_middleware(request: web.Request, handler):
    """Turn unmatched routes, including a known path with another method, into a JSON 404."""
    try:
        return await handler(request)
    except (web.HTTPNotFound, web.HTTPMethodNotAllowed):
        return not_found_response(request)


@web.middleware
async def json_body_middleware(request: web.Request, handler):
    """
    Parse JSON bodies and warn about unexpected content types.

    Never rejects a request: the parsed body (or None) is stored under
    request[JSON_BODY_KEY].
    """
    logger = request.app[LOGGER_KEY]
    content_type = request.headers.get("Content-Type")

    if request.method in BODY_METHODS and content_type and "application/json" not in content_type:
        logger.warning(f"Unexpected Content-Type: {content_type}")

    request[JSON_BODY_KEY] = None
    if request.body_exists and content_type and "json" in content_type:
        try:
            request[JSON_BODY_KEY] = await request.json()
        except (ValueError, LookupError) as e:
            # ValueError covers bad JSON and bad bytes, LookupError an unknown charset
            logger.warning(f"Ignoring malformed JSON body on {request.method} {request.path}: {e}")

    return await handler(request)
