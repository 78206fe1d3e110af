"""
Liveness route.
"""
from aiohttp import web


async def get_status(request: web.Request) -> web.Response:
    return web.json_response({"ok": True})


def create_status_routes(router: web.UrlDispatcher) -> None:
    """
    Register the status route.

    A trailing slash is accepted. Matching is case-sensitive.

    Args:
        router: Application router to add the route to.
    """
    router.add_get("/status", get_status, name="status")
    router.add_get("/status/", get_status)
