"""
Metrics middleware for the FastAPI application.

Records request count and latency for every HTTP request, labelled with
the route template so that document ids do not explode label cardinality.
"""

import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match


def route_template(request: Request) -> str:
    """
    Resolve the path template of the route handling a request.

    Falls back to the raw path when no route matches (404s).
    """
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Middleware tracking Prometheus metrics for all HTTP requests."""

    def __init__(self, app, track_func: Callable):
        """
        Initialize the middleware.

        Args:
            app: ASGI application
            track_func: Called with (method, endpoint, status_code, duration)
        """
        super().__init__(app)
        self.track_func = track_func

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        self.track_func(
            method=request.method,
            endpoint=route_template(request),
            status_code=response.status_code,
            duration=time.time() - start_time,
        )

        return response
