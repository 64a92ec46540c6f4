"""
Middleware for collecting HTTP request metrics
"""
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from virtual_doctor.core.metrics import (http_errors_total,
                                         http_request_duration_seconds,
                                         http_requests_total)

UNMATCHED_ENDPOINT = "unmatched"


def route_template(request: Request) -> str:
    """
    Path template of the route that will handle the request

    Labels must stay bounded, so the raw URL is never used: static files
    report their mount ("/css") and unknown URLs share UNMATCHED_ENDPOINT.
    """
    partial = None
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return route.path
        if match == Match.PARTIAL and partial is None:
            partial = route.path
    return partial or UNMATCHED_ENDPOINT


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect HTTP request metrics for Prometheus
    """

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        # Resolve before routing mutates the scope
        endpoint = route_template(request)

        start_time = time.time()
        error_type = None
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        except Exception as e:
            error_type = type(e).__name__
            raise
        finally:
            duration = time.time() - start_time
            method = request.method
            status_code_str = str(status_code)

            http_requests_total.labels(
                method=method,
                endpoint=endpoint,
                status_code=status_code_str
            ).inc()
            http_request_duration_seconds.labels(
                method=method,
                endpoint=endpoint,
                status_code=status_code_str
            ).observe(duration)

            if status_code >= 400:
                http_errors_total.labels(
                    method=method,
                    endpoint=endpoint,
                    status_code=status_code_str,
                    error_type=error_type or f"http_{status_code}"
                ).inc()
