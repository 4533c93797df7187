"""Prometheus metrics middleware for the HTTP API."""
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Match

api_request_duration_seconds = Histogram(
    "api_request_duration_seconds",
    "API request duration in seconds",
    labelnames=["method", "route", "status_code"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)

api_requests_total = Counter(
    "api_requests_total",
    "Total API requests",
    labelnames=["method", "route", "status_code"],
)

api_errors_total = Counter(
    "api_errors_total",
    "Requests that raised instead of returning a response",
    labelnames=["method", "route", "error_type"],
)


def route_template(request: Request) -> str:
    """
    Path template of the route serving a request (e.g. /api/subscriptions/{subscription_id}).

    Labelling by template keeps one time series per endpoint instead of one
    per subscription id.
    """
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", request.url.path)
    return "unmatched"


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request count, latency and errors per route."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """
        Process request and collect metrics.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            Response: HTTP response from route handler
        """
        if request.url.path.startswith("/metrics"):
            return await call_next(request)

        route = route_template(request)
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            api_errors_total.labels(
                method=request.method, route=route, error_type=type(exc).__name__
            ).inc()
            raise

        labels = {"method": request.method, "route": route, "status_code": response.status_code}
        api_request_duration_seconds.labels(**labels).observe(time.perf_counter() - start_time)
        api_requests_total.labels(**labels).inc()
        return response
