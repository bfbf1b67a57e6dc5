import logging
import uuid
from time import perf_counter

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

HTTP_REQUESTS = Counter(
    "registry_http_requests_total",
    "HTTP requests handled",
    ["method", "route", "status"],
)
HTTP_LATENCY = Histogram(
    "registry_http_request_duration_seconds",
    "HTTP request latency",
    ["method", "route"],
)
NUMBERS_ALLOCATED = Counter(
    "registry_numbers_allocated_total",
    "Document numbers handed out by the allocator",
    ["purpose"],
)
NUMBER_CONFLICTS = Counter(
    "registry_number_conflicts_total",
    "Allocations rejected because the candidate number already existed",
)


def _route_label(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


class ObservabilityMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
        finally:
            elapsed = perf_counter() - started
            route = _route_label(request)
            HTTP_REQUESTS.labels(request.method, route, str(status)).inc()
            HTTP_LATENCY.labels(request.method, route).observe(elapsed)
            logger.info(
                "%s %s -> %s (%.1f ms)",
                request.method,
                request.url.path,
                status,
                elapsed * 1000,
                extra={"request_id": request_id},
            )
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
