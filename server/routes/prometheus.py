import time
from fastapi import APIRouter, Request, Response
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

router = APIRouter()

HTTP_REQUESTS = Counter(
    "tugasku_http_requests_total",
    "HTTP requests handled by the reminder backend",
    ["method", "route", "http_status"]
)

HTTP_LATENCY = Histogram(
    "tugasku_http_request_duration_seconds",
    "HTTP request latency",
    ["route"]
)

HTTP_EXCEPTIONS = Counter(
    "tugasku_http_exceptions_total",
    "Unhandled exceptions while serving requests",
    ["route"]
)


def _route_label(request: Request) -> str:
    # Template path ("/metrics/") rather than the raw URL keeps label cardinality bounded
    route = request.scope.get("route")
    return getattr(route, "path", None) or "unmatched"


@router.get("/")
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


async def metrics_middleware(request: Request, call_next):
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        HTTP_EXCEPTIONS.labels(route=_route_label(request)).inc()
        raise

    route = _route_label(request)
    HTTP_LATENCY.labels(route=route).observe(time.perf_counter() - started)
    HTTP_REQUESTS.labels(
        method=request.method,
        route=route,
        http_status=response.status_code
    ).inc()

    return response
