# erp/obs/metrics.py
import time

from prometheus_client import Counter, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

http_requests_total = Counter("http_requests_total", "HTTP requests", ["method", "path", "code"])
http_request_duration = Histogram(
    "http_request_duration_seconds", "HTTP request duration seconds", ["method", "path"]
)

# +1 per committed ledger entry; rate() gives movement throughput per type
inventory_transactions_total = Counter(
    "inventory_transactions_total", "Committed inventory transactions", ["type"]
)
inventory_transaction_rejections_total = Counter(
    "inventory_transaction_rejections_total", "Rejected inventory transactions", ["type", "code"]
)
notification_dispatch_failures_total = Counter(
    "notification_dispatch_failures_total", "Post-commit notification failures"
)
inventory_ledger_mismatch_total = Counter(
    "inventory_ledger_mismatch_total", "Ledger vs inventory mismatches found by the guard job"
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - start
        route = request.scope.get("route")
        path = getattr(route, "path", request.url.path)
        http_requests_total.labels(request.method, path, str(response.status_code)).inc()
        http_request_duration.labels(request.method, path).observe(elapsed)
        return response
