# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""
from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "member_sync_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "member_sync_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "member_sync_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
SYNC_OPERATIONS = Counter(
    "member_sync_operations_total",
    "Member sync operations by outcome",
    ["operation", "outcome"],
)
MEMBERS_TOTAL = Gauge(
    "member_sync_members",
    "Locally stored members by status",
    ["status"],
)

# ── Provider Metrics (updated by the MailChimp client) ──
PROVIDER_REQUESTS = Counter(
    "member_sync_provider_requests_total",
    "Requests sent to MailChimp",
    ["method", "status"],
)
PROVIDER_LATENCY = Histogram(
    "member_sync_provider_request_duration_seconds",
    "MailChimp request latency in seconds",
    ["method"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)
