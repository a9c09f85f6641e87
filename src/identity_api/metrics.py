import prometheus_client
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Guard against duplicated metric registration when the module is imported
# multiple times (for example, when running uvicorn with the reloader).
REQUEST_COUNT = getattr(prometheus_client, "identity_REQUEST_COUNT", None)
REQUEST_LATENCY = getattr(prometheus_client, "identity_REQUEST_LATENCY", None)
AUTH_ATTEMPTS = getattr(prometheus_client, "identity_AUTH_ATTEMPTS", None)
TOKEN_OPERATIONS = getattr(prometheus_client, "identity_TOKEN_OPERATIONS", None)
ACCOUNT_OPERATIONS = getattr(prometheus_client, "identity_ACCOUNT_OPERATIONS", None)

if REQUEST_COUNT is None:
    # HTTP Metrics
    REQUEST_COUNT = Counter(
        "http_requests_total", "Total HTTP requests", ["method", "endpoint", "http_status"]
    )
    REQUEST_LATENCY = Histogram(
        "http_request_latency_seconds", "HTTP request latency in seconds", ["method", "endpoint"]
    )

    # Authentication Metrics
    AUTH_ATTEMPTS = Counter(
        "auth_attempts_total",
        "Total authentication attempts",
        ["result", "method"],  # result: success/failure, method: login/change_password/change_email
    )
    TOKEN_OPERATIONS = Counter(
        "token_operations_total",
        "Total token operations",
        ["operation"],  # operation: issue/verify/reject
    )

    # Account lifecycle
    ACCOUNT_OPERATIONS = Counter(
        "account_operations_total",
        "Total account operations",
        ["operation", "result"],  # result: ok or a failure kind
    )

    prometheus_client.identity_REQUEST_COUNT = REQUEST_COUNT  # type: ignore[attr-defined]
    prometheus_client.identity_REQUEST_LATENCY = REQUEST_LATENCY  # type: ignore[attr-defined]
    prometheus_client.identity_AUTH_ATTEMPTS = AUTH_ATTEMPTS  # type: ignore[attr-defined]
    prometheus_client.identity_TOKEN_OPERATIONS = TOKEN_OPERATIONS  # type: ignore[attr-defined]
    prometheus_client.identity_ACCOUNT_OPERATIONS = ACCOUNT_OPERATIONS  # type: ignore[attr-defined]


def metrics_response():
    return generate_latest(), CONTENT_TYPE_LATEST
