from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "bullet_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "bullet_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

PROVIDER_CALLS_TOTAL = get_or_create_metric(
    "bullet_provider_calls_total",
    "LLM provider calls by outcome",
    Counter,
    labelnames=["provider", "outcome"],
)

PERSISTENCE_FAILURES_TOTAL = get_or_create_metric(
    "bullet_persistence_failures_total",
    "Improvement results that could not be stored",
    Counter,
)
