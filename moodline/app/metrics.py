from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "moodline_requests_total",
    "Total HTTP requests processed by Moodline",
    ("method", "path", "status"),
)

REQUEST_LATENCY = Histogram(
    "moodline_request_latency_seconds",
    "HTTP request latency in seconds",
    ("method", "path"),
)

REQUEST_ERRORS = Counter(
    "moodline_request_errors_total",
    "HTTP requests resulting in server errors",
    ("method", "path", "status"),
)

STORE_MUTATIONS = Counter(
    "moodline_store_mutations_total",
    "Applied entry store mutations",
    ("op",),
)

AGGREGATIONS = Counter(
    "moodline_aggregations_total",
    "Day aggregate recomputations",
)

AGGREGATED_DAYS = Histogram(
    "moodline_aggregated_days",
    "Number of calendar days per aggregation",
    buckets=(1, 7, 14, 31, 92, 183, 366, 731),
)

CHART_LAYOUTS = Counter(
    "moodline_chart_layouts_total",
    "Chart layouts computed",
    ("mode",),
)

__all__ = [
    "AGGREGATED_DAYS",
    "AGGREGATIONS",
    "CHART_LAYOUTS",
    "REQUEST_COUNT",
    "REQUEST_ERRORS",
    "REQUEST_LATENCY",
    "STORE_MUTATIONS",
]
