"""
Prometheus metrics for the document search service.

Tracks HTTP traffic, document store operations, keyword search and
question answering.
"""

from fastapi import Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

# Request metrics
http_requests_total = Counter(
    "docsearch_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
)

http_request_duration_seconds = Histogram(
    "docsearch_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0),
)

# Document store metrics
documents_written_total = Counter(
    "docsearch_documents_written_total",
    "Total documents written to the store",
    ["backend"],
)

document_lookups_total = Counter(
    "docsearch_document_lookups_total",
    "Document lookups by identifier",
    ["backend", "result"],
)

store_errors_total = Counter(
    "docsearch_store_errors_total",
    "Document store failures",
    ["backend", "operation"],
)

# Search metrics
search_queries_total = Counter(
    "docsearch_search_queries_total",
    "Total keyword search queries",
    ["backend"],
)

search_results_per_query = Histogram(
    "docsearch_search_results_per_query",
    "Number of documents returned per query",
    buckets=(0, 1, 5, 10, 25, 50, 100),
)

# Question answering metrics
ask_requests_total = Counter(
    "docsearch_ask_requests_total",
    "Total question answering requests",
    ["status"],
)

reader_inference_duration_seconds = Histogram(
    "docsearch_reader_inference_duration_seconds",
    "Reader inference duration in seconds",
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)


def track_request_metrics(method: str, endpoint: str, status_code: int, duration: float):
    """Track HTTP request metrics."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


async def metrics_endpoint() -> Response:
    """Render all metrics in Prometheus exposition format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
