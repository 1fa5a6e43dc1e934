"""
Prometheus metrics for the request handlers.

/metrics is unauthenticated; keep it behind the internal network.
"""
from flask import Blueprint, Response, request, g
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess, REGISTRY
import time
import os

metrics_bp = Blueprint('metrics', __name__)

# Under Gunicorn each worker writes to PROMETHEUS_MULTIPROC_DIR and the
# scrape aggregates them; collectors must then stay unregistered.
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
    _collector_registry = None
else:
    registry = REGISTRY
    _collector_registry = registry

http_requests_total = Counter(
    'erplite_http_requests_total',
    'Handled requests',
    ['method', 'endpoint', 'http_status'],
    registry=_collector_registry
)

http_request_duration_seconds = Histogram(
    'erplite_http_request_duration_seconds',
    'Request latency in seconds',
    ['method', 'endpoint'],
    registry=_collector_registry,
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

http_requests_in_flight = Gauge(
    'erplite_http_requests_in_flight',
    'Requests being handled',
    registry=_collector_registry
)

sales_created_total = Counter(
    'erplite_sales_created_total',
    'Sales persisted with all their items',
    registry=_collector_registry
)

sales_amount_total = Counter(
    'erplite_sales_amount_total',
    'Sum of total_amount over created sales',
    registry=_collector_registry
)

sale_rollback_failures_total = Counter(
    'erplite_sale_rollback_failures_total',
    'Sale headers whose compensating delete failed',
    registry=_collector_registry
)


def setup_metrics_instrumentation(app):
    """Time every request and count it by endpoint and status."""

    @app.before_request
    def start_request_timer():
        g._request_started_at = time.time()
        http_requests_in_flight.inc()

    @app.after_request
    def observe_request(response):
        started_at = g.pop('_request_started_at', None)
        if started_at is None:
            return response

        endpoint = request.endpoint or 'unknown'
        try:
            http_request_duration_seconds.labels(
                method=request.method, endpoint=endpoint
            ).observe(time.time() - started_at)
            http_requests_total.labels(
                method=request.method, endpoint=endpoint, http_status=response.status_code
            ).inc()
        except ValueError as e:
            app.logger.warning(f"Failed to record metrics: {e}")
        finally:
            http_requests_in_flight.dec()

        return response


@metrics_bp.route('/metrics')
def metrics():
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
