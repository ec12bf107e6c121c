"""
before/after_request hooks feeding the HTTP metrics in middleware.metrics.
"""
import time

from flask import request, g

from middleware.metrics import (
    http_requests_total,
    http_request_duration_seconds,
    http_requests_in_flight
)


def _route_labels():
    # Unmatched URLs share one label so random paths cannot explode cardinality
    return {'method': request.method, 'endpoint': request.endpoint or 'unmatched'}


def track_request_start():
    g.metrics_start_time = time.perf_counter()
    http_requests_in_flight.labels(**_route_labels()).inc()


def track_request_end(response):
    labels = _route_labels()
    elapsed = time.perf_counter() - g.get('metrics_start_time', time.perf_counter())

    http_requests_in_flight.labels(**labels).dec()
    http_request_duration_seconds.labels(**labels).observe(elapsed)
    http_requests_total.labels(status_code=str(response.status_code), **labels).inc()
    return response
