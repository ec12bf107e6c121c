"""
Prometheus metrics, all exported under the linguaquest_ prefix.

HTTP traffic is recorded by middleware.metrics_middleware; storage, LLM and
learning metrics are updated by the modules that own those concerns.
"""
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CONTENT_TYPE_LATEST
from flask import Response

NAMESPACE = 'linguaquest'

HTTP_LABELS = ['method', 'endpoint']
LLM_LABELS = ['provider', 'model', 'use_case']

# HTTP

http_requests_total = Counter(
    'http_requests_total', 'HTTP requests served',
    HTTP_LABELS + ['status_code'], namespace=NAMESPACE
)
http_request_duration_seconds = Histogram(
    'http_request_duration_seconds', 'HTTP request latency',
    HTTP_LABELS, namespace=NAMESPACE,
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 10.0)
)
http_requests_in_flight = Gauge(
    'http_requests_in_flight', 'HTTP requests being handled right now',
    HTTP_LABELS, namespace=NAMESPACE
)

# Storage

db_connection_errors_total = Counter(
    'db_connection_errors_total', 'Connection pool failures by kind',
    ['error_type'], namespace=NAMESPACE  # pool_init_failed|pool_exhausted|connection_closed|rollback_failed
)
db_connection_wait_seconds = Histogram(
    'db_connection_wait_seconds', 'Time spent borrowing a pooled connection',
    namespace=NAMESPACE,
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0)
)

# Sentence generation

llm_calls_total = Counter(
    'llm_calls_total', 'LLM completion calls',
    LLM_LABELS + ['status'], namespace=NAMESPACE
)
llm_request_duration_seconds = Histogram(
    'llm_request_duration_seconds', 'LLM completion latency',
    LLM_LABELS, namespace=NAMESPACE,
    buckets=(0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0)
)
llm_tokens_total = Counter(
    'llm_tokens_total', 'LLM tokens consumed',
    LLM_LABELS + ['type'], namespace=NAMESPACE
)
llm_errors_total = Counter(
    'llm_errors_total', 'LLM calls that produced nothing usable',
    LLM_LABELS + ['error_type'], namespace=NAMESPACE
)

# Learning

answers_total = Counter(
    'answers_total', 'Answers recorded against review records',
    ['result'], namespace=NAMESPACE  # correct|incorrect
)
sessions_completed_total = Counter(
    'sessions_completed_total', 'Practice sessions completed',
    ['mode'], namespace=NAMESPACE
)
experience_awarded_total = Counter(
    'experience_awarded_total', 'Experience points awarded',
    namespace=NAMESPACE
)
streak_transitions_total = Counter(
    'streak_transitions_total', 'Daily streak transitions on session completion',
    ['transition'], namespace=NAMESPACE  # started|unchanged|extended|reset
)
due_batch_size = Histogram(
    'due_batch_size', 'Items served per due batch',
    namespace=NAMESPACE,
    buckets=(0, 1, 5, 10, 15, 20)
)


def metrics_endpoint():
    """GET /metrics in the Prometheus text format."""
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
