"""
Prometheus metrics configuration
"""
from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Gauge, Histogram,
                               Info, generate_latest)
# Process-local registry; the service runs as one worker because chat
# conversations are held in memory.
from prometheus_client.registry import REGISTRY

from virtual_doctor.core.config import get_settings


# ============================================================================
# HTTP Request Metrics
# ============================================================================

http_requests_total = Counter(
    'http_requests_total',
    'Total number of HTTP requests',
    ['method', 'endpoint', 'status_code']
)

http_request_duration_seconds = Histogram(
    'http_request_duration_seconds',
    'HTTP request duration in seconds',
    ['method', 'endpoint', 'status_code'],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0)
)

http_errors_total = Counter(
    'http_errors_total',
    'Total number of HTTP errors',
    ['method', 'endpoint', 'status_code', 'error_type']
)

# ============================================================================
# Chat Metrics
# ============================================================================

chat_replies_total = Counter(
    'chat_replies_total',
    'Total number of chatbot replies',
    ['intent']  # greeting, thanks, farewell, health_tip, problem, fallback
)

chat_sessions_active = Gauge(
    'chat_sessions_active',
    'Number of conversations currently held in memory'
)

# ============================================================================
# Auth Metrics
# ============================================================================

auth_attempts_total = Counter(
    'auth_attempts_total',
    'Total number of login attempts',
    ['outcome']  # success, failure
)

# ============================================================================
# Database Metrics
# ============================================================================

db_queries_total = Counter(
    'db_queries_total',
    'Total number of database queries',
    ['operation']  # select, insert, update, delete
)

db_query_duration_seconds = Histogram(
    'db_query_duration_seconds',
    'Database query duration in seconds',
    ['operation'],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0)
)

# ============================================================================
# System Info
# ============================================================================

app_info = Info(
    'app_info',
    'Application information'
)

_settings = get_settings()
app_info.info({
    'app_name': _settings.app_name,
    'app_env': _settings.app_env,
    'version': '0.1.0'
})


def get_metrics():
    """
    Get Prometheus metrics in text format

    Returns:
        bytes: Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_metrics_content_type():
    """Get content type for Prometheus metrics"""
    return CONTENT_TYPE_LATEST
