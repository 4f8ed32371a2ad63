"""Monitoring and metrics."""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST


# Request metrics
REQUEST_COUNT = Counter(
    "bytecourses_requests_total",
    "Total number of requests",
    ["method", "endpoint", "status"]
)

REQUEST_LATENCY = Histogram(
    "bytecourses_request_duration_seconds",
    "Request duration in seconds",
    ["method", "endpoint"]
)

# Proposal metrics
PROPOSAL_TRANSITIONS = Counter(
    "bytecourses_proposal_transitions_total",
    "Total proposal status transitions",
    ["from_status", "to_status"]
)

TRANSITION_CONFLICTS = Counter(
    "bytecourses_proposal_transition_conflicts_total",
    "Proposal actions rejected by the current status",
    ["action"]
)

# Course metrics
COURSE_MATERIALIZATIONS = Counter(
    "bytecourses_course_materializations_total",
    "Course creation attempts from approved proposals",
    ["outcome"]
)

METRICS_CONTENT_TYPE = CONTENT_TYPE_LATEST


def get_metrics() -> str:
    """Get current metrics in Prometheus format."""
    return generate_latest().decode('utf-8')


def increment_request_count(method: str, endpoint: str, status: str) -> None:
    """Increment request count metric."""
    REQUEST_COUNT.labels(method=method, endpoint=endpoint, status=status).inc()


def record_request_latency(method: str, endpoint: str, duration: float) -> None:
    """Record request latency."""
    REQUEST_LATENCY.labels(method=method, endpoint=endpoint).observe(duration)


def record_proposal_transition(from_status: str, to_status: str) -> None:
    """Record proposal status transition."""
    PROPOSAL_TRANSITIONS.labels(from_status=from_status, to_status=to_status).inc()


def record_transition_conflict(action: str) -> None:
    TRANSITION_CONFLICTS.labels(action=action).inc()


def record_materialization(outcome: str) -> None:
    """Record a course materialization attempt ('created' or 'existing')."""
    COURSE_MATERIALIZATIONS.labels(outcome=outcome).inc()
