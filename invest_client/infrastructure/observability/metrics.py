"""Prometheus metrics for submission outcomes, step rejections and backend latency"""

from prometheus_client import Counter, Histogram

# Wizard metrics
submission_counter = Counter(
    "invest_client_submission_total",
    "Wizard and investment submissions",
    ["flow", "outcome"],  # succeeded | rejected | transport_error | auth_error
)

step_rejection_counter = Counter(
    "invest_client_step_rejections_total",
    "Wizard steps that failed local validation",
    ["flow", "step"],
)

# Backend API metrics
backend_request_histogram = Histogram(
    "backend_request_duration_seconds",
    "Backend API response time",
    ["endpoint", "status"],
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

backend_failure_counter = Counter(
    "backend_failures_total",
    "Failed backend API calls",
    ["endpoint", "kind"],  # timeout | network | server | rejected | auth | invalid
)


def record_submission(flow: str, outcome: str) -> None:
    submission_counter.labels(flow=flow, outcome=outcome).inc()


def record_step_rejection(flow: str, step: str) -> None:
    step_rejection_counter.labels(flow=flow, step=step).inc()
