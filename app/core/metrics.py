# app/core/metrics.py
"""
Prometheus collectors exposed on ``/metrics``.

HTTP traffic is recorded by the middleware in ``app.main``; the business
series are updated by the services right after their transaction commits.
Gauges live in process memory and start from zero on every boot.
"""
from prometheus_client import Counter, Gauge, Histogram, Summary

# ---- HTTP ----
HTTP_REQUESTS = Counter(
    "http_requests",
    "Total number of HTTP requests",
    ["method", "endpoint", "status"],
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

# ---- Business ----
TRAINING_REQUESTS = Counter(
    "training_requests",
    "Training requests by the status they entered",
    ["status"],
)

MENTORS_WORKLOAD = Gauge(
    "mentors_workload",
    "Current workload of mentors (0-5 scale)",
    ["mentor_id", "mentor_name"],
)

LEARNING_PROCESSES_ACTIVE = Gauge(
    "learning_processes_active",
    "Number of active learning processes",
)

LEARNING_PROCESSES_COMPLETED = Counter(
    "learning_processes_completed",
    "Total number of completed learning processes",
)

# exported as feedback_rating_sum / feedback_rating_count
FEEDBACK_RATING = Summary(
    "feedback_rating",
    "Ratings left on completed learning processes",
)


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    HTTP_REQUESTS.labels(method, endpoint, str(status)).inc()
    HTTP_REQUEST_DURATION.labels(method, endpoint).observe(duration)


def record_request_status(status: str) -> None:
    TRAINING_REQUESTS.labels(status).inc()


def set_mentor_workload(mentor_id: int, mentor_name: str, workload: int) -> None:
    MENTORS_WORKLOAD.labels(str(mentor_id), mentor_name).set(workload)


def record_assignment() -> None:
    LEARNING_PROCESSES_ACTIVE.inc()


def record_completion(rating: int) -> None:
    LEARNING_PROCESSES_ACTIVE.dec()
    LEARNING_PROCESSES_COMPLETED.inc()
    FEEDBACK_RATING.observe(rating)
