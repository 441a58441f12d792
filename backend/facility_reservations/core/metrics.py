"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at the /metrics endpoint.
"""

from prometheus_client import Counter, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Reservation lifecycle
reservation_submissions = Counter(
    'reservation_submissions_total',
    'Reservations submitted',
    ['with_conflicts']  # yes, no
)

reservation_transitions = Counter(
    'reservation_transitions_total',
    'Status transitions attempted',
    ['transition', 'result']  # approve/decline, success/invalid_state/stale
)

# Conflict detection
conflicts_detected = Counter(
    'reservation_conflicts_detected_total',
    'Conflicting reservations found by the detector',
    ['source']  # submission, preview, approval
)

cascade_outcomes = Counter(
    'reservation_cascade_outcomes_total',
    'Automatic declines triggered by approvals',
    ['state']  # declined, stale, failed
)

# Store
store_errors = Counter(
    'reservation_store_errors_total',
    'Reservation store failures',
    ['operation']
)


def metrics_endpoint() -> Response:
    """Prometheus exposition for the /metrics route."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


def record_submission(conflict_count: int):
    reservation_submissions.labels(with_conflicts="yes" if conflict_count else "no").inc()
    record_conflicts("submission", conflict_count)


def record_conflicts(source: str, conflict_count: int):
    if conflict_count:
        conflicts_detected.labels(source=source).inc(conflict_count)


def record_transition(transition: str, result: str):
    """Record a status transition. Result: success, invalid_state, stale"""
    reservation_transitions.labels(transition=transition, result=result).inc()


def record_cascade(state: str):
    cascade_outcomes.labels(state=state).inc()


def record_store_error(operation: str):
    store_errors.labels(operation=operation).inc()
