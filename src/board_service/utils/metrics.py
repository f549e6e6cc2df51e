"""Prometheus metrics for observability."""

from functools import lru_cache

from prometheus_client import Counter, Histogram, Info


class Metrics:
    """Prometheus metrics for the board service."""

    def __init__(self) -> None:
        """Initialize all metrics."""
        self.info = Info(
            "board_service",
            "Board service information",
        )
        self.info.info({"version": "0.1.0"})

        # Remote store
        self.store_requests_total = Counter(
            "board_store_requests_total",
            "Total number of remote store requests",
            ["method", "status"],
        )

        self.store_request_duration_seconds = Histogram(
            "board_store_request_duration_seconds",
            "Duration of remote store requests in seconds",
            ["method"],
            buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
        )

        # Board engine
        self.board_operations_total = Counter(
            "board_operations_total",
            "Total number of board engine operations",
            ["operation", "status"],
        )

        # Contact registry
        self.contact_operations_total = Counter(
            "contact_operations_total",
            "Total number of contact registry operations",
            ["operation", "status"],
        )

        self.reconciliation_writes_total = Counter(
            "contact_reconciliation_writes_total",
            "Status arrays rewritten while propagating contact changes",
            ["reason"],
        )

    def record_store_request(self, method: str, status: str, duration: float) -> None:
        """Record a remote store request.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            status: Request status (success, error)
            duration: Request duration in seconds
        """
        self.store_requests_total.labels(method=method, status=status).inc()
        self.store_request_duration_seconds.labels(method=method).observe(duration)

    def record_board_operation(self, operation: str, status: str) -> None:
        """Record a board engine operation (create, move, edit, delete, subtask_*)."""
        self.board_operations_total.labels(operation=operation, status=status).inc()

    def record_contact_operation(self, operation: str, status: str) -> None:
        """Record a contact registry operation (create, edit, delete)."""
        self.contact_operations_total.labels(operation=operation, status=status).inc()


@lru_cache
def get_metrics() -> Metrics:
    """Get cached metrics instance."""
    return Metrics()
