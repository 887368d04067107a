"""Prometheus metrics for ledger commands, transfers and HTTP latency"""

from decimal import Decimal
from prometheus_client import Counter, Histogram, Gauge

# Command metrics
command_counter = Counter(
    "vaultswipe_command_total",
    "Ledger commands handled",
    ["command", "outcome"],  # accepted | rejected
)

transfer_counter = Counter(
    "vaultswipe_transfer_total",
    "Balance transfers by variant",
    ["variant", "outcome"],  # strict | unchecked ; applied | invalid_amount | insufficient_funds
)

# Ledger figures as of the last summary
pending_total_gauge = Gauge(
    "vaultswipe_pending_total_dollars",
    "Total uncleared amount across all cards",
)

pending_difference_gauge = Gauge(
    "vaultswipe_pending_difference_dollars",
    "Card exposure not yet covered by the vault",
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_command(command: str, accepted: bool) -> None:
    command_counter.labels(command=command, outcome="accepted" if accepted else "rejected").inc()


def record_transfer(variant: str, applied: bool, reason: str | None = None) -> None:
    transfer_counter.labels(variant=variant, outcome="applied" if applied else (reason or "rejected")).inc()


def record_summary(total_pending: Decimal, difference: Decimal) -> None:
    """Publish the latest totals for dashboards"""
    pending_total_gauge.set(float(total_pending))
    pending_difference_gauge.set(float(difference))


def record_request(method: str, endpoint: str, status: int, seconds: float) -> None:
    request_duration_histogram.labels(method=method, endpoint=endpoint, status=status).observe(seconds)
