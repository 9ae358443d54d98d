"""
Vesting instrumentation for vestlock.

Provides Prometheus metrics that track how much is released to
beneficiaries, refunded to issuers and held in custody, with helper
functions that are safe to call from the release and revoke paths.
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge

released_tokens_counter = Counter(
    "vestlock_released_tokens_total",
    "Total base units released to beneficiaries (float counter, exact up to 2**53 units)",
    ["asset"],
)

refunded_tokens_counter = Counter(
    "vestlock_refunded_tokens_total",
    "Total base units refunded to issuers on revocation (float counter, exact up to 2**53 units)",
    ["asset"],
)

operation_failures_counter = Counter(
    "vestlock_operation_failures_total",
    "Total number of failed vesting operations",
    ["operation", "error"],
)

custody_balance_gauge = Gauge(
    "vestlock_custody_balance",
    "Current balance held by a vesting engine; drained engines are dropped",
    ["engine", "asset"],
)


def record_release(asset: str, amount: int) -> None:
    """Increment the release counter for the specified asset."""
    if amount <= 0:
        return
    released_tokens_counter.labels(asset=asset).inc(amount)


def record_refund(asset: str, amount: int) -> None:
    """Increment the refund counter for the specified asset."""
    if amount <= 0:
        return
    refunded_tokens_counter.labels(asset=asset).inc(amount)


def record_failure(operation: str, error: Exception) -> None:
    operation_failures_counter.labels(operation=operation, error=type(error).__name__).inc()


def update_custody_balance(engine: str, asset: str, balance: int) -> None:
    """Set the custody gauge, removing the series once the engine is drained."""
    gauge = custody_balance_gauge.labels(engine=engine, asset=asset)
    if balance > 0:
        gauge.set(balance)
    else:
        custody_balance_gauge.remove(engine, asset)
