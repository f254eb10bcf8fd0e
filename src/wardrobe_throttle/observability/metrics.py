# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Throttle metrics for the wardrobe throttle library.

This module provides:
1. ThrottleMetrics - Dataclass counting lane activity, retries and waits
2. PrometheusThrottleMetrics - Optional Prometheus metrics for observability

Usage:
    metrics = ThrottleMetrics()
    metrics.record_submitted(TrafficClass.PRO)
    metrics.record_cooldown_wait(12.5)
    stats = metrics.get_stats()
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ..types.traffic import TrafficClass
from .constants import (
    CLASSIFIED_ERRORS_TOTAL,
    COOLDOWN_WAIT_BUCKETS,
    COOLDOWN_WAIT_SECONDS,
    OPERATIONS_FINISHED_TOTAL,
    OPERATIONS_SUBMITTED_TOTAL,
    RETRIES_TOTAL,
)

logger = logging.getLogger(__name__)

# Type declarations for optional prometheus_client imports
if TYPE_CHECKING:
    from prometheus_client import Counter as CounterType, Histogram as HistogramType
else:
    CounterType = object
    HistogramType = object

# Try to import prometheus_client for optional Prometheus metrics
try:
    from prometheus_client import Counter as _Counter, Histogram as _Histogram

    Counter: type[CounterType] | None = _Counter
    Histogram: type[HistogramType] | None = _Histogram
    PROMETHEUS_AVAILABLE = True
except ImportError:
    Counter = None
    Histogram = None
    PROMETHEUS_AVAILABLE = False


@dataclass
class ThrottleMetrics:
    """
    Counters describing the request manager's activity.

    The manager runs on a single event loop, so plain increments are safe;
    the per-class dictionaries are still guarded by a lock because get_stats()
    may be called from a metrics thread.

    Example:
        >>> metrics = ThrottleMetrics()
        >>> metrics.record_submitted(TrafficClass.FLASH)
        >>> metrics.record_finished(TrafficClass.FLASH, succeeded=True)
        >>> metrics.get_stats()["completed"]
        1
    """

    submitted: int = 0
    completed: int = 0
    failed: int = 0
    retries: int = 0
    quota_violations: int = 0
    credential_failures: int = 0
    transient_retries: int = 0
    cooldown_waits: int = 0
    total_cooldown_wait_seconds: float = 0.0

    _per_class_submissions: dict[str, int] = field(default_factory=dict, repr=False)
    _per_class_dispatches: dict[str, int] = field(default_factory=dict, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record_submitted(self, traffic_class: TrafficClass) -> None:
        """Record an operation appended to the lane."""
        self.submitted += 1
        with self._lock:
            key = traffic_class.value
            self._per_class_submissions[key] = (
                self._per_class_submissions.get(key, 0) + 1
            )

    def record_finished(self, traffic_class: TrafficClass, succeeded: bool) -> None:
        """Record an operation leaving the lane after its final attempt."""
        if succeeded:
            self.completed += 1
        else:
            self.failed += 1
        with self._lock:
            key = traffic_class.value
            self._per_class_dispatches[key] = self._per_class_dispatches.get(key, 0) + 1

    def record_cooldown_wait(self, seconds: float) -> None:
        """Record time spent waiting before a dispatch."""
        self.cooldown_waits += 1
        self.total_cooldown_wait_seconds += seconds

    def record_quota_violation(self) -> None:
        self.quota_violations += 1

    def record_credential_failure(self) -> None:
        self.credential_failures += 1

    def record_retry(self, transient: bool = False) -> None:
        """Record a retry; transient retries are also counted separately."""
        self.retries += 1
        if transient:
            self.transient_retries += 1

    def get_stats(self) -> dict[str, Any]:
        """
        Return metrics as a dictionary for JSON serialization.

        Returns:
            Dictionary containing all counters and the per-class breakdown.
        """
        with self._lock:
            per_class = dict(self._per_class_dispatches)
            submissions = dict(self._per_class_submissions)
        return {
            "submitted": self.submitted,
            "completed": self.completed,
            "failed": self.failed,
            "retries": self.retries,
            "quota_violations": self.quota_violations,
            "credential_failures": self.credential_failures,
            "transient_retries": self.transient_retries,
            "cooldown_waits": self.cooldown_waits,
            "total_cooldown_wait_seconds": self.total_cooldown_wait_seconds,
            "per_class_submissions": submissions,
            "per_class_dispatches": per_class,
        }

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.submitted = 0
        self.completed = 0
        self.failed = 0
        self.retries = 0
        self.quota_violations = 0
        self.credential_failures = 0
        self.transient_retries = 0
        self.cooldown_waits = 0
        self.total_cooldown_wait_seconds = 0.0
        with self._lock:
            self._per_class_submissions.clear()
            self._per_class_dispatches.clear()


class PrometheusThrottleMetrics:
    """
    Optional Prometheus metrics for the request manager.

    Only instantiated if prometheus_client is available.

    Metrics:
        - wardrobe_throttle_operations_submitted_total
        - wardrobe_throttle_operations_finished_total
        - wardrobe_throttle_retries_total
        - wardrobe_throttle_classified_errors_total
        - wardrobe_throttle_cooldown_wait_seconds
    """

    def __init__(self, registry: Any | None = None) -> None:
        """
        Initialize Prometheus throttle metrics.

        Args:
            registry: Optional CollectorRegistry. If None, uses the default registry.

        Raises:
            ImportError: If prometheus_client is not available.
        """
        if not PROMETHEUS_AVAILABLE or Counter is None or Histogram is None:
            raise ImportError(
                "prometheus_client is not available. "
                "Install with: pip install prometheus-client"
            )

        self.operations_submitted = Counter(
            OPERATIONS_SUBMITTED_TOTAL,
            "Operations appended to the execution lane",
            ["traffic_class"],
            registry=registry,
        )
        self.operations_finished = Counter(
            OPERATIONS_FINISHED_TOTAL,
            "Operations that left the execution lane",
            ["traffic_class", "outcome"],
            registry=registry,
        )
        self.retries = Counter(
            RETRIES_TOTAL,
            "Retry attempts",
            ["category"],
            registry=registry,
        )
        self.classified_errors = Counter(
            CLASSIFIED_ERRORS_TOTAL,
            "Failed attempts by error category",
            ["category"],
            registry=registry,
        )
        self.cooldown_wait_seconds = Histogram(
            COOLDOWN_WAIT_SECONDS,
            "Time spent waiting out a cooldown before dispatch",
            ["traffic_class"],
            buckets=list(COOLDOWN_WAIT_BUCKETS),
            registry=registry,
        )

        logger.info("Prometheus throttle metrics initialized")

    def observe_submitted(self, traffic_class: str) -> None:
        self.operations_submitted.labels(traffic_class=traffic_class).inc()

    def observe_finished(self, traffic_class: str, succeeded: bool) -> None:
        outcome = "success" if succeeded else "failure"
        self.operations_finished.labels(
            traffic_class=traffic_class, outcome=outcome
        ).inc()

    def observe_error(self, category: str, retried: bool) -> None:
        self.classified_errors.labels(category=category).inc()
        if retried:
            self.retries.labels(category=category).inc()

    def observe_cooldown_wait(self, traffic_class: str, seconds: float) -> None:
        self.cooldown_wait_seconds.labels(traffic_class=traffic_class).observe(seconds)


# Module-level singleton for Prometheus metrics (optional)
_prometheus_throttle_metrics: PrometheusThrottleMetrics | None = None
_prometheus_lock = threading.Lock()


def get_prometheus_throttle_metrics() -> PrometheusThrottleMetrics | None:
    """
    Get or create the Prometheus throttle metrics singleton.

    prometheus_client refuses to register the same metric name twice, so
    all managers in a process share one instance.

    Returns:
        PrometheusThrottleMetrics instance if prometheus_client is available,
        None otherwise.
    """
    global _prometheus_throttle_metrics

    if not PROMETHEUS_AVAILABLE:
        return None

    if _prometheus_throttle_metrics is None:
        with _prometheus_lock:
            if _prometheus_throttle_metrics is None:
                try:
                    _prometheus_throttle_metrics = PrometheusThrottleMetrics()
                except Exception as e:
                    logger.warning(
                        f"Failed to initialize Prometheus throttle metrics: {e}"
                    )
                    return None

    return _prometheus_throttle_metrics


def reset_prometheus_throttle_metrics() -> None:
    """Reset the Prometheus throttle metrics singleton (mainly for testing)."""
    global _prometheus_throttle_metrics
    _prometheus_throttle_metrics = None


__all__ = [
    "PROMETHEUS_AVAILABLE",
    "PrometheusThrottleMetrics",
    "ThrottleMetrics",
    "get_prometheus_throttle_metrics",
    "reset_prometheus_throttle_metrics",
]
