# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability for the wardrobe throttle library.

This module exports:
    ThrottleMetrics: Dataclass counters for the request manager.
    PrometheusThrottleMetrics: Optional Prometheus mirror of those counters.
    get_prometheus_throttle_metrics: Get or create the Prometheus singleton.
    reset_prometheus_throttle_metrics: Reset the Prometheus singleton.
    PROMETHEUS_AVAILABLE: Whether prometheus_client is available.
"""

from .constants import (
    CLASSIFIED_ERRORS_TOTAL,
    COOLDOWN_WAIT_SECONDS,
    METRIC_PREFIX,
    OPERATIONS_FINISHED_TOTAL,
    OPERATIONS_SUBMITTED_TOTAL,
    RETRIES_TOTAL,
)
from .metrics import (
    PROMETHEUS_AVAILABLE,
    PrometheusThrottleMetrics,
    ThrottleMetrics,
    get_prometheus_throttle_metrics,
    reset_prometheus_throttle_metrics,
)

__all__ = [
    "CLASSIFIED_ERRORS_TOTAL",
    "COOLDOWN_WAIT_SECONDS",
    "METRIC_PREFIX",
    "OPERATIONS_FINISHED_TOTAL",
    "OPERATIONS_SUBMITTED_TOTAL",
    "PROMETHEUS_AVAILABLE",
    "RETRIES_TOTAL",
    "PrometheusThrottleMetrics",
    "ThrottleMetrics",
    "get_prometheus_throttle_metrics",
    "reset_prometheus_throttle_metrics",
]
