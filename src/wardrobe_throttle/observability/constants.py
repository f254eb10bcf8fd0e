# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `wardrobe_throttle_` prefix.

Naming Conventions:
    - Counter metrics end with `_total`
    - Histogram metrics for time end with `_seconds`

Label Best Practices:
    Only categorical labels are used:
    - `traffic_class` - pro, flash
    - `category` - quota_exceeded, invalid_credential, transient, other
    - `outcome` - success, failure
"""

METRIC_PREFIX = "wardrobe_throttle"
"""Prefix for all Prometheus metrics in this library."""

OPERATIONS_SUBMITTED_TOTAL = f"{METRIC_PREFIX}_operations_submitted_total"
"""Total operations appended to the execution lane."""

OPERATIONS_FINISHED_TOTAL = f"{METRIC_PREFIX}_operations_finished_total"
"""Total operations that left the lane, labelled by outcome."""

RETRIES_TOTAL = f"{METRIC_PREFIX}_retries_total"
"""Total retry attempts, labelled by error category."""

CLASSIFIED_ERRORS_TOTAL = f"{METRIC_PREFIX}_classified_errors_total"
"""Total failed attempts, labelled by error category."""

COOLDOWN_WAIT_SECONDS = f"{METRIC_PREFIX}_cooldown_wait_seconds"
"""Histogram of time spent waiting out a cooldown before dispatch."""

COOLDOWN_WAIT_BUCKETS = (0.5, 1, 2, 5, 10, 20, 32, 60, 120)
"""Histogram buckets for cooldown waits (seconds)."""


__all__ = [
    "CLASSIFIED_ERRORS_TOTAL",
    "COOLDOWN_WAIT_BUCKETS",
    "COOLDOWN_WAIT_SECONDS",
    "METRIC_PREFIX",
    "OPERATIONS_FINISHED_TOTAL",
    "OPERATIONS_SUBMITTED_TOTAL",
    "RETRIES_TOTAL",
]
