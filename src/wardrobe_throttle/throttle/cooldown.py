# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Per traffic-class cooldown tracking.

The tracker answers "when can class X run next" and records that class X
just ran. It holds in-memory state only and performs no I/O; all times are
seconds on whatever clock the caller passes in.
"""

import logging

from ..config import ThrottleConfig
from ..types.traffic import TrafficClass

logger = logging.getLogger(__name__)


class CooldownTracker:
    """
    Earliest-dispatch timestamps for every traffic class.

    Timestamps never move backwards: a dispatch record or a forced reset
    only ever pushes a class further into the future. A class that was
    never dispatched is immediately available.

    Example:
        >>> tracker = CooldownTracker(ThrottleConfig())
        >>> tracker.record_dispatch(TrafficClass.PRO, now=100.0)
        132.0
        >>> tracker.time_until_available(TrafficClass.PRO, now=110.0)
        22.0
    """

    def __init__(self, config: ThrottleConfig | None = None):
        self.config = config or ThrottleConfig()
        self._next_available: dict[TrafficClass, float] = {}

    def window_for(self, traffic_class: TrafficClass) -> float:
        """Cooldown window in seconds for a traffic class."""
        return self.config.cooldown_for(traffic_class)

    def next_available(self, traffic_class: TrafficClass) -> float:
        """Earliest time at which the class may dispatch (0.0 if never set)."""
        return self._next_available.get(traffic_class, 0.0)

    def time_until_available(self, traffic_class: TrafficClass, now: float) -> float:
        """Seconds left before the class may dispatch, never negative."""
        return max(0.0, self.next_available(traffic_class) - now)

    def record_dispatch(self, traffic_class: TrafficClass, now: float) -> float:
        """
        Start a fresh cooldown window for a class that just finished a call.

        Args:
            traffic_class: Class of the operation that finished
            now: Completion time of the operation

        Returns:
            The new earliest-dispatch time for the class
        """
        candidate = now + self.window_for(traffic_class)
        next_time = max(self.next_available(traffic_class), candidate)
        self._next_available[traffic_class] = next_time
        return next_time

    def force_reset(self, now: float, reset_delay: float) -> None:
        """
        Push every class into cooldown after a quota violation.

        The violation is treated as account-wide, so the offending class and
        all others are held back by the same delay.
        """
        target = now + reset_delay
        for traffic_class in TrafficClass:
            self._next_available[traffic_class] = max(
                self.next_available(traffic_class), target
            )
        logger.debug(f"Forced cooldown reset for all classes until {target:.2f}")

    def snapshot(self) -> dict[TrafficClass, float]:
        """Copy of the earliest-dispatch time for every class."""
        return {
            traffic_class: self.next_available(traffic_class)
            for traffic_class in TrafficClass
        }


__all__ = ["CooldownTracker"]
