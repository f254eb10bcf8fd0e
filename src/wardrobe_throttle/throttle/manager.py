# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Serialized request manager for the generative backend.

Every backend call passes through one global execution lane: operations run
one at a time, in submission order, regardless of traffic class. Before a
dispatch the manager waits out the class's cooldown; after the final attempt
it starts a fresh cooldown window for that class. Failures are classified
and retried with fixed delays:

- credential problems are raised at once as InvalidCredentialError
- quota violations push every class into a 60s cooldown, wait, and retry
  once before raising QuotaExceededError
- transient 503/504 failures wait 5s and retry once
- anything else is raised unchanged
"""

import asyncio
import logging
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from typing_extensions import Self

from ..config import ThrottleConfig
from ..exceptions import InvalidCredentialError, QuotaExceededError, ThrottlerError
from ..observability.metrics import (
    PrometheusThrottleMetrics,
    ThrottleMetrics,
    get_prometheus_throttle_metrics,
)
from ..types.traffic import TrafficClass
from .classifier import ErrorCategory, classify_error
from .cooldown import CooldownTracker

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]
Operation = Callable[[], Awaitable[T]]

STOPPED_MESSAGE = "Request manager stopped before the operation finished"


@dataclass
class LaneItem(Generic[T]):
    """A unit of work waiting in (or running from) the execution lane."""

    sequence: int
    traffic_class: TrafficClass
    operation: Operation[T]
    future: "asyncio.Future[T]" = field(repr=False)


class RequestManager:
    """
    The sole entry point through which backend calls are dispatched.

    The manager owns a single worker task draining an asyncio.Queue, which
    gives strict FIFO admission across all traffic classes and guarantees
    that at most one operation is in flight. A failing operation only
    rejects its own caller's future; the worker moves on to the next item.

    The cooldown tracker is the only shared mutable state and is only
    touched from the worker, so no locking is needed.

    Clock and sleep are injectable so tests can run in simulated time.

    Example:
        >>> manager = RequestManager(ThrottleConfig())
        >>> async with manager:
        ...     text = await manager.enqueue(TrafficClass.FLASH, call_backend)
        ...     manager.wait_time_seconds(TrafficClass.FLASH)
        5
    """

    def __init__(
        self,
        config: ThrottleConfig | None = None,
        tracker: CooldownTracker | None = None,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
        metrics: ThrottleMetrics | None = None,
    ) -> None:
        """
        Initialize the RequestManager.

        Args:
            config: Throttle configuration (defaults to the tracker's config,
                or ThrottleConfig())
            tracker: Shared cooldown tracker (created from config if omitted)
            clock: Monotonic time source in seconds
            sleep: Coroutine function used for every scheduled suspension
            metrics: Optional metrics sink (created when metrics are enabled)
        """
        if config is None:
            config = tracker.config if tracker is not None else ThrottleConfig()
        self.config = config
        self.tracker = tracker or CooldownTracker(config)
        self._clock = clock
        self._sleep = sleep

        self.metrics: ThrottleMetrics | None = metrics
        if self.metrics is None and config.metrics_enabled:
            self.metrics = ThrottleMetrics()
        self._prometheus: PrometheusThrottleMetrics | None = None
        if config.metrics_enabled and config.prometheus_enabled:
            self._prometheus = get_prometheus_throttle_metrics()

        self._queue: asyncio.Queue[LaneItem[Any]] | None = None
        self._worker: asyncio.Task[None] | None = None
        self._current: LaneItem[Any] | None = None
        self._sequence = 0
        self._running = False

    # Lifecycle

    async def start(self) -> None:
        """Start the lane worker on the running event loop."""
        self._ensure_worker()

    async def stop(self) -> None:
        """
        Stop the lane worker.

        The operation in flight (if any) is cancelled and every caller still
        waiting gets a ThrottlerError. Cooldown state is kept, so a restarted
        manager still honours the windows.
        """
        if not self._running:
            return
        self._running = False

        loop = asyncio.get_running_loop()
        worker, self._worker = self._worker, None
        # A worker left behind by a finished event loop cannot be awaited here
        if worker is not None and not worker.done() and worker.get_loop() is loop:
            worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass

        dropped = 0
        for item in self._drain():
            if not item.future.done() and item.future.get_loop() is loop:
                item.future.set_exception(ThrottlerError(STOPPED_MESSAGE))
            dropped += 1
        self._queue = None

        logger.info(f"RequestManager stopped ({dropped} queued operations rejected)")

    def is_running(self) -> bool:
        """Check if the lane worker is running."""
        return bool(
            self._running and self._worker is not None and not self._worker.done()
        )

    async def __aenter__(self) -> Self:
        await self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        await self.stop()

    def _ensure_worker(self) -> "asyncio.Queue[LaneItem[Any]]":
        """
        Return the lane queue, starting a worker on the running loop if needed.

        A queue is bound to the loop that first waits on it. When the worker
        has died, or belongs to another event loop (e.g. a previous
        asyncio.run()), the queue is rebuilt on the running loop and pending
        items are carried over. Items whose callers live on another loop can
        no longer be answered and are dropped.
        """
        loop = asyncio.get_running_loop()
        worker = self._worker
        if (
            self._queue is not None
            and worker is not None
            and not worker.done()
            and worker.get_loop() is loop
        ):
            return self._queue

        queue: asyncio.Queue[LaneItem[Any]] = asyncio.Queue()
        stale = 0
        for item in self._drain():
            if item.future.get_loop() is loop:
                queue.put_nowait(item)
            else:
                stale += 1
        if stale:
            logger.warning(
                f"Dropped {stale} queued operations from a previous event loop"
            )

        self._queue = queue
        self._worker = loop.create_task(
            self._run_lane(queue), name="wardrobe-throttle-lane"
        )
        self._running = True
        logger.info("RequestManager lane worker started")
        return queue

    def _drain(self) -> "list[LaneItem[Any]]":
        """Remove and return everything still waiting in the current queue."""
        items: list[LaneItem[Any]] = []
        if self._queue is None:
            return items
        while not self._queue.empty():
            items.append(self._queue.get_nowait())
            self._queue.task_done()
        return items

    # Public interface

    def submit(
        self, traffic_class: TrafficClass | str, operation: Operation[T]
    ) -> "asyncio.Future[T]":
        """
        Append a unit of work to the execution lane.

        Must be called from within a running event loop. The lane worker is
        started on first use.

        Args:
            traffic_class: Backend tier the operation targets
            operation: Zero-argument coroutine function performing the call

        Returns:
            Future resolving to the operation's result or a classified error
        """
        traffic_class = TrafficClass.parse(traffic_class)
        queue = self._ensure_worker()
        future: asyncio.Future[T] = asyncio.get_running_loop().create_future()

        self._sequence += 1
        item = LaneItem(
            sequence=self._sequence,
            traffic_class=traffic_class,
            operation=operation,
            future=future,
        )
        queue.put_nowait(item)

        if self.metrics is not None:
            self.metrics.record_submitted(traffic_class)
        if self._prometheus is not None:
            self._prometheus.observe_submitted(traffic_class.value)

        logger.debug(
            f"Queued operation #{item.sequence} ({traffic_class.value}), "
            f"{queue.qsize()} waiting"
        )
        return future

    async def enqueue(
        self, traffic_class: TrafficClass | str, operation: Operation[T]
    ) -> T:
        """
        Submit a unit of work and wait for its outcome.

        Cancelling the caller does not abort the operation; once queued it
        runs to completion and its result is discarded.

        Raises:
            InvalidCredentialError: The backend rejected the API key
            QuotaExceededError: The backend kept reporting a quota violation
            Exception: Any other failure of the operation, unchanged
        """
        return await self.submit(traffic_class, operation)

    def time_until_available(self, traffic_class: TrafficClass | str) -> float:
        """Seconds before the class may dispatch again (>= 0, read-only)."""
        return self.tracker.time_until_available(
            TrafficClass.parse(traffic_class), self._clock()
        )

    def wait_time_seconds(self, traffic_class: TrafficClass | str) -> int:
        """Whole-second countdown for display; 0 when the class is available."""
        remaining = self.time_until_available(traffic_class)
        return math.ceil(remaining) if remaining > 0 else 0

    @property
    def pending_count(self) -> int:
        """Number of queued operations that have not started yet."""
        return self._queue.qsize() if self._queue is not None else 0

    def get_metrics(self) -> dict[str, Any]:
        """
        Get current manager metrics.

        Returns:
            Dictionary suitable for JSON serialization
        """
        result: dict[str, Any] = {
            "running": self.is_running(),
            "pending": self.pending_count,
            "in_flight": self._current is not None,
            "time_until_available": {
                traffic_class.value: self.time_until_available(traffic_class)
                for traffic_class in TrafficClass
            },
        }
        if self.metrics is not None:
            result.update(self.metrics.get_stats())
        return result

    # Lane worker

    async def _run_lane(self, queue: "asyncio.Queue[LaneItem[Any]]") -> None:
        """Drain the lane one item at a time until cancelled."""
        while True:
            item = await queue.get()
            self._current = item
            try:
                await self._process(item)
            except asyncio.CancelledError:
                if not item.future.done():
                    item.future.set_exception(ThrottlerError(STOPPED_MESSAGE))
                raise
            except Exception as e:
                logger.error(f"Lane worker fault on operation #{item.sequence}: {e}")
                if not item.future.done():
                    item.future.set_exception(e)
            finally:
                self._current = None
                queue.task_done()

    async def _process(self, item: LaneItem[Any]) -> None:
        traffic_class = item.traffic_class

        wait = self.tracker.time_until_available(traffic_class, self._clock())
        if wait > 0:
            logger.info(f"Waiting {wait:.0f}s for {traffic_class.value} window...")
            if self.metrics is not None:
                self.metrics.record_cooldown_wait(wait)
            if self._prometheus is not None:
                self._prometheus.observe_cooldown_wait(traffic_class.value, wait)
            await self._sleep(wait)

        try:
            result = await self._execute_with_retry(item)
        except asyncio.CancelledError:
            # The call may already have reached the backend
            self._finish(item, succeeded=False)
            raise
        except Exception as e:
            self._finish(item, succeeded=False)
            if not item.future.done():
                item.future.set_exception(e)
        else:
            self._finish(item, succeeded=True)
            if not item.future.done():
                item.future.set_result(result)

    def _finish(self, item: LaneItem[Any], succeeded: bool) -> None:
        """Start the next cooldown window from the moment the call finished."""
        next_time = self.tracker.record_dispatch(item.traffic_class, self._clock())
        if self.metrics is not None:
            self.metrics.record_finished(item.traffic_class, succeeded)
        if self._prometheus is not None:
            self._prometheus.observe_finished(item.traffic_class.value, succeeded)
        logger.debug(
            f"Operation #{item.sequence} ({item.traffic_class.value}) finished "
            f"{'ok' if succeeded else 'with error'}; next dispatch at {next_time:.2f}"
        )

    async def _execute_with_retry(self, item: LaneItem[T]) -> T:
        """
        Run the operation under the fixed-delay retry policy.

        Raises:
            InvalidCredentialError: Credential failure (never retried)
            QuotaExceededError: Quota violation on the last attempt
            Exception: Transient failure on the last attempt, or any
                unclassified failure, unchanged
        """
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                return await item.operation()

            except asyncio.CancelledError:
                raise  # Always re-raise for graceful shutdown

            except Exception as e:
                category = classify_error(e, self.config)
                has_attempts_left = attempt < max_attempts
                retrying = has_attempts_left and category in (
                    ErrorCategory.QUOTA_EXCEEDED,
                    ErrorCategory.TRANSIENT,
                )
                self._record_error(category, retrying)

                if category is ErrorCategory.INVALID_CREDENTIAL:
                    logger.warning(
                        f"Credential rejected for operation #{item.sequence}: {e}"
                    )
                    raise InvalidCredentialError() from e

                if category is ErrorCategory.QUOTA_EXCEEDED:
                    delay = self.config.quota_reset_delay
                    self.tracker.force_reset(self._clock(), delay)
                    if not has_attempts_left:
                        raise QuotaExceededError(
                            retry_after=self.time_until_available(item.traffic_class)
                        ) from e
                    logger.warning(f"Quota hit! Forcing {delay:.0f}s reset.")
                    await self._sleep(delay)
                    continue

                if retrying:
                    delay = self.config.transient_retry_delay
                    logger.warning(
                        f"Backend unavailable for operation #{item.sequence} "
                        f"(attempt {attempt}/{max_attempts}), retrying in {delay:.0f}s"
                    )
                    await self._sleep(delay)
                    continue

                raise

        raise ThrottlerError("Operation failed after all attempts")

    def _record_error(self, category: ErrorCategory, retrying: bool) -> None:
        if self.metrics is not None:
            if category is ErrorCategory.QUOTA_EXCEEDED:
                self.metrics.record_quota_violation()
            elif category is ErrorCategory.INVALID_CREDENTIAL:
                self.metrics.record_credential_failure()
            if retrying:
                self.metrics.record_retry(
                    transient=category is ErrorCategory.TRANSIENT
                )
        if self._prometheus is not None:
            self._prometheus.observe_error(category.value, retrying)


__all__ = ["LaneItem", "RequestManager"]
