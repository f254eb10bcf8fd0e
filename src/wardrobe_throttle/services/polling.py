# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Fixed-interval polling of long-running backend jobs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _is_done(operation: Any) -> bool:
    return bool(getattr(operation, "done", False))


async def poll_until_done(
    operation: T,
    refresh: Callable[[T], Awaitable[T]],
    interval: float,
    *,
    is_done: Callable[[T], bool] = _is_done,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    max_polls: int | None = None,
) -> T:
    """
    Refresh a job every `interval` seconds until it reports completion.

    Runs inside the caller's lane slot, so the lane stays blocked for the
    whole job.

    Args:
        operation: Job handle as returned by the start call
        refresh: Coroutine function returning the job's current state
        interval: Seconds to sleep between refreshes
        is_done: Completion predicate (defaults to the `done` attribute)
        sleep: Coroutine function used for the interval
        max_polls: Give up with TimeoutError after this many refreshes

    Returns:
        The finished job handle
    """
    polls = 0
    while not is_done(operation):
        if max_polls is not None and polls >= max_polls:
            raise TimeoutError(f"Job not finished after {polls} polls")
        await sleep(interval)
        operation = await refresh(operation)
        polls += 1
        logger.debug(f"Polled job ({polls}), done={is_done(operation)}")
    return operation


__all__ = ["poll_until_done"]
