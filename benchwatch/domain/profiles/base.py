"""Shared building blocks of the benchmark profiles."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable

from ...adapters.http_probe import HttpProbe
from ...config.models import ProfileSettings
from ..models import Result
from ..utils.aggregation import SampleAccumulator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProfileContext:
    """Everything a profile needs to run one campaign.

    Attributes
    ----------
    probe: HttpProbe
        Shared probe primitive.
    settings: ProfileSettings
        Profile constants (worker counts, pauses, timeouts).
    url: str
        Target URL.
    duration: float
        Requested campaign duration in seconds.
    """

    probe: HttpProbe
    settings: ProfileSettings
    url: str
    duration: float


ProfileHandler = Callable[[ProfileContext], Awaitable[Result]]


def deadline_after(seconds: float) -> float:
    """Return the monotonic time ``seconds`` from now."""
    return time.monotonic() + max(0.0, seconds)


def before(deadline: float) -> bool:
    """True while the monotonic clock has not reached ``deadline``."""
    return time.monotonic() < deadline


async def probe_until(
    ctx: ProfileContext,
    accumulator: SampleAccumulator,
    deadline: float,
    *,
    timeout: float,
    pause_ms: float,
    client_tag: str,
) -> None:
    """Worker loop: probe, record, pause, until ``deadline`` passes."""
    while before(deadline):
        sample = await ctx.probe.probe(
            ctx.url, method="GET", timeout=timeout, client_tag=client_tag
        )
        await accumulator.add(sample)
        await asyncio.sleep(pause_ms / 1000.0)


async def run_worker_pool(
    ctx: ProfileContext,
    accumulator: SampleAccumulator,
    deadline: float,
    *,
    workers: int,
    timeout: float,
    pause_ms: float,
    client_tag: str,
) -> None:
    """Run ``workers`` concurrent worker loops and wait for all of them.

    Workers exit only by observing ``deadline``. An unexpected error in one
    worker cancels its siblings and propagates to the campaign.
    """
    logger.debug(
        "profile.pool.start",
        extra={"workers": workers, "timeout": timeout, "pause_ms": pause_ms},
    )
    async with asyncio.TaskGroup() as group:
        for _ in range(workers):
            group.create_task(
                probe_until(
                    ctx,
                    accumulator,
                    deadline,
                    timeout=timeout,
                    pause_ms=pause_ms,
                    client_tag=client_tag,
                )
            )
