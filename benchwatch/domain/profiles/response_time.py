"""Latency probe profile (``response_time``).

Sequential GET requests until the duration has elapsed and at least the
minimum number of requests was issued, never more than the safety ceiling.
An adaptive pause between requests throttles against fast targets without
materially slowing slow ones.
"""

from __future__ import annotations

import asyncio
import logging

from ...adapters.http_probe import BENCHMARK_TAG
from ...config.models import ProfileSettings
from ..models import Result
from ..utils.aggregation import SampleAccumulator
from .base import ProfileContext, before, deadline_after

logger = logging.getLogger(__name__)


def adaptive_delay_ms(previous_elapsed_ms: float, settings: ProfileSettings) -> float:
    """Pause after a request: a fraction of its latency, clamped.

    Examples
    --------
    >>> adaptive_delay_ms(1000.0, ProfileSettings())
    100.0
    >>> adaptive_delay_ms(10.0, ProfileSettings())
    50.0
    """
    delay = previous_elapsed_ms * settings.latency_delay_factor
    return min(settings.latency_max_delay_ms, max(settings.latency_min_delay_ms, delay))


async def run_response_time(ctx: ProfileContext) -> Result:
    """Run the latency probe profile and aggregate its samples."""
    s = ctx.settings
    accumulator = SampleAccumulator()
    deadline = deadline_after(ctx.duration)
    issued = 0

    while issued < s.latency_max_requests and (
        before(deadline) or issued < s.latency_min_requests
    ):
        sample = await ctx.probe.probe(
            ctx.url,
            method="GET",
            timeout=s.latency_timeout_seconds,
            client_tag=BENCHMARK_TAG,
        )
        issued += 1
        await accumulator.add(sample)

        if sample.transport_error:
            delay_ms = s.latency_error_backoff_ms
        else:
            delay_ms = adaptive_delay_ms(sample.elapsed_ms, s)
        await asyncio.sleep(delay_ms / 1000.0)

    if issued >= s.latency_max_requests:
        logger.info(
            "profile.response_time.ceiling_reached",
            extra={"requests": issued, "url": ctx.url},
        )
    return await accumulator.result()
