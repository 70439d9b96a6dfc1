"""Reliability monitor.

Keeps at most one recurring health check per target. Each schedule is an
asyncio task that runs a check at a fixed rate, one interval apart measured
from when the schedule started, until it is stopped. Stopping takes effect
before the next tick; a tick already in flight is allowed to finish and write
its records.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from ..adapters.http_probe import UPTIME_MONITOR_TAG, HttpProbe
from ..adapters.status_page import StatusPageClient
from ..config.models import MonitorSettings
from ..domain.health import TickRecords, derive_tick_records, failure_tick_records
from ..domain.models import HealthSample, StatusPageMetrics
from ..sinks import MetricsSink
from ..utils.correlation import bind_monitor_tick

logger = logging.getLogger(__name__)


@dataclass
class _Schedule:
    """Handle of one target's recurring check."""

    target_id: str
    url: str
    task: asyncio.Task
    stopped: asyncio.Event


class ReliabilityMonitor:
    """Per-target scheduler of recurring health checks.

    One instance is meant to live for the whole process and be passed to
    whatever needs to start or stop monitoring.

    Parameters
    ----------
    probe: HttpProbe
        Shared probe primitive.
    sink: MetricsSink
        Destination of the reliability and performance records.
    settings: Optional[MonitorSettings]
        Cadence and probe settings; defaults apply when omitted.
    """

    def __init__(
        self,
        probe: HttpProbe,
        sink: MetricsSink,
        settings: Optional[MonitorSettings] = None,
    ) -> None:
        self._probe = probe
        self._sink = sink
        self._settings = settings or MonitorSettings()
        self._schedules: Dict[str, _Schedule] = {}
        self._retiring: Set[asyncio.Task] = set()
        self._status_pages = StatusPageClient(probe, self._settings.timeout_seconds)

    def active_targets(self) -> List[str]:
        """Return the ids of targets with an active schedule."""
        return list(self._schedules)

    def is_monitoring(self, target_id: str) -> bool:
        return target_id in self._schedules

    async def start(self, target_id: str, url: str) -> HealthSample:
        """(Re)start monitoring ``target_id`` and run one check right away.

        Any existing schedule for the target is stopped first, so calling this
        repeatedly leaves exactly one schedule. Returns the reliability record
        of the immediate check.
        """
        self.stop(target_id)

        stopped = asyncio.Event()
        task = asyncio.create_task(
            self._run_schedule(target_id, url, stopped),
            name=f"monitor-{target_id}",
        )
        self._schedules[target_id] = _Schedule(target_id, url, task, stopped)
        logger.info(
            "monitor.started",
            extra={
                "target_id": target_id,
                "url": url,
                "interval_seconds": self._settings.interval_seconds,
            },
        )
        return await self.check(target_id, url)

    def stop(self, target_id: str) -> bool:
        """Stop monitoring ``target_id``.

        Returns False (and does nothing) when no schedule exists.
        """
        schedule = self._schedules.pop(target_id, None)
        if schedule is None:
            return False
        schedule.stopped.set()
        if not schedule.task.done():
            self._retiring.add(schedule.task)
            schedule.task.add_done_callback(self._retiring.discard)
        logger.info("monitor.stopped", extra={"target_id": target_id})
        return True

    async def shutdown(self) -> None:
        """Stop every schedule and wait for in-flight ticks to finish."""
        for target_id in list(self._schedules):
            self.stop(target_id)
        if self._retiring:
            await asyncio.gather(*list(self._retiring), return_exceptions=True)

    async def check(self, target_id: str, url: str) -> HealthSample:
        """Run one health check and write its record pair to the sink.

        If the check itself raises, a full-failure pair is written instead so
        the target's history has no gaps. Sink errors propagate.
        """
        bind_monitor_tick(target_id)
        records: TickRecords
        try:
            sample = await self._probe.probe(
                url,
                method=self._settings.method,
                timeout=self._settings.timeout_seconds,
                client_tag=UPTIME_MONITOR_TAG,
            )
            records = derive_tick_records(sample)
        except Exception:  # pylint: disable=broad-except
            logger.exception("monitor.check.failed", extra={"target_id": target_id})
            records = failure_tick_records()

        health, performance = records
        await self._sink.record_reliability_sample(target_id, health)
        await self._sink.record_performance_sample(target_id, performance)
        logger.debug(
            "monitor.check.done",
            extra={
                "target_id": target_id,
                "online": health.online,
                "response_time": health.response_time,
                "sla_compliance": health.sla_compliance,
            },
        )
        return health

    async def fetch_status_page_metrics(self, url: str) -> Optional[StatusPageMetrics]:
        """Fetch the uptime/incident figures a vendor advertises at ``url``."""
        return await self._status_pages.fetch(url)

    async def _run_schedule(
        self, target_id: str, url: str, stopped: asyncio.Event
    ) -> None:
        interval = self._settings.interval_seconds
        loop = asyncio.get_running_loop()
        # Fixed rate: ticks are due every interval from the start, however long
        # each check takes
        next_due = loop.time() + interval
        while True:
            try:
                await asyncio.wait_for(
                    stopped.wait(), timeout=max(0.0, next_due - loop.time())
                )
                return
            except asyncio.TimeoutError:
                pass
            if stopped.is_set():
                return
            next_due += interval
            try:
                await self.check(target_id, url)
            except Exception:  # pylint: disable=broad-except
                logger.exception(
                    "monitor.tick.write_failed", extra={"target_id": target_id}
                )
