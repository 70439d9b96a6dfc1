"""Measurement engine lifecycle.

Wires one shared probe, the benchmark runner, and the reliability monitor to
a single metrics sink, and exposes the engine's control surface: campaign
trigger and monitor start/stop.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..adapters.http_probe import HttpProbe
from ..config.models import AppConfig
from ..domain.models import HealthSample, ProfileKind
from ..sinks import MetricsSink
from .monitor import ReliabilityMonitor
from .runner import BenchmarkRunner

logger = logging.getLogger(__name__)


class MeasurementEngine:
    """Async lifecycle around the runner and the monitor.

    Parameters
    ----------
    sink: MetricsSink
        Destination of every record the engine produces.
    config: Optional[AppConfig]
        Application config; defaults apply when omitted.
    probe: Optional[HttpProbe]
        Probe to use. When omitted one is built from ``config.probe``.
    """

    def __init__(
        self,
        sink: MetricsSink,
        config: Optional[AppConfig] = None,
        probe: Optional[HttpProbe] = None,
    ) -> None:
        self.config = config or AppConfig()
        self.probe = probe or HttpProbe(self.config.probe)
        self.runner = BenchmarkRunner(self.probe, sink, self.config.profiles)
        self.monitor = ReliabilityMonitor(self.probe, sink, self.config.monitor)
        self._started: bool = False

    async def start(self) -> None:
        """Start monitoring every configured target.

        Idempotent: repeated calls are safe and have no effect after start.
        """
        if self._started:
            logger.debug("engine.start no-op: already started")
            return
        self._started = True
        for target in self.config.targets:
            await self.monitor.start(target.target_id, target.url)
            if target.status_page_url:
                advertised = await self.monitor.fetch_status_page_metrics(
                    target.status_page_url
                )
                logger.info(
                    "engine.status_page",
                    extra={
                        "target_id": target.target_id,
                        "advertised_uptime": advertised.uptime if advertised else None,
                        "incidents": advertised.incidents if advertised else None,
                    },
                )
        logger.info("engine.started", extra={"targets": len(self.config.targets)})

    async def stop(self) -> None:
        """Stop all schedules, wait for campaigns in flight, close the client.

        Idempotent.
        """
        if not self._started:
            logger.debug("engine.stop no-op: not started")
            return
        self._started = False
        await self.monitor.shutdown()
        await self.runner.join()
        await self.probe.aclose()
        logger.info("engine.stopped")

    async def __aenter__(self) -> "MeasurementEngine":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()

    async def run_campaign(
        self,
        campaign_id: str,
        target_url: str,
        profile: ProfileKind | str,
        duration_seconds: float,
        *,
        target_id: Optional[str] = None,
    ) -> None:
        """Start a benchmark campaign in the background."""
        await self.runner.run_campaign(
            campaign_id,
            target_url,
            profile,
            duration_seconds,
            target_id=target_id,
        )

    async def start_monitoring(self, target_id: str, target_url: str) -> HealthSample:
        """Start (or restart) the recurring health check of a target."""
        return await self.monitor.start(target_id, target_url)

    def stop_monitoring(self, target_id: str) -> bool:
        """Stop the recurring health check of a target."""
        return self.monitor.stop(target_id)
