"""Metrics sink interface and built-in implementations.

The engine writes every record through a :class:`MetricsSink` and never reads
back through it. Persistence is the sink's concern; the two implementations
here keep records in memory or emit them as structured log lines.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Protocol, Tuple

from ..domain.models import (
    CampaignStatus,
    CampaignTimestamps,
    HealthSample,
    PerformanceSample,
    Result,
)


class MetricsSink(Protocol):
    """Write-only destination for engine output."""

    async def record_campaign_result(
        self, campaign_id: str, result: Result, score: int
    ) -> None:
        """Store the aggregated Result and score of a completed campaign."""
        raise NotImplementedError

    async def mark_campaign_status(
        self,
        campaign_id: str,
        status: CampaignStatus,
        timestamps: CampaignTimestamps,
    ) -> None:
        """Store a campaign status transition and its timestamps."""
        raise NotImplementedError

    async def record_reliability_sample(
        self, target_id: str, sample: HealthSample
    ) -> None:
        """Store one monitor tick's reliability record."""
        raise NotImplementedError

    async def record_performance_sample(
        self, target_id: str, sample: PerformanceSample
    ) -> None:
        """Store one performance record for a target."""
        raise NotImplementedError


@dataclass
class InMemoryMetricsSink:
    """Sink that keeps every record in lists, in write order."""

    campaign_results: List[Tuple[str, Result, int]] = field(default_factory=list)
    campaign_statuses: List[Tuple[str, CampaignStatus, CampaignTimestamps]] = field(
        default_factory=list
    )
    reliability_samples: List[Tuple[str, HealthSample]] = field(default_factory=list)
    performance_samples: List[Tuple[str, PerformanceSample]] = field(
        default_factory=list
    )
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def record_campaign_result(
        self, campaign_id: str, result: Result, score: int
    ) -> None:
        async with self._lock:
            self.campaign_results.append((campaign_id, result, score))

    async def mark_campaign_status(
        self,
        campaign_id: str,
        status: CampaignStatus,
        timestamps: CampaignTimestamps,
    ) -> None:
        async with self._lock:
            self.campaign_statuses.append(
                (campaign_id, status, timestamps.model_copy())
            )

    async def record_reliability_sample(
        self, target_id: str, sample: HealthSample
    ) -> None:
        async with self._lock:
            self.reliability_samples.append((target_id, sample))

    async def record_performance_sample(
        self, target_id: str, sample: PerformanceSample
    ) -> None:
        async with self._lock:
            self.performance_samples.append((target_id, sample))

    def statuses_for(self, campaign_id: str) -> List[CampaignStatus]:
        """Return the statuses written for ``campaign_id``, oldest first."""
        return [s for cid, s, _ in self.campaign_statuses if cid == campaign_id]

    def reliability_for(self, target_id: str) -> List[HealthSample]:
        """Return the reliability records written for ``target_id``."""
        return [s for tid, s in self.reliability_samples if tid == target_id]

    def performance_for(self, target_id: str) -> List[PerformanceSample]:
        """Return the performance records written for ``target_id``."""
        return [s for tid, s in self.performance_samples if tid == target_id]


class LoggingMetricsSink:
    """Sink that emits each record as one structured INFO log line."""

    def __init__(self, logger_name: str = "benchwatch.metrics") -> None:
        self._logger = logging.getLogger(logger_name)

    async def record_campaign_result(
        self, campaign_id: str, result: Result, score: int
    ) -> None:
        self._logger.info(
            "sink.campaign.result",
            extra={
                "campaign_id": campaign_id,
                "score": score,
                **result.model_dump(),
            },
        )

    async def mark_campaign_status(
        self,
        campaign_id: str,
        status: CampaignStatus,
        timestamps: CampaignTimestamps,
    ) -> None:
        self._logger.info(
            "sink.campaign.status",
            extra={
                "campaign_id": campaign_id,
                "status": status.value,
                **timestamps.model_dump(mode="json"),
            },
        )

    async def record_reliability_sample(
        self, target_id: str, sample: HealthSample
    ) -> None:
        self._logger.info(
            "sink.reliability",
            extra={"target_id": target_id, **sample.model_dump(mode="json")},
        )

    async def record_performance_sample(
        self, target_id: str, sample: PerformanceSample
    ) -> None:
        self._logger.info(
            "sink.performance",
            extra={"target_id": target_id, **sample.model_dump(mode="json")},
        )


__all__ = ["MetricsSink", "InMemoryMetricsSink", "LoggingMetricsSink"]
