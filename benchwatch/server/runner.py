"""Benchmark runner.

Executes campaigns as independent asyncio tasks. Each task has its own error
boundary: whatever happens inside, the campaign ends in ``completed`` or
``failed`` and that terminal status is written to the sink. Probe failures
are counted in the Result; only orchestration errors fail a campaign.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional

from ..adapters.http_probe import HttpProbe
from ..config.models import ProfileSettings
from ..domain.errors import CampaignAlreadyRunningError
from ..domain.models import (
    Campaign,
    CampaignStatus,
    PerformanceSample,
    ProfileKind,
    Result,
)
from ..domain.profiles import ProfileContext, get_handler
from ..domain.scoring import performance_score
from ..sinks import MetricsSink
from ..utils.correlation import bind_campaign

logger = logging.getLogger(__name__)


class BenchmarkRunner:
    """Runs benchmark campaigns against target URLs.

    Parameters
    ----------
    probe: HttpProbe
        Shared probe primitive.
    sink: MetricsSink
        Destination of campaign statuses and results.
    settings: Optional[ProfileSettings]
        Profile constants; defaults apply when omitted.
    """

    def __init__(
        self,
        probe: HttpProbe,
        sink: MetricsSink,
        settings: Optional[ProfileSettings] = None,
    ) -> None:
        self._probe = probe
        self._sink = sink
        self._settings = settings or ProfileSettings()
        self._active: Dict[str, asyncio.Task] = {}

    def active_campaigns(self) -> List[str]:
        """Return the ids of campaigns currently executing."""
        return list(self._active)

    async def run_campaign(
        self,
        campaign_id: str,
        target_url: str,
        profile: ProfileKind | str,
        duration_seconds: float,
        *,
        target_id: Optional[str] = None,
    ) -> None:
        """Start a campaign in the background and return immediately.

        The caller is expected to have stored the campaign as ``pending`` and
        to follow its progress through the sink's storage.

        Raises
        ------
        CampaignAlreadyRunningError
            If ``campaign_id`` is still executing.
        """
        if campaign_id in self._active:
            raise CampaignAlreadyRunningError(campaign_id)

        campaign = Campaign(
            campaign_id=campaign_id,
            target_url=target_url,
            profile=getattr(profile, "value", profile),
            duration_seconds=duration_seconds,
            target_id=target_id,
        )
        task = asyncio.create_task(
            self.execute(campaign), name=f"campaign-{campaign_id}"
        )
        self._active[campaign_id] = task

        def _release(done: asyncio.Task) -> None:
            if self._active.get(campaign_id) is done:
                del self._active[campaign_id]

        task.add_done_callback(_release)
        logger.debug(
            "runner.campaign.submitted",
            extra={"campaign_id": campaign_id, "profile": campaign.profile},
        )

    async def execute(self, campaign: Campaign) -> Campaign:
        """Run ``campaign`` to a terminal state in the current task.

        Returns the campaign with its final status, timestamps, and (when
        completed) Result and score.
        """
        bind_campaign(campaign.campaign_id)
        try:
            campaign.transition(CampaignStatus.RUNNING)
            await self._sink.mark_campaign_status(
                campaign.campaign_id, campaign.status, campaign.timestamps
            )
            logger.info(
                "runner.campaign.started",
                extra={
                    "campaign_id": campaign.campaign_id,
                    "profile": campaign.profile,
                    "duration_seconds": campaign.duration_seconds,
                    "url": campaign.target_url,
                },
            )

            handler = get_handler(ProfileKind.parse(campaign.profile))
            result = await handler(
                ProfileContext(
                    probe=self._probe,
                    settings=self._settings,
                    url=campaign.target_url,
                    duration=campaign.duration_seconds,
                )
            )
            score = performance_score(result)
            await self._sink.record_campaign_result(campaign.campaign_id, result, score)
            campaign.transition(CampaignStatus.COMPLETED, result=result, score=score)
            await self._sink.mark_campaign_status(
                campaign.campaign_id, campaign.status, campaign.timestamps
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "runner.campaign.failed",
                extra={"campaign_id": campaign.campaign_id},
            )
            await self._fail(campaign)
            return campaign

        logger.info(
            "runner.campaign.completed",
            extra={
                "campaign_id": campaign.campaign_id,
                "score": campaign.score,
                "total_requests": result.total_requests,
                "success_rate": result.success_rate,
                "average_response_time": result.average_response_time,
            },
        )
        if campaign.target_id:
            await self._record_target_performance(campaign.target_id, result, score)
        return campaign

    async def join(self) -> None:
        """Wait until every campaign started so far has finished."""
        while self._active:
            await asyncio.wait(list(self._active.values()))

    async def _fail(self, campaign: Campaign) -> None:
        if campaign.status.is_terminal:
            # Completed but the final status write failed; nothing to correct
            return
        campaign.transition(CampaignStatus.FAILED)
        try:
            await self._sink.mark_campaign_status(
                campaign.campaign_id, campaign.status, campaign.timestamps
            )
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "runner.campaign.status_write_failed",
                extra={"campaign_id": campaign.campaign_id, "status": "failed"},
            )

    async def _record_target_performance(
        self, target_id: str, result: Result, score: int
    ) -> None:
        sample = PerformanceSample(
            response_time=result.average_response_time,
            uptime=result.success_rate,
            error_rate=result.error_rate,
            performance_score=score,
        )
        try:
            await self._sink.record_performance_sample(target_id, sample)
        except Exception:  # pylint: disable=broad-except
            logger.exception(
                "runner.performance_write_failed", extra={"target_id": target_id}
            )
