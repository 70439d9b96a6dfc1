"""Vendor status page scraping.

Extracts the availability figures a provider advertises on its public status
page. Only the generic ``uptime: 99.95%`` and ``incidents: 3`` phrasings are
recognized; provider-specific formats are not parsed.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from ..domain.models import StatusPageMetrics
from .http_probe import STATUS_MONITOR_TAG, HttpProbe

logger = logging.getLogger(__name__)

_UPTIME_RE = re.compile(r"uptime[:\s]+(\d+\.?\d*)%", re.IGNORECASE)
_INCIDENTS_RE = re.compile(r"incidents?[:\s]+(\d+)", re.IGNORECASE)


def parse_status_page(content: str) -> StatusPageMetrics:
    """Extract uptime and incident count from status page text.

    Fields that cannot be found are left as None.
    """
    uptime_match = _UPTIME_RE.search(content)
    incident_match = _INCIDENTS_RE.search(content)
    return StatusPageMetrics(
        uptime=float(uptime_match.group(1)) if uptime_match else None,
        incidents=int(incident_match.group(1)) if incident_match else None,
    )


class StatusPageClient:
    """Fetches and parses status pages through the shared probe client."""

    def __init__(self, probe: HttpProbe, timeout: float = 30.0) -> None:
        self._probe = probe
        self._timeout = timeout

    async def fetch(self, url: str) -> Optional[StatusPageMetrics]:
        """Return the metrics advertised at ``url``, or None if unavailable."""
        content = await self._probe.fetch_text(
            url, timeout=self._timeout, client_tag=STATUS_MONITOR_TAG
        )
        if content is None:
            return None
        metrics = parse_status_page(content)
        logger.debug(
            "status_page.parsed",
            extra={
                "url": url,
                "uptime": metrics.uptime,
                "incidents": metrics.incidents,
            },
        )
        return metrics
