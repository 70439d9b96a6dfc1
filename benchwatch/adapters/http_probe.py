"""HTTP probe primitive.

Issues one outbound request to a target and reports timing and outcome. The
probe never raises on network failure: timeouts, DNS errors, refused
connections and TLS errors all come back as a failed :class:`Sample`, which
lets the profiles and the monitor aggregate outcomes without branching on
exceptions. Retries are a policy of the caller; the probe issues exactly one
request per call.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Dict, Optional

import httpx

from ..config.models import ProbeSettings
from ..domain.models import Sample
from ..utils.correlation import correlation_fields

logger = logging.getLogger(__name__)

# Client tags per caller, sent as the product token of the User-Agent
BENCHMARK_TAG = "Benchmark"
LOAD_TEST_TAG = "LoadTest"
STRESS_TEST_TAG = "StressTest"
RELIABILITY_TEST_TAG = "ReliabilityTest"
UPTIME_MONITOR_TAG = "Uptime-Monitor"
STATUS_MONITOR_TAG = "Status-Monitor"

CLIENT_TAG_VERSION = "1.0"

_ACCEPT_HTML = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


class HttpProbe:
    """Shared probe over a single ``httpx.AsyncClient``.

    Parameters
    ----------
    settings: Optional[ProbeSettings]
        Client settings; defaults apply when omitted.
    client: Optional[httpx.AsyncClient]
        Pre-built client (tests pass one backed by ``httpx.MockTransport``).
        When omitted the probe builds and owns its own client.

    Attributes
    ----------
    _client: httpx.AsyncClient
        Connection-pooled async client used for every probe.
    """

    def __init__(
        self,
        settings: Optional[ProbeSettings] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._settings = settings or ProbeSettings()
        self._owns_client = client is None
        if client is None:
            limits = httpx.Limits(
                max_connections=self._settings.max_connections,
                max_keepalive_connections=self._settings.max_connections,
            )
            client = httpx.AsyncClient(
                limits=limits, follow_redirects=self._settings.follow_redirects
            )
        self._client = client
        logger.debug(
            "probe.init",
            extra={
                "max_connections": self._settings.max_connections,
                "owns_client": self._owns_client,
            },
        )

    def user_agent(self, client_tag: str) -> str:
        """Return the User-Agent sent for ``client_tag``."""
        return f"{self._settings.user_agent_prefix}-{client_tag}/{CLIENT_TAG_VERSION}"

    def _headers(self, client_tag: str) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent(client_tag)}
        if client_tag == BENCHMARK_TAG:
            headers["Accept"] = _ACCEPT_HTML
        return headers

    async def probe(
        self,
        url: str,
        *,
        method: str = "GET",
        timeout: float = 10.0,
        client_tag: str = BENCHMARK_TAG,
    ) -> Sample:
        """Issue one request and return its outcome.

        Parameters
        ----------
        url: str
            Absolute URL of the target.
        method: str
            HTTP method, ``GET`` for benchmarks and ``HEAD`` for health checks.
        timeout: float
            Seconds the whole exchange may take before it counts as failed.
        client_tag: str
            Identifies the caller in the target's request log.

        Returns
        -------
        Sample
            ``success`` is True iff a 2xx response completed within the
            timeout. Transport failures carry ``status_code=None`` and the
            time until the failure was observed.
        """
        started = time.perf_counter()
        try:
            response = await asyncio.wait_for(
                self._client.request(
                    method,
                    url,
                    headers=self._headers(client_tag),
                    timeout=timeout,
                ),
                timeout=timeout,
            )
        except Exception as exc:  # pylint: disable=broad-except
            # Every non-cancellation failure is a failed sample
            elapsed_ms = (time.perf_counter() - started) * 1000.0
            logger.debug(
                "probe.failed",
                extra={
                    **correlation_fields(),
                    "url": url,
                    "method": method,
                    "error": type(exc).__name__,
                    "elapsed_ms": round(elapsed_ms, 2),
                },
            )
            return Sample(elapsed_ms=elapsed_ms, success=False)

        elapsed_ms = (time.perf_counter() - started) * 1000.0
        return Sample(
            elapsed_ms=elapsed_ms,
            success=response.is_success,
            status_code=response.status_code,
        )

    async def fetch_text(
        self, url: str, *, timeout: float = 30.0, client_tag: str = STATUS_MONITOR_TAG
    ) -> Optional[str]:
        """GET ``url`` and return its body, or None on failure or non-2xx."""
        try:
            response = await self._client.get(
                url, headers=self._headers(client_tag), timeout=timeout
            )
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning(
                "probe.fetch_failed",
                extra={"url": url, "error": str(exc)},
            )
            return None
        if not response.is_success:
            logger.warning(
                "probe.fetch_status",
                extra={"url": url, "status_code": response.status_code},
            )
            return None
        return response.text

    async def aclose(self) -> None:
        """Close the underlying client if this probe created it."""
        if self._owns_client:
            await self._client.aclose()
