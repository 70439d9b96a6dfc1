"""Command-line interface to the measurement engine.

Two modes:

- ``run`` executes one benchmark campaign in the foreground and prints its
  Result and performance score as JSON.
- ``monitor`` starts the reliability monitor for the targets listed in a JSON
  config and keeps it running until interrupted, logging every record.

Usage
-----
    benchwatch run --url https://api.example.com/health --profile load_test --duration 30
    benchwatch monitor --config benchwatch.json
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
import uuid
from pathlib import Path
from typing import Optional

from ..__version__ import __result_schema_version__
from ..config.models import AppConfig, EnvSettings
from ..domain.models import CampaignStatus, ProfileKind
from ..observability import setup_logging
from ..sinks import InMemoryMetricsSink, LoggingMetricsSink
from .app import MeasurementEngine


def _load_config(path: Optional[str]) -> AppConfig:
    if not path:
        return AppConfig()
    return AppConfig.load(Path(path))


async def _run_campaign(args: argparse.Namespace, cfg: AppConfig) -> int:
    """Run one campaign to completion and print its outcome.

    Returns the process exit code: 0 when the campaign completed, 1 otherwise.
    """
    sink = InMemoryMetricsSink()
    campaign_id = args.campaign_id or uuid.uuid4().hex
    async with MeasurementEngine(sink, cfg) as engine:
        await engine.run_campaign(
            campaign_id, args.url, args.profile, args.duration
        )
        await engine.runner.join()

    statuses = sink.statuses_for(campaign_id)
    final = statuses[-1] if statuses else CampaignStatus.FAILED
    output = {
        "schema_version": __result_schema_version__,
        "campaign_id": campaign_id,
        "status": final.value,
    }
    for cid, result, score in sink.campaign_results:
        if cid == campaign_id:
            output["result"] = result.model_dump()
            output["score"] = score
    print(json.dumps(output, indent=2))
    return 0 if final == CampaignStatus.COMPLETED else 1


async def _monitor(cfg: AppConfig) -> None:
    """Monitor configured targets; block until interrupted."""
    engine = MeasurementEngine(LoggingMetricsSink(), cfg)
    await engine.start()
    try:
        while True:
            await asyncio.sleep(3600)
    except (KeyboardInterrupt, asyncio.CancelledError):
        pass
    finally:
        await engine.stop()


def main() -> None:
    """CLI entrypoint for the measurement engine."""
    env = EnvSettings()
    parser = argparse.ArgumentParser(description="Benchwatch measurement engine")
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=[
            "CRITICAL",
            "ERROR",
            "WARNING",
            "INFO",
            "DEBUG",
        ],
        help="Logging level (overrides environment)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (once sets DEBUG)",
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config", default=env.config_path, help="Path to JSON app config"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    run_p = sub.add_parser("run", parents=[common], help="Run one benchmark campaign")
    run_p.add_argument("--url", required=True, help="Target URL to benchmark")
    run_p.add_argument(
        "--profile",
        choices=[kind.value for kind in ProfileKind],
        default=ProfileKind.RESPONSE_TIME.value,
        help="Load profile (default response_time)",
    )
    run_p.add_argument(
        "--duration", type=float, default=30.0, help="Duration in seconds"
    )
    run_p.add_argument("--campaign-id", dest="campaign_id", help="Campaign id")

    sub.add_parser(
        "monitor", parents=[common], help="Monitor the targets listed in --config"
    )

    args = parser.parse_args()

    effective_level = args.log_level or (
        "DEBUG" if args.verbose > 0 else env.log_level.upper()
    )
    setup_logging(effective_level)

    cfg = _load_config(args.config)
    if args.command == "run":
        sys.exit(asyncio.run(_run_campaign(args, cfg)))

    if not cfg.targets:
        parser.error("monitor mode needs a --config listing at least one target")
    asyncio.run(_monitor(cfg))


if __name__ == "__main__":
    main()
