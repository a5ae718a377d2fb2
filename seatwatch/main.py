# seatwatch/main.py
"""
Process entry point.

    python -m seatwatch.main           # immediate check, then every CHECK_INTERVAL_SECONDS
    python -m seatwatch.main --once    # single check, then exit
"""

import argparse
import asyncio
from typing import Optional, Sequence

import httpx

from seatwatch.config import Settings, settings
from seatwatch.services.scheduler import MonitorScheduler
from seatwatch.services.seat_monitor import SeatMonitor
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)


async def run_monitor(config: Settings, once: bool = False) -> int:
    async with httpx.AsyncClient(timeout=config.REQUEST_TIMEOUT_SECONDS) as client:
        monitor = SeatMonitor(client, config)

        if once:
            logger.info(f"🔂 Single check for {config.TARGET_CAR}")
            await monitor.check()
            return 0

        if not config.webhook_configured:
            logger.warning("⚠️  DISCORD_WEBHOOK_URL not set — seats will be logged but not pushed")

        scheduler = MonitorScheduler(
            check=monitor.check,
            interval_seconds=config.CHECK_INTERVAL_SECONDS,
            max_runtime_seconds=config.MAX_RUNTIME_SECONDS,
            tz_name=config.CHECK_TIMEZONE,
            target_car=config.TARGET_CAR,
        )
        return await scheduler.run()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Watch a train car for bookable window seats.")
    parser.add_argument("--once", action="store_true", help="run a single check and exit")
    args = parser.parse_args(argv)
    return asyncio.run(run_monitor(settings, once=args.once))


if __name__ == "__main__":
    raise SystemExit(main())
