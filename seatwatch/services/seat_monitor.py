# seatwatch/services/seat_monitor.py
"""One check cycle: fetch inventory → filter seats → notify if enough are bookable."""

from typing import Optional

import httpx

from seatwatch.config import Settings
from seatwatch.exceptions import InventoryError
from seatwatch.services.inventory_fetcher import fetch_inventory
from seatwatch.services.notifier import dispatch_notification
from seatwatch.services.seat_filter import SeatCheckResult, check_available_seats, describe_seat
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)


class SeatMonitor:
    def __init__(self, client: httpx.AsyncClient, config: Settings):
        self.client = client
        self.config = config

    async def check(self) -> Optional[SeatCheckResult]:
        """
        Run one cycle. Fetch/parse errors are logged and end the cycle early;
        they never propagate to the scheduler.
        """
        try:
            snapshot = await fetch_inventory(self.client, self.config.API_URL)
        except InventoryError as e:
            logger.error(f"❌ Inventory check failed: {e}")
            return None

        result = check_available_seats(snapshot, self.config.TARGET_CAR)
        if result is None:
            return None

        if result.available_count >= self.config.AVAILABILITY_THRESHOLD:
            logger.info(f"🎯 Found {result.available_count} arrangeable vacant seats!")
            for seat in result.available:
                logger.info(f"  - {describe_seat(seat)} ({seat.arrangement_state})")
            await dispatch_notification(self.client, result.available, self.config)

        return result
