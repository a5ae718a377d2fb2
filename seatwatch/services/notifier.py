# seatwatch/services/notifier.py
"""
Discord webhook notifier.

Sends one embed per qualifying check. No retry, no dedup: if the next check
still qualifies, it sends again.

Delivery is fire-and-forget from the scheduler's point of view:
dispatch_notification() logs any failure and never raises.
"""

import asyncio
from datetime import datetime
from typing import List, Optional

import httpx

from seatwatch.config import Settings
from seatwatch.exceptions import NotificationDeliveryError
from seatwatch.schemas.inventory import SeatArrangement
from seatwatch.schemas.notification import Embed, EmbedField, WebhookPayload
from seatwatch.services.seat_filter import describe_seat
from seatwatch.utils.clock import format_local
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)

EMBED_TITLE = "🎯 Train Seat Availability"
EMBED_COLOR = 3066993   # green


def build_payload(
    seats: List[SeatArrangement],
    target_car: str,
    book_url: str,
    tz_name: str,
    checked_at: Optional[datetime] = None,
) -> WebhookPayload:
    seat_list = "\n".join(f"• {describe_seat(seat)}" for seat in seats)
    return WebhookPayload(embeds=[
        Embed(
            title=EMBED_TITLE,
            description=f"Found **{len(seats)}** arrangeable vacant seats!",
            color=EMBED_COLOR,
            fields=[
                EmbedField(name="Car", value=target_car, inline=True),
                EmbedField(name="Available Seats", value=seat_list, inline=False),
                EmbedField(name="Checked At", value=format_local(tz_name, checked_at), inline=False),
                EmbedField(name="Booking URL", value=book_url, inline=False),
            ],
        )
    ])


async def send_discord_notification(
    client: httpx.AsyncClient,
    seats: List[SeatArrangement],
    config: Settings,
) -> bool:
    """
    POST the availability embed to the configured webhook.
    Returns False when the webhook is not configured (skipped), True on 2xx.
    Raises NotificationDeliveryError on non-2xx or transport failure.
    """
    if not config.webhook_configured:
        logger.warning("⚠️  Discord webhook URL not set — skipping notification")
        return False

    payload = build_payload(seats, config.TARGET_CAR, config.BOOK_URL, config.CHECK_TIMEZONE)
    try:
        response = await client.post(
            config.DISCORD_WEBHOOK_URL,
            json=payload.model_dump(),
            headers={"Content-Type": "application/json"},
        )
    except httpx.HTTPError as e:
        raise NotificationDeliveryError(f"Discord webhook request failed: {e!r}") from e

    if not response.is_success:
        raise NotificationDeliveryError(
            f"Discord webhook failed: HTTP {response.status_code}",
            status_code=response.status_code,
        )

    logger.info("✅ Discord notification sent")
    return True


def _log_notification_outcome(task: asyncio.Task):
    if task.cancelled():
        logger.warning("Discord notification cancelled")
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"❌ Discord notification failed: {exc}")


async def dispatch_notification(
    client: httpx.AsyncClient,
    seats: List[SeatArrangement],
    config: Settings,
) -> asyncio.Task:
    """
    Run the send as its own task; failures are logged by the completion callback
    and discarded. Waits for the task to settle so it never outlives the check.
    """
    task = asyncio.create_task(send_discord_notification(client, seats, config), name="discord-notify")
    task.add_done_callback(_log_notification_outcome)
    await asyncio.wait({task})
    return task
