# tests/test_notifier.py
"""Unit tests for the Discord notifier."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json
import logging
from datetime import datetime, timezone

import httpx
import pytest
from seatwatch.config import Settings
from seatwatch.exceptions import NotificationDeliveryError
from seatwatch.schemas.inventory import SeatArrangement
from seatwatch.services.notifier import (
    EMBED_COLOR,
    build_payload,
    dispatch_notification,
    send_discord_notification,
)

WEBHOOK = "https://discord.test/api/webhooks/123/token"
BOOK_URL = "https://booking.test/activity/"


def make_settings(**overrides):
    values = dict(DISCORD_WEBHOOK_URL=WEBHOOK, BOOK_URL=BOOK_URL, TARGET_CAR="2号車")
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_seats(*pairs):
    return [
        SeatArrangement(seat_group_id=g, seat_id=s, reservation_state="VACANT", arrangement_state="ARRANGEABLE")
        for g, s in pairs
    ]


FOUR_SEATS = make_seats(("2", "A"), ("2", "D"), ("4", "A"), ("4", "D"))


def recording_client(status=204, calls=None):
    calls = calls if calls is not None else []

    def handler(request: httpx.Request):
        calls.append(request)
        return httpx.Response(status)

    return httpx.AsyncClient(transport=httpx.MockTransport(handler)), calls


class TestBuildPayload:
    def test_embed_fields(self):
        checked_at = datetime(2025, 11, 3, 6, 20, 0, tzinfo=timezone.utc)
        payload = build_payload(FOUR_SEATS, "2号車", BOOK_URL, "Asia/Taipei", checked_at)

        assert len(payload.embeds) == 1
        embed = payload.embeds[0]
        assert embed.color == EMBED_COLOR == 3066993
        assert "**4**" in embed.description

        fields = {f.name: f for f in embed.fields}
        assert [f.name for f in embed.fields] == ["Car", "Available Seats", "Checked At", "Booking URL"]
        assert fields["Car"].value == "2号車"
        assert fields["Car"].inline is True
        assert fields["Available Seats"].value == (
            "• Group 2 Seat A\n• Group 2 Seat D\n• Group 4 Seat A\n• Group 4 Seat D"
        )
        assert fields["Checked At"].value.startswith("2025/11/03 14:20:00")
        assert fields["Booking URL"].value == BOOK_URL

    def test_payload_serialises_to_discord_shape(self):
        body = build_payload(FOUR_SEATS, "2号車", BOOK_URL, "UTC").model_dump()
        assert set(body) == {"embeds"}
        assert set(body["embeds"][0]) == {"title", "description", "color", "fields"}
        assert set(body["embeds"][0]["fields"][0]) == {"name", "value", "inline"}


class TestSendDiscordNotification:
    @pytest.mark.asyncio
    async def test_posts_json_to_webhook(self):
        client, calls = recording_client(204)
        async with client:
            sent = await send_discord_notification(client, FOUR_SEATS, make_settings())

        assert sent is True
        assert len(calls) == 1
        request = calls[0]
        assert request.method == "POST"
        assert str(request.url) == WEBHOOK
        assert request.headers["content-type"] == "application/json"
        body = json.loads(request.content)
        assert "Group 4 Seat D" in body["embeds"][0]["fields"][1]["value"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("url", ["YOUR_DISCORD_WEBHOOK_URL_HERE", "", "   "])
    async def test_unconfigured_webhook_is_skipped(self, url, caplog):
        client, calls = recording_client()
        async with client:
            with caplog.at_level(logging.WARNING):
                sent = await send_discord_notification(client, FOUR_SEATS, make_settings(DISCORD_WEBHOOK_URL=url))

        assert sent is False
        assert calls == []
        assert "skipping notification" in caplog.text

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 429, 500])
    async def test_non_2xx_raises(self, status):
        client, _ = recording_client(status)
        async with client:
            with pytest.raises(NotificationDeliveryError) as exc_info:
                await send_discord_notification(client, FOUR_SEATS, make_settings())
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    async def test_transport_error_raises_delivery_error(self):
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(NotificationDeliveryError):
                await send_discord_notification(client, FOUR_SEATS, make_settings())


class TestDispatchNotification:
    @pytest.mark.asyncio
    async def test_failure_is_logged_not_raised(self, caplog):
        client, calls = recording_client(500)
        async with client:
            with caplog.at_level(logging.ERROR):
                task = await dispatch_notification(client, FOUR_SEATS, make_settings())

        assert task.done()
        assert isinstance(task.exception(), NotificationDeliveryError)
        assert len(calls) == 1
        assert "Discord notification failed" in caplog.text

    @pytest.mark.asyncio
    async def test_success_completes_before_return(self):
        client, calls = recording_client(200)
        async with client:
            task = await dispatch_notification(client, FOUR_SEATS, make_settings())

        assert task.done()
        assert task.result() is True
        assert len(calls) == 1
