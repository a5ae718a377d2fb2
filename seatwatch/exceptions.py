# seatwatch/exceptions.py
"""Errors raised by the monitor. None of them are fatal to the process."""

from typing import Optional


class SeatwatchError(Exception):
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InventoryError(SeatwatchError):
    """The inventory snapshot for this cycle could not be obtained."""


class InventoryFetchError(InventoryError):
    """Transport-level failure: DNS, refused connection, timeout."""


class InventoryParseError(InventoryError):
    """The response body is not JSON or does not look like an inventory."""


class NotificationError(SeatwatchError):
    """The webhook notification could not be delivered."""


class NotificationDeliveryError(NotificationError):
    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
