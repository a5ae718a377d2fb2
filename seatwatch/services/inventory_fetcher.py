# seatwatch/services/inventory_fetcher.py
"""
Inventory fetcher — one GET against the seat inventory endpoint per check.

Expected body:
    {"car_inventories": [{"physical_car_name": "2号車",
                          "arrangements": [{"seat_group_id": "2", "seat_id": "A",
                                            "reservation_state": "VACANT",
                                            "arrangement_state": "ARRANGEABLE"}]}]}

No retries here: a failed fetch fails the current check only.
"""

import json

import httpx
from pydantic import ValidationError

from seatwatch.exceptions import InventoryFetchError, InventoryParseError
from seatwatch.schemas.inventory import InventorySnapshot
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)


def parse_inventory(raw_body: bytes) -> InventorySnapshot:
    """Decode and validate a raw inventory response body."""
    try:
        data = json.loads(raw_body.decode("utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InventoryParseError(f"Inventory response is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise InventoryParseError(f"Inventory response is a JSON {type(data).__name__}, expected an object")

    try:
        return InventorySnapshot.model_validate(data)
    except ValidationError as e:
        raise InventoryParseError(f"Inventory response has an unexpected shape: {e}") from e


async def fetch_inventory(client: httpx.AsyncClient, url: str) -> InventorySnapshot:
    """GET `url` and return the parsed snapshot."""
    try:
        response = await client.get(url)
    except httpx.TimeoutException as e:
        raise InventoryFetchError(f"Inventory request timed out: {e!r}") from e
    except httpx.HTTPError as e:
        raise InventoryFetchError(f"Inventory request failed: {e!r}") from e

    logger.debug(f"GET {url} → {response.status_code} ({len(response.content)} bytes)")

    try:
        return parse_inventory(response.content)
    except InventoryParseError as e:
        if response.is_success:
            raise
        raise InventoryParseError(f"HTTP {response.status_code} from inventory endpoint — {e.message}") from e
