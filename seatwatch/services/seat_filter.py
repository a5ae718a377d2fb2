# seatwatch/services/seat_filter.py
"""
Seat filter — decides which seats of the target car are worth booking.

A seat MATCHES when:
  1. seat_group_id parses as an integer and is even (unparseable → excluded, no warning)
  2. seat_id is exactly "A" or "D" (window seats)
  3. reservation_state is "VACANT"

Matched seats are then split, keeping source order:
  - available : arrangement_state == "ARRANGEABLE"  → counts toward the notification threshold
  - blocked   : anything else (maintenance, pending…) → reported as a warning only
"""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Tuple

from seatwatch.schemas.inventory import InventorySnapshot, SeatArrangement
from seatwatch.utils.logger import get_logger

logger = get_logger(__name__)

WINDOW_SEAT_IDS = {"A", "D"}
VACANT = "VACANT"
ARRANGEABLE = "ARRANGEABLE"

# Leading ASCII integer only: " 4" → 4, "6B" → 6, "B6" and full-width "４" → unparseable
_GROUP_ID_RE = re.compile(r"^\s*([+-]?[0-9]+)")


@dataclass
class SeatCheckResult:
    target_car: str
    available: List[SeatArrangement] = field(default_factory=list)
    blocked: List[SeatArrangement] = field(default_factory=list)

    @property
    def available_count(self) -> int:
        return len(self.available)

    @property
    def blocked_count(self) -> int:
        return len(self.blocked)


def parse_group_id(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    match = _GROUP_ID_RE.match(raw)
    return int(match.group(1)) if match else None


def is_matched_seat(seat: SeatArrangement) -> bool:
    group_id = parse_group_id(seat.seat_group_id)
    is_even_group = group_id is not None and group_id % 2 == 0
    is_window = seat.seat_id in WINDOW_SEAT_IDS
    is_vacant = seat.reservation_state == VACANT
    return is_even_group and is_window and is_vacant


def is_arrangeable(seat: SeatArrangement) -> bool:
    return seat.arrangement_state == ARRANGEABLE


def partition_seats(
    arrangements: Iterable[SeatArrangement],
) -> Tuple[List[SeatArrangement], List[SeatArrangement]]:
    """Stable split of matched seats into (available, blocked)."""
    available, blocked = [], []
    for seat in arrangements:
        if not is_matched_seat(seat):
            continue
        (available if is_arrangeable(seat) else blocked).append(seat)
    return available, blocked


def describe_seat(seat: SeatArrangement) -> str:
    return f"Group {seat.seat_group_id} Seat {seat.seat_id}"


def check_available_seats(snapshot: InventorySnapshot, target_car: str) -> Optional[SeatCheckResult]:
    """
    Evaluate the target car in `snapshot`.
    Returns None when the car is not in the snapshot (not an error).
    """
    car = snapshot.find_car(target_car)
    if car is None:
        logger.info(f"🔍 Car not found in inventory: {target_car}")
        return None

    available, blocked = partition_seats(car.arrangements)
    result = SeatCheckResult(target_car=target_car, available=available, blocked=blocked)

    logger.info(
        f"[{datetime.now(timezone.utc).isoformat()}] Check result — "
        f"car={target_car} arrangeable_matches={result.available_count}"
    )

    if blocked:
        logger.warning(
            f"⚠️  {result.blocked_count} seat(s) match but arrangement_state is not {ARRANGEABLE}:"
        )
        for seat in blocked:
            logger.warning(f"  - {describe_seat(seat)} (State: {seat.arrangement_state})")

    return result
