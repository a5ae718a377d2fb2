from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional


def _as_text(value):
    """Numbers become their text form; anything else that is not a string becomes None."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _records(value):
    """Keep the object entries of a list; null or a non-list means no records."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class SeatArrangement(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    seat_group_id: Optional[str] = None     # numeric, sent as text: "2", "14"
    seat_id: Optional[str] = None           # A | B | C | D
    reservation_state: Optional[str] = None   # VACANT | ...
    arrangement_state: Optional[str] = None   # ARRANGEABLE | ...

    @field_validator("seat_group_id", "seat_id", "reservation_state", "arrangement_state", mode="before")
    @classmethod
    def _lenient_text(cls, value):
        return _as_text(value)


class CarInventory(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    physical_car_name: Optional[str] = None
    arrangements: List[SeatArrangement] = []

    @field_validator("physical_car_name", mode="before")
    @classmethod
    def _lenient_name(cls, value):
        return _as_text(value)

    @field_validator("arrangements", mode="before")
    @classmethod
    def _lenient_arrangements(cls, value):
        return _records(value)


class InventorySnapshot(BaseModel):
    """
    One inventory response. Only the target car is ever inspected, so malformed
    values in other cars must not reject the whole snapshot.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    car_inventories: List[CarInventory] = []

    @field_validator("car_inventories", mode="before")
    @classmethod
    def _lenient_cars(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return _records(value)
        return value   # a string or object here is a different payload altogether

    def find_car(self, name: str) -> Optional[CarInventory]:
        """First car whose physical name equals `name` exactly, or None."""
        return next((car for car in self.car_inventories if car.physical_car_name == name), None)
