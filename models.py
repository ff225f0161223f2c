from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Slot:
    slot_number: int            # 1-based
    car_id: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.car_id is None

    def to_dict(self) -> dict:
        return {"slotNumber": self.slot_number, "carId": self.car_id}


@dataclass(frozen=True)
class LotSummary:
    total_slots: int
    occupied_slots: int
    available_slots: int

    @classmethod
    def from_slots(cls, slots: list[Slot]) -> "LotSummary":
        occupied = sum(1 for s in slots if not s.is_empty)
        return cls(
            total_slots=len(slots),
            occupied_slots=occupied,
            available_slots=len(slots) - occupied,
        )

    def to_dict(self) -> dict:
        return {
            "totalSlots": self.total_slots,
            "occupiedSlots": self.occupied_slots,
            "availableSlots": self.available_slots,
        }
