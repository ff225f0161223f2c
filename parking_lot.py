from __future__ import annotations

import logging
import math
import threading
from typing import Any, Optional

from errors import (
    DuplicateCar,
    InvalidCarId,
    InvalidCapacity,
    InvalidSlotNumber,
    LotFull,
    LotNotInitialized,
    SlotAlreadyEmpty,
)
from models import Slot

logger = logging.getLogger(__name__)

NOT_INITIALIZED_MSG = "Parking lot has not been created yet."


class ParkingLot:
    """
    The single parking lot.

    - Slots: fixed-length list, index i <-> slot number i + 1
    - Allocation: first-fit (lowest free index)
    - Every public operation runs under one lock, so scan-then-write in
      park_car cannot interleave with other calls.
    """

    def __init__(self) -> None:
        self._slots: list[Optional[str]] = []
        self._initialized = False
        self._lock = threading.Lock()

    # -------------------------
    # Create / reset
    # -------------------------
    def create_lot(self, new_capacity: Any) -> str:
        capacity = _coerce_capacity(new_capacity)
        if capacity is None:
            raise InvalidCapacity("Capacity must be a positive number.")

        with self._lock:
            self._slots = [None] * capacity
            self._initialized = True

        logger.info("Parking Lot Operation: create-lot", extra={"capacity": capacity})
        return f"Created a parking lot with {capacity} slots."

    # -------------------------
    # Park / unpark
    # -------------------------
    def park_car(self, car_id: str) -> int:
        with self._lock:
            self._ensure_initialized()

            # None would match an empty slot in the duplicate scan
            if not isinstance(car_id, str) or not car_id:
                raise InvalidCarId("Car registration number must be a non-empty string.")
            if car_id in self._slots:
                raise DuplicateCar("This car is already parked.")

            for index, occupant in enumerate(self._slots):
                if occupant is None:
                    self._slots[index] = car_id
                    slot_number = index + 1
                    break
            else:
                raise LotFull("Sorry, parking lot is full.")

        logger.info(
            "Parking Lot Operation: park-car",
            extra={"carId": car_id, "slotNumber": slot_number},
        )
        return slot_number

    def unpark_car(self, slot_number: Any) -> str:
        with self._lock:
            self._ensure_initialized()

            capacity = len(self._slots)
            if (
                isinstance(slot_number, bool)
                or not isinstance(slot_number, int)
                or not 1 <= slot_number <= capacity
            ):
                raise InvalidSlotNumber(
                    f"Invalid slot number. Please provide a number between 1 and {capacity}."
                )

            index = slot_number - 1
            car_id = self._slots[index]
            if car_id is None:
                raise SlotAlreadyEmpty(f"Slot number {slot_number} is already empty.")
            self._slots[index] = None

        logger.info(
            "Parking Lot Operation: unpark-car",
            extra={"carId": car_id, "slotNumber": slot_number},
        )
        return f"Car with registration number {car_id} has been unparked from slot {slot_number}."

    # -------------------------
    # Queries
    # -------------------------
    def get_status(self) -> list[Slot]:
        with self._lock:
            self._ensure_initialized()
            return [Slot(i + 1, car_id) for i, car_id in enumerate(self._slots)]

    def get_capacity(self) -> int:
        with self._lock:
            return len(self._slots) if self._initialized else 0

    def get_occupied_slots(self) -> int:
        with self._lock:
            return self._count_occupied()

    def get_available_slots(self) -> int:
        with self._lock:
            return len(self._slots) - self._count_occupied()

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    # -------------------------
    # Internal
    # -------------------------
    def _ensure_initialized(self) -> None:
        if not self._initialized:
            raise LotNotInitialized(NOT_INITIALIZED_MSG)

    def _count_occupied(self) -> int:
        return sum(1 for s in self._slots if s is not None)


def _coerce_capacity(value: Any) -> Optional[int]:
    # bool is an int subclass; True must not become a 1-slot lot
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer() and value > 0:
            return int(value)
    return None
