from __future__ import annotations


class ParkingLotError(Exception):
    """
    Base class for every precondition or input violation raised by ParkingLot.
    All of them map to HTTP 400 and none are retriable.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidCapacity(ParkingLotError):
    pass


class LotNotInitialized(ParkingLotError):
    pass


class InvalidCarId(ParkingLotError):
    pass


class DuplicateCar(ParkingLotError):
    pass


class LotFull(ParkingLotError):
    pass


class InvalidSlotNumber(ParkingLotError):
    pass


class SlotAlreadyEmpty(ParkingLotError):
    pass


class RequestValidationError(Exception):
    """Malformed request payload, rejected before the lot is touched."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
