from __future__ import annotations

import math
import re
from typing import Any, Iterable, Mapping, Union

from errors import RequestValidationError
from settings import DEFAULT_CAR_ID_PATTERN

Number = Union[int, float]


def require_fields(payload: Mapping[str, Any], fields: Iterable[str]) -> None:
    # empty string / 0 / None all count as missing
    missing = [f for f in fields if not payload.get(f)]
    if missing:
        raise RequestValidationError(f"Missing required fields: {', '.join(missing)}")


def numeric_field(name: str, value: Any, minimum: Number = 0, maximum: Number = math.inf) -> Number:
    """
    Parse a JSON number or numeric string and check it against [minimum, maximum].
    Integral values come back as int; anything else is left for the caller to reject.
    """
    if isinstance(value, bool):
        raise RequestValidationError(f"{name} must be a valid number")

    if isinstance(value, (int, float)):
        number: Number = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise RequestValidationError(f"{name} must be a valid number") from None
    else:
        raise RequestValidationError(f"{name} must be a valid number")

    # ints compare exactly against the bounds, however large
    if isinstance(number, float) and not math.isfinite(number):
        raise RequestValidationError(f"{name} must be a valid number")
    if number < minimum or number > maximum:
        raise RequestValidationError(f"{name} must be between {minimum} and {maximum}")

    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


def car_registration(car_id: Any, pattern: str = DEFAULT_CAR_ID_PATTERN) -> str:
    if not isinstance(car_id, str) or not re.fullmatch(pattern, car_id):
        raise RequestValidationError(
            "Invalid car registration number format. Expected format: XX-XX-XX-XXXX"
        )
    return car_id
