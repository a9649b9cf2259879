"""
Meter-delta calculation for utility charges.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Union

from staysync.core.logging import get_logger

logger = get_logger(__name__)

Number = Union[Decimal, int, str]

ZERO = Decimal("0")


@dataclass(frozen=True)
class MeterCharge:
    units: Decimal
    cost: Decimal


def to_decimal(value: Number) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def calculate_meter_charge(last: Number, current: Number, rate: Number) -> MeterCharge:
    """
    Compute consumed units and their cost.

    ``units = max(0, current - last)`` and ``cost = units * rate``. A current
    reading below the last one (meter replaced or rolled over) is clamped to
    zero units rather than rejected; the clamp is logged so it can be
    reviewed.

    Args:
        last: Previous meter reading
        current: Current meter reading
        rate: Price per unit

    Returns:
        MeterCharge with units and cost
    """
    last_d, current_d, rate_d = to_decimal(last), to_decimal(current), to_decimal(rate)
    delta = current_d - last_d
    if delta < ZERO:
        logger.warning(
            "Meter reading below previous reading, usage clamped to zero",
            extra={"meter_last": str(last_d), "meter_current": str(current_d)},
        )
        delta = ZERO
    return MeterCharge(units=delta, cost=delta * rate_d)
