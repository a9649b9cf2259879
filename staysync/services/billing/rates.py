"""
Rate set resolution.

A ``RateSet`` is the immutable group of rates and flat fees applied to one
bill: the organization's configuration with any per-request overrides.
"""

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional

from staysync.models import Room, SystemConfig

ZERO = Decimal("0")


@dataclass(frozen=True)
class RateSet:
    water_rate: Decimal
    electric_rate: Decimal
    trash_fee: Decimal = ZERO
    internet_fee: Decimal = ZERO
    other_fees: Decimal = ZERO
    common_fee: Decimal = ZERO

    @classmethod
    def from_config(cls, config: SystemConfig, room: Optional[Room] = None) -> "RateSet":
        """
        Build the default rate set for a room.

        The common-area fee only applies to rooms flagged ``charge_common_area``.
        """
        charge_common = room is not None and room.charge_common_area
        return cls(
            water_rate=config.water_rate,
            electric_rate=config.electric_rate,
            trash_fee=config.trash_fee,
            internet_fee=config.internet_fee,
            other_fees=config.other_fees,
            common_fee=config.common_area_fee if charge_common else ZERO,
        )

    def with_overrides(self, **overrides: Optional[Decimal]) -> "RateSet":
        """Return a copy with every non-None override applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self
