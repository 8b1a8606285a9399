"""
Tier planner: one horizontal wall tier per module of height, bottom first.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .dimensions import TankSpec
from .variants import PRESSURE_CLASSES


@dataclass(frozen=True)
class Tier:
    index: int
    pressure_class: str
    is_roof_adjacent: bool
    head_modules: int  # wall modules from this tier's bottom edge to the tank top

    @property
    def number(self) -> int:
        """1-based tier number as printed on drawings"""
        return self.index + 1


def pressure_class_for(index: int, tier_count: int) -> str:
    """
    Pressure class of tier `index` in a tank `tier_count` tiers high

    The bottom tier takes the highest class the tank height reaches and each
    tier above drops one class, floored at the lowest.
    """
    max_index = min(tier_count, len(PRESSURE_CLASSES)) - 1
    return PRESSURE_CLASSES[max(0, max_index - index)]


def plan_tiers(spec: TankSpec) -> Tuple[Tier, ...]:
    count = spec.height_modules
    return tuple(
        Tier(
            index=index,
            pressure_class=pressure_class_for(index, count),
            is_roof_adjacent=index == count - 1,
            head_modules=count - index,
        )
        for index in range(count)
    )
