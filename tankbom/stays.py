"""
Stay & reinforcement planner

Per-tier structural stays, stay plates, cleats and end studs.

Stay distribution depends on where the tier sits in the wall:

    bottom  - tier 1, carries the most load (welded stays from 4 tiers up)
    double  - tiers below the top two, stays doubled at the corners
    upper   - the single tier under the roof-adjacent tier
    roof    - roof-adjacent tier, gets roof ties (OT) instead of OP stays

Wide tanks (>= 3 modules) carry their middle positions on S2M separation
stays on every tier above the bottom one; narrow tanks never get S2M.
"""

from __future__ import annotations

import math
from typing import Dict, List, Sequence, Tuple

from .dimensions import TankSpec
from .quantities import StayLineItem, StudLineItem
from .tiers import Tier
from .variants import (
    STUD_FITTING_ALLOWANCE_MM,
    STUD_MATERIAL,
    STUD_MAX_SPAN_M,
    STUD_POSITIONS_PER_JOINT,
    WELDED_STAY_MIN_TIERS,
    Material,
    StayPlateConfig,
)


CORNERS = 4

# (max head in modules, plate configuration); heads above the table get the full set
STAY_PLATE_RULES = (
    (1.0, StayPlateConfig.NONE),
    (1.5, StayPlateConfig.CLEAT),
    (2.5, StayPlateConfig.TWO_H),
    (3.5, StayPlateConfig.TWO_H_CLEAT),
)

STAY_DESCRIPTIONS = {
    "S": "Stay",
    "S2M": "Separation Stay S2M",
    "SP": "Partition Stay",
    "OP": "Outer Panel Stay",
    "POP": "Partition Outer Panel Stay",
    "OT": "Roof Tie",
    "POT": "Partition Roof Tie",
}


def stay_plate_config(head_modules: float) -> StayPlateConfig:
    for max_head, config in STAY_PLATE_RULES:
        if head_modules <= max_head:
            return config
    return StayPlateConfig.TWO_H_FOUR_H_CLEAT


def stay_material(spec: TankSpec) -> str:
    # FRP tanks are braced with galvanised steel
    if spec.material is Material.FRP:
        return Material.HDG.value
    return spec.material.value


def middle_positions(spec: TankSpec) -> int:
    return 2 * max(0, spec.length_modules - 3) + 2 * max(0, spec.width_modules - 3)


def partition_stays(spec: TankSpec, per_partition: int) -> int:
    return max(0, spec.partition_count * per_partition)


def tier_role(spec: TankSpec, tier: Tier) -> str:
    if tier.index == 0:
        return "bottom"
    if tier.is_roof_adjacent:
        return "roof"
    if tier.number <= spec.height_modules - 2:
        return "double"
    return "upper"


def _roof_tie_count(spec: TankSpec) -> int:
    H = spec.height_modules
    if spec.partition_count > 0:
        if not spec.is_wide:
            return 2
        return 2 if H == 2 or H >= 4 else 3
    return 2 if H == 2 else 3


def _narrow_counts(spec: TankSpec, tier: Tier) -> Dict[str, int]:
    c, m = CORNERS, middle_positions(spec)
    counts: Dict[str, int] = {}
    if spec.partition_count > 0:
        if tier.is_roof_adjacent and tier.index > 0:
            counts["S"] = math.ceil((c + m) / 2)
        else:
            counts["S"] = c + m
            counts["SP"] = partition_stays(spec, 2)
    elif tier.is_roof_adjacent and tier.index > 0:
        counts["S"] = m
    elif tier.number <= spec.height_modules - 2:
        counts["S"] = 2 * c + m
        counts["OP"] = 1
    else:
        counts["S"] = c
        counts["OP"] = 3
    return counts


def _wide_counts(spec: TankSpec, tier: Tier, role: str) -> Dict[str, int]:
    c, m = CORNERS, middle_positions(spec)
    W = spec.width_modules
    partitioned = spec.partition_count > 0
    counts: Dict[str, int] = {}

    if role == "bottom":
        if partitioned:
            displacement = 2 if W >= 4 else 4
            counts["S"] = max(0, 3 * c + 2 * m - displacement)
            counts["SP"] = partition_stays(spec, W + 1 if W >= 4 else 2)
        else:
            counts["S"] = 3 * c + 2 * m
        return counts

    if role == "roof":
        counts["S"] = c + 2 if partitioned else c
        counts["S2M"] = math.ceil(m / 2)
        if partitioned and W >= 4:
            counts["SP"] = partition_stays(spec, 2)
        return counts

    if role == "double":
        counts["S"] = max(0, 2 * c - 2) if partitioned else 2 * c
    else:
        counts["S"] = c + 2 if partitioned else c
    counts["S2M"] = m
    if partitioned:
        counts["SP"] = partition_stays(spec, 2)
        if role == "upper" and W >= 4:
            counts["OP"] = 1
            counts["POP"] = partition_stays(spec, 1)
    return counts


def tier_stay_counts(spec: TankSpec, tier: Tier) -> Dict[str, int]:
    """Stay quantities by kind for one tier, in emission order"""
    role = tier_role(spec, tier)
    if spec.is_wide:
        counts = _wide_counts(spec, tier, role)
    else:
        counts = _narrow_counts(spec, tier)

    if tier.is_roof_adjacent:
        counts.pop("OP", None)
        counts.pop("POP", None)
        ties = _roof_tie_count(spec)
        counts["OT"] = ties
        counts["POT"] = partition_stays(spec, ties)
    return counts


def stay_sku(spec: TankSpec, kind: str, welded: bool) -> str:
    mat = stay_material(spec)
    suffix = "W" if welded else ""
    W = spec.width_modules
    skus = {
        "S": f"S1M{suffix}-{mat}",
        "S2M": f"S2M-{mat}",
        "SP": f"SP1M{suffix}-{mat}",
        "OP": f"OP{W}M-{mat}",
        "POP": f"POP{W}M-{mat}",
        "OT": f"OT{W}M-{mat}",
        "POT": f"POT{W}M-{mat}",
    }
    return skus[kind]


def _plate_items(spec: TankSpec, tier: Tier, config: StayPlateConfig) -> List[StayLineItem]:
    mat = stay_material(spec)
    plates: List[Tuple[str, str, int]] = []
    if config in (StayPlateConfig.TWO_H, StayPlateConfig.TWO_H_CLEAT, StayPlateConfig.TWO_H_FOUR_H_CLEAT):
        plates.append((f"StayPlate2H-{mat}", "Stay Plate 2H", spec.perimeter_modules))
    if config is StayPlateConfig.TWO_H_FOUR_H_CLEAT:
        plates.append((f"StayPlate4H-{mat}", "Stay Plate 4H", spec.perimeter_modules))
    if config in (StayPlateConfig.CLEAT, StayPlateConfig.TWO_H_CLEAT, StayPlateConfig.TWO_H_FOUR_H_CLEAT):
        plates.append((f"CC-{mat}", "Corner Cleat", CORNERS))
    return [
        StayLineItem(
            sku=sku,
            description=f"{name} - Tier {tier.number} - {mat}",
            quantity=quantity,
            tier_index=tier.index,
            configuration=config,
        )
        for sku, name, quantity in plates
    ]


# ============================================================================
# CLEATS
# ============================================================================

CLEAT_AL_PER_TANK = 4


def wall_joints_per_tier(spec: TankSpec) -> int:
    """Vertical '+' junctions between wall panels around one tier"""
    return 2 * (spec.length_modules - 1) + 2 * (spec.width_modules - 1)


def tier_cleat_counts(spec: TankSpec, tier: Tier, welded: bool) -> List[Tuple[str, str, int]]:
    """
    Cleats fitted to one tier as (sku, name, quantity), zero quantities kept

    Edge (E), corner (CC2) and partition corner (CCP) cleats repeat on every
    tier. Welded tanks add welded edge cleats (EW) on the bottom tier, which
    also carries the tank's stay angle (AL) and panel joint (A) cleats.
    """
    mat = stay_material(spec)
    joints = wall_joints_per_tier(spec)
    cleats = [
        (f"CleatE-{mat}", "Cleat E", joints),
        (f"CleatCC2-{mat}", "Cleat CC2", CORNERS),
        (f"CleatCCP-{mat}", "Cleat C Partition", spec.partition_count * spec.width_modules),
    ]
    if tier.index == 0:
        if welded:
            cleats.insert(1, (f"CleatEW-{mat}", "Cleat E Welded", joints))
        cleats[:0] = [
            (f"CleatAL-18-{mat}", "Cleat AL - Angle", CLEAT_AL_PER_TANK),
            (f"CleatA-18-{mat}", "Cleat A (CA)", max(0, 2 * (spec.length_modules + spec.width_modules - 4))),
        ]
    return cleats


def _cleat_items(spec: TankSpec, tier: Tier, welded: bool, config: StayPlateConfig) -> List[StayLineItem]:
    return [
        StayLineItem(
            sku=sku,
            description=f"{name} - Tier {tier.number}",
            quantity=quantity,
            tier_index=tier.index,
            configuration=config,
        )
        for sku, name, quantity in tier_cleat_counts(spec, tier, welded)
        if quantity > 0
    ]


# ============================================================================
# END STUDS
# ============================================================================


def stud_length_mm(span_m: float) -> int:
    return int(round(span_m * 1000)) - STUD_FITTING_ALLOWANCE_MM


def couplers_per_stud(span_m: float) -> int:
    """Joint couplers needed per stud run; 0 when one stud covers the span"""
    if span_m <= STUD_MAX_SPAN_M + 1e-9:
        return 0
    return max(1, math.ceil(span_m / STUD_MAX_SPAN_M) - 1)


def _stud_items(tier: Tier, span_m: float, joints: int, direction: str) -> List[StudLineItem]:
    quantity = joints * STUD_POSITIONS_PER_JOINT
    if quantity <= 0:
        return []
    length = stud_length_mm(span_m)
    items = [
        StudLineItem(
            sku=f"TR{length}-{STUD_MATERIAL}",
            description=f"End Stud M10 x {length}mm - {STUD_MATERIAL} ({direction}) - Tier {tier.number}",
            quantity=quantity,
            tier_index=tier.index,
            span_m=span_m,
            length_mm=length,
        )
    ]
    couplers = couplers_per_stud(span_m)
    if couplers:
        items.append(
            StudLineItem(
                sku=f"TRJ-{STUD_MATERIAL}",
                description=f"Stud Joint Coupler - {STUD_MATERIAL} ({direction}) - Tier {tier.number}",
                quantity=quantity * couplers,
                tier_index=tier.index,
                span_m=span_m,
                length_mm=length,
                is_coupler=True,
            )
        )
    return items


def plan_stays(
    spec: TankSpec, tiers: Sequence[Tier]
) -> Tuple[Tuple[StayLineItem, ...], Tuple[StudLineItem, ...]]:
    stays: List[StayLineItem] = []
    studs: List[StudLineItem] = []

    for tier in tiers:
        config = stay_plate_config(tier.head_modules)
        welded = tier.index == 0 and spec.height_modules >= WELDED_STAY_MIN_TIERS

        for kind, quantity in tier_stay_counts(spec, tier).items():
            if quantity <= 0:
                continue
            sku = stay_sku(spec, kind, welded)
            stays.append(
                StayLineItem(
                    sku=sku,
                    description=f"{STAY_DESCRIPTIONS[kind]} {sku} - Tier {tier.number}",
                    quantity=quantity,
                    tier_index=tier.index,
                    configuration=config,
                )
            )
        stays += _plate_items(spec, tier, config)
        stays += _cleat_items(spec, tier, welded, config)

        # Length-direction studs pass through the width walls and vice versa
        studs += _stud_items(tier, spec.length_m, spec.width_modules - 1, "length direction")
        studs += _stud_items(tier, spec.width_m, spec.length_modules - 1, "width direction")

    return tuple(stays), tuple(studs)
