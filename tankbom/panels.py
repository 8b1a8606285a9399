"""
Panel counter

Base, wall, partition and roof panel quantities for a tank on the module
grid, with positional SKUs per tier.

Counts are table-driven: the general formulas (L x W for base/roof,
perimeter per wall tier, partition_count x W per partition tier) are split
into positional panels by a small-grid layout table keyed on the grid's short
side. Corner panels are always part of the perimeter, never added on top of
it, so the layouts can be checked independently against drawings:

    1x1x1 -> 1 base + 4 wall + 1 roof = 6
    2x2x1 -> 4 base + 8 wall + 4 roof = 16
    3x3x1 -> 9 base + 12 wall + 9 roof = 30
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .dimensions import TankSpec
from .errors import ValidationError
from .quantities import PanelLineItem
from .tiers import Tier
from .variants import (
    CERTIFICATION_HEAVY_MIN_TIERS,
    CERTIFICATION_HEAVY_THICKNESS_MM,
    CERTIFICATION_THICKNESS_MM,
    REGIONAL_THICKNESS_BY_HEAD_MM,
    ROOF_THICKNESS_MM,
    THICKNESS_CATALOG_MM,
    TYPE2_BOTTOM_BAND_CODE,
    TYPE2_BOTTOM_BAND_TIERS,
    TYPE2_UPPER_BAND_CODE,
    BuildStandard,
    Section,
    TankType,
)


Layout = List[Tuple[str, int]]

# ============================================================================
# SMALL-GRID LAYOUT TABLE
# ============================================================================

TINY = "tiny"      # short side 1: no corner distinction
SMALL = "small"    # short side 2: corners + edges, no interior
NORMAL = "normal"  # short side >= 3


def grid_category(length: int, width: int) -> str:
    short_side = min(length, width)
    if short_side == 1:
        return TINY
    if short_side == 2:
        return SMALL
    return NORMAL


BASE_LAYOUTS: Dict[str, Callable[[int, int], Layout]] = {
    TINY: lambda L, W: [("B", L * W)],
    SMALL: lambda L, W: [("BCL", 2), ("BCR", 2), ("B", L * W - 4)],
    NORMAL: lambda L, W: [
        ("BCL", 2),
        ("BCR", 2),
        ("B", 2 * (L - 2) + 2 * (W - 2)),
        ("A", (L - 2) * (W - 2)),
    ],
}

# Per tier, given the perimeter in modules
WALL_LAYOUTS: Dict[str, Callable[[int], Layout]] = {
    TINY: lambda P: [("A", P)],
    SMALL: lambda P: [("C", 4), ("A", P - 4)],
    NORMAL: lambda P: [("C", 4), ("A", P - 4)],
}

ROOF_LAYOUTS: Dict[str, Callable[[int, int], Layout]] = {
    TINY: lambda L, W: [("R", L * W - 1), ("MH", 1)],
    SMALL: lambda L, W: [("R", L * W - 1), ("MH", 1)],
    NORMAL: lambda L, W: [("R", L * W - 4), ("RAV", 2), ("MH", 2)],
}

# (manhole openings, air vents) on the roof
ROOF_OPENINGS: Dict[str, Tuple[int, int]] = {
    TINY: (1, 1),
    SMALL: (1, 1),
    NORMAL: (2, 2),
}


def partition_layout(width: int) -> Layout:
    """Panels in one partition wall, one tier high"""
    if width == 1:
        return [("PB", 1)]
    return [("PC", 2), ("PB", width - 2)]


LOCATION_NAMES = {
    "A": "Panel",
    "B": "Edge Panel",
    "BCL": "Corner Left",
    "BCR": "Corner Right",
    "C": "Corner Panel",
    "PB": "Panel",
    "PC": "Corner",
    "R": "Panel",
    "RAV": "Air Vent Panel",
    "MH": "Manhole Panel",
}

# ============================================================================
# THICKNESS
# ============================================================================


def thickness_code(nominal_mm: float) -> str:
    """
    Catalogue code for a nominal thickness, rounded UP to a stocked panel

    4.5 mm is not stocked, so it resolves to the 5 mm code "5".
    """
    for stocked in THICKNESS_CATALOG_MM:
        if stocked >= nominal_mm - 1e-9:
            return str(int(stocked))
    raise ValidationError(
        "thickness",
        f"{nominal_mm} mm exceeds the thickest catalogue panel ({THICKNESS_CATALOG_MM[-1]} mm)",
    )


def nominal_wall_thickness(spec: TankSpec, tier: Tier) -> float:
    if spec.build_standard is BuildStandard.CERTIFICATION:
        if spec.height_modules >= CERTIFICATION_HEAVY_MIN_TIERS and tier.index == 0:
            return CERTIFICATION_HEAVY_THICKNESS_MM
        return CERTIFICATION_THICKNESS_MM
    heads = sorted(REGIONAL_THICKNESS_BY_HEAD_MM)
    head = min(tier.head_modules, heads[-1])
    return REGIONAL_THICKNESS_BY_HEAD_MM[head]


def class_code(spec: TankSpec, tier: Tier) -> str:
    """Pressure class (Type 1) or two-band diameter code (Type 2) for a tier"""
    if spec.tank_type is TankType.TYPE2:
        return TYPE2_BOTTOM_BAND_CODE if tier.index < TYPE2_BOTTOM_BAND_TIERS else TYPE2_UPPER_BAND_CODE
    return tier.pressure_class


def panel_sku(spec: TankSpec, location: str, thickness_mm: float, class_code_: str) -> str:
    return (
        f"{spec.tank_type.value}{location}{thickness_code(thickness_mm)}"
        f"-{spec.build_standard.code}-{spec.material.code}-{class_code_}"
    )


# ============================================================================
# COUNTING
# ============================================================================


def _items(
    spec: TankSpec,
    layout: Layout,
    *,
    section: Section,
    thickness_mm: float,
    class_code_: str,
    label: str,
    tier: Optional[Tier] = None,
) -> List[PanelLineItem]:
    items = []
    for location, quantity in layout:
        if quantity <= 0:
            continue
        tier_text = f" - Tier {tier.number}" if tier is not None else ""
        items.append(
            PanelLineItem(
                sku=panel_sku(spec, location, thickness_mm, class_code_),
                description=(
                    f"{label} {LOCATION_NAMES[location]}{tier_text} - "
                    f"{thickness_code(thickness_mm)}mm {spec.material.value} ({class_code_})"
                ),
                quantity=quantity,
                section=section,
                tier_index=tier.index if tier is not None else None,
            )
        )
    return items


def roof_openings(spec: TankSpec) -> Tuple[int, int]:
    """(manhole openings, air vents) the roof layout provides"""
    return ROOF_OPENINGS[grid_category(spec.length_modules, spec.width_modules)]


def count_panels(spec: TankSpec, tiers: Sequence[Tier]) -> Tuple[PanelLineItem, ...]:
    L, W = spec.length_modules, spec.width_modules
    category = grid_category(L, W)
    bottom, top = tiers[0], tiers[-1]

    items: List[PanelLineItem] = []

    items += _items(
        spec,
        BASE_LAYOUTS[category](L, W),
        section=Section.BASE,
        thickness_mm=nominal_wall_thickness(spec, bottom),
        class_code_=class_code(spec, bottom),
        label="Base",
    )

    for tier in tiers:
        items += _items(
            spec,
            WALL_LAYOUTS[category](spec.perimeter_modules),
            section=Section.WALL,
            thickness_mm=nominal_wall_thickness(spec, tier),
            class_code_=class_code(spec, tier),
            label="Wall",
            tier=tier,
        )

    if spec.partition_count > 0:
        for tier in tiers:
            layout = [(location, qty * spec.partition_count) for location, qty in partition_layout(W)]
            items += _items(
                spec,
                layout,
                section=Section.PARTITION,
                thickness_mm=nominal_wall_thickness(spec, tier),
                class_code_=class_code(spec, tier),
                label="Partition",
                tier=tier,
            )

    items += _items(
        spec,
        ROOF_LAYOUTS[category](L, W),
        section=Section.ROOF,
        thickness_mm=ROOF_THICKNESS_MM,
        class_code_=class_code(spec, top),
        label="Roof",
    )

    return tuple(items)
