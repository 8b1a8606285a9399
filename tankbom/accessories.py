"""
Accessory selector

Turns the customer's equipment choices into priced accessory lines.
Water level indicators and ladders are priced per meter of tank height
(rounded up); manholes, vents and safety cages at fixed rates from the
rate card. Bolt sets, FRP sealant and roof pipes, and the vortex pipe
shipped with certification-standard tanks have no rate-card entry and are
priced from the price table like a panel.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union

from .dimensions import TankSpec
from .errors import UnsupportedAccessoryError
from .panels import roof_openings
from .quantities import AccessoryLineItem
from .rate_card import LADDER_GRADES, WLI_GRADES, RateCard, whole_meters
from .variants import (
    BNW_SET_SIZE,
    BOLTS_PER_PANEL_SIDE,
    FRP_ROOF_PIPES,
    FRP_SEALANTS,
    ROOF_PIPE_PERIMETER_MODULES,
    SAFETY_CAGE_MIN_HEIGHT_M,
    SEALANT_JOINTS_PER_ROLL,
    AccessoryType,
    AirVentSize,
    BuildStandard,
    ManholeType,
    Material,
    parse_variant,
)


OPTION_FIELDS = (
    "manhole_type",
    "water_level_indicator",
    "wli_grade",
    "internal_ladder",
    "external_ladder",
    "safety_cage",
    "air_vent_size",
)

SKU_PREFIXES = {
    AccessoryType.WLI: "WLI",
    AccessoryType.INTERNAL_LADDER: "IL",
    AccessoryType.EXTERNAL_LADDER: "EL",
    AccessoryType.SAFETY_CAGE: "SC",
    AccessoryType.MANHOLE: "MH",
    AccessoryType.AIR_VENT: "AV",
    AccessoryType.VORTEX_PIPE: "VORTEX-PIPE",
    AccessoryType.BNW: "BNW",
    AccessoryType.SEALANT: "SEALANT",
    AccessoryType.ROOF_PIPE: "ROOF-PIPE",
}

# Accessories whose SKU carries the tank height
HEIGHT_KEYED = (
    AccessoryType.WLI,
    AccessoryType.INTERNAL_LADDER,
    AccessoryType.EXTERNAL_LADDER,
    AccessoryType.SAFETY_CAGE,
)

SAFETY_CAGE_GRADE = "hdg"


def _enum_option(enum_cls, value, kind):
    try:
        return parse_variant(enum_cls, value)
    except ValueError:
        raise UnsupportedAccessoryError(value, kind) from None


def _grade_option(value, allowed, kind) -> str:
    grade = str(value).strip().lower()
    if grade not in allowed:
        raise UnsupportedAccessoryError(value, kind)
    return grade


def _flag_option(value, kind) -> bool:
    if value is None:
        return False
    if not isinstance(value, bool):
        raise UnsupportedAccessoryError(value, kind)
    return value


@dataclass(frozen=True)
class AccessoryOptions:
    """
    Optional equipment requested for a tank

    Ladder fields hold the ladder grade, or None for no ladder. wli_grade
    None means "match the tank" (see default_wli_grade).
    """
    manhole_type: ManholeType = ManholeType.NORMAL
    water_level_indicator: bool = False
    wli_grade: Optional[str] = None
    internal_ladder: Optional[str] = None
    external_ladder: Optional[str] = None
    safety_cage: bool = False
    air_vent_size: AirVentSize = AirVentSize.MM50

    @classmethod
    def from_mapping(cls, raw: Optional[Mapping[str, Any]], material: Material = Material.HDG) -> "AccessoryOptions":
        """
        Build options from form/CLI input

        A ladder given as True takes the tank material's grade.

        Raises:
            UnsupportedAccessoryError: unknown option or unrecognized code
        """
        raw = dict(raw or {})
        for key in raw:
            if key not in OPTION_FIELDS:
                raise UnsupportedAccessoryError(key, "accessory option")

        ladders = {}
        for field in ("internal_ladder", "external_ladder"):
            value = raw.get(field)
            if value is None or value is False or value == "":
                ladders[field] = None
            elif value is True:
                ladders[field] = material.grade
            else:
                ladders[field] = _grade_option(value, LADDER_GRADES, "ladder grade")

        wli_grade = raw.get("wli_grade")
        if wli_grade is not None and wli_grade != "":
            wli_grade = _grade_option(wli_grade, WLI_GRADES, "WLI grade")
        else:
            wli_grade = None

        return cls(
            manhole_type=_enum_option(ManholeType, raw.get("manhole_type", ManholeType.NORMAL), "manhole type"),
            water_level_indicator=_flag_option(raw.get("water_level_indicator"), "water level indicator flag"),
            wli_grade=wli_grade,
            internal_ladder=ladders["internal_ladder"],
            external_ladder=ladders["external_ladder"],
            safety_cage=_flag_option(raw.get("safety_cage"), "safety cage flag"),
            air_vent_size=_enum_option(AirVentSize, raw.get("air_vent_size", AirVentSize.MM50), "air vent size"),
        )


def default_wli_grade(material: Material) -> str:
    # No FRP indicator is stocked; FRP tanks get the galvanised one
    if material.grade in WLI_GRADES:
        return material.grade
    return "hdg"


def accessory_sku(accessory_type: Union[AccessoryType, str], grade: str, height_m: float = 0.0) -> str:
    """
    Deterministic accessory SKU

    Height-keyed accessories: type code + grade + whole meters (rounded up),
    e.g. WLI-SS304-3M. Others: type code + grade, e.g. MH-HINGED, AV-75MM.

    Raises:
        UnsupportedAccessoryError: unknown accessory type
    """
    kind = _enum_option(AccessoryType, accessory_type, "accessory")
    prefix = SKU_PREFIXES[kind]
    if kind in HEIGHT_KEYED:
        return f"{prefix}-{grade.upper()}-{whole_meters(height_m)}M"
    return f"{prefix}-{grade.upper()}"


def bnw_sets(spec: TankSpec, total_panels: int) -> int:
    """Bolt, nut & washer sets (of 100) for bolting every panel on two sides"""
    bolts = total_panels * BOLTS_PER_PANEL_SIDE[spec.material] * 2
    return math.ceil(bolts / BNW_SET_SIZE)


def bnw_grade(material: Material) -> str:
    # FRP panels are bolted with galvanised sets
    if material is Material.FRP:
        return "hdg-frp"
    return material.grade


def frp_consumables(spec: TankSpec) -> Tuple[Tuple[str, str, int], Tuple[str, str, int]]:
    """
    Sealant rolls and roof pipes for an FRP tank as (grade, name, quantity)

    One sealant roll per 10 panel joints (base plus walls), one roof pipe per
    two perimeter modules. The grade follows the build standard.
    """
    joints = spec.length_modules * spec.width_modules + spec.perimeter_modules * spec.height_modules
    sealant, sealant_name = FRP_SEALANTS[spec.build_standard]
    pipe, pipe_name = FRP_ROOF_PIPES[spec.build_standard]
    return (
        (sealant, sealant_name, math.ceil(joints / SEALANT_JOINTS_PER_ROLL)),
        (pipe, pipe_name, math.ceil(spec.perimeter_modules / ROOF_PIPE_PERIMETER_MODULES)),
    )


def needs_safety_cage(spec: TankSpec, options: AccessoryOptions) -> bool:
    if options.external_ladder is None:
        return False
    return options.safety_cage or spec.height_m > SAFETY_CAGE_MIN_HEIGHT_M


def select_accessories(
    spec: TankSpec, options: AccessoryOptions, rate_card: RateCard, total_panels: int = 0
) -> Tuple[AccessoryLineItem, ...]:
    """
    Accessory lines in emission order

    Bolt sets are sized from `total_panels` and left out when it is 0.
    Consumables and the vortex pipe carry no list price.
    """
    height = spec.height_m
    manholes, vents = roof_openings(spec)
    items: List[AccessoryLineItem] = []

    def add(kind, grade, quantity, description, list_price=None):
        items.append(
            AccessoryLineItem(
                sku=accessory_sku(kind, grade, height),
                description=description,
                quantity=quantity,
                accessory_type=kind,
                height_meters=height,
                list_price=list_price,
            )
        )

    manhole = options.manhole_type.value
    add(AccessoryType.MANHOLE, manhole, manholes,
        f"Manhole Cover ({manhole})", rate_card.manhole_price(manhole))

    vent = options.air_vent_size.value
    add(AccessoryType.AIR_VENT, vent, vents,
        f"Air Vent {vent}", rate_card.air_vent_price(vent))

    if options.water_level_indicator:
        grade = options.wli_grade or default_wli_grade(spec.material)
        add(AccessoryType.WLI, grade, 1,
            f"Water Level Indicator {grade.upper()} - {whole_meters(height)}m",
            rate_card.wli_price(grade, height))

    if options.internal_ladder is not None:
        grade = options.internal_ladder
        add(AccessoryType.INTERNAL_LADDER, grade, 1,
            f"Internal Ladder {grade.upper()} - {whole_meters(height)}m",
            rate_card.ladder_price("internal", grade, height))

    if options.external_ladder is not None:
        grade = options.external_ladder
        add(AccessoryType.EXTERNAL_LADDER, grade, 1,
            f"External Ladder {grade.upper()} - {whole_meters(height)}m",
            rate_card.ladder_price("external", grade, height))

    if needs_safety_cage(spec, options):
        add(AccessoryType.SAFETY_CAGE, SAFETY_CAGE_GRADE, 1,
            f"Safety Cage {SAFETY_CAGE_GRADE.upper()} - {whole_meters(height)}m",
            rate_card.safety_cage_price())

    if total_panels > 0:
        grade = bnw_grade(spec.material)
        add(AccessoryType.BNW, grade, bnw_sets(spec, total_panels),
            f"Bolts, Nuts & Washers Set - {grade.upper()}")

    if spec.material is Material.FRP:
        (sealant, sealant_name, rolls), (pipe, pipe_name, pipes) = frp_consumables(spec)
        standard = spec.build_standard.value
        add(AccessoryType.SEALANT, sealant, rolls, f"{sealant_name} Sealant - {standard} standard")
        add(AccessoryType.ROOF_PIPE, pipe, pipes, f"{pipe_name} Roof Pipe - {standard} standard")

    if spec.build_standard is BuildStandard.CERTIFICATION:
        add(AccessoryType.VORTEX_PIPE, spec.material.value, 1,
            f"Vortex Pipe - {spec.material.value} (standard equipment)")

    return tuple(items)
