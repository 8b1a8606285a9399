"""
Closed enumerations and fixed engineering constants for panel tanks

Every variant-typed input (material, build standard, tank type, accessory
choices) is modelled here as an Enum so the rest of the engine can match on
members instead of strings. Adding a new material or standard means adding a
member here and an entry to each table keyed on it.
"""

from enum import Enum
from typing import Any, Type, TypeVar


E = TypeVar("E", bound=Enum)


class Material(Enum):
    """
    Construction material of the panels

    `code` is the short material code embedded in panel SKUs,
    `grade` is the lower-case grade used by accessory rate tables.
    """
    FRP = "FRP"
    HDG = "HDG"
    SS304 = "SS304"
    SS316 = "SS316"

    @property
    def code(self) -> str:
        return MATERIAL_SKU_CODES[self]

    @property
    def grade(self) -> str:
        return self.value.lower()

    @property
    def is_steel(self) -> bool:
        return self is not Material.FRP


class BuildStandard(Enum):
    """
    Build standard the tank is designed to

    REGIONAL: regional steel standard (SANS 10329 style), metric 1.0 m panels
    CERTIFICATION: certification-body standard (LPCB style), 4 ft panels,
                   ships a vortex pipe as standard equipment
    """
    REGIONAL = "regional"
    CERTIFICATION = "certification"

    @property
    def code(self) -> str:
        return STANDARD_SKU_CODES[self]

    @property
    def module_size_m(self) -> float:
        return MODULE_SIZE_M[self]

    @property
    def module_size_ft(self) -> float:
        return MODULE_SIZE_FT[self]


class TankType(Enum):
    """
    Panel type variant

    TYPE1: one pressure class code per tier
    TYPE2: two-band bolt-hole diameter split (heavy bottom band, light upper band)
    """
    TYPE1 = 1
    TYPE2 = 2


class Section(Enum):
    """BOM sections, in the order they are emitted"""
    BASE = "Base"
    WALL = "Wall"
    PARTITION = "Partition"
    ROOF = "Roof"
    STAYS = "Stays"
    ACCESSORIES = "Accessories"


PANEL_SECTIONS = (Section.BASE, Section.WALL, Section.PARTITION, Section.ROOF)


class StayPlateConfig(Enum):
    """Stay plate combination fitted to a tier, keyed by the tier's head"""
    NONE = "none"
    CLEAT = "cleat"
    TWO_H = "2H"
    TWO_H_CLEAT = "2H+cleat"
    TWO_H_FOUR_H_CLEAT = "2H+4H+cleat"


class AccessoryType(Enum):
    WLI = "wli"
    INTERNAL_LADDER = "int_ladder"
    EXTERNAL_LADDER = "ext_ladder"
    SAFETY_CAGE = "safety_cage"
    MANHOLE = "manhole"
    AIR_VENT = "air_vent"
    VORTEX_PIPE = "vortex_pipe"
    BNW = "bnw"
    SEALANT = "sealant"
    ROOF_PIPE = "roof_pipe"


class ManholeType(Enum):
    NORMAL = "normal"
    HINGED = "hinged"
    BOLTED = "bolted"
    LOCKABLE = "lockable"


class AirVentSize(Enum):
    MM50 = "50mm"
    MM75 = "75mm"
    MM100 = "100mm"


def parse_variant(enum_cls: Type[E], value: Any) -> E:
    """
    Resolve `value` to a member of `enum_cls`

    Accepts a member, its value, or its name (case-insensitive). Raises
    ValueError if nothing matches; callers translate that into their own
    error type. Booleans never match (True would otherwise equal 1).
    """
    if isinstance(value, enum_cls):
        return value
    if isinstance(value, bool):
        raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")
    for member in enum_cls:
        if member.value == value:
            return member
    if isinstance(value, str):
        needle = value.strip().lower()
        for member in enum_cls:
            if str(member.value).lower() == needle or member.name.lower() == needle:
                return member
        if needle.isdigit():
            return parse_variant(enum_cls, int(needle))
    raise ValueError(f"{value!r} is not a valid {enum_cls.__name__}")


# ============================================================================
# SKU CODES
# ============================================================================

MATERIAL_SKU_CODES = {
    Material.FRP: "FRP",
    Material.HDG: "HDG",
    Material.SS304: "S1",
    Material.SS316: "S2",
}

STANDARD_SKU_CODES = {
    BuildStandard.REGIONAL: "SANS",
    BuildStandard.CERTIFICATION: "LPCB",
}

# ============================================================================
# GRID CONSTANTS
# ============================================================================

# One module = one standard panel edge
MODULE_SIZE_M = {
    BuildStandard.REGIONAL: 1.0,
    BuildStandard.CERTIFICATION: 1.22,
}
MODULE_SIZE_FT = {
    BuildStandard.REGIONAL: 3.28,
    BuildStandard.CERTIFICATION: 4.0,
}

MAX_PLAN_MODULES = 40     # length / width
MAX_HEIGHT_MODULES = 6

# Tanks this many modules wide or wider are "wide" (receive S2M stays)
WIDE_TANK_MIN_WIDTH = 3

# Pressure classes, lowest first
PRESSURE_CLASSES = ("S10", "S20", "S30", "S40")

# Type 2 bolt-hole diameter bands
TYPE2_BOTTOM_BAND_CODE = "18"
TYPE2_UPPER_BAND_CODE = "14"
TYPE2_BOTTOM_BAND_TIERS = 1

# ============================================================================
# THICKNESS CONSTANTS (mm)
# ============================================================================

# Panel thicknesses that exist in the catalogue
THICKNESS_CATALOG_MM = (2.0, 3.0, 4.0, 5.0, 6.0)

# Regional standard: nominal wall thickness by head (modules of wall above
# the tier's bottom edge). Heads beyond the table use the last entry.
REGIONAL_THICKNESS_BY_HEAD_MM = {1: 3.0, 2: 3.0, 3: 4.5, 4: 5.0, 5: 6.0}

# Certification standard: flat 5 mm, 6 mm bottom tier from 4 tiers up
CERTIFICATION_THICKNESS_MM = 5.0
CERTIFICATION_HEAVY_THICKNESS_MM = 6.0
CERTIFICATION_HEAVY_MIN_TIERS = 4

ROOF_THICKNESS_MM = 1.5

# ============================================================================
# STAY / STUD CONSTANTS
# ============================================================================

STUD_FITTING_ALLOWANCE_MM = 420   # consumed by end fittings at both ends
STUD_MAX_SPAN_M = 5.8             # longest span a single stud covers
STUD_POSITIONS_PER_JOINT = 4      # 2 per side x 2 walls
STUD_MATERIAL = "SS304"

WELDED_STAY_MIN_TIERS = 4

# Safety cage becomes mandatory with an external ladder above this height
SAFETY_CAGE_MIN_HEIGHT_M = 3.0

# ============================================================================
# CONSUMABLES
# ============================================================================

# Bolts per panel side; each panel is bolted on two sides
BOLTS_PER_PANEL_SIDE = {
    Material.FRP: 13,
    Material.HDG: 16,
    Material.SS304: 20,
    Material.SS316: 20,
}
BNW_SET_SIZE = 100

# FRP joint sealant and roof pipe by build standard: (grade code, name)
FRP_SEALANTS = {
    BuildStandard.REGIONAL: ("epdm", "EPDM"),
    BuildStandard.CERTIFICATION: ("pvc-foam", "PVC Foam"),
}
FRP_ROOF_PIPES = {
    BuildStandard.REGIONAL: ("abs", "ABS"),
    BuildStandard.CERTIFICATION: ("upvc", "UPVC"),
}
SEALANT_JOINTS_PER_ROLL = 10
ROOF_PIPE_PERIMETER_MODULES = 2   # perimeter modules covered by one pipe
