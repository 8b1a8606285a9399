"""
Rate Card - Abstraction Layer for Accessory Rates

Provides validated, typed access to accessory rates while hiding the layout
of data/rate_card.json.

KEY PRINCIPLE: Code asks for WHAT it needs (semantic names like
'wli_multiplier_ss304'), not WHERE it lives in the JSON.
"""

import copy
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional


class RateUnit(Enum):
    """Units accessory rates are quoted in"""
    PER_METER = "meter of tank height"
    EACH = "each"
    FACTOR = "multiplier"


class RateGroup(Enum):
    WLI = "wli"
    INTERNAL_LADDER = "internal_ladder"
    EXTERNAL_LADDER = "external_ladder"
    MANHOLE = "manhole"
    AIR_VENT = "air_vent"
    SAFETY_CAGE = "safety_cage"


@dataclass
class UnitRate:
    """
    A single accessory rate with metadata

    Attributes:
        name: Semantic name (e.g., 'internal_ladder_hdg')
        value: Rate in currency units (or a bare factor for multipliers)
        unit: Unit the rate is quoted in
        group: Accessory group the rate belongs to
        description: Human-readable description
        source: JSON path the rate was read from (for debugging)
    """
    name: str
    value: float
    unit: RateUnit
    group: RateGroup
    description: str
    source: str

    def __str__(self) -> str:
        if self.unit is RateUnit.FACTOR:
            return f"{self.description}: x{self.value:.2f}"
        return f"{self.description}: {self.value:.2f}/{self.unit.value}"


WLI_GRADES = ("hdg", "ss304", "ss316", "magnetic", "electronic")
LADDER_GRADES = ("frp", "hdg", "ss304", "ss316")
MANHOLE_TYPES = ("normal", "hinged", "bolted", "lockable")
AIR_VENT_SIZES = ("50mm", "75mm", "100mm")


def whole_meters(height_m: float) -> int:
    """Height rounded UP to whole meters, ignoring float noise (3.0000001 -> 3)"""
    return math.ceil(round(height_m, 6))

DEFAULT_RATES: Dict = {
    "wli": {
        "base_per_m": 150,
        "multiplier": {"hdg": 1.0, "ss304": 1.5, "ss316": 1.8, "magnetic": 2.5, "electronic": 3.0},
    },
    "ladder": {
        "internal": {"frp": 200, "hdg": 180, "ss304": 250, "ss316": 300},
        "external": {"frp": 180, "hdg": 160, "ss304": 220, "ss316": 270},
    },
    "manhole": {"normal": 380, "hinged": 450, "bolted": 420, "lockable": 500},
    "air_vent": {"50mm": 25, "75mm": 35, "100mm": 45},
    "safety_cage": 150,
}


class RateCard:
    """
    Registry of all accessory rates with validation

    Example:
        card = RateCard(DEFAULT_RATES)
        card.get('manhole_hinged').value   # 450.0
        card.wli_price('ss304', 2.44)      # 150 * 3 * 1.5
    """

    def __init__(self, rate_data: Dict):
        """
        Args:
            rate_data: Raw rate dict loaded from JSON (see DEFAULT_RATES)
        """
        self._data = rate_data
        self._rates = self._build_registry()
        self._validate()

    @classmethod
    def default(cls) -> "RateCard":
        return cls(copy.deepcopy(DEFAULT_RATES))

    def _add(self, rates, name, path, unit, group, description):
        node = self._data
        for key in path:
            if not isinstance(node, dict) or key not in node:
                return
            node = node[key]
        try:
            value = float(node)
        except (TypeError, ValueError):
            raise ValueError(f"Rate card entry {'.'.join(path)} is not numeric: {node!r}") from None
        if value < 0:
            raise ValueError(f"Rate card entry {'.'.join(path)} is negative: {value}")
        rates[name] = UnitRate(
            name=name,
            value=value,
            unit=unit,
            group=group,
            description=description,
            source=".".join(path),
        )

    def _build_registry(self) -> Dict[str, UnitRate]:
        """
        Build the flat registry from the nested rate data

        When the JSON layout changes, only THIS method needs updating.
        """
        rates: Dict[str, UnitRate] = {}

        # WATER LEVEL INDICATOR
        self._add(rates, "wli_base", ("wli", "base_per_m"),
                  RateUnit.PER_METER, RateGroup.WLI, "Water level indicator base rate")
        for grade in WLI_GRADES:
            self._add(rates, f"wli_multiplier_{grade}", ("wli", "multiplier", grade),
                      RateUnit.FACTOR, RateGroup.WLI, f"WLI grade multiplier ({grade.upper()})")

        # LADDERS
        for grade in LADDER_GRADES:
            self._add(rates, f"internal_ladder_{grade}", ("ladder", "internal", grade),
                      RateUnit.PER_METER, RateGroup.INTERNAL_LADDER, f"Internal ladder ({grade.upper()})")
            self._add(rates, f"external_ladder_{grade}", ("ladder", "external", grade),
                      RateUnit.PER_METER, RateGroup.EXTERNAL_LADDER, f"External ladder ({grade.upper()})")

        # FIXED-PRICE FITTINGS
        for kind in MANHOLE_TYPES:
            self._add(rates, f"manhole_{kind}", ("manhole", kind),
                      RateUnit.EACH, RateGroup.MANHOLE, f"Manhole ({kind})")
        for size in AIR_VENT_SIZES:
            self._add(rates, f"air_vent_{size}", ("air_vent", size),
                      RateUnit.EACH, RateGroup.AIR_VENT, f"Air vent ({size})")
        self._add(rates, "safety_cage", ("safety_cage",),
                  RateUnit.EACH, RateGroup.SAFETY_CAGE, "Safety cage")

        return rates

    def _validate(self):
        """Validate that all expected rates are present"""
        required = (
            ["wli_base"]
            + [f"wli_multiplier_{grade}" for grade in WLI_GRADES]
            + [f"internal_ladder_{grade}" for grade in LADDER_GRADES]
            + [f"external_ladder_{grade}" for grade in LADDER_GRADES]
            + [f"manhole_{kind}" for kind in MANHOLE_TYPES]
            + [f"air_vent_{size}" for size in AIR_VENT_SIZES]
            + ["safety_cage"]
        )

        missing = [name for name in required if name not in self._rates]
        if missing:
            raise ValueError(f"Rate card validation failed. Missing rates: {missing}")

    def get(self, name: str) -> UnitRate:
        """
        Get a rate by semantic name

        Raises:
            KeyError: If the rate is not on the card
        """
        if name not in self._rates:
            available = ", ".join(list(self._rates.keys())[:10])
            raise KeyError(
                f"Rate '{name}' not found on rate card. "
                f"Available rates: {available}... (use list_rates() for full list)"
            )
        return self._rates[name]

    def list_rates(self, group: Optional[RateGroup] = None) -> List[UnitRate]:
        rates = list(self._rates.values())
        if group:
            rates = [r for r in rates if r.group == group]
        return sorted(rates, key=lambda r: r.name)

    # ------------------------------------------------------------------
    # Accessory prices (heights are always rounded UP to whole meters)
    # ------------------------------------------------------------------

    def wli_price(self, grade: str, height_m: float) -> float:
        meters = whole_meters(height_m)
        return self.get("wli_base").value * meters * self.get(f"wli_multiplier_{grade}").value

    def ladder_price(self, placement: str, grade: str, height_m: float) -> float:
        """placement is 'internal' or 'external'"""
        return self.get(f"{placement}_ladder_{grade}").value * whole_meters(height_m)

    def manhole_price(self, kind: str) -> float:
        return self.get(f"manhole_{kind}").value

    def air_vent_price(self, size: str) -> float:
        return self.get(f"air_vent_{size}").value

    def safety_cage_price(self) -> float:
        return self.get("safety_cage").value

    def __repr__(self) -> str:
        return f"RateCard({len(self._rates)} rates loaded)"
