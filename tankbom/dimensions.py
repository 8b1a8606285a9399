"""
Dimension normalizer

Converts raw form/CLI input (modules, meters or feet) into a validated,
immutable TankSpec on the canonical module grid. Pure: no I/O.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Mapping

from .errors import ValidationError
from .variants import (
    MAX_HEIGHT_MODULES,
    MAX_PLAN_MODULES,
    WIDE_TANK_MIN_WIDTH,
    BuildStandard,
    Material,
    TankType,
    parse_variant,
)


UNITS = ("modules", "m", "ft")


@dataclass(frozen=True)
class TankSpec:
    """Validated tank geometry and specification on the module grid"""
    length_modules: int
    width_modules: int
    height_modules: int
    partition_count: int
    tank_type: TankType
    material: Material
    build_standard: BuildStandard

    @property
    def module_size_m(self) -> float:
        return self.build_standard.module_size_m

    @property
    def length_m(self) -> float:
        return round(self.length_modules * self.module_size_m, 3)

    @property
    def width_m(self) -> float:
        return round(self.width_modules * self.module_size_m, 3)

    @property
    def height_m(self) -> float:
        return round(self.height_modules * self.module_size_m, 3)

    @property
    def perimeter_modules(self) -> int:
        return 2 * (self.length_modules + self.width_modules)

    @property
    def is_wide(self) -> bool:
        return self.width_modules >= WIDE_TANK_MIN_WIDTH


def _number(raw: Mapping[str, Any], field: str) -> float:
    if field not in raw or raw[field] is None:
        raise ValidationError(field, "is required")
    value = raw[field]
    if isinstance(value, bool):
        raise ValidationError(field, f"must be numeric (got {value!r})")
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            raise ValidationError(field, f"must be numeric (got {raw[field]!r})") from None
    if not isinstance(value, Real) or math.isnan(value) or math.isinf(value):
        raise ValidationError(field, f"must be numeric (got {raw[field]!r})")
    if value <= 0:
        raise ValidationError(field, f"must be positive (got {value})")
    return float(value)


def _to_modules(value: float, unit: str, standard: BuildStandard, field: str) -> int:
    if unit == "modules":
        if value != int(value):
            raise ValidationError(field, f"module count must be a whole number (got {value})")
        modules = int(value)
    else:
        size = standard.module_size_m if unit == "m" else standard.module_size_ft
        # Round away float noise so exact multiples do not gain a module
        modules = math.ceil(round(value / size, 6))
    if modules < 1:
        raise ValidationError(field, f"resolves to {modules} modules, minimum is 1")
    return modules


def _variant(enum_cls, raw: Mapping[str, Any], field: str):
    value = raw.get(field)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(field, "is required")
    try:
        return parse_variant(enum_cls, value)
    except ValueError:
        allowed = ", ".join(str(m.value) for m in enum_cls)
        raise ValidationError(field, f"unrecognized value {value!r} (expected one of: {allowed})") from None


def normalize(raw: Mapping[str, Any]) -> TankSpec:
    """
    Validate raw input and convert it onto the module grid

    Args:
        raw: mapping with length, width, height, unit ("modules", "m", "ft"),
             partition_count, tank_type, material, build_standard

    Returns:
        TankSpec

    Raises:
        ValidationError: naming the offending field
    """
    tank_type = _variant(TankType, raw, "tank_type")
    material = _variant(Material, raw, "material")
    standard = _variant(BuildStandard, raw, "build_standard")

    unit = str(raw.get("unit", "modules")).strip().lower()
    if unit not in UNITS:
        raise ValidationError("unit", f"unrecognized unit {unit!r} (expected one of: {', '.join(UNITS)})")

    length = _to_modules(_number(raw, "length"), unit, standard, "length")
    width = _to_modules(_number(raw, "width"), unit, standard, "width")
    height = _to_modules(_number(raw, "height"), unit, standard, "height")

    if length > MAX_PLAN_MODULES:
        raise ValidationError("length", f"{length} modules exceeds maximum of {MAX_PLAN_MODULES}")
    if width > MAX_PLAN_MODULES:
        raise ValidationError("width", f"{width} modules exceeds maximum of {MAX_PLAN_MODULES}")
    if height > MAX_HEIGHT_MODULES:
        raise ValidationError("height", f"{height} modules exceeds maximum of {MAX_HEIGHT_MODULES}")

    partitions = raw.get("partition_count", 0)
    if partitions is None:
        partitions = 0
    if isinstance(partitions, str) and partitions.strip().isdigit():
        partitions = int(partitions)
    if isinstance(partitions, bool) or not isinstance(partitions, int) or partitions < 0:
        raise ValidationError("partition_count", f"must be a whole number >= 0 (got {partitions!r})")
    if partitions >= length:
        raise ValidationError(
            "partition_count",
            f"{partitions} partitions do not fit a tank {length} modules long",
        )

    return TankSpec(
        length_modules=length,
        width_modules=width,
        height_modules=height,
        partition_count=partitions,
        tank_type=tank_type,
        material=material,
        build_standard=standard,
    )
