import pytest

from tankbom.dimensions import normalize
from tankbom.errors import ValidationError
from tankbom.variants import BuildStandard, Material, TankType


def _raw(**overrides):
    raw = {"length": 3, "width": 2, "height": 2, "material": "HDG", "tank_type": 1, "build_standard": "regional"}
    raw.update(overrides)
    return raw


def test_modules_on_grid():
    spec = normalize(_raw())
    assert (spec.length_modules, spec.width_modules, spec.height_modules) == (3, 2, 2)
    assert spec.partition_count == 0
    assert spec.tank_type is TankType.TYPE1
    assert spec.build_standard is BuildStandard.REGIONAL
    assert spec.material is Material.HDG
    assert spec.perimeter_modules == 10


def test_meters_round_up_to_whole_modules():
    spec = normalize(_raw(length=3.0, width=2.1, height=2.4, unit="m"))
    assert (spec.length_modules, spec.width_modules, spec.height_modules) == (3, 3, 3)


def test_certification_grid_uses_4ft_panels():
    spec = normalize(_raw(length=2, width=2, height=2.4, unit="m", build_standard="certification"))
    # 2.4 / 1.22 -> 1.97 -> 2 modules -> 2.44 m
    assert spec.height_modules == 2
    assert spec.height_m == 2.44


def test_feet_exact_multiple_does_not_gain_a_module():
    spec = normalize(_raw(length=6.56, width=3.28, height=3.28, unit="ft"))
    assert (spec.length_modules, spec.width_modules, spec.height_modules) == (2, 1, 1)


def test_string_inputs_and_variant_names():
    spec = normalize(
        _raw(length="4", width="3", material="ss304", tank_type="2", build_standard="CERTIFICATION",
             partition_count="1")
    )
    assert spec.length_modules == 4
    assert spec.material is Material.SS304
    assert spec.tank_type is TankType.TYPE2
    assert spec.build_standard is BuildStandard.CERTIFICATION
    assert spec.partition_count == 1


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"length": -1}, "length"),
        ({"height": 0}, "height"),
        ({"width": "abc"}, "width"),
        ({"width": True}, "width"),
        ({"length": 2.5}, "length"),
        ({"length": 41}, "length"),
        ({"width": 41}, "width"),
        ({"height": 7}, "height"),
        ({"unit": "yards"}, "unit"),
        ({"material": "wood"}, "material"),
        ({"material": None}, "material"),
        ({"tank_type": 3}, "tank_type"),
        ({"tank_type": True}, "tank_type"),
        ({"tank_type": None}, "tank_type"),
        ({"build_standard": ""}, "build_standard"),
        ({"build_standard": "iso"}, "build_standard"),
        ({"partition_count": 3}, "partition_count"),
        ({"partition_count": -1}, "partition_count"),
        ({"partition_count": 1.5}, "partition_count"),
    ],
)
def test_invalid_input_names_the_field(overrides, field):
    with pytest.raises(ValidationError) as exc:
        normalize(_raw(**overrides))
    assert exc.value.field == field
    assert str(exc.value).startswith(f"{field}:")


def test_missing_dimension_is_rejected():
    raw = _raw()
    del raw["height"]
    with pytest.raises(ValidationError) as exc:
        normalize(raw)
    assert exc.value.field == "height"


def test_spec_is_immutable():
    spec = normalize(_raw())
    with pytest.raises(Exception):
        spec.length_modules = 10


@pytest.mark.parametrize("field", ["tank_type", "material", "build_standard"])
def test_missing_variant_is_rejected(field):
    raw = _raw()
    del raw[field]
    with pytest.raises(ValidationError) as exc:
        normalize(raw)
    assert exc.value.field == field
