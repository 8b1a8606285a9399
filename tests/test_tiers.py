from tankbom.dimensions import normalize
from tankbom.tiers import plan_tiers, pressure_class_for


def _spec(height, width=2):
    raw = {"length": 3, "width": width, "height": height, "material": "HDG", "tank_type": 1, "build_standard": "regional"}
    return normalize(raw)


def test_single_tier_tank():
    tiers = plan_tiers(_spec(1))
    assert len(tiers) == 1
    tier = tiers[0]
    assert tier.index == 0 and tier.number == 1
    assert tier.pressure_class == "S10"
    assert tier.is_roof_adjacent
    assert tier.head_modules == 1


def test_three_tier_classes_and_heads():
    tiers = plan_tiers(_spec(3))
    assert [t.pressure_class for t in tiers] == ["S30", "S20", "S10"]
    assert [t.head_modules for t in tiers] == [3, 2, 1]
    assert [t.is_roof_adjacent for t in tiers] == [False, False, True]


def test_tall_tank_floors_at_lowest_class():
    tiers = plan_tiers(_spec(6))
    assert [t.pressure_class for t in tiers] == ["S40", "S30", "S20", "S10", "S10", "S10"]


def test_pressure_class_for_short_tanks():
    assert pressure_class_for(0, 2) == "S20"
    assert pressure_class_for(1, 2) == "S10"
    assert pressure_class_for(0, 4) == "S40"


def test_exactly_one_roof_adjacent_tier():
    for height in range(1, 7):
        tiers = plan_tiers(_spec(height))
        assert sum(t.is_roof_adjacent for t in tiers) == 1
        assert tiers[-1].is_roof_adjacent
        assert [t.index for t in tiers] == list(range(height))
