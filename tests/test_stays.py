from tankbom.dimensions import normalize
from tankbom.stays import couplers_per_stud, plan_stays, stay_plate_config, stud_length_mm
from tankbom.tiers import plan_tiers
from tankbom.variants import StayPlateConfig


def _spec(L, W, H, **extra):
    raw = {"length": L, "width": W, "height": H, "material": "HDG", "tank_type": 1, "build_standard": "regional"}
    raw.update(extra)
    return normalize(raw)


def _stays(spec):
    return plan_stays(spec, plan_tiers(spec))


def _tier_skus(stays, tier_index):
    return {s.sku: s.quantity for s in stays if s.tier_index == tier_index}


def _stay_counts(stays, tier_index):
    return {
        sku: quantity
        for sku, quantity in _tier_skus(stays, tier_index).items()
        if not sku.startswith(("StayPlate", "CC-", "Cleat"))
    }


def test_stay_plate_config_by_head():
    assert stay_plate_config(1) is StayPlateConfig.NONE
    assert stay_plate_config(1.5) is StayPlateConfig.CLEAT
    assert stay_plate_config(2) is StayPlateConfig.TWO_H
    assert stay_plate_config(3) is StayPlateConfig.TWO_H_CLEAT
    assert stay_plate_config(4) is StayPlateConfig.TWO_H_FOUR_H_CLEAT


def test_stud_length_and_couplers():
    assert stud_length_mm(6.0) == 5580
    assert couplers_per_stud(6.0) == 1
    assert stud_length_mm(4.0) == 3580
    assert couplers_per_stud(4.0) == 0
    assert couplers_per_stud(5.8) == 0
    assert couplers_per_stud(12.0) == 2


def test_long_span_gets_coupler_line():
    _, studs = _stays(_spec(6, 4, 1))
    assert [(s.sku, s.quantity, s.is_coupler) for s in studs] == [
        ("TR5580-SS304", 12, False),
        ("TRJ-SS304", 12, True),
        ("TR3580-SS304", 20, False),
    ]


def test_studs_repeat_per_tier():
    _, studs = _stays(_spec(3, 2, 3))
    assert [s.tier_index for s in studs] == [0, 0, 1, 1, 2, 2]
    assert {s.sku for s in studs} == {"TR2580-SS304", "TR1580-SS304"}


def test_partition_free_tanks_have_no_partition_stays():
    for L in range(1, 6):
        for W in range(1, 6):
            for H in (1, 2, 3, 4):
                stays, _ = _stays(_spec(L, W, H))
                partition = [s for s in stays if s.sku.startswith(("SP1M", "POP", "POT"))]
                assert partition == [], (L, W, H)


def test_s2m_only_on_upper_tiers_of_wide_tanks():
    stays, _ = _stays(_spec(4, 4, 3))
    s2m = [s for s in stays if s.sku.startswith("S2M")]
    assert {s.tier_index for s in s2m} == {1, 2}
    assert _tier_skus(stays, 1)["S2M-HDG"] == 4
    assert _tier_skus(stays, 2)["S2M-HDG"] == 2


def test_narrow_tanks_never_get_s2m():
    for L in range(2, 7):
        for W in (1, 2):
            for H in range(1, 7):
                for partitions in (0, 1):
                    narrow, _ = _stays(_spec(L, W, H, partition_count=partitions))
                    assert not [s for s in narrow if s.sku.startswith("S2M")], (L, W, H, partitions)


def test_wide_partitioned_tank_tier_by_tier():
    stays, _ = _stays(_spec(5, 4, 4, partition_count=1))
    assert _stay_counts(stays, 0) == {"S1MW-HDG": 22, "SP1MW-HDG": 5}
    assert _stay_counts(stays, 1) == {"S1M-HDG": 6, "S2M-HDG": 6, "SP1M-HDG": 2}
    assert _stay_counts(stays, 2) == {
        "S1M-HDG": 6,
        "S2M-HDG": 6,
        "SP1M-HDG": 2,
        "OP4M-HDG": 1,
        "POP4M-HDG": 1,
    }
    assert _stay_counts(stays, 3) == {
        "S1M-HDG": 6,
        "S2M-HDG": 3,
        "SP1M-HDG": 2,
        "OT4M-HDG": 2,
        "POT4M-HDG": 2,
    }


def test_op_stays_never_on_roof_tier():
    for L in range(1, 6):
        for W in range(1, 6):
            for H in (1, 2, 3, 4):
                spec = _spec(L, W, H, partition_count=1 if L > 1 else 0)
                stays, _ = _stays(spec)
                roof = [s for s in stays if s.tier_index == H - 1]
                assert not [s for s in roof if s.sku.startswith(("OP", "POP"))], (L, W, H)
                assert [s for s in roof if s.sku.startswith("OT")], (L, W, H)


def test_narrow_two_tier_tank():
    stays, _ = _stays(_spec(2, 2, 2))
    assert _tier_skus(stays, 0) == {
        "S1M-HDG": 4,
        "OP2M-HDG": 3,
        "StayPlate2H-HDG": 8,
        "CleatAL-18-HDG": 4,
        "CleatE-HDG": 4,
        "CleatCC2-HDG": 4,
    }
    assert _tier_skus(stays, 1) == {"OT2M-HDG": 2, "CleatE-HDG": 4, "CleatCC2-HDG": 4}


def test_stay_plates_follow_head():
    stays, _ = _stays(_spec(2, 2, 3))
    assert _tier_skus(stays, 0)["StayPlate2H-HDG"] == 8
    assert _tier_skus(stays, 0)["CC-HDG"] == 4
    assert "CC-HDG" not in _tier_skus(stays, 1)
    assert not [s for s in stays if s.tier_index == 2 and s.sku.startswith(("StayPlate", "CC"))]


def test_welded_bottom_stays_from_four_tiers():
    stays, _ = _stays(_spec(3, 3, 4))
    assert "S1MW-HDG" in _tier_skus(stays, 0)
    assert "S1M-HDG" in _tier_skus(stays, 1)

    short, _ = _stays(_spec(3, 3, 3))
    assert not [s for s in short if "MW-" in s.sku]


def test_frp_tanks_use_galvanised_stays():
    stays, _ = _stays(_spec(3, 3, 2, material="FRP"))
    assert stays
    assert all(s.sku.endswith("-HDG") for s in stays)


def test_partition_stays_scale_with_partitions():
    one, _ = _stays(_spec(5, 2, 2, partition_count=1))
    two, _ = _stays(_spec(5, 2, 2, partition_count=2))
    assert _tier_skus(one, 0)["SP1M-HDG"] == 2
    assert _tier_skus(two, 0)["SP1M-HDG"] == 4


def test_all_quantities_positive_and_tiers_ascending():
    stays, studs = _stays(_spec(5, 4, 4, partition_count=2))
    assert all(s.quantity > 0 for s in stays + studs)
    assert [s.tier_index for s in stays] == sorted(s.tier_index for s in stays)


def _cleat_totals(stays):
    totals = {}
    for s in stays:
        if s.sku.startswith("Cleat"):
            totals[s.sku] = totals.get(s.sku, 0) + s.quantity
    return totals


def test_cleat_set_for_welded_partitioned_tank():
    stays, _ = _stays(_spec(5, 4, 4, partition_count=2))
    assert _cleat_totals(stays) == {
        "CleatAL-18-HDG": 4,
        "CleatA-18-HDG": 10,
        "CleatE-HDG": 56,
        "CleatEW-HDG": 14,
        "CleatCC2-HDG": 16,
        "CleatCCP-HDG": 32,
    }
    bottom = [s.sku for s in stays if s.tier_index == 0 and s.sku.startswith("Cleat")]
    assert bottom[:3] == ["CleatAL-18-HDG", "CleatA-18-HDG", "CleatE-HDG"]
    assert {s.tier_index for s in stays if s.sku == "CleatEW-HDG"} == {0}


def test_cleat_set_without_welding_or_partitions():
    stays, _ = _stays(_spec(3, 3, 3))
    totals = _cleat_totals(stays)
    assert "CleatEW-HDG" not in totals
    assert "CleatCCP-HDG" not in totals
    assert totals["CleatE-HDG"] == 8 * 3
    assert totals["CleatA-18-HDG"] == 4
    assert totals["CleatCC2-HDG"] == 12


def test_single_module_tank_has_no_edge_cleats():
    stays, _ = _stays(_spec(1, 1, 1))
    assert _cleat_totals(stays) == {"CleatAL-18-HDG": 4, "CleatCC2-HDG": 4}


def test_frp_cleats_are_galvanised():
    stays, _ = _stays(_spec(3, 2, 2, material="FRP"))
    assert "CleatE-HDG" in _cleat_totals(stays)
