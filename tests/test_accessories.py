import pytest

from tankbom.accessories import AccessoryOptions, accessory_sku, select_accessories
from tankbom.dimensions import normalize
from tankbom.errors import UnsupportedAccessoryError
from tankbom.rate_card import RateCard
from tankbom.variants import AccessoryType, AirVentSize, Material, ManholeType


RATES = RateCard.default()


def _spec(L=2, W=2, H=2, **extra):
    raw = {"length": L, "width": W, "height": H, "material": "HDG", "tank_type": 1, "build_standard": "regional"}
    raw.update(extra)
    return normalize(raw)


def _select(spec, **options):
    return select_accessories(spec, AccessoryOptions.from_mapping(options, material=spec.material), RATES)


def _by_type(items):
    return {i.accessory_type: i for i in items}


def test_accessory_skus():
    assert accessory_sku("wli", "ss304", 2.44) == "WLI-SS304-3M"
    assert accessory_sku(AccessoryType.INTERNAL_LADDER, "hdg", 3.0) == "IL-HDG-3M"
    assert accessory_sku("ext_ladder", "frp", 2.01) == "EL-FRP-3M"
    assert accessory_sku("safety_cage", "hdg", 4.0) == "SC-HDG-4M"
    assert accessory_sku("manhole", "hinged") == "MH-HINGED"
    assert accessory_sku("air_vent", "75mm") == "AV-75MM"
    assert accessory_sku("vortex_pipe", "SS304") == "VORTEX-PIPE-SS304"


def test_unknown_accessory_type_fails():
    with pytest.raises(UnsupportedAccessoryError) as exc:
        accessory_sku("slide", "hdg", 2.0)
    assert exc.value.code == "slide"


def test_wli_height_rounds_up_on_certification_grid():
    spec = _spec(H=2.4, unit="m", material="SS304", build_standard="certification")
    assert spec.height_m == 2.44
    wli = _by_type(_select(spec, water_level_indicator=True))[AccessoryType.WLI]
    assert wli.sku == "WLI-SS304-3M"
    assert wli.list_price == 150 * 3 * 1.5
    assert wli.height_meters == 2.44


def test_frp_tank_defaults_to_galvanised_wli():
    wli = _by_type(_select(_spec(material="FRP"), water_level_indicator=True))[AccessoryType.WLI]
    assert wli.sku == "WLI-HDG-2M"
    assert wli.list_price == 300.0


def test_manholes_and_vents_follow_roof_openings():
    small = _by_type(_select(_spec(2, 2, 1)))
    assert small[AccessoryType.MANHOLE].quantity == 1
    assert small[AccessoryType.AIR_VENT].quantity == 1

    normal = _by_type(_select(_spec(3, 3, 1), manhole_type="hinged", air_vent_size="100mm"))
    assert normal[AccessoryType.MANHOLE].quantity == 2
    assert normal[AccessoryType.MANHOLE].sku == "MH-HINGED"
    assert normal[AccessoryType.MANHOLE].list_price == 450.0
    assert normal[AccessoryType.AIR_VENT].quantity == 2
    assert normal[AccessoryType.AIR_VENT].list_price == 45.0


def test_ladders_priced_per_meter():
    items = _by_type(_select(_spec(H=3), internal_ladder="ss304", external_ladder="hdg"))
    assert items[AccessoryType.INTERNAL_LADDER].sku == "IL-SS304-3M"
    assert items[AccessoryType.INTERNAL_LADDER].list_price == 750.0
    assert items[AccessoryType.EXTERNAL_LADDER].list_price == 480.0
    # 3 m is not taller than 3 m
    assert AccessoryType.SAFETY_CAGE not in items


def test_safety_cage_rules():
    tall = _by_type(_select(_spec(H=4), external_ladder="hdg"))
    assert tall[AccessoryType.SAFETY_CAGE].sku == "SC-HDG-4M"
    assert tall[AccessoryType.SAFETY_CAGE].list_price == 150.0

    requested = _by_type(_select(_spec(H=2), external_ladder="hdg", safety_cage=True))
    assert AccessoryType.SAFETY_CAGE in requested

    no_ladder = _by_type(_select(_spec(H=5), safety_cage=True))
    assert AccessoryType.SAFETY_CAGE not in no_ladder


def test_vortex_pipe_only_for_certification():
    cert = _select(_spec(material="SS304", build_standard="certification"))
    assert cert[-1].accessory_type is AccessoryType.VORTEX_PIPE
    assert cert[-1].sku == "VORTEX-PIPE-SS304"
    assert cert[-1].list_price is None

    regional = _select(_spec())
    assert AccessoryType.VORTEX_PIPE not in _by_type(regional)


def test_options_from_mapping():
    options = AccessoryOptions.from_mapping(
        {"manhole_type": "Lockable", "air_vent_size": "75mm", "internal_ladder": True},
        material=Material.SS316,
    )
    assert options.manhole_type is ManholeType.LOCKABLE
    assert options.air_vent_size is AirVentSize.MM75
    assert options.internal_ladder == "ss316"
    assert options.external_ladder is None

    defaults = AccessoryOptions.from_mapping(None)
    assert defaults == AccessoryOptions()


@pytest.mark.parametrize(
    "raw",
    [
        {"manhole_type": "trapdoor"},
        {"air_vent_size": "20mm"},
        {"internal_ladder": "gold"},
        {"wli_grade": "plastic"},
        {"walkway": True},
        {"water_level_indicator": "false"},
        {"safety_cage": 1},
        {"manhole_type": True},
    ],
)
def test_unknown_codes_raise(raw):
    with pytest.raises(UnsupportedAccessoryError):
        AccessoryOptions.from_mapping(raw)


def test_bnw_sets_sized_from_panel_total():
    hdg = _by_type(select_accessories(_spec(), AccessoryOptions(), RATES, total_panels=24))
    assert hdg[AccessoryType.BNW].sku == "BNW-HDG"
    assert hdg[AccessoryType.BNW].quantity == 8  # 24 x 16 x 2 = 768 bolts
    assert hdg[AccessoryType.BNW].list_price is None

    steel = _by_type(select_accessories(_spec(material="SS304"), AccessoryOptions(), RATES, total_panels=24))
    assert steel[AccessoryType.BNW].sku == "BNW-SS304"
    assert steel[AccessoryType.BNW].quantity == 10

    assert AccessoryType.BNW not in _by_type(_select(_spec()))


def test_frp_consumables_follow_build_standard():
    spec = _spec(3, 2, 2, material="FRP")
    items = _by_type(select_accessories(spec, AccessoryOptions(), RATES, total_panels=30))
    assert items[AccessoryType.BNW].sku == "BNW-HDG-FRP"
    assert items[AccessoryType.BNW].quantity == 8
    assert items[AccessoryType.SEALANT].sku == "SEALANT-EPDM"
    assert items[AccessoryType.SEALANT].quantity == 3  # (6 + 10 x 2) joints / 10
    assert items[AccessoryType.ROOF_PIPE].sku == "ROOF-PIPE-ABS"
    assert items[AccessoryType.ROOF_PIPE].quantity == 5

    cert = _select(_spec(3, 2, 2, material="FRP", build_standard="certification"))
    skus = [i.sku for i in cert]
    assert "SEALANT-PVC-FOAM" in skus
    assert "ROOF-PIPE-UPVC" in skus
    assert skus[-1] == "VORTEX-PIPE-FRP"


def test_steel_tanks_have_no_sealant_or_roof_pipe():
    items = _by_type(_select(_spec(material="SS316")))
    assert AccessoryType.SEALANT not in items
    assert AccessoryType.ROOF_PIPE not in items
