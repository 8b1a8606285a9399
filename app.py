"""
Panel Tank BOM Calculator
Interactive bill of materials and quote tool for modular FRP / steel tanks
"""

import streamlit as st
import pandas as pd

from tankbom.errors import TankBOMError
from tankbom.pipeline import run_quote
from tankbom.price_sources import PriceTableCache, load_price_table, load_rate_card_data
from tankbom.rate_card import AIR_VENT_SIZES, LADDER_GRADES, MANHOLE_TYPES, WLI_GRADES, RateCard
from tankbom.reporting import quantities_by_section, section_breakdown
from tankbom.variants import BuildStandard, Material, TankType

# Page config
st.set_page_config(
    page_title="Panel Tank BOM Calculator",
    page_icon="💧",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.title("💧 Panel Tank BOM Calculator")
st.markdown("**Panel, stay and accessory bill of materials for sectional water tanks**")


# Price list is shared across sessions and refreshed every 5 minutes
@st.cache_resource
def price_cache():
    return PriceTableCache(load_price_table, max_age_seconds=300)


@st.cache_data
def load_rates():
    return load_rate_card_data()


try:
    price_table = price_cache().get()
except (OSError, ValueError) as e:
    st.sidebar.warning(f"Price list unavailable ({e}); all lines use the fallback price.")
    price_table = {}

rate_card = RateCard(load_rates())

# Sidebar - Input Parameters
st.sidebar.header("Tank Parameters")

st.sidebar.markdown("### Dimensions")

unit = st.sidebar.radio(
    "Dimension Unit",
    options=["modules", "m", "ft"],
    horizontal=True,
    help="Meters and feet are rounded UP to whole panels on the module grid."
)

step = 1.0 if unit == "modules" else 0.1
length = st.sidebar.number_input("Length", min_value=step, value=4.0, step=step)
width = st.sidebar.number_input("Width", min_value=step, value=3.0, step=step)
height = st.sidebar.number_input("Height", min_value=step, value=2.0, step=step)

partition_count = st.sidebar.number_input(
    "Partitions",
    min_value=0,
    max_value=39,
    value=0,
    step=1,
    help="Internal partition walls across the width (must be fewer than the length in modules)."
)

st.sidebar.markdown("### Specification")

material = st.sidebar.selectbox("Material", [m.value for m in Material])
build_standard = st.sidebar.selectbox(
    "Build Standard",
    [s.value for s in BuildStandard],
    format_func=lambda v: f"{v} ({BuildStandard(v).code}, {BuildStandard(v).module_size_m} m panels)",
)
tank_type = st.sidebar.selectbox(
    "Panel Type",
    [t.value for t in TankType],
    format_func=lambda v: f"Type {v}",
)

st.sidebar.markdown("### Accessories")

manhole_type = st.sidebar.selectbox("Manhole", MANHOLE_TYPES)
air_vent_size = st.sidebar.selectbox("Air Vent", AIR_VENT_SIZES)
water_level_indicator = st.sidebar.checkbox("Water Level Indicator", value=False)
wli_grade = None
if water_level_indicator:
    wli_grade = st.sidebar.selectbox("WLI Grade", ["(match tank)"] + list(WLI_GRADES))
    if wli_grade == "(match tank)":
        wli_grade = None

internal_ladder = st.sidebar.selectbox("Internal Ladder", ["none"] + list(LADDER_GRADES))
external_ladder = st.sidebar.selectbox("External Ladder", ["none"] + list(LADDER_GRADES))
safety_cage = st.sidebar.checkbox(
    "Safety Cage",
    value=False,
    help="Added automatically with an external ladder on tanks over 3 m."
)

inputs = {
    "length": length,
    "width": width,
    "height": height,
    "unit": unit,
    "partition_count": int(partition_count),
    "material": material,
    "build_standard": build_standard,
    "tank_type": tank_type,
}
options = {
    "manhole_type": manhole_type,
    "air_vent_size": air_vent_size,
    "water_level_indicator": water_level_indicator,
    "wli_grade": wli_grade,
    "internal_ladder": None if internal_ladder == "none" else internal_ladder,
    "external_ladder": None if external_ladder == "none" else external_ladder,
    "safety_cage": safety_cage,
}

# Calculate
try:
    result = run_quote(inputs=inputs, options=options, price_table=price_table, rate_card=rate_card)
except TankBOMError as e:
    st.error(f"❌ Calculation failed: {e}")
    st.stop()

spec = result.spec
bom = result.bom

if result.has_pricing_gaps:
    st.warning(
        f"⚠️ {len(bom.observations)} SKU(s) not found in the price list were priced at the fallback. "
        "Review before sending the quote."
    )

# Key metrics
col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Grid", f"{spec.length_modules} × {spec.width_modules} × {spec.height_modules}")
with col2:
    st.metric("Size", f"{spec.length_m} × {spec.width_m} × {spec.height_m} m")
with col3:
    st.metric("Total Panels", f"{bom.summary.total_panels}")
with col4:
    st.metric("Total Cost", f"{bom.summary.total_cost:,.2f}")

tab1, tab2, tab3 = st.tabs(["📋 Bill of Materials", "📊 Section Summary", "🔍 Diagnostics"])

with tab1:
    df = result.table()
    for section_name in bom.section_names:
        section_df = df[df["section"] == section_name].drop(columns=["section"])
        st.markdown(f"#### {section_name}")
        st.dataframe(section_df, use_container_width=True, hide_index=True)

    st.download_button(
        "Download BOM (CSV)",
        data=df.to_csv(index=False).encode("utf-8"),
        file_name=f"tank_bom_{spec.length_modules}x{spec.width_modules}x{spec.height_modules}.csv",
        mime="text/csv",
    )

with tab2:
    breakdown = section_breakdown(bom)
    quantities = quantities_by_section(bom)
    summary_df = pd.DataFrame(
        [
            {"Section": name, "Quantity": quantities[name], "Cost": total}
            for name, total in breakdown["totals_by_section"].items()
        ]
    )
    st.dataframe(summary_df, use_container_width=True, hide_index=True)
    st.bar_chart(summary_df.set_index("Section")["Cost"])

with tab3:
    warnings = result.diagnostics.get("warnings", [])
    errors = result.diagnostics.get("errors", [])
    if not warnings and not errors:
        st.success("✅ All SKUs priced from the price list; totals reconcile.")
    if warnings:
        st.dataframe(
            pd.DataFrame([w["detail"] for w in warnings]),
            use_container_width=True,
            hide_index=True,
        )
    for err in errors:
        st.error(err["message"])
