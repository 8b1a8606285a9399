"""
Reporting utilities for presenting a BOMResult.
"""

from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd

from .quantities import BOMResult
from .variants import Section


SECTION_ORDER = [section.value for section in Section]

BOM_COLUMNS = ["section", "sku", "description", "quantity", "unit_price", "total"]


def bom_to_dataframe(result: BOMResult) -> pd.DataFrame:
    """One row per line item, in BOM order"""
    rows = [
        {
            "section": section.value,
            "sku": item.sku,
            "description": item.description,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total": item.total,
        }
        for section, items in result.sections
        for item in items
    ]
    return pd.DataFrame(rows, columns=BOM_COLUMNS)


def section_breakdown(result: BOMResult) -> Dict[str, Any]:
    """
    Produce a per-section breakdown of the BOM:
    - rows: one normalized dict per line item
    - totals_by_section: cost per section in canonical order (0.0 when the
      section is absent, e.g. an unpartitioned tank)
    """
    df = bom_to_dataframe(result)
    if df.empty:
        return {"rows": [], "totals_by_section": {name: 0.0 for name in SECTION_ORDER}}

    rows: List[Dict[str, Any]] = []
    for _, r in df.iterrows():
        rows.append({
            "section": r["section"],
            "sku": r["sku"],
            "description": r["description"],
            "quantity": int(r["quantity"]),
            "unit_price": float(r["unit_price"]),
            "total": float(r["total"]),
        })

    totals_series = df.groupby("section")["total"].sum()
    totals_by_section = {name: float(totals_series.get(name, 0.0)) for name in SECTION_ORDER}

    return {"rows": rows, "totals_by_section": totals_by_section}


def quantities_by_section(result: BOMResult) -> Dict[str, int]:
    df = bom_to_dataframe(result)
    counts = df.groupby("section")["quantity"].sum() if not df.empty else pd.Series(dtype=int)
    return {name: int(counts.get(name, 0)) for name in SECTION_ORDER}


def build_pricing_diagnostics(result: BOMResult) -> Dict[str, Any]:
    """Warnings for every SKU priced at the fallback, in the cost diagnostics shape"""
    diagnostics: Dict[str, Any] = {"warnings": [], "errors": []}
    for obs in result.observations:
        diagnostics["warnings"].append({
            "message": f"No price found for {obs.sku}; fallback price applied.",
            "detail": obs.to_dict(),
        })

    issues = result.validate()
    for issue in issues:
        diagnostics["errors"].append({"message": issue, "detail": {}})
    return diagnostics
