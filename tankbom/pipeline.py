"""
End-to-end quote pipeline:

1. Normalize raw inputs onto the module grid.
2. Parse the accessory options.
3. Run the BOM engine against the price table and rate card.
4. Collect pricing diagnostics for the caller to surface.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .accessories import AccessoryOptions
from .bom_engine import BOMEngine
from .dimensions import TankSpec, normalize
from .quantities import BOMResult
from .rate_card import RateCard
from .reporting import bom_to_dataframe, build_pricing_diagnostics


@dataclass
class QuoteResult:
    spec: TankSpec
    bom: BOMResult
    diagnostics: Dict[str, Any]

    def table(self):
        return bom_to_dataframe(self.bom)

    @property
    def has_pricing_gaps(self) -> bool:
        return self.bom.has_pricing_gaps


def run_quote(
    *,
    inputs: Mapping[str, Any],
    options: Optional[Mapping[str, Any]] = None,
    price_table: Optional[Mapping[str, float]] = None,
    rate_card: Optional[RateCard] = None,
) -> QuoteResult:
    """
    Execute the full calculation and return a QuoteResult.

    ValidationError / UnsupportedAccessoryError propagate to the caller; a
    missing price only shows up in diagnostics["warnings"]. Without a
    price_table every line is priced at the fallback; without a rate_card
    the built-in default rates apply.
    """
    spec = normalize(inputs)
    accessory_options = (
        options if isinstance(options, AccessoryOptions)
        else AccessoryOptions.from_mapping(options, material=spec.material)
    )

    engine = BOMEngine(price_table, rate_card)
    bom = engine.calculate(spec, accessory_options)

    return QuoteResult(
        spec=spec,
        bom=bom,
        diagnostics=build_pricing_diagnostics(bom),
    )
