"""
Table-driven BOM engine.

Plans tiers, counts panels, stays and accessories for a validated TankSpec,
prices every line against the price table and assembles the result.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Mapping, Optional, Sequence, Union

from .accessories import AccessoryOptions, select_accessories
from .dimensions import TankSpec
from .errors import PricingNotFoundObservation
from .panels import count_panels
from .pricing import PriceResolver, PriceTable
from .quantities import (
    AccessoryLineItem,
    BOMResult,
    BOMSummary,
    LineItem,
    PanelLineItem,
    StayLineItem,
    StudLineItem,
    with_price,
)
from .rate_card import RateCard
from .stays import plan_stays
from .tiers import plan_tiers
from .variants import PANEL_SECTIONS, Section


logger = logging.getLogger(__name__)


def assemble(
    panel_items: Iterable[PanelLineItem],
    stay_items: Iterable[Union[StayLineItem, StudLineItem]],
    accessory_items: Iterable[AccessoryLineItem],
    observations: Sequence[PricingNotFoundObservation] = (),
) -> BOMResult:
    """
    Group priced items into sections and total them

    Sections come out Base, Wall, Partition (only when it has items), Roof,
    Stays, Accessories. Items keep the order they were given in.
    """
    panel_items = list(panel_items)
    grouped = [
        (section, tuple(item for item in panel_items if item.section is section))
        for section in PANEL_SECTIONS
    ]
    grouped.append((Section.STAYS, tuple(stay_items)))
    grouped.append((Section.ACCESSORIES, tuple(accessory_items)))

    sections = tuple(
        (section, items)
        for section, items in grouped
        if items or section is not Section.PARTITION
    )
    subtotals = tuple((section, sum(item.total for item in items)) for section, items in sections)

    total_panels = sum(
        item.quantity for section, items in sections if section in PANEL_SECTIONS for item in items
    )
    total_cost = sum(subtotal for _, subtotal in subtotals)

    return BOMResult(
        sections=sections,
        subtotals=subtotals,
        summary=BOMSummary(total_panels=total_panels, total_cost=total_cost),
        observations=tuple(observations),
    )


class BOMEngine:
    """
    Prices tanks against one price table snapshot and rate card

    Example:
        engine = BOMEngine(load_price_table(), load_rate_card())
        result = engine.calculate(normalize(raw), AccessoryOptions())
    """

    def __init__(
        self,
        price_table: Optional[Mapping[str, float]] = None,
        rate_card: Optional[RateCard] = None,
    ):
        self.price_table = price_table if isinstance(price_table, PriceTable) else PriceTable(price_table)
        self.rate_card = rate_card or RateCard.default()

    # ------------------------------------------------------------------ public
    def calculate(self, spec: TankSpec, options: Optional[AccessoryOptions] = None) -> BOMResult:
        options = options or AccessoryOptions()
        resolver = PriceResolver(self.price_table)

        tiers = plan_tiers(spec)
        panels = count_panels(spec, tiers)
        stays, studs = plan_stays(spec, tiers)
        total_panels = sum(item.quantity for item in panels)
        accessories = select_accessories(spec, options, self.rate_card, total_panels)

        # Tier ascending; within a tier stays and plates before studs
        reinforcement = sorted(stays + studs, key=lambda item: item.tier_index)

        result = assemble(
            self._price_items(panels, resolver),
            self._price_items(reinforcement, resolver),
            self._price_accessories(accessories, resolver),
            resolver.observations,
        )

        logger.debug(
            f"BOM for {spec.length_modules}x{spec.width_modules}x{spec.height_modules} "
            f"{spec.material.value}: {result.summary.total_panels} panels, "
            f"total {result.summary.total_cost:.2f}"
        )
        return result

    # ---------------------------------------------------------------- pricing
    def _price_items(self, items: Iterable[LineItem], resolver: PriceResolver) -> List[LineItem]:
        return [with_price(item, resolver.price(item.sku)) for item in items if item.quantity > 0]

    def _price_accessories(
        self, items: Iterable[AccessoryLineItem], resolver: PriceResolver
    ) -> List[AccessoryLineItem]:
        priced = []
        for item in items:
            if item.quantity <= 0:
                continue
            if item.list_price is not None:
                priced.append(with_price(item, item.list_price))
            else:
                priced.append(with_price(item, resolver.price(item.sku)))
        return priced
