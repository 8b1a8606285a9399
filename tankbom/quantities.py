"""
BOM Line Item Data Structures

Quantities are produced by the planners (panels, stays, accessories) with a
zero unit price; prices are attached afterwards by the pricing pass, which
returns new items instead of mutating these ones.

KEY PRINCIPLE: Quantities are DESCRIPTIVE (what the tank needs), pricing is
a separate pass over them.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple, Union

from .errors import PricingNotFoundObservation
from .variants import PANEL_SECTIONS, AccessoryType, Section, StayPlateConfig


@dataclass(frozen=True)
class PanelLineItem:
    """One category of panel at one tier/section"""
    sku: str
    description: str
    quantity: int
    section: Section
    tier_index: Optional[int] = None
    unit_price: float = 0.0

    @property
    def total(self) -> float:
        return self.quantity * self.unit_price

    def to_dict(self) -> Dict:
        return {
            "sku": self.sku,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total": self.total,
            "section": self.section.value,
            "tier_index": self.tier_index,
        }


@dataclass(frozen=True)
class StayLineItem:
    """Stays and stay plates fitted to one tier"""
    sku: str
    description: str
    quantity: int
    tier_index: int
    configuration: StayPlateConfig = StayPlateConfig.NONE
    unit_price: float = 0.0

    @property
    def total(self) -> float:
        return self.quantity * self.unit_price

    def to_dict(self) -> Dict:
        return {
            "sku": self.sku,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total": self.total,
            "tier_index": self.tier_index,
            "configuration": self.configuration.value,
        }


@dataclass(frozen=True)
class StudLineItem:
    """End studs (or their joint couplers) for one tier and span direction"""
    sku: str
    description: str
    quantity: int
    tier_index: int
    span_m: float
    length_mm: int
    is_coupler: bool = False
    unit_price: float = 0.0

    @property
    def total(self) -> float:
        return self.quantity * self.unit_price

    def to_dict(self) -> Dict:
        return {
            "sku": self.sku,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total": self.total,
            "tier_index": self.tier_index,
            "span_m": self.span_m,
            "length_mm": self.length_mm,
            "is_coupler": self.is_coupler,
        }


@dataclass(frozen=True)
class AccessoryLineItem:
    """
    One selected accessory

    list_price is set when the rate card prices the accessory (per meter of
    tank height or per type); None means the price comes from the price table.
    """
    sku: str
    description: str
    quantity: int
    accessory_type: AccessoryType
    height_meters: float
    list_price: Optional[float] = None
    unit_price: float = 0.0

    @property
    def total(self) -> float:
        return self.quantity * self.unit_price

    def to_dict(self) -> Dict:
        return {
            "sku": self.sku,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
            "total": self.total,
            "accessory_type": self.accessory_type.value,
            "height_meters": self.height_meters,
        }


LineItem = Union[PanelLineItem, StayLineItem, StudLineItem, AccessoryLineItem]


def with_price(item: LineItem, unit_price: float) -> LineItem:
    return replace(item, unit_price=float(unit_price))


@dataclass(frozen=True)
class BOMSummary:
    total_panels: int
    total_cost: float


@dataclass(frozen=True)
class BOMResult:
    """
    Complete, priced bill of materials

    This is the ONLY structure handed to rendering/export collaborators.
    Sections are stored in emission order; empty Partition sections are
    omitted.
    """
    sections: Tuple[Tuple[Section, Tuple[LineItem, ...]], ...]
    subtotals: Tuple[Tuple[Section, float], ...]
    summary: BOMSummary
    observations: Tuple[PricingNotFoundObservation, ...] = field(default_factory=tuple)

    def section(self, section: Section) -> Tuple[LineItem, ...]:
        for name, items in self.sections:
            if name is section:
                return items
        return ()

    def subtotal(self, section: Section) -> float:
        return dict(self.subtotals).get(section, 0.0)

    @property
    def section_names(self) -> List[str]:
        return [name.value for name, _ in self.sections]

    @property
    def items(self) -> List[LineItem]:
        return [item for _, items in self.sections for item in items]

    @property
    def has_pricing_gaps(self) -> bool:
        return bool(self.observations)

    def validate(self) -> List[str]:
        """
        Check the additivity invariants

        Returns:
            List of issues (empty if consistent)
        """
        issues = []

        panel_sum = sum(
            item.quantity for name, items in self.sections if name in PANEL_SECTIONS for item in items
        )
        if panel_sum != self.summary.total_panels:
            issues.append(f"Panel sum ({panel_sum}) != total_panels ({self.summary.total_panels})")

        cost_sum = sum(item.total for item in self.items)
        if abs(cost_sum - self.summary.total_cost) > 1e-6:
            issues.append(f"Line cost sum ({cost_sum:.2f}) != total_cost ({self.summary.total_cost:.2f})")

        for name, subtotal in self.subtotals:
            line_sum = sum(item.total for item in self.section(name))
            if abs(line_sum - subtotal) > 1e-6:
                issues.append(f"{name.value} subtotal ({subtotal:.2f}) != line sum ({line_sum:.2f})")

        return issues

    def to_dict(self) -> Dict:
        """Convert to a JSON-serializable dictionary"""
        return {
            "sections": {
                name.value: [item.to_dict() for item in items] for name, items in self.sections
            },
            "subtotals": {name.value: subtotal for name, subtotal in self.subtotals},
            "summary": {
                "total_panels": self.summary.total_panels,
                "total_cost": self.summary.total_cost,
            },
            "observations": [obs.to_dict() for obs in self.observations],
        }
