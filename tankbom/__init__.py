"""
BOM calculation engine for modular FRP / steel panel tanks.
"""

from .accessories import AccessoryOptions, accessory_sku, select_accessories
from .bom_engine import BOMEngine, assemble
from .dimensions import TankSpec, normalize
from .errors import (
    PricingNotFoundObservation,
    TankBOMError,
    UnsupportedAccessoryError,
    ValidationError,
)
from .panels import count_panels
from .pipeline import QuoteResult, run_quote
from .pricing import FALLBACK_PRICE, PriceMatch, PriceResolver, PriceTable, resolve_price
from .quantities import BOMResult, BOMSummary
from .rate_card import RateCard
from .stays import plan_stays
from .tiers import Tier, plan_tiers
from .variants import BuildStandard, Material, Section, TankType

__all__ = [
    "AccessoryOptions",
    "BOMEngine",
    "BOMResult",
    "BOMSummary",
    "BuildStandard",
    "FALLBACK_PRICE",
    "Material",
    "PriceMatch",
    "PriceResolver",
    "PriceTable",
    "PricingNotFoundObservation",
    "QuoteResult",
    "RateCard",
    "Section",
    "TankBOMError",
    "TankSpec",
    "TankType",
    "Tier",
    "UnsupportedAccessoryError",
    "ValidationError",
    "accessory_sku",
    "assemble",
    "count_panels",
    "normalize",
    "plan_stays",
    "plan_tiers",
    "resolve_price",
    "run_quote",
    "select_accessories",
]
