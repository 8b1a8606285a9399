"""
SKU & pricing resolver

Looks SKUs up in an immutable price table snapshot. Lookup order:

    1. exact key
    2. case-insensitive key
    3. first key (sorted) whose first hyphen-delimited segment equals the
       SKU's (case-insensitive), for panel codes listed under a sibling
       standard/material suffix. S1M-* never matches S1MW-*.
    4. FALLBACK_PRICE

A miss is never fatal: PriceResolver records one PricingNotFoundObservation
per unmatched SKU so the caller can flag the quote for review.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Tuple

import pandas as pd

from .errors import PricingNotFoundObservation


logger = logging.getLogger(__name__)

FALLBACK_PRICE = 150.0

SKU_COLUMNS = ("InternalReference", "sku")
PRICE_COLUMNS = ("market_final_price", "price")


class PriceTable(Mapping[str, float]):
    """
    Read-only SKU -> unit price snapshot

    Built once (from a dict or a price list DataFrame) and shared across
    calculations; nothing in the engine writes to it.
    """

    def __init__(self, prices: Optional[Mapping[str, float]] = None):
        data: Dict[str, float] = {}
        for sku, price in (prices or {}).items():
            data[str(sku)] = float(price)
        self._prices = MappingProxyType(data)
        self._sorted_keys = tuple(sorted(data))
        self._lower_keys: Dict[str, str] = {}
        for key in self._sorted_keys:
            self._lower_keys.setdefault(key.lower(), key)

    @classmethod
    def from_frame(cls, frame: pd.DataFrame) -> "PriceTable":
        """
        Build a table from a price list

        Accepts InternalReference/market_final_price columns (or sku/price).
        Rows with a blank SKU or a missing, non-numeric or non-positive price
        are skipped; the first row wins for duplicated SKUs.

        Raises:
            ValueError: if the SKU or price column is missing
        """
        sku_col = _find_column(frame, SKU_COLUMNS)
        price_col = _find_column(frame, PRICE_COLUMNS)

        prices = pd.to_numeric(frame[price_col], errors="coerce")
        skus = frame[sku_col].astype("string").str.strip()
        valid = (skus.notna() & (skus != "") & prices.notna() & (prices > 0)).fillna(False).astype(bool)

        skipped = int((~valid).sum())
        if skipped:
            logger.warning(f"Skipped {skipped} price rows with a blank SKU or invalid price")

        cleaned = pd.DataFrame({"sku": skus[valid], "price": prices[valid]})
        cleaned = cleaned.drop_duplicates(subset="sku", keep="first")
        return cls(dict(zip(cleaned["sku"], cleaned["price"])))

    def __getitem__(self, sku: str) -> float:
        return self._prices[sku]

    def __iter__(self) -> Iterator[str]:
        return iter(self._prices)

    def __len__(self) -> int:
        return len(self._prices)

    @property
    def sorted_keys(self) -> Tuple[str, ...]:
        return self._sorted_keys

    def key_for_lower(self, lowered: str) -> Optional[str]:
        return self._lower_keys.get(lowered)

    def __repr__(self) -> str:
        return f"PriceTable({len(self)} SKUs)"


def _find_column(frame: pd.DataFrame, candidates: Tuple[str, ...]) -> str:
    lowered = {str(col).strip().lower(): col for col in frame.columns}
    for name in candidates:
        if name.lower() in lowered:
            return lowered[name.lower()]
    raise ValueError(
        f"Price list is missing a column (expected one of {list(candidates)}, "
        f"found {list(frame.columns)})"
    )


@dataclass(frozen=True)
class PriceMatch:
    sku: str
    price: float
    strategy: str  # exact | case_insensitive | prefix | fallback
    matched_key: Optional[str] = None

    @property
    def is_fallback(self) -> bool:
        return self.strategy == "fallback"


def resolve_price(sku: str, table: Mapping[str, float]) -> PriceMatch:
    """Resolve a SKU against the table; never raises for a missing SKU"""
    if not isinstance(table, PriceTable):
        table = PriceTable(table)

    if sku in table:
        return PriceMatch(sku, table[sku], "exact", sku)

    lower_sku = sku.lower()
    key = table.key_for_lower(lower_sku)
    if key is not None:
        logger.debug(f"Case-insensitive price match: {sku} -> {key}")
        return PriceMatch(sku, table[key], "case_insensitive", key)

    segment = lower_sku.split("-", 1)[0]
    if segment:
        for key in table.sorted_keys:
            if key.split("-", 1)[0].lower() == segment:
                logger.debug(f"Prefix price match: {sku} -> {key}")
                return PriceMatch(sku, table[key], "prefix", key)

    return PriceMatch(sku, FALLBACK_PRICE, "fallback")


class PriceResolver:
    """
    Prices SKUs for one calculation and remembers what it could not find

    Example:
        resolver = PriceResolver(table)
        resolver.price('1B5-SANS-HDG-S20')
        resolver.observations  # tuple of PricingNotFoundObservation
    """

    def __init__(self, table: Optional[Mapping[str, float]] = None):
        self.table = table if isinstance(table, PriceTable) else PriceTable(table)
        self._observations: Dict[str, PricingNotFoundObservation] = {}

    def resolve(self, sku: str) -> PriceMatch:
        match = resolve_price(sku, self.table)
        if match.is_fallback and sku not in self._observations:
            logger.warning(f"No price found for SKU {sku}; using fallback {FALLBACK_PRICE:.2f}")
            self._observations[sku] = PricingNotFoundObservation(sku=sku, fallback_price=match.price)
        return match

    def price(self, sku: str) -> float:
        return self.resolve(sku).price

    @property
    def observations(self) -> Tuple[PricingNotFoundObservation, ...]:
        return tuple(self._observations.values())
