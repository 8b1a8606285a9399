"""
Loaders for the commercial data under data/ and a small snapshot cache.

The engine itself never touches the filesystem; callers load a PriceTable
and RateCard here (or build them in memory) and hand them to BOMEngine.
"""

from __future__ import annotations

import json
import logging
import os
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

import pandas as pd

from .pricing import PriceTable
from .rate_card import RateCard


logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
PRICE_TABLE_ENV = "TANKBOM_PRICE_TABLE"

PathLike = Union[str, Path]


def default_price_table_path() -> Path:
    override = os.environ.get(PRICE_TABLE_ENV)
    if override:
        return Path(override)
    return DATA_DIR / "price_table.csv"


def load_price_table(path: Optional[PathLike] = None) -> PriceTable:
    """
    Read a price list CSV into an immutable PriceTable

    Raises:
        FileNotFoundError: if the file does not exist
        ValueError: if the SKU or price column is missing
    """
    source = Path(path) if path else default_price_table_path()
    frame = pd.read_csv(source, dtype=str)
    table = PriceTable.from_frame(frame)
    logger.info(f"Loaded {len(table)} prices from {source}")
    return table


def load_rate_card_data(path: Optional[PathLike] = None) -> Dict[str, Any]:
    base = Path(path) if path else DATA_DIR / "rate_card.json"
    with open(base, "r", encoding="utf-8") as fp:
        return json.load(fp)


def load_rate_card(path: Optional[PathLike] = None) -> RateCard:
    return RateCard(load_rate_card_data(path))


class PriceTableCache:
    """
    Load a price table once and reuse the snapshot until it goes stale

    Example:
        cache = PriceTableCache(load_price_table, max_age_seconds=300)
        engine = BOMEngine(cache.get(), rate_card)
    """

    def __init__(
        self,
        loader: Callable[[], PriceTable],
        max_age_seconds: float = 300,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._loader = loader
        self.max_age_seconds = max_age_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._table: Optional[PriceTable] = None
        self._loaded_at = 0.0

    def get(self) -> PriceTable:
        with self._lock:
            now = self._clock()
            if self._table is None or now - self._loaded_at >= self.max_age_seconds:
                self._table = self._loader()
                self._loaded_at = now
            return self._table

    def invalidate(self) -> None:
        with self._lock:
            self._table = None
