"""
Error taxonomy for the BOM engine.

ValidationError and UnsupportedAccessoryError abort a calculation. A missing
price never does: it is recorded as a PricingNotFoundObservation on the result.
"""

from __future__ import annotations

from dataclasses import dataclass


class TankBOMError(Exception):
    """Base class for errors that abort a BOM calculation."""


class ValidationError(TankBOMError):
    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class UnsupportedAccessoryError(TankBOMError):
    def __init__(self, code: object, kind: str = "accessory"):
        self.code = code
        self.kind = kind
        super().__init__(f"Unsupported {kind} code: {code!r}")


@dataclass(frozen=True)
class PricingNotFoundObservation:
    """A SKU that no price table entry matched; priced at the fallback."""
    sku: str
    fallback_price: float

    def to_dict(self) -> dict:
        return {"sku": self.sku, "fallback_price": self.fallback_price}
