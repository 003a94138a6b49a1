"""
Basket data models — PortfolioEntry

Weights are percentage points and need not sum to 100; the index builder
renormalizes by active weight each day. Validation happens here, at the
entry boundary, so the engine can assume finite non-negative weights.
"""
import math
from dataclasses import dataclass
from numbers import Real

from folio.data.schema import normalize_ticker
from folio.errors import InvalidWeightError


def validate_weight(weight) -> float:
    """Coerce to float; reject negatives, NaN, infinities and non-numbers."""
    if isinstance(weight, bool) or not isinstance(weight, (Real, str)):
        raise InvalidWeightError(f"weight must be a number, got {weight!r}")
    try:
        value = float(weight)
    except ValueError as e:
        raise InvalidWeightError(f"weight must be a number, got {weight!r}") from e
    if not math.isfinite(value) or value < 0:
        raise InvalidWeightError(f"weight must be finite and non-negative, got {weight!r}")
    return value


@dataclass
class PortfolioEntry:
    """One basket line: ticker and its weight in percentage points."""

    ticker: str
    weight: float = 0.0

    def __post_init__(self):
        self.ticker = normalize_ticker(self.ticker)
        if not self.ticker:
            raise ValueError("ticker must not be blank")
        self.weight = validate_weight(self.weight)

    @property
    def fraction(self) -> float:
        """Weight as a fraction (percentage points / 100)."""
        return self.weight / 100.0

    def to_dict(self) -> dict:
        return {"ticker": self.ticker, "weight": self.weight}

    @classmethod
    def from_dict(cls, data: dict) -> "PortfolioEntry":
        return cls(
            ticker=data.get("ticker", data.get("symbol", "")),
            weight=data.get("weight", 0.0),
        )
