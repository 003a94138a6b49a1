"""
Basket manager — CRUD for the user's weighted ticker basket.

The basket is an explicit value handed to the index builder on every call;
nothing here is module-level state. Persistence is plain JSON:

    {"positions": [{"ticker": "AAPL", "weight": 60.0}, ...],
     "comparisons": ["SPY", ...]}
"""
import csv
import io
import json
import logging
from pathlib import Path
from typing import Iterable, List, Optional

from config.settings import BASKET_FILE
from folio.data.schema import normalize_ticker
from portfolio.basket.schema import PortfolioEntry, validate_weight

logger = logging.getLogger(__name__)

_CSV_HEADER = "TICKER"


class Basket:
    """Ordered, ticker-keyed list of PortfolioEntry plus comparison tickers."""

    def __init__(self, entries: Optional[Iterable[PortfolioEntry]] = None,
                 comparisons: Optional[Iterable[str]] = None):
        self._entries: List[PortfolioEntry] = []
        self._comparisons: List[str] = []
        for entry in entries or []:
            if self.get(entry.ticker) is not None:
                logger.warning(f"Duplicate ticker {entry.ticker} in basket, keeping first")
                continue
            self._entries.append(entry)
        for ticker in comparisons or []:
            self.add_comparison(ticker)

    # ------------------------------------------------------------------
    # Positions
    # ------------------------------------------------------------------

    @property
    def entries(self) -> List[PortfolioEntry]:
        return list(self._entries)

    @property
    def tickers(self) -> List[str]:
        return [e.ticker for e in self._entries]

    @property
    def total_weight(self) -> float:
        return sum(e.weight for e in self._entries)

    def get(self, ticker: str) -> Optional[PortfolioEntry]:
        ticker = normalize_ticker(ticker)
        for e in self._entries:
            if e.ticker == ticker:
                return e
        return None

    def add_ticker(self, ticker: str, weight: Optional[float] = None) -> Optional[PortfolioEntry]:
        """
        Append a ticker. Without an explicit weight the first ticker gets
        100 and later ones 0. Returns None when the ticker is already held.
        """
        ticker = normalize_ticker(ticker)
        if not ticker:
            return None
        if self.get(ticker) is not None:
            logger.info(f"{ticker} already in basket")
            return None
        if weight is None:
            weight = 100.0 if not self._entries else 0.0
        entry = PortfolioEntry(ticker, weight)
        self._entries.append(entry)
        logger.info(f"Basket: added {ticker} @ {entry.weight:.1f}%")
        return entry

    def remove_ticker(self, ticker: str) -> bool:
        ticker = normalize_ticker(ticker)
        before = len(self._entries)
        self._entries = [e for e in self._entries if e.ticker != ticker]
        removed = len(self._entries) < before
        if removed:
            logger.info(f"Basket: removed {ticker}")
        return removed

    def set_weight(self, ticker: str, weight) -> PortfolioEntry:
        """Reweight a held ticker. Raises KeyError if absent, InvalidWeightError if invalid."""
        entry = self.get(ticker)
        if entry is None:
            raise KeyError(f"{normalize_ticker(ticker)} is not in the basket")
        entry.weight = validate_weight(weight)
        return entry

    # ------------------------------------------------------------------
    # Comparison tickers
    # ------------------------------------------------------------------

    @property
    def comparisons(self) -> List[str]:
        return list(self._comparisons)

    def add_comparison(self, ticker: str) -> bool:
        ticker = normalize_ticker(ticker)
        if not ticker or ticker in self._comparisons:
            return False
        self._comparisons.append(ticker)
        return True

    def remove_comparison(self, ticker: str) -> bool:
        ticker = normalize_ticker(ticker)
        if ticker not in self._comparisons:
            return False
        self._comparisons.remove(ticker)
        return True

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> dict:
        return {
            "positions": [e.to_dict() for e in self._entries],
            "comparisons": list(self._comparisons),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Basket":
        return cls(
            entries=[PortfolioEntry.from_dict(d) for d in data.get("positions", [])],
            comparisons=data.get("comparisons", []),
        )

    @classmethod
    def from_csv_text(cls, text: str) -> "Basket":
        """
        Single-column ticker list → equal-weight basket.

        Only the first field of each row is read; blank rows and a
        TICKER header are skipped.
        """
        tickers = []
        for row in csv.reader(io.StringIO(text)):
            if not row:
                continue
            ticker = normalize_ticker(row[0])
            if ticker and ticker != _CSV_HEADER and ticker not in tickers:
                tickers.append(ticker)

        if not tickers:
            return cls()
        equal_weight = 100.0 / len(tickers)
        return cls(entries=[PortfolioEntry(t, equal_weight) for t in tickers])

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(self.entries)

    def __repr__(self) -> str:
        body = ", ".join(f"{e.ticker}={e.weight:g}" for e in self._entries)
        return f"Basket({body})"


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

def import_csv(path: Path) -> Basket:
    """Read a ticker CSV file into an equal-weight basket."""
    basket = Basket.from_csv_text(Path(path).read_text(encoding="utf-8-sig"))
    logger.info(f"Imported {len(basket)} tickers from {path}")
    return basket


def load_basket(path: Optional[Path] = None) -> Basket:
    """Load a basket from JSON. A missing file is an empty basket."""
    path = Path(path or BASKET_FILE)
    if not path.exists():
        return Basket()
    with open(path, "r") as f:
        data = json.load(f)
    return Basket.from_dict(data)


def save_basket(basket: Basket, path: Optional[Path] = None) -> None:
    """Persist a basket to JSON."""
    path = Path(path or BASKET_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(basket.to_dict(), f, indent=2, ensure_ascii=False)
    logger.info(f"Saved basket ({len(basket)} positions) to {path}")
