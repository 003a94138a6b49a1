"""
Correlation engine — rank candidate tickers by Pearson correlation of
daily returns against the portfolio index.

Candidates = basket tickers ∪ benchmarks ∪ comparison tickers. Each one is
joined to the index on the union of their dates and both sides are
forward-filled, the same join the index builder uses, so calendar
mismatches do not drop pairs. A side contributes nothing before its first
close. Candidates with fewer than MIN_CORRELATION_OBSERVATIONS paired
returns, or a non-finite coefficient, are left out of the ranking.
"""
import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

import numpy as np
import pandas as pd

from config.settings import BENCHMARK_SYMBOLS, MIN_CORRELATION_OBSERVATIONS
from folio.analysis.window import Window
from folio.data.schema import normalize_ticker
from folio.data.store import TimeSeriesStore
from folio.errors import InsufficientOverlapError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CorrelationResult:
    ticker: str
    coefficient: float
    observations: int

    def to_dict(self) -> dict:
        return {
            "ticker": self.ticker,
            "coefficient": round(self.coefficient, 4),
            "observations": self.observations,
        }


def paired_returns(index: pd.Series, closes: pd.Series, window: Window) -> pd.DataFrame:
    """
    Daily returns of the index and a candidate on days t in the window
    where both sides have usable values at t and t-1.

    Columns: portfolio, candidate.
    """
    if index.empty or closes.empty:
        return pd.DataFrame(columns=["portfolio", "candidate"], dtype=float)

    # leading NaNs survive ffill, so a side is excluded until its first close
    frame = pd.concat({"portfolio": index, "candidate": closes}, axis=1).sort_index().ffill()
    returns = (frame / frame.shift(1) - 1.0).dropna()
    return returns.loc[pd.Timestamp(window.start):pd.Timestamp(window.end)]


def pearson(x: np.ndarray, y: np.ndarray) -> float:
    """
    r = (nΣxy − ΣxΣy) / sqrt((nΣx² − (Σx)²)(nΣy² − (Σy)²))

    Zero variance on either side gives 0.0. May return NaN for
    pathological input; callers decide what to do with it.
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = len(x)
    if n == 0 or np.all(x == x[0]) or np.all(y == y[0]):
        return 0.0

    sx, sy = x.sum(), y.sum()
    numerator = n * np.dot(x, y) - sx * sy
    denominator_sq = (n * np.dot(x, x) - sx * sx) * (n * np.dot(y, y) - sy * sy)
    if denominator_sq <= 0:
        return 0.0
    r = numerator / math.sqrt(denominator_sq)
    if not math.isfinite(r):
        return float("nan")
    return float(np.clip(r, -1.0, 1.0))


def candidate_universe(basket_tickers: Iterable[str], comparisons: Iterable[str] = (),
                       benchmarks: Iterable[str] = BENCHMARK_SYMBOLS) -> List[str]:
    """Basket ∪ benchmarks ∪ comparisons, de-duplicated in first-seen order."""
    seen = {}
    for ticker in [*basket_tickers, *benchmarks, *comparisons]:
        key = normalize_ticker(ticker)
        if key:
            seen.setdefault(key, None)
    return list(seen)


class CorrelationEngine:
    """Pearson correlation of candidate returns against the index."""

    def __init__(self, store: TimeSeriesStore, min_observations: int = MIN_CORRELATION_OBSERVATIONS):
        self.store = store
        self.min_observations = min_observations

    def correlate(self, index: pd.Series, ticker: str, window: Window) -> Optional[CorrelationResult]:
        """
        Correlation of one candidate with the index.

        Raises:
            InsufficientOverlapError: fewer than min_observations paired returns
        Returns None when the coefficient is not a real number.
        """
        ticker = normalize_ticker(ticker)
        pairs = paired_returns(index, self.store.closes(ticker), window)
        if len(pairs) < self.min_observations:
            raise InsufficientOverlapError(
                f"{ticker}: {len(pairs)} paired returns, need {self.min_observations}"
            )

        r = pearson(pairs["portfolio"].to_numpy(), pairs["candidate"].to_numpy())
        if not math.isfinite(r):
            logger.warning(f"{ticker}: correlation is not finite, excluded")
            return None
        return CorrelationResult(ticker, r, len(pairs))

    def rank(self, index: pd.Series, candidates: Iterable[str], window: Window) -> List[CorrelationResult]:
        """All computable candidates, sorted by coefficient descending."""
        results = []
        for ticker in candidates:
            try:
                result = self.correlate(index, ticker, window)
            except InsufficientOverlapError as e:
                logger.debug(f"Excluded from correlation: {e}")
                continue
            if result is not None:
                results.append(result)

        results.sort(key=lambda r: r.coefficient, reverse=True)
        logger.info(f"Correlation: ranked {len(results)} candidates "
                    f"over {window.start} → {window.end}")
        return results


def top(results: List[CorrelationResult], n: int) -> List[CorrelationResult]:
    """Most correlated n, highest first."""
    return results[:n]


def bottom(results: List[CorrelationResult], n: int) -> List[CorrelationResult]:
    """Least correlated n, lowest first."""
    return list(reversed(results[-n:])) if n > 0 else []
