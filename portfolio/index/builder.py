"""
Portfolio index builder — weighted basket → base-100 NAV index.

Steps, all over a single per-call frame:
1. CalendarUnion: sorted union of every day any basket ticker traded
2. Forward-fill each ticker's close across that calendar; not-yet-listed
   tickers stay NaN and are excluded, not counted as zero return
3. Composite return per day = Σw·r / Σw over tickers with a usable close
   on both t and t-1
4. index[0] = base, index[t] = index[t-1] * (1 + composite[t])

The output covers the full history. Window slicing belongs to callers
because moving averages need lookback before the visible window.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List

import numpy as np
import pandas as pd

from config.settings import INDEX_BASE, ZERO_WEIGHT_POLICY
from folio.data.schema import IndexPoint, to_points
from folio.data.store import TimeSeriesStore
from portfolio.basket.schema import PortfolioEntry

logger = logging.getLogger(__name__)

ZERO_WEIGHT_POLICIES = ("hold", "gap")

INDEX_NAME = "NAV"


@dataclass(frozen=True, eq=False)
class CalendarUnion:
    """Materialized trading-day universe for a set of tickers."""

    days: pd.DatetimeIndex

    @classmethod
    def of(cls, store: TimeSeriesStore, tickers: Iterable[str]) -> "CalendarUnion":
        days = pd.DatetimeIndex([], name="date")
        for ticker in tickers:
            days = days.union(store.closes(ticker).index)
        return cls(days.sort_values().rename("date"))

    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self):
        return iter(self.days)


def forward_filled_closes(store: TimeSeriesStore, tickers: List[str], calendar: CalendarUnion) -> pd.DataFrame:
    """
    Close matrix on the calendar, one column per ticker, forward-filled.

    Leading NaNs (no observed close yet) are left in place.
    """
    frame = pd.DataFrame(
        {t: store.closes(t).reindex(calendar.days) for t in tickers},
        index=calendar.days,
        columns=tickers,
        dtype=float,
    )
    return frame.ffill()


def pairwise_returns(closes: pd.DataFrame) -> pd.DataFrame:
    """close_t / close_{t-1} - 1, NaN unless both closes are usable."""
    return closes / closes.shift(1) - 1.0


class PortfolioIndexBuilder:
    """Build the composite NAV index for a basket from a store snapshot."""

    def __init__(
        self,
        store: TimeSeriesStore,
        base: float = INDEX_BASE,
        zero_weight_policy: str = ZERO_WEIGHT_POLICY,
    ):
        if zero_weight_policy not in ZERO_WEIGHT_POLICIES:
            raise ValueError(f"zero_weight_policy must be one of {ZERO_WEIGHT_POLICIES}, "
                             f"got {zero_weight_policy!r}")
        self.store = store
        self.base = float(base)
        self.zero_weight_policy = zero_weight_policy

    @staticmethod
    def weight_fractions(basket: Iterable[PortfolioEntry]) -> Dict[str, float]:
        """Ticker → weight fraction, in basket order. Repeated tickers are summed."""
        weights: Dict[str, float] = {}
        for entry in basket:
            weights[entry.ticker] = weights.get(entry.ticker, 0.0) + entry.fraction
        return weights

    def composite_returns(self, basket: Iterable[PortfolioEntry]) -> pd.DataFrame:
        """
        Per-day composite return and active weight on the calendar union.

        Columns: composite, active_weight. Empty when the basket is empty
        or no ticker ever has two consecutive usable closes.
        """
        weights = self.weight_fractions(basket)
        empty = pd.DataFrame(columns=["composite", "active_weight"], dtype=float)
        if not weights:
            return empty

        tickers = list(weights)
        calendar = CalendarUnion.of(self.store, tickers)
        if len(calendar) < 2:
            return empty

        returns = pairwise_returns(forward_filled_closes(self.store, tickers, calendar))
        valid = returns.notna()
        if not valid.to_numpy().any():
            logger.info(f"No ticker in {tickers} has two consecutive closes; index is empty")
            return empty

        w = pd.Series(weights)
        active_weight = valid.mul(w, axis=1).sum(axis=1)
        weighted = returns.mul(w, axis=1).sum(axis=1)
        composite = (weighted / active_weight.where(active_weight > 0)).fillna(0.0)
        composite.iloc[0] = 0.0

        return pd.DataFrame({"composite": composite, "active_weight": active_weight})

    def build_series(self, basket: Iterable[PortfolioEntry]) -> pd.Series:
        """Full-history index as a float Series on a DatetimeIndex."""
        frame = self.composite_returns(basket)
        if frame.empty:
            return pd.Series(dtype=float, name=INDEX_NAME, index=pd.DatetimeIndex([], name="date"))

        growth = 1.0 + frame["composite"].to_numpy()
        growth[0] = self.base
        nav = pd.Series(np.cumprod(growth), index=frame.index, name=INDEX_NAME)

        flat_days = frame["active_weight"] <= 0
        flat_days.iloc[0] = False
        if flat_days.any():
            logger.debug(f"{int(flat_days.sum())} day(s) with zero active weight "
                         f"(policy={self.zero_weight_policy})")
            if self.zero_weight_policy == "gap":
                nav = nav[~flat_days]

        logger.debug(f"Built index: {len(nav)} points, "
                     f"{nav.index[0].date()} → {nav.index[-1].date()}, last={nav.iloc[-1]:.4f}")
        return nav

    def build(self, basket: Iterable[PortfolioEntry]) -> List[IndexPoint]:
        """Full-history index as IndexPoint list."""
        return to_points(self.build_series(basket))
