"""
Statistics engine — windowed return, max drawdown, SMA, per-ticker return.

All index statistics take the full-history index and a Window. The SMA is
the exception that motivates that contract: it is computed on the full
series first and clipped afterwards, so the line is not truncated at the
window's left edge.
"""
import logging
from typing import Dict, Iterable, List, Optional

import pandas as pd

from config.settings import SMA_PERIODS
from folio.analysis.window import Window
from folio.data.store import TimeSeriesStore

logger = logging.getLogger(__name__)


def period_return_pct(values: pd.Series) -> Optional[float]:
    """(last - first) / first * 100, or None for an empty series."""
    values = values.dropna()
    if values.empty:
        return None
    start = float(values.iloc[0])
    end = float(values.iloc[-1])
    return (end - start) / start * 100.0


def max_drawdown_pct(values: pd.Series) -> Optional[float]:
    """
    Largest peak-to-trough decline as a positive percentage.

    0.0 exactly when the series never falls below its running peak.
    """
    values = values.dropna()
    if values.empty:
        return None
    peak = values.cummax()
    drawdown = (peak - values) / peak
    return float(drawdown.max()) * 100.0


def simple_moving_average(values: pd.Series, period: int) -> pd.Series:
    """Trailing `period`-point mean; points without a full lookback are dropped."""
    if period < 1:
        raise ValueError(f"SMA period must be >= 1, got {period}")
    sma = values.rolling(window=period, min_periods=period).mean().dropna()
    sma.name = f"SMA{period}"
    return sma


class StatisticsEngine:
    """Window statistics over the composite index and raw ticker closes."""

    def __init__(self, store: TimeSeriesStore):
        self.store = store

    def windowed_return(self, index: pd.Series, window: Window) -> Optional[float]:
        return period_return_pct(window.clip(index))

    def max_drawdown(self, index: pd.Series, window: Window) -> Optional[float]:
        return max_drawdown_pct(window.clip(index))

    def moving_average(self, index: pd.Series, period: int, window: Optional[Window] = None) -> pd.Series:
        """SMA over the unfiltered index, then clipped to the window."""
        sma = simple_moving_average(index, period)
        return window.clip(sma) if window is not None else sma

    def moving_averages(self, index: pd.Series, window: Optional[Window] = None,
                        periods: Iterable[int] = SMA_PERIODS) -> Dict[int, pd.Series]:
        return {p: self.moving_average(index, p, window) for p in periods}

    def ticker_return(self, ticker: str, window: Window) -> Optional[float]:
        """Windowed return of a ticker's raw closes, independent of the index."""
        return period_return_pct(window.clip(self.store.closes(ticker)))

    def ticker_returns(self, tickers: Iterable[str], window: Window) -> Dict[str, Optional[float]]:
        return {t: self.ticker_return(t, window) for t in tickers}

    def summary(self, index: pd.Series, window: Window, tickers: Optional[List[str]] = None) -> dict:
        """
        Headline numbers for one window.

        Returns:
            {
                "start": str | None, "end": str | None,
                "start_value": float | None, "end_value": float | None,
                "return_pct": float | None,
                "max_drawdown_pct": float | None,
                "trading_days": int,
                "tickers": {ticker: return_pct | None},
            }
        """
        clipped = window.clip(index).dropna()
        if clipped.empty:
            logger.info(f"No index points in window {window.start} → {window.end}")

        def _round(value, digits=4):
            return round(value, digits) if value is not None else None

        return {
            "start": str(clipped.index[0].date()) if not clipped.empty else None,
            "end": str(clipped.index[-1].date()) if not clipped.empty else None,
            "start_value": _round(float(clipped.iloc[0])) if not clipped.empty else None,
            "end_value": _round(float(clipped.iloc[-1])) if not clipped.empty else None,
            "return_pct": _round(period_return_pct(clipped)),
            "max_drawdown_pct": _round(max_drawdown_pct(clipped)),
            "trading_days": len(clipped),
            "tickers": {t: _round(r) for t, r in self.ticker_returns(tickers or [], window).items()},
        }
