"""
Benchmark comparison — rebase external series onto the index scale.

A comparison ticker's in-window closes are multiplied by
index_at_window_start / close_at_window_start, so every overlay starts at
the same value as the index regardless of absolute price. Tickers without
data on either side are left out of the result; callers get a shorter
dict, not an error.
"""
import logging
from typing import Dict, Iterable, Optional

import pandas as pd

from config.settings import BENCHMARK_SYMBOLS
from folio.analysis.statistics import max_drawdown_pct, period_return_pct
from folio.analysis.window import Window
from folio.data.schema import normalize_ticker
from folio.data.store import TimeSeriesStore

logger = logging.getLogger(__name__)

# Supported benchmarks
BENCHMARKS = {
    "SPY": "S&P 500 ETF",
    "QQQ": "Nasdaq 100 ETF",
}


class ComparisonNormalizer:
    """Rebase comparison tickers onto the composite index."""

    def __init__(self, store: TimeSeriesStore):
        self.store = store

    def normalize(self, index: pd.Series, ticker: str, window: Window) -> Optional[pd.Series]:
        """
        Normalized comparison series over the window, or None when the
        index has no point in the window or the ticker has no closes there.
        """
        ticker = normalize_ticker(ticker)
        index_in_window = window.clip(index).dropna()
        if index_in_window.empty:
            logger.debug(f"{ticker}: index has no value in window, skipping overlay")
            return None

        closes = window.clip(self.store.closes(ticker))
        if closes.empty:
            logger.warning(f"{ticker}: no price data in window {window.start} → {window.end}")
            return None

        ratio = float(index_in_window.iloc[0]) / float(closes.iloc[0])
        normalized = closes * ratio
        normalized.name = ticker
        return normalized

    def normalize_all(self, index: pd.Series, tickers: Iterable[str], window: Window) -> Dict[str, pd.Series]:
        """Normalized series keyed by ticker; unavailable tickers are omitted."""
        results = {}
        for ticker in tickers:
            series = self.normalize(index, ticker, window)
            if series is not None:
                results[normalize_ticker(ticker)] = series
        return results

    def relative_performance(self, index: pd.Series, ticker: str, window: Window) -> dict:
        """
        Index vs one comparison ticker over the window.

        Returns:
            {
                "cumulative_portfolio": float,   # %
                "cumulative_benchmark": float,   # %
                "active_return": float,          # percentage points
                "max_drawdown_portfolio": float, # %
                "max_drawdown_benchmark": float, # %
                "trading_days": int,
            }
        """
        normalized = self.normalize(index, ticker, window)
        if normalized is None:
            return {"error": f"No data available for {normalize_ticker(ticker)} in window"}

        # Align dates
        aligned = pd.DataFrame({
            "portfolio": window.clip(index),
            "benchmark": normalized,
        }).dropna()

        if aligned.empty:
            return {"error": "No overlapping dates between portfolio and benchmark"}

        cum_port = period_return_pct(aligned["portfolio"])
        cum_bench = period_return_pct(aligned["benchmark"])

        return {
            "cumulative_portfolio": round(cum_port, 4),
            "cumulative_benchmark": round(cum_bench, 4),
            "active_return": round(cum_port - cum_bench, 4),
            "max_drawdown_portfolio": round(max_drawdown_pct(aligned["portfolio"]), 4),
            "max_drawdown_benchmark": round(max_drawdown_pct(aligned["benchmark"]), 4),
            "trading_days": len(aligned),
        }

    def compare_all_benchmarks(self, index: pd.Series, window: Window,
                               extra: Iterable[str] = ()) -> Dict[str, dict]:
        """
        Relative performance against every benchmark plus any extra tickers.

        Returns dict keyed by ticker.
        """
        results = {}
        for ticker in dict.fromkeys([*BENCHMARK_SYMBOLS, *(normalize_ticker(t) for t in extra)]):
            results[ticker] = {
                "name": BENCHMARKS.get(ticker, ticker),
                **self.relative_performance(index, ticker, window),
            }
        return results
