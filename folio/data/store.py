"""
TimeSeriesStore — latest known daily bars per ticker.

Pure lookup structure. Series are replaced wholesale by upsert() and are
never patched in place; readers get the same immutable tuple back, which
is what makes snapshot() cheap.
"""
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple

import pandas as pd

from folio.data.schema import DailyBar, DayLike, normalize_ticker, to_trading_day, validate_series

logger = logging.getLogger(__name__)


class TimeSeriesStore:
    """Single source of truth for per-ticker daily bars."""

    def __init__(self, series: Optional[Dict[str, Iterable[DailyBar]]] = None):
        self._series: Dict[str, Tuple[DailyBar, ...]] = {}
        self._by_day: Dict[str, Dict[date, DailyBar]] = {}
        for ticker, bars in (series or {}).items():
            self.upsert(ticker, bars)

    def upsert(self, ticker: str, bars: Iterable[DailyBar]) -> None:
        """Replace the ticker's entire series. An empty sequence records a failed fetch."""
        key = normalize_ticker(ticker)
        series = validate_series(bars)
        self._series[key] = series
        self._by_day[key] = {b.trading_day: b for b in series}
        if series:
            logger.debug(f"{key}: stored {len(series)} bars "
                         f"({series[0].trading_day} → {series[-1].trading_day})")
        else:
            logger.debug(f"{key}: stored empty series")

    def series_of(self, ticker: str) -> Tuple[DailyBar, ...]:
        """Ordered bars for the ticker, or an empty tuple if never fetched or failed."""
        return self._series.get(normalize_ticker(ticker), ())

    def close_on(self, ticker: str, day: DayLike) -> Optional[float]:
        """Close for that exact day, or None. No forward-fill here."""
        bar = self._by_day.get(normalize_ticker(ticker), {}).get(to_trading_day(day))
        return bar.close if bar is not None else None

    def closes(self, ticker: str) -> pd.Series:
        """Closes as a float Series on a DatetimeIndex, oldest first. Empty when absent."""
        key = normalize_ticker(ticker)
        series = self._series.get(key, ())
        if not series:
            return pd.Series(dtype=float, name=key, index=pd.DatetimeIndex([], name="date"))
        index = pd.DatetimeIndex([pd.Timestamp(b.trading_day) for b in series], name="date")
        return pd.Series([b.close for b in series], index=index, dtype=float, name=key)

    def tickers(self) -> List[str]:
        return list(self._series.keys())

    def has_data(self, ticker: str) -> bool:
        return bool(self.series_of(ticker))

    def snapshot(self) -> "TimeSeriesStore":
        """Independent store over the same immutable series, for a single computation."""
        clone = TimeSeriesStore()
        clone._series = dict(self._series)
        clone._by_day = dict(self._by_day)
        return clone

    def __contains__(self, ticker: str) -> bool:
        return normalize_ticker(ticker) in self._series

    def __len__(self) -> int:
        return len(self._series)
