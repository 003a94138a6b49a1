"""
Display window — a closed date range [start, end] used to clip derived series.

Windows never filter inputs to the index builder; they are applied to its
output (and to raw closes) by the downstream engines.
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional, Union

import pandas as pd

from config.settings import TIMEFRAMES
from folio.data.schema import DayLike, to_trading_day


@dataclass(frozen=True)
class Window:
    start: date
    end: date

    def __post_init__(self):
        if self.start > self.end:
            raise ValueError(f"window start {self.start} is after end {self.end}")

    @classmethod
    def between(cls, start: DayLike, end: DayLike) -> "Window":
        return cls(to_trading_day(start), to_trading_day(end))

    @classmethod
    def from_timeframe(cls, timeframe: Union[str, int], as_of: Optional[date] = None) -> "Window":
        """
        Resolve a timeframe label ("1M", "3M", "6M", "YTD", "1Y") or a
        number of calendar days into a window ending at as_of (today).
        """
        end = as_of or date.today()
        if isinstance(timeframe, str):
            label = timeframe.strip().upper()
            if label == "YTD":
                return cls(date(end.year, 1, 1), end)
            if label.isdigit():
                days = int(label)
            elif label in TIMEFRAMES:
                days = TIMEFRAMES[label]
            else:
                raise ValueError(f"Unknown timeframe {timeframe!r}; expected one of "
                                 f"{sorted(TIMEFRAMES) + ['YTD']} or a day count")
        else:
            days = int(timeframe)
        if days < 0:
            raise ValueError(f"timeframe must be non-negative, got {days}")
        return cls(end - timedelta(days=days), end)

    def clip(self, series: pd.Series) -> pd.Series:
        """Slice a DatetimeIndex-ed series to [start, end], inclusive."""
        if series is None or series.empty:
            return pd.Series(dtype=float)
        return series.loc[pd.Timestamp(self.start):pd.Timestamp(self.end)]

    def __contains__(self, day: DayLike) -> bool:
        return self.start <= to_trading_day(day) <= self.end
