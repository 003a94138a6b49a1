"""
Daily bar data model — DailyBar plus the helpers that keep a ticker's
series canonical (uppercase key, one bar per day, strictly increasing).

Bars are frozen dataclasses so a stored series can be shared between
concurrent readers without copying.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Sequence, Tuple, Union

import pandas as pd

from config.settings import MARKET_TIMEZONE
from folio.errors import InvalidBarError

DayLike = Union[date, datetime, str, pd.Timestamp, int, float]

BAR_COLUMNS = ["date", "open", "high", "low", "close"]


def normalize_ticker(ticker: str) -> str:
    """Canonical store key: trimmed, uppercase."""
    return str(ticker).strip().upper()


def to_trading_day(value: DayLike, tz: str = MARKET_TIMEZONE) -> date:
    """
    Normalize a timestamp-ish value to the calendar date it trades on.

    Naive values are taken as already local to the market. Aware values
    are converted to `tz` first, so a 04:00 UTC stamp lands on the
    previous New York day. Numbers are epoch milliseconds.
    """
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        ts = pd.Timestamp(value, unit="ms", tz="UTC")
    else:
        ts = pd.Timestamp(value)
    if ts.tzinfo is not None:
        ts = ts.tz_convert(tz)
    return ts.date()


@dataclass(frozen=True)
class DailyBar:
    """One trading day of OHLC prices for a single ticker."""

    trading_day: date
    open: float
    high: float
    low: float
    close: float

    def __post_init__(self):
        close = float(self.close)
        if not math.isfinite(close) or close <= 0:
            raise InvalidBarError(f"close must be a positive number, got {self.close!r} on {self.trading_day}")

    def to_dict(self) -> dict:
        """Serialize to the CSV/JSON row shape."""
        return {
            "date": self.trading_day.isoformat(),
            "open": self.open,
            "high": self.high,
            "low": self.low,
            "close": self.close,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DailyBar":
        """Deserialize from a provider or CSV row. Missing OHLC fields fall back to close."""
        close = float(data["close"])
        return cls(
            trading_day=to_trading_day(data["date"]),
            open=float(data.get("open", close)),
            high=float(data.get("high", close)),
            low=float(data.get("low", close)),
            close=close,
        )


def validate_series(bars: Iterable[DailyBar]) -> Tuple[DailyBar, ...]:
    """
    Freeze a bar sequence and check it is strictly increasing by day.

    Raises InvalidBarError on a duplicate or out-of-order day; the store
    never reorders or merges on the caller's behalf.
    """
    series = tuple(bars)
    for prev, cur in zip(series, series[1:]):
        if cur.trading_day <= prev.trading_day:
            raise InvalidBarError(
                f"bars must be strictly increasing by day: {prev.trading_day} then {cur.trading_day}"
            )
    return series


def bars_to_frame(bars: Sequence[DailyBar]) -> pd.DataFrame:
    """Bars as a DataFrame with a datetime `date` column, oldest first."""
    if not bars:
        return pd.DataFrame(columns=BAR_COLUMNS)
    df = pd.DataFrame([b.to_dict() for b in bars], columns=BAR_COLUMNS)
    df["date"] = pd.to_datetime(df["date"])
    return df


def frame_to_bars(df: pd.DataFrame) -> list:
    """Inverse of bars_to_frame; rows are sorted oldest first and de-duplicated by day."""
    if df is None or df.empty:
        return []
    df = df.sort_values("date", ascending=True, kind="stable").drop_duplicates(subset=["date"], keep="last")
    return [DailyBar.from_dict(row) for row in df.to_dict(orient="records")]


@dataclass(frozen=True)
class IndexPoint:
    """One (trading_day, value) point of a derived series."""

    trading_day: date
    value: float

    def to_dict(self) -> dict:
        return {"date": self.trading_day.isoformat(), "value": self.value}


def to_points(series: pd.Series) -> list:
    """DatetimeIndex-ed Series → list of IndexPoint, NaNs dropped."""
    if series is None or series.empty:
        return []
    return [IndexPoint(ts.date(), float(v)) for ts, v in series.dropna().items()]
