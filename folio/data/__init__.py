# Data layer modules
from .schema import (
    DailyBar,
    IndexPoint,
    normalize_ticker,
    to_trading_day,
    to_points,
)
from .store import TimeSeriesStore
from .fmp_client import FMPClient, fmp_client
from .price_fetcher import (
    fetch_bars,
    populate_store,
    load_price_cache,
    save_price_cache,
)
