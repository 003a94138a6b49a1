"""
量价数据获取与缓存
- CSV 格式存储 (data/price/{SYMBOL}.csv)
- 单只失败不影响整体: 失败 → 空序列
- 引擎运行前完成所有抓取
"""
import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import pandas as pd

from config.settings import PRICE_DIR, PRICE_LOOKBACK_DAYS, BENCHMARK_SYMBOLS, CACHE_START_TOLERANCE_DAYS
from folio.data.fmp_client import FMPClient, fmp_client
from folio.data.schema import BAR_COLUMNS, DailyBar, bars_to_frame, frame_to_bars, normalize_ticker
from folio.data.store import TimeSeriesStore
from folio.errors import DataUnavailableError, InvalidBarError

logger = logging.getLogger(__name__)


def _get_cache_path(symbol: str) -> Path:
    """获取缓存文件路径"""
    return PRICE_DIR / f"{symbol}.csv"


def load_price_cache(symbol: str) -> Optional[List[DailyBar]]:
    """加载本地缓存的量价数据，按日期正序。无缓存或损坏返回 None"""
    cache_path = _get_cache_path(normalize_ticker(symbol))
    if not cache_path.exists():
        return None

    try:
        df = pd.read_csv(cache_path, parse_dates=["date"])
        return frame_to_bars(df)
    except (OSError, KeyError, ValueError, InvalidBarError) as e:
        logger.error(f"加载缓存失败 {symbol}: {e}")
        return None


def save_price_cache(symbol: str, bars: List[DailyBar]) -> None:
    """保存量价数据到缓存"""
    PRICE_DIR.mkdir(parents=True, exist_ok=True)
    cache_path = _get_cache_path(normalize_ticker(symbol))
    df = bars_to_frame(bars)[BAR_COLUMNS]
    df.to_csv(cache_path, index=False, date_format="%Y-%m-%d")
    logger.debug(f"保存缓存 {symbol}: {len(df)} 条")


def cache_covers(bars: List[DailyBar], days: int, as_of: Optional[date] = None) -> bool:
    """缓存是否覆盖回看区间: 首条日期不晚于 (as_of - days) + 容差"""
    if not bars:
        return False
    lookback_start = (as_of or date.today()) - timedelta(days=days)
    return bars[0].trading_day <= lookback_start + timedelta(days=CACHE_START_TOLERANCE_DAYS)


def fetch_bars(symbol: str, days: int = PRICE_LOOKBACK_DAYS, client: Optional[FMPClient] = None) -> List[DailyBar]:
    """
    从数据源获取日线。失败返回空列表 (DataUnavailable 不是错误状态)
    """
    client = client or fmp_client
    try:
        return client.get_historical_bars(symbol, days)
    except DataUnavailableError as e:
        logger.warning(f"{symbol}: 数据不可用, 记为空序列 ({e})")
        return []


def unique_symbols(*groups: Iterable[str]) -> List[str]:
    """合并多组代码，去重并保持首次出现顺序"""
    seen: Dict[str, None] = {}
    for group in groups:
        for s in group:
            key = normalize_ticker(s)
            if key:
                seen.setdefault(key, None)
    return list(seen)


def populate_store(
    store: TimeSeriesStore,
    symbols: Iterable[str],
    days: int = PRICE_LOOKBACK_DAYS,
    client: Optional[FMPClient] = None,
    use_cache: bool = True,
    include_benchmarks: bool = True,
) -> dict:
    """
    批量填充 store
    - use_cache=True: CSV 缓存覆盖 days 回看时直接用，否则从 API 获取并写缓存
    - 获取失败的代码以空序列写入 store
    返回: {"success": [...], "failed": [...]}
    """
    groups = [symbols, BENCHMARK_SYMBOLS] if include_benchmarks else [symbols]
    targets = unique_symbols(*groups)
    if not targets:
        logger.warning("没有需要获取的代码")
        return {"success": [], "failed": []}

    logger.info(f"开始获取 {len(targets)} 只代码的量价数据...")

    success = []
    failed = []

    for i, symbol in enumerate(targets, 1):
        bars = load_price_cache(symbol) if use_cache else None
        if bars and not cache_covers(bars, days):
            logger.info(f"[{i}/{len(targets)}] {symbol}: 缓存起始 {bars[0].trading_day} 不足 {days} 天回看, 重新获取")
            bars = None
        if bars:
            logger.info(f"[{i}/{len(targets)}] {symbol}: 使用缓存 {len(bars)} 条")
        else:
            logger.info(f"[{i}/{len(targets)}] {symbol}: 从 API 获取")
            bars = fetch_bars(symbol, days, client)
            if bars:
                save_price_cache(symbol, bars)

        store.upsert(symbol, bars)
        (success if bars else failed).append(symbol)

    logger.info(f"获取完成: 成功 {len(success)}, 失败 {len(failed)}")
    if failed:
        logger.warning(f"失败列表: {failed}")

    return {"success": success, "failed": failed}
