"""
FMP API 客户端 — 日线数据提供方
- 串行调用，间隔防限流
- 错误重试
- 失败统一抛 DataUnavailableError，由 price_fetcher 转为空序列
"""
import logging
import time
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

import requests

from config.settings import FMP_API_KEY, FMP_BASE_URL, API_CALL_INTERVAL, API_RETRY_TIMES, API_TIMEOUT
from folio.data.schema import DailyBar
from folio.errors import DataUnavailableError, InvalidBarError

logger = logging.getLogger(__name__)


class FMPClient:
    """FMP API 客户端"""

    def __init__(self, api_key: str = FMP_API_KEY, call_interval: float = API_CALL_INTERVAL):
        self.api_key = api_key
        self.base_url = FMP_BASE_URL
        self.call_interval = call_interval
        self._last_call_time = 0.0

    def _rate_limit(self):
        """API 限流控制"""
        elapsed = time.time() - self._last_call_time
        if elapsed < self.call_interval:
            time.sleep(self.call_interval - elapsed)
        self._last_call_time = time.time()

    def _request(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        """发送 API 请求，带重试。最终失败抛 DataUnavailableError"""
        self._rate_limit()

        url = f"{self.base_url}/{endpoint}"
        params = dict(params or {})
        params["apikey"] = self.api_key

        for attempt in range(API_RETRY_TIMES):
            try:
                resp = requests.get(url, params=params, timeout=API_TIMEOUT)

                if resp.status_code == 200:
                    return resp.json()
                elif resp.status_code == 429:
                    # Rate limited, wait and retry
                    wait_time = (attempt + 1) * 5
                    logger.warning(f"Rate limited, waiting {wait_time}s...")
                    time.sleep(wait_time)
                else:
                    raise DataUnavailableError(f"API error {resp.status_code}: {resp.text[:200]}")

            except requests.exceptions.Timeout:
                logger.warning(f"Timeout on attempt {attempt + 1}/{API_RETRY_TIMES}")
            except requests.exceptions.RequestException as e:
                raise DataUnavailableError(f"Request error: {e}") from e
            except ValueError as e:
                # resp.json() 解析失败
                raise DataUnavailableError(f"Malformed response from {endpoint}: {e}") from e

        raise DataUnavailableError(f"Failed after {API_RETRY_TIMES} attempts: {endpoint}")

    # ========== 量价数据 ==========

    def get_historical_bars(self, symbol: str, days: int, as_of: Optional[date] = None) -> List[DailyBar]:
        """
        获取最近 days 个自然日的日线，按日期正序

        Raises:
            DataUnavailableError: 请求失败或返回为空
        """
        to_date = as_of or date.today()
        from_date = to_date - timedelta(days=days)
        data = self._request("historical-price-eod/full", {
            "symbol": symbol,
            "from": from_date.isoformat(),
            "to": to_date.isoformat(),
        })

        # 数据可能直接是列表，也可能在 historical 字段
        if isinstance(data, dict):
            data = data.get("historical", [])
        if not isinstance(data, list) or not data:
            raise DataUnavailableError(f"{symbol}: empty price payload")

        return parse_bars(symbol, data)


def parse_bars(symbol: str, rows: List[Dict]) -> List[DailyBar]:
    """
    Provider rows (newest first) → DailyBar list (oldest first).

    Upstream glitches are not programmer errors: rows with a missing or
    non-positive close are dropped with a warning, and a repeated day
    keeps the last row seen.
    """
    by_day: Dict[date, DailyBar] = {}
    dropped = 0
    for row in rows:
        try:
            bar = DailyBar.from_dict(row)
        except (KeyError, TypeError, ValueError, InvalidBarError):
            dropped += 1
            continue
        by_day[bar.trading_day] = bar

    if dropped:
        logger.warning(f"{symbol}: dropped {dropped} malformed rows")
    if not by_day:
        raise DataUnavailableError(f"{symbol}: no usable bars in payload")

    return [by_day[d] for d in sorted(by_day)]


# 全局客户端实例
fmp_client = FMPClient()
