"""
篮子分析入口 — 合成指数 + 窗口统计 + 对比 + 相关性
用法:
    python scripts/analyze_basket.py                         # data/basket.json, 3M
    python scripts/analyze_basket.py --csv tickers.csv --timeframe YTD
    python scripts/analyze_basket.py --compare SPY,IWM --timeframe 1Y --offline
"""
import argparse
import logging
import sys
from pathlib import Path

# 添加项目根目录到 path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import BENCHMARK_SYMBOLS, DEFAULT_TIMEFRAME, LOG_LEVEL, PRICE_LOOKBACK_DAYS
from folio.analysis.window import Window
from folio.data.price_fetcher import load_price_cache, populate_store, unique_symbols
from folio.data.store import TimeSeriesStore
from portfolio.basket.manager import import_csv, load_basket, save_basket
from portfolio.report import analyze_basket, generate_basket_report


def _load_offline(store: TimeSeriesStore, symbols):
    """只读 CSV 缓存 (含基准)，缺失的代码记为空序列"""
    for symbol in unique_symbols(symbols, BENCHMARK_SYMBOLS):
        store.upsert(symbol, load_price_cache(symbol) or [])


def main():
    parser = argparse.ArgumentParser(description="Folio Index 篮子分析")
    parser.add_argument("--basket", type=Path, help="篮子 JSON 路径 (默认 data/basket.json)")
    parser.add_argument("--csv", type=Path, help="从单列代码 CSV 导入 (等权)")
    parser.add_argument("--compare", type=str, help="对比代码，逗号分隔")
    parser.add_argument("--timeframe", type=str, default=DEFAULT_TIMEFRAME,
                        help="1M / 3M / 6M / YTD / 1Y 或自然日数")
    parser.add_argument("--correlation-timeframe", type=str, help="相关性窗口 (默认同 --timeframe)")
    parser.add_argument("--days", type=int, default=PRICE_LOOKBACK_DAYS, help="数据回看自然日")
    parser.add_argument("--offline", action="store_true", help="只用本地 CSV 缓存")
    parser.add_argument("--save", action="store_true", help="把导入/修改后的篮子写回 JSON")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')

    basket = import_csv(args.csv) if args.csv else load_basket(args.basket)
    if args.compare:
        for ticker in args.compare.split(","):
            basket.add_comparison(ticker)
    if not len(basket):
        print("篮子为空: 用 --csv 导入或编辑 data/basket.json")
        return
    if args.save:
        save_basket(basket, args.basket)

    store = TimeSeriesStore()
    symbols = basket.tickers + basket.comparisons
    if args.offline:
        _load_offline(store, symbols)
    else:
        populate_store(store, symbols, days=args.days)

    window = Window.from_timeframe(args.timeframe)
    corr_window = Window.from_timeframe(args.correlation_timeframe) if args.correlation_timeframe else None

    analysis = analyze_basket(basket, store, window, correlation_window=corr_window)
    print(generate_basket_report(basket, analysis))


if __name__ == "__main__":
    main()
