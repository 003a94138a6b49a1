"""
量价数据更新入口
用法:
    python scripts/update_data.py                          # 篮子 + 对比 + 基准
    python scripts/update_data.py --symbols AAPL,NVDA      # 指定代码
    python scripts/update_data.py --days 730 --basket my.json
"""
import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path

# 添加项目根目录到 path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config.settings import LOG_LEVEL, PRICE_LOOKBACK_DAYS
from folio.data.price_fetcher import populate_store
from folio.data.store import TimeSeriesStore
from portfolio.basket.manager import load_basket


def main():
    parser = argparse.ArgumentParser(description="Folio Index 量价数据更新")
    parser.add_argument("--symbols", type=str, help="指定股票代码，逗号分隔")
    parser.add_argument("--basket", type=Path, help="篮子 JSON 路径 (默认 data/basket.json)")
    parser.add_argument("--days", type=int, default=PRICE_LOOKBACK_DAYS, help="回看自然日")
    args = parser.parse_args()

    logging.basicConfig(level=LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(message)s')

    print(f"\n{'='*60}")
    print(f"Folio Index 数据更新")
    print(f"时间: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"{'='*60}\n")

    if args.symbols:
        symbols = [s.strip().upper() for s in args.symbols.split(",")]
    else:
        basket = load_basket(args.basket)
        symbols = basket.tickers + basket.comparisons
    print(f"代码 (含基准): {symbols}\n")

    # 强制走 API，结果写回 CSV 缓存
    result = populate_store(TimeSeriesStore(), symbols, days=args.days, use_cache=False)
    print(f"\n✅ 成功: {len(result['success'])}")
    if result['failed']:
        print(f"❌ 失败: {result['failed']}")

    print(f"\n{'='*60}")
    print("数据更新完成!")
    print(f"{'='*60}\n")


if __name__ == "__main__":
    main()
