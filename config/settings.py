"""
Folio Index 配置
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent

# 自动加载 .env（API keys 等敏感配置）
load_dotenv(PROJECT_ROOT / ".env")

# 数据目录
DATA_DIR = PROJECT_ROOT / "data"
PRICE_DIR = DATA_DIR / "price"
BASKET_FILE = DATA_DIR / "basket.json"

# FMP API 配置 (从环境变量读取)
FMP_API_KEY = os.environ.get("FMP_API_KEY", "")
FMP_BASE_URL = "https://financialmodelingprep.com/stable"

# API 调用配置 (防限流)
API_CALL_INTERVAL = 2  # 秒，每次 API 调用间隔
API_RETRY_TIMES = 3
API_TIMEOUT = 30

# 量价数据回看天数 (自然日)
PRICE_LOOKBACK_DAYS = 365

# 缓存起始日允许晚于回看起点的天数 (周末/节假日)
CACHE_START_TOLERANCE_DAYS = 5

# 交易日按交易所时区归一
MARKET_TIMEZONE = "America/New_York"

# ============ Index ============

INDEX_BASE = 100.0

# 当日无有效权重时: "hold" 指数持平并输出该点, "gap" 持平但不输出该点
ZERO_WEIGHT_POLICY = os.environ.get("FOLIO_ZERO_WEIGHT_POLICY", "hold")

# Benchmark symbols (always included in price updates and correlation candidates)
BENCHMARK_SYMBOLS = ["SPY", "QQQ"]

# ============ Analysis ============

MIN_CORRELATION_OBSERVATIONS = 5
CORRELATION_TOP_N = 5

SMA_PERIODS = [20, 50]

# 展示窗口 (自然日); YTD 单独处理
TIMEFRAMES = {
    "1M": 30,
    "3M": 90,
    "6M": 180,
    "1Y": 365,
}
DEFAULT_TIMEFRAME = "3M"

LOG_LEVEL = os.environ.get("FOLIO_LOG_LEVEL", "INFO")
