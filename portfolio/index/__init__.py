"""
Index — 篮子合成 NAV 指数 (base 100)
"""
from portfolio.index.builder import (
    CalendarUnion,
    PortfolioIndexBuilder,
    forward_filled_closes,
    pairwise_returns,
)

__all__ = [
    "CalendarUnion",
    "PortfolioIndexBuilder",
    "forward_filled_closes",
    "pairwise_returns",
]
