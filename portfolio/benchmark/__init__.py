"""
Benchmark — comparison overlays rebased onto the portfolio index.

- ComparisonNormalizer: rebase comparison tickers to the index at window start
- relative_performance: cumulative/active return and drawdowns vs a comparison
"""
from portfolio.benchmark.engine import BENCHMARKS, ComparisonNormalizer

__all__ = ["BENCHMARKS", "ComparisonNormalizer"]
