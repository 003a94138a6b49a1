"""Tests for portfolio/report.py — end-to-end basket analysis and markdown."""
import sys
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from folio.analysis.window import Window
from folio.data.schema import DailyBar
from folio.data.store import TimeSeriesStore
from portfolio.basket import Basket, PortfolioEntry
from portfolio.report import analyze_basket, generate_basket_report

DAYS = pd.bdate_range("2025-01-02", periods=30)
FULL = Window.between(DAYS[0], DAYS[-1])


def _bars(seed):
    closes = 100 * np.exp(np.cumsum(np.random.default_rng(seed).normal(0, 0.01, len(DAYS))))
    return [DailyBar(d.date(), c, c, c, c) for d, c in zip(DAYS, closes)]


@pytest.fixture
def store():
    return TimeSeriesStore({
        "AAPL": _bars(1),
        "MSFT": _bars(2),
        "SPY": _bars(3),
        "QQQ": _bars(4),
    })


@pytest.fixture
def basket():
    return Basket([PortfolioEntry("AAPL", 60), PortfolioEntry("MSFT", 40)], comparisons=["SPY"])


class TestAnalyzeBasket:
    def test_keys_and_index(self, basket, store):
        analysis = analyze_basket(basket, store, FULL)

        assert set(analysis) == {
            "index", "window", "summary", "moving_averages", "comparisons", "relative", "correlations",
        }
        assert analysis["index"].iloc[0] == 100.0
        assert len(analysis["index"]) == len(DAYS)
        assert analysis["summary"]["trading_days"] == len(DAYS)
        assert set(analysis["summary"]["tickers"]) == {"AAPL", "MSFT"}

    def test_comparison_overlay_starts_at_index(self, basket, store):
        analysis = analyze_basket(basket, store, FULL)
        assert list(analysis["comparisons"]) == ["SPY"]
        assert analysis["comparisons"]["SPY"].iloc[0] == pytest.approx(100.0)
        assert analysis["relative"]["SPY"]["trading_days"] == len(DAYS)

    def test_relative_covers_benchmarks_and_comparisons(self, store):
        basket = Basket([PortfolioEntry("AAPL", 100)], comparisons=["MSFT"])
        relative = analyze_basket(basket, store, FULL)["relative"]

        assert list(relative) == ["SPY", "QQQ", "MSFT"]
        assert relative["SPY"]["name"] == "S&P 500 ETF"
        assert relative["QQQ"]["trading_days"] == len(DAYS)
        assert relative["MSFT"]["trading_days"] == len(DAYS)

        report = generate_basket_report(basket, analyze_basket(basket, store, FULL))
        assert "| QQQ |" in report

    def test_correlations_cover_basket_and_benchmarks(self, basket, store):
        correlations = analyze_basket(basket, store, FULL)["correlations"]
        assert {r.ticker for r in correlations} == {"AAPL", "MSFT", "SPY", "QQQ"}
        coefficients = [r.coefficient for r in correlations]
        assert coefficients == sorted(coefficients, reverse=True)

    def test_moving_averages_clipped(self, basket, store):
        window = Window.between(DAYS[20], DAYS[-1])
        smas = analyze_basket(basket, store, window)["moving_averages"]
        # 20-day lookback is satisfied from day 19, so every windowed day has a value
        assert len(smas[20]) == 10
        assert smas[50].empty

    def test_invalid_policy(self, basket, store):
        with pytest.raises(ValueError):
            analyze_basket(basket, store, FULL, zero_weight_policy="skip")


class TestGenerateReport:
    def test_sections(self, basket, store):
        report = generate_basket_report(basket, analyze_basket(basket, store, FULL))

        assert report.startswith("# Basket Report")
        for heading in ["## Index", "## Positions", "## Comparisons", "## Correlation"]:
            assert heading in report
        assert "| AAPL | 60.0% |" in report
        assert "SMA50** (last): —" in report

    def test_empty_basket(self, store):
        empty = Basket()
        report = generate_basket_report(empty, analyze_basket(empty, store, FULL))
        assert report == "# Basket Report\n\nNo positions in basket."

    def test_no_data(self, store):
        basket = Basket([PortfolioEntry("GHOST", 100)])
        analysis = analyze_basket(basket, store, FULL)

        assert analysis["index"].empty
        assert analysis["correlations"] == []
        assert "No index could be built" in generate_basket_report(basket, analysis)
