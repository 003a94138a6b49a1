"""Tests for portfolio/basket — PortfolioEntry validation, Basket CRUD, persistence."""
import json
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from folio.errors import InvalidWeightError
from portfolio.basket import Basket, PortfolioEntry, import_csv, load_basket, save_basket


class TestPortfolioEntry:
    def test_normalizes_ticker(self):
        entry = PortfolioEntry(" tsla ", 12.5)
        assert entry.ticker == "TSLA"
        assert entry.fraction == pytest.approx(0.125)

    @pytest.mark.parametrize("weight", [-1, float("nan"), float("inf"), "abc", None, True])
    def test_rejects_invalid_weight(self, weight):
        with pytest.raises(InvalidWeightError):
            PortfolioEntry("AAPL", weight)

    def test_invalid_weight_is_value_error(self):
        with pytest.raises(ValueError):
            PortfolioEntry("AAPL", -0.5)

    def test_numeric_string_accepted(self):
        assert PortfolioEntry("AAPL", "33.3").weight == pytest.approx(33.3)

    def test_blank_ticker_rejected(self):
        with pytest.raises(ValueError):
            PortfolioEntry("  ", 10)


class TestBasketCrud:
    def test_first_ticker_gets_full_weight(self):
        basket = Basket()
        basket.add_ticker("aapl")
        basket.add_ticker("MSFT")
        assert [(e.ticker, e.weight) for e in basket] == [("AAPL", 100.0), ("MSFT", 0.0)]

    def test_duplicate_ticker_ignored(self):
        basket = Basket()
        basket.add_ticker("AAPL")
        assert basket.add_ticker(" aapl ") is None
        assert len(basket) == 1

    def test_explicit_weight(self):
        basket = Basket()
        basket.add_ticker("AAPL", 60)
        basket.add_ticker("MSFT", 40)
        assert basket.total_weight == 100.0

    def test_remove_preserves_order(self):
        basket = Basket([PortfolioEntry(t, 10) for t in ["A", "B", "C"]])
        assert basket.remove_ticker("b")
        assert not basket.remove_ticker("ZZZ")
        assert basket.tickers == ["A", "C"]

    def test_set_weight(self):
        basket = Basket([PortfolioEntry("A", 10)])
        basket.set_weight("a", 55)
        assert basket.get("A").weight == 55.0

    def test_set_weight_validates(self):
        basket = Basket([PortfolioEntry("A", 10)])
        with pytest.raises(InvalidWeightError):
            basket.set_weight("A", -3)
        assert basket.get("A").weight == 10.0

    def test_set_weight_unknown_ticker(self):
        with pytest.raises(KeyError):
            Basket().set_weight("A", 10)

    def test_comparisons(self):
        basket = Basket()
        assert basket.add_comparison("spy")
        assert not basket.add_comparison("SPY")
        basket.add_comparison("qqq")
        assert basket.remove_comparison("SPY")
        assert basket.comparisons == ["QQQ"]

    def test_constructor_drops_duplicates(self):
        basket = Basket([PortfolioEntry("A", 10), PortfolioEntry("a", 20)])
        assert [(e.ticker, e.weight) for e in basket] == [("A", 10.0)]


class TestCsvImport:
    def test_equal_weights_and_header_skipped(self):
        text = "Ticker\naapl\n msft \n\nnvda,extra,columns\n"
        basket = Basket.from_csv_text(text)
        assert basket.tickers == ["AAPL", "MSFT", "NVDA"]
        assert all(e.weight == pytest.approx(100 / 3) for e in basket)

    def test_empty_csv(self):
        assert len(Basket.from_csv_text("TICKER\n\n")) == 0

    def test_import_file_with_bom(self, tmp_path):
        path = tmp_path / "tickers.csv"
        path.write_text("\ufeffTICKER\nSPY\nTLT\n", encoding="utf-8")
        basket = import_csv(path)
        assert basket.tickers == ["SPY", "TLT"]
        assert basket.total_weight == pytest.approx(100.0)


class TestPersistence:
    def test_save_and_load(self, tmp_path):
        path = tmp_path / "nested" / "basket.json"
        basket = Basket([PortfolioEntry("AAPL", 60), PortfolioEntry("MSFT", 40)], comparisons=["SPY"])
        save_basket(basket, path)

        data = json.loads(path.read_text())
        assert data["positions"][0] == {"ticker": "AAPL", "weight": 60.0}

        loaded = load_basket(path)
        assert loaded.to_dict() == basket.to_dict()

    def test_missing_file_is_empty_basket(self, tmp_path):
        assert len(load_basket(tmp_path / "nope.json")) == 0

    def test_load_rejects_invalid_weight(self, tmp_path):
        path = tmp_path / "basket.json"
        path.write_text(json.dumps({"positions": [{"ticker": "A", "weight": -5}]}))
        with pytest.raises(InvalidWeightError):
            load_basket(path)

    def test_default_path_from_settings(self, tmp_path, monkeypatch):
        import portfolio.basket.manager as manager
        monkeypatch.setattr(manager, "BASKET_FILE", tmp_path / "basket.json")

        save_basket(Basket([PortfolioEntry("X", 100)]))
        assert load_basket().tickers == ["X"]
