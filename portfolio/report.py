"""
Basket report — run every engine for one window and render markdown.

analyze_basket() is the one place the engines are wired together. It
takes a snapshot of the store first, so a caller refreshing prices in the
background cannot change the data under a running analysis.
"""
import logging
from typing import Optional

from config.settings import CORRELATION_TOP_N, SMA_PERIODS, ZERO_WEIGHT_POLICY
from folio.analysis.correlation import CorrelationEngine, bottom, candidate_universe, top
from folio.analysis.statistics import StatisticsEngine
from folio.analysis.window import Window
from folio.data.store import TimeSeriesStore
from portfolio.basket.manager import Basket
from portfolio.benchmark.engine import ComparisonNormalizer
from portfolio.index.builder import PortfolioIndexBuilder

logger = logging.getLogger(__name__)


def analyze_basket(
    basket: Basket,
    store: TimeSeriesStore,
    window: Window,
    correlation_window: Optional[Window] = None,
    zero_weight_policy: str = ZERO_WEIGHT_POLICY,
) -> dict:
    """
    Full analysis of one basket.

    Returns:
        {
            "index": pd.Series,                  # full history
            "window": Window,
            "summary": dict,                     # StatisticsEngine.summary
            "moving_averages": {period: pd.Series},   # clipped to window
            "comparisons": {ticker: pd.Series},  # normalized, clipped
            "relative": {ticker: dict},          # benchmarks + comparisons
            "correlations": [CorrelationResult], # ranked, descending
        }
    """
    snapshot = store.snapshot()
    index = PortfolioIndexBuilder(snapshot, zero_weight_policy=zero_weight_policy).build_series(basket)
    stats = StatisticsEngine(snapshot)
    normalizer = ComparisonNormalizer(snapshot)

    comparisons = normalizer.normalize_all(index, basket.comparisons, window)
    candidates = candidate_universe(basket.tickers, basket.comparisons)
    correlations = CorrelationEngine(snapshot).rank(index, candidates, correlation_window or window)

    logger.info(f"Analyzed {len(basket)} positions: {len(index)} index points, "
                f"{len(comparisons)} overlays, {len(correlations)} correlations")

    return {
        "index": index,
        "window": window,
        "summary": stats.summary(index, window, basket.tickers),
        "moving_averages": stats.moving_averages(index, window, SMA_PERIODS),
        "comparisons": comparisons,
        "relative": normalizer.compare_all_benchmarks(index, window, extra=basket.comparisons),
        "correlations": correlations,
    }


def _fmt_pct(value) -> str:
    return f"{value:+.2f}%" if value is not None else "—"


def generate_basket_report(basket: Basket, analysis: dict, top_n: int = CORRELATION_TOP_N) -> str:
    """Markdown summary of analyze_basket() output."""
    if not len(basket):
        return "# Basket Report\n\nNo positions in basket."

    summary = analysis["summary"]
    window = analysis["window"]

    lines = []
    lines.append("# Basket Report")
    lines.append("")
    lines.append(f"**Window**: {window.start} → {window.end} | "
                 f"**Trading days**: {summary['trading_days']}")
    lines.append("")

    if analysis["index"].empty:
        lines.append("No index could be built: no ticker has two consecutive closes.")
        return "\n".join(lines)

    lines.append("## Index")
    lines.append("")
    lines.append(f"- **Start**: {summary['start_value']} ({summary['start']})")
    lines.append(f"- **End**: {summary['end_value']} ({summary['end']})")
    lines.append(f"- **Return**: {_fmt_pct(summary['return_pct'])}")
    max_dd = summary["max_drawdown_pct"]
    lines.append(f"- **Max drawdown**: {f'{max_dd:.2f}%' if max_dd is not None else '—'}")
    for period, sma in analysis["moving_averages"].items():
        last = f"{sma.iloc[-1]:.2f}" if not sma.empty else "—"
        lines.append(f"- **SMA{period}** (last): {last}")
    lines.append("")

    lines.append("## Positions")
    lines.append("")
    lines.append("| Ticker | Weight | Return |")
    lines.append("|--------|-------:|-------:|")
    for entry in basket:
        lines.append(f"| {entry.ticker} | {entry.weight:.1f}% | "
                     f"{_fmt_pct(summary['tickers'].get(entry.ticker))} |")
    lines.append("")

    if analysis["relative"]:
        lines.append("## Comparisons")
        lines.append("")
        lines.append("| Ticker | Portfolio | Comparison | Active | Days |")
        lines.append("|--------|----------:|-----------:|-------:|-----:|")
        for ticker, rel in analysis["relative"].items():
            if "error" in rel:
                continue
            lines.append(
                f"| {ticker} | {_fmt_pct(rel['cumulative_portfolio'])} | "
                f"{_fmt_pct(rel['cumulative_benchmark'])} | "
                f"{_fmt_pct(rel['active_return'])} | {rel['trading_days']} |"
            )
        lines.append("")

    correlations = analysis["correlations"]
    if correlations:
        lines.append("## Correlation")
        lines.append("")
        lines.append("| Ticker | r | Obs |")
        lines.append("|--------|--:|----:|")
        shown = top(correlations, top_n)
        tail = [r for r in bottom(correlations, top_n) if r not in shown]
        for r in shown + tail:
            lines.append(f"| {r.ticker} | {r.coefficient:+.3f} | {r.observations} |")
        lines.append("")

    return "\n".join(lines)
