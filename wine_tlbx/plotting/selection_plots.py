"""Subset-selection visualization functions."""

from collections.abc import Sequence

import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.figure import Figure

from wine_tlbx.analysis.subset_selection import SELECTION_METRICS, SubsetSelectionResult
from wine_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


_METRIC_LABELS = {
    "r2": "R²",
    "rss": "RSS",
    "adj_r2": "Adjusted R²",
    "cp": "Mallows' Cp",
    "bic": "BIC",
}


def plot_selection_metrics(
    result: SubsetSelectionResult,
    metrics: Sequence[str] = SELECTION_METRICS,
    figsize: tuple[int, int] | None = None,
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Plot each fit metric against model size, one line per strategy.

    The optimum of the penalized criteria (max adjusted R², min Cp / BIC) is
    marked per strategy.
    """
    fig, axes = plt.subplots(1, len(metrics), figsize=figsize or (4 * len(metrics), 4), squeeze=False)
    for ax, metric in zip(axes[0], metrics, strict=True):
        table = result.metric_table(metric)
        for strategy in table.columns:
            color = cfg.strategy_palette.get(strategy)
            ax.plot(table.index, table[strategy], marker="o", label=strategy, color=color)
            if metric in {"adj_r2", "cp", "bic"}:
                best = result.best_size(strategy, metric)
                ax.scatter([best], [table.loc[best, strategy]], s=120, facecolors="none", edgecolors=color, lw=2)
        ax.set_title(_METRIC_LABELS.get(metric, metric))
        ax.set_xlabel("Number of predictors")
        ax.set_xticks(table.index)
        ax.grid(True, alpha=0.3)
    axes[0][0].legend()
    fig.suptitle(f"Subset selection ({result.label or 'data'})")
    fig.tight_layout()
    return fig


def plot_membership_heatmaps(
    result: SubsetSelectionResult,
    strategies: Sequence[str] | None = None,
    figsize: tuple[int, int] | None = None,
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Heatmap per strategy: row ``k`` marks the predictors in the best size-``k`` model."""
    strategies = list(strategies or result.membership)
    fig, axes = plt.subplots(1, len(strategies), figsize=figsize or (6 * len(strategies), 5), squeeze=False)
    for ax, strategy in zip(axes[0], strategies, strict=True):
        sns.heatmap(
            result.membership[strategy].astype(int),
            cmap=cfg.heatmap_cmap,
            cbar=False,
            linewidths=0.5,
            linecolor="white",
            ax=ax,
        )
        ax.set_title(strategy)
        ax.set_xlabel("")
        ax.tick_params(axis="x", rotation=60)
    fig.suptitle(f"Variable membership by model size ({result.label or 'data'})")
    fig.tight_layout()
    return fig
