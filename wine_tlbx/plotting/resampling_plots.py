"""Visualization of repeated train/test evaluations."""

from collections.abc import Sequence

import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.figure import Figure

from wine_tlbx.analysis.regularization import RegularizedResamplingResult
from wine_tlbx.analysis.resampling import ResamplingResult
from wine_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


def plot_mse_boxplots(
    result: ResamplingResult,
    strategies: Sequence[str] | None = None,
    figsize: tuple[int, int] | None = None,
    sharey: bool = True,
) -> Figure:
    """Boxplots of the train and test MSE per model size, one panel per strategy.

    Uses [:func:`seaborn.boxplot`](https://seaborn.pydata.org/generated/seaborn.boxplot.html) with
    ``hue="phase"``; the gap between the boxes is the optimism of the in-sample error.
    """
    strategies = list(strategies or result.membership_frequency)
    fig, axes = plt.subplots(
        1,
        len(strategies),
        figsize=figsize or (6 * len(strategies), 5),
        sharey=sharey,
        squeeze=False,
    )
    for ax, strategy in zip(axes[0], strategies, strict=True):
        data = result.trials.loc[result.trials["strategy"] == strategy]
        sns.boxplot(data=data, x="size", y="mse", hue="phase", ax=ax, fliersize=2)
        ax.set_title(strategy)
        ax.set_xlabel("Number of predictors")
        ax.set_ylabel("MSE")
    fig.suptitle(f"Train/test MSE over {result.n_trials} random splits ({result.label or 'data'})")
    fig.tight_layout()
    return fig


def plot_membership_frequency(
    result: ResamplingResult,
    strategies: Sequence[str] | None = None,
    figsize: tuple[int, int] | None = None,
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Annotated heatmaps of how often each predictor enters the size-``k`` model."""
    strategies = list(strategies or result.membership_frequency)
    fig, axes = plt.subplots(1, len(strategies), figsize=figsize or (7 * len(strategies), 5), squeeze=False)
    for ax, strategy in zip(axes[0], strategies, strict=True):
        sns.heatmap(
            result.membership_frequency[strategy],
            vmin=0,
            vmax=1,
            annot=True,
            fmt=".2f",
            annot_kws={"size": 7},
            cmap=cfg.heatmap_cmap,
            ax=ax,
        )
        ax.set_title(strategy)
        ax.tick_params(axis="x", rotation=60)
    fig.suptitle(f"Selection frequency over {result.n_trials} splits ({result.label or 'data'})")
    fig.tight_layout()
    return fig


def plot_regularized_test_mse(
    results: Sequence[RegularizedResamplingResult],
    figsize: tuple[int, int] = (6, 4),
) -> Figure:
    """Side-by-side boxplots of the held-out MSE of several penalties (e.g. ridge vs lasso)."""
    fig, ax = plt.subplots(figsize=figsize)
    ax.boxplot([r.test_mse.to_numpy() for r in results])
    ax.set_xticks(range(1, len(results) + 1), [r.penalty for r in results])
    ax.set_ylabel("Test MSE")
    ax.set_title("Held-out MSE at lambda 1-SE")
    ax.grid(True, axis="y", alpha=0.3)
    fig.tight_layout()
    return fig
