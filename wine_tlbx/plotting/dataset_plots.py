"""Dataset visualization functions."""

from collections.abc import Sequence

import matplotlib.pyplot as plt
import seaborn as sns
from matplotlib.figure import Figure

from wine_tlbx.data.base_dataset import BaseDataset
from wine_tlbx.data.wine_columns import WINE_TYPE_COL
from wine_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


def plot_standardization_comparison(
    dataset: BaseDataset,
    figsize: tuple[int, int] = (16, 9),
) -> Figure:
    """Boxplots of the raw vs standardized columns.

    Args:
        dataset: Dataset instance with data to visualize
        figsize: Figure size (width, height)

    Returns:
        matplotlib Figure object
    """
    numeric_cols = dataset.numeric_cols

    fig, axs = plt.subplots(2, 1, figsize=figsize)

    sns.boxplot(data=dataset.df[numeric_cols], ax=axs[0], fliersize=2)
    axs[0].tick_params(axis="x", rotation=45)
    axs[0].set_title("Raw")

    sns.boxplot(data=dataset.df_standardized[numeric_cols], ax=axs[1], fliersize=2)
    axs[1].tick_params(axis="x", rotation=45)
    axs[1].set_title("Standardized")

    fig.suptitle(f"Standardization ({dataset.label or 'data'})")
    fig.tight_layout()
    return fig


def plot_scatter_matrix(
    dataset: BaseDataset,
    columns: Sequence[str] | None = None,
    sample: int | None = 1000,
    random_state: int = 0,
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Pairwise scatter matrix via [:func:`seaborn.pairplot`](https://seaborn.pydata.org/generated/seaborn.pairplot.html).

    Merged red+white tables are coloured by ``wine_type``. Large tables are
    subsampled to ``sample`` rows to keep the figure responsive.
    """
    df = dataset.df
    cols = list(columns or dataset.feature_columns(include_target=True))
    hue = WINE_TYPE_COL if WINE_TYPE_COL in df.columns else None
    if sample is not None and len(df) > sample:
        df = df.sample(n=sample, random_state=random_state)

    grid = sns.pairplot(
        df[cols + ([hue] if hue else [])],
        hue=hue,
        palette=cfg.wine_palette if hue else None,
        corner=True,
        plot_kws={"s": 8, "alpha": 0.5, "linewidth": 0},
        diag_kind="hist",
    )
    grid.figure.suptitle(f"Scatter matrix ({dataset.label or 'data'})", y=1.01)
    return grid.figure


def plot_quality_distribution(
    datasets: Sequence[BaseDataset],
    figsize: tuple[int, int] = (8, 4),
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Share of each quality score per dataset, side by side."""
    fig, ax = plt.subplots(figsize=figsize)
    width = 0.8 / max(len(datasets), 1)
    for i, ds in enumerate(datasets):
        shares = ds.df[ds.Col.TARGET].value_counts(normalize=True).sort_index()
        offset = (i - (len(datasets) - 1) / 2) * width
        ax.bar(shares.index + offset, shares.to_numpy(), width=width, label=ds.label, color=cfg.wine_color(ds.label))
    ax.set_xlabel("Quality score")
    ax.set_ylabel("Share of wines")
    ax.legend()
    fig.tight_layout()
    return fig
