"""PCA visualization functions."""

from collections.abc import Sequence
from typing import Literal

import matplotlib.pyplot as plt
import numpy as np
import plotly.graph_objects as go
import seaborn as sns
from matplotlib.figure import Figure

from wine_tlbx.analysis.pca_analyzer import PCAResult
from wine_tlbx.analysis.structure import StructureResult
from wine_tlbx.data.wine_columns import WINE_TYPE_COL
from wine_tlbx.data.wine_columns import WineColumn as Col
from wine_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG, PlottingConfig


def _as_pca(result: PCAResult | StructureResult) -> PCAResult:
    return result.pca if isinstance(result, StructureResult) else result


def _check_pcs(available: Sequence[str], pcs: Sequence[str]) -> list[str]:
    missing = [pc for pc in pcs if pc not in available]
    if missing:
        raise ValueError(f"Requested components {missing} not available. Available: {list(available)}")
    return list(pcs)


def plot_explained_variance(
    result: PCAResult | StructureResult,
    figsize: tuple[int, int] = (10, 6),
    bar: Literal["explained_ratio", "variance"] = "variance",
) -> Figure:
    """Scree plot: per-component variance as bars with the cumulative ratio as a line.

    Combines [:func:`seaborn.barplot`](https://seaborn.pydata.org/generated/seaborn.barplot.html) and
    [:func:`seaborn.lineplot`](https://seaborn.pydata.org/generated/seaborn.lineplot.html).
    """
    explained = _as_pca(result).explained_variance
    x = np.arange(len(explained))

    fig, ax1 = plt.subplots(figsize=figsize)
    sns.barplot(x=x, y=explained[bar].to_numpy(), ax=ax1, color="skyblue")
    ax1.set_xlabel("Principal Component")
    ax1.set_ylabel(bar.replace("_", " ").title(), color="blue")
    ax1.tick_params(axis="y", labelcolor="blue")

    ax2 = ax1.twinx()
    ax2.plot(x, explained["cumulative_ratio"].to_numpy(), marker="o", color="red")
    ax2.set_ylabel("Cumulative Variance Explained", color="red")
    ax2.set_ylim(0, 1.05)
    ax2.tick_params(axis="y", labelcolor="red")

    ax1.set_xticks(x)
    ax1.set_xticklabels(explained["PC"])
    ax1.set_title(f"PCA Explained Variance ({_as_pca(result).label or 'data'})")
    ax1.grid(True, alpha=0.2)
    fig.tight_layout()
    return fig


def plot_loadings_heatmap(
    result: PCAResult | StructureResult,
    n_components: int = 4,
    figsize: tuple[int, int] = (10, 6),
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Annotated heatmap of the loadings of the leading components."""
    loadings = _as_pca(result).loadings
    loadings = loadings.iloc[:, : min(n_components, loadings.shape[1])]
    fig, ax = plt.subplots(figsize=figsize)
    sns.heatmap(loadings, annot=True, fmt=".2f", cmap=cfg.diverging_cmap, center=0, vmin=-1, vmax=1, ax=ax)
    ax.set_title("PCA Loadings")
    fig.tight_layout()
    return fig


def plot_scores_by_type(
    result: StructureResult,
    pcs: Sequence[str] = ("PC1", "PC2"),
    hue: str = WINE_TYPE_COL,
    figsize: tuple[int, int] = (8, 6),
    alpha: float = 0.4,
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> Figure:
    """Scatter of two components coloured by ``wine_type`` (or by ``quality``)."""
    x, y = _check_pcs(result.scores.columns, pcs)
    palette = cfg.wine_palette if hue == WINE_TYPE_COL else "viridis"
    fig, ax = plt.subplots(figsize=figsize)
    sns.scatterplot(data=result.scores, x=x, y=y, hue=hue, palette=palette, alpha=alpha, s=12, linewidth=0, ax=ax)
    ax.axhline(0, color="grey", lw=0.5)
    ax.axvline(0, color="grey", lw=0.5)
    ax.set_title(f"PCA scores by {hue.replace('_', ' ')}")
    fig.tight_layout()
    return fig


def plot_scores_plotly(
    result: StructureResult,
    pcs: Sequence[str] = ("PC1", "PC2"),
    height: int = 650,
    width: int = 850,
    cfg: PlottingConfig = DEFAULT_PLOT_CFG,
) -> go.Figure:
    """Interactive 2D/3D scatter of the scores, one trace per wine type with quality on hover."""
    cols = _check_pcs(result.scores.columns, pcs)
    if len(cols) not in (2, 3):
        raise ValueError("pcs must name 2 or 3 components")
    scatter = go.Scatter if len(cols) == 2 else go.Scatter3d

    fig = go.Figure()
    for wine_type, group in result.scores.groupby(WINE_TYPE_COL, observed=True):
        coords = dict(zip(("x", "y", "z"), (group[c] for c in cols), strict=False))
        fig.add_trace(
            scatter(
                **coords,
                mode="markers",
                name=str(wine_type),
                marker=dict(color=cfg.wine_color(wine_type), size=5 if len(cols) == 2 else 3, opacity=0.6),
                customdata=group[[Col.QUALITY.value]].to_numpy(),
                hovertemplate="quality: %{customdata[0]}<extra>" + str(wine_type) + "</extra>",
            ),
        )
    if len(cols) == 2:
        fig.update_xaxes(title=cols[0])
        fig.update_yaxes(title=cols[1])
    else:
        fig.update_layout(scene=dict(xaxis_title=cols[0], yaxis_title=cols[1], zaxis_title=cols[2]))
    fig.update_layout(title="PCA scores of red and white wines", height=height, width=width, template=cfg.plotly_template)
    return fig
