"""Smoke tests for the figure builders (Agg backend, synthetic data)."""

import matplotlib as mpl
import matplotlib.pyplot as plt
import plotly.graph_objects as go
import pytest
from matplotlib.figure import Figure

from wine_tlbx.analysis.regularization import RegularizedRegressionRunner
from wine_tlbx.analysis.resampling import ResamplingEvaluator
from wine_tlbx.analysis.structure import analyze_structure
from wine_tlbx.analysis.subset_selection import SubsetSelector
from wine_tlbx.data import WineDataset
from wine_tlbx.data.views import DatasetView
from wine_tlbx.plotting import (
    plot_quality_distribution,
    plot_regularized_test_mse,
    plot_scatter_matrix,
    plot_standardization_comparison,
)
from wine_tlbx.utils.plotting_config import PlottingConfig


@pytest.fixture(autouse=True)
def _close_figures():
    yield
    plt.close("all")


@pytest.fixture(scope="module")
def small_view(linear_view: DatasetView) -> DatasetView:
    """Four predictors keep the plots quick."""
    cols = ["x1", "x2", "x3", "x4"]
    return DatasetView(
        df=linear_view.df[[*cols, "y"]],
        pretty_by_col=linear_view.pretty_by_col,
        numeric_cols=cols,
        target_col="y",
        label="small",
    )


def test_selection_plots(small_view: DatasetView) -> None:
    """Metric curves and membership heatmaps build one panel per metric / strategy."""
    result = SubsetSelector(small_view).fit().result()
    metrics_fig = result.plot_metrics()
    membership_fig = result.plot_membership()
    assert isinstance(metrics_fig, Figure)
    assert len(metrics_fig.axes) == 5
    assert len(membership_fig.axes) == 3


def test_resampling_plots(small_view: DatasetView) -> None:
    """Boxplots and frequency heatmaps are built per strategy."""
    result = ResamplingEvaluator(small_view).fit(n_trials=2, strategies=("forward",), random_state=0).result()
    assert isinstance(result.plot_mse(), Figure)
    assert isinstance(result.plot_membership(), Figure)


def test_regularization_plots(small_view: DatasetView) -> None:
    """Path and CV figures draw one line per predictor plus the penalty markers."""
    runner = RegularizedRegressionRunner(small_view)
    path = runner.fit(penalty="lasso", n_lambdas=15, cv_folds=3, random_state=0).result()
    fig = path.plot_path()
    assert len(fig.axes[0].get_lines()) >= 4
    assert isinstance(path.plot_cv(), Figure)
    resampled = runner.resample(penalty="lasso", n_trials=2, n_lambdas=10, cv_folds=3, random_state=0)
    assert isinstance(plot_regularized_test_mse([resampled]), Figure)


def test_pca_plots(red_dataset: WineDataset, white_dataset: WineDataset) -> None:
    """Scree, loadings, static and interactive score plots."""
    structure = analyze_structure(red_dataset, white_dataset)
    assert isinstance(structure.pca.plot_explained_variance(), Figure)
    assert isinstance(structure.pca.plot_loadings_heatmap(n_components=3), Figure)
    assert isinstance(structure.plot_scores(), Figure)
    assert isinstance(structure.plot_scores(hue="quality"), Figure)

    interactive = structure.plot_scores_interactive()
    assert isinstance(interactive, go.Figure)
    assert {trace.name for trace in interactive.data} == {"red", "white"}
    assert len(structure.plot_scores_interactive(pcs=("PC1", "PC2", "PC3")).data) == 2
    with pytest.raises(ValueError):
        structure.plot_scores(pcs=("PC1", "PC42"))


def test_dataset_plots(red_dataset: WineDataset, white_dataset: WineDataset) -> None:
    """Dataset-level figures."""
    merged = WineDataset.concat(red_dataset, white_dataset)
    assert isinstance(plot_standardization_comparison(red_dataset), Figure)
    assert isinstance(plot_scatter_matrix(merged, columns=["alcohol", "density"], sample=100), Figure)
    assert isinstance(plot_quality_distribution([red_dataset, white_dataset]), Figure)


def test_plotting_config_restores_rcparams() -> None:
    """apply() is temporary; the previous rcParams come back afterwards."""
    before = mpl.rcParams["axes.titlesize"]
    cfg = PlottingConfig(title_size=31)
    with cfg.apply():
        assert mpl.rcParams["axes.titlesize"] == 31
    assert mpl.rcParams["axes.titlesize"] == before
    assert cfg.wine_color("red") == cfg.wine_palette["red"]
    assert cfg.wine_color("rosé") == "#7f7f7f"
