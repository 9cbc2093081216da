"""End-to-end analysis: the same procedure applied to the red and the white table, then the joint PCA."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from wine_tlbx.analysis.pc_regression import PCRegressionResult, run_pc_regression
from wine_tlbx.analysis.regularization import RegularizationPathResult, RegularizedResamplingResult
from wine_tlbx.analysis.resampling import ResamplingResult
from wine_tlbx.analysis.structure import StructureResult, analyze_structure
from wine_tlbx.analysis.subset_selection import SubsetSelectionResult
from wine_tlbx.config import AnalysisConfig
from wine_tlbx.data.wine_columns import WineColor
from wine_tlbx.data.wine_dataset import WineDataset
from wine_tlbx.plotting import plot_quality_distribution, plot_regularized_test_mse, plot_scatter_matrix
from wine_tlbx.utils.plotting_config import DEFAULT_PLOT_CFG


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColorReport:
    """Every analysis of one wine colour."""

    color: WineColor
    dataset: WineDataset
    selection: SubsetSelectionResult
    resampling: ResamplingResult
    paths: dict[str, RegularizationPathResult] = field(default_factory=dict)
    regularized: dict[str, RegularizedResamplingResult] = field(default_factory=dict)
    pc_regression: PCRegressionResult | None = None


@dataclass(frozen=True)
class PipelineResult:
    """Per-colour reports plus the joint structure analysis."""

    reports: dict[WineColor, ColorReport]
    structure: StructureResult


def load_datasets(config: AnalysisConfig) -> dict[WineColor, WineDataset]:
    """Load and filter both colour tables."""
    return {
        WineColor.RED: WineDataset.from_csv(
            WineColor.RED,
            data_dir=config.data_dir,
            thresholds=config.thresholds.get(WineColor.RED),
        ),
        WineColor.WHITE: WineDataset.from_csv(
            WineColor.WHITE,
            data_dir=config.data_dir,
            thresholds=config.thresholds.get(WineColor.WHITE),
        ),
    }


def analyze_color(dataset: WineDataset, config: AnalysisConfig) -> ColorReport:
    """Run subset selection, resampling, ridge/lasso and PC regression on one colour."""
    rng = np.random.default_rng(config.random_state)
    logger.info("Analyzing %s wines (%d rows)", dataset.label, len(dataset.df))

    selection = dataset.make_subset_selector().fit(strategies=config.strategies).result()
    resampling = (
        dataset.make_resampling_evaluator()
        .fit(n_trials=config.n_trials, strategies=config.strategies, random_state=rng)
        .result()
    )

    runner = dataset.make_regularized_runner()
    grid = {"n_lambdas": config.n_lambdas, "lambda_min_ratio": config.lambda_min_ratio, "cv_folds": config.cv_folds}
    paths: dict[str, RegularizationPathResult] = {}
    regularized: dict[str, RegularizedResamplingResult] = {}
    for penalty in config.penalties:
        paths[penalty] = runner.fit(penalty=penalty, random_state=rng, **grid).result(penalty)
        regularized[penalty] = runner.resample(penalty=penalty, n_trials=config.n_trials, random_state=rng, **grid)

    pcr = None
    if config.run_pc_regression:
        pcr = run_pc_regression(dataset, strategies=config.strategies, n_trials=config.n_trials, random_state=rng)

    return ColorReport(
        color=dataset.color,
        dataset=dataset,
        selection=selection,
        resampling=resampling,
        paths=paths,
        regularized=regularized,
        pc_regression=pcr,
    )


def run_pipeline(config: AnalysisConfig, datasets: dict[WineColor, WineDataset] | None = None) -> PipelineResult:
    """Analyze each colour with :func:`analyze_color`, then run the joint PCA; optionally save figures."""
    datasets = load_datasets(config) if datasets is None else datasets
    reports = {color: analyze_color(dataset, config) for color, dataset in datasets.items()}
    structure = analyze_structure(datasets[WineColor.RED], datasets[WineColor.WHITE])
    result = PipelineResult(reports=reports, structure=structure)
    if config.output_dir is not None:
        save_figures(result, config.output_dir)
    return result


def _section(title: str, body: pd.DataFrame | pd.Series | str) -> str:
    text = body if isinstance(body, str) else body.to_string(float_format=lambda v: f"{v:.4g}")
    return f"--- {title}\n{text}\n"


def format_color_report(report: ColorReport) -> str:
    """Plain-text summary of one colour's analyses."""
    sel, res = report.selection, report.resampling
    parts = [f"===== {report.color} wine: {len(report.dataset.df)} rows =====\n"]
    parts.append(_section("BIC by model size", sel.metric_table("bic")))
    best = {
        strategy: {"bic_size": sel.best_size(strategy), "terms": ", ".join(sel.best_model(strategy).terms)}
        for strategy in sel.models
    }
    parts.append(_section("BIC-optimal models", pd.DataFrame(best).T))
    parts.append(_section(f"Mean test MSE over {res.n_trials} splits", res.mean_mse("test")))
    parts.append(
        _section("Lowest mean test MSE", pd.Series({s: res.best_size(s) for s in res.membership_frequency}, name="size")),
    )
    for penalty, path in report.paths.items():
        resampled = report.regularized[penalty]
        parts.append(_section(f"{penalty}: penalty choice", path.summary()))
        parts.append(_section(f"{penalty}: coefficients at lambda 1-SE", path.coef_1se))
        parts.append(_section(f"{penalty}: resampled test MSE", resampled.summary()))
        if penalty == "lasso":
            parts.append(_section("lasso: selection frequency", resampled.selection_frequency))
        else:
            parts.append(_section(f"{penalty}: mean |coefficient|", resampled.mean_abs_coefficient))
    if report.pc_regression is not None:
        pcr = report.pc_regression
        parts.append(_section("PC regression: BIC by model size", pcr.selection.metric_table("bic")))
        if pcr.resampling is not None:
            parts.append(_section("PC regression: mean test MSE", pcr.resampling.mean_mse("test")))
    return "\n".join(parts)


def format_structure_report(structure: StructureResult) -> str:
    """Plain-text summary of the joint red+white PCA."""
    return "\n".join(
        [
            "===== red + white: joint PCA =====\n",
            _section("Explained variance", structure.explained_variance.set_index("PC")),
            _section("Loadings (PC1-PC3)", structure.loadings.iloc[:, :3]),
            _section("Wine-type centroids", structure.type_centroids()),
            _section("Red vs white separation (Welch t-test)", structure.type_separation()),
        ],
    )


def save_figures(result: PipelineResult, output_dir: str | Path) -> list[Path]:
    """Write every report figure as PNG (the interactive PCA scatter as HTML) and return the paths.

    Figures are drawn under :data:`DEFAULT_PLOT_CFG`; the previous matplotlib style is restored afterwards.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written = []
    with DEFAULT_PLOT_CFG.apply():
        figures = {}
        for color, report in result.reports.items():
            figures[f"{color}_selection_metrics"] = report.selection.plot_metrics()
            figures[f"{color}_selection_membership"] = report.selection.plot_membership()
            figures[f"{color}_resampling_mse"] = report.resampling.plot_mse()
            figures[f"{color}_resampling_membership"] = report.resampling.plot_membership()
            for penalty, path in report.paths.items():
                figures[f"{color}_{penalty}_path"] = path.plot_path()
                figures[f"{color}_{penalty}_cv"] = path.plot_cv()
            if report.regularized:
                figures[f"{color}_regularized_test_mse"] = plot_regularized_test_mse(list(report.regularized.values()))
            if report.pc_regression is not None:
                figures[f"{color}_pcr_metrics"] = report.pc_regression.selection.plot_metrics()

        datasets = [report.dataset for report in result.reports.values()]
        figures["scatter_matrix"] = plot_scatter_matrix(WineDataset.concat(*datasets))
        figures["quality_distribution"] = plot_quality_distribution(datasets)
        figures["structure_scores"] = result.structure.plot_scores()
        figures["structure_scores_quality"] = result.structure.plot_scores(hue="quality")
        figures["structure_scree"] = result.structure.pca.plot_explained_variance()
        figures["structure_loadings"] = result.structure.pca.plot_loadings_heatmap()

        for name, fig in figures.items():
            path = out / f"{name}.png"
            fig.savefig(path, bbox_inches="tight")
            plt.close(fig)
            written.append(path)
        html = out / "structure_scores.html"
        result.structure.plot_scores_interactive().write_html(html)
        written.append(html)
    logger.info("Wrote %d figures to %s", len(written), out)
    return written
