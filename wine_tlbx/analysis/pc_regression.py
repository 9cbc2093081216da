"""Subset selection and resampling on principal-component scores instead of raw predictors.

The principal components of one colour's standardized predictors are
uncorrelated, so the greedy and exhaustive searches usually agree on them.
Components with little variance may still carry signal for ``quality``;
selection decides, not the variance ranking.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from wine_tlbx.data.views import DatasetView
from wine_tlbx.data.wine_dataset import WineDataset

from .pca_analyzer import PCAResult
from .resampling import ResamplingEvaluator, ResamplingResult
from .subset_selection import STRATEGIES, Strategy, SubsetSelectionResult, SubsetSelector


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PCRegressionResult:
    """Outputs of principal-component regression for one colour."""

    pca: PCAResult
    selection: SubsetSelectionResult
    resampling: ResamplingResult | None = None


def _pc_view(dataset: WineDataset, n_components: int | None) -> tuple[DatasetView, PCAResult]:
    pca = dataset.make_pca_analyzer(standardized=True, exclude_target=True).fit(n_components).result()
    target = dataset.Col.TARGET.value
    frame = pca.scores.assign(**{target: dataset.df_standardized[target]})
    pcs = pca.scores.columns.tolist()
    view = DatasetView(
        df=frame,
        pretty_by_col={**{pc: pc for pc in pcs}, target: dataset.get_pretty_name(target)},
        numeric_cols=pcs,
        target_col=target,
        is_standardized=True,
        label=f"{dataset.label} PCs",
    )
    return view, pca


def pc_regression_view(dataset: WineDataset, n_components: int | None = None) -> DatasetView:
    """View whose predictors are the PC scores of ``dataset`` and whose target is its standardized ``quality``."""
    return _pc_view(dataset, n_components)[0]


def run_pc_regression(
    dataset: WineDataset,
    *,
    n_components: int | None = None,
    strategies: Sequence[Strategy] = STRATEGIES,
    n_trials: int = 30,
    random_state: int | np.random.Generator | None = None,
) -> PCRegressionResult:
    """Run subset selection and, unless ``n_trials`` is 0, resampled evaluation on the PC scores."""
    view, pca = _pc_view(dataset, n_components)
    logger.info("PC regression on %s with %d components", dataset.label, pca.n_components)
    selection = SubsetSelector(view).fit(strategies=strategies).result()
    resampling = None
    if n_trials > 0:
        resampling = (
            ResamplingEvaluator(view).fit(n_trials=n_trials, strategies=strategies, random_state=random_state).result()
        )
    return PCRegressionResult(pca=pca, selection=selection, resampling=resampling)
