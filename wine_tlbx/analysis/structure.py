"""Joint PCA of red and white wines.

Both tables are stacked, standardized over the combined rows, and projected
onto the principal components of the 11 predictors. The scores keep the
``wine_type`` tag and the raw ``quality`` so they can be coloured by either.
"""

import logging
from dataclasses import dataclass

import pandas as pd
from scipy import stats

from wine_tlbx.data.wine_columns import WINE_TYPE_COL
from wine_tlbx.data.wine_columns import WineColumn as Col
from wine_tlbx.data.wine_dataset import WineDataset

from .pca_analyzer import PCAResult


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StructureResult:
    """PCA of the merged red+white table.

    Attributes:
        scores: ``PC1..PCk`` plus ``wine_type`` and ``quality`` columns.
        loadings: Predictors x components.
        explained_variance: Per-component variance table (see :class:`PCAResult`).
        pca: The underlying :class:`PCAResult`.
    """

    scores: pd.DataFrame
    loadings: pd.DataFrame
    explained_variance: pd.DataFrame
    pca: PCAResult

    def type_centroids(self, n_components: int = 2) -> pd.DataFrame:
        """Mean score of each wine type on the leading components."""
        pcs = list(self.loadings.columns[:n_components])
        return self.scores.groupby(WINE_TYPE_COL, observed=True)[pcs].mean()

    def type_separation(self, n_components: int = 3) -> pd.DataFrame:
        """Welch t-test of the red vs white score means on each leading component.

        Uses :func:`scipy.stats.ttest_ind` with ``equal_var=False``.
        """
        groups = [g for _, g in self.scores.groupby(WINE_TYPE_COL, observed=True)]
        if len(groups) != 2:
            raise ValueError(f"Need exactly two wine types to compare, got {len(groups)}")
        rows = {}
        for pc in self.loadings.columns[:n_components]:
            test = stats.ttest_ind(groups[0][pc], groups[1][pc], equal_var=False)
            rows[pc] = {"t_stat": float(test.statistic), "p_value": float(test.pvalue)}
        return pd.DataFrame.from_dict(rows, orient="index")

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_scores(self, **kwargs: object):
        """Scatter of the first two components coloured by wine type."""
        from wine_tlbx.plotting.pca_plots import plot_scores_by_type  # noqa: PLC0415

        return plot_scores_by_type(self, **kwargs)

    def plot_scores_interactive(self, **kwargs: object):
        """Interactive plotly scatter of the scores."""
        from wine_tlbx.plotting.pca_plots import plot_scores_plotly  # noqa: PLC0415

        return plot_scores_plotly(self, **kwargs)


def analyze_structure(red: WineDataset, white: WineDataset) -> StructureResult:
    """Merge both colours, standardize the merged table and run PCA on the predictors."""
    merged = WineDataset.concat(red, white)
    analyzer = merged.make_pca_analyzer(standardized=True, exclude_target=True).fit()
    if not analyzer.check_orthonormal():
        logger.warning("PCA loadings of %s are not orthonormal within tolerance", merged.label)
    pca = analyzer.result()

    scores = pca.scores.assign(
        **{
            WINE_TYPE_COL: merged.df[WINE_TYPE_COL],
            Col.QUALITY.value: merged.df[Col.QUALITY],
        },
    )
    logger.info(
        "Joint PCA on %d rows: PC1+PC2 explain %.1f%% of the variance",
        len(scores),
        100 * pca.explained_variance["cumulative_ratio"].iloc[min(1, pca.n_components - 1)],
    )
    return StructureResult(
        scores=scores,
        loadings=pca.loadings,
        explained_variance=pca.explained_variance,
        pca=pca,
    )
