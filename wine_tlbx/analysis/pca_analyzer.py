"""Principal component analysis of the physicochemical predictors."""

from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.decomposition import PCA

from wine_tlbx.data.views import DatasetView

from .base_analyser import BaseAnalyser


def _pc_names(n: int) -> list[str]:
    return [f"PC{i}" for i in range(1, n + 1)]


@dataclass(frozen=True)
class PCAResult:
    """PCA outputs packaged for plotting and reporting.

    Attributes:
        scores: Observation coordinates on the components; columns ``PC1..PCk``, same index as the input.
        loadings: Unit-length component directions; index = predictor names, columns ``PC1..PCk``.
            Column ``PCi`` is the eigenvector of the predictor covariance matrix with the i-th largest
            eigenvalue, so the loading columns are orthonormal. Signs are arbitrary.
        explained_variance: Columns ``PC``, ``variance``, ``explained_ratio``, ``cumulative_ratio``;
            ``variance`` holds the eigenvalues in descending order.
        top_features_per_pc: Predictors ranked by absolute loading within each component.
        label: Name of the data the PCA was fit on.
    """

    scores: pd.DataFrame
    loadings: pd.DataFrame
    explained_variance: pd.DataFrame
    top_features_per_pc: dict[str, pd.Index]
    label: str | None = None

    @property
    def n_components(self) -> int:
        """Number of fitted components."""
        return self.loadings.shape[1]

    def components_for(self, cumulative_ratio: float) -> int:
        """Smallest number of leading components explaining at least ``cumulative_ratio`` of the variance."""
        reached = self.explained_variance["cumulative_ratio"].to_numpy() >= cumulative_ratio - 1e-12
        return int(np.argmax(reached)) + 1 if reached.any() else self.n_components

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_explained_variance(self, **kwargs: object):
        """Scree plot with cumulative curve."""
        from wine_tlbx.plotting.pca_plots import plot_explained_variance  # noqa: PLC0415

        return plot_explained_variance(self, **kwargs)

    def plot_loadings_heatmap(self, **kwargs: object):
        """Heatmap of the leading loadings."""
        from wine_tlbx.plotting.pca_plots import plot_loadings_heatmap  # noqa: PLC0415

        return plot_loadings_heatmap(self, **kwargs)


class PCAAnalyzer(BaseAnalyser):
    """Analyzer for Principal Component Analysis (PCA).

    Example:
        >>> from wine_tlbx.data import WineColor, WineDataset
        >>> pca = WineDataset.from_csv(WineColor.RED).make_pca_analyzer().fit().result()
        >>> pca.explained_variance.head()
    """

    def __init__(self, view: DatasetView) -> None:
        """Initialize the PCA analyzer."""
        self._view = view
        self._pca_model: PCA | None = None
        self._feature_names: list[str] = []

    def fit(self, n_components: int | None = None) -> "PCAAnalyzer":
        r"""Fit :class:`sklearn.decomposition.PCA` on the view's predictors.

        The predictors are projected onto an orthonormal basis of maximal
        variance: the eigenvectors of :math:`\mathrm{Cov}(X)` ordered by
        descending eigenvalue. The target column, if present, is never used.
        """
        features = self._view.features
        if features.empty:
            raise ValueError("No predictor columns to fit PCA on.")

        self._feature_names = features.columns.tolist()
        self._pca_model = PCA(n_components=n_components)
        self._pca_model.fit(features)
        return self

    @property
    def model(self) -> PCA:
        """Return the fitted scikit-learn PCA model."""
        if self._pca_model is None:
            raise ValueError("PCA model not fitted. Call fit() first.")
        return self._pca_model

    def transform(self, n_components: int | None = None) -> pd.DataFrame:
        """Project the view's observations into principal-component space."""
        transformed = self.model.transform(self._view.features.loc[:, self._feature_names])
        if n_components is not None:
            transformed = transformed[:, :n_components]
        return pd.DataFrame(transformed, columns=_pc_names(transformed.shape[1]), index=self._view.df.index)

    def get_loading_vectors(self) -> pd.DataFrame:
        """Return the loading matrix (predictors x components)."""
        return pd.DataFrame(
            self.model.components_.T,
            index=self._feature_names,
            columns=_pc_names(self.model.n_components_),
        )

    def get_explained_variance(self) -> pd.DataFrame:
        """Summarize component-wise variance contributions and cumulative totals."""
        model = self.model
        return pd.DataFrame(
            {
                "PC": _pc_names(model.n_components_),
                "variance": model.explained_variance_,
                "explained_ratio": model.explained_variance_ratio_,
                "cumulative_ratio": model.explained_variance_ratio_.cumsum(),
            },
        )

    def check_orthonormal(self, atol: float = 1e-8) -> bool:
        """Return True if the loading columns have unit length and are mutually orthogonal."""
        loadings = self.model.components_
        gram = loadings @ loadings.T
        return bool(np.allclose(gram, np.eye(gram.shape[0]), atol=atol))

    def result(self) -> PCAResult:
        """Collect scores, loadings and variance diagnostics."""
        loadings = self.get_loading_vectors()
        return PCAResult(
            scores=self.transform(),
            loadings=loadings,
            explained_variance=self.get_explained_variance(),
            top_features_per_pc={pc: loadings[pc].abs().sort_values(ascending=False).index for pc in loadings},
            label=self._view.label,
        )
