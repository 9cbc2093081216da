"""Tests for PCAAnalyzer."""

import numpy as np
import pandas as pd
import pytest

from wine_tlbx.analysis.pca_analyzer import PCAAnalyzer, PCAResult
from wine_tlbx.data import WineDataset
from wine_tlbx.data.views import DatasetView


class TestPCAAnalyzer:
    """Test PCAAnalyzer functionality."""

    @pytest.fixture
    def sample_view(self) -> DatasetView:
        """Data with a known variance structure and an outcome column that PCA must ignore."""
        rng = np.random.default_rng(42)
        n_samples = 200
        comp1 = rng.normal(0, 3, n_samples)
        comp2 = rng.normal(0, 1, n_samples)
        comp3 = rng.normal(0, 0.5, n_samples)
        data = pd.DataFrame(
            {
                "feature1": comp1 + 0.5 * comp2,
                "feature2": comp1 - 0.5 * comp2,
                "feature3": comp2 + 0.3 * comp3,
                "feature4": comp3,
                "quality": rng.integers(3, 9, n_samples).astype(float),
            },
        )
        return DatasetView(
            df=data,
            pretty_by_col={col: col.title() for col in data.columns},
            numeric_cols=["feature1", "feature2", "feature3", "feature4"],
            target_col="quality",
        )

    def test_fit_returns_self(self, sample_view: DatasetView) -> None:
        """fit() returns the analyzer for chaining."""
        analyzer = PCAAnalyzer(sample_view)
        assert analyzer.fit() is analyzer

    def test_transform_before_fit_raises_error(self, sample_view: DatasetView) -> None:
        """Using the model before fitting is an error."""
        with pytest.raises(ValueError, match=r"PCA model not fitted"):
            PCAAnalyzer(sample_view).transform()

    def test_target_is_excluded(self, sample_view: DatasetView) -> None:
        """Only the predictors enter the PCA."""
        result = PCAAnalyzer(sample_view).fit().result()
        assert result.loadings.index.tolist() == ["feature1", "feature2", "feature3", "feature4"]
        assert result.scores.columns.tolist() == ["PC1", "PC2", "PC3", "PC4"]

    def test_loadings_are_orthonormal(self, sample_view: DatasetView) -> None:
        """Loading vectors have unit length and are mutually orthogonal."""
        analyzer = PCAAnalyzer(sample_view).fit()
        assert analyzer.check_orthonormal()
        loadings = analyzer.result().loadings.to_numpy()
        np.testing.assert_allclose(loadings.T @ loadings, np.eye(4), atol=1e-10)

    def test_score_variances_non_increasing(self, sample_view: DatasetView) -> None:
        """Component variances are ordered and equal the score variances."""
        result = PCAAnalyzer(sample_view).fit().result()
        variance = result.explained_variance["variance"].to_numpy()
        assert np.all(np.diff(variance) <= 1e-12)
        np.testing.assert_allclose(result.scores.var(ddof=1).to_numpy(), variance, rtol=1e-8)

    def test_scores_uncorrelated(self, sample_view: DatasetView) -> None:
        """Scores on different components are uncorrelated."""
        corr = PCAAnalyzer(sample_view).fit().result().scores.corr().to_numpy()
        np.testing.assert_allclose(corr, np.eye(4), atol=1e-8)

    def test_cumulative_ratio_reaches_one(self, sample_view: DatasetView) -> None:
        """All components together explain the full variance."""
        result = PCAAnalyzer(sample_view).fit().result()
        assert result.explained_variance["cumulative_ratio"].iloc[-1] == pytest.approx(1.0)
        assert result.components_for(1.0) == 4
        assert result.components_for(0.5) == 1

    def test_n_components_limits_output(self, sample_view: DatasetView) -> None:
        """A reduced fit keeps the requested number of components."""
        result = PCAAnalyzer(sample_view).fit(n_components=2).result()
        assert isinstance(result, PCAResult)
        assert result.n_components == 2
        assert result.scores.shape == (200, 2)
        assert result.top_features_per_pc["PC1"][0] in {"feature1", "feature2"}

    def test_scores_keep_index(self, sample_view: DatasetView) -> None:
        """Scores are aligned with the input rows."""
        half = sample_view.take(np.arange(0, 200, 2))
        scores = PCAAnalyzer(half).fit().transform()
        assert scores.index.equals(half.df.index)


def test_dataset_factory_uses_standardized_predictors(red_dataset: WineDataset) -> None:
    """The factory fits PCA on the 11 standardized predictors (total variance ~ 11)."""
    result = red_dataset.make_pca_analyzer().fit().result()
    assert result.n_components == 11
    n = len(red_dataset.df)
    assert result.explained_variance["variance"].sum() == pytest.approx(11 * n / (n - 1))
