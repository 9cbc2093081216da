"""Tests for exhaustive / forward / backward subset selection."""

import numpy as np
import pandas as pd
import pytest

from wine_tlbx.analysis.ols_helper import check_design, residual_sum_of_squares
from wine_tlbx.analysis.subset_selection import (
    STRATEGIES,
    SubsetSelectionResult,
    SubsetSelector,
    search_subsets,
    select_subsets,
)
from wine_tlbx.data.views import DatasetView
from wine_tlbx.errors import DegenerateDataError, SingularModelError


@pytest.fixture(scope="module")
def selection(linear_view: DatasetView) -> SubsetSelectionResult:
    """All three strategies on the synthetic ``y = x1 + noise`` data."""
    return SubsetSelector(linear_view).fit().result()


class TestSubsetSelection:
    """Selection outcomes on data with a known single driver."""

    def test_exhaustive_size_one_picks_x1(self, selection: SubsetSelectionResult) -> None:
        """The best one-predictor model uses x1 with a coefficient close to 1."""
        best = selection.models["exhaustive"][0]
        assert best.terms == ["x1"]
        assert best.model.params["x1"] == pytest.approx(1.0, abs=0.05)

    @pytest.mark.parametrize("strategy", STRATEGIES)
    def test_rss_non_increasing_in_size(self, selection: SubsetSelectionResult, strategy: str) -> None:
        """In-sample RSS never grows when the model gets larger."""
        rss = selection.metric_table("rss")[strategy].to_numpy()
        assert np.all(np.diff(rss) <= 1e-9)

    def test_exhaustive_is_never_worse(self, selection: SubsetSelectionResult) -> None:
        """The exhaustive optimum bounds the greedy searches at every size."""
        rss = selection.metric_table("rss")
        assert (rss["exhaustive"] <= rss["forward"] + 1e-9).all()
        assert (rss["exhaustive"] <= rss["backward"] + 1e-9).all()

    @pytest.mark.parametrize("strategy", ["forward", "backward"])
    def test_greedy_paths_are_nested(self, selection: SubsetSelectionResult, strategy: str) -> None:
        """Stepwise searches add or drop one predictor at a time."""
        terms = [set(m.terms) for m in selection.models[strategy]]
        assert all(small < large for small, large in zip(terms, terms[1:], strict=False))

    def test_membership_matches_sizes(self, selection: SubsetSelectionResult) -> None:
        """Row k of every membership matrix marks exactly k predictors."""
        for membership in selection.membership.values():
            assert (membership.sum(axis=1) == membership.index).all()
            assert membership.columns.tolist() == selection.feature_names

    def test_coefficients_zero_for_excluded_terms(self, selection: SubsetSelectionResult) -> None:
        """Excluded predictors get a zero coefficient in the full coefficient table."""
        coefs = selection.coefficients["exhaustive"]
        first = coefs.loc[1]
        assert first.drop(["const", "x1"]).eq(0.0).all()
        assert first["x1"] != 0.0

    def test_full_model_metrics(self, selection: SubsetSelectionResult) -> None:
        """The full model reaches Cp = p + 1 and the largest R²."""
        cp = selection.metric_table("cp")
        r2 = selection.metric_table("r2")
        assert cp.loc[11, "exhaustive"] == pytest.approx(12.0)
        assert r2["exhaustive"].idxmax() == 11

    def test_bic_choice_contains_x1(self, selection: SubsetSelectionResult) -> None:
        """The BIC-optimal model includes the driving predictor."""
        for strategy in STRATEGIES:
            assert "x1" in selection.best_model(strategy).terms
            assert 1 <= selection.best_size(strategy, "cp") <= 11

    def test_unknown_metric_raises(self, selection: SubsetSelectionResult) -> None:
        """Only the five selection metrics can be pivoted."""
        with pytest.raises(ValueError):
            selection.metric_table("aic")

    def test_tidy_metric_table(self, selection: SubsetSelectionResult) -> None:
        """The tidy table has one row per strategy, size and metric."""
        assert len(selection.metrics) == 3 * 11 * 5
        assert selection.metrics.columns.tolist() == ["strategy", "size", "metric", "value"]


class TestSearchEdgeCases:
    """Validation of inputs and degenerate designs."""

    def test_max_size_limits_models(self, linear_xy: tuple[pd.DataFrame, pd.Series]) -> None:
        """Only sizes up to max_size are reported."""
        x, y = linear_xy
        models = select_subsets(x, y, strategies=("exhaustive", "backward"), max_size=3)
        assert [m.size for m in models["exhaustive"]] == [1, 2, 3]
        assert [m.size for m in models["backward"]] == [1, 2, 3]

    def test_invalid_strategy_and_size(self, linear_xy: tuple[pd.DataFrame, pd.Series]) -> None:
        """Unknown strategies and out-of-range sizes are rejected."""
        x, y = linear_xy
        with pytest.raises(ValueError, match="strategy"):
            search_subsets(x.to_numpy(), y.to_numpy(), "lasso")  # type: ignore[arg-type]
        with pytest.raises(ValueError, match="max_size"):
            search_subsets(x.to_numpy(), y.to_numpy(), "forward", max_size=12)

    def test_duplicate_predictor_is_singular(self, linear_xy: tuple[pd.DataFrame, pd.Series]) -> None:
        """Perfectly collinear predictors make the full design singular."""
        x, y = linear_xy
        with pytest.raises(SingularModelError):
            select_subsets(x.assign(x12=x["x1"] * 2.0), y)

    def test_too_few_rows(self, linear_xy: tuple[pd.DataFrame, pd.Series]) -> None:
        """Fewer rows than parameters cannot be fit."""
        x, y = linear_xy
        with pytest.raises(DegenerateDataError):
            select_subsets(x.iloc[:8], y.iloc[:8])

    def test_check_design_accepts_full_rank(self) -> None:
        """A well-posed design passes."""
        check_design(np.column_stack([np.ones(5), np.arange(5.0)]))

    def test_rss_helper_matches_perfect_fit(self) -> None:
        """An exactly linear outcome has zero RSS."""
        x = np.arange(10.0).reshape(-1, 1)
        assert residual_sum_of_squares(x, 3.0 * x[:, 0] + 1.0, [0]) == pytest.approx(0.0, abs=1e-18)

    def test_selector_requires_target(self, linear_view: DatasetView) -> None:
        """Selection needs an outcome column."""
        view = DatasetView(df=linear_view.df, pretty_by_col={}, numeric_cols=linear_view.numeric_cols)
        with pytest.raises(ValueError, match="target"):
            SubsetSelector(view)

    def test_result_before_fit(self, linear_view: DatasetView) -> None:
        """result() is only available after fit()."""
        with pytest.raises(ValueError, match="fit"):
            SubsetSelector(linear_view).result()
