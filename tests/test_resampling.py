"""Tests for repeated half/half evaluation of subset selection."""

import numpy as np
import pandas as pd
import pytest

from wine_tlbx.analysis.resampling import ResamplingEvaluator, ResamplingResult, split_halves
from wine_tlbx.data.views import DatasetView
from wine_tlbx.errors import DegenerateDataError


GREEDY = ("forward", "backward")


@pytest.fixture(scope="module")
def resampled(linear_view: DatasetView) -> ResamplingResult:
    """Three trials of the greedy strategies on the synthetic data."""
    return ResamplingEvaluator(linear_view).fit(n_trials=3, strategies=GREEDY, random_state=7).result()


class TestSplitHalves:
    """Random partition of row positions."""

    @pytest.mark.parametrize("n_rows", [2, 11, 100])
    def test_disjoint_and_covering(self, n_rows: int) -> None:
        """Train and test are disjoint, sorted, and cover every row once."""
        train, test = split_halves(n_rows, np.random.default_rng(0))
        assert len(train) == (n_rows + 1) // 2
        assert np.intersect1d(train, test).size == 0
        assert np.array_equal(np.sort(np.concatenate([train, test])), np.arange(n_rows))
        assert np.all(np.diff(train) > 0)

    def test_too_few_rows(self) -> None:
        """A single row cannot be split."""
        with pytest.raises(DegenerateDataError):
            split_halves(1, np.random.default_rng(0))

    def test_seeded_splits_repeat(self) -> None:
        """The same seed gives the same partition."""
        first = split_halves(50, np.random.default_rng(3))
        second = split_halves(50, np.random.default_rng(3))
        assert all(np.array_equal(a, b) for a, b in zip(first, second, strict=True))


class TestResamplingEvaluator:
    """Train/test error records and selection frequencies."""

    def test_trial_table_shape(self, resampled: ResamplingResult) -> None:
        """One train and one test row per trial, strategy and size."""
        assert len(resampled.trials) == 3 * len(GREEDY) * 11 * 2
        assert set(resampled.trials["phase"]) == {"train", "test"}
        assert (resampled.trials["mse"] >= 0).all()

    def test_train_mse_non_increasing(self, resampled: ResamplingResult) -> None:
        """Within a trial the training error never grows with size."""
        train = resampled.trials.loc[resampled.trials["phase"] == "train"]
        for _, group in train.groupby(["trial", "strategy"]):
            assert np.all(np.diff(group.sort_values("size")["mse"].to_numpy()) <= 1e-12)

    def test_membership_frequency_rows_sum_to_size(self, resampled: ResamplingResult) -> None:
        """Every trial picks exactly k predictors for size k."""
        for freq in resampled.membership_frequency.values():
            np.testing.assert_allclose(freq.sum(axis=1).to_numpy(), freq.index.to_numpy())
            assert ((freq >= 0) & (freq <= 1)).all().all()
            assert freq.loc[1, "x1"] == 1.0

    def test_splits_recorded(self, resampled: ResamplingResult, linear_view: DatasetView) -> None:
        """Each trial keeps its partition."""
        assert len(resampled.splits) == resampled.n_trials == 3
        for train, test in resampled.splits:
            assert len(train) + len(test) == len(linear_view.df)

    def test_test_mse_uses_recorded_split(self, resampled: ResamplingResult, linear_view: DatasetView) -> None:
        """The full model's test error equals an OLS refit on the recorded train rows."""
        train_idx, test_idx = resampled.splits[0]
        train, test = linear_view.take(train_idx), linear_view.take(test_idx)
        x_train = np.column_stack([np.ones(len(train_idx)), train.features.to_numpy()])
        beta, *_ = np.linalg.lstsq(x_train, train.target.to_numpy(), rcond=None)
        x_test = np.column_stack([np.ones(len(test_idx)), test.features.to_numpy()])
        expected = np.mean((test.target.to_numpy() - x_test @ beta) ** 2)

        trials = resampled.trials
        recorded = trials.query("trial == 0 and strategy == 'forward' and size == 11 and phase == 'test'")["mse"]
        assert recorded.iloc[0] == pytest.approx(expected, rel=1e-8)

    def test_summary_quantiles(self, resampled: ResamplingResult) -> None:
        """The summary holds mean and quantiles per strategy, size and phase."""
        summary = resampled.summary()
        assert summary.columns.tolist() == ["mean", "q05", "q25", "q50", "q75", "q95"]
        assert summary.index.names == ["strategy", "size", "phase"]
        assert len(summary) == len(GREEDY) * 11 * 2
        assert (summary["q05"] <= summary["q95"]).all()

    def test_mean_mse_and_best_size(self, resampled: ResamplingResult) -> None:
        """Mean test MSE is tabulated per size; the best size is a valid size."""
        table = resampled.mean_mse("test")
        assert table.columns.tolist() == list(GREEDY)
        assert 1 <= resampled.best_size("forward") <= 11
        with pytest.raises(ValueError):
            resampled.mean_mse("validation")

    def test_overall_frequency_pools_strategies(self, resampled: ResamplingResult) -> None:
        """Pooled frequency is the mean of the per-strategy frequencies."""
        pooled = resampled.overall_membership_frequency()
        expected = sum(resampled.membership_frequency.values()) / len(GREEDY)
        pd.testing.assert_frame_equal(pooled, expected)

    def test_seed_reproducible(self, linear_view: DatasetView, resampled: ResamplingResult) -> None:
        """The same seed reproduces the same errors."""
        again = ResamplingEvaluator(linear_view).fit(n_trials=3, strategies=GREEDY, random_state=7).result()
        pd.testing.assert_frame_equal(again.trials, resampled.trials)

    def test_invalid_trial_count(self, linear_view: DatasetView) -> None:
        """At least one trial is required."""
        with pytest.raises(ValueError):
            ResamplingEvaluator(linear_view).fit(n_trials=0)
