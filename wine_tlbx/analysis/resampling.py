"""Repeated random train/test evaluation of subset selection.

Each trial splits the rows into two random halves, reruns subset selection on
the training half only, and scores the chosen model of every size on both
halves. Training MSE keeps falling with model size; the test MSE curve shows
where extra predictors stop paying off. Repeating the split exposes how much
the conclusion depends on one particular partition.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd

from wine_tlbx.data.views import DatasetView
from wine_tlbx.errors import DegenerateDataError

from .base_analyser import BaseAnalyser
from .ols_helper import predict_mse
from .subset_selection import STRATEGIES, Strategy, membership_matrix, select_subsets


logger = logging.getLogger(__name__)

PHASES: tuple[str, str] = ("train", "test")
DEFAULT_QUANTILES: tuple[float, ...] = (0.05, 0.25, 0.5, 0.75, 0.95)


def split_halves(n_rows: int, rng: np.random.Generator) -> tuple[np.ndarray, np.ndarray]:
    """Randomly partition row positions ``0..n_rows-1`` into train and test halves.

    The train half gets ``ceil(n/2)`` rows, the test half the rest; the halves
    are disjoint and together cover every row exactly once.
    """
    if n_rows < 2:
        raise DegenerateDataError(f"Need at least 2 rows to split, got {n_rows}.")
    perm = rng.permutation(n_rows)
    n_train = (n_rows + 1) // 2
    return np.sort(perm[:n_train]), np.sort(perm[n_train:])


@dataclass(frozen=True)
class ResamplingResult:
    """Resampled train/test errors of subset selection.

    Attributes:
        trials: Tidy record with columns ``trial``, ``strategy``, ``size``, ``phase``, ``mse``.
        membership_frequency: Strategy -> size x predictor share of trials selecting the predictor.
        membership_counts: Strategy -> raw selection counts behind ``membership_frequency``.
        splits: ``(train, test)`` row positions of each trial.
        n_trials: Number of trials run.
        label: Name of the data the evaluation ran on.
    """

    trials: pd.DataFrame
    membership_frequency: dict[str, pd.DataFrame]
    membership_counts: dict[str, pd.DataFrame]
    splits: list[tuple[np.ndarray, np.ndarray]]
    n_trials: int
    label: str | None = None

    def summary(self, quantiles: Sequence[float] = DEFAULT_QUANTILES) -> pd.DataFrame:
        """Mean and quantiles of the MSE per (strategy, size, phase)."""
        grouped = self.trials.groupby(["strategy", "size", "phase"], sort=False)["mse"]
        table = grouped.quantile(list(quantiles)).unstack()
        table.columns = [f"q{round(q * 100):02d}" for q in quantiles]
        return grouped.mean().rename("mean").to_frame().join(table)

    def mean_mse(self, phase: str = "test") -> pd.DataFrame:
        """Mean MSE as a size x strategy table for one phase."""
        if phase not in PHASES:
            raise ValueError(f"phase must be one of {PHASES}")
        subset = self.trials.loc[self.trials["phase"] == phase]
        table = subset.pivot_table(index="size", columns="strategy", values="mse", aggfunc="mean")
        return table[[s for s in self.membership_frequency if s in table.columns]]

    def best_size(self, strategy: Strategy) -> int:
        """Model size with the lowest mean test MSE."""
        return int(self.mean_mse("test")[strategy].idxmin())

    def overall_membership_frequency(self) -> pd.DataFrame:
        """Selection frequency pooled over every strategy and trial."""
        total = sum(self.membership_counts.values())
        return total / (self.n_trials * len(self.membership_counts))

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_mse(self, **kwargs: object):
        """Boxplots of train/test MSE per size and strategy."""
        from wine_tlbx.plotting.resampling_plots import plot_mse_boxplots  # noqa: PLC0415

        return plot_mse_boxplots(self, **kwargs)

    def plot_membership(self, **kwargs: object):
        """Heatmaps of the selection frequency per strategy."""
        from wine_tlbx.plotting.resampling_plots import plot_membership_frequency  # noqa: PLC0415

        return plot_membership_frequency(self, **kwargs)


class ResamplingEvaluator(BaseAnalyser):
    """Repeated half/half validation of best-subset and stepwise selection.

    Example:
        >>> res = red.make_resampling_evaluator().fit(n_trials=30, random_state=0).result()
        >>> res.summary().loc["exhaustive"]
        >>> res.membership_frequency["forward"]
    """

    def __init__(self, view: DatasetView) -> None:
        """Initialize the evaluator; the view must carry a target column."""
        if view.target_col is None:
            raise ValueError("ResamplingEvaluator needs a view with a target column.")
        self._view = view
        self._result: ResamplingResult | None = None

    def fit(
        self,
        n_trials: int = 30,
        strategies: Sequence[Strategy] = STRATEGIES,
        max_size: int | None = None,
        random_state: int | np.random.Generator | None = None,
    ) -> "ResamplingEvaluator":
        """Run ``n_trials`` random splits.

        Args:
            n_trials: Number of independent train/test partitions.
            strategies: Subset-search strategies to evaluate.
            max_size: Largest model size (defaults to the number of predictors).
            random_state: Seed or generator for the splits; ``None`` draws fresh entropy.
        """
        if n_trials < 1:
            raise ValueError("n_trials must be >= 1")
        rng = np.random.default_rng(random_state)
        features = self._view.features
        names = features.columns.tolist()

        sizes = pd.RangeIndex(1, (max_size or len(names)) + 1, name="size")
        counts = {s: pd.DataFrame(0, index=sizes, columns=names) for s in strategies}
        rows: list[dict[str, object]] = []
        splits: list[tuple[np.ndarray, np.ndarray]] = []

        for trial in range(n_trials):
            train_idx, test_idx = split_halves(len(features), rng)
            splits.append((train_idx, test_idx))
            train, test = self._view.take(train_idx), self._view.take(test_idx)
            x_train, y_train = train.features, train.target
            x_test, y_test = test.features, test.target

            selected = select_subsets(x_train, y_train, strategies=strategies, max_size=max_size)
            for strategy, models in selected.items():
                counts[strategy] += membership_matrix(models, names).astype(int).to_numpy()
                for m in models:
                    key = {"trial": trial, "strategy": strategy, "size": m.size}
                    rows.append({**key, "phase": "train", "mse": m.rss / len(y_train)})
                    rows.append({**key, "phase": "test", "mse": predict_mse(m.model, x_test, y_test)})
            logger.debug("Resampling trial %d/%d done", trial + 1, n_trials)

        logger.info("Resampling on %s: %d trials x %d strategies", self._view.label or "data", n_trials, len(strategies))
        self._result = ResamplingResult(
            trials=pd.DataFrame(rows, columns=["trial", "strategy", "size", "phase", "mse"]),
            membership_frequency={s: c / n_trials for s, c in counts.items()},
            membership_counts=counts,
            splits=splits,
            n_trials=n_trials,
            label=self._view.label,
        )
        return self

    def result(self) -> ResamplingResult:
        """Return the packaged resampling results."""
        if self._result is None:
            raise ValueError("Must call fit() before result()")
        return self._result
