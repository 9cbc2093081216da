r"""Best-subset and stepwise (forward / backward) selection over all model sizes.

For every size :math:`k = 1..p` each strategy reports the linear model with
exactly :math:`k` predictors that it considers best by residual sum of squares:

- ``exhaustive`` scores all :math:`\binom{p}{k}` subsets and keeps the minimum-RSS one.
- ``forward`` starts from the intercept-only model and greedily adds the
  predictor that reduces RSS most.
- ``backward`` starts from the full model and greedily removes the predictor
  whose removal increases RSS least.

The strategies share the objective and differ only in the search; the greedy
ones visit nested models and need not find the exhaustive optimum. In-sample
RSS never increases with :math:`k`, so comparing sizes requires a penalized
criterion (adjusted :math:`R^2`, :math:`C_p`, BIC) or held-out data (see
:mod:`wine_tlbx.analysis.resampling`).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from itertools import combinations
from typing import Literal

import numpy as np
import pandas as pd
import statsmodels.api as sm

from wine_tlbx.data.views import DatasetView

from .base_analyser import BaseAnalyser
from .ols_helper import (
    FitMetrics,
    compute_fit_metrics,
    fit_ols_design,
    full_coefficients,
    residual_sum_of_squares,
)


logger = logging.getLogger(__name__)

Strategy = Literal["exhaustive", "forward", "backward"]
STRATEGIES: tuple[Strategy, ...] = ("exhaustive", "forward", "backward")
SELECTION_METRICS: tuple[str, ...] = ("r2", "rss", "adj_r2", "cp", "bic")


@dataclass(frozen=True)
class SubsetModel:
    """Best model of one size under one strategy."""

    size: int
    terms: list[str]
    rss: float
    model: sm.regression.linear_model.RegressionResultsWrapper
    metrics: FitMetrics


def _exhaustive_search(x: np.ndarray, y: np.ndarray, max_size: int) -> list[tuple[int, ...]]:
    n_features = x.shape[1]
    return [
        min(combinations(range(n_features), k), key=lambda cols: residual_sum_of_squares(x, y, cols))
        for k in range(1, max_size + 1)
    ]


def _forward_search(x: np.ndarray, y: np.ndarray, max_size: int) -> list[tuple[int, ...]]:
    current: list[int] = []
    path: list[tuple[int, ...]] = []
    while len(current) < max_size:
        remaining = [j for j in range(x.shape[1]) if j not in current]
        best = min(remaining, key=lambda j: residual_sum_of_squares(x, y, [*current, j]))
        current = sorted([*current, best])
        path.append(tuple(current))
    return path


def _backward_search(x: np.ndarray, y: np.ndarray, max_size: int) -> list[tuple[int, ...]]:
    current = list(range(x.shape[1]))
    by_size = {len(current): tuple(current)}
    while len(current) > 1:
        drop = min(current, key=lambda j: residual_sum_of_squares(x, y, [c for c in current if c != j]))
        current = [c for c in current if c != drop]
        by_size[len(current)] = tuple(current)
    return [by_size[k] for k in range(1, max_size + 1)]


_SEARCHES = {
    "exhaustive": _exhaustive_search,
    "forward": _forward_search,
    "backward": _backward_search,
}


def search_subsets(
    x: np.ndarray,
    y: np.ndarray,
    strategy: Strategy,
    max_size: int | None = None,
) -> list[tuple[int, ...]]:
    """Return the selected column positions for sizes ``1..max_size`` (positions ascending)."""
    if strategy not in _SEARCHES:
        raise ValueError(f"strategy must be one of {list(_SEARCHES)}, got '{strategy}'")
    max_size = x.shape[1] if max_size is None else max_size
    if not 1 <= max_size <= x.shape[1]:
        raise ValueError(f"max_size must be between 1 and {x.shape[1]}, got {max_size}")
    return _SEARCHES[strategy](x, y, max_size)


def select_subsets(
    features: pd.DataFrame,
    y: pd.Series,
    *,
    strategies: Sequence[Strategy] = STRATEGIES,
    max_size: int | None = None,
) -> dict[str, list[SubsetModel]]:
    """Run every strategy on ``features``/``y`` and refit the chosen model of each size.

    Raises:
        SingularModelError: If the full design is rank deficient.
        DegenerateDataError: If there are too few rows for the full model.
    """
    full_model = fit_ols_design(features, y)
    x = features.to_numpy(dtype=float)
    y_arr = y.to_numpy(dtype=float)
    names = features.columns.tolist()

    selected: dict[str, list[SubsetModel]] = {}
    for strategy in strategies:
        models = []
        for cols in search_subsets(x, y_arr, strategy, max_size=max_size):
            terms = [names[j] for j in cols]
            model = fit_ols_design(features.loc[:, terms], y)
            metrics = compute_fit_metrics(model, full_model)
            models.append(SubsetModel(size=len(terms), terms=terms, rss=metrics.rss, model=model, metrics=metrics))
        selected[strategy] = models
    return selected


@dataclass(frozen=True)
class SubsetSelectionResult:
    """Selection outputs for all strategies.

    Attributes:
        feature_names: Predictor names in positional order.
        models: Strategy -> best model per size (index 0 is size 1).
        metrics: Tidy table with columns ``strategy``, ``size``, ``metric``, ``value``.
        membership: Strategy -> boolean DataFrame (index size, columns predictors).
        coefficients: Strategy -> DataFrame (index size, columns ``const`` + predictors), zeros for excluded terms.
        label: Name of the data the selection ran on.
    """

    feature_names: list[str]
    models: dict[str, list[SubsetModel]]
    metrics: pd.DataFrame
    membership: dict[str, pd.DataFrame]
    coefficients: dict[str, pd.DataFrame]
    label: str | None = None

    def metric_table(self, metric: str) -> pd.DataFrame:
        """Pivot one metric into a size x strategy table."""
        if metric not in SELECTION_METRICS:
            raise ValueError(f"metric must be one of {SELECTION_METRICS}")
        subset = self.metrics.loc[self.metrics["metric"] == metric]
        return subset.pivot(index="size", columns="strategy", values="value")[list(self.models)]

    def best_size(self, strategy: Strategy, criterion: Literal["adj_r2", "cp", "bic"] = "bic") -> int:
        """Size optimizing ``criterion`` (max for adj_r2, min otherwise)."""
        column = self.metric_table(criterion)[strategy]
        return int(column.idxmax() if criterion == "adj_r2" else column.idxmin())

    def best_model(self, strategy: Strategy, criterion: Literal["adj_r2", "cp", "bic"] = "bic") -> SubsetModel:
        """Return the model of :meth:`best_size`."""
        return self.models[strategy][self.best_size(strategy, criterion) - 1]

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_metrics(self, **kwargs: object):
        """Plot the selection metrics against model size."""
        from wine_tlbx.plotting.selection_plots import plot_selection_metrics  # noqa: PLC0415

        return plot_selection_metrics(self, **kwargs)

    def plot_membership(self, **kwargs: object):
        """Plot the variable-membership matrices as heatmaps."""
        from wine_tlbx.plotting.selection_plots import plot_membership_heatmaps  # noqa: PLC0415

        return plot_membership_heatmaps(self, **kwargs)


def membership_matrix(models: Sequence[SubsetModel], feature_names: Sequence[str]) -> pd.DataFrame:
    """Boolean size x predictor matrix marking the terms of each model."""
    rows = {m.size: [name in m.terms for name in feature_names] for m in models}
    frame = pd.DataFrame.from_dict(rows, orient="index", columns=list(feature_names), dtype=bool)
    frame.index.name = "size"
    return frame


class SubsetSelector(BaseAnalyser):
    """Analyzer running exhaustive, forward and backward subset selection on a view.

    Example:
        >>> result = red.make_subset_selector().fit().result()
        >>> result.metric_table("bic")
        >>> result.membership["exhaustive"]
    """

    def __init__(self, view: DatasetView) -> None:
        """Initialize the selector; the view must carry a target column."""
        if view.target_col is None:
            raise ValueError("SubsetSelector needs a view with a target column.")
        self._view = view
        self._result: SubsetSelectionResult | None = None

    def fit(
        self,
        strategies: Sequence[Strategy] = STRATEGIES,
        max_size: int | None = None,
    ) -> "SubsetSelector":
        """Search the best subset of each size under each strategy.

        Args:
            strategies: Strategies to run, in reporting order.
            max_size: Largest model size (defaults to the number of predictors).
        """
        features = self._view.features
        names = features.columns.tolist()
        logger.info(
            "Subset selection on %s: %d rows, %d predictors, strategies=%s",
            self._view.label or "data",
            len(features),
            len(names),
            list(strategies),
        )
        models = select_subsets(features, self._view.target, strategies=strategies, max_size=max_size)

        metric_rows = [
            {"strategy": strategy, "size": m.size, "metric": metric, "value": value}
            for strategy, fitted in models.items()
            for m in fitted
            for metric, value in m.metrics.as_dict().items()
        ]
        coefficients = {
            strategy: pd.DataFrame(
                {m.size: full_coefficients(m.model, names) for m in fitted},
            ).T.rename_axis("size")
            for strategy, fitted in models.items()
        }

        self._result = SubsetSelectionResult(
            feature_names=names,
            models=models,
            metrics=pd.DataFrame(metric_rows, columns=["strategy", "size", "metric", "value"]),
            membership={strategy: membership_matrix(fitted, names) for strategy, fitted in models.items()},
            coefficients=coefficients,
            label=self._view.label,
        )
        return self

    def result(self) -> SubsetSelectionResult:
        """Return the packaged selection results."""
        if self._result is None:
            raise ValueError("Must call fit() before result()")
        return self._result
