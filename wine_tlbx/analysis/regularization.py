r"""Ridge and lasso regression paths with a cross-validated 1-SE penalty.

Penalties follow the glmnet parameterization

:math:`\min_{\beta_0, \beta} \frac{1}{2n}\lVert y - \beta_0 - X\beta\rVert_2^2 + \lambda P(\beta)`

with :math:`P(\beta) = \lVert\beta\rVert_1` (lasso) or
:math:`\frac{1}{2}\lVert\beta\rVert_2^2` (ridge). Lasso maps directly onto
:class:`sklearn.linear_model.Lasso` (``alpha = lambda``); ridge onto
:class:`sklearn.linear_model.Ridge` with ``alpha = n * lambda``. The intercept
is never penalized.

The penalty is chosen by K-fold cross-validation using the *one standard
error rule*: the largest :math:`\lambda` whose mean CV error is within one
standard error of the minimum. It trades a small increase in estimated error
for a more strongly regularized (for lasso: sparser) model.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

import numpy as np
import pandas as pd
from sklearn.linear_model import Lasso, Ridge, lasso_path
from sklearn.metrics import mean_squared_error
from sklearn.model_selection import KFold

from wine_tlbx.data.views import DatasetView
from wine_tlbx.errors import DegenerateDataError

from .base_analyser import BaseAnalyser
from .resampling import DEFAULT_QUANTILES, split_halves


logger = logging.getLogger(__name__)

Penalty = Literal["ridge", "lasso"]
PENALTIES: tuple[Penalty, ...] = ("ridge", "lasso")
_INTERCEPT_COL = "intercept"
_MAX_ITER = 10_000
# glmnet's default ratio between the largest ridge and lasso penalties
_RIDGE_LAMBDA_FACTOR = 1_000.0


def _check_penalty(penalty: str) -> None:
    if penalty not in PENALTIES:
        raise ValueError(f"penalty must be one of {PENALTIES}, got '{penalty}'")


def _as_seed(random_state: int | np.random.Generator | None) -> int | None:
    if isinstance(random_state, np.random.Generator):
        return int(random_state.integers(np.iinfo(np.int32).max))
    return random_state


def lambda_max(x: np.ndarray, y: np.ndarray) -> float:
    r"""Smallest lasso penalty that zeroes every coefficient: :math:`\max_j |x_j^\top (y - \bar{y})| / n`."""
    xc = x - x.mean(axis=0)
    return float(np.max(np.abs(xc.T @ (y - y.mean()))) / len(y))


def lambda_grid(
    x: np.ndarray,
    y: np.ndarray,
    penalty: Penalty,
    *,
    n_lambdas: int = 100,
    lambda_min_ratio: float = 1e-4,
) -> np.ndarray:
    """Descending log-spaced penalty grid from the data-driven maximum down to ``lambda_min_ratio`` of it.

    Raises:
        ValueError: If the grid would be empty or not strictly descending.
        DegenerateDataError: If the outcome is constant or uncorrelated with every predictor.
    """
    _check_penalty(penalty)
    if n_lambdas < 2:
        raise ValueError("n_lambdas must be >= 2")
    if not 0.0 < lambda_min_ratio < 1.0:
        raise ValueError("lambda_min_ratio must lie in (0, 1)")
    top = lambda_max(x, y)
    if not np.isfinite(top) or top <= 0:
        raise DegenerateDataError("Cannot build a penalty grid: outcome has no linear signal in the predictors.")
    if penalty == "ridge":
        top *= _RIDGE_LAMBDA_FACTOR
    return np.geomspace(top, top * lambda_min_ratio, n_lambdas)


def fit_penalized(x: np.ndarray, y: np.ndarray, penalty: Penalty, lam: float) -> tuple[float, np.ndarray]:
    """Fit one penalized model; returns ``(intercept, coefficients)``."""
    _check_penalty(penalty)
    if penalty == "lasso":
        model = Lasso(alpha=lam, max_iter=_MAX_ITER)
    else:
        model = Ridge(alpha=len(y) * lam)
    model.fit(x, y)
    return float(model.intercept_), np.asarray(model.coef_, dtype=float)


def coefficient_path(x: np.ndarray, y: np.ndarray, penalty: Penalty, lambdas: np.ndarray) -> np.ndarray:
    """Coefficients along ``lambdas``; shape ``(len(lambdas), 1 + p)`` with the intercept first."""
    _check_penalty(penalty)
    x_mean, y_mean = x.mean(axis=0), y.mean()
    if penalty == "lasso":
        _, coefs, _ = lasso_path(x - x_mean, y - y_mean, alphas=lambdas, max_iter=_MAX_ITER)
        coefs = coefs.T
    else:
        coefs = np.vstack([fit_penalized(x, y, "ridge", lam)[1] for lam in lambdas])
    intercepts = y_mean - coefs @ x_mean
    return np.column_stack([intercepts, coefs])


def cross_validate_path(
    x: np.ndarray,
    y: np.ndarray,
    penalty: Penalty,
    lambdas: np.ndarray,
    *,
    cv_folds: int = 10,
    random_state: int | np.random.Generator | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """K-fold CV error along ``lambdas``.

    Returns:
        ``(cv_mean, cv_se)``: mean fold MSE per penalty and its standard error
        (fold standard deviation over :math:`\\sqrt{K}`).

    Raises:
        DegenerateDataError: If there are fewer rows than folds.
    """
    if cv_folds < 2:
        raise ValueError("cv_folds must be >= 2")
    if len(y) < cv_folds:
        raise DegenerateDataError(f"Cannot run {cv_folds}-fold CV on {len(y)} rows.")

    splitter = KFold(n_splits=cv_folds, shuffle=True, random_state=_as_seed(random_state))
    fold_mse = np.empty((cv_folds, len(lambdas)))
    for k, (train_idx, test_idx) in enumerate(splitter.split(x)):
        path = coefficient_path(x[train_idx], y[train_idx], penalty, lambdas)
        pred = path[:, 0] + x[test_idx] @ path[:, 1:].T
        fold_mse[k] = ((y[test_idx, None] - pred) ** 2).mean(axis=0)

    return fold_mse.mean(axis=0), fold_mse.std(axis=0, ddof=1) / np.sqrt(cv_folds)


def one_se_lambda(lambdas: np.ndarray, cv_mean: np.ndarray, cv_se: np.ndarray) -> tuple[float, float]:
    """Return ``(lambda_min, lambda_1se)``.

    ``lambda_1se`` is the largest penalty whose mean CV error is within one
    standard error of the minimum mean CV error.
    """
    i_min = int(np.argmin(cv_mean))
    within = cv_mean <= cv_mean[i_min] + cv_se[i_min]
    return float(lambdas[i_min]), float(np.max(lambdas[within]))


@dataclass(frozen=True)
class RegularizationPathResult:
    """Penalized regression path and its cross-validated penalty.

    Attributes:
        penalty: ``"ridge"`` or ``"lasso"``.
        lambdas: Descending penalty grid.
        coef_path: DataFrame indexed by lambda; columns ``intercept`` + predictors.
        cv_mean: Mean CV MSE per lambda.
        cv_se: Standard error of the CV MSE per lambda.
        lambda_min: Penalty with the lowest mean CV error.
        lambda_1se: Largest penalty within one SE of the minimum.
        coef_1se: Coefficients refit on all rows at ``lambda_1se``.
        cv_folds: Number of CV folds.
        label: Name of the data the path was fit on.
    """

    penalty: str
    lambdas: np.ndarray
    coef_path: pd.DataFrame
    cv_mean: pd.Series
    cv_se: pd.Series
    lambda_min: float
    lambda_1se: float
    coef_1se: pd.Series
    cv_folds: int
    label: str | None = None

    @property
    def feature_names(self) -> list[str]:
        """Predictor names (coefficient columns without the intercept)."""
        return [c for c in self.coef_path.columns if c != _INTERCEPT_COL]

    @property
    def n_nonzero_1se(self) -> int:
        """Number of non-zero predictor coefficients at ``lambda_1se``."""
        return int((self.coef_1se.drop(_INTERCEPT_COL) != 0).sum())

    def summary(self) -> pd.DataFrame:
        """Chosen penalties with their CV error."""
        rows = [
            {"rule": "min", "lambda": self.lambda_min, "cv_mse": self.cv_mean.loc[self.lambda_min]},
            {"rule": "1se", "lambda": self.lambda_1se, "cv_mse": self.cv_mean.loc[self.lambda_1se]},
        ]
        return pd.DataFrame(rows).set_index("rule")

    # ------------------------------------------------------------------ plotting shortcuts
    def plot_path(self, **kwargs: object):
        """Plot coefficient trajectories against log(lambda)."""
        from wine_tlbx.plotting.regularization_plots import plot_coefficient_path  # noqa: PLC0415

        return plot_coefficient_path(self, **kwargs)

    def plot_cv(self, **kwargs: object):
        """Plot the CV error curve with one-SE bars and the chosen penalties."""
        from wine_tlbx.plotting.regularization_plots import plot_cv_curve  # noqa: PLC0415

        return plot_cv_curve(self, **kwargs)


@dataclass(frozen=True)
class RegularizedResamplingResult:
    """Held-out performance of the 1-SE model over repeated half/half splits.

    Attributes:
        penalty: ``"ridge"`` or ``"lasso"``.
        test_mse: Test MSE per trial.
        train_mse: Train MSE per trial.
        lambda_1se: Chosen penalty per trial.
        coefficients: Trial x (``intercept`` + predictors) coefficients at the chosen penalty.
        label: Name of the data the evaluation ran on.
    """

    penalty: str
    test_mse: pd.Series
    train_mse: pd.Series
    lambda_1se: pd.Series
    coefficients: pd.DataFrame
    label: str | None = None
    splits: list[tuple[np.ndarray, np.ndarray]] = field(default_factory=list, repr=False)

    @property
    def n_trials(self) -> int:
        """Number of trials run."""
        return len(self.test_mse)

    @property
    def selection_frequency(self) -> pd.Series:
        """Share of trials in which each predictor has a non-zero coefficient (meaningful for lasso)."""
        return (self.coefficients.drop(columns=_INTERCEPT_COL) != 0).mean()

    @property
    def mean_abs_coefficient(self) -> pd.Series:
        """Average coefficient magnitude per predictor (meaningful for ridge)."""
        return self.coefficients.drop(columns=_INTERCEPT_COL).abs().mean()

    def summary(self, quantiles: Sequence[float] = DEFAULT_QUANTILES) -> pd.Series:
        """Mean and quantiles of the test MSE."""
        stats = self.test_mse.quantile(list(quantiles))
        stats.index = [f"q{round(q * 100):02d}" for q in quantiles]
        return pd.concat([pd.Series({"mean": self.test_mse.mean()}), stats]).rename(f"{self.penalty}_test_mse")


class RegularizedRegressionRunner(BaseAnalyser):
    """Fit ridge / lasso paths on a view and pick the 1-SE penalty.

    Example:
        >>> runner = red.make_regularized_runner()
        >>> lasso = runner.fit(penalty="lasso", random_state=1).result()
        >>> lasso.coef_1se
        >>> resampled = runner.resample(penalty="lasso", n_trials=30, random_state=2)
        >>> resampled.selection_frequency
    """

    def __init__(self, view: DatasetView) -> None:
        """Initialize the runner; the view must carry a target column."""
        if view.target_col is None:
            raise ValueError("RegularizedRegressionRunner needs a view with a target column.")
        self._view = view
        self._results: dict[str, RegularizationPathResult] = {}
        self._last: str | None = None

    @property
    def _xy(self) -> tuple[np.ndarray, np.ndarray]:
        return self._view.features.to_numpy(dtype=float), self._view.target.to_numpy(dtype=float)

    def fit(
        self,
        penalty: Penalty = "lasso",
        n_lambdas: int = 100,
        lambda_min_ratio: float = 1e-4,
        cv_folds: int = 10,
        random_state: int | np.random.Generator | None = None,
    ) -> "RegularizedRegressionRunner":
        """Fit the full path, cross-validate it, and refit at the 1-SE penalty.

        Args:
            penalty: ``"ridge"`` (L2) or ``"lasso"`` (L1).
            n_lambdas: Grid size.
            lambda_min_ratio: Smallest grid value as a fraction of the largest.
            cv_folds: Number of CV folds.
            random_state: Seed or generator for the fold assignment.
        """
        _check_penalty(penalty)
        x, y = self._xy
        names = self._view.features.columns.tolist()
        lambdas = lambda_grid(x, y, penalty, n_lambdas=n_lambdas, lambda_min_ratio=lambda_min_ratio)
        path = coefficient_path(x, y, penalty, lambdas)
        cv_mean, cv_se = cross_validate_path(x, y, penalty, lambdas, cv_folds=cv_folds, random_state=random_state)
        lam_min, lam_1se = one_se_lambda(lambdas, cv_mean, cv_se)
        intercept, coef = fit_penalized(x, y, penalty, lam_1se)

        index = pd.Index(lambdas, name="lambda")
        self._results[penalty] = RegularizationPathResult(
            penalty=penalty,
            lambdas=lambdas,
            coef_path=pd.DataFrame(path, index=index, columns=[_INTERCEPT_COL, *names]),
            cv_mean=pd.Series(cv_mean, index=index, name="cv_mse"),
            cv_se=pd.Series(cv_se, index=index, name="cv_se"),
            lambda_min=lam_min,
            lambda_1se=lam_1se,
            coef_1se=pd.Series([intercept, *coef], index=[_INTERCEPT_COL, *names], name=penalty),
            cv_folds=cv_folds,
            label=self._view.label,
        )
        self._last = penalty
        logger.info("%s on %s: lambda_min=%.4g, lambda_1se=%.4g", penalty, self._view.label or "data", lam_min, lam_1se)
        return self

    def result(self, penalty: Penalty | None = None) -> RegularizationPathResult:
        """Return the path result for ``penalty`` (defaults to the most recent fit)."""
        key = penalty or self._last
        if key is None or key not in self._results:
            raise ValueError("Must call fit() before result()")
        return self._results[key]

    def resample(
        self,
        penalty: Penalty = "lasso",
        n_trials: int = 30,
        n_lambdas: int = 100,
        lambda_min_ratio: float = 1e-4,
        cv_folds: int = 10,
        random_state: int | np.random.Generator | None = None,
    ) -> RegularizedResamplingResult:
        """Repeat: split halves, choose the 1-SE penalty by CV on the train half, score on the test half."""
        _check_penalty(penalty)
        if n_trials < 1:
            raise ValueError("n_trials must be >= 1")
        rng = np.random.default_rng(random_state)
        x, y = self._xy
        names = self._view.features.columns.tolist()

        test_mse, train_mse, lambdas_1se, coefs = [], [], [], []
        splits: list[tuple[np.ndarray, np.ndarray]] = []
        for _ in range(n_trials):
            train_idx, test_idx = split_halves(len(y), rng)
            splits.append((train_idx, test_idx))
            x_tr, y_tr, x_te, y_te = x[train_idx], y[train_idx], x[test_idx], y[test_idx]

            lambdas = lambda_grid(x_tr, y_tr, penalty, n_lambdas=n_lambdas, lambda_min_ratio=lambda_min_ratio)
            cv_mean, cv_se = cross_validate_path(x_tr, y_tr, penalty, lambdas, cv_folds=cv_folds, random_state=rng)
            _, lam_1se = one_se_lambda(lambdas, cv_mean, cv_se)
            intercept, coef = fit_penalized(x_tr, y_tr, penalty, lam_1se)

            test_mse.append(mean_squared_error(y_te, intercept + x_te @ coef))
            train_mse.append(mean_squared_error(y_tr, intercept + x_tr @ coef))
            lambdas_1se.append(lam_1se)
            coefs.append([intercept, *coef])

        logger.info("%s resampling on %s: %d trials", penalty, self._view.label or "data", n_trials)
        trials = pd.RangeIndex(n_trials, name="trial")
        return RegularizedResamplingResult(
            penalty=penalty,
            test_mse=pd.Series(test_mse, index=trials, name="test_mse"),
            train_mse=pd.Series(train_mse, index=trials, name="train_mse"),
            lambda_1se=pd.Series(lambdas_1se, index=trials, name="lambda_1se"),
            coefficients=pd.DataFrame(coefs, index=trials, columns=[_INTERCEPT_COL, *names]),
            label=self._view.label,
            splits=splits,
        )
