"""OLS fitting and fit-metric helpers shared by the selection analyzers.

Candidate subsets are scored by their residual sum of squares with a plain
least-squares solve; the chosen model of each size is then refit with
statsmodels to obtain :math:`R^2`, adjusted :math:`R^2` and BIC. All models
carry an intercept.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import pandas as pd
import statsmodels.api as sm
from sklearn.metrics import mean_squared_error

from wine_tlbx.errors import DegenerateDataError, SingularModelError


_INTERCEPT_COL = "const"


@dataclass(frozen=True)
class FitMetrics:
    r"""In-sample fit metrics of one OLS model.

    With :math:`n` observations, :math:`p` predictors and full-model residual
    variance :math:`\hat{\sigma}^2`:

    - :math:`R^2 = 1 - RSS/TSS`
    - :math:`\bar{R}^2 = 1 - (1 - R^2)\frac{n-1}{n-p-1}`
    - :math:`C_p = RSS/\hat{\sigma}^2 + 2(p+1) - n`
    - :math:`BIC = (p+1)\log n - 2\log L`

    Lower is better for ``rss``, ``cp`` and ``bic``; higher for ``r2`` and ``adj_r2``.
    """

    r2: float
    rss: float
    adj_r2: float
    cp: float
    bic: float
    n_obs: int

    def as_dict(self) -> dict[str, float]:
        """Return the five selection metrics keyed by name."""
        return {"r2": self.r2, "rss": self.rss, "adj_r2": self.adj_r2, "cp": self.cp, "bic": self.bic}


def add_intercept(features: pd.DataFrame) -> pd.DataFrame:
    """Prepend a ``const`` column of ones."""
    return sm.add_constant(features, has_constant="add")


def check_design(design: np.ndarray) -> None:
    """Validate that a design matrix (intercept included) supports an OLS fit.

    Raises:
        DegenerateDataError: If there are not more rows than parameters.
        SingularModelError: If the columns are linearly dependent.
    """
    n_rows, n_params = design.shape
    if n_rows <= n_params:
        raise DegenerateDataError(f"Need more than {n_params} rows to fit {n_params} parameters, got {n_rows}.")
    if np.linalg.matrix_rank(design) < n_params:
        raise SingularModelError(f"Design matrix with {n_params} columns is rank deficient.")


def residual_sum_of_squares(x: np.ndarray, y: np.ndarray, columns: Sequence[int]) -> float:
    """RSS of the least-squares fit of ``y`` on an intercept plus ``x[:, columns]``."""
    design = np.column_stack([np.ones(x.shape[0]), x[:, list(columns)]])
    coef, *_ = np.linalg.lstsq(design, y, rcond=None)
    resid = y - design @ coef
    return float(resid @ resid)


def fit_ols_design(
    features: pd.DataFrame,
    y: pd.Series,
) -> sm.regression.linear_model.RegressionResultsWrapper:
    """Fit OLS of ``y`` on ``features`` plus an intercept with :class:`statsmodels.api.OLS`.

    Raises:
        SingularModelError: If the design is rank deficient.
    """
    design = add_intercept(features.astype(float))
    check_design(design.to_numpy())
    return sm.OLS(y.astype(float), design).fit()


def compute_mallows_cp(
    full_model: sm.regression.linear_model.RegressionResultsWrapper,
    model: sm.regression.linear_model.RegressionResultsWrapper,
) -> float:
    r"""Compute Mallows' :math:`C_p` for a candidate model.

    :math:`C_p = \frac{RSS}{\hat{\sigma}^2} + 2(p+1) - n` with :math:`\hat{\sigma}^2`
    estimated from the full model. A model without bias has :math:`C_p \approx p+1`.
    """
    n = float(model.nobs)
    p = float(model.df_model) + 1.0
    return float(model.ssr) / float(full_model.mse_resid) + 2.0 * p - n


def compute_fit_metrics(
    model: sm.regression.linear_model.RegressionResultsWrapper,
    full_model: sm.regression.linear_model.RegressionResultsWrapper,
) -> FitMetrics:
    """Collect :class:`FitMetrics` for ``model`` relative to ``full_model``."""
    return FitMetrics(
        r2=float(model.rsquared),
        rss=float(model.ssr),
        adj_r2=float(model.rsquared_adj),
        cp=compute_mallows_cp(full_model, model),
        bic=float(model.bic),
        n_obs=int(model.nobs),
    )


def predict_mse(
    model: sm.regression.linear_model.RegressionResultsWrapper,
    features: pd.DataFrame,
    y: pd.Series,
) -> float:
    """Mean squared error of ``model`` applied to ``features`` (only the columns the model uses)."""
    terms = [name for name in model.params.index if name != _INTERCEPT_COL]
    design = add_intercept(features.loc[:, terms].astype(float))
    return float(mean_squared_error(y.astype(float), model.predict(design)))


def full_coefficients(
    model: sm.regression.linear_model.RegressionResultsWrapper,
    feature_names: Sequence[str],
) -> pd.Series:
    """Return the model coefficients over ``const`` + all features, zero for excluded features."""
    coef = pd.Series(0.0, index=[_INTERCEPT_COL, *feature_names])
    coef.loc[model.params.index] = model.params.to_numpy()
    return coef
