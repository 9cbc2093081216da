"""Ridge / lasso path and cross-validation plots."""

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from wine_tlbx.analysis.regularization import RegularizationPathResult


def plot_coefficient_path(
    result: RegularizationPathResult,
    figsize: tuple[int, int] = (9, 5),
    show_legend: bool = True,
) -> Figure:
    """Coefficient trajectories against :math:`\\log \\lambda` with the chosen penalties marked."""
    log_lam = np.log(result.lambdas)
    fig, ax = plt.subplots(figsize=figsize)
    for name in result.feature_names:
        ax.plot(log_lam, result.coef_path[name].to_numpy(), label=name)
    ax.axhline(0.0, color="black", lw=0.8)
    ax.axvline(np.log(result.lambda_min), color="grey", ls=":", label="lambda min")
    ax.axvline(np.log(result.lambda_1se), color="grey", ls="--", label="lambda 1-SE")
    ax.set_xlabel("log(lambda)")
    ax.set_ylabel("Coefficient")
    ax.set_title(f"{result.penalty.title()} path ({result.label or 'data'})")
    if show_legend:
        ax.legend(fontsize=8, loc="center left", bbox_to_anchor=(1.0, 0.5))
    fig.tight_layout()
    return fig


def plot_cv_curve(
    result: RegularizationPathResult,
    figsize: tuple[int, int] = (8, 5),
) -> Figure:
    """Mean CV error with one-standard-error bars against :math:`\\log \\lambda`."""
    log_lam = np.log(result.lambdas)
    fig, ax = plt.subplots(figsize=figsize)
    ax.errorbar(
        log_lam,
        result.cv_mean.to_numpy(),
        yerr=result.cv_se.to_numpy(),
        fmt="o",
        ms=3,
        color="firebrick",
        ecolor="lightgrey",
        capsize=2,
    )
    ax.axvline(np.log(result.lambda_min), color="grey", ls=":", label="lambda min")
    ax.axvline(np.log(result.lambda_1se), color="grey", ls="--", label="lambda 1-SE")
    ax.set_xlabel("log(lambda)")
    ax.set_ylabel(f"{result.cv_folds}-fold CV MSE")
    ax.set_title(f"{result.penalty.title()} cross-validation ({result.label or 'data'})")
    ax.legend()
    fig.tight_layout()
    return fig
