"""Analysis modules: subset selection, resampling, regularization and PCA."""

from .ols_helper import FitMetrics, fit_ols_design
from .pc_regression import PCRegressionResult, pc_regression_view, run_pc_regression
from .pca_analyzer import PCAAnalyzer, PCAResult
from .regularization import (
    PENALTIES,
    RegularizationPathResult,
    RegularizedRegressionRunner,
    RegularizedResamplingResult,
)
from .resampling import ResamplingEvaluator, ResamplingResult, split_halves
from .structure import StructureResult, analyze_structure
from .subset_selection import STRATEGIES, SubsetModel, SubsetSelectionResult, SubsetSelector


__all__ = [
    "PENALTIES",
    "STRATEGIES",
    "FitMetrics",
    "PCAAnalyzer",
    "PCAResult",
    "PCRegressionResult",
    "RegularizationPathResult",
    "RegularizedRegressionRunner",
    "RegularizedResamplingResult",
    "ResamplingEvaluator",
    "ResamplingResult",
    "StructureResult",
    "SubsetModel",
    "SubsetSelectionResult",
    "SubsetSelector",
    "analyze_structure",
    "fit_ols_design",
    "pc_regression_view",
    "run_pc_regression",
    "split_halves",
]
