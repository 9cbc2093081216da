"""Plotting utilities; every function returns a figure and leaves saving to the caller."""

from .dataset_plots import plot_quality_distribution, plot_scatter_matrix, plot_standardization_comparison
from .pca_plots import plot_explained_variance, plot_loadings_heatmap, plot_scores_by_type, plot_scores_plotly
from .regularization_plots import plot_coefficient_path, plot_cv_curve
from .resampling_plots import plot_membership_frequency, plot_mse_boxplots, plot_regularized_test_mse
from .selection_plots import plot_membership_heatmaps, plot_selection_metrics


__all__ = [
    "plot_coefficient_path",
    "plot_cv_curve",
    "plot_explained_variance",
    "plot_loadings_heatmap",
    "plot_membership_frequency",
    "plot_membership_heatmaps",
    "plot_mse_boxplots",
    "plot_quality_distribution",
    "plot_regularized_test_mse",
    "plot_scatter_matrix",
    "plot_scores_by_type",
    "plot_scores_plotly",
    "plot_selection_metrics",
    "plot_standardization_comparison",
]
