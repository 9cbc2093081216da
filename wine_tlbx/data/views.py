"""Task-specific views over dataset content."""

from collections.abc import Mapping
from dataclasses import dataclass

import pandas as pd


@dataclass(frozen=True)
class DatasetView:
    """Immutable snapshot of a table handed to an analyzer.

    Attributes:
        df: Dataframe slice containing the predictor columns and, optionally, the target.
        pretty_by_col: Mapping from column names to display-friendly labels.
        numeric_cols: Ordered predictor names; order is positional and preserved by all analyzers.
        target_col: Name of the outcome column, if the view carries one.
        is_standardized: Whether the predictors have been scaled to zero mean and unit variance.
        label: Short name of the data the view was built from (e.g. ``"red"``), used in reports.
    """

    df: pd.DataFrame
    pretty_by_col: Mapping[str, str]
    numeric_cols: list[str]
    target_col: str | None = None
    is_standardized: bool | None = None
    label: str | None = None

    @property
    def features(self) -> pd.DataFrame:
        """Return view over the predictor columns."""
        cols = self.numeric_cols or [c for c in self.df.columns if c != self.target_col]
        return self.df.loc[:, cols]

    @property
    def target(self) -> pd.Series:
        """Return the outcome column.

        Raises:
            ValueError: If the view was built without a target.
        """
        if self.target_col is None:
            raise ValueError("DatasetView has no target column.")
        return self.df[self.target_col]

    def take(self, positions) -> "DatasetView":
        """Return a view restricted to the given row positions (the resampling train/test halves)."""
        return DatasetView(
            df=self.df.iloc[positions],
            pretty_by_col=self.pretty_by_col,
            numeric_cols=list(self.numeric_cols),
            target_col=self.target_col,
            is_standardized=self.is_standardized,
            label=self.label,
        )
