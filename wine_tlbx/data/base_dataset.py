"""Base dataset class for all dataset implementations."""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
from sklearn.preprocessing import StandardScaler

from wine_tlbx.errors import DegenerateColumnError, DegenerateDataError


if TYPE_CHECKING:
    from wine_tlbx.analysis.pca_analyzer import PCAAnalyzer
    from wine_tlbx.analysis.regularization import RegularizedRegressionRunner
    from wine_tlbx.analysis.resampling import ResamplingEvaluator
    from wine_tlbx.analysis.subset_selection import SubsetSelector

from .base_columns import BaseColumn
from .views import DatasetView


class BaseDataset(ABC):
    """Abstract base class for the dataset handlers of the toolbox."""

    identifier_columns: Sequence[str] = ()
    Col: type[BaseColumn]

    def __init__(self, df: pd.DataFrame | None = None, label: str | None = None) -> None:
        """Initialize the base dataset.

        Args:
            df: Pre-loaded and cleaned DataFrame (optional)
            label: Short name used in logs and reports
        """
        self._df: pd.DataFrame | None = df
        self.label = label
        self._scaler: StandardScaler | None = None
        self._df_standardized: pd.DataFrame | None = None

    @classmethod
    @abstractmethod
    def from_csv(cls, *args: object, **kwargs: object) -> "BaseDataset":
        """Load dataset from a delimited text file."""
        ...

    @property
    def df(self) -> pd.DataFrame:
        """Get the raw (outlier-filtered) DataFrame.

        Raises:
            ValueError: If dataset not loaded
        """
        if self._df is None:
            raise ValueError("Dataset not loaded. Use from_csv() to load data.")
        return self._df

    @property
    def df_pretty(self) -> pd.DataFrame:
        """Get the DataFrame with pretty column names."""
        return self.df.rename(columns={col: self.get_pretty_name(col) for col in self.df.columns})

    @property
    def numeric_cols(self) -> pd.Index:
        """Get numeric column names (predictors and target), in table order."""
        return self.df.select_dtypes(include=["number"]).columns

    @property
    def scaler(self) -> StandardScaler:
        """Return the scaler fitted by the last :meth:`standardize` call (means in ``mean_``, scales in ``scale_``)."""
        if self._scaler is None:
            _ = self.df_standardized
        return self._scaler

    @property
    def df_standardized(self) -> pd.DataFrame:
        """Get the standardized DataFrame.

        X <- (X - E[X]) / sd(X)
        """
        if self._df_standardized is None:
            self._df_standardized = self.standardize()
        return self._df_standardized

    def standardize(
        self,
        df: pd.DataFrame | None = None,
        columns: Iterable[str] | None = None,
    ) -> pd.DataFrame:
        """Standardize columns with [sklearn's StandardScaler](https://scikit-learn.org/stable/modules/generated/sklearn.preprocessing.StandardScaler.html).

        Means and (population) standard deviations are computed over the rows of
        ``df`` itself; the fitted scaler is kept on the dataset.

        Args:
            df: Frame to scale (defaults to :attr:`df`)
            columns: Columns to scale (defaults to all numeric columns)

        Returns:
            New DataFrame of the selected columns scaled to mean=0, std=1

        Raises:
            DegenerateDataError: If ``df`` has fewer than two rows.
            DegenerateColumnError: If a selected column has zero variance.
        """
        if df is None:
            df = self.df
        if len(df) < 2:
            raise DegenerateDataError(f"Cannot standardize {len(df)} row(s); at least 2 are required.")
        cols = list(columns) if columns is not None else list(df.select_dtypes(include=["number"]).columns)

        constant = [col for col in cols if np.isclose(df[col].std(ddof=0), 0.0)]
        if constant:
            raise DegenerateColumnError(constant)

        self._scaler = StandardScaler()
        scaled_data = self._scaler.fit_transform(df[cols])

        return pd.DataFrame(scaled_data, columns=cols, index=df.index)

    def get_pretty_name(self, column_name: str) -> str:
        """Convert column name to pretty name for visualization.

        Falls back to title case for names outside the column enum.
        """
        try:
            col_enum = self.Col(column_name)
        except ValueError:
            return column_name.replace("_", " ").title()
        else:
            return str(col_enum.pretty_name)

    def get_pretty_names(self, column_names: list[str] | None = None) -> list[str]:
        """Convert multiple column names to pretty names."""
        return [self.get_pretty_name(name) for name in column_names or self.df.columns.to_list()]

    def feature_columns(self, include_target: bool = False) -> list[str]:
        """Return numeric predictor columns in positional order, optionally followed by the target."""
        exclude = set(self.identifier_columns)
        if not include_target:
            exclude.add(self.Col.TARGET)
        return [col for col in self.numeric_cols if col not in exclude]

    def view(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = False,
        target_col: str | None = None,
    ) -> DatasetView:
        """Build an immutable dataset view for analyzers and plotting layers.

        Args:
            columns: Columns to include in the view (defaults to all)
            standardized: Use the standardized frame
            target_col: Optional target column reference

        Returns:
            DatasetView containing selected data and metadata
        """
        frame = self.df_standardized if standardized else self.df
        selected_cols = list(columns or frame.columns.to_list())
        if target_col is not None and target_col not in selected_cols:
            selected_cols.append(target_col)
        frame = frame.loc[:, selected_cols]

        return DatasetView(
            df=frame,
            pretty_by_col={col: self.get_pretty_name(col) for col in selected_cols},
            numeric_cols=[col for col in selected_cols if col in self.numeric_cols and col != target_col],
            target_col=target_col,
            is_standardized=standardized,
            label=self.label,
        )

    def analyzer_view(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = True,
        include_target: bool = True,
    ) -> DatasetView:
        """Build a dataset view tailored for downstream analyzers."""
        return self.view(
            columns=columns if columns is not None else self.feature_columns(include_target=False),
            standardized=standardized,
            target_col=self.Col.TARGET if include_target else None,
        )

    def make_pca_analyzer(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = True,
        exclude_target: bool = True,
    ) -> "PCAAnalyzer":
        """Instantiate a PCA analyzer configured for this dataset."""
        from wine_tlbx.analysis.pca_analyzer import PCAAnalyzer

        return PCAAnalyzer(
            self.analyzer_view(columns=columns, standardized=standardized, include_target=not exclude_target),
        )

    def make_subset_selector(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = True,
    ) -> "SubsetSelector":
        """Instantiate a best-subset / stepwise selector on this dataset.

        Example:
            >>> from wine_tlbx.data import WineColor, WineDataset
            >>> red = WineDataset.from_csv(WineColor.RED)
            >>> sel = red.make_subset_selector().fit(strategies=("exhaustive",)).result()
            >>> sel.membership["exhaustive"]
        """
        from wine_tlbx.analysis.subset_selection import SubsetSelector

        return SubsetSelector(self.analyzer_view(columns=columns, standardized=standardized))

    def make_resampling_evaluator(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = True,
    ) -> "ResamplingEvaluator":
        """Instantiate a repeated train/test evaluator of subset selection."""
        from wine_tlbx.analysis.resampling import ResamplingEvaluator

        return ResamplingEvaluator(self.analyzer_view(columns=columns, standardized=standardized))

    def make_regularized_runner(
        self,
        columns: Iterable[str] | None = None,
        standardized: bool = True,
    ) -> "RegularizedRegressionRunner":
        """Instantiate a ridge/lasso runner on this dataset."""
        from wine_tlbx.analysis.regularization import RegularizedRegressionRunner

        return RegularizedRegressionRunner(self.analyzer_view(columns=columns, standardized=standardized))
