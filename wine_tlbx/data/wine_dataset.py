"""Loading, validation and outlier filtering for the Wine Quality tables."""

import logging
from pathlib import Path

import pandas as pd

from wine_tlbx.errors import DegenerateDataError, InputFormatError
from wine_tlbx.utils.paths import get_dataset_path

from .base_dataset import BaseDataset
from .outliers import DEFAULT_THRESHOLDS, OutlierThresholds
from .wine_columns import WINE_TYPE_COL, WineColor
from .wine_columns import WineColumn as Col


logger = logging.getLogger(__name__)


def check_no_missing(df: pd.DataFrame, *, label: str | None = None) -> None:
    """Abort if any cell is unset.

    Raises:
        InputFormatError: Listing the columns that hold missing values.
    """
    n_missing = df.isna().sum()
    if n_missing.any():
        bad = n_missing[n_missing > 0].to_dict()
        raise InputFormatError(f"Missing values in {label or 'table'}: {bad}")


class WineDataset(BaseDataset):
    """One colour of the [Wine Quality dataset](https://archive.ics.uci.edu/dataset/186/wine+quality).

    The table always has the 11 predictors followed by ``quality``, in
    :class:`WineColumn` order. Merged red+white tables additionally carry the
    ``wine_type`` tag column.

    **Example workflow**:
    >>> from wine_tlbx.data import WineColor, WineDataset
    >>> red = WineDataset.from_csv(WineColor.RED)
    >>> sel = red.make_subset_selector().fit().result()
    >>> lasso = red.make_regularized_runner().fit(penalty="lasso", random_state=1)
    >>> merged = WineDataset.concat(red, WineDataset.from_csv(WineColor.WHITE))
    >>> pca = merged.make_pca_analyzer().fit().result()
    """

    Col = Col

    def __init__(
        self,
        df: pd.DataFrame | None = None,
        color: WineColor | None = None,
        label: str | None = None,
    ) -> None:
        super().__init__(df=df, label=label or (str(color) if color is not None else None))
        self.color = color

    @classmethod
    def from_csv(
        cls,
        color: WineColor | str,
        *,
        csv_path: str | Path | None = None,
        data_dir: str | Path | None = None,
        sep: str = ";",
        thresholds: OutlierThresholds | None = None,
        drop_outliers: bool = True,
    ) -> "WineDataset":
        """Load one colour of the wine data from a delimited file.

        - Normalize column names (``"fixed acidity"`` -> ``fixed_acidity``)
        - Validate the 12-column schema, numeric types and absence of missing values
        - Drop rows violating the outlier thresholds

        Args:
            color: Which wine table this is.
            csv_path: Explicit file path; defaults to ``winequality-<color>.csv`` in the data directory.
            data_dir: Data directory override used when ``csv_path`` is not given.
            sep: Field delimiter (the distributed files use ``;``).
            thresholds: Outlier bounds; defaults to the bounds tuned for ``color``.
            drop_outliers: Set to False to keep every parsed row.

        Raises:
            InputFormatError: On unparsable files, schema mismatches, non-numeric or missing cells.
            FileNotFoundError: If the file does not exist.
        """
        color = WineColor(color)
        csv_path = get_dataset_path(color, data_dir=data_dir) if csv_path is None else Path(csv_path)

        try:
            raw = pd.read_csv(csv_path, sep=sep)
        except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
            raise InputFormatError(f"Could not parse {csv_path}: {exc}") from exc

        logger.debug("Read %d rows from %s", len(raw), csv_path)
        return cls.from_frame(raw, color, thresholds=thresholds, drop_outliers=drop_outliers)

    @classmethod
    def from_frame(
        cls,
        raw: pd.DataFrame,
        color: WineColor | str,
        *,
        thresholds: OutlierThresholds | None = None,
        drop_outliers: bool = True,
    ) -> "WineDataset":
        """Validate and filter an already-parsed table (raw or cleaned column names).

        Raises:
            DegenerateDataError: If fewer than two rows remain after filtering.
        """
        color = WineColor(color)
        wine_df = (
            raw.pipe(cls._normalize_col_names)
            .pipe(cls._validate_schema)
            .pipe(cls._convert_data_types)
        )
        check_no_missing(wine_df, label=str(color))

        if drop_outliers:
            thresholds = DEFAULT_THRESHOLDS[color] if thresholds is None else thresholds
            wine_df = thresholds.apply(wine_df, label=str(color))
        if len(wine_df) < 2:
            raise DegenerateDataError(f"The {color} table has {len(wine_df)} usable row(s); at least 2 are required.")

        logger.info("Loaded %s wine table: %d rows x %d columns", color, *wine_df.shape)
        return cls(df=wine_df, color=color)

    @classmethod
    def concat(cls, *datasets: "WineDataset") -> "WineDataset":
        """Stack several colour tables into one, tagging each row with its source in ``wine_type``."""
        if not datasets:
            raise ValueError("concat() needs at least one dataset.")
        frames = [ds.df.assign(**{WINE_TYPE_COL: str(ds.color or ds.label)}) for ds in datasets]
        merged = pd.concat(frames, ignore_index=True)
        merged[WINE_TYPE_COL] = merged[WINE_TYPE_COL].astype("category")
        label = "+".join(str(ds.label) for ds in datasets)
        return cls(df=merged, color=None, label=label)

    @staticmethod
    def _normalize_col_names(df: pd.DataFrame) -> pd.DataFrame:
        """Strip quotes and whitespace, lowercase, and join words with underscores."""
        return df.set_axis(
            df.columns.astype(str)
            .str.strip()
            .str.strip('"')
            .str.lower()
            .str.replace(r"\s+", "_", regex=True),
            axis=1,
        )

    @staticmethod
    def _validate_schema(df: pd.DataFrame) -> pd.DataFrame:
        """Require exactly the wine columns and return them in positional order."""
        expected = Col.schema()
        missing = [col for col in expected if col not in df.columns]
        extra = [col for col in df.columns if col not in expected]
        if missing or extra:
            raise InputFormatError(
                f"Wine table must have columns {expected}; missing={missing}, unexpected={extra}",
            )
        return df.loc[:, expected]

    @staticmethod
    def _convert_data_types(df: pd.DataFrame) -> pd.DataFrame:
        """Coerce every column to float; non-numeric cells are a format error."""
        converted = df.apply(pd.to_numeric, errors="coerce")
        bad_cells = converted.isna() & df.notna()
        if bad_cells.any().any():
            bad_cols = bad_cells.any()[lambda s: s].index.tolist()
            raise InputFormatError(f"Non-numeric values in column(s): {bad_cols}")
        return converted.astype(float)

    def describe(self) -> pd.DataFrame:
        """Return summary statistics (count, mean, sd, quantiles) per column with pretty names as index."""
        summary = self.df[self.numeric_cols].describe().T
        summary.index = self.get_pretty_names(summary.index.to_list())
        return summary
