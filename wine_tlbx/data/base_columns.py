"""Base column definitions and metadata structures."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True)
class ColumnMetadata:
    """Metadata for a dataset column.

    Attributes:
        original_name: Column name as it appears in the raw CSV header.
        cleaned_name: snake_case column name used in DataFrames.
        dtype: Expected pandas dtype as a string.
        pretty_name: Human-readable label for plots and printed tables.
        unit: Measurement unit (empty for dimensionless scores).
    """

    original_name: str
    cleaned_name: str
    dtype: str
    pretty_name: str
    unit: str = ""


class BaseColumn(StrEnum):
    """Base class for dataset column enums.

    Member order is meaningful: it fixes the positional column order of the
    loaded table. Derived enums must define a ``TARGET`` member and implement
    :meth:`metadata`.
    """

    TARGET: str

    def metadata(self) -> ColumnMetadata:
        """Return the :class:`ColumnMetadata` for this column.

        Raises:
            NotImplementedError: If not implemented by subclass.
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement metadata() method")

    @classmethod
    def schema(cls) -> list[str]:
        """Return all cleaned column names in positional order."""
        return [col.value for col in cls]

    @classmethod
    def feature_columns(cls) -> list[str]:
        """Return predictor column names (every column except the target) in positional order."""
        return [col.value for col in cls if col.value != cls.TARGET]

    @classmethod
    def rename_map(cls) -> dict[str, str]:
        """Map original CSV header names to cleaned names."""
        return {col.original_name: col.value for col in cls}

    @property
    def pretty_name(self) -> str:
        """Get the human-readable name for plots and visualizations."""
        return self.metadata().pretty_name

    @property
    def original_name(self) -> str:
        """Get the original column name from the CSV file."""
        return self.metadata().original_name

    @property
    def dtype_name(self) -> str:
        """Get the expected data type as a string."""
        return self.metadata().dtype
