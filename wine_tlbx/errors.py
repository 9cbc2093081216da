"""Exception hierarchy for the wine toolbox.

Every failure in the pipeline is fatal: there is no retry or recovery logic,
errors propagate to the caller (or the CLI, which reports them and exits).
"""


class WineToolboxError(Exception):
    """Base class for all toolbox errors."""


class InputFormatError(WineToolboxError, ValueError):
    """Raised when an input file does not match the expected wine-quality schema.

    Covers missing or unexpected columns, non-numeric cells and missing values.
    """


class DegenerateDataError(WineToolboxError, ValueError):
    """Raised when the data cannot support the requested computation.

    Examples are too few rows for a model size or fold count.
    """


class DegenerateColumnError(DegenerateDataError):
    """Raised when a column has zero variance and cannot be standardized."""

    def __init__(self, columns: list[str]) -> None:
        self.columns = list(columns)
        super().__init__(f"Cannot standardize zero-variance column(s): {self.columns}")


class SingularModelError(DegenerateDataError):
    """Raised when a regression design matrix is rank deficient."""


__all__ = [
    "DegenerateColumnError",
    "DegenerateDataError",
    "InputFormatError",
    "SingularModelError",
    "WineToolboxError",
]
