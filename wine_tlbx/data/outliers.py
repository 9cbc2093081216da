"""Threshold-based outlier filters for the wine tables.

The bounds are dataset-specific tuning chosen by inspecting the raw
distributions (a handful of extreme sulfur-dioxide, density and citric-acid
readings); they are configuration rather than general policy.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

import pandas as pd

from .wine_columns import WineColor
from .wine_columns import WineColumn as Col


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OutlierThresholds:
    """Per-column upper bounds; a row is kept only if every listed column is strictly below its bound.

    Attributes:
        upper_bounds: Mapping from column name to exclusive upper bound.
    """

    upper_bounds: Mapping[str, float] = field(default_factory=dict)

    def keep_mask(self, df: pd.DataFrame) -> pd.Series:
        """Return a boolean Series, ``True`` for rows that pass every bound.

        Raises:
            KeyError: If a bound refers to a column missing from ``df``.
        """
        missing = [col for col in self.upper_bounds if col not in df.columns]
        if missing:
            raise KeyError(f"Outlier bounds reference unknown columns: {missing}")

        keep = pd.Series(True, index=df.index)
        for col, bound in self.upper_bounds.items():
            keep &= df[col].lt(bound)
        return keep

    def apply(self, df: pd.DataFrame, *, label: str | None = None) -> pd.DataFrame:
        """Drop rows violating any bound."""
        keep = self.keep_mask(df)
        n_dropped = int((~keep).sum())
        if n_dropped:
            logger.info("Dropped %d outlier row(s) from %s table", n_dropped, label or "wine")
        return df.loc[keep]


DEFAULT_THRESHOLDS: dict[WineColor, OutlierThresholds] = {
    WineColor.RED: OutlierThresholds({Col.TOTAL_SULFUR_DIOXIDE: 250.0}),
    WineColor.WHITE: OutlierThresholds(
        {
            Col.FREE_SULFUR_DIOXIDE: 200.0,
            Col.TOTAL_SULFUR_DIOXIDE: 400.0,
            Col.DENSITY: 1.01,
            Col.CITRIC_ACID: 1.5,
        },
    ),
}
