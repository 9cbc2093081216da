"""Data module for dataset classes."""

from .outliers import DEFAULT_THRESHOLDS, OutlierThresholds
from .views import DatasetView
from .wine_columns import WINE_TYPE_COL, WineColor
from .wine_columns import WineColumn as WineCol
from .wine_dataset import WineDataset, check_no_missing


__all__ = [
    "DEFAULT_THRESHOLDS",
    "WINE_TYPE_COL",
    "DatasetView",
    "OutlierThresholds",
    "WineCol",
    "WineColor",
    "WineDataset",
    "check_no_missing",
]
