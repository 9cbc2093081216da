"""Test configuration and synthetic fixtures for the wine toolbox."""

import csv
from pathlib import Path

import matplotlib
import numpy as np
import pandas as pd
import pytest


matplotlib.use("Agg")

from wine_tlbx.data import DatasetView, WineCol, WineColor, WineDataset  # noqa: E402


# Uniform ranges inside every default outlier bound of both colours.
_RANGES = {
    WineCol.FIXED_ACIDITY: (4.0, 15.0),
    WineCol.VOLATILE_ACIDITY: (0.1, 1.5),
    WineCol.CITRIC_ACID: (0.0, 1.0),
    WineCol.RESIDUAL_SUGAR: (0.5, 15.0),
    WineCol.CHLORIDES: (0.01, 0.6),
    WineCol.FREE_SULFUR_DIOXIDE: (1.0, 70.0),
    WineCol.TOTAL_SULFUR_DIOXIDE: (6.0, 200.0),
    WineCol.DENSITY: (0.99, 1.003),
    WineCol.PH: (2.8, 4.0),
    WineCol.SULPHATES: (0.3, 2.0),
    WineCol.ALCOHOL: (8.0, 15.0),
}


def make_wine_frame(n_rows: int = 150, seed: int = 0) -> pd.DataFrame:
    """Cleaned-name wine table with ``quality`` driven by alcohol and volatile acidity."""
    rng = np.random.default_rng(seed)
    df = pd.DataFrame({col.value: rng.uniform(lo, hi, n_rows) for col, (lo, hi) in _RANGES.items()})
    signal = 5.6 + 0.4 * (df[WineCol.ALCOHOL] - 11.0) - 1.0 * (df[WineCol.VOLATILE_ACIDITY] - 0.8)
    df[WineCol.QUALITY.value] = np.clip(np.round(signal + rng.normal(0, 0.5, n_rows)), 3, 8)
    return df


def write_wine_csv(df: pd.DataFrame, path: Path) -> Path:
    """Write ``df`` the way the distributed files look: ``;``-separated with a quoted original header."""
    to_original = {cleaned: original for original, cleaned in WineCol.rename_map().items()}
    df.rename(columns=to_original).to_csv(path, sep=";", index=False, quoting=csv.QUOTE_NONNUMERIC)
    return path


@pytest.fixture
def red_frame() -> pd.DataFrame:
    """Synthetic red-wine table (cleaned names)."""
    return make_wine_frame(150, seed=1)


@pytest.fixture
def white_frame() -> pd.DataFrame:
    """Synthetic white-wine table (cleaned names)."""
    return make_wine_frame(180, seed=2)


@pytest.fixture
def red_dataset(red_frame: pd.DataFrame) -> WineDataset:
    """Validated red dataset built from the synthetic frame."""
    return WineDataset.from_frame(red_frame, WineColor.RED)


@pytest.fixture
def white_dataset(white_frame: pd.DataFrame) -> WineDataset:
    """Validated white dataset built from the synthetic frame."""
    return WineDataset.from_frame(white_frame, WineColor.WHITE)


@pytest.fixture
def data_dir(tmp_path: Path, red_frame: pd.DataFrame, white_frame: pd.DataFrame) -> Path:
    """Temporary data directory holding both synthetic CSV files."""
    write_wine_csv(red_frame, tmp_path / "winequality-red.csv")
    write_wine_csv(white_frame, tmp_path / "winequality-white.csv")
    return tmp_path


@pytest.fixture(scope="session")
def linear_xy() -> tuple[pd.DataFrame, pd.Series]:
    """100 x 11 standard-normal predictors with ``y = x1 + small noise``."""
    rng = np.random.default_rng(2024)
    x = pd.DataFrame(rng.standard_normal((100, 11)), columns=[f"x{i}" for i in range(1, 12)])
    y = pd.Series(x["x1"].to_numpy() + rng.normal(0, 0.1, 100), name="y")
    return x, y


@pytest.fixture(scope="session")
def linear_view(linear_xy: tuple[pd.DataFrame, pd.Series]) -> DatasetView:
    """DatasetView over :func:`linear_xy` with ``y`` as target."""
    x, y = linear_xy
    df = x.assign(y=y)
    return DatasetView(
        df=df,
        pretty_by_col={col: col.upper() for col in df.columns},
        numeric_cols=x.columns.tolist(),
        target_col="y",
        is_standardized=False,
        label="synthetic",
    )
