"""Tests for DatasetView."""

import numpy as np
import pandas as pd
import pytest

from wine_tlbx.data.views import DatasetView


class TestDatasetView:
    """Test DatasetView functionality."""

    @pytest.fixture
    def sample_view(self) -> DatasetView:
        """Create a sample DatasetView for testing."""
        data = pd.DataFrame(
            {
                "alcohol": [9.4, 9.8, 10.5, 11.2],
                "sulphates": [0.56, 0.68, 0.65, 0.58],
                "quality": [5.0, 5.0, 6.0, 7.0],
            },
        )
        return DatasetView(
            df=data,
            pretty_by_col={"alcohol": "Alcohol", "sulphates": "Sulphates", "quality": "Quality"},
            numeric_cols=["alcohol", "sulphates"],
            target_col="quality",
            label="red",
        )

    def test_view_is_frozen(self, sample_view: DatasetView) -> None:
        """Test that DatasetView is immutable."""
        with pytest.raises(AttributeError):
            sample_view.target_col = "alcohol"  # type: ignore[misc]

    def test_features_property(self, sample_view: DatasetView) -> None:
        """Features are the predictor columns in order, without the target."""
        assert list(sample_view.features.columns) == ["alcohol", "sulphates"]

    def test_features_fall_back_to_non_target_columns(self) -> None:
        """With empty numeric_cols every non-target column is a feature."""
        view = DatasetView(
            df=pd.DataFrame({"a": [1, 2], "b": [3, 4], "y": [0, 1]}),
            pretty_by_col={},
            numeric_cols=[],
            target_col="y",
        )
        assert list(view.features.columns) == ["a", "b"]

    def test_target_property(self, sample_view: DatasetView) -> None:
        """Target returns the outcome column."""
        assert sample_view.target.tolist() == [5.0, 5.0, 6.0, 7.0]

    def test_target_without_target_col_raises(self, sample_view: DatasetView) -> None:
        """A view without target refuses to return one."""
        view = DatasetView(df=sample_view.df, pretty_by_col={}, numeric_cols=["alcohol"])
        with pytest.raises(ValueError, match="no target"):
            _ = view.target

    def test_take_restricts_rows(self, sample_view: DatasetView) -> None:
        """take() keeps the metadata and selects rows by position."""
        half = sample_view.take(np.array([1, 3]))
        assert half.df.index.tolist() == [1, 3]
        assert half.target_col == "quality"
        assert half.label == "red"
        assert list(half.features.columns) == ["alcohol", "sulphates"]
