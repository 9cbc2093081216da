"""Utility path resolution tests."""

from pathlib import Path

import pytest

from wine_tlbx.utils.paths import get_data_dir, get_dataset_path


def test_get_dataset_path_by_colour(data_dir: Path) -> None:
    """Colour keys resolve to the distributed file names."""
    red_path = get_dataset_path("red", data_dir=data_dir)
    assert red_path.exists()
    assert red_path.parent == data_dir.resolve()
    assert red_path.name == "winequality-red.csv"
    assert get_dataset_path("white", data_dir=data_dir).name == "winequality-white.csv"


def test_custom_file_name(data_dir: Path) -> None:
    """Unknown keys are treated as file names inside the data directory."""
    (data_dir / "extra.csv").write_text("x\n1\n")
    assert get_dataset_path("extra.csv", data_dir=data_dir).name == "extra.csv"


def test_missing_file_raises(tmp_path: Path) -> None:
    """A missing dataset file is reported."""
    with pytest.raises(FileNotFoundError, match="red"):
        get_dataset_path("red", data_dir=tmp_path)


def test_missing_directory_raises(tmp_path: Path) -> None:
    """A missing data directory is reported."""
    with pytest.raises(FileNotFoundError, match="Data directory"):
        get_data_dir(tmp_path / "nowhere")
