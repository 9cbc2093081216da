from pathlib import Path
from typing import Literal


__all__ = ["get_data_dir", "get_dataset_path"]


_DATASET_MAP: dict[str, str] = {
    "red": "winequality-red.csv",
    "white": "winequality-white.csv",
}


def get_data_dir(data_dir: str | Path | None = None) -> Path:
    """Get the path to the data directory.

    Args:
        data_dir: Explicit directory; defaults to ``_data`` at the project root.

    Returns:
        Resolved path to the data directory

    Raises:
        FileNotFoundError: If the directory does not exist.
    """
    path = Path(data_dir) if data_dir is not None else Path(__file__).parents[2] / "_data"
    path = path.resolve()
    if not path.is_dir():
        raise FileNotFoundError(f"Data directory not found at {path}")
    return path


def get_dataset_path(
    filename: Literal["red", "white"] | str,  # noqa: PYI051
    data_dir: str | Path | None = None,
) -> Path:
    """Get the full path to a dataset file in the data directory.

    Args:
        filename: Wine colour key (``"red"``/``"white"``) or a custom filename
        data_dir: Optional data directory override

    Returns:
        Full path to the dataset file

    Supported keys: red -> winequality-red.csv, white -> winequality-white.csv
    """
    ds_path = get_data_dir(data_dir) / _DATASET_MAP.get(str(filename), str(filename))
    if not ds_path.exists():
        raise FileNotFoundError(f"Dataset file '{filename}' not found at {ds_path}")
    return ds_path
