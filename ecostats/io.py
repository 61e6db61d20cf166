"""
I/O module: export figures and report tables.
"""

import json
from pathlib import Path

import numpy as np

from . import config
from .errors import ExportError, InvalidParameter

RASTER_FORMATS = {".jpg", ".jpeg", ".png"}


def export(figure, path, dpi=None):
    """
    Write a figure to a raster image file, overwriting any existing file.

    The parent directory must already exist.

    Args:
        figure: matplotlib Figure
        path: Output path (.jpg, .jpeg or .png)
        dpi: Resolution; matplotlib default when None

    Returns:
        Path to saved file
    """
    path = Path(path)
    if path.suffix.lower() not in RASTER_FORMATS:
        raise InvalidParameter(f"Unsupported image format '{path.suffix}' for {path}")

    try:
        figure.savefig(path, dpi=dpi or config.FIGURE_DPI)
    except OSError as e:
        raise ExportError(path, e) from e

    return path


def save_csv(df, filepath, **kwargs):
    """
    Save DataFrame to CSV.

    Args:
        df: DataFrame to save
        filepath: Output path
        **kwargs: Additional arguments for df.to_csv()

    Returns:
        Path to saved file
    """
    filepath = Path(filepath)
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(filepath, index=False, **kwargs)
    except OSError as e:
        raise ExportError(filepath, e) from e

    return filepath


def _json_default(obj):
    if isinstance(obj, np.generic):
        return obj.item()
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def save_json(obj, filepath):
    """Save a dict to pretty-printed JSON."""
    filepath = Path(filepath)
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)
        with open(filepath, "w", encoding="utf-8") as f:
            json.dump(obj, f, indent=2, default=_json_default)
    except OSError as e:
        raise ExportError(filepath, e) from e

    return filepath


def file_size_mb(filepath):
    """Get file size in MB."""
    return Path(filepath).stat().st_size / (1024 ** 2)
