"""
Export of interest point sets.

Points can be written to CSV through pandas for analysis in spreadsheet
software, or round-tripped through JSON (descriptors included).
"""

import json
import pandas as pd
from pathlib import Path
from typing import Sequence

from .core_data_structures import (InterestPoint, InterestPointList,
                                   points_to_serializable, points_from_serializable)
from .logger import get_logger

logger = get_logger("export")

CSV_COLUMNS = ['x', 'y', 'ix', 'iy', 'scale', 'orientation', 'interest']


def points_to_dataframe(points: Sequence[InterestPoint]) -> pd.DataFrame:
    """
    One row per point with the columns x, y, ix, iy, scale, orientation,
    interest. Unassigned orientations become NaN; descriptors are omitted.
    """
    rows = [{column: data[column] for column in CSV_COLUMNS}
            for data in points_to_serializable(points)]
    return pd.DataFrame(rows, columns=CSV_COLUMNS)


def export_points_csv(points: Sequence[InterestPoint], filepath: str) -> str:
    """
    Write points to a CSV file

    Returns:
        str: Path to saved CSV file
    """
    output_path = Path(filepath)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    points_to_dataframe(points).to_csv(output_path, index=False)
    logger.info("Exported %d interest points to CSV: %s", len(points), output_path)
    return str(output_path)


def save_points_json(points: Sequence[InterestPoint], filepath: str) -> str:
    """Write points, descriptors included, to a JSON file"""
    output_path = Path(filepath)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w') as f:
        json.dump({'interest_points': points_to_serializable(points)}, f, indent=2)
    logger.info("Saved %d interest points to: %s", len(points), output_path)
    return str(output_path)


def load_points_json(filepath: str) -> InterestPointList:
    """
    Read points written by save_points_json

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Interest point file not found: {filepath}")
    with open(path, 'r') as f:
        data = json.load(f)
    return points_from_serializable(data['interest_points'])
