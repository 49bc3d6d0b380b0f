"""Company file import and score export."""
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".csv", ".xlsx", ".xls")


def read_data_file(file_path: Union[str, Path]) -> pd.DataFrame:
    """
    Read a CSV or Excel export of companies into a DataFrame.

    Args:
        file_path: Path to a .csv, .xlsx or .xls file

    Returns:
        DataFrame with file contents

    Raises:
        FileNotFoundError: If file doesn't exist
        ValueError: If file format is not supported
    """
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(f"Unsupported file format: {suffix}")

    if suffix == ".csv":
        # Keep ranges like "101-250" and ids as text
        df = pd.read_csv(file_path, dtype=str, keep_default_na=False, na_values=[""])
    elif suffix == ".xlsx":
        df = pd.read_excel(file_path, engine="openpyxl")
    else:
        try:
            df = pd.read_excel(file_path, engine="xlrd")
        except Exception as xlrd_error:
            # Misnamed .xlsx files are common in exports
            logger.warning(f"xlrd failed for {file_path}, trying openpyxl: {xlrd_error}")
            df = pd.read_excel(file_path, engine="openpyxl")

    logger.info(f"Loaded {len(df)} rows from {file_path}")
    return df


def write_scores_csv(
    df: pd.DataFrame,
    out_dir: Union[str, Path],
    prefix: str = "lead_scores",
    timestamp: Optional[datetime] = None
) -> Path:
    """
    Write a dated CSV of scored companies.

    Args:
        df: Scored company rows
        out_dir: Output directory (created if missing)
        prefix: File name prefix
        timestamp: Time used in the file name (defaults to now)

    Returns:
        Path of the written file
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    stamp = (timestamp or datetime.now()).strftime("%Y%m%d_%H%M")
    output_path = out_dir / f"{prefix}_{stamp}.csv"
    df.to_csv(output_path, index=False, encoding="utf-8")
    logger.info(f"Wrote {len(df)} rows to {output_path}")
    return output_path
