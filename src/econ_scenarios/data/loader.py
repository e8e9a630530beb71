"""
Historical series loader for calibration inputs.

NEVER fails silently - all errors are explicit. [T1: Defensive Programming]

Reads a single numeric column from a CSV file, optionally indexed by a date
column (required for price histories fed to calibrate_iln_from_prices).
"""

import logging
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """Raised when data loading fails."""

    pass


# =============================================================================
# Series loading
# =============================================================================


def load_series(
    path: Path | str,
    column: str,
    date_column: str | None = None,
) -> pd.Series:
    """
    Load one column of a CSV file as a historical series.

    Parameters
    ----------
    path : Path or str
        CSV file with a header row
    column : str
        Column holding the observations (levels, log-returns or prices)
    date_column : str, optional
        Column parsed as dates and used as the index; rows are sorted by it

    Returns
    -------
    pd.Series
        Observations in file (or date) order, named ``column``

    Raises
    ------
    DataLoadError
        If the file cannot be read, a column is missing, or the series is empty

    Examples
    --------
    >>> rates = load_series("treasury_1y.csv", column="rate")
    >>> prices = load_series("spx.csv", column="close", date_column="date")
    """
    file_path = Path(path)
    if not file_path.exists():
        raise DataLoadError(f"CRITICAL: data file not found at {file_path}")

    try:
        df = pd.read_csv(file_path)
    except Exception as e:
        raise DataLoadError(
            f"CRITICAL: Failed to load series from {file_path}. Error: {e}"
        ) from e

    missing = [c for c in (column, date_column) if c is not None and c not in df.columns]
    if missing:
        available = ", ".join(str(c) for c in df.columns)
        raise DataLoadError(
            f"CRITICAL: column(s) {missing} not found in {file_path}. Available: {available}"
        )

    if date_column is not None:
        try:
            index = pd.to_datetime(df[date_column])
        except (ValueError, TypeError) as e:
            raise DataLoadError(
                f"CRITICAL: cannot parse '{date_column}' as dates in {file_path}"
            ) from e
        series = pd.Series(df[column].to_numpy(), index=pd.DatetimeIndex(index), name=column)
        series = series.sort_index()
    else:
        series = df[column].rename(column)

    # NEVER return empty data silently [T1]
    if series.dropna().empty:
        raise DataLoadError(f"CRITICAL: column '{column}' in {file_path} has no observations")

    logger.info(f"Loaded {len(series)} observations of '{column}' from {file_path}")
    return series
