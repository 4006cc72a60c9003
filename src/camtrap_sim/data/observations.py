"""
Observation Loading
===================

Reads trap result tables into validated ObservationRecords.

Accepted columns (case-insensitive):
    Lon / longitude      -> longitude
    Lat / latitude       -> latitude
    Group_size           -> group_size (missing values become 0)
    Date                 -> date (optional)
    Time                 -> time (optional)

Example:
    from camtrap_sim.data import load_observations
    
    records = load_observations("./data/trapresult.csv")
"""

import logging
from pathlib import Path
from typing import Dict, List, Union

import pandas as pd

from camtrap_sim.errors import EmptyInputError, InvalidParameterError
from camtrap_sim.models.observation import ObservationRecord


logger = logging.getLogger(__name__)


_COLUMN_ALIASES: Dict[str, str] = {
    "lon": "longitude",
    "longitude": "longitude",
    "x": "longitude",
    "lat": "latitude",
    "latitude": "latitude",
    "y": "latitude",
    "group_size": "group_size",
    "groupsize": "group_size",
    "count": "group_size",
    "date": "date",
    "time": "time",
}

_REQUIRED = ("longitude", "latitude")


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Rename known column aliases to ObservationRecord field names."""
    renames = {}
    for column in df.columns:
        key = str(column).strip().lower()
        if key in _COLUMN_ALIASES:
            renames[column] = _COLUMN_ALIASES[key]
    df = df.rename(columns=renames)
    
    missing = [c for c in _REQUIRED if c not in df.columns]
    if missing:
        raise InvalidParameterError(
            f"observation table is missing required columns: {', '.join(missing)}"
        )
    return df


def observations_from_frame(df: pd.DataFrame) -> List[ObservationRecord]:
    """
    Convert a trap result DataFrame into ObservationRecords.
    
    Args:
        df: Table with at least longitude and latitude columns
        
    Returns:
        Records in row order
        
    Raises:
        EmptyInputError: If the table has no rows
        InvalidParameterError: If a required column is missing or a row
            holds an invalid value
    """
    if df.empty:
        raise EmptyInputError("observation table has no rows")
    
    df = _normalize_columns(df)
    if "group_size" not in df.columns:
        df = df.assign(group_size=0)
    group_sizes = pd.to_numeric(df["group_size"], errors="coerce")
    bad = df.index[group_sizes.isna() & df["group_size"].notna()]
    if len(bad) > 0:
        raise InvalidParameterError(
            f"row {bad[0]}: group_size {df.at[bad[0], 'group_size']!r} is not numeric"
        )
    df = df.assign(group_size=group_sizes.fillna(0).astype(int))
    
    records = []
    for index, row in zip(df.index, df.to_dict(orient="records")):
        try:
            record = ObservationRecord(
                longitude=float(row["longitude"]),
                latitude=float(row["latitude"]),
                group_size=int(row["group_size"]),
                date=None if pd.isna(row.get("date")) else str(row.get("date")),
                time=None if pd.isna(row.get("time")) else str(row.get("time")),
            )
        except (TypeError, ValueError) as e:
            raise InvalidParameterError(f"row {index}: invalid observation: {e}") from e
        records.append(record)
    return records


def load_observations(path: Union[str, Path]) -> List[ObservationRecord]:
    """
    Load observation records from a CSV file.
    
    Args:
        path: Path to the trap result CSV
        
    Returns:
        Records in file order
        
    Raises:
        FileNotFoundError: If the file does not exist
        EmptyInputError: If the file has no data rows
    """
    file_path = Path(path)
    
    if not file_path.exists():
        raise FileNotFoundError(f"Observation file not found: {path}")
    
    logger.info(f"Loading observations from: {path}")
    records = observations_from_frame(pd.read_csv(file_path))
    logger.info(f"Loaded observations: records={len(records)}")
    
    return records
