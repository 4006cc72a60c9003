"""
Simulation Table Models
=======================

Training data produced by the simulation driver.

Each SimulationRecord is one (label, sorted count vector) example. Counts are
sorted ascending before storage: the estimator learns from the shape of the
count distribution across cameras, not from which camera saw what, so camera
identity and spatial layout do not leak into the model.

Tabular Contract:
    Ind | cam_1 | cam_2 | ... | cam_n
    ----+-------+-------+-----+------
      1 |     0 |     0 | ... |    14
      2 |     0 |     3 | ... |    22

Column 0 is the individual-count label; the rest are sorted counts.
"""

import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from camtrap_sim.errors import EmptyInputError, ShapeMismatchError


logger = logging.getLogger(__name__)

LABEL_COLUMN = "Ind"
COUNT_PREFIX = "cam_"


@dataclass(frozen=True, slots=True)
class SimulationRecord:
    """
    One synthetic training example.
    
    Attributes:
        label: Assumed number of individuals (1..N)
        counts: Per-camera photo counts, sorted ascending
        iteration: Replicate this record belongs to (1..K)
    """
    
    label: int
    counts: Tuple[int, ...]
    iteration: int = 1
    
    def __post_init__(self) -> None:
        """Validate invariants."""
        if self.label < 1:
            raise ValueError("label must be >= 1")
        if any(c < 0 for c in self.counts):
            raise ValueError("counts must be non-negative")
        if any(a > b for a, b in zip(self.counts, self.counts[1:])):
            raise ValueError("counts must be sorted ascending")
    
    @classmethod
    def from_counts(
        cls,
        label: int,
        counts: Iterable[int],
        iteration: int = 1,
    ) -> "SimulationRecord":
        """Build a record, sorting the raw per-camera counts first."""
        ordered = tuple(sorted(int(c) for c in counts))
        return cls(label=label, counts=ordered, iteration=iteration)
    
    @property
    def width(self) -> int:
        """Number of cameras in the count vector."""
        return len(self.counts)


class SimulationTable:
    """
    Ordered collection of SimulationRecords with a fixed feature width.
    
    Row order carries no meaning; rows are i.i.d. samples. All records must
    have the same number of cameras.
    
    Example:
        table = SimulationTable(width=3)
        table.append(SimulationRecord.from_counts(1, [4, 0, 1]))
        df = table.to_frame()
    """
    
    def __init__(
        self,
        records: Optional[Iterable[SimulationRecord]] = None,
        width: Optional[int] = None,
    ) -> None:
        self._records: List[SimulationRecord] = []
        self._width = width
        for record in records or ():
            self.append(record)
    
    def append(self, record: SimulationRecord) -> None:
        """Add a record, enforcing the table's feature width."""
        if self._width is None:
            self._width = record.width
        elif record.width != self._width:
            raise ShapeMismatchError(
                f"record has {record.width} cameras, table expects {self._width}"
            )
        self._records.append(record)
    
    def __len__(self) -> int:
        return len(self._records)
    
    def __iter__(self) -> Iterator[SimulationRecord]:
        return iter(self._records)
    
    def __getitem__(self, index: int) -> SimulationRecord:
        return self._records[index]
    
    @property
    def width(self) -> int:
        """Feature width (number of cameras); 0 for an empty untyped table."""
        return self._width or 0
    
    @property
    def labels(self) -> np.ndarray:
        """Individual-count labels, one per row."""
        return np.array([r.label for r in self._records], dtype=int)
    
    @property
    def features(self) -> np.ndarray:
        """Sorted count vectors as an (n_rows, width) integer matrix."""
        if not self._records:
            return np.zeros((0, self.width), dtype=int)
        return np.array([r.counts for r in self._records], dtype=int)
    
    def label_counts(self) -> Dict[int, int]:
        """Number of rows per distinct label."""
        return dict(sorted(Counter(r.label for r in self._records).items()))
    
    def to_frame(self) -> pd.DataFrame:
        """Export as a DataFrame: label column followed by count columns."""
        columns = [f"{COUNT_PREFIX}{i + 1}" for i in range(self.width)]
        df = pd.DataFrame(self.features, columns=columns)
        df.insert(0, LABEL_COLUMN, self.labels)
        return df
    
    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "SimulationTable":
        """
        Build a table from a DataFrame.
        
        Column 0 is taken as the label; the remaining columns are counts.
        Counts are re-sorted per row so externally edited tables still
        satisfy the sorted-vector invariant.
        
        Raises:
            EmptyInputError: If the frame has no rows or no count columns
        """
        if df.empty or df.shape[1] < 2:
            raise EmptyInputError("simulation table has no rows or no count columns")
        
        labels = df.iloc[:, 0].to_numpy(dtype=int)
        counts = df.iloc[:, 1:].to_numpy(dtype=int)
        table = cls(width=counts.shape[1])
        for label, row in zip(labels, counts):
            table.append(SimulationRecord.from_counts(int(label), row))
        return table
    
    def to_csv(self, path: Union[str, Path]) -> None:
        """Write the table as CSV."""
        self.to_frame().to_csv(path, index=False)
        logger.info(f"Wrote simulation table: rows={len(self)}, path={path}")
    
    @classmethod
    def read_csv(cls, path: Union[str, Path]) -> "SimulationTable":
        """Read a table written by `to_csv` (or any compatible CSV)."""
        df = pd.read_csv(path)
        table = cls.from_frame(df)
        logger.info(
            f"Loaded simulation table: rows={len(table)}, "
            f"cameras={table.width}, path={path}"
        )
        return table
    
    def __repr__(self) -> str:
        return f"SimulationTable(rows={len(self)}, cameras={self.width})"
