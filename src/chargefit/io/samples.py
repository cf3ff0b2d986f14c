"""Reading and writing ``(x, y, charge)`` sample tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd

from chargefit.core.shared.exceptions import DataIOError

if TYPE_CHECKING:
    from pathlib import Path

    from chargefit.core.shared.typing import FloatArray

REQUIRED_COLUMNS = ("x", "y", "charge")


@dataclass(frozen=True, slots=True)
class SampleTable:
    """Unpartitioned cluster samples."""

    x: FloatArray
    y: FloatArray
    charge: FloatArray

    def __len__(self) -> int:
        return int(self.charge.size)


def read_samples(path: Path) -> SampleTable:
    """Read a CSV file with ``x``, ``y`` and ``charge`` columns.

    Column names are matched case-insensitively; extra columns are ignored.

    Raises:
        DataIOError: If the file is missing, unreadable, lacks a required
            column or holds non-numeric values
    """
    if not path.exists():
        msg = f"Samples file not found: {path}"
        raise DataIOError(msg)

    try:
        df = pd.read_csv(path, comment="#")
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as exc:
        msg = f"Could not parse samples file {path}: {exc}"
        raise DataIOError(msg) from exc

    df.columns = [str(col).strip().lower() for col in df.columns]
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        msg = f"Samples file {path} is missing column(s): {', '.join(missing)}"
        raise DataIOError(msg)

    try:
        values = df.loc[:, list(REQUIRED_COLUMNS)].astype(float)
    except ValueError as exc:
        msg = f"Samples file {path} contains non-numeric values: {exc}"
        raise DataIOError(msg) from exc

    return SampleTable(
        x=values["x"].to_numpy(dtype=float),
        y=values["y"].to_numpy(dtype=float),
        charge=values["charge"].to_numpy(dtype=float),
    )


def write_samples(path: Path, x: FloatArray, y: FloatArray, charge: FloatArray) -> None:
    """Write samples as CSV with ``x``, ``y`` and ``charge`` columns."""
    df = pd.DataFrame(
        {
            "x": np.asarray(x, dtype=float),
            "y": np.asarray(y, dtype=float),
            "charge": np.asarray(charge, dtype=float),
        }
    )
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(path, index=False, float_format="%.10g")
    except OSError as exc:
        msg = f"Could not write samples file {path}: {exc}"
        raise DataIOError(msg) from exc


__all__ = ["REQUIRED_COLUMNS", "SampleTable", "read_samples", "write_samples"]
