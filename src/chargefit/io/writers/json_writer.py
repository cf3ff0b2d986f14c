"""JSON output writer for chargefit results.

Produces machine-readable JSON files with run metadata for
reproducibility and programmatic processing.
"""

from __future__ import annotations

import json
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

from chargefit.core.shared.exceptions import DataIOError

if TYPE_CHECKING:
    from chargefit.core.results.fit_results import (
        DiagonalFitResult,
        Fit2DResult,
        OutlierRemovalResult,
    )

SCHEMA_VERSION = "1.0.0"


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder that handles numpy types, enums and Path objects."""

    def default(self, o: Any) -> Any:
        """Convert numpy types and Path objects to Python types."""
        if isinstance(o, np.integer):
            return int(o)
        if isinstance(o, np.floating):
            return float(o)
        if isinstance(o, np.bool_):
            return bool(o)
        if isinstance(o, np.ndarray):
            return o.tolist()
        if isinstance(o, Enum):
            return o.value
        if isinstance(o, datetime):
            return o.isoformat()
        if isinstance(o, Path):
            return str(o)
        return super().default(o)


class JSONWriter:
    """Writer for fit results as JSON documents."""

    def __init__(self, *, indent: int = 2) -> None:
        self.indent = indent

    def write(
        self,
        result: Fit2DResult | DiagonalFitResult | OutlierRemovalResult,
        path: Path,
        *,
        kind: str,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Write a result record with its schema header.

        Args:
            result: Any record exposing ``to_dict``
            path: Output file path
            kind: Result kind recorded in the document ("fit_2d", "diagonal", ...)
            metadata: Extra run information (input file, center estimates, ...)

        Raises:
            DataIOError: If the file cannot be written
        """
        document = {
            "schema_version": SCHEMA_VERSION,
            "kind": kind,
            "metadata": self._metadata(metadata),
            "result": result.to_dict(),
        }
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(document, indent=self.indent, cls=NumpyEncoder) + "\n")
        except OSError as exc:
            msg = f"Could not write results to {path}: {exc}"
            raise DataIOError(msg) from exc

    @staticmethod
    def _metadata(extra: dict[str, Any] | None) -> dict[str, Any]:
        from chargefit import __version__

        metadata: dict[str, Any] = {
            "timestamp": datetime.now(UTC).isoformat(),
            "software_version": __version__,
        }
        metadata.update(extra or {})
        return metadata


__all__ = ["SCHEMA_VERSION", "JSONWriter", "NumpyEncoder"]
