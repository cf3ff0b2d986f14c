"""Domain configuration models and the process-wide configuration store."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from chargefit.core import constants

LogFormat = Literal["text", "json"]


class UncertaintyConfig(BaseModel):
    """Per-sample charge uncertainty used to weight residuals.

    When enabled, every sample of a dataset gets the same uncertainty,
    ``fraction`` times the dataset's maximum charge, floored at
    ``min_value``. When disabled every sample is weighted uniformly (1.0).

    Example TOML:
        [uncertainty]
        enabled = true
        min_value = 1e-20
    """

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(
        default=True,
        description="Weight residuals by a charge-proportional uncertainty.",
    )
    fraction: Annotated[float, Field(gt=0, le=1)] = Field(
        default=constants.CHARGE_UNCERTAINTY_FRACTION,
        description="Uncertainty as a fraction of the maximum charge.",
    )
    min_value: Annotated[float, Field(gt=0)] = Field(
        default=constants.MIN_UNCERTAINTY_VALUE,
        description="Lower floor on the uncertainty (also the amplitude lower bound).",
    )

    def sample_uncertainty(self, max_charge: float) -> float:
        """Return the uncertainty assigned to every sample of a dataset."""
        if not self.enabled:
            return 1.0
        return max(self.fraction * max_charge, self.min_value)


class OutlierConfig(BaseModel):
    """Thresholds (in MAD units) of the outlier filtering passes."""

    model_config = ConfigDict(extra="forbid")

    enabled: bool = Field(
        default=True,
        description="Default for enable_outlier_filtering when callers do not pass one.",
    )
    conservative_threshold: Annotated[float, Field(gt=0)] = Field(
        default=constants.OUTLIER_CONSERVATIVE_THRESHOLD,
        description="Threshold of the first filtered dataset.",
    )
    lenient_threshold: Annotated[float, Field(gt=0)] = Field(
        default=constants.OUTLIER_LENIENT_THRESHOLD,
        description="Threshold of the second filtered dataset.",
    )
    retry_threshold: Annotated[float, Field(gt=0)] = Field(
        default=constants.OUTLIER_RETRY_THRESHOLD,
        description="Threshold of the lenient retry when too many samples are rejected.",
    )

    @model_validator(mode="after")
    def validate_ordering(self) -> OutlierConfig:
        """Require thresholds to loosen from pass to pass."""
        if not self.conservative_threshold <= self.lenient_threshold:
            msg = "conservative_threshold must not exceed lenient_threshold"
            raise ValueError(msg)
        return self


class OutputConfig(BaseModel):
    """Settings for command-line output."""

    model_config = ConfigDict(extra="forbid")

    log_format: LogFormat = Field(
        default="text",
        description="Format for log file: text (human-readable) or json (structured).",
    )


class ChargeFitConfig(BaseModel):
    """Top-level chargefit configuration.

    Example TOML configuration:
        [uncertainty]
        enabled = true
        fraction = 0.05
        min_value = 1e-20

        [outliers]
        enabled = true
        conservative_threshold = 2.5
        lenient_threshold = 3.0
        retry_threshold = 4.0

        [output]
        log_format = "text"
    """

    model_config = ConfigDict(extra="forbid")

    uncertainty: UncertaintyConfig = Field(default_factory=UncertaintyConfig)
    outliers: OutlierConfig = Field(default_factory=OutlierConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)


_store_lock = threading.Lock()
_active_config = ChargeFitConfig()


def get_config() -> ChargeFitConfig:
    """Return the active process-wide configuration."""
    with _store_lock:
        return _active_config


def set_config(config: ChargeFitConfig) -> ChargeFitConfig:
    """Install a new process-wide configuration and return the previous one."""
    global _active_config
    with _store_lock:
        previous = _active_config
        _active_config = config
    return previous


@contextmanager
def use_config(config: ChargeFitConfig) -> Iterator[ChargeFitConfig]:
    """Temporarily install ``config`` as the active configuration."""
    previous = set_config(config)
    try:
        yield config
    finally:
        set_config(previous)


__all__ = [
    "ChargeFitConfig",
    "LogFormat",
    "OutlierConfig",
    "OutputConfig",
    "UncertaintyConfig",
    "get_config",
    "set_config",
    "use_config",
]
