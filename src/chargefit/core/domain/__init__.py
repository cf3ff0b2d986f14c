"""Domain objects: configuration and sample series."""

from chargefit.core.domain.config import (
    ChargeFitConfig,
    OutlierConfig,
    OutputConfig,
    UncertaintyConfig,
    get_config,
    set_config,
    use_config,
)
from chargefit.core.domain.samples import AxisSeries

__all__ = [
    "AxisSeries",
    "ChargeFitConfig",
    "OutlierConfig",
    "OutputConfig",
    "UncertaintyConfig",
    "get_config",
    "set_config",
    "use_config",
]
