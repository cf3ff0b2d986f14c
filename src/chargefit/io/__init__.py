"""I/O module for chargefit.

Handles file operations including:
- Configuration file loading/saving (TOML)
- Sample table reading/writing (CSV)
- Result output (JSON)
"""

from chargefit.io.config import generate_default_config, load_config, save_config
from chargefit.io.samples import SampleTable, read_samples, write_samples
from chargefit.io.writers import JSONWriter

__all__ = [
    "JSONWriter",
    "SampleTable",
    "generate_default_config",
    "load_config",
    "read_samples",
    "save_config",
    "write_samples",
]
