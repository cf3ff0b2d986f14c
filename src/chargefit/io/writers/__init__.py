"""Result writers."""

from chargefit.io.writers.json_writer import JSONWriter, NumpyEncoder

__all__ = ["JSONWriter", "NumpyEncoder"]
