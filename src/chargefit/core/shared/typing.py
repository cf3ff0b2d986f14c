"""Shared typing aliases used across chargefit."""

from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

FloatArray = npt.NDArray[np.float64]
BoolArray = npt.NDArray[np.bool_]

ArrayLike1D = Sequence[float] | FloatArray
