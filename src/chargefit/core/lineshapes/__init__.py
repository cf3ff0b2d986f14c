"""Lineshape models fitted by the engine."""

from chargefit.core.lineshapes.power_lorentzian import PowerLorentzian, power_lorentzian
from chargefit.core.lineshapes.registry import (
    SHAPES,
    Lineshape,
    get_shape,
    register_shape,
)

__all__ = [
    "SHAPES",
    "Lineshape",
    "PowerLorentzian",
    "get_shape",
    "power_lorentzian",
    "register_shape",
]
