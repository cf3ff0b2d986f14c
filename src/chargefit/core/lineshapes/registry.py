"""Lineshape registry for looking up residual models by name."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Callable

    from chargefit.core.shared.typing import FloatArray


@runtime_checkable
class Lineshape(Protocol):
    """Protocol for 1D lineshape models fitted by the engine."""

    name: str
    param_names: tuple[str, ...]

    def evaluate(self, x: FloatArray, params: FloatArray) -> FloatArray:
        """Evaluate the model at ``x``."""
        ...

    def residuals(
        self, params: FloatArray, x: FloatArray, y: FloatArray, sigma: FloatArray
    ) -> FloatArray:
        """Weighted residuals ``(model - y) / sigma``."""
        ...

    def jacobian(
        self, params: FloatArray, x: FloatArray, y: FloatArray, sigma: FloatArray
    ) -> FloatArray:
        """Jacobian of :meth:`residuals` with respect to ``params``."""
        ...


SHAPES: dict[str, type[Lineshape]] = {}


def register_shape(name: str) -> Callable[[type[Lineshape]], type[Lineshape]]:
    """Register a lineshape class under ``name``.

    Example:
        @register_shape("power_lorentzian")
        class PowerLorentzian:
            ...
    """

    def decorator(shape_class: type[Lineshape]) -> type[Lineshape]:
        SHAPES[name] = shape_class
        return shape_class

    return decorator


def get_shape(name: str) -> type[Lineshape]:
    """Get a lineshape class by name.

    Raises
    ------
        KeyError: If shape name not found in registry
    """
    return SHAPES[name]
