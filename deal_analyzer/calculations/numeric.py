"""
Numeric Helpers

Float arithmetic that follows IEEE semantics instead of raising.

Deal inputs come straight from a form, so a zero loan term or a zero
investment basis must flow through a projection as NaN/Infinity rather
than abort it with ZeroDivisionError.
"""

import numpy as np


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, returning inf/-inf/nan for a zero denominator."""
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.divide(np.float64(numerator), np.float64(denominator)))


def safe_power(base: float, exponent: float) -> float:
    """Raise to a power, returning nan for a negative base with a fractional exponent."""
    with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
        return float(np.power(np.float64(base), np.float64(exponent)))


def round_half_up(value: float) -> float:
    """Round to the nearest integer with halves rounded up (like Math.round)."""
    return float(np.floor(np.float64(value) + 0.5))


def floor(value: float) -> float:
    """Floor that passes nan/inf through unchanged."""
    return float(np.floor(np.float64(value)))


def ceil(value: float) -> float:
    """Ceiling that passes nan/inf through unchanged."""
    return float(np.ceil(np.float64(value)))


def non_negative(value: float) -> float:
    """Clamp at zero, letting nan through (max() would swallow it)."""
    return float(np.maximum(np.float64(value), 0.0))
