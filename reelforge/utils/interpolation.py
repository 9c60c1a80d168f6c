"""Interpolation utilities for timeline animation.

Provides the easing curves understood by project documents and the small
numeric helpers shared by the resolver, the banner state machine and the
audio mix builder.

Usage:
    from reelforge.utils.interpolation import EasingKind, get_easing_function, lerp

    ease = get_easing_function(EasingKind.EASE_OUT)
    value = lerp(0, 100, ease(0.5))

All rounding to milliseconds goes through ``round_half_up`` so that frame
timing matches the browser renderer the project format comes from (JavaScript
``Math.round``), not Python's banker's rounding.
"""

import logging
import math
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


# =============================================================================
# Numeric helpers
# =============================================================================


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation. ``t`` is not clamped."""
    return a + (b - a) * t


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))


def round_half_up(value: float) -> int:
    """Round half toward positive infinity (JavaScript ``Math.round``)."""
    return math.floor(value + 0.5)


def progress(elapsed: float, duration: float) -> float:
    """Normalized progress in [0, 1].

    A zero or negative duration counts as already complete.
    """
    if duration <= 0:
        return 1.0
    return clamp(elapsed / duration, 0.0, 1.0)


# =============================================================================
# Easing Functions
# =============================================================================


def linear(t: float) -> float:
    """Linear easing (no easing)."""
    return t


def ease_in_out(t: float) -> float:
    """Ease in-out (quadratic)."""
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t


def ease_out(t: float) -> float:
    """Ease out (cubic)."""
    return 1 - (1 - t) ** 3


class EasingKind(str, Enum):
    """Easing names accepted in project documents."""

    LINEAR = "linear"
    EASE_IN_OUT = "easeInOut"
    EASE_OUT = "easeOut"


EASING_FUNCTIONS: dict[EasingKind, Callable[[float], float]] = {
    EasingKind.LINEAR: linear,
    EasingKind.EASE_IN_OUT: ease_in_out,
    EasingKind.EASE_OUT: ease_out,
}


def parse_easing(name: str | None) -> EasingKind:
    """Resolve an easing name, falling back to linear for unknown names."""
    if name is None:
        return EasingKind.LINEAR
    if isinstance(name, EasingKind):
        return name
    try:
        return EasingKind(name)
    except ValueError:
        logger.warning(
            f"[EASING] Unknown easing '{name}', using linear. "
            f"Available: {', '.join(k.value for k in EasingKind)}"
        )
        return EasingKind.LINEAR


def get_easing_function(kind: EasingKind | str | None) -> Callable[[float], float]:
    """Get an easing function by kind or name (unknown names map to linear)."""
    return EASING_FUNCTIONS[parse_easing(kind)]
