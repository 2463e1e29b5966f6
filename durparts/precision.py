"""Rounding and truncating durations to a unit's precision.

The parts below the target unit are folded into it as an exact fraction
before rounding, and everything below the target is then reset with
``change_cascade``. Values are handled unsigned, so a negative duration
rounds the same way as its absolute value and keeps its sign.
"""

import logging
import math
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from durparts.decompose import simplify, to_exact, total_seconds
from durparts.units import Unit, coerce_unit, factor

if TYPE_CHECKING:
    from durparts.duration import Duration

logger = logging.getLogger(__name__)

HalfMode: TypeAlias = Literal["up", "down", "even"]

HALF_MODES: tuple[HalfMode, ...] = ("up", "down", "even")

# Ties round away from zero: seconds(2.5).round() is 3 seconds
DEFAULT_HALF: HalfMode = "up"

_HALF = Fraction(1, 2)


def _quantum(ndigits: int) -> Fraction:
    if ndigits >= 0:
        return Fraction(1, 10**ndigits)
    return Fraction(10**-ndigits)


def _shape(value: Fraction, ndigits: int) -> int | Fraction:
    if ndigits <= 0:
        return int(value)
    return simplify(value)


def round_fraction(
    value: Any, ndigits: int = 0, half: HalfMode = DEFAULT_HALF
) -> int | Fraction:
    """Round an exact value to ``ndigits`` decimal places.

    Args:
        value: Number to round (converted exactly, see ``to_exact``)
        ndigits: Decimal places to keep; negative values round to tens,
            hundreds, etc.
        half: How to break ties: "up" (away from zero), "down" (toward
            zero) or "even" (to the even neighbour)

    Returns:
        An ``int`` when ``ndigits <= 0``, otherwise an ``int`` or ``Fraction``

    Raises:
        ValueError: If ``half`` is not a known mode
    """
    if half not in HALF_MODES:
        valid = ", ".join(HALF_MODES)
        raise ValueError(f"Unknown half mode {half!r}.\nValid modes: {valid}")

    exact = to_exact(value)
    quantum = _quantum(ndigits)
    scaled = abs(exact) / quantum
    whole = math.floor(scaled)
    remainder = scaled - whole

    if remainder > _HALF:
        whole += 1
    elif remainder == _HALF:
        if half == "up" or (half == "even" and whole % 2 == 1):
            whole += 1

    result = whole * quantum
    return _shape(-result if exact < 0 else result, ndigits)


def truncate_fraction(value: Any, ndigits: int = 0) -> int | Fraction:
    """Drop everything past ``ndigits`` decimal places, toward zero."""
    exact = to_exact(value)
    quantum = _quantum(ndigits)
    return _shape(math.trunc(exact / quantum) * quantum, ndigits)


def fraction_of(duration: "Duration", unit: Unit | str) -> Fraction:
    """Express the parts smaller than ``unit`` as a fraction of one ``unit``.

    For 1h 29m 60s and "hours", the smaller parts are 29m 60s, which is half
    an hour, so the result is ``Fraction(1, 2)``. Denormalized parts can
    push the result past 1 (``{"seconds": 90}`` is 3/2 of a minute).
    """
    unit = coerce_unit(unit)
    return total_seconds(duration.smaller_parts(unit)) / factor(unit)


def _precision_unit(duration: "Duration", unit: Unit | str | None) -> Unit:
    if unit is not None:
        return coerce_unit(unit)
    if not duration:
        return "seconds"
    return duration.smallest_unit()


def round_duration(
    duration: "Duration",
    unit: Unit | str | None = None,
    ndigits: int = 0,
    *,
    half: HalfMode = DEFAULT_HALF,
) -> "Duration":
    """Round ``duration`` to the nearest whole ``unit``.

    The parts smaller than ``unit`` become a fraction of it, that fraction is
    added to the ``unit`` part, and the sum is rounded. Everything smaller
    than ``unit`` is then dropped. ``unit`` defaults to the smallest unit
    present (seconds for a zero duration).

    Example:
        >>> round_duration(seconds(89), "minutes").parts
        {'minutes': 1}
        >>> round_duration(seconds(90), "minutes").parts
        {'minutes': 2}
    """
    unit = _precision_unit(duration, unit)
    base = to_exact(duration.parts.get(unit, 0))
    fraction = fraction_of(duration, unit)
    rounded = round_fraction(base + fraction, ndigits, half)
    logger.debug(
        "round %s to %s: %s + %s -> %s (half=%s)",
        duration.parts, unit, base, fraction, rounded, half,
    )
    return duration.change_cascade({unit: rounded})


def truncate_duration(
    duration: "Duration", unit: Unit | str | None = None, ndigits: int = 0
) -> "Duration":
    """Truncate ``duration`` to ``unit``, discarding every smaller part.

    The ``unit`` part itself is cut toward zero to ``ndigits`` places. When
    the duration has no ``unit`` part, the smaller parts are first counted
    in ``unit``, so ``seconds(1830.5)`` truncated to minutes is 30 minutes,
    while ``{"hours": 1, "minutes": 89}`` truncated to hours stays 1 hour.
    On denormalized input this can sit below ``round`` even at an exact
    carry (``{"hours": 1, "minutes": 60}`` truncates to 1 hour, rounds to
    2); normalize first to truncate the carried value.
    """
    unit = _precision_unit(duration, unit)
    parts = duration.parts
    if unit in parts:
        value = to_exact(parts[unit])
    else:
        value = fraction_of(duration, unit)
    truncated = truncate_fraction(value, ndigits)
    logger.debug("truncate %s to %s: %s -> %s", parts, unit, value, truncated)
    return duration.change_cascade({unit: truncated})
