"""Breaking a number of seconds down into parts.

All arithmetic is done on ``fractions.Fraction`` so carrying a fractional
remainder across unit boundaries never drifts.
"""

import logging
import math
import numbers
from decimal import Decimal
from fractions import Fraction
from typing import Any

from durparts.units import FACTORS, UNITS, Parts

logger = logging.getLogger(__name__)


def to_exact(value: Any) -> Fraction:
    """Convert a numeric quantity to an exact ``Fraction``.

    Floats are converted through their shortest repr, so ``1.4`` becomes
    ``7/5`` rather than the binary approximation ``6305039478318694/4503599627370496``.

    Raises:
        TypeError: If value is not a number (bools are rejected too)
        ValueError: If value is NaN or infinite
    """
    if isinstance(value, bool):
        raise TypeError(f"Expected a number of seconds or units, got bool: {value!r}")
    if isinstance(value, numbers.Rational):
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise ValueError(f"Duration quantities must be finite, got {value!r}")
        return Fraction(repr(value))
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"Duration quantities must be finite, got {value!r}")
        return Fraction(value)
    raise TypeError(
        f"Expected int, float, Fraction, or Decimal.\n"
        f"Got {type(value).__name__!r}: {value!r}"
    )


def simplify(value: Fraction) -> int | Fraction:
    """Return whole values as ``int`` and keep the rest as ``Fraction``."""
    if value.denominator == 1:
        return value.numerator
    return value


def decompose(magnitude: Any, *, include_weeks: bool = False) -> tuple[Parts, int]:
    """Split ``magnitude`` seconds into canonical parts, largest unit first.

    Each unit takes as many whole units as fit in what is left; seconds keep
    the exact remainder, fractional or not. Weeks are skipped unless
    ``include_weeks`` is set, so by default 10 days stay ``{"days": 10}``.

    Returns:
        A tuple ``(parts, sign)``: the unsigned parts and ``-1`` if the
        magnitude is negative, else ``1``. Zero gives ``({}, 1)``.

    Example:
        >>> decompose(3661.5)
        ({'hours': 1, 'minutes': 1, 'seconds': Fraction(3, 2)}, 1)
    """
    value = to_exact(magnitude)
    sign = -1 if value < 0 else 1
    remaining = abs(value)

    parts: Parts = {}
    for unit in UNITS[:-1]:
        if unit == "weeks" and not include_weeks:
            continue
        quantity = remaining // FACTORS[unit]
        if quantity:
            parts[unit] = quantity
            remaining -= quantity * FACTORS[unit]

    if remaining:
        parts["seconds"] = simplify(remaining)

    logger.debug("decomposed %s seconds into %r (sign %d)", value, parts, sign)
    return parts, sign


def total_seconds(parts: Parts) -> Fraction:
    """Sum ``quantity * factor`` over ``parts`` exactly."""
    return sum(
        (to_exact(quantity) * FACTORS[unit] for unit, quantity in parts.items()),
        Fraction(0),
    )
