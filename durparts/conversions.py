"""Conversions to and from the standard calendar types.

``dateutil.relativedelta`` is the calendar-aware counterpart of a duration:
it keeps years and months as units, so adding it to a date moves by
calendar months rather than by the average month length. ``timedelta``
has no months, so conversions to it go through the exact magnitude.
"""

import math
from datetime import timedelta
from fractions import Fraction

from dateutil.relativedelta import relativedelta

from durparts.decompose import simplify, to_exact, total_seconds
from durparts.duration import Duration
from durparts.errors import InvalidPartsError
from durparts.precision import round_fraction
from durparts.util import DAY, HOUR, MINUTE, USEC_PER_SECOND

# relativedelta fields that set an absolute value instead of adding one
_ABSOLUTE_FIELDS = (
    "year",
    "month",
    "day",
    "weekday",
    "hour",
    "minute",
    "second",
    "microsecond",
)


def to_relativedelta(duration: Duration) -> relativedelta:
    """Convert to a ``relativedelta``, keeping years and months as units.

    Everything below months is carried into days, hours, minutes, seconds and
    microseconds; a remainder below one microsecond is dropped.

    Raises:
        InvalidPartsError: If the years or months part is fractional

    Example:
        >>> to_relativedelta(Duration.from_parts({"months": 1, "minutes": 90}))
        relativedelta(months=+1, hours=+1, minutes=+30)
    """
    parts = duration.parts
    calendar = {unit: to_exact(parts.pop(unit, 0)) for unit in ("years", "months")}
    for unit, value in calendar.items():
        if value.denominator != 1:
            raise InvalidPartsError(
                f"relativedelta needs whole {unit}, got {unit}={value}.\n"
                f"Hint: duration.normalize() moves fractional {unit} into "
                f"smaller units"
            )

    micro = math.trunc(total_seconds(parts) * USEC_PER_SECOND)
    whole_seconds, microseconds = divmod(micro, USEC_PER_SECOND)
    days, rest = divmod(whole_seconds, DAY)
    hours, rest = divmod(rest, HOUR)
    minutes, secs = divmod(rest, MINUTE)

    sign = duration.sign
    return relativedelta(
        years=sign * int(calendar["years"]),
        months=sign * int(calendar["months"]),
        days=sign * days,
        hours=sign * hours,
        minutes=sign * minutes,
        seconds=sign * secs,
        microseconds=sign * microseconds,
    )


def from_relativedelta(delta: relativedelta, normalize: bool = False) -> Duration:
    """Build a duration from the relative fields of a ``relativedelta``.

    Raises:
        InvalidPartsError: If ``delta`` sets absolute fields (``year=``,
            ``weekday=``, ...) or leap days, which have no duration meaning,
            or if its fields mix signs and ``normalize`` is off
    """
    absolute = [name for name in _ABSOLUTE_FIELDS if getattr(delta, name) is not None]
    if absolute or delta.leapdays:
        fields = ", ".join(absolute + (["leapdays"] if delta.leapdays else []))
        raise InvalidPartsError(
            f"Cannot convert a relativedelta with absolute fields ({fields}) "
            f"to a duration.\n"
            f"Got: {delta!r}"
        )

    seconds = to_exact(delta.seconds) + Fraction(
        to_exact(delta.microseconds), USEC_PER_SECOND
    )
    parts = {
        "years": delta.years,
        "months": delta.months,
        "days": delta.days,
        "hours": delta.hours,
        "minutes": delta.minutes,
        "seconds": simplify(seconds),
    }
    return Duration.from_parts(parts, normalize=normalize)


def to_timedelta(duration: Duration) -> timedelta:
    """Convert to a ``timedelta``, rounding to the nearest microsecond.

    Months and years count at their average length.
    """
    micro = round_fraction(duration.magnitude * USEC_PER_SECOND, 0, "even")
    return timedelta(microseconds=micro)


def from_timedelta(delta: timedelta, *, include_weeks: bool = False) -> Duration:
    """Build a normalized duration from a ``timedelta``."""
    seconds = Fraction(delta.days * DAY + delta.seconds) + Fraction(
        delta.microseconds, USEC_PER_SECOND
    )
    return Duration.from_magnitude(seconds, include_weeks=include_weeks)
