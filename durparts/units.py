from decimal import Decimal
from fractions import Fraction
from typing import Any, Literal, TypeAlias

from durparts.errors import UnknownUnitError
from durparts.util import DAY, HOUR, MINUTE, MONTH, SECOND, WEEK, YEAR

Unit: TypeAlias = Literal[
    "years", "months", "weeks", "days", "hours", "minutes", "seconds"
]

# Largest to smallest
UNITS: tuple[Unit, ...] = (
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
)

FACTORS: dict[Unit, int] = {
    "years": YEAR,
    "months": MONTH,
    "weeks": WEEK,
    "days": DAY,
    "hours": HOUR,
    "minutes": MINUTE,
    "seconds": SECOND,
}

_RANKS: dict[Unit, int] = {unit: i for i, unit in enumerate(UNITS)}


def coerce_unit(value: Any) -> Unit:
    """Return the canonical unit name for ``value``.

    Accepts unit names in any case ("Hours", "MINUTES").

    Raises:
        UnknownUnitError: If ``value`` does not name a unit
    """
    if isinstance(value, str):
        name = value.lower()
        if name in _RANKS:
            return name  # type: ignore[return-value]
    valid = ", ".join(UNITS)
    raise UnknownUnitError(f"Unknown unit {value!r}.\nValid units: {valid}")


def factor(unit: Unit | str) -> int:
    """Seconds in one ``unit``."""
    return FACTORS[coerce_unit(unit)]


def unit_rank(unit: Unit | str) -> int:
    return _RANKS[coerce_unit(unit)]


def next_smaller_unit(unit: Unit | str) -> Unit:
    """Return the unit directly below ``unit`` ("hours" -> "minutes")."""
    rank = unit_rank(unit)
    if rank + 1 >= len(UNITS):
        raise UnknownUnitError(
            f"There is no unit smaller than {UNITS[rank]!r}.\n"
            f"Hint: seconds is the smallest unit; use ndigits for sub-second precision"
        )
    return UNITS[rank + 1]


def smaller_units(unit: Unit | str) -> tuple[Unit, ...]:
    """Return every unit strictly smaller than ``unit``, largest first."""
    return UNITS[unit_rank(unit) + 1 :]


# A quantity of one unit. Computed quantities are ``int`` or ``Fraction``;
# floats supplied by callers are stored as the Fraction of their repr.
Quantity: TypeAlias = int | float | Fraction | Decimal
Parts: TypeAlias = dict[Unit, Quantity]
