from importlib.resources import files

from .conversions import from_relativedelta, from_timedelta, to_relativedelta, to_timedelta
from .decompose import decompose, to_exact
from .duration import Duration, days, hours, minutes, months, seconds, weeks, years
from .errors import (
    ConflictingArgumentsError,
    DurationError,
    EmptyDurationError,
    InvalidPartsError,
    OutOfRangeError,
    UnknownUnitError,
)
from .human import HumanStringFormatter, human_str
from .precision import fraction_of, round_fraction, truncate_fraction
from .units import UNITS, Unit, factor, next_smaller_unit, smaller_units

# Load documentation files for programmatic access by agents and code-aware tools
_docs_path = files(__package__) / "docs"
docs = {
    "readme": (_docs_path / "README.md").read_text(),
    "api": (_docs_path / "API.md").read_text(),
}

__all__ = [
    "Duration",
    "Unit",
    "UNITS",
    "years",
    "months",
    "weeks",
    "days",
    "hours",
    "minutes",
    "seconds",
    "decompose",
    "to_exact",
    "factor",
    "next_smaller_unit",
    "smaller_units",
    "fraction_of",
    "round_fraction",
    "truncate_fraction",
    "human_str",
    "HumanStringFormatter",
    "to_relativedelta",
    "from_relativedelta",
    "to_timedelta",
    "from_timedelta",
    "DurationError",
    "UnknownUnitError",
    "InvalidPartsError",
    "ConflictingArgumentsError",
    "OutOfRangeError",
    "EmptyDurationError",
    "docs",
]
