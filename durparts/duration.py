from collections.abc import Mapping
from dataclasses import dataclass
from fractions import Fraction
from typing import Any

from typing_extensions import override

from durparts.decompose import decompose, simplify, to_exact, total_seconds
from durparts.errors import (
    ConflictingArgumentsError,
    EmptyDurationError,
    InvalidPartsError,
    OutOfRangeError,
    UnknownUnitError,
)
from durparts.human import human_str
from durparts.precision import (
    DEFAULT_HALF,
    HalfMode,
    fraction_of,
    round_duration,
    truncate_duration,
)
from durparts.units import (
    UNITS,
    Parts,
    Quantity,
    Unit,
    coerce_unit,
    factor,
    smaller_units,
    unit_rank,
)
from durparts.util import NSEC_PER_USEC, USEC_PER_SECOND


@dataclass(frozen=True)
class Duration:
    """An exact duration: a signed number of seconds plus its parts.

    ``magnitude`` is the single source of truth. ``breakdown`` holds the
    unsigned parts as ``(unit, quantity)`` pairs, largest unit first, with
    every quantity an ``int`` or ``Fraction`` (floats are converted through
    their repr, so ``seconds(0.3)`` holds ``Fraction(3, 10)``). It may be
    denormalized: ``{"seconds": 90}`` and ``{"minutes": 1, "seconds": 30}``
    are different durations with the same magnitude.

    Build instances with ``from_magnitude``, ``from_parts`` or the unit
    helpers (``hours(9) + minutes(10)``) rather than directly.
    """

    magnitude: Fraction = Fraction(0)
    breakdown: tuple[tuple[Unit, Quantity], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "magnitude", to_exact(self.magnitude))
        last_rank = -1
        exact: list[tuple[Unit, Quantity]] = []
        for unit, quantity in self.breakdown:
            try:
                rank = unit_rank(unit)
            except UnknownUnitError as exc:
                raise InvalidPartsError(str(exc)) from exc
            if UNITS[rank] != unit or rank <= last_rank:
                raise InvalidPartsError(
                    f"Duration parts must use canonical unit names, "
                    f"largest unit first.\nGot: {self.breakdown!r}"
                )
            value = to_exact(quantity)
            if value <= 0:
                raise InvalidPartsError(
                    f"Duration parts must be positive (the sign lives in "
                    f"magnitude), got {unit}={quantity!r}"
                )
            exact.append((unit, simplify(value)))
            last_rank = rank

        # quantities are stored exactly: seconds(0.3) holds Fraction(3, 10)
        object.__setattr__(self, "breakdown", tuple(exact))

        expected = total_seconds(dict(self.breakdown))
        if abs(self.magnitude) != expected:
            raise InvalidPartsError(
                f"Duration magnitude ({self.magnitude}s) does not match its parts "
                f"({expected}s).\n"
                f"Hint: use Duration.from_parts() to derive the magnitude"
            )

    # Construction

    @classmethod
    def zero(cls) -> "Duration":
        return cls()

    @classmethod
    def from_magnitude(cls, seconds: Any, *, include_weeks: bool = False) -> "Duration":
        """Build a normalized duration from a number of seconds.

        Example:
            >>> Duration.from_magnitude(3661).parts
            {'hours': 1, 'minutes': 1, 'seconds': 1}
        """
        parts, sign = decompose(seconds, include_weeks=include_weeks)
        return cls._build(parts, sign)

    @classmethod
    def from_parts(
        cls,
        parts: Mapping[str, Any],
        normalize: bool = True,
        *,
        include_weeks: bool = False,
    ) -> "Duration":
        """Build a duration from a mapping of unit names to quantities.

        ``None`` and zero quantities are dropped. With ``normalize`` (the
        default) the parts are rebuilt from the total, so 30.5 minutes and
        30.5 seconds become 31 minutes and 0.5 seconds. Without it each
        unit keeps the quantity it was given (converted to an exact value).

        Raises:
            InvalidPartsError: If a key is not a unit, or if ``normalize`` is
                off and the quantities do not all share one sign
        """
        cleaned: dict[Unit, Quantity] = {}
        for key, quantity in parts.items():
            try:
                unit = coerce_unit(key)
            except UnknownUnitError as exc:
                raise InvalidPartsError(f"Invalid parts {dict(parts)!r}: {exc}") from exc
            if unit in cleaned:
                raise InvalidPartsError(
                    f"Unit {unit!r} appears more than once in {dict(parts)!r}"
                )
            if quantity is None or to_exact(quantity) == 0:
                continue
            cleaned[unit] = quantity

        if normalize:
            return cls.from_magnitude(
                total_seconds(cleaned), include_weeks=include_weeks
            )

        signs = {to_exact(quantity) > 0 for quantity in cleaned.values()}
        if len(signs) > 1:
            raise InvalidPartsError(
                f"Parts must all share one sign, got {cleaned!r}.\n"
                f"Hint: pass normalize=True to combine them into one total"
            )
        sign = -1 if signs == {False} else 1
        return cls._build({unit: abs(q) for unit, q in cleaned.items()}, sign)

    @classmethod
    def _build(cls, parts: Mapping[Unit, Quantity], sign: int) -> "Duration":
        # parts are unsigned; drop zeroes and order largest first
        ordered = tuple(
            (unit, parts[unit])
            for unit in UNITS
            if parts.get(unit) is not None and to_exact(parts[unit]) != 0
        )
        total = total_seconds(dict(ordered))
        return cls(magnitude=sign * total, breakdown=ordered)

    # Views

    @property
    def parts(self) -> Parts:
        """Unsigned parts, largest unit first (a fresh dict on every access)."""
        return dict(self.breakdown)

    @property
    def sign(self) -> int:
        return -1 if self.magnitude < 0 else 1

    def in_units(self, unit: Unit | str) -> Fraction:
        """Total magnitude expressed in ``unit`` (90 seconds is 3/2 minutes)."""
        return self.magnitude / factor(unit)

    def smaller_parts(self, unit: Unit | str) -> Parts:
        """Parts strictly smaller than ``unit``.

        For 1h 29m 60s and "hours" this is ``{"minutes": 29, "seconds": 60}``.
        """
        smaller = smaller_units(unit)
        return {u: q for u, q in self.breakdown if u in smaller}

    def smallest_part(self) -> tuple[Unit, Quantity]:
        if not self.breakdown:
            raise EmptyDurationError(
                "A zero duration has no parts, so it has no smallest part.\n"
                "Hint: pass an explicit unit to round() or truncate()"
            )
        return self.breakdown[-1]

    def smallest_unit(self) -> Unit:
        return self.smallest_part()[0]

    def fraction_of(self, unit: Unit | str) -> Fraction:
        return fraction_of(self, unit)

    # Transformations

    def normalize(self, *, include_weeks: bool = False) -> "Duration":
        """Rebuild canonical parts from the magnitude.

        Example:
            >>> seconds(61).normalize().parts
            {'minutes': 1, 'seconds': 1}
        """
        return Duration.from_magnitude(self.magnitude, include_weeks=include_weeks)

    def change(
        self, changes: Mapping[str, Any] | None = None, /, **unit_changes: Any
    ) -> "Duration":
        """Replace the given parts, leaving every other part alone.

        Unlike ``change_cascade``, smaller parts are never reset. A zero
        removes the part, as does ``None``. The sign is kept.

        Example:
            >>> (hours(9) + minutes(10)).change(hours=12).parts
            {'hours': 12, 'minutes': 10}
        """
        merged = self.parts
        merged.update(_overrides(changes, unit_changes))
        return Duration._build(merged, self.sign)

    def change_cascade(
        self,
        changes: Mapping[str, Any] | None = None,
        /,
        *,
        nsec: Any = None,
        usec: Any = None,
        **unit_changes: Any,
    ) -> "Duration":
        """Replace the given parts and reset every part below the largest one.

        Like ``datetime.replace`` with a reset: setting the hour clears the
        minutes and seconds. Parts above the largest changed unit are kept.
        ``nsec`` or ``usec`` (not both) add a sub-second fraction to the
        seconds part.

        Example:
            >>> d = hours(9) + minutes(10) + seconds(40)
            >>> d.change_cascade(hours=12).parts
            {'hours': 12}
            >>> d.change_cascade(minutes=5).parts
            {'hours': 9, 'minutes': 5}

        Raises:
            ConflictingArgumentsError: If both ``nsec`` and ``usec`` are given
            OutOfRangeError: If the sub-second value is not below one second
        """
        overrides = _overrides(changes, unit_changes)
        subsecond = _subsecond(nsec, usec)
        current = self.parts

        cascade_rank = min((unit_rank(unit) for unit in overrides), default=len(UNITS))
        new_parts: dict[Unit, Quantity] = {}
        for rank, unit in enumerate(UNITS):
            if unit in overrides:
                new_parts[unit] = overrides[unit]
            elif rank < cascade_rank and unit in current:
                new_parts[unit] = current[unit]

        if subsecond is not None:
            new_parts["seconds"] = simplify(
                to_exact(new_parts.get("seconds", 0)) + subsecond
            )

        return Duration._build(new_parts, self.sign)

    def round(
        self,
        unit: Unit | str | None = None,
        ndigits: int = 0,
        *,
        half: HalfMode = DEFAULT_HALF,
    ) -> "Duration":
        """Round to the nearest whole ``unit`` (see ``round_duration``).

        Example:
            >>> seconds(2.5).round().parts
            {'seconds': 3}
            >>> seconds(2.5).round(half="down").parts
            {'seconds': 2}
        """
        return round_duration(self, unit, ndigits, half=half)

    def truncate(self, unit: Unit | str | None = None, ndigits: int = 0) -> "Duration":
        """Truncate to ``unit`` (see ``truncate_duration``)."""
        return truncate_duration(self, unit, ndigits)

    def human_str(
        self,
        *,
        precision: int | None = None,
        separator: str = "",
        delimiter: str = " ",
        use_2_digit_numbers: bool = False,
    ) -> str:
        return human_str(
            self,
            precision=precision,
            separator=separator,
            delimiter=delimiter,
            use_2_digit_numbers=use_2_digit_numbers,
        )

    # Arithmetic

    def __add__(self, other: "Duration") -> "Duration":
        """Add unit by unit, keeping the parts denormalized.

        If the sums would leave parts of different signs, the result is
        normalized instead.
        """
        if not isinstance(other, Duration):
            return NotImplemented

        combined: dict[Unit, Fraction] = {}
        for duration in (self, other):
            for unit, quantity in duration.breakdown:
                combined[unit] = combined.get(unit, Fraction(0)) + (
                    duration.sign * to_exact(quantity)
                )

        if len({total > 0 for total in combined.values() if total}) > 1:
            return Duration.from_magnitude(self.magnitude + other.magnitude)
        return Duration.from_parts(
            {unit: simplify(total) for unit, total in combined.items()},
            normalize=False,
        )

    def __sub__(self, other: "Duration") -> "Duration":
        if not isinstance(other, Duration):
            return NotImplemented
        return self + -other

    def __neg__(self) -> "Duration":
        return Duration(magnitude=-self.magnitude, breakdown=self.breakdown)

    def __abs__(self) -> "Duration":
        return Duration(magnitude=abs(self.magnitude), breakdown=self.breakdown)

    def __bool__(self) -> bool:
        return self.magnitude != 0

    @override
    def __str__(self) -> str:
        """Human-friendly string such as ``2h 30m 17s``."""
        return self.human_str()


def _overrides(
    changes: Mapping[str, Any] | None, unit_changes: Mapping[str, Any]
) -> dict[Unit, Quantity]:
    overrides: dict[Unit, Quantity] = {}
    for source in (changes or {}, unit_changes):
        for key, quantity in source.items():
            unit = coerce_unit(key)
            if unit in overrides:
                raise ConflictingArgumentsError(
                    f"Unit {unit!r} was given more than once"
                )
            if quantity is None:
                # like from_parts, None drops the part
                quantity = 0
            if to_exact(quantity) < 0:
                raise OutOfRangeError(
                    f"Part values must not be negative, got {unit}={quantity!r}.\n"
                    f"Hint: the sign of a duration is kept when its parts change; "
                    f"negate the duration instead"
                )
            overrides[unit] = quantity
    return overrides


def _subsecond(nsec: Any, usec: Any) -> Fraction | None:
    """Seconds to add for an ``nsec``/``usec`` override, if any."""
    if nsec is not None and usec is not None:
        raise ConflictingArgumentsError(
            f"Can't change both nsec and usec at the same time "
            f"(nsec={nsec!r}, usec={usec!r})"
        )
    if nsec is not None:
        micro = to_exact(nsec) / NSEC_PER_USEC
    elif usec is not None:
        micro = to_exact(usec)
    else:
        return None

    if not 0 <= micro < USEC_PER_SECOND:
        raise OutOfRangeError(
            f"Sub-second override must be under one second, got {micro} usec"
        )
    return micro / USEC_PER_SECOND


def years(n: Any) -> Duration:
    return Duration.from_parts({"years": n}, normalize=False)


def months(n: Any) -> Duration:
    return Duration.from_parts({"months": n}, normalize=False)


def weeks(n: Any) -> Duration:
    return Duration.from_parts({"weeks": n}, normalize=False)


def days(n: Any) -> Duration:
    return Duration.from_parts({"days": n}, normalize=False)


def hours(n: Any) -> Duration:
    return Duration.from_parts({"hours": n}, normalize=False)


def minutes(n: Any) -> Duration:
    return Duration.from_parts({"minutes": n}, normalize=False)


def seconds(n: Any) -> Duration:
    """A duration of ``n`` seconds, kept in seconds (``seconds(61)`` is not 1m 1s)."""
    return Duration.from_parts({"seconds": n}, normalize=False)
