from dataclasses import FrozenInstanceError
from fractions import Fraction

import pytest

from durparts import (
    ConflictingArgumentsError,
    Duration,
    DurationError,
    EmptyDurationError,
    InvalidPartsError,
    OutOfRangeError,
    UnknownUnitError,
    days,
    hours,
    minutes,
    months,
    seconds,
    weeks,
)


def nf(parts: dict) -> Duration:
    """Duration with the parts kept exactly as written."""
    return Duration.from_parts(parts, normalize=False)


# from_parts / from_magnitude


def test_from_parts_normalizes_by_default() -> None:
    duration = Duration.from_parts({"minutes": 30.5, "seconds": 30.5})

    assert duration.parts == {"minutes": 31, "seconds": Fraction(1, 2)}
    assert duration.magnitude == Fraction(3721, 2)


def test_from_parts_without_normalize_keeps_parts() -> None:
    parts = {"minutes": 30.5, "seconds": 30.5}
    duration = nf(parts)

    assert duration.parts == parts
    assert duration.magnitude == Fraction(3721, 2)


def test_from_parts_drops_none_and_zero() -> None:
    duration = nf({"hours": None, "minutes": 0, "seconds": 5})

    assert duration.parts == {"seconds": 5}


def test_from_parts_orders_largest_first() -> None:
    duration = nf({"seconds": 1, "days": 2, "hours": 3})

    assert list(duration.parts) == ["days", "hours", "seconds"]


def test_from_parts_accepts_any_case() -> None:
    assert nf({"Hours": 1}).parts == {"hours": 1}


def test_from_parts_rejects_unknown_units() -> None:
    with pytest.raises(InvalidPartsError, match="fortnights"):
        Duration.from_parts({"fortnights": 1})

    with pytest.raises(DurationError):
        Duration.from_parts({"hour": 1}, normalize=False)


def test_from_parts_rejects_duplicate_units() -> None:
    with pytest.raises(InvalidPartsError):
        Duration.from_parts({"hours": 1, "HOURS": 2})


def test_negative_parts() -> None:
    duration = nf({"hours": -1, "minutes": -30})

    assert duration.parts == {"hours": 1, "minutes": 30}
    assert duration.sign == -1
    assert duration.magnitude == -5400


def test_mixed_signs_need_normalize() -> None:
    with pytest.raises(InvalidPartsError, match="one sign"):
        nf({"hours": 1, "minutes": -30})

    assert Duration.from_parts({"hours": 1, "minutes": -30}).parts == {"minutes": 30}


def test_from_magnitude() -> None:
    duration = Duration.from_magnitude(-5400)

    assert duration.parts == {"hours": 1, "minutes": 30}
    assert duration.sign == -1
    assert Duration.from_magnitude(0) == Duration.zero()


def test_from_magnitude_with_weeks() -> None:
    assert Duration.from_magnitude(9 * 86400).parts == {"days": 9}
    assert Duration.from_magnitude(9 * 86400, include_weeks=True).parts == {
        "weeks": 1,
        "days": 2,
    }


def test_unit_helpers_do_not_normalize() -> None:
    assert seconds(61).parts == {"seconds": 61}
    assert minutes(90).parts == {"minutes": 90}
    assert days(10).parts == {"days": 10}
    assert weeks(1).magnitude == 604800
    assert months(1).magnitude == 2629746
    assert seconds(0).parts == {}


def test_zero() -> None:
    zero = Duration.zero()

    assert zero.parts == {}
    assert zero.magnitude == 0
    assert zero.sign == 1
    assert not zero
    assert seconds(1)


def test_direct_construction_is_checked() -> None:
    assert Duration(magnitude=90, breakdown=(("seconds", 90),)) == seconds(90)

    with pytest.raises(InvalidPartsError, match="does not match"):
        Duration(magnitude=10, breakdown=(("seconds", 9),))

    with pytest.raises(InvalidPartsError, match="largest unit first"):
        Duration(magnitude=90, breakdown=(("seconds", 30), ("minutes", 1)))

    with pytest.raises(InvalidPartsError, match="positive"):
        Duration(magnitude=0, breakdown=(("seconds", 0),))

    with pytest.raises(InvalidPartsError):
        Duration(magnitude=1, breakdown=(("ticks", 1),))


def test_duration_is_immutable() -> None:
    duration = hours(1) + minutes(30)

    parts = duration.parts
    parts["hours"] = 5

    assert duration.parts == {"hours": 1, "minutes": 30}

    with pytest.raises(FrozenInstanceError):
        duration.magnitude = Fraction(1)  # type: ignore[misc]


def test_equality_compares_parts_too() -> None:
    assert seconds(90) != minutes(1) + seconds(30)
    assert seconds(90).magnitude == (minutes(1) + seconds(30)).magnitude
    assert seconds(90).normalize() == (minutes(1) + seconds(30)).normalize()
    assert len({seconds(1), seconds(1.0), seconds(Fraction(1))}) == 1


def test_in_units() -> None:
    assert seconds(90).in_units("minutes") == Fraction(3, 2)
    assert days(1).in_units("hours") == 24


# change / change_cascade


def test_change_and_change_cascade() -> None:
    duration = hours(9) + minutes(10) + seconds(40)

    assert duration.parts == {"hours": 9, "minutes": 10, "seconds": 40}
    assert duration.change(hours=12).parts == {"hours": 12, "minutes": 10, "seconds": 40}
    assert duration.change_cascade(hours=12).parts == {"hours": 12}
    assert duration.change_cascade(minutes=5).parts == {"hours": 9, "minutes": 5}


def test_change_fractional_seconds() -> None:
    duration = Duration.from_magnitude(1830.5)

    assert duration.parts == {"minutes": 30, "seconds": 30.5}
    assert duration.change(minutes=1).parts == {"minutes": 1, "seconds": 30.5}
    assert duration.change_cascade(minutes=1).parts == {"minutes": 1}


def test_change_keeps_denormalized_parts() -> None:
    duration = nf({"hours": 1, "minutes": 29, "seconds": 60})

    assert duration.change(hours=1).parts == {"hours": 1, "minutes": 29, "seconds": 60}
    assert duration.change_cascade(hours=1).parts == {"hours": 1}


def test_change_adds_and_removes_units() -> None:
    duration = hours(1) + minutes(30)

    assert duration.change(seconds=5).parts == {"hours": 1, "minutes": 30, "seconds": 5}
    assert duration.change(minutes=0).parts == {"hours": 1}
    assert duration.change({"days": 2}).parts == {"days": 2, "hours": 1, "minutes": 30}
    assert duration.change(minutes=5).magnitude == 3900


def test_change_keeps_sign() -> None:
    duration = -(hours(1) + minutes(30))
    changed = duration.change(hours=2)

    assert changed.parts == {"hours": 2, "minutes": 30}
    assert changed.sign == -1
    assert changed.magnitude == -9000


def test_change_validates_overrides() -> None:
    with pytest.raises(UnknownUnitError):
        hours(1).change(fortnights=1)

    with pytest.raises(OutOfRangeError):
        hours(1).change(hours=-1)

    with pytest.raises(ConflictingArgumentsError):
        hours(1).change({"hours": 2}, hours=3)


def test_change_none_removes_the_part() -> None:
    assert (hours(1) + minutes(30)).change(minutes=None).parts == {"hours": 1}
    assert (hours(9) + minutes(10)).change_cascade(hours=None).parts == {}
    assert (hours(9) + minutes(10)).change({"hours": None}).parts == {"minutes": 10}


def test_change_cascade_keeps_smaller_overrides() -> None:
    duration = hours(9) + minutes(10) + seconds(40)

    assert duration.change_cascade(hours=1, seconds=5).parts == {"hours": 1, "seconds": 5}
    assert duration.change_cascade({"days": 2}).parts == {"days": 2}


def test_change_cascade_resets_weeks_below_months() -> None:
    duration = nf({"months": 1, "weeks": 2, "days": 3})

    assert duration.change_cascade(months=2).parts == {"months": 2}
    assert duration.change_cascade(days=1).parts == {"months": 1, "weeks": 2, "days": 1}


def test_change_cascade_subsecond() -> None:
    assert seconds(5).change_cascade(usec=250_000).parts == {"seconds": Fraction(21, 4)}
    assert seconds(5).change_cascade(nsec=500_000_000).parts == {
        "seconds": Fraction(11, 2)
    }

    duration = hours(1) + seconds(7)
    assert duration.change_cascade(seconds=3, usec=500_000).parts == {
        "hours": 1,
        "seconds": Fraction(7, 2),
    }


def test_change_cascade_subsecond_validation() -> None:
    with pytest.raises(ConflictingArgumentsError):
        seconds(5).change_cascade(nsec=1, usec=1)

    with pytest.raises(OutOfRangeError):
        seconds(5).change_cascade(usec=1_000_000)

    with pytest.raises(OutOfRangeError):
        seconds(5).change_cascade(nsec=1_000_000_000)

    with pytest.raises(OutOfRangeError):
        seconds(5).change_cascade(usec=-1)


# smaller_parts / smallest_part


def test_smaller_parts() -> None:
    duration = nf({"hours": 1, "minutes": 29, "seconds": 60})

    assert duration.normalize().parts == {"hours": 1, "minutes": 30}
    assert duration.smaller_parts("hours") == {"minutes": 29, "seconds": 60}
    assert duration.smaller_parts("minutes") == {"seconds": 60}
    assert duration.smaller_parts("seconds") == {}

    with pytest.raises(UnknownUnitError):
        duration.smaller_parts("moments")


def test_smallest_part() -> None:
    duration = hours(1) + minutes(5)

    assert duration.smallest_part() == ("minutes", 5)
    assert duration.smallest_unit() == "minutes"

    with pytest.raises(EmptyDurationError):
        Duration.zero().smallest_part()

    with pytest.raises(EmptyDurationError):
        Duration.zero().smallest_unit()


# normalize


def test_normalize() -> None:
    assert seconds(61).normalize().parts == {"minutes": 1, "seconds": 1}
    assert seconds(1830.5).parts == {"seconds": 1830.5}
    assert seconds(1830.5).normalize().parts == {"minutes": 30, "seconds": 30.5}


def test_normalize_fractional_unit() -> None:
    duration = nf({"minutes": 1.4, "seconds": 25})

    assert duration.parts == {"minutes": Fraction(7, 5), "seconds": 25}
    assert duration.normalize().parts == {"minutes": 1, "seconds": 49}


def test_float_quantities_are_stored_exactly() -> None:
    assert seconds(0.1) + seconds(0.2) == seconds(0.3)
    assert seconds(1.1) == seconds(Fraction(11, 10))
    assert nf({"seconds": 0.3}).parts == {"seconds": Fraction(3, 10)}
    assert seconds(0.3).magnitude == Fraction(3, 10)


def test_normalize_weeks() -> None:
    assert days(10).normalize().parts == {"days": 10}
    assert days(10).normalize(include_weeks=True).parts == {"weeks": 1, "days": 3}
    assert weeks(2).normalize().parts == {"days": 14}


# arithmetic


def test_addition_merges_parts() -> None:
    assert (hours(1) + hours(2)).parts == {"hours": 3}
    assert (minutes(50) + minutes(20)).parts == {"minutes": 70}
    assert (seconds(30) + hours(1)).parts == {"hours": 1, "seconds": 30}


def test_subtraction() -> None:
    duration = nf({"years": 3, "months": 6, "days": 4, "hours": 12})

    assert (duration - days(4)).parts == {"years": 3, "months": 6, "hours": 12}
    assert duration - duration == Duration.zero()


def test_mixed_sign_sums_normalize() -> None:
    result = hours(1) - minutes(30)

    assert result.parts == {"minutes": 30}
    assert result.sign == 1
    assert (minutes(30) - hours(1)).magnitude == -1800


def test_negation_and_abs() -> None:
    duration = -hours(1)

    assert duration.sign == -1
    assert duration.parts == {"hours": 1}
    assert abs(duration) == hours(1)
    assert -duration == hours(1)


def test_addition_requires_durations() -> None:
    with pytest.raises(TypeError):
        hours(1) + 5  # type: ignore[operator]
