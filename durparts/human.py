"""Human-friendly duration strings like ``2h 30m 17s`` or ``3y 6m 4d 12h 30m 5s``.

Exact rather than approximate, and more concise than ``repr``. Note that
"m" is used for both months and minutes.

Example:
    >>> d = seconds(3500)
    >>> human_str(d)
    '58m 20s'
    >>> human_str(d, delimiter="")
    '58m20s'
    >>> human_str(d, separator=" ")
    '58 m 20 s'
    >>> human_str(d, delimiter=", ", separator=" ")
    '58 m, 20 s'
"""

from typing import TYPE_CHECKING

from durparts.units import Parts, Quantity, Unit

if TYPE_CHECKING:
    from durparts.duration import Duration

ABBREVIATIONS: dict[Unit, str] = {
    "years": "y",
    "months": "m",
    "weeks": "w",
    "days": "d",
    "hours": "h",
    "minutes": "m",
    "seconds": "s",
}


class HumanStringFormatter:
    """Render parts as text without touching the quantities.

    Args:
        precision: Digits after the decimal point for seconds (None uses
            ``%g``, which drops trailing zeros and keeps six significant
            digits, so 59.9999999 seconds shows as "60s")
        separator: Between a number and its unit ("3h" vs "3 h")
        delimiter: Between parts ("58m 20s" vs "58m, 20s")
        use_2_digit_numbers: Pad every part after the first to two digits
            ("3h 05m 07s")
    """

    def __init__(
        self,
        *,
        precision: int | None = None,
        separator: str = "",
        delimiter: str = " ",
        use_2_digit_numbers: bool = False,
    ):
        if precision is not None and precision < 0:
            raise ValueError(f"precision must be >= 0 or None, got {precision}")
        self.precision: int | None = precision
        self.separator: str = separator
        self.delimiter: str = delimiter
        self.use_2_digit_numbers: bool = use_2_digit_numbers

    def format(self, parts: Parts, sign: int = 1) -> str:
        if not parts:
            parts = {"seconds": 0}

        pieces: list[str] = []
        for i, (unit, quantity) in enumerate(parts.items()):
            if unit == "seconds":
                number = self._format_seconds(quantity)
            else:
                number = str(quantity)
            if self.use_2_digit_numbers and i >= 1:
                number = _pad(number)
            pieces.append(f"{number}{self.separator}{ABBREVIATIONS[unit]}")

        prefix = "-" if sign < 0 else ""
        return prefix + self.delimiter.join(pieces)

    def _format_seconds(self, quantity: Quantity) -> str:
        if self.precision is None:
            return "%g" % float(quantity)
        return f"{float(quantity):.{self.precision}f}"


def _pad(number: str) -> str:
    whole, dot, rest = number.partition(".")
    return whole.zfill(2) + dot + rest


def human_str(
    duration: "Duration",
    *,
    precision: int | None = None,
    separator: str = "",
    delimiter: str = " ",
    use_2_digit_numbers: bool = False,
) -> str:
    """Render ``duration`` normalized, e.g. ``seconds(3500)`` -> ``'58m 20s'``.

    A zero duration renders as ``0s``; negative durations get a leading ``-``.
    Pass ``precision`` to show sub-second seconds beyond six significant
    digits.
    """
    formatter = HumanStringFormatter(
        precision=precision,
        separator=separator,
        delimiter=delimiter,
        use_2_digit_numbers=use_2_digit_numbers,
    )
    normalized = duration.normalize()
    return formatter.format(normalized.parts, normalized.sign)
