"""Utility constants for durparts.

Unit constants represent durations in seconds. Months and years use the
average Gregorian lengths (30.436875 and 365.2425 days) so every factor is
an exact integer.
"""

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400
WEEK = 604800
MONTH = 2629746
YEAR = 31556952

# Sub-second scales used by change_cascade(usec=..., nsec=...)
USEC_PER_SECOND = 1_000_000
NSEC_PER_USEC = 1_000
