"""Exact rational time.

Pattern time is measured in cycles and represented with
``fractions.Fraction`` so that long performances never drift: every sum,
product and comparison is exact and the fraction is always kept in lowest
terms with a positive denominator.

The helpers below name the cycle arithmetic the combinators lean on:

    sam(Time(7, 4))        -> 1      start of the containing cycle
    next_sam(Time(7, 4))   -> 2      start of the following cycle
    cycle_pos(Time(7, 4))  -> 3/4    position within the cycle

Division by zero raises ``ZeroDivisionError``, an ``ArithmeticError``.
"""

import fractions
import math
import numbers
import typing

import strata.errors


Time = fractions.Fraction

TimeLike = typing.Union[fractions.Fraction, int, float, str]


def to_time (value: TimeLike) -> Time:

	"""
	Convert a number to exact rational time.

	Floats are converted through ``limit_denominator`` so that ``0.1``
	becomes ``1/10`` rather than its binary approximation.
	"""

	if isinstance(value, fractions.Fraction):
		return value

	if isinstance(value, bool):
		raise strata.errors.PatternArgumentError(f"Cannot use a bool as a time value: {value!r}")

	if isinstance(value, int):
		return Time(value)

	if isinstance(value, float):
		if not math.isfinite(value):
			raise strata.errors.PatternArgumentError(f"Time must be finite, got {value!r}")
		return Time(value).limit_denominator()

	if isinstance(value, numbers.Rational):
		return Time(value.numerator, value.denominator)

	if isinstance(value, str):
		try:
			return Time(value)
		except ValueError as e:
			raise strata.errors.PatternArgumentError(f"Cannot parse time from {value!r}") from e

	raise strata.errors.PatternArgumentError(f"Cannot convert {type(value).__name__} to time")


def floor_time (t: Time) -> Time:

	"""Largest whole cycle number not greater than ``t``."""

	return Time(math.floor(t))


def ceil_time (t: Time) -> Time:

	"""Smallest whole cycle number not less than ``t``."""

	return Time(math.ceil(t))


def sam (t: Time) -> Time:

	"""Start of the cycle containing ``t``."""

	return floor_time(t)


def next_sam (t: Time) -> Time:

	"""Start of the cycle after the one containing ``t``."""

	return sam(t) + 1


def cycle_pos (t: Time) -> Time:

	"""Position of ``t`` within its cycle, in ``[0, 1)``."""

	return t - sam(t)


def mod_time (t: Time, m: TimeLike) -> Time:

	"""``t`` modulo ``m``; the result has the sign of ``m``, like Python's ``%``."""

	return t % to_time(m)


def min_time (a: Time, b: Time) -> Time:
	return a if a <= b else b


def max_time (a: Time, b: Time) -> Time:
	return a if a >= b else b
