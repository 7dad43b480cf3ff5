import random
import typing

import strata.errors

T = typing.TypeVar("T")


def generate_euclidean_sequence (steps: int, pulses: int, rotation: int = 0) -> typing.List[int]:

	"""
	Generate a Euclidean rhythm using Bjorklund's algorithm.

	The result always starts on an onset (before rotation), so
	``generate_euclidean_sequence(8, 3)`` is the tresillo
	``[1, 0, 0, 1, 0, 0, 1, 0]``.

	Parameters:
		steps: Length of the sequence (must be positive)
		pulses: Number of onsets, ``0 <= pulses <= steps``
		rotation: Shift the result left by this many steps (negative shifts right)

	Example:
		```python
		# Cuban cinquillo
		strata.sequence_utils.generate_euclidean_sequence(8, 5)
		# -> [1, 0, 1, 1, 0, 1, 1, 0]
		```
	"""

	if steps <= 0:
		raise strata.errors.PatternArgumentError(f"Steps must be positive, got {steps}")

	if pulses < 0:
		raise strata.errors.PatternArgumentError(f"Pulses cannot be negative, got {pulses}")

	if pulses > steps:
		raise strata.errors.PatternArgumentError(f"Pulses ({pulses}) cannot be greater than steps ({steps})")

	if pulses == 0:
		return [0] * steps

	sequence: typing.List[int] = []
	counts: typing.List[int] = []
	remainders: typing.List[int] = []
	divisor = steps - pulses

	remainders.append(pulses)
	level = 0

	while True:
		counts.append(divisor // remainders[level])
		remainders.append(divisor % remainders[level])
		divisor = remainders[level]
		level += 1
		if remainders[level] <= 1:
			break

	counts.append(divisor)

	def build (level: int) -> None:
		if level == -1:
			sequence.append(0)
		elif level == -2:
			sequence.append(1)
		else:
			for i in range(counts[level]):
				build(level - 1)
			if remainders[level] != 0:
				build(level - 2)

	build(level)
	i = sequence.index(1)
	return rotate(sequence[i:] + sequence[:i], rotation)


def rotate (sequence: typing.List[T], shift: int) -> typing.List[T]:

	"""Cyclically shift a sequence left by ``shift`` places (negative shifts right)."""

	if not sequence:
		return []

	shift %= len(sequence)
	return sequence[shift:] + sequence[:shift]


def weighted_choice (options: typing.Sequence[typing.Tuple[T, float]], rng: random.Random) -> T:

	"""Pick one item from a list of (value, weight) pairs.

	Weights are relative - they don't need to sum to 1.0. Higher weight means
	higher probability of selection.

	Parameters:
		options: List of `(value, weight)` tuples
		rng: Random number generator instance

	Example:
		```python
		transform = strata.sequence_utils.weighted_choice([
			("stem", 0.01),
			("frond", 0.85),
			("left", 0.07),
			("right", 0.07),
		], rng)
		```
	"""

	if not options:
		raise strata.errors.PatternArgumentError("Options list cannot be empty")

	total = sum(weight for _, weight in options)

	if total <= 0:
		raise strata.errors.PatternArgumentError("Total weight must be positive")

	threshold = rng.random() * total
	cumulative = 0.0

	for value, weight in options:
		cumulative += weight
		if cumulative >= threshold:
			return value

	return options[-1][0]


def scale_clamp (value: float, in_min: float, in_max: float, out_min: float = 0.0, out_max: float = 1.0) -> float:

	"""Scale a value from an input range to an output range and clamp the result.

	Maps a value from [in_min, in_max] to [out_min, out_max]. If the result
	falls outside the output range, it is clamped to the nearest bound.
	Correctly handles reversed ranges (where min > max).

	Parameters:
		value: The number to scale and clamp.
		in_min: The start of the input range.
		in_max: The end of the input range.
		out_min: The start of the target output range (default: 0.0).
		out_max: The end of the target output range (default: 1.0).

	Example:
		```python
		# Henon x coordinates (roughly -1.5..1.5) to MIDI notes 48..72
		note = strata.sequence_utils.scale_clamp(x, -1.5, 1.5, 48, 72)
		```
	"""

	if in_min == in_max:

		raise strata.errors.PatternArgumentError(f"Input range cannot be zero-width ({in_min} == {in_max})")

	percentage = (value - in_min) / (in_max - in_min)
	scaled = out_min + percentage * (out_max - out_min)

	# Handle regular and reversed ranges
	if out_min < out_max:
		return max(out_min, min(out_max, scaled))
	else:
		return max(out_max, min(out_min, scaled))
