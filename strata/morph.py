"""Morphing between patterns over time.

Each morph is driven by a tension curve (see ``strata.tension``) running
over ``cycles`` cycles and then starting again. The tension for an event is
read at the event's onset, or at the start of its cycle for the per-cycle
morphs, never from the query window. A scheduler that asks for a cycle in
twenty small pieces therefore hears exactly what one big query would give.

    # Crossfade a beat into a break over eight cycles, following a golden curve
    beat.morph(break_, curve="golden", cycles=8)

    # Let a rhythm grow from its own first cycle with rule 110
    beat.evolve(rule=110, generations=16)

All morphs add ``gain`` (and for ``spectral_morph`` filter) controls, so
plain values are wrapped as ``{"value": v}`` first.
"""

import math
import typing

import strata.constants
import strata.errors
import strata.fractals
import strata.pattern
import strata.rational
import strata.tension

from strata.hap import Hap
from strata.rational import Time
from strata.timespan import TimeSpan


def _check_cycles (cycles: strata.rational.TimeLike) -> Time:

	cycles = strata.rational.to_time(cycles)

	if cycles <= 0:
		raise strata.errors.PatternArgumentError(f"Morph length must be a positive number of cycles, got {cycles}")

	return cycles


def _tension (curve: strata.tension.CurveFn, t: Time, cycles: Time) -> float:

	"""Curve value at time ``t`` of a morph that repeats every ``cycles`` cycles."""

	return strata.tension.tension_at(curve, float(strata.rational.mod_time(t, cycles)), float(cycles))


def _annotate (
	pattern: strata.pattern.Pattern,
	curve: strata.tension.CurveFn,
	cycles: Time,
	controls: typing.Callable[[typing.Dict[str, typing.Any], float], typing.Dict[str, typing.Any]],
) -> strata.pattern.Pattern:

	"""Rewrite each hap's value with ``controls(value_dict, tension_at_onset)``."""

	def annotate (hap: Hap) -> Hap:
		tension = _tension(curve, hap.onset(), cycles)
		return hap.with_value(lambda value: controls(strata.pattern.as_dict(value), tension))

	return pattern.with_hap(annotate)


def _scaled_gain (value: typing.Dict[str, typing.Any], factor: float) -> typing.Any:
	return value.get("gain", 1) * factor


def morph (
	source: strata.pattern.Pattern,
	target: strata.pattern.PatternLike,
	curve: typing.Union[str, strata.tension.CurveFn] = strata.constants.DEFAULT_CURVE,
	cycles: strata.rational.TimeLike = strata.constants.DEFAULT_MORPH_CYCLES,
) -> strata.pattern.Pattern:

	"""
	Crossfade from ``source`` to ``target``.

	Both patterns play throughout; at tension ``t`` the source's gain is
	scaled by ``1 - t`` and the target's by ``t``. The result is the two layers
	stacked, source first.
	"""

	cycles = _check_cycles(cycles)
	curve_fn = strata.tension.get_curve(curve)

	return strata.pattern.stack(
		_annotate(source, curve_fn, cycles, lambda v, t: {**v, "gain": _scaled_gain(v, 1 - t)}),
		_annotate(strata.pattern.reify(target), curve_fn, cycles, lambda v, t: {**v, "gain": _scaled_gain(v, t)}),
	)


def spectral_morph (
	source: strata.pattern.Pattern,
	target: strata.pattern.PatternLike,
	curve: typing.Union[str, strata.tension.CurveFn] = strata.constants.DEFAULT_CURVE,
	cycles: strata.rational.TimeLike = strata.constants.DEFAULT_MORPH_CYCLES,
) -> strata.pattern.Pattern:

	"""
	Crossfade through filters rather than volume alone.

	As tension rises the source is high-passed away (``hpf`` sweeps from 20 Hz
	to 20 kHz) while the target's low-pass (``lpf``) opens from 20 Hz to
	20 kHz. Gains follow an equal-power curve, ``sqrt(1 - t)`` and ``sqrt(t)``.
	Resonance (``hpq``, ``lpq``) rises towards the closed end of each filter.
	"""

	cycles = _check_cycles(cycles)
	curve_fn = strata.tension.get_curve(curve)

	low = strata.constants.FILTER_MIN_HZ
	high = strata.constants.FILTER_MAX_HZ

	def source_controls (value: typing.Dict[str, typing.Any], t: float) -> typing.Dict[str, typing.Any]:
		return {
			**value,
			"hpf": low + (high - low) * t,
			"hpq": 0.5 + t * 2,
			"gain": _scaled_gain(value, math.sqrt(1 - t)),
		}

	def target_controls (value: typing.Dict[str, typing.Any], t: float) -> typing.Dict[str, typing.Any]:
		return {
			**value,
			"lpf": high - (high - low) * (1 - t),
			"lpq": 0.5 + (1 - t) * 2,
			"gain": _scaled_gain(value, math.sqrt(t)),
		}

	return strata.pattern.stack(
		_annotate(source, curve_fn, cycles, source_controls),
		_annotate(strata.pattern.reify(target), curve_fn, cycles, target_controls),
	)


def density_morph (
	pattern: strata.pattern.Pattern,
	target_density: float,
	curve: typing.Union[str, strata.tension.CurveFn] = strata.constants.DEFAULT_CURVE,
	cycles: strata.rational.TimeLike = strata.constants.DEFAULT_MORPH_CYCLES,
) -> strata.pattern.Pattern:

	"""
	Move the pattern's event density towards ``target_density`` steps per cycle.

	The pattern's own density is its ``steps`` (1 when unknown). Each cycle the
	pattern is sped up by ``morphed / current`` where ``morphed`` lies between
	the two densities according to the tension at the start of that cycle.
	"""

	if target_density <= 0:
		raise strata.errors.PatternArgumentError(f"density_morph() needs a positive target density, got {target_density}")

	cycles = _check_cycles(cycles)
	curve_fn = strata.tension.get_curve(curve)
	current = float(pattern.steps) if pattern.steps else 1.0

	def query (span: TimeSpan) -> typing.List[Hap]:

		tension = _tension(curve_fn, strata.rational.sam(span.begin), cycles)
		morphed = current + (target_density - current) * tension

		return pattern.fast(morphed / current)._query(span)

	return strata.pattern.Pattern(query, pattern.steps).split_queries()


def evolve (
	pattern: strata.pattern.Pattern,
	rule: int = strata.constants.DEFAULT_EVOLVE_RULE,
	generations: int = strata.constants.DEFAULT_EVOLVE_GENERATIONS,
) -> strata.pattern.Pattern:

	"""
	Grow a rhythm with a cellular automaton seeded from the pattern itself.

	The onsets in the pattern's first cycle switch on cells of a
	``EVOLVE_CELLS``-cell ring (cell ``i`` covers ``[i/16, (i+1)/16)`` of the
	cycle). Cycle ``c`` plays the ring after ``c % generations`` steps of
	``rule``, one event per live cell. Each live cell carries the value of the
	nearest seeded cell at or before it, wrapping round, so the sounds of the
	original rhythm spread with the automaton.
	"""

	if generations <= 0:
		raise strata.errors.PatternArgumentError(f"evolve() needs a positive number of generations, got {generations}")

	size = strata.constants.EVOLVE_CELLS
	cells = [0] * size
	values: typing.Dict[int, typing.Any] = {}

	for hap in pattern.query(TimeSpan(0, 1)):

		if not hap.has_onset():
			continue

		index = math.floor(hap.whole.begin * size) % size
		cells[index] = 1
		values.setdefault(index, hap.value)

	if not values:
		return strata.pattern.silence

	# Value for every cell: the seed at or before it, wrapping round.
	carried: typing.List[typing.Any] = []
	for i in range(size):
		j = i
		while j not in values:
			j = (j - 1) % size
		carried.append(values[j])

	step = Time(1, size)

	def query (span: TimeSpan) -> typing.List[Hap]:

		cycle = strata.rational.sam(span.begin)
		state = cells

		for _ in range(int(cycle) % generations):
			state = strata.fractals.step_cellular_automaton(state, rule)

		haps: typing.List[Hap] = []

		for i, alive in enumerate(state):

			if not alive:
				continue

			whole = TimeSpan(cycle + step * i, cycle + step * (i + 1))
			part = whole.intersection(span)

			if part is not None:
				haps.append(Hap(whole, part, carried[i]))

		return haps

	return strata.pattern.Pattern(query, size).split_queries()
