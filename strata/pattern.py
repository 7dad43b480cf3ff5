"""The Pattern type and its combinators.

A pattern is a function from a query span to the haps active in it. Nothing
is stored: every query recomputes its result from the combinator tree, so
querying the same span twice always gives the same haps, and patterns can be
shared freely between threads and between branches of other patterns.

Patterns are built from leaves (``pure``, ``silence``, ``signal``) and
combined with sequencing (``fastcat``, ``slowcat``, ``timecat``), layering
(``stack``, ``polymeter``), time transforms (``fast``, ``slow``, ``early``,
``late``), structure (``struct``, ``euclid``, ``segment``), and deterministic
randomness (``degrade_by``, ``sometimes_by``, ``choose``, ``randcat``)::

    kick = strata.pattern.pure("bd").euclid(3, 8)
    hats = strata.pattern.fastcat("hh", "hh", "oh", "hh").degrade_by(0.2)
    beat = strata.pattern.stack(kick, hats.fast(2))

    beat.query(strata.timespan.TimeSpan(0, 1))
"""

import math
import operator
import random
import typing

import strata.constants
import strata.errors
import strata.rational
import strata.sequence_utils
import strata.timespan

from strata.hap import Hap
from strata.rational import Time
from strata.timespan import TimeSpan


QueryFunc = typing.Callable[[TimeSpan], typing.List[Hap]]

PatternLike = typing.Union["Pattern", typing.Any]


class Pattern:

	"""
	A queryable, immutable description of values in cyclic time.

	``steps`` is the number of steps per cycle where the pattern knows it
	(a four-element sequence has four), or ``None``. It is used to align
	polymeters and by density morphing; it never affects a query.
	"""

	def __init__ (self, query: QueryFunc, steps: typing.Optional[strata.rational.TimeLike] = None) -> None:

		self._query = query
		self.steps: typing.Optional[Time] = strata.rational.to_time(steps) if steps is not None else None


	def query (self, span: TimeSpan) -> typing.List[Hap]:

		"""
		Return every hap whose part lies within ``span``.

		The span is split at cycle boundaries first, so an event longer than a
		cycle comes back as one fragment per cycle it touches (all sharing the
		same whole) and a query gives the same haps however it is chunked.
		Combinators call the unsplit query of their children.
		"""

		return [hap for subspan in span.span_cycles() for hap in self._query(subspan)]


	def query_arc (self, begin: strata.rational.TimeLike, end: strata.rational.TimeLike) -> typing.List[Hap]:
		return self.query(TimeSpan(begin, end))


	def first_cycle (self) -> typing.List[Hap]:
		return self.query_arc(0, 1)


	def with_steps (self, steps: typing.Optional[strata.rational.TimeLike]) -> "Pattern":
		return Pattern(self._query, steps)


	# ─── Low-level transforms ────────────────────────────────────────────────


	def split_queries (self) -> "Pattern":

		"""
		Split every query at cycle boundaries and query each piece separately.

		Combinators whose logic is defined per cycle wrap themselves in this so
		they never see a span that crosses a cycle boundary.
		"""

		def query (span: TimeSpan) -> typing.List[Hap]:
			return [hap for subspan in span.span_cycles() for hap in self._query(subspan)]

		return Pattern(query, self.steps)


	def with_query_span (self, func: typing.Callable[[TimeSpan], TimeSpan]) -> "Pattern":
		return Pattern(lambda span: self._query(func(span)), self.steps)


	def with_query_time (self, func: typing.Callable[[Time], Time]) -> "Pattern":
		return Pattern(lambda span: self._query(span.with_time(func)), self.steps)


	def with_hap_span (self, func: typing.Callable[[TimeSpan], TimeSpan]) -> "Pattern":
		return Pattern(lambda span: [hap.with_span(func) for hap in self._query(span)], self.steps)


	def with_hap_time (self, func: typing.Callable[[Time], Time]) -> "Pattern":
		return self.with_hap_span(lambda span: span.with_time(func))


	def with_haps (self, func: typing.Callable[[typing.List[Hap]], typing.List[Hap]]) -> "Pattern":
		return Pattern(lambda span: func(self._query(span)), self.steps)


	def with_hap (self, func: typing.Callable[[Hap], Hap]) -> "Pattern":
		return Pattern(lambda span: [func(hap) for hap in self._query(span)], self.steps)


	def fmap (self, func: typing.Callable[[typing.Any], typing.Any]) -> "Pattern":

		"""Apply ``func`` to every value, keeping timing and context."""

		return Pattern(lambda span: [hap.with_value(func) for hap in self._query(span)], self.steps)


	with_value = fmap


	def with_context (self, func: typing.Callable[[dict], dict]) -> "Pattern":
		return self.with_hap(lambda hap: hap.with_context(func))


	def filter_haps (self, predicate: typing.Callable[[Hap], bool]) -> "Pattern":
		return Pattern(lambda span: [hap for hap in self._query(span) if predicate(hap)], self.steps)


	def filter_values (self, predicate: typing.Callable[[typing.Any], bool]) -> "Pattern":
		return self.filter_haps(lambda hap: predicate(hap.value))


	def filter_onsets (self) -> "Pattern":

		"""Keep only fragments that contain their event's onset (drops continuous haps too)."""

		return self.filter_haps(lambda hap: hap.has_onset())


	# ─── Applicative structure ───────────────────────────────────────────────


	def app_both (self, pat_val: "Pattern") -> "Pattern":

		"""
		Apply this pattern of functions to ``pat_val``, taking structure from both.

		Haps are formed wherever a function hap and a value hap overlap; the
		whole is the intersection of the two wholes.
		"""

		def query (span: TimeSpan) -> typing.List[Hap]:

			haps: typing.List[Hap] = []
			val_haps = pat_val._query(span)

			for hap_func in self._query(span):
				for hap_val in val_haps:

					part = hap_func.part.intersection(hap_val.part)
					if part is None:
						continue

					if hap_func.whole is not None and hap_val.whole is not None:
						whole = hap_func.whole.intersection(hap_val.whole)
						if whole is None:
							continue
					else:
						whole = None

					haps.append(Hap(whole, part, hap_func.value(hap_val.value), hap_func.combine_context(hap_val)))

			return haps

		return Pattern(query)


	def app_left (self, pat_val: "Pattern") -> "Pattern":

		"""
		Apply this pattern of functions to ``pat_val``, keeping this pattern's structure.

		For each function hap, ``pat_val`` is queried over the hap's whole and
		every value found there is applied to the function.
		"""

		def query (span: TimeSpan) -> typing.List[Hap]:

			haps: typing.List[Hap] = []

			for hap_func in self._query(span):
				for hap_val in pat_val._query(hap_func.whole_or_part()):

					part = hap_func.part.intersection(hap_val.part)
					if part is None:
						continue

					haps.append(Hap(hap_func.whole, part, hap_func.value(hap_val.value), hap_val.combine_context(hap_func)))

			return haps

		return Pattern(query, self.steps)


	def app_right (self, pat_val: "Pattern") -> "Pattern":

		"""Like ``app_left`` but the structure comes from ``pat_val``."""

		def query (span: TimeSpan) -> typing.List[Hap]:

			haps: typing.List[Hap] = []

			for hap_val in pat_val._query(span):
				for hap_func in self._query(hap_val.whole_or_part()):

					part = hap_func.part.intersection(hap_val.part)
					if part is None:
						continue

					haps.append(Hap(hap_val.whole, part, hap_func.value(hap_val.value), hap_func.combine_context(hap_val)))

			return haps

		return Pattern(query, pat_val.steps)


	def inner_bind (self, func: typing.Callable[[typing.Any], "Pattern"]) -> "Pattern":

		"""
		Turn each value into a pattern with ``func`` and play that pattern for the span of the hap.

		Timing comes from the inner patterns; the outer hap only decides which
		inner pattern is heard when.
		"""

		def query (span: TimeSpan) -> typing.List[Hap]:

			haps: typing.List[Hap] = []

			for outer in self._query(span):
				for inner in reify(func(outer.value))._query(outer.part):
					haps.append(Hap(inner.whole, inner.part, inner.value, outer.combine_context(inner)))

			return haps

		return Pattern(query)


	def inner_join (self) -> "Pattern":

		"""Flatten a pattern of patterns, keeping the inner patterns' timing."""

		return self.inner_bind(lambda value: value)


	def _patternify (self, method: typing.Callable[[typing.Any], "Pattern"], arg: typing.Any) -> "Pattern":

		"""Call ``method(arg)``, or map it over ``arg`` when ``arg`` is itself a pattern."""

		if isinstance(arg, Pattern):
			return arg.fmap(method).inner_join().with_steps(self.steps)

		return method(arg)


	def _op_left (self, other: PatternLike, func: typing.Callable[[typing.Any, typing.Any], typing.Any]) -> "Pattern":
		return self.fmap(lambda a: lambda b: func(a, b)).app_left(reify(other))


	# ─── Value operators ─────────────────────────────────────────────────────


	def set (self, other: PatternLike) -> "Pattern":

		"""
		Merge values from ``other`` into this pattern's values, keeping this structure.

		Dict values are unioned and ``other`` wins on shared keys; a plain value
		from ``other`` replaces this one.
		"""

		return self._op_left(other, _union)


	def keep (self, other: PatternLike) -> "Pattern":

		"""Like ``set`` but this pattern's keys win on collisions."""

		return self._op_left(other, lambda a, b: _union(b, a))


	def add (self, other: PatternLike) -> "Pattern":
		return self._op_left(other, _numeric(operator.add))


	def sub (self, other: PatternLike) -> "Pattern":
		return self._op_left(other, _numeric(operator.sub))


	def mul (self, other: PatternLike) -> "Pattern":
		return self._op_left(other, _numeric(operator.mul))


	def div (self, other: PatternLike) -> "Pattern":
		return self._op_left(other, _numeric(operator.truediv))


	def range (self, low: float, high: float) -> "Pattern":

		"""Scale a unipolar (0..1) numeric pattern to ``[low, high]``."""

		return self.fmap(lambda v: v * (high - low) + low)


	def as_param (self, name: str) -> "Pattern":

		"""Wrap each plain value as ``{name: value}`` so it can be merged with other controls."""

		return self.fmap(lambda v: {name: v})


	def control (self, name: str, value: PatternLike) -> "Pattern":

		"""Set one named control, e.g. ``pattern.control("cutoff", 800)``."""

		return self.set(reify(value).as_param(name))


	def gain (self, value: PatternLike) -> "Pattern":
		return self.control("gain", value)


	# ─── Time transforms ─────────────────────────────────────────────────────


	def fast (self, factor: PatternLike) -> "Pattern":

		"""
		Speed the pattern up by ``factor`` (must be positive).

		Query times are multiplied by the factor and hap times divided by it, so
		``p.fast(n).slow(n)`` gives back exactly the haps of ``p``.
		"""

		return self._patternify(self._fast, factor)


	def _fast (self, factor: strata.rational.TimeLike) -> "Pattern":

		factor = _positive_time(factor, "fast")

		return self.with_query_time(lambda t: t * factor).with_hap_time(lambda t: t / factor)


	def slow (self, factor: PatternLike) -> "Pattern":

		"""Slow the pattern down by ``factor`` (must be positive)."""

		return self._patternify(self._slow, factor)


	def _slow (self, factor: strata.rational.TimeLike) -> "Pattern":
		return self._fast(1 / _positive_time(factor, "slow"))


	def early (self, offset: PatternLike) -> "Pattern":

		"""Shift the pattern earlier in time by ``offset`` cycles."""

		return self._patternify(self._early, offset)


	def _early (self, offset: strata.rational.TimeLike) -> "Pattern":

		offset = strata.rational.to_time(offset)

		return self.with_query_time(lambda t: t + offset).with_hap_time(lambda t: t - offset)


	def late (self, offset: PatternLike) -> "Pattern":

		"""Shift the pattern later in time by ``offset`` cycles."""

		return self._patternify(self._late, offset)


	def _late (self, offset: strata.rational.TimeLike) -> "Pattern":
		return self._early(-strata.rational.to_time(offset))


	def compress (self, begin: strata.rational.TimeLike, end: strata.rational.TimeLike) -> "Pattern":

		"""
		Squeeze each cycle into the part of the cycle between ``begin`` and ``end``.

		``begin`` and ``end`` are cycle positions with ``0 <= begin <= end <= 1``.
		The rest of each cycle is silent.
		"""

		begin = strata.rational.to_time(begin)
		end = strata.rational.to_time(end)

		if not (0 <= begin <= end <= 1):
			raise strata.errors.PatternArgumentError(f"compress() needs 0 <= begin <= end <= 1, got {begin}, {end}")

		if begin == end:
			return silence

		width = end - begin

		def query (span: TimeSpan) -> typing.List[Hap]:

			cycle = strata.rational.sam(span.begin)
			window = span.intersection(TimeSpan(cycle + begin, cycle + end))

			if window is None:
				return []

			inner_span = window.with_time(lambda t: cycle + (t - cycle - begin) / width)

			return [
				hap.with_span(lambda s: s.with_time(lambda t: cycle + begin + (t - cycle) * width))
				for hap in self._query(inner_span)
			]

		return Pattern(query, self.steps).split_queries()


	def rev (self) -> "Pattern":

		"""Reverse each cycle."""

		def query (span: TimeSpan) -> typing.List[Hap]:

			cycle = strata.rational.sam(span.begin)
			next_cycle = strata.rational.next_sam(span.begin)

			def reflect (to_reflect: TimeSpan) -> TimeSpan:
				return TimeSpan(cycle + next_cycle - to_reflect.end, cycle + next_cycle - to_reflect.begin)

			return [hap.with_span(reflect) for hap in self._query(reflect(span))]

		return Pattern(query, self.steps).split_queries()


	def ply (self, factor: int) -> "Pattern":

		"""Repeat each event ``factor`` times within its own duration."""

		if factor <= 0:
			raise strata.errors.PatternArgumentError(f"ply() factor must be positive, got {factor}")

		def query (span: TimeSpan) -> typing.List[Hap]:

			haps: typing.List[Hap] = []

			for hap in self._query(span):

				if hap.whole is None:
					haps.append(hap)
					continue

				step = hap.whole.duration / factor

				for i in range(factor):
					whole = TimeSpan(hap.whole.begin + step * i, hap.whole.begin + step * (i + 1))
					part = whole.intersection(hap.part)
					if part is not None:
						haps.append(Hap(whole, part, hap.value, hap.context))

			return haps

		steps = self.steps * factor if self.steps is not None else None
		return Pattern(query, steps)


	def segment (self, count: strata.rational.TimeLike) -> "Pattern":

		"""
		Sample the pattern ``count`` times per cycle.

		Mostly used to turn a continuous signal into discrete events.
		"""

		count = _positive_time(count, "segment")
		return pure(lambda value: value).fast(count).app_left(self).with_steps(count)


	def every (self, n: int, func: typing.Callable[["Pattern"], "Pattern"], offset: int = 0) -> "Pattern":

		"""
		Apply ``func`` on one cycle out of every ``n``.

		The transformed cycle is the one where ``(cycle - offset) % n == 0``;
		the untransformed pattern plays on all others.
		"""

		if n <= 0:
			raise strata.errors.PatternArgumentError(f"every() needs a positive cycle count, got {n}")

		patterns = [self] * n
		patterns[offset % n] = func(self)
		return _slowcat_prime(patterns).with_steps(self.steps)


	def superimpose (self, func: typing.Callable[["Pattern"], "Pattern"]) -> "Pattern":

		"""Play the pattern on top of a transformed copy of itself."""

		return stack(self, func(self))


	def off (self, offset: strata.rational.TimeLike, func: typing.Callable[["Pattern"], "Pattern"]) -> "Pattern":

		"""Superimpose a copy shifted ``offset`` cycles later and transformed by ``func``."""

		return self.superimpose(lambda p: func(p.late(offset)))


	def inside (self, factor: strata.rational.TimeLike, func: typing.Callable[["Pattern"], "Pattern"]) -> "Pattern":

		"""Apply ``func`` as if the cycle were ``factor`` times longer."""

		return func(self.slow(factor)).fast(factor)


	def palindrome (self) -> "Pattern":

		"""Alternate forwards and backwards cycles."""

		return _slowcat_prime([self, self.rev()]).with_steps(self.steps)


	def iter (self, divisions: int) -> "Pattern":

		"""Start each cycle a further ``1/divisions`` of a cycle in, wrapping round."""

		if divisions <= 0:
			raise strata.errors.PatternArgumentError(f"iter() needs a positive division count, got {divisions}")

		return slowcat(*[self.early(Time(i, divisions)) for i in range(divisions)]).with_steps(self.steps)


	# ─── Structure ───────────────────────────────────────────────────────────


	def struct (self, binary: PatternLike) -> "Pattern":

		"""
		Impose the rhythm of a boolean pattern on this pattern.

		Each truthy event in ``binary`` becomes an event carrying the value this
		pattern has at that point; falsy events are dropped.
		"""

		binary = reify(binary)

		paired = binary.fmap(lambda flag: lambda value: (flag, value)).app_left(self)

		return paired.filter_values(lambda pair: bool(pair[0])).fmap(lambda pair: pair[1]).with_steps(binary.steps)


	def mask (self, binary: PatternLike) -> "Pattern":

		"""Keep this pattern's events only where ``binary`` is truthy (structure stays from this pattern)."""

		paired = self.fmap(lambda value: lambda flag: (flag, value)).app_left(reify(binary))

		return paired.filter_values(lambda pair: bool(pair[0])).fmap(lambda pair: pair[1])


	def euclid (self, pulses: int, steps: int, rotation: int = 0) -> "Pattern":

		"""Play this pattern with a Euclidean rhythm (see :func:`euclid`)."""

		return self.struct(euclid(pulses, steps, rotation))


	# ─── Randomness ──────────────────────────────────────────────────────────


	def degrade_by (self, amount: float, seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":

		"""
		Drop each event with probability ``amount``.

		The decision for each event comes from :func:`rand_at` at the event's
		onset, so the same events are dropped on every query.
		"""

		amount = _probability(amount, "degrade_by")
		return self.filter_haps(lambda hap: rand_at(hap.onset(), seed) >= amount)


	def undegrade_by (self, amount: float, seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":

		"""Keep exactly the events that ``degrade_by(amount, seed)`` would drop."""

		amount = _probability(amount, "undegrade_by")
		return self.filter_haps(lambda hap: rand_at(hap.onset(), seed) < amount)


	def degrade (self, seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":
		return self.degrade_by(0.5, seed)


	def sometimes_by (self, amount: float, func: typing.Callable[["Pattern"], "Pattern"], seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":

		"""
		Apply ``func`` to a random ``amount`` fraction of events.

		The events are split with the same hash as ``degrade_by``: those that
		``undegrade_by`` keeps are transformed, the rest play unchanged. The two
		groups never overlap and never change between queries.
		"""

		amount = _probability(amount, "sometimes_by")
		return stack(self.degrade_by(amount, seed), func(self.undegrade_by(amount, seed)))


	def sometimes (self, func: typing.Callable[["Pattern"], "Pattern"], seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":
		return self.sometimes_by(0.5, func, seed)


	def often (self, func: typing.Callable[["Pattern"], "Pattern"], seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":
		return self.sometimes_by(0.75, func, seed)


	def rarely (self, func: typing.Callable[["Pattern"], "Pattern"], seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":
		return self.sometimes_by(0.25, func, seed)


	def almost_never (self, func: typing.Callable[["Pattern"], "Pattern"], seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":
		return self.sometimes_by(0.1, func, seed)


	def almost_always (self, func: typing.Callable[["Pattern"], "Pattern"], seed: int = strata.constants.DEFAULT_SEED) -> "Pattern":
		return self.sometimes_by(0.9, func, seed)


	# ─── Morphing (see strata.morph) ─────────────────────────────────────────


	def morph (self, target: PatternLike, curve: typing.Any = "arc", cycles: strata.rational.TimeLike = 4) -> "Pattern":

		import strata.morph

		return strata.morph.morph(self, target, curve, cycles)


	def density_morph (self, target_density: float, curve: typing.Any = "arc", cycles: strata.rational.TimeLike = 4) -> "Pattern":

		import strata.morph

		return strata.morph.density_morph(self, target_density, curve, cycles)


	def spectral_morph (self, target: PatternLike, curve: typing.Any = "arc", cycles: strata.rational.TimeLike = 4) -> "Pattern":

		import strata.morph

		return strata.morph.spectral_morph(self, target, curve, cycles)


	def evolve (self, rule: int = 30, generations: int = 8) -> "Pattern":

		import strata.morph

		return strata.morph.evolve(self, rule, generations)


	def lsystem (self, rules: typing.Dict[str, str], iterations: int = 3) -> "Pattern":

		"""
		Treat each value as an L-system axiom and replace it with the rewritten string.

		Example:
			```python
			# "A" on even cycles, "B" on odd ones, each grown four generations
			strata.pattern.slowcat("A", "B").lsystem({"A": "AB", "B": "A"}, 4)
			```
		"""

		import strata.fractals

		strata.fractals._check_depth(iterations, "iterations")

		return self.fmap(lambda axiom: strata.fractals.generate_lsystem(str(axiom), rules, iterations))


# ─── Helpers ─────────────────────────────────────────────────────────────────


def _positive_time (value: strata.rational.TimeLike, name: str) -> Time:

	t = strata.rational.to_time(value)

	if t <= 0:
		raise strata.errors.PatternArgumentError(f"{name}() needs a positive value, got {value!r}")

	return t


def _probability (value: float, name: str) -> float:

	if not 0 <= value <= 1:
		raise strata.errors.PatternArgumentError(f"{name}() needs a probability between 0 and 1, got {value!r}")

	return float(value)


def as_dict (value: typing.Any) -> typing.Dict[str, typing.Any]:

	"""Return dict values unchanged and wrap anything else as ``{"value": value}``."""

	if isinstance(value, dict):
		return value

	return {"value": value}


def _union (a: typing.Any, b: typing.Any) -> typing.Any:

	if isinstance(b, dict):
		return {**as_dict(a), **b}

	return b


def _numeric (op: typing.Callable[[typing.Any, typing.Any], typing.Any]) -> typing.Callable[[typing.Any, typing.Any], typing.Any]:

	"""Lift a binary numeric operator to dict values (key by key) and mixed dict/scalar values."""

	def apply (a: typing.Any, b: typing.Any) -> typing.Any:

		if isinstance(a, dict) and isinstance(b, dict):
			result = dict(a)
			for key, value in b.items():
				result[key] = op(a[key], value) if key in a else value
			return result

		if isinstance(a, dict):
			return {key: op(value, b) for key, value in a.items()}

		if isinstance(b, dict):
			return {key: op(a, value) for key, value in b.items()}

		return op(a, b)

	return apply


def _lcm_steps (patterns: typing.Sequence[Pattern]) -> typing.Optional[Time]:

	steps = [p.steps for p in patterns]

	if not steps or any(s is None or s.denominator != 1 or s <= 0 for s in steps):
		return None

	return Time(math.lcm(*[int(s) for s in steps]))


# ─── Leaves ──────────────────────────────────────────────────────────────────


def pure (value: typing.Any) -> Pattern:

	"""One event per cycle, each filling its whole cycle, all with ``value``."""

	def query (span: TimeSpan) -> typing.List[Hap]:
		return [Hap(strata.timespan.whole_cycle(subspan.begin), subspan, value) for subspan in span.span_cycles()]

	return Pattern(query, 1)


def signal (func: typing.Callable[[Time], typing.Any]) -> Pattern:

	"""
	A continuous pattern: ``func`` sampled at the start of each query.

	Haps have no whole, only a part equal to the query span. A query that
	crosses cycle boundaries gets one sample per cycle piece.
	"""

	def query (span: TimeSpan) -> typing.List[Hap]:
		return [Hap(None, subspan, func(subspan.begin)) for subspan in span.span_cycles()]

	return Pattern(query)


def reify (thing: PatternLike) -> Pattern:

	"""Return patterns unchanged and wrap any other value with :func:`pure`."""

	if isinstance(thing, Pattern):
		return thing

	return pure(thing)


silence = Pattern(lambda span: [], 1)


# ─── Sequencing and layering ─────────────────────────────────────────────────


def stack (*patterns: PatternLike) -> Pattern:

	"""
	Play patterns at the same time.

	Haps come out in argument order, each child's haps in the child's own
	order; nothing is merged or removed.
	"""

	pats = [reify(p) for p in patterns]

	def query (span: TimeSpan) -> typing.List[Hap]:
		return [hap for pat in pats for hap in pat._query(span)]

	return Pattern(query, _lcm_steps(pats))


def slowcat (*patterns: PatternLike) -> Pattern:

	"""
	Play one pattern per cycle, taking turns.

	Each child keeps its own cycle count: with two children, the first plays
	its cycles 0, 1, 2... on cycles 0, 2, 4... of the result.
	"""

	pats = [reify(p) for p in patterns]

	if not pats:
		return silence

	if len(pats) == 1:
		return pats[0]

	count = len(pats)

	def query (span: TimeSpan) -> typing.List[Hap]:

		cycle = strata.rational.sam(span.begin)
		pat = pats[int(cycle) % count]
		offset = cycle - strata.rational.floor_time(span.begin / count)

		shifted = span.with_time(lambda t: t - offset)
		return [hap.with_span(lambda s: s.with_time(lambda t: t + offset)) for hap in pat._query(shifted)]

	return Pattern(query, _lcm_steps(pats)).split_queries()


def _slowcat_prime (patterns: typing.Sequence[Pattern]) -> Pattern:

	"""Like ``slowcat``, but each child is queried at the real cycle, not its own count."""

	count = len(patterns)

	def query (span: TimeSpan) -> typing.List[Hap]:
		return patterns[int(strata.rational.sam(span.begin)) % count]._query(span)

	return Pattern(query).split_queries()


def fastcat (*patterns: PatternLike) -> Pattern:

	"""Squeeze the patterns into one cycle, each taking an equal share of it."""

	if not patterns:
		return silence

	return slowcat(*patterns).fast(len(patterns)).with_steps(len(patterns))


sequence = fastcat
cat = slowcat


def timecat (*pairs: typing.Tuple[strata.rational.TimeLike, PatternLike]) -> Pattern:

	"""
	Like ``fastcat`` but each pattern takes a share of the cycle proportional to its weight.

	Example:
		```python
		# "a" for half the cycle, "b" and "c" for a quarter each
		strata.pattern.timecat((2, "a"), (1, "b"), (1, "c"))
		```
	"""

	if not pairs:
		raise strata.errors.PatternArgumentError("timecat() needs at least one (weight, pattern) pair")

	for pair in pairs:
		if len(pair) != 2:
			raise strata.errors.PatternArgumentError(f"timecat() expects (weight, pattern) pairs, got {pair!r}")

	weights = [strata.rational.to_time(weight) for weight, _ in pairs]

	if any(w < 0 for w in weights):
		raise strata.errors.PatternArgumentError("timecat() weights cannot be negative")

	total = sum(weights, Time(0))

	if total <= 0:
		raise strata.errors.PatternArgumentError("timecat() total weight must be positive")

	layers: typing.List[Pattern] = []
	begin = Time(0)

	for weight, (_, pat) in zip(weights, pairs):
		end = begin + weight
		layers.append(reify(pat).compress(begin / total, end / total))
		begin = end

	return stack(*layers).with_steps(total)


def polymeter (*patterns: PatternLike, steps: typing.Optional[strata.rational.TimeLike] = None) -> Pattern:

	"""
	Layer sequences of different lengths so they all advance one step per shared step.

	Each layer is sped up or slowed down so that ``steps`` of its steps fit in
	a cycle; a three-step layer against a two-step one drifts in and out of
	phase rather than being squashed to fit. ``steps`` defaults to the first
	layer's step count.

	Example:
		```python
		# {a b, c d e}%4
		strata.pattern.polymeter(fastcat("a", "b"), fastcat("c", "d", "e"), steps=4)
		```
	"""

	pats = [reify(p) for p in patterns]

	if any(p.steps is None for p in pats):
		raise strata.errors.PatternArgumentError("polymeter() needs layers with a known step count")

	pats = [p for p in pats if p.steps != 0]

	if not pats:
		return silence

	shared = strata.rational.to_time(steps) if steps is not None else pats[0].steps

	if shared <= 0:
		raise strata.errors.PatternArgumentError(f"polymeter() needs a positive step count, got {steps!r}")

	return stack(*[p.fast(shared / p.steps) for p in pats]).with_steps(shared)


# ─── Rhythm ──────────────────────────────────────────────────────────────────


def euclid (pulses: int, steps: int, rotation: int = 0) -> Pattern:

	"""
	A boolean pattern spreading ``pulses`` onsets as evenly as possible over ``steps``.

	``euclid(3, 8)`` is ``x..x..x.``. ``rotation`` shifts the rhythm left by
	that many steps (negative values shift right).
	"""

	sequence_bits = strata.sequence_utils.generate_euclidean_sequence(steps, pulses, rotation)
	return fastcat(*[bool(bit) for bit in sequence_bits])


def struct (binary: PatternLike, pat: PatternLike) -> Pattern:

	"""Function form of :meth:`Pattern.struct`."""

	return reify(pat).struct(binary)


# ─── Randomness ──────────────────────────────────────────────────────────────


def rand_at (t: strata.rational.TimeLike, seed: int = strata.constants.DEFAULT_SEED, salt: int = 0) -> float:

	"""
	A pseudo-random float in ``[0, 1)`` determined only by ``(seed, salt, t)``.

	Hashing ints and fractions is stable between runs, so the same time and
	seed give the same number in every process, on every query.
	"""

	return random.Random(hash((seed, salt, strata.rational.to_time(t)))).random()


def rand_pattern (seed: int = strata.constants.DEFAULT_SEED) -> Pattern:

	"""Continuous random values in ``[0, 1)``."""

	return signal(lambda t: rand_at(t, seed))


def irand (maximum: int, seed: int = strata.constants.DEFAULT_SEED) -> Pattern:

	"""Continuous random integers in ``[0, maximum)``."""

	if maximum <= 0:
		raise strata.errors.PatternArgumentError(f"irand() needs a positive maximum, got {maximum}")

	return signal(lambda t: int(rand_at(t, seed) * maximum))


def choose (*values: typing.Any, seed: int = strata.constants.DEFAULT_SEED) -> Pattern:

	"""Continuous random choice between ``values``; give it structure with ``segment`` or ``struct``."""

	if not values:
		raise strata.errors.PatternArgumentError("choose() needs at least one value")

	return signal(lambda t: values[int(rand_at(t, seed) * len(values))])


def wchoose (*pairs: typing.Tuple[typing.Any, float], seed: int = strata.constants.DEFAULT_SEED) -> Pattern:

	"""Continuous weighted random choice between ``(value, weight)`` pairs."""

	if not pairs or any(len(pair) != 2 for pair in pairs):
		raise strata.errors.PatternArgumentError("wchoose() expects one or more (value, weight) pairs")

	total = sum(weight for _, weight in pairs)

	if total <= 0:
		raise strata.errors.PatternArgumentError("wchoose() total weight must be positive")

	def pick (t: Time) -> typing.Any:

		threshold = rand_at(t, seed) * total
		cumulative = 0.0

		for value, weight in pairs:
			cumulative += weight
			if threshold < cumulative:
				return value

		return pairs[-1][0]

	return signal(pick)


def randcat (*patterns: PatternLike, seed: int = strata.constants.DEFAULT_SEED) -> Pattern:

	"""Play a randomly chosen pattern each cycle."""

	pats = [reify(p) for p in patterns]

	if not pats:
		return silence

	def query (span: TimeSpan) -> typing.List[Hap]:

		cycle = strata.rational.sam(span.begin)
		index = int(rand_at(cycle, seed, salt=1) * len(pats))
		return pats[index]._query(span)

	return Pattern(query, _lcm_steps(pats)).split_queries()


# ─── Continuous signals ──────────────────────────────────────────────────────


saw = signal(lambda t: float(strata.rational.cycle_pos(t)))
isaw = signal(lambda t: 1.0 - float(strata.rational.cycle_pos(t)))
sine = signal(lambda t: (math.sin(2 * math.pi * float(strata.rational.cycle_pos(t))) + 1) / 2)
cosine = sine.early(Time(1, 4))
square = signal(lambda t: 0.0 if strata.rational.cycle_pos(t) < Time(1, 2) else 1.0)
tri = fastcat(saw, isaw)
rand = rand_pattern()


# ─── Controls ────────────────────────────────────────────────────────────────


def s (pat: PatternLike) -> Pattern:

	"""Sound (sample or synth) names as ``{"s": name}``."""

	return reify(pat).as_param("s")


def note (pat: PatternLike) -> Pattern:
	return reify(pat).as_param("note")


def n (pat: PatternLike) -> Pattern:
	return reify(pat).as_param("n")


def gain (pat: PatternLike) -> Pattern:
	return reify(pat).as_param("gain")
