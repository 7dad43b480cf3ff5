import dataclasses
import typing

import strata.errors
import strata.rational

from strata.rational import Time


@dataclasses.dataclass(frozen=True)
class TimeSpan:

	"""
	A half-open stretch of pattern time, ``[begin, end)``, measured in cycles.

	Both ends are exact fractions. A span with ``begin == end`` is a point in
	time; it is a legal query ("what is sounding right now?") and is never
	split or discarded by the cycle logic.
	"""

	begin: Time
	end: Time

	def __post_init__ (self) -> None:

		begin = strata.rational.to_time(self.begin)
		end = strata.rational.to_time(self.end)

		if begin > end:
			raise strata.errors.PatternArgumentError(f"TimeSpan begin ({begin}) is after its end ({end})")

		object.__setattr__(self, "begin", begin)
		object.__setattr__(self, "end", end)


	@property
	def duration (self) -> Time:

		"""Length of the span in cycles."""

		return self.end - self.begin


	@property
	def midpoint (self) -> Time:
		return self.begin + self.duration / 2


	def with_time (self, func: typing.Callable[[Time], Time]) -> "TimeSpan":

		"""Map both ends through ``func`` (used for every speed and shift transform)."""

		return TimeSpan(func(self.begin), func(self.end))


	def with_cycle (self, func: typing.Callable[[Time], Time]) -> "TimeSpan":

		"""
		Map both ends through ``func`` relative to the start of the span's cycle.

		The cycle is taken from ``begin``; ``end`` uses the same cycle so a span
		ending exactly on the next cycle boundary stays in one piece.
		"""

		cycle = strata.rational.sam(self.begin)
		return TimeSpan(cycle + func(self.begin - cycle), cycle + func(self.end - cycle))


	def shift (self, offset: Time) -> "TimeSpan":
		return TimeSpan(self.begin + offset, self.end + offset)


	def span_cycles (self) -> typing.List["TimeSpan"]:

		"""
		Split the span at every whole-cycle boundary it crosses.

		Concatenating the result gives back the original span. A zero-width span
		comes back unchanged as a single item, so continuous patterns can still
		be sampled at a point.
		"""

		if self.begin == self.end:
			return [self]

		spans: typing.List[TimeSpan] = []
		begin = self.begin
		end_sam = strata.rational.sam(self.end)

		while self.end > begin:

			if strata.rational.sam(begin) == end_sam:
				spans.append(TimeSpan(begin, self.end))
				break

			next_begin = strata.rational.next_sam(begin)
			spans.append(TimeSpan(begin, next_begin))
			begin = next_begin

		return spans


	def cycle_arc (self) -> "TimeSpan":

		"""The same span shifted so that its cycle starts at zero."""

		cycle = strata.rational.sam(self.begin)
		return TimeSpan(self.begin - cycle, self.end - cycle)


	def intersection (self, other: "TimeSpan") -> typing.Optional["TimeSpan"]:

		"""
		Return the overlap of two spans, or ``None`` when they do not meet.

		Spans that only touch (one ends where the other begins) do not
		intersect. A point span inside, or at the start of, a wider span does.
		"""

		begin = strata.rational.max_time(self.begin, other.begin)
		end = strata.rational.min_time(self.end, other.end)

		if begin > end:
			return None

		if begin == end:
			# A point at the end of a non-zero-width span lies outside it.
			if begin == self.end and self.begin < self.end:
				return None
			if begin == other.end and other.begin < other.end:
				return None

		return TimeSpan(begin, end)


	def contains (self, t: Time) -> bool:

		"""True if ``t`` falls within ``[begin, end)``."""

		return self.begin <= t < self.end


	def show (self) -> str:
		return f"{self.begin}→{self.end}"


def whole_cycle (t: Time) -> TimeSpan:

	"""The full cycle containing ``t``."""

	return TimeSpan(strata.rational.sam(t), strata.rational.next_sam(t))
