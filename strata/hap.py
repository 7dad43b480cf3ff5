import dataclasses
import typing

import strata.errors

from strata.rational import Time
from strata.timespan import TimeSpan


Context = typing.Dict[str, typing.Any]


def merge_context (left: Context, right: Context) -> Context:

	"""
	Combine two hap contexts.

	Keys are unioned and ``right`` wins on a collision, except ``locations``
	(source positions from a parser), which are concatenated so that neither
	side's locations are lost.
	"""

	merged = {**left, **right}

	if "locations" in left or "locations" in right:
		merged["locations"] = list(left.get("locations", [])) + list(right.get("locations", []))

	return merged


@dataclasses.dataclass(frozen=True)
class Hap:

	"""
	A value occurring in time.

	``whole`` is the full extent of the event and ``part`` the fragment of it
	that falls inside the query that produced this hap. ``whole`` is ``None``
	for samples of a continuous signal, which have no onset or duration of
	their own. ``context`` carries metadata such as source locations; it is
	carried through value transforms and merged when haps are combined.
	"""

	whole: typing.Optional[TimeSpan]
	part: TimeSpan
	value: typing.Any
	context: Context = dataclasses.field(default_factory=dict, compare=False)

	def __post_init__ (self) -> None:

		if self.whole is not None:
			if self.part.begin < self.whole.begin or self.part.end > self.whole.end:
				raise strata.errors.PatternArgumentError(f"Hap part {self.part.show()} lies outside its whole {self.whole.show()}")


	def whole_or_part (self) -> TimeSpan:
		return self.whole if self.whole is not None else self.part


	def is_continuous (self) -> bool:
		return self.whole is None


	def has_onset (self) -> bool:

		"""True if this fragment contains the start of the event."""

		return self.whole is not None and self.whole.begin == self.part.begin


	def onset (self) -> Time:

		"""Time the event starts: the whole's begin, or the part's begin for continuous haps."""

		return self.whole_or_part().begin


	def with_value (self, func: typing.Callable[[typing.Any], typing.Any]) -> "Hap":
		return Hap(self.whole, self.part, func(self.value), self.context)


	def with_span (self, func: typing.Callable[[TimeSpan], TimeSpan]) -> "Hap":

		"""Map both ``whole`` (when present) and ``part`` through a span transform."""

		whole = func(self.whole) if self.whole is not None else None
		return Hap(whole, func(self.part), self.value, self.context)


	def with_part (self, part: TimeSpan) -> "Hap":
		return Hap(self.whole, part, self.value, self.context)


	def with_context (self, func: typing.Callable[[Context], Context]) -> "Hap":
		return Hap(self.whole, self.part, self.value, func(dict(self.context)))


	def combine_context (self, other: "Hap") -> Context:

		"""Merge this hap's context with ``other``'s; ``other`` wins on key collisions."""

		return merge_context(self.context, other.context)


	def show (self) -> str:

		if self.whole is None:
			return f"~{self.part.show()}~ {self.value!r}"

		prefix = "" if self.has_onset() else "("
		suffix = "" if self.part.end == self.whole.end else ")"
		return f"{prefix}{self.whole.show()}{suffix} {self.value!r}"
