import typing

import pytest

import strata.constants
import strata.errors
import strata.hap
import strata.pattern

from strata.pattern import euclid, fastcat, polymeter, pure, silence, slowcat, stack, timecat
from strata.rational import Time
from strata.timespan import TimeSpan


def _sorted (haps: typing.List[strata.hap.Hap]) -> typing.List[strata.hap.Hap]:
	return sorted(haps, key=lambda hap: (hap.part.begin, hap.part.end, repr(hap.value)))


def _values (haps: typing.List[strata.hap.Hap]) -> typing.List[typing.Any]:
	return [hap.value for hap in _sorted(haps)]


def _cycle (pattern: strata.pattern.Pattern, cycle: int) -> typing.List[strata.hap.Hap]:
	return pattern.query(TimeSpan(cycle, cycle + 1))


# ─── Leaves ──────────────────────────────────────────────────────────────────


def test_pure_over_two_and_a_half_cycles () -> None:

	"""pure gives one hap per cycle piece; the last is a fragment of cycle two."""

	haps = pure("a").query(TimeSpan(0, Time(5, 2)))

	assert len(haps) == 3
	assert [hap.whole for hap in haps] == [TimeSpan(0, 1), TimeSpan(1, 2), TimeSpan(2, 3)]
	assert haps[2].part == TimeSpan(2, Time(5, 2))
	assert all(hap.value == "a" for hap in haps)


def test_pure_zero_width_query () -> None:

	"""A point query returns the event sounding at that point, without its onset."""

	haps = pure("a").query(TimeSpan(Time(1, 2), Time(1, 2)))

	assert len(haps) == 1
	assert haps[0].whole == TimeSpan(0, 1)
	assert haps[0].part == TimeSpan(Time(1, 2), Time(1, 2))
	assert not haps[0].has_onset()


def test_silence_is_empty () -> None:

	assert silence.query(TimeSpan(0, 10)) == []
	assert stack().query(TimeSpan(0, 1)) == []
	assert fastcat().query(TimeSpan(0, 1)) == []
	assert slowcat().query(TimeSpan(0, 1)) == []


def test_signal_samples_each_cycle_piece () -> None:

	"""Continuous haps have no whole and one sample per cycle piece."""

	haps = strata.pattern.saw.query(TimeSpan(Time(1, 2), Time(3, 2)))

	assert len(haps) == 2
	assert all(hap.whole is None for hap in haps)
	assert haps[0].value == pytest.approx(0.5)
	assert haps[1].value == pytest.approx(0.0)


def test_signal_point_query () -> None:

	haps = strata.pattern.saw.query(TimeSpan(Time(1, 4), Time(1, 4)))

	assert len(haps) == 1
	assert haps[0].value == pytest.approx(0.25)


def test_reify () -> None:

	pattern = pure("a")

	assert strata.pattern.reify(pattern) is pattern
	assert strata.pattern.reify("b").first_cycle()[0].value == "b"


def test_query_arc_and_first_cycle () -> None:

	pattern = fastcat("a", "b")

	assert pattern.query_arc(0, 1) == pattern.first_cycle()
	assert pattern.first_cycle() == pattern.query(TimeSpan(0, 1))


# ─── Sequencing and layering ─────────────────────────────────────────────────


def test_fastcat_two_values () -> None:

	"""fastcat('a', 'b') plays a in the first half and b in the second."""

	haps = fastcat("a", "b").first_cycle()

	assert [hap.value for hap in haps] == ["a", "b"]
	assert [hap.whole for hap in haps] == [TimeSpan(0, Time(1, 2)), TimeSpan(Time(1, 2), 1)]


def test_fastcat_nested () -> None:

	haps = fastcat("a", fastcat("b", "c")).first_cycle()

	assert _values(haps) == ["a", "b", "c"]
	assert haps[1].whole == TimeSpan(Time(1, 2), Time(3, 4))


def test_slowcat_alternates () -> None:

	pattern = slowcat("a", "b")

	assert [_cycle(pattern, c)[0].value for c in range(4)] == ["a", "b", "a", "b"]


def test_slowcat_children_keep_their_own_cycle_count () -> None:

	"""A nested slowcat advances only on the cycles it plays."""

	pattern = slowcat(slowcat("a", "b"), "c")

	assert [_cycle(pattern, c)[0].value for c in range(4)] == ["a", "c", "b", "c"]


def test_slowcat_hap_times_are_real_cycles () -> None:

	haps = _cycle(slowcat("a", "b"), 3)

	assert haps[0].whole == TimeSpan(3, 4)


def test_stack_cardinality () -> None:

	"""A stack returns exactly its children's haps, in argument order."""

	a = fastcat("a", "b", "c")
	b = euclid(3, 8)
	span = TimeSpan(Time(1, 8), Time(15, 16))

	haps = stack(a, b).query(span)

	assert len(haps) == len(a.query(span)) + len(b.query(span))
	assert haps == a.query(span) + b.query(span)


def test_timecat_weights () -> None:

	haps = timecat((1, "a"), (2, "b")).first_cycle()

	assert _values(haps) == ["a", "b"]
	assert _sorted(haps)[0].whole == TimeSpan(0, Time(1, 3))
	assert _sorted(haps)[1].whole == TimeSpan(Time(1, 3), 1)


def test_timecat_rejects_bad_weights () -> None:

	with pytest.raises(strata.errors.PatternArgumentError):
		timecat()

	with pytest.raises(strata.errors.PatternArgumentError):
		timecat((0, "a"))

	with pytest.raises(strata.errors.PatternArgumentError):
		timecat((-1, "a"), (2, "b"))


def test_polymeter_steps_through_layers () -> None:

	"""With two shared steps, the three-step layer drifts against the two-step one."""

	pattern = polymeter(fastcat("a", "b"), fastcat("c", "d", "e"), steps=2)

	assert [hap.value for hap in _cycle(pattern, 0)] == ["a", "b", "c", "d"]
	assert [hap.value for hap in _cycle(pattern, 1)] == ["a", "b", "e", "c"]
	assert _cycle(pattern, 1)[2].whole == TimeSpan(1, Time(3, 2))


def test_polymeter_defaults_to_first_layer_steps () -> None:

	pattern = polymeter(fastcat("a", "b"), fastcat("c", "d", "e"))

	assert pattern.steps == 2
	assert [hap.value for hap in _cycle(pattern, 0)] == ["a", "b", "c", "d"]


def test_polymeter_needs_known_steps () -> None:

	with pytest.raises(strata.errors.PatternArgumentError):
		polymeter(strata.pattern.saw)


def test_steps_are_tracked () -> None:

	assert pure("a").steps == 1
	assert fastcat("a", "b", "c").steps == 3
	assert fastcat("a", "b").fast(2).steps == 2
	assert stack(fastcat("a", "b"), fastcat("c", "d", "e")).steps == 6
	assert timecat((1, "a"), (2, "b")).steps == 3
	assert strata.pattern.saw.steps is None


# ─── Time transforms ─────────────────────────────────────────────────────────


def test_fast_then_slow_is_identity () -> None:

	"""Speeding up and slowing down by the same factor gives back the exact haps."""

	pattern = fastcat("a", fastcat("b", "c"), "d")

	for factor in (3, Time(3, 2), 0.5):
		for span in (TimeSpan(0, 1), TimeSpan(Time(1, 3), Time(7, 5)), TimeSpan(0, 3)):
			assert pattern.fast(factor).slow(factor).query(span) == pattern.query(span)


def test_fast_doubles_events () -> None:

	haps = pure("a").fast(2).first_cycle()

	assert [hap.whole for hap in haps] == [TimeSpan(0, Time(1, 2)), TimeSpan(Time(1, 2), 1)]


def test_slow_spreads_an_event_over_cycles () -> None:

	haps = _cycle(pure("a").slow(2), 1)

	assert haps[0].whole == TimeSpan(0, 2)
	assert haps[0].part == TimeSpan(1, 2)
	assert not haps[0].has_onset()


def test_fast_rejects_non_positive_factors () -> None:

	for bad in (0, -1):
		with pytest.raises(strata.errors.PatternArgumentError):
			pure("a").fast(bad)
		with pytest.raises(strata.errors.PatternArgumentError):
			pure("a").slow(bad)


def test_fast_with_a_pattern_of_factors () -> None:

	"""The first half plays at normal speed, the second half twice as fast."""

	haps = pure("a").fast(fastcat(1, 2)).first_cycle()

	assert len(haps) == 2
	assert haps[0].whole == TimeSpan(0, 1)
	assert haps[0].part == TimeSpan(0, Time(1, 2))
	assert haps[1].whole == TimeSpan(Time(1, 2), 1)


def test_late_shifts_events () -> None:

	haps = pure("a").late(Time(1, 4)).first_cycle()

	assert [hap.whole for hap in haps] == [TimeSpan(Time(-3, 4), Time(1, 4)), TimeSpan(Time(1, 4), Time(5, 4))]
	assert haps[0].part == TimeSpan(0, Time(1, 4))


def test_early_and_late_cancel () -> None:

	pattern = fastcat("a", "b", "c")

	assert pattern.early(Time(1, 3)).late(Time(1, 3)).first_cycle() == pattern.first_cycle()


def test_compress () -> None:

	haps = pure("a").compress(Time(1, 4), Time(1, 2)).query(TimeSpan(0, 2))

	assert [hap.whole for hap in haps] == [TimeSpan(Time(1, 4), Time(1, 2)), TimeSpan(Time(5, 4), Time(3, 2))]


def test_compress_edge_cases () -> None:

	assert pure("a").compress(Time(1, 2), Time(1, 2)).first_cycle() == []

	with pytest.raises(strata.errors.PatternArgumentError):
		pure("a").compress(Time(1, 2), Time(1, 4))

	with pytest.raises(strata.errors.PatternArgumentError):
		pure("a").compress(0, 2)


def test_rev () -> None:

	haps = fastcat("a", "b", "c").rev().first_cycle()

	assert _values(haps) == ["c", "b", "a"]
	assert _sorted(haps)[0].whole == TimeSpan(0, Time(1, 3))


# ─── Structure ───────────────────────────────────────────────────────────────


def test_euclid_tresillo () -> None:

	haps = euclid(3, 8).first_cycle()

	assert [hap.value for hap in haps] == [True, False, False, True, False, False, True, False]
	assert haps[3].whole == TimeSpan(Time(3, 8), Time(1, 2))


def test_euclid_extremes_and_rotation () -> None:

	assert [hap.value for hap in euclid(8, 8).first_cycle()] == [True] * 8
	assert [hap.value for hap in euclid(0, 8).first_cycle()] == [False] * 8
	assert [hap.value for hap in euclid(3, 8, 1).first_cycle()] == [False, False, True, False, False, True, False, True]


def test_euclid_rejects_bad_arguments () -> None:

	for pulses, steps in ((9, 8), (-1, 8), (3, 0)):
		with pytest.raises(strata.errors.PatternArgumentError):
			euclid(pulses, steps)


def test_struct_with_euclid () -> None:

	"""Three onsets at 0, 3/8 and 6/8, each an eighth of a cycle long."""

	haps = pure("x").struct(euclid(3, 8)).first_cycle()

	assert [hap.whole.begin for hap in haps] == [0, Time(3, 8), Time(3, 4)]
	assert all(hap.whole.duration == Time(1, 8) for hap in haps)
	assert all(hap.value == "x" for hap in haps)
	assert strata.pattern.struct(euclid(3, 8), "x").first_cycle() == haps


def test_struct_samples_the_pattern_value () -> None:

	haps = fastcat("a", "b").struct(fastcat(True, True, False, True)).first_cycle()

	assert [hap.value for hap in haps] == ["a", "a", "b"]


def test_euclid_method () -> None:

	assert len(pure("bd").euclid(5, 8).first_cycle()) == 5


def test_mask_keeps_structure () -> None:

	haps = fastcat("a", "b", "c", "d").mask(fastcat(True, False)).first_cycle()

	assert [hap.value for hap in haps] == ["a", "b"]
	assert haps[0].whole == TimeSpan(0, Time(1, 4))


def test_ply () -> None:

	haps = fastcat("a", "b").ply(2).first_cycle()

	assert [hap.value for hap in haps] == ["a", "a", "b", "b"]
	assert all(hap.whole.duration == Time(1, 4) for hap in haps)

	with pytest.raises(strata.errors.PatternArgumentError):
		pure("a").ply(0)


def test_segment_samples_a_signal () -> None:

	haps = strata.pattern.saw.segment(4).first_cycle()

	assert [hap.value for hap in haps] == pytest.approx([0.0, 0.25, 0.5, 0.75])
	assert [hap.whole for hap in haps] == [TimeSpan(Time(i, 4), Time(i + 1, 4)) for i in range(4)]


def test_every () -> None:

	"""The function applies on cycles 0, 3, 6... only."""

	pattern = pure("a").every(3, lambda p: p.fast(2))

	assert [len(_cycle(pattern, c)) for c in range(7)] == [2, 1, 1, 2, 1, 1, 2]


def test_every_with_offset () -> None:

	pattern = pure("a").every(3, lambda p: p.fast(2), offset=1)

	assert [len(_cycle(pattern, c)) for c in range(4)] == [1, 2, 1, 1]


def test_every_rejects_zero () -> None:

	with pytest.raises(strata.errors.PatternArgumentError):
		pure("a").every(0, lambda p: p)


def test_iter () -> None:

	pattern = fastcat("a", "b", "c", "d").iter(4)

	assert [hap.value for hap in _cycle(pattern, 0)] == ["a", "b", "c", "d"]
	assert [hap.value for hap in _cycle(pattern, 1)] == ["b", "c", "d", "a"]
	assert _cycle(pattern, 1)[0].whole == TimeSpan(1, Time(5, 4))


def test_palindrome () -> None:

	pattern = fastcat("a", "b").palindrome()

	assert _values(_cycle(pattern, 0)) == ["a", "b"]
	assert _values(_cycle(pattern, 1)) == ["b", "a"]
	assert _values(_cycle(pattern, 2)) == ["a", "b"]


def test_inside () -> None:

	haps = fastcat("a", "b", "c", "d").inside(2, lambda p: p.rev()).first_cycle()

	assert _values(haps) == ["b", "a", "d", "c"]


def test_superimpose_and_off () -> None:

	assert len(pure("a").superimpose(lambda p: p.fast(2)).first_cycle()) == 3

	haps = pure("a").off(Time(1, 4), lambda p: p.fmap(str.upper)).first_cycle()

	assert len(haps) == 3
	assert [hap.value for hap in haps].count("A") == 2
	assert [hap.whole.begin for hap in haps if hap.has_onset()] == [0, Time(1, 4)]


# ─── Applicative combination and values ──────────────────────────────────────


def test_app_both_takes_structure_from_both () -> None:

	funcs = fastcat(1, 2).fmap(lambda a: lambda b: a + b)
	haps = funcs.app_both(fastcat(10, 20, 30)).first_cycle()

	assert [hap.value for hap in haps] == [11, 21, 22, 32]
	assert haps[1].whole == TimeSpan(Time(1, 3), Time(1, 2))


def test_app_left_keeps_left_structure () -> None:

	funcs = fastcat(1, 2).fmap(lambda a: lambda b: a + b)
	haps = funcs.app_left(fastcat(10, 20, 30)).first_cycle()

	assert [hap.value for hap in haps] == [11, 21, 22, 32]
	assert [hap.whole for hap in haps] == [TimeSpan(0, Time(1, 2))] * 2 + [TimeSpan(Time(1, 2), 1)] * 2
	assert haps[1].part == TimeSpan(Time(1, 3), Time(1, 2))


def test_app_right_keeps_right_structure () -> None:

	funcs = fastcat(1, 2).fmap(lambda a: lambda b: a + b)
	haps = funcs.app_right(fastcat(10, 20, 30)).first_cycle()

	assert [hap.value for hap in haps] == [11, 21, 22, 32]
	assert [hap.whole for hap in haps] == [
		TimeSpan(0, Time(1, 3)),
		TimeSpan(Time(1, 3), Time(2, 3)),
		TimeSpan(Time(1, 3), Time(2, 3)),
		TimeSpan(Time(2, 3), 1),
	]


def test_inner_join_uses_inner_timing () -> None:

	outer = slowcat(fastcat("a", "b"), "c").fmap(pure)
	haps = outer.inner_join().first_cycle()

	assert [hap.value for hap in haps] == ["a", "b"]


def test_set_and_keep () -> None:

	base = pure({"s": "bd", "gain": 1})

	assert base.set({"gain": 0.5}).first_cycle()[0].value == {"s": "bd", "gain": 0.5}
	assert base.keep({"gain": 0.5, "pan": 0}).first_cycle()[0].value == {"s": "bd", "gain": 1, "pan": 0}


def test_numeric_operators () -> None:

	assert [hap.value for hap in fastcat(1, 2).add(10).first_cycle()] == [11, 12]
	assert pure({"note": 60}).add({"note": 12}).first_cycle()[0].value == {"note": 72}
	assert pure({"note": 60, "gain": 1}).mul(2).first_cycle()[0].value == {"note": 120, "gain": 2}
	assert pure(10).sub(4).first_cycle()[0].value == 6
	assert pure(10).div(4).first_cycle()[0].value == pytest.approx(2.5)


def test_controls () -> None:

	assert strata.pattern.s("bd").first_cycle()[0].value == {"s": "bd"}
	assert strata.pattern.note(60).first_cycle()[0].value == {"note": 60}
	assert strata.pattern.n(3).first_cycle()[0].value == {"n": 3}
	assert strata.pattern.s("bd").gain(0.8).first_cycle()[0].value == {"s": "bd", "gain": 0.8}
	assert pure("bd").control("pan", 0.2).first_cycle()[0].value == {"value": "bd", "pan": 0.2}


def test_context_survives_transforms () -> None:

	tagged = pure("a").with_context(lambda context: {**context, "locations": [(0, 1)]})
	haps = fastcat(tagged, "b").fast(2).fmap(str.upper).first_cycle()

	assert haps[0].value == "A"
	assert haps[0].context["locations"] == [(0, 1)]


def test_context_merges_when_combining () -> None:

	left = pure("a").with_context(lambda context: {"locations": [(0, 1)]})
	right = pure({"gain": 1}).with_context(lambda context: {"locations": [(4, 5)]})

	hap = left.set(right).first_cycle()[0]

	assert sorted(hap.context["locations"]) == [(0, 1), (4, 5)]


# ─── Query properties ────────────────────────────────────────────────────────


def test_queries_are_deterministic () -> None:

	pattern = stack(
		fastcat("a", "b", "c").degrade_by(0.4, seed=2),
		strata.pattern.choose("x", "y", "z").segment(8),
		strata.pattern.randcat("p", fastcat("q", "r")),
	)

	for span in (TimeSpan(0, 1), TimeSpan(Time(3, 7), Time(19, 4))):
		assert pattern.query(span) == pattern.query(span)


def test_cycle_splitting_is_complete () -> None:

	"""Querying by cycle pieces gives the same haps as one query over the whole span."""

	pattern = stack(
		fastcat("a", "b", "c"),
		euclid(3, 8),
		pure("x").fast(2),
		slowcat("p", "q"),
		pure("long").slow(3),
		fastcat("s", "t").slow(Time(5, 2)).late(Time(1, 3)),
	)
	span = TimeSpan(Time(1, 3), Time(11, 2))

	pieces = [hap for piece in span.span_cycles() for hap in pattern.query(piece)]

	assert _sorted(pieces) == _sorted(pattern.query(span))


def test_long_events_come_back_per_cycle () -> None:

	"""An event longer than a cycle is returned as one fragment per cycle, sharing its whole."""

	haps = pure("a").slow(2).query(TimeSpan(0, 2))

	assert [hap.part for hap in haps] == [TimeSpan(0, 1), TimeSpan(1, 2)]
	assert all(hap.whole == TimeSpan(0, 2) for hap in haps)
	assert [hap.has_onset() for hap in haps] == [True, False]


def test_split_queries () -> None:

	calls: typing.List[TimeSpan] = []

	def query (span: TimeSpan) -> typing.List[strata.hap.Hap]:
		calls.append(span)
		return []

	strata.pattern.Pattern(query).split_queries().query(TimeSpan(Time(1, 2), Time(5, 2)))

	assert calls == [TimeSpan(Time(1, 2), 1), TimeSpan(1, 2), TimeSpan(2, Time(5, 2))]


def test_query_errors_propagate () -> None:

	def broken (span: TimeSpan) -> typing.List[strata.hap.Hap]:
		raise RuntimeError("boom")

	with pytest.raises(RuntimeError):
		strata.pattern.Pattern(broken).fast(2).first_cycle()


# ─── Randomness ──────────────────────────────────────────────────────────────


def test_rand_at_is_deterministic () -> None:

	assert strata.pattern.rand_at(Time(1, 3), 5) == strata.pattern.rand_at(Time(1, 3), 5)
	assert strata.pattern.rand_at(0.5) == strata.pattern.rand_at(Time(1, 2))
	assert 0 <= strata.pattern.rand_at(Time(7, 3)) < 1
	assert strata.pattern.rand_at(0, 1) != strata.pattern.rand_at(0, 2)


def test_degrade_by_extremes () -> None:

	pattern = pure("a").fast(16)

	assert len(pattern.degrade_by(0).first_cycle()) == 16
	assert pattern.degrade_by(1).first_cycle() == []

	with pytest.raises(strata.errors.PatternArgumentError):
		pattern.degrade_by(1.5)


def test_degrade_by_drops_about_the_right_amount () -> None:

	haps = pure("a").fast(64).degrade_by(0.5).query(TimeSpan(0, 8))

	assert 0.35 * 512 < len(haps) < 0.65 * 512


def test_degrade_and_undegrade_partition_events () -> None:

	pattern = pure("a").fast(16)
	span = TimeSpan(0, 4)

	kept = {hap.whole for hap in pattern.degrade_by(0.3, seed=4).query(span)}
	dropped = {hap.whole for hap in pattern.undegrade_by(0.3, seed=4).query(span)}

	assert kept.isdisjoint(dropped)
	assert kept | dropped == {hap.whole for hap in pattern.query(span)}


def test_degrade_ignores_query_chunking () -> None:

	"""The same events survive whether a cycle is queried whole or in pieces."""

	pattern = pure("a").fast(8).degrade_by(0.5, seed=1)

	whole_query = {hap.whole for hap in pattern.first_cycle()}
	chunked = {hap.whole for hap in pattern.query_arc(0, Time(1, 3)) + pattern.query_arc(Time(1, 3), 1)}

	assert whole_query == chunked


def test_random_transforms_share_the_default_seed () -> None:

	pattern = pure("a").fast(16)
	seed = strata.constants.DEFAULT_SEED

	assert pattern.degrade_by(0.5).first_cycle() == pattern.degrade_by(0.5, seed=seed).first_cycle()
	assert pattern.sometimes(lambda p: p.fmap(str.upper)).first_cycle() == pattern.sometimes(lambda p: p.fmap(str.upper), seed=seed).first_cycle()
	assert strata.pattern.rand_at(Time(1, 3)) == strata.pattern.rand_at(Time(1, 3), seed)


def test_sometimes_by_transforms_a_disjoint_subset () -> None:

	pattern = pure("a").fast(16)
	span = TimeSpan(0, 4)

	haps = pattern.sometimes_by(0.5, lambda p: p.fmap(str.upper), seed=3).query(span)

	assert len(haps) == 64
	assert {hap.whole for hap in haps} == {hap.whole for hap in pattern.query(span)}
	assert {hap.whole for hap in haps if hap.value == "A"} == {hap.whole for hap in pattern.undegrade_by(0.5, seed=3).query(span)}


def test_often_transforms_more_than_rarely () -> None:

	pattern = pure("a").fast(16)
	span = TimeSpan(0, 4)

	often = [hap.value for hap in pattern.often(lambda p: p.fmap(str.upper)).query(span)].count("A")
	rarely = [hap.value for hap in pattern.rarely(lambda p: p.fmap(str.upper)).query(span)].count("A")

	assert often > rarely


def test_choose_and_irand () -> None:

	chosen = [hap.value for hap in strata.pattern.choose("a", "b", "c").segment(8).query(TimeSpan(0, 4))]
	numbers = [hap.value for hap in strata.pattern.irand(4).segment(16).first_cycle()]

	assert set(chosen) <= {"a", "b", "c"}
	assert all(number in (0, 1, 2, 3) for number in numbers)

	with pytest.raises(strata.errors.PatternArgumentError):
		strata.pattern.choose()


def test_wchoose_respects_zero_weights () -> None:

	values = [hap.value for hap in strata.pattern.wchoose(("a", 1), ("b", 0)).segment(8).first_cycle()]

	assert values == ["a"] * 8


def test_randcat_picks_one_pattern_per_cycle () -> None:

	pattern = strata.pattern.randcat("a", "b", seed=3)

	for cycle in range(8):
		haps = _cycle(pattern, cycle)
		assert len(haps) == 1
		assert haps[0].value in ("a", "b")
		assert haps[0].whole == TimeSpan(cycle, cycle + 1)


# ─── Continuous signals ──────────────────────────────────────────────────────


def test_periodic_signals () -> None:

	def sample (pattern: strata.pattern.Pattern) -> typing.List[float]:
		return [hap.value for hap in pattern.segment(4).first_cycle()]

	assert sample(strata.pattern.sine) == pytest.approx([0.5, 1.0, 0.5, 0.0], abs=1e-9)
	assert sample(strata.pattern.cosine) == pytest.approx([1.0, 0.5, 0.0, 0.5], abs=1e-9)
	assert sample(strata.pattern.square) == pytest.approx([0.0, 0.0, 1.0, 1.0])
	assert sample(strata.pattern.isaw) == pytest.approx([1.0, 0.75, 0.5, 0.25])
	assert sample(strata.pattern.tri) == pytest.approx([0.0, 0.5, 1.0, 0.5])


def test_range () -> None:

	values = [hap.value for hap in strata.pattern.saw.range(10, 20).segment(2).first_cycle()]

	assert values == pytest.approx([10.0, 15.0])


def test_rand_signal_is_unipolar () -> None:

	values = [hap.value for hap in strata.pattern.rand.segment(32).query(TimeSpan(0, 2))]

	assert all(0 <= value < 1 for value in values)
