"""Fractal and chaotic generators.

Two layers live here. The ``generate_*`` functions (and the escape-time
functions ``mandelbrot`` and ``julia``) return plain lists, strings and
tuples, and know nothing about patterns. The builders below them turn those
sequences into patterns with ``fastcat`` (one step per item) or ``slowcat``
(one item per cycle).

Everything is deterministic given its arguments. The generators that need
randomness (the Barnsley fern, general IFS trajectories and the chaos-game
Sierpinski) take a ``random.Random`` instance, and their pattern builders
take a ``seed``, so a given seed always gives the same music.
"""

import math
import random
import typing

import strata.constants
import strata.errors
import strata.pattern
import strata.sequence_utils


# An affine map (x, y) -> (a*x + b*y + e, c*x + d*y + f), picked with the given weight.
AffineTransform = typing.Tuple[float, float, float, float, float, float, float]

BARNSLEY_FERN: typing.List[AffineTransform] = [
	# a      b      c      d     e    f     weight
	(0.0,   0.0,   0.0,   0.16, 0.0, 0.0,  0.01),	# stem
	(0.85,  0.04, -0.04,  0.85, 0.0, 1.6,  0.85),	# main frond
	(0.2,  -0.26,  0.23,  0.22, 0.0, 1.6,  0.07),	# left leaflet
	(-0.15, 0.28,  0.26,  0.24, 0.0, 0.44, 0.07),	# right leaflet
]

SIERPINSKI_VERTICES: typing.List[typing.Tuple[float, float]] = [(0.0, 0.0), (1.0, 0.0), (0.5, 0.866)]

DRAGON_AXIOM = "FX"
DRAGON_RULES = {"X": "X+YF+", "Y": "-FX-Y"}

KOCH_AXIOM = "F"
KOCH_RULES = {"F": "F+F-F-F+F"}

_MISSING = object()


def _check_depth (depth: int, name: str = "depth") -> None:

	if depth < 0:
		raise strata.errors.PatternArgumentError(f"{name} cannot be negative, got {depth}")


# ─── Deterministic sequences ─────────────────────────────────────────────────


def generate_cantor_sequence (depth: int) -> typing.List[int]:

	"""
	The Cantor set as a rhythm: keep the outer thirds, silence the middle one, repeat.

	Length ``3 ** depth``, so time and memory are O(3^depth).

	Example:
		```python
		strata.fractals.generate_cantor_sequence(2)
		# -> [1, 0, 1, 0, 0, 0, 1, 0, 1]
		```
	"""

	_check_depth(depth)

	sequence = [1]

	for _ in range(depth):
		sequence = sequence + [0] * len(sequence) + sequence

	return sequence


def generate_sierpinski_sequence (depth: int) -> typing.List[int]:

	"""
	A ``2 ** depth`` step rhythm from Pascal's triangle mod 2.

	Step ``i`` is an onset when every entry of row ``i`` is odd, that is when
	``i & j == j`` for every ``j`` from 1 to ``i``. The test runs bit by bit on
	the row index, never on binomial coefficients, so large depths cannot
	overflow. O(4^depth) in the worst case.
	"""

	_check_depth(depth)

	length = 2 ** depth
	sequence: typing.List[int] = []

	for i in range(length):

		value = 1

		for j in range(1, i + 1):
			if i & j != j:
				value = 0
				break

		sequence.append(value)

	return sequence


def generate_dragon_sequence (n: int) -> typing.List[int]:

	"""
	Paper-folding (dragon curve) sequence of ``2 ** (n + 1) - 1`` folds.

	Each iteration appends a 1 and the reversed, inverted previous sequence.
	"""

	_check_depth(n, "iterations")

	sequence = [1]

	for _ in range(n):
		sequence = sequence + [1] + [1 - bit for bit in reversed(sequence)]

	return sequence


def generate_lsystem (axiom: str, rules: typing.Dict[str, str], iterations: int) -> str:

	"""
	Rewrite ``axiom`` with ``rules`` ``iterations`` times.

	Characters without a rule are copied unchanged. The string can grow
	exponentially with ``iterations``.

	Example:
		```python
		# Fibonacci word
		strata.fractals.generate_lsystem("A", {"A": "AB", "B": "A"}, 4)
		# -> "ABAABABA"
		```
	"""

	_check_depth(iterations, "iterations")

	current = axiom

	for _ in range(iterations):
		current = "".join(rules.get(char, char) for char in current)

	return current


def generate_cellular_grid (rule: int, width: int, generations: int) -> typing.List[typing.List[int]]:

	"""
	Full history of an elementary (Wolfram) cellular automaton.

	Starts from a single live cell in the middle of a ring of ``width`` cells
	and returns ``generations`` rows, the seed row first. Only the low eight
	bits of ``rule`` are used. O(width * generations).
	"""

	if width < 1:
		raise strata.errors.PatternArgumentError(f"Automaton width must be at least 1, got {width}")

	_check_depth(generations, "generations")

	rule &= 0xFF

	cells = [0] * width
	cells[width // 2] = 1

	grid: typing.List[typing.List[int]] = []

	for _ in range(generations):
		grid.append(cells)
		cells = step_cellular_automaton(cells, rule)

	return grid


def step_cellular_automaton (cells: typing.Sequence[int], rule: int) -> typing.List[int]:

	"""Advance a ring of cells by one generation of ``rule``."""

	width = len(cells)
	rule &= 0xFF

	return [
		(rule >> ((cells[(i - 1) % width] << 2) | (cells[i] << 1) | cells[(i + 1) % width])) & 1
		for i in range(width)
	]


def generate_cellular_automaton (rule: int, size: int) -> typing.List[int]:

	"""
	A ``size`` step rhythm read diagonally through an automaton's history.

	Step ``g`` is cell ``g % size`` of generation ``g``, so the rhythm cuts
	across the whole evolution rather than showing one row of it. O(size^2).
	"""

	grid = generate_cellular_grid(rule, size, size)
	return [row[generation % size] for generation, row in enumerate(grid)]


def turtle_melody (commands: str, start_pitch: int = 60, interval: int = 2) -> typing.List[int]:

	"""
	Read an L-system string as a turtle walking in pitch.

	``F`` plays the current pitch, ``+`` and ``-`` move it up and down by
	``interval`` semitones; every other symbol is ignored.
	"""

	pitch = start_pitch
	notes: typing.List[int] = []

	for char in commands:
		if char == "F":
			notes.append(pitch)
		elif char == "+":
			pitch += interval
		elif char == "-":
			pitch -= interval

	return notes


# ─── Iterated function systems ───────────────────────────────────────────────


def generate_ifs (transforms: typing.Sequence[AffineTransform], iterations: int, rng: random.Random) -> typing.List[typing.Tuple[float, float]]:

	"""
	Trajectory of an iterated function system, starting from the origin.

	Each step picks one affine transform by weight and applies it to the
	current point. Returns ``iterations`` points (the origin is not included).

	Parameters:
		transforms: ``(a, b, c, d, e, f, weight)`` tuples
		iterations: Number of points to generate
		rng: Random number generator instance
	"""

	if not transforms:
		raise strata.errors.PatternArgumentError("IFS needs at least one transform")

	for transform in transforms:
		if len(transform) != 7:
			raise strata.errors.PatternArgumentError(f"IFS transforms are (a, b, c, d, e, f, weight), got {transform!r}")

	_check_depth(iterations, "iterations")

	options = [(transform[:6], transform[6]) for transform in transforms]

	x, y = 0.0, 0.0
	points: typing.List[typing.Tuple[float, float]] = []

	for _ in range(iterations):
		a, b, c, d, e, f = strata.sequence_utils.weighted_choice(options, rng)
		x, y = a * x + b * y + e, c * x + d * y + f
		points.append((x, y))

	return points


def generate_barnsley_fern (points: int, rng: random.Random) -> typing.List[typing.Tuple[float, float]]:
	return generate_ifs(BARNSLEY_FERN, points, rng)


def generate_sierpinski_chaos (iterations: int, rng: random.Random) -> typing.List[int]:

	"""
	Play the chaos game on a triangle and return the vertex chosen at each step.

	The point itself (halfway towards the chosen vertex each time) traces the
	Sierpinski triangle; the vertex indices, 0 to 2, make the rhythm.
	"""

	_check_depth(iterations, "iterations")

	x, y = rng.random(), rng.random()
	choices: typing.List[int] = []

	for _ in range(iterations):
		index = rng.randrange(len(SIERPINSKI_VERTICES))
		vx, vy = SIERPINSKI_VERTICES[index]
		x, y = (x + vx) / 2, (y + vy) / 2
		choices.append(index)

	return choices


# ─── Chaotic maps and escape-time sets ───────────────────────────────────────


def generate_logistic_map (r: float, n: int, x0: float = 0.5) -> typing.List[float]:

	"""
	``n`` iterations of ``x -> r * x * (1 - x)``, starting after ``x0``.

	Values stay in [0, 1] for ``0 <= r <= 4``; above about 3.57 they are chaotic.
	"""

	if not 0 <= r <= 4:
		raise strata.errors.PatternArgumentError(f"Logistic map r must be between 0 and 4, got {r}")

	if not 0 <= x0 <= 1:
		raise strata.errors.PatternArgumentError(f"Logistic map x0 must be between 0 and 1, got {x0}")

	_check_depth(n, "n")

	x = x0
	values: typing.List[float] = []

	for _ in range(n):
		x = r * x * (1 - x)
		values.append(x)

	return values


def generate_henon_map (a: float = 1.4, b: float = 0.3, n: int = 16, x0: float = 0.0, y0: float = 0.0) -> typing.List[typing.Tuple[float, float]]:

	"""``n`` points of the Henon map ``(x, y) -> (1 - a*x^2 + y, b*x)``."""

	_check_depth(n, "n")

	x, y = x0, y0
	points: typing.List[typing.Tuple[float, float]] = []

	for _ in range(n):
		x, y = 1 - a * x * x + y, b * x
		points.append((x, y))

	return points


def _escape_time (z_real: float, z_imag: float, c_real: float, c_imag: float, max_iterations: int) -> int:

	"""Iterations of ``z -> z^2 + c`` before ``|z| > 2``, or ``max_iterations`` if it never escapes."""

	iteration = 0

	while iteration < max_iterations and z_real * z_real + z_imag * z_imag <= 4:
		z_real, z_imag = z_real * z_real - z_imag * z_imag + c_real, 2 * z_real * z_imag + c_imag
		iteration += 1

	return iteration


def _normalise_escape (iterations: int, max_iterations: int) -> float:

	if max_iterations <= 0:
		raise strata.errors.PatternArgumentError(f"max_iterations must be positive, got {max_iterations}")

	# Points that never escape count as the maximum.
	return min(1.0, max(0.0, iterations / max_iterations))


def mandelbrot (x: float, y: float, max_iterations: int = 50) -> float:

	"""Escape time of ``c = x + yi`` in the Mandelbrot set, normalised to [0, 1] (1 = inside)."""

	return _normalise_escape(_escape_time(0.0, 0.0, x, y, max_iterations), max_iterations)


def julia (x: float, y: float, c_real: float = -0.7, c_imag: float = 0.27, max_iterations: int = 50) -> float:

	"""Escape time of ``z = x + yi`` in the Julia set for ``c``, normalised to [0, 1] (1 = inside)."""

	return _normalise_escape(_escape_time(x, y, c_real, c_imag, max_iterations), max_iterations)


def generate_julia_chords (c_real: float = -0.7, c_imag: float = 0.27, samples: int = 8, max_iterations: int = 20) -> typing.List[typing.List[int]]:

	"""
	Triads from a scan along the real axis of a Julia set.

	Sample ``i`` starts from ``z = (i - samples/2) / (samples/2)``. Its escape
	count picks the root (``48 + count % 24``); quick escapes get a major
	third, slow ones a minor third.
	"""

	if samples < 1:
		raise strata.errors.PatternArgumentError(f"samples must be at least 1, got {samples}")

	if max_iterations <= 0:
		raise strata.errors.PatternArgumentError(f"max_iterations must be positive, got {max_iterations}")

	chords: typing.List[typing.List[int]] = []
	half = samples / 2

	for i in range(samples):

		count = _escape_time((i - half) / half, 0.0, c_real, c_imag, max_iterations)

		root = 48 + (count % 24)
		third = root + (4 if count < max_iterations / 2 else 3)
		chords.append([root, third, root + 7])

	return chords


# ─── Pattern builders ────────────────────────────────────────────────────────


def _rhythm (sequence: typing.Sequence[int]) -> strata.pattern.Pattern:
	return strata.pattern.fastcat(*[bool(bit) for bit in sequence])


def cantor (depth: int = 3) -> strata.pattern.Pattern:

	"""A boolean Cantor-set rhythm of ``3 ** depth`` steps per cycle; use it with ``struct``."""

	return _rhythm(generate_cantor_sequence(depth))


def sierpinski (depth: int = 4) -> strata.pattern.Pattern:
	return _rhythm(generate_sierpinski_sequence(depth))


def dragon (n: int = 4) -> strata.pattern.Pattern:
	return _rhythm(generate_dragon_sequence(n))


def cellular_automaton (rule: int = 30, size: int = 16) -> strata.pattern.Pattern:

	"""A boolean rhythm read diagonally through a ``size``-cell automaton (see :func:`generate_cellular_automaton`)."""

	return _rhythm(generate_cellular_automaton(rule, size))


def dragon_melody (iterations: int = 5, start_pitch: int = 60, interval: int = 2) -> strata.pattern.Pattern:

	"""
	The dragon curve as a melodic line, all in one cycle.

	Example:
		```python
		strata.pattern.note(strata.fractals.dragon_melody(4)).slow(4)
		```
	"""

	commands = generate_lsystem(DRAGON_AXIOM, DRAGON_RULES, iterations)
	return strata.pattern.fastcat(*turtle_melody(commands, start_pitch, interval))


def koch (iterations: int = 2, start_pitch: int = 60, interval: int = 2) -> strata.pattern.Pattern:

	"""The Koch curve (``F -> F+F-F-F+F``) as a melodic line."""

	commands = generate_lsystem(KOCH_AXIOM, KOCH_RULES, iterations)
	return strata.pattern.fastcat(*turtle_melody(commands, start_pitch, interval))


def lsystem (
	axiom: str,
	rules: typing.Dict[str, str],
	iterations: int = 3,
	symbols: typing.Optional[typing.Dict[str, typing.Any]] = None,
	default: typing.Any = _MISSING,
	unfold: bool = False,
) -> strata.pattern.Pattern:

	"""
	An L-system as a sequence, one step per symbol.

	Symbols are looked up in ``symbols`` (a map from character to any value,
	such as sample names or pitches); characters missing from the table use
	``default`` or, when no default is given, raise ``UndefinedSymbolError``.
	Without a table each character becomes ``ord(char) % 8``.

	With ``unfold`` the result plays generation 0 on the first cycle,
	generation 1 on the second and so on up to ``iterations``, then repeats.

	Example:
		```python
		strata.pattern.s(strata.fractals.lsystem("A", {"A": "AB", "B": "A"}, 4, {"A": "bd", "B": "hh"}))
		```
	"""

	def render (text: str) -> strata.pattern.Pattern:

		values: typing.List[typing.Any] = []

		for char in text:
			if symbols is None:
				values.append(ord(char) % 8)
			elif char in symbols:
				values.append(symbols[char])
			elif default is not _MISSING:
				values.append(default)
			else:
				raise strata.errors.UndefinedSymbolError(char, "L-system symbol table")

		return strata.pattern.fastcat(*values)

	if not unfold:
		return render(generate_lsystem(axiom, rules, iterations))

	_check_depth(iterations, "iterations")

	return strata.pattern.slowcat(*[render(generate_lsystem(axiom, rules, i)) for i in range(iterations + 1)])


def barnsley_fern (points: int = 64, mapping: str = "pitch", seed: int = strata.constants.DEFAULT_SEED) -> strata.pattern.Pattern:

	"""
	A seeded Barnsley fern trajectory, one step per point.

	Mappings:

		"pitch"   MIDI notes ``floor(48 + y * 3.6)``, 48..84 as y runs over the fern's 0..10.
		"rhythm"  ``True`` where ``|x| > 0.5`` (the outer leaflets).
		"both"    dicts ``{"note": ..., "time": |x| / 4, "gain": 0.3 + |y| / 10}``.
	"""

	trajectory = generate_barnsley_fern(points, random.Random(seed))

	if mapping == "pitch":
		values: typing.List[typing.Any] = [math.floor(48 + y * 3.6) for _, y in trajectory]
	elif mapping == "rhythm":
		values = [abs(x) > 0.5 for x, _ in trajectory]
	elif mapping == "both":
		values = [{"note": math.floor(48 + y * 3.6), "time": abs(x) / 4, "gain": 0.3 + abs(y) / 10} for x, y in trajectory]
	else:
		raise strata.errors.PatternArgumentError(f"Unknown fern mapping {mapping!r}, expected 'pitch', 'rhythm' or 'both'")

	return strata.pattern.fastcat(*values)


def ifs (
	transforms: typing.Sequence[AffineTransform],
	iterations: int = 32,
	seed: int = strata.constants.DEFAULT_SEED,
	x_range: typing.Tuple[float, float] = (-1.0, 1.0),
	y_range: typing.Tuple[float, float] = (48.0, 72.0),
	x_param: str = "pan",
	y_param: str = "note",
) -> strata.pattern.Pattern:

	"""
	Any iterated function system as a sequence of control dicts.

	The trajectory's own x and y extents are stretched onto ``x_range`` and
	``y_range`` and written to the ``x_param`` and ``y_param`` controls. An
	axis on which the trajectory never moves maps to the middle of its range.
	"""

	trajectory = generate_ifs(transforms, iterations, random.Random(seed))

	if not trajectory:
		return strata.pattern.silence

	def scaler (values: typing.List[float], out_range: typing.Tuple[float, float]) -> typing.Callable[[float], float]:

		low, high = min(values), max(values)

		if low == high:
			return lambda v: (out_range[0] + out_range[1]) / 2

		return lambda v: strata.sequence_utils.scale_clamp(v, low, high, out_range[0], out_range[1])

	scale_x = scaler([x for x, _ in trajectory], x_range)
	scale_y = scaler([y for _, y in trajectory], y_range)

	return strata.pattern.fastcat(*[{x_param: scale_x(x), y_param: scale_y(y)} for x, y in trajectory])


def sierpinski_chaos (iterations: int = 32, sounds: typing.Sequence[typing.Any] = ("bd", "sd", "hh"), seed: int = strata.constants.DEFAULT_SEED) -> strata.pattern.Pattern:

	"""The chaos-game Sierpinski triangle, playing one of three sounds per step."""

	if len(sounds) != len(SIERPINSKI_VERTICES):
		raise strata.errors.PatternArgumentError(f"sierpinski_chaos() needs exactly 3 sounds, got {len(sounds)}")

	choices = generate_sierpinski_chaos(iterations, random.Random(seed))
	return strata.pattern.fastcat(*[sounds[index] for index in choices])


def logistic_map (r: float = 3.9, n: int = 16, x0: float = 0.5) -> strata.pattern.Pattern:

	"""``n`` steps of the logistic map per cycle, values in [0, 1]; scale them with ``range``."""

	return strata.pattern.fastcat(*generate_logistic_map(r, n, x0))


def henon_map (n: int = 16, a: float = 1.4, b: float = 0.3, low: int = 48, high: int = 72) -> strata.pattern.Pattern:

	"""
	Notes from the Henon attractor, ``n`` steps per cycle.

	The x coordinate (roughly -1.5..1.5 on the attractor) is scaled onto
	``low``..``high`` and rounded to whole notes.
	"""

	points = generate_henon_map(a, b, n)
	return strata.pattern.fastcat(*[round(strata.sequence_utils.scale_clamp(x, -1.5, 1.5, low, high)) for x, _ in points])


def julia_chords (c_real: float = -0.7, c_imag: float = 0.27, samples: int = 8, max_iterations: int = 20) -> strata.pattern.Pattern:

	"""One Julia-set triad per step (see :func:`generate_julia_chords`), each chord a stack of notes."""

	chords = generate_julia_chords(c_real, c_imag, samples, max_iterations)
	return strata.pattern.fastcat(*[strata.pattern.stack(*chord) for chord in chords])


def mandelbrot_scan (y: float = 0.0, x_min: float = -2.0, x_max: float = 0.5, steps: int = 16, max_iterations: int = 50) -> strata.pattern.Pattern:

	"""Escape times along a horizontal line through the Mandelbrot set, ``steps`` per cycle, in [0, 1]."""

	if steps < 1:
		raise strata.errors.PatternArgumentError(f"mandelbrot_scan() needs at least one step, got {steps}")

	width = (x_max - x_min) / steps
	return strata.pattern.fastcat(*[mandelbrot(x_min + width * i, y, max_iterations) for i in range(steps)])
