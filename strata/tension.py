"""Tension curves for pattern morphing.

A tension curve maps morph progress *t* in [0, 1] to a blend amount in
[0, 1]: 0 means "all source", 1 means "all target". Unlike easing curves
they need not be monotonic; ``arc`` rises and falls back, ``pulse`` gates.

Pass a name string or a plain callable to any ``curve`` parameter:

    source.morph(target, curve="golden", cycles=8)

    # Custom callable, receives and returns a float in [0, 1]:
    source.morph(target, curve=lambda t: t ** 2)

Available curves:

    "arc"     sin(pi t): up and back down, peaking half way.
    "cliff"   Slow quadratic climb to the top at t = 0.8, then a sharp linear drop.
    "wave"    Two full peaks, (sin(4 pi t) + 1) / 2.
    "golden"  t ** (1 / phi): a quick start that settles gradually.
    "pulse"   Eight on/off gates per morph (1.0 for the first fifth of each, else 0.3).
    "lorenz"  The x coordinate of a Lorenz attractor, squashed into [0, 1].
    "linear"  t.

Input outside [0, 1] is clamped.
"""

import functools
import logging
import math
import typing

import strata.constants


logger = logging.getLogger(__name__)


# ─── Tension curves ──────────────────────────────────────────────────────────


def _clamp (t: float) -> float:
	return min(1.0, max(0.0, float(t)))


def arc (t: float) -> float:
	"""Rise to full tension at the midpoint and fall back to nothing."""
	return math.sin(math.pi * _clamp(t))


def cliff (t: float) -> float:

	"""Build slowly to the edge at t = 0.8, then drop off it."""

	t = _clamp(t)

	if t < 0.8:
		return (t / 0.8) ** 2

	return 1.0 - (t - 0.8) / 0.2


def wave (t: float) -> float:
	"""Two peaks over the morph."""
	return (math.sin(4 * math.pi * _clamp(t)) + 1) / 2


def golden (t: float) -> float:
	"""Golden-ratio power curve: most of the change happens early."""
	return _clamp(t) ** (1 / strata.constants.GOLDEN_RATIO)


def pulse (t: float) -> float:

	"""Gate between full tension and a low floor eight times over the morph."""

	phase = (_clamp(t) * 8) % 1
	return 1.0 if phase < 0.2 else 0.3


def linear (t: float) -> float:
	return _clamp(t)


@functools.lru_cache(maxsize=1024)
def _lorenz_x (steps: int) -> float:

	"""
	Integrate the Lorenz system from a fixed start for ``steps`` Euler steps.

	Every call starts again from the same initial point, so the result depends
	only on ``steps``; the cache just saves re-integrating.
	"""

	sigma = strata.constants.LORENZ_SIGMA
	rho = strata.constants.LORENZ_RHO
	beta = strata.constants.LORENZ_BETA
	dt = strata.constants.LORENZ_DT

	x, y, z = 0.1, 0.0, 0.0

	for _ in range(steps):
		dx = sigma * (y - x)
		dy = x * (rho - z) - y
		dz = x * y - beta * z
		x += dx * dt
		y += dy * dt
		z += dz * dt

	return x


def lorenz (t: float) -> float:

	"""
	Chaotic but repeatable tension from the Lorenz attractor.

	``t`` sets how far to integrate (``LORENZ_STEPS_PER_UNIT`` steps per unit
	of progress); the x coordinate reached is squashed through ``tanh``.
	"""

	steps = int(math.floor(_clamp(t) * strata.constants.LORENZ_STEPS_PER_UNIT))
	return (math.tanh(_lorenz_x(steps) / 10) + 1) / 2


# ─── Registry and lookup ─────────────────────────────────────────────────────

CurveFn = typing.Callable[[float], float]

TENSION_CURVES: typing.Dict[str, CurveFn] = {
	"arc":    arc,
	"cliff":  cliff,
	"wave":   wave,
	"golden": golden,
	"pulse":  pulse,
	"lorenz": lorenz,
	"linear": linear,
}


def get_curve (curve: typing.Union[str, CurveFn]) -> CurveFn:

	"""Return the tension curve for *curve*.

	*curve* may be a name string (see :data:`TENSION_CURVES`) or any callable
	mapping a float in [0, 1] to a float in [0, 1]. An unknown name falls back
	to ``arc`` and logs a warning, so a typo in a live performance never stops
	the music.
	"""

	if callable(curve):
		return curve

	if curve not in TENSION_CURVES:
		available = ", ".join(f'"{k}"' for k in sorted(TENSION_CURVES))
		logger.warning(f"Unknown tension curve {curve!r}, using \"{strata.constants.DEFAULT_CURVE}\". Available curves: {available}")
		return TENSION_CURVES[strata.constants.DEFAULT_CURVE]

	return TENSION_CURVES[curve]


def tension_at (curve: typing.Union[str, CurveFn], position: float, cycles: float) -> float:

	"""
	Tension of *curve* at *position* cycles into a morph lasting *cycles*.

	Positions past the end of the morph hold the curve's final value.
	"""

	fn = get_curve(curve)
	return _clamp(fn(_clamp(position / cycles)))
