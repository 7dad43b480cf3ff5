"""Perlin gradient noise and the noise-driven continuous patterns.

The raw functions take plain float coordinates and are deterministic: the
permutation table is fixed, so the same point always gives the same value.

    perlin1d / perlin2d / perlin3d   gradient noise in [-1, 1]
    fbm          octaves of perlin2d, normalised back into [-1, 1]
    turbulence   octaves of |perlin2d|, NOT normalised: with the default four
                 octaves the result lies in [0, 1.875]
    ridge        offset - |perlin2d|, non-negative whenever offset >= 1

Each is also available as a continuous pattern sampling the noise at a
scaled cycle position, ready for ``segment`` and ``range``::

    strata.pattern.note(strata.noise.perlin_noise.range(48, 72).segment(8))
"""

import math

import strata.errors
import strata.pattern


_PERMUTATION = [
	151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225, 140, 36, 103, 30, 69, 142,
	8, 99, 37, 240, 21, 10, 23, 190, 6, 148, 247, 120, 234, 75, 0, 26, 197, 62, 94, 252, 219, 203, 117,
	35, 11, 32, 57, 177, 33, 88, 237, 149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175, 74, 165, 71,
	134, 139, 48, 27, 166, 77, 146, 158, 231, 83, 111, 229, 122, 60, 211, 133, 230, 220, 105, 92, 41,
	55, 46, 245, 40, 244, 102, 143, 54, 65, 25, 63, 161, 1, 216, 80, 73, 209, 76, 132, 187, 208, 89,
	18, 169, 200, 196, 135, 130, 116, 188, 159, 86, 164, 100, 109, 198, 173, 186, 3, 64, 52, 217, 226,
	250, 124, 123, 5, 202, 38, 147, 118, 126, 255, 82, 85, 212, 207, 206, 59, 227, 47, 16, 58, 17, 182,
	189, 28, 42, 223, 183, 170, 213, 119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101, 155, 167, 43,
	172, 9, 129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232, 178, 185, 112, 104, 218, 246, 97,
	228, 251, 34, 242, 193, 238, 210, 144, 12, 191, 179, 162, 241, 81, 51, 145, 235, 249, 14, 239, 107,
	49, 192, 214, 31, 181, 199, 106, 157, 184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254, 138,
	236, 205, 93, 222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215, 61, 156, 180,
]

# Doubled so corner lookups never need to wrap.
_P = _PERMUTATION + _PERMUTATION


def _fade (t: float) -> float:
	return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp (t: float, a: float, b: float) -> float:
	return a + t * (b - a)


def _grad (hash_value: int, x: float, y: float, z: float) -> float:

	"""Dot product of (x, y, z) with one of twelve cube-edge gradients picked by the hash."""

	h = hash_value & 15
	u = x if h < 8 else y
	v = y if h < 4 else (x if h in (12, 14) else z)
	return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


def perlin3d (x: float, y: float, z: float) -> float:

	"""Improved Perlin noise at a 3D point, in [-1, 1]."""

	xi = math.floor(x) & 255
	yi = math.floor(y) & 255
	zi = math.floor(z) & 255

	x -= math.floor(x)
	y -= math.floor(y)
	z -= math.floor(z)

	u = _fade(x)
	v = _fade(y)
	w = _fade(z)

	a = _P[xi] + yi
	aa = _P[a] + zi
	ab = _P[a + 1] + zi
	b = _P[xi + 1] + yi
	ba = _P[b] + zi
	bb = _P[b + 1] + zi

	value = _lerp(
		w,
		_lerp(
			v,
			_lerp(u, _grad(_P[aa], x, y, z), _grad(_P[ba], x - 1, y, z)),
			_lerp(u, _grad(_P[ab], x, y - 1, z), _grad(_P[bb], x - 1, y - 1, z)),
		),
		_lerp(
			v,
			_lerp(u, _grad(_P[aa + 1], x, y, z - 1), _grad(_P[ba + 1], x - 1, y, z - 1)),
			_lerp(u, _grad(_P[ab + 1], x, y - 1, z - 1), _grad(_P[bb + 1], x - 1, y - 1, z - 1)),
		),
	)

	# The gradient set can overshoot 1.0 very slightly at some points.
	return max(-1.0, min(1.0, value))


def perlin2d (x: float, y: float) -> float:
	return perlin3d(x, y, 0.0)


def perlin1d (x: float) -> float:
	return perlin3d(x, 0.0, 0.0)


def fbm (x: float, y: float, octaves: int = 4, persistence: float = 0.5, lacunarity: float = 2.0) -> float:

	"""
	Fractal Brownian motion: ``octaves`` layers of 2D noise.

	Each octave is ``lacunarity`` times higher in frequency and ``persistence``
	times lower in amplitude than the last. The sum is divided by the total
	amplitude, so the result stays in [-1, 1].
	"""

	if octaves < 1:
		raise strata.errors.PatternArgumentError(f"fbm() needs at least one octave, got {octaves}")

	value = 0.0
	amplitude = 1.0
	frequency = 1.0
	max_value = 0.0

	for _ in range(octaves):
		value += amplitude * perlin2d(x * frequency, y * frequency)
		max_value += amplitude
		amplitude *= persistence
		frequency *= lacunarity

	return value / max_value


def turbulence (x: float, y: float, octaves: int = 4) -> float:

	"""
	Sum of ``|perlin2d|`` over ``octaves`` octaves (amplitude halves, frequency doubles).

	The sum is not normalised: the result lies in ``[0, 2 - 2 ** (1 - octaves)]``
	and grows with the octave count.
	"""

	value = 0.0
	amplitude = 1.0
	frequency = 1.0

	for _ in range(octaves):
		value += amplitude * abs(perlin2d(x * frequency, y * frequency))
		amplitude *= 0.5
		frequency *= 2.0

	return value


def ridge (x: float, y: float, offset: float = 1.0) -> float:

	"""Ridged noise: sharp crests where the underlying noise crosses zero."""

	return offset - abs(perlin2d(x, y))


# ─── Continuous patterns ─────────────────────────────────────────────────────


def perlin (frequency: float = 4.0, bipolar: bool = False) -> strata.pattern.Pattern:

	"""
	A continuous pattern of 1D Perlin noise, ``frequency`` noise cells per cycle.

	Values are in [0, 1], or [-1, 1] when ``bipolar`` is set.
	"""

	if bipolar:
		return strata.pattern.signal(lambda t: perlin1d(float(t) * frequency))

	return strata.pattern.signal(lambda t: (perlin1d(float(t) * frequency) + 1) / 2)


perlin_noise = perlin(4.0)
perlin_bipolar = perlin(4.0, bipolar=True)
fbm_signal = strata.pattern.signal(lambda t: (fbm(float(t) * 2, 0.0, 4, 0.5, 2.0) + 1) / 2)
turbulence_signal = strata.pattern.signal(lambda t: turbulence(float(t) * 2, 0.0, 4))
ridge_signal = strata.pattern.signal(lambda t: ridge(float(t) * 4, 0.0))
