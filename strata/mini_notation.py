import dataclasses
import re
import typing

import strata.constants
import strata.errors
import strata.pattern


class MiniNotationError (strata.errors.StrataError):

	"""
	A syntax error in a mini-notation string.

	``position`` is the character offset of the problem, or ``None`` when the
	error is about the string as a whole (an unclosed bracket at the end).
	"""

	def __init__ (self, message: str, position: typing.Optional[int] = None) -> None:

		if position is not None:
			message = f"{message} (at position {position})"

		super().__init__(message)
		self.position = position


@dataclasses.dataclass
class Token:

	"""
	One lexical item of mini-notation.
	"""

	kind: str			# "number", "word" or "symbol"
	text: str
	start: int
	end: int


_TOKEN_RE = re.compile(r"""
	(?P<space>\s+)
	| (?P<number>-?\d+(?:\.\d+)?)
	| (?P<word>[A-Za-z][\w#:']*)
	| (?P<symbol>[\[\]<>{}(),*/@?%~_.])
""", re.VERBOSE)

_OPENERS = {"[": "]", "<": ">", "{": "}"}

_MODIFIERS = ("*", "/", "@", "?", "(")


def compile (notation: str) -> strata.pattern.Pattern:

	"""
	Compile a mini-notation string into a pattern.

	Mini-notation packs a whole cycle of rhythm into a short string. Every
	construct becomes one of the ordinary pattern combinators, so the result
	is an ordinary pattern.

	**Syntax:**
	- `a b c`: Steps separated by spaces share the cycle equally (``fastcat``).
	- `[a b]`: Groups steps into a single subdivided step.
	- `<a b>`: One step per cycle, in turn (``slowcat``).
	- `a, b`: Inside any brackets (or at the top level), plays layers together (``stack``).
	- `{a b, c d e}%4`: Polymeter, every layer moving four steps per cycle.
	- `~` or `.`: A rest.
	- `_`: Extends the previous step by one step's length.
	- `a*2`, `a/2`: Speeds a step up or slows it down.
	- `a@3`: Gives a step three times the usual length.
	- `a?`, `a?0.2`: Drops the step at random, half the time or with the given probability.
	- `a(3,8)`, `a(3,8,2)`: Plays the step as a Euclidean rhythm, optionally rotated.
	- Numbers become ints or floats; everything else stays a string.

	Each step's source position is recorded in its haps' context under
	``locations`` as ``(start, end)`` character offsets.

	Returns:
		A :class:`strata.pattern.Pattern`.

	Raises:
		MiniNotationError: on any syntax error.

	Example:
		```python
		# Kick on every beat, snare on two and four, a fill every other cycle
		compile("bd [sd, hh] bd <sd [sd sd]>")

		# Three against four
		compile("{bd sd hh, cp cp cp cp}%4")
		```
	"""

	parser = _Parser(_tokenize(notation))
	pattern = parser.parse()

	return pattern


def _tokenize (text: str) -> typing.List[Token]:

	"""
	Convert a string into a flat list of tokens.
	"a [b 2]" -> word a, symbol [, word b, number 2, symbol ]
	"""

	tokens: typing.List[Token] = []
	position = 0

	while position < len(text):

		match = _TOKEN_RE.match(text, position)

		if match is None:
			raise MiniNotationError(f"Unexpected character {text[position]!r}", position)

		kind = match.lastgroup

		if kind != "space":
			tokens.append(Token(kind, match.group(), match.start(), match.end()))

		position = match.end()

	return tokens


class _Parser:

	"""
	Recursive-descent parser producing patterns directly.
	"""

	def __init__ (self, tokens: typing.List[Token]) -> None:

		self.tokens = tokens
		self.index = 0
		self.seed = strata.constants.MINI_NOTATION_SEED


	def parse (self) -> strata.pattern.Pattern:

		if not self.tokens:
			return strata.pattern.silence

		pattern = self._stack(self._layers(closing=None))

		if self.index < len(self.tokens):
			token = self.tokens[self.index]
			raise MiniNotationError(f"Unexpected {token.text!r}", token.start)

		return pattern


	def _peek (self) -> typing.Optional[Token]:
		return self.tokens[self.index] if self.index < len(self.tokens) else None


	def _next (self) -> Token:

		token = self._peek()

		if token is None:
			raise MiniNotationError("Unexpected end of notation")

		self.index += 1
		return token


	def _expect (self, text: str) -> Token:

		token = self._next()

		if token.text != text:
			raise MiniNotationError(f"Expected {text!r} but found {token.text!r}", token.start)

		return token


	def _at_symbol (self, *symbols: str) -> bool:

		token = self._peek()
		return token is not None and token.kind == "symbol" and token.text in symbols


	# ─── Layers and sequences ────────────────────────────────────────────────


	def _layers (self, closing: typing.Optional[str]) -> typing.List[typing.List[typing.List[typing.Any]]]:

		"""
		Parse comma-separated sequences up to ``closing`` (or the end of input).

		Each sequence is a list of ``[pattern, weight]`` steps.
		"""

		layers = [self._sequence(closing)]

		while self._at_symbol(","):
			self._next()
			layers.append(self._sequence(closing))

		return layers


	def _sequence (self, closing: typing.Optional[str]) -> typing.List[typing.List[typing.Any]]:

		steps: typing.List[typing.List[typing.Any]] = []

		while True:

			token = self._peek()

			if token is None or (token.kind == "symbol" and token.text in (",", closing)):
				break

			if token.kind == "symbol" and token.text == "_":
				self._next()
				if not steps:
					raise MiniNotationError("'_' has no step to extend", token.start)
				steps[-1][1] += 1
				continue

			steps.append(self._step())

		if not steps:
			token = self._peek()
			raise MiniNotationError("Empty sequence", token.start if token is not None else None)

		return steps


	def _step (self) -> typing.List[typing.Any]:

		pattern = self._term()
		weight: typing.Any = 1

		while self._at_symbol(*_MODIFIERS):

			token = self._next()

			if token.text == "*":
				pattern = pattern.fast(self._factor())

			elif token.text == "/":
				pattern = pattern.slow(self._factor())

			elif token.text == "@":
				weight = self._number()

			elif token.text == "?":
				probability = self._number() if self._peek_number() else 0.5
				pattern = pattern.degrade_by(probability, seed=self.seed)
				self.seed += 1

			elif token.text == "(":
				pulses = self._int()
				self._expect(",")
				steps = self._int()
				rotation = 0
				if self._at_symbol(","):
					self._next()
					rotation = self._int()
				self._expect(")")
				pattern = pattern.euclid(pulses, steps, rotation)

		return [pattern, weight]


	def _term (self) -> strata.pattern.Pattern:

		token = self._next()

		if token.kind == "number":
			return self._leaf(_number_value(token.text), token)

		if token.kind == "word":
			return self._leaf(token.text, token)

		if token.text in ("~", "."):
			return strata.pattern.silence

		if token.text in _OPENERS:

			closing = _OPENERS[token.text]
			layers = self._layers(closing)
			self._expect(closing)

			if token.text == "[":
				return self._stack(layers)

			if token.text == "<":
				return strata.pattern.stack(*[_alternate(steps) for steps in layers])

			return self._polymeter(layers)

		raise MiniNotationError(f"Unexpected {token.text!r}", token.start)


	def _leaf (self, value: typing.Any, token: Token) -> strata.pattern.Pattern:

		location = (token.start, token.end)

		return strata.pattern.pure(value).with_context(
			lambda context: {**context, "locations": list(context.get("locations", [])) + [location]}
		)


	def _stack (self, layers: typing.List[typing.List[typing.List[typing.Any]]]) -> strata.pattern.Pattern:

		if len(layers) == 1:
			return _sequence_pattern(layers[0])

		return strata.pattern.stack(*[_sequence_pattern(steps) for steps in layers])


	def _polymeter (self, layers: typing.List[typing.List[typing.List[typing.Any]]]) -> strata.pattern.Pattern:

		steps: typing.Optional[typing.Any] = None

		if self._at_symbol("%"):
			self._next()
			steps = self._number()
			if steps <= 0:
				raise MiniNotationError(f"Polymeter step count must be positive, got {steps}", self.tokens[self.index - 1].start)

		return strata.pattern.polymeter(*[_sequence_pattern(s) for s in layers], steps=steps)


	# ─── Arguments ───────────────────────────────────────────────────────────


	def _peek_number (self) -> bool:

		token = self._peek()
		return token is not None and token.kind == "number"


	def _number (self) -> typing.Union[int, float]:

		token = self._next()

		if token.kind != "number":
			raise MiniNotationError(f"Expected a number but found {token.text!r}", token.start)

		return _number_value(token.text)


	def _int (self) -> int:

		token = self._peek()
		value = self._number()

		if not isinstance(value, int):
			raise MiniNotationError(f"Expected a whole number but found {value}", token.start)

		return value


	def _factor (self) -> typing.Any:

		"""A speed factor: a number, or a bracketed pattern of numbers such as ``<2 3>``."""

		token = self._peek()

		if token is not None and token.kind == "number":
			value = self._number()
			if value <= 0:
				raise MiniNotationError(f"Speed factor must be positive, got {value}", token.start)
			return value

		if token is not None and token.text in _OPENERS:
			return self._term()

		raise MiniNotationError("Expected a speed factor", token.start if token is not None else None)


def _number_value (text: str) -> typing.Union[int, float]:
	return float(text) if "." in text else int(text)


def _sequence_pattern (steps: typing.List[typing.List[typing.Any]]) -> strata.pattern.Pattern:

	"""One cycle of steps: ``fastcat`` when all weights are equal, ``timecat`` otherwise."""

	if all(weight == 1 for _, weight in steps):
		return strata.pattern.fastcat(*[pattern for pattern, _ in steps])

	return strata.pattern.timecat(*[(weight, pattern) for pattern, weight in steps])


def _alternate (steps: typing.List[typing.List[typing.Any]]) -> strata.pattern.Pattern:

	"""One step per cycle: ``slowcat`` for plain steps, a slowed ``timecat`` when weights differ."""

	if all(weight == 1 for _, weight in steps):
		return strata.pattern.slowcat(*[pattern for pattern, _ in steps])

	total = sum(weight for _, weight in steps)
	return _sequence_pattern(steps).slow(total)
