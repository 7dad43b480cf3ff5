"""Exception types raised by the pattern engine.

Arithmetic problems with rational time (division by zero and friends) are
not wrapped: they surface as the built-in ``ArithmeticError`` family, which
is what ``fractions.Fraction`` raises.
"""


class StrataError (Exception):

	"""Base class for every error raised by strata itself."""


class PatternArgumentError (StrataError, ValueError):

	"""
	A combinator or generator was given an invalid argument.

	Raised eagerly at construction time where the argument is known, e.g.
	``fast(0)``, a Euclidean rhythm with negative steps, or weighted lists of
	mismatched length.
	"""


class UndefinedSymbolError (StrataError, KeyError):

	"""A symbol was looked up in a table that does not define it and no fallback was given."""

	def __init__ (self, symbol: str, table_name: str = "symbol table") -> None:

		super().__init__(symbol)
		self.symbol = symbol
		self.table_name = table_name


	def __str__ (self) -> str:

		return f"Symbol {self.symbol!r} is not defined in the {self.table_name}"
