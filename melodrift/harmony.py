"""The accompaniment track and harmony-style combinators.

A harmony option is either a single style name or an expression combining
styles with two operators:

- ``a+b`` (*sequence*): play style ``a`` then style ``b``, end to end.
- ``a*b`` (*random choice*): play one of ``a`` or ``b``, chosen uniformly.

``*`` binds tighter than ``+``, so ``quarter+quarter*center-8ths`` plays
``quarter`` followed by one randomly chosen style.

:meth:`HarmonyTrack.realize` resolves the expression exactly once.  The
realized pattern then repeats verbatim for the whole piece; later passes never
draw again.
"""

import dataclasses
import logging
import typing

import melodrift.chords
import melodrift.constants
import melodrift.errors
import melodrift.harmony_styles
import melodrift.harmony_styles.center_eighths
import melodrift.harmony_styles.quarter
import melodrift.sequencer


logger = logging.getLogger(__name__)


SEQUENCE_OPERATOR = "+"
CHOICE_OPERATOR = "*"

# Parsed expression: a sequence of terms, each a tuple of alternatives.
HarmonyExpression = typing.Tuple[typing.Tuple[str, ...], ...]

STYLE_NAMES: typing.Tuple[str, ...] = ("quarter", "center-8ths")


def get_style (name: str) -> melodrift.harmony_styles.HarmonyStyle:

	"""Return a HarmonyStyle instance for ``name``."""

	if name == "quarter":
		return melodrift.harmony_styles.quarter.Quarter()

	if name in ("center-8ths", "center_8ths"):
		return melodrift.harmony_styles.center_eighths.CenterEighths()

	raise melodrift.errors.ConfigurationError(
		f"Unknown harmony {name!r} (available: {', '.join(STYLE_NAMES)})"
	)


def parse_expression (expression: str) -> HarmonyExpression:

	"""
	Parse a harmony expression into terms of alternatives.

	Example:
		```python
		parse_expression("quarter")                     # (("quarter",),)
		parse_expression("quarter+center-8ths")         # (("quarter",), ("center-8ths",))
		parse_expression("quarter*center-8ths+quarter") # (("quarter", "center-8ths"), ("quarter",))
		```

	Raises:
		ConfigurationError: For empty operands or unknown style names.
	"""

	if not isinstance(expression, str) or not expression.strip():
		raise melodrift.errors.ConfigurationError("Harmony expression is empty")

	terms: typing.List[typing.Tuple[str, ...]] = []

	for term in expression.split(SEQUENCE_OPERATOR):

		alternatives = tuple(name.strip() for name in term.split(CHOICE_OPERATOR))

		if any(not name for name in alternatives):
			raise melodrift.errors.ConfigurationError(f"Malformed harmony expression {expression!r}")

		for name in alternatives:
			get_style(name)

		terms.append(alternatives)

	return tuple(terms)


@dataclasses.dataclass(frozen=True)
class HarmonyTrack:

	"""
	The realized accompaniment pattern, repeated for the length of the piece.

	Attributes:
		chords: One Chord per measure of a single pass of the pattern.
		styles: The style names chosen for each term of the expression.
	"""

	chords: typing.Tuple[melodrift.chords.Chord, ...]
	styles: typing.Tuple[str, ...]

	@classmethod
	def realize (
		cls,
		expression: str,
		sequencer: melodrift.sequencer.Sequencer,
		harmony_base: int
	) -> "HarmonyTrack":

		"""
		Parse ``expression`` and resolve every random choice.

		Draws once per term that has more than one alternative, in term order.
		"""

		styles: typing.List[str] = []
		chords: typing.List[melodrift.chords.Chord] = []

		for alternatives in parse_expression(expression):

			if len(alternatives) > 1:
				name = sequencer.choose(alternatives)
				logger.info(f"Harmony choice {'*'.join(alternatives)} resolved to {name}")

			else:
				name = alternatives[0]

			styles.append(name)
			chords.extend(get_style(name).chords(harmony_base))

		return cls(chords=tuple(chords), styles=tuple(styles))

	@property
	def pattern_ticks (self) -> int:

		"""Length of one pass of the pattern in ticks."""

		return sum(chord.length for chord in self.chords)

	@property
	def pattern_measures (self) -> int:

		"""Length of one pass of the pattern in measures."""

		return self.pattern_ticks // melodrift.constants.TICKS_PER_MEASURE

	def chord_at (self, tick: int) -> melodrift.chords.Chord:

		"""Return the chord sounding at ``tick`` (periodic with the pattern length)."""

		position = tick % self.pattern_ticks

		for chord in self.chords:
			if position < chord.length:
				return chord
			position -= chord.length

		raise AssertionError("Position beyond pattern length")

	def is_section_boundary (self, tick: int) -> bool:

		"""Return True if a pass of the pattern starts at ``tick``."""

		return tick % self.pattern_ticks == 0
