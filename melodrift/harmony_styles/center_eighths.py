import typing

import melodrift.harmony_styles


class CenterEighths (melodrift.harmony_styles.HarmonyStyle):

	"""Outer tones as quarter notes around an eighth-note rocking figure.

	The first tone takes beat one, the two middle tones alternate in eighth
	notes across beats two and three, and the last tone takes beat four.
	"""

	name = "center-8ths"

	def figure (self) -> typing.Tuple[typing.Tuple[int, int], ...]:

		"""Tones 0 (quarter), 1-2-1-2 (eighths), 3 (quarter)."""

		return ((0, 4), (1, 2), (2, 2), (1, 2), (2, 2), (3, 4))
