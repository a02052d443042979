import typing

import melodrift.harmony_styles


class Quarter (melodrift.harmony_styles.HarmonyStyle):

	"""Broken chord in straight quarter notes: each voiced tone once, in order."""

	name = "quarter"

	def figure (self) -> typing.Tuple[typing.Tuple[int, int], ...]:

		"""Four quarter notes, tones 0-1-2-3."""

		return ((0, 4), (1, 4), (2, 4), (3, 4))
