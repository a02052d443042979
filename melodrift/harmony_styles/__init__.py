"""
Harmony styles: rhythmic figures laid over the fixed chord progression.

Every style plays :data:`PROGRESSION` once, one chord per measure, and
differs only in how each chord's four voiced tones are spread across the
measure.  Styles are looked up by name with
:func:`melodrift.harmony.get_style`.
"""

import abc
import typing

import melodrift.chords
import melodrift.constants


# Sixteen measures of voicings in C major, offsets from the harmony base.
# Four phrases of four measures; the second phrase repeats the first.
PROGRESSION: typing.Tuple[typing.Tuple[int, int, int, int], ...] = (
	# C E G B
	(0, 4, 7, 11),
	# C' A F D
	(12, 9, 5, 2),
	# C E G C'
	(0, 4, 7, 12),
	# D' B G D
	(14, 11, 7, 2),

	(0, 4, 7, 11),
	(12, 9, 5, 2),
	(0, 4, 7, 12),
	(14, 11, 7, 2),

	# E G C' E'
	(4, 7, 12, 16),
	# F' D' C' A
	(17, 14, 12, 9),
	# G B C' E'
	(7, 11, 12, 16),
	# G' F' D' B
	(19, 17, 14, 11),

	# C' G E C
	(12, 7, 4, 0),
	# D F A C'
	(2, 5, 9, 12),
	# B G E C
	(11, 7, 4, 0),
	# B, D G F
	(-1, 2, 7, 5),
)


# Pitch classes the melody snaps to, cycling every four measures.  These are
# the full seventh chords, so they can hold tones the voicing above leaves out.
CHORD_TONES: typing.Tuple[typing.Tuple[int, int, int, int], ...] = (
	# C E G B
	(0, 4, 7, 11),
	# C D F A
	(0, 2, 5, 9),
	# C E G B
	(0, 4, 7, 11),
	# D F G B
	(2, 5, 7, 11),
)


class HarmonyStyle (abc.ABC):

	"""Abstract base for accompaniment figures."""

	name: str = ""

	@abc.abstractmethod
	def figure (self) -> typing.Tuple[typing.Tuple[int, int], ...]:

		"""Return the measure's ``(tone_index, ticks)`` pairs."""

		...

	def chords (self, harmony_base: int) -> typing.List[melodrift.chords.Chord]:

		"""Return one Chord per measure of the progression, voiced at ``harmony_base``."""

		figure = self.figure()
		length = sum(ticks for _, ticks in figure)

		if length != melodrift.constants.TICKS_PER_MEASURE:
			raise ValueError(f"Style {self.name!r} figure spans {length} ticks, expected one measure")

		return [
			melodrift.chords.Chord(
				offsets = voicing,
				base = harmony_base,
				figure = figure,
				tones = CHORD_TONES[measure % len(CHORD_TONES)],
			)
			for measure, voicing in enumerate(PROGRESSION)
		]

