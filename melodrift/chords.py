"""Chords, pitch naming, and chord-tone selection for the melody.

Pitches are integer half-steps relative to LilyPond's unmarked ``c`` (MIDI
note 48).  Pitch 12 is ``c'`` (middle C) and pitch -12 is ``c,``.

Module-level constants:
- ``PC_TO_LILYPOND_NAME``: pitch class (0-11) to LilyPond note name, spelled
  for keys from D major through A-flat major.

Module-level helpers:
- ``pitch_class(pitch)`` / ``octave(pitch)``: split a pitch into class and octave.
- ``lilypond_pitch(pitch)``: full LilyPond pitch with octave marks.

:class:`ChordSelector` turns the continuous ideal pitch into a sounded pitch:
outside the short *pre-beat* window it snaps to the nearest chord tone,
inside it the melody may leave the harmony for a passing note.
"""

import dataclasses
import logging
import typing

import melodrift.constants
import melodrift.sequencer


logger = logging.getLogger(__name__)


PC_TO_LILYPOND_NAME: typing.List[str] = [
	"c",
	"cis",
	"d",
	"ees",
	"e",
	"f",
	"fis",
	"g",
	"aes",
	"a",
	"bes",
	"b",
]


def pitch_class (pitch: int) -> int:

	"""Return the pitch class (0-11) of ``pitch``."""

	return pitch % melodrift.constants.OCTAVE


def octave (pitch: int) -> int:

	"""Return the octave of ``pitch``, where 0 holds pitches 0-11."""

	return pitch // melodrift.constants.OCTAVE


def lilypond_pitch (pitch: int) -> str:

	"""Return a LilyPond absolute pitch, e.g. ``0 -> "c"``, ``14 -> "d'"``, ``-1 -> "b,"``."""

	name = PC_TO_LILYPOND_NAME[pitch_class(pitch)]
	shift = octave(pitch)
	mark = "'" if shift >= 0 else ","

	return name + mark * abs(shift)


@dataclasses.dataclass(frozen=True)
class Chord:

	"""
	One measure of accompaniment.

	Attributes:
		offsets: Voiced pitches in half-steps relative to ``base``.
		base: The harmony base pitch the offsets are relative to.
		figure: Rhythmic subdivision as ``(offset_index, ticks)`` pairs played
			one after another.  Empty means all tones sound together for
			one measure.
		tones: Pitch classes the melody may land on while this chord
			sounds.  Empty means the voiced pitch classes.
	"""

	offsets: typing.Tuple[int, ...]
	base: int = 0
	figure: typing.Tuple[typing.Tuple[int, int], ...] = ()
	tones: typing.Tuple[int, ...] = ()

	def pitches (self) -> typing.List[int]:

		"""Return the absolute voiced pitches."""

		return [self.base + offset for offset in self.offsets]

	@property
	def length (self) -> int:

		"""Total length of the figure in ticks."""

		if not self.figure:
			return melodrift.constants.TICKS_PER_MEASURE

		return sum(ticks for _, ticks in self.figure)

	def notes (self) -> typing.List[typing.Tuple[int, typing.Tuple[int, ...], int]]:

		"""Return ``(start_tick, pitches, ticks)`` triples relative to the chord's start."""

		pitches = self.pitches()

		if not self.figure:
			return [(0, tuple(pitches), self.length)]

		result: typing.List[typing.Tuple[int, typing.Tuple[int, ...], int]] = []
		start = 0

		for index, ticks in self.figure:
			result.append((start, (pitches[index],), ticks))
			start += ticks

		return result

	def pitch_classes (self) -> typing.List[int]:

		"""Return the distinct melody pitch classes in ascending order."""

		if self.tones:
			return sorted({pitch_class(p) for p in self.tones})

		return sorted({pitch_class(p) for p in self.pitches()})


def nearest_candidates (pitch: int, chord: Chord) -> typing.List[int]:

	"""
	Return every chord tone at the minimum half-step distance from ``pitch``.

	Both the nearest tone below (or equal) and above are considered for each
	pitch class, so a tone exactly a tritone away appears on both sides.
	The result is sorted ascending so tie-breaking draws are order-stable.
	"""

	candidates: typing.Set[int] = set()

	for pc in chord.pitch_classes():
		below = pitch - (pitch - pc) % melodrift.constants.OCTAVE
		candidates.add(below)
		candidates.add(below + melodrift.constants.OCTAVE)

	best = min(abs(c - pitch) for c in candidates)

	return sorted(c for c in candidates if abs(c - pitch) == best)


class ChordSelector:

	"""Quantizes ideal pitches to sounded pitches against the active chord."""

	def __init__ (self, pre_beat: int = 1) -> None:

		"""
		Parameters:
			pre_beat: Number of ticks at the end of each beat where notes are
				only rounded, not snapped to the chord (0 disables the window).
		"""

		self.pre_beat = pre_beat

	def in_pre_beat (self, tick: int) -> bool:

		"""Return True if ``tick`` falls in the window just before a beat."""

		position = tick % melodrift.constants.TICKS_PER_BEAT

		return position >= melodrift.constants.TICKS_PER_BEAT - self.pre_beat

	def select (self, ideal_pitch: float, tick: int, chord: Chord, sequencer: melodrift.sequencer.Sequencer) -> int:

		"""
		Return the sounded pitch for a note starting at ``tick``.

		Consumes one draw only when two chord tones are exactly equally near.
		"""

		# Python's round() rounds halves to even; the melody wants halves away from zero.
		rounded = int(ideal_pitch + 0.5) if ideal_pitch >= 0 else -int(-ideal_pitch + 0.5)

		if self.in_pre_beat(tick):
			return rounded

		candidates = nearest_candidates(rounded, chord)

		if len(candidates) == 1:
			return candidates[0]

		chosen = sequencer.choose(candidates)
		logger.debug(f"Tie at tick {tick} between {candidates}, chose {chosen}")

		return chosen
