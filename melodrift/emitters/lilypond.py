"""LilyPond notation renderer.

Writes a two-staff ``PianoStaff``: the melody on a treble staff carrying the
tempo mark, the accompaniment on a bass staff.  Section repeats use LilyPond's
own ``\\repeat unfold`` so the source stays compact, and the seed is embedded
both as a comment and as a ``\\header`` field so the companion MIDI file can be
regenerated and checked.
"""

import logging
import typing

import melodrift.chords
import melodrift.constants
import melodrift.event_stream


logger = logging.getLogger(__name__)


LILYPOND_VERSION = "2.24.1"

# Duration in ticks (power of two) to LilyPond duration token.
DURATION_NAMES: typing.Dict[int, str] = {
	1: "16",
	2: "8",
	4: "4",
	8: "2",
	16: "1",
}

STAFF_CLEFS: typing.Dict[str, str] = {
	"melody": "treble",
	"harmony": "bass",
}

# Accompaniment measures per source line.
MEASURES_PER_LINE = 4


def duration_tokens (ticks: int) -> typing.List[str]:

	"""
	Split a length of at most one measure into dotted binary note values.

	Example:
		```python
		duration_tokens(6)   # ["4."]
		duration_tokens(5)   # ["4", "16"]
		duration_tokens(15)  # ["2..."]
		```
	"""

	if ticks <= 0 or ticks > melodrift.constants.TICKS_PER_MEASURE:
		raise ValueError(f"Cannot notate a length of {ticks} ticks in one measure")

	tokens: typing.List[str] = []
	magnitude = ticks.bit_length() - 1

	while magnitude >= 0:

		if not ticks & (1 << magnitude):
			magnitude -= 1
			continue

		token = DURATION_NAMES[1 << magnitude]
		magnitude -= 1

		# Each following set bit adds a dot.
		while magnitude >= 0 and ticks & (1 << magnitude):
			token += "."
			magnitude -= 1

		tokens.append(token)

	return tokens


def tied_note (pitch_name: str, start: int, ticks: int) -> typing.List[str]:

	"""
	Return the tokens for one note, split at bar lines and tied together.

	A ``|`` bar check follows every piece that ends on a bar line.
	"""

	measure = melodrift.constants.TICKS_PER_MEASURE
	pieces: typing.List[str] = []
	tick = start
	remaining = ticks

	while remaining > 0:
		chunk = min(remaining, measure - tick % measure)

		for token in duration_tokens(chunk):
			pieces.append(f"{pitch_name}{token}")

		tick += chunk
		remaining -= chunk

		if tick % measure == 0:
			pieces.append("|")

	notes = [i for i, piece in enumerate(pieces) if piece != "|"]

	for i in notes[:-1]:
		pieces[i] += "~"

	return pieces


class LilyPondEmitter (melodrift.event_stream.Emitter):

	"""Renders an EventStream as LilyPond source text."""

	def __init__ (self) -> None:

		"""Start with no parts written."""

		self._stream: typing.Optional[melodrift.event_stream.EventStream] = None
		self._staves: typing.List[typing.Tuple[str, str]] = []
		self._lines: typing.List[str] = []
		self._tokens: typing.List[str] = []
		self._pending: typing.Optional[typing.Tuple[int, int]] = None
		self._measures_on_line = 0

	def begin_part (self, name: str, stream: melodrift.event_stream.EventStream) -> None:

		"""Reset the per-part buffers."""

		self._stream = stream
		self._lines = []
		self._tokens = []
		self._pending = None
		self._measures_on_line = 0

	def end_part (self, name: str) -> None:

		"""Flush the last note and store the finished staff body."""

		assert self._stream is not None

		self._flush_note(self._stream.length)
		self._break_line()
		self._staves.append((name, "\n".join(self._lines)))

	def begin_note (self, pitch: int, tick: int) -> None:

		"""Close the previous note at ``tick`` and hold the new one."""

		self._flush_note(tick)
		self._pending = (tick, pitch)

	def begin_chord (self, chord: melodrift.chords.Chord, tick: int) -> None:

		"""Write one measure of the accompaniment figure."""

		for _, pitches, ticks in chord.notes():

			if len(pitches) == 1:
				name = melodrift.chords.lilypond_pitch(pitches[0])

			else:
				name = "<" + " ".join(melodrift.chords.lilypond_pitch(p) for p in pitches) + ">"

			for token in duration_tokens(ticks):
				self._tokens.append(f"{name}{token}")

		self._tokens.append("|")
		self._measures_on_line += 1

		if self._measures_on_line >= MEASURES_PER_LINE:
			self._break_line()

	def repeat_section (self, section: melodrift.event_stream.SectionRepeat, offset: int) -> None:

		"""Write the section once inside ``\\repeat unfold``."""

		self._flush_note(offset)
		self._break_line()
		self._lines.append(f"\\repeat unfold {section.count} {{")
		self.emit_events(section.content, offset)
		self._flush_note(offset + section.length)
		self._break_line()
		self._lines.append("}")

	def finish (self) -> str:

		"""Assemble the complete LilyPond file."""

		assert self._stream is not None

		seed = self._stream.seed
		tempo = int(round(self._stream.tempo))

		if tempo != self._stream.tempo:
			logger.info(f"LilyPond tempo marks are whole numbers; writing {tempo} for {self._stream.tempo}")

		out: typing.List[str] = [
			f"% Generated by melodrift, seed: {seed}",
			f"\\version \"{LILYPOND_VERSION}\"",
			"\\header {",
			f"  seed = \"{seed}\"",
			"  tagline = ##f",
			"}",
			"\\score {",
			"\\new PianoStaff <<",
		]

		for index, (name, body) in enumerate(self._staves):
			out.append("\\new Staff {")

			if index == 0:
				out.append(f"\\tempo 4 = {tempo}")

			out.append(f"\\clef {STAFF_CLEFS.get(name, 'treble')}")
			out.append("\\key c \\major")
			out.append("\\time 4/4")
			out.append(body)
			out.append("\\fine")
			out.append("}")

		out.extend([
			">>",
			"\\layout {}",
			"\\midi {}",
			"}",
		])

		return "\n".join(out) + "\n"

	def _flush_note (self, end: int) -> None:

		"""Write the held melody note, ending at ``end``."""

		if self._pending is None:
			return

		start, pitch = self._pending
		self._pending = None

		for piece in tied_note(melodrift.chords.lilypond_pitch(pitch), start, end - start):
			self._tokens.append(piece)

			if piece == "|":
				self._measures_on_line += 1

				if self._measures_on_line >= MEASURES_PER_LINE:
					self._break_line()

	def _break_line (self) -> None:

		if self._tokens:
			self._lines.append(" ".join(self._tokens))

		self._tokens = []
		self._measures_on_line = 0
