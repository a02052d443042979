"""Standard MIDI File performance renderer.

Produces a type 1 file (all tracks play at the same time): a conductor
track with tempo and time signature, then one track per part on its own
channel.  MIDI has no repeat construct, so section repeats are written out
in full.
"""

import io
import logging
import typing

import mido

import melodrift.chords
import melodrift.constants
import melodrift.constants.pulses
import melodrift.event_stream


logger = logging.getLogger(__name__)


PART_CHANNELS: typing.Dict[str, int] = {
	"melody": melodrift.constants.pulses.MIDI_CHANNEL_MELODY,
	"harmony": melodrift.constants.pulses.MIDI_CHANNEL_HARMONY,
}


def midi_note (pitch: int) -> int:

	"""Map a pitch to a MIDI note number, clamping to the valid range."""

	note = melodrift.constants.pulses.MIDI_REFERENCE_NOTE + pitch

	if note < melodrift.constants.pulses.MIDI_NOTE_MIN or note > melodrift.constants.pulses.MIDI_NOTE_MAX:
		clamped = min(max(note, melodrift.constants.pulses.MIDI_NOTE_MIN), melodrift.constants.pulses.MIDI_NOTE_MAX)
		logger.warning(f"Pitch {pitch} is outside the MIDI range; clamping note {note} to {clamped}")
		return clamped

	return note


class MidiEmitter (melodrift.event_stream.Emitter):

	"""Renders an EventStream as Standard MIDI File bytes."""

	def __init__ (self) -> None:

		"""Create an empty type 1 file."""

		self._stream: typing.Optional[melodrift.event_stream.EventStream] = None
		self._midi_file = mido.MidiFile(type=1)
		self._midi_file.ticks_per_beat = melodrift.constants.pulses.MIDI_TICKS_PER_BEAT

		# Absolute-time events for the current part: (step, order, message).
		# Order 0 sorts note_off before note_on at the same step.
		self._events: typing.List[typing.Tuple[int, int, mido.Message]] = []
		self._channel = 0
		self._pending: typing.Optional[typing.Tuple[int, int]] = None

	def begin_part (self, name: str, stream: melodrift.event_stream.EventStream) -> None:

		"""Start a new track; the first part also writes the conductor track."""

		if self._stream is None:
			self._stream = stream
			self._midi_file.tracks.append(self._conductor_track(stream))

		self._channel = PART_CHANNELS.get(name, len(self._midi_file.tracks) - 1)
		self._events = []
		self._pending = None

	def end_part (self, name: str) -> None:

		"""Close the last note and convert the part's events to a track."""

		assert self._stream is not None

		self._flush_note(self._stream.length)

		track = mido.MidiTrack()
		track.append(mido.MetaMessage('track_name', name=name, time=0))

		last_step = 0

		for step, _, message in sorted(self._events, key=lambda e: (e[0], e[1])):
			delta = (step - last_step) * melodrift.constants.pulses.MIDI_TICKS_PER_STEP
			track.append(message.copy(time=delta))
			last_step = step

		end_delta = (self._stream.length - last_step) * melodrift.constants.pulses.MIDI_TICKS_PER_STEP
		track.append(mido.MetaMessage('end_of_track', time=max(end_delta, 0)))

		self._midi_file.tracks.append(track)
		logger.debug(f"MIDI track {name!r}: {len(self._events) // 2} notes on channel {self._channel}")

	def begin_note (self, pitch: int, tick: int) -> None:

		"""End the held note at ``tick`` and hold the new one."""

		self._flush_note(tick)
		self._pending = (tick, pitch)

	def begin_chord (self, chord: melodrift.chords.Chord, tick: int) -> None:

		"""Write every note of the chord's figure."""

		for start, pitches, ticks in chord.notes():
			for pitch in pitches:
				self._add_note(pitch, tick + start, ticks)

	def repeat_section (self, section: melodrift.event_stream.SectionRepeat, offset: int) -> None:

		"""Write the section's content ``count`` times, back to back."""

		for repetition in range(section.count):
			self.emit_events(section.content, offset + repetition * section.length)

	def finish (self) -> bytes:

		"""Serialise the file to bytes."""

		buffer = io.BytesIO()
		self._midi_file.save(file=buffer)

		return buffer.getvalue()

	def _conductor_track (self, stream: melodrift.event_stream.EventStream) -> mido.MidiTrack:

		"""Build the tempo / time signature track."""

		track = mido.MidiTrack()
		track.append(mido.MetaMessage('track_name', name=f"melodrift seed {stream.seed}", time=0))
		track.append(mido.MetaMessage('set_tempo', tempo=mido.bpm2tempo(stream.tempo), time=0))
		track.append(mido.MetaMessage(
			'time_signature',
			numerator=melodrift.constants.BEATS_PER_MEASURE,
			denominator=4,
			time=0
		))
		track.append(mido.MetaMessage('end_of_track', time=0))

		return track

	def _flush_note (self, end: int) -> None:

		"""Write the held melody note, ending at ``end``."""

		if self._pending is None:
			return

		start, pitch = self._pending
		self._pending = None
		self._add_note(pitch, start, end - start)

	def _add_note (self, pitch: int, start: int, ticks: int) -> None:

		"""Queue a note_on / note_off pair."""

		assert self._stream is not None

		note = midi_note(pitch)

		self._events.append((start, 1, mido.Message('note_on', channel=self._channel, note=note, velocity=self._stream.volume)))
		self._events.append((start + ticks, 0, mido.Message('note_off', channel=self._channel, note=note, velocity=0)))
