import io
import re
import typing

import mido
import pytest

import melodrift.chords
import melodrift.config
import melodrift.constants.pulses


NOTATION_TOKEN = re.compile(r"^([a-z]+)([',]*)(\d+)(\.*)(~?)$")


@pytest.fixture
def scenario_config () -> melodrift.config.Config:

	"""A motionless melody: no gravity, drag, nudge, or stutter."""

	return melodrift.config.Config(
		harmony = "quarter",
		tempo = 90,
		min_len = 2,
		max_len = 8,
		steady = 4,
		stutter = 0,
		harmony_base = -12,
		melody_base = 0,
		gravity = 0,
		drag = 0,
		nudge = 0,
	)


@pytest.fixture
def preset_config () -> melodrift.config.Config:

	"""The default preset, with all of its randomness."""

	return melodrift.config.get_preset("1")


def midi_tracks (data: bytes) -> mido.MidiFile:

	"""Load MIDI bytes into a MidiFile."""

	return mido.MidiFile(file=io.BytesIO(data))


def midi_notes (track: mido.MidiTrack) -> typing.List[typing.Tuple[int, int, int]]:

	"""Return ``(start_step, pitch, steps)`` for every note in a track, in start order."""

	notes: typing.List[typing.Tuple[int, int, int]] = []
	open_notes: typing.Dict[int, typing.List[int]] = {}
	now = 0

	for message in track:
		now += message.time

		if message.type == 'note_on' and message.velocity > 0:
			open_notes.setdefault(message.note, []).append(now)

		elif message.type in ('note_off', 'note_on'):
			start = open_notes[message.note].pop(0)
			steps = (now - start) // melodrift.constants.pulses.MIDI_TICKS_PER_STEP
			pitch = message.note - melodrift.constants.pulses.MIDI_REFERENCE_NOTE
			notes.append((start // melodrift.constants.pulses.MIDI_TICKS_PER_STEP, pitch, steps))

	return sorted(notes)


def parse_lilypond_pitch (name: str, marks: str) -> int:

	"""Invert :func:`melodrift.chords.lilypond_pitch`."""

	pc = melodrift.chords.PC_TO_LILYPOND_NAME.index(name)
	octave = marks.count("'") - marks.count(",")

	return pc + 12 * octave


def notation_melody (text: str) -> typing.List[typing.Tuple[int, int, int]]:

	"""Return ``(start_step, pitch, steps)`` for the melody staff of a LilyPond file.

	Tied pieces are merged back into one note.
	"""

	body = text.split("\\time 4/4\n", 1)[1].split("\n\\fine", 1)[0]

	notes: typing.List[typing.Tuple[int, int, int]] = []
	now = 0
	tied = False

	for token in body.split():

		if token == "|":
			continue

		match = NOTATION_TOKEN.match(token)
		assert match is not None, token

		name, marks, value, dots, tie = match.groups()
		base = 16 // int(value)
		steps = base * 2 - base // (2 ** len(dots))
		pitch = parse_lilypond_pitch(name, marks)

		if tied:
			start, previous_pitch, length = notes[-1]
			assert previous_pitch == pitch
			notes[-1] = (start, pitch, length + steps)

		else:
			notes.append((now, pitch, steps))

		now += steps
		tied = tie == "~"

	return notes
