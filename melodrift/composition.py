"""The generation pass and output writing.

:func:`generate` runs the whole simulation exactly once and returns an
immutable :class:`~melodrift.event_stream.EventStream`.  Draws happen in a
fixed order:

1. harmony combinator choices (once, before anything else),
2. the first note's chord-tone tie-break, if any,
3. per tick: the pitch engine's nudge, the rhythm scheduler's stutter
   draws, and a tie-break draw when a new note lands exactly between two
   chord tones.

:class:`Composition` wraps a config and seed, renders the stream with both
emitters, and writes the files.
"""

import logging
import os
import typing

import melodrift.chords
import melodrift.config
import melodrift.constants
import melodrift.emitters.lilypond
import melodrift.emitters.midi
import melodrift.errors
import melodrift.event_stream
import melodrift.harmony
import melodrift.melodic_state
import melodrift.rhythm
import melodrift.sequencer


logger = logging.getLogger(__name__)


def generate (
	config: melodrift.config.Config,
	seed: int,
	repeat: int = 1,
	_trace: typing.Optional[typing.List[float]] = None
) -> melodrift.event_stream.EventStream:

	"""
	Run the generation pass and return the event stream.

	Parameters:
		config: A validated Config.
		seed: Seed for the draw stream.
		repeat: Number of passes of the harmony pattern; the melody spans
			the same length.
		_trace: Optional list that receives the ideal pitch after every tick.
			Intended for tests and analysis scripts.

	Raises:
		ConfigurationError: If ``repeat`` is not positive or the harmony
			expression cannot be realized.
	"""

	if repeat < 1:
		raise melodrift.errors.ConfigurationError("Repeat must be at least 1")

	sequencer = melodrift.sequencer.Sequencer(seed)

	harmony = melodrift.harmony.HarmonyTrack.realize(config.harmony, sequencer, config.harmony_base)
	length = repeat * harmony.pattern_ticks

	melodic_state = melodrift.melodic_state.MelodicState(
		melody_base = config.melody_base,
		gravity = config.gravity,
		drag = config.drag,
		nudge = config.nudge,
	)
	rhythm = melodrift.rhythm.RhythmScheduler(
		min_len = config.min_len,
		max_len = config.max_len,
		steady = config.steady,
		stutter = config.stutter,
	)
	selector = melodrift.chords.ChordSelector(pre_beat=config.pre_beat)

	first_pitch = selector.select(melodic_state.ideal_pitch, 0, harmony.chord_at(0), sequencer)
	notes: typing.List[melodrift.event_stream.Event] = [melodrift.event_stream.Note(tick=0, pitch=first_pitch)]

	if _trace is not None:
		_trace.append(melodic_state.ideal_pitch)

	# Each iteration simulates the tick that ends at ``tick``; a note it triggers starts at ``tick``.
	for tick in range(1, length):

		ideal_pitch = melodic_state.step(sequencer)

		if _trace is not None:
			_trace.append(ideal_pitch)

		if harmony.is_section_boundary(tick):
			logger.debug(f"Pass {tick // harmony.pattern_ticks + 1} of {repeat} begins at tick {tick}")

		if not rhythm.advance(tick - 1, sequencer):
			continue

		pitch = selector.select(ideal_pitch, tick, harmony.chord_at(tick), sequencer)
		notes.append(melodrift.event_stream.Note(tick=tick, pitch=pitch))

	chord_events: typing.List[melodrift.event_stream.Event] = []
	start = 0

	for chord in harmony.chords:
		chord_events.append(melodrift.event_stream.ChordEvent(tick=start, chord=chord))
		start += chord.length

	section = melodrift.event_stream.SectionRepeat(
		tick = 0,
		content = tuple(chord_events),
		count = repeat,
		length = harmony.pattern_ticks,
	)

	logger.info(
		f"Generated {len(notes)} melody notes over {length // melodrift.constants.TICKS_PER_MEASURE} measures "
		f"(harmony: {'+'.join(harmony.styles)}, {sequencer.draw_count} draws)"
	)

	return melodrift.event_stream.EventStream(
		parts = (
			("melody", tuple(notes)),
			("harmony", (section,)),
		),
		length = length,
		seed = seed,
		tempo = config.tempo,
		volume = config.volume,
		section_length = harmony.pattern_ticks,
	)


def render_notation (stream: melodrift.event_stream.EventStream) -> str:

	"""Render ``stream`` as LilyPond source."""

	return typing.cast(str, melodrift.event_stream.emit(stream, melodrift.emitters.lilypond.LilyPondEmitter()))


def render_performance (stream: melodrift.event_stream.EventStream) -> bytes:

	"""Render ``stream`` as Standard MIDI File bytes."""

	return typing.cast(bytes, melodrift.event_stream.emit(stream, melodrift.emitters.midi.MidiEmitter()))


class Composition:

	"""
	One piece: a config, a seed, and the outputs rendered from a single pass.

	Example:
		```python
		import melodrift

		config = melodrift.config.resolve(preset="1.1", overrides={"tempo": 96})
		composition = melodrift.Composition(config, seed=42, repeat=2)
		composition.write("piece.ly", midi_path="piece.mid")
		```
	"""

	def __init__ (
		self,
		config: melodrift.config.Config,
		seed: typing.Optional[int] = None,
		repeat: int = 1
	) -> None:

		"""
		Parameters:
			config: Options for the piece.  Validated here.
			seed: Seed for reproducible output; a random seed is chosen when
				omitted and logged so the piece can be regenerated.
			repeat: Number of passes of the harmony pattern.
		"""

		melodrift.config.validate(config)

		if seed is None:
			seed = melodrift.sequencer.random_seed()
			logger.info(f"No seed given, using {seed}")

		self.config = config
		self.seed = seed
		self.repeat = repeat
		self._stream: typing.Optional[melodrift.event_stream.EventStream] = None

	@property
	def stream (self) -> melodrift.event_stream.EventStream:

		"""The event stream, generated on first access and reused afterwards."""

		if self._stream is None:
			self._stream = generate(self.config, self.seed, self.repeat)

		return self._stream

	def notation (self) -> str:

		"""Return the LilyPond source."""

		return render_notation(self.stream)

	def performance (self) -> bytes:

		"""Return the MIDI file bytes."""

		return render_performance(self.stream)

	def write (self, notation_path: str, midi_path: typing.Optional[str] = None, force: bool = False) -> None:

		"""
		Write the notation file and, optionally, the MIDI file.

		Both outputs are rendered before anything is written.  Existing files
		are only replaced when ``force`` is True.

		Raises:
			OutputConflict: If an output exists and ``force`` is False.
			IOFailure: If a file cannot be written.  When the MIDI file fails
				after the notation was written, the message names both files.
		"""

		paths = [notation_path] + ([midi_path] if midi_path is not None else [])

		if not force:
			for path in paths:
				if os.path.exists(path):
					raise melodrift.errors.OutputConflict(
						f"{path} already exists (use --force to overwrite)"
					)

		notation = self.notation()
		performance = self.performance() if midi_path is not None else None

		try:
			with open(notation_path, 'w', encoding='utf-8') as f:
				f.write(notation)
		except OSError as e:
			raise melodrift.errors.IOFailure(f"Failed to write {notation_path}: {e}") from e

		logger.info(f"Saved {notation_path}")

		if midi_path is None or performance is None:
			return

		try:
			with open(midi_path, 'wb') as f:
				f.write(performance)
		except OSError as e:
			raise melodrift.errors.IOFailure(
				f"Failed to write {midi_path}: {e}. "
				f"{notation_path} was written and no longer has a matching MIDI file"
			) from e

		logger.info(f"Saved {midi_path}")
