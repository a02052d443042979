"""The backend-agnostic event stream and the emitter interface.

A generation pass produces one immutable :class:`EventStream`.  Each part
(``melody``, ``harmony``) is an ordered tuple of events:

- :class:`Note` - a melody note; it lasts until the next note in the part
  or until the end of the piece.
- :class:`ChordEvent` - one measure of accompaniment.
- :class:`SectionRepeat` - a block of events played ``count`` times.

Renderers implement :class:`Emitter` and are driven by :func:`emit`, so both
outputs read the same events and cannot drift apart.  Parts are concurrent:
every part starts at tick 0.
"""

import abc
import dataclasses
import typing

import melodrift.chords


@dataclasses.dataclass(frozen=True)
class Note:

	"""A melody note starting at ``tick``."""

	tick: int
	pitch: int


@dataclasses.dataclass(frozen=True)
class ChordEvent:

	"""An accompaniment chord starting at ``tick``."""

	tick: int
	chord: melodrift.chords.Chord


@dataclasses.dataclass(frozen=True)
class SectionRepeat:

	"""
	A block of events repeated ``count`` times.

	Ticks inside ``content`` are relative to the start of each repetition;
	``length`` is the span of one repetition in ticks.
	"""

	tick: int
	content: typing.Tuple["Event", ...]
	count: int
	length: int


Event = typing.Union[Note, ChordEvent, SectionRepeat]


@dataclasses.dataclass(frozen=True)
class EventStream:

	"""
	Everything a renderer needs to write one piece.

	Attributes:
		parts: Part name to its ordered events, in a fixed order.
		length: Total length of the piece in ticks.
		seed: The seed the piece was generated from.
		tempo: Beats per minute.
		volume: MIDI velocity for performance output.
		section_length: Length of one harmony pass in ticks.
	"""

	parts: typing.Tuple[typing.Tuple[str, typing.Tuple[Event, ...]], ...]
	length: int
	seed: int
	tempo: float
	volume: int
	section_length: int

	def part (self, name: str) -> typing.Tuple[Event, ...]:

		"""Return the events of the part called ``name``."""

		for part_name, events in self.parts:
			if part_name == name:
				return events

		raise KeyError(name)

	def melody_spans (self) -> typing.List[typing.Tuple[int, int, int]]:

		"""Return ``(tick, pitch, duration)`` for every melody note."""

		notes = [event for event in self.part("melody") if isinstance(event, Note)]
		spans: typing.List[typing.Tuple[int, int, int]] = []

		for index, note in enumerate(notes):
			end = notes[index + 1].tick if index + 1 < len(notes) else self.length
			spans.append((note.tick, note.pitch, end - note.tick))

		return spans


class Emitter (abc.ABC):

	"""Interface implemented by the notation and performance renderers."""

	@abc.abstractmethod
	def begin_part (self, name: str, stream: EventStream) -> None:

		"""Start writing a part."""

		...

	@abc.abstractmethod
	def end_part (self, name: str) -> None:

		"""Finish the current part."""

		...

	@abc.abstractmethod
	def begin_note (self, pitch: int, tick: int) -> None:

		"""Start a melody note; the previous note of the part ends here."""

		...

	@abc.abstractmethod
	def begin_chord (self, chord: melodrift.chords.Chord, tick: int) -> None:

		"""Play one chord with its rhythmic figure."""

		...

	@abc.abstractmethod
	def repeat_section (self, section: SectionRepeat, offset: int) -> None:

		"""Write ``section.content`` ``section.count`` times, starting at ``offset``."""

		...

	@abc.abstractmethod
	def finish (self) -> typing.Union[str, bytes]:

		"""Return the rendered output."""

		...

	def emit_events (self, events: typing.Iterable[Event], offset: int = 0) -> None:

		"""Dispatch each event to the matching ``begin_*`` / ``repeat_section`` call."""

		for event in events:

			if isinstance(event, Note):
				self.begin_note(event.pitch, offset + event.tick)

			elif isinstance(event, ChordEvent):
				self.begin_chord(event.chord, offset + event.tick)

			elif isinstance(event, SectionRepeat):
				self.repeat_section(event, offset + event.tick)

			else:
				raise TypeError(f"Unknown event {event!r}")


def emit (stream: EventStream, emitter: Emitter) -> typing.Union[str, bytes]:

	"""Drive ``emitter`` through every part of ``stream`` and return its output."""

	for name, events in stream.parts:
		emitter.begin_part(name, stream)
		emitter.emit_events(events)
		emitter.end_part(name)

	return emitter.finish()
