"""
Renderers for an :class:`~melodrift.event_stream.EventStream`.

- ``melodrift.emitters.lilypond`` - LilyPond notation text
- ``melodrift.emitters.midi`` - Standard MIDI File bytes
"""
