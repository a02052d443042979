"""Standard MIDI File timing and pitch constants.

Performance output uses **480 ticks per quarter note**, the common resolution
for exported MIDI files.  One generation tick (a sixteenth note) therefore
spans 120 MIDI ticks.
"""

import melodrift.constants


MIDI_TICKS_PER_BEAT = 480

MIDI_TICKS_PER_STEP = MIDI_TICKS_PER_BEAT // melodrift.constants.TICKS_PER_BEAT

# MIDI note for pitch 0 (LilyPond ``c``, one octave below middle C).
MIDI_REFERENCE_NOTE = 48

MIDI_NOTE_MIN = 0
MIDI_NOTE_MAX = 127

MIDI_CHANNEL_MELODY = 0
MIDI_CHANNEL_HARMONY = 1
