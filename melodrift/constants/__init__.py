"""Constants for melodrift.

This package contains two sets of constants:

- ``melodrift.constants`` - the generation time grid (ticks, beats, measures)
- ``melodrift.constants.pulses`` - Standard MIDI File resolution and pitch mapping

All generation happens on a grid of **ticks**, where one tick is a sixteenth
note.  The time signature is fixed at 4/4.
"""

# Number of ticks (sixteenth notes) per beat.
TICKS_PER_BEAT = 4

# Number of beats per measure.
BEATS_PER_MEASURE = 4

TICKS_PER_MEASURE = TICKS_PER_BEAT * BEATS_PER_MEASURE

# Half-steps per octave.
OCTAVE = 12
