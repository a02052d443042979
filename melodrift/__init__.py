"""
melodrift - seeded procedural music as LilyPond notation and MIDI.

A piece is generated from a handful of numbers.  The melody is a simulated
body on a spring: each sixteenth-note tick it is nudged at random, pulled back
toward its centre by gravity, and slowed by drag.  A separate rhythm scheduler
decides when notes start, speeding up and slowing down on a slow cosine cycle,
with occasional stutters.  Each new note snaps to the nearest tone of the
current accompaniment chord, except just before a beat, where the melody may
step outside the harmony.

The accompaniment is a fixed sixteen-measure progression in C major played in
one of several figures (``quarter``, ``center-8ths``), which can be chained
(``quarter+center-8ths``) or chosen at random (``quarter*center-8ths``).

One generation pass produces an immutable event stream; the LilyPond and
MIDI renderers both read that stream, so the two files always describe the
same music.  The seed is written into the LilyPond file.

Minimal example:

    ```python
    import melodrift

    config = melodrift.config.resolve(preset="1")
    composition = melodrift.Composition(config, seed=42)
    composition.write("piece.ly", midi_path="piece.mid")
    ```

Command line:

    melodrift piece.ly --midi piece.mid --seed 42 --preset 1.1

Package-level exports: ``Composition``, ``Config``, ``generate``.
"""

import melodrift.composition
import melodrift.config


Composition = melodrift.composition.Composition
Config = melodrift.config.Config
generate = melodrift.composition.generate
