"""Physics-style pitch engine for the melody line.

Provides :class:`MelodicState`, which treats the melody's *ideal pitch* as a
body on a spring.  Each tick the body receives a random push (``nudge``), a
restoring pull toward ``melody_base`` (``gravity``), and proportional damping
(``drag``), then moves by its velocity.  The result is a continuous line that
wanders and swings back around its centre; :mod:`melodrift.chords` later
snaps it to sounded pitches.

The restoring force grows faster than the displacement (an extra factor of
``1 + |d| / 12``), so a line that has drifted an octave away is pulled back
twice as hard as a linear spring would pull it.
"""

import melodrift.constants
import melodrift.sequencer


class MelodicState:

	"""Continuous ``(ideal_pitch, velocity)`` state updated once per tick."""

	def __init__ (self, melody_base: float, gravity: float, drag: float, nudge: float) -> None:

		"""
		Initialise at rest on the melody's centre.

		Parameters:
			melody_base: Centre pitch in half-steps; the starting ideal pitch.
			gravity: Restoring-force strength (0 = no pull).
			drag: Fraction of velocity removed each tick, 0.0-1.0.
			nudge: Magnitude of the random push applied each tick.
		"""

		self.melody_base = melody_base
		self.gravity = gravity
		self.drag = drag
		self.nudge = nudge

		self.ideal_pitch: float = float(melody_base)
		self.velocity: float = 0.0

	def gravity_force (self, pitch: float) -> float:

		"""Return the restoring force for an ideal pitch of ``pitch``."""

		displacement = pitch - self.melody_base

		return -self.gravity * displacement * (1.0 + abs(displacement) / melodrift.constants.OCTAVE)

	def step (self, sequencer: melodrift.sequencer.Sequencer) -> float:

		"""Advance one tick and return the new ideal pitch.

		Always consumes exactly one draw, even when ``nudge`` is zero.
		"""

		push = self.nudge if sequencer.coin() else -self.nudge

		self.velocity += push
		self.velocity += self.gravity_force(self.ideal_pitch)
		self.velocity -= self.drag * self.velocity
		self.ideal_pitch += self.velocity

		return self.ideal_pitch
