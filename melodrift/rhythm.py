"""Tick-by-tick note onset scheduling.

The :class:`RhythmScheduler` accumulates *progress* every tick.  The amount
added is the reciprocal of the current target note length, which swings
between ``min_len`` and ``max_len`` on a cosine cycle lasting ``steady``
measures.  A note becomes *due* once progress reaches 1.

Stutter makes onsets irregular.  On a tick that is not yet due, one draw may
*preempt* the note early; on every candidate tick a second, *gate* draw may
*delay* the onset.  Both use the same ``stutter`` probability, so
``stutter=0`` gives a perfectly regular envelope-driven rhythm.
"""

import math

import melodrift.constants
import melodrift.sequencer


# Progress within this distance of 1.0 counts as due (absorbs float rounding).
DUE_EPSILON = 1e-9


class RhythmScheduler:

	"""Decides, once per tick, whether a new melody note starts."""

	def __init__ (self, min_len: float, max_len: float, steady: float, stutter: float) -> None:

		"""Store the envelope bounds and stutter probability."""

		self.min_len = min_len
		self.max_len = max_len
		self.steady = steady
		self.stutter = stutter
		self.progress = 0.0

	def duration (self, tick: int) -> float:

		"""Return the target note length in ticks at ``tick``."""

		mid_len = (self.max_len + self.min_len) / 2.0
		dev_len = (self.max_len - self.min_len) / 2.0
		clock = tick * (2.0 * math.pi) / melodrift.constants.TICKS_PER_MEASURE / self.steady

		return dev_len * math.cos(clock) + mid_len

	@property
	def due (self) -> bool:

		"""True once enough progress has accumulated for a regular onset."""

		return self.progress >= 1.0 - DUE_EPSILON

	def advance (self, tick: int, sequencer: melodrift.sequencer.Sequencer) -> bool:

		"""
		Accumulate one tick of progress and return True if a note starts.

		Draw order per tick: one preemption draw (only when not due), then one
		gate draw.  After an onset, progress keeps its fractional remainder
		when the note was due and restarts from 0 when it was preempted.
		"""

		self.progress += 1.0 / self.duration(tick)

		due = self.due
		preempt = False

		if not due:
			preempt = sequencer.chance(self.stutter)

		# The gate draw is consumed on every tick to keep the stream aligned.
		gate_open = sequencer.next_draw() >= self.stutter

		if not (due or preempt) or not gate_open:
			return False

		if due:
			remainder = self.progress - math.floor(self.progress + DUE_EPSILON)
			self.progress = remainder if remainder > DUE_EPSILON else 0.0

		else:
			self.progress = 0.0

		return True
