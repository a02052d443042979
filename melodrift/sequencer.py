"""The deterministic draw stream shared by every stochastic decision.

A :class:`Sequencer` wraps one seeded ``random.Random`` and is passed
explicitly to every component that needs randomness.  Nothing in melodrift
touches the module-level ``random`` functions, so a seed fully determines a
piece as long as every consumer draws in the same order.
"""

import random
import typing


T = typing.TypeVar("T")

SEED_RANGE = 2 ** 32


def random_seed () -> int:

	"""Return a fresh seed for runs where the user did not supply one."""

	return random.SystemRandom().randrange(SEED_RANGE)


class Sequencer:

	"""Seeded draw stream with a running draw counter."""

	def __init__ (self, seed: int) -> None:

		"""Create the stream for ``seed``."""

		self.seed = seed
		self._rng = random.Random(seed)
		self._draw_count = 0

	@property
	def draw_count (self) -> int:

		"""Number of draws consumed so far."""

		return self._draw_count

	def next_draw (self) -> float:

		"""Return the next value in ``[0, 1)``."""

		self._draw_count += 1
		return self._rng.random()

	def chance (self, probability: float) -> bool:

		"""Return True with the given probability (one draw)."""

		return self.next_draw() < probability

	def coin (self) -> bool:

		"""Return True or False with equal probability (one draw)."""

		return self.next_draw() < 0.5

	def choose (self, options: typing.Sequence[T]) -> T:

		"""Pick one element uniformly (one draw).

		The caller is responsible for giving ``options`` a stable order.
		"""

		if not options:
			raise ValueError("Cannot choose from an empty sequence")

		index = int(self.next_draw() * len(options))

		# Guard against float rounding at the top of the range.
		return options[min(index, len(options) - 1)]
