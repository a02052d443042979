"""Tests for MelodicState, the spring-like ideal pitch integrator.

Covers:
- Initial state
- Zero forces leave pitch unchanged
- Gravity direction and super-linear growth
- Drag damping
- One draw per step
- Long-run containment around melody_base
"""

import statistics

import pytest

import melodrift.melodic_state
import melodrift.sequencer


def _state (
	melody_base: float = 12,
	gravity: float = 0.15,
	drag: float = 0.22,
	nudge: float = 1.5,
) -> melodrift.melodic_state.MelodicState:

	"""Create a MelodicState with the default preset's forces."""

	return melodrift.melodic_state.MelodicState(melody_base=melody_base, gravity=gravity, drag=drag, nudge=nudge)


class TestMelodicStateInit:

	def test_starts_at_rest_on_base (self) -> None:
		"""Ideal pitch starts at melody_base with zero velocity."""
		ms = _state(melody_base=7)

		assert ms.ideal_pitch == 7.0
		assert ms.velocity == 0.0


class TestStep:

	def test_no_forces_pitch_constant (self) -> None:
		"""gravity=0, drag=0, nudge=0 keeps the pitch fixed."""
		ms = _state(melody_base=0, gravity=0, drag=0, nudge=0)
		seq = melodrift.sequencer.Sequencer(42)

		for _ in range(500):
			assert ms.step(seq) == 0.0

	def test_one_draw_per_step (self) -> None:
		"""Each step consumes exactly one draw, even without nudge."""
		ms = _state(nudge=0)
		seq = melodrift.sequencer.Sequencer(1)

		for _ in range(25):
			ms.step(seq)

		assert seq.draw_count == 25

	def test_nudge_moves_by_exactly_nudge_from_rest (self) -> None:
		"""Without gravity or drag the first step moves by ±nudge."""
		ms = _state(melody_base=0, gravity=0, drag=0, nudge=2)
		seq = melodrift.sequencer.Sequencer(3)

		assert abs(ms.step(seq)) == pytest.approx(2)

	def test_drag_damps_velocity (self) -> None:
		"""Drag removes a fixed fraction of velocity each tick."""
		ms = _state(melody_base=0, gravity=0, drag=0.5, nudge=0)
		ms.velocity = 4.0
		seq = melodrift.sequencer.Sequencer(0)

		ms.step(seq)
		assert ms.velocity == pytest.approx(2.0)
		assert ms.ideal_pitch == pytest.approx(2.0)

	def test_same_seed_same_trajectory (self) -> None:
		"""The trajectory is fully determined by the seed."""
		a, b = _state(), _state()
		seq_a, seq_b = melodrift.sequencer.Sequencer(8), melodrift.sequencer.Sequencer(8)

		assert [a.step(seq_a) for _ in range(100)] == [b.step(seq_b) for _ in range(100)]


class TestGravity:

	def test_force_points_toward_base (self) -> None:
		"""Displacement above the base is pulled down, below is pulled up."""
		ms = _state(melody_base=12, gravity=0.2)

		assert ms.gravity_force(20) < 0
		assert ms.gravity_force(4) > 0
		assert ms.gravity_force(12) == 0

	def test_force_grows_faster_than_displacement (self) -> None:
		"""Doubling the displacement more than doubles the pull."""
		ms = _state(melody_base=0, gravity=0.1)

		assert abs(ms.gravity_force(12)) > 2 * abs(ms.gravity_force(6))

	def test_displacement_is_reversed (self) -> None:
		"""A displaced pitch with no nudge swings back past the base."""
		ms = _state(melody_base=0, gravity=0.15, drag=0.22, nudge=0)
		ms.ideal_pitch = 12.0
		seq = melodrift.sequencer.Sequencer(0)

		trajectory = [ms.step(seq) for _ in range(40)]

		assert min(trajectory) < 0

	def test_oscillation_decays (self) -> None:
		"""With drag and no nudge, the swing shrinks over time."""
		ms = _state(melody_base=0, gravity=0.15, drag=0.22, nudge=0)
		ms.ideal_pitch = 12.0
		seq = melodrift.sequencer.Sequencer(0)

		trajectory = [ms.step(seq) for _ in range(200)]

		assert max(abs(p) for p in trajectory[:20]) > max(abs(p) for p in trajectory[-20:])
		assert abs(trajectory[-1]) < 0.5


class TestContainment:

	@pytest.mark.parametrize("seed", [1, 42, 2024])
	def test_running_average_stays_near_base (self, seed: int) -> None:
		"""Over a long run the mean ideal pitch stays within two half-steps of the base."""
		ms = _state(melody_base=12)
		seq = melodrift.sequencer.Sequencer(seed)

		trajectory = [ms.step(seq) for _ in range(20000)]

		assert abs(statistics.fmean(trajectory) - 12) < 2.0
		assert max(abs(p - 12) for p in trajectory) < 48
