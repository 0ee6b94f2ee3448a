"""
Integration Tests for the Jump Simulation
=========================================
Phase behaviour, end-to-end regression, idempotence and the consumers
(table export, parameter studies).
Run: python -m pytest tests/ -v
"""

import sys
import os
import numpy as np
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from skijump.errors import ModelDomainError
from skijump.parameters import SkierParameters, DEFAULT_PARAMETERS
from skijump.hill import HillProfile, RAMP_END, TAKEOFF_LIP_X, HILL_END_X, TAKEOFF_POINT
from skijump.aerodynamics import AerodynamicModel
from skijump.integrator import (
    Phase, PositionUpdate, IntegrationPolicy, REFERENCE_POLICY, KinematicState,
    quadrant_naive_direction, four_quadrant_direction,
    run_on_track, apply_takeoff_impulse, run_airborne, simulate_jump,
)
from skijump.export import write_trajectory_table, trajectory_table, TABLE_COLUMNS
from skijump.study import run_parameter_sweep


PUSH_SPEED = np.sqrt(2 * 9.81 * 0.4)


@pytest.fixture(scope='module')
def reference():
    """Documented constants: g=9.81, ρ=1.13, h=1.8, μ=0.05, start 6.25 m."""
    return simulate_jump(SkierParameters())


def _takeoff_state(vx=26.6, vy=PUSH_SPEED):
    hill = HillProfile()
    return KinematicState(
        time=6.3, x=TAKEOFF_LIP_X, y=hill.hill_altitude(TAKEOFF_LIP_X),
        vx=vx, vy=vy, velocity=np.hypot(vx, vy), vel_angle=np.arctan2(vy, vx),
        ax=0.0, ay=0.0, acceleration=0.0,
    )


class TestDirection:
    """Velocity direction functions."""

    def test_naive_matches_atan2_moving_forward(self):
        for vy in [-30.0, -5.0, 0.0, 3.0]:
            assert quadrant_naive_direction(25.0, vy) == pytest.approx(np.arctan2(vy, 25.0))

    def test_naive_is_quadrant_blind(self):
        assert quadrant_naive_direction(-1.0, -1.0) == pytest.approx(np.pi / 4)
        assert four_quadrant_direction(-1.0, -1.0) == pytest.approx(-3 * np.pi / 4)

    def test_vertical_velocity_raises(self):
        with pytest.raises(ModelDomainError):
            quadrant_naive_direction(0.0, -3.0)

    def test_four_quadrant_vertical(self):
        assert four_quadrant_direction(0.0, -3.0) == pytest.approx(-np.pi / 2)
        with pytest.raises(ModelDomainError):
            four_quadrant_direction(0.0, 0.0)


class TestPolicy:
    """Position-update order."""

    def test_displacements(self):
        assert PositionUpdate.FIRST_ORDER.displacement(10.0, 4.0, 0.1) == pytest.approx(1.0)
        assert PositionUpdate.SECOND_ORDER.displacement(10.0, 4.0, 0.1) == pytest.approx(1.02)

    def test_reference_is_second_order(self):
        assert REFERENCE_POLICY.track is PositionUpdate.SECOND_ORDER
        assert REFERENCE_POLICY.flight is PositionUpdate.SECOND_ORDER


class TestOnTrack:
    """In-run phase."""

    def test_terminates_in_bounded_steps(self):
        samples, speed, exit_dist = run_on_track(DEFAULT_PARAMETERS, HillProfile())
        assert exit_dist > RAMP_END
        assert 4000 < len(samples) < 9000

    def test_deterministic_step_count(self):
        first = run_on_track(DEFAULT_PARAMETERS, HillProfile())
        second = run_on_track(DEFAULT_PARAMETERS, HillProfile())
        assert len(first[0]) == len(second[0])
        assert first[1] == second[1]

    def test_samples_on_surface(self):
        hill = HillProfile()
        samples, _, _ = run_on_track(DEFAULT_PARAMETERS, hill)
        for s in samples[::250]:
            assert s.phase is Phase.ON_TRACK
            assert s.state.y == hill.hill_altitude(s.state.x)
            assert s.hill_altitude == s.state.y

    def test_slope_distance_increases(self):
        samples, _, _ = run_on_track(DEFAULT_PARAMETERS, HillProfile())
        dists = np.array([s.slope_distance for s in samples])
        assert np.all(np.diff(dists) > 0)
        assert dists[0] > DEFAULT_PARAMETERS.start_position

    def test_takeoff_speed_range(self):
        _, speed, _ = run_on_track(DEFAULT_PARAMETERS, HillProfile())
        assert 25.0 < speed < 28.5

    def test_more_friction_slower(self):
        _, fast, _ = run_on_track(DEFAULT_PARAMETERS, HillProfile())
        _, slow, _ = run_on_track(DEFAULT_PARAMETERS.with_overrides(friction_coeff=0.1),
                                  HillProfile())
        assert slow < fast

    def test_skier_stopping_in_transition_raises(self):
        params = DEFAULT_PARAMETERS.with_overrides(friction_coeff=0.65)
        with pytest.raises(ModelDomainError, match="stopped"):
            run_on_track(params, HillProfile())

    def test_friction_above_slope_raises_at_start(self):
        params = DEFAULT_PARAMETERS.with_overrides(friction_coeff=0.8)
        with pytest.raises(ModelDomainError):
            run_on_track(params, HillProfile())

    def test_track_time_guard(self):
        with pytest.raises(ModelDomainError, match="not reached"):
            run_on_track(DEFAULT_PARAMETERS, HillProfile(), max_track_time=1.0)

    def test_simulation_surfaces_stop(self):
        with pytest.raises(ModelDomainError):
            simulate_jump(DEFAULT_PARAMETERS.with_overrides(friction_coeff=0.65))


class TestTakeoffImpulse:
    """Jump push at the lip."""

    def test_push_past_lip_is_vertical(self):
        vx, vy = apply_takeoff_impulse(26.0, RAMP_END + 0.01, DEFAULT_PARAMETERS, HillProfile())
        assert vx == pytest.approx(26.0)
        assert vy == pytest.approx(PUSH_SPEED)

    def test_push_is_orthogonal(self):
        vx, vy = apply_takeoff_impulse(26.0, 100.0, DEFAULT_PARAMETERS, HillProfile())
        assert np.hypot(vx, vy) == pytest.approx(np.hypot(26.0, PUSH_SPEED))

    def test_no_push(self):
        params = DEFAULT_PARAMETERS.with_overrides(push_height=0.0)
        vx, vy = apply_takeoff_impulse(26.0, RAMP_END + 0.01, params, HillProfile())
        assert (vx, vy) == (26.0, 0.0)


class TestAirborne:
    """Flight phase from a fixed takeoff state."""

    def test_lands_in_finite_steps(self):
        hill = HillProfile()
        samples, landing = run_airborne(DEFAULT_PARAMETERS, hill,
                                        AerodynamicModel(), _takeoff_state(), RAMP_END + 0.01)
        assert 0 < len(samples) < 20000
        assert landing.y < hill.hill_altitude(landing.x) + DEFAULT_PARAMETERS.landing_clearance

    def test_y_eventually_decreasing(self):
        samples, _ = run_airborne(DEFAULT_PARAMETERS, HillProfile(),
                                  AerodynamicModel(), _takeoff_state(), RAMP_END + 0.01)
        ys = np.array([s.state.y for s in samples])
        apex = int(np.argmax(ys))
        assert apex < len(ys) - 1
        assert np.all(np.diff(ys[apex:]) < 0)

    def test_recorded_samples_above_clearance(self):
        samples, _ = run_airborne(DEFAULT_PARAMETERS, HillProfile(),
                                  AerodynamicModel(), _takeoff_state(), RAMP_END + 0.01)
        for s in samples:
            assert s.phase is Phase.AIRBORNE
            assert s.state.y >= s.hill_altitude + DEFAULT_PARAMETERS.landing_clearance

    def test_vertical_takeoff_raises(self):
        with pytest.raises(ModelDomainError):
            run_airborne(DEFAULT_PARAMETERS, HillProfile(), AerodynamicModel(),
                         _takeoff_state(vx=0.0, vy=5.0), RAMP_END + 0.01)

    def test_flight_time_guard(self):
        with pytest.raises(ModelDomainError):
            run_airborne(DEFAULT_PARAMETERS, HillProfile(), AerodynamicModel(),
                         _takeoff_state(), RAMP_END + 0.01, max_flight_time=0.5)

    def test_overshooting_hill_raises(self):
        with pytest.raises(ModelDomainError):
            run_airborne(DEFAULT_PARAMETERS, HillProfile(), AerodynamicModel(),
                         _takeoff_state(vx=300.0), RAMP_END + 0.01)


class TestSimulation:
    """Full three-phase run."""

    def test_reference_regression(self, reference):
        """Takeoff speed and distance recorded from the reference run of the
        same three-phase algorithm with the documented constants."""
        res = reference.result
        assert res.takeoff_speed == pytest.approx(26.615229735006196, rel=1e-6)
        assert res.final_distance == pytest.approx(134.3848779069854, rel=1e-6)
        assert TAKEOFF_LIP_X < res.landing_x < HILL_END_X
        assert 1.5 < res.flight_time < 8.0

    def test_summary_fields(self, reference):
        res = reference.result
        assert res.mass == pytest.approx(70.22)
        assert res.height == 1.8
        assert res.start_position == 6.25
        x0, y0 = TAKEOFF_POINT
        assert res.final_distance == pytest.approx(
            np.sqrt((res.landing_x - x0) ** 2 + (y0 - res.landing_y) ** 2))
        assert 'DISTANCE' in reference.summary()

    def test_takeoff_speed_is_last_track_speed(self, reference):
        assert reference.result.takeoff_speed == pytest.approx(
            reference.velocity[reference.takeoff_index - 1])

    def test_phases_in_order(self, reference):
        assert not reference.airborne[0]
        assert reference.airborne[-1]
        assert np.all(np.diff(reference.airborne.astype(int)) >= 0)

    def test_time_advances_by_dt(self, reference):
        steps = np.diff(reference.time)
        assert np.allclose(steps, DEFAULT_PARAMETERS.dt)

    def test_state_invariants(self, reference):
        r = reference
        assert np.allclose(r.velocity, np.hypot(r.vx, r.vy), rtol=1e-12, atol=1e-12)
        assert np.allclose(r.acceleration, np.hypot(r.ax, r.ay), rtol=1e-12, atol=1e-12)
        assert np.allclose(r.vel_angle, np.arctan2(r.vy, r.vx), atol=1e-9)

    def test_airborne_slope_distance_frozen(self, reference):
        flight = reference.slope_distance[reference.airborne]
        assert np.all(flight == flight[0])
        assert flight[0] > RAMP_END

    def test_flight_stays_above_landing_clearance(self, reference):
        air = reference.airborne
        h = reference.height_above_hill[air]
        assert np.all(h >= DEFAULT_PARAMETERS.landing_clearance - 1e-9)
        assert reference.max_height_above_hill > DEFAULT_PARAMETERS.landing_clearance

    def test_interpolate_at_x(self, reference):
        air = np.flatnonzero(reference.airborne)
        i = air[len(air) // 2]
        assert reference.interpolate_at_x('y', reference.x[i]) == pytest.approx(reference.y[i])
        with pytest.raises(ModelDomainError):
            reference.interpolate_at_x('y', HILL_END_X)

    def test_idempotent(self, reference):
        again = simulate_jump(SkierParameters())
        assert again.result == reference.result
        for _, attr in TABLE_COLUMNS:
            assert np.array_equal(getattr(again, attr), getattr(reference, attr))

    def test_four_quadrant_variant_agrees(self, reference):
        variant = simulate_jump(SkierParameters(), direction=four_quadrant_direction)
        assert variant.result.final_distance == pytest.approx(
            reference.result.final_distance, rel=1e-6)

    def test_first_order_variant_close(self, reference):
        policy = IntegrationPolicy(PositionUpdate.FIRST_ORDER, PositionUpdate.FIRST_ORDER)
        variant = simulate_jump(SkierParameters(), policy=policy)
        diff = abs(variant.result.final_distance - reference.result.final_distance)
        assert diff < 2.0
        assert variant.policy is policy


class TestConsumers:
    """Table export and parameter studies."""

    def test_table_shape(self, reference):
        table = trajectory_table(reference)
        assert table.shape == (len(reference.time), len(TABLE_COLUMNS))

    def test_write_table(self, reference, tmp_path):
        path = write_trajectory_table(reference, str(tmp_path / 'jump.tsv'))
        with open(path) as fh:
            header = fh.readline().strip().split('\t')
        assert header == [name for name, _ in TABLE_COLUMNS]
        data = np.loadtxt(path, delimiter='\t', skiprows=1)
        assert data.shape[0] == len(reference.time)
        assert np.allclose(data[:, 3], reference.x, atol=1e-6)

    def test_start_gate_sweep(self):
        rows = run_parameter_sweep('start_position', [3.0, 10.0], verbose=False)
        assert [r.value for r in rows] == [3.0, 10.0]
        assert rows[0].takeoff_speed > rows[1].takeoff_speed
        assert rows[0].final_distance > rows[1].final_distance

    def test_unknown_parameter(self):
        with pytest.raises(ValueError):
            run_parameter_sweep('wingspan', [1.0], verbose=False)


class TestFigures:
    """Static figures written into a caller-provided directory."""

    def test_figures_saved(self, reference, tmp_path):
        import matplotlib.pyplot as plt
        from skijump.visualization import plot_jump, plot_dashboard, plot_comparison

        for name, fig in [
            ('jump.png', plot_jump(reference, save_path=str(tmp_path / 'jump.png'))),
            ('dash.png', plot_dashboard(reference, save_path=str(tmp_path / 'dash.png'))),
            ('cmp.png', plot_comparison({'reference': reference},
                                        save_path=str(tmp_path / 'cmp.png'))),
        ]:
            plt.close(fig)
            assert (tmp_path / name).stat().st_size > 0

    def test_no_save_path_writes_nothing(self, reference, tmp_path):
        import matplotlib.pyplot as plt
        from skijump.visualization import plot_dashboard

        plt.close(plot_dashboard(reference))
        assert list(tmp_path.iterdir()) == []


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
