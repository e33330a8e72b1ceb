#!/usr/bin/env python3
"""
Test Suite for the Intercept Solver

Tests cover:
1. Stationary targets (sweep agrees with the static closed form)
2. Moving targets (projectile meets the target at the solution time)
3. Direct vs lob ordering
4. Horizon exhaustion and unreachable targets
5. Solver configuration (horizon and resolution)
6. Sweep diagnostics (trace of examined candidates)
"""

import dataclasses
import logging
import math
import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "firing_solver"))

from vector import Vector2D
from ballistics import AimPolicy, Weapon, fire, max_range, solve_point
from target import Target, predict
from intercept import (
    MAX_TIME,
    TIME_STEP,
    DEFAULT_CONFIG,
    SolverConfig,
    SweepStatus,
    InterceptSolver,
    solve,
    solve_with_trace,
)


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def stationary_weapon():
    return Weapon(speed=650.0, gravity=400.0)


@pytest.fixture
def stationary_target():
    return Target(position=Vector2D(650.0, 150.0))


@pytest.fixture
def moving_weapon():
    return Weapon(speed=600.0, gravity=400.0)


@pytest.fixture
def moving_target():
    return Target(position=Vector2D(450.0, 0.0), velocity=Vector2D(100.0, 50.0))


@pytest.fixture
def circling_target():
    return Target(position=Vector2D(650.0, 50.0), radius=100.0)


def miss_distance(weapon, target, sol):
    """Distance between projectile and target at the solution's flight time."""
    return fire(weapon, sol.angle, sol.time).distance_to(predict(target, sol.time))


def sweep_tolerance(target_speed, config=DEFAULT_CONFIG):
    """Miss distance allowed by the sweep's time granularity."""
    return 3.0 * target_speed * config.time_step + 1e-3


# =============================================================================
# CONFIGURATION TESTS
# =============================================================================

class TestSolverConfig:
    """Tests for sweep horizon and resolution settings."""

    def test_defaults(self):
        assert MAX_TIME == 5.5
        assert TIME_STEP == 0.01
        assert DEFAULT_CONFIG.max_time == MAX_TIME
        assert DEFAULT_CONFIG.time_step == TIME_STEP

    @pytest.mark.parametrize("kwargs", [
        {"time_step": 0.0},
        {"time_step": -0.01},
        {"time_step": math.nan},
        {"time_step": math.inf},
        {"max_time": -1.0},
        {"max_time": math.nan},
        {"max_time": math.inf},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            SolverConfig(**kwargs)

    def test_zero_horizon_allowed(self):
        assert SolverConfig(max_time=0.0).max_time == 0.0

    def test_from_dict_defaults_missing_fields(self):
        config = SolverConfig.from_dict({"max_time": 3})
        assert config.max_time == 3.0
        assert config.time_step == TIME_STEP

    def test_from_dict_rejects_bad_types(self):
        with pytest.raises(ValueError):
            SolverConfig.from_dict({"time_step": "fine"})

    @pytest.mark.parametrize("data", [None, "fast", [0.5, 0.01], 5])
    def test_from_dict_rejects_non_mappings(self, data):
        with pytest.raises(ValueError, match="must be an object"):
            SolverConfig.from_dict(data)

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.max_time = 10.0


# =============================================================================
# STATIONARY TARGET TESTS
# =============================================================================

class TestStationaryTarget:
    """A target that never moves reduces to the static closed form."""

    def test_direct_solution(self, stationary_weapon, stationary_target):
        sol = solve(stationary_weapon, stationary_target, AimPolicy.DIRECT)
        assert sol is not None
        assert 1.0 < sol.time < 1.3
        pos = fire(stationary_weapon, sol.angle, sol.time)
        assert pos.x == pytest.approx(650.0, abs=1e-2)
        assert pos.y == pytest.approx(150.0, abs=1e-2)

    def test_lob_is_higher_and_slower(self, stationary_weapon, stationary_target):
        direct = solve(stationary_weapon, stationary_target, AimPolicy.DIRECT)
        lob = solve(stationary_weapon, stationary_target, AimPolicy.LOB)
        assert direct is not None and lob is not None
        assert lob.time > direct.time
        assert lob.angle > direct.angle
        pos = fire(stationary_weapon, lob.angle, lob.time)
        assert pos.x == pytest.approx(650.0, abs=1e-2)
        assert pos.y == pytest.approx(150.0, abs=1e-2)

    @pytest.mark.parametrize("policy", [AimPolicy.DIRECT, AimPolicy.LOB])
    @pytest.mark.parametrize("point", [(650.0, 150.0), (300.0, 0.0), (800.0, -200.0)])
    def test_matches_static_solution(self, stationary_weapon, policy, point):
        target = Target(position=Vector2D(*point))
        expected = solve_point(point[0], point[1], stationary_weapon.speed,
                               stationary_weapon.gravity, policy)
        assert expected is not None
        assert solve(stationary_weapon, target, policy) == expected

    def test_accepted_at_first_candidate_past_flight_time(self, stationary_weapon, stationary_target):
        trace = solve_with_trace(stationary_weapon, stationary_target)
        sol = trace.solution
        assert trace.accepted_time > sol.time
        assert trace.accepted_time - sol.time <= TIME_STEP + 1e-9
        assert trace.count(SweepStatus.TOO_LATE) == len(trace.steps) - 1


# =============================================================================
# MOVING TARGET TESTS
# =============================================================================

class TestMovingTarget:
    """The projectile must meet the target where the target will be."""

    @pytest.mark.parametrize("policy", [AimPolicy.DIRECT, AimPolicy.LOB])
    def test_intercepts_drifting_target(self, moving_weapon, moving_target, policy):
        sol = solve(moving_weapon, moving_target, policy)
        assert sol is not None
        speed = moving_target.velocity.magnitude
        assert miss_distance(moving_weapon, moving_target, sol) < sweep_tolerance(speed)

    def test_direct_arrives_before_lob(self, moving_weapon, moving_target):
        direct = solve(moving_weapon, moving_target, AimPolicy.DIRECT)
        lob = solve(moving_weapon, moving_target, AimPolicy.LOB)
        assert direct.time < lob.time
        assert direct.angle < lob.angle

    def test_aims_ahead_of_current_position(self, moving_weapon, moving_target):
        """Leading a receding target costs more flight time than its current position."""
        sol = solve(moving_weapon, moving_target)
        static = solve_point(450.0, 0.0, moving_weapon.speed, moving_weapon.gravity)
        assert sol.time > static.time

    @pytest.mark.parametrize("policy", [AimPolicy.DIRECT, AimPolicy.LOB])
    def test_finer_step_tightens_intercept(self, moving_weapon, moving_target, policy):
        fine = SolverConfig(time_step=0.001)
        sol = solve(moving_weapon, moving_target, policy, fine)
        assert sol is not None
        speed = moving_target.velocity.magnitude
        assert miss_distance(moving_weapon, moving_target, sol) < sweep_tolerance(speed, fine)

    @pytest.mark.parametrize("policy", [AimPolicy.DIRECT, AimPolicy.LOB])
    def test_intercepts_circling_target(self, stationary_weapon, circling_target, policy):
        sol = solve(stationary_weapon, circling_target, policy)
        assert sol is not None
        # Circling at one radian per second, tangential speed equals the radius
        assert miss_distance(stationary_weapon, circling_target, sol) < sweep_tolerance(100.0)

    def test_unreachable_start_does_not_end_sweep(self):
        """A target that starts out of reach can still be hit once it comes closer."""
        weapon = Weapon(speed=650.0, gravity=400.0)
        target = Target(
            position=Vector2D(700.0, 400.0),
            velocity=Vector2D(-50.0, 0.0),
            gravity=100.0,
        )
        assert solve_point(700.0, 400.0, weapon.speed, weapon.gravity) is None

        trace = solve_with_trace(weapon, target)
        assert trace.steps[0].status is SweepStatus.UNREACHABLE
        assert trace.count(SweepStatus.UNREACHABLE) > 0
        assert trace.solution is not None
        assert miss_distance(weapon, target, trace.solution) < sweep_tolerance(150.0)


# =============================================================================
# UNREACHABLE TARGET TESTS
# =============================================================================

class TestUnreachable:
    """Absence is the only failure signal."""

    @pytest.mark.parametrize("policy", [AimPolicy.DIRECT, AimPolicy.LOB])
    def test_target_far_beyond_max_range(self, stationary_weapon, policy):
        target = Target(position=Vector2D(10 * max_range(stationary_weapon), 0.0))
        assert solve(stationary_weapon, target, policy) is None

    def test_short_horizon_exhausts(self, stationary_weapon, stationary_target):
        """The target is reachable but not within the horizon."""
        config = SolverConfig(max_time=0.5)
        assert solve(stationary_weapon, stationary_target, AimPolicy.DIRECT, config) is None
        trace = solve_with_trace(stationary_weapon, stationary_target, AimPolicy.DIRECT, config)
        assert trace.exhausted
        assert trace.count(SweepStatus.UNREACHABLE) == 0
        assert all(step.candidate_time < 0.5 for step in trace.steps)

    def test_zero_horizon_examines_nothing(self, stationary_weapon, stationary_target):
        trace = solve_with_trace(stationary_weapon, stationary_target,
                                 config=SolverConfig(max_time=0.0))
        assert trace.steps == []
        assert trace.solution is None

    def test_lob_beyond_default_horizon(self):
        """A slow lob that needs more than MAX_TIME of flight is never accepted."""
        weapon = Weapon(speed=650.0, gravity=100.0)
        target = Target(position=Vector2D(500.0, 0.0))
        lob = solve_point(500.0, 0.0, weapon.speed, weapon.gravity, AimPolicy.LOB)
        assert lob.time > MAX_TIME
        assert solve(weapon, target, AimPolicy.LOB) is None
        assert solve(weapon, target, AimPolicy.LOB, SolverConfig(max_time=lob.time + 0.1)) == lob

    def test_receding_target_escapes(self):
        """Target flies out of range faster than the projectile can catch it."""
        weapon = Weapon(speed=100.0, gravity=10.0)
        target = Target(position=Vector2D(900.0, 0.0), velocity=Vector2D(500.0, 0.0))
        trace = solve_with_trace(weapon, target)
        assert trace.solution is None
        assert trace.count(SweepStatus.UNREACHABLE) > 0

    @pytest.mark.parametrize("weapon,target", [
        (Weapon(speed=math.nan, gravity=400.0), Target(position=Vector2D(650.0, 150.0))),
        (Weapon(speed=650.0, gravity=math.inf), Target(position=Vector2D(650.0, 150.0))),
        (Weapon(speed=650.0, gravity=400.0), Target(position=Vector2D(math.nan, 0.0))),
        (Weapon(speed=650.0, gravity=400.0), Target(position=Vector2D(100.0, 0.0),
                                                    velocity=Vector2D(math.inf, 0.0))),
        (Weapon(speed=650.0, gravity=0.0), Target(position=Vector2D(650.0, 150.0))),
    ])
    def test_non_finite_or_degenerate_inputs_return_none(self, weapon, target):
        assert solve(weapon, target, AimPolicy.DIRECT) is None
        assert solve(weapon, target, AimPolicy.LOB) is None


# =============================================================================
# SOLVER OBJECT TESTS
# =============================================================================

class TestInterceptSolver:
    """Tests for the solver object and its constructors."""

    def test_constructors_select_policy(self, moving_weapon, moving_target):
        assert InterceptSolver.direct(moving_weapon, moving_target).policy is AimPolicy.DIRECT
        assert InterceptSolver.optimal(moving_weapon, moving_target).policy is AimPolicy.DIRECT
        assert InterceptSolver.lob(moving_weapon, moving_target).policy is AimPolicy.LOB

    def test_constructor_uses_default_config(self, moving_weapon, moving_target):
        assert InterceptSolver.lob(moving_weapon, moving_target).config is DEFAULT_CONFIG

    def test_solver_matches_function(self, moving_weapon, moving_target):
        for policy in AimPolicy:
            solver = InterceptSolver(moving_weapon, moving_target, policy)
            assert solver.solve() == solve(moving_weapon, moving_target, policy)

    def test_repeatable(self, moving_weapon, moving_target):
        """Identical inputs give bit-identical outputs."""
        solver = InterceptSolver.lob(moving_weapon, moving_target)
        first = solver.solve()
        assert all(solver.solve() == first for _ in range(3))

    def test_inputs_not_mutated(self, moving_weapon, moving_target):
        weapon_before = dataclasses.replace(moving_weapon)
        target_before = dataclasses.replace(moving_target)
        solve(moving_weapon, moving_target, AimPolicy.LOB)
        assert moving_weapon == weapon_before
        assert moving_target == target_before

    def test_solve_at_matches_static_solution(self, moving_weapon, moving_target):
        solver = InterceptSolver.direct(moving_weapon, moving_target)
        pos = predict(moving_target, 1.0)
        expected = solve_point(pos.x, pos.y, moving_weapon.speed, moving_weapon.gravity)
        assert solver.solve_at(1.0) == expected


# =============================================================================
# TRACE TESTS
# =============================================================================

class TestSweepTrace:
    """Tests for the diagnostic record of the sweep."""

    @pytest.mark.parametrize("policy", [AimPolicy.DIRECT, AimPolicy.LOB])
    def test_trace_agrees_with_solve(self, moving_weapon, moving_target, policy):
        trace = solve_with_trace(moving_weapon, moving_target, policy)
        assert trace.solution == solve(moving_weapon, moving_target, policy)
        assert trace.policy is policy
        assert not trace.exhausted

    def test_candidate_times_increase_by_step(self, moving_weapon, moving_target):
        trace = solve_with_trace(moving_weapon, moving_target)
        times = [step.candidate_time for step in trace.steps]
        assert times[0] == 0.0
        for earlier, later in zip(times, times[1:]):
            assert later - earlier == pytest.approx(TIME_STEP)

    def test_only_last_step_accepted(self, moving_weapon, moving_target):
        trace = solve_with_trace(moving_weapon, moving_target)
        statuses = [step.status for step in trace.steps]
        assert statuses[-1] is SweepStatus.ACCEPTED
        assert SweepStatus.ACCEPTED not in statuses[:-1]

    def test_rejected_steps_arrive_too_late(self, moving_weapon, moving_target):
        trace = solve_with_trace(moving_weapon, moving_target)
        for step in trace.steps[:-1]:
            assert step.status is SweepStatus.TOO_LATE
            assert step.solution.time >= step.candidate_time

    def test_step_positions_follow_target(self, moving_weapon, moving_target):
        trace = solve_with_trace(moving_weapon, moving_target)
        for step in trace.steps:
            assert step.target_position == predict(moving_target, step.candidate_time)

    def test_unrecorded_trace_keeps_only_answer(self, moving_weapon, moving_target):
        trace = InterceptSolver.direct(moving_weapon, moving_target).trace(record=False)
        assert len(trace.steps) == 1
        assert trace.steps[0].status is SweepStatus.ACCEPTED

    def test_exhaustion_is_logged(self, stationary_weapon, caplog):
        target = Target(position=Vector2D(10 * max_range(stationary_weapon), 0.0))
        with caplog.at_level(logging.DEBUG):
            solve(stationary_weapon, target)
        assert "not found" in caplog.text
