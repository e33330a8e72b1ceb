"""Ballistic firing solver package: direct and lob intercepts of moving targets."""

from .vector import Vector2D

from .ballistics import (
    AimPolicy,
    Solution,
    Weapon,
    fire,
    max_range,
    solve_point,
)

from .target import Target, predict

from .intercept import (
    # Defaults
    MAX_TIME,
    TIME_STEP,
    DEFAULT_CONFIG,
    # Configuration
    SolverConfig,
    # Diagnostics
    SweepStatus,
    SweepStep,
    SweepTrace,
    # Solver
    InterceptSolver,
    solve,
    solve_with_trace,
)

from .scenarios import (
    ScenarioConfig,
    ScenarioResult,
    ScenarioRunner,
    SCENARIO_REGISTRY,
    load_scenarios,
)

__all__ = [
    # Vector module
    "Vector2D",
    # Ballistics module
    "AimPolicy",
    "Solution",
    "Weapon",
    "fire",
    "max_range",
    "solve_point",
    # Target module
    "Target",
    "predict",
    # Intercept module
    "MAX_TIME",
    "TIME_STEP",
    "DEFAULT_CONFIG",
    "SolverConfig",
    "SweepStatus",
    "SweepStep",
    "SweepTrace",
    "InterceptSolver",
    "solve",
    "solve_with_trace",
    # Scenarios module
    "ScenarioConfig",
    "ScenarioResult",
    "ScenarioRunner",
    "SCENARIO_REGISTRY",
    "load_scenarios",
]
