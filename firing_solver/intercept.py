#!/usr/bin/env python3
"""
Intercept Solver for the Firing Solver

Finds a firing solution against a moving target. The target keeps moving
while the projectile is in flight, so the aim point depends on the flight
time and the flight time depends on the aim point. The solver breaks the
loop with a forward sweep over candidate intercept times:

1. Predict where the target will be at the candidate time.
2. Solve the static ballistic problem for that point.
3. Accept the first candidate whose required flight time is shorter than
   the candidate time itself.

Precision is bounded by the sweep step; the accepted solution is not
refined further.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

try:
    from .ballistics import AimPolicy, Solution, Weapon, solve_point
    from .target import Target, predict
    from .vector import Vector2D
except ImportError:
    from ballistics import AimPolicy, Solution, Weapon, solve_point
    from target import Target, predict
    from vector import Vector2D

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Give up when the projectile fails to connect with the target this far ahead (s)
MAX_TIME = 5.5

# Time between candidate intercept times (s)
TIME_STEP = 0.01


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class SolverConfig:
    """
    Search horizon and resolution of the intercept sweep.

    Attributes:
        max_time: Candidate times at or beyond this are never examined.
        time_step: Increment between consecutive candidate times.
    """
    max_time: float = MAX_TIME
    time_step: float = TIME_STEP

    def __post_init__(self) -> None:
        """Validate sweep parameters."""
        if not math.isfinite(self.time_step) or self.time_step <= 0:
            raise ValueError(f"time_step must be a positive number, got {self.time_step!r}")
        if not math.isfinite(self.max_time) or self.max_time < 0:
            raise ValueError(f"max_time must be a non-negative number, got {self.max_time!r}")

    @classmethod
    def from_dict(cls, data: dict) -> SolverConfig:
        """Create a SolverConfig from a mapping, defaulting missing fields."""
        if not isinstance(data, dict):
            raise ValueError(f"Solver config must be an object, got {data!r}")
        try:
            return cls(
                max_time=float(data.get("max_time", MAX_TIME)),
                time_step=float(data.get("time_step", TIME_STEP)),
            )
        except (AttributeError, TypeError) as e:
            raise ValueError(f"Invalid solver config {data!r}: {e}") from e

    def to_dict(self) -> dict:
        return {"max_time": self.max_time, "time_step": self.time_step}


DEFAULT_CONFIG = SolverConfig()


# =============================================================================
# SWEEP DIAGNOSTICS
# =============================================================================

class SweepStatus(Enum):
    """Outcome of examining a single candidate time."""
    UNREACHABLE = "unreachable"  # No ballistic solution for the predicted point
    TOO_LATE = "too_late"        # Projectile arrives after the candidate time
    ACCEPTED = "accepted"        # Consistent intercept, sweep stops here


@dataclass
class SweepStep:
    """
    Record of one candidate time examined by the sweep.

    Attributes:
        candidate_time: Trial intercept time in seconds.
        target_position: Predicted target position at the candidate time.
        status: What the sweep concluded for this candidate.
        solution: Static ballistic solution for the predicted point, if any.
    """
    candidate_time: float
    target_position: Vector2D
    status: SweepStatus
    solution: Optional[Solution] = None


@dataclass
class SweepTrace:
    """Every candidate the sweep examined, in order, plus the final answer."""
    policy: AimPolicy
    config: SolverConfig
    steps: List[SweepStep] = field(default_factory=list)

    @property
    def solution(self) -> Optional[Solution]:
        """The accepted solution, or None if the sweep found none."""
        if self.steps and self.steps[-1].status is SweepStatus.ACCEPTED:
            return self.steps[-1].solution
        return None

    @property
    def exhausted(self) -> bool:
        """True when the horizon ran out without an intercept."""
        return self.solution is None

    @property
    def accepted_time(self) -> Optional[float]:
        """Candidate time at which the intercept was accepted."""
        if self.solution is None:
            return None
        return self.steps[-1].candidate_time

    def count(self, status: SweepStatus) -> int:
        """Number of candidates that ended with the given status."""
        return sum(1 for step in self.steps if step.status is status)


# =============================================================================
# INTERCEPT SOLVER
# =============================================================================

@dataclass(frozen=True)
class InterceptSolver:
    """
    Projectile aim solver against a moving target.

    Holds no state between calls; ``solve`` is a pure function of the
    weapon, target, policy and config.

    Usage:
        solver = InterceptSolver.lob(weapon, target)
        solution = solver.solve()
    """
    weapon: Weapon
    target: Target
    policy: AimPolicy = AimPolicy.DIRECT
    config: SolverConfig = DEFAULT_CONFIG

    @classmethod
    def direct(
        cls,
        weapon: Weapon,
        target: Target,
        config: Optional[SolverConfig] = None
    ) -> InterceptSolver:
        """Solver for the solution with the lowest projectile travel time."""
        return cls(weapon, target, AimPolicy.DIRECT, config or DEFAULT_CONFIG)

    optimal = direct

    @classmethod
    def lob(
        cls,
        weapon: Weapon,
        target: Target,
        config: Optional[SolverConfig] = None
    ) -> InterceptSolver:
        """Solver for the lobbing solution with the highest projectile travel time."""
        return cls(weapon, target, AimPolicy.LOB, config or DEFAULT_CONFIG)

    def solve_at(self, candidate_time: float) -> Optional[Solution]:
        """Static ballistic solution for the target's position at ``candidate_time``."""
        target_pos = predict(self.target, candidate_time)
        return solve_point(
            target_pos.x, target_pos.y,
            self.weapon.speed, self.weapon.gravity,
            self.policy
        )

    def solve(self) -> Optional[Solution]:
        """
        Sweep candidate times and return the first consistent intercept.

        Returns:
            The firing solution, or None if no candidate before
            ``config.max_time`` yields a projectile that arrives in time.
        """
        return self.trace(record=False).solution

    def trace(self, record: bool = True) -> SweepTrace:
        """
        Run the sweep and return its diagnostic trace.

        Args:
            record: Keep a SweepStep for every candidate. When False only
                    the accepting step is kept.

        Returns:
            SweepTrace whose ``solution`` matches ``solve()``.
        """
        result = SweepTrace(policy=self.policy, config=self.config)
        unreachable = 0
        examined = 0

        candidate_time = 0.0
        while candidate_time < self.config.max_time:
            examined += 1
            target_pos = predict(self.target, candidate_time)
            sol = solve_point(
                target_pos.x, target_pos.y,
                self.weapon.speed, self.weapon.gravity,
                self.policy
            )

            if sol is None:
                unreachable += 1
                if record:
                    result.steps.append(
                        SweepStep(candidate_time, target_pos, SweepStatus.UNREACHABLE)
                    )
            elif sol.time < candidate_time:
                result.steps.append(
                    SweepStep(candidate_time, target_pos, SweepStatus.ACCEPTED, sol)
                )
                logger.debug(
                    f"{self.policy.value} intercept accepted at t={candidate_time:.3f}s: "
                    f"angle={sol.angle:.4f} rad, flight time={sol.time:.4f}s"
                )
                return result
            elif record:
                result.steps.append(
                    SweepStep(candidate_time, target_pos, SweepStatus.TOO_LATE, sol)
                )

            candidate_time += self.config.time_step

        logger.debug(
            f"{self.policy.value} intercept not found within {self.config.max_time}s "
            f"({examined} candidates, {unreachable} unreachable)"
        )
        return result


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def solve(
    weapon: Weapon,
    target: Target,
    policy: AimPolicy = AimPolicy.DIRECT,
    config: Optional[SolverConfig] = None
) -> Optional[Solution]:
    """
    Find a firing solution that intercepts ``target``.

    Args:
        weapon: Weapon stats.
        target: Target snapshot at the moment of firing.
        policy: DIRECT for the fastest shot, LOB for the high arc.
        config: Sweep horizon and resolution (defaults to MAX_TIME/TIME_STEP).

    Returns:
        Solution, or None if the target cannot be intercepted in time.
    """
    return InterceptSolver(weapon, target, policy, config or DEFAULT_CONFIG).solve()


def solve_with_trace(
    weapon: Weapon,
    target: Target,
    policy: AimPolicy = AimPolicy.DIRECT,
    config: Optional[SolverConfig] = None
) -> SweepTrace:
    """Like ``solve`` but return the full record of candidates examined."""
    return InterceptSolver(weapon, target, policy, config or DEFAULT_CONFIG).trace()
