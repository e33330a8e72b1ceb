#!/usr/bin/env python3
"""
Ballistic Model for the Firing Solver

Implements drag-free projectile kinematics in the vertical plane:
- Projectile position after launch at a given elevation (``fire``)
- Closed-form inversion of the trajectory equation (``solve_point``):
  the launch angle and flight time needed to pass through a static point
- Maximum level-ground range of a weapon

Eliminating time from x(t) = v*cos(a)*t and y(t) = v*sin(a)*t - g*t^2/2
gives a quadratic in tan(a):

    tan(a) = (v^2 -/+ sqrt(v^4 - g*(g*x^2 + 2*y*v^2))) / (g*x)

The minus branch is the direct (flat, fastest) shot and the plus branch is
the lob (high arc, slowest) shot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional

try:
    from .vector import Vector2D
except ImportError:
    from vector import Vector2D


# =============================================================================
# ENUMERATIONS
# =============================================================================

class AimPolicy(Enum):
    """Which root of the trajectory equation to fire along."""
    DIRECT = "direct"   # Lower angle, shortest flight time
    LOB = "lob"         # Higher angle, longest flight time

    # The flattest shot is also the fastest one
    OPTIMAL = "direct"

    @property
    def root_sign(self) -> float:
        """Sign applied to the discriminant root in the angle formula."""
        return -1.0 if self is AimPolicy.DIRECT else 1.0


# =============================================================================
# WEAPON AND SOLUTION
# =============================================================================

@dataclass(frozen=True)
class Weapon:
    """
    Projectile weapon stats.

    Attributes:
        speed: Initial speed of the projectile when fired.
        gravity: Downward acceleration acting on the projectile.
    """
    speed: float = 0.0
    gravity: float = 0.0

    def fire(self, angle: float, time: float) -> Vector2D:
        """Position of a projectile ``time`` seconds after launch at ``angle``."""
        return fire(self, angle, time)

    @classmethod
    def from_dict(cls, data: dict) -> Weapon:
        """
        Create a Weapon from a config mapping with ``speed`` and ``gravity``.

        Raises:
            ValueError: If a field is missing or not a number.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Weapon config must be an object, got {data!r}")
        try:
            return cls(speed=float(data["speed"]), gravity=float(data["gravity"]))
        except KeyError as e:
            raise ValueError(f"Weapon config missing field {e.args[0]!r}") from e
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid weapon config {data!r}: {e}") from e

    def to_dict(self) -> dict:
        return {"speed": self.speed, "gravity": self.gravity}


@dataclass(frozen=True)
class Solution:
    """
    Projectile aiming solution.

    Attributes:
        angle: Fire at this elevation, in radians above the horizontal.
        time: Projectile reaches the aim point this many seconds after launch.
    """
    angle: float
    time: float

    @property
    def angle_deg(self) -> float:
        """Launch elevation in degrees."""
        return math.degrees(self.angle)


# =============================================================================
# PROJECTILE KINEMATICS
# =============================================================================

def fire(weapon: Weapon, angle: float, time: float) -> Vector2D:
    """
    Simulate firing at a given angle and return the projectile position.

    Args:
        weapon: Weapon stats (muzzle speed and gravity).
        angle: Launch elevation in radians.
        time: Seconds since launch.

    Returns:
        Projectile position relative to the launch point.
    """
    vel_x = math.cos(angle) * weapon.speed
    vel_y = math.sin(angle) * weapon.speed
    return Vector2D(vel_x * time, vel_y * time - 0.5 * weapon.gravity * time * time)


def max_range(weapon: Weapon, dy: float = 0.0) -> float:
    """
    Greatest horizontal distance the weapon can reach at height ``dy``.

    The discriminant of the trajectory equation is zero at the edge of the
    envelope, which gives x = sqrt(v^4 - 2 g dy v^2) / g. On level ground
    this is v^2 / g.

    Returns:
        The reach, 0.0 when ``dy`` is above the weapon's ceiling, or inf
        without gravity.
    """
    if weapon.gravity == 0:
        return math.inf
    v2 = weapon.speed * weapon.speed
    radicand = v2 * v2 - 2.0 * weapon.gravity * dy * v2
    if radicand < 0:
        return 0.0
    return math.sqrt(radicand) / weapon.gravity


def solve_point(
    dx: float,
    dy: float,
    speed: float,
    gravity: float,
    policy: AimPolicy = AimPolicy.DIRECT
) -> Optional[Solution]:
    """
    Find the launch angle and flight time to hit a static point.

    Args:
        dx: Horizontal displacement of the aim point from the launch point.
        dy: Vertical displacement of the aim point (up is positive).
        speed: Muzzle speed.
        gravity: Downward acceleration on the projectile.
        policy: DIRECT for the flat shot, LOB for the high arc.

    Returns:
        The Solution, or None if the point is out of reach, lies directly
        above or below the launch point, or the inputs produce a
        non-finite angle or time.

    Notes:
        Points behind the weapon (dx < 0) are solved on the mirrored
        displacement and the angle reflected to ``pi - angle``, so the
        flight time stays positive.
    """
    distance = abs(dx)
    v2 = speed * speed
    discriminant = v2 * v2 - gravity * (gravity * distance * distance + 2.0 * dy * v2)
    if not math.isfinite(discriminant) or discriminant < 0.0:
        return None

    denominator = gravity * distance
    if denominator == 0:
        return None

    root = math.sqrt(discriminant)
    angle = math.atan((v2 + policy.root_sign * root) / denominator)

    divisor = math.cos(angle) * speed
    if divisor == 0:
        return None
    time = distance / divisor

    if dx < 0:
        angle = math.pi - angle

    if not (math.isfinite(angle) and math.isfinite(time)) or time < 0:
        return None
    return Solution(angle=angle, time=time)
