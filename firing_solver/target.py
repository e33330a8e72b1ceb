#!/usr/bin/env python3
"""
Target Motion Model for the Firing Solver

Extrapolates a target snapshot into the future. The predicted position is
the sum of three terms:
- Linear drift: position + velocity * t
- Free fall under the target's own gravity: -0.5 * gravity * t^2 (Y only)
- A circular offset of the given radius, using t itself as the phase in
  radians (one radian per second around the drifting center)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

try:
    from .vector import Vector2D
except ImportError:
    from vector import Vector2D


@dataclass(frozen=True)
class Target:
    """
    Snapshot of a target at the evaluation origin (t = 0).

    Attributes:
        position: Current position relative to the weapon.
        velocity: Constant drift rate.
        gravity: Target's own downward acceleration, independent of the
                 weapon's projectile gravity.
        radius: Radius of the circular offset; 0 disables it.
    """
    position: Vector2D = field(default_factory=Vector2D.zero)
    velocity: Vector2D = field(default_factory=Vector2D.zero)
    gravity: float = 0.0
    radius: float = 0.0

    def __post_init__(self) -> None:
        """Accept plain ``(x, y)`` pairs for position and velocity."""
        if not isinstance(self.position, Vector2D):
            object.__setattr__(self, "position", Vector2D.from_tuple(self.position))
        if not isinstance(self.velocity, Vector2D):
            object.__setattr__(self, "velocity", Vector2D.from_tuple(self.velocity))

    def predict(self, time: float) -> Vector2D:
        """Extrapolate the target ``time`` seconds into the future."""
        return predict(self, time)

    @property
    def is_stationary(self) -> bool:
        """True when the target never leaves its current position."""
        return (self.velocity == Vector2D.zero() and
                self.gravity == 0 and
                self.radius == 0)

    @classmethod
    def from_dict(cls, data: dict) -> Target:
        """
        Create a Target from a config mapping.

        ``position`` is required; ``velocity``, ``gravity`` and ``radius``
        default to zero.

        Raises:
            ValueError: If a field is missing or malformed.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Target config must be an object, got {data!r}")
        if "position" not in data:
            raise ValueError("Target config missing field 'position'")
        try:
            return cls(
                position=Vector2D.from_tuple(data["position"]),
                velocity=Vector2D.from_tuple(data.get("velocity", (0.0, 0.0))),
                gravity=float(data.get("gravity", 0.0)),
                radius=float(data.get("radius", 0.0)),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid target config {data!r}: {e}") from e

    def to_dict(self) -> dict:
        return {
            "position": list(self.position.to_tuple()),
            "velocity": list(self.velocity.to_tuple()),
            "gravity": self.gravity,
            "radius": self.radius,
        }


def predict(target: Target, time: float) -> Vector2D:
    """
    Position of the target ``time`` seconds after the snapshot.

    Args:
        target: Target snapshot.
        time: Seconds elapsed from the evaluation origin (>= 0).

    Returns:
        Predicted position relative to the weapon.
    """
    x = (target.position.x
         + target.velocity.x * time
         + target.radius * math.cos(time))
    y = (target.position.y
         + target.velocity.y * time
         - target.gravity * time * time * 0.5
         + target.radius * math.sin(time))
    return Vector2D(x, y)
