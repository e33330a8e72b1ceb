#!/usr/bin/env python3
"""
2D Vector Type for the Firing Solver

Positions, displacements and drift rates all live in the vertical firing
plane:
- X: horizontal, positive in the weapon's forward direction
- Y: vertical, positive up

Units are arbitrary but must be consistent (distance units, seconds).
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence


# =============================================================================
# VECTOR2D CLASS
# =============================================================================

@dataclass(frozen=True, eq=False)
class Vector2D:
    """
    Immutable 2D vector for points and velocities in the firing plane.

    Attributes:
        x: Horizontal component.
        y: Vertical component (up is positive).
    """
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: Vector2D) -> Vector2D:
        """Vector addition."""
        return Vector2D(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vector2D) -> Vector2D:
        """Vector subtraction."""
        return Vector2D(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vector2D:
        """Scalar multiplication."""
        return Vector2D(self.x * scalar, self.y * scalar)

    def __rmul__(self, scalar: float) -> Vector2D:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector2D:
        """Scalar division."""
        if scalar == 0:
            raise ValueError("Cannot divide vector by zero")
        return Vector2D(self.x / scalar, self.y / scalar)

    def __neg__(self) -> Vector2D:
        return Vector2D(-self.x, -self.y)

    def __eq__(self, other: object) -> bool:
        """Equality check with tolerance."""
        if not isinstance(other, Vector2D):
            return False
        eps = 1e-10
        return abs(self.x - other.x) < eps and abs(self.y - other.y) < eps

    # Tolerant equality has no consistent hash
    __hash__ = None

    @property
    def magnitude(self) -> float:
        """Vector magnitude (length)."""
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vector2D) -> float:
        """Distance to another point."""
        return (self - other).magnitude

    def to_tuple(self) -> tuple[float, float]:
        """Convert to tuple."""
        return (self.x, self.y)

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> Vector2D:
        """
        Create from a two-element sequence such as ``(x, y)`` or ``[x, y]``.

        Raises:
            ValueError: If the sequence does not hold exactly two numbers.
        """
        if isinstance(t, Vector2D):
            return t
        if isinstance(t, (str, bytes)) or len(t) != 2:
            raise ValueError(f"Expected a pair of numbers, got {t!r}")
        try:
            return cls(float(t[0]), float(t[1]))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Expected a pair of numbers, got {t!r}") from e

    @classmethod
    def zero(cls) -> Vector2D:
        """Zero vector."""
        return cls(0.0, 0.0)

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.6g}, {self.y:.6g})"
