"""Host-side vector and angle value types.

Vector is the single 3D type used for both positions and directions. It is an
immutable value: every operation returns a new Vector. Angle wraps a float so
that it can only be used through its sine and cosine.

Rotations follow standard right-handed rotation matrices:
    yaw rotates about the +y axis (the camera's vertical axis)
    pitch rotates about the +x axis (the camera's horizontal axis)

Camera rays apply yaw first and then pitch. The two rotations do not commute.

Example:
    >>> from src.sunray.core.vector import Angle, Vector
    >>> v = Vector(0.0, 0.0, 1.0)
    >>> v.yaw(Angle.from_degrees(90.0))  # doctest: +SKIP
    Vector(dx=1.0, dy=0.0, dz=6.123233995736766e-17)
"""

from __future__ import annotations

import math
from dataclasses import dataclass


class DegenerateVectorError(ZeroDivisionError):
    """Raised when a zero-length vector is normalized."""


@dataclass(frozen=True)
class Angle:
    """An angle in radians, usable only through sin() and cos().

    Attributes:
        radians: The angle value in radians.
    """

    radians: float = 0.0

    @classmethod
    def from_degrees(cls, degrees: float) -> Angle:
        """Create an angle from a value in degrees."""
        return cls(math.radians(degrees))

    def sin(self) -> float:
        return math.sin(self.radians)

    def cos(self) -> float:
        return math.cos(self.radians)


@dataclass(frozen=True)
class Vector:
    """A 3D vector of 64-bit floats.

    Attributes:
        dx: X component.
        dy: Y component.
        dz: Z component.
    """

    dx: float
    dy: float
    dz: float

    def add(self, other: Vector) -> Vector:
        return Vector(self.dx + other.dx, self.dy + other.dy, self.dz + other.dz)

    def subtract(self, other: Vector) -> Vector:
        return Vector(self.dx - other.dx, self.dy - other.dy, self.dz - other.dz)

    def scale(self, n: float) -> Vector:
        return Vector(self.dx * n, self.dy * n, self.dz * n)

    def dot_product(self, other: Vector) -> float:
        """Compute the dot product self . other."""
        return self.dx * other.dx + self.dy * other.dy + self.dz * other.dz

    def cross_product(self, other: Vector) -> Vector:
        """Compute the cross product self x other.

        Not commutative: a.cross_product(b) == -(b.cross_product(a)).
        """
        return Vector(
            self.dy * other.dz - self.dz * other.dy,
            self.dz * other.dx - self.dx * other.dz,
            self.dx * other.dy - self.dy * other.dx,
        )

    def squared_magnitude(self) -> float:
        """Compute the squared Euclidean length.

        Prefer this over magnitude() when only comparing distances, as it
        avoids the square root.
        """
        return self.dot_product(self)

    def magnitude(self) -> float:
        return math.sqrt(self.squared_magnitude())

    def normalized(self) -> Vector:
        """Return a unit vector in the same direction.

        Raises:
            DegenerateVectorError: If the vector has zero length.
        """
        length = self.magnitude()
        if length == 0.0:
            raise DegenerateVectorError(f"Cannot normalize zero-length vector {self}")
        return Vector(self.dx / length, self.dy / length, self.dz / length)

    def yaw(self, angle: Angle) -> Vector:
        """Rotate about the +y axis by angle."""
        c = angle.cos()
        s = angle.sin()
        return Vector(self.dx * c + self.dz * s, self.dy, -self.dx * s + self.dz * c)

    def pitch(self, angle: Angle) -> Vector:
        """Rotate about the +x axis by angle."""
        c = angle.cos()
        s = angle.sin()
        return Vector(self.dx, self.dy * c - self.dz * s, self.dy * s + self.dz * c)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.dx, self.dy, self.dz)

    def __add__(self, other: Vector) -> Vector:
        return self.add(other)

    def __sub__(self, other: Vector) -> Vector:
        return self.subtract(other)

    def __mul__(self, n: float) -> Vector:
        return self.scale(n)

    __rmul__ = __mul__

    def __neg__(self) -> Vector:
        return Vector(-self.dx, -self.dy, -self.dz)
