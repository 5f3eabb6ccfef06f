import math

import numpy as np

from multiped_py.errors import DegenerateInputError
from multiped_py.geometry.matrix import Matrix3
from multiped_py.geometry.vector import EPSILON, Vector3


class Quaternion:
    """
    Immutable rotation quaternion (w + xi + yj + zk).
    """

    __slots__ = ("w", "x", "y", "z")

    def __init__(self, w=1.0, x=0.0, y=0.0, z=0.0):
        object.__setattr__(self, "w", float(w))
        object.__setattr__(self, "x", float(x))
        object.__setattr__(self, "y", float(y))
        object.__setattr__(self, "z", float(z))

    def __setattr__(self, name, value):
        raise AttributeError("Quaternion is immutable")

    @classmethod
    def identity(cls):
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_axis_angle(cls, axis, angle):
        axis = axis.normalize()
        half = angle.radians / 2.0
        s = math.sin(half)
        return cls(math.cos(half), axis.x * s, axis.y * s, axis.z * s)

    @classmethod
    def between(cls, v1, v2):
        """
        Shortest-arc rotation taking the direction of v1 onto the direction of v2.
        """
        a = v1.normalize()
        b = v2.normalize()
        d = a.dot(b)
        if d > 1.0 - 1e-12:
            return cls.identity()
        if d < -1.0 + 1e-12:
            # Opposite directions: half turn about any perpendicular axis.
            axis = a.perpendicular()
            return cls(0.0, axis.x, axis.y, axis.z)
        c = a.cross(b)
        return cls(1.0 + d, c.x, c.y, c.z).normalize()

    def magnitude(self) -> float:
        return math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self):
        m = self.magnitude()
        if m < EPSILON:
            raise DegenerateInputError("Cannot normalize a zero quaternion")
        return Quaternion(self.w / m, self.x / m, self.y / m, self.z / m)

    def conjugate(self):
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def dot(self, other) -> float:
        return self.w * other.w + self.x * other.x + self.y * other.y + self.z * other.z

    def multiply(self, other):
        # Hamilton product.
        return Quaternion(
            self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
            self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
        )

    def rotate(self, vector):
        p = Quaternion(0.0, vector.x, vector.y, vector.z)
        r = self.multiply(p).multiply(self.conjugate())
        return Vector3(r.x, r.y, r.z)

    def to_matrix(self) -> Matrix3:
        w, x, y, z = self.normalize().as_tuple()
        return Matrix3(np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - w * z),     2 * (x * z + w * y)],
            [2 * (x * y + w * z),     1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
            [2 * (x * z - w * y),     2 * (y * z + w * x),     1 - 2 * (x * x + y * y)],
        ]))

    def as_tuple(self):
        return (self.w, self.x, self.y, self.z)

    def __mul__(self, other):
        if isinstance(other, Quaternion):
            return self.multiply(other)
        if isinstance(other, Vector3):
            return self.rotate(other)
        return NotImplemented

    def __eq__(self, other):
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        return f"Quaternion(w={self.w:.4f}, x={self.x:.4f}, y={self.y:.4f}, z={self.z:.4f})"
