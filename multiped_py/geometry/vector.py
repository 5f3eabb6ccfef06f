import math

import numpy as np

from multiped_py.errors import DegenerateInputError
from multiped_py.geometry.angle import Angle
from multiped_py.geometry.matrix import Matrix3

# Below this length a vector is treated as zero.
EPSILON = 1e-9


class Vector3:
    """
    Immutable 3D vector. Every operation returns a new vector.
    """

    __slots__ = ("x", "y", "z")

    def __init__(self, x=0.0, y=0.0, z=0.0):
        object.__setattr__(self, "x", float(x))
        object.__setattr__(self, "y", float(y))
        object.__setattr__(self, "z", float(z))

    def __setattr__(self, name, value):
        raise AttributeError("Vector3 is immutable")

    @classmethod
    def zero(cls):
        return cls(0.0, 0.0, 0.0)

    @classmethod
    def unit_x(cls):
        return cls(1.0, 0.0, 0.0)

    @classmethod
    def unit_y(cls):
        return cls(0.0, 1.0, 0.0)

    @classmethod
    def unit_z(cls):
        return cls(0.0, 0.0, 1.0)

    @classmethod
    def from_array(cls, values):
        x, y, z = np.asarray(values, dtype=float).reshape(3)
        return cls(x, y, z)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z])

    def as_tuple(self):
        return (self.x, self.y, self.z)

    # --- Arithmetic ---

    def add(self, other):
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def sub(self, other):
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def scale(self, factor):
        return Vector3(self.x * factor, self.y * factor, self.z * factor)

    def divide(self, divisor):
        if divisor == 0:
            raise DegenerateInputError("Cannot divide a vector by zero")
        return Vector3(self.x / divisor, self.y / divisor, self.z / divisor)

    def invert(self):
        return Vector3(-self.x, -self.y, -self.z)

    def dot(self, other) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other):
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length_squared(self) -> float:
        return self.dot(self)

    def length(self) -> float:
        return math.sqrt(self.length_squared())

    def normalize(self):
        length = self.length()
        if length < EPSILON:
            raise DegenerateInputError("Cannot normalize a zero-length vector")
        return self.divide(length)

    def distance(self, other) -> float:
        return self.sub(other).length()

    def direction_to(self, other):
        """
        Unit vector pointing from this point to `other`.
        """
        return other.sub(self).normalize()

    def lerp(self, other, t):
        return Vector3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t,
        )

    def project_on_plane(self, normal):
        """
        Removes the component along `normal`. The normal does not need to be unit length.
        """
        n = normal.normalize()
        return self.sub(n.scale(self.dot(n)))

    def perpendicular(self):
        """
        Returns some unit vector perpendicular to this one.
        """
        # Cross with whichever basis axis is least aligned.
        ax, ay, az = abs(self.x), abs(self.y), abs(self.z)
        if ax <= ay and ax <= az:
            basis = Vector3.unit_x()
        elif ay <= az:
            basis = Vector3.unit_y()
        else:
            basis = Vector3.unit_z()
        return self.cross(basis).normalize()

    def angle_to(self, other) -> Angle:
        denominator = self.length() * other.length()
        if denominator < EPSILON:
            raise DegenerateInputError("Angle to or from a zero-length vector is undefined")
        cos_theta = max(-1.0, min(1.0, self.dot(other) / denominator))
        return Angle.from_radians(math.acos(cos_theta))

    def rotate_about_axis(self, axis, angle):
        return Matrix3.rotation_about_axis(axis, angle).mul_vector(self)

    def constrained_rotation_towards(self, target, max_angle):
        """
        Rotates this vector towards `target`, by at most `max_angle`. If the target is
        already within `max_angle`, it is returned unchanged.
        """
        angle = self.angle_to(target)
        if angle.radians <= max_angle.radians:
            return target
        axis = self.cross(target)
        if axis.length() < EPSILON:
            # Anti-parallel: any perpendicular axis rotates towards the target.
            axis = self.perpendicular()
        else:
            axis = axis.normalize()
        return self.rotate_about_axis(axis, max_angle)

    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y) and math.isfinite(self.z)

    def is_close(self, other, tolerance=1e-9) -> bool:
        return self.distance(other) <= tolerance

    # --- Operators ---

    def __add__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.add(other)

    def __sub__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.sub(other)

    def __mul__(self, factor):
        if isinstance(factor, Vector3):
            return NotImplemented
        return self.scale(factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        return self.divide(divisor)

    def __neg__(self):
        return self.invert()

    def __iter__(self):
        yield self.x
        yield self.y
        yield self.z

    def __eq__(self, other):
        if not isinstance(other, Vector3):
            return NotImplemented
        return self.x == other.x and self.y == other.y and self.z == other.z

    def __hash__(self):
        return hash((self.x, self.y, self.z))

    def __repr__(self):
        return f"Vector3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"
