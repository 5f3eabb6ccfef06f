import numpy as np


class Matrix3:
    """
    Immutable 3x3 matrix backed by a numpy array.
    """

    __slots__ = ("_m",)

    def __init__(self, values):
        m = np.array(values, dtype=float).reshape(3, 3)
        m.setflags(write=False)
        self._m = m

    @classmethod
    def identity(cls):
        return cls(np.eye(3))

    @classmethod
    def rotation_about_axis(cls, axis, angle):
        """
        Rodrigues rotation matrix for a unit axis and an Angle (or radians).
        The axis is used as given and is not renormalised.
        """
        ux, uy, uz = axis.x, axis.y, axis.z
        theta = angle.radians if hasattr(angle, "radians") else float(angle)
        c = np.cos(theta)
        s = np.sin(theta)
        t = 1.0 - c
        return cls([
            [t * ux * ux + c,      t * ux * uy - s * uz, t * ux * uz + s * uy],
            [t * ux * uy + s * uz, t * uy * uy + c,      t * uy * uz - s * ux],
            [t * ux * uz - s * uy, t * uy * uz + s * ux, t * uz * uz + c],
        ])

    @classmethod
    def from_euler(cls, roll, pitch, yaw):
        """
        Rotation matrix from roll (X), pitch (Y) and yaw (Z) in radians, applied as Rz @ Ry @ Rx.
        """
        Rx = np.array([[1, 0, 0],
                       [0, np.cos(roll), -np.sin(roll)],
                       [0, np.sin(roll), np.cos(roll)]])
        Ry = np.array([[np.cos(pitch), 0, np.sin(pitch)],
                       [0, 1, 0],
                       [-np.sin(pitch), 0, np.cos(pitch)]])
        Rz = np.array([[np.cos(yaw), -np.sin(yaw), 0],
                       [np.sin(yaw), np.cos(yaw), 0],
                       [0, 0, 1]])
        return cls(Rz @ Ry @ Rx)

    @property
    def array(self) -> np.ndarray:
        return self._m

    def multiply(self, other):
        return Matrix3(self._m @ other.array)

    def mul_vector(self, vector):
        from multiped_py.geometry.vector import Vector3
        return Vector3.from_array(self._m @ vector.to_array())

    def transpose(self):
        return Matrix3(self._m.T)

    def __matmul__(self, other):
        if isinstance(other, Matrix3):
            return self.multiply(other)
        return self.mul_vector(other)

    def __eq__(self, other):
        if not isinstance(other, Matrix3):
            return NotImplemented
        return bool(np.allclose(self._m, other.array))

    def __hash__(self):
        return hash(tuple(np.round(self._m, 12).ravel()))

    def __repr__(self):
        return f"Matrix3({self._m.tolist()})"
