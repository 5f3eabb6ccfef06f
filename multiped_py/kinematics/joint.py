from enum import Enum
from typing import Optional

from multiped_py.errors import DegenerateInputError, InvalidJointError
from multiped_py.geometry.angle import Angle
from multiped_py.geometry.vector import Vector3


class JointKind(Enum):
    REVOLUTE = "revolute"        # 1 DoF rotation about the axis
    PRISMATIC = "prismatic"      # 1 DoF translation along the axis
    CYLINDRICAL = "cylindrical"  # rotation and translation about the same axis

    @property
    def degrees_of_freedom(self) -> int:
        return 2 if self is JointKind.CYLINDRICAL else 1


class RotationLimit:
    def __init__(self, lower: Angle, upper: Angle):
        if lower.radians > upper.radians:
            raise InvalidJointError(f"Rotation limit lower bound {lower!r} is above upper bound {upper!r}")
        self.lower = lower
        self.upper = upper

    def contains(self, angle: Angle) -> bool:
        return self.lower.radians <= angle.radians <= self.upper.radians

    def __repr__(self):
        return f"RotationLimit({self.lower!r}, {self.upper!r})"


class TranslationLimit:
    def __init__(self, lower: float, upper: float):
        if lower > upper:
            raise InvalidJointError(f"Translation limit lower bound {lower} is above upper bound {upper}")
        self.lower = float(lower)
        self.upper = float(upper)

    def contains(self, distance: float) -> bool:
        return self.lower <= distance <= self.upper

    def __repr__(self):
        return f"TranslationLimit({self.lower}, {self.upper})"


class Joint:
    """
    A joint in a kinematic chain.

    The axis is fixed at construction. The direction is the current pointing of the
    link that follows the joint, and is rewritten by the IK solver. Limits are carried
    for callers but are not enforced while solving.
    """

    def __init__(self, kind: JointKind, axis: Vector3, direction: Optional[Vector3] = None,
                 rotation_limit: Optional[RotationLimit] = None,
                 translation_limit: Optional[TranslationLimit] = None, name=None):
        if kind is JointKind.REVOLUTE and translation_limit is not None:
            raise InvalidJointError("A revolute joint cannot carry a translation limit")
        if kind is JointKind.PRISMATIC and rotation_limit is not None:
            raise InvalidJointError("A prismatic joint cannot carry a rotation limit")
        self.kind = kind
        self.name = name
        self.axis = self._unit(axis, "axis")
        self._direction = self._unit(direction if direction is not None else self.axis, "direction")
        self.rotation_limit = rotation_limit
        self.translation_limit = translation_limit

    @classmethod
    def revolute(cls, axis, direction=None, limit=None, name=None):
        return cls(JointKind.REVOLUTE, axis, direction, rotation_limit=limit, name=name)

    @classmethod
    def prismatic(cls, axis, direction=None, limit=None, name=None):
        return cls(JointKind.PRISMATIC, axis, direction, translation_limit=limit, name=name)

    @classmethod
    def cylindrical(cls, axis, direction=None, rotation_limit=None, translation_limit=None, name=None):
        return cls(JointKind.CYLINDRICAL, axis, direction,
                   rotation_limit=rotation_limit, translation_limit=translation_limit, name=name)

    @staticmethod
    def _unit(vector, what):
        if not vector.is_finite():
            raise InvalidJointError(f"Joint {what} must be finite, got {vector!r}")
        try:
            return vector.normalize()
        except DegenerateInputError as e:
            raise InvalidJointError(f"Joint {what} must be non-zero") from e

    @property
    def direction(self) -> Vector3:
        return self._direction

    @direction.setter
    def direction(self, value: Vector3):
        self._direction = self._unit(value, "direction")

    @property
    def limits(self):
        return {"rotation": self.rotation_limit, "translation": self.translation_limit}

    def __repr__(self):
        label = f" {self.name!r}" if self.name else ""
        return f"<Joint{label} {self.kind.value} axis={self.axis!r} direction={self._direction!r}>"
