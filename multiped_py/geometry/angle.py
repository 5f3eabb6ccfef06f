import math


class Angle:
    """
    An immutable angle. Stores whichever unit it was built from and converts to
    the other on first access.
    """

    __slots__ = ("_radians", "_degrees")

    def __init__(self, radians=None, degrees=None):
        if (radians is None) == (degrees is None):
            raise ValueError("Angle needs exactly one of radians or degrees")
        self._radians = None if radians is None else float(radians)
        self._degrees = None if degrees is None else float(degrees)

    @classmethod
    def from_radians(cls, value):
        return cls(radians=value)

    @classmethod
    def from_degrees(cls, value):
        return cls(degrees=value)

    @classmethod
    def zero(cls):
        return cls(radians=0.0)

    @property
    def radians(self) -> float:
        if self._radians is None:
            self._radians = math.radians(self._degrees)
        return self._radians

    @property
    def degrees(self) -> float:
        if self._degrees is None:
            self._degrees = math.degrees(self._radians)
        return self._degrees

    def normalize(self):
        """
        Maps the angle into [0, 2*pi) radians, or [0, 360) when built from degrees.
        """
        if self._radians is not None:
            wrapped = self._radians % (2 * math.pi)
            # Tiny negative inputs wrap to exactly 2*pi in floating point.
            return Angle(radians=0.0 if wrapped >= 2 * math.pi else wrapped)
        wrapped = self._degrees % 360.0
        return Angle(degrees=0.0 if wrapped >= 360.0 else wrapped)

    def sin(self):
        return math.sin(self.radians)

    def cos(self):
        return math.cos(self.radians)

    def __add__(self, other):
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(radians=self.radians + other.radians)

    def __sub__(self, other):
        if not isinstance(other, Angle):
            return NotImplemented
        return Angle(radians=self.radians - other.radians)

    def __mul__(self, scalar):
        if isinstance(scalar, Angle):
            return NotImplemented
        return Angle(radians=self.radians * scalar)

    __rmul__ = __mul__

    def __truediv__(self, scalar):
        if scalar == 0:
            raise ZeroDivisionError("Angle divided by zero")
        return Angle(radians=self.radians / scalar)

    def __neg__(self):
        return Angle(radians=-self.radians)

    def __abs__(self):
        return Angle(radians=abs(self.radians))

    def __eq__(self, other):
        if not isinstance(other, Angle):
            return NotImplemented
        return math.isclose(self.radians, other.radians, rel_tol=1e-12, abs_tol=1e-12)

    def __lt__(self, other):
        return self.radians < other.radians

    def __le__(self, other):
        return self.radians <= other.radians or self == other

    def __gt__(self, other):
        return self.radians > other.radians

    def __ge__(self, other):
        return self.radians >= other.radians or self == other

    def __hash__(self):
        return hash(round(self.radians, 12))

    def __repr__(self):
        if self._degrees is not None and self._radians is None:
            return f"Angle(degrees={self._degrees})"
        return f"Angle(radians={self.radians})"
