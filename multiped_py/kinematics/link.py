import math

from multiped_py.errors import InvalidLinkError


class Link:
    """
    A rigid segment of fixed length between two joints. Immutable once built.
    """

    __slots__ = ("length", "name")

    def __init__(self, length, name=None):
        length = float(length)
        if not math.isfinite(length) or length <= 0:
            raise InvalidLinkError(f"Link length must be a positive finite number, got {length}")
        object.__setattr__(self, "length", length)
        object.__setattr__(self, "name", name)

    def __setattr__(self, name, value):
        raise AttributeError("Link is immutable")

    def __repr__(self):
        label = f" {self.name!r}" if self.name else ""
        return f"<Link{label} length={self.length}>"
