from dataclasses import dataclass
from typing import List, Optional

from multiped_py.errors import ChainStructureError
from multiped_py.geometry.vector import Vector3
from multiped_py.kinematics.joint import Joint
from multiped_py.kinematics.link import Link


@dataclass(frozen=True)
class LinkState:
    joint: Joint
    length: float
    root_location: Vector3
    tip_location: Vector3


class Chain:
    """
    An ordered sequence of parts alternating Joint, Link, Joint, Link...
    anchored at `origin`. Each joint's direction points its following link.
    """

    def __init__(self, origin: Optional[Vector3] = None, name=None):
        self.origin = origin if origin is not None else Vector3.zero()
        self.name = name
        self._parts = []

    def add(self, part):
        expected = Joint if len(self._parts) % 2 == 0 else Link
        if not isinstance(part, expected):
            raise ChainStructureError(
                f"Chain {self.name or ''} expected a {expected.__name__} at position "
                f"{len(self._parts)}, got {type(part).__name__}")
        self._parts.append(part)
        return self

    @property
    def parts(self):
        return tuple(self._parts)

    def __len__(self):
        return len(self._parts)

    @property
    def is_complete(self) -> bool:
        return len(self._parts) >= 2 and len(self._parts) % 2 == 0

    def require_complete(self):
        if not self.is_complete:
            raise ChainStructureError(
                f"Chain {self.name or ''} must end with a Link and hold at least one pair, "
                f"has {len(self._parts)} part(s)")

    def joints(self) -> List[Joint]:
        return self._parts[0::2]

    def links(self) -> List[Link]:
        return self._parts[1::2]

    def pairs(self):
        """
        Joint/link pairs from root to tip.
        """
        return list(zip(self._parts[0::2], self._parts[1::2]))

    def reach(self) -> float:
        return sum(link.length for link in self.links())

    def link_location(self, n) -> Vector3:
        """
        Location of the tip of link `n` (1-based). Link 0 is the origin.
        """
        pairs = self.pairs()
        if n < 0 or n > len(pairs):
            raise IndexError(f"Chain has {len(pairs)} links, no link {n}")
        location = self.origin
        for joint, link in pairs[:n]:
            location = location + joint.direction * link.length
        return location

    def end_location(self) -> Vector3:
        return self.link_location(len(self.pairs()))

    def joint_directions(self) -> List[Vector3]:
        return [joint.direction for joint in self.joints()]

    def chain_state(self) -> List[LinkState]:
        state = []
        location = self.origin
        for joint, link in self.pairs():
            tip = location + joint.direction * link.length
            state.append(LinkState(joint, link.length, location, tip))
            location = tip
        return state

    def __repr__(self):
        label = f" {self.name!r}" if self.name else ""
        return f"<Chain{label} origin={self.origin!r} links={len(self.links())} reach={self.reach():.3f}>"
