from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Sequence

import numpy as np

from multiped_py.geometry.vector import Vector3
from multiped_py.locomotion.gait_base import GaitPattern, normalize_phase

# Hard cap on the velocity suggested by max_safe_velocity (length units per second).
MAX_SAFE_VELOCITY_CAP = 200.0


@dataclass(frozen=True)
class StabilityReport:
    stance_count: int
    margin: float
    polygon: List[Vector3] = field(default_factory=list)
    aerial: bool = False
    is_stable: bool = False


def convex_hull(points: np.ndarray) -> np.ndarray:
    """
    Counter-clockwise convex hull of 2D points (monotone chain). Collinear points
    on an edge are dropped.
    """
    pts = np.unique(np.asarray(points, dtype=float).reshape(-1, 2), axis=0)
    if len(pts) < 3:
        return pts

    def cross(o, a, b):
        return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])

    lower = []
    for p in pts:
        while len(lower) >= 2 and cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)
    upper = []
    for p in pts[::-1]:
        while len(upper) >= 2 and cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)
    return np.array(lower[:-1] + upper[:-1])


def _segment_distance(p, a, b):
    ab = b - a
    denom = float(ab @ ab)
    if denom == 0.0:
        return float(np.linalg.norm(p - a))
    t = min(1.0, max(0.0, float((p - a) @ ab) / denom))
    return float(np.linalg.norm(p - (a + t * ab)))


class StabilityAnalyzer:
    """
    Static stability checks over a gait pattern and the current foot positions.

    Only the XY projection is considered: the support polygon is the convex hull of
    the stance feet, and the margin is how far the body centre sits inside it.
    """

    def __init__(self, min_stance_legs=3, safety_margin=0.0, body_mass=2000.0, leg_mass=100.0):
        if min_stance_legs < 0:
            raise ValueError("min_stance_legs must be >= 0")
        self.min_stance_legs = min_stance_legs
        self.safety_margin = safety_margin
        self.body_mass = body_mass
        self.leg_mass = leg_mass

    # --- Phase based checks ---

    def get_stance_legs(self, pattern: GaitPattern, global_phase: float, legs: Optional[Sequence[str]] = None):
        return pattern.get_stance_legs(global_phase, legs)

    def is_stable(self, pattern: GaitPattern, global_phase: float, legs=None, min_required=None) -> bool:
        required = self.min_stance_legs if min_required is None else min_required
        return len(self.get_stance_legs(pattern, global_phase, legs)) >= required

    def get_min_stance_legs(self, pattern: GaitPattern, legs=None) -> int:
        """
        Fewest legs on the ground at any point of the cycle.

        The stance set only changes where some leg touches down or lifts off, so it is
        enough to look at those breakpoints and at one phase between each pair.
        """
        legs = pattern.legs if legs is None else legs
        if not legs:
            return 0
        breakpoints = set()
        for leg in legs:
            offset = pattern.get_leg_phase_offset(leg)
            breakpoints.add(normalize_phase(-offset))
            breakpoints.add(normalize_phase(pattern.duty_factor - offset))
        ordered = sorted(breakpoints)
        samples = list(ordered)
        for a, b in zip(ordered, ordered[1:] + [ordered[0] + 1.0]):
            samples.append(normalize_phase((a + b) / 2.0))
        return min(len(pattern.get_stance_legs(phase, legs)) for phase in samples)

    def has_aerial_phase(self, pattern: GaitPattern, legs=None) -> bool:
        return self.get_min_stance_legs(pattern, legs) == 0

    # --- Geometric checks ---

    def support_polygon(self, positions: Mapping[str, Vector3], stance_legs) -> List[Vector3]:
        points = [(positions[leg].x, positions[leg].y) for leg in stance_legs if leg in positions]
        if len(points) < 3:
            return []
        hull = convex_hull(np.array(points))
        if len(hull) < 3:
            return []
        return [Vector3(x, y, 0.0) for x, y in hull]

    def point_in_polygon(self, point: Vector3, polygon: Sequence[Vector3]) -> bool:
        if len(polygon) < 3:
            return False
        p = np.array([point.x, point.y])
        for a, b in zip(polygon, list(polygon[1:]) + [polygon[0]]):
            edge = np.array([b.x - a.x, b.y - a.y])
            rel = p - np.array([a.x, a.y])
            if edge[0] * rel[1] - edge[1] * rel[0] < 0:
                return False
        return True

    def stability_margin(self, center: Vector3, polygon: Sequence[Vector3]) -> float:
        """
        Signed distance from the centre (XY) to the nearest support polygon edge:
        positive inside, negative outside, 0.0 with fewer than three vertices.
        """
        if len(polygon) < 3:
            return 0.0
        p = np.array([center.x, center.y])
        vertices = np.array([[v.x, v.y] for v in polygon])
        distance = min(_segment_distance(p, vertices[i], vertices[(i + 1) % len(vertices)])
                       for i in range(len(vertices)))
        return distance if self.point_in_polygon(center, polygon) else -distance

    def centre_of_mass(self, positions: Mapping[str, Vector3], body_position: Vector3) -> Vector3:
        total_mass = self.body_mass + self.leg_mass * len(positions)
        weighted = body_position.to_array() * self.body_mass
        for position in positions.values():
            weighted = weighted + position.to_array() * self.leg_mass
        return Vector3.from_array(weighted / total_mass)

    def analyze(self, positions: Mapping[str, Vector3], stance_legs, center: Vector3) -> StabilityReport:
        stance_legs = list(stance_legs)
        polygon = self.support_polygon(positions, stance_legs)
        margin = self.stability_margin(center, polygon)
        stable = len(stance_legs) >= self.min_stance_legs and margin >= self.safety_margin
        return StabilityReport(len(stance_legs), margin, polygon, len(stance_legs) == 0, stable)

    # --- Recommendations ---

    def max_safe_velocity(self, margin: float, cycle_time: float) -> float:
        if cycle_time <= 0:
            raise ValueError("cycle_time must be positive")
        available = margin - self.safety_margin
        if margin <= 0 or available <= 0:
            return 0.0
        return min(available * cycle_time, MAX_SAFE_VELOCITY_CAP)

    def recommendations(self, margin: float):
        """
        Suggested gait parameters for the given margin: conservative when below the
        safety margin, aggressive when well above it.
        """
        if margin < self.safety_margin:
            return {"step_height": 20.0, "cycle_time": 3.0, "duty_factor": 0.85, "max_velocity": 50.0}
        if margin > self.safety_margin * 2:
            return {"step_height": 40.0, "cycle_time": 1.5, "duty_factor": 0.65, "max_velocity": 150.0}
        return {"step_height": 30.0, "cycle_time": 2.0, "duty_factor": 0.75, "max_velocity": 100.0}
