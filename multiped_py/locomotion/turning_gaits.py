import math

from multiped_py.geometry.vector import Vector3
from multiped_py.locomotion.gait_base import GaitPattern, StepMode
from multiped_py.locomotion.static_gaits import (
    TRIPOD_OFFSETS, alternating_offsets, leg_ring, sequential_offsets,
)

# Nominal lateral distance from the body centre to a foot, used when the caller
# has no better estimate.
DEFAULT_LEG_RADIUS = 100.0

# Crab walk heads along +Y (to the left) unless told otherwise.
DEFAULT_CRAB_DIRECTION = math.pi / 2


def leg_side(leg):
    """
    Returns "right", "left" or None for a leg name like "front_right", "ML" or "left_front".
    """
    lowered = leg.lower()
    if "right" in lowered:
        return "right"
    if "left" in lowered:
        return "left"
    if len(leg) == 2 and leg[1] in "RL" and leg[0] in "FMR":
        return "right" if leg[1] == "R" else "left"
    return None


def is_inside_leg(leg, turn_rate) -> bool:
    # Positive turn rates turn towards the right side.
    side = leg_side(leg)
    return (turn_rate > 0 and side == "right") or (turn_rate < 0 and side == "left")


def get_differential_step_length(leg, base_step, turn_rate, leg_radius=DEFAULT_LEG_RADIUS):
    """
    Step length for one leg while turning. Legs on the inside of the turn shorten
    their stride, legs on the outside lengthen it by the same amount.
    """
    if turn_rate == 0 or base_step == 0:
        return base_step
    factor = 1.0 - (abs(turn_rate) * leg_radius / base_step) * 0.5
    if is_inside_leg(leg, turn_rate):
        length = base_step * factor
    elif leg_side(leg) is None:
        return base_step
    else:
        length = base_step * (2.0 - factor)
    lower, upper = sorted((0.1 * base_step, 2.0 * base_step))
    return max(lower, min(upper, length))


def crab_step_vector(direction, step_length) -> Vector3:
    """
    Step vector of `step_length` along heading `direction` (radians, 0 = +X).
    """
    return Vector3(step_length * math.cos(direction), step_length * math.sin(direction), 0.0)


def pivot_step_position(leg_position, body_center, turn_angle, turn_direction=1) -> Vector3:
    """
    Rotates a foot position about the body centre in the XY plane. Height is kept.
    """
    angle = turn_angle * turn_direction
    c = math.cos(angle)
    s = math.sin(angle)
    dx = leg_position.x - body_center.x
    dy = leg_position.y - body_center.y
    return Vector3(body_center.x + dx * c - dy * s,
                   body_center.y + dx * s + dy * c,
                   leg_position.z)


def differential_tripod(turn_rate=0.0):
    return GaitPattern("differential_tripod", 0.5, TRIPOD_OFFSETS,
                       step_mode=StepMode.DIFFERENTIAL, params={"turn_rate": turn_rate})


def differential_wave(leg_count=6, leg_names=None, turn_rate=0.0):
    ring = leg_ring(leg_count, leg_names)
    if turn_rate < 0:
        # Waves run against the turn, so a left turn reverses the ring.
        ring = tuple(reversed(ring))
    n = len(ring)
    return GaitPattern("differential_wave", (n - 1) / n, sequential_offsets(ring),
                       step_mode=StepMode.DIFFERENTIAL, params={"turn_rate": turn_rate})


def crab_walk(leg_count=6, leg_names=None, direction=DEFAULT_CRAB_DIRECTION):
    return GaitPattern("crab_walk", 0.5, alternating_offsets(leg_count, leg_names),
                       step_mode=StepMode.CRAB, params={"direction": direction})


def pivot_turn(leg_count=6, leg_names=None, turn_direction=1):
    if turn_direction not in (1, -1):
        turn_direction = 1 if turn_direction >= 0 else -1
    return GaitPattern("pivot_turn", 0.5, alternating_offsets(leg_count, leg_names),
                       step_mode=StepMode.PIVOT, params={"turn_direction": turn_direction})
