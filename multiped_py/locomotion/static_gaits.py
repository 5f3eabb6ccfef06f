"""
Statically stable gait patterns: tripod, wave, ripple and the quadruped trot.

Legs are named by position then side, e.g. "front_right" or "middle_left". The
short forms "FR", "ML" and so on are accepted wherever a leg name is expected.
"""
from multiped_py.locomotion.gait_base import GaitPattern, canonical_leg

# Clockwise ring seen from above.
HEXAPOD_LEGS = ("front_right", "middle_right", "rear_right", "rear_left", "middle_left", "front_left")
QUADRUPED_LEGS = ("front_right", "rear_right", "rear_left", "front_left")

# Two alternating support triangles.
TRIPOD_OFFSETS = {"front_right": 0.0, "middle_left": 0.0, "rear_right": 0.0,
                  "front_left": 0.5, "middle_right": 0.5, "rear_left": 0.5}

# Diagonal pairs move together.
TROT_OFFSETS = {"front_right": 0.0, "rear_left": 0.0, "front_left": 0.5, "rear_right": 0.5}

RIPPLE_HEXAPOD_ORDER = ("front_right", "rear_left", "middle_right", "front_left", "rear_right", "middle_left")
RIPPLE_QUADRUPED_ORDER = ("front_right", "rear_left", "front_left", "rear_right")


def leg_ring(leg_count, leg_names=None):
    """
    Orders legs around the body for sequential gaits. Standard hexapod and quadruped
    names (full or short) use the clockwise ring and come back as given, anything
    else keeps the order it was given in.
    """
    if leg_names is not None:
        leg_names = tuple(leg_names)
        given = {canonical_leg(leg): leg for leg in leg_names}
        for standard in (HEXAPOD_LEGS, QUADRUPED_LEGS):
            if len(standard) == leg_count and set(standard) <= set(given):
                return tuple(given[leg] for leg in standard)
        return leg_names
    if leg_count == 6:
        return HEXAPOD_LEGS
    if leg_count == 4:
        return QUADRUPED_LEGS
    return tuple(f"leg_{i + 1}" for i in range(leg_count))


def _standard_ring(ring):
    canonical = tuple(canonical_leg(leg) for leg in ring)
    if canonical in (HEXAPOD_LEGS, QUADRUPED_LEGS):
        return canonical
    return None


def sequential_offsets(order):
    n = len(order)
    return {leg: i / n for i, leg in enumerate(order)}


def alternating_offsets(leg_count, leg_names=None):
    """
    Splits the legs into two groups half a cycle apart: tripods for six legs,
    diagonal pairs for four, alternating ring positions otherwise.
    """
    ring = leg_ring(leg_count, leg_names)
    standard = _standard_ring(ring)
    if standard == HEXAPOD_LEGS:
        return {leg: TRIPOD_OFFSETS[name] for leg, name in zip(ring, standard)}
    if standard == QUADRUPED_LEGS:
        return {leg: TROT_OFFSETS[name] for leg, name in zip(ring, standard)}
    return {leg: 0.5 * (i % 2) for i, leg in enumerate(ring)}


def tripod():
    return GaitPattern("tripod", 0.5, TRIPOD_OFFSETS)


def wave(leg_count=6, leg_names=None):
    # One leg swings at a time.
    ring = leg_ring(leg_count, leg_names)
    n = len(ring)
    return GaitPattern("wave", (n - 1) / n, sequential_offsets(ring))


def ripple(leg_count=6, leg_names=None):
    ring = leg_ring(leg_count, leg_names)
    standard = _standard_ring(ring)
    if standard is not None:
        order = RIPPLE_HEXAPOD_ORDER if standard == HEXAPOD_LEGS else RIPPLE_QUADRUPED_ORDER
        given = dict(zip(standard, ring))
        ring = tuple(given[leg] for leg in order)
    return GaitPattern("ripple", 0.75, sequential_offsets(ring))


def quadruped_trot():
    return GaitPattern("quadruped_trot", 0.6, TROT_OFFSETS)
