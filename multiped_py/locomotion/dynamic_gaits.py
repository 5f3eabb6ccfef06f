"""
Dynamically stable gaits. These have phases with fewer than three feet down
(pronk has none at all) and rely on momentum rather than a support polygon.
"""
from multiped_py.locomotion.gait_base import GaitPattern
from multiped_py.locomotion.static_gaits import (
    TRIPOD_OFFSETS, TROT_OFFSETS, leg_ring, sequential_offsets,
)

BOUND_OFFSETS = {"front_right": 0.0, "front_left": 0.0, "rear_right": 0.5, "rear_left": 0.5}
GALLOP_OFFSETS = {"front_right": 0.0, "front_left": 0.125, "rear_right": 0.25, "rear_left": 0.375}

# (minimum velocity, recommended velocity), in length units per second.
VELOCITY_REQUIREMENTS = {
    "dynamic_trot": (80.0, 120.0),
    "bound": (100.0, 150.0),
    "gallop": (150.0, 200.0),
    "pronk": (50.0, 100.0),
    "fast_tripod": (60.0, 100.0),
    "dynamic_wave": (40.0, 80.0),
}


def dynamic_trot():
    return GaitPattern("dynamic_trot", 0.6, TROT_OFFSETS)


def bound():
    # Front pair then rear pair.
    return GaitPattern("bound", 0.35, BOUND_OFFSETS)


def gallop():
    return GaitPattern("gallop", 0.25, GALLOP_OFFSETS)


def pronk(leg_count=4, leg_names=None):
    # All legs together, with an aerial phase.
    return GaitPattern("pronk", 0.3, {leg: 0.0 for leg in leg_ring(leg_count, leg_names)})


def fast_tripod():
    return GaitPattern("fast_tripod", 0.35, TRIPOD_OFFSETS)


def dynamic_wave(leg_count=6, leg_names=None):
    return GaitPattern("dynamic_wave", 0.6, sequential_offsets(leg_ring(leg_count, leg_names)))
