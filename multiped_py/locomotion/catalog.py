"""
Name-based registry of every gait pattern the generator can run.
"""
from typing import Mapping, Optional

from multiped_py.errors import UnknownPatternError
from multiped_py.locomotion import dynamic_gaits, static_gaits, turning_gaits
from multiped_py.locomotion.gait_base import GaitPattern


def _legs(params):
    return params.get("leg_count", 6), params.get("leg_names")


_FACTORIES = {
    "tripod": lambda p: static_gaits.tripod(),
    "wave": lambda p: static_gaits.wave(*_legs(p)),
    "ripple": lambda p: static_gaits.ripple(*_legs(p)),
    "quadruped_trot": lambda p: static_gaits.quadruped_trot(),
    "dynamic_trot": lambda p: dynamic_gaits.dynamic_trot(),
    "bound": lambda p: dynamic_gaits.bound(),
    "gallop": lambda p: dynamic_gaits.gallop(),
    "pronk": lambda p: dynamic_gaits.pronk(*_legs({"leg_count": 4, **p})),
    "fast_tripod": lambda p: dynamic_gaits.fast_tripod(),
    "dynamic_wave": lambda p: dynamic_gaits.dynamic_wave(*_legs(p)),
    "differential_tripod": lambda p: turning_gaits.differential_tripod(p.get("turn_rate", 0.0)),
    "differential_wave": lambda p: turning_gaits.differential_wave(*_legs(p), turn_rate=p.get("turn_rate", 0.0)),
    "crab_walk": lambda p: turning_gaits.crab_walk(*_legs(p), direction=p.get("direction", turning_gaits.DEFAULT_CRAB_DIRECTION)),
    "pivot_turn": lambda p: turning_gaits.pivot_turn(*_legs(p), turn_direction=p.get("turn_direction", 1)),
}

# Allowed leg counts: an exact count or a minimum.
_EXACT_LEGS = {
    "tripod": 6, "fast_tripod": 6, "differential_tripod": 6,
    "quadruped_trot": 4, "dynamic_trot": 4, "bound": 4, "gallop": 4,
}
_MIN_LEGS = {
    "wave": 4, "ripple": 4, "dynamic_wave": 4, "differential_wave": 4,
    "crab_walk": 4, "pivot_turn": 4, "pronk": 1,
}

DYNAMIC_PATTERNS = frozenset({"dynamic_trot", "bound", "gallop", "pronk"})


def available_patterns():
    return list(_FACTORIES)


def create(name: str, params: Optional[Mapping] = None) -> GaitPattern:
    """
    Builds a pattern by name.

    `params` may hold leg_count, leg_names, turn_rate, direction and turn_direction;
    each pattern reads only the keys it uses.
    """
    factory = _FACTORIES.get(name)
    if factory is None:
        raise UnknownPatternError(name)
    return factory(dict(params or {}))


def is_suitable_for_legs(name: str, leg_count: int) -> bool:
    if name not in _FACTORIES:
        raise UnknownPatternError(name)
    if name in _EXACT_LEGS:
        return leg_count == _EXACT_LEGS[name]
    return leg_count >= _MIN_LEGS[name]


def requires_dynamic_stability(name: str) -> bool:
    if name not in _FACTORIES:
        raise UnknownPatternError(name)
    return name in DYNAMIC_PATTERNS


def velocity_requirements(name: str):
    """
    (minimum, recommended) body velocity for a pattern. Statically stable patterns
    have no minimum.
    """
    if name not in _FACTORIES:
        raise UnknownPatternError(name)
    return dynamic_gaits.VELOCITY_REQUIREMENTS.get(name, (0.0, 0.0))
