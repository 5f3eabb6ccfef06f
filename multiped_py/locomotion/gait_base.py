import math
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from multiped_py.errors import InvalidPatternError

# Short leg names accepted in place of the full ones.
LEG_ABBREVIATIONS = {
    "FR": "front_right", "MR": "middle_right", "RR": "rear_right",
    "RL": "rear_left", "ML": "middle_left", "FL": "front_left",
}

# Phases are snapped to this many decimals before wrapping, so that e.g. 0.1 + 0.4
# lands exactly on a 0.5 boundary instead of just below it.
PHASE_DECIMALS = 12


def normalize_phase(phase: float) -> float:
    """
    Wraps a phase into [0, 1).
    """
    wrapped = round(phase % 1.0, PHASE_DECIMALS) % 1.0
    return 0.0 if wrapped == 1.0 else wrapped


def in_stance(local_phase: float, duty_factor: float) -> bool:
    # The duty factor is snapped like the phase so boundaries compare exactly.
    return local_phase < round(duty_factor, PHASE_DECIMALS)


def canonical_leg(leg: str) -> str:
    return LEG_ABBREVIATIONS.get(leg, leg)


class StepMode(Enum):
    TRANSLATE = "translate"        # feet glide opposite the body velocity
    DIFFERENTIAL = "differential"  # per-leg step length scaled by turn side
    CRAB = "crab"                  # sideways step along a fixed heading
    PIVOT = "pivot"                # feet rotate about the body centre


@dataclass(frozen=True)
class GaitPattern:
    """
    A phase-based leg coordination pattern.

    Each leg's local phase is (global_phase + offset) mod 1. The leg is in stance
    while its local phase is below the duty factor, and swings for the rest of the cycle.
    """
    name: str
    duty_factor: float
    offsets: Mapping[str, float]
    step_mode: StepMode = StepMode.TRANSLATE
    params: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if not (isinstance(self.duty_factor, (int, float)) and 0.0 < self.duty_factor <= 1.0):
            raise InvalidPatternError(f"{self.name}: duty factor must be in (0, 1], got {self.duty_factor!r}")
        for leg, offset in self.offsets.items():
            if not (isinstance(offset, (int, float)) and math.isfinite(offset) and 0.0 <= offset < 1.0):
                raise InvalidPatternError(f"{self.name}: offset for {leg} must be in [0, 1), got {offset!r}")
        # Freeze the mappings so patterns can be shared safely.
        object.__setattr__(self, "offsets", MappingProxyType(dict(self.offsets)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @property
    def legs(self) -> Tuple[str, ...]:
        return tuple(self.offsets)

    def covers(self, leg: str) -> bool:
        return leg in self.offsets or canonical_leg(leg) in self.offsets

    def get_leg_phase_offset(self, leg: str) -> float:
        if leg in self.offsets:
            return self.offsets[leg]
        return self.offsets.get(canonical_leg(leg), 0.0)

    def calculate_leg_phase(self, leg: str, global_phase: float) -> Tuple[float, bool]:
        local = normalize_phase(global_phase + self.get_leg_phase_offset(leg))
        return local, in_stance(local, self.duty_factor)

    def stance_phase(self, local_phase: float) -> Optional[float]:
        """
        Progress through stance in [0, 1), or None when the leg is swinging.
        """
        if in_stance(local_phase, self.duty_factor):
            return local_phase / self.duty_factor
        return None

    def swing_phase(self, local_phase: float) -> Optional[float]:
        if in_stance(local_phase, self.duty_factor):
            return None
        return (local_phase - self.duty_factor) / (1.0 - self.duty_factor)

    def get_stance_legs(self, global_phase, legs=None):
        legs = self.legs if legs is None else legs
        return [leg for leg in legs if self.calculate_leg_phase(leg, global_phase)[1]]

    def get_swing_legs(self, global_phase, legs=None):
        legs = self.legs if legs is None else legs
        return [leg for leg in legs if not self.calculate_leg_phase(leg, global_phase)[1]]

    def is_stable(self, global_phase, legs=None, min_stance_legs=3) -> bool:
        return len(self.get_stance_legs(global_phase, legs)) >= min_stance_legs

    def max_swing_legs(self, leg_count) -> int:
        # Legs are off the ground for (1 - duty) of the cycle.
        return int(math.ceil(round(leg_count * (1.0 - self.duty_factor), PHASE_DECIMALS)))

    def with_params(self, **params):
        merged = dict(self.params)
        merged.update(params)
        return replace(self, params=merged)

    def param(self, key, default=0.0):
        return self.params.get(key, default)
