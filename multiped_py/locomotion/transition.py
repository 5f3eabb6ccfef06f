import logging
import math
from typing import Tuple

from multiped_py.locomotion.gait_base import GaitPattern, in_stance, normalize_phase

logger = logging.getLogger(__name__)


class GaitTransition:
    """
    Linear blend from one gait pattern to another over `blend_duration` seconds.

    While blending, the duty factor and every leg's phase offset are interpolated by
    the transition progress. A zero duration completes on the first update.
    """

    def __init__(self, from_pattern: GaitPattern, to_pattern: GaitPattern, blend_duration: float):
        if not (math.isfinite(blend_duration) and blend_duration >= 0):
            raise ValueError(f"blend_duration must be >= 0, got {blend_duration}")
        self.from_pattern = from_pattern
        self.to_pattern = to_pattern
        self.blend_duration = float(blend_duration)
        self._progress = 0.0

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def is_complete(self) -> bool:
        return self._progress >= 1.0

    def update(self, dt: float) -> float:
        if self.blend_duration == 0:
            self._progress = 1.0
        else:
            self._progress = min(1.0, max(0.0, self._progress + dt / self.blend_duration))
        logger.debug("Transition %s -> %s at %.3f", self.from_pattern.name, self.to_pattern.name, self._progress)
        return self._progress

    def _lerp(self, a, b):
        return a + (b - a) * self._progress

    def effective_duty_factor(self) -> float:
        return self._lerp(self.from_pattern.duty_factor, self.to_pattern.duty_factor)

    def effective_offset(self, leg: str) -> float:
        return self._lerp(self.from_pattern.get_leg_phase_offset(leg),
                          self.to_pattern.get_leg_phase_offset(leg))

    def calculate_leg_phase(self, leg: str, global_phase: float) -> Tuple[float, bool]:
        local = normalize_phase(global_phase + self.effective_offset(leg))
        return local, in_stance(local, self.effective_duty_factor())

    def as_pattern(self) -> GaitPattern:
        """
        Snapshot of the blend at the current progress. Takes step mode and parameters
        from the target pattern.
        """
        legs = list(self.from_pattern.legs)
        legs += [leg for leg in self.to_pattern.legs if leg not in legs]
        if self.is_complete:
            return self.to_pattern
        return GaitPattern(
            f"{self.from_pattern.name}->{self.to_pattern.name}",
            self.effective_duty_factor(),
            {leg: self.effective_offset(leg) for leg in legs},
            step_mode=self.to_pattern.step_mode,
            params=self.to_pattern.params,
        )

    @staticmethod
    def recommended_duration(from_pattern: GaitPattern, to_pattern: GaitPattern, velocity=0.0, base_duration=1.0):
        # Bigger duty factor changes and faster travel both call for a slower blend.
        complexity = 1.0 + abs(to_pattern.duty_factor - from_pattern.duty_factor)
        speed = 1.0 + (velocity / 200.0) * 0.5
        return base_duration * complexity * speed
