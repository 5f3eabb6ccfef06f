import math
from dataclasses import dataclass, field, fields, replace
from typing import Optional

from multiped_py.errors import ConfigurationError
from multiped_py.geometry.vector import Vector3


@dataclass(frozen=True)
class SolverConfig:
    """
    FABRIK termination settings.
    """
    tolerance: float = 0.01      # end effector distance considered "at target"
    max_iterations: int = 20     # upper bound on backward/forward rounds
    min_travel: float = 0.01     # stop when the error changes by less than this per round

    def validate(self):
        if not (math.isfinite(self.tolerance) and self.tolerance > 0):
            raise ConfigurationError(f"tolerance must be > 0, got {self.tolerance}")
        if int(self.max_iterations) != self.max_iterations or self.max_iterations < 1:
            raise ConfigurationError(f"max_iterations must be a positive integer, got {self.max_iterations}")
        if not (math.isfinite(self.min_travel) and self.min_travel >= 0):
            raise ConfigurationError(f"min_travel must be >= 0, got {self.min_travel}")
        return self


@dataclass
class GaitConfig:
    # Gait geometry in the same length unit as the chains (typically mm).
    step_height: float = 30.0
    step_length: float = 50.0
    body_height: float = 100.0
    ground_clearance: float = 5.0
    standoff_distance: float = 0.0

    # Timing in seconds.
    cycle_time: float = 2.0
    blend_duration: float = 1.0
    stop_duration: float = 0.5

    # Command limits.
    max_velocity: float = 100.0
    max_turn_rate: float = 0.5   # rad/s

    default_gait_name: str = "tripod"

    # Stability thresholds. They only raise a flag, they never alter gait selection.
    stability_min_stance_legs: int = 3
    stability_min_margin: float = 0.0

    solver: SolverConfig = field(default_factory=SolverConfig)

    _positive = ("step_height", "step_length", "cycle_time", "max_velocity", "max_turn_rate")
    _non_negative = ("body_height", "ground_clearance", "standoff_distance",
                     "blend_duration", "stop_duration", "stability_min_margin")

    def validate(self):
        for name in self._positive:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive number, got {value!r}")
        for name in self._non_negative:
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative number, got {value!r}")
        if int(self.stability_min_stance_legs) != self.stability_min_stance_legs or self.stability_min_stance_legs < 0:
            raise ConfigurationError(
                f"stability_min_stance_legs must be a non-negative integer, got {self.stability_min_stance_legs!r}")
        if not isinstance(self.default_gait_name, str) or not self.default_gait_name:
            raise ConfigurationError("default_gait_name must be a non-empty string")
        if not isinstance(self.solver, SolverConfig):
            raise ConfigurationError("solver must be a SolverConfig")
        self.solver.validate()
        return self

    @classmethod
    def keys(cls):
        return [f.name for f in fields(cls)]

    @classmethod
    def from_mapping(cls, mapping):
        """
        Builds a validated config from a plain dict. A nested "solver" dict is accepted.
        """
        known = set(cls.keys())
        unknown = set(mapping) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")
        values = dict(mapping)
        solver = values.get("solver")
        if isinstance(solver, dict):
            try:
                values["solver"] = SolverConfig(**solver)
            except TypeError as e:
                raise ConfigurationError(f"Invalid solver configuration: {e}") from e
        return cls(**values).validate()

    def updated(self, key, value):
        """
        Returns a validated copy with one key changed.
        """
        if key not in self.keys():
            raise ConfigurationError(f"Unknown configuration key: {key!r}")
        return replace(self, **{key: value}).validate()


@dataclass(frozen=True)
class MotionCommand:
    """
    Desired body motion. A scalar `linear_velocity` means forward travel along +X.
    """
    linear_velocity: object = 0.0
    turn_rate: float = 0.0

    @property
    def velocity(self) -> Vector3:
        v = self.linear_velocity
        if isinstance(v, Vector3):
            return v
        if isinstance(v, (tuple, list)):
            return Vector3(*v)
        return Vector3(float(v), 0.0, 0.0)

    def is_finite(self) -> bool:
        try:
            velocity = self.velocity
            turn_rate = float(self.turn_rate)
        except (TypeError, ValueError):
            return False
        return velocity.is_finite() and math.isfinite(turn_rate)

    def clamped(self, max_velocity, max_turn_rate):
        """
        Returns a copy with horizontal speed and turn rate clamped to the given limits.
        """
        v = self.velocity
        speed = math.hypot(v.x, v.y)
        if speed > max_velocity:
            k = max_velocity / speed
            v = Vector3(v.x * k, v.y * k, v.z)
        turn_rate = max(-max_turn_rate, min(max_turn_rate, float(self.turn_rate)))
        return MotionCommand(v, turn_rate)

    @classmethod
    def coerce(cls, command) -> Optional["MotionCommand"]:
        if command is None or isinstance(command, MotionCommand):
            return command
        if isinstance(command, dict):
            return cls(command.get("linear_velocity", command.get("velocity", 0.0)),
                       command.get("turn_rate", 0.0))
        return cls(command)
