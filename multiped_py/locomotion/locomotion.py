import logging
import math
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from multiped_py.config import GaitConfig, MotionCommand
from multiped_py.errors import ConfigurationError, UnsuitablePatternError
from multiped_py.geometry.vector import Vector3
from multiped_py.kinematics.chain import Chain
from multiped_py.kinematics.fabrik import FabrikSolver
from multiped_py.locomotion import catalog
from multiped_py.locomotion.gait_base import GaitPattern, StepMode
from multiped_py.locomotion.gait_state import GaitState, GaitStatus, LegState
from multiped_py.locomotion.leg_trajectory import LegTrajectory
from multiped_py.locomotion.performance import PerformanceMonitor
from multiped_py.locomotion.stability import StabilityAnalyzer
from multiped_py.locomotion.transition import GaitTransition
from multiped_py.locomotion.turning_gaits import (
    crab_step_vector, get_differential_step_length, pivot_step_position,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GaitOutput:
    """
    Everything computed for one control tick.
    """
    targets: Dict[str, Vector3]
    joint_directions: Dict[str, Tuple[Vector3, ...]]
    stance_legs: Tuple[str, ...]
    leg_phases: Dict[str, float]
    stability_margin: float
    is_stable: bool
    aerial: bool
    ik_residuals: Dict[str, float] = field(default_factory=dict)
    ik_iterations: Dict[str, int] = field(default_factory=dict)
    global_phase: float = 0.0
    status: GaitStatus = GaitStatus.STOPPED
    pattern_name: str = ""


class GaitGenerator:
    """
    Drives a set of leg chains through a gait.

    Each update advances the global phase, works out which legs are in stance,
    places every foot along its step trajectory, checks static stability and solves
    IK for each chain. The generator owns the chains it is given and rewrites their
    joint directions on every tick.
    """

    def __init__(self, chains: Mapping[str, Chain], config: Optional[GaitConfig] = None):
        if not chains:
            raise ConfigurationError("GaitGenerator needs at least one leg chain")
        if isinstance(config, dict):
            config = GaitConfig.from_mapping(config)
        self.config = (config or GaitConfig()).validate()
        for chain in chains.values():
            chain.require_complete()

        self._chains = dict(chains)
        self.leg_names = tuple(self._chains)
        self._solver = FabrikSolver(self.config.solver)
        self._trajectory = LegTrajectory(self.config.step_height, self.config.ground_clearance)
        self.stability_analyzer = StabilityAnalyzer(self.config.stability_min_stance_legs,
                                                    self.config.stability_min_margin)
        self.performance = PerformanceMonitor()

        pattern = self._create_pattern(self.config.default_gait_name)
        self._state = GaitState(pattern, legs={leg: LegState() for leg in self.leg_names})
        self._transition = None
        self._was_stable = True
        self._stop_elapsed = 0.0
        self._stop_from = {}

        self.recalculate_stance()
        self._last_output = self._settle_at_neutral()

    # --- Accessors ---

    @property
    def status(self) -> GaitStatus:
        return self._state.status

    @property
    def pattern(self) -> GaitPattern:
        return self._state.pattern

    @property
    def pattern_name(self) -> str:
        return self._state.pattern.name

    @property
    def global_phase(self) -> float:
        return self._state.global_phase

    @property
    def state(self) -> GaitState:
        return self._state

    @property
    def transition(self) -> Optional[GaitTransition]:
        return self._transition

    @property
    def chains(self) -> Dict[str, Chain]:
        return dict(self._chains)

    @property
    def last_output(self) -> GaitOutput:
        return self._last_output

    def available_gaits(self):
        return [name for name in catalog.available_patterns()
                if catalog.is_suitable_for_legs(name, len(self.leg_names))]

    def get_config(self, key):
        if key not in GaitConfig.keys():
            raise ConfigurationError(f"Unknown configuration key: {key!r}")
        return getattr(self.config, key)

    def set_config(self, key, value):
        """
        Changes one configuration value at runtime. The value is validated before
        anything is applied.
        """
        if key == "default_gait_name":
            self._create_pattern(value)
        self.config = self.config.updated(key, value)
        cfg = self.config
        self._trajectory.step_height = cfg.step_height
        self._trajectory.ground_clearance = cfg.ground_clearance
        self.stability_analyzer.min_stance_legs = cfg.stability_min_stance_legs
        self.stability_analyzer.safety_margin = cfg.stability_min_margin
        self._solver = FabrikSolver(cfg.solver)
        if key in ("body_height", "standoff_distance"):
            self.recalculate_stance()
        logger.info("Configuration %s set to %r", key, value)

    # --- Stance ---

    def recalculate_stance(self):
        """
        Neutral foot positions: each chain origin pushed out radially by the standoff
        distance and lowered by the body height.
        """
        origins = [chain.origin for chain in self._chains.values()]
        n = len(origins)
        self.body_center = Vector3(sum(o.x for o in origins) / n,
                                   sum(o.y for o in origins) / n,
                                   sum(o.z for o in origins) / n)
        self.neutral_positions = {}
        for leg, chain in self._chains.items():
            radial = Vector3(chain.origin.x - self.body_center.x, chain.origin.y - self.body_center.y, 0.0)
            if radial.length() > 0:
                radial = radial.normalize()
            foot = chain.origin + radial * self.config.standoff_distance
            self.neutral_positions[leg] = Vector3(foot.x, foot.y, chain.origin.z - self.config.body_height)
        for leg, chain in self._chains.items():
            if chain.origin.distance(self.neutral_positions[leg]) > chain.reach():
                logger.warning("Neutral stance for leg %s is unreachable, check body_height and standoff_distance",
                               leg)

    def _settle_at_neutral(self) -> GaitOutput:
        targets = dict(self.neutral_positions)
        return self._finish_tick(targets, self.leg_names, {leg: 0.0 for leg in self.leg_names})

    # --- Pattern selection ---

    def _create_pattern(self, name, params=None) -> GaitPattern:
        if not catalog.is_suitable_for_legs(name, len(self.leg_names)):
            raise UnsuitablePatternError(f"Gait {name!r} is not suitable for {len(self.leg_names)} legs")
        options = {"leg_count": len(self.leg_names), "leg_names": self.leg_names}
        options.update(params or {})
        pattern = catalog.create(name, options)
        missing = [leg for leg in self.leg_names if not pattern.covers(leg)]
        if missing:
            raise UnsuitablePatternError(f"Gait {name!r} has no phase offset for legs {missing}")
        return pattern

    def set_gait_pattern(self, name, blend=True, params=None):
        pattern = self._create_pattern(name, params)
        status = self._state.status
        if blend and status in (GaitStatus.WALKING, GaitStatus.TRANSITIONING) and self.config.blend_duration > 0:
            source = self._transition.as_pattern() if self._transition else self._state.pattern
            if status == GaitStatus.WALKING and pattern == self._state.pattern:
                return
            self._transition = GaitTransition(source, pattern, self.config.blend_duration)
            self._state.status = GaitStatus.TRANSITIONING
            logger.info("Blending gait %s -> %s over %.2fs", source.name, pattern.name, self.config.blend_duration)
            return
        self._state.pattern = pattern
        if self._transition is not None:
            self._transition = None
            self._state.status = GaitStatus.WALKING
        logger.info("Gait set to %s", pattern.name)

    # --- State machine ---

    def start(self):
        if self._state.status not in (GaitStatus.STOPPED, GaitStatus.STOPPING):
            logger.debug("start() ignored while %s", self._state.status.value)
            return
        self._state.reset()
        self._state.status = GaitStatus.STARTING
        logger.info("Gait starting with %s", self.pattern_name)

    def stop(self):
        if not self._state.running:
            return
        if self._transition is not None:
            self._state.pattern = self._transition.to_pattern
            self._transition = None
        self._state.status = GaitStatus.STOPPING
        self._stop_elapsed = 0.0
        self._stop_from = dict(self._last_output.targets)
        logger.info("Gait stopping")

    # --- Tick ---

    def update(self, dt, command=None) -> GaitOutput:
        try:
            command = MotionCommand.coerce(command) if command is not None else self._state.command
        except (TypeError, ValueError):
            command = None
        if command is None or not command.is_finite():
            logger.warning("Rejected motion command %r, holding previous targets", command)
            return self._last_output
        if not (isinstance(dt, (int, float)) and math.isfinite(dt) and dt >= 0):
            logger.warning("Rejected tick duration %r, holding previous targets", dt)
            return self._last_output
        if self._state.status == GaitStatus.STOPPED:
            return self._last_output

        self.performance.begin_tick()
        cfg = self.config
        command = command.clamped(cfg.max_velocity, cfg.max_turn_rate)
        self._state.command = command

        if self._state.status == GaitStatus.STOPPING:
            return self._stopping_tick(dt)

        if self._state.status == GaitStatus.STARTING:
            self._state.status = GaitStatus.WALKING
            logger.info("Gait walking")

        self._follow_turn_direction(command)
        self._state.advance(dt, cfg.cycle_time)
        if self._transition is not None:
            self._transition.update(dt)
            if self._transition.is_complete:
                self._state.pattern = self._transition.to_pattern
                self._transition = None
                self._state.status = GaitStatus.WALKING
                logger.info("Gait transition to %s complete", self.pattern_name)

        active = self._transition.as_pattern() if self._transition else self._state.pattern
        phase = self._state.global_phase
        stride_time = active.duty_factor * cfg.cycle_time

        targets = {}
        stance_legs = []
        leg_phases = {}
        for leg in self.leg_names:
            local, is_stance = active.calculate_leg_phase(leg, phase)
            front, rear = self._step_end_points(leg, active, command, stride_time)
            targets[leg] = self._trajectory.step_position(front, rear, local, is_stance, active.duty_factor)
            leg_phases[leg] = local
            if is_stance:
                stance_legs.append(leg)
            leg_state = self._state.legs[leg]
            leg_state.phase = local
            leg_state.is_stance = is_stance

        return self._finish_tick(targets, stance_legs, leg_phases)

    def _follow_turn_direction(self, command: MotionCommand):
        # The differential wave ring follows the sign of the live turn rate.
        pattern = self._state.pattern
        if self._transition is not None or pattern.name != "differential_wave":
            return
        if (command.turn_rate < 0) == (pattern.param("turn_rate") < 0):
            return
        self._state.pattern = self._create_pattern("differential_wave", {"turn_rate": command.turn_rate})
        logger.debug("Differential wave re-skewed for turn rate %.3f", command.turn_rate)

    def _stopping_tick(self, dt) -> GaitOutput:
        # Ramp every foot from where it was to the neutral stance.
        self._stop_elapsed += dt
        duration = self.config.stop_duration
        t = 1.0 if duration == 0 else min(1.0, self._stop_elapsed / duration)
        targets = {leg: self._stop_from.get(leg, neutral).lerp(neutral, t)
                   for leg, neutral in self.neutral_positions.items()}
        if t >= 1.0:
            self._state.reset()
            self._state.status = GaitStatus.STOPPED
            logger.info("Gait stopped")
        return self._finish_tick(targets, self.leg_names, {leg: 0.0 for leg in self.leg_names})

    def _step_end_points(self, leg, pattern: GaitPattern, command: MotionCommand, stride_time):
        """
        Foremost and rearmost foot positions of this leg's stride.
        """
        neutral = self.neutral_positions[leg]
        step_length = self.config.step_length
        velocity = command.velocity
        radial = Vector3(neutral.x - self.body_center.x, neutral.y - self.body_center.y, 0.0)
        mode = pattern.step_mode

        if mode is StepMode.PIVOT:
            # Largest turn that keeps this foot's arc within one step length.
            angle = command.turn_rate * stride_time
            radius = radial.length()
            if radius > 0 and abs(angle) * radius > step_length:
                angle = math.copysign(step_length / radius, angle)
            direction = pattern.param("turn_direction", 1)
            return (pivot_step_position(neutral, self.body_center, angle / 2.0, direction),
                    pivot_step_position(neutral, self.body_center, -angle / 2.0, direction))

        if mode is StepMode.CRAB:
            length = min(math.hypot(velocity.x, velocity.y) * stride_time, step_length)
            step = crab_step_vector(pattern.param("direction", 0.0), length)
        else:
            linear = Vector3(velocity.x, velocity.y, 0.0) * stride_time
            # Rotation about the body centre moves each foot tangentially.
            rotational = Vector3(-radial.y, radial.x, 0.0) * (command.turn_rate * stride_time)
            step = linear + rotational
            if mode is StepMode.DIFFERENTIAL and linear.length() > 0 and command.turn_rate != 0:
                base = min(linear.length(), step_length)
                length = get_differential_step_length(leg, base, command.turn_rate, radial.length() or 1.0)
                return self._split(neutral, linear.normalize() * length)
            if step.length() > step_length:
                step = step.normalize() * step_length
        return self._split(neutral, step)

    @staticmethod
    def _split(neutral, step):
        half = step * 0.5
        return neutral + half, neutral - half

    def _finish_tick(self, targets, stance_legs, leg_phases) -> GaitOutput:
        report = self.stability_analyzer.analyze(targets, stance_legs, self.body_center)
        if not report.is_stable and self._was_stable and self._state.running:
            logger.warning("Stability below minimum: %d stance legs, margin %.2f",
                           report.stance_count, report.margin)
        self._was_stable = report.is_stable

        directions = {}
        residuals = {}
        iterations = {}
        for leg, chain in self._chains.items():
            result = self._solver.solve(chain, targets[leg])
            directions[leg] = tuple(chain.joint_directions())
            residuals[leg] = result.residual
            iterations[leg] = result.iterations
            self._state.legs[leg].target = targets[leg]
            self._state.legs[leg].position = chain.end_location()

        self.performance.record_tick(report.margin, max(residuals.values()), report.is_stable)
        self._last_output = GaitOutput(
            targets=targets,
            joint_directions=directions,
            stance_legs=tuple(stance_legs),
            leg_phases=leg_phases,
            stability_margin=report.margin,
            is_stable=report.is_stable,
            aerial=report.aerial,
            ik_residuals=residuals,
            ik_iterations=iterations,
            global_phase=self._state.global_phase,
            status=self._state.status,
            pattern_name=self._state.pattern.name,
        )
        return self._last_output
