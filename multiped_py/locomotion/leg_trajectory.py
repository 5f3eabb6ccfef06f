from typing import Optional

from multiped_py.geometry.vector import Vector3


def _smoothstep(s):
    # Cubic Hermite basis with zero slope at both ends.
    return s * s * (3.0 - 2.0 * s)


def _check_phase(phase):
    if not 0.0 <= phase <= 1.0:
        raise ValueError(f"Trajectory phase must be within [0, 1], got {phase}")


class LegTrajectory:
    """
    Foot paths for a single step. All functions are pure in the phase, so the same
    inputs always give the same foot position.
    """

    def __init__(self, step_height=30.0, ground_clearance=5.0):
        self.step_height = step_height
        self.ground_clearance = ground_clearance

    @property
    def step_height(self):
        return self._step_height

    @step_height.setter
    def step_height(self, value):
        if not value > 0:
            raise ValueError(f"step_height must be > 0, got {value}")
        self._step_height = float(value)

    @property
    def ground_clearance(self):
        return self._ground_clearance

    @ground_clearance.setter
    def ground_clearance(self, value):
        if not value >= 0:
            raise ValueError(f"ground_clearance must be >= 0, got {value}")
        self._ground_clearance = float(value)

    def stance_trajectory(self, start: Vector3, end: Vector3, phase: float) -> Vector3:
        """
        Foot on the ground, moving in a straight line from start to end.
        """
        _check_phase(phase)
        return start.lerp(end, phase)

    def swing_trajectory(self, lift_off: Vector3, touch_down: Vector3, phase: float,
                         ground_height: Optional[float] = None, step_height: Optional[float] = None) -> Vector3:
        """
        Foot in the air. Moves linearly in XY while the height follows a smooth arc
        that leaves lift_off, peaks step_height above the higher contact point and
        settles on touch_down.
        """
        _check_phase(phase)
        height = self._step_height if step_height is None else step_height
        if ground_height is None:
            ground_height = min(lift_off.z, touch_down.z)
        peak = max(lift_off.z, touch_down.z) + height
        peak = max(peak, ground_height + self._ground_clearance)

        if phase <= 0.5:
            s = _smoothstep(phase * 2.0)
            z = lift_off.z + (peak - lift_off.z) * s
        else:
            s = _smoothstep((phase - 0.5) * 2.0)
            z = peak + (touch_down.z - peak) * s

        x = lift_off.x + (touch_down.x - lift_off.x) * phase
        y = lift_off.y + (touch_down.y - lift_off.y) * phase
        return Vector3(x, y, z)

    def foot_position(self, neutral: Vector3, step_vector: Vector3, local_phase: float,
                      is_stance: bool, duty_factor: float, step_height: Optional[float] = None) -> Vector3:
        """
        Foot target for a leg at `local_phase` in its cycle. During stance the foot
        pushes from its foremost point (neutral + step/2) back to its rearmost point;
        during swing it is carried forward again.
        """
        half = step_vector * 0.5
        return self.step_position(neutral + half, neutral - half, local_phase, is_stance, duty_factor, step_height)

    def step_position(self, front: Vector3, rear: Vector3, local_phase: float,
                      is_stance: bool, duty_factor: float, step_height: Optional[float] = None) -> Vector3:
        """
        Same as foot_position, for steps given by their end points rather than a vector.
        """
        if is_stance:
            return self.stance_trajectory(front, rear, min(1.0, local_phase / duty_factor))
        swing = (local_phase - duty_factor) / (1.0 - duty_factor)
        return self.swing_trajectory(rear, front, max(0.0, min(1.0, swing)), step_height=step_height)

    def trajectory_velocity(self, lift_off: Vector3, touch_down: Vector3, phase: float, dt=0.001) -> Vector3:
        """
        Swing velocity per unit phase, by central difference.
        """
        _check_phase(phase)
        p0 = max(0.0, phase - dt)
        p1 = min(1.0, phase + dt)
        before = self.swing_trajectory(lift_off, touch_down, p0)
        after = self.swing_trajectory(lift_off, touch_down, p1)
        return (after - before) / (p1 - p0)
