from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from multiped_py.config import MotionCommand
from multiped_py.geometry.vector import Vector3
from multiped_py.locomotion.gait_base import GaitPattern, normalize_phase


class GaitStatus(Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    WALKING = "walking"
    TRANSITIONING = "transitioning"
    STOPPING = "stopping"


@dataclass
class LegState:
    phase: float = 0.0
    is_stance: bool = True
    target: Optional[Vector3] = None
    position: Optional[Vector3] = None


@dataclass
class GaitState:
    """
    Mutable per-generator gait state. Reset, never discarded, across stop/start.
    """
    pattern: GaitPattern
    global_phase: float = 0.0
    elapsed_time: float = 0.0
    command: MotionCommand = field(default_factory=MotionCommand)
    status: GaitStatus = GaitStatus.STOPPED
    legs: Dict[str, LegState] = field(default_factory=dict)

    @property
    def running(self) -> bool:
        return self.status in (GaitStatus.STARTING, GaitStatus.WALKING, GaitStatus.TRANSITIONING)

    def advance(self, dt: float, cycle_time: float) -> float:
        self.elapsed_time += dt
        self.global_phase = normalize_phase(self.global_phase + dt / cycle_time)
        return self.global_phase

    def reset(self):
        self.global_phase = 0.0
        self.elapsed_time = 0.0
        self.command = MotionCommand()
        for leg in self.legs.values():
            leg.phase = 0.0
            leg.is_stance = True
