import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np

from multiped_py.config import SolverConfig
from multiped_py.errors import DegenerateInputError
from multiped_py.geometry.vector import EPSILON, Vector3
from multiped_py.kinematics.chain import Chain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SolveResult:
    iterations: int
    residual: float      # final distance between end effector and target
    converged: bool      # residual below tolerance
    reachable: bool      # target within the chain's reach

    def __int__(self):
        return self.iterations


class FabrikSolver:
    """
    Forward And Backward Reaching Inverse Kinematics over a Chain.

    The solver writes the resolved joint directions back into the chain. Joint
    limits are not enforced.

    Iteration stops once the end effector is within `tolerance` of the target, once
    an iteration improves the residual by less than `min_travel`, or after
    `max_iterations`. The last two can stop above tolerance on slowly converging
    targets, so callers that need a guarantee should check `SolveResult.residual`.
    """

    def __init__(self, config: Optional[SolverConfig] = None):
        self.config = (config or SolverConfig()).validate()

    def solve(self, chain: Chain, target: Vector3) -> SolveResult:
        chain.require_complete()
        if not target.is_finite():
            raise DegenerateInputError(f"IK target must be finite, got {target!r}")
        cfg = self.config
        joints = chain.joints()
        lengths = np.array([link.length for link in chain.links()])
        origin = chain.origin.to_array()
        goal = target.to_array()

        # Unreachable: stretch the whole chain straight towards the target.
        if np.linalg.norm(goal - origin) > lengths.sum():
            direction = chain.origin.direction_to(target)
            for joint in joints:
                joint.direction = direction
            residual = chain.end_location().distance(target)
            logger.debug("Target %s out of reach %.3f for chain %s, laid colinear",
                         target, lengths.sum(), chain.name)
            return SolveResult(0, residual, False, False)

        directions = np.array([joint.direction.to_array() for joint in joints])
        points = self._points(origin, directions, lengths)
        delta = float(np.linalg.norm(points[-1] - goal))
        if delta < cfg.tolerance:
            return SolveResult(0, delta, True, True)

        iterations = 0
        while True:
            self.backward_pass(points, directions, lengths, goal)
            self.forward_pass(points, directions, lengths, origin)
            iterations += 1
            previous_delta = delta
            delta = float(np.linalg.norm(points[-1] - goal))
            if (delta < cfg.tolerance
                    or abs(delta - previous_delta) < cfg.min_travel
                    or iterations >= cfg.max_iterations):
                break

        for joint, direction in zip(joints, directions):
            joint.direction = Vector3.from_array(direction)

        logger.debug("Chain %s solved in %d iteration(s), residual %.4f", chain.name, iterations, delta)
        return SolveResult(iterations, delta, delta < cfg.tolerance, True)

    @staticmethod
    def _points(origin, directions, lengths):
        points = np.empty((len(lengths) + 1, 3))
        points[0] = origin
        for i, length in enumerate(lengths):
            points[i + 1] = points[i] + directions[i] * length
        return points

    @staticmethod
    def _unit_or(vector, fallback):
        norm = np.linalg.norm(vector)
        if norm < EPSILON:
            return fallback
        return vector / norm

    @staticmethod
    def backward_pass(points, directions, lengths, goal):
        """
        Pins the tip on the goal and pulls every joint towards it, tip to root.
        """
        points[-1] = goal
        for i in range(len(lengths) - 1, -1, -1):
            # Direction from this joint's root to its (already placed) tip.
            direction = FabrikSolver._unit_or(points[i + 1] - points[i], directions[i])
            directions[i] = direction
            points[i] = points[i + 1] - direction * lengths[i]

    @staticmethod
    def forward_pass(points, directions, lengths, origin):
        """
        Re-anchors the root on the origin and pushes every joint outwards, root to tip.
        """
        points[0] = origin
        for i in range(len(lengths)):
            direction = FabrikSolver._unit_or(points[i + 1] - points[i], directions[i])
            directions[i] = direction
            points[i + 1] = points[i] + direction * lengths[i]


def solve(chain: Chain, target: Vector3, config: Optional[SolverConfig] = None) -> SolveResult:
    return FabrikSolver(config).solve(chain, target)
