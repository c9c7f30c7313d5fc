# ================================
# file: sim/trajectory.py
# ================================
"""Scripted three-phase scan trajectory (approach -> orbit -> return).

The generator is a pure function of elapsed time: identical elapsed values
yield identical axes, so pausing, resuming and replaying never drift.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Sequence, Tuple
import math
import numpy as np

from core.types import Axes, AxisLimits, TrajectoryPhase, TrajectoryStep, DEFAULT_LIMITS
from core.transforms import MachineFrame, machine_frame
from core.config import (
    TRAJ_DURATION_S, TRAJ_APPROACH_END_S, TRAJ_ORBIT_END_S,
    ORBIT_CENTER_X, ORBIT_CENTER_Y, ORBIT_RADIUS_X, ORBIT_RADIUS_Y, ORBIT_THETA_START,
    SCAN_Z, SAFE_Z, HOME_X, HOME_Y, HOME_Z, LOOK_AT_TARGET,
)
from sim.look_at import InverseOrientationSolver


@dataclass
class TrajectoryParams:
    duration: float = TRAJ_DURATION_S
    approach_end: float = TRAJ_APPROACH_END_S
    orbit_end: float = TRAJ_ORBIT_END_S
    center: Tuple[float, float] = (ORBIT_CENTER_X, ORBIT_CENTER_Y)
    radius_x: float = ORBIT_RADIUS_X
    radius_y: float = ORBIT_RADIUS_Y
    theta_start: float = ORBIT_THETA_START
    scan_z: float = SCAN_Z
    safe_z: float = SAFE_Z
    home: Tuple[float, float, float] = (HOME_X, HOME_Y, HOME_Z)
    target: Tuple[float, float, float] = field(default=LOOK_AT_TARGET)

    def __post_init__(self) -> None:
        if not (0.0 < self.approach_end < self.orbit_end < self.duration):
            raise ValueError(
                f"phase times must satisfy 0 < t1 < t2 < D, got "
                f"t1={self.approach_end}, t2={self.orbit_end}, D={self.duration}")
        if self.radius_x < 0 or self.radius_y < 0:
            raise ValueError("orbit radii must be non-negative")


class TrajectoryGenerator:
    """Elapsed time -> target axes for the automated scan."""

    def __init__(self, params: Optional[TrajectoryParams] = None,
                 frame: MachineFrame = machine_frame,
                 solver: Optional[InverseOrientationSolver] = None,
                 limits: AxisLimits = DEFAULT_LIMITS):
        self.params = params or TrajectoryParams()
        self.frame = frame
        self.solver = solver or InverseOrientationSolver()
        self.limits = limits
        self._target = np.asarray(self.params.target, dtype=float)

    @property
    def duration(self) -> float:
        return self.params.duration

    def phase_at(self, elapsed: float) -> TrajectoryPhase:
        p = self.params
        t = max(0.0, float(elapsed))
        if t > p.duration:
            return TrajectoryPhase.IDLE
        if t < p.approach_end:
            return TrajectoryPhase.APPROACH
        if t < p.orbit_end:
            return TrajectoryPhase.ORBIT
        return TrajectoryPhase.RETURN

    def orbit_point(self, theta: float) -> Tuple[float, float]:
        cx, cy = self.params.center
        return (cx + self.params.radius_x * math.cos(theta),
                cy + self.params.radius_y * math.sin(theta))

    def target_xyz(self, elapsed: float) -> Tuple[float, float, float]:
        """Unclamped X/Y/Z target for an elapsed time inside [0, D]."""
        p = self.params
        t = max(0.0, float(elapsed))
        hx, hy, hz = p.home
        sx, sy = self.orbit_point(p.theta_start)

        if t < p.approach_end:
            u = t / p.approach_end
            return (hx + (sx - hx) * u, hy + (sy - hy) * u, hz + (p.scan_z - hz) * u)

        if t < p.orbit_end:
            progress = (t - p.approach_end) / (p.orbit_end - p.approach_end)
            theta = p.theta_start + progress * 2.0 * math.pi
            ox, oy = self.orbit_point(theta)
            return (ox, oy, p.scan_z)

        # A full turn ends where it started.
        ex, ey = sx, sy
        u = min(1.0, (t - p.orbit_end) / (p.duration - p.orbit_end))
        return (ex + (hx - ex) * u, ey + (hy - ey) * u, p.scan_z + (hz - p.scan_z) * u)

    def step(self, elapsed_seconds: float) -> TrajectoryStep:
        p = self.params
        t = max(0.0, float(elapsed_seconds))

        if t > p.duration:
            hx, hy, _ = p.home
            done_axes = Axes(hx, hy, p.safe_z, 0.0, 0.0).clamped(self.limits)
            return TrajectoryStep(done_axes, TrajectoryPhase.IDLE, True)

        tx, ty, tz = self.target_xyz(t)
        xyz = Axes(tx, ty, tz).clamped(self.limits)

        tool = self.frame.tool_world_position(xyz.x, xyz.y, xyz.z)
        # Degenerate aim -> (0, 0); output depends on elapsed time only
        a, b = self.solver.look_at(tool, self._target, fallback=(0.0, 0.0))
        axes = xyz.with_values(a=a, b=b).clamped(self.limits)
        return TrajectoryStep(axes, self.phase_at(t), False)

    def sample(self, times: Sequence[float]):
        """Evaluate the trajectory at many elapsed times (plots / replay)."""
        return [self.step(t) for t in times]
