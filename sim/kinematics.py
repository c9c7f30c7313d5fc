# ================================
# file: sim/kinematics.py
# ================================
from __future__ import annotations
from typing import List, Sequence
import math
import numpy as np

from core.types import Axes, AxisLimits, SensorPose, DEFAULT_LIMITS
from core.transforms import MachineFrame, machine_frame, homogeneous, translation, rot_x, rot_z
from core.config import WRIST_OFFSET, FORK_OFFSET, SENSOR_OFFSET, SENSOR_LOCAL_DIR


class ForwardKinematicsSolver:
    """Gantry + wrist forward kinematics: axes -> sensor world pose.

    Chain (outermost first): bridge (Y axis, depth) -> carriage (X axis,
    lateral) -> ram (Z axis, down) -> wrist origin -> B rotation about the
    spindle (world Z) -> fork -> A tilt about X -> sensor mount.
    B is applied before A; the two do not commute.
    """

    def __init__(self, frame: MachineFrame = machine_frame,
                 wrist_offset: Sequence[float] = WRIST_OFFSET,
                 fork_offset: Sequence[float] = FORK_OFFSET,
                 sensor_offset: Sequence[float] = SENSOR_OFFSET,
                 sensor_dir: Sequence[float] = SENSOR_LOCAL_DIR,
                 limits: AxisLimits = DEFAULT_LIMITS):
        self.frame = frame
        self.wrist_offset = np.asarray(wrist_offset, dtype=float)
        self.fork_offset = np.asarray(fork_offset, dtype=float)
        self.sensor_offset = np.asarray(sensor_offset, dtype=float)
        d = np.asarray(sensor_dir, dtype=float)
        n = float(np.linalg.norm(d))
        if n < 1e-12:
            raise ValueError("sensor direction must be non-zero")
        self.sensor_dir = d / n
        self.limits = limits

    def chain(self, axes: Axes) -> List[np.ndarray]:
        """Per-link local transforms in nesting order (renderer uses these to draw links)."""
        ax = axes.clamped(self.limits)
        return [
            translation((0.0, 0.0, self.frame.bridge_offset(ax.y))),    # bridge
            translation((self.frame.carriage_offset(ax.x), 0.0, 0.0)),  # carriage
            translation((0.0, self.frame.ram_offset(ax.z), 0.0)),       # ram
            translation(self.wrist_offset),                             # wrist origin
            homogeneous(R=rot_z(math.radians(ax.b))),                   # B
            translation(self.fork_offset),                              # fork
            homogeneous(R=rot_x(math.radians(ax.a))),                   # A
            translation(self.sensor_offset),                            # sensor mount
        ]

    def transform(self, axes: Axes) -> np.ndarray:
        T = np.eye(4, dtype=float)
        for Ti in self.chain(axes):
            T = T @ Ti
        return T

    def chain_points(self, axes: Axes) -> List[np.ndarray]:
        """World origin of every link frame, base first."""
        T = np.eye(4, dtype=float)
        pts = [T[:3, 3].copy()]
        for Ti in self.chain(axes):
            T = T @ Ti
            pts.append(T[:3, 3].copy())
        return pts

    def solve(self, axes: Axes) -> SensorPose:
        T = self.transform(axes)
        position = T[:3, 3].copy()
        direction = T[:3, :3] @ self.sensor_dir
        return SensorPose(position, direction, matrix=T)

    def solve_many(self, axes_seq: Sequence[Axes]) -> List[SensorPose]:
        return [self.solve(ax) for ax in axes_seq]
