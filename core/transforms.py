# ================================
# file: core/transforms.py
# ================================
from __future__ import annotations
from typing import Optional, Sequence
import math
import numpy as np

from core.config import SPAN_X, SPAN_Y, SPAN_Z, AXIS_CENTER, TOOL_HEIGHT_BASE


def rot_x(angle_rad: float) -> np.ndarray:
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    return np.array([[1.0, 0.0, 0.0],
                     [0.0,   c,  -s],
                     [0.0,   s,   c]], dtype=float)

def rot_y(angle_rad: float) -> np.ndarray:
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    return np.array([[  c, 0.0,   s],
                     [0.0, 1.0, 0.0],
                     [ -s, 0.0,   c]], dtype=float)

def rot_z(angle_rad: float) -> np.ndarray:
    c, s = math.cos(angle_rad), math.sin(angle_rad)
    return np.array([[  c,  -s, 0.0],
                     [  s,   c, 0.0],
                     [0.0, 0.0, 1.0]], dtype=float)

def euler_xyz(rx: float, ry: float, rz: float) -> np.ndarray:
    """Intrinsic X-Y-Z Euler rotation (R = Rx @ Ry @ Rz)."""
    return rot_x(rx) @ rot_y(ry) @ rot_z(rz)

def homogeneous(R: Optional[np.ndarray] = None, t: Optional[Sequence[float]] = None) -> np.ndarray:
    T = np.eye(4, dtype=float)
    if R is not None:
        T[:3, :3] = R
    if t is not None:
        T[:3, 3] = np.asarray(t, dtype=float)
    return T

def translation(t: Sequence[float]) -> np.ndarray:
    return homogeneous(t=t)

def normalize(v: np.ndarray, eps: float = 1e-12) -> np.ndarray:
    v = np.asarray(v, dtype=float)
    n = float(np.linalg.norm(v))
    return v * 0.0 if n < eps else (v / n)


class MachineFrame:
    """Mapping between normalized machine axes and world coordinates.

    World frame: X lateral (carriage), Y up, Z depth (bridge).
    """

    def __init__(self, span_x: float = SPAN_X, span_y: float = SPAN_Y, span_z: float = SPAN_Z,
                 center: float = AXIS_CENTER, tool_height_base: float = TOOL_HEIGHT_BASE):
        if span_x <= 0 or span_y <= 0 or span_z <= 0:
            raise ValueError("machine spans must be positive")
        self.span_x = float(span_x)
        self.span_y = float(span_y)
        self.span_z = float(span_z)
        self.center = float(center)
        self.tool_height_base = float(tool_height_base)

    # axes -> world
    def carriage_offset(self, x: float) -> float:
        """World lateral offset of the carriage."""
        return (x - self.center) / 100.0 * self.span_x

    def bridge_offset(self, y: float) -> float:
        """World depth offset of the bridge."""
        return (y - self.center) / 100.0 * self.span_y

    def ram_offset(self, z: float) -> float:
        """Vertical offset of the ram (downward extension)."""
        return -(z / 100.0) * self.span_z

    def tool_world_position(self, x: float, y: float, z: float) -> np.ndarray:
        """Approximate tool position used for look-at aiming."""
        return np.array([self.carriage_offset(x),
                         self.tool_height_base + self.ram_offset(z),
                         self.bridge_offset(y)], dtype=float)


machine_frame = MachineFrame()
