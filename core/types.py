# ================================
# file: core/types.py
# ================================
"""Shared data structures for axes, sensor pose and the sampled point cloud.
Use minimal typing: Tuple/Optional/Dict/Sequence only.
"""
from __future__ import annotations
from enum import Enum
from typing import Dict, Optional, Sequence, Tuple
import numpy as np

from core.config import AXIS_LIMITS, HOME_X, HOME_Y, HOME_Z, HOME_A, HOME_B

AXIS_NAMES: Tuple[str, ...] = ('x', 'y', 'z', 'a', 'b')


class AxisLimits:
    """Valid (min, max) range per axis name."""

    def __init__(self, limits: Optional[Dict[str, Tuple[float, float]]] = None) -> None:
        limits = dict(AXIS_LIMITS if limits is None else limits)
        missing = [n for n in AXIS_NAMES if n not in limits]
        if missing:
            raise ValueError(f"axis limits missing for: {missing}")
        for name, (lo, hi) in limits.items():
            if lo > hi:
                raise ValueError(f"invalid range for axis '{name}': ({lo}, {hi})")
        self._limits = {n: (float(limits[n][0]), float(limits[n][1])) for n in AXIS_NAMES}

    def range(self, name: str) -> Tuple[float, float]:
        if name not in self._limits:
            raise ValueError(f"unknown axis '{name}'")
        return self._limits[name]

    def clamp(self, name: str, value: float) -> float:
        lo, hi = self.range(name)
        return max(lo, min(hi, float(value)))

    def contains(self, axes: "Axes") -> bool:
        return all(self._limits[n][0] <= getattr(axes, n) <= self._limits[n][1] for n in AXIS_NAMES)


DEFAULT_LIMITS = AxisLimits()


class Axes:
    """Five axis values of the motion platform.


    Attributes
    -----------
    x, y, z : machine-normalized linear axes (0..100)
    a : tilt, degrees
    b : rotation, degrees
    """
    __slots__ = AXIS_NAMES


    def __init__(self, x: float, y: float, z: float, a: float = 0.0, b: float = 0.0) -> None:
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.a = float(a)
        self.b = float(b)


    @classmethod
    def home(cls) -> "Axes":
        return cls(HOME_X, HOME_Y, HOME_Z, HOME_A, HOME_B)


    def copy(self) -> "Axes":
        return Axes(self.x, self.y, self.z, self.a, self.b)


    def with_values(self, **values: float) -> "Axes":
        """Return a copy with the named axes replaced (unclamped)."""
        out = self.copy()
        for name, value in values.items():
            if name not in AXIS_NAMES:
                raise ValueError(f"unknown axis '{name}'")
            setattr(out, name, float(value))
        return out


    def clamped(self, limits: AxisLimits = DEFAULT_LIMITS) -> "Axes":
        return Axes(*(limits.clamp(n, getattr(self, n)) for n in AXIS_NAMES))


    def as_tuple(self) -> Tuple[float, float, float, float, float]:
        return (self.x, self.y, self.z, self.a, self.b)


    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Axes):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()


    def __repr__(self) -> str:
        return (f"Axes(x={self.x:.2f}, y={self.y:.2f}, z={self.z:.2f}, "
                f"a={self.a:.2f}, b={self.b:.2f})")




class SensorPose:
    """Sensor world pose derived from the axes each tick.


    Parameters
    ----------
    position : (3,) array
    World position of the sensor origin.
    direction : (3,) array
    Unit sensing direction in world coordinates.
    matrix : Optional[(4, 4) array]
    Full sensor-to-world transform; the renderer draws the sensing cone from it.
    """
    __slots__ = ("position", "direction", "matrix")


    def __init__(self, position: Sequence[float], direction: Sequence[float],
        matrix: Optional[np.ndarray] = None) -> None:
        self.position = np.asarray(position, dtype=float).reshape(3)
        d = np.asarray(direction, dtype=float).reshape(3)
        n = float(np.linalg.norm(d))
        if n < 1e-12:
            raise ValueError("sensor direction must be non-zero")
        self.direction = d / n
        self.matrix = None if matrix is None else np.asarray(matrix, dtype=float)


    def copy(self) -> "SensorPose":
        return SensorPose(self.position.copy(), self.direction.copy(),
                          None if self.matrix is None else self.matrix.copy())




class PointCloud:
    """Sampled target surface: positions and outward normals, index-stable.

    Arrays are frozen after construction; ScanState refers to points by index.
    """
    __slots__ = ("positions", "normals", "primitive_slices")


    def __init__(self, positions: np.ndarray, normals: np.ndarray,
        primitive_slices: Optional[Sequence[Tuple[int, int]]] = None) -> None:
        pos = np.array(positions, dtype=float).reshape(-1, 3)
        nrm = np.array(normals, dtype=float).reshape(-1, 3)
        if pos.shape != nrm.shape:
            raise ValueError(f"positions {pos.shape} and normals {nrm.shape} differ")
        pos.setflags(write=False)
        nrm.setflags(write=False)
        self.positions = pos
        self.normals = nrm
        self.primitive_slices = list(primitive_slices or [(0, len(pos))])


    def __len__(self) -> int:
        return int(self.positions.shape[0])


    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        if len(self) == 0:
            return np.zeros(3), np.zeros(3)
        return self.positions.min(axis=0), self.positions.max(axis=0)




class TrajectoryPhase(Enum):
    IDLE = 0
    APPROACH = 1     # home -> orbit start
    ORBIT = 2        # full ellipse around the object
    RETURN = 3       # orbit end -> home




class TrajectoryStep:
    """Output of one trajectory evaluation."""
    __slots__ = ("axes", "phase", "done")


    def __init__(self, axes: Axes, phase: TrajectoryPhase, done: bool) -> None:
        self.axes = axes
        self.phase = phase
        self.done = bool(done)
