# ================================
# file: sim/look_at.py
# ================================
from __future__ import annotations
from typing import Optional, Sequence, Tuple
import math
import numpy as np

from core.config import LOOK_AT_EPS


class InverseOrientationSolver:
    """Look-at solver: desired view direction -> (A, B) axis angles in degrees.

    Convention matches ForwardKinematicsSolver: with a = b = 0 the sensor points
    straight down (-Y). For dir = normalize(target - tool):
        a = -asin(dir.z)          tilt toward/away along depth
        b = atan2(dir.x, -dir.y)  rotation toward the lateral offset
    """

    def __init__(self, eps: float = LOOK_AT_EPS, logger_func=None, log_file=None):
        self.eps = float(eps)
        self.logger_func = logger_func
        self.log_file = log_file
        self._last: Tuple[float, float] = (0.0, 0.0)
        self.degenerate_count = 0

    def _log(self, message: str, module: str = "LOOK_AT") -> None:
        if self.logger_func and self.log_file:
            self.logger_func(self.log_file, message, module)
        else:
            print(f"[{module}] {message}")

    @property
    def last(self) -> Tuple[float, float]:
        return self._last

    def reset(self) -> None:
        self._last = (0.0, 0.0)

    def look_at(self, tool_world_pos: Sequence[float], target_world_pos: Sequence[float],
                fallback: Optional[Tuple[float, float]] = None) -> Tuple[float, float]:
        """Return (a_deg, b_deg) aiming the sensor from tool to target.
        A zero-length look vector returns `fallback` when given, otherwise the
        previous orientation. A fallback result does not update the history.
        """
        v = np.asarray(target_world_pos, dtype=float) - np.asarray(tool_world_pos, dtype=float)
        n = float(np.linalg.norm(v))
        if not math.isfinite(n) or n < self.eps:
            self.degenerate_count += 1
            a, b = self._last if fallback is None else (float(fallback[0]), float(fallback[1]))
            self._log(f"degenerate look vector (|d|={n:.3g}), using a={a:.2f} b={b:.2f}")
            return (a, b)
        d = v / n
        a = -math.asin(max(-1.0, min(1.0, float(d[2]))))
        b = math.atan2(float(d[0]), -float(d[1]))
        self._last = (math.degrees(a), math.degrees(b))
        return self._last

    def direction_for(self, a_deg: float, b_deg: float) -> np.ndarray:
        """Forward direction produced by (a, b); inverse of look_at."""
        a, b = math.radians(a_deg), math.radians(b_deg)
        return np.array([math.cos(a) * math.sin(b),
                         -math.cos(a) * math.cos(b),
                         -math.sin(a)], dtype=float)
